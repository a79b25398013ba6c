"""
Console listener - Rich rendering of trace events.
"""

from typing import Optional

from rich.console import Console
from rich.table import Table
from rich.text import Text
from rich.theme import Theme

from deeptrace.proxies.events import TraceEvent
from deeptrace.proxies.traced import unwrap

DEEPTRACE_THEME = Theme({
    "path": "cyan bold",
    "set": "green",
    "delete": "red",
    "old": "dim",
    "new": "magenta",
    "muted": "dim",
})


def _format_value(value, max_length: int = 60) -> str:
    text = repr(unwrap(value))
    if len(text) > max_length:
        text = text[:max_length - 3] + "..."
    return text


class ConsoleTraceListener:
    """Prints one line per mutation."""

    def __init__(self, console: Optional[Console] = None, show_identifier: bool = False):
        if console is None:
            console = Console(theme=DEEPTRACE_THEME)
        else:
            # the table columns name theme styles, which a plain Console lacks
            console.push_theme(DEEPTRACE_THEME)
        self.console = console
        self.show_identifier = show_identifier

    def on_mutation(self, event: TraceEvent):
        self.console.print(self.render(event))

    def render(self, event: TraceEvent) -> Text:
        line = Text()
        if event.is_delete:
            line.append("DEL ", style="delete")
        else:
            line.append("SET ", style="set")
        line.append(event.path or "<root>", style="path")
        if self.show_identifier:
            line.append(f" #{event.trace_identifier}", style="muted")

        line.append("  ")
        line.append(_format_value(event.previous_value), style="old")
        if not event.is_delete:
            line.append(" -> ")
            line.append(_format_value(event.value), style="new")
        return line

    def print_summary(self, events: list[TraceEvent], title: str = "Mutations"):
        """Render a list of events as a table."""
        table = Table(title=title, show_lines=False)
        table.add_column("#", style="muted", justify="right")
        table.add_column("Op")
        table.add_column("Path", style="path")
        table.add_column("Before", style="old")
        table.add_column("After", style="new")

        for i, event in enumerate(events, 1):
            op = Text("DEL", style="delete") if event.is_delete else Text("SET", style="set")
            after = "" if event.is_delete else _format_value(event.value)
            table.add_row(str(i), op, event.path, _format_value(event.previous_value), after)

        self.console.print(table)
