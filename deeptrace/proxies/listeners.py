"""
Listener normalization and the listener protocol.
"""

from typing import Any, Callable, Protocol, Union, runtime_checkable

from deeptrace.proxies.events import TraceEvent


@runtime_checkable
class TraceListener(Protocol):
    """Objects that want mutation events implement on_mutation()."""

    def on_mutation(self, event: TraceEvent) -> Any:
        ...


Listener = Union[TraceListener, Callable[[TraceEvent], Any]]


class TraceListeners:

    @staticmethod
    def as_list(trace_listeners: Any) -> list:
        """Identity for lists, a one element list for a single listener, [] for None."""
        if trace_listeners is None:
            return []
        if isinstance(trace_listeners, list):
            return trace_listeners
        if isinstance(trace_listeners, tuple):
            return list(trace_listeners)
        return [trace_listeners]

    @staticmethod
    def dispatch(listener: Listener, event: TraceEvent):
        if isinstance(listener, TraceListener):
            return listener.on_mutation(event)
        if callable(listener):
            return listener(event)
        raise TypeError(f"Listener is neither callable nor has on_mutation(): {listener!r}")
