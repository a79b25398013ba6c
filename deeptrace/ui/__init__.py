from deeptrace.ui.console import ConsoleTraceListener

__all__ = ["ConsoleTraceListener"]
