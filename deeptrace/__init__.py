"""
deeptrace - observe every mutation in a tree of state.
"""

__version__ = "1.0.0"

from deeptrace.errors import NotAnObjectError
from deeptrace.proxies import (
    MutationType,
    Proxies,
    TraceEvent,
    TraceOptions,
    create,
    is_traced,
    trace,
    unwrap,
)

__all__ = [
    "NotAnObjectError",
    "MutationType",
    "Proxies",
    "TraceEvent",
    "TraceOptions",
    "create",
    "is_traced",
    "trace",
    "unwrap",
]
