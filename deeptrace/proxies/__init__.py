"""
deeptrace Proxies - deep mutation tracing for nested dicts, lists and objects.
"""

from deeptrace.proxies.events import MutationType, TraceEvent
from deeptrace.proxies.handler import TraceHandler
from deeptrace.proxies.listeners import TraceListener, TraceListeners
from deeptrace.proxies.proxies import Proxies, TraceOptions, create, get_proxies, trace
from deeptrace.proxies.traced import TracedDict, TracedList, TracedNode, TracedObject, is_traced, unwrap

__all__ = [
    "MutationType",
    "TraceEvent",
    "TraceHandler",
    "TraceListener",
    "TraceListeners",
    "Proxies",
    "TraceOptions",
    "create",
    "get_proxies",
    "trace",
    "TracedDict",
    "TracedList",
    "TracedNode",
    "TracedObject",
    "is_traced",
    "unwrap",
]
