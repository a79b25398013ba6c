"""
Traced node types.

Python has no universal property trap, so each kind of object gets an
explicit wrapper that implements the same protocol as the value it wraps
(mapping, sequence or attribute access) and routes every access through a
TraceHandler. Callers must go through the wrapper; writes made directly to
the raw object are not observed.
"""

from collections.abc import MutableMapping, MutableSequence, Sequence
from typing import Any

from deeptrace.proxies.handler import TraceHandler


class TracedNode:
    """Base for all wrappers. Bookkeeping lives on the handler, not the target."""

    __slots__ = ("_handler", "__weakref__")

    def __init__(self, handler: TraceHandler):
        object.__setattr__(self, "_handler", handler)

    @property
    def trace_identifier(self) -> int:
        return self._handler.trace_identifier

    @property
    def trace_path(self) -> str:
        return self._handler.path

    @property
    def trace_listeners(self) -> list:
        return self._handler.trace_listeners

    def add_trace_listener(self, trace_listeners) -> list:
        return self._handler.add_trace_listener(trace_listeners)

    def __repr__(self):
        return repr(self._handler.target)


class TracedDict(TracedNode, MutableMapping):
    __slots__ = ()

    def __getitem__(self, key):
        return self._handler.on_get(key)

    def __setitem__(self, key, value):
        self._handler.on_set(key, value)

    def __delitem__(self, key):
        self._handler.on_delete(key)

    def __iter__(self):
        return iter(self._handler.target)

    def __len__(self):
        return len(self._handler.target)

    def __contains__(self, key):
        return key in self._handler.target

    def copy(self) -> dict:
        return dict(self._handler.target)


class TracedList(TracedNode, MutableSequence):
    __slots__ = ()

    def __getitem__(self, index):
        return self._handler.target[index]

    def __setitem__(self, index, value):
        if isinstance(index, slice):
            self._set_slice(index, value)
        else:
            self._handler.on_set(self._normalize(index), value)

    def __delitem__(self, index):
        if isinstance(index, slice):
            for i in sorted(range(*index.indices(len(self))), reverse=True):
                self._handler.on_delete(i)
        else:
            self._handler.on_delete(self._normalize(index))

    def __len__(self):
        return len(self._handler.target)

    def __iter__(self):
        return iter(self._handler.target)

    def __eq__(self, other):
        if isinstance(other, TracedList):
            return self._handler.target == other._handler.target
        if isinstance(other, Sequence) and not isinstance(other, (str, bytes, bytearray)):
            return list(self._handler.target) == list(other)
        return NotImplemented

    __hash__ = None

    def insert(self, index, value):
        size = len(self)
        if index < 0:
            index = max(0, size + index)
        self._handler.on_insert(min(index, size), value)

    def sort(self, key=None, reverse=False):
        ordered = sorted(self._handler.target, key=key, reverse=reverse)
        for i, item in enumerate(ordered):
            if self._handler.target[i] is not item:
                self[i] = item

    def copy(self) -> list:
        return list(self._handler.target)

    def _normalize(self, index: int) -> int:
        # raises IndexError the same way list does
        return range(len(self))[index]

    def _set_slice(self, index: slice, values):
        values = list(values)
        start, stop, step = index.indices(len(self))
        if step == 1:
            for i in reversed(range(start, max(start, stop))):
                self._handler.on_delete(i)
            for offset, value in enumerate(values):
                self._handler.on_insert(start + offset, value)
            return

        targets = range(start, stop, step)
        if len(targets) != len(values):
            raise ValueError(
                f"attempt to assign sequence of size {len(values)} "
                f"to extended slice of size {len(targets)}"
            )
        for i, value in zip(targets, values):
            self._handler.on_set(i, value)


class TracedObject(TracedNode):
    """Attribute-access wrapper. Methods resolve on, and stay bound to, the raw object."""

    __slots__ = ()

    @property
    def __class__(self):
        return type(self._handler.target)

    def __getattr__(self, name):
        return self._handler.on_get(name)

    def __setattr__(self, name, value):
        self._handler.on_set(name, value)

    def __delattr__(self, name):
        self._handler.on_delete(name)

    def __dir__(self):
        return dir(self._handler.target)

    def __str__(self):
        return str(self._handler.target)

    def __eq__(self, other):
        return self._handler.target == unwrap(other)

    def __hash__(self):
        return hash(self._handler.target)


def wrap(handler: TraceHandler) -> TracedNode:
    if isinstance(handler.target, MutableMapping):
        return TracedDict(handler)
    if isinstance(handler.target, MutableSequence):
        return TracedList(handler)
    return TracedObject(handler)


def is_traced(value: Any) -> bool:
    return isinstance(value, TracedNode)


def unwrap(value: Any) -> Any:
    """The raw object behind a traced node, or the value itself."""
    if is_traced(value):
        return value._handler.target
    return value
