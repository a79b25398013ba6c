"""
Sequence allocator for trace identifiers.

Identifiers only need to be unique for the lifetime of the process, not
dense: the tracer may allocate one and then discard it.
"""

import threading


class SequenceAllocator:
    """Monotonically increasing integer source, safe to share across threads."""

    def __init__(self, start: int = 0):
        self._next = start
        self._lock = threading.Lock()

    def next(self) -> int:
        with self._lock:
            value = self._next
            self._next += 1
            return value

    def peek(self) -> int:
        """The identifier the next call to next() will return."""
        with self._lock:
            return self._next


# Shared by every Proxies instance that is not given its own allocator.
sequence = SequenceAllocator()
