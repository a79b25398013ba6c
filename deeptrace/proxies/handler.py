"""
Trace Handler - interception policy for one traced node.

Every read, write and delete made through a traced node lands here. Writes
and deletes are applied to the raw object first, then each registered
listener is called, in registration order, before control returns to the
caller.
"""

import logging
from collections.abc import MutableMapping, MutableSequence
from typing import Any

from deeptrace.proxies.events import MutationType, TraceEvent
from deeptrace.proxies.listeners import TraceListeners
from deeptrace.proxies.paths import Paths

logger = logging.getLogger("deeptrace.proxies.handler")


class TraceHandler:

    def __init__(self, path: str, trace_listeners: list, target: Any, proxies, trace_identifier: int):
        self.path = path
        # each node owns its list, so registering on one node never reaches its neighbours
        self.trace_listeners = list(trace_listeners)
        self.target = target
        self.trace_identifier = trace_identifier
        # the tracer, so values assigned later get traced too
        self.proxies = proxies
        self._item_protocol = isinstance(target, (MutableMapping, MutableSequence))

    def add_trace_listener(self, trace_listeners) -> list:
        """Append listeners to this node's list. Duplicates are kept."""
        trace_listeners = TraceListeners.as_list(trace_listeners)
        if trace_listeners is self.trace_listeners:
            return self.trace_listeners
        self.trace_listeners.extend(trace_listeners)
        return self.trace_listeners

    # ── Interception ─────────────────────────────────────────────────

    def on_get(self, key: Any) -> Any:
        if self._item_protocol:
            return self.target[key]
        return getattr(self.target, key)

    def on_set(self, key: Any, value: Any):
        previous_value = self._peek(key)
        adoption = self._trace_value(key, value)
        try:
            if self._item_protocol:
                self.target[key] = adoption.value
            else:
                setattr(self.target, key, adoption.value)
        except Exception:
            self.proxies.release(adoption)
            raise
        self.notify(MutationType.SET, key, adoption.value, previous_value)

    def on_insert(self, index: int, value: Any):
        adoption = self._trace_value(index, value)
        try:
            self.target.insert(index, adoption.value)
        except Exception:
            self.proxies.release(adoption)
            raise
        self.notify(MutationType.SET, index, adoption.value, None)

    def on_delete(self, key: Any):
        if self._item_protocol:
            previous_value = self.target[key]
            del self.target[key]
        else:
            previous_value = getattr(self.target, key)
            delattr(self.target, key)
        self.notify(MutationType.DELETE, key, None, previous_value)

    def _trace_value(self, key: Any, value: Any):
        # traced nodes being moved or written back keep their own listeners
        return self.proxies.adopt(Paths.create(self.path, key), value, self.trace_listeners)

    def _peek(self, key: Any) -> Any:
        if isinstance(self.target, MutableMapping):
            return self.target.get(key)
        if self._item_protocol:
            return self.target[key]
        return getattr(self.target, key, None)

    # ── Notification ─────────────────────────────────────────────────

    def notify(self, mutation_type: MutationType, key: Any, value: Any, previous_value: Any):
        event = TraceEvent(
            mutation_type=mutation_type,
            path=Paths.create(self.path, key),
            node_path=self.path,
            key=key,
            value=value,
            previous_value=previous_value,
            trace_identifier=self.trace_identifier,
            target=self.target,
        )

        # listeners registered while notifying only see later mutations
        for listener in list(self.trace_listeners):
            try:
                TraceListeners.dispatch(listener, event)
            except Exception:
                if not self.proxies.suppress_listener_errors:
                    raise
                logger.exception(f"Trace listener {listener!r} failed on {event.path}")

        return event
