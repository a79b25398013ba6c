"""
Framework to create listeners that watch changes in nested dicts, lists and
objects.

create() walks an object graph once, wraps every object-valued node in a
traced node bound to its own TraceHandler, and splices each wrapper back
into its parent in place of the raw object. Mutations made through the
returned root are reported to the listeners with the dotted path at which
they happened.
"""

import logging
import weakref
from typing import Any, NamedTuple, Optional, Union

from pydantic import BaseModel, ConfigDict

from deeptrace.config.settings import get_settings
from deeptrace.errors import NotAnObjectError
from deeptrace.proxies.handler import TraceHandler
from deeptrace.proxies.listeners import TraceListeners
from deeptrace.proxies.object_paths import ObjectPaths
from deeptrace.proxies.objects import Objects, assign, children, is_frozen, is_object, is_traceable, read
from deeptrace.proxies.paths import Paths
from deeptrace.proxies.sequence import SequenceAllocator, sequence
from deeptrace.proxies.traced import TracedNode, is_traced, unwrap, wrap

logger = logging.getLogger("deeptrace.proxies")


class TraceOptions(BaseModel):
    model_config = ConfigDict(extra="ignore")

    path_prefix: str = ""


class Adoption(NamedTuple):
    """A value traced for storing, with what it takes to undo the tracing."""

    value: Any
    built: list     # (raw, wrapper) pairs created for value
    rewired: list   # (container, key, previous child) writes made into raw containers


class Proxies:
    """
    Tracer for object graphs.

    Keeps an identity map from each raw object to its live wrapper, so a raw
    object is never wrapped twice: tracing it again only registers the new
    listeners with the handler it already has.
    """

    def __init__(self, allocator: Optional[SequenceAllocator] = None):
        self.settings = get_settings()
        self.sequence = allocator or sequence
        self._traced: dict[int, weakref.ref] = {}  # id(raw) -> wrapper

    @property
    def suppress_listener_errors(self) -> bool:
        return self.settings.tracing.suppress_listener_errors

    def create(
        self,
        target: Any,
        trace_listeners=None,
        opts: Union[dict, TraceOptions, None] = None,
    ) -> Any:
        """
        Deeply trace the given object and call back on every listener each
        time a mutation is made through the returned root. Listeners receive
        a TraceEvent.
        """
        if not is_object(target):
            raise NotAnObjectError(target)

        opts = self._options(opts)
        trace_listeners = TraceListeners.as_list(trace_listeners)

        root = self.trace_graph(opts.path_prefix, target, trace_listeners)
        logger.debug(
            f"Traced {type(target).__name__} under {opts.path_prefix!r} "
            f"with {len(trace_listeners)} listener(s)"
        )
        return root

    def trace(self, path: str, value: Any, trace_listeners=None) -> Any:
        """Wrap a single node. Frozen values come back unchanged."""
        if not is_traced(value) and not is_object(value):
            raise NotAnObjectError(value, "We can only trace object types")

        trace_listeners = TraceListeners.as_list(trace_listeners)

        if not is_traced(value) and is_frozen(value):
            return value

        # allocated even when the node turns out to be traced already
        trace_identifier = self.sequence.next()

        existing = self._existing(value)
        if existing is not None:
            logger.debug(
                f"Merging {len(trace_listeners)} listener(s) into traced node "
                f"{existing.trace_identifier} at {existing.trace_path!r}"
            )
            existing.add_trace_listener(trace_listeners)
            return existing

        handler = TraceHandler(path, trace_listeners, value, self, trace_identifier)
        proxy = wrap(handler)
        self._remember(value, proxy)
        return proxy

    def trace_graph(self, path_prefix: str, target: Any, trace_listeners: list) -> Any:
        """
        Trace target and every object reachable from it, rewiring references
        in place. Nodes that are already traced are walked through and get
        trace_listeners added to their own.
        """
        return self._trace_graph(path_prefix, target, trace_listeners, merge=True).value

    def adopt(self, path: str, value: Any, trace_listeners: list) -> Adoption:
        """
        Trace a value that is about to be stored in a traced node.

        Nodes that are already traced are reused as they are: they keep their
        listeners and are not walked. Pass the result to release() if the
        store fails. Values that are not objects come back as they are.
        """
        if not is_traced(value) and not is_object(value):
            return Adoption(value, [], [])
        return self._trace_graph(path, value, trace_listeners, merge=False)

    def release(self, adoption: Adoption):
        """Undo adopt(): restore the rewired references and forget the new wrappers."""
        for container, key, previous in reversed(adoption.rewired):
            assign(container, key, previous)
        for raw, proxy in adoption.built:
            if self.lookup(raw) is proxy:
                del self._traced[id(raw)]
        logger.debug(f"Released {len(adoption.built)} wrapper(s) of a value that was never stored")

    def lookup(self, value: Any) -> Optional[TracedNode]:
        """The live wrapper for a raw object, if it has been traced."""
        ref = self._traced.get(id(value))
        if ref is None:
            return None
        proxy = ref()
        if proxy is None or proxy._handler.target is not value:
            return None
        return proxy

    def _existing(self, value: Any) -> Optional[TracedNode]:
        return value if is_traced(value) else self.lookup(value)

    def _trace_graph(self, path_prefix: str, target: Any, trace_listeners: list, merge: bool) -> Adoption:
        existing = self._existing(target)
        if existing is not None and not merge:
            return Adoption(existing, [], [])
        if not is_traceable(unwrap(target)):
            return Adoption(self.trace(path_prefix, target, trace_listeners), [], [])

        is_leaf = None if merge else (lambda value: self._existing(value) is not None)
        entries = ObjectPaths.recurse(target, is_leaf=is_leaf, resolve=unwrap)
        adoption = Adoption(None, [], [])
        wrapped: dict[int, Any] = {}  # id(raw) -> wrapper
        spliced = []
        root = None

        for entry in entries:
            known = self._existing(entry.value)
            if known is not None and not merge:
                proxy = known
            else:
                proxy = self.trace(Paths.create(path_prefix, entry.path), entry.value, trace_listeners)
                if known is None and proxy is not entry.value:
                    adoption.built.append((entry.value, proxy))
                if not is_traced(entry.value):
                    spliced.append(entry.value)
            wrapped[id(unwrap(entry.value))] = proxy

            # replace the object in the parent with its traced version
            if entry.parent is None:
                root = proxy
            elif proxy is not entry.value:
                self._assign(adoption, entry.parent, entry.parent_key, proxy)

        self._splice(adoption, spliced, wrapped)
        return adoption._replace(value=root)

    def _remember(self, value: Any, proxy: TracedNode):
        key = id(value)

        def forget(ref, key=key):
            if self._traced.get(key) is ref:
                del self._traced[key]

        self._traced[key] = weakref.ref(proxy, forget)

    @staticmethod
    def _assign(adoption: Adoption, container: Any, key: Any, value: Any):
        previous = read(container, key)
        assign(container, key, value)
        adoption.rewired.append((container, key, previous))

    @classmethod
    def _splice(cls, adoption: Adoption, nodes: list, wrapped: dict):
        """Point shared and cyclic references at wrappers; the walk only reports the first parent."""
        for raw in nodes:
            if not is_traceable(raw):
                continue
            for key, child in children(raw):
                proxy = wrapped.get(id(unwrap(child)))
                if proxy is not None and proxy is not child:
                    cls._assign(adoption, raw, key, proxy)

    def _options(self, opts) -> TraceOptions:
        if isinstance(opts, TraceOptions):
            opts = opts.model_dump(exclude_unset=True)
        defaults = {"path_prefix": self.settings.tracing.path_prefix}
        return TraceOptions(**Objects.defaults(opts, defaults))


# ── Module-level API ─────────────────────────────────────────────────

_proxies: Optional[Proxies] = None


def get_proxies() -> Proxies:
    """Get the global Proxies instance."""
    global _proxies
    if _proxies is None:
        _proxies = Proxies()
    return _proxies


def create(target: Any, trace_listeners=None, opts: Union[dict, TraceOptions, None] = None) -> Any:
    return get_proxies().create(target, trace_listeners, opts)


def trace(path: str, value: Any, trace_listeners=None) -> Any:
    return get_proxies().trace(path, value, trace_listeners)
