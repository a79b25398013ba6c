"""
Graph walker: enumerates every object-valued node reachable from a root.
"""

from typing import Any, Callable, NamedTuple, Optional

from deeptrace.proxies.objects import children, is_object, is_traceable
from deeptrace.proxies.paths import Paths


class ObjectPathEntry(NamedTuple):
    path: str
    value: Any
    parent: Any = None
    parent_key: Any = None


class ObjectPaths:

    @staticmethod
    def recurse(
        root: Any,
        is_leaf: Optional[Callable[[Any], bool]] = None,
        resolve: Optional[Callable[[Any], Any]] = None,
    ) -> list[ObjectPathEntry]:
        """
        One entry per object-valued node, parents before children and children
        in insertion order. The root's path is "" and its parent is None.

        Every node is reported once, under the first path that reaches it, so
        shared references and cycles terminate. Frozen nodes and nodes for
        which is_leaf() is true are reported but not descended into.

        resolve(value), when given, is the object whose children are
        enumerated and whose identity counts as the node's. Entries keep the
        value as found; their parent is the resolved container.
        """
        resolve = resolve or (lambda value: value)
        entries: list[ObjectPathEntry] = []
        seen: set[int] = set()
        stack = [ObjectPathEntry("", root)]

        while stack:
            entry = stack.pop()
            node = resolve(entry.value)
            if id(node) in seen:
                continue
            seen.add(id(node))
            entries.append(entry)

            if not is_traceable(node) or (is_leaf is not None and is_leaf(entry.value)):
                continue

            pending = [
                ObjectPathEntry(Paths.create(entry.path, key), child, node, key)
                for key, child in children(node)
                if is_object(resolve(child)) and id(resolve(child)) not in seen
            ]
            # reversed so the first child is popped first
            stack.extend(reversed(pending))

        return entries
