"""
Classification of values for tracing, plus the option defaulting helper.

An "object" is anything with addressable properties: mappings, sequences
(other than text and bytes), sets and class instances. Objects whose
properties can be changed through the key or attribute protocol are
traceable; the rest are frozen and pass through the tracer untouched.
"""

import dataclasses
import inspect
from collections.abc import Mapping, MutableMapping, MutableSequence, Sequence, Set
from typing import Any, Optional

_PRIMITIVES = (str, bytes, bytearray, memoryview, int, float, complex, bool, type(None))


def is_object(value: Any) -> bool:
    if isinstance(value, _PRIMITIVES):
        return False
    if inspect.isclass(value) or inspect.ismodule(value) or inspect.isroutine(value):
        return False
    if isinstance(value, (Mapping, Sequence, Set)):
        return True
    return hasattr(value, "__dict__") or hasattr(type(value), "__slots__")


def is_frozen(value: Any) -> bool:
    """True for objects whose properties cannot be mutated by key or attribute."""
    if not is_object(value):
        return False
    if isinstance(value, MutableMapping):
        return False
    if isinstance(value, MutableSequence):
        return False
    if isinstance(value, (Mapping, Sequence, Set)):
        return True
    if dataclasses.is_dataclass(value) and value.__dataclass_params__.frozen:
        return True
    # slot-only instances have nowhere to enumerate attributes from
    return not hasattr(value, "__dict__")


def is_traceable(value: Any) -> bool:
    return is_object(value) and not is_frozen(value)


def children(value: Any) -> list[tuple[Any, Any]]:
    """(key, child) pairs of a traceable object, in insertion order."""
    if isinstance(value, MutableMapping):
        return list(value.items())
    if isinstance(value, MutableSequence):
        return list(enumerate(value))
    return list(vars(value).items())


def assign(container: Any, key: Any, value: Any):
    """Write a child into a raw container without going through any tracer."""
    if isinstance(container, (MutableMapping, MutableSequence)):
        container[key] = value
    else:
        setattr(container, key, value)


def read(container: Any, key: Any) -> Any:
    """Read a child from a raw container without going through any tracer."""
    if isinstance(container, (MutableMapping, MutableSequence)):
        return container[key]
    return getattr(container, key)


class Objects:

    @staticmethod
    def defaults(opts: Optional[Mapping], defaults: Mapping) -> dict:
        """Shallow merge of caller options over defaults. None values in opts are ignored."""
        result = dict(defaults)
        for key, value in (opts or {}).items():
            if value is not None:
                result[key] = value
        return result
