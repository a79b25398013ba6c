"""
Trace events delivered to listeners.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class MutationType(str, Enum):
    SET = "set"
    DELETE = "delete"


class TraceEvent(BaseModel):
    """One observed mutation on a traced node."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    mutation_type: MutationType
    path: str                                    # node path joined with key
    node_path: str = ""                          # path of the mutated node
    key: Any = None
    value: Any = None                            # None for deletes
    previous_value: Any = None                   # None when the key was absent
    trace_identifier: Optional[int] = None
    target: Any = Field(default=None, repr=False)  # raw object that was mutated

    @property
    def is_delete(self) -> bool:
        return self.mutation_type == MutationType.DELETE

    def summary(self) -> dict:
        """Compact representation for listing."""
        return {
            "mutation_type": self.mutation_type.value,
            "path": self.path,
            "value": self.value,
            "previous_value": self.previous_value,
        }
