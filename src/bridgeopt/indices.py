"""
Index Types

Variables and constraints are referred to by opaque integer indices.
A ConstraintIndex also carries the function and set types of the
constraint it refers to, so it can be routed without a lookup.

Indices created by the bridging layer use negative values; indices
handed out by an underlying model are positive.
"""

from dataclasses import dataclass
from typing import Any, Dict


@dataclass(frozen=True, order=True)
class VariableIndex:
    """Index of a decision variable."""
    value: int

    def to_canonical(self) -> Dict[str, Any]:
        return {"variable": self.value}

    def __repr__(self) -> str:
        return f"VariableIndex({self.value})"


@dataclass(frozen=True)
class ConstraintIndex:
    """
    Index of a constraint.

    Attributes:
        function_type: Class of the constraint function
        set_type: Class of the constraint set
        value: Integer identifier, unique per (function_type, set_type)
    """
    function_type: type
    set_type: type
    value: int

    @property
    def is_bridged(self) -> bool:
        return self.value < 0

    def to_canonical(self) -> Dict[str, Any]:
        return {
            "function": self.function_type.__name__,
            "set": self.set_type.__name__,
            "value": self.value,
        }

    def __repr__(self) -> str:
        return (f"ConstraintIndex({self.function_type.__name__}-in-"
                f"{self.set_type.__name__}, {self.value})")
