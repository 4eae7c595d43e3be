"""
Node Types

A NodeType is the key used everywhere in the bridge graph. It identifies
one of:
- a constraint node: (function type, set type)
- a variable node: a set type, for variables created already constrained
  to a set
- an objective node: an objective function type

Node types are interned: the factory functions return the identical
object for identical arguments, so they are cheap dictionary keys.
"""

from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Any, Dict, Optional

from .functions import AbstractFunction
from .sets import AbstractSet


class NodeKind(Enum):
    """What a node type stands for."""
    CONSTRAINT = "constraint"
    VARIABLE = "variable"
    OBJECTIVE = "objective"


@dataclass(frozen=True)
class NodeType:
    """
    Interned key of the bridge graph.

    Attributes:
        kind: Constraint, variable or objective node
        function_type: Function class (None for variable nodes)
        set_type: Set class (None for objective nodes)
    """
    kind: NodeKind
    function_type: Optional[type] = None
    set_type: Optional[type] = None

    @property
    def name(self) -> str:
        if self.kind == NodeKind.CONSTRAINT:
            return f"{self.function_type.__name__}-in-{self.set_type.__name__}"
        if self.kind == NodeKind.VARIABLE:
            return f"Variable-in-{self.set_type.__name__}"
        return f"Objective-{self.function_type.__name__}"

    def to_canonical(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "function": self.function_type.__name__ if self.function_type else None,
            "set": self.set_type.__name__ if self.set_type else None,
        }

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"NodeType({self.name})"


@lru_cache(maxsize=None)
def constraint_node(function_type: type, set_type: type) -> NodeType:
    """Node for constraints of function_type in set_type."""
    if not issubclass(function_type, AbstractFunction):
        raise ValueError(f"{function_type!r} is not a function type")
    if not issubclass(set_type, AbstractSet):
        raise ValueError(f"{set_type!r} is not a set type")
    return NodeType(NodeKind.CONSTRAINT, function_type, set_type)


@lru_cache(maxsize=None)
def variable_node(set_type: type) -> NodeType:
    """Node for variables created constrained to set_type."""
    if not issubclass(set_type, AbstractSet):
        raise ValueError(f"{set_type!r} is not a set type")
    return NodeType(NodeKind.VARIABLE, None, set_type)


@lru_cache(maxsize=None)
def objective_node(function_type: type) -> NodeType:
    """Node for objectives of function_type."""
    if not issubclass(function_type, AbstractFunction):
        raise ValueError(f"{function_type!r} is not a function type")
    return NodeType(NodeKind.OBJECTIVE, function_type, None)


def node_type_of(f: AbstractFunction, s: AbstractSet) -> NodeType:
    """Constraint node of a function/set instance pair."""
    return constraint_node(type(f), type(s))


def _catalog(base: type) -> Dict[str, type]:
    """Concrete subclasses of base by class name."""
    out: Dict[str, type] = {}
    stack = [base]
    while stack:
        cls = stack.pop()
        for sub in cls.__subclasses__():
            stack.append(sub)
            if not sub.__name__.startswith(("_", "Abstract")):
                out[sub.__name__] = sub
    return out


def parse_node(name: str) -> NodeType:
    """
    Parse a node type from its name.

    Accepts "F-in-S", "Variable-in-S" and "Objective-F", as produced by
    NodeType.name.

    Raises:
        ValueError: if the name or one of its types is unknown
    """
    functions = _catalog(AbstractFunction)
    sets = _catalog(AbstractSet)

    def lookup(catalog: Dict[str, type], key: str) -> type:
        if key not in catalog:
            raise ValueError(f"Unknown type '{key}' in node '{name}'")
        return catalog[key]

    if name.startswith("Objective-"):
        return objective_node(lookup(functions, name[len("Objective-"):]))
    head, sep, tail = name.partition("-in-")
    if not sep:
        raise ValueError(f"Cannot parse node '{name}'")
    if head == "Variable":
        return variable_node(lookup(sets, tail))
    return constraint_node(lookup(functions, head), lookup(sets, tail))
