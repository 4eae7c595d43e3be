"""
Bridge Base Classes

A bridge is one reformulation rule together with the runtime record of
one application of it. The class side declares what the rule replaces
(supports), what it needs from the layer beneath (target_nodes) and how
to apply it (bridge_constraint / bridge_constrained_variables /
bridge_objective). The instance side owns what the application created
and knows how to invert it.

Bridges never talk to the underlying model directly. They receive an
inner model handle whose additions are internal to the bridging layer
and are themselves bridged when needed, which is how chains of any
depth are built.
"""

import logging
from typing import Any, ClassVar, List, Sequence, Tuple
import numpy as np

from ..attributes import (
    AbstractAttribute,
    ConstraintDual,
    ConstraintFunction,
    ConstraintPrimal,
    ConstraintSet,
)
from ..costs import BridgeCategory
from ..errors import ModifyConstraintNotAllowed, UnsupportedAttribute
from ..functions import (
    AbstractFunction,
    AbstractVectorFunction,
    VectorAffineFunction,
    apply_linear_map,
    convert_function,
    is_variable_function,
    to_affine,
)
from ..indices import ConstraintIndex, VariableIndex
from ..modifications import (
    AbstractModification,
    FunctionChange,
    SetChange,
    VectorCoefficientChange,
    VectorConstantChange,
)
from ..node_types import NodeKind, NodeType, constraint_node
from ..sets import AbstractSet

_LOGGER = logging.getLogger(__name__)


Plan = List[Tuple[ConstraintIndex, AbstractModification]]


class Bridge:
    """Base class for all bridges."""

    category: ClassVar[BridgeCategory] = BridgeCategory.CONSTRAINT

    # ------------------------------------------------------------------
    # Declaration
    # ------------------------------------------------------------------

    @classmethod
    def supports(cls, node: NodeType) -> bool:
        """Whether this bridge can replace node."""
        raise NotImplementedError

    @classmethod
    def target_nodes(cls, node: NodeType) -> List[NodeType]:
        """Node types this bridge adds to the inner model when replacing node."""
        raise NotImplementedError

    @classmethod
    def kind_name(cls) -> str:
        return cls.__name__

    # ------------------------------------------------------------------
    # Ownership
    # ------------------------------------------------------------------

    def constraint_indices(self) -> List[ConstraintIndex]:
        """Inner constraints created by this bridge, in creation order."""
        return []

    def variable_indices(self) -> List[VariableIndex]:
        """Auxiliary variables owned by this bridge."""
        return []

    def delete(self, inner) -> None:
        """Delete everything this bridge created, constraints first."""
        for ci in reversed(self.constraint_indices()):
            inner.delete(ci)
        for vi in reversed(self.variable_indices()):
            inner.delete(vi)

    def to_canonical(self):
        return {
            "bridge": self.kind_name(),
            "constraints": [ci.to_canonical() for ci in self.constraint_indices()],
            "variables": [vi.value for vi in self.variable_indices()],
        }

    def __repr__(self) -> str:
        return f"{self.kind_name()}()"


class ConstraintBridge(Bridge):
    """A bridge replacing one constraint node."""

    category = BridgeCategory.CONSTRAINT

    @classmethod
    def supports(cls, node: NodeType) -> bool:
        return (node.kind == NodeKind.CONSTRAINT
                and cls.supports_constraint(node.function_type, node.set_type))

    @classmethod
    def supports_constraint(cls, function_type: type, set_type: type) -> bool:
        raise NotImplementedError

    @classmethod
    def bridge_constraint(cls, inner, f: AbstractFunction, s: AbstractSet) -> 'ConstraintBridge':
        """Apply the reformulation to f in s, adding to inner."""
        raise NotImplementedError

    def get(self, inner, attr: AbstractAttribute) -> Any:
        """Recover attr of the bridged constraint from the inner model."""
        raise UnsupportedAttribute(attr, f"{self.kind_name()} cannot recover {attr}")

    def modification_plan(self, inner, change: AbstractModification) -> Plan:
        """
        Translate change into changes of the inner constraints.

        Must not modify anything. Raises ModifyConstraintNotAllowed when
        the change cannot be expressed.
        """
        raise ModifyConstraintNotAllowed(
            f"{self.kind_name()} does not support {type(change).__name__}"
        )

    def commit_modification(self, change: AbstractModification) -> None:
        """Update stored parameters after the plan has been applied."""


class LinearMapBridge(ConstraintBridge):
    """
    Bridge of f in S into A f in T for an injective matrix A.

    Recovery rules:
    - function: A^+ (A f) = f
    - primal: A^+ y
    - dual: A^T z (adjoint, so that <A f, z> = <f, A^T z>)
    """

    source_set: ClassVar[type]
    target_set: ClassVar[type]

    def __init__(self, constraint: ConstraintIndex, matrix: np.ndarray,
                 set_: AbstractSet, function_type: type = VectorAffineFunction):
        self.constraint = constraint
        self.function_type = function_type
        self.matrix = matrix
        self.pinv = np.linalg.pinv(matrix)
        self.set = set_

    @classmethod
    def map_matrix(cls, dimension: int) -> np.ndarray:
        raise NotImplementedError

    @classmethod
    def map_set(cls, s: AbstractSet) -> AbstractSet:
        return cls.target_set(s.dimension)

    @classmethod
    def supports_constraint(cls, function_type, set_type):
        return (set_type is cls.source_set
                and issubclass(function_type, AbstractVectorFunction))

    @classmethod
    def target_nodes(cls, node):
        return [constraint_node(VectorAffineFunction, cls.target_set)]

    @classmethod
    def bridge_constraint(cls, inner, f, s):
        matrix = cls.map_matrix(s.dimension)
        target_set = cls.map_set(s)
        ci = inner.add_constraint(apply_linear_map(matrix, f), target_set)
        return cls(ci, matrix, s, type(f))

    def constraint_indices(self) -> List[ConstraintIndex]:
        return [self.constraint]

    def get(self, inner, attr):
        if isinstance(attr, ConstraintSet):
            return self.set
        if isinstance(attr, ConstraintFunction):
            inner_f = inner.get(attr, self.constraint)
            f = apply_linear_map(self.pinv, inner_f, atol=1e-12)
            return convert_function(f, self.function_type)
        if isinstance(attr, ConstraintPrimal):
            return self.pinv @ np.asarray(inner.get(attr, self.constraint))
        if isinstance(attr, ConstraintDual):
            return self.matrix.T @ np.asarray(inner.get(attr, self.constraint))
        return super().get(inner, attr)

    def modification_plan(self, inner, change):
        if (is_variable_function(self.function_type)
                and isinstance(change, (VectorConstantChange, VectorCoefficientChange))):
            raise ModifyConstraintNotAllowed(
                f"Cannot modify a {self.function_type.__name__} constraint in place"
            )
        if isinstance(change, VectorConstantChange):
            mapped = self.matrix @ np.array(change.new_constants)
            return [(self.constraint, VectorConstantChange(mapped.tolist()))]
        if isinstance(change, VectorCoefficientChange):
            current = self.get(inner, ConstraintFunction())
            column = np.zeros(self.matrix.shape[1])
            for t in to_affine(current).terms:
                if t.scalar_term.variable == change.variable:
                    column[t.output_index] += t.scalar_term.coefficient
            for i, c in change.new_coefficients:
                column[i] = c
            mapped = self.matrix @ column
            return [(self.constraint, VectorCoefficientChange(
                change.variable, list(enumerate(mapped.tolist()))
            ))]
        if isinstance(change, FunctionChange):
            return [(self.constraint,
                     FunctionChange(apply_linear_map(self.matrix, change.new_function)))]
        if isinstance(change, SetChange):
            if change.new_set.dimension != self.set.dimension:
                raise ModifyConstraintNotAllowed(
                    f"{self.kind_name()} cannot change the set dimension"
                )
            return [(self.constraint, SetChange(self.map_set(change.new_set)))]
        return super().modification_plan(inner, change)

    def commit_modification(self, change):
        if isinstance(change, SetChange):
            self.set = change.new_set


def stack_values(values: Sequence[Any]) -> np.ndarray:
    """Concatenate scalar and vector results into one array."""
    return np.concatenate([np.atleast_1d(np.asarray(v, dtype=np.float64)) for v in values])
