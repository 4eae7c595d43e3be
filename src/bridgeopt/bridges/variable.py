"""
Variable Bridges

Variable bridges replace a variable node: variables created already
constrained to a set. They are recorded like constraint bridges, under
the index of the (variables)-in-set constraint they stand for.
"""

from typing import List

from ..attributes import (
    ConstraintDual,
    ConstraintFunction,
    ConstraintPrimal,
    ConstraintSet,
)
from ..costs import BridgeCategory
from ..functions import SingleVariable, VectorOfVariables
from ..indices import ConstraintIndex, VariableIndex
from ..modifications import SetChange
from ..node_types import NodeKind, constraint_node
from ..sets import AbstractScalarSet, AbstractSet
from .bridge import ConstraintBridge


class VariableBridge(ConstraintBridge):
    """A bridge replacing one variable node."""

    category = BridgeCategory.VARIABLE

    @classmethod
    def supports(cls, node) -> bool:
        return (node.kind == NodeKind.VARIABLE
                and cls.supports_constrained_variable(node.set_type))

    @classmethod
    def supports_constrained_variable(cls, set_type: type) -> bool:
        raise NotImplementedError

    @classmethod
    def bridge_constrained_variables(cls, inner, s: AbstractSet) -> 'VariableBridge':
        """Create the variables, constrained to s, through inner."""
        raise NotImplementedError

    @property
    def variables(self) -> List[VariableIndex]:
        raise NotImplementedError


class FreeVariablesBridge(VariableBridge):
    """
    Free variables plus a constraint on them.

    The variables belong to whoever asked for them; deleting the bridge
    only deletes the constraint.
    """

    def __init__(self, variables: List[VariableIndex], constraint: ConstraintIndex):
        self._variables = list(variables)
        self.constraint = constraint

    @classmethod
    def supports_constrained_variable(cls, set_type):
        return issubclass(set_type, AbstractSet)

    @classmethod
    def target_nodes(cls, node):
        if issubclass(node.set_type, AbstractScalarSet):
            return [constraint_node(SingleVariable, node.set_type)]
        return [constraint_node(VectorOfVariables, node.set_type)]

    @classmethod
    def bridge_constrained_variables(cls, inner, s):
        if isinstance(s, AbstractScalarSet):
            vi = inner.add_variable()
            return cls([vi], inner.add_constraint(SingleVariable(vi), s))
        vis = inner.add_variables(s.dimension)
        return cls(vis, inner.add_constraint(VectorOfVariables(vis), s))

    @property
    def variables(self) -> List[VariableIndex]:
        return list(self._variables)

    def constraint_indices(self) -> List[ConstraintIndex]:
        return [self.constraint]

    def get(self, inner, attr):
        if isinstance(attr, (ConstraintFunction, ConstraintSet, ConstraintPrimal, ConstraintDual)):
            return inner.get(attr, self.constraint)
        return super().get(inner, attr)

    def modification_plan(self, inner, change):
        if isinstance(change, SetChange):
            return [(self.constraint, change)]
        return super().modification_plan(inner, change)
