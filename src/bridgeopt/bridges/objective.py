"""
Objective Bridges

An objective bridge replaces the objective node. It may set the inner
objective to another unsupported type, in which case the inner model
returns the next bridge of the chain and this bridge holds it as child.

- ObjectiveFunctionizeBridge: min x            ->  min 1.0 x + 0.0
- ObjectiveSlackBridge: min f                  ->  min t  s.t. f - t <= 0
                        max f                  ->  max t  s.t. t - f <= 0
"""

from typing import ClassVar, List, Optional

from ..attributes import (
    ConstraintFunction,
    ObjectiveBound,
    ObjectiveFunction,
    ObjectiveValue,
    OptimizationSense,
)
from ..costs import BridgeCategory
from ..errors import UnsupportedAttribute
from ..functions import (
    AbstractFunction,
    ScalarAffineFunction,
    ScalarQuadraticFunction,
    SingleVariable,
    add_affine_term,
    convert_function,
    negate,
    to_affine,
)
from ..indices import ConstraintIndex, VariableIndex
from ..node_types import NodeKind, constraint_node, objective_node
from ..sets import LessThan
from .bridge import Bridge


class ObjectiveBridge(Bridge):
    """A bridge replacing the objective node."""

    category: ClassVar[BridgeCategory] = BridgeCategory.OBJECTIVE

    def __init__(self, function_type: type, child: Optional[Bridge] = None):
        self.function_type = function_type
        self.child = child

    @classmethod
    def supports(cls, node) -> bool:
        return (node.kind == NodeKind.OBJECTIVE
                and cls.supports_objective(node.function_type))

    @classmethod
    def supports_objective(cls, function_type: type) -> bool:
        raise NotImplementedError

    @classmethod
    def bridge_objective(cls, inner, f: AbstractFunction,
                         sense: OptimizationSense) -> 'ObjectiveBridge':
        """Set the objective f through inner."""
        raise NotImplementedError

    def depends_on_sense(self) -> bool:
        """Whether the bridge must be rebuilt when the sense changes."""
        return False

    def get(self, inner, attr):
        if isinstance(attr, (ObjectiveValue, ObjectiveBound)):
            return inner.get_objective(attr, self.child)
        raise UnsupportedAttribute(attr, f"{self.kind_name()} cannot recover {attr}")

    def delete(self, inner) -> None:
        if self.child is not None:
            self.child.delete(inner)
        super().delete(inner)


class ObjectiveFunctionizeBridge(ObjectiveBridge):
    """Single variable objective as the equivalent affine objective."""

    @classmethod
    def supports_objective(cls, function_type):
        return function_type is SingleVariable

    @classmethod
    def target_nodes(cls, node):
        return [objective_node(ScalarAffineFunction)]

    @classmethod
    def bridge_objective(cls, inner, f, sense):
        return cls(type(f), inner.set_objective(to_affine(f)))

    def get(self, inner, attr):
        if isinstance(attr, ObjectiveFunction):
            return convert_function(inner.get_objective(attr, self.child), SingleVariable)
        return super().get(inner, attr)


class ObjectiveSlackBridge(ObjectiveBridge):
    """
    Epigraph reformulation of the objective.

    The auxiliary variable t and its constraint are owned by the bridge.
    The inner objective is set last, once the constraint exists.
    """

    def __init__(self, function_type: type, slack: VariableIndex,
                 constraint: ConstraintIndex, sense: OptimizationSense,
                 child: Optional[Bridge] = None):
        super().__init__(function_type, child)
        self.slack = slack
        self.constraint = constraint
        self.sense = sense

    @classmethod
    def supports_objective(cls, function_type):
        return function_type in (ScalarAffineFunction, ScalarQuadraticFunction)

    @classmethod
    def target_nodes(cls, node):
        return [
            constraint_node(node.function_type, LessThan),
            objective_node(SingleVariable),
        ]

    @classmethod
    def bridge_objective(cls, inner, f, sense):
        slack = inner.add_variable()
        if sense == OptimizationSense.MAX_SENSE:
            g = add_affine_term(negate(f), 1.0, slack)
        else:
            g = add_affine_term(f, -1.0, slack)
        constraint = inner.add_constraint(g, LessThan(0.0))
        child = inner.set_objective(SingleVariable(slack))
        return cls(type(f), slack, constraint, sense, child)

    def depends_on_sense(self) -> bool:
        return True

    def constraint_indices(self) -> List[ConstraintIndex]:
        return [self.constraint]

    def variable_indices(self) -> List[VariableIndex]:
        return [self.slack]

    def get(self, inner, attr):
        if isinstance(attr, ObjectiveFunction):
            g = inner.get(ConstraintFunction(), self.constraint)
            if self.sense == OptimizationSense.MAX_SENSE:
                g = negate(g)
            f = add_affine_term(g, 1.0, self.slack).canonical()
            return convert_function(f, self.function_type)
        return super().get(inner, attr)
