"""
Scalar Constraint Bridges

- SplitIntervalBridge: f in [l, u]  ->  f >= l and f <= u
- GreaterToLessBridge: f >= l       ->  -f <= -l
- LessToGreaterBridge: f <= u       ->  -f >= -u
- ScalarFunctionizeBridge: x in S   ->  1.0 x + 0.0 in S
- ScalarSlackBridge: f in S         ->  f - s == 0 with s in S
"""

from typing import List

from ...attributes import (
    ConstraintDual,
    ConstraintFunction,
    ConstraintPrimal,
    ConstraintSet,
    VariablePrimal,
)
from ...functions import (
    AbstractScalarFunction,
    ScalarAffineFunction,
    ScalarQuadraticFunction,
    SingleVariable,
    add_affine_term,
    convert_function,
    is_variable_function,
    negate,
    remove_variable,
    to_affine,
)
from ...indices import ConstraintIndex, VariableIndex
from ...modifications import (
    FunctionChange,
    ScalarCoefficientChange,
    ScalarConstantChange,
    SetChange,
)
from ...node_types import constraint_node, variable_node
from ...sets import (
    AbstractScalarSet,
    EqualTo,
    GreaterThan,
    Interval,
    LessThan,
    set_constant,
)
from ..bridge import ConstraintBridge


_AFFINE_OR_QUADRATIC = (ScalarAffineFunction, ScalarQuadraticFunction)
_SCALAR_FUNCTIONS = (SingleVariable,) + _AFFINE_OR_QUADRATIC


def _negated_type(function_type: type) -> type:
    """Function type of -f for f of function_type."""
    if function_type is SingleVariable:
        return ScalarAffineFunction
    return function_type


class SplitIntervalBridge(ConstraintBridge):
    """
    Two one-sided constraints for an interval.

    The dual is the sum of the two one-sided duals; at most one of them
    is nonzero at a complementary solution.
    """

    def __init__(self, lower: ConstraintIndex, upper: ConstraintIndex):
        self.lower = lower
        self.upper = upper

    @classmethod
    def supports_constraint(cls, function_type, set_type):
        return set_type is Interval and function_type in _SCALAR_FUNCTIONS

    @classmethod
    def target_nodes(cls, node):
        return [
            constraint_node(node.function_type, GreaterThan),
            constraint_node(node.function_type, LessThan),
        ]

    @classmethod
    def bridge_constraint(cls, inner, f, s):
        lower = inner.add_constraint(f, GreaterThan(s.lower))
        upper = inner.add_constraint(f, LessThan(s.upper))
        return cls(lower, upper)

    def constraint_indices(self) -> List[ConstraintIndex]:
        return [self.lower, self.upper]

    def get(self, inner, attr):
        if isinstance(attr, ConstraintFunction):
            return inner.get(attr, self.lower)
        if isinstance(attr, ConstraintSet):
            return Interval(inner.get(attr, self.lower).lower,
                            inner.get(attr, self.upper).upper)
        if isinstance(attr, ConstraintPrimal):
            return inner.get(attr, self.lower)
        if isinstance(attr, ConstraintDual):
            return inner.get(attr, self.lower) + inner.get(attr, self.upper)
        return super().get(inner, attr)

    def modification_plan(self, inner, change):
        if isinstance(change, (ScalarConstantChange, ScalarCoefficientChange, FunctionChange)):
            return [(self.lower, change), (self.upper, change)]
        if isinstance(change, SetChange):
            return [
                (self.lower, SetChange(GreaterThan(change.new_set.lower))),
                (self.upper, SetChange(LessThan(change.new_set.upper))),
            ]
        return super().modification_plan(inner, change)


class _FlipSignBridge(ConstraintBridge):
    """f in S as -f in the mirrored set. Primal and dual change sign."""

    source_set: type
    target_set: type

    def __init__(self, constraint: ConstraintIndex, function_type: type):
        self.constraint = constraint
        self.function_type = function_type

    @classmethod
    def supports_constraint(cls, function_type, set_type):
        return set_type is cls.source_set and function_type in _SCALAR_FUNCTIONS

    @classmethod
    def target_nodes(cls, node):
        return [constraint_node(_negated_type(node.function_type), cls.target_set)]

    @classmethod
    def bridge_constraint(cls, inner, f, s):
        ci = inner.add_constraint(negate(f), cls.target_set(-set_constant(s)))
        return cls(ci, type(f))

    def constraint_indices(self) -> List[ConstraintIndex]:
        return [self.constraint]

    def get(self, inner, attr):
        if isinstance(attr, ConstraintFunction):
            return convert_function(negate(inner.get(attr, self.constraint)).canonical(),
                                    self.function_type)
        if isinstance(attr, ConstraintSet):
            return self.source_set(-set_constant(inner.get(attr, self.constraint)))
        if isinstance(attr, (ConstraintPrimal, ConstraintDual)):
            return -inner.get(attr, self.constraint)
        return super().get(inner, attr)

    def modification_plan(self, inner, change):
        if isinstance(change, SetChange):
            return [(self.constraint, SetChange(self.target_set(-set_constant(change.new_set))))]
        if isinstance(change, FunctionChange):
            return [(self.constraint, FunctionChange(negate(change.new_function)))]
        if is_variable_function(self.function_type):
            return super().modification_plan(inner, change)
        if isinstance(change, ScalarConstantChange):
            return [(self.constraint, ScalarConstantChange(-change.new_constant))]
        if isinstance(change, ScalarCoefficientChange):
            return [(self.constraint, ScalarCoefficientChange(
                change.variable, -change.new_coefficient
            ))]
        return super().modification_plan(inner, change)


class GreaterToLessBridge(_FlipSignBridge):
    source_set = GreaterThan
    target_set = LessThan


class LessToGreaterBridge(_FlipSignBridge):
    source_set = LessThan
    target_set = GreaterThan


class ScalarFunctionizeBridge(ConstraintBridge):
    """Single variable constraint as the equivalent affine constraint."""

    def __init__(self, constraint: ConstraintIndex):
        self.constraint = constraint

    @classmethod
    def supports_constraint(cls, function_type, set_type):
        return function_type is SingleVariable and issubclass(set_type, AbstractScalarSet)

    @classmethod
    def target_nodes(cls, node):
        return [constraint_node(ScalarAffineFunction, node.set_type)]

    @classmethod
    def bridge_constraint(cls, inner, f, s):
        return cls(inner.add_constraint(to_affine(f), s))

    def constraint_indices(self) -> List[ConstraintIndex]:
        return [self.constraint]

    def get(self, inner, attr):
        if isinstance(attr, ConstraintFunction):
            return convert_function(inner.get(attr, self.constraint), SingleVariable)
        if isinstance(attr, (ConstraintSet, ConstraintPrimal, ConstraintDual)):
            return inner.get(attr, self.constraint)
        return super().get(inner, attr)

    def modification_plan(self, inner, change):
        if isinstance(change, SetChange):
            return [(self.constraint, change)]
        if isinstance(change, FunctionChange):
            return [(self.constraint, FunctionChange(to_affine(change.new_function)))]
        return super().modification_plan(inner, change)


class ScalarSlackBridge(ConstraintBridge):
    """
    Slack reformulation f in S  ->  f - s == 0, s in S.

    The slack variable is owned by the bridge. The primal value is
    (f - s) + s; the dual is that of the equality constraint.
    """

    def __init__(self, slack: VariableIndex, equality: ConstraintIndex,
                 slack_in_set: ConstraintIndex, function_type: type):
        self.slack = slack
        self.equality = equality
        self.slack_in_set = slack_in_set
        self.function_type = function_type

    @classmethod
    def supports_constraint(cls, function_type, set_type):
        return (function_type in _AFFINE_OR_QUADRATIC
                and issubclass(set_type, AbstractScalarSet)
                and set_type is not EqualTo)

    @classmethod
    def target_nodes(cls, node):
        return [
            constraint_node(node.function_type, EqualTo),
            variable_node(node.set_type),
        ]

    @classmethod
    def bridge_constraint(cls, inner, f: AbstractScalarFunction, s):
        slack, slack_in_set = inner.add_constrained_variable(s)
        equality = inner.add_constraint(add_affine_term(f, -1.0, slack), EqualTo(0.0))
        return cls(slack, equality, slack_in_set, type(f))

    def constraint_indices(self) -> List[ConstraintIndex]:
        return [self.slack_in_set, self.equality]

    def variable_indices(self) -> List[VariableIndex]:
        return [self.slack]

    def get(self, inner, attr):
        if isinstance(attr, ConstraintFunction):
            f = remove_variable(inner.get(attr, self.equality), self.slack)
            return convert_function(f, self.function_type)
        if isinstance(attr, ConstraintSet):
            return inner.get(attr, self.slack_in_set)
        if isinstance(attr, ConstraintPrimal):
            return (inner.get(attr, self.equality)
                    + inner.get(VariablePrimal(), self.slack))
        if isinstance(attr, ConstraintDual):
            return inner.get(attr, self.equality)
        return super().get(inner, attr)

    def modification_plan(self, inner, change):
        if isinstance(change, SetChange):
            return [(self.slack_in_set, change)]
        if isinstance(change, FunctionChange):
            return [(self.equality, FunctionChange(
                add_affine_term(change.new_function, -1.0, self.slack)
            ))]
        if isinstance(change, ScalarConstantChange):
            return [(self.equality, change)]
        if isinstance(change, ScalarCoefficientChange) and change.variable != self.slack:
            return [(self.equality, change)]
        return super().modification_plan(inner, change)
