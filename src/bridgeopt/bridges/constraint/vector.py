"""
Vector Constraint Bridges

- VectorFunctionizeBridge: variables in S  ->  affine function in S
- VectorizeBridge: f >= l / f <= u / f == c  ->  [f - c] in Nonnegatives(1) / Nonpositives(1) / Zeros(1)
- ScalarizeBridge: f in Nonnegatives(n) etc.  ->  n scalar constraints
- NonnegToNonposBridge / NonposToNonnegBridge: f in K  ->  -f in -K
"""

from typing import List
import numpy as np

from ...attributes import (
    ConstraintDual,
    ConstraintFunction,
    ConstraintPrimal,
    ConstraintSet,
)
from ...errors import ModifyConstraintNotAllowed
from ...functions import (
    ScalarAffineFunction,
    SingleVariable,
    VectorAffineFunction,
    VectorOfVariables,
    convert_function,
    function_constant,
    is_variable_function,
    scalarize,
    to_affine,
    vectorize,
    with_constant,
)
from ...indices import ConstraintIndex
from ...modifications import (
    FunctionChange,
    ScalarCoefficientChange,
    ScalarConstantChange,
    SetChange,
    VectorCoefficientChange,
    VectorConstantChange,
)
from ...node_types import constraint_node
from ...sets import (
    AbstractVectorSet,
    EqualTo,
    GreaterThan,
    LessThan,
    Nonnegatives,
    Nonpositives,
    Zeros,
    set_constant,
)
from ..bridge import ConstraintBridge, LinearMapBridge, stack_values


# Scalar set <-> one-dimensional vector cone
_SCALAR_TO_VECTOR = {
    GreaterThan: Nonnegatives,
    LessThan: Nonpositives,
    EqualTo: Zeros,
}
_VECTOR_TO_SCALAR = {v: k for k, v in _SCALAR_TO_VECTOR.items()}


class VectorFunctionizeBridge(ConstraintBridge):
    """Vector of variables constraint as the equivalent affine constraint."""

    def __init__(self, constraint: ConstraintIndex):
        self.constraint = constraint

    @classmethod
    def supports_constraint(cls, function_type, set_type):
        return function_type is VectorOfVariables and issubclass(set_type, AbstractVectorSet)

    @classmethod
    def target_nodes(cls, node):
        return [constraint_node(VectorAffineFunction, node.set_type)]

    @classmethod
    def bridge_constraint(cls, inner, f, s):
        return cls(inner.add_constraint(to_affine(f), s))

    def constraint_indices(self) -> List[ConstraintIndex]:
        return [self.constraint]

    def get(self, inner, attr):
        if isinstance(attr, ConstraintFunction):
            return convert_function(inner.get(attr, self.constraint), VectorOfVariables)
        if isinstance(attr, (ConstraintSet, ConstraintPrimal, ConstraintDual)):
            return inner.get(attr, self.constraint)
        return super().get(inner, attr)

    def modification_plan(self, inner, change):
        if isinstance(change, SetChange):
            return [(self.constraint, change)]
        if isinstance(change, FunctionChange):
            return [(self.constraint, FunctionChange(to_affine(change.new_function)))]
        return super().modification_plan(inner, change)


class VectorizeBridge(ConstraintBridge):
    """
    Scalar constraint as a one-dimensional cone constraint.

    The set constant moves into the function: f in GreaterThan(l)
    becomes [f - l] in Nonnegatives(1).
    """

    def __init__(self, constraint: ConstraintIndex, set_constant_: float,
                 function_type: type, set_type: type):
        self.constraint = constraint
        self.set_constant = set_constant_
        self.function_type = function_type
        self.set_type = set_type

    @classmethod
    def supports_constraint(cls, function_type, set_type):
        return (function_type in (SingleVariable, ScalarAffineFunction)
                and set_type in _SCALAR_TO_VECTOR)

    @classmethod
    def target_nodes(cls, node):
        return [constraint_node(VectorAffineFunction, _SCALAR_TO_VECTOR[node.set_type])]

    @classmethod
    def _shifted(cls, f, constant: float) -> VectorAffineFunction:
        f = to_affine(f)
        return vectorize([with_constant(f, f.constant - constant)])

    @classmethod
    def bridge_constraint(cls, inner, f, s):
        c = set_constant(s)
        ci = inner.add_constraint(cls._shifted(f, c), _SCALAR_TO_VECTOR[type(s)](1))
        return cls(ci, c, type(f), type(s))

    def constraint_indices(self) -> List[ConstraintIndex]:
        return [self.constraint]

    def get(self, inner, attr):
        if isinstance(attr, ConstraintFunction):
            row = scalarize(inner.get(attr, self.constraint))[0]
            f = with_constant(row, row.constant + self.set_constant)
            return convert_function(f, self.function_type)
        if isinstance(attr, ConstraintSet):
            return self.set_type(self.set_constant)
        if isinstance(attr, ConstraintPrimal):
            return float(inner.get(attr, self.constraint)[0]) + self.set_constant
        if isinstance(attr, ConstraintDual):
            return float(inner.get(attr, self.constraint)[0])
        return super().get(inner, attr)

    def modification_plan(self, inner, change):
        if isinstance(change, SetChange):
            f = self.get(inner, ConstraintFunction())
            new_constant = function_constant(f) - set_constant(change.new_set)
            return [(self.constraint, VectorConstantChange([new_constant]))]
        if isinstance(change, FunctionChange):
            return [(self.constraint, FunctionChange(
                self._shifted(change.new_function, self.set_constant)
            ))]
        if is_variable_function(self.function_type):
            return super().modification_plan(inner, change)
        if isinstance(change, ScalarConstantChange):
            return [(self.constraint, VectorConstantChange(
                [change.new_constant - self.set_constant]
            ))]
        if isinstance(change, ScalarCoefficientChange):
            return [(self.constraint, VectorCoefficientChange(
                change.variable, [(0, change.new_coefficient)]
            ))]
        return super().modification_plan(inner, change)

    def commit_modification(self, change):
        if isinstance(change, SetChange):
            self.set_constant = set_constant(change.new_set)


class ScalarizeBridge(ConstraintBridge):
    """
    One scalar constraint per row of a cone constraint.

    Row constants move into the scalar sets: row i of f in Nonnegatives
    becomes f_i - b_i in GreaterThan(-b_i).
    """

    def __init__(self, constraints: List[ConstraintIndex], set_, function_type: type):
        self.constraints = constraints
        self.set = set_
        self.function_type = function_type

    @classmethod
    def supports_constraint(cls, function_type, set_type):
        return (function_type in (VectorOfVariables, VectorAffineFunction)
                and set_type in _VECTOR_TO_SCALAR)

    @classmethod
    def _row_type(cls, function_type: type) -> type:
        return SingleVariable if function_type is VectorOfVariables else ScalarAffineFunction

    @classmethod
    def target_nodes(cls, node):
        return [constraint_node(cls._row_type(node.function_type),
                                _VECTOR_TO_SCALAR[node.set_type])]

    @classmethod
    def _rows(cls, f, set_type: type):
        """(row function, row set) pairs for f in set_type."""
        scalar_set = _VECTOR_TO_SCALAR[set_type]
        if isinstance(f, VectorOfVariables):
            return [(SingleVariable(v), scalar_set(0.0)) for v in f.variables]
        return [(with_constant(row, 0.0), scalar_set(-row.constant)) for row in scalarize(f)]

    @classmethod
    def bridge_constraint(cls, inner, f, s):
        constraints = [inner.add_constraint(g, t) for g, t in cls._rows(f, type(s))]
        return cls(constraints, s, type(f))

    def constraint_indices(self) -> List[ConstraintIndex]:
        return list(self.constraints)

    def get(self, inner, attr):
        if isinstance(attr, ConstraintFunction):
            rows = []
            for ci in self.constraints:
                g = to_affine(inner.get(attr, ci))
                c = set_constant(inner.get(ConstraintSet(), ci))
                rows.append(with_constant(g, g.constant - c))
            return convert_function(vectorize(rows).canonical(), self.function_type)
        if isinstance(attr, ConstraintSet):
            return self.set
        if isinstance(attr, ConstraintPrimal):
            constants = [set_constant(inner.get(ConstraintSet(), ci)) for ci in self.constraints]
            return stack_values(inner.get(attr, self.constraints)) - np.array(constants)
        if isinstance(attr, ConstraintDual):
            return stack_values(inner.get(attr, self.constraints))
        return super().get(inner, attr)

    def modification_plan(self, inner, change):
        scalar_set = _VECTOR_TO_SCALAR[type(self.set)]
        if isinstance(change, SetChange):
            if change.new_set.dimension != self.set.dimension:
                raise ModifyConstraintNotAllowed(f"{self.kind_name()} cannot change the set dimension")
            return []
        if isinstance(change, FunctionChange):
            plan = []
            for ci, (g, t) in zip(self.constraints, self._rows(change.new_function, type(self.set))):
                plan.append((ci, FunctionChange(g)))
                plan.append((ci, SetChange(t)))
            return plan
        if is_variable_function(self.function_type):
            return super().modification_plan(inner, change)
        if isinstance(change, VectorConstantChange):
            return [(ci, SetChange(scalar_set(-c)))
                    for ci, c in zip(self.constraints, change.new_constants)]
        if isinstance(change, VectorCoefficientChange):
            return [(self.constraints[i], ScalarCoefficientChange(change.variable, c))
                    for i, c in change.new_coefficients]
        return super().modification_plan(inner, change)

    def commit_modification(self, change):
        if isinstance(change, SetChange):
            self.set = change.new_set


class NonnegToNonposBridge(LinearMapBridge):
    source_set = Nonnegatives
    target_set = Nonpositives

    @classmethod
    def map_matrix(cls, dimension):
        return -np.eye(dimension)


class NonposToNonnegBridge(LinearMapBridge):
    source_set = Nonpositives
    target_set = Nonnegatives

    @classmethod
    def map_matrix(cls, dimension):
        return -np.eye(dimension)
