"""
Constraint Helpers

Helpers for adding constraints in the normalized form most solvers
expect, with function constants moved into the set.
"""

from ..functions import (
    AbstractScalarFunction,
    ScalarAffineFunction,
    ScalarQuadraticFunction,
    SingleVariable,
    with_constant,
)
from ..indices import ConstraintIndex
from ..sets import AbstractScalarSet, shift_constant


def normalize_scalar_constraint(f: AbstractScalarFunction, s: AbstractScalarSet):
    """
    Move the constant of f into s.

    Returns:
        (function with zero constant, shifted set)
    """
    if isinstance(f, SingleVariable):
        return f, s
    if isinstance(f, (ScalarAffineFunction, ScalarQuadraticFunction)):
        if f.constant == 0.0:
            return f, s
        return with_constant(f, 0.0), shift_constant(s, -f.constant)
    raise ValueError(f"{type(f).__name__} is not a scalar function")


def add_scalar_constraint(model, f: AbstractScalarFunction, s: AbstractScalarSet) -> ConstraintIndex:
    """
    Add the scalar constraint obtained by moving the constant term of f
    to s.

    For example 2x + 3 <= 5 is added as 2x <= 2.
    """
    f, s = normalize_scalar_constraint(f, s)
    return model.add_constraint(f, s)
