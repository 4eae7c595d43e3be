"""
Constraint and Objective Modifications

A modification describes an in-place change of a function: a new
constant, or a new coefficient for one variable. FunctionChange and
SetChange replace the whole function or set and are what setting the
ConstraintFunction / ConstraintSet attributes is translated into.
"""

from dataclasses import dataclass
from typing import Tuple

from .functions import (
    AbstractFunction,
    ScalarAffineFunction,
    ScalarAffineTerm,
    ScalarQuadraticFunction,
    VectorAffineFunction,
    VectorAffineTerm,
)
from .indices import VariableIndex
from .sets import AbstractSet


class AbstractModification:
    """Base class for modifications."""


@dataclass(frozen=True)
class ScalarConstantChange(AbstractModification):
    """Set the constant of a scalar function."""
    new_constant: float


@dataclass(frozen=True)
class ScalarCoefficientChange(AbstractModification):
    """Set the coefficient of variable in a scalar function."""
    variable: VariableIndex
    new_coefficient: float


@dataclass(frozen=True)
class VectorConstantChange(AbstractModification):
    """Set the constants of a vector function."""
    new_constants: Tuple[float, ...]

    def __post_init__(self):
        object.__setattr__(
            self, "new_constants", tuple(float(c) for c in self.new_constants)
        )


@dataclass(frozen=True)
class VectorCoefficientChange(AbstractModification):
    """
    Set the coefficients of variable in some rows of a vector function.

    Attributes:
        variable: The variable whose coefficients change
        new_coefficients: (output_index, coefficient) pairs
    """
    variable: VariableIndex
    new_coefficients: Tuple[Tuple[int, float], ...]

    def __post_init__(self):
        object.__setattr__(
            self, "new_coefficients",
            tuple((int(i), float(c)) for i, c in self.new_coefficients)
        )


@dataclass(frozen=True)
class FunctionChange(AbstractModification):
    """Replace the function of a constraint."""
    new_function: AbstractFunction


@dataclass(frozen=True)
class SetChange(AbstractModification):
    """Replace the set of a constraint."""
    new_set: AbstractSet


def apply_modification(f: AbstractFunction, change: AbstractModification) -> AbstractFunction:
    """
    Return the function obtained by applying change to f.

    Raises:
        ValueError: if change does not apply to the type of f
    """
    if isinstance(change, FunctionChange):
        if type(change.new_function) is not type(f):
            raise ValueError(
                f"Cannot replace a {type(f).__name__} by a "
                f"{type(change.new_function).__name__}"
            )
        return change.new_function

    if isinstance(f, ScalarAffineFunction):
        if isinstance(change, ScalarConstantChange):
            return ScalarAffineFunction(f.terms, change.new_constant)
        if isinstance(change, ScalarCoefficientChange):
            return ScalarAffineFunction(
                _set_coefficient(f.terms, change.variable, change.new_coefficient),
                f.constant,
            )

    if isinstance(f, ScalarQuadraticFunction):
        if isinstance(change, ScalarConstantChange):
            return ScalarQuadraticFunction(
                f.affine_terms, f.quadratic_terms, change.new_constant
            )
        if isinstance(change, ScalarCoefficientChange):
            return ScalarQuadraticFunction(
                _set_coefficient(f.affine_terms, change.variable, change.new_coefficient),
                f.quadratic_terms,
                f.constant,
            )

    if isinstance(f, VectorAffineFunction):
        if isinstance(change, VectorConstantChange):
            if len(change.new_constants) != f.output_dimension:
                raise ValueError(
                    f"Expected {f.output_dimension} constants, "
                    f"got {len(change.new_constants)}"
                )
            return VectorAffineFunction(f.terms, change.new_constants)
        if isinstance(change, VectorCoefficientChange):
            rows = dict(change.new_coefficients)
            terms = [
                t for t in f.terms
                if not (t.scalar_term.variable == change.variable
                        and t.output_index in rows)
            ]
            terms.extend(
                VectorAffineTerm(i, ScalarAffineTerm(c, change.variable))
                for i, c in sorted(rows.items()) if c != 0.0
            )
            return VectorAffineFunction(terms, f.constants)

    raise ValueError(
        f"Cannot apply {type(change).__name__} to {type(f).__name__}"
    )


def _set_coefficient(terms, variable: VariableIndex, coefficient: float):
    kept = [t for t in terms if t.variable != variable]
    if coefficient != 0.0:
        kept.append(ScalarAffineTerm(coefficient, variable))
    return kept
