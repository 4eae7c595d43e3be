"""
Constraint Sets

Sets restrict the output of a function. Scalar sets apply to functions
with one output; vector sets carry an explicit dimension.

Also provides the helpers used to move a function constant into a set
(shift_constant) and to read the scalar constant of a set.
"""

from dataclasses import dataclass
from typing import Any, Dict


@dataclass(frozen=True)
class AbstractSet:
    """Base class for constraint sets."""

    @property
    def dimension(self) -> int:
        return 1

    def to_canonical(self) -> Dict[str, Any]:
        data = {"type": type(self).__name__}
        data.update(self.__dict__)
        return data


@dataclass(frozen=True)
class AbstractScalarSet(AbstractSet):
    """Base class for sets of scalar functions."""


@dataclass(frozen=True)
class AbstractVectorSet(AbstractSet):
    """Base class for sets of vector functions."""


# ---------------------------------------------------------------------------
# Scalar sets
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class GreaterThan(AbstractScalarSet):
    """{x : x >= lower}"""
    lower: float = 0.0


@dataclass(frozen=True)
class LessThan(AbstractScalarSet):
    """{x : x <= upper}"""
    upper: float = 0.0


@dataclass(frozen=True)
class EqualTo(AbstractScalarSet):
    """{x : x == value}"""
    value: float = 0.0


@dataclass(frozen=True)
class Interval(AbstractScalarSet):
    """{x : lower <= x <= upper}"""
    lower: float = 0.0
    upper: float = 0.0

    def __post_init__(self):
        if self.lower > self.upper:
            raise ValueError(
                f"Invalid interval: [{self.lower}, {self.upper}]"
            )


@dataclass(frozen=True)
class Integer(AbstractScalarSet):
    """The integers."""


@dataclass(frozen=True)
class ZeroOne(AbstractScalarSet):
    """{0, 1}"""


# ---------------------------------------------------------------------------
# Vector sets
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class _DimensionSet(AbstractVectorSet):
    size: int = 1

    def __post_init__(self):
        if self.size < 0:
            raise ValueError(f"Dimension must be nonnegative, got {self.size}")

    @property
    def dimension(self) -> int:
        return self.size


@dataclass(frozen=True)
class Nonnegatives(_DimensionSet):
    """{x in R^n : x >= 0}"""


@dataclass(frozen=True)
class Nonpositives(_DimensionSet):
    """{x in R^n : x <= 0}"""


@dataclass(frozen=True)
class Zeros(_DimensionSet):
    """{0} in R^n"""


@dataclass(frozen=True)
class SecondOrderCone(_DimensionSet):
    """
    {(t, x) in R^n : t >= ||x||_2}

    The first component is the epigraph variable.
    """


@dataclass(frozen=True)
class RotatedSecondOrderCone(_DimensionSet):
    """{(t, u, x) in R^n : 2 t u >= ||x||_2^2, t >= 0, u >= 0}"""


@dataclass(frozen=True)
class PositiveSemidefiniteConeTriangle(AbstractVectorSet):
    """
    Symmetric positive semidefinite matrices of order side_dimension,
    vectorized by the upper triangle, column by column:
    (1,1), (1,2), (2,2), (1,3), (2,3), (3,3), ...
    """
    side_dimension: int = 1

    def __post_init__(self):
        if self.side_dimension < 0:
            raise ValueError(
                f"Side dimension must be nonnegative, got {self.side_dimension}"
            )

    @property
    def dimension(self) -> int:
        n = self.side_dimension
        return n * (n + 1) // 2


def triangle_index(i: int, j: int) -> int:
    """Position of matrix entry (i, j) in the upper-triangle vectorization."""
    if i > j:
        i, j = j, i
    return j * (j + 1) // 2 + i


# Scalar sets with a single constant
_CONSTANT_FIELD = {
    GreaterThan: "lower",
    LessThan: "upper",
    EqualTo: "value",
}


def set_constant(s: AbstractScalarSet) -> float:
    """Return the constant of a one-sided or equality set."""
    field_name = _CONSTANT_FIELD.get(type(s))
    if field_name is None:
        raise ValueError(f"{type(s).__name__} has no single constant")
    return getattr(s, field_name)


def shift_constant(s: AbstractScalarSet, offset: float) -> AbstractScalarSet:
    """
    Return the set shifted by offset.

    For a constant c in the set, x in s <=> x + offset in
    shift_constant(s, offset).
    """
    if isinstance(s, Interval):
        return Interval(s.lower + offset, s.upper + offset)
    field_name = _CONSTANT_FIELD.get(type(s))
    if field_name is None:
        raise ValueError(f"Cannot shift the constant of {type(s).__name__}")
    return type(s)(getattr(s, field_name) + offset)


def dimension(s: AbstractSet) -> int:
    return s.dimension
