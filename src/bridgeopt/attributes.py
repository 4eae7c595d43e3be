"""
Attributes

Attributes are the keys of get/set. They come in three flavours:
- model attributes (no index)
- variable attributes (indexed by VariableIndex)
- constraint attributes (indexed by ConstraintIndex)

Result attributes (primal/dual values, objective value, statuses) are
set by optimize() and are read-only for callers.
"""

from dataclasses import dataclass
from enum import Enum


class OptimizationSense(Enum):
    """Direction of the objective."""
    MIN_SENSE = "min"
    MAX_SENSE = "max"
    FEASIBILITY_SENSE = "feasibility"


class TerminationStatusCode(Enum):
    """Why the solver stopped."""
    OPTIMIZE_NOT_CALLED = "optimize_not_called"
    OPTIMAL = "optimal"
    INFEASIBLE = "infeasible"
    DUAL_INFEASIBLE = "dual_infeasible"
    TIME_LIMIT = "time_limit"
    OTHER_ERROR = "other_error"


class ResultStatusCode(Enum):
    """Status of a primal or dual result."""
    NO_SOLUTION = "no_solution"
    FEASIBLE_POINT = "feasible_point"
    INFEASIBLE_POINT = "infeasible_point"
    INFEASIBILITY_CERTIFICATE = "infeasibility_certificate"


@dataclass(frozen=True)
class AbstractAttribute:
    """Base class for attributes."""

    @property
    def is_result(self) -> bool:
        return False

    def __str__(self) -> str:
        return type(self).__name__


@dataclass(frozen=True)
class AbstractModelAttribute(AbstractAttribute):
    pass


@dataclass(frozen=True)
class AbstractVariableAttribute(AbstractAttribute):
    pass


@dataclass(frozen=True)
class AbstractConstraintAttribute(AbstractAttribute):
    pass


class _ResultMixin:
    @property
    def is_result(self) -> bool:
        return True


# ---------------------------------------------------------------------------
# Model attributes
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class NumberOfVariables(AbstractModelAttribute):
    pass


@dataclass(frozen=True)
class ListOfVariableIndices(AbstractModelAttribute):
    pass


@dataclass(frozen=True)
class NumberOfConstraints(AbstractModelAttribute):
    function_type: type = None
    set_type: type = None


@dataclass(frozen=True)
class ListOfConstraintIndices(AbstractModelAttribute):
    function_type: type = None
    set_type: type = None


@dataclass(frozen=True)
class ListOfConstraintTypesPresent(AbstractModelAttribute):
    pass


@dataclass(frozen=True)
class ObjectiveFunction(AbstractModelAttribute):
    pass


@dataclass(frozen=True)
class ObjectiveFunctionType(AbstractModelAttribute):
    pass


@dataclass(frozen=True)
class ObjectiveSense(AbstractModelAttribute):
    pass


@dataclass(frozen=True)
class ObjectiveValue(_ResultMixin, AbstractModelAttribute):
    pass


@dataclass(frozen=True)
class ObjectiveBound(_ResultMixin, AbstractModelAttribute):
    pass


@dataclass(frozen=True)
class TerminationStatus(_ResultMixin, AbstractModelAttribute):
    pass


@dataclass(frozen=True)
class PrimalStatus(_ResultMixin, AbstractModelAttribute):
    pass


@dataclass(frozen=True)
class DualStatus(_ResultMixin, AbstractModelAttribute):
    pass


# ---------------------------------------------------------------------------
# Variable attributes
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class VariablePrimal(_ResultMixin, AbstractVariableAttribute):
    pass


@dataclass(frozen=True)
class VariableName(AbstractVariableAttribute):
    pass


# ---------------------------------------------------------------------------
# Constraint attributes
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ConstraintFunction(AbstractConstraintAttribute):
    pass


@dataclass(frozen=True)
class ConstraintSet(AbstractConstraintAttribute):
    pass


@dataclass(frozen=True)
class ConstraintPrimal(_ResultMixin, AbstractConstraintAttribute):
    pass


@dataclass(frozen=True)
class ConstraintDual(_ResultMixin, AbstractConstraintAttribute):
    pass


@dataclass(frozen=True)
class ConstraintName(AbstractConstraintAttribute):
    pass
