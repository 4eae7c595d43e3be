"""
Mock Optimizer

A Model that only accepts a configurable set of node types and returns
scripted results. It stands in for a real solver when testing the
bridging layer:

    mock = MockOptimizer(supported=[constraint_node(ScalarAffineFunction, GreaterThan)])
    mock.set_mock_optimize(lambda m: m.mock_optimize([4, 5, 1]))
    ...
    optimizer.optimize()

Constraint primal values are evaluated from the variable primal values;
constraint duals must be given explicitly.
"""

import logging
from collections import deque
from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Sequence, Union
import numpy as np

from ..attributes import (
    AbstractAttribute,
    ConstraintDual,
    ConstraintPrimal,
    DualStatus,
    ObjectiveBound,
    ObjectiveFunction,
    ObjectiveValue,
    PrimalStatus,
    ResultStatusCode,
    TerminationStatus,
    TerminationStatusCode,
    VariablePrimal,
)
from ..errors import InvalidIndex, UnsupportedAttribute, UnsupportedConstraint, UnsupportedError
from ..functions import AbstractFunction, SingleVariable, VectorOfVariables
from ..indices import ConstraintIndex, VariableIndex
from ..node_types import NodeKind, NodeType, node_type_of, objective_node, variable_node
from ..sets import AbstractSet
from .model import Model, split_set_args

_LOGGER = logging.getLogger(__name__)


OptimizeFn = Callable[['MockOptimizer'], None]


class MockOptimizer(Model):
    """
    In-memory optimizer with restricted capabilities and scripted results.

    Args:
        supported: Node types accepted directly (None accepts everything)
        eval_objective_value: Compute ObjectiveValue from variable primals
    """

    def __init__(self, supported: Optional[Iterable[NodeType]] = None,
                 eval_objective_value: bool = True):
        self._supported = None if supported is None else set(supported)
        self.eval_objective_value = eval_objective_value
        self._optimize_fns: deque = deque()
        super().__init__()

    def _reset(self) -> None:
        super()._reset()
        self._reset_results()

    def _reset_results(self) -> None:
        self._primal: Dict[VariableIndex, float] = {}
        self._duals: Dict[ConstraintIndex, Any] = {}
        self._termination = TerminationStatusCode.OPTIMIZE_NOT_CALLED
        self._primal_status = ResultStatusCode.NO_SOLUTION
        self._dual_status = ResultStatusCode.NO_SOLUTION
        self._objective_value: Optional[float] = None
        self._objective_bound: Optional[float] = None

    # ------------------------------------------------------------------
    # Capabilities
    # ------------------------------------------------------------------

    def supports(self, node: NodeType) -> bool:
        if self._supported is None:
            return node.kind != NodeKind.VARIABLE
        return node in self._supported

    def set_supported(self, nodes: Iterable[NodeType]) -> None:
        """Replace the accepted node types."""
        self._supported = set(nodes)

    def allow(self, node: NodeType) -> None:
        if self._supported is None:
            self._supported = set()
        self._supported.add(node)

    def disallow(self, node: NodeType) -> None:
        if self._supported is not None:
            self._supported.discard(node)

    def add_constraint(self, f: AbstractFunction, s: AbstractSet) -> ConstraintIndex:
        node = node_type_of(f, s)
        if not self.supports(node):
            raise UnsupportedConstraint(node, f"{node} is not supported by the mock")
        return super().add_constraint(f, s)

    def _check_variable_node(self, s: AbstractSet) -> None:
        node = variable_node(type(s))
        if not self.supports(node):
            raise UnsupportedError(node, f"{node} is not supported by the mock")

    def add_constrained_variables(self, s: AbstractSet):
        self._check_variable_node(s)
        vis = self.add_variables(s.dimension)
        return vis, super().add_constraint(VectorOfVariables(vis), s)

    def add_constrained_variable(self, s: AbstractSet):
        self._check_variable_node(s)
        vi = self.add_variable()
        return vi, super().add_constraint(SingleVariable(vi), s)

    def set(self, attr: AbstractAttribute, *args) -> None:
        index, value = split_set_args(args)
        if isinstance(attr, VariablePrimal):
            if not self.is_valid(index):
                raise InvalidIndex(index)
            self._primal[index] = float(value)
        elif isinstance(attr, ConstraintDual):
            if not self.is_valid(index):
                raise InvalidIndex(index)
            self._duals[index] = value
        elif isinstance(attr, ObjectiveValue):
            self._objective_value = value
        elif isinstance(attr, ObjectiveBound):
            self._objective_bound = value
        elif isinstance(attr, TerminationStatus):
            self._termination = TerminationStatusCode(value)
        elif isinstance(attr, PrimalStatus):
            self._primal_status = ResultStatusCode(value)
        elif isinstance(attr, DualStatus):
            self._dual_status = ResultStatusCode(value)
        else:
            if isinstance(attr, ObjectiveFunction):
                node = objective_node(type(value))
                if not self.supports(node):
                    raise UnsupportedAttribute(attr, f"{node} is not supported by the mock")
            super().set(attr, *args)

    # ------------------------------------------------------------------
    # Results
    # ------------------------------------------------------------------

    def set_mock_optimize(self, *fns: OptimizeFn) -> None:
        """Queue callbacks; each optimize() call consumes the next one."""
        self._optimize_fns = deque(fns)

    def mock_optimize(
        self,
        primal: Union[Sequence[float], Mapping[VariableIndex, float]],
        duals: Optional[Mapping[ConstraintIndex, Any]] = None,
        termination: TerminationStatusCode = TerminationStatusCode.OPTIMAL,
        objective_bound: Optional[float] = None,
    ) -> None:
        """
        Install a result.

        Args:
            primal: Variable values, either in variable creation order or by index
            duals: Constraint duals by index
            termination: Termination status to report
            objective_bound: Objective bound to report
        """
        self._reset_results()
        variables = list(self._variables)
        if isinstance(primal, Mapping):
            values = dict(primal)
        else:
            if len(primal) != len(variables):
                raise ValueError(
                    f"Expected {len(variables)} primal values, got {len(primal)}"
                )
            values = dict(zip(variables, primal))
        for vi, v in values.items():
            if vi not in self._variables:
                raise InvalidIndex(vi)
            self._primal[vi] = float(v)
        for ci, d in (duals or {}).items():
            if ci not in self._constraints:
                raise InvalidIndex(ci)
            self._duals[ci] = d
        self._termination = termination
        self._primal_status = ResultStatusCode.FEASIBLE_POINT
        if duals:
            self._dual_status = ResultStatusCode.FEASIBLE_POINT
        self._objective_bound = objective_bound

    def optimize(self) -> None:
        if self._optimize_fns:
            fn = self._optimize_fns.popleft()
            fn(self)
        else:
            self._termination = TerminationStatusCode.OPTIMAL
        _LOGGER.debug("Mock optimize finished: %s", self._termination.value)

    def get(self, attr: AbstractAttribute, index=None) -> Any:
        if isinstance(index, list):
            return [self.get(attr, i) for i in index]
        if isinstance(attr, VariablePrimal):
            if not self.is_valid(index):
                raise InvalidIndex(index)
            if index not in self._primal:
                raise UnsupportedAttribute(attr, f"No primal value for {index!r}")
            return self._primal[index]
        if isinstance(attr, ConstraintPrimal):
            f, _ = self._constraint_data(index)
            return f.evaluate(self._primal_values())
        if isinstance(attr, ConstraintDual):
            self._constraint_data(index)
            if index not in self._duals:
                raise UnsupportedAttribute(attr, f"No dual value for {index!r}")
            d = self._duals[index]
            return np.asarray(d, dtype=np.float64) if np.ndim(d) else float(d)
        if isinstance(attr, ObjectiveValue):
            if self._objective_value is not None or not self.eval_objective_value:
                return self._objective_value
            return self._objective.evaluate(self._primal_values())
        if isinstance(attr, ObjectiveBound):
            return self._objective_bound
        if isinstance(attr, TerminationStatus):
            return self._termination
        if isinstance(attr, PrimalStatus):
            return self._primal_status
        if isinstance(attr, DualStatus):
            return self._dual_status
        return super().get(attr, index)

    def _constraint_data(self, ci: ConstraintIndex):
        if ci not in self._constraints:
            raise InvalidIndex(ci)
        return self._constraints[ci]

    def _primal_values(self) -> Dict[VariableIndex, float]:
        missing = [vi for vi in self._variables if vi not in self._primal]
        if missing and self._primal_status == ResultStatusCode.NO_SOLUTION:
            raise UnsupportedAttribute(VariablePrimal(), "No primal solution available")
        return self._primal

    def empty(self) -> None:
        super().empty()
        self._optimize_fns = deque()
