"""
Model Interface and In-Memory Model

ModelLike is the contract the bridging layer relies on. Every wrapped
model, including the bridging optimizer itself, satisfies it:

- supports(node): whether a node type is accepted directly
- add_variable / add_variables / add_constrained_variable(s)
- add_constraint(f, s), delete(index), modify(index, change)
- set / get of attributes, is_valid(index)

Model is a plain storage implementation accepting every node type.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..attributes import (
    AbstractAttribute,
    ConstraintFunction,
    ConstraintName,
    ConstraintSet,
    ListOfConstraintIndices,
    ListOfConstraintTypesPresent,
    ListOfVariableIndices,
    NumberOfConstraints,
    NumberOfVariables,
    ObjectiveFunction,
    ObjectiveFunctionType,
    ObjectiveSense,
    OptimizationSense,
    VariableName,
)
from ..errors import (
    DimensionMismatch,
    InvalidIndex,
    ModifyConstraintNotAllowed,
    UnsupportedAttribute,
)
from ..functions import (
    AbstractFunction,
    ScalarAffineFunction,
    SingleVariable,
    VectorOfVariables,
    is_variable_function,
    remove_variable,
)
from ..indices import ConstraintIndex, VariableIndex
from ..modifications import (
    AbstractModification,
    FunctionChange,
    SetChange,
    apply_modification,
)
from ..node_types import NodeType
from ..sets import AbstractSet, AbstractScalarSet

_LOGGER = logging.getLogger(__name__)


class ModelLike:
    """Abstract model. Subclasses implement storage and solving."""

    def supports(self, node: NodeType) -> bool:
        raise NotImplementedError

    def add_variable(self) -> VariableIndex:
        raise NotImplementedError

    def add_variables(self, n: int) -> List[VariableIndex]:
        return [self.add_variable() for _ in range(n)]

    def add_constrained_variable(self, s: AbstractScalarSet) -> Tuple[VariableIndex, ConstraintIndex]:
        vi = self.add_variable()
        return vi, self.add_constraint(SingleVariable(vi), s)

    def add_constrained_variables(self, s: AbstractSet) -> Tuple[List[VariableIndex], ConstraintIndex]:
        vis = self.add_variables(s.dimension)
        return vis, self.add_constraint(VectorOfVariables(vis), s)

    def add_constraint(self, f: AbstractFunction, s: AbstractSet) -> ConstraintIndex:
        raise NotImplementedError

    def add_constraints(self, functions: Sequence[AbstractFunction],
                        sets: Sequence[AbstractSet]) -> List[ConstraintIndex]:
        return [self.add_constraint(f, s) for f, s in zip(functions, sets)]

    def delete(self, index) -> None:
        raise NotImplementedError

    def modify(self, index, change: AbstractModification) -> None:
        raise NotImplementedError

    def supports_modify(self, index, change: AbstractModification) -> bool:
        raise NotImplementedError

    def get(self, attr: AbstractAttribute, index=None) -> Any:
        raise NotImplementedError

    def set(self, attr: AbstractAttribute, *args) -> None:
        raise NotImplementedError

    def is_valid(self, index) -> bool:
        raise NotImplementedError

    def optimize(self) -> None:
        raise NotImplementedError

    def is_empty(self) -> bool:
        raise NotImplementedError

    def empty(self) -> None:
        raise NotImplementedError


def split_set_args(args: tuple) -> Tuple[Optional[Any], Any]:
    """Split set(attr, [index,] value) arguments into (index, value)."""
    if len(args) == 1:
        return None, args[0]
    if len(args) == 2:
        return args[0], args[1]
    raise TypeError(f"set() takes an attribute, an optional index and a value, got {len(args)} arguments")


class Model(ModelLike):
    """
    In-memory model accepting every node type.

    Constraint indices are positive and unique across all types.
    Deleting a variable removes it from every affine and quadratic
    function and deletes the variable-function constraints using it.
    """

    def __init__(self):
        self._reset()

    def _reset(self) -> None:
        self._variables: Dict[VariableIndex, None] = {}
        self._variable_names: Dict[VariableIndex, str] = {}
        self._constraints: Dict[ConstraintIndex, Tuple[AbstractFunction, AbstractSet]] = {}
        self._constraint_names: Dict[ConstraintIndex, str] = {}
        self._next_variable = 1
        self._next_constraint = 1
        self._objective: AbstractFunction = ScalarAffineFunction((), 0.0)
        self._sense = OptimizationSense.FEASIBILITY_SENSE

    # ------------------------------------------------------------------
    # Capabilities
    # ------------------------------------------------------------------

    def supports(self, node: NodeType) -> bool:
        return True

    def supports_modify(self, index, change: AbstractModification) -> bool:
        if isinstance(index, ObjectiveFunction):
            f = self._objective
            if isinstance(change, (FunctionChange, SetChange)):
                return False
        else:
            if index not in self._constraints:
                return False
            f, s = self._constraints[index]
            if isinstance(change, SetChange):
                return (type(change.new_set) is index.set_type
                        and change.new_set.dimension == s.dimension)
        if isinstance(change, FunctionChange):
            return (type(change.new_function) is type(f)
                    and change.new_function.output_dimension == f.output_dimension)
        if is_variable_function(f):
            return False
        try:
            apply_modification(f, change)
        except ValueError:
            return False
        return True

    # ------------------------------------------------------------------
    # Variables
    # ------------------------------------------------------------------

    def add_variable(self) -> VariableIndex:
        vi = VariableIndex(self._next_variable)
        self._next_variable += 1
        self._variables[vi] = None
        return vi

    def _delete_variable(self, vi: VariableIndex) -> None:
        if vi not in self._variables:
            raise InvalidIndex(vi)
        for ci, (f, s) in list(self._constraints.items()):
            if vi not in f.referenced_variables():
                continue
            if is_variable_function(f):
                self._delete_constraint(ci)
            else:
                self._constraints[ci] = (remove_variable(f, vi), s)
        if vi in self._objective.referenced_variables():
            if isinstance(self._objective, SingleVariable):
                self._objective = ScalarAffineFunction((), 0.0)
            else:
                self._objective = remove_variable(self._objective, vi)
        del self._variables[vi]
        self._variable_names.pop(vi, None)

    # ------------------------------------------------------------------
    # Constraints
    # ------------------------------------------------------------------

    def add_constraint(self, f: AbstractFunction, s: AbstractSet) -> ConstraintIndex:
        if f.output_dimension != s.dimension:
            raise DimensionMismatch(f.output_dimension, s.dimension)
        for vi in f.referenced_variables():
            if vi not in self._variables:
                raise InvalidIndex(vi)
        ci = ConstraintIndex(type(f), type(s), self._next_constraint)
        self._next_constraint += 1
        self._constraints[ci] = (f, s)
        return ci

    def _delete_constraint(self, ci: ConstraintIndex) -> None:
        if ci not in self._constraints:
            raise InvalidIndex(ci)
        del self._constraints[ci]
        self._constraint_names.pop(ci, None)

    def delete(self, index) -> None:
        if isinstance(index, VariableIndex):
            self._delete_variable(index)
        else:
            self._delete_constraint(index)

    def modify(self, index, change: AbstractModification) -> None:
        if not isinstance(index, ObjectiveFunction) and index not in self._constraints:
            raise InvalidIndex(index)
        if not self.supports_modify(index, change):
            raise ModifyConstraintNotAllowed(
                f"Cannot apply {type(change).__name__} to {index!r}", index
            )
        if isinstance(index, ObjectiveFunction):
            self._objective = apply_modification(self._objective, change)
            return
        f, s = self._constraints[index]
        if isinstance(change, SetChange):
            self._constraints[index] = (f, change.new_set)
        else:
            self._constraints[index] = (apply_modification(f, change), s)

    def is_valid(self, index) -> bool:
        if isinstance(index, VariableIndex):
            return index in self._variables
        return index in self._constraints

    # ------------------------------------------------------------------
    # Attributes
    # ------------------------------------------------------------------

    def _constraint_types(self) -> List[Tuple[type, type]]:
        types: Dict[Tuple[type, type], None] = {}
        for ci in self._constraints:
            types[(ci.function_type, ci.set_type)] = None
        return list(types)

    def get(self, attr: AbstractAttribute, index=None) -> Any:
        if isinstance(index, list):
            return [self.get(attr, i) for i in index]

        if index is None:
            if isinstance(attr, NumberOfVariables):
                return len(self._variables)
            if isinstance(attr, ListOfVariableIndices):
                return list(self._variables)
            if isinstance(attr, NumberOfConstraints):
                return len(self.get(ListOfConstraintIndices(attr.function_type, attr.set_type)))
            if isinstance(attr, ListOfConstraintIndices):
                return [ci for ci in self._constraints
                        if ci.function_type is attr.function_type
                        and ci.set_type is attr.set_type]
            if isinstance(attr, ListOfConstraintTypesPresent):
                return self._constraint_types()
            if isinstance(attr, ObjectiveFunction):
                return self._objective
            if isinstance(attr, ObjectiveFunctionType):
                return type(self._objective)
            if isinstance(attr, ObjectiveSense):
                return self._sense
            raise UnsupportedAttribute(attr)

        if isinstance(index, VariableIndex):
            if index not in self._variables:
                raise InvalidIndex(index)
            if isinstance(attr, VariableName):
                return self._variable_names.get(index, "")
            raise UnsupportedAttribute(attr)

        if index not in self._constraints:
            raise InvalidIndex(index)
        if isinstance(attr, ConstraintFunction):
            return self._constraints[index][0]
        if isinstance(attr, ConstraintSet):
            return self._constraints[index][1]
        if isinstance(attr, ConstraintName):
            return self._constraint_names.get(index, "")
        raise UnsupportedAttribute(attr)

    def set(self, attr: AbstractAttribute, *args) -> None:
        index, value = split_set_args(args)

        if index is None:
            if isinstance(attr, ObjectiveFunction):
                for vi in value.referenced_variables():
                    if vi not in self._variables:
                        raise InvalidIndex(vi)
                self._objective = value
                return
            if isinstance(attr, ObjectiveSense):
                self._sense = OptimizationSense(value)
                return
            raise UnsupportedAttribute(attr)

        if isinstance(index, VariableIndex):
            if index not in self._variables:
                raise InvalidIndex(index)
            if isinstance(attr, VariableName):
                self._variable_names[index] = value
                return
            raise UnsupportedAttribute(attr)

        if isinstance(attr, ConstraintFunction):
            self.modify(index, FunctionChange(value))
            return
        if isinstance(attr, ConstraintSet):
            self.modify(index, SetChange(value))
            return
        if isinstance(attr, ConstraintName):
            if index not in self._constraints:
                raise InvalidIndex(index)
            self._constraint_names[index] = value
            return
        raise UnsupportedAttribute(attr)

    def optimize(self) -> None:
        raise NotImplementedError("Model only stores data; use an optimizer")

    def is_empty(self) -> bool:
        return not self._variables and not self._constraints

    def empty(self) -> None:
        self._reset()
