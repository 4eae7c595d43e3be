"""
Bridging Optimizer

Wraps a model and accepts every node type the registered bridges can
reduce to what the model supports:

    optimizer = BridgeOptimizer(model, default_registry())
    ci = optimizer.add_constraint(f, Interval(1.0, 2.0))

Node types the model supports are passed through. Others are replaced by
the cheapest chain of bridges found by the planner. Each bridged
constraint gets a negative index and a record holding the root bridge;
everything the chain creates underneath is internal and hidden.

Additions are transactional: if any step of building a chain fails, the
indices created so far are deleted in reverse order and the error is
re-raised, leaving the model as it was.
"""

import logging
from contextlib import contextmanager
from typing import Any, List, Optional, Sequence, Tuple, Union

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
    ObjectiveBound,
    ObjectiveFunction,
    ObjectiveFunctionType,
    ObjectiveSense,
    ObjectiveValue,
)
from ..costs import CostModel
from ..errors import (
    AddConstraintNotAllowed,
    DeleteNotAllowed,
    DimensionMismatch,
    InvalidIndex,
    ModifyConstraintNotAllowed,
    ModifyObjectiveNotAllowed,
    NotAllowedError,
    SetAttributeNotAllowed,
    UnsupportedAttribute,
)
from ..functions import (
    AbstractFunction,
    SingleVariable,
    VectorOfVariables,
    is_variable_function,
)
from ..indices import ConstraintIndex, VariableIndex
from ..modifications import (
    AbstractModification,
    FunctionChange,
    SetChange,
    apply_modification,
)
from ..node_types import (
    NodeType,
    constraint_node,
    node_type_of,
    objective_node,
    variable_node,
)
from ..sets import AbstractScalarSet, AbstractSet
from ..utilities.model import ModelLike, split_set_args
from .bridge import Bridge, Plan
from .graph import BridgeGraph, PlanNode
from .registry import BridgeRegistry
from .store import BridgedStore, ConstraintRecord

_LOGGER = logging.getLogger(__name__)


Index = Union[VariableIndex, ConstraintIndex]

_OBJECTIVE_ATTRIBUTES = (ObjectiveFunction, ObjectiveFunctionType, ObjectiveValue, ObjectiveBound)


class InnerModel:
    """
    Handle given to bridges for the layer beneath them.

    Everything added through it is internal: hidden from listings,
    protected from caller mutation, and itself bridged when the model
    does not support it.
    """

    def __init__(self, optimizer: 'BridgeOptimizer'):
        self._optimizer = optimizer

    def add_variable(self) -> VariableIndex:
        return self._optimizer._add_variable(internal=True)

    def add_variables(self, n: int) -> List[VariableIndex]:
        return [self.add_variable() for _ in range(n)]

    def add_constrained_variable(self, s: AbstractScalarSet) -> Tuple[VariableIndex, ConstraintIndex]:
        vis, ci = self._optimizer._add_constrained_variables(s, internal=True)
        return vis[0], ci

    def add_constrained_variables(self, s: AbstractSet) -> Tuple[List[VariableIndex], ConstraintIndex]:
        return self._optimizer._add_constrained_variables(s, internal=True)

    def add_constraint(self, f: AbstractFunction, s: AbstractSet) -> ConstraintIndex:
        return self._optimizer._add_constraint(f, s, internal=True)

    def delete(self, index: Index) -> None:
        self._optimizer._delete(index, internal=True)

    def is_valid(self, index: Index) -> bool:
        return self._optimizer.is_valid(index)

    def get(self, attr: AbstractAttribute, index=None) -> Any:
        return self._optimizer.get(attr, index)

    def set_objective(self, f: AbstractFunction) -> Optional[Bridge]:
        """Set the inner objective; returns the bridge used, if any."""
        return self._optimizer._build_objective(f)

    def get_objective(self, attr: AbstractAttribute, bridge: Optional[Bridge]) -> Any:
        """Objective attribute through bridge, or from the model when None."""
        if bridge is None:
            return self._optimizer.model.get(attr)
        return bridge.get(self, attr)


class BridgeOptimizer(ModelLike):
    """
    Model wrapper that reformulates unsupported node types.

    Args:
        model: Underlying model
        registry: Bridge kinds to use (an empty registry if None)
        cost_model: Cost model for a newly created registry
    """

    def __init__(self, model: ModelLike, registry: Optional[BridgeRegistry] = None,
                 cost_model: Optional[CostModel] = None):
        self.model = model
        self.registry = registry if registry is not None else BridgeRegistry(cost_model)
        self.graph = BridgeGraph(self.registry, model.supports)
        self.store = BridgedStore()
        self._inner = InnerModel(self)
        self._journal: Optional[List[Index]] = None
        self._objective_bridge: Optional[Bridge] = None

    # ------------------------------------------------------------------
    # Capabilities
    # ------------------------------------------------------------------

    def supports(self, node: NodeType) -> bool:
        return self.graph.is_supported(node)

    def supports_constraint(self, function_type: type, set_type: type) -> bool:
        return self.supports(constraint_node(function_type, set_type))

    def supports_add_constrained_variables(self, set_type: type) -> bool:
        return self.supports(variable_node(set_type))

    def supports_objective(self, function_type: type) -> bool:
        return self.supports(objective_node(function_type))

    def supports_modify(self, index, change: AbstractModification) -> bool:
        if isinstance(index, ObjectiveFunction):
            return self._objective_bridge is not None or self.model.supports_modify(index, change)
        try:
            self._check_mutable(index)
            self._check_replacement(index, change)
            self._validate_plan(self._plan_modification(index, change))
        except (NotAllowedError, DimensionMismatch):
            return False
        return True

    def is_bridged(self, node: NodeType) -> bool:
        return self.graph.is_bridged(node)

    def plan(self, node: NodeType) -> PlanNode:
        return self.graph.plan(node)

    def add_bridge(self, bridge_class: type, cost=None) -> None:
        """Register a bridge kind; the planner picks it up on the next query."""
        self.registry.register(bridge_class, cost)

    def remove_bridge(self, bridge_class: type) -> None:
        self.registry.remove(bridge_class)

    def notify_capabilities_changed(self) -> None:
        """Call after the model's supported node types change."""
        self.graph.invalidate()

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------

    @contextmanager
    def _transaction(self):
        if self._journal is not None:
            yield
            return
        self._journal = []
        try:
            yield
        except Exception:
            journal, self._journal = self._journal, None
            self._rollback(journal)
            raise
        self._journal = None

    def _rollback(self, journal: List[Index]) -> None:
        for index in reversed(journal):
            if isinstance(index, ConstraintIndex) and index.is_bridged:
                self.store.remove(index)
            elif self.model.is_valid(index):
                self.model.delete(index)
            self.store.unmark_internal(index)
        _LOGGER.debug("Rolled back %d indices", len(journal))

    def _created(self, index: Index, internal: bool) -> None:
        if self._journal is not None:
            self._journal.append(index)
        if internal:
            self.store.mark_internal(index)

    # ------------------------------------------------------------------
    # Variables
    # ------------------------------------------------------------------

    def _add_variable(self, internal: bool) -> VariableIndex:
        vi = self.model.add_variable()
        self._created(vi, internal)
        return vi

    def add_variable(self) -> VariableIndex:
        return self._add_variable(internal=False)

    def _add_constrained_variables(self, s: AbstractSet,
                                   internal: bool) -> Tuple[List[VariableIndex], ConstraintIndex]:
        node = variable_node(type(s))
        entry = self.graph.require(node)
        scalar = isinstance(s, AbstractScalarSet)
        with self._transaction():
            if entry.is_sink:
                if scalar:
                    vi, ci = self.model.add_constrained_variable(s)
                    vis = [vi]
                else:
                    vis, ci = self.model.add_constrained_variables(s)
                for vi in vis:
                    self._created(vi, internal)
            else:
                bridge = entry.kind.bridge_class.bridge_constrained_variables(self._inner, s)
                vis = list(bridge.variables)
                if not internal:
                    for vi in vis:
                        self.store.unmark_internal(vi)
                function_type = SingleVariable if scalar else VectorOfVariables
                ci = self.store.new_index(function_type, type(s))
                self.store.add(ConstraintRecord(ci, node, bridge))
                _LOGGER.debug("Bridged %s with %s as %r", node, bridge.kind_name(), ci)
            self._created(ci, internal)
        return vis, ci

    def add_constrained_variable(self, s: AbstractScalarSet) -> Tuple[VariableIndex, ConstraintIndex]:
        if not isinstance(s, AbstractScalarSet):
            raise ValueError(f"{type(s).__name__} is not a scalar set")
        vis, ci = self._add_constrained_variables(s, internal=False)
        return vis[0], ci

    def add_constrained_variables(self, s: AbstractSet) -> Tuple[List[VariableIndex], ConstraintIndex]:
        if isinstance(s, AbstractScalarSet):
            raise ValueError(
                f"{type(s).__name__} is a scalar set; use add_constrained_variable"
            )
        return self._add_constrained_variables(s, internal=False)

    # ------------------------------------------------------------------
    # Constraints
    # ------------------------------------------------------------------

    def _add_constraint(self, f: AbstractFunction, s: AbstractSet, internal: bool) -> ConstraintIndex:
        if f.output_dimension != s.dimension:
            raise DimensionMismatch(f.output_dimension, s.dimension)
        node = node_type_of(f, s)
        entry = self.graph.require(node)
        with self._transaction():
            if entry.is_sink:
                ci = self.model.add_constraint(f, s)
            else:
                bridge = entry.kind.bridge_class.bridge_constraint(self._inner, f, s)
                ci = self.store.new_index(type(f), type(s))
                self.store.add(ConstraintRecord(ci, node, bridge))
                _LOGGER.debug("Bridged %s with %s as %r", node, bridge.kind_name(), ci)
            self._created(ci, internal)
        return ci

    def add_constraint(self, f: AbstractFunction, s: AbstractSet) -> ConstraintIndex:
        """
        Add the constraint f in s.

        Raises:
            UnsupportedConstraint: if no bridge chain reaches supported
                node types; nothing is modified
            DimensionMismatch: if f and s have different dimensions
            AddConstraintNotAllowed: if f uses a variable owned by a bridge
        """
        for vi in f.referenced_variables():
            if self.store.is_internal(vi):
                raise AddConstraintNotAllowed(f"{vi!r} is owned by a bridge", vi)
        return self._add_constraint(f, s, internal=False)

    def add_constraints(self, functions: Sequence[AbstractFunction],
                        sets: Sequence[AbstractSet]) -> List[ConstraintIndex]:
        if len(functions) != len(sets):
            raise ValueError(f"Got {len(functions)} functions and {len(sets)} sets")
        return [self.add_constraint(f, s) for f, s in zip(functions, sets)]

    # ------------------------------------------------------------------
    # Deletion
    # ------------------------------------------------------------------

    def delete(self, index: Union[Index, Sequence[Index]]) -> None:
        if isinstance(index, (list, tuple)):
            for i in index:
                self.delete(i)
            return
        self._delete(index, internal=False)

    def _delete(self, index: Index, internal: bool) -> None:
        if not internal and self.store.is_internal(index):
            raise DeleteNotAllowed(f"{index!r} is owned by a bridge", index)
        if isinstance(index, VariableIndex):
            if not self.model.is_valid(index):
                raise InvalidIndex(index)
            if not internal:
                self._check_unreferenced(index)
            self.model.delete(index)
        elif index.is_bridged:
            record = self.store.get(index)
            self._check_chain(record.bridge)
            record.bridge.delete(self._inner)
            self.store.remove(index)
            _LOGGER.debug("Deleted bridged constraint %r", index)
        else:
            if not self.model.is_valid(index):
                raise InvalidIndex(index)
            self.model.delete(index)
        self.store.unmark_internal(index)

    def _check_chain(self, bridge: Bridge) -> None:
        for ci in bridge.constraint_indices():
            if not self.is_valid(ci):
                raise InvalidIndex(ci)
            if ci.is_bridged:
                self._check_chain(self.store.get(ci).bridge)
        for vi in bridge.variable_indices():
            if not self.model.is_valid(vi):
                raise InvalidIndex(vi)

    def _check_unreferenced(self, vi: VariableIndex) -> None:
        """A variable cannot be deleted while a bridge stores it in a variable function."""
        for record in self.store:
            if not is_variable_function(record.index.function_type):
                continue
            f = record.bridge.get(self._inner, ConstraintFunction())
            if vi in f.referenced_variables():
                raise DeleteNotAllowed(
                    f"{vi!r} is used by bridged constraint {record.index!r}", vi
                )
        bridge = self._objective_bridge
        if (bridge is not None and is_variable_function(bridge.function_type)
                and vi in self.get(ObjectiveFunction()).referenced_variables()):
            raise DeleteNotAllowed(f"{vi!r} is the bridged objective", vi)

    # ------------------------------------------------------------------
    # Modification
    # ------------------------------------------------------------------

    def _check_mutable(self, index: Index) -> None:
        if self.store.is_internal(index):
            raise ModifyConstraintNotAllowed(f"{index!r} is owned by a bridge", index)
        if not self.is_valid(index):
            raise InvalidIndex(index)

    def _check_replacement(self, ci: ConstraintIndex, change: AbstractModification) -> None:
        if isinstance(change, FunctionChange):
            f = change.new_function
            if type(f) is not ci.function_type:
                raise ModifyConstraintNotAllowed(
                    f"Cannot replace the function of {ci!r} by a {type(f).__name__}", ci
                )
            dim = self.get(ConstraintSet(), ci).dimension
            if f.output_dimension != dim:
                raise DimensionMismatch(f.output_dimension, dim)
        elif isinstance(change, SetChange):
            if type(change.new_set) is not ci.set_type:
                raise ModifyConstraintNotAllowed(
                    f"Cannot replace the set of {ci!r} by a {type(change.new_set).__name__}", ci
                )

    def _plan_modification(self, ci: ConstraintIndex, change: AbstractModification,
                           commits: Optional[list] = None) -> Plan:
        """Native (index, change) pairs realizing change; collects bridges to commit."""
        if not ci.is_bridged:
            return [(ci, change)]
        bridge = self.store.get(ci).bridge
        plan: Plan = []
        for sub_ci, sub_change in bridge.modification_plan(self._inner, change):
            plan.extend(self._plan_modification(sub_ci, sub_change, commits))
        if commits is not None:
            commits.append((bridge, change))
        return plan

    def _validate_plan(self, plan: Plan) -> None:
        for ci, change in plan:
            if not self.model.supports_modify(ci, change):
                raise ModifyConstraintNotAllowed(
                    f"Cannot apply {type(change).__name__} to {ci!r}", ci
                )

    def modify(self, index, change: AbstractModification) -> None:
        """
        Modify a constraint or the objective.

        The change is translated through the bridge chain and checked
        against the model before anything is applied.

        Raises:
            ModifyConstraintNotAllowed: if some link cannot express the change
        """
        if isinstance(index, ObjectiveFunction):
            self._modify_objective(change)
            return
        self._check_mutable(index)
        self._check_replacement(index, change)
        commits: list = []
        plan = self._plan_modification(index, change, commits)
        self._validate_plan(plan)
        for ci, ch in plan:
            self.model.modify(ci, ch)
        for bridge, ch in commits:
            bridge.commit_modification(ch)

    def _modify_objective(self, change: AbstractModification) -> None:
        if self._objective_bridge is None:
            if not self.model.supports_modify(ObjectiveFunction(), change):
                raise ModifyObjectiveNotAllowed(
                    f"Cannot apply {type(change).__name__} to the objective"
                )
            self.model.modify(ObjectiveFunction(), change)
            return
        try:
            f = apply_modification(self.get(ObjectiveFunction()), change)
        except ValueError as e:
            raise ModifyObjectiveNotAllowed(str(e)) from e
        self._set_objective(f)

    # ------------------------------------------------------------------
    # Objective
    # ------------------------------------------------------------------

    def _build_objective(self, f: AbstractFunction) -> Optional[Bridge]:
        entry = self.graph.require(objective_node(type(f)))
        if entry.is_sink:
            self.model.set(ObjectiveFunction(), f)
            return None
        return entry.kind.bridge_class.bridge_objective(
            self._inner, f, self.model.get(ObjectiveSense())
        )

    def _set_objective(self, f: AbstractFunction) -> None:
        old = self._objective_bridge
        with self._transaction():
            new = self._build_objective(f)
        self._objective_bridge = new
        if old is not None:
            old.delete(self._inner)
        if new is not None:
            _LOGGER.debug("Bridged objective %s with %s", type(f).__name__, new.kind_name())

    def _set_sense(self, sense) -> None:
        bridge = self._objective_bridge
        if bridge is None or not bridge.depends_on_sense():
            self.model.set(ObjectiveSense(), sense)
            return
        f = bridge.get(self._inner, ObjectiveFunction())
        old_sense = self.model.get(ObjectiveSense())
        # The rebuilt bridge reads the new sense from the model
        self.model.set(ObjectiveSense(), sense)
        try:
            self._set_objective(f)
        except Exception:
            self.model.set(ObjectiveSense(), old_sense)
            raise

    def objective_chain(self) -> List[Bridge]:
        """Bridges of the objective, outer to inner."""
        out: List[Bridge] = []
        bridge = self._objective_bridge
        while bridge is not None:
            out.append(bridge)
            bridge = bridge.child
        return out

    # ------------------------------------------------------------------
    # Attributes
    # ------------------------------------------------------------------

    def _get_model_attribute(self, attr: AbstractAttribute) -> Any:
        if isinstance(attr, ListOfVariableIndices):
            return [vi for vi in self.model.get(attr) if not self.store.is_internal(vi)]
        if isinstance(attr, NumberOfVariables):
            return len(self.get(ListOfVariableIndices()))
        if isinstance(attr, ListOfConstraintIndices):
            native = [ci for ci in self.model.get(attr) if not self.store.is_internal(ci)]
            bridged = [r.index for r in self.store.records_of_type(attr.function_type, attr.set_type)]
            return native + bridged
        if isinstance(attr, NumberOfConstraints):
            return len(self.get(ListOfConstraintIndices(attr.function_type, attr.set_type)))
        if isinstance(attr, ListOfConstraintTypesPresent):
            types = {}
            for ftype, stype in self.model.get(attr):
                if self.get(NumberOfConstraints(ftype, stype)) > 0:
                    types[(ftype, stype)] = None
            for record in self.store:
                if not self.store.is_internal(record.index):
                    types[(record.index.function_type, record.index.set_type)] = None
            return list(types)
        if self._objective_bridge is not None and isinstance(attr, _OBJECTIVE_ATTRIBUTES):
            if isinstance(attr, ObjectiveFunctionType):
                return self._objective_bridge.function_type
            return self._objective_bridge.get(self._inner, attr)
        return self.model.get(attr)

    def get(self, attr: AbstractAttribute, index=None) -> Any:
        if isinstance(index, list):
            return [self.get(attr, i) for i in index]
        if index is None:
            return self._get_model_attribute(attr)
        if isinstance(index, ConstraintIndex) and index.is_bridged:
            record = self.store.get(index)
            if isinstance(attr, ConstraintName):
                return record.name
            return record.bridge.get(self._inner, attr)
        return self.model.get(attr, index)

    def set(self, attr: AbstractAttribute, *args) -> None:
        index, value = split_set_args(args)
        if index is None:
            if isinstance(attr, ObjectiveFunction):
                self._set_objective(value)
            elif isinstance(attr, ObjectiveSense):
                self._set_sense(value)
            else:
                self.model.set(attr, value)
            return
        if isinstance(attr, ConstraintFunction):
            self.modify(index, FunctionChange(value))
            return
        if isinstance(attr, ConstraintSet):
            self.modify(index, SetChange(value))
            return
        if self.store.is_internal(index) and not attr.is_result:
            raise SetAttributeNotAllowed(f"{index!r} is owned by a bridge", index)
        if isinstance(index, ConstraintIndex) and index.is_bridged:
            record = self.store.get(index)
            if isinstance(attr, ConstraintName):
                record.name = value
                return
            raise UnsupportedAttribute(attr, f"Cannot set {attr} on bridged constraint {index!r}")
        self.model.set(attr, index, value)

    def is_valid(self, index: Index) -> bool:
        if isinstance(index, ConstraintIndex) and index.is_bridged:
            return index in self.store
        return self.model.is_valid(index)

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def chain(self, ci: ConstraintIndex) -> List[Bridge]:
        """Bridges realizing ci, outer to inner (empty if not bridged)."""
        if not self.is_valid(ci):
            raise InvalidIndex(ci)
        out: List[Bridge] = []
        self._walk(ci, out)
        return out

    def _walk(self, ci: ConstraintIndex, out: List[Bridge]) -> None:
        if not ci.is_bridged:
            return
        bridge = self.store.get(ci).bridge
        out.append(bridge)
        for sub in bridge.constraint_indices():
            self._walk(sub, out)

    def bridge_kinds(self, ci: ConstraintIndex) -> List[str]:
        return [b.kind_name() for b in self.chain(ci)]

    # ------------------------------------------------------------------
    # Solving
    # ------------------------------------------------------------------

    def optimize(self) -> None:
        self.model.optimize()

    def is_empty(self) -> bool:
        return self.model.is_empty() and len(self.store) == 0

    def empty(self) -> None:
        self.model.empty()
        self.store.clear()
        self._objective_bridge = None
        self._journal = None

    def __repr__(self) -> str:
        return (f"BridgeOptimizer({type(self.model).__name__}, "
                f"{len(self.registry)} bridges, {len(self.store)} bridged constraints)")
