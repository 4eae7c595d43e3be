"""
Bridges - Reformulation of Unsupported Node Types

Provides:
- Bridge base classes and the provided bridge kinds
- BridgeRegistry: ordered catalog of bridge kinds with costs
- BridgeGraph: shortest-path planner over node types
- BridgeOptimizer: model wrapper servicing unsupported node types
  through bridge chains
"""

from typing import Optional

from ..costs import CostModel
from .bridge import Bridge, ConstraintBridge, LinearMapBridge
from .registry import BridgeKind, BridgeRegistry
from .graph import BridgeGraph, DistanceEntry, Edge, PlanNode, PlannerContext
from .store import BridgedStore, ConstraintRecord
from .optimizer import BridgeOptimizer, InnerModel
from .constraint import (
    SplitIntervalBridge,
    GreaterToLessBridge,
    LessToGreaterBridge,
    ScalarFunctionizeBridge,
    ScalarSlackBridge,
    VectorFunctionizeBridge,
    VectorizeBridge,
    ScalarizeBridge,
    NonnegToNonposBridge,
    NonposToNonnegBridge,
    SOCtoRSOCBridge,
    RSOCtoSOCBridge,
    RSOCtoPSDBridge,
    ZeroOneBridge,
)
from .variable import VariableBridge, FreeVariablesBridge
from .objective import ObjectiveBridge, ObjectiveFunctionizeBridge, ObjectiveSlackBridge


# Registration order is the tie-breaker between chains of equal cost
DEFAULT_BRIDGES = (
    SplitIntervalBridge,
    GreaterToLessBridge,
    LessToGreaterBridge,
    ScalarFunctionizeBridge,
    VectorFunctionizeBridge,
    ScalarSlackBridge,
    VectorizeBridge,
    ScalarizeBridge,
    NonnegToNonposBridge,
    NonposToNonnegBridge,
    SOCtoRSOCBridge,
    RSOCtoSOCBridge,
    RSOCtoPSDBridge,
    ZeroOneBridge,
    FreeVariablesBridge,
    ObjectiveFunctionizeBridge,
    ObjectiveSlackBridge,
)


def default_registry(cost_model: Optional[CostModel] = None) -> BridgeRegistry:
    """Registry with every provided bridge."""
    registry = BridgeRegistry(cost_model)
    for bridge_class in DEFAULT_BRIDGES:
        registry.register(bridge_class)
    return registry


def full_bridge_optimizer(model, cost_model: Optional[CostModel] = None) -> BridgeOptimizer:
    """Wrap model in a BridgeOptimizer using every provided bridge."""
    return BridgeOptimizer(model, default_registry(cost_model))


__all__ = [
    # Base classes
    'Bridge',
    'ConstraintBridge',
    'LinearMapBridge',
    'VariableBridge',
    'ObjectiveBridge',

    # Registry and planner
    'BridgeKind',
    'BridgeRegistry',
    'BridgeGraph',
    'DistanceEntry',
    'Edge',
    'PlanNode',
    'PlannerContext',

    # Store and optimizer
    'BridgedStore',
    'ConstraintRecord',
    'BridgeOptimizer',
    'InnerModel',
    'DEFAULT_BRIDGES',
    'default_registry',
    'full_bridge_optimizer',

    # Constraint bridges
    'SplitIntervalBridge',
    'GreaterToLessBridge',
    'LessToGreaterBridge',
    'ScalarFunctionizeBridge',
    'ScalarSlackBridge',
    'VectorFunctionizeBridge',
    'VectorizeBridge',
    'ScalarizeBridge',
    'NonnegToNonposBridge',
    'NonposToNonnegBridge',
    'SOCtoRSOCBridge',
    'RSOCtoSOCBridge',
    'RSOCtoPSDBridge',
    'ZeroOneBridge',

    # Variable and objective bridges
    'FreeVariablesBridge',
    'ObjectiveFunctionizeBridge',
    'ObjectiveSlackBridge',
]
