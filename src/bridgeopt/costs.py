"""
Cost Model for Bridges

Defines the declared cost of each reformulation. The planner adds these
up along a chain and picks the cheapest chain to a supported node.
"""

from dataclasses import dataclass
from typing import Dict
from enum import Enum


class BridgeCategory(Enum):
    """Kinds of bridges by the node they replace."""
    CONSTRAINT = "constraint"   # Rewrites a constraint
    VARIABLE = "variable"       # Rewrites constrained variables
    OBJECTIVE = "objective"     # Rewrites the objective


@dataclass
class CostModel:
    """
    Cost model for bridges.

    Costs are abstract units; every bridge must cost strictly more than
    zero so that no cycle of the bridge graph is ever cheaper than
    leaving it.
    """

    # Default costs per category
    cost_constraint: float = 1.0
    cost_variable: float = 1.0
    cost_objective: float = 1.0

    # Costs per bridge class name, overriding the category default
    overrides: Dict[str, float] = None

    def __post_init__(self):
        if self.overrides is None:
            self.overrides = {}
        for name, cost in self.overrides.items():
            if not cost > 0:
                raise ValueError(f"Cost of {name} must be positive, got {cost}")

    def category_cost(self, category: BridgeCategory) -> float:
        """Get the default cost of a bridge category."""
        costs = {
            BridgeCategory.CONSTRAINT: self.cost_constraint,
            BridgeCategory.VARIABLE: self.cost_variable,
            BridgeCategory.OBJECTIVE: self.cost_objective,
        }
        return costs.get(category, 1.0)

    def bridge_cost(self, bridge_name: str, category: BridgeCategory) -> float:
        """Get the declared cost of one bridge."""
        return self.overrides.get(bridge_name, self.category_cost(category))

    def with_override(self, bridge_name: str, cost: float) -> 'CostModel':
        """Copy of this model with one bridge cost replaced."""
        overrides = dict(self.overrides)
        overrides[bridge_name] = cost
        return CostModel(
            cost_constraint=self.cost_constraint,
            cost_variable=self.cost_variable,
            cost_objective=self.cost_objective,
            overrides=overrides,
        )


# Default cost model instance
DEFAULT_COSTS = CostModel()
