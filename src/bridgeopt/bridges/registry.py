"""
Bridge Registry

Catalog of the bridge kinds one optimizer may use. Each kind declares
which node types it replaces, which node types it needs from the layer
beneath, and a cost function. Registration order is kept: it is the
tie-breaker when two chains cost the same.

A registry belongs to one optimizer; there is no process-wide registry.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Iterator, List, Optional, Union

from ..costs import CostModel, DEFAULT_COSTS
from ..node_types import NodeType

_LOGGER = logging.getLogger(__name__)


CostFunction = Callable[[NodeType, "object"], float]


@dataclass
class BridgeKind:
    """
    A registered bridge.

    Attributes:
        bridge_class: Bridge implementation
        order: Registration order (lower wins ties)
        cost_fn: (source node, planner context) -> declared cost
    """
    bridge_class: type
    order: int
    cost_fn: CostFunction

    @property
    def name(self) -> str:
        return self.bridge_class.kind_name()

    def matches(self, node: NodeType) -> bool:
        return self.bridge_class.supports(node)

    def targets(self, node: NodeType) -> List[NodeType]:
        return list(self.bridge_class.target_nodes(node))

    def cost(self, node: NodeType, context) -> float:
        """
        Declared cost of replacing node, possibly infinite.

        Raises:
            ValueError: if the cost function returns a nonpositive cost
        """
        c = float(self.cost_fn(node, context))
        if not c > 0:
            raise ValueError(f"{self.name} declared invalid cost {c} for {node}")
        return c

    def __repr__(self) -> str:
        return f"BridgeKind({self.name}, order={self.order})"


class BridgeRegistry:
    """
    Ordered catalog of bridge kinds.

    Every change bumps version; a BridgeGraph built from an older version
    rebuilds itself on its next query.
    """

    def __init__(self, cost_model: Optional[CostModel] = None):
        self.cost_model = cost_model or DEFAULT_COSTS
        self._kinds: Dict[type, BridgeKind] = {}
        self._next_order = 0
        self.version = 0

    def register(
        self,
        bridge_class: type,
        cost: Union[None, float, CostFunction] = None
    ) -> BridgeKind:
        """
        Register a bridge class.

        Args:
            bridge_class: Bridge implementation
            cost: Fixed cost, cost function, or None for the cost model default

        Returns:
            The registered kind (the existing one if already registered)
        """
        if bridge_class in self._kinds:
            return self._kinds[bridge_class]

        if cost is None:
            name = bridge_class.kind_name()
            category = bridge_class.category
            cost_model = self.cost_model
            cost_fn = lambda node, context: cost_model.bridge_cost(name, category)
        elif callable(cost):
            cost_fn = cost
        else:
            fixed = float(cost)
            if not fixed > 0:
                raise ValueError(f"Cost of {bridge_class.kind_name()} must be positive")
            cost_fn = lambda node, context: fixed

        kind = BridgeKind(bridge_class, self._next_order, cost_fn)
        self._kinds[bridge_class] = kind
        self._next_order += 1
        self.version += 1
        _LOGGER.debug("Registered bridge %s (order %d)", kind.name, kind.order)
        return kind

    def remove(self, bridge_class: type) -> None:
        """Remove a bridge class; a no-op if it is not registered."""
        if self._kinds.pop(bridge_class, None) is not None:
            self.version += 1
            _LOGGER.debug("Removed bridge %s", bridge_class.kind_name())

    def kinds_for(self, node: NodeType) -> List[BridgeKind]:
        """Kinds that can replace node, in registration order."""
        return [k for k in self if k.matches(node)]

    def __contains__(self, bridge_class: type) -> bool:
        return bridge_class in self._kinds

    def __iter__(self) -> Iterator[BridgeKind]:
        return iter(sorted(self._kinds.values(), key=lambda k: k.order))

    def __len__(self) -> int:
        return len(self._kinds)
