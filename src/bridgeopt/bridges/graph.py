"""
Bridge Graph and Shortest-Path Planner

Directed hypergraph over node types. An edge replaces its source node by
an ordered list of target nodes, all of which must resolve in turn.
Sinks are the node types the underlying model supports directly.

Distance of a node:
    d(sink) = 0
    d(n)    = min over edges e of n of  cost(e) + sum_t d(t)

The table is computed by Bellman-Ford style relaxation over every node
reachable from the nodes queried so far. Costs are strictly positive, so
a chosen path never revisits a node even if the graph has cycles. Among
edges of equal total cost the first registered one is chosen.

The table is a cache: it is dropped on invalidate() or when the registry
changes, and rebuilt whole on the next query.
"""

import logging
import math
from collections import deque
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

from ..errors import UnsupportedConstraint, UnsupportedError, UnsupportedObjective
from ..node_types import NodeKind, NodeType
from .registry import BridgeKind, BridgeRegistry

_LOGGER = logging.getLogger(__name__)


INF = math.inf


@dataclass
class Edge:
    """One bridge applied to one source node."""
    source: NodeType
    kind: BridgeKind
    targets: Tuple[NodeType, ...]


@dataclass
class DistanceEntry:
    """
    Planner result for one node.

    Attributes:
        cost: Total cost to reach sinks (0 for sinks, inf if unreachable)
        kind: Chosen bridge kind (None for sinks and unreachable nodes)
        targets: Target nodes of the chosen bridge
    """
    cost: float
    kind: Optional[BridgeKind] = None
    targets: Tuple[NodeType, ...] = ()

    @property
    def is_sink(self) -> bool:
        return self.cost == 0.0

    @property
    def is_finite(self) -> bool:
        return self.cost < INF


@dataclass
class PlanNode:
    """Chosen reformulation tree of a node, for inspection."""
    node: NodeType
    cost: float
    bridge: Optional[str] = None
    children: List['PlanNode'] = field(default_factory=list)

    def kinds(self) -> List[str]:
        """Bridge names in pre-order (outer to inner)."""
        out = [self.bridge] if self.bridge else []
        for c in self.children:
            out.extend(c.kinds())
        return out

    def to_canonical(self) -> Dict[str, Any]:
        return {
            "node": self.node.name,
            "cost": self.cost if self.cost < INF else "inf",
            "bridge": self.bridge,
            "children": [c.to_canonical() for c in self.children],
        }


class PlannerContext:
    """
    View of the planner handed to bridge cost functions.

    distance() reflects the relaxation in progress, so a cost function
    may make a bridge viable only when its own targets resolve.
    """

    def __init__(self, graph: 'BridgeGraph', distances: Dict[NodeType, float]):
        self._graph = graph
        self._distances = distances

    def supports(self, node: NodeType) -> bool:
        return self._graph.is_sink(node)

    def distance(self, node: NodeType) -> float:
        return self._distances.get(node, INF)


class BridgeGraph:
    """
    Bridge graph with a memoized distance table.

    Args:
        registry: Bridge kinds available
        supports: Predicate telling which node types are sinks
    """

    def __init__(self, registry: BridgeRegistry, supports: Callable[[NodeType], bool]):
        self.registry = registry
        self._supports = supports
        self._roots: Dict[NodeType, None] = {}
        self._edges: Dict[NodeType, List[Edge]] = {}
        self._sinks: Dict[NodeType, bool] = {}
        self._table: Optional[Dict[NodeType, DistanceEntry]] = None
        self._built_version: Optional[int] = None
        self.rebuilds = 0

    # ------------------------------------------------------------------
    # Invalidation
    # ------------------------------------------------------------------

    def invalidate(self) -> None:
        """Drop the table; it is rebuilt on the next query."""
        self._table = None
        self._edges = {}
        self._sinks = {}

    def _ensure(self, node: NodeType) -> Dict[NodeType, DistanceEntry]:
        if self._built_version != self.registry.version:
            self.invalidate()
        if node not in self._roots:
            # The current table stays valid for nodes it already covers
            self._roots[node] = None
        if self._table is None or node not in self._table:
            self._rebuild()
        return self._table

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    def is_sink(self, node: NodeType) -> bool:
        if node not in self._sinks:
            self._sinks[node] = bool(self._supports(node))
        return self._sinks[node]

    def _discover(self) -> List[NodeType]:
        """Nodes reachable from the roots, in discovery order."""
        seen: Dict[NodeType, None] = {}
        queue = deque(self._roots)
        while queue:
            node = queue.popleft()
            if node in seen:
                continue
            seen[node] = None
            if self.is_sink(node):
                continue
            if node not in self._edges:
                self._edges[node] = [
                    Edge(node, kind, tuple(kind.targets(node)))
                    for kind in self.registry.kinds_for(node)
                ]
            for edge in self._edges[node]:
                queue.extend(t for t in edge.targets if t not in seen)
        return list(seen)

    def _edge_cost(self, edge: Edge, distances: Dict[NodeType, float]) -> float:
        c = edge.kind.cost(edge.source, PlannerContext(self, distances))
        for t in edge.targets:
            c += distances[t]
            if c == INF:
                break
        return c

    def _rebuild(self) -> None:
        nodes = self._discover()
        distances = {n: (0.0 if self.is_sink(n) else INF) for n in nodes}

        # Each pass can only lower distances; a simple path has at most
        # len(nodes) edges.
        for _ in range(len(nodes) + 1):
            changed = False
            for node in nodes:
                if distances[node] == 0.0:
                    continue
                for edge in self._edges[node]:
                    c = self._edge_cost(edge, distances)
                    if c < distances[node]:
                        distances[node] = c
                        changed = True
            if not changed:
                break

        table: Dict[NodeType, DistanceEntry] = {}
        for node in nodes:
            best = distances[node]
            if best == 0.0:
                table[node] = DistanceEntry(0.0)
                continue
            table[node] = DistanceEntry(INF)
            if best == INF:
                continue
            for edge in self._edges[node]:
                if self._edge_cost(edge, distances) == best:
                    table[node] = DistanceEntry(best, edge.kind, edge.targets)
                    break

        self._table = table
        self._built_version = self.registry.version
        self.rebuilds += 1
        _LOGGER.debug(
            "Rebuilt bridge graph: %d nodes, %d edges",
            len(nodes), sum(len(e) for e in self._edges.values())
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def entry(self, node: NodeType) -> DistanceEntry:
        return self._ensure(node)[node]

    def distance(self, node: NodeType) -> float:
        """Minimum total cost to reach sinks from node (inf if none)."""
        return self.entry(node).cost

    def is_supported(self, node: NodeType) -> bool:
        """Whether node is a sink or can be bridged to sinks."""
        return self.entry(node).is_finite

    def is_bridged(self, node: NodeType) -> bool:
        """Whether node needs at least one bridge."""
        e = self.entry(node)
        return e.is_finite and not e.is_sink

    def bridge_kind(self, node: NodeType) -> Optional[BridgeKind]:
        """Chosen bridge kind for node (None for sinks)."""
        return self.entry(node).kind

    def require(self, node: NodeType) -> DistanceEntry:
        """
        Entry for node, failing if it has no finite-cost path.

        Raises:
            UnsupportedConstraint / UnsupportedObjective / UnsupportedError
        """
        e = self.entry(node)
        if not e.is_finite:
            if node.kind == NodeKind.OBJECTIVE:
                raise UnsupportedObjective(node)
            if node.kind == NodeKind.CONSTRAINT:
                raise UnsupportedConstraint(node)
            raise UnsupportedError(node)
        return e

    def plan(self, node: NodeType) -> PlanNode:
        """Chosen reformulation tree of node."""
        e = self.entry(node)
        if e.kind is None:
            return PlanNode(node, e.cost)
        return PlanNode(
            node, e.cost, e.kind.name, [self.plan(t) for t in e.targets]
        )

    def known_nodes(self) -> List[Tuple[NodeType, DistanceEntry]]:
        """Every node of the current table with its entry."""
        for root in list(self._roots):
            self._ensure(root)
        return list((self._table or {}).items())

    def edges(self, node: NodeType) -> List[Edge]:
        """Candidate edges of node, in registration order."""
        self._ensure(node)
        return list(self._edges.get(node, []))
