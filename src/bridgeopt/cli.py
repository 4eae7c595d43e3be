"""
bridgeopt Command-Line Interface

Inspects the bridge planner against preset back ends:

    bridgeopt plan --supports lp ScalarAffineFunction-in-Interval
    bridgeopt graph --supports conic-psd --json
"""

import sys
import argparse
import json
import logging
from typing import Any, Dict, List

from .functions import (
    ScalarAffineFunction,
    ScalarQuadraticFunction,
    SingleVariable,
    VectorAffineFunction,
    VectorOfVariables,
)
from .node_types import NodeType, constraint_node, objective_node, parse_node
from .sets import (
    EqualTo,
    GreaterThan,
    Integer,
    Interval,
    LessThan,
    Nonnegatives,
    Nonpositives,
    PositiveSemidefiniteConeTriangle,
    RotatedSecondOrderCone,
    SecondOrderCone,
    ZeroOne,
    Zeros,
)
from .utilities import MockOptimizer
from .bridges import full_bridge_optimizer


def preset_lp() -> List[NodeType]:
    """Affine constraints in one-sided and equality sets."""
    return [
        constraint_node(ScalarAffineFunction, GreaterThan),
        constraint_node(ScalarAffineFunction, LessThan),
        constraint_node(ScalarAffineFunction, EqualTo),
        objective_node(ScalarAffineFunction),
    ]


def preset_milp() -> List[NodeType]:
    return preset_lp() + [constraint_node(SingleVariable, Integer)]


def preset_socp() -> List[NodeType]:
    return preset_lp() + [
        constraint_node(VectorAffineFunction, SecondOrderCone),
        objective_node(ScalarQuadraticFunction),
    ]


def preset_conic_psd() -> List[NodeType]:
    """Vector affine functions in cones only."""
    return [
        constraint_node(VectorAffineFunction, Zeros),
        constraint_node(VectorAffineFunction, Nonnegatives),
        constraint_node(VectorAffineFunction, PositiveSemidefiniteConeTriangle),
        objective_node(ScalarAffineFunction),
    ]


PRESETS = {
    'lp': preset_lp,
    'milp': preset_milp,
    'socp': preset_socp,
    'conic-psd': preset_conic_psd,
}


def canonical_dumps(obj: Any, indent: int = None) -> str:
    """JSON with sorted keys, so identical plans print identically."""
    return json.dumps(
        obj,
        sort_keys=True,
        separators=(',', ':') if indent is None else None,
        indent=indent,
        default=str
    )


def build_optimizer(preset: str):
    return full_bridge_optimizer(MockOptimizer(supported=PRESETS[preset]()))


def _format_cost(cost: float) -> str:
    return "inf" if cost == float("inf") else f"{cost:g}"


def _print_plan(plan, depth: int = 0) -> None:
    label = plan.bridge or ("supported" if plan.cost == 0.0 else "unsupported")
    print(f"{'  ' * depth}{plan.node.name}  [{label}, cost {_format_cost(plan.cost)}]")
    for child in plan.children:
        _print_plan(child, depth + 1)


def cmd_plan(args):
    """Print the chosen bridge chain of one node type."""
    try:
        node = parse_node(args.node)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    optimizer = build_optimizer(args.supports)
    plan = optimizer.plan(node)

    if args.json:
        print(canonical_dumps(plan.to_canonical(), indent=2))
    else:
        print(f"Back end: {args.supports}")
        _print_plan(plan)
        if plan.kinds():
            print(f"Chain: {' -> '.join(plan.kinds())}")

    return 0 if plan.cost < float("inf") else 1


def cmd_graph(args):
    """List every node type reached from the preset's candidates."""
    optimizer = build_optimizer(args.supports)
    for node in candidate_nodes():
        optimizer.graph.distance(node)

    rows: List[Dict[str, Any]] = []
    for node, entry in sorted(optimizer.graph.known_nodes(), key=lambda item: item[0].name):
        rows.append({
            'node': node.name,
            'cost': entry.cost if entry.is_finite else "inf",
            'bridge': entry.kind.name if entry.kind else None,
        })

    if args.json:
        print(canonical_dumps(rows, indent=2))
    else:
        print(f"Back end: {args.supports}")
        width = max(len(r['node']) for r in rows)
        for r in rows:
            print(f"{r['node']:{width}}  {str(r['cost']):>5}  {r['bridge'] or '-'}")
    return 0


def candidate_nodes() -> List[NodeType]:
    """Node types a modelling layer commonly asks for."""
    nodes = []
    for f in (SingleVariable, ScalarAffineFunction, ScalarQuadraticFunction):
        for s in (GreaterThan, LessThan, EqualTo, Interval):
            nodes.append(constraint_node(f, s))
    nodes.append(constraint_node(SingleVariable, ZeroOne))
    nodes.append(constraint_node(SingleVariable, Integer))
    for f in (VectorOfVariables, VectorAffineFunction):
        for s in (Nonnegatives, Nonpositives, Zeros, SecondOrderCone,
                  RotatedSecondOrderCone, PositiveSemidefiniteConeTriangle):
            nodes.append(constraint_node(f, s))
    for f in (SingleVariable, ScalarAffineFunction, ScalarQuadraticFunction):
        nodes.append(objective_node(f))
    return nodes


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog='bridgeopt',
        description='bridgeopt - Constraint bridging planner'
    )
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Log planner activity')
    subparsers = parser.add_subparsers(dest='command', help='Commands')

    # Plan command
    plan_parser = subparsers.add_parser('plan', help='Show the bridge chain of a node type')
    plan_parser.add_argument('node', help='Node type, e.g. ScalarAffineFunction-in-Interval')
    plan_parser.add_argument('--supports', '-s', choices=list(PRESETS.keys()), default='lp',
                             help='Back end preset (default: lp)')
    plan_parser.add_argument('--json', action='store_true', help='Emit JSON')
    plan_parser.set_defaults(func=cmd_plan)

    # Graph command
    graph_parser = subparsers.add_parser('graph', help='List node types and their costs')
    graph_parser.add_argument('--supports', '-s', choices=list(PRESETS.keys()), default='lp',
                              help='Back end preset (default: lp)')
    graph_parser.add_argument('--json', action='store_true', help='Emit JSON')
    graph_parser.set_defaults(func=cmd_graph)

    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format='%(name)s: %(message)s')

    if args.command is None:
        parser.print_help()
        return 0

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
