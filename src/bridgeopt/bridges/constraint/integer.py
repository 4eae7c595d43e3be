"""
Integrality Bridges

- ZeroOneBridge: x in ZeroOne  ->  x in Integer and x in [0, 1]
"""

from typing import List

from ...attributes import (
    ConstraintDual,
    ConstraintFunction,
    ConstraintPrimal,
    ConstraintSet,
)
from ...functions import SingleVariable
from ...indices import ConstraintIndex
from ...modifications import SetChange
from ...node_types import constraint_node
from ...sets import Integer, Interval, ZeroOne
from ..bridge import ConstraintBridge


class ZeroOneBridge(ConstraintBridge):
    """Binary variable as a bounded integer variable."""

    def __init__(self, integer: ConstraintIndex, interval: ConstraintIndex):
        self.integer = integer
        self.interval = interval

    @classmethod
    def supports_constraint(cls, function_type, set_type):
        return function_type is SingleVariable and set_type is ZeroOne

    @classmethod
    def target_nodes(cls, node):
        return [
            constraint_node(SingleVariable, Integer),
            constraint_node(SingleVariable, Interval),
        ]

    @classmethod
    def bridge_constraint(cls, inner, f, s):
        integer = inner.add_constraint(f, Integer())
        interval = inner.add_constraint(f, Interval(0.0, 1.0))
        return cls(integer, interval)

    def constraint_indices(self) -> List[ConstraintIndex]:
        return [self.integer, self.interval]

    def get(self, inner, attr):
        if isinstance(attr, (ConstraintFunction, ConstraintPrimal)):
            return inner.get(attr, self.integer)
        if isinstance(attr, ConstraintSet):
            return ZeroOne()
        if isinstance(attr, ConstraintDual):
            # Integer has no dual; the bound constraint carries it
            return inner.get(attr, self.interval)
        return super().get(inner, attr)

    def modification_plan(self, inner, change):
        if isinstance(change, SetChange):
            return []
        return super().modification_plan(inner, change)
