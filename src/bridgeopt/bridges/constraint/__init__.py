"""Constraint bridges."""

from .scalar import (
    SplitIntervalBridge,
    GreaterToLessBridge,
    LessToGreaterBridge,
    ScalarFunctionizeBridge,
    ScalarSlackBridge,
)
from .vector import (
    VectorFunctionizeBridge,
    VectorizeBridge,
    ScalarizeBridge,
    NonnegToNonposBridge,
    NonposToNonnegBridge,
)
from .cones import SOCtoRSOCBridge, RSOCtoSOCBridge, RSOCtoPSDBridge
from .integer import ZeroOneBridge

__all__ = [
    "SplitIntervalBridge",
    "GreaterToLessBridge",
    "LessToGreaterBridge",
    "ScalarFunctionizeBridge",
    "ScalarSlackBridge",
    "VectorFunctionizeBridge",
    "VectorizeBridge",
    "ScalarizeBridge",
    "NonnegToNonposBridge",
    "NonposToNonnegBridge",
    "SOCtoRSOCBridge",
    "RSOCtoSOCBridge",
    "RSOCtoPSDBridge",
    "ZeroOneBridge",
]
