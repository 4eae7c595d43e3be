"""
Cone Bridges

Linear maps between second order cones and the semidefinite cone:

- SOCtoRSOCBridge: (t, x1, x2...) in SOC   ->  ((t+x1)/sqrt2, (t-x1)/sqrt2, x2...) in RSOC
- RSOCtoSOCBridge: the same map, which is its own inverse
- RSOCtoPSDBridge: (t, u, x) in RSOC       ->  [[t, x'], [x, 2u I]] in PSD (upper triangle)

For 2tu >= |x|^2 with t, u >= 0 the Schur complement of t in the
matrix is 2u I - x x' / t, which is semidefinite exactly when the RSOC
condition holds.
"""

import math
import numpy as np

from ...sets import (
    PositiveSemidefiniteConeTriangle,
    RotatedSecondOrderCone,
    SecondOrderCone,
    triangle_index,
)
from ..bridge import LinearMapBridge


def rotation_matrix(dimension: int) -> np.ndarray:
    """Orthogonal symmetric map between SOC and RSOC coordinates."""
    if dimension < 2:
        raise ValueError(f"Cone of dimension {dimension} cannot be rotated; need at least 2")
    A = np.eye(dimension)
    r = 1.0 / math.sqrt(2.0)
    A[:2, :2] = [[r, r], [r, -r]]
    return A


class SOCtoRSOCBridge(LinearMapBridge):
    source_set = SecondOrderCone
    target_set = RotatedSecondOrderCone

    @classmethod
    def map_matrix(cls, dimension):
        return rotation_matrix(dimension)


class RSOCtoSOCBridge(LinearMapBridge):
    source_set = RotatedSecondOrderCone
    target_set = SecondOrderCone

    @classmethod
    def map_matrix(cls, dimension):
        return rotation_matrix(dimension)


def _side_dimension(dimension: int) -> int:
    # A cone with no x part still needs the 2u diagonal entry
    return max(dimension - 2, 1) + 1


class RSOCtoPSDBridge(LinearMapBridge):
    source_set = RotatedSecondOrderCone
    target_set = PositiveSemidefiniteConeTriangle

    @classmethod
    def map_matrix(cls, dimension):
        if dimension < 2:
            raise ValueError(f"Rotated cone of dimension {dimension} has no (t, u) pair")
        side = _side_dimension(dimension)
        A = np.zeros((side * (side + 1) // 2, dimension))
        A[triangle_index(0, 0), 0] = 1.0
        for i in range(1, side):
            A[triangle_index(i, i), 1] = 2.0
        for i in range(1, dimension - 1):
            A[triangle_index(0, i), 1 + i] = 1.0
        return A

    @classmethod
    def map_set(cls, s):
        return PositiveSemidefiniteConeTriangle(_side_dimension(s.dimension))
