"""
Utilities - Model Storage and Test Doubles

Provides:
- ModelLike: the interface every wrapped model satisfies
- Model: in-memory storage accepting every node type
- MockOptimizer: restricted capabilities + scripted results
- add_scalar_constraint: constants moved into the set
"""

from .model import ModelLike, Model
from .mock import MockOptimizer
from .constraints import add_scalar_constraint, normalize_scalar_constraint

__all__ = [
    'ModelLike',
    'Model',
    'MockOptimizer',
    'add_scalar_constraint',
    'normalize_scalar_constraint',
]
