"""
Error Taxonomy

- Unsupported: no finite-cost reformulation exists for a node type.
  Raised before any mutation.
- NotAllowed: the request is understood but cannot be serviced now
  (inexpressible modification, deleting a variable a bridge still uses,
  touching an index owned by a bridge).
- InvalidIndex: the index is stale, foreign or already deleted.
"""

from typing import Any, Optional


class BridgeOptError(Exception):
    """Base class for all errors raised by bridgeopt."""


# ---------------------------------------------------------------------------
# Unsupported
# ---------------------------------------------------------------------------

class UnsupportedError(BridgeOptError):
    """No finite-cost path exists for the requested node type."""

    def __init__(self, node: Any, message: str = ""):
        self.node = node
        super().__init__(message or f"{node} is not supported by the model "
                                    f"and no bridge chain reaches a supported type")


class UnsupportedConstraint(UnsupportedError):
    pass


class UnsupportedObjective(UnsupportedError):
    pass


class UnsupportedAttribute(BridgeOptError):
    """The attribute cannot be queried or set on this object."""

    def __init__(self, attribute: Any, message: str = ""):
        self.attribute = attribute
        super().__init__(message or f"Attribute {attribute} is not supported")


# ---------------------------------------------------------------------------
# NotAllowed
# ---------------------------------------------------------------------------

class NotAllowedError(BridgeOptError):
    """The operation is recognized but cannot be performed."""

    def __init__(self, message: str = "", index: Optional[Any] = None):
        self.index = index
        super().__init__(message)


class AddConstraintNotAllowed(NotAllowedError):
    pass


class ModifyConstraintNotAllowed(NotAllowedError):
    pass


class DeleteNotAllowed(NotAllowedError):
    pass


class ModifyObjectiveNotAllowed(NotAllowedError):
    pass


class SetAttributeNotAllowed(NotAllowedError):
    pass


# ---------------------------------------------------------------------------
# Index errors
# ---------------------------------------------------------------------------

class InvalidIndex(BridgeOptError, KeyError):
    """The index does not refer to a live variable or constraint."""

    def __init__(self, index: Any):
        self.index = index
        super().__init__(f"Invalid index {index!r}")

    def __str__(self) -> str:
        return self.args[0]


class DimensionMismatch(BridgeOptError, ValueError):
    """The function output dimension differs from the set dimension."""

    def __init__(self, function_dimension: int, set_dimension: int):
        self.function_dimension = function_dimension
        self.set_dimension = set_dimension
        super().__init__(
            f"Function of dimension {function_dimension} does not match "
            f"set of dimension {set_dimension}"
        )
