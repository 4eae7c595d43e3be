"""
Bridged Store

Bookkeeping of everything the bridging layer has created:
- one ConstraintRecord per bridged constraint index, holding the root
  bridge of its chain
- the set of internal indices (auxiliary variables and sub-constraints),
  which are hidden from listings and protected from caller mutation

Bridged constraint indices are negative so that they never collide with
the indices of the underlying model.
"""

from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Union

from ..errors import InvalidIndex
from ..indices import ConstraintIndex, VariableIndex
from ..node_types import NodeType
from .bridge import Bridge


Index = Union[VariableIndex, ConstraintIndex]


@dataclass
class ConstraintRecord:
    """
    A bridged constraint.

    Attributes:
        index: Index handed out for the constraint
        node: Node type that was bridged
        bridge: Root bridge of the chain
        name: ConstraintName attribute
    """
    index: ConstraintIndex
    node: NodeType
    bridge: Bridge
    name: str = ""


class BridgedStore:
    """Records of bridged constraints and internal indices."""

    def __init__(self):
        self._records: Dict[ConstraintIndex, ConstraintRecord] = {}
        self._internal: Dict[Index, None] = {}
        self._next_value = -1

    def new_index(self, function_type: type, set_type: type) -> ConstraintIndex:
        ci = ConstraintIndex(function_type, set_type, self._next_value)
        self._next_value -= 1
        return ci

    def add(self, record: ConstraintRecord) -> None:
        self._records[record.index] = record

    def get(self, ci: ConstraintIndex) -> ConstraintRecord:
        record = self._records.get(ci)
        if record is None:
            raise InvalidIndex(ci)
        return record

    def remove(self, ci: ConstraintIndex) -> Optional[ConstraintRecord]:
        self._internal.pop(ci, None)
        return self._records.pop(ci, None)

    def __contains__(self, ci) -> bool:
        return ci in self._records

    def __iter__(self) -> Iterator[ConstraintRecord]:
        return iter(list(self._records.values()))

    def __len__(self) -> int:
        return len(self._records)

    def records_of_type(self, function_type: type, set_type: type,
                        include_internal: bool = False) -> List[ConstraintRecord]:
        return [
            r for r in self._records.values()
            if r.index.function_type is function_type
            and r.index.set_type is set_type
            and (include_internal or r.index not in self._internal)
        ]

    # ------------------------------------------------------------------
    # Internal indices
    # ------------------------------------------------------------------

    def mark_internal(self, index: Index) -> None:
        self._internal[index] = None

    def unmark_internal(self, index: Index) -> None:
        self._internal.pop(index, None)

    def is_internal(self, index: Index) -> bool:
        return index in self._internal

    def internal_indices(self) -> List[Index]:
        return list(self._internal)

    def clear(self) -> None:
        self._records.clear()
        self._internal.clear()
        self._next_value = -1
