"""
Slot iteration: every combination of per-position candidates.

Positions are filled through SlotIteration.builder(); the built iteration is
the cartesian product of the slots in position order, last position varying
fastest, items within a slot in insertion order.

    builder = SlotIteration.builder()
    builder.add_items_to_slot([STRING, DOUBLE], 0)
    builder.add_item_to_slot(INT, 1)
    list(builder.build())   # [(STRING, INT), (DOUBLE, INT)]
"""

import itertools
from typing import Dict, Generic, Iterable, Iterator, List, Tuple, TypeVar

T = TypeVar('T')


class SlotIteration(Generic[T]):
    """Finite, lazy and restartable: every iter() starts from the first combination."""

    def __init__(self, slots: List[List[T]]):
        self._slots = [list(slot) for slot in slots]

    @staticmethod
    def builder() -> 'SlotIteration.Builder':
        return SlotIteration.Builder()

    @property
    def slots(self) -> List[List[T]]:
        return [list(slot) for slot in self._slots]

    def __iter__(self) -> Iterator[Tuple[T, ...]]:
        return itertools.product(*self._slots)

    def __len__(self) -> int:
        count = 1
        for slot in self._slots:
            count *= len(slot)
        return count

    def __repr__(self) -> str:
        return f"SlotIteration({self._slots!r})"

    class Builder(Generic[T]):
        """Collects candidates per position; a position may be filled in several calls."""

        def __init__(self):
            self._slots: Dict[int, Dict[T, None]] = {}

        def add_item_to_slot(self, item: T, index: int) -> 'SlotIteration.Builder':
            if index < 0:
                raise ValueError(f"slot index must be >= 0, got {index}")
            self._slots.setdefault(index, {})[item] = None
            return self

        def add_items_to_slot(self, items: Iterable[T], index: int) -> 'SlotIteration.Builder':
            if index < 0:
                raise ValueError(f"slot index must be >= 0, got {index}")
            slot = self._slots.setdefault(index, {})
            for item in items:
                slot[item] = None
            return self

        def build(self) -> 'SlotIteration':
            if not self._slots:
                return SlotIteration([])
            size = max(self._slots) + 1
            slots: List[List[T]] = []
            for index in range(size):
                slot = self._slots.get(index)
                if slot is None:
                    raise ValueError(f"slot {index} was never assigned")
                if not slot:
                    raise ValueError(f"slot {index} has no candidates")
                slots.append(list(slot))
            return SlotIteration(slots)
