"""Small sorted integer sets.

An IntSet keeps its members in ascending order with no duplicates. It is used
both for the candidate values of a cell and for collections of cell indices,
and its iteration order (ascending) is relied on by the propagation code.
"""

from bisect import bisect_left
from typing import Iterable, Iterator, List, Tuple


class IntSet:
    __slots__ = ("_items",)

    def __init__(self, values: Iterable[int] = ()):
        self._items: List[int] = sorted(set(values))

    @classmethod
    def range(cls, maximum: int) -> "IntSet":
        """The set ``{1, ..., maximum}`` (empty when maximum < 1)."""
        out = cls()
        out._items = list(range(1, maximum + 1))
        return out

    def copy(self) -> "IntSet":
        out = IntSet()
        out._items = list(self._items)
        return out

    def find(self, value: int) -> Tuple[int, bool]:
        """Return where `value` is (or would be inserted) and whether it is present."""
        where = bisect_left(self._items, value)
        return where, where < len(self._items) and self._items[where] == value

    def insert(self, value: int) -> bool:
        """Add `value`; returns True if it was already present."""
        where, found = self.find(value)
        if not found:
            self._items.insert(where, value)
        return found

    def remove(self, value: int) -> bool:
        """Drop `value`; returns True if it was present."""
        where, found = self.find(value)
        if found:
            del self._items[where]
        return found

    def subtract(self, other: Iterable[int], marker: int = 0) -> Tuple[bool, bool]:
        """Remove every member of `other`.

        Returns (anything removed, `marker` removed).
        """
        drop = set(other)
        kept = [v for v in self._items if v not in drop]
        removed = len(kept) != len(self._items)
        removed_marker = marker in drop and marker in self
        self._items = kept
        return removed, removed_marker

    def intersect(self, other: Iterable[int], marker: int = 0) -> Tuple[bool, bool]:
        """Keep only members of `other`.

        Returns (anything removed, `marker` removed).
        """
        keep = set(other)
        kept = [v for v in self._items if v in keep]
        removed = len(kept) != len(self._items)
        removed_marker = marker not in keep and marker in self
        self._items = kept
        return removed, removed_marker

    def to_list(self) -> List[int]:
        return list(self._items)

    def __contains__(self, value: object) -> bool:
        if not isinstance(value, int):
            return False
        return self.find(value)[1]

    def __iter__(self) -> Iterator[int]:
        return iter(self._items)

    def __reversed__(self) -> Iterator[int]:
        return reversed(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __getitem__(self, position: int) -> int:
        return self._items[position]

    def __eq__(self, other: object) -> bool:
        if isinstance(other, IntSet):
            return self._items == other._items
        if isinstance(other, (list, tuple)):
            return self._items == list(other)
        return NotImplemented

    def __repr__(self) -> str:
        return f"IntSet({self._items})"
