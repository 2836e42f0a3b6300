"""Groups: rows, columns and tiles.

A group must end up holding each value exactly once. It tracks where each
value has been assigned, which values it still needs, and which of its
cells are still free to receive them. Analysis looks at the free cells'
candidates: a needed value with no candidate cell makes the puzzle
unsolvable, and a needed value with exactly one candidate cell binds that
cell.

Groups never look at bindings made by other groups. When two groups
disagree about a cell, the second binding reports the conflict.
"""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from .cell import Cell
from .errors import ErrorCondition, PuzzleError, group_error
from .geometry import GroupDescriptor
from .intset import IntSet

# Cells are passed around as a list indexed by cell index; slot 0 is unused.
Cells = Sequence[Optional[Cell]]


class Group:
    def __init__(self, descriptor: GroupDescriptor, where: List[int], need: IntSet, free: IntSet):
        self.descriptor = descriptor
        self.where = where  # where[v] = index of the cell assigned v, 0 if none
        self.need = need
        self.free = free

    @property
    def id(self):
        return self.descriptor.id

    @classmethod
    def build(cls, descriptor: GroupDescriptor, cells: Cells) -> Tuple["Group", List[PuzzleError]]:
        """Create the group over cells that may already hold values."""
        side = len(descriptor.indices)
        where = [0] * (side + 1)
        need = IntSet.range(side)
        free = IntSet(descriptor.indices)
        errs: List[PuzzleError] = []

        # Pass 1: record the assigned cells.
        for i in descriptor.indices:
            value = cells[i].value
            if value:
                if where[value]:
                    errs.append(
                        group_error(descriptor.id, value, ErrorCondition.DUPLICATE_GROUP_VALUES)
                    )
                where[value] = i
                free.remove(i)
                need.remove(value)

        # Pass 2: the free cells can only take values the group still needs.
        for i in free:
            errs.extend(cells[i].intersect(need))

        return cls(descriptor, where, need, free), errs

    def copy(self) -> "Group":
        return Group(self.descriptor, list(self.where), self.need.copy(), self.free.copy())

    def analyze(self, cells: Cells, changes: Optional[IntSet] = None) -> List[PuzzleError]:
        """Find unreachable values and forced bindings among the free cells.

        Must run after construction or assignment of every overlapping group,
        since candidate removals in one group affect the others.
        """
        side = len(self.descriptor.indices)
        counts = [0] * (side + 1)
        lasts = [0] * (side + 1)

        for i in list(reversed(self.free)):
            candidates = cells[i].candidates or IntSet()
            if len(candidates) == 1:
                # the cell's only value is as good as placed
                self.free.remove(i)
                self.need.remove(candidates[0])
            else:
                for v in candidates:
                    counts[v] += 1
                    lasts[v] = i

        errs: List[PuzzleError] = []
        for v in list(reversed(self.need)):
            if counts[v] == 0:
                errs.append(group_error(self.descriptor.id, v, ErrorCondition.NO_GROUP_VALUE))
            elif counts[v] == 1:
                errs.extend(cells[lasts[v]].bind(v, self.descriptor.id, changes))
                self.free.remove(lasts[v])
                self.need.remove(v)
        return errs

    def assign(self, cells: Cells, index: int, changes: Optional[IntSet] = None) -> List[PuzzleError]:
        """Take note that member `index` has just been assigned.

        The cell must already hold its value; calling this for an empty cell
        raises RuntimeError.
        """
        value = cells[index].value
        if not value:
            raise RuntimeError(f"{self.descriptor.id}.assign({index}): square is not assigned")

        errs: List[PuzzleError] = []
        placed = self.where[value]
        if placed:
            if placed == index:
                return errs
            errs.append(group_error(self.descriptor.id, value, ErrorCondition.DUPLICATE_GROUP_VALUES))

        self.where[value] = index
        self.need.remove(value)
        self.free.remove(index)

        for i in self.descriptor.indices:
            if not cells[i].value:
                errs.extend(cells[i].remove(value, changes))
        return errs

    def __repr__(self) -> str:
        return f"Group({self.descriptor.id}, need={self.need.to_list()}, free={self.free.to_list()})"
