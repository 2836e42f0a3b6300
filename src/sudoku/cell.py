"""Cells (squares) of a puzzle.

A cell has an index, an assigned value (0 when empty), the set of values it
could still take, and optionally a bound value: the one candidate that some
group has proven must go here. The groups that forced the binding are kept
so the binding can be explained.

Every mutator returns the errors it produced instead of raising, and takes
an optional `changes` collector that receives the cell index whenever the
cell actually changed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from .errors import ErrorAttribute, ErrorCondition, PuzzleError, group_error, square_error
from .geometry import GroupID
from .intset import IntSet


@dataclass
class Cell:
    index: int
    value: int = 0
    candidates: Optional[IntSet] = None
    bound: int = 0
    bound_sources: List[GroupID] = field(default_factory=list)

    @classmethod
    def empty(cls, index: int, side_length: int) -> "Cell":
        return cls(index=index, candidates=IntSet.range(side_length))

    @classmethod
    def filled(cls, index: int, value: int) -> "Cell":
        return cls(index=index, value=value)

    @property
    def is_assigned(self) -> bool:
        return self.value != 0

    def copy(self) -> "Cell":
        return Cell(
            index=self.index,
            value=self.value,
            candidates=self.candidates.copy() if self.candidates is not None else None,
            bound=self.bound,
            bound_sources=list(self.bound_sources),
        )

    def _log(self, changes: Optional[IntSet]) -> None:
        if changes is not None:
            changes.insert(self.index)

    def _lost_binding(self) -> List[PuzzleError]:
        # each group that forced the binding can no longer get its value
        return [
            group_error(src, self.bound, ErrorCondition.NO_GROUP_VALUE)
            for src in self.bound_sources
        ]

    def assign(self, value: int, changes: Optional[IntSet] = None) -> List[PuzzleError]:
        """Assign `value`. Does not check whether the cell was already assigned."""
        errs: List[PuzzleError] = []
        if self.bound and self.bound != value:
            errs.extend(self._lost_binding())
        if self.candidates is None or value not in self.candidates:
            errs.append(
                square_error(
                    self.index,
                    value,
                    ErrorAttribute.ASSIGNED_VALUE,
                    ErrorCondition.NOT_IN_SET,
                    self.candidates if self.candidates is not None else IntSet(),
                )
            )
        self.value = value
        self.candidates = None
        self._log(changes)
        return errs

    def bind(
        self, value: int, source: GroupID, changes: Optional[IntSet] = None
    ) -> List[PuzzleError]:
        """Record that `source` can only place `value` in this cell."""
        errs: List[PuzzleError] = []
        if self.bound and self.bound != value:
            errs.extend(self._lost_binding())
        if self.candidates is None or value not in self.candidates:
            errs.append(
                square_error(
                    self.index,
                    value,
                    ErrorAttribute.BOUND_VALUE,
                    ErrorCondition.NOT_IN_SET,
                    self.candidates if self.candidates is not None else IntSet(),
                )
            )
        self.bound = value
        self.bound_sources.append(source)
        self._log(changes)
        return errs

    def remove(self, value: int, changes: Optional[IntSet] = None) -> List[PuzzleError]:
        errs: List[PuzzleError] = []
        if self.bound and value == self.bound:
            errs.extend(self._lost_binding())
        if self.candidates is not None and self.candidates.remove(value):
            if not self.candidates:
                errs.append(
                    square_error(
                        self.index,
                        value,
                        ErrorAttribute.REMOVED_VALUE,
                        ErrorCondition.NO_POSSIBLE_VALUES,
                    )
                )
            self._log(changes)
        return errs

    def subtract(
        self, values: Iterable[int], changes: Optional[IntSet] = None
    ) -> List[PuzzleError]:
        return self._remove_multiple(IntSet(values), False, changes)

    def intersect(
        self, values: Iterable[int], changes: Optional[IntSet] = None
    ) -> List[PuzzleError]:
        return self._remove_multiple(IntSet(values), True, changes)

    def _remove_multiple(
        self, values: IntSet, keep: bool, changes: Optional[IntSet]
    ) -> List[PuzzleError]:
        errs: List[PuzzleError] = []
        if self.candidates is None:
            return errs
        if keep:
            attr = ErrorAttribute.RETAINED_VALUES
            removed, lost_bound = self.candidates.intersect(values, self.bound)
        else:
            attr = ErrorAttribute.REMOVED_VALUES
            removed, lost_bound = self.candidates.subtract(values, self.bound)
        if lost_bound:
            errs.extend(self._lost_binding())
        if not self.candidates:
            errs.append(square_error(self.index, values, attr, ErrorCondition.NO_POSSIBLE_VALUES))
        if removed:
            self._log(changes)
        return errs
