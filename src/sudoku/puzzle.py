"""The puzzle: a network of cells and groups over one geometry mapping.

Puzzles are built from a flat list of values (0 for an empty cell). The
build propagates the given values through every group, so each empty cell
starts with its minimal candidate set and every forced binding is known.
Problems found along the way (duplicates, values no cell can take) are
kept on the puzzle as errors; a puzzle with errors is still a valid object
that can be inspected, but it accepts no further assignments.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence, Union

from . import render
from .cell import Cell
from .errors import (
    ErrorAttribute,
    ErrorCondition,
    ErrorScope,
    ErrorStructure,
    PuzzleError,
    argument_error,
    range_error,
)
from .geometry import Geometry, MappingCache, PuzzleMapping
from .group import Group
from .intset import IntSet
from .model import Choice, Solution, Square, State, Summary, Update
from src.utils.logging_utils import get_logger

logger = get_logger()


class Puzzle:
    def __init__(
        self,
        mapping: PuzzleMapping,
        cells: List[Optional[Cell]],
        groups: List[Optional[Group]],
        errors: Optional[List[PuzzleError]] = None,
    ):
        self.mapping = mapping
        self._cells = cells  # 1-based; slot 0 unused
        self._groups = groups  # 1-based; slot 0 unused
        self._errors: List[PuzzleError] = list(errors or [])

    @classmethod
    def create(cls, mapping: PuzzleMapping, values: Sequence[int]) -> "Puzzle":
        """Build a puzzle from one value per cell (0 = empty).

        Raises PuzzleError if the value count does not fit the mapping or a
        value is outside 1..side_length. Inconsistent but well-formed input
        produces a puzzle that carries errors.
        """
        side = mapping.side_length
        if len(values) != mapping.square_count:
            raise PuzzleError(
                scope=ErrorScope.ARGUMENT,
                structure=ErrorStructure.ATTRIBUTE_VALUE,
                attribute=ErrorAttribute.PUZZLE_SIZE,
                condition=ErrorCondition.WRONG_PUZZLE_SIZE,
                values=[len(values), side],
            )

        cells: List[Optional[Cell]] = [None]
        for i, value in enumerate(values, start=1):
            if value == 0:
                cells.append(Cell.empty(i, side))
            elif 1 <= value <= side:
                cells.append(Cell.filled(i, value))
            else:
                raise range_error(ErrorAttribute.VALUE, value, 1, side)

        errors: List[PuzzleError] = []
        groups: List[Optional[Group]] = [None]
        for gi in range(1, mapping.group_count + 1):
            group, errs = Group.build(mapping.group(gi), cells)
            groups.append(group)
            errors.extend(errs)

        for group in groups[1:]:
            errors.extend(group.analyze(cells))

        return cls(mapping, cells, groups, errors)

    # ---- properties and views ---------------------------------------------

    @property
    def geometry(self) -> Geometry:
        return self.mapping.geometry

    @property
    def side_length(self) -> int:
        return self.mapping.side_length

    @property
    def errors(self) -> List[PuzzleError]:
        return list(self._errors)

    def cell(self, index: int) -> Cell:
        """Read access to a cell. Callers must not mutate it."""
        return self._cells[index]

    def group(self, group_index: int) -> Group:
        return self._groups[group_index]

    def values(self) -> List[int]:
        return [c.value for c in self._cells[1:]]

    def candidates(self) -> List[List[int]]:
        return [c.candidates.to_list() if c.candidates is not None else [] for c in self._cells[1:]]

    def empty_count(self) -> int:
        return sum(1 for c in self._cells[1:] if not c.value)

    def is_solved(self) -> bool:
        return not self._errors and self.empty_count() == 0

    def squares(self, indices: Optional[Iterable[int]] = None) -> List[Square]:
        if indices is None:
            indices = range(1, self.mapping.square_count + 1)
        out = []
        for i in indices:
            c = self._cells[i]
            square = Square(index=c.index)
            if c.value:
                square.value = c.value
            else:
                square.candidates = c.candidates.to_list()
                # a lone candidate makes any binding redundant
                if len(c.candidates) > 1 and c.bound:
                    square.bound = c.bound
                    square.bound_sources = list(c.bound_sources)
            out.append(square)
        return out

    def state(self) -> State:
        return State(
            geometry=self.geometry.value,
            side_length=self.side_length,
            values=self.values(),
            errors=self.errors,
        )

    def summary(self) -> Summary:
        return Summary(
            geometry=self.geometry.value,
            side_length=self.side_length,
            values=self.values(),
        )

    # ---- assignment ---------------------------------------------------------

    def place(self, index: int, value: int) -> IntSet:
        """Assign `value` to the empty cell `index` and propagate it.

        No request checks are made: the caller guarantees the cell is empty
        and the index and value are in range. Errors produced are added to
        the puzzle. Returns the indices of every cell that changed,
        including `index`.
        """
        changes = IntSet([index])
        mapping = self.mapping
        self._errors.extend(self._cells[index].assign(value, changes))

        # Groups to analyze: the three containing `index`, plus every group
        # containing an unassigned cell of those three, since those cells
        # are about to lose `value` as a candidate.
        affected = [0] * (mapping.group_count + 1)
        for gi in mapping.groups_for(index):
            affected[gi] += 1
            for ei in mapping.group(gi).indices:
                if not self._cells[ei].value:
                    for gj in mapping.groups_for(ei):
                        affected[gj] += 1

        for gi in mapping.groups_for(index):
            self._errors.extend(self._groups[gi].assign(self._cells, index, changes))

        for gi, count in enumerate(affected):
            if count:
                self._errors.extend(self._groups[gi].analyze(self._cells, changes))

        return changes

    def assign(self, choice: Choice) -> Update:
        """Apply a client's choice and report the changed cells.

        Raises PuzzleError, leaving the puzzle untouched, if the puzzle
        already has errors, the index or value is out of range, or the cell
        is already assigned. Errors in the returned Update mean the new
        state is unsolvable; the assignment has still been made.
        """
        if self._errors:
            raise PuzzleError(
                scope=ErrorScope.ARGUMENT,
                structure=ErrorStructure.SCOPE,
                condition=ErrorCondition.INVALID_PUZZLE_ASSIGNMENT,
            )
        index, value = choice.index, choice.value
        if not 1 <= index <= self.mapping.square_count:
            raise range_error(ErrorAttribute.INDEX, index, 1, self.mapping.square_count)
        if not 1 <= value <= self.side_length:
            raise range_error(ErrorAttribute.VALUE, value, 1, self.side_length)
        current = self._cells[index].value
        if current:
            raise PuzzleError(
                scope=ErrorScope.ARGUMENT,
                structure=ErrorStructure.ATTRIBUTE_VALUE,
                attribute=ErrorAttribute.ASSIGNED_VALUE,
                condition=ErrorCondition.DUPLICATE_ASSIGNMENT,
                values=[value, index, current],
            )

        changed = self.place(index, value)
        if self._errors:
            logger.debug("Assign of %d to square %d left %d errors", value, index, len(self._errors))
        return Update(squares=self.squares(changed), errors=self.errors)

    def copy(self) -> "Puzzle":
        """A deep copy. Only the immutable mapping is shared."""
        cells: List[Optional[Cell]] = [None] + [c.copy() for c in self._cells[1:]]
        groups: List[Optional[Group]] = [None] + [g.copy() for g in self._groups[1:]]
        return Puzzle(self.mapping, cells, groups, self._errors)

    # ---- solving ------------------------------------------------------------

    def solutions(self, tracer=None) -> List[Solution]:
        """Every solution of the puzzle. The puzzle itself is not changed."""
        from .solver_core import all_solutions

        return all_solutions(self, tracer)

    def first_solution(self, tracer=None) -> Optional[Solution]:
        from .solver_core import first_solution

        return first_solution(self, tracer)

    def __str__(self) -> str:
        return render.values_string(self, True) + render.errors_string(self)


class PuzzleFactory:
    """Builds puzzles, sharing one mapping cache across all of them."""

    def __init__(self, cache: Optional[MappingCache] = None):
        self.cache = cache if cache is not None else MappingCache()

    def new(
        self, values: Sequence[int], geometry: Union[Geometry, str, int, None] = Geometry.SQUARE
    ) -> Puzzle:
        mapping = self.cache.mapping_for(len(values), geometry)
        return Puzzle.create(mapping, values)

    def from_summary(self, summary: Union[Summary, dict]) -> Puzzle:
        if isinstance(summary, dict):
            summary = Summary.from_dict(summary)
        if not summary.values:
            raise argument_error(ErrorAttribute.SUMMARY, ErrorCondition.EMPTY_ARGUMENT)
        mapping = self.cache.mapping_for(len(summary.values), summary.geometry)
        if summary.side_length and summary.side_length != mapping.side_length:
            raise PuzzleError(
                scope=ErrorScope.ARGUMENT,
                structure=ErrorStructure.ATTRIBUTE_VALUE,
                attribute=ErrorAttribute.PUZZLE_SIZE,
                condition=ErrorCondition.WRONG_PUZZLE_SIZE,
                values=[len(summary.values), summary.side_length],
            )
        return Puzzle.create(mapping, summary.values)


_default_factory = PuzzleFactory()


def new_puzzle(
    values: Sequence[int], geometry: Union[Geometry, str, int, None] = Geometry.SQUARE
) -> Puzzle:
    return _default_factory.new(values, geometry)


def from_summary(summary: Union[Summary, dict]) -> Puzzle:
    return _default_factory.from_summary(summary)


def replay(
    summary: Union[Summary, dict],
    choices: Iterable[Choice],
    factory: Optional[PuzzleFactory] = None,
) -> Puzzle:
    """Rebuild a puzzle from its summary and re-apply a history of choices.

    Undoing a step is a replay of the history without its last choice.
    """
    puzzle = (factory or _default_factory).from_summary(summary)
    for choice in choices:
        puzzle.assign(choice)
    return puzzle
