"""Backtracking sudoku solver: Ariadne's thread.

The search works the way many people solve by hand:

1. Fill in every value the puzzle already forces (bound values and cells
   with a single candidate).
2. If the puzzle is solved, stop. If it has errors, rewind (step 4).
3. Otherwise guess: pick the unbound empty cell with the fewest candidates
   (lowest index on ties), save the puzzle on the thread together with the
   remaining candidates, place the first candidate and go to step 1.
4. Rewind the thread to the most recent guess that still has untried
   candidates, restore its saved puzzle, place the next candidate and go to
   step 1. If no guess has candidates left, the puzzle cannot be solved.

Finding every solution is the same search, rewinding after each solution
instead of stopping.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .intset import IntSet
from .model import Choice, Solution
from .puzzle import Puzzle
from src.utils.logging_utils import get_logger
from src.utils.trace import Tracer, get_tracer

logger = get_logger()


@dataclass
class Frame:
    """One guess on the thread."""

    snapshot: Puzzle  # the puzzle before the guess
    index: int  # cell guessed
    count: int  # candidates the cell had
    value: int  # candidate being tried
    remaining: IntSet = field(default_factory=IntSet)  # candidates not yet tried


Thread = List[Frame]


def settle(puzzle: Puzzle, tracer: Optional[Tracer] = None, depth: int = 0) -> bool:
    """Place forced values until the puzzle is solved or stuck.

    Returns True when no empty cell remains. Returns False as soon as the
    puzzle has errors, or when a full pass finds nothing to place.
    """
    tracer = tracer or get_tracer()
    square_count = puzzle.mapping.square_count
    while True:
        known, unknown = 0, 0
        for i in range(1, square_count + 1):
            cell = puzzle.cell(i)
            if cell.value:
                continue
            if cell.bound:
                known += 1
                tracer.log_assign(i, cell.bound, len(cell.candidates), depth, "bound")
                puzzle.place(i, cell.bound)
            elif len(cell.candidates) == 1:
                known += 1
                tracer.log_assign(i, cell.candidates[0], 1, depth, "single")
                puzzle.place(i, cell.candidates[0])
            else:
                unknown += 1
            if puzzle.errors:
                return False
        if unknown == 0:
            return True
        if known == 0:
            return False


def push_choice(puzzle: Puzzle, thread: Thread, tracer: Optional[Tracer] = None) -> Tuple[Puzzle, Thread]:
    """Guess a value for the most constrained unbound empty cell.

    Raises RuntimeError if there is no such cell. The guess is placed on
    `puzzle` itself; a snapshot taken before it goes on the thread. A guess
    that leads to errors is left for the caller to rewind.
    """
    tracer = tracer or get_tracer()
    best_index, best_count = 0, puzzle.side_length + 1
    for i in range(1, puzzle.mapping.square_count + 1):
        cell = puzzle.cell(i)
        if cell.value or cell.bound:
            continue
        count = len(cell.candidates)
        if count < best_count:
            best_index, best_count = i, count
            if count == 2:
                break
    if best_index == 0:
        raise RuntimeError("push_choice called with no unbound empty square")

    candidates = puzzle.cell(best_index).candidates
    frame = Frame(
        snapshot=puzzle.copy(),
        index=best_index,
        count=best_count,
        value=candidates[0],
        remaining=IntSet(candidates.to_list()[1:]),
    )
    thread.append(frame)
    logger.debug("Guessing %d for square %d (%d candidates, depth %d)",
                 frame.value, frame.index, frame.count, len(thread))
    tracer.log_guess(frame.index, frame.value, frame.count, len(thread))
    puzzle.place(frame.index, frame.value)
    return puzzle, thread


def pop_choice(puzzle: Puzzle, thread: Thread, tracer: Optional[Tracer] = None) -> Tuple[Puzzle, Thread]:
    """Rewind to the latest guess with untried candidates and try the next one.

    If every guess is exhausted the thread comes back empty along with the
    incoming puzzle.
    """
    tracer = tracer or get_tracer()
    while thread:
        top = thread[-1]
        if not top.remaining:
            tracer.log_backtrack(top.index, len(thread), "No candidates left")
            thread.pop()
            continue
        restored = top.snapshot.copy()
        top.value = top.remaining[0]
        top.remaining.remove(top.value)
        logger.debug("Backtracking to square %d, trying %d (depth %d)",
                     top.index, top.value, len(thread))
        tracer.log_backtrack(top.index, len(thread), f"Trying next candidate {top.value}")
        tracer.log_guess(top.index, top.value, top.count, len(thread))
        restored.place(top.index, top.value)
        return restored, thread
    return puzzle, thread


def solve(puzzle: Puzzle, thread: Optional[Thread] = None,
          tracer: Optional[Tracer] = None) -> Tuple[Puzzle, Thread]:
    """Run the search from `puzzle` and the guesses already on `thread`.

    Returns the solved puzzle with the thread that led to it, or a puzzle
    with errors and an empty thread when nothing is left to try.
    """
    tracer = tracer or get_tracer()
    if thread is None:
        thread = []
    while True:
        if not puzzle.errors and settle(puzzle, tracer, len(thread)):
            return puzzle, thread
        if puzzle.errors:
            puzzle, thread = pop_choice(puzzle, thread, tracer)
            if not thread:
                return puzzle, thread
            continue
        puzzle, thread = push_choice(puzzle, thread, tracer)


def new_solution(puzzle: Puzzle, thread: Thread) -> Solution:
    """Solution for a solved puzzle and the (non-empty) thread that solved it."""
    return Solution(
        values=puzzle.values(),
        choices=[Choice(frame.index, frame.value) for frame in thread],
        rating=rate_choices([frame.count for frame in thread]),
    )


def all_solutions(puzzle: Puzzle, tracer: Optional[Tracer] = None) -> List[Solution]:
    """Every solution of `puzzle`, in search order. `puzzle` is not altered."""
    tracer = tracer or get_tracer()
    forced = rate_no_choices(puzzle.copy(), tracer)
    if forced is not None:
        values, rating = forced
        tracer.log_solution_found(0, "No guesses needed")
        return [Solution(values=values, rating=rating)]

    solutions: List[Solution] = []
    current, thread = solve(puzzle.copy(), [], tracer)
    while not current.errors:
        solutions.append(new_solution(current, thread))
        tracer.log_solution_found(len(thread), f"Solution {len(solutions)}")
        current, thread = pop_choice(current, thread, tracer)
        if not thread:
            break
        current, thread = solve(current, thread, tracer)
    logger.debug("Found %d solutions", len(solutions))
    return solutions


def first_solution(puzzle: Puzzle, tracer: Optional[Tracer] = None) -> Optional[Solution]:
    """The first solution `all_solutions` would report, or None."""
    tracer = tracer or get_tracer()
    forced = rate_no_choices(puzzle.copy(), tracer)
    if forced is not None:
        values, rating = forced
        tracer.log_solution_found(0, "No guesses needed")
        return Solution(values=values, rating=rating)

    current, thread = solve(puzzle.copy(), [], tracer)
    if current.errors:
        return None
    tracer.log_solution_found(len(thread), "Solution 1")
    return new_solution(current, thread)


def rate_choices(counts: List[int]) -> int:
    """Rating of a solution that needed guesses, from each guess's candidate count."""
    if len(counts) == 1:
        return 4 if counts[0] > 2 else 3
    if len(counts) == 2:
        return 5 if counts[0] > 2 or counts[1] > 2 else 4
    return 5


def rate_no_choices(puzzle: Puzzle, tracer: Optional[Tracer] = None) -> Optional[Tuple[List[int], int]]:
    """Try to solve `puzzle` (in place) without guessing.

    Single-candidate cells are always filled first; a bound cell is only
    used when no single is left, one at a time. Returns the values and a
    rating of 1 (fewer than side/2 bound placements) or 2, or None when
    guessing is needed or the puzzle has errors.
    """
    tracer = tracer or get_tracer()
    square_count = puzzle.mapping.square_count
    total_bound = 0
    while True:
        single = 0
        for i in range(1, square_count + 1):
            cell = puzzle.cell(i)
            if not cell.value and len(cell.candidates) == 1:
                single += 1
                tracer.log_assign(i, cell.candidates[0], 1, 0, "single")
                puzzle.place(i, cell.candidates[0])
        if single:
            continue

        bound = 0
        for i in range(1, square_count + 1):
            cell = puzzle.cell(i)
            if not cell.value and cell.bound:
                bound = 1
                tracer.log_assign(i, cell.bound, len(cell.candidates), 0, "bound")
                puzzle.place(i, cell.bound)
                break
        total_bound += bound
        if bound:
            continue

        if puzzle.errors or puzzle.empty_count():
            return None
        break

    rating = 1 if total_bound < puzzle.side_length // 2 else 2
    return puzzle.values(), rating
