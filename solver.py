"""Top-level sudoku solve interface.

Expose `solve_puzzle(puzzle)` that accepts a built Puzzle, a Summary, or a raw
puzzle dictionary compatible with `src.sudoku.parser.parse_puzzle`.
"""

from typing import Any, List, Optional

from src.sudoku import solver_core
from src.sudoku.model import Solution, Summary
from src.sudoku.parser import parse_puzzle
from src.sudoku.puzzle import Puzzle, from_summary
from src.utils.trace import Tracer


def solve_puzzle(puzzle: Any, first_only: bool = False, tracer: Optional[Tracer] = None) -> List[Solution]:
    """
    Solve a puzzle and return its solutions (an empty list if it has none).
    Accepts:
      - Puzzle instances (used directly, never modified)
      - Summary instances
      - Raw puzzle dictionaries (parsed via `parse_puzzle`)
    With `first_only`, the search stops at the first solution.
    """
    if isinstance(puzzle, Puzzle):
        built = puzzle
    elif isinstance(puzzle, Summary):
        built = from_summary(puzzle)
    elif isinstance(puzzle, dict):
        built = from_summary(parse_puzzle(puzzle))
    else:
        raise TypeError("solve_puzzle expects a Puzzle, Summary or puzzle dictionary")

    if first_only:
        solution = solver_core.first_solution(built, tracer)
        return [solution] if solution is not None else []
    return solver_core.all_solutions(built, tracer)


__all__ = ["solve_puzzle"]
