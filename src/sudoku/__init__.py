"""Sudoku puzzle model, propagation, parsing and solver core."""

from .errors import PuzzleError
from .geometry import Geometry, MappingCache
from .model import Choice, Solution, Square, State, Summary, Update
from .puzzle import Puzzle, PuzzleFactory, from_summary, new_puzzle, replay
from .solver_core import all_solutions, first_solution
from .parser import parse_puzzle

__all__ = [
    "PuzzleError",
    "Geometry",
    "MappingCache",
    "Choice",
    "Solution",
    "Square",
    "State",
    "Summary",
    "Update",
    "Puzzle",
    "PuzzleFactory",
    "new_puzzle",
    "from_summary",
    "replay",
    "all_solutions",
    "first_solution",
    "parse_puzzle",
]
