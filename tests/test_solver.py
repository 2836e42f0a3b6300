"""Integration-style tests for the top-level solve interface."""

import pytest

from puzzles import MULTI_CHOICE_4, ONE_STAR_9, ONE_STAR_9_SOLUTION, RECT_6, RECT_6_SOLUTION, SIMPLE_4
from solver import solve_puzzle
from src.sudoku.errors import PuzzleError
from src.sudoku.model import Summary
from src.sudoku.puzzle import new_puzzle
from src.utils.trace import Tracer


def test_solver_accepts_records():
    solutions = solve_puzzle({"id": "star1", "values": ONE_STAR_9}, tracer=Tracer(enabled=False))
    assert [s.values for s in solutions] == [ONE_STAR_9_SOLUTION]


def test_solver_accepts_puzzles_and_summaries():
    p = new_puzzle(SIMPLE_4)
    assert len(solve_puzzle(p, tracer=Tracer(enabled=False))) == 2
    assert p.values() == SIMPLE_4
    summary = Summary("rectangular", 6, RECT_6)
    assert solve_puzzle(summary, tracer=Tracer(enabled=False))[0].values == RECT_6_SOLUTION


def test_first_only_stops_early():
    solutions = solve_puzzle({"values": MULTI_CHOICE_4}, first_only=True, tracer=Tracer(enabled=False))
    assert len(solutions) == 1
    assert solutions[0].to_dict()["choices"] == [{"index": 2, "value": 2}, {"index": 10, "value": 1}]


def test_unsolvable_gives_empty_list():
    assert solve_puzzle({"values": [1, 1] + [0] * 14}, tracer=Tracer(enabled=False)) == []


def test_bad_input():
    with pytest.raises(TypeError):
        solve_puzzle([1, 0, 3, 0])
    with pytest.raises(PuzzleError):
        solve_puzzle({"values": [0] * 17})
