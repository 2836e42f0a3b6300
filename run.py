"""CLI entrypoint: load puzzle(s), run solver, and report solutions and effort."""

import argparse
import csv
import json
from pathlib import Path
from typing import Any, Dict, List

from tqdm import tqdm

from solver import solve_puzzle
from src.sudoku import config
from src.sudoku.errors import PuzzleError
from src.sudoku.loader import load_puzzles
from src.sudoku.model import Summary
from src.sudoku.parser import parse_puzzle
from src.sudoku.puzzle import from_summary
from src.sudoku.render import errors_string, values_string
from src.utils.io import save_json
from src.utils.logging_utils import get_logger, set_level
from src.utils.trace import enable_tracing, get_tracer, reset_tracer

logger = get_logger()

PUZZLE_SUFFIXES = [".json", ".jsonl", ".parquet", ".csv"]


def parse_args():
    parser = argparse.ArgumentParser(description="Run the sudoku solver on a batch of puzzles")
    parser.add_argument("input", type=Path, help="Path to a puzzle file or directory of puzzle files")
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Optional path to write results (CSV, or JSON when the name ends in .json)",
    )
    parser.add_argument("--first", action="store_true", help="Stop at the first solution of each puzzle")
    parser.add_argument("--show", action="store_true", help="Print each puzzle and its solutions as grids")
    parser.add_argument(
        "--trace-dir",
        type=Path,
        default=None,
        help="Optional directory for one solver trace CSV per puzzle",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        type=str.upper,
        help="Override the SUDOKU_LOG_LEVEL logging level",
    )
    return parser.parse_args()


def format_solutions(solutions) -> List[Dict[str, Any]]:
    return [s.to_dict() for s in solutions]


def show_puzzle(puzzle_id: str, summary: Summary, solutions) -> str:
    """Text rendering of a puzzle followed by each of its solutions."""
    puzzle = from_summary(summary)
    out = f"Puzzle {puzzle_id}:\n" + values_string(puzzle, True) + errors_string(puzzle)
    for n, solution in enumerate(solutions, start=1):
        solved = from_summary({
            "geometry": puzzle.geometry.value,
            "side_length": puzzle.side_length,
            "values": solution.values,
        })
        out += f"Solution {n} (rating {solution.rating}):\n" + values_string(solved)
    if not solutions:
        out += "No solutions\n"
    return out


def write_results_csv(results, output_path: Path):
    with open(output_path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(["id", "geometry", "count", "solutions", "steps", "error"])

        for r in results:
            writer.writerow([
                r["id"],
                r["geometry"],
                r["count"],
                json.dumps(r["solutions"], ensure_ascii=False, separators=(",", ":")),
                r["steps"],
                r.get("error", {}).get("message", ""),
            ])


def collect_puzzles(input_path: Path) -> List[Dict[str, Any]]:
    puzzles = []
    if input_path.is_file():
        puzzles = load_puzzles(str(input_path))
    elif input_path.is_dir():
        for file_path in sorted(input_path.iterdir()):
            if file_path.suffix in PUZZLE_SUFFIXES:
                puzzles.extend(load_puzzles(str(file_path)))
    else:
        raise ValueError(f"Input path {input_path} is neither file nor directory")
    return puzzles


def main():
    args = parse_args()
    if args.log_level:
        set_level(args.log_level)
    puzzles = collect_puzzles(args.input)
    results = []

    for puzzle in tqdm(puzzles, desc="Solving", unit="puzzle", disable=len(puzzles) < 2):
        reset_tracer()
        enable_tracing(config.env_flag(config.TRACE_ENV, default=True))
        tracer = get_tracer()
        puzzle_id = puzzle.get("id", "unknown")

        try:
            parsed = parse_puzzle(puzzle)
            solutions = solve_puzzle(parsed, first_only=args.first, tracer=tracer)
            stats = tracer.summary()
            results.append({
                "id": puzzle_id,
                "geometry": parsed.geometry,
                "count": len(solutions),
                "solutions": format_solutions(solutions),
                "steps": stats["num_assignments"] + stats["num_guesses"],
            })
            if args.show:
                print(show_puzzle(puzzle_id, parsed, solutions))
        except PuzzleError as e:
            logger.error("Failed to solve puzzle %s: %s", puzzle_id, e)
            results.append({
                "id": puzzle_id,
                "geometry": "",
                "count": 0,
                "solutions": [],
                "steps": -1,
                "error": e.to_dict(),
            })

        if args.trace_dir:
            tracer.to_csv(args.trace_dir / f"{puzzle_id}.csv")

    if args.output:
        if args.output.suffix == ".json":
            save_json(args.output, results)
        else:
            write_results_csv(results, args.output)
    else:
        for r in results:
            print(json.dumps(r, ensure_ascii=False))
    return results


if __name__ == "__main__":
    main()
