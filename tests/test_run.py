import csv
import json
import logging
import sys

from puzzles import SIMPLE_4, SOLVED_4
from run import format_solutions, main, show_puzzle, write_results_csv
from src.sudoku.model import Solution, Summary
from src.utils.logging_utils import get_logger


def _write_batch(path, records):
    path.write_text(json.dumps(records))
    return path


def test_format_solutions():
    solutions = [Solution(values=SOLVED_4, rating=1)]
    assert format_solutions(solutions) == [{"values": SOLVED_4, "rating": 1}]
    assert format_solutions([]) == []


def test_show_puzzle_lists_solutions():
    text = show_puzzle("p1", Summary("square", 4, SOLVED_4), [Solution(values=SOLVED_4, rating=1)])
    assert text.startswith("Puzzle p1:\n")
    assert "Solution 1 (rating 1):" in text
    assert show_puzzle("p2", Summary("square", 4, SIMPLE_4), []).endswith("No solutions\n")


def test_main_single_file(monkeypatch, tmp_path, capsys):
    monkeypatch.delenv("SUDOKU_TRACE", raising=False)
    path = _write_batch(tmp_path / "one.json", {"id": "puzzle1", "values": SIMPLE_4})
    monkeypatch.setattr(sys, "argv", ["run.py", str(path)])

    results = main()

    assert results[0]["id"] == "puzzle1"
    assert results[0]["count"] == 2
    assert results[0]["steps"] > 0
    printed = [json.loads(line) for line in capsys.readouterr().out.splitlines()]
    assert printed[0]["id"] == "puzzle1"


def test_main_directory_input(monkeypatch, tmp_path):
    for i in range(3):
        _write_batch(tmp_path / f"puzzle{i}.json", {"id": f"puzzle{i}", "values": SOLVED_4})
    (tmp_path / "notes.txt").write_text("not a puzzle")
    monkeypatch.setattr(sys, "argv", ["run.py", str(tmp_path), "--first"])

    results = main()

    assert [r["id"] for r in results] == ["puzzle0", "puzzle1", "puzzle2"]
    assert all(r["count"] == 1 for r in results)


def test_main_records_bad_puzzles(monkeypatch, tmp_path):
    path = _write_batch(tmp_path / "bad.json", [{"id": "short", "values": [1, 2, 3]}, {"values": SOLVED_4}])
    monkeypatch.setattr(sys, "argv", ["run.py", str(path)])

    results = main()

    assert results[0]["steps"] == -1
    assert results[0]["error"]["condition"] == "non_square"
    assert results[1]["id"] == "bad-2"
    assert results[1]["count"] == 1


def test_csv_output(monkeypatch, tmp_path):
    path = _write_batch(tmp_path / "in.json", {"id": "puzzle_csv", "values": SIMPLE_4})
    output_path = tmp_path / "out.csv"
    monkeypatch.setattr(sys, "argv", ["run.py", str(path), "--output", str(output_path)])

    main()

    content = output_path.read_text()
    assert "id,geometry,count,solutions,steps" in content
    with open(output_path, newline="", encoding="utf-8") as f:
        rows = list(csv.DictReader(f))
    assert rows[0]["id"] == "puzzle_csv"
    assert rows[0]["geometry"] == "square"
    assert len(json.loads(rows[0]["solutions"])) == 2


def test_json_output_and_traces(monkeypatch, tmp_path):
    monkeypatch.delenv("SUDOKU_TRACE", raising=False)
    path = _write_batch(tmp_path / "in.json", {"id": "traced", "values": SIMPLE_4})
    output_path = tmp_path / "out.json"
    trace_dir = tmp_path / "traces"
    monkeypatch.setattr(
        sys, "argv", ["run.py", str(path), "--output", str(output_path), "--trace-dir", str(trace_dir)]
    )

    main()

    payload = json.loads(output_path.read_text())
    assert payload[0]["solutions"][0]["choices"] == [{"index": 2, "value": 2}]
    assert (trace_dir / "traced.csv").exists()


def test_write_results_csv(tmp_path):
    output_path = tmp_path / "results.csv"
    write_results_csv(
        [
            {"id": "x", "geometry": "square", "count": 0, "solutions": [], "steps": -1,
             "error": {"message": "Puzzle size (3) is not a perfect square"}},
            {"id": "y", "geometry": "square", "count": 0, "solutions": [], "steps": 4},
        ],
        output_path,
    )
    lines = output_path.read_text().splitlines()
    assert lines[0] == "id,geometry,count,solutions,steps,error"
    assert lines[1] == "x,square,0,[],-1,Puzzle size (3) is not a perfect square"
    assert lines[2] == "y,square,0,[],4,"


def test_csv_output_keeps_error_messages(monkeypatch, tmp_path):
    path = _write_batch(tmp_path / "bad.json", [{"id": "short", "values": [1, 2, 3]}])
    output_path = tmp_path / "out.csv"
    monkeypatch.setattr(sys, "argv", ["run.py", str(path), "--output", str(output_path)])

    results = main()

    with open(output_path, newline="", encoding="utf-8") as f:
        rows = list(csv.DictReader(f))
    assert rows[0]["steps"] == "-1"
    assert rows[0]["error"] == results[0]["error"]["message"]
    assert rows[0]["error"] != ""


def test_log_level_flag(monkeypatch, tmp_path):
    logger = get_logger()
    previous = logger.level
    path = _write_batch(tmp_path / "one.json", {"id": "quiet", "values": SOLVED_4})
    monkeypatch.setattr(sys, "argv", ["run.py", str(path), "--log-level", "debug"])

    try:
        main()
        assert logger.level == logging.DEBUG
    finally:
        logger.setLevel(previous)
