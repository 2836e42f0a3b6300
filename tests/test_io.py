"""Tests for the JSON helpers."""

from src.utils.io import load_json, save_json


def test_save_then_load(tmp_path):
    path = tmp_path / "nested" / "results.json"
    save_json(path, [{"id": "p1", "count": 2}])
    assert path.read_text().endswith("]\n")
    assert load_json(path) == [{"id": "p1", "count": 2}]
