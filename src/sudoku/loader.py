import json
import os
from pathlib import Path
from typing import Any, Dict, List

import pandas as pd

from src.utils.io import load_json
from src.utils.logging_utils import get_logger

logger = get_logger()


def load_puzzles(file_path: str) -> List[Dict[str, Any]]:
    """
    Reads puzzles from a file. Handles .parquet, .csv, .json and .jsonl formats.
    Returns a list of raw puzzle dictionaries, each with an "id".
    """
    if not os.path.exists(file_path):
        raise FileNotFoundError(f"File not found: {file_path}")

    stem = Path(file_path).stem
    counter = {"n": 0}

    def _is_nonempty_str(value: Any) -> bool:
        return isinstance(value, str) and value.strip() != ""

    def _normalize_record(record: Dict[str, Any]) -> Dict[str, Any]:
        counter["n"] += 1
        record = {k: v for k, v in record.items()}

        values = record.get("values")
        if _is_nonempty_str(values) and values.strip().startswith("["):
            try:
                record["values"] = json.loads(values)
            except json.JSONDecodeError:
                pass  # left for the parser to report
        elif hasattr(values, "tolist"):
            # parquet list columns come back as numpy arrays
            record["values"] = values.tolist()

        ident = record.get("id")
        if ident is None or (isinstance(ident, float) and ident != ident) or str(ident).strip() == "":
            record["id"] = f"{stem}-{counter['n']}"
        else:
            record["id"] = str(ident)
        return record

    def _read_lines(f) -> List[Dict[str, Any]]:
        data = []
        for line in f:
            if not line.strip():
                continue
            try:
                obj = json.loads(line)
            except json.JSONDecodeError:
                logger.warning("Skipping malformed line in %s", file_path)
                continue
            if isinstance(obj, dict):
                data.append(_normalize_record(obj))
        return data

    # Case 1: Parquet File (Binary)
    if file_path.endswith(".parquet"):
        try:
            df = pd.read_parquet(file_path)
        except Exception as e:
            logger.error("Error reading parquet %s: %s", file_path, e)
            return []
        return [_normalize_record(r) for r in df.to_dict(orient="records")]

    # Case 2: CSV table
    if file_path.endswith(".csv"):
        df = pd.read_csv(file_path, dtype=str, keep_default_na=False)
        return [_normalize_record(r) for r in df.to_dict(orient="records")]

    # Case 3: JSON File (Text; array or object)
    if file_path.endswith(".json"):
        try:
            payload = load_json(file_path)
        except json.JSONDecodeError:
            # Some sources use ".json" but actually store JSONL; fall back to line-delimited parsing.
            with open(file_path, "r", encoding="utf-8") as f:
                return _read_lines(f)
        if isinstance(payload, list):
            return [_normalize_record(p) for p in payload if isinstance(p, dict)]
        if isinstance(payload, dict):
            return [_normalize_record(payload)]
        return []

    # Case 4: JSONL File (Text)
    with open(file_path, "r", encoding="utf-8") as f:
        return _read_lines(f)

