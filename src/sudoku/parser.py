"""Puzzle parser: convert puzzle records into summaries.

Supports:
- explicit values: a list of ints, a JSON array string, or a comma/space
  separated string ("1,0,3,0,...")
- text grids (the "puzzle" field): one glyph per cell, `.`, `_` or `0` for
  an empty cell, tile borders drawn with `|`, `+` and `-` are ignored
- numeric text grids: any line containing a comma is read as numbers, which
  is how grids with side lengths past the glyph table are written
"""

from __future__ import annotations

import json
import math
import re
from typing import Any, Dict, List

from . import config
from .errors import decode_error
from .geometry import Geometry
from .model import Summary

_TOKEN_SPLIT = re.compile(r"[,\s]+")
_EMPTY = set(config.EMPTY_GLYPHS)


def parse_puzzle(puzzle_json: Dict[str, Any]) -> Summary:
    """Build a Summary from a loaded record. Raises PuzzleError on bad input."""
    geometry = Geometry.lookup(_blank_to_none(puzzle_json.get("geometry")))
    side_length = _as_int(puzzle_json.get("side_length", puzzle_json.get("sidelen")))

    raw_values = puzzle_json.get("values")
    if _is_missing(raw_values):
        text = puzzle_json.get("puzzle")
        if not isinstance(text, str) or not text.strip():
            raise decode_error("Record has neither values nor puzzle text")
        values = parse_grid(text)
    elif isinstance(raw_values, str):
        values = _parse_value_string(raw_values)
    else:
        try:
            values = [_as_value(v) for v in raw_values]
        except TypeError:
            raise decode_error(f"Values must be a sequence, got {type(raw_values).__name__}")

    if not values:
        raise decode_error("No puzzle values found")
    return Summary(geometry=geometry.value, side_length=side_length, values=values)


def parse_grid(text: str) -> List[int]:
    """Read a text grid, top row first."""
    values: List[int] = []
    for line in text.splitlines():
        line = line.strip()
        if not line:
            continue
        if "," in line:
            values.extend(_parse_tokens(line))
            continue
        for ch in line:
            if ch.isspace() or ch in config.SEPARATOR_GLYPHS:
                continue
            values.append(parse_glyph(ch))
    return values


def parse_glyph(ch: str) -> int:
    if ch in config.EMPTY_GLYPHS:
        return 0
    where = config.VALUE_GLYPHS.find(ch)
    if where <= 0:
        raise decode_error(f"Unknown value glyph {ch!r}")
    return where


def _parse_value_string(raw: str) -> List[int]:
    raw = raw.strip()
    if raw.startswith("["):
        try:
            decoded = json.loads(raw)
        except json.JSONDecodeError as e:
            raise decode_error(f"Invalid JSON values: {e.msg}")
        if not isinstance(decoded, list):
            raise decode_error("JSON values must be an array")
        return [_as_value(v) for v in decoded]
    if "," in raw or " " in raw:
        return _parse_tokens(raw)
    # a compact glyph string such as "1.3..3.1"
    return parse_grid(raw)


def _parse_tokens(line: str) -> List[int]:
    out = []
    for token in _TOKEN_SPLIT.split(line.strip(" ,")):
        if not token or token in config.SEPARATOR_GLYPHS:
            continue
        if token in _EMPTY:
            out.append(0)
        else:
            out.append(_as_value(token))
    return out


def _as_value(value: Any) -> int:
    if value is None:
        return 0
    if isinstance(value, str) and value.strip() in _EMPTY | {""}:
        return 0
    try:
        number = int(value)
    except (TypeError, ValueError, OverflowError):
        raise decode_error(f"Not an integer value: {value!r}")
    if isinstance(value, float) and value != number:
        raise decode_error(f"Not an integer value: {value!r}")
    return number


def _as_int(value: Any) -> int:
    if _is_missing(value):
        return 0
    try:
        return int(value)
    except (TypeError, ValueError):
        raise decode_error(f"Not an integer side length: {value!r}")


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    if isinstance(value, str) and not value.strip():
        return True
    return False


def _blank_to_none(value: Any) -> Any:
    return None if _is_missing(value) else value
