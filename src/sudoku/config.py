"""Shared settings for the sudoku engine.

Geometry names and codes, supported side lengths, and the glyph table used
to read and print puzzle values all live here so the parser, the renderer
and the geometry builders agree on them.
"""

from __future__ import annotations

import os

# ==== Geometries ============================================================

SQUARE_GEOMETRY_NAME: str = "square"
RECTANGULAR_GEOMETRY_NAME: str = "rectangular"

# Alternate names accepted for the square geometry.
SQUARE_GEOMETRY_ALIASES = ("", "standard", "default", "sudoku")

# Compact codes, used by callers that store a puzzle as a flat int list.
SQUARE_GEOMETRY_CODE: int = 1
RECTANGULAR_GEOMETRY_CODE: int = 2

# Side length bounds for each geometry (inclusive).
SQUARE_MIN_SIDE: int = 4
SQUARE_MAX_SIDE: int = 225
RECTANGULAR_MIN_SIDE: int = 6
RECTANGULAR_MAX_SIDE: int = 240

# ==== Value glyphs ==========================================================

# Glyph for each value in a one-character-per-cell grid; index 0 is empty.
VALUE_GLYPHS: str = (
    " 123456789"
    "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
    "abcdefghijklmnopqrstuvwxyz"
)
EMPTY_GLYPHS: str = "._0"
NON_VALUE_GLYPH: str = "?"
BIG_VALUE_GLYPH: str = "!"

# Characters that only decorate a text grid (tile borders).
SEPARATOR_GLYPHS: str = "|+-"

# ==== Environment ===========================================================

TRACE_ENV: str = "SUDOKU_TRACE"


def env_flag(name: str, default: bool = False) -> bool:
    """Read a boolean switch such as ``SUDOKU_TRACE=1`` from the environment."""
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")
