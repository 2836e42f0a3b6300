"""Pretty-printed puzzles, for debugging and for the CLI's --show option."""

from typing import Any

from . import config


def glyph(value: int) -> str:
    """One-character rendering of a value."""
    if value < 0:
        return config.NON_VALUE_GLYPH
    if value < len(config.VALUE_GLYPHS):
        return config.VALUE_GLYPHS[value]
    return config.BIG_VALUE_GLYPH


def _square(cell: Any, show_bindings: bool, blank: str) -> str:
    # every rendering is three characters wide
    if cell.value:
        return f" {glyph(cell.value)} "
    if show_bindings:
        candidates = cell.candidates
        if len(candidates) == 1:
            return f"={glyph(candidates[0])} "
        if cell.bound:
            return f"+{glyph(cell.bound)} "
        if len(candidates) == 2:
            return f"{glyph(candidates[0])},{glyph(candidates[1])}"
    return blank


def values_string(puzzle: Any, show_bindings: bool = False) -> str:
    """The grid as text, with tile borders drawn in `|`, `+` and `-`.

    With `show_bindings`, empty cells show `=v` for a lone candidate, `+v`
    for a bound value, and `a,b` when exactly two candidates remain.
    """
    mapping = puzzle.mapping
    side, tile_x, tile_y = mapping.side_length, mapping.tile_x, mapping.tile_y
    lines = []
    for row in range(side):
        if row > 0 and row % tile_y == 0:
            lines.append("+".join("---" for _ in range(side)))
        parts = []
        for col in range(side):
            if col > 0:
                parts.append("|" if col % tile_x == 0 else " ")
            parts.append(_square(puzzle.cell(row * side + col + 1), show_bindings, " _ "))
        lines.append("".join(parts))
    return "\n".join(lines) + "\n"


def values_markdown(puzzle: Any, show_bindings: bool = False) -> str:
    """The grid as a markdown table; rows are lettered, columns numbered."""
    side = puzzle.side_length
    out = "|     |" + "".join(f"  {c}  |" for c in range(1, side + 1)) + "\n"
    out += "|" + ":---:|" * (side + 1) + "\n"
    for row in range(side):
        out += f"|**{chr(ord('a') + row)}**"
        for col in range(side):
            out += "| " if col == 0 else " | "
            out += _square(puzzle.cell(row * side + col + 1), show_bindings, "   ")
        out += " |\n"
    return out


def errors_string(puzzle: Any) -> str:
    errors = puzzle.errors
    if not errors:
        return ""
    if len(errors) == 1:
        return f"Error: {errors[0]}\n"
    out = f"Errors ({len(errors)}):\n"
    for i, err in enumerate(errors, start=1):
        out += f"  #{i}: {err}\n"
    return out


def errors_markdown(puzzle: Any) -> str:
    errors = puzzle.errors
    if not errors:
        return ""
    if len(errors) == 1:
        return f"Error: {errors[0]}\n"
    out = f"Errors ({len(errors)}):\n"
    for i, err in enumerate(errors, start=1):
        out += f"    {i}. {err}\n"
    return out
