"""Public data shapes exchanged with callers of the engine."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .errors import PuzzleError
from .geometry import GroupID


@dataclass(frozen=True)
class Choice:
    """Assign `value` to the cell at `index` (1-based, reading order)."""

    index: int
    value: int

    def to_dict(self) -> Dict[str, int]:
        return {"index": self.index, "value": self.value}


@dataclass
class Square:
    """
    What a client may know about one cell.

    An assigned cell carries only its value. An empty cell carries its
    candidates, plus its bound value and the groups that forced it when it
    still has more than one candidate.
    """

    index: int
    value: int = 0
    bound: int = 0
    bound_sources: List[GroupID] = field(default_factory=list)
    candidates: List[int] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"index": self.index}
        if self.value:
            out["value"] = self.value
        if self.bound:
            out["bound"] = self.bound
        if self.bound_sources:
            out["bound_sources"] = [src.to_dict() for src in self.bound_sources]
        if self.candidates:
            out["candidates"] = list(self.candidates)
        return out


@dataclass
class State:
    geometry: str
    side_length: int
    values: List[int]
    errors: List[PuzzleError] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "geometry": self.geometry,
            "side_length": self.side_length,
            "values": list(self.values),
        }
        if self.errors:
            out["errors"] = [e.to_dict() for e in self.errors]
        return out


@dataclass
class Update:
    """The cells changed by an assignment and the puzzle's errors afterwards."""

    squares: List[Square] = field(default_factory=list)
    errors: List[PuzzleError] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"squares": [s.to_dict() for s in self.squares]}
        if self.errors:
            out["errors"] = [e.to_dict() for e in self.errors]
        return out


@dataclass
class Solution:
    """
    A filled-in grid plus the guesses made on the way there.

    Forced values appear only in `values`; `choices` lists the guessed
    assignments in the order they were tried. `rating` runs from 1 (no
    guessing, few group bindings) to 5 (several or wide guesses).
    """

    values: List[int]
    choices: List[Choice] = field(default_factory=list)
    rating: int = 0

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"values": list(self.values)}
        if self.choices:
            out["choices"] = [c.to_dict() for c in self.choices]
        if self.rating:
            out["rating"] = self.rating
        return out


@dataclass
class Summary:
    """Enough of a puzzle to rebuild it: geometry, side length and values."""

    geometry: str
    side_length: int
    values: List[int]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "geometry": self.geometry,
            "side_length": self.side_length,
            "values": list(self.values),
        }

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "Summary":
        side: Optional[Any] = payload.get("side_length", payload.get("sidelen", 0))
        return cls(
            geometry=str(payload.get("geometry") or "square"),
            side_length=int(side or 0),
            values=[int(v) for v in payload.get("values") or []],
        )
