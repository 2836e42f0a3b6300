"""Structured puzzle errors.

A PuzzleError says "this scope/attribute failed this condition" and carries
the supporting values, so clients can build their own (localized) messages.
An English message is rendered on demand unless one was supplied.

Construction and request errors are raised. Consistency errors (duplicates,
unreachable values, emptied cells) are collected on the puzzle instead.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Dict, List, Optional


class ErrorScope(IntEnum):
    UNKNOWN = 0
    REQUEST = 1
    ARGUMENT = 2
    GEOMETRY = 3
    GROUP = 4
    SQUARE = 5
    INTERNAL = 6


class ErrorStructure(IntEnum):
    UNKNOWN = 0
    SCOPE = 1
    ATTRIBUTE = 2
    ATTRIBUTE_VALUE = 3


class ErrorCondition(IntEnum):
    UNKNOWN = 0
    GENERAL = 1
    TOO_LARGE = 2
    TOO_SMALL = 3
    DUPLICATE_ASSIGNMENT = 4
    NOT_IN_SET = 5
    NO_POSSIBLE_VALUES = 6
    NO_GROUP_VALUE = 7
    DUPLICATE_GROUP_VALUES = 8
    UNKNOWN_GEOMETRY = 9
    NON_SQUARE = 10
    NON_RECTANGULAR = 11
    INVALID_PUZZLE_ASSIGNMENT = 12
    WRONG_PUZZLE_SIZE = 13
    INVALID_ARGUMENT = 14
    EMPTY_ARGUMENT = 15


class ErrorAttribute(IntEnum):
    UNKNOWN = 0
    DECODE = 1
    LOCATION = 2
    NAMED = 3
    GEOMETRY = 4
    INDEX = 5
    VALUE = 6
    ASSIGNED_VALUE = 7
    BOUND_VALUE = 8
    REMOVED_VALUE = 9
    REMOVED_VALUES = 10
    RETAINED_VALUES = 11
    PUZZLE_SIZE = 12
    SIDE_LENGTH = 13
    PUZZLE = 14
    SUMMARY = 15


_SCOPE_PREFIXES = {
    ErrorScope.REQUEST: "Invalid request: ",
    ErrorScope.ARGUMENT: "Invalid argument: ",
    ErrorScope.GEOMETRY: "Invalid geometry: ",
    ErrorScope.INTERNAL: "Internal logic error: ",
}

_ATTRIBUTE_NAMES = {
    ErrorAttribute.DECODE: "Decode error",
    ErrorAttribute.GEOMETRY: "Geometry",
    ErrorAttribute.INDEX: "Index",
    ErrorAttribute.VALUE: "Value",
    ErrorAttribute.ASSIGNED_VALUE: "Assigned value",
    ErrorAttribute.BOUND_VALUE: "Bound value",
    ErrorAttribute.REMOVED_VALUE: "Removed value",
    ErrorAttribute.REMOVED_VALUES: "Removed values",
    ErrorAttribute.RETAINED_VALUES: "Retained values",
    ErrorAttribute.PUZZLE_SIZE: "Puzzle size",
    ErrorAttribute.SIDE_LENGTH: "Side length",
    ErrorAttribute.PUZZLE: "Puzzle",
    ErrorAttribute.SUMMARY: "Summary",
}


@dataclass(eq=False)
class PuzzleError(Exception):
    scope: ErrorScope = ErrorScope.UNKNOWN
    structure: ErrorStructure = ErrorStructure.UNKNOWN
    condition: ErrorCondition = ErrorCondition.UNKNOWN
    attribute: ErrorAttribute = ErrorAttribute.UNKNOWN
    values: List[Any] = field(default_factory=list)
    custom_message: Optional[str] = None

    def __post_init__(self) -> None:
        super().__init__()

    @property
    def message(self) -> str:
        if self.custom_message:
            return self.custom_message
        return self._render()

    def __str__(self) -> str:
        return self.message

    def _render(self) -> str:
        pending = list(self.values)

        def next_val() -> Any:
            if not pending:
                return "<unknown>"
            return pending.pop(0)

        if self.scope == ErrorScope.GROUP:
            text = f"Problem in {next_val()}: "
        elif self.scope == ErrorScope.SQUARE:
            text = f"Problem in square {next_val()}: "
        else:
            text = _SCOPE_PREFIXES.get(self.scope, "Unknown error: ")

        if self.structure in (ErrorStructure.ATTRIBUTE, ErrorStructure.ATTRIBUTE_VALUE):
            if self.attribute == ErrorAttribute.NAMED:
                text += str(next_val())
            elif self.attribute == ErrorAttribute.LOCATION:
                text += f"In {next_val()}"
            else:
                text += _ATTRIBUTE_NAMES.get(self.attribute, "<Unknown attribute>")
            if self.structure == ErrorStructure.ATTRIBUTE_VALUE:
                text += f" ({_show(next_val())})"
            text += ": "

        cond = self.condition
        if cond == ErrorCondition.GENERAL:
            text += str(next_val())
        elif cond == ErrorCondition.TOO_LARGE:
            text += f"Must be at most {next_val()}"
        elif cond == ErrorCondition.TOO_SMALL:
            text += f"Must be at least {next_val()}"
        elif cond == ErrorCondition.DUPLICATE_ASSIGNMENT:
            text += f"Square {next_val()} is already assigned value {next_val()}"
        elif cond == ErrorCondition.NOT_IN_SET:
            text += f"Must be in possible values {_show(next_val())}"
        elif cond == ErrorCondition.NO_POSSIBLE_VALUES:
            text += "No remaining possible values"
        elif cond == ErrorCondition.NO_GROUP_VALUE:
            text += f"No square can contain {next_val()}"
        elif cond == ErrorCondition.DUPLICATE_GROUP_VALUES:
            text += f"Multiple squares have or need value {next_val()}"
        elif cond == ErrorCondition.UNKNOWN_GEOMETRY:
            text += "Not a known geometry"
        elif cond == ErrorCondition.NON_SQUARE:
            text += "Not a perfect square"
        elif cond == ErrorCondition.NON_RECTANGULAR:
            text += "Not the product of consecutive integers"
        elif cond == ErrorCondition.INVALID_PUZZLE_ASSIGNMENT:
            text += "Target puzzle has errors; no assignments are allowed"
        elif cond == ErrorCondition.WRONG_PUZZLE_SIZE:
            text += f"Doesn't match specified side length ({next_val()})"
        elif cond == ErrorCondition.INVALID_ARGUMENT:
            text += "Required value was missing or invalid"
        elif cond == ErrorCondition.EMPTY_ARGUMENT:
            text += "No value was supplied"
        else:
            text += f"Supplemental data is {_show(pending)}"
        return text

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"scope": self.scope.name.lower()}
        if self.structure:
            out["structure"] = self.structure.name.lower()
        if self.condition:
            out["condition"] = self.condition.name.lower()
        if self.attribute:
            out["attribute"] = self.attribute.name.lower()
        if self.values:
            out["values"] = [_jsonable(v) for v in self.values]
        out["message"] = self.message
        return out


def _show(value: Any) -> str:
    if hasattr(value, "to_list"):
        return str(value.to_list())
    return str(value)


def _jsonable(value: Any) -> Any:
    if hasattr(value, "to_dict"):
        return value.to_dict()
    if hasattr(value, "to_list"):
        return value.to_list()
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    return value


# ---- constructors ----------------------------------------------------------


def range_error(attr: ErrorAttribute, value: int, minimum: int, maximum: int) -> PuzzleError:
    """An out-of-range argument; the limit it violated is the second value."""
    if value < minimum:
        cond, limit = ErrorCondition.TOO_SMALL, minimum
    else:
        cond, limit = ErrorCondition.TOO_LARGE, maximum
    return PuzzleError(
        scope=ErrorScope.ARGUMENT,
        structure=ErrorStructure.ATTRIBUTE_VALUE,
        attribute=attr,
        condition=cond,
        values=[value, limit],
    )


def geometry_error(
    attr: ErrorAttribute, value: int, cond: ErrorCondition, limit: Optional[int] = None
) -> PuzzleError:
    values: List[Any] = [value]
    if cond in (ErrorCondition.TOO_SMALL, ErrorCondition.TOO_LARGE):
        values.append(limit)
    return PuzzleError(
        scope=ErrorScope.GEOMETRY,
        structure=ErrorStructure.ATTRIBUTE_VALUE,
        attribute=attr,
        condition=cond,
        values=values,
    )


def square_error(
    index: int, value: Any, attr: ErrorAttribute, cond: ErrorCondition, candidates: Any = None
) -> PuzzleError:
    """A cell operation broke one of the cell's constraints."""
    if cond not in (ErrorCondition.NOT_IN_SET, ErrorCondition.NO_POSSIBLE_VALUES):
        raise RuntimeError(f"Unexpected square error condition {cond!r} in square {index}")
    values: List[Any] = [index, value]
    if cond == ErrorCondition.NOT_IN_SET:
        values.append(candidates.copy() if hasattr(candidates, "copy") else candidates)
    return PuzzleError(
        scope=ErrorScope.SQUARE,
        structure=ErrorStructure.ATTRIBUTE_VALUE,
        attribute=attr,
        condition=cond,
        values=values,
    )


def group_error(group_id: Any, value: int, cond: ErrorCondition) -> PuzzleError:
    if cond not in (ErrorCondition.NO_GROUP_VALUE, ErrorCondition.DUPLICATE_GROUP_VALUES):
        raise RuntimeError(f"Unexpected group error condition {cond!r} in group {group_id}")
    return PuzzleError(
        scope=ErrorScope.GROUP,
        structure=ErrorStructure.SCOPE,
        condition=cond,
        values=[group_id, value],
    )


def argument_error(attr: ErrorAttribute, cond: ErrorCondition, *values: Any) -> PuzzleError:
    structure = ErrorStructure.ATTRIBUTE_VALUE if values else ErrorStructure.ATTRIBUTE
    return PuzzleError(
        scope=ErrorScope.ARGUMENT,
        structure=structure,
        attribute=attr,
        condition=cond,
        values=list(values),
    )


def decode_error(detail: str) -> PuzzleError:
    return PuzzleError(
        scope=ErrorScope.ARGUMENT,
        structure=ErrorStructure.ATTRIBUTE,
        attribute=ErrorAttribute.DECODE,
        condition=ErrorCondition.GENERAL,
        values=[detail],
    )
