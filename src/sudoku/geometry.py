"""Puzzle geometries: which cells make up each row, column and tile.

Every geometry has a group for each row and each column. The square
geometry needs a side length that is itself a perfect square and uses
square tiles; the rectangular geometry needs a side length that is the
product of two consecutive integers and uses tiles that are `low` rows
tall and `high` columns wide.

Mappings are immutable and are computed once per side length by the
MappingCache that owns them.
"""

from __future__ import annotations

import math
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple, Union

from . import config
from .errors import (
    ErrorAttribute,
    ErrorCondition,
    ErrorScope,
    ErrorStructure,
    PuzzleError,
    geometry_error,
)
from src.utils.logging_utils import get_logger

logger = get_logger()

ROW = "row"
COLUMN = "column"
TILE = "tile"


@dataclass(frozen=True)
class GroupID:
    """Names a row, column or tile. Both parts are 1-based."""

    gtype: str
    index: int

    def __str__(self) -> str:
        if not self.gtype:
            return f"<group> {self.index}"
        return f"{self.gtype} {self.index}"

    def to_dict(self) -> Dict[str, object]:
        return {"gtype": self.gtype, "index": self.index}


@dataclass(frozen=True)
class GroupDescriptor:
    index: int
    id: GroupID
    indices: Tuple[int, ...]


@dataclass(frozen=True)
class PuzzleMapping:
    geometry: "Geometry"
    side_length: int
    tile_x: int
    tile_y: int
    square_count: int
    group_count: int
    group_descriptors: Tuple[GroupDescriptor, ...]
    cell_groups: Tuple[Tuple[int, int, int], ...]

    def group(self, group_index: int) -> GroupDescriptor:
        """Descriptor of the group with the given 1-based index."""
        return self.group_descriptors[group_index - 1]

    def groups_for(self, index: int) -> Tuple[int, int, int]:
        """Row, column and tile group indices of the 1-based cell `index`."""
        return self.cell_groups[index - 1]


class Geometry(str, Enum):
    SQUARE = config.SQUARE_GEOMETRY_NAME
    RECTANGULAR = config.RECTANGULAR_GEOMETRY_NAME

    @property
    def code(self) -> int:
        if self is Geometry.SQUARE:
            return config.SQUARE_GEOMETRY_CODE
        return config.RECTANGULAR_GEOMETRY_CODE

    @classmethod
    def lookup(cls, key: Union["Geometry", str, int, None]) -> "Geometry":
        """Resolve a geometry from its name, an alias, or its code."""
        if isinstance(key, Geometry):
            return key
        if key is None:
            return cls.SQUARE
        if isinstance(key, int):
            if key in (0, config.SQUARE_GEOMETRY_CODE):
                return cls.SQUARE
            if key == config.RECTANGULAR_GEOMETRY_CODE:
                return cls.RECTANGULAR
        else:
            name = str(key).strip().lower()
            if name.isdigit():
                return cls.lookup(int(name))
            if name in config.SQUARE_GEOMETRY_ALIASES or name == cls.SQUARE.value:
                return cls.SQUARE
            if name == cls.RECTANGULAR.value:
                return cls.RECTANGULAR
        raise PuzzleError(
            scope=ErrorScope.GEOMETRY,
            structure=ErrorStructure.ATTRIBUTE_VALUE,
            attribute=ErrorAttribute.GEOMETRY,
            condition=ErrorCondition.UNKNOWN_GEOMETRY,
            values=[key],
        )


def int_square_root(value: int) -> Tuple[int, bool]:
    """Integer square root of `value` and whether it is exact."""
    if value < 0:
        return 0, False
    root = math.isqrt(value)
    return root, root * root == value


def consecutive_factors(value: int) -> Tuple[int, int, bool]:
    """Find `low`, `low + 1` whose product is `value`, if they exist."""
    low, high = 1, 2
    while low * high <= value:
        if low * high == value:
            return low, high, True
        low, high = high, high + 1
    return low, high, False


class GeometryBuilder:
    """Validates puzzle sizes for one geometry and computes its mappings.

    Subclasses provide the side-length limits and `tile_shape`. The shared
    `build` lays out rows, columns and tiles in reading order.
    """

    geometry: Geometry
    min_side: int
    max_side: int

    def validate(self, cell_count: int) -> int:
        """Return the side length for `cell_count` cells, or raise PuzzleError."""
        side, exact = int_square_root(cell_count)
        if not exact:
            raise geometry_error(
                ErrorAttribute.PUZZLE_SIZE, cell_count, ErrorCondition.NON_SQUARE
            )
        if side < self.min_side:
            raise geometry_error(
                ErrorAttribute.SIDE_LENGTH, side, ErrorCondition.TOO_SMALL, self.min_side
            )
        if side > self.max_side:
            raise geometry_error(
                ErrorAttribute.SIDE_LENGTH, side, ErrorCondition.TOO_LARGE, self.max_side
            )
        self.tile_shape(side)
        return side

    def tile_shape(self, side: int) -> Tuple[int, int]:
        """(tile_x, tile_y): tile width in columns and height in rows."""
        raise NotImplementedError

    def build(self, side: int) -> PuzzleMapping:
        tile_x, tile_y = self.tile_shape(side)
        tiles_across = side // tile_x
        cell_groups: List[List[int]] = [[0, 0, 0] for _ in range(side * side)]
        descriptors: List[Optional[GroupDescriptor]] = [None] * (3 * side)

        for i in range(side):
            # row i + 1
            rgi = i + 1
            row = []
            for c in range(side):
                si = side * i + c + 1
                row.append(si)
                cell_groups[si - 1][0] = rgi
            descriptors[rgi - 1] = GroupDescriptor(rgi, GroupID(ROW, i + 1), tuple(row))

            # column i + 1
            cgi = side + i + 1
            col = []
            for r in range(side):
                si = side * r + i + 1
                col.append(si)
                cell_groups[si - 1][1] = cgi
            descriptors[cgi - 1] = GroupDescriptor(cgi, GroupID(COLUMN, i + 1), tuple(col))

            # tile i + 1
            tgi = 2 * side + i + 1
            base_row = tile_y * (i // tiles_across)
            base_col = tile_x * (i % tiles_across)
            tile = []
            for tr in range(tile_y):
                for tc in range(tile_x):
                    si = side * (base_row + tr) + base_col + tc + 1
                    tile.append(si)
                    cell_groups[si - 1][2] = tgi
            descriptors[tgi - 1] = GroupDescriptor(tgi, GroupID(TILE, i + 1), tuple(tile))

        return PuzzleMapping(
            geometry=self.geometry,
            side_length=side,
            tile_x=tile_x,
            tile_y=tile_y,
            square_count=side * side,
            group_count=3 * side,
            group_descriptors=tuple(d for d in descriptors if d is not None),
            cell_groups=tuple((g[0], g[1], g[2]) for g in cell_groups),
        )


class SquareGeometryBuilder(GeometryBuilder):
    geometry = Geometry.SQUARE
    min_side = config.SQUARE_MIN_SIDE
    max_side = config.SQUARE_MAX_SIDE

    def tile_shape(self, side: int) -> Tuple[int, int]:
        tile_len, exact = int_square_root(side)
        if not exact:
            raise geometry_error(ErrorAttribute.SIDE_LENGTH, side, ErrorCondition.NON_SQUARE)
        return tile_len, tile_len


class RectangularGeometryBuilder(GeometryBuilder):
    geometry = Geometry.RECTANGULAR
    min_side = config.RECTANGULAR_MIN_SIDE
    max_side = config.RECTANGULAR_MAX_SIDE

    def tile_shape(self, side: int) -> Tuple[int, int]:
        low, high, ok = consecutive_factors(side)
        if not ok:
            raise geometry_error(
                ErrorAttribute.SIDE_LENGTH, side, ErrorCondition.NON_RECTANGULAR
            )
        return high, low


class MappingCache:
    """Memoizes mappings per (geometry, side length).

    Lookups and builds happen under a lock, so one cache can be shared by
    threads; the mappings it hands out are immutable.
    """

    def __init__(self, builders: Optional[Dict[Geometry, GeometryBuilder]] = None):
        self._builders: Dict[Geometry, GeometryBuilder] = {
            Geometry.SQUARE: SquareGeometryBuilder(),
            Geometry.RECTANGULAR: RectangularGeometryBuilder(),
        }
        if builders:
            self._builders.update(builders)
        self._mappings: Dict[Tuple[Geometry, int], PuzzleMapping] = {}
        self._lock = threading.Lock()

    def builder(self, geometry: Union[Geometry, str, int, None]) -> GeometryBuilder:
        return self._builders[Geometry.lookup(geometry)]

    def mapping_for(
        self, cell_count: int, geometry: Union[Geometry, str, int, None] = Geometry.SQUARE
    ) -> PuzzleMapping:
        builder = self.builder(geometry)
        side = builder.validate(cell_count)
        key = (builder.geometry, side)
        with self._lock:
            mapping = self._mappings.get(key)
            if mapping is None:
                logger.debug("Building %s mapping for side length %d", builder.geometry.value, side)
                mapping = builder.build(side)
                self._mappings[key] = mapping
        return mapping

    def __len__(self) -> int:
        return len(self._mappings)
