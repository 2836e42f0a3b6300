"""Tests for geometry lookup, validation and group layout."""

from concurrent.futures import ThreadPoolExecutor

import pytest

from src.sudoku.errors import ErrorAttribute, ErrorCondition, ErrorScope, PuzzleError
from src.sudoku.geometry import (
    Geometry,
    GroupID,
    MappingCache,
    consecutive_factors,
    int_square_root,
)


def _check_topology(mapping):
    side = mapping.side_length
    assert mapping.square_count == side * side
    assert mapping.group_count == 3 * side
    for gi in range(1, mapping.group_count + 1):
        desc = mapping.group(gi)
        assert desc.index == gi
        assert len(desc.indices) == side
        assert len(set(desc.indices)) == side
        for si in desc.indices:
            assert gi in mapping.groups_for(si)
    for si in range(1, mapping.square_count + 1):
        row, col, tile = mapping.groups_for(si)
        assert mapping.group(row).id.gtype == "row"
        assert mapping.group(col).id.gtype == "column"
        assert mapping.group(tile).id.gtype == "tile"


def test_square_9_layout():
    mapping = MappingCache().mapping_for(81)
    assert mapping.geometry is Geometry.SQUARE
    assert (mapping.tile_x, mapping.tile_y) == (3, 3)
    assert mapping.group(1).indices == tuple(range(1, 10))
    assert mapping.group(10).indices == tuple(range(1, 82, 9))
    assert mapping.group(10).id == GroupID("column", 1)
    assert mapping.group(19).indices == (1, 2, 3, 10, 11, 12, 19, 20, 21)
    assert mapping.group(27).indices == (61, 62, 63, 70, 71, 72, 79, 80, 81)
    assert mapping.groups_for(1) == (1, 10, 19)
    assert mapping.groups_for(81) == (9, 18, 27)
    _check_topology(mapping)


def test_rectangular_6_layout():
    mapping = MappingCache().mapping_for(36, Geometry.RECTANGULAR)
    assert (mapping.tile_x, mapping.tile_y) == (3, 2)
    assert mapping.group(13).indices == (1, 2, 3, 7, 8, 9)
    assert mapping.group(14).indices == (4, 5, 6, 10, 11, 12)
    assert mapping.group(15).indices == (13, 14, 15, 19, 20, 21)
    assert mapping.groups_for(36) == (6, 12, 18)
    _check_topology(mapping)


@pytest.mark.parametrize("cells,geometry", [(16, "square"), (256, "square"), (144, "rectangular")])
def test_topology_invariants(cells, geometry):
    _check_topology(MappingCache().mapping_for(cells, geometry))


def test_cache_memoizes_per_geometry_and_side():
    cache = MappingCache()
    first = cache.mapping_for(81)
    assert cache.mapping_for(81) is first
    assert cache.mapping_for(36, "rectangular") is not first
    assert len(cache) == 2


def test_cache_is_shared_across_threads():
    cache = MappingCache()
    requests = [(256, "square"), (144, "rectangular"), (81, "square")] * 16
    with ThreadPoolExecutor(max_workers=8) as pool:
        mappings = list(pool.map(lambda args: cache.mapping_for(*args), requests))
    assert len(cache) == 3
    for (cells, geometry), mapping in zip(requests, mappings):
        assert mapping is cache.mapping_for(cells, geometry)
    assert mappings[0] is mappings[3] is mappings[45]
    assert mappings[0] is not mappings[1]


@pytest.mark.parametrize(
    "cells,geometry,attribute,condition",
    [
        (17, Geometry.SQUARE, ErrorAttribute.PUZZLE_SIZE, ErrorCondition.NON_SQUARE),
        (4, Geometry.SQUARE, ErrorAttribute.SIDE_LENGTH, ErrorCondition.TOO_SMALL),
        (226 * 226, Geometry.SQUARE, ErrorAttribute.SIDE_LENGTH, ErrorCondition.TOO_LARGE),
        (36, Geometry.SQUARE, ErrorAttribute.SIDE_LENGTH, ErrorCondition.NON_SQUARE),
        (16, Geometry.RECTANGULAR, ErrorAttribute.SIDE_LENGTH, ErrorCondition.TOO_SMALL),
        (81, Geometry.RECTANGULAR, ErrorAttribute.SIDE_LENGTH, ErrorCondition.NON_RECTANGULAR),
    ],
)
def test_invalid_sizes(cells, geometry, attribute, condition):
    with pytest.raises(PuzzleError) as info:
        MappingCache().mapping_for(cells, geometry)
    assert info.value.scope == ErrorScope.GEOMETRY
    assert info.value.attribute == attribute
    assert info.value.condition == condition


def test_lookup_accepts_names_aliases_and_codes():
    assert Geometry.lookup(None) is Geometry.SQUARE
    assert Geometry.lookup("Standard") is Geometry.SQUARE
    assert Geometry.lookup(1) is Geometry.SQUARE
    assert Geometry.lookup("rectangular") is Geometry.RECTANGULAR
    assert Geometry.lookup("2") is Geometry.RECTANGULAR
    assert Geometry.RECTANGULAR.code == 2


def test_lookup_rejects_unknown_geometry():
    with pytest.raises(PuzzleError) as info:
        Geometry.lookup("hexagonal")
    assert info.value.condition == ErrorCondition.UNKNOWN_GEOMETRY
    assert str(info.value) == "Invalid geometry: Geometry (hexagonal): Not a known geometry"


def test_integer_helpers():
    assert int_square_root(16) == (4, True)
    assert int_square_root(17)[1] is False
    assert consecutive_factors(12) == (3, 4, True)
    assert consecutive_factors(10)[2] is False
