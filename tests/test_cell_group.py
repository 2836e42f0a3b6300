"""Unit tests for cells and groups."""

import pytest

from src.sudoku.cell import Cell
from src.sudoku.errors import ErrorAttribute, ErrorCondition, ErrorScope
from src.sudoku.geometry import GroupID, MappingCache
from src.sudoku.group import Group
from src.sudoku.intset import IntSet

ROW_1 = GroupID("row", 1)


def test_remove_logs_only_real_changes():
    cell = Cell.empty(5, 4)
    changes = IntSet()
    assert cell.remove(2, changes) == []
    assert cell.candidates == [1, 3, 4]
    assert changes == [5]

    changes = IntSet()
    assert cell.remove(2, changes) == []
    assert changes == []


def test_removing_last_candidate_is_an_error():
    cell = Cell(index=3, candidates=IntSet([4]))
    errs = cell.remove(4)
    assert len(errs) == 1
    assert errs[0].scope == ErrorScope.SQUARE
    assert errs[0].condition == ErrorCondition.NO_POSSIBLE_VALUES
    assert errs[0].attribute == ErrorAttribute.REMOVED_VALUE


def test_assign_outside_candidates_is_an_error():
    cell = Cell(index=2, candidates=IntSet([1, 3]))
    errs = cell.assign(2)
    assert [e.condition for e in errs] == [ErrorCondition.NOT_IN_SET]
    assert cell.value == 2
    assert cell.candidates is None


def test_binding_conflicts_report_source_group():
    cell = Cell.empty(1, 4)
    changes = IntSet()
    assert cell.bind(3, ROW_1, changes) == []
    assert changes == [1]

    errs = cell.remove(3)
    assert [str(e) for e in errs] == ["Problem in row 1: No square can contain 3"]

    cell = Cell.empty(1, 4)
    cell.bind(3, ROW_1)
    errs = cell.assign(4)
    assert [e.condition for e in errs] == [ErrorCondition.NO_GROUP_VALUE]


def test_intersect_and_subtract():
    cell = Cell.empty(9, 4)
    assert cell.intersect([2, 3]) == []
    assert cell.candidates == [2, 3]
    errs = cell.subtract([2, 3])
    assert [e.attribute for e in errs] == [ErrorAttribute.REMOVED_VALUES]

    assigned = Cell.filled(1, 2)
    assert assigned.intersect([1]) == []
    assert assigned.value == 2


def test_cell_copy_is_independent():
    cell = Cell.empty(1, 4)
    cell.bind(2, ROW_1)
    twin = cell.copy()
    twin.remove(3)
    twin.bound_sources.append(GroupID("tile", 1))
    assert cell.candidates == [1, 2, 3, 4]
    assert cell.bound_sources == [ROW_1]


def _cells(values, side):
    cells = [None]
    for i, v in enumerate(values, start=1):
        cells.append(Cell.filled(i, v) if v else Cell.empty(i, side))
    return cells


def test_group_build_restricts_free_cells():
    mapping = MappingCache().mapping_for(16)
    cells = _cells([1, 0, 3, 0] + [0] * 12, 4)
    group, errs = Group.build(mapping.group(1), cells)
    assert errs == []
    assert group.need == [2, 4]
    assert group.free == [2, 4]
    assert group.where[1] == 1 and group.where[3] == 3
    assert cells[2].candidates == [2, 4]


def test_group_build_detects_duplicates():
    mapping = MappingCache().mapping_for(16)
    cells = _cells([2, 0, 2, 0] + [0] * 12, 4)
    _, errs = Group.build(mapping.group(1), cells)
    assert [str(e) for e in errs] == ["Problem in row 1: Multiple squares have or need value 2"]


def test_group_analyze_binds_only_home():
    mapping = MappingCache().mapping_for(16)
    cells = _cells([0] * 16, 4)
    for i in (2, 3, 4):
        cells[i].remove(1)
    group, _ = Group.build(mapping.group(1), cells)
    changes = IntSet()
    assert group.analyze(cells, changes) == []
    assert cells[1].bound == 1
    assert cells[1].bound_sources == [ROW_1]
    assert changes == [1]
    assert 1 not in group.need


def test_group_analyze_reports_unplaceable_value():
    mapping = MappingCache().mapping_for(16)
    cells = _cells([0] * 16, 4)
    for i in (1, 2, 3, 4):
        cells[i].remove(4)
    group, _ = Group.build(mapping.group(1), cells)
    errs = group.analyze(cells)
    assert [str(e) for e in errs] == ["Problem in row 1: No square can contain 4"]


def test_group_assign_requires_assigned_cell():
    mapping = MappingCache().mapping_for(16)
    cells = _cells([0] * 16, 4)
    group, _ = Group.build(mapping.group(1), cells)
    with pytest.raises(RuntimeError):
        group.assign(cells, 1)


def test_group_assign_removes_value_from_members():
    mapping = MappingCache().mapping_for(16)
    cells = _cells([0] * 16, 4)
    group, _ = Group.build(mapping.group(1), cells)
    cells[1].assign(3)
    changes = IntSet()
    assert group.assign(cells, 1, changes) == []
    assert changes == [2, 3, 4]
    for i in (2, 3, 4):
        assert 3 not in cells[i].candidates
    assert group.where[3] == 1
    assert group.assign(cells, 1) == []
