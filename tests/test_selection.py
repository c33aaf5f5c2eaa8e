from __future__ import annotations

import pytest

from vim_core.buffer import (
    EditSpan,
    OutOfBounds,
    Range,
    SelectionRange,
    SelectionSet,
    remap_offset,
)


def make_selections(*pairs: tuple[int, int]) -> SelectionSet:
    return SelectionSet(SelectionRange(anchor, head) for anchor, head in pairs)


def test_default_is_cursor_at_start() -> None:
    selections = SelectionSet()

    assert selections.primary() == Range(0, 0)
    assert selections.all() == (Range(0, 0),)
    assert selections.cursor() == 0


def test_ranges_are_sorted_and_primary_is_tracked() -> None:
    selections = make_selections((10, 12), (2, 4))

    assert selections.all() == (Range(2, 4), Range(10, 12))
    assert selections.primary() == Range(10, 12)


def test_add_merges_overlaps() -> None:
    selections = make_selections((0, 5))
    selections.add(Range(3, 8))
    selections.add(Range(20, 20), primary=True)

    assert selections.all() == (Range(0, 8), Range(20, 20))
    assert selections.primary() == Range(20, 20)


def test_touching_ranges_stay_separate() -> None:
    selections = make_selections((0, 5), (5, 9))

    assert selections.all() == (Range(0, 5), Range(5, 9))


def test_identical_cursors_collapse() -> None:
    selections = make_selections((4, 4), (4, 4))

    assert len(selections) == 1


def test_insertion_shifts_bounds_at_or_after_point() -> None:
    selections = make_selections((1, 3), (5, 8))

    selections.remap_after_edit(EditSpan(start=5, removed=0, inserted=4))

    assert selections.all() == (Range(1, 3), Range(9, 12))


def test_deletion_collapses_contained_bounds() -> None:
    selections = make_selections((4, 6), (12, 14))

    selections.remap_after_edit(EditSpan(start=3, removed=5, inserted=0))

    assert selections.all() == (Range(3, 3), Range(7, 9))


def test_deletion_straddling_selection_keeps_outer_bound() -> None:
    selections = make_selections((2, 6))

    selections.remap_after_edit(EditSpan(start=4, removed=4, inserted=1))

    assert selections.primary() == Range(2, 4)


def test_cursors_inside_deletion_merge() -> None:
    selections = make_selections((4, 4), (6, 6), (10, 10))

    selections.remap_after_edit(EditSpan(start=3, removed=5, inserted=0))

    assert selections.all() == (Range(3, 3), Range(5, 5))


def test_backward_selection_keeps_direction() -> None:
    selections = make_selections((8, 2))

    selections.remap_after_edit(EditSpan(start=0, removed=0, inserted=2))

    primary = selections.primary_selection()
    assert (primary.anchor, primary.head) == (10, 4)
    assert selections.primary() == Range(4, 10)


def test_remap_clamps_to_length() -> None:
    selections = make_selections((3, 9))

    selections.remap_after_edit(EditSpan(start=0, removed=0, inserted=0), length=5)

    assert selections.primary() == Range(3, 5)


@pytest.mark.parametrize(
    ("offset", "expected"),
    [(2, 2), (3, 3), (4, 3), (7, 3), (8, 9), (15, 16)],
)
def test_remap_offset_for_replacement(offset: int, expected: int) -> None:
    change = EditSpan(start=3, removed=5, inserted=6)

    assert remap_offset(offset, change) == expected


def test_clear_keeps_primary_head() -> None:
    selections = make_selections((0, 2), (5, 9))
    selections.clear()
    assert selections.all() == (Range(2, 2),)

    selections.replace_all(
        [SelectionRange(0, 2), SelectionRange(5, 9)], primary_index=1
    )
    selections.clear()
    assert selections.all() == (Range(9, 9),)


def test_replace_all_requires_one_selection() -> None:
    with pytest.raises(ValueError):
        SelectionSet().replace_all([])


def test_negative_selection_offsets_are_rejected() -> None:
    with pytest.raises(OutOfBounds):
        SelectionRange(-1, 2)


def test_bound_set_rejects_selections_past_length() -> None:
    length = 3
    selections = SelectionSet()
    selections.bind_length(lambda: length)

    with pytest.raises(OutOfBounds):
        selections.set_primary(Range(0, 50))
    with pytest.raises(OutOfBounds):
        selections.add(SelectionRange(90, 99))
    with pytest.raises(OutOfBounds):
        selections.replace_all([SelectionRange(0, 1), SelectionRange(2, 4)])

    assert selections.all() == (Range(0, 0),)

    length = 10
    selections.add(SelectionRange(4, 10))
    assert selections.all() == (Range(0, 0), Range(4, 10))


def test_binding_checks_existing_selections() -> None:
    selections = make_selections((0, 8))

    with pytest.raises(OutOfBounds):
        selections.bind_length(lambda: 5)


def test_goal_column_ignored_by_equality() -> None:
    remembered = SelectionRange.cursor(4, goal_column=9)

    assert remembered == SelectionRange.cursor(4)
    assert remembered.reversed().goal_column == 9
    assert remembered.map(EditSpan(start=0, removed=0, inserted=2)).goal_column is None
