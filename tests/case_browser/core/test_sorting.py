from __future__ import annotations

import math

from case_browser.core.sorting import ASC, DESC, SortState, compare_values, sort_records, toggle_sort


def _values(records):
    return [r["v"] for r in records]


def test_initial_sort_is_unsorted_descending():
    state = SortState()

    assert state.field is None
    assert state.direction == DESC


def test_toggle_sort_new_field_starts_ascending_same_field_flips():
    state = toggle_sort(SortState(), "name")
    assert state == SortState("name", ASC)

    state = toggle_sort(state, "name")
    assert state == SortState("name", DESC)

    state = toggle_sort(state, "amount")
    assert state == SortState("amount", ASC)


def test_nulls_sort_last_in_both_directions():
    records = [{"v": 2}, {"v": None}, {"v": 1}]

    assert _values(sort_records(records, SortState("v", ASC))) == [1, 2, None]
    assert _values(sort_records(records, SortState("v", DESC))) == [2, 1, None]


def test_nan_and_missing_paths_count_as_null():
    records = [{"v": math.nan}, {}, {"v": 5}]

    ordered = sort_records(records, SortState("v", ASC))

    assert ordered[0] == {"v": 5}


def test_numbers_compare_numerically_strings_by_locale_style_order():
    numbers = [{"v": 10}, {"v": 9}, {"v": 100}]
    assert _values(sort_records(numbers, SortState("v", ASC))) == [9, 10, 100]

    names = [{"v": "bob"}, {"v": "Émile"}, {"v": "alice"}, {"v": "Dave"}]
    assert _values(sort_records(names, SortState("v", ASC))) == ["alice", "bob", "Dave", "Émile"]


def test_mixed_types_fall_back_to_string_comparison():
    # "10" < "9" as text
    assert compare_values(10, "9", ASC) < 0
    # bools are not numbers
    assert compare_values(True, False, ASC) > 0


def test_sort_is_stable_for_ties():
    records = [{"id": "a", "v": 1}, {"id": "b", "v": 1}, {"id": "c", "v": 0}]

    ordered = sort_records(records, SortState("v", DESC))

    assert [r["id"] for r in ordered] == ["a", "b", "c"]


def test_no_sort_field_keeps_original_order_and_input_is_not_mutated():
    records = [{"v": 3}, {"v": 1}, {"v": 2}]

    assert sort_records(records, SortState()) is records

    sort_records(records, SortState("v", ASC))
    assert _values(records) == [3, 1, 2]


def test_sort_state_dict_roundtrip_and_bad_direction():
    state = SortState("client.name", ASC)

    assert SortState.from_dict(state.to_dict()) == state
    assert SortState.from_dict({"field": "x", "direction": "sideways"}) == SortState("x", DESC)
    assert SortState.from_dict(None) == SortState()
