from __future__ import annotations

import logging

import pytest

from case_browser.core import ColumnDef, FilterDef, SortState, TableConfig, TableEngine, TableState
from case_browser.core.exceptions import ConfigError, PaginationModeError
from case_browser.core.pagination import FIXED, INFINITE
from case_browser.core.sorting import ASC, DESC


def _make_records():
    return [
        {"id": "1", "name": "Alice", "status": "active"},
        {"id": "2", "name": "Bob", "status": "inactive"},
        {"id": "3", "name": "Carol", "status": "active"},
    ]


def _make_many(n: int = 15):
    return [
        {"id": str(i), "name": f"Client {i:02d}", "status": "active" if i % 2 else "inactive"}
        for i in range(1, n + 1)
    ]


def _config(mode: str = FIXED, page_size: int = 10) -> TableConfig:
    return TableConfig(
        get_id=lambda r: r["id"],
        columns=[
            ColumnDef(id="name", header="Name", accessor_key="name", sortable=True),
            ColumnDef(id="status", header="Status", accessor_key="status", hide_on_narrow_viewport=True),
        ],
        filters=[
            FilterDef.from_dict(
                {
                    "id": "status",
                    "label": "Status",
                    "options": [{"value": "active", "label": "Active"}, {"value": "inactive", "label": "Inactive"}],
                }
            )
        ],
        search_keys=["name"],
        pagination_mode=mode,
        page_size=page_size,
    )


def test_search_filter_sort_end_to_end():
    engine = TableEngine(_make_records(), _config())

    engine.set_search("A")
    assert [r["name"] for r in engine.view.matched] == ["Alice", "Carol"]

    engine.toggle_filter_value("status", "active")
    assert [r["name"] for r in engine.view.matched] == ["Alice", "Carol"]

    engine.toggle_sort("name")
    engine.toggle_sort("name")
    assert engine.sort_state == SortState("name", DESC)
    assert [r["name"] for r in engine.view.rows] == ["Carol", "Alice"]


def test_fixed_pagination_clamps_requested_pages():
    engine = TableEngine(_make_many(15), _config())

    view = engine.view
    assert view.total_pages == 2
    assert len(view.rows) == 10

    engine.set_page(3)
    assert engine.view.current_page == 2
    assert len(engine.view.rows) == 5

    engine.set_page(0)
    assert engine.view.current_page == 1


def test_next_and_previous_page_stop_at_the_edges():
    engine = TableEngine(_make_many(15), _config())

    engine.previous_page()
    assert engine.view.current_page == 1

    engine.next_page()
    engine.next_page()
    assert engine.view.current_page == 2
    assert engine.view.has_previous
    assert not engine.view.has_next


def test_toggling_a_filter_resets_to_page_one():
    engine = TableEngine(_make_many(15), _config())
    engine.set_page(2)

    engine.toggle_filter_value("status", "active")

    assert engine.view.current_page == 1
    assert engine.state.current_page == 1


def test_shrinking_results_clamps_a_stale_page():
    engine = TableEngine(_make_many(15), _config(), initial_state=TableState(current_page=2))
    assert engine.view.current_page == 2

    engine.set_records(_make_many(4))

    assert engine.view.current_page == 1
    assert engine.state.current_page == 1


def test_page_operations_are_rejected_in_infinite_mode():
    engine = TableEngine(_make_many(15), _config(mode=INFINITE))

    with pytest.raises(PaginationModeError):
        engine.next_page()
    with pytest.raises(PaginationModeError):
        engine.set_page(2)


def test_infinite_scroll_operations_are_rejected_in_fixed_mode():
    engine = TableEngine(_make_many(3), _config())

    with pytest.raises(PaginationModeError):
        engine.sentinel_visibility_changed(True)


def test_infinite_mode_shows_all_filtered_rows_and_loads_more_once():
    calls = []
    engine = TableEngine(_make_many(15), _config(mode=INFINITE), has_more=True, on_load_more=lambda: calls.append(1))

    assert len(engine.view.rows) == 15
    assert engine.view.total_pages == 1

    assert engine.sentinel_visibility_changed(True)
    assert not engine.sentinel_visibility_changed(True)
    assert calls == [1]

    engine.update_load_state(has_more=False)
    engine.sentinel_visibility_changed(False)
    assert not engine.sentinel_visibility_changed(True)


def test_infinite_mode_retries_a_load_blocked_while_loading():
    calls = []
    engine = TableEngine(
        _make_many(5),
        _config(mode=INFINITE),
        has_more=True,
        is_loading_more=True,
        on_load_more=lambda: calls.append(1),
    )

    assert not engine.sentinel_visibility_changed(True)
    assert engine.update_load_state(is_loading_more=False)
    assert calls == [1]


def test_select_all_scope_is_the_page_in_fixed_mode():
    engine = TableEngine(_make_many(15), _config())

    engine.toggle_all_visible()
    assert len(engine.selection) == 10
    assert engine.is_all_selected()

    engine.toggle_all_visible()
    assert len(engine.selection) == 0


def test_select_all_scope_is_every_filtered_row_in_infinite_mode():
    engine = TableEngine(_make_many(15), _config(mode=INFINITE))

    engine.toggle_all_visible()

    assert len(engine.selection) == 15


def test_selection_survives_filtering():
    engine = TableEngine(_make_records(), _config())
    engine.toggle_row("2")

    engine.toggle_filter_value("status", "active")

    assert [r["id"] for r in engine.view.rows] == ["1", "3"]
    assert [r["id"] for r in engine.selected_records()] == ["2"]
    assert engine.is_selected(_make_records()[1])


def test_change_notifications_fire_only_on_actual_change():
    searches, filters, sorts = [], [], []
    engine = TableEngine(
        _make_records(),
        _config(),
        on_search_change=searches.append,
        on_filters_change=filters.append,
        on_sort_change=sorts.append,
    )

    engine.set_search("a")
    engine.set_search("a")
    engine.toggle_filter_value("status", "active")
    engine.toggle_filter_value("status", "active")
    engine.toggle_sort("name")
    engine.clear_selection()

    assert searches == ["a"]
    assert filters == [{"status": frozenset({"active"})}, {}]
    assert sorts == [SortState("name", ASC)]


def test_clear_all_resets_search_and_filters():
    engine = TableEngine(_make_records(), _config(), initial_search="bob", initial_filters={"status": ["inactive"]})
    assert engine.active_filter_count() == 1
    assert [r["name"] for r in engine.view.rows] == ["Bob"]

    engine.clear_all()

    assert engine.search == ""
    assert engine.active_filters == {}
    assert engine.view.filtered_count == 3


def test_active_filter_summary_and_visible_columns():
    engine = TableEngine(_make_records(), _config(), initial_filters={"status": ["inactive", "active"]})

    summary = engine.active_filter_summary()
    assert summary[0].values == (("active", "Active"), ("inactive", "Inactive"))

    assert [c.id for c in engine.visible_columns()] == ["name", "status"]
    assert [c.id for c in engine.visible_columns(narrow=True)] == ["name"]


def test_view_is_memoised_until_a_mutation():
    engine = TableEngine(_make_records(), _config())

    first = engine.view
    assert engine.view is first

    engine.set_search("bob")
    assert engine.view is not first


def test_records_are_never_mutated():
    records = _make_records()
    engine = TableEngine(records, _config())

    engine.toggle_sort("name")
    engine.toggle_sort("name")
    _ = engine.view

    assert [r["name"] for r in records] == ["Alice", "Bob", "Carol"]


def test_result_labels():
    fixed = TableEngine(_make_many(7), _config())
    assert fixed.view.result_label() == "7 results"
    assert fixed.view.result_label(selected_count=2) == "7 results - 2 selected"

    single = TableEngine(_make_many(1), _config())
    assert single.view.result_label() == "1 result"

    infinite = TableEngine(_make_many(5), _config(mode=INFINITE))
    assert infinite.view.result_label() == "5 / 5 results"


def test_duplicate_ids_are_logged(caplog):
    records = _make_records() + [{"id": "1", "name": "Alice again", "status": "active"}]

    with caplog.at_level(logging.WARNING):
        TableEngine(records, _config())

    assert "get_id is not unique" in caplog.text


def test_invalid_config_is_rejected():
    cfg = _config(page_size=0)

    with pytest.raises(ConfigError):
        TableEngine(_make_records(), cfg)


def test_initial_selection_is_owned_by_the_tracker_and_reported_in_state():
    engine = TableEngine(_make_records(), _config(), initial_state=TableState(selected=frozenset({"2"})))

    assert "2" in engine.selection
    engine.toggle_row("3")

    assert engine.state.selected == frozenset({"2", "3"})
    assert engine.state.to_dict()["selected"] == ["2", "3"]
