from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional, Sequence, Tuple

import dash
from dash import ALL, Input, Output, State, exceptions, html

from case_browser.core.columns import ColumnDef, render_cell
from case_browser.core.engine import TableEngine
from case_browser.core.pagination import INFINITE
from case_browser.core.sorting import SortState
from case_browser.core.table_state import TableState
from case_browser.services.record_source import PagedRecordSource
from case_browser.ui.ids import IDs
from case_browser.ui.layout.build_filter_panel import build_filter_controls

if TYPE_CHECKING:
    from case_browser.ui.config import AppConfig

logger = logging.getLogger(__name__)


def new_store(ctx: AppConfig, table_key: str) -> dict[str, Any]:
    """Fresh store for a table: default state, first batch loaded in infinite mode."""
    definition = ctx.tables[table_key]
    loaded = definition.batch_size if definition.pagination_mode == INFINITE else 0
    return {"table": table_key, "state": TableState().to_dict(), "loaded": loaded}


def build_engine(ctx: AppConfig, store: dict[str, Any]) -> Tuple[TableEngine, Optional[PagedRecordSource]]:
    """
    Rebuild the engine for the table in the store.

    Dash callbacks are stateless, so the engine is recreated from the stored
    TableState on every request. In infinite mode the stored offset restores
    the caller-side cursor.
    """
    table_key = store["table"]
    definition = ctx.tables[table_key]
    config = ctx.table_configs[table_key]
    state = TableState.from_dict(store.get("state"))

    if config.pagination_mode != INFINITE:
        return TableEngine(ctx.records[table_key], config, initial_state=state), None

    source = PagedRecordSource(ctx.records[table_key], batch_size=definition.batch_size)
    loaded = source.load_until(store.get("loaded", 0))

    engine: TableEngine

    def on_load_more() -> None:
        engine.update_load_state(is_loading_more=True)
        source.fetch_next()
        engine.set_records(source.loaded())
        engine.update_load_state(has_more=source.has_more, is_loading_more=False)

    engine = TableEngine(
        loaded,
        config,
        initial_state=state,
        has_more=source.has_more,
        on_load_more=on_load_more,
    )
    return engine, source


def _set_filter_group(engine: TableEngine, payload: Tuple[str, Sequence[str]]) -> None:
    """A multi-select dropdown reports the whole group; replay the difference as toggles."""
    filter_id, values = payload
    wanted = {str(v) for v in values or []}
    current = engine.active_filters.get(filter_id, frozenset())
    for value in sorted(current ^ wanted):
        engine.toggle_filter_value(filter_id, value)


def _set_selection(engine: TableEngine, selected_ids: Sequence[str]) -> None:
    """Replay a DataTable selection as row toggles; rows on other pages stay selected."""
    visible = {engine.config.get_id(r) for r in engine.view.rows}
    wanted = {str(s) for s in selected_ids or []}
    for row_id in sorted(visible):
        if (row_id in wanted) != (row_id in engine.selection):
            engine.toggle_row(row_id)


def _load_more(engine: TableEngine, _payload: Any) -> None:
    # The button stands in for the scroll sentinel entering and leaving the viewport.
    engine.sentinel_visibility_changed(True)
    engine.sentinel_visibility_changed(False)


ACTIONS: Dict[str, Callable[[TableEngine, Any], None]] = {
    "search": lambda e, p: e.set_search(p or ""),
    "clear_search": lambda e, p: e.clear_search(),
    "toggle_filter": lambda e, p: e.toggle_filter_value(*p),
    "remove_filter": lambda e, p: e.remove_filter_value(*p),
    "set_filter_group": _set_filter_group,
    "clear_group": lambda e, p: e.clear_filter_group(p),
    "clear_all": lambda e, p: e.clear_all(),
    "sort": lambda e, p: e.toggle_sort(p),
    "page": lambda e, p: e.set_page(int(p)),
    "next_page": lambda e, p: e.next_page(),
    "previous_page": lambda e, p: e.previous_page(),
    "toggle_row": lambda e, p: e.toggle_row(p),
    "set_selection": _set_selection,
    "toggle_all": lambda e, p: e.toggle_all_visible(),
    "load_more": _load_more,
}


def apply_table_action(
        ctx: AppConfig,
        store: dict[str, Any],
        action: Optional[str],
        payload: Any = None,
) -> Tuple[dict[str, Any], TableEngine]:
    """
    Pure helper: rebuild the engine, apply one named operation and return the
    new store plus the engine (for rendering). action=None only rebuilds.
    """
    engine, source = build_engine(ctx, store)

    if action is not None:
        try:
            handler = ACTIONS[action]
        except KeyError:
            raise ValueError(f"Unknown table action '{action}'")
        handler(engine, payload)

    new_store = {
        "table": store["table"],
        "state": engine.state.to_dict(),
        "loaded": source.offset if source is not None else store.get("loaded", 0),
    }
    return new_store, engine


def table_rows(engine: TableEngine, narrow: bool = False) -> Tuple[List[dict], List[dict], List[int]]:
    """
    DataTable columns, row dicts (with "id") and the positions of the
    selected rows among them. DataTable draws its checkboxes from
    selected_rows (indices into data), not from selected_row_ids.
    """
    columns = engine.visible_columns(narrow=narrow)
    dt_columns = [{"name": c.header, "id": c.id} for c in columns]

    rows: List[dict] = []
    selected_rows: List[int] = []
    for idx, record in enumerate(engine.view.rows):
        row_id = engine.config.get_id(record)
        row = {c.id: render_cell(c, record) for c in columns}
        row["id"] = row_id
        rows.append(row)
        if row_id in engine.selection:
            selected_rows.append(idx)
    return dt_columns, rows, selected_rows


def selection_from_rows(data: Optional[Sequence[dict]], selected_rows: Optional[Sequence[int]]) -> List[str]:
    """Map DataTable selected_rows back to row ids through the rendered data."""
    data = data or []
    return [
        str(data[idx]["id"])
        for idx in selected_rows or []
        if isinstance(idx, int) and 0 <= idx < len(data)
    ]


def table_trigger_prop(triggered: Sequence[dict]) -> Optional[str]:
    """
    Property of the DataTable that fired. A custom sort click also makes the
    table reset its own selection in the same update; sort_by wins so that
    reset is never read as the user deselecting rows.
    """
    props = {
        t.get("prop_id", "").rsplit(".", 1)[-1]
        for t in triggered
        if t.get("prop_id", "").startswith(f"{IDs.Control.DATA_TABLE}.")
    }
    if "sort_by" in props:
        return "sort_by"
    if "selected_rows" in props:
        return "selected_rows"
    return None


def sort_by_for(columns: Sequence[ColumnDef], sort: SortState) -> List[dict]:
    """Reflect a SortState back into DataTable.sort_by."""
    if sort.field is None:
        return []
    for c in columns:
        if c.accessor_key == sort.field:
            return [{"column_id": c.id, "direction": sort.direction}]
    return []


def sort_action_for(ctx: AppConfig, store: dict[str, Any], sort_by: Optional[List[dict]]) -> Optional[str]:
    """
    Map a DataTable sort_by change onto a toggle_sort field, or None when it
    only echoes the current state.
    """
    current = TableState.from_dict(store.get("state")).sort
    columns = ctx.table_configs[store["table"]].columns
    if sort_by == sort_by_for(columns, current):
        return None
    if not sort_by:
        # Dash cycles asc -> desc -> none; the engine only flips direction
        return current.field
    column = {c.id: c for c in columns}.get(sort_by[0].get("column_id"))
    if column is None or not column.sortable:
        return None
    return column.accessor_key


def action_from_trigger(
        ctx: AppConfig,
        store: dict[str, Any],
        triggered_id: Any,
        triggered_prop: Optional[str],
        values: Dict[str, Any],
) -> Tuple[Optional[str], Any]:
    """
    Translate the component / property that fired into one named table action.
    Returns (None, None) when nothing should change.
    """
    simple = {
        IDs.Control.CLEAR_SEARCH_BTN: "clear_search",
        IDs.Control.CLEAR_ALL_BTN: "clear_all",
        IDs.Control.PREV_PAGE_BTN: "previous_page",
        IDs.Control.NEXT_PAGE_BTN: "next_page",
        IDs.Control.LOAD_MORE_BTN: "load_more",
        IDs.Control.SELECT_ALL_BTN: "toggle_all",
    }
    if triggered_id == IDs.Control.SEARCH_INPUT:
        return "search", values.get("search") or ""
    if isinstance(triggered_id, str) and triggered_id in simple:
        return simple[triggered_id], None

    if triggered_id == IDs.Control.DATA_TABLE:
        if triggered_prop == "sort_by":
            field = sort_action_for(ctx, store, values.get("sort_by"))
            return ("sort", field) if field else (None, None)
        if triggered_prop == "selected_rows":
            return "set_selection", selection_from_rows(values.get("data"), values.get("selected_rows"))
        return None, None

    if isinstance(triggered_id, dict) and triggered_id.get("type") == IDs.Pattern.FILTER_SELECT:
        filter_id = triggered_id.get("index")
        for fid, value in zip(values.get("filter_ids", []), values.get("filter_values", [])):
            if fid.get("index") == filter_id:
                return "set_filter_group", (filter_id, value or [])

    return None, None


def filter_summary_children(engine: TableEngine) -> List[Any]:
    chips: List[Any] = []
    for group in engine.active_filter_summary():
        for _value, label in group.values:
            chips.append(
                html.Span(f"{group.filter_label}: {label}", className="badge bg-secondary me-1")
            )
    return chips


def register_table_callbacks(app: dash.Dash, ctx: AppConfig) -> None:
    # ---------------------------------------------------------
    # Table switch -> fresh store + filter widgets
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Store.TABLE_STATE, "data"),
        Output(IDs.Control.FILTER_CONTAINER, "children"),
        Output(IDs.Control.SEARCH_INPUT, "value"),
        Output(IDs.Control.TABLE_TITLE, "children"),
        Input(IDs.Control.TABLE_SELECT, "value"),
    )
    def switch_table(table_key: str | None):
        if not table_key or table_key not in ctx.tables:
            raise exceptions.PreventUpdate
        definition = ctx.tables[table_key]
        controls = build_filter_controls(ctx.table_configs[table_key].filters)
        logger.info("Switched table", extra={"table": table_key})
        return new_store(ctx, table_key), controls, "", definition.title

    # ---------------------------------------------------------
    # UI -> TableState (one named operation per trigger)
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Store.TABLE_STATE, "data", allow_duplicate=True),
        Input(IDs.Control.SEARCH_INPUT, "value"),
        Input(IDs.Control.CLEAR_SEARCH_BTN, "n_clicks"),
        Input(IDs.Control.CLEAR_ALL_BTN, "n_clicks"),
        Input(IDs.Control.PREV_PAGE_BTN, "n_clicks"),
        Input(IDs.Control.NEXT_PAGE_BTN, "n_clicks"),
        Input(IDs.Control.LOAD_MORE_BTN, "n_clicks"),
        Input(IDs.Control.SELECT_ALL_BTN, "n_clicks"),
        Input(IDs.Control.DATA_TABLE, "sort_by"),
        Input(IDs.Control.DATA_TABLE, "selected_rows"),
        Input({"type": IDs.Pattern.FILTER_SELECT, "index": ALL}, "value"),
        State({"type": IDs.Pattern.FILTER_SELECT, "index": ALL}, "id"),
        State(IDs.Control.DATA_TABLE, "data"),
        State(IDs.Store.TABLE_STATE, "data"),
        prevent_initial_call=True,
    )
    def apply_ui_action(
            search_value, _clear_search, _clear_all, _prev, _next, _more, _select_all,
            sort_by, selected_rows, filter_values, filter_ids, data, store,
    ):
        if not store or store.get("table") not in ctx.tables:
            raise exceptions.PreventUpdate

        triggered = dash.ctx.triggered or []
        triggered_id = dash.ctx.triggered_id
        if triggered_id == IDs.Control.DATA_TABLE:
            triggered_prop = table_trigger_prop(triggered)
        else:
            triggered_prop = triggered[0]["prop_id"].rsplit(".", 1)[-1] if triggered else None

        action, payload = action_from_trigger(
            ctx,
            store,
            triggered_id,
            triggered_prop,
            {
                "search": search_value,
                "sort_by": sort_by,
                "selected_rows": selected_rows,
                "data": data,
                "filter_values": filter_values or [],
                "filter_ids": filter_ids or [],
            },
        )
        if action is None:
            raise exceptions.PreventUpdate

        new_store, _engine = apply_table_action(ctx, store, action, payload)
        if new_store == store:
            raise exceptions.PreventUpdate
        return new_store

    # ---------------------------------------------------------
    # TableState -> rendered table (pure reflection of state)
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Control.DATA_TABLE, "columns"),
        Output(IDs.Control.DATA_TABLE, "data"),
        Output(IDs.Control.DATA_TABLE, "selected_rows"),
        Output(IDs.Control.DATA_TABLE, "selected_row_ids"),
        Output(IDs.Control.DATA_TABLE, "sort_by"),
        Output(IDs.Control.RESULT_LABEL, "children"),
        Output(IDs.Control.PAGE_LABEL, "children"),
        Output(IDs.Control.PREV_PAGE_BTN, "disabled"),
        Output(IDs.Control.NEXT_PAGE_BTN, "disabled"),
        Output(IDs.Control.PAGER_CONTAINER, "style"),
        Output(IDs.Control.LOAD_MORE_CONTAINER, "style"),
        Output(IDs.Control.FILTER_SUMMARY, "children"),
        Input(IDs.Store.TABLE_STATE, "data"),
        Input(IDs.Control.COMPACT_SWITCH, "value"),
    )
    def render_table(store, compact):
        if not store or store.get("table") not in ctx.tables:
            raise exceptions.PreventUpdate

        _store, engine = apply_table_action(ctx, store, None)
        view = engine.view
        columns, rows, selected_rows = table_rows(engine, narrow=bool(compact))

        def style(flag: bool) -> dict:
            return {} if flag else {"display": "none"}

        is_infinite = engine.mode == INFINITE
        has_more = bool(getattr(engine.paginator, "has_more", False))
        return (
            columns,
            rows,
            selected_rows,
            [rows[i]["id"] for i in selected_rows],
            sort_by_for(engine.config.columns, engine.sort_state),
            view.result_label(selected_count=len(engine.selection)),
            f"{view.current_page} / {max(view.total_pages, 1)}",
            not view.has_previous,
            not view.has_next,
            style(not is_infinite and view.total_pages > 1),
            style(is_infinite and has_more),
            filter_summary_children(engine),
        )
