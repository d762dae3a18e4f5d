from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, replace
from typing import Any, Callable, Dict, FrozenSet, Iterable, List, Mapping, Optional, Sequence, Union

from case_browser.core import filters as flt
from case_browser.core.columns import ColumnDef, visible_columns
from case_browser.core.configs import TableConfig
from case_browser.core.exceptions import PaginationModeError
from case_browser.core.notifier import FILTERS, SEARCH, SORT, ChangeNotifier, Listener
from case_browser.core.pagination import (
    FIXED,
    INFINITE,
    FixedPagination,
    InfiniteScroll,
    clamp_page,
    total_pages,
)
from case_browser.core.search import matches_search
from case_browser.core.selection import SelectionTracker
from case_browser.core.sorting import SortState, sort_records
from case_browser.core.table_state import TableState

logger = logging.getLogger(__name__)

Paginator = Union[FixedPagination, InfiniteScroll]


@dataclass(frozen=True)
class TableView:
    """
    Derived, read-only output of one pipeline run.

    - rows: records to render (current page, or everything in infinite mode)
    - matched: every record passing search + filters, in sorted order
    - total_count: size of the unfiltered input
    """
    rows: Sequence[Any]
    matched: Sequence[Any]
    total_count: int
    current_page: int
    total_pages: int
    mode: str

    @property
    def filtered_count(self) -> int:
        return len(self.matched)

    @property
    def has_previous(self) -> bool:
        return self.mode == FIXED and self.current_page > 1

    @property
    def has_next(self) -> bool:
        return self.mode == FIXED and self.current_page < self.total_pages

    def result_label(
            self,
            selected_count: int = 0,
            result_text: str = "result",
            results_text: str = "results",
            selected_text: str = "selected",
    ) -> str:
        """Footer text: "7 results", infinite "20 / 20 results", plus " - 2 selected"."""
        count = self.filtered_count
        noun = result_text if count == 1 else results_text
        if self.mode == INFINITE:
            label = f"{len(self.rows)} / {count} {noun}"
        else:
            label = f"{count} {noun}"
        if selected_count > 0:
            label += f" - {selected_count} {selected_text}"
        return label


def filter_records(records: Iterable[Any], state: TableState, search_keys: Sequence[str]) -> List[Any]:
    return [
        r for r in records
        if matches_search(r, state.search, search_keys) and flt.matches_filters(r, state.filters)
    ]


def derive_view(
        records: Sequence[Any],
        state: TableState,
        config: TableConfig,
        paginator: Paginator,
) -> TableView:
    """
    records -> search and filters -> sort -> paginate.

    Pure: never mutates records or state, so callers may memoise on unchanged
    inputs.
    """
    matched = sort_records(filter_records(records, state, config.search_keys), state.sort)

    if paginator.mode == FIXED:
        page = clamp_page(state.current_page, len(matched), config.page_size)
        rows = paginator.paginate(matched, page)
        pages = total_pages(len(matched), config.page_size)
    else:
        page, pages = 1, 1
        rows = paginator.paginate(matched, page)

    return TableView(
        rows=rows,
        matched=matched,
        total_count=len(records),
        current_page=page,
        total_pages=pages,
        mode=paginator.mode,
    )


class TableEngine:
    """
    Searchable, filterable, sortable, paginated view over an in-memory list.

    State only changes through the named operations below. Each mutation
    drops the memoised view, so the next read of `view` re-runs the full
    pipeline. Search / filter / sort changes are pushed to listeners
    synchronously (see ChangeNotifier).
    """

    def __init__(
            self,
            records: Sequence[Any],
            config: TableConfig,
            *,
            initial_state: Optional[TableState] = None,
            initial_search: Optional[str] = None,
            initial_filters: Optional[Mapping[str, Iterable[str]]] = None,
            initial_sort: Optional[SortState] = None,
            has_more: bool = False,
            is_loading_more: bool = False,
            on_load_more: Optional[Callable[[], None]] = None,
            on_search_change: Optional[Listener] = None,
            on_filters_change: Optional[Listener] = None,
            on_sort_change: Optional[Listener] = None,
    ) -> None:
        config.validate()
        self.config = config

        state = initial_state or TableState()
        if initial_search is not None:
            state = replace(state, search=initial_search)
        if initial_filters is not None:
            state = replace(state, filters=flt.normalise_filters(initial_filters))
        if initial_sort is not None:
            state = replace(state, sort=initial_sort)
        # selection lives in SelectionTracker; the state property merges it back in
        self._state = replace(state, selected=frozenset())

        if config.pagination_mode == INFINITE:
            self.paginator: Paginator = InfiniteScroll(
                has_more=has_more,
                is_loading_more=is_loading_more,
                on_load_more=on_load_more,
            )
        else:
            self.paginator = FixedPagination(page_size=config.page_size)

        self.selection = SelectionTracker(config.get_id, state.selected)
        self.notifier = ChangeNotifier(
            on_search_change=on_search_change,
            on_filters_change=on_filters_change,
            on_sort_change=on_sort_change,
        )

        self._records: Sequence[Any] = records
        self._view: Optional[TableView] = None
        self._warn_on_duplicate_ids(records)

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------
    @property
    def records(self) -> Sequence[Any]:
        return self._records

    @property
    def view(self) -> TableView:
        if self._view is None:
            self._view = derive_view(self._records, self._state, self.config, self.paginator)
        return self._view

    @property
    def state(self) -> TableState:
        """Snapshot of the current state, page clamped to the current results."""
        return replace(
            self._state,
            current_page=self.view.current_page,
            selected=self.selection.selected_ids,
        )

    @property
    def search(self) -> str:
        return self._state.search

    @property
    def active_filters(self) -> Dict[str, FrozenSet[str]]:
        return flt.clean_filters(self._state.filters)

    @property
    def sort_state(self) -> SortState:
        return self._state.sort

    @property
    def mode(self) -> str:
        return self.paginator.mode

    def active_filter_count(self) -> int:
        return flt.active_filter_count(self._state.filters)

    def active_filter_summary(self) -> List[flt.ActiveFilterSummary]:
        return flt.active_filter_summary(self.config.filters, self._state.filters)

    def visible_columns(self, narrow: bool = False) -> List[ColumnDef]:
        return visible_columns(self.config.columns, narrow=narrow)

    def subscribe(self, event: str, callback: Listener) -> Callable[[], None]:
        return self.notifier.subscribe(event, callback)

    # ------------------------------------------------------------------
    # Inputs
    # ------------------------------------------------------------------
    def set_records(self, records: Sequence[Any]) -> None:
        """Replace the underlying records (e.g. after the caller loaded more)."""
        self._records = records
        self._view = None
        self._warn_on_duplicate_ids(records)

    # ------------------------------------------------------------------
    # Search & filters
    # ------------------------------------------------------------------
    def set_search(self, query: str) -> None:
        self._apply(self._state.with_search(query))

    def clear_search(self) -> None:
        self.set_search("")

    def toggle_filter_value(self, filter_id: str, value: str) -> None:
        self._apply(self._state.with_filter_toggled(filter_id, str(value)))

    def remove_filter_value(self, filter_id: str, value: str) -> None:
        self._apply(self._state.with_filter_removed(filter_id, str(value)))

    def clear_filter_group(self, filter_id: str) -> None:
        self._apply(self._state.with_group_cleared(filter_id))

    def clear_all(self) -> None:
        """Empty every filter group and reset the search query."""
        self._apply(self._state.cleared())

    # ------------------------------------------------------------------
    # Sorting
    # ------------------------------------------------------------------
    def toggle_sort(self, field: str) -> None:
        self._apply(self._state.with_sort_toggled(field))

    # ------------------------------------------------------------------
    # Fixed pagination
    # ------------------------------------------------------------------
    def set_page(self, page: int) -> None:
        self._require_mode(FIXED, "set_page")
        page = clamp_page(page, self.view.filtered_count, self.config.page_size)
        self._apply(self._state.with_page(page))

    def next_page(self) -> None:
        self._require_mode(FIXED, "next_page")
        view = self.view
        if view.current_page < view.total_pages:
            self._apply(self._state.with_page(view.current_page + 1))

    def previous_page(self) -> None:
        self._require_mode(FIXED, "previous_page")
        view = self.view
        if view.current_page > 1:
            self._apply(self._state.with_page(view.current_page - 1))

    # ------------------------------------------------------------------
    # Infinite scroll
    # ------------------------------------------------------------------
    def sentinel_visibility_changed(self, visible: bool) -> bool:
        """Report scroll-sentinel visibility; True when on_load_more fired."""
        paginator = self._require_mode(INFINITE, "sentinel_visibility_changed")
        return paginator.sentinel_visibility_changed(visible)

    def update_load_state(self, *, has_more: Optional[bool] = None, is_loading_more: Optional[bool] = None) -> bool:
        """Report load progress; True when a load blocked earlier fired now."""
        paginator = self._require_mode(INFINITE, "update_load_state")
        return paginator.update(has_more=has_more, is_loading_more=is_loading_more)

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------
    def toggle_row(self, row_id: str) -> None:
        self.selection.toggle(row_id)

    def toggle_all_visible(self) -> None:
        self.selection.toggle_all(self.view.rows)

    def is_all_selected(self) -> bool:
        return self.selection.is_all_selected(self.view.rows)

    def is_selected(self, record: Any) -> bool:
        return self.config.get_id(record) in self.selection

    def clear_selection(self) -> None:
        self.selection.clear()

    def selected_records(self) -> List[Any]:
        """Selected records from the full dataset, including filtered-out ones."""
        return self.selection.selected_records(self._records)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _apply(self, new_state: TableState) -> None:
        old = self._state
        self._state = new_state
        self._view = None

        if new_state.search != old.search:
            self.notifier.emit(SEARCH, new_state.search)
        new_filters = flt.clean_filters(new_state.filters)
        if new_filters != flt.clean_filters(old.filters):
            self.notifier.emit(FILTERS, new_filters)
        if new_state.sort != old.sort:
            self.notifier.emit(SORT, new_state.sort)

    def _require_mode(self, mode: str, operation: str) -> Paginator:
        if self.paginator.mode != mode:
            raise PaginationModeError(
                f"{operation} is only available in '{mode}' pagination, table uses '{self.paginator.mode}'"
            )
        return self.paginator

    def _warn_on_duplicate_ids(self, records: Sequence[Any]) -> None:
        counts = Counter(self.config.get_id(r) for r in records)
        duplicates = sorted(row_id for row_id, n in counts.items() if n > 1)
        if duplicates:
            logger.warning(
                "get_id is not unique: %d id(s) shared by several records, selection will treat them as one",
                len(duplicates),
                extra={"duplicate_ids": duplicates[:10]},
            )
