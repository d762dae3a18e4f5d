from __future__ import annotations

__all__ = ["IDs", "filter_select_id"]


class IDs:
    class Store:
        TABLE_STATE = "table-state"

    class Control:
        # Core selectors
        TABLE_SELECT = "table-select"
        COMPACT_SWITCH = "compact-switch"

        # Search + filters
        SEARCH_INPUT = "search-input"
        CLEAR_SEARCH_BTN = "clear-search-btn"
        FILTER_CONTAINER = "filter-container"
        FILTER_SUMMARY = "filter-summary"
        CLEAR_ALL_BTN = "clear-all-btn"

        # Table
        DATA_TABLE = "data-table"
        TABLE_TITLE = "table-title"
        SELECT_ALL_BTN = "select-all-btn"

        # Footer
        RESULT_LABEL = "result-label"
        PREV_PAGE_BTN = "prev-page-btn"
        NEXT_PAGE_BTN = "next-page-btn"
        PAGE_LABEL = "page-label"
        PAGER_CONTAINER = "pager-container"
        LOAD_MORE_BTN = "load-more-btn"
        LOAD_MORE_CONTAINER = "load-more-container"

    class Pattern:
        # pattern-matching "type" strings
        FILTER_SELECT = "table-filter-select"


def filter_select_id(filter_id: str) -> dict:
    return {"type": IDs.Pattern.FILTER_SELECT, "index": filter_id}
