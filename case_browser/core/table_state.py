from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, FrozenSet, Optional

from case_browser.core import filters as flt
from case_browser.core.sorting import SortState, toggle_sort


@dataclass(frozen=True)
class TableState:
    """
    Everything the user can change about a table view.

    Fields:

    - search: current search query ("" = no search)
    - filters: filter id -> selected option values
    - sort: current SortState
    - current_page: 1-based page (fixed pagination only)
    - selected: selected row ids

    Every transition returns a new TableState; the engine applies them and
    fires change notifications. Search, filter and sort transitions reset the
    page to 1 so the user never sits on a page past the new result count.
    """

    search: str = ""
    filters: Dict[str, FrozenSet[str]] = field(default_factory=dict)
    sort: SortState = field(default_factory=SortState)
    current_page: int = 1
    selected: FrozenSet[str] = frozenset()

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------
    def with_search(self, query: str) -> TableState:
        return replace(self, search=query, current_page=1)

    def with_filter_toggled(self, filter_id: str, value: str) -> TableState:
        return replace(
            self,
            filters=flt.toggle_filter_value(self.filters, filter_id, value),
            current_page=1,
        )

    def with_filter_removed(self, filter_id: str, value: str) -> TableState:
        return replace(
            self,
            filters=flt.remove_filter_value(self.filters, filter_id, value),
            current_page=1,
        )

    def with_group_cleared(self, filter_id: str) -> TableState:
        return replace(
            self,
            filters=flt.clear_filter_group(self.filters, filter_id),
            current_page=1,
        )

    def cleared(self) -> TableState:
        """Empty every filter group and reset the search query."""
        return replace(self, filters={}, search="", current_page=1)

    def with_sort_toggled(self, sort_field: str) -> TableState:
        return replace(self, sort=toggle_sort(self.sort, sort_field), current_page=1)

    def with_page(self, page: int) -> TableState:
        return replace(self, current_page=page)

    # ------------------------------------------------------------------
    # Serialisation (dcc.Store / any JSON store)
    # ------------------------------------------------------------------
    def to_dict(self) -> Dict[str, Any]:
        return {
            "search": self.search,
            "filters": {k: sorted(v) for k, v in flt.clean_filters(self.filters).items()},
            "sort": self.sort.to_dict(),
            "current_page": self.current_page,
            "selected": sorted(self.selected),
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> TableState:
        data = data or {}
        try:
            page = int(data.get("current_page", 1))
        except (TypeError, ValueError):
            page = 1
        return cls(
            search=str(data.get("search") or ""),
            filters=flt.normalise_filters(data.get("filters")),
            sort=SortState.from_dict(data.get("sort")),
            current_page=max(page, 1),
            selected=frozenset(str(s) for s in data.get("selected", [])),
        )
