from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, List

from case_browser.core.columns import ColumnDef
from case_browser.core.exceptions import ConfigError
from case_browser.core.filters import FilterDef
from case_browser.core.pagination import DEFAULT_PAGE_SIZE, FIXED, PAGINATION_MODES


@dataclass
class TableConfig:
    """
    Static table configuration supplied once by the page that owns the table.

    get_id must return a stable id, unique across the full unfiltered
    dataset. Two records sharing an id are selected / deselected together.
    """
    get_id: Callable[[Any], str]
    columns: List[ColumnDef] = field(default_factory=list)
    filters: List[FilterDef] = field(default_factory=list)
    search_keys: List[str] = field(default_factory=list)
    pagination_mode: str = FIXED
    page_size: int = DEFAULT_PAGE_SIZE

    def validate(self) -> None:
        """Raise ConfigError for configurations the engine cannot run with."""
        if not callable(self.get_id):
            raise ConfigError("TableConfig.get_id must be callable.")
        if self.pagination_mode not in PAGINATION_MODES:
            raise ConfigError(
                f"Unknown pagination mode '{self.pagination_mode}', expected one of {PAGINATION_MODES}"
            )
        if self.pagination_mode == FIXED and (not isinstance(self.page_size, int) or self.page_size < 1):
            raise ConfigError(f"page_size must be a positive integer, got {self.page_size!r}")

        column_ids = [c.id for c in self.columns]
        duplicates = {c for c in column_ids if column_ids.count(c) > 1}
        if duplicates:
            raise ConfigError(f"Duplicate column ids: {sorted(duplicates)}")

        filter_ids = [f.id for f in self.filters]
        duplicates = {f for f in filter_ids if filter_ids.count(f) > 1}
        if duplicates:
            raise ConfigError(f"Duplicate filter ids: {sorted(duplicates)}")

    def sortable_fields(self) -> List[str]:
        return [c.accessor_key for c in self.columns if c.sortable]
