from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from case_browser.core.columns import FORMATTERS, ColumnDef, formatted_cell
from case_browser.core.configs import TableConfig
from case_browser.core.exceptions import ConfigError
from case_browser.core.filters import FilterDef
from case_browser.core.pagination import DEFAULT_PAGE_SIZE, FIXED, INFINITE
from case_browser.core.paths import resolve, stringify

DEFAULT_BATCH_SIZE = 20


@dataclass
class TableDefinition:
    """
    Parsed config entry for a single table page (clients, transactions, alerts...).
    """
    raw: Dict[str, Any]
    source_path: Path
    index: int

    @property
    def key(self) -> str:
        return self.raw.get("key") or self.source_path.stem

    @property
    def title(self) -> str:
        return self.raw.get("title", f"Table {self.index}")

    @property
    def id_field(self) -> str:
        return self.raw.get("id_field", "id")

    @property
    def data_path(self) -> Optional[Path]:
        """Records file, relative paths resolved against the config root."""
        data = self.raw.get("data")
        if not data:
            return None
        path = Path(data)
        if path.is_absolute():
            return path
        return (self.source_path.parent.parent / path).resolve()

    @property
    def search_keys(self) -> List[str]:
        return list(self.raw.get("search_keys", []))

    @property
    def pagination(self) -> Dict[str, Any]:
        return dict(self.raw.get("pagination") or {"mode": FIXED})

    @property
    def pagination_mode(self) -> str:
        return self.pagination.get("mode", FIXED)

    @property
    def page_size(self) -> int:
        return self.pagination.get("page_size", DEFAULT_PAGE_SIZE)

    @property
    def batch_size(self) -> int:
        return self.pagination.get("batch_size", DEFAULT_BATCH_SIZE)

    def columns(self) -> List[ColumnDef]:
        columns: List[ColumnDef] = []
        for raw_col in self.raw.get("columns", []):
            accessor = raw_col.get("accessor_key") or raw_col.get("id")
            if not accessor:
                raise ConfigError(f"{self.source_path.name}: column without id/accessor_key")
            fmt = raw_col.get("format")
            if fmt is not None and fmt not in FORMATTERS:
                raise ConfigError(
                    f"{self.source_path.name}: unknown format '{fmt}' for column '{accessor}'"
                )
            columns.append(
                ColumnDef(
                    id=raw_col.get("id", accessor),
                    header=raw_col.get("header", accessor),
                    accessor_key=accessor,
                    cell=formatted_cell(accessor, fmt) if fmt else None,
                    sortable=bool(raw_col.get("sortable", False)),
                    hide_on_narrow_viewport=bool(raw_col.get("hide_on_narrow_viewport", False)),
                )
            )
        return columns

    def filters(self) -> List[FilterDef]:
        try:
            return [FilterDef.from_dict(f) for f in self.raw.get("filters", [])]
        except KeyError as e:
            raise ConfigError(f"{self.source_path.name}: filter missing {e}") from e

    def get_id(self, record: Any) -> str:
        return stringify(resolve(record, self.id_field))

    def to_table_config(self) -> TableConfig:
        """Build and validate the engine configuration for this table."""
        cfg = TableConfig(
            get_id=self.get_id,
            columns=self.columns(),
            filters=self.filters(),
            search_keys=self.search_keys,
            pagination_mode=self.pagination_mode,
            page_size=self.page_size,
        )
        cfg.validate()
        if self.pagination_mode == INFINITE and (not isinstance(self.batch_size, int) or self.batch_size < 1):
            raise ConfigError(f"{self.source_path.name}: batch_size must be a positive integer")
        return cfg

    @classmethod
    def from_raw(cls, raw: Dict[str, Any], source_path: Path, index: int) -> TableDefinition:
        return cls(raw=raw, source_path=source_path, index=index)


@dataclass
class GlobalConfig:
    ui_title: str
    default_table: Optional[str]
    tables: List[TableDefinition] = field(default_factory=list)
