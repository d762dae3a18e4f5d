from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Callable, Dict, List, Optional, Sequence

from case_browser.core.paths import is_missing, resolve, stringify

CellRenderer = Callable[[Any], str]


@dataclass(frozen=True)
class ColumnDef:
    """
    One displayed column.

    Fields:

    - id: unique column id
    - header: header text
    - accessor_key: dotted path of the value shown (and sorted on)
    - cell: optional renderer record -> str, replaces the default stringify
    - sortable: whether the header toggles sorting
    - hide_on_narrow_viewport: dropped from narrow (mobile) layouts
    """
    id: str
    header: str
    accessor_key: str
    cell: Optional[CellRenderer] = None
    sortable: bool = False
    hide_on_narrow_viewport: bool = False


def visible_columns(columns: Sequence[ColumnDef], narrow: bool = False) -> List[ColumnDef]:
    if narrow:
        return [c for c in columns if not c.hide_on_narrow_viewport]
    return list(columns)


def render_cell(column: ColumnDef, record: Any) -> str:
    if column.cell is not None:
        return column.cell(record)
    return stringify(resolve(record, column.accessor_key))


# ---------------------------------------------------------------------------
# Named value formatters (JSON table definitions can't carry callables)
# ---------------------------------------------------------------------------
def _format_currency(value: Any) -> str:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return f"${value:,.2f}"
    return stringify(value)


def _format_percent(value: Any) -> str:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return f"{value:.0%}" if abs(value) <= 1 else f"{value:.0f}%"
    return stringify(value)


def _format_date(value: Any) -> str:
    if isinstance(value, (datetime, date)):
        return value.strftime("%Y-%m-%d")
    text = stringify(value)
    # ISO timestamps -> date part only
    return text[:10] if len(text) >= 10 and text[4:5] == "-" else text


def _format_upper(value: Any) -> str:
    return stringify(value).upper()


FORMATTERS: Dict[str, Callable[[Any], str]] = {
    "text": stringify,
    "currency": _format_currency,
    "percent": _format_percent,
    "date": _format_date,
    "upper": _format_upper,
}


def formatted_cell(accessor_key: str, fmt: str) -> CellRenderer:
    """Build a cell renderer applying a named formatter to the resolved value."""
    formatter = FORMATTERS[fmt]

    def render(record: Any) -> str:
        value = resolve(record, accessor_key)
        return "" if is_missing(value) else formatter(value)

    return render
