from __future__ import annotations

import unicodedata
from dataclasses import dataclass
from functools import cmp_to_key
from numbers import Real
from typing import Any, Dict, List, Optional, Sequence, Tuple

from case_browser.core.paths import is_missing, resolve, stringify

ASC = "asc"
DESC = "desc"
DIRECTIONS = (ASC, DESC)


@dataclass(frozen=True)
class SortState:
    """
    Current sort.

    - field: dotted path to sort by, None means "original order"
    - direction: "asc" | "desc"
    """
    field: Optional[str] = None
    direction: str = DESC

    def to_dict(self) -> Dict[str, Any]:
        return {"field": self.field, "direction": self.direction}

    @classmethod
    def from_dict(cls, data: Dict[str, Any] | None) -> SortState:
        if not data:
            return cls()
        direction = data.get("direction", DESC)
        return cls(
            field=data.get("field") or None,
            direction=direction if direction in DIRECTIONS else DESC,
        )


def toggle_sort(state: SortState, field: str) -> SortState:
    """Same field flips direction, a new field starts ascending."""
    if state.field == field:
        return SortState(field=field, direction=ASC if state.direction == DESC else DESC)
    return SortState(field=field, direction=ASC)


def _is_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def _collation_key(text: str) -> Tuple[str, str]:
    # Primary: accents and case folded away ("Élan" sorts with "elan").
    # Secondary: case-folded original, so the order is total.
    decomposed = unicodedata.normalize("NFKD", text)
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return base.casefold(), text.casefold()


def _compare_strings(a: str, b: str) -> int:
    ka, kb = _collation_key(a), _collation_key(b)
    if ka == kb:
        return (a > b) - (a < b)
    return -1 if ka < kb else 1


def compare_values(a: Any, b: Any, direction: str = ASC) -> int:
    """
    Null-last comparator.

    Missing values go to the end whatever the direction; the direction only
    flips the sign of the value comparison.
    """
    a_missing, b_missing = is_missing(a), is_missing(b)
    if a_missing and b_missing:
        return 0
    if a_missing:
        return 1
    if b_missing:
        return -1

    sign = 1 if direction == ASC else -1
    if _is_number(a) and _is_number(b):
        return ((a > b) - (a < b)) * sign
    return _compare_strings(stringify(a), stringify(b)) * sign


def sort_records(records: Sequence[Any], state: SortState) -> Sequence[Any]:
    """
    Return records ordered by state.field.

    With no sort field the input is returned as-is; otherwise a new list is
    built and the input is never mutated. Python's sort is stable, so ties keep
    their incoming order.
    """
    if state.field is None:
        return records

    field = state.field
    keyed: List[Tuple[Any, Any]] = [(resolve(r, field), r) for r in records]
    keyed.sort(key=cmp_to_key(lambda x, y: compare_values(x[0], y[0], state.direction)))
    return [r for _, r in keyed]
