from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any

_SCALARS = (str, bytes, int, float, complex, bool)


def resolve(record: Any, path: str) -> Any:
    """
    Resolve a dotted field path ("client.name") against a record.

    Mappings are walked by key, any other object by attribute. A missing key,
    a scalar intermediate or a None along the way resolves to None; column and
    filter definitions are hand-written, so a typo degrades to "no match"
    instead of raising.
    """
    current: Any = record
    for part in path.split("."):
        if current is None or isinstance(current, _SCALARS):
            return None
        if isinstance(current, Mapping):
            if part not in current:
                return None
            current = current[part]
        else:
            if not part or part.startswith("_"):
                return None
            current = getattr(current, part, None)
    return current


def is_missing(value: Any) -> bool:
    """True for None and float NaN (pandas' placeholder for empty cells)."""
    return value is None or (isinstance(value, float) and math.isnan(value))


def stringify(value: Any) -> str:
    """
    Common string coercion for search, filters, sorting and cell rendering.

    - None / NaN -> ""
    - bools -> "true" / "false" (filter option values are lower-case strings)
    - integral floats drop the trailing ".0" (CSV ids read back as floats)
    """
    if is_missing(value):
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
