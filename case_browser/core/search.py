from __future__ import annotations

from typing import Any, Sequence

from case_browser.core.paths import resolve, stringify


def matches_search(record: Any, query: str, search_keys: Sequence[str]) -> bool:
    """
    Case-insensitive substring search over the given dotted paths.

    An empty query matches everything. Otherwise a record matches when ANY of
    its search key values contains the query.
    """
    if query == "":
        return True

    needle = query.lower()
    return any(needle in stringify(resolve(record, key)).lower() for key in search_keys)
