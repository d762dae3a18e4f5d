from __future__ import annotations

from typing import Any, Callable, FrozenSet, Iterable, List, Optional, Sequence

GetId = Callable[[Any], str]


class SelectionTracker:
    """
    Set of selected row ids.

    Ids come from the caller's get_id and must be unique across the whole
    dataset. Selection is NOT pruned when filters hide a row: a selected row
    stays selected while it is filtered out.

    "Select all" works on whatever the caller passes as visible records: the
    current page in fixed pagination, the whole filtered list in infinite mode.
    """

    def __init__(self, get_id: GetId, initial: Optional[Iterable[str]] = None):
        self._get_id = get_id
        self._selected: set[str] = set(initial or ())

    @property
    def selected_ids(self) -> FrozenSet[str]:
        return frozenset(self._selected)

    def __len__(self) -> int:
        return len(self._selected)

    def __contains__(self, row_id: object) -> bool:
        return row_id in self._selected

    def toggle(self, row_id: str) -> None:
        if row_id in self._selected:
            self._selected.discard(row_id)
        else:
            self._selected.add(row_id)

    def clear(self) -> None:
        self._selected.clear()

    def is_all_selected(self, visible_records: Sequence[Any]) -> bool:
        if not visible_records:
            return False
        if len(self._selected) != len(visible_records):
            return False
        return all(self._get_id(r) in self._selected for r in visible_records)

    def toggle_all(self, visible_records: Sequence[Any]) -> None:
        """Clear when every visible row is selected, otherwise select exactly the visible rows."""
        if self.is_all_selected(visible_records):
            self._selected = set()
        else:
            self._selected = {self._get_id(r) for r in visible_records}

    def selected_records(self, records: Iterable[Any]) -> List[Any]:
        return [r for r in records if self._get_id(r) in self._selected]
