from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)

SEARCH = "search"
FILTERS = "filters"
SORT = "sort"
EVENTS = (SEARCH, FILTERS, SORT)

Listener = Callable[[Any], None]


class ChangeNotifier:
    """
    Synchronous change notification for search / filters / sort.

    Listeners receive the NEW value. There is no debouncing: a consumer that
    mirrors state somewhere slow (a URL, a store) debounces on its own side.
    A failing listener is logged and skipped so a bad consumer cannot break
    a table mutation.
    """

    def __init__(
            self,
            *,
            on_search_change: Optional[Listener] = None,
            on_filters_change: Optional[Listener] = None,
            on_sort_change: Optional[Listener] = None,
    ) -> None:
        self._listeners: Dict[str, List[Listener]] = {event: [] for event in EVENTS}
        for event, callback in (
                (SEARCH, on_search_change),
                (FILTERS, on_filters_change),
                (SORT, on_sort_change),
        ):
            if callback is not None:
                self._listeners[event].append(callback)

    def subscribe(self, event: str, callback: Listener) -> Callable[[], None]:
        """Register a listener; returns a function that unsubscribes it."""
        if event not in self._listeners:
            raise ValueError(f"Unknown table event '{event}'")
        self._listeners[event].append(callback)

        def unsubscribe() -> None:
            try:
                self._listeners[event].remove(callback)
            except ValueError:
                pass

        return unsubscribe

    def emit(self, event: str, value: Any) -> None:
        for callback in list(self._listeners[event]):
            try:
                callback(value)
            except Exception:
                logger.exception("Table %s listener failed", event)
