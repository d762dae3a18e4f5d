from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Callable, Optional, Sequence

logger = logging.getLogger(__name__)

FIXED = "fixed"
INFINITE = "infinite"
PAGINATION_MODES = (FIXED, INFINITE)

DEFAULT_PAGE_SIZE = 10


def total_pages(count: int, page_size: int) -> int:
    return math.ceil(count / page_size) if count > 0 else 0


def clamp_page(page: int, count: int, page_size: int) -> int:
    """Clamp a 1-based page number to [1, total_pages] (page 1 when empty)."""
    last = max(total_pages(count, page_size), 1)
    return min(max(int(page), 1), last)


def page_slice(records: Sequence[Any], page: int, page_size: int) -> Sequence[Any]:
    """Records on a 1-based page; out-of-range pages are clamped first."""
    page = clamp_page(page, len(records), page_size)
    start = (page - 1) * page_size
    return records[start:start + page_size]


@dataclass
class FixedPagination:
    """Classic page-by-page slicing."""
    page_size: int = DEFAULT_PAGE_SIZE

    mode = FIXED

    def paginate(self, records: Sequence[Any], page: int) -> Sequence[Any]:
        return page_slice(records, page, self.page_size)


class InfiniteScroll:
    """
    Infinite-scroll pagination.

    The whole filtered+sorted list is visible; the caller owns the cursor and
    reports progress back through update(). on_load_more fires at most once
    per stretch of sentinel visibility: on the hidden -> visible transition,
    or, when that transition was blocked by a load in flight or has_more
    being False, as soon as update() lifts the block while the sentinel is
    still in view.
    """

    mode = INFINITE

    def __init__(
            self,
            *,
            has_more: bool = False,
            is_loading_more: bool = False,
            on_load_more: Optional[Callable[[], None]] = None,
    ) -> None:
        self.has_more = has_more
        self.is_loading_more = is_loading_more
        self.on_load_more = on_load_more
        self._sentinel_visible = False
        self._fired_while_visible = False

    @property
    def sentinel_visible(self) -> bool:
        return self._sentinel_visible

    def paginate(self, records: Sequence[Any], page: int) -> Sequence[Any]:
        return records

    def update(self, *, has_more: Optional[bool] = None, is_loading_more: Optional[bool] = None) -> bool:
        """Record load progress. Returns True when a blocked load request fired now."""
        if has_more is not None:
            self.has_more = has_more
        if is_loading_more is not None:
            self.is_loading_more = is_loading_more
        return self._maybe_load_more()

    def sentinel_visibility_changed(self, visible: bool) -> bool:
        """
        Report the sentinel's visibility. Returns True when on_load_more fired.
        """
        was_visible = self._sentinel_visible
        self._sentinel_visible = visible

        if not visible:
            self._fired_while_visible = False
            return False
        if was_visible:
            return False
        return self._maybe_load_more()

    def _maybe_load_more(self) -> bool:
        if not self._sentinel_visible or self._fired_while_visible:
            return False
        if self.on_load_more is None or not self.has_more or self.is_loading_more:
            return False

        # set before the call: on_load_more usually reports back through update()
        self._fired_while_visible = True
        logger.debug("Scroll sentinel visible, requesting more records")
        self.on_load_more()
        return True
