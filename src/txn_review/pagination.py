"""Fixed-size paging over an ordered result."""

from __future__ import annotations

import math
from collections.abc import Sequence
from typing import Any

from txn_review.schemas import Page

PAGE_SIZE_OPTIONS = (20, 30, 50, 75, 100)
DEFAULT_PAGE_SIZE = 20


def total_pages_for(count: int, page_size: int) -> int:
    return max(1, math.ceil(count / page_size))


def _check_page_size(page_size: int) -> int:
    if page_size not in PAGE_SIZE_OPTIONS:
        raise ValueError(f"page_size must be one of {list(PAGE_SIZE_OPTIONS)}")
    return page_size


def page_size_from_config(config: dict[str, Any] | None) -> int:
    """Default page size from `pagination.page_size`; ValueError when not an offered option."""
    value = ((config or {}).get("pagination") or {}).get("page_size", DEFAULT_PAGE_SIZE)
    return _check_page_size(int(value))


class Paginator:
    """
    Holds page size and the 1-based current page for one ordered sequence.

    Navigation clamps into [1, total_pages]. Replacing the sequence re-clamps the
    current page so page_items never reads past the end.
    """

    def __init__(self, items: Sequence[Any] = (), page_size: int = DEFAULT_PAGE_SIZE) -> None:
        self.page_size = _check_page_size(page_size)
        self.current_page = 1
        self._items: Sequence[Any] = items

    @property
    def total_count(self) -> int:
        return len(self._items)

    @property
    def total_pages(self) -> int:
        return total_pages_for(self.total_count, self.page_size)

    def clamp(self, page: int) -> int:
        return min(self.total_pages, max(1, page))

    @property
    def page_items(self) -> list[Any]:
        start = (self.current_page - 1) * self.page_size
        return list(self._items[start : start + self.page_size])

    def go_to(self, page: int) -> int:
        self.current_page = self.clamp(page)
        return self.current_page

    def next_page(self) -> int:
        return self.go_to(self.current_page + 1)

    def previous_page(self) -> int:
        return self.go_to(self.current_page - 1)

    def set_page_size(self, page_size: int) -> None:
        self.page_size = _check_page_size(page_size)
        self.current_page = 1

    def set_items(self, items: Sequence[Any]) -> None:
        self._items = items
        self.current_page = self.clamp(self.current_page)

    def page(self) -> Page[Any]:
        return Page(
            items=self.page_items,
            current_page=self.current_page,
            total_pages=self.total_pages,
            page_size=self.page_size,
            total_count=self.total_count,
        )


def paginate(items: Sequence[Any], page: int = 1, page_size: int = DEFAULT_PAGE_SIZE) -> Page[Any]:
    """One-shot page request; out-of-range pages are clamped."""
    paginator = Paginator(items, page_size)
    paginator.go_to(page)
    return paginator.page()
