"""
Pagination arithmetic for table views.
"""

import math
from dataclasses import dataclass
from typing import List, Sequence, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class PageInfo:
    """Bounds of one page over a result of ``total_items`` records."""
    current_page: int
    total_pages: int
    start_index: int
    end_index: int
    items_per_page: int
    total_items: int

    @property
    def has_next_page(self) -> bool:
        return self.current_page < self.total_pages

    @property
    def has_previous_page(self) -> bool:
        return self.current_page > 1

    def slice(self, items: Sequence[T]) -> List[T]:
        """Records of ``items`` that belong on this page."""
        return list(items[self.start_index:self.end_index])


def clamp_page(page: int, total_pages: int) -> int:
    """Clamp ``page`` into [1, total_pages]; 1 when there are no pages."""
    return max(1, min(page, total_pages))


def paginate(total_items: int, items_per_page: int, current_page: int = 1) -> PageInfo:
    """
    Compute the bounds of the requested page.

    Args:
        total_items: Number of records being paged
        items_per_page: Page size
        current_page: Requested page (1-based); clamped into range

    Returns:
        PageInfo with the clamped page and its [start_index, end_index) slice

    Raises:
        ValueError: If items_per_page is smaller than 1

    Examples:
        >>> info = paginate(23, 10, 99)
        >>> (info.current_page, info.start_index, info.end_index)
        (3, 20, 23)
    """
    if items_per_page < 1:
        raise ValueError(f"items_per_page must be at least 1, got {items_per_page}")

    total_items = max(0, total_items)
    total_pages = math.ceil(total_items / items_per_page)
    page = clamp_page(current_page, total_pages)

    start_index = (page - 1) * items_per_page
    end_index = min(start_index + items_per_page, total_items)

    return PageInfo(
        current_page=page,
        total_pages=total_pages,
        start_index=start_index,
        end_index=end_index,
        items_per_page=items_per_page,
        total_items=total_items,
    )


class Paginator:
    """
    Page cursor over a result whose size can change.

    Every navigation call clamps the page into range. ``reset()`` goes back
    to the first page and is what search sessions call whenever the search
    term or filters change.
    """

    def __init__(self, items_per_page: int, total_items: int = 0, current_page: int = 1):
        if items_per_page < 1:
            raise ValueError(f"items_per_page must be at least 1, got {items_per_page}")
        self.items_per_page = items_per_page
        self.total_items = max(0, total_items)
        self._page = current_page

    @property
    def info(self) -> PageInfo:
        return paginate(self.total_items, self.items_per_page, self._page)

    @property
    def current_page(self) -> int:
        return self.info.current_page

    @property
    def total_pages(self) -> int:
        return self.info.total_pages

    @property
    def has_next_page(self) -> bool:
        return self.info.has_next_page

    @property
    def has_previous_page(self) -> bool:
        return self.info.has_previous_page

    def update_total(self, total_items: int) -> None:
        self.total_items = max(0, total_items)

    def go_to_page(self, page: int) -> int:
        self._page = clamp_page(page, self.total_pages)
        return self._page

    def next_page(self) -> int:
        return self.go_to_page(self.current_page + 1)

    def previous_page(self) -> int:
        return self.go_to_page(self.current_page - 1)

    def first_page(self) -> int:
        return self.go_to_page(1)

    def last_page(self) -> int:
        return self.go_to_page(self.total_pages)

    def reset(self) -> None:
        self._page = 1

    def slice(self, items: Sequence[T]) -> List[T]:
        return self.info.slice(items)
