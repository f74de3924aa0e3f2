"""Page slicing and the page-button window shown under the directory grid."""

from __future__ import annotations

import math
from collections.abc import Sequence
from typing import TypeVar

from country_directory.schemas.directory import PageWindow

ITEMS_PER_PAGE = 12
MAX_PAGE_BUTTONS = 5

T = TypeVar("T")


def total_pages(count: int, items_per_page: int = ITEMS_PER_PAGE) -> int:
    """Return the number of pages needed for ``count`` items (never below 1)."""

    return max(1, math.ceil(count / items_per_page))


def clamp_page(page: int, pages: int) -> int:
    """Pull ``page`` back into ``1..pages``; an empty result still has page 1."""

    return min(max(page, 1), max(pages, 1))


def visible_slice(
    items: Sequence[T], page: int, items_per_page: int = ITEMS_PER_PAGE
) -> list[T]:
    """Return the items shown on ``page`` (1-based), clipped to what exists."""

    start = (page - 1) * items_per_page
    if start < 0:
        return []
    return list(items[start : start + items_per_page])


def should_paginate(count: int, items_per_page: int = ITEMS_PER_PAGE) -> bool:
    """Pagination controls only appear once the items overflow a single page."""

    return count > items_per_page


def page_window(current_page: int, pages: int) -> PageWindow:
    """Return the numbered buttons around ``current_page``.

    At most five numbered buttons are produced. While the window does not
    reach the end, an ellipsis and an explicit last-page button follow it.
    """

    if pages <= MAX_PAGE_BUTTONS:
        first = 1
    elif current_page <= 3:
        first = 1
    elif current_page >= pages - 2:
        first = pages - 4
    else:
        first = current_page - 2

    numbers = tuple(range(first, first + min(MAX_PAGE_BUTTONS, pages)))
    show_last = pages > MAX_PAGE_BUTTONS and current_page < pages - 2
    return PageWindow(
        pages=numbers,
        show_ellipsis=show_last,
        last_page=pages if show_last else None,
    )


class Paginator:
    """Stateless page arithmetic over a filtered sequence."""

    def __init__(self, items_per_page: int = ITEMS_PER_PAGE) -> None:
        self.items_per_page = items_per_page

    def total_pages(self, count: int) -> int:
        return total_pages(count, self.items_per_page)

    def visible_slice(self, items: Sequence[T], page: int) -> list[T]:
        return visible_slice(items, page, self.items_per_page)

    def page_window(self, current_page: int, pages: int) -> PageWindow:
        return page_window(current_page, pages)

    def should_paginate(self, count: int) -> bool:
        return should_paginate(count, self.items_per_page)

    @staticmethod
    def next_page(current_page: int, pages: int) -> int:
        return clamp_page(current_page + 1, pages)

    @staticmethod
    def previous_page(current_page: int, pages: int) -> int:
        return clamp_page(current_page - 1, pages)


__all__ = [
    "ITEMS_PER_PAGE",
    "MAX_PAGE_BUTTONS",
    "Paginator",
    "clamp_page",
    "page_window",
    "should_paginate",
    "total_pages",
    "visible_slice",
]
