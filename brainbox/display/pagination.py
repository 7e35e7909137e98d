"""Page slicing over the display set"""

import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TypeVar

from brainbox.config import PAGE_SIZE_OPTIONS

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 12


def total_pages(total: int, page_size: int) -> int:
    """Number of pages, never less than one."""
    return max(1, math.ceil(total / page_size))


def clamp_page(page: int, total: int, page_size: int) -> int:
    return min(max(1, page), total_pages(total, page_size))


@dataclass
class Pagination:
    """Page size and 1-based current page."""

    page_size: int = DEFAULT_PAGE_SIZE
    page: int = 1

    def __post_init__(self) -> None:
        if self.page_size not in PAGE_SIZE_OPTIONS:
            raise ValueError(f"page_size must be one of {PAGE_SIZE_OPTIONS}")

    def reset(self) -> None:
        self.page = 1

    def set_page_size(self, page_size: int) -> None:
        if page_size not in PAGE_SIZE_OPTIONS:
            raise ValueError(f"page_size must be one of {PAGE_SIZE_OPTIONS}")
        self.page_size = page_size
        self.page = 1

    def clamp(self, total: int) -> int:
        self.page = clamp_page(self.page, total, self.page_size)
        return self.page

    def slice(self, items: Sequence[T]) -> list[T]:
        """Clamp against ``items`` and return the current page of it."""
        page = self.clamp(len(items))
        start = self.page_size * (page - 1)
        return list(items[start : start + self.page_size])
