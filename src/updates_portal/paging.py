"""Offset pagination for the holder update list."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..dated_updates.link_state import set_param
from ..dated_updates.models import UpdateRecord
from .config import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE


def clamp_page_size(raw: Any) -> int:
    """Clamp a raw page size to sane bounds."""
    try:
        size = int(raw)
    except (TypeError, ValueError):
        return DEFAULT_PAGE_SIZE
    return max(1, min(size, MAX_PAGE_SIZE))


def clamp_start(raw: Any) -> int:
    """Clamp a raw ``start`` offset to zero or higher."""
    try:
        start = int(raw)
    except (TypeError, ValueError):
        return 0
    return max(0, start)


def _start_link(base_link: str, start: int) -> str:
    return set_param(base_link, "start", start if start > 0 else None)


@dataclass(frozen=True)
class UpdatePage:
    """One page of filtered updates plus the links around it."""

    items: list[UpdateRecord]
    total: int
    start: int
    page_size: int
    base_link: str

    @property
    def current_page(self) -> int:
        """Return the 1-based page number."""
        return self.start // self.page_size + 1

    @property
    def total_pages(self) -> int:
        """Return the page count (at least one)."""
        return max(1, -(-self.total // self.page_size))

    @property
    def prev_link(self) -> str | None:
        """Return the previous page link, or None on the first page."""
        if self.start <= 0:
            return None
        return _start_link(self.base_link, max(0, self.start - self.page_size))

    @property
    def next_link(self) -> str | None:
        """Return the next page link, or None on the last page."""
        next_start = self.start + self.page_size
        if next_start >= self.total:
            return None
        return _start_link(self.base_link, next_start)

    def page_links(self) -> list[dict[str, Any]]:
        """Return numbered page links for templates."""
        return [
            {
                "number": number,
                "link": _start_link(self.base_link, (number - 1) * self.page_size),
                "current": number == self.current_page,
            }
            for number in range(1, self.total_pages + 1)
        ]
