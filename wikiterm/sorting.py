"""Page ordering with a snapshot for cancel-to-previous in the sort picker."""

from __future__ import annotations

import enum
from collections.abc import Iterable
from dataclasses import dataclass

from .models import Page


class SortKey(enum.Enum):
    CREATED = "created"
    TITLE = "title"

    @property
    def label(self) -> str:
        return "Created" if self is SortKey.CREATED else "Title"


class SortDirection(enum.Enum):
    ASCENDING = "asc"
    DESCENDING = "desc"

    def flipped(self) -> SortDirection:
        if self is SortDirection.ASCENDING:
            return SortDirection.DESCENDING
        return SortDirection.ASCENDING

    @property
    def arrow(self) -> str:
        return "↑" if self is SortDirection.ASCENDING else "↓"


SORT_KEYS: tuple[SortKey, ...] = (SortKey.CREATED, SortKey.TITLE)


@dataclass
class SortModel:
    key: SortKey = SortKey.CREATED
    direction: SortDirection = SortDirection.ASCENDING
    saved_key: SortKey = SortKey.CREATED
    saved_direction: SortDirection = SortDirection.ASCENDING

    def snapshot(self) -> None:
        self.saved_key = self.key
        self.saved_direction = self.direction

    def restore(self) -> None:
        self.key = self.saved_key
        self.direction = self.saved_direction

    def toggle_direction(self) -> None:
        self.direction = self.direction.flipped()

    def reset_default(self) -> None:
        self.key = SortKey.CREATED
        self.direction = SortDirection.ASCENDING
        self.snapshot()

    def apply(self, pages: Iterable[Page]) -> list[Page]:
        return sort_pages(pages, self.key, self.direction)


def sort_pages(pages: Iterable[Page], key: SortKey, direction: SortDirection) -> list[Page]:
    """Order pages by codepoint title or by the raw creation timestamp string."""
    descending = direction is SortDirection.DESCENDING
    if key is SortKey.TITLE:
        return sorted(pages, key=lambda page: page.title, reverse=descending)
    return sorted(pages, key=lambda page: page.created_at, reverse=descending)
