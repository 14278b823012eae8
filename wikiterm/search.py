"""Title search state for the pages pane."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from .models import Page


@dataclass
class SearchModel:
    active: bool = False
    query: str = ""

    def activate(self, query: str) -> None:
        self.query = query
        self.active = True

    def clear(self) -> None:
        self.active = False
        self.query = ""

    def apply(self, pages: Iterable[Page]) -> list[Page]:
        if not self.active:
            return list(pages)
        return filter_by_title(pages, self.query)


def filter_by_title(pages: Iterable[Page], query: str) -> list[Page]:
    folded = query.casefold()
    return [page for page in pages if folded in page.title.casefold()]
