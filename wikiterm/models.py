"""Entities fetched from the document store and the session enums."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Protocol


class HasLabel(Protocol):
    """Anything a list pane or ``wikiterm list`` can display."""

    @property
    def id(self) -> str: ...

    @property
    def label(self) -> str: ...


@dataclass(frozen=True)
class Space:
    id: str
    key: str
    name: str

    @property
    def label(self) -> str:
        return self.name


@dataclass(frozen=True)
class Page:
    id: str
    title: str
    space_id: str
    created_at: str = ""
    body: str | None = None
    version: int = 1

    @property
    def label(self) -> str:
        return self.title

    @property
    def has_body(self) -> bool:
        return self.body is not None


class SaveStatus(enum.Enum):
    SAVED = "saved"
    NOT_SAVED = "not_saved"


class UIMode(enum.Enum):
    BROWSING_SPACES = "browsing_spaces"
    BROWSING_PAGES = "browsing_pages"
    CONFIRM_SAVE = "confirm_save"
    COMPOSE_NEW_PAGE = "compose_new_page"
    CONFIRM_DELETE = "confirm_delete"
    SEARCH_ENTRY = "search_entry"
    SORT_PICKER = "sort_picker"
    COMPOSE_TITLE = "compose_title"

    @property
    def is_text_entry(self) -> bool:
        return self in TEXT_ENTRY_MODES

    @property
    def is_popup(self) -> bool:
        return self not in {UIMode.BROWSING_SPACES, UIMode.BROWSING_PAGES}


TEXT_ENTRY_MODES = frozenset({UIMode.COMPOSE_NEW_PAGE, UIMode.SEARCH_ENTRY, UIMode.COMPOSE_TITLE})
