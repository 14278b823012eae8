"""Message vocabulary consumed by the transition function.

Payload-free messages are ``Msg`` members; the few that carry data are small
frozen dataclasses. ``Message`` is the union of both.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from pathlib import Path
from typing import Union


class Msg(enum.Enum):
    # navigation
    LIST_NEXT = "list_next"
    LIST_PREVIOUS = "list_previous"
    SELECT = "select"
    BACK = "back"
    # lifecycle
    EXIT = "exit"
    REFRESH = "refresh"
    # editing
    OPEN_EDITOR = "open_editor"
    CONFIRM_SAVE = "confirm_save"
    REJECT_SAVE = "reject_save"
    # page management
    NEW_PAGE = "new_page"
    SAVE_NEW_PAGE = "save_new_page"
    CANCEL_NEW_PAGE = "cancel_new_page"
    DELETE_PAGE = "delete_page"
    CONFIRM_DELETE_PAGE = "confirm_delete_page"
    CANCEL_DELETE_PAGE = "cancel_delete_page"
    UPDATE_TITLE = "update_title"
    CONFIRM_TITLE = "confirm_title"
    CANCEL_TITLE = "cancel_title"
    # text entry
    BACKSPACE = "backspace"
    CURSOR_LEFT = "cursor_left"
    CURSOR_RIGHT = "cursor_right"
    # search
    START_SEARCH = "start_search"
    CONFIRM_SEARCH = "confirm_search"
    CANCEL_SEARCH = "cancel_search"
    # sort
    START_SORT = "start_sort"
    CONFIRM_SORT = "confirm_sort"
    CANCEL_SORT = "cancel_sort"
    TOGGLE_SORT_DIR = "toggle_sort_dir"
    # display
    TOGGLE_PREVIEW = "toggle_preview"
    TOGGLE_HELP = "toggle_help"


@dataclass(frozen=True)
class MouseSelect:
    """Left click at zero-based terminal cell ``(x, y)``."""

    x: int
    y: int


@dataclass(frozen=True)
class TypeChar:
    char: str


@dataclass(frozen=True)
class Save:
    """Upload the file at ``path`` as the new content of ``page_id``."""

    page_id: str
    path: Path


Message = Union[Msg, MouseSelect, TypeChar, Save]
