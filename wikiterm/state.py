"""The single session state threaded through the transition function."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from .list_cursor import ListCursor
from .models import Page, SaveStatus, Space, UIMode
from .search import SearchModel
from .sorting import SORT_KEYS, SortKey, SortModel
from .text_field import TextField


@dataclass(frozen=True)
class ListBox:
    """Screen rectangle holding one list's item rows (zero-based cells)."""

    x: int
    y: int
    width: int
    height: int

    def contains(self, col: int, row: int) -> bool:
        return self.x <= col < self.x + self.width and self.y <= row < self.y + self.height


@dataclass(frozen=True)
class PendingEdit:
    page_id: str
    path: Path


@dataclass
class SessionState:
    spaces: ListCursor[Space]
    pages: ListCursor[Page] = field(default_factory=ListCursor)
    mode: UIMode = UIMode.BROWSING_SPACES
    current_space: Space | None = None
    save_status: dict[str, SaveStatus] = field(default_factory=dict)
    input: TextField = field(default_factory=TextField)
    sort: SortModel = field(default_factory=SortModel)
    sort_options: ListCursor[SortKey] = field(default_factory=lambda: ListCursor(SORT_KEYS))
    search: SearchModel = field(default_factory=SearchModel)
    pending_edit: PendingEdit | None = None
    show_preview: bool = True
    show_help: bool = False
    exit_requested: bool = False
    status_message: str = ""
    status_is_error: bool = False
    list_boxes: dict[UIMode, ListBox] = field(default_factory=dict)

    @classmethod
    def initial(cls, spaces: list[Space]) -> SessionState:
        return cls(spaces=ListCursor(spaces))

    def active_list(self) -> ListCursor | None:
        """List that navigation messages move in the current mode."""
        if self.mode is UIMode.BROWSING_SPACES:
            return self.spaces
        if self.mode is UIMode.BROWSING_PAGES:
            return self.pages
        if self.mode is UIMode.SORT_PICKER:
            return self.sort_options
        return None

    def selected_space(self) -> Space | None:
        return self.spaces.selected()

    def selected_page(self) -> Page | None:
        return self.pages.selected()
