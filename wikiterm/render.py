"""Frame rendering: a pure projection of ``SessionState`` onto the terminal.

``compute_layout`` decides where each pane sits; ``render_frame`` turns state
plus layout into one escape-sequence string. Neither touches the state, so
the loop owns scroll clamping and stores the list boxes for mouse hits.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, replace
from typing import Any

from .ansi import clip_ansi_line, display_width, fit_ansi_line
from .list_cursor import ListCursor
from .highlight import highlight_storage_html
from .models import Page, SaveStatus, UIMode
from .sorting import SORT_KEYS
from .state import ListBox, SessionState
from .text_field import TextField
from .ui_theme import PLAIN_THEME, UITheme

MIN_PANE_WIDTH = 12

HELP_LINES: dict[UIMode, tuple[tuple[str, str], ...]] = {
    UIMode.BROWSING_SPACES: (
        ("j/k Up/Down", "move"),
        ("Enter/l", "open space"),
        ("h/Esc", "clear selection"),
        ("r", "refresh"),
        ("p", "preview"),
        ("q", "quit"),
    ),
    UIMode.BROWSING_PAGES: (
        ("j/k Up/Down", "move"),
        ("Enter/l", "edit page"),
        ("h/Esc", "back to spaces"),
        ("n", "new page"),
        ("t", "rename"),
        ("d", "delete"),
        ("/", "search titles"),
        ("s", "sort"),
        ("r", "refresh"),
        ("p", "preview"),
        ("q", "quit"),
    ),
    UIMode.CONFIRM_SAVE: (("y/Enter", "publish"), ("n/Esc", "discard")),
    UIMode.CONFIRM_DELETE: (("y/Enter", "delete"), ("n/Esc", "keep")),
    UIMode.SORT_PICKER: (("j/k", "choose key"), ("Tab/Space", "flip direction"), ("Enter", "apply"), ("Esc", "cancel")),
    UIMode.COMPOSE_NEW_PAGE: (("Enter", "create"), ("Esc", "cancel"), ("Left/Right", "move cursor")),
    UIMode.SEARCH_ENTRY: (("Enter", "filter"), ("Esc", "cancel"), ("Left/Right", "move cursor")),
    UIMode.COMPOSE_TITLE: (("Enter", "rename"), ("Esc", "cancel"), ("Left/Right", "move cursor")),
}


@dataclass(frozen=True)
class Rect:
    x: int
    y: int
    width: int
    height: int

    @property
    def inner(self) -> Rect:
        return Rect(self.x + 1, self.y + 1, max(0, self.width - 2), max(0, self.height - 2))


@dataclass(frozen=True)
class Layout:
    width: int
    height: int
    spaces: Rect
    pages: Rect
    preview: Rect | None
    help_rows: int
    status_row: int

    def list_boxes(self) -> dict[UIMode, ListBox]:
        boxes: dict[UIMode, ListBox] = {}
        for mode, rect in ((UIMode.BROWSING_SPACES, self.spaces), (UIMode.BROWSING_PAGES, self.pages)):
            inner = rect.inner
            boxes[mode] = ListBox(inner.x, inner.y, inner.width, inner.height)
        return boxes


def help_row_count(state: SessionState, height: int) -> int:
    if not state.show_help or height < 8:
        return 0
    return min(2, height - 6)


def compute_layout(width: int, height: int, state: SessionState) -> Layout:
    width = max(3 * MIN_PANE_WIDTH, width)
    height = max(4, height)
    help_rows = help_row_count(state, height)
    pane_height = max(3, height - 1 - help_rows)
    if state.show_preview:
        spaces_w = max(MIN_PANE_WIDTH, width * 20 // 100)
        pages_w = max(MIN_PANE_WIDTH, width * 30 // 100)
        preview_w = width - spaces_w - pages_w
        preview = Rect(spaces_w + pages_w, 0, preview_w, pane_height)
    else:
        spaces_w = max(MIN_PANE_WIDTH, width * 30 // 100)
        pages_w = width - spaces_w
        preview = None
    return Layout(
        width=width,
        height=height,
        spaces=Rect(0, 0, spaces_w, pane_height),
        pages=Rect(spaces_w, 0, pages_w, pane_height),
        preview=preview,
        help_rows=help_rows,
        status_row=height - 1,
    )


def _boxed(title: str, body: Sequence[str], rect: Rect, theme: UITheme, active: bool) -> list[str]:
    """Draw ``body`` inside a single-line border, one string per screen row."""
    inner_w = max(0, rect.width - 2)
    border = theme.border_active if active else theme.border
    label = clip_ansi_line(f" {title} ", max(0, inner_w - 1)) if title else ""
    fill = max(0, inner_w - 1 - display_width(label))
    rows = [f"{border}┌─{theme.reset}{theme.title}{label}{theme.reset}{border}{'─' * fill}┐{theme.reset}"]
    for idx in range(max(0, rect.height - 2)):
        text = body[idx] if idx < len(body) else ""
        rows.append(f"{border}│{theme.reset}{fit_ansi_line(text, inner_w)}{border}│{theme.reset}")
    rows.append(f"{border}└{'─' * inner_w}┘{theme.reset}")
    return rows[: rect.height]


def _badge(page: Page, save_status: dict[str, SaveStatus], theme: UITheme) -> str:
    status = save_status.get(page.id)
    if status is SaveStatus.SAVED:
        return f"{theme.saved_badge}✓{theme.reset} "
    if status is SaveStatus.NOT_SAVED:
        return f"{theme.not_saved_badge}✗{theme.reset} "
    return "  "


def _selected_row(text: str, width: int, theme: UITheme) -> str:
    """Highlight a whole row, keeping the highlight alive across inner resets."""
    body = fit_ansi_line(text, width)
    if theme.selected:
        body = body.replace("\033[0m", f"\033[0m{theme.selected}")
    return f"{theme.selected}{body}\033[0m"


def _list_rows(
    cursor: ListCursor,
    rows: int,
    width: int,
    theme: UITheme,
    prefix: Callable[[Any], str] | None = None,
) -> list[str]:
    out: list[str] = []
    items = cursor.items
    for idx in range(cursor.offset, min(len(items), cursor.offset + rows)):
        item = items[idx]
        text = f"{prefix(item) if prefix is not None else ''}{item.label}"
        out.append(_selected_row(text, width, theme) if idx == cursor.index else text)
    return out


def _preview_body(state: SessionState, rect: Rect, theme: UITheme) -> tuple[str, list[str]]:
    color = theme is not PLAIN_THEME
    if state.mode is UIMode.BROWSING_SPACES or state.current_space is None:
        space = state.selected_space()
        if space is None:
            return "Preview", [f"{theme.dim}Select a space{theme.reset}"]
        return space.name, [f"Key: {space.key}", f"ID:  {space.id}"]
    page = state.selected_page()
    if page is None:
        return "Preview", [f"{theme.dim}Select a page{theme.reset}"]
    lines = [f"ID:      {page.id}", f"Created: {page.created_at or '-'}", ""]
    if page.body is None:
        lines.append(f"{theme.dim}(body not loaded){theme.reset}")
    else:
        lines.extend(highlight_storage_html(page.body, color)[: max(0, rect.height - 5)])
    return page.title, lines


def _input_line(field: TextField, width: int, theme: UITheme) -> str:
    """Render the field with a reverse-video cursor, scrolled to keep it visible."""
    text = field.text
    cursor = field.cursor
    width = max(1, width)
    start = max(0, cursor - width + 1)
    visible = text[start : start + width]
    at = cursor - start
    under = visible[at] if at < len(visible) else " "
    return f"{theme.input_text}{visible[:at]}\033[7m{under}\033[27m{visible[at + 1:]}{theme.reset}"


def _popup_content(state: SessionState, theme: UITheme, inner_w: int) -> tuple[str, list[str]] | None:
    mode = state.mode
    page = state.selected_page()
    if mode is UIMode.CONFIRM_SAVE:
        title = page.title if page is not None else "this page"
        if state.pending_edit is not None:
            for candidate in state.pages:
                if candidate.id == state.pending_edit.page_id:
                    title = candidate.title
        return "Publish", [f"Publish changes to {title!r}?", "", f"{theme.help_key}y{theme.reset} publish   {theme.help_key}n{theme.reset} discard"]
    if mode is UIMode.CONFIRM_DELETE:
        title = page.title if page is not None else "this page"
        return "Delete", [f"Delete {title!r}?", "", f"{theme.help_key}y{theme.reset} delete   {theme.help_key}n{theme.reset} keep"]
    if mode is UIMode.COMPOSE_NEW_PAGE:
        space = state.current_space.name if state.current_space is not None else ""
        return f"New page in {space}", ["Title:", _input_line(state.input, inner_w, theme)]
    if mode is UIMode.COMPOSE_TITLE:
        return "Rename page", ["New title:", _input_line(state.input, inner_w, theme)]
    if mode is UIMode.SEARCH_ENTRY:
        return "Search titles", ["Query:", _input_line(state.input, inner_w, theme)]
    if mode is UIMode.SORT_PICKER:
        lines = []
        for idx, key in enumerate(SORT_KEYS):
            marker = "●" if key is state.sort.saved_key else " "
            text = f" {marker} {key.label}"
            if idx == state.sort_options.index:
                text = f"{theme.selected}{fit_ansi_line(text, inner_w)}{theme.reset}"
            lines.append(text)
        lines.extend(["", f"Direction: {state.sort.direction.value} {state.sort.direction.arrow}"])
        return "Sort pages", lines
    return None


def _popup_overlay(state: SessionState, layout: Layout, theme: UITheme) -> str:
    popup_w = min(60, max(24, layout.width - 8))
    inner_w = popup_w - 4
    content = _popup_content(state, theme, inner_w)
    if content is None:
        return ""
    title, lines = content
    popup_h = len(lines) + 4
    rect = Rect(max(0, (layout.width - popup_w) // 2), max(0, (layout.status_row - popup_h) // 2), popup_w, popup_h)
    padded = ["", *(f" {line}" for line in lines), ""]
    popup_theme = replace(theme, border_active=theme.popup_border, title=theme.popup_title)
    rows = _boxed(title, padded, rect, popup_theme, active=True)
    return "".join(f"\033[{rect.y + i + 1};{rect.x + 1}H{row}" for i, row in enumerate(rows))


def _help_rows(state: SessionState, layout: Layout, theme: UITheme) -> list[str]:
    if layout.help_rows <= 0:
        return []
    entries = [f"{theme.help_key}{keys}{theme.reset} {what}" for keys, what in HELP_LINES[state.mode]]
    rows: list[str] = []
    current = ""
    for entry in entries:
        candidate = f"{current}  {entry}" if current else entry
        if current and display_width(candidate) > layout.width - 1:
            rows.append(current)
            current = entry
        else:
            current = candidate
    rows.append(current)
    return [fit_ansi_line(row, layout.width) for row in rows[: layout.help_rows]] + [""] * max(0, layout.help_rows - len(rows))


def build_status_line(left_text: str, width: int, right_text: str = "│ ? Help") -> str:
    usable = max(1, width - 1)
    if usable <= len(right_text):
        return right_text[-usable:]
    left_limit = max(0, usable - len(right_text) - 1)
    left = left_text[:left_limit]
    gap = " " * (usable - len(left) - len(right_text))
    return f"{left}{gap}{right_text}"


def _status_text(state: SessionState) -> str:
    if state.status_message:
        return state.status_message
    if state.current_space is None:
        return f"{len(state.spaces)} spaces"
    text = f"{state.current_space.name}: {len(state.pages)} pages, sorted by {state.sort.key.label} {state.sort.direction.arrow}"
    if state.search.active:
        text += f", title contains {state.search.query!r}"
    return text


def render_frame(state: SessionState, layout: Layout, theme: UITheme, *, full_redraw: bool = False) -> str:
    """Return the complete escape-sequence payload for one frame."""
    browsing_pages = state.current_space is not None
    spaces_rows = _list_rows(state.spaces, layout.spaces.inner.height, layout.spaces.inner.width, theme)
    pages_title = f"Pages in {state.current_space.name}" if state.current_space is not None else "Pages"
    if browsing_pages and not state.pages:
        pages_rows = [f"{theme.dim}(no pages){theme.reset}"]
    else:
        pages_rows = _list_rows(
            state.pages,
            layout.pages.inner.height,
            layout.pages.inner.width,
            theme,
            prefix=lambda page: _badge(page, state.save_status, theme),
        )
    columns = [
        _boxed("Spaces", spaces_rows, layout.spaces, theme, active=not browsing_pages),
        _boxed(pages_title, pages_rows, layout.pages, theme, active=browsing_pages),
    ]
    if layout.preview is not None:
        preview_title, preview_lines = _preview_body(state, layout.preview, theme)
        columns.append(_boxed(preview_title, preview_lines, layout.preview, theme, active=False))

    out: list[str] = ["\033[2J\033[H" if full_redraw else "\033[H"]
    pane_height = layout.spaces.height
    for row in range(pane_height):
        out.append(f"\033[{row + 1};1H")
        out.append("".join(column[row] if row < len(column) else "" for column in columns))
    for idx, help_row in enumerate(_help_rows(state, layout, theme)):
        out.append(f"\033[{pane_height + idx + 1};1H{help_row}")
    status_style = theme.status_error if state.status_is_error else theme.status
    status = build_status_line(_status_text(state), layout.width)
    out.append(f"\033[{layout.status_row + 1};1H{status_style}{status}{theme.reset}\033[K")
    if state.mode.is_popup:
        out.append(_popup_overlay(state, layout, theme))
    return "".join(out)
