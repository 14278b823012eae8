"""Transition function: (session state, message) -> chained message.

``update`` mutates the state in place and may return one follow-up message
that the session loop feeds straight back in before the next render. Every
store or editor call runs before any local field changes, so an exception
leaves the step's own state untouched and aborts the chain; mode changes
committed by earlier steps in the chain stay.

Messages that arrive outside the mode where they make sense are no-ops.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from .errors import PublishError, WikitermError
from .messages import Message, MouseSelect, Msg, Save, TypeChar
from .models import Page, SaveStatus, UIMode
from .search import filter_by_title
from .state import PendingEdit, SessionState
from .store import DocumentStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionEffects:
    """Side-effecting collaborators the transitions are allowed to call."""

    store: DocumentStore
    open_editor: Callable[[Page], Path]
    publish: Callable[[str, Path], None]


Handler = Callable[[SessionState, SessionEffects], "Message | None"]


def update(state: SessionState, message: Message, effects: SessionEffects) -> Message | None:
    """Apply one message and return the chained message, if any."""
    if isinstance(message, MouseSelect):
        # Clicks only reach the list of the current browsing mode; the other pane is display only.
        _mouse_select(state, message)
        return None
    if isinstance(message, TypeChar):
        if state.mode.is_text_entry:
            state.input.type_char(message.char)
        return None
    if isinstance(message, Save):
        return _save(state, message, effects)
    handler = _HANDLERS.get(message)
    if handler is None:
        return None
    return handler(state, effects)


def dispatch(state: SessionState, message: Message | None, effects: SessionEffects) -> None:
    """Run ``message`` and every message it chains."""
    while message is not None:
        logger.debug("mode=%s message=%s", state.mode.value, message)
        message = update(state, message, effects)


# navigation


def _list_next(state: SessionState, effects: SessionEffects) -> None:
    cursor = state.active_list()
    if cursor is not None:
        cursor.next()


def _list_previous(state: SessionState, effects: SessionEffects) -> None:
    cursor = state.active_list()
    if cursor is not None:
        cursor.previous()


def _select(state: SessionState, effects: SessionEffects) -> Message | None:
    if state.mode is UIMode.BROWSING_SPACES:
        space = state.selected_space()
        if space is None:
            return None
        pages = effects.store.list_pages(space.id)
        state.current_space = space
        state.search.clear()
        state.sort.reset_default()
        state.pages.set_items(state.sort.apply(pages))
        state.pages.reset()
        state.mode = UIMode.BROWSING_PAGES
        return None
    if state.mode is UIMode.BROWSING_PAGES:
        page = state.selected_page()
        if page is None:
            return None
        state.save_status.pop(page.id, None)
        return Msg.OPEN_EDITOR
    return None


def _back(state: SessionState, effects: SessionEffects) -> None:
    if state.mode is UIMode.BROWSING_PAGES:
        state.pages.clear_items()
        state.current_space = None
        state.search.clear()
        state.mode = UIMode.BROWSING_SPACES
    elif state.mode is UIMode.BROWSING_SPACES:
        state.spaces.clear_selection()


def _mouse_select(state: SessionState, message: MouseSelect) -> None:
    if state.mode not in {UIMode.BROWSING_SPACES, UIMode.BROWSING_PAGES}:
        return
    cursor = state.active_list()
    if cursor is None:
        return
    box = state.list_boxes.get(state.mode)
    if box is None or not box.contains(message.x, message.y):
        cursor.clear_selection()
        return
    cursor.select(cursor.offset + (message.y - box.y))


# lifecycle


def _exit(state: SessionState, effects: SessionEffects) -> None:
    state.exit_requested = True


def _refresh(state: SessionState, effects: SessionEffects) -> None:
    if state.mode is UIMode.BROWSING_SPACES:
        spaces = effects.store.list_spaces()
        state.spaces.set_items(spaces)
        state.spaces.reset()
        return
    if state.current_space is None:
        return
    pages = effects.store.list_pages(state.current_space.id)
    state.pages.set_items(state.sort.apply(state.search.apply(pages)))
    state.pages.reset()


# editing


def _open_editor(state: SessionState, effects: SessionEffects) -> None:
    if state.mode is not UIMode.BROWSING_PAGES:
        return
    page = state.selected_page()
    if page is None:
        return
    if not page.has_body:
        page = effects.store.get_page(page.id)
    path = effects.open_editor(page)
    state.pending_edit = PendingEdit(page_id=page.id, path=path)
    state.mode = UIMode.CONFIRM_SAVE


def _confirm_save(state: SessionState, effects: SessionEffects) -> Message | None:
    pending = state.pending_edit
    if state.mode is not UIMode.CONFIRM_SAVE or pending is None:
        return None
    state.pending_edit = None
    state.save_status[pending.page_id] = SaveStatus.SAVED
    state.mode = UIMode.BROWSING_PAGES
    return Save(page_id=pending.page_id, path=pending.path)


def _reject_save(state: SessionState, effects: SessionEffects) -> None:
    pending = state.pending_edit
    if state.mode is not UIMode.CONFIRM_SAVE or pending is None:
        return
    state.pending_edit = None
    state.save_status[pending.page_id] = SaveStatus.NOT_SAVED
    state.mode = UIMode.BROWSING_PAGES
    state.status_message = "Changes not published"


def _save(state: SessionState, message: Save, effects: SessionEffects) -> Message | None:
    try:
        effects.publish(message.page_id, message.path)
    except PublishError:
        raise
    except WikitermError as exc:
        raise PublishError(
            f"Publishing page {message.page_id} failed: {exc}",
            message.path,
            getattr(exc, "status_code", None),
        ) from exc
    logger.info("published page %s from %s", message.page_id, message.path)
    state.status_message = "Page published"
    return Msg.REFRESH


# page management


def _new_page(state: SessionState, effects: SessionEffects) -> None:
    if state.mode is not UIMode.BROWSING_PAGES or state.current_space is None:
        return
    state.input.clear()
    state.mode = UIMode.COMPOSE_NEW_PAGE


def _save_new_page(state: SessionState, effects: SessionEffects) -> Message | None:
    if state.mode is not UIMode.COMPOSE_NEW_PAGE or state.current_space is None:
        return None
    title = state.input.text.strip()
    if not title:
        state.status_message = "A page title is required"
        return None
    effects.store.create_page(state.current_space.id, title)
    state.input.clear()
    state.mode = UIMode.BROWSING_PAGES
    state.status_message = f"Created {title!r}"
    return Msg.REFRESH


def _cancel_new_page(state: SessionState, effects: SessionEffects) -> None:
    if state.mode is not UIMode.COMPOSE_NEW_PAGE:
        return
    state.input.clear()
    state.mode = UIMode.BROWSING_PAGES


def _delete_page(state: SessionState, effects: SessionEffects) -> None:
    if state.mode is UIMode.BROWSING_PAGES and state.selected_page() is not None:
        state.mode = UIMode.CONFIRM_DELETE


def _confirm_delete_page(state: SessionState, effects: SessionEffects) -> Message | None:
    page = state.selected_page()
    if state.mode is not UIMode.CONFIRM_DELETE or page is None:
        return None
    effects.store.delete_page(page.id)
    state.save_status.pop(page.id, None)
    state.mode = UIMode.BROWSING_PAGES
    state.status_message = f"Deleted {page.title!r}"
    return Msg.REFRESH


def _cancel_delete_page(state: SessionState, effects: SessionEffects) -> None:
    if state.mode is UIMode.CONFIRM_DELETE:
        state.mode = UIMode.BROWSING_PAGES


def _update_title(state: SessionState, effects: SessionEffects) -> None:
    page = state.selected_page()
    if state.mode is not UIMode.BROWSING_PAGES or page is None:
        return
    state.input.set_text(page.title)
    state.mode = UIMode.COMPOSE_TITLE


def _confirm_title(state: SessionState, effects: SessionEffects) -> Message | None:
    page = state.selected_page()
    if state.mode is not UIMode.COMPOSE_TITLE or page is None:
        return None
    title = state.input.text.strip()
    if not title:
        state.status_message = "A page title is required"
        return None
    effects.store.update_title(page.id, title)
    state.input.clear()
    state.mode = UIMode.BROWSING_PAGES
    return Msg.REFRESH


def _cancel_title(state: SessionState, effects: SessionEffects) -> None:
    if state.mode is not UIMode.COMPOSE_TITLE:
        return
    state.input.clear()
    state.mode = UIMode.BROWSING_PAGES


# text entry


def _backspace(state: SessionState, effects: SessionEffects) -> None:
    if state.mode.is_text_entry:
        state.input.backspace()


def _cursor_left(state: SessionState, effects: SessionEffects) -> None:
    if state.mode.is_text_entry:
        state.input.cursor_left()


def _cursor_right(state: SessionState, effects: SessionEffects) -> None:
    if state.mode.is_text_entry:
        state.input.cursor_right()


# search


def _start_search(state: SessionState, effects: SessionEffects) -> None:
    if state.mode is not UIMode.BROWSING_PAGES:
        return
    state.input.set_text(state.search.query)
    state.mode = UIMode.SEARCH_ENTRY


def _confirm_search(state: SessionState, effects: SessionEffects) -> None:
    if state.mode is not UIMode.SEARCH_ENTRY or state.current_space is None:
        return
    query = state.input.text
    if state.search.active:
        source = effects.store.list_pages(state.current_space.id)
    else:
        source = state.pages.items
    if query:
        state.search.activate(query)
        matches = filter_by_title(source, query)
    else:
        state.search.clear()
        matches = list(source)
    state.pages.set_items(state.sort.apply(matches))
    state.pages.reset()
    state.input.clear()
    state.mode = UIMode.BROWSING_PAGES


def _cancel_search(state: SessionState, effects: SessionEffects) -> None:
    if state.mode is not UIMode.SEARCH_ENTRY:
        return
    if not state.search.active:
        state.search.query = ""
    state.input.clear()
    state.mode = UIMode.BROWSING_PAGES


# sort


def _start_sort(state: SessionState, effects: SessionEffects) -> None:
    if state.mode is not UIMode.BROWSING_PAGES:
        return
    state.sort.snapshot()
    state.sort_options.select(state.sort_options.items.index(state.sort.key))
    state.mode = UIMode.SORT_PICKER


def _confirm_sort(state: SessionState, effects: SessionEffects) -> None:
    if state.mode is not UIMode.SORT_PICKER:
        return
    key = state.sort_options.selected()
    if key is not None:
        state.sort.key = key
    state.sort.snapshot()
    state.pages.set_items(state.sort.apply(state.pages.items))
    state.pages.reset()
    state.mode = UIMode.BROWSING_PAGES


def _cancel_sort(state: SessionState, effects: SessionEffects) -> None:
    if state.mode is not UIMode.SORT_PICKER:
        return
    state.sort.restore()
    state.mode = UIMode.BROWSING_PAGES


def _toggle_sort_dir(state: SessionState, effects: SessionEffects) -> None:
    if state.mode is UIMode.SORT_PICKER:
        state.sort.toggle_direction()


# display


def _toggle_preview(state: SessionState, effects: SessionEffects) -> None:
    state.show_preview = not state.show_preview


def _toggle_help(state: SessionState, effects: SessionEffects) -> None:
    state.show_help = not state.show_help


_HANDLERS: dict[Msg, Handler] = {
    Msg.LIST_NEXT: _list_next,
    Msg.LIST_PREVIOUS: _list_previous,
    Msg.SELECT: _select,
    Msg.BACK: _back,
    Msg.EXIT: _exit,
    Msg.REFRESH: _refresh,
    Msg.OPEN_EDITOR: _open_editor,
    Msg.CONFIRM_SAVE: _confirm_save,
    Msg.REJECT_SAVE: _reject_save,
    Msg.NEW_PAGE: _new_page,
    Msg.SAVE_NEW_PAGE: _save_new_page,
    Msg.CANCEL_NEW_PAGE: _cancel_new_page,
    Msg.DELETE_PAGE: _delete_page,
    Msg.CONFIRM_DELETE_PAGE: _confirm_delete_page,
    Msg.CANCEL_DELETE_PAGE: _cancel_delete_page,
    Msg.UPDATE_TITLE: _update_title,
    Msg.CONFIRM_TITLE: _confirm_title,
    Msg.CANCEL_TITLE: _cancel_title,
    Msg.BACKSPACE: _backspace,
    Msg.CURSOR_LEFT: _cursor_left,
    Msg.CURSOR_RIGHT: _cursor_right,
    Msg.START_SEARCH: _start_search,
    Msg.CONFIRM_SEARCH: _confirm_search,
    Msg.CANCEL_SEARCH: _cancel_search,
    Msg.START_SORT: _start_sort,
    Msg.CONFIRM_SORT: _confirm_sort,
    Msg.CANCEL_SORT: _cancel_sort,
    Msg.TOGGLE_SORT_DIR: _toggle_sort_dir,
    Msg.TOGGLE_PREVIEW: _toggle_preview,
    Msg.TOGGLE_HELP: _toggle_help,
}
