"""Store-backed workflows shared by the TUI and the non-interactive CLI."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from pathlib import Path

from .convert import html_to_markdown, markdown_to_html
from .editor import EditorHandoff, read_edited_content
from .errors import EditorError, PublishError, StoreError, UserCancelled
from .history import load_last_page_id, record_last_page_id
from .models import HasLabel, Page
from .store import DocumentStore

logger = logging.getLogger(__name__)

YES_ANSWERS = frozenset({"y", "yes"})


def publish_edit(store: DocumentStore, page_id: str, path: Path, history_path: Path) -> None:
    """Upload the edited file as the page's new content and remember the page."""
    content = read_edited_content(path)
    try:
        store.update_page(page_id, content)
    except StoreError as exc:
        raise PublishError(f"Page publishing failed: {exc}", path, exc.status_code) from exc
    record_last_page_id(history_path, page_id)


def resolve_page_id(page_id: str | None, last: bool, history_path: Path) -> str:
    if not last:
        if not page_id:
            raise UserCancelled("No page id given")
        return page_id
    recorded = load_last_page_id(history_path)
    if recorded is None:
        raise UserCancelled("No page has been edited yet")
    return recorded


def page_preview(store: DocumentStore, page_id: str, length: int) -> str:
    """Return the first ``length`` characters of the page as markdown."""
    page = store.get_page(page_id)
    return html_to_markdown(page.body or "")[: max(0, length)]


def edit_page_by_id(
    store: DocumentStore,
    page_id: str,
    handoff: EditorHandoff,
    history_path: Path,
    ask: Callable[[str], str] = input,
) -> None:
    """Fetch, edit, and on confirmation publish one page outside the TUI."""
    page = store.get_page(page_id)
    path = handoff(page)
    answer = ask("Do you wish to publish this page: y/n?  ")
    if answer.strip().lower() not in YES_ANSWERS:
        raise UserCancelled("Exited without syncing changes")
    publish_edit(store, page.id, path, history_path)


def purge_local_files(save_location: Path) -> int:
    """Delete materialized ``*.md`` copies and return how many were removed."""
    if not save_location.is_dir():
        return 0
    removed = 0
    for path in sorted(save_location.glob("*.md")):
        try:
            path.unlink()
        except OSError:
            logger.warning("could not delete %s", path, exc_info=True)
            continue
        removed += 1
    return removed


def format_id_list(items: Sequence[HasLabel]) -> list[str]:
    return [f"ID: {item.id}, Title: {item.label}" for item in items]


def create_page(
    store: DocumentStore,
    space_id: str,
    title: str,
    source: Path | None = None,
) -> Page:
    """Create a page, optionally seeded from a local markdown file."""
    content = ""
    if source is not None:
        try:
            markdown = source.expanduser().read_text(encoding="utf-8")
        except OSError as exc:
            raise EditorError(f"Could not read {source}: {exc}") from exc
        content = markdown_to_html(markdown)
    existing = [page for page in store.list_pages(space_id) if page.title == title]
    if existing:
        raise StoreError(f'A page with title "{title}" already exists in this space')
    page = store.create_page(space_id, title, content)
    logger.info("created page %s (%r) in space %s", page.id, title, space_id)
    return page
