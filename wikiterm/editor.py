"""Editor handoff: materialize a page, run the editor, read the result back.

The editor runs with the terminal suspended (raw mode and alternate screen
released) and control is retaken in a ``finally`` block, so a crashing editor
still leaves the TUI usable. The editor's exit status is ignored; there is no
dirty check.
"""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
from collections.abc import Callable
from contextlib import AbstractContextManager, nullcontext
from pathlib import Path

from .config import EditorSettings
from .convert import html_to_markdown, markdown_to_html
from .errors import EditorError
from .models import Page

logger = logging.getLogger(__name__)

DEFAULT_EDITOR = "vim"
VIM_ARGS: tuple[str, ...] = ("-c", "set columns=120", "-c", "set linebreak")
VIM_FAMILY = frozenset({"vim", "nvim"})


def editor_command(settings: EditorSettings, environ: dict[str, str] | None = None) -> list[str]:
    """Resolve the editor argv prefix: config, then ``$EDITOR``, then vim."""
    if settings.command:
        cmd = [settings.command, *settings.args]
    else:
        env = os.environ if environ is None else environ
        cmd = shlex.split(env.get("EDITOR", "").strip()) or [DEFAULT_EDITOR]
    if len(cmd) == 1 and Path(cmd[0]).name in VIM_FAMILY:
        cmd.extend(VIM_ARGS)
    return cmd


def page_file_path(save_location: Path, page_id: str) -> Path:
    return save_location / f"{page_id}.md"


def materialize_page(page: Page, save_location: Path, convert: Callable[[str], str] | None = None) -> Path:
    """Write the page body as markdown to ``<save_location>/<id>.md``."""
    markdown = (convert or html_to_markdown)(page.body or "")
    path = page_file_path(save_location, page.id)
    try:
        save_location.mkdir(parents=True, exist_ok=True)
        path.write_text(markdown, encoding="utf-8")
    except OSError as exc:
        raise EditorError(f"Could not write {path}: {exc}") from exc
    return path


def read_edited_content(path: Path, convert: Callable[[str], str] | None = None) -> str:
    try:
        markdown = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise EditorError(f"Could not read {path}: {exc}") from exc
    return (convert or markdown_to_html)(markdown)


def launch_editor(
    target: Path,
    command: list[str],
    suspend: Callable[[], AbstractContextManager] = nullcontext,
) -> int:
    """Block until the editor exits and return its exit status."""
    with suspend():
        try:
            completed = subprocess.run([*command, str(target)], check=False)
        except OSError as exc:
            raise EditorError(f"Failed to launch editor {command[0]!r}: {exc}") from exc
    if completed.returncode != 0:
        logger.info("editor exited with status %d for %s", completed.returncode, target)
    return completed.returncode


class EditorHandoff:
    """Materialize-and-edit bound to one terminal and one save location."""

    def __init__(
        self,
        save_location: Path,
        command: list[str],
        suspend: Callable[[], AbstractContextManager] = nullcontext,
    ) -> None:
        self.save_location = save_location
        self.command = command
        self.suspend = suspend

    def __call__(self, page: Page) -> Path:
        path = materialize_page(page, self.save_location)
        logger.info("editing page %s in %s", page.id, path)
        launch_editor(path, self.command, self.suspend)
        return path
