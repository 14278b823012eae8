"""Wiring for the interactive session: store, editor handoff, terminal, loop."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

from .actions import publish_edit
from .config import Settings
from .editor import EditorHandoff, editor_command
from .loop import run_session
from .state import SessionState
from .store import ConfluenceStore
from .terminal import TerminalController
from .ui_theme import available_theme_names, resolve_theme
from .update import SessionEffects

logger = logging.getLogger(__name__)


def open_store(settings: Settings) -> ConfluenceStore:
    return ConfluenceStore(settings.api.domain, settings.api.username, settings.api.token)


def run_view(settings: Settings) -> None:
    """Fetch the space list and run the interactive session until exit."""
    with open_store(settings) as store:
        spaces = store.list_spaces()
        logger.info("loaded %d spaces", len(spaces))
        terminal = TerminalController(sys.stdin.fileno(), sys.stdout.fileno())
        handoff = EditorHandoff(
            settings.save_location,
            editor_command(settings.editor),
            suspend=terminal.suspended,
        )

        def publish(page_id: str, path: Path) -> None:
            publish_edit(store, page_id, path, settings.history_location)

        effects = SessionEffects(store=store, open_editor=handoff, publish=publish)
        if settings.theme and settings.theme.lower() not in available_theme_names():
            logger.warning("unknown theme %r, using the default", settings.theme)
        state = SessionState.initial(spaces)
        run_session(state, terminal, effects, theme=resolve_theme(settings.theme))
