"""Session loop: render, read one key, translate, dispatch, repeat.

Single-threaded and blocking: each iteration waits for exactly one key (or
for the editor launched by a transition) before doing anything else.
"""

from __future__ import annotations

import logging
import shutil
from collections.abc import Callable

from .errors import PublishError, WikitermError
from .input import read_key
from .keymap import translate_key
from .render import compute_layout, render_frame
from .state import SessionState
from .terminal import TerminalController
from .ui_theme import DEFAULT_THEME, UITheme
from .update import SessionEffects, dispatch

logger = logging.getLogger(__name__)


def _paint(state: SessionState, terminal: TerminalController, theme: UITheme) -> None:
    term = shutil.get_terminal_size((80, 24))
    layout = compute_layout(term.columns, term.lines, state)
    state.spaces.scroll_into_view(layout.spaces.inner.height)
    state.pages.scroll_into_view(layout.pages.inner.height)
    state.list_boxes = layout.list_boxes()
    terminal.write(render_frame(state, layout, theme, full_redraw=terminal.needs_full_redraw))
    terminal.needs_full_redraw = False


def handle_key(state: SessionState, key: str, effects: SessionEffects) -> None:
    """Translate one key and run its message chain.

    Recoverable failures end the chain and land on the status line;
    ``PublishError`` propagates because the edit never reached the store.
    """
    message = translate_key(key, state.mode)
    if message is None:
        return
    state.status_message = ""
    state.status_is_error = False
    try:
        dispatch(state, message, effects)
    except PublishError:
        logger.error("publish failed", exc_info=True)
        raise
    except WikitermError as exc:
        logger.warning("transition aborted in mode %s: %s", state.mode.value, exc)
        state.status_message = str(exc)
        state.status_is_error = True


def run_session(
    state: SessionState,
    terminal: TerminalController,
    effects: SessionEffects,
    *,
    theme: UITheme = DEFAULT_THEME,
    read: Callable[[int], str] = read_key,
) -> None:
    """Drive the session until ``state.exit_requested`` or end of input."""
    with terminal.raw_mode():
        while not state.exit_requested:
            _paint(state, terminal, theme)
            key = read(terminal.stdin_fd)
            if not key:
                logger.info("input closed, leaving session")
                return
            handle_key(state, key, effects)
