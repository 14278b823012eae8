"""Session loop tests with a scripted key source and an in-memory terminal."""

from __future__ import annotations

import contextlib
import os
import unittest
from pathlib import Path
from unittest import mock

from wikiterm import loop
from wikiterm.errors import PublishError, StoreError
from wikiterm.models import Page, Space, UIMode
from wikiterm.state import SessionState
from wikiterm.update import SessionEffects


class _FakeTerminal:
    def __init__(self) -> None:
        self.stdin_fd = 0
        self.frames: list[str] = []
        self.needs_full_redraw = True
        self.entered = 0
        self.left = 0

    @contextlib.contextmanager
    def raw_mode(self):
        self.entered += 1
        try:
            yield self
        finally:
            self.left += 1

    def write(self, data: str) -> None:
        self.frames.append(data)


class _Store:
    def __init__(self) -> None:
        self.fail = False

    def list_spaces(self) -> list[Space]:
        return [Space("S1", "ENG", "Eng")]

    def list_pages(self, space_id: str) -> list[Page]:
        if self.fail:
            raise StoreError("Could not reach the document store: timed out")
        return [Page("11", "Roadmap", "S1", "2024-03-01T10:00:00.000Z", body="<p>x</p>")]


def _effects(store: _Store, publish=None) -> SessionEffects:
    return SessionEffects(
        store=store,
        open_editor=lambda page: Path(f"/tmp/{page.id}.md"),
        publish=publish or (lambda page_id, path: None),
    )


def _scripted(keys: list[str]):
    pending = list(keys)

    def read(fd: int) -> str:
        return pending.pop(0) if pending else ""

    return read


class HandleKeyTests(unittest.TestCase):
    def test_store_failure_lands_on_status_line(self) -> None:
        store = _Store()
        store.fail = True
        state = SessionState.initial(store.list_spaces())
        state.spaces.select(0)

        loop.handle_key(state, "ENTER", _effects(store))

        self.assertIs(state.mode, UIMode.BROWSING_SPACES)
        self.assertTrue(state.status_is_error)
        self.assertIn("timed out", state.status_message)

    def test_next_key_clears_status(self) -> None:
        store = _Store()
        state = SessionState.initial(store.list_spaces())
        state.status_message = "old"
        state.status_is_error = True
        loop.handle_key(state, "j", _effects(store))
        self.assertEqual(state.status_message, "")
        self.assertFalse(state.status_is_error)

    def test_unbound_key_keeps_status(self) -> None:
        store = _Store()
        state = SessionState.initial(store.list_spaces())
        state.status_message = "Page published"
        loop.handle_key(state, "z", _effects(store))
        self.assertEqual(state.status_message, "Page published")

    def test_publish_error_propagates(self) -> None:
        store = _Store()

        def publish(page_id: str, path: Path) -> None:
            raise PublishError("Page publishing failed", path, 500)

        state = SessionState.initial(store.list_spaces())
        state.spaces.select(0)
        effects = _effects(store, publish)
        loop.handle_key(state, "ENTER", effects)
        state.pages.select(0)
        loop.handle_key(state, "ENTER", effects)
        self.assertIs(state.mode, UIMode.CONFIRM_SAVE)

        with self.assertRaises(PublishError):
            loop.handle_key(state, "y", effects)


class RunSessionTests(unittest.TestCase):
    def _run(self, state: SessionState, keys: list[str], store: _Store) -> _FakeTerminal:
        terminal = _FakeTerminal()
        with mock.patch("wikiterm.loop.shutil.get_terminal_size", return_value=os.terminal_size((100, 24))):
            loop.run_session(state, terminal, _effects(store), read=_scripted(keys))
        return terminal

    def test_session_runs_until_exit_and_restores_terminal(self) -> None:
        store = _Store()
        state = SessionState.initial(store.list_spaces())
        terminal = self._run(state, ["j", "ENTER", "q"], store)

        self.assertTrue(state.exit_requested)
        self.assertIs(state.mode, UIMode.BROWSING_PAGES)
        self.assertEqual((terminal.entered, terminal.left), (1, 1))
        self.assertEqual(len(terminal.frames), 3)
        self.assertTrue(terminal.frames[0].startswith("\033[2J"))
        self.assertFalse(terminal.frames[1].startswith("\033[2J"))

    def test_end_of_input_leaves_session(self) -> None:
        store = _Store()
        state = SessionState.initial(store.list_spaces())
        terminal = self._run(state, [], store)

        self.assertFalse(state.exit_requested)
        self.assertEqual(terminal.left, 1)

    def test_paint_records_list_boxes_for_mouse(self) -> None:
        store = _Store()
        state = SessionState.initial(store.list_spaces())
        self._run(state, ["MOUSE_LEFT_DOWN:3:2", "q"], store)

        self.assertIn(UIMode.BROWSING_SPACES, state.list_boxes)
        self.assertEqual(state.spaces.index, 0)


if __name__ == "__main__":
    unittest.main()
