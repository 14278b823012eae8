"""Tests for terminal mode transitions around the session and the editor.

Verifies raw-mode lifecycle safety and the suspend/resume contract that
hands the terminal to an external editor.
"""

from __future__ import annotations

import termios
import unittest
from unittest import mock

from wikiterm.terminal import TerminalController


def _controller() -> TerminalController:
    with mock.patch("wikiterm.terminal.termios.tcgetattr", return_value=[0]):
        return TerminalController(stdin_fd=0, stdout_fd=1)


class TerminalBehaviorTests(unittest.TestCase):
    def test_enable_and_disable_tui_mode_use_alternate_screen_sequences(self) -> None:
        saved_state = [1, 2, 3]

        with mock.patch("wikiterm.terminal.termios.tcgetattr", return_value=saved_state), mock.patch(
            "wikiterm.terminal.tty.setraw"
        ) as setraw_mock, mock.patch("wikiterm.terminal.os.write") as write_mock, mock.patch(
            "wikiterm.terminal.termios.tcsetattr"
        ) as setattr_mock:
            controller = TerminalController(stdin_fd=0, stdout_fd=1)
            controller.enable_tui_mode()
            self.assertTrue(controller.active)
            controller.disable_tui_mode()

        self.assertFalse(controller.active)
        setraw_mock.assert_called_once_with(0, termios.TCSAFLUSH)
        self.assertEqual(write_mock.call_args_list[0].args, (1, b"\x1b[?1049h\x1b[?25l\x1b[?1000h\x1b[?1006h"))
        self.assertEqual(write_mock.call_args_list[1].args, (1, b"\x1b[?1000l\x1b[?1006l\x1b[?25h\x1b[?1049l"))
        setattr_mock.assert_called_once_with(0, termios.TCSAFLUSH, saved_state)

    def test_raw_mode_restores_terminal_after_exception(self) -> None:
        controller = _controller()

        with mock.patch.object(controller, "enable_tui_mode") as enable_mock, mock.patch.object(
            controller, "disable_tui_mode"
        ) as disable_mock:
            with self.assertRaises(RuntimeError):
                with controller.raw_mode():
                    raise RuntimeError("boom")

        enable_mock.assert_called_once()
        disable_mock.assert_called_once()


class SuspendTests(unittest.TestCase):
    def test_suspended_restores_tui_even_when_child_fails(self) -> None:
        controller = _controller()
        controller.active = True
        calls: list[str] = []

        def disable() -> None:
            calls.append("disable")
            controller.active = False

        def enable() -> None:
            calls.append("enable")
            controller.active = True

        with mock.patch.object(controller, "disable_tui_mode", side_effect=disable), mock.patch.object(
            controller, "enable_tui_mode", side_effect=enable
        ):
            with self.assertRaises(OSError):
                with controller.suspended():
                    calls.append("child")
                    raise OSError("editor missing")

        self.assertEqual(calls, ["disable", "child", "enable"])
        self.assertTrue(controller.active)

    def test_suspended_is_passthrough_when_tui_inactive(self) -> None:
        controller = _controller()

        with mock.patch.object(controller, "disable_tui_mode") as disable_mock, mock.patch.object(
            controller, "enable_tui_mode"
        ) as enable_mock:
            with controller.suspended():
                pass

        disable_mock.assert_not_called()
        enable_mock.assert_not_called()

    def test_enable_requests_full_redraw(self) -> None:
        with mock.patch("wikiterm.terminal.termios.tcgetattr", return_value=[0]), mock.patch(
            "wikiterm.terminal.tty.setraw"
        ), mock.patch("wikiterm.terminal.os.write"):
            controller = TerminalController(stdin_fd=0, stdout_fd=1)
            controller.needs_full_redraw = False
            controller.enable_tui_mode()

        self.assertTrue(controller.needs_full_redraw)


if __name__ == "__main__":
    unittest.main()
