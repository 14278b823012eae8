"""Terminal control handle for the TUI session.

Owns raw-mode lifecycle, alternate-screen switching, and mouse reporting.
``suspended`` hands the terminal to a child process and always takes it back.
"""

from __future__ import annotations

import contextlib
import os
import termios
import tty

ENTER_TUI = b"\x1b[?1049h\x1b[?25l\x1b[?1000h\x1b[?1006h"
LEAVE_TUI = b"\x1b[?1000l\x1b[?1006l\x1b[?25h\x1b[?1049l"


class TerminalController:
    """Manage terminal mode transitions around the session loop."""

    def __init__(self, stdin_fd: int, stdout_fd: int) -> None:
        self.stdin_fd = stdin_fd
        self.stdout_fd = stdout_fd
        self._saved_tty_state = termios.tcgetattr(stdin_fd)
        self.active = False
        self.needs_full_redraw = True

    def enable_tui_mode(self) -> None:
        """Enter raw alternate-screen mode with mouse reporting enabled."""
        tty.setraw(self.stdin_fd, termios.TCSAFLUSH)
        os.write(self.stdout_fd, ENTER_TUI)
        self.active = True
        self.needs_full_redraw = True

    def disable_tui_mode(self) -> None:
        """Restore the saved tty state and the main screen buffer."""
        os.write(self.stdout_fd, LEAVE_TUI)
        termios.tcsetattr(self.stdin_fd, termios.TCSAFLUSH, self._saved_tty_state)
        self.active = False

    def write(self, data: str) -> None:
        os.write(self.stdout_fd, data.encode("utf-8", errors="replace"))

    @contextlib.contextmanager
    def raw_mode(self):
        try:
            self.enable_tui_mode()
            yield self
        finally:
            self.disable_tui_mode()

    @contextlib.contextmanager
    def suspended(self):
        """Give the terminal back to the shell for the duration of the block.

        Whatever the child leaves on screen is discarded: the next frame is a
        full redraw.
        """
        was_active = self.active
        if was_active:
            self.disable_tui_mode()
        try:
            yield
        finally:
            if was_active:
                self.enable_tui_mode()
