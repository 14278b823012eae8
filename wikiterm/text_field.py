"""Single-line text entry shared by every popup.

The cursor is stored as a distance from the end of the buffer, so it stays
put relative to the text after it while characters are inserted before it.
"""

from __future__ import annotations


class TextField:
    def __init__(self, text: str = "") -> None:
        self.text = text
        self.offset = 0

    def __len__(self) -> int:
        return len(self.text)

    @property
    def cursor(self) -> int:
        """Cursor position as an index from the start of the buffer."""
        return len(self.text) - self.offset

    def type_char(self, ch: str) -> None:
        at = self.cursor
        self.text = self.text[:at] + ch + self.text[at:]

    def backspace(self) -> None:
        at = self.cursor
        if at <= 0:
            return
        self.text = self.text[: at - 1] + self.text[at:]

    def cursor_left(self) -> None:
        self.offset = min(len(self.text), self.offset + 1)

    def cursor_right(self) -> None:
        self.offset = max(0, self.offset - 1)

    def reset(self) -> None:
        self.offset = 0

    def set_text(self, text: str) -> None:
        self.text = text
        self.offset = 0

    def clear(self) -> None:
        self.set_text("")
