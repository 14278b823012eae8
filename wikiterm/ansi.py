"""Column arithmetic for styled pane rows.

Pane rows mix SGR color codes, tabs from page bodies, and wide characters in
titles; these helpers measure and fit them in terminal cells.
"""

from __future__ import annotations

import re
import unicodedata
from collections.abc import Iterator

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]")
TAB_STOP = 8
RESET = "\033[0m"


def char_display_width(ch: str, col: int) -> int:
    """Cells taken by ``ch`` when drawn at column ``col``."""
    if ch == "\t":
        return TAB_STOP - col % TAB_STOP
    if unicodedata.combining(ch):
        return 0
    return 2 if unicodedata.east_asian_width(ch) in ("W", "F") else 1


def _segments(text: str) -> Iterator[tuple[str, int]]:
    """Yield ``(piece, cells)`` pairs; escapes take no cells, tabs become spaces."""
    col = 0
    pos = 0
    while pos < len(text):
        escape = ANSI_ESCAPE_RE.match(text, pos) if text[pos] == "\x1b" else None
        if escape is not None:
            yield escape.group(0), 0
            pos = escape.end()
            continue
        ch = text[pos]
        cells = char_display_width(ch, col)
        yield (" " * cells if ch == "\t" else ch), cells
        col += cells
        pos += 1


def display_width(text: str) -> int:
    return sum(cells for _, cells in _segments(text))


def clip_ansi_line(text: str, max_cols: int) -> str:
    """Cut ``text`` after ``max_cols`` cells, keeping every escape before the cut."""
    if max_cols <= 0:
        return ""
    kept: list[str] = []
    used = 0
    for piece, cells in _segments(text):
        if used + cells > max_cols:
            break
        kept.append(piece)
        used += cells
    return "".join(kept)


def fit_ansi_line(text: str, width: int) -> str:
    """Clip to ``width`` cells, then pad with spaces to exactly ``width``."""
    clipped = clip_ansi_line(text, width)
    suffix = RESET if "\x1b" in clipped else ""
    return clipped + suffix + " " * max(0, width - display_width(clipped))
