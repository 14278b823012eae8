"""Preview text preparation: control-byte sanitizing and pygments highlighting."""

from __future__ import annotations

import re
from functools import lru_cache

from pygments import highlight
from pygments.formatters import TerminalFormatter
from pygments.lexers import HtmlLexer

_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]")
# Storage format usually arrives as one long line; break after block-level tags.
_BLOCK_END_RE = re.compile(r"(</(?:p|h[1-6]|li|ul|ol|table|tr|div|pre|blockquote)>|<br\s*/?>)(?!\n)", re.IGNORECASE)


def sanitize_terminal_text(source: str) -> str:
    """Escape terminal control bytes so a page body cannot move the cursor or ring the bell."""
    if _CONTROL_RE.search(source) is None:
        return source
    return _CONTROL_RE.sub(lambda match: f"\\x{ord(match.group(0)):02x}", source)


@lru_cache(maxsize=64)
def highlight_storage_html(body: str, color: bool = True) -> tuple[str, ...]:
    """Return preview lines for a storage-format page body."""
    text = _BLOCK_END_RE.sub(r"\1\n", sanitize_terminal_text(body))
    if color and text.strip():
        text = highlight(text, HtmlLexer(), TerminalFormatter())
    return tuple(text.splitlines())
