"""Error taxonomy shared by the store, converter, editor, and session loop.

Recoverable failures surface on the status line; ``PublishError`` is fatal
because the edited content never reached the store.
"""

from __future__ import annotations

from pathlib import Path


class WikitermError(Exception):
    """Base class for every error wikiterm raises on purpose."""


class ConfigError(WikitermError):
    pass


class StoreError(WikitermError):
    """A document store call failed (transport error or non-2xx status)."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class PublishError(StoreError):
    """Uploading an edited page failed; the edit only exists on disk."""

    def __init__(self, message: str, path: Path, status_code: int | None = None) -> None:
        super().__init__(message, status_code)
        self.path = path


class ConversionError(WikitermError):
    pass


class EditorError(WikitermError):
    """Materializing, launching, or reading back an edited file failed."""


class UserCancelled(WikitermError):
    pass
