"""Logging setup.

The terminal belongs to the TUI, so records go to a file under the user log
directory instead of stderr.
"""

from __future__ import annotations

import logging
import logging.handlers
import os
from pathlib import Path

from .config import DEFAULT_LOG_DIR

LOG_LEVEL_ENV_VAR = "WIKITERM_LOG_LEVEL"
LOG_FILENAME = "wikiterm.log"
LOG_MAX_BYTES = 5 * 1024 * 1024
LOG_BACKUP_COUNT = 3
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def resolve_level(configured: str | None = None) -> int:
    name = os.environ.get(LOG_LEVEL_ENV_VAR, "").strip() or (configured or "WARNING")
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else logging.WARNING


def configure_logging(configured_level: str | None = None, log_dir: Path | None = None) -> Path | None:
    """Attach a file handler to the ``wikiterm`` logger and return the log path.

    Returns ``None`` when the log directory cannot be created; logging then
    stays unconfigured rather than writing into the TUI.
    """
    directory = log_dir if log_dir is not None else DEFAULT_LOG_DIR
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError:
        return None
    log_path = directory / LOG_FILENAME
    handler = logging.handlers.RotatingFileHandler(
        log_path,
        maxBytes=LOG_MAX_BYTES,
        backupCount=LOG_BACKUP_COUNT,
        encoding="utf-8",
    )
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root = logging.getLogger("wikiterm")
    for existing in list(root.handlers):
        if isinstance(existing, logging.FileHandler):
            root.removeHandler(existing)
            existing.close()
    root.addHandler(handler)
    root.setLevel(resolve_level(configured_level))
    root.propagate = False
    return log_path
