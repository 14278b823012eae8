"""Last-edited page record backing ``wikiterm edit --last``."""

from __future__ import annotations

import json
import logging
from pathlib import Path

logger = logging.getLogger(__name__)


def load_last_page_id(path: Path) -> str | None:
    """Return the recorded page id, or ``None`` when nothing usable is stored."""
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return None
    if not isinstance(data, dict):
        return None
    value = data.get("last_page_id")
    return value if isinstance(value, str) and value else None


def record_last_page_id(path: Path, page_id: str) -> None:
    """Persist ``page_id``; a write failure is logged and otherwise ignored."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps({"last_page_id": page_id}, indent=2) + "\n", encoding="utf-8")
    except OSError:
        logger.warning("could not write history file %s", path, exc_info=True)
