"""Persistent JSON config helpers.

Reads API credentials, local file locations, and editor preferences. A missing or
malformed file reads as an empty config;
``load_settings`` is where missing required values become ``ConfigError``.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path

from platformdirs import user_config_dir, user_data_dir, user_log_dir, user_state_dir

from .errors import ConfigError

APP_NAME = "wikiterm"
CONFIG_FILENAME = "config.json"
CONFIG_ENV_VAR = "WIKITERM_CONFIG"
DEFAULT_CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
DEFAULT_SAVE_LOCATION = Path(user_data_dir(APP_NAME, appauthor=False)) / "pages"
DEFAULT_HISTORY_PATH = Path(user_state_dir(APP_NAME, appauthor=False)) / "history.json"
DEFAULT_LOG_DIR = Path(user_log_dir(APP_NAME, appauthor=False))


@dataclass(frozen=True)
class ApiSettings:
    domain: str
    username: str
    token: str


@dataclass(frozen=True)
class EditorSettings:
    command: str | None = None
    args: tuple[str, ...] = ()


@dataclass(frozen=True)
class Settings:
    api: ApiSettings
    save_location: Path = DEFAULT_SAVE_LOCATION
    history_location: Path = DEFAULT_HISTORY_PATH
    editor: EditorSettings = field(default_factory=EditorSettings)
    theme: str | None = None
    log_level: str | None = None


def config_path() -> Path:
    override = os.environ.get(CONFIG_ENV_VAR, "").strip()
    if override:
        return Path(override).expanduser()
    return DEFAULT_CONFIG_PATH


def load_config(path: Path | None = None) -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    target = path if path is not None else config_path()
    try:
        data = json.loads(target.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


def _optional_str(value: object) -> str | None:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _optional_path(value: object, default: Path) -> Path:
    text = _optional_str(value)
    if text is None:
        return default
    return Path(text).expanduser()


def _load_api(raw: object) -> ApiSettings:
    if not isinstance(raw, dict):
        raise ConfigError(f"Config is missing the \"api\" section ({config_path()})")
    values = {}
    for name in ("domain", "username", "token"):
        value = _optional_str(raw.get(name))
        if value is None:
            raise ConfigError(f"Config value api.{name} is missing or empty ({config_path()})")
        values[name] = value
    return ApiSettings(**values)


def _load_editor(raw: object) -> EditorSettings:
    if not isinstance(raw, dict):
        return EditorSettings()
    args = raw.get("args")
    if not isinstance(args, list) or not all(isinstance(arg, str) for arg in args):
        args = []
    return EditorSettings(command=_optional_str(raw.get("command")), args=tuple(args))


def load_settings(path: Path | None = None) -> Settings:
    """Build validated ``Settings`` from the config file."""
    data = load_config(path)
    if not data:
        raise ConfigError(f"Config file could not be found or parsed: {path or config_path()}")
    return Settings(
        api=_load_api(data.get("api")),
        save_location=_optional_path(data.get("save_location"), DEFAULT_SAVE_LOCATION),
        history_location=_optional_path(data.get("history_location"), DEFAULT_HISTORY_PATH),
        editor=_load_editor(data.get("editor")),
        theme=_optional_str(data.get("theme")),
        log_level=_optional_str(data.get("log_level")),
    )
