from __future__ import annotations

import json
import logging
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from wikiterm import config, history, logs
from wikiterm.errors import ConfigError

VALID_CONFIG = {
    "api": {"domain": "example.atlassian.net", "username": "me@example.com", "token": "secret"},
    "save_location": "~/wiki-pages",
    "editor": {"command": "hx", "args": ["--vsplit"]},
    "theme": "ocean",
}


class ConfigBehaviorTests(unittest.TestCase):
    def _write(self, root: Path, payload: object) -> Path:
        path = root / "config.json"
        path.write_text(json.dumps(payload), encoding="utf-8")
        return path

    def test_load_settings_reads_every_section(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = self._write(Path(tmp), VALID_CONFIG)
            settings = config.load_settings(path)

        self.assertEqual(settings.api.domain, "example.atlassian.net")
        self.assertEqual(settings.save_location, Path("~/wiki-pages").expanduser())
        self.assertEqual(settings.history_location, config.DEFAULT_HISTORY_PATH)
        self.assertEqual(settings.editor, config.EditorSettings(command="hx", args=("--vsplit",)))
        self.assertEqual(settings.theme, "ocean")
        self.assertIsNone(settings.log_level)

    def test_missing_or_malformed_file_reads_as_empty(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            self.assertEqual(config.load_config(root / "absent.json"), {})
            broken = root / "broken.json"
            broken.write_text("{not json", encoding="utf-8")
            self.assertEqual(config.load_config(broken), {})
            listed = self._write(root, [1, 2])
            self.assertEqual(config.load_config(listed), {})

    def test_load_settings_requires_file_and_api_fields(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            with self.assertRaises(ConfigError):
                config.load_settings(root / "absent.json")

            path = self._write(root, {"api": {"domain": "x", "username": "me", "token": "  "}})
            with self.assertRaisesRegex(ConfigError, "api.token"):
                config.load_settings(path)

            path = self._write(root, {"theme": "plain"})
            with self.assertRaisesRegex(ConfigError, "api"):
                config.load_settings(path)

    def test_env_var_overrides_config_path(self) -> None:
        with mock.patch.dict("wikiterm.config.os.environ", {"WIKITERM_CONFIG": "/tmp/other.json"}):
            self.assertEqual(config.config_path(), Path("/tmp/other.json"))
        with mock.patch.dict("wikiterm.config.os.environ", {}, clear=True):
            self.assertEqual(config.config_path(), config.DEFAULT_CONFIG_PATH)

    def test_bad_editor_args_are_ignored(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            payload = dict(VALID_CONFIG, editor={"command": "nano", "args": "not-a-list"})
            settings = config.load_settings(self._write(Path(tmp), payload))
        self.assertEqual(settings.editor, config.EditorSettings(command="nano", args=()))


class HistoryTests(unittest.TestCase):
    def test_record_then_load_last_page_id(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "state" / "history.json"
            self.assertIsNone(history.load_last_page_id(path))
            history.record_last_page_id(path, "123")
            self.assertEqual(history.load_last_page_id(path), "123")

    def test_garbage_history_reads_as_nothing(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "history.json"
            path.write_text('{"last_page_id": 5}', encoding="utf-8")
            self.assertIsNone(history.load_last_page_id(path))

    def test_unwritable_history_is_logged_not_raised(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            blocker = Path(tmp) / "file"
            blocker.write_text("", encoding="utf-8")
            with self.assertLogs("wikiterm.history", level="WARNING"):
                history.record_last_page_id(blocker / "history.json", "1")


class LoggingTests(unittest.TestCase):
    def tearDown(self) -> None:
        logger = logging.getLogger("wikiterm")
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()
        logger.propagate = True
        logger.setLevel(logging.NOTSET)

    def test_resolve_level_prefers_environment(self) -> None:
        with mock.patch.dict("wikiterm.logs.os.environ", {"WIKITERM_LOG_LEVEL": "debug"}):
            self.assertEqual(logs.resolve_level("ERROR"), logging.DEBUG)
        with mock.patch.dict("wikiterm.logs.os.environ", {}, clear=True):
            self.assertEqual(logs.resolve_level("info"), logging.INFO)
            self.assertEqual(logs.resolve_level(None), logging.WARNING)
            self.assertEqual(logs.resolve_level("chatty"), logging.WARNING)

    def test_configure_logging_writes_to_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp, mock.patch.dict("wikiterm.logs.os.environ", {}, clear=True):
            log_path = logs.configure_logging("INFO", Path(tmp) / "logs")
            logging.getLogger("wikiterm.store").info("hello from the store")
            for handler in logging.getLogger("wikiterm").handlers:
                handler.flush()

            self.assertIsNotNone(log_path)
            self.assertIn("hello from the store", log_path.read_text(encoding="utf-8"))


if __name__ == "__main__":
    unittest.main()
