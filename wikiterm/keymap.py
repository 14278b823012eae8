"""Input translator: key tokens to session messages, per UI mode.

Each mode owns a small binding table. Text-entry modes fall back to
``TypeChar`` for printable keys, and the list modes turn left clicks and wheel
events into ``MouseSelect`` and list movement.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from .input import parse_mouse_position
from .messages import Message, MouseSelect, Msg, TypeChar
from .models import UIMode


@dataclass(frozen=True)
class KeyBinding:
    """Mapping from one or more key tokens to a single message."""

    keys: tuple[str, ...]
    message: Message


class Keymap:
    """Key-token dispatch table for one mode."""

    def __init__(self, bindings: Iterable[KeyBinding] = ()) -> None:
        self._messages: dict[str, Message] = {}
        for binding in bindings:
            self.bind(binding)

    def bind(self, binding: KeyBinding) -> Keymap:
        for key in binding.keys:
            self._messages[key] = binding.message
        return self

    def lookup(self, key: str) -> Message | None:
        return self._messages.get(key)


_GLOBAL = (KeyBinding(("CTRL_C",), Msg.EXIT),)

_LIST_NAVIGATION = (
    KeyBinding(("q",), Msg.EXIT),
    KeyBinding(("DOWN", "j"), Msg.LIST_NEXT),
    KeyBinding(("UP", "k"), Msg.LIST_PREVIOUS),
    KeyBinding(("ENTER", "RIGHT", "l"), Msg.SELECT),
    KeyBinding(("LEFT", "h", "ESC"), Msg.BACK),
    KeyBinding(("r",), Msg.REFRESH),
    KeyBinding(("p",), Msg.TOGGLE_PREVIEW),
    KeyBinding(("?",), Msg.TOGGLE_HELP),
)

_PAGE_ACTIONS = (
    KeyBinding(("n",), Msg.NEW_PAGE),
    KeyBinding(("d", "DELETE"), Msg.DELETE_PAGE),
    KeyBinding(("t",), Msg.UPDATE_TITLE),
    KeyBinding(("/",), Msg.START_SEARCH),
    KeyBinding(("s",), Msg.START_SORT),
)

_TEXT_EDITING = (
    KeyBinding(("BACKSPACE",), Msg.BACKSPACE),
    KeyBinding(("LEFT",), Msg.CURSOR_LEFT),
    KeyBinding(("RIGHT",), Msg.CURSOR_RIGHT),
)


def _text_keymap(confirm: Msg, cancel: Msg) -> Keymap:
    return Keymap(
        (
            *_GLOBAL,
            *_TEXT_EDITING,
            KeyBinding(("ENTER",), confirm),
            KeyBinding(("ESC",), cancel),
        )
    )


KEYMAPS: dict[UIMode, Keymap] = {
    UIMode.BROWSING_SPACES: Keymap((*_GLOBAL, *_LIST_NAVIGATION)),
    UIMode.BROWSING_PAGES: Keymap((*_GLOBAL, *_LIST_NAVIGATION, *_PAGE_ACTIONS)),
    UIMode.CONFIRM_SAVE: Keymap(
        (
            *_GLOBAL,
            KeyBinding(("y", "Y", "ENTER"), Msg.CONFIRM_SAVE),
            KeyBinding(("n", "N", "ESC"), Msg.REJECT_SAVE),
        )
    ),
    UIMode.CONFIRM_DELETE: Keymap(
        (
            *_GLOBAL,
            KeyBinding(("y", "Y", "ENTER"), Msg.CONFIRM_DELETE_PAGE),
            KeyBinding(("n", "N", "ESC"), Msg.CANCEL_DELETE_PAGE),
        )
    ),
    UIMode.SORT_PICKER: Keymap(
        (
            *_GLOBAL,
            KeyBinding(("DOWN", "j"), Msg.LIST_NEXT),
            KeyBinding(("UP", "k"), Msg.LIST_PREVIOUS),
            KeyBinding(("TAB", " ", "d", "LEFT", "RIGHT"), Msg.TOGGLE_SORT_DIR),
            KeyBinding(("ENTER",), Msg.CONFIRM_SORT),
            KeyBinding(("ESC", "q"), Msg.CANCEL_SORT),
        )
    ),
    UIMode.COMPOSE_NEW_PAGE: _text_keymap(Msg.SAVE_NEW_PAGE, Msg.CANCEL_NEW_PAGE),
    UIMode.SEARCH_ENTRY: _text_keymap(Msg.CONFIRM_SEARCH, Msg.CANCEL_SEARCH),
    UIMode.COMPOSE_TITLE: _text_keymap(Msg.CONFIRM_TITLE, Msg.CANCEL_TITLE),
}


def _is_printable(key: str) -> bool:
    return len(key) == 1 and key.isprintable()


def _translate_mouse(key: str) -> Message | None:
    position = parse_mouse_position(key)
    if position is None:
        return None
    col, row = position
    if key.startswith("MOUSE_LEFT_DOWN:"):
        return MouseSelect(x=col - 1, y=row - 1)
    if key.startswith("MOUSE_WHEEL_UP:"):
        return Msg.LIST_PREVIOUS
    if key.startswith("MOUSE_WHEEL_DOWN:"):
        return Msg.LIST_NEXT
    return None


def translate_key(key: str, mode: UIMode) -> Message | None:
    """Map one key token to the message it means in ``mode``, if any."""
    if not key:
        return None
    if key.startswith("MOUSE"):
        if mode in {UIMode.BROWSING_SPACES, UIMode.BROWSING_PAGES}:
            return _translate_mouse(key)
        return None
    message = KEYMAPS[mode].lookup(key)
    if message is not None:
        return message
    if mode.is_text_entry and _is_printable(key):
        return TypeChar(key)
    return None
