"""Low-level terminal input decoding.

Reads raw bytes from stdin and turns them into key tokens such as ``"UP"``,
``"ENTER"``, ``"a"``, or ``"MOUSE_LEFT_DOWN:12:4"`` (SGR mouse, 1-based
column and row). Multi-byte UTF-8 characters are returned whole.
"""

from __future__ import annotations

import os
import select

ESC_SEQUENCE_TIMEOUT_MS = 25
MAX_MOUSE_PAYLOAD = 32
_PENDING_BYTES: list[bytes] = []

_CONTROL_KEYS: dict[bytes, str] = {
    b"\x03": "CTRL_C",
    b"\x08": "BACKSPACE",
    b"\x7f": "BACKSPACE",
    b"\t": "TAB",
    b"\r": "ENTER",
    b"\n": "ENTER",
}

_CSI_FINAL_KEYS: dict[bytes, str] = {
    b"A": "UP",
    b"B": "DOWN",
    b"C": "RIGHT",
    b"D": "LEFT",
    b"H": "HOME",
    b"F": "END",
}

_CSI_TILDE_KEYS: dict[str, str] = {
    "1": "HOME",
    "2": "INSERT",
    "3": "DELETE",
    "4": "END",
    "5": "PAGE_UP",
    "6": "PAGE_DOWN",
    "7": "HOME",
    "8": "END",
}

_CSI_MODIFIERS: dict[str, str] = {
    "2": "SHIFT_",
    "3": "ALT_",
    "5": "CTRL_",
    "9": "ALT_",
}

UNKNOWN_KEY = "UNKNOWN"
MAX_CSI_PARAMS = 16


def _read_ready_byte(fd: int, timeout_ms: int) -> bytes | None:
    ready, _, _ = select.select([fd], [], [], max(0.0, timeout_ms / 1000.0))
    if not ready:
        return None
    ch = os.read(fd, 1)
    return ch or None


def _utf8_length(lead: int) -> int:
    if lead >= 0xF0:
        return 4
    if lead >= 0xE0:
        return 3
    if lead >= 0xC0:
        return 2
    return 1


def _read_utf8(fd: int, lead: bytes) -> str:
    data = bytearray(lead)
    for _ in range(_utf8_length(lead[0]) - 1):
        part = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
        if part is None:
            break
        data += part
    return data.decode("utf-8", errors="replace")


def _decode_sgr_mouse(fd: int) -> str:
    """Decode the tail of ``ESC [ < btn ; col ; row (M|m)``."""
    payload = bytearray()
    while True:
        part = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
        if part is None or len(payload) > MAX_MOUSE_PAYLOAD:
            return "ESC"
        if part in {b"M", b"m"}:
            break
        payload += part
    try:
        btn, col, row = (int(value) for value in payload.decode("ascii").split(";"))
    except ValueError:
        return "ESC"
    button = btn & 0b11
    if btn & 0b0100_0000:
        if button == 0:
            return f"MOUSE_WHEEL_UP:{col}:{row}"
        if button == 1:
            return f"MOUSE_WHEEL_DOWN:{col}:{row}"
        return "MOUSE"
    if button == 0 and not btn & 0b0010_0000:
        suffix = "DOWN" if part == b"M" else "UP"
        return f"MOUSE_LEFT_{suffix}:{col}:{row}"
    return "MOUSE"


def _decode_csi(fd: int) -> str:
    """Decode ``ESC [ params final``, consuming the whole sequence.

    Parameter bytes are ``0x30-0x3F`` (digits, ``;``), intermediates
    ``0x20-0x2F``, and the final byte ``0x40-0x7E`` ends the sequence.
    Sequences with no known meaning come back as ``UNKNOWN_KEY``.
    """
    first = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
    if first is None:
        return "ESC"
    if first == b"<":
        return _decode_sgr_mouse(fd)
    params = bytearray()
    final = first
    while 0x20 <= final[0] <= 0x3F:
        if len(params) >= MAX_CSI_PARAMS:
            return UNKNOWN_KEY
        params += final
        part = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
        if part is None:
            return UNKNOWN_KEY
        final = part
    if not 0x40 <= final[0] <= 0x7E:
        return UNKNOWN_KEY
    fields = params.decode("ascii").split(";")
    if final == b"~":
        return _CSI_TILDE_KEYS.get(fields[0], UNKNOWN_KEY)
    name = _CSI_FINAL_KEYS.get(final)
    if name is None:
        return UNKNOWN_KEY
    if len(fields) < 2:
        return name
    # xterm modifier form: ESC [ 1 ; <modifier> <final>
    return _CSI_MODIFIERS.get(fields[1], "") + name


def read_key(fd: int, timeout_ms: int | None = None) -> str:
    """Read one key token; ``""`` on timeout or end of input."""
    if _PENDING_BYTES:
        ch = _PENDING_BYTES.pop(0)
    else:
        if timeout_ms is not None:
            ready, _, _ = select.select([fd], [], [], max(0.0, timeout_ms / 1000.0))
            if not ready:
                return ""
        ch = os.read(fd, 1)
        if not ch:
            return ""

    if ch in _CONTROL_KEYS:
        return _CONTROL_KEYS[ch]
    if ch != b"\x1b":
        return _read_utf8(fd, ch)

    seq = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
    if seq is None:
        return "ESC"
    if seq == b"[":
        return _decode_csi(fd)
    if seq == b"O":
        # SS3 arrows sent by terminals in application cursor mode.
        final = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
        return _CSI_FINAL_KEYS.get(final or b"", "ESC")
    _PENDING_BYTES.append(seq)
    return "ESC"


def parse_mouse_position(key: str) -> tuple[int, int] | None:
    """Return the 1-based ``(col, row)`` encoded in a mouse token."""
    parts = key.split(":")
    if len(parts) < 3:
        return None
    try:
        return int(parts[1]), int(parts[2])
    except ValueError:
        return None
