"""Low-level terminal input decoding.

Reads raw bytes from stdin and translates them into normalized key tokens.
Handles ESC-sequence timing for arrows, paging, and home/end keys. Escape
sequences are always consumed whole; ones without a mapping decode to
``UNKNOWN_KEY`` so that only a lone ESC press yields ``"ESC"``.
"""

from __future__ import annotations

import os
import select

ESC_SEQUENCE_TIMEOUT_MS = 25
UNKNOWN_KEY = "UNKNOWN"
_MAX_CSI_LENGTH = 32
_PENDING_BYTES: list[bytes] = []

_CONTROL_KEYS: dict[bytes, str] = {
    b"\x03": "CTRL_C",
    b"\x04": "CTRL_D",
    b"\x15": "CTRL_U",
    b"\t": "TAB",
    b"\x08": "BACKSPACE",
    b"\x7f": "BACKSPACE",
    b"\r": "ENTER_CR",
    b"\n": "ENTER_LF",
}

_CSI_FINAL_KEYS: dict[bytes, str] = {
    b"A": "UP",
    b"B": "DOWN",
    b"C": "RIGHT",
    b"D": "LEFT",
    b"H": "HOME",
    b"F": "END",
}

# ESC [ <n> ~
_CSI_TILDE_KEYS: dict[bytes, str] = {
    b"1": "HOME",
    b"3": "DELETE",
    b"4": "END",
    b"5": "PAGE_UP",
    b"6": "PAGE_DOWN",
    b"7": "HOME",
    b"8": "END",
}


def _read_ready_byte(fd: int, timeout_ms: int) -> bytes | None:
    ready, _, _ = select.select([fd], [], [], max(0.0, timeout_ms / 1000.0))
    if not ready:
        return None
    ch = os.read(fd, 1)
    if not ch:
        return None
    return ch


def _read_utf8_tail(fd: int, first: bytes) -> str:
    """Complete a multi-byte UTF-8 character started by ``first``."""
    lead = first[0]
    if lead >= 0xF0:
        extra = 3
    elif lead >= 0xE0:
        extra = 2
    elif lead >= 0xC0:
        extra = 1
    else:
        extra = 0
    data = first
    for _ in range(extra):
        nxt = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
        if nxt is None:
            break
        data += nxt
    return data.decode("utf-8", errors="replace")


def _read_csi(fd: int) -> tuple[bytes, bytes] | None:
    """Read ``ESC [`` parameters up to the final byte; ``None`` if cut short."""
    params = b""
    while len(params) < _MAX_CSI_LENGTH:
        part = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
        if part is None:
            return None
        # Parameter and intermediate bytes are 0x20-0x3F; 0x40-0x7E ends it.
        if 0x40 <= part[0] <= 0x7E:
            return params, part
        params += part
    return None


def _decode_csi(params: bytes, final: bytes) -> str:
    if final == b"~":
        return _CSI_TILDE_KEYS.get(params, UNKNOWN_KEY)
    if params in (b"", b"1") and final in _CSI_FINAL_KEYS:
        return _CSI_FINAL_KEYS[final]
    return UNKNOWN_KEY


def read_key(fd: int, timeout_ms: int | None = None) -> str:
    """Read one key token, or ``""`` when ``timeout_ms`` elapses first."""
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

    control = _CONTROL_KEYS.get(ch)
    if control is not None:
        return control

    if ch != b"\x1b":
        return _read_utf8_tail(fd, ch)

    seq = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
    if seq is None:
        return "ESC"
    if seq == b"O":
        # SS3 form used by some terminals for arrows/home/end and F1-F4.
        final = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
        if final is None:
            return UNKNOWN_KEY
        return _CSI_FINAL_KEYS.get(final, UNKNOWN_KEY)
    if seq != b"[":
        _PENDING_BYTES.append(seq)
        return "ESC"

    csi = _read_csi(fd)
    if csi is None:
        return UNKNOWN_KEY
    return _decode_csi(*csi)
