"""ANSI-aware text measurement and line shaping utilities.

Escape sequences are preserved verbatim and never count toward width; East
Asian wide characters count as two columns.
"""

from __future__ import annotations

import re
import unicodedata

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]")


def char_display_width(ch: str) -> int:
    """Return the terminal column width of one character."""
    if unicodedata.combining(ch):
        return 0
    if unicodedata.east_asian_width(ch) in {"W", "F"}:
        return 2
    return 1


def display_width(text: str) -> int:
    plain = ANSI_ESCAPE_RE.sub("", text)
    return sum(char_display_width(ch) for ch in plain)


def clip_ansi_line(text: str, max_cols: int) -> str:
    """Trim a styled line to at most ``max_cols`` display columns."""
    if max_cols <= 0 or not text:
        return ""

    out: list[str] = []
    col = 0
    i = 0
    n = len(text)
    while i < n:
        if text[i] == "\x1b":
            match = ANSI_ESCAPE_RE.match(text, i)
            if match:
                out.append(match.group(0))
                i = match.end()
                continue
        ch = text[i]
        w = char_display_width(ch)
        if col + w > max_cols:
            break
        out.append(ch)
        col += w
        i += 1

    return "".join(out)


def pad_ansi_line(text: str, width: int) -> str:
    """Clip and right-pad ``text`` to exactly ``width`` display columns."""
    clipped = clip_ansi_line(text, width)
    padded = clipped + " " * max(0, width - display_width(clipped))
    if "\x1b" in clipped and not clipped.endswith("\x1b[0m"):
        padded += "\x1b[0m"
    return padded
