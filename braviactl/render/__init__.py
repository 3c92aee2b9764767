"""Full-frame renderer for the action menu.

``build_frame_lines`` composes every screen row from a ``RenderContext`` and
has no side effects; ``render_frame`` writes the composed frame in one call.
Layout, top to bottom: title bar, filter line, hint line, divider, list rows,
divider, footer.
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass

from ..menu.model import Header, Item, RenderItem, selectable_count
from ..runtime.state import FILTER_EDIT
from ..ui_theme import DEFAULT_THEME, UITheme
from .ansi import display_width, pad_ansi_line

MIN_COLUMNS = 40
MIN_ROWS = 10
CHROME_ROWS = 6
DEFAULT_TARGET_LABEL = "default"

BROWSE_HINT = "Up/Down move  PgUp/PgDn page  Enter run  / filter  : command  t target  q quit"
FILTER_EDIT_HINT = "Type to filter  Enter apply  Esc cancel  Backspace delete  Ctrl+U clear"


@dataclass
class RenderContext:
    items: list[RenderItem]
    selected_index: int
    scroll_offset: int
    filter_text: str
    mode: str
    filter_edit_buffer: str
    target: str | None
    width: int
    height: int
    program: str = "braviactl"
    version: str = ""
    status_message: str = ""
    theme: UITheme = DEFAULT_THEME


def clamp_terminal_size(columns: int, lines: int) -> tuple[int, int]:
    return max(MIN_COLUMNS, columns), max(MIN_ROWS, lines)


def visible_list_rows(height: int) -> int:
    """Return how many list rows fit below/above the chrome for ``height``."""
    return max(1, height - CHROME_ROWS)


def _styled(style: str, text: str, theme: UITheme) -> str:
    if not style:
        return text
    return f"{style}{text}{theme.reset}"


def build_title_bar(program: str, version: str, target: str | None, width: int) -> str:
    """Return the plain title text: name/version left, target right when it fits."""
    left = f" {program} {version}".rstrip() if version else f" {program}"
    right = f"target: {target or DEFAULT_TARGET_LABEL} "
    if display_width(left) + display_width(right) + 1 <= width:
        gap = " " * (width - display_width(left) - display_width(right))
        return f"{left}{gap}{right}"
    return pad_ansi_line(left, width)


def _filter_line(context: RenderContext) -> str:
    theme = context.theme
    if context.mode == FILTER_EDIT:
        query = _styled(theme.filter_query, context.filter_edit_buffer, theme)
        return f" Filter> {query}_"
    if context.filter_text:
        return f" Filter: {_styled(theme.filter_query, context.filter_text, theme)}"
    return f" Filter: {_styled(theme.filter_hint, '(none, press / to filter)', theme)}"


def _item_row(item: RenderItem, selected: bool, width: int, theme: UITheme) -> str:
    if isinstance(item, Header):
        return pad_ansi_line(_styled(theme.section_header, f" {item.title}", theme), width)
    action = item.action
    if selected:
        plain = pad_ansi_line(f"  {action.id:<4} {action.label}", width)
        return _styled(theme.reverse, plain, theme)
    return pad_ansi_line(f"  {_styled(theme.item_id, f'{action.id:<4}', theme)} {action.label}", width)


def build_frame_lines(context: RenderContext) -> list[str]:
    """Compose one full frame as a list of exactly ``height`` rows."""
    width, height = clamp_terminal_size(context.width, context.height)
    theme = context.theme
    rows: list[str] = []

    title = build_title_bar(context.program, context.version, context.target, width)
    rows.append(_styled(theme.title_bar, title, theme))
    rows.append(pad_ansi_line(_filter_line(context), width))
    hint = FILTER_EDIT_HINT if context.mode == FILTER_EDIT else BROWSE_HINT
    rows.append(pad_ansi_line(_styled(theme.filter_hint, f" {hint}", theme), width))
    divider = _styled(theme.divider, "─" * width, theme)
    rows.append(divider)

    list_rows = visible_list_rows(height)
    start = max(0, context.scroll_offset)
    visible = context.items[start : start + list_rows]
    for offset, item in enumerate(visible):
        idx = start + offset
        selected = idx == context.selected_index and isinstance(item, Item)
        rows.append(_item_row(item, selected, width, theme))
    if not context.items:
        rows.append(pad_ansi_line(_styled(theme.filter_hint, "  No matching actions", theme), width))
    while len(rows) < 4 + list_rows:
        rows.append(" " * width)

    rows.append(divider)
    count = selectable_count(context.items)
    footer = " " + _styled(theme.footer, f"{count} action{'s' if count != 1 else ''}", theme)
    if context.status_message:
        footer += "  " + _styled(theme.status, context.status_message, theme)
    rows.append(pad_ansi_line(footer, width))
    return rows


def render_frame(context: RenderContext) -> None:
    """Repaint the whole screen from ``context``."""
    out = ["\033[H\033[J", "\r\n".join(build_frame_lines(context))]
    os.write(sys.stdout.fileno(), "".join(out).encode("utf-8", errors="replace"))


__all__ = [
    "RenderContext",
    "build_frame_lines",
    "build_title_bar",
    "clamp_terminal_size",
    "render_frame",
    "visible_list_rows",
]
