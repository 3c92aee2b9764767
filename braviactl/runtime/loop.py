"""Main interactive event loop for the menu.

Each iteration measures the terminal, keeps the cursor inside the viewport,
repaints when needed, and hands one key to the dispatcher. Feature logic lives
in the dispatcher; this loop is wiring only.
"""

from __future__ import annotations

import shutil
from dataclasses import dataclass

from ..input import InputDispatcher, read_key
from ..menu.navigation import reseek_after_rebuild, scroll_into_view
from ..render import RenderContext, clamp_terminal_size, render_frame, visible_list_rows
from ..ui_theme import DEFAULT_THEME, UITheme
from .state import AppState
from .terminal import TerminalController

KEY_POLL_TIMEOUT_MS = 250


@dataclass(frozen=True)
class LoopChrome:
    """Static title-bar and palette settings for the frame renderer."""

    program: str
    version: str
    theme: UITheme = DEFAULT_THEME


def build_render_context(state: AppState, chrome: LoopChrome, width: int, height: int) -> RenderContext:
    nav = state.nav
    return RenderContext(
        items=state.items,
        selected_index=nav.selected_index,
        scroll_offset=nav.scroll_offset,
        filter_text=nav.filter_text,
        mode=nav.mode,
        filter_edit_buffer=nav.filter_edit_buffer,
        target=state.target,
        width=width,
        height=height,
        program=chrome.program,
        version=chrome.version,
        status_message=state.status_message,
        theme=chrome.theme,
    )


def run_main_loop(
    state: AppState,
    terminal: TerminalController,
    stdin_fd: int,
    dispatcher: InputDispatcher,
    chrome: LoopChrome,
) -> None:
    """Run the menu until the dispatcher reports a stop key or token."""
    last_size: tuple[int, int] | None = None
    skip_next_lf = False

    with terminal.raw_mode():
        while True:
            term = shutil.get_terminal_size((80, 24))
            width, height = clamp_terminal_size(term.columns, term.lines)
            if (width, height) != last_size:
                last_size = (width, height)
                state.dirty = True

            nav = state.nav
            scroll = scroll_into_view(
                nav.selected_index,
                nav.scroll_offset,
                visible_list_rows(height),
                first_selectable=reseek_after_rebuild(state.items),
            )
            if scroll != nav.scroll_offset:
                nav.scroll_offset = scroll
                state.dirty = True

            if state.dirty:
                render_frame(build_render_context(state, chrome, width, height))
                state.dirty = False

            key = read_key(stdin_fd, timeout_ms=KEY_POLL_TIMEOUT_MS)
            if key == "":
                continue
            if skip_next_lf and key == "ENTER_LF":
                skip_next_lf = False
                continue
            skip_next_lf = key == "ENTER_CR"
            if key in {"ENTER_CR", "ENTER_LF"}:
                key = "ENTER"

            if state.status_message:
                state.status_message = ""
                state.dirty = True
            if dispatcher.handle_key(key):
                break
            state.dirty = True
