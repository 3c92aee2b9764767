"""Mode-based key handling for the interactive menu.

``BROWSE`` moves the cursor, runs actions, and opens the filter editor or one
of the blocking prompts (direct token entry, target switch). ``FILTER_EDIT``
edits a private buffer that is only committed on Enter.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from ..actions.registry import Action, is_terminate_token
from ..errors import InvalidSelection
from ..menu import navigation
from ..menu.model import Item, build_render_items
from ..runtime.state import BROWSE, FILTER_EDIT, AppState
from .key_registry import KeyBinding, KeyMap

logger = logging.getLogger(__name__)

QUIT_KEYS = ("ESC", "q", "CTRL_C", "CTRL_D")
FILTER_KEY = "/"
COMMAND_KEY = ":"
TARGET_KEY = "t"


def _noop_save_target(target: str | None) -> None:
    del target


@dataclass(frozen=True)
class DispatcherHooks:
    """Operations the dispatcher needs from the surrounding runtime.

    ``run_action`` suspends the UI, runs one action, and restores the UI.
    ``prompt`` reads one line of input outside raw mode and returns ``None``
    when the user cancels it.
    """

    run_action: Callable[[Action], None]
    prompt: Callable[[str], str | None]
    save_target: Callable[[str | None], None] = _noop_save_target


class InputDispatcher:
    def __init__(self, state: AppState, hooks: DispatcherHooks) -> None:
        self.state = state
        self.hooks = hooks
        self._browse_keys = KeyMap(
            KeyBinding(("UP", "k"), lambda: self._move(navigation.UP)),
            KeyBinding(("DOWN", "j"), lambda: self._move(navigation.DOWN)),
            KeyBinding(("PAGE_UP",), lambda: self._move(navigation.PAGE_UP)),
            KeyBinding(("PAGE_DOWN",), lambda: self._move(navigation.PAGE_DOWN)),
            KeyBinding(("HOME", "g"), lambda: self._move(navigation.HOME)),
            KeyBinding(("END", "G"), lambda: self._move(navigation.END)),
            KeyBinding(("ENTER",), self._activate_selection),
            KeyBinding((FILTER_KEY,), self._begin_filter_edit),
            KeyBinding((COMMAND_KEY,), self._prompt_for_token),
            KeyBinding((TARGET_KEY,), self._prompt_for_target),
            KeyBinding(QUIT_KEYS, lambda: True),
        )
        self.rebuild_items(reset_cursor=True)

    def rebuild_items(self, *, reset_cursor: bool) -> None:
        """Rebuild render items for the committed filter and re-seek the cursor."""
        state = self.state
        nav = state.nav
        previous = nav.selected_index
        state.items = build_render_items(state.registry, nav.filter_text, state.sections)
        if reset_cursor:
            nav.selected_index = navigation.reseek_after_rebuild(state.items)
            nav.scroll_offset = 0
        else:
            nav.selected_index = navigation.reseek_near(state.items, previous)
        state.dirty = True

    def selected_action(self) -> Action | None:
        idx = self.state.nav.selected_index
        if 0 <= idx < len(self.state.items):
            item = self.state.items[idx]
            if isinstance(item, Item):
                return item.action
        return None

    def handle_key(self, key: str) -> bool:
        """Handle one key token and return ``True`` when the session should end."""
        if self.state.nav.mode == FILTER_EDIT:
            self._handle_filter_edit_key(key)
            return False
        try:
            return bool(self._browse_keys.dispatch(key))
        except InvalidSelection as exc:
            self._set_status(str(exc))
            return False

    def dispatch_token(self, token: str) -> bool:
        """Run the action named by ``token``; ``True`` for the terminate token.

        Raises ``InvalidSelection`` when the token does not resolve.
        """
        if is_terminate_token(token):
            return True
        action = self.state.registry.resolve(token)
        if action is None:
            raise InvalidSelection(token.strip())
        self._run(action)
        return False

    def _set_status(self, message: str) -> None:
        self.state.status_message = message
        self.state.dirty = True

    def _move(self, movement: str) -> bool:
        nav = self.state.nav
        moved = navigation.move_selection(self.state.items, nav.selected_index, movement)
        if moved != nav.selected_index:
            nav.selected_index = moved
            self.state.dirty = True
        return False

    def _run(self, action: Action) -> None:
        logger.info("running %s (%s)", action.id, action.handler_key)
        self.hooks.run_action(action)
        self._set_status(f"Ran {action.id} {action.label}")
        self.rebuild_items(reset_cursor=False)

    def _activate_selection(self) -> bool:
        action = self.selected_action()
        if action is not None:
            self._run(action)
        return False

    def _begin_filter_edit(self) -> bool:
        nav = self.state.nav
        nav.mode = FILTER_EDIT
        nav.filter_edit_buffer = nav.filter_text
        self.state.dirty = True
        return False

    def _prompt_for_token(self) -> bool:
        token = self.hooks.prompt("Action: ")
        if token is None or not token.strip():
            self.state.dirty = True
            return False
        return self.dispatch_token(token)

    def _prompt_for_target(self) -> bool:
        answer = self.hooks.prompt("Target serial (empty for default): ")
        if answer is None:
            self._set_status(f"Target unchanged: {self.state.target or 'default'}")
            return False
        self.state.target = answer.strip() or None
        self.hooks.save_target(self.state.target)
        logger.info("target set to %s", self.state.target or "default")
        self._set_status(f"Target: {self.state.target or 'default'}")
        return False

    def _handle_filter_edit_key(self, key: str) -> None:
        nav = self.state.nav
        if key == "ENTER":
            nav.filter_text = nav.filter_edit_buffer
            nav.filter_edit_buffer = ""
            nav.mode = BROWSE
            self.rebuild_items(reset_cursor=True)
            return
        if key == "ESC":
            nav.filter_edit_buffer = ""
            nav.mode = BROWSE
            self.state.dirty = True
            return
        if key == "BACKSPACE":
            if nav.filter_edit_buffer:
                nav.filter_edit_buffer = nav.filter_edit_buffer[:-1]
                self.state.dirty = True
            return
        if key == "CTRL_U":
            nav.filter_edit_buffer = ""
            self.state.dirty = True
            return
        if len(key) == 1 and key.isprintable():
            nav.filter_edit_buffer += key
            self.state.dirty = True
