"""Interactive menu bootstrap.

Builds ``AppState``, the dispatcher hooks that suspend the UI around actions,
and the terminal controller, then runs the main loop.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Callable

from ..actions.context import ActionContext
from ..actions.registry import Action, ActionRegistry
from ..execution import CommandExecutor, RetryPolicy
from ..input import DispatcherHooks, InputDispatcher
from ..menu.sections import DEFAULT_SECTIONS, SectionTable
from ..ui_theme import UITheme
from .loop import LoopChrome, run_main_loop
from .state import AppState
from .terminal import TerminalController, wait_for_keypress

logger = logging.getLogger(__name__)


def cooked_prompt(message: str) -> str:
    """Read one line with the terminal in normal mode; EOF yields ``""``."""
    try:
        return input(message)
    except EOFError:
        return ""


def _run_action_suspended(
    state: AppState,
    terminal: TerminalController,
    action: Action,
) -> None:
    """Run ``action`` on the main screen and wait for a key before returning."""
    with terminal.suspended():
        sys.stdout.write(f"\n== {action.id} {action.label} (target: {state.target or 'default'}) ==\n")
        sys.stdout.flush()
        ctx = ActionContext(
            executor=state.executor,
            retry_policy=state.retry_policy,
            prompt=cooked_prompt,
        )
        action.run(ctx)
        wait_for_keypress()


def run_menu(
    registry: ActionRegistry,
    executor: CommandExecutor,
    retry_policy: RetryPolicy,
    *,
    program: str,
    version: str,
    theme: UITheme,
    save_target: Callable[[str | None], None],
    sections: SectionTable = DEFAULT_SECTIONS,
) -> AppState:
    """Run the interactive menu until the user quits and return the final state.

    Errors raised by an action (for example ``HardExecutionError``) are not
    handled here; they end the session after the terminal is restored.
    """
    state = AppState(
        registry=registry,
        executor=executor,
        retry_policy=retry_policy,
        sections=sections,
    )
    stdin_fd = sys.stdin.fileno()
    terminal = TerminalController(stdin_fd=stdin_fd, stdout_fd=sys.stdout.fileno())
    hooks = DispatcherHooks(
        run_action=lambda action: _run_action_suspended(state, terminal, action),
        prompt=terminal.read_line,
        save_target=save_target,
    )
    dispatcher = InputDispatcher(state, hooks)
    logger.info("menu started with %d actions, target %s", len(registry), state.target or "default")
    run_main_loop(
        state=state,
        terminal=terminal,
        stdin_fd=stdin_fd,
        dispatcher=dispatcher,
        chrome=LoopChrome(program=program, version=version, theme=theme),
    )
    return state
