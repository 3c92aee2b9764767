"""Public runtime orchestration entry points.

This package groups the interactive menu bootstrap (`run_menu`) and the
lower-level event loop used by tests and composition code.
"""

from __future__ import annotations


def run_menu(*args, **kwargs):
    """Lazily import menu entrypoint so batch mode never touches termios."""
    from .app import run_menu as _run_menu

    return _run_menu(*args, **kwargs)


def run_main_loop(*args, **kwargs):
    """Lazily import loop runner to avoid package-import cycles."""
    from .loop import run_main_loop as _run_main_loop

    return _run_main_loop(*args, **kwargs)


__all__ = ["run_menu", "run_main_loop"]
