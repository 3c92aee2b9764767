"""Action catalog, typed registry, and the context handlers run with."""

from .context import ActionContext
from .registry import TERMINATE_TOKEN, Action, ActionHandler, ActionRegistry, is_terminate_token, register

__all__ = [
    "TERMINATE_TOKEN",
    "Action",
    "ActionContext",
    "ActionHandler",
    "ActionRegistry",
    "is_terminate_token",
    "register",
]
