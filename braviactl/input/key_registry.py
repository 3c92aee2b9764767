"""Key-to-handler tables used by the menu dispatcher."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

KeyHandler = Callable[[], bool]


@dataclass(frozen=True)
class KeyBinding:
    """One or more key tokens bound to a handler returning ``True`` to stop."""

    keys: tuple[str, ...]
    handler: KeyHandler


class KeyMap:
    """Exact-match key table; later bindings replace earlier ones."""

    def __init__(self, *bindings: KeyBinding) -> None:
        self._handlers: dict[str, KeyHandler] = {}
        for binding in bindings:
            self.bind(binding)

    def bind(self, binding: KeyBinding) -> KeyMap:
        for key in binding.keys:
            self._handlers[key] = binding.handler
        return self

    def dispatch(self, key: str) -> bool | None:
        """Run the handler for ``key``; ``None`` means the key is unbound."""
        handler = self._handlers.get(key)
        if handler is None:
            return None
        return handler()
