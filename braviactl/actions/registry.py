"""Typed action registry with case-insensitive token resolution."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .context import ActionContext

TERMINATE_TOKEN = "x"

ActionHandler = Callable[["ActionContext"], None]


def normalize_token(token: str) -> str:
    return token.strip().casefold()


def is_terminate_token(token: str) -> bool:
    """Return whether ``token`` is the reserved end-of-session sentinel."""
    return normalize_token(token) == TERMINATE_TOKEN


@dataclass(frozen=True)
class Action:
    """One menu entry: display id, human label, and the handler it runs."""

    id: str
    label: str
    handler_key: str
    handler: ActionHandler

    def run(self, ctx: ActionContext) -> None:
        self.handler(ctx)


class ActionRegistry:
    """Fixed catalog of actions indexed by id and by handler key.

    Both indexes are case-insensitive and resolve to the same ``Action``.
    Duplicate keys and collisions with the terminate sentinel are programming
    errors and raise ``ValueError`` while the registry is built.
    """

    def __init__(self, actions: Iterable[Action]) -> None:
        self._actions: tuple[Action, ...] = tuple(actions)
        self._by_id: dict[str, Action] = {}
        self._by_handler_key: dict[str, Action] = {}
        for action in self._actions:
            self._index(self._by_id, action.id, action, "id")
            self._index(self._by_handler_key, action.handler_key, action, "handler key")

    @staticmethod
    def _index(table: dict[str, Action], raw_key: str, action: Action, kind: str) -> None:
        key = normalize_token(raw_key)
        if not key:
            raise ValueError(f"action {action.label!r} has an empty {kind}")
        if key == TERMINATE_TOKEN:
            raise ValueError(f"{kind} {raw_key!r} collides with the terminate token")
        if key in table:
            raise ValueError(f"duplicate action {kind}: {raw_key!r}")
        table[key] = action

    @property
    def actions(self) -> tuple[Action, ...]:
        return self._actions

    def __iter__(self) -> Iterator[Action]:
        return iter(self._actions)

    def __len__(self) -> int:
        return len(self._actions)

    def resolve(self, token: str) -> Action | None:
        """Resolve an id or handler key, ignoring case and surrounding blanks."""
        key = normalize_token(token)
        if not key:
            return None
        action = self._by_id.get(key)
        if action is None:
            action = self._by_handler_key.get(key)
        return action


def register(actions: Iterable[Action]) -> ActionRegistry:
    return ActionRegistry(actions)
