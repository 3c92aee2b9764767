from __future__ import annotations

from dataclasses import dataclass, field

from ..actions.registry import ActionRegistry
from ..execution import CommandExecutor, RetryPolicy
from ..menu.model import RenderItem
from ..menu.navigation import NO_SELECTION
from ..menu.sections import DEFAULT_SECTIONS, SectionTable

BROWSE = "browse"
FILTER_EDIT = "filter_edit"


@dataclass
class NavigationState:
    selected_index: int = NO_SELECTION
    scroll_offset: int = 0
    filter_text: str = ""
    mode: str = BROWSE
    filter_edit_buffer: str = ""


@dataclass
class AppState:
    registry: ActionRegistry
    executor: CommandExecutor
    retry_policy: RetryPolicy
    sections: SectionTable = DEFAULT_SECTIONS
    nav: NavigationState = field(default_factory=NavigationState)
    items: list[RenderItem] = field(default_factory=list)
    status_message: str = ""
    dirty: bool = True

    @property
    def target(self) -> str | None:
        return self.executor.target

    @target.setter
    def target(self, value: str | None) -> None:
        self.executor.target = value or None
