"""Build the flat header/item list shown by the menu.

Filtering is plain substring containment on ``"{id} {label}"``; grouping and
ordering come from a ``SectionTable``. The list is rebuilt from scratch on
every call.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Union

from ..actions.registry import Action
from .sections import DEFAULT_SECTIONS, SectionTable


@dataclass(frozen=True)
class Header:
    title: str


@dataclass(frozen=True)
class Item:
    action: Action


RenderItem = Union[Header, Item]


def normalize_filter(filter_text: str) -> str:
    return filter_text.strip().casefold()


def matches_filter(action: Action, folded_filter: str) -> bool:
    if not folded_filter:
        return True
    return folded_filter in f"{action.id} {action.label}".casefold()


def build_render_items(
    actions: Iterable[Action],
    filter_text: str = "",
    sections: SectionTable = DEFAULT_SECTIONS,
) -> list[RenderItem]:
    """Return ``[Header, Item, Item, Header, ...]`` for actions matching the filter."""
    folded = normalize_filter(filter_text)
    buckets: dict[str, list[Action]] = {title: [] for title in sections.order}
    for action in actions:
        if matches_filter(action, folded):
            buckets[sections.classify(action.id)].append(action)

    items: list[RenderItem] = []
    for title in sections.order:
        bucket = buckets[title]
        if not bucket:
            continue
        items.append(Header(title))
        items.extend(Item(action) for action in bucket)
    return items


def is_selectable(item: RenderItem) -> bool:
    return isinstance(item, Item)


def selectable_count(items: list[RenderItem]) -> int:
    return sum(1 for item in items if isinstance(item, Item))
