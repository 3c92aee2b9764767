"""Menu model: section grouping, filtered render items, and cursor movement."""

from .model import Header, Item, RenderItem, build_render_items, selectable_count
from .navigation import NO_SELECTION, move_selection, next_selectable, reseek_near, scroll_into_view
from .sections import DEFAULT_SECTIONS, OTHER_SECTION, SectionRule, SectionTable

__all__ = [
    "DEFAULT_SECTIONS",
    "Header",
    "Item",
    "NO_SELECTION",
    "OTHER_SECTION",
    "RenderItem",
    "SectionRule",
    "SectionTable",
    "build_render_items",
    "move_selection",
    "next_selectable",
    "reseek_near",
    "scroll_into_view",
    "selectable_count",
]
