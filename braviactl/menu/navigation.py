"""Cursor and viewport helpers over render items.

The cursor only ever rests on ``Item`` rows; ``Header`` rows are skipped.
``-1`` is the cursor value for a list without selectable rows.
"""

from __future__ import annotations

from collections.abc import Sequence

from .model import RenderItem, is_selectable

NO_SELECTION = -1
PAGE_SIZE = 10

UP = "up"
DOWN = "down"
PAGE_UP = "page_up"
PAGE_DOWN = "page_down"
HOME = "home"
END = "end"
MOVEMENTS = (UP, DOWN, PAGE_UP, PAGE_DOWN, HOME, END)


def next_selectable(items: Sequence[RenderItem], start: int, direction: int) -> int | None:
    """Return the first selectable index at or after ``start`` walking ``direction``.

    ``start`` is clamped into the list bounds. The scan stops at either end and
    returns ``None`` when no ``Item`` is found, including for empty lists.
    A zero ``direction`` is rejected with ``ValueError``.
    """
    if direction == 0:
        raise ValueError("direction must be non-zero")
    if not items:
        return None
    step = 1 if direction > 0 else -1
    idx = max(0, min(len(items) - 1, start))
    while 0 <= idx < len(items):
        if is_selectable(items[idx]):
            return idx
        idx += step
    return None


def movement_target(items: Sequence[RenderItem], selected: int, movement: str) -> tuple[int, int]:
    """Return ``(start, direction)`` for a movement relative to ``selected``."""
    if movement == UP:
        return selected - 1, -1
    if movement == DOWN:
        return selected + 1, 1
    if movement == PAGE_UP:
        return selected - PAGE_SIZE, -1
    if movement == PAGE_DOWN:
        return selected + PAGE_SIZE, 1
    if movement == HOME:
        return 0, 1
    if movement == END:
        return len(items) - 1, -1
    raise ValueError(f"unknown movement: {movement!r}")


def move_selection(items: Sequence[RenderItem], selected: int, movement: str) -> int:
    """Apply one movement; the cursor stays put when nothing is reachable."""
    start, direction = movement_target(items, selected, movement)
    target = next_selectable(items, start, direction)
    if target is None:
        return selected
    return target


def scroll_into_view(
    selected: int, scroll_offset: int, visible_rows: int, first_selectable: int = NO_SELECTION
) -> int:
    """Return a scroll offset that keeps ``selected`` inside the window.

    When ``selected`` is ``first_selectable`` and fits on the first page, the
    window snaps to the top so the leading header is shown too.
    """
    visible_rows = max(1, visible_rows)
    if selected < 0:
        return max(0, scroll_offset)
    if selected == first_selectable and selected < visible_rows:
        return 0
    if selected < scroll_offset:
        scroll_offset = selected
    elif selected >= scroll_offset + visible_rows:
        scroll_offset = selected - visible_rows + 1
    return max(0, scroll_offset)


def reseek_after_rebuild(items: Sequence[RenderItem]) -> int:
    found = next_selectable(items, 0, 1)
    return NO_SELECTION if found is None else found


def reseek_near(items: Sequence[RenderItem], previous: int) -> int:
    """Re-seek after a rebuild, preferring ``previous`` or the next row after it."""
    if not items:
        return NO_SELECTION
    if 0 <= previous < len(items) and is_selectable(items[previous]):
        return previous
    if previous >= 0:
        found = next_selectable(items, previous, 1)
        if found is not None:
            return found
    return reseek_after_rebuild(items)
