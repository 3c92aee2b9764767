"""UI theme definitions and selection helpers.

Themes are ANSI palettes for the menu chrome, section headers, and the
selected row. ``PLAIN_THEME`` is used when color is disabled; it still marks
the selected row with reverse video, which is an attribute rather than a color.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class UITheme:
    """Semantic ANSI palette used by renderers."""

    name: str
    reset: str
    reverse: str
    title_bar: str
    divider: str
    section_header: str
    item_id: str
    filter_query: str
    filter_hint: str
    status: str
    footer: str


DEFAULT_THEME = UITheme(
    name="default",
    reset="\033[0m",
    reverse="\033[7m",
    title_bar="\033[1;7m",
    divider="\033[2m",
    section_header="\033[1;38;5;81m",
    item_id="\033[38;5;229m",
    filter_query="\033[1;38;5;81m",
    filter_hint="\033[2;38;5;250m",
    status="\033[38;5;214m",
    footer="\033[2;38;5;250m",
)

OCEAN_THEME = UITheme(
    name="ocean",
    reset="\033[0m",
    reverse="\033[7m",
    title_bar="\033[1;38;5;255;48;5;24m",
    divider="\033[2;38;5;31m",
    section_header="\033[1;38;5;45m",
    item_id="\033[38;5;153m",
    filter_query="\033[1;38;5;45m",
    filter_hint="\033[2;38;5;110m",
    status="\033[38;5;215m",
    footer="\033[2;38;5;110m",
)

PLAIN_THEME = UITheme(
    name="plain",
    reset="\033[0m",
    reverse="\033[7m",
    title_bar="",
    divider="",
    section_header="",
    item_id="",
    filter_query="",
    filter_hint="",
    status="",
    footer="",
)

_THEMES: dict[str, UITheme] = {
    DEFAULT_THEME.name: DEFAULT_THEME,
    OCEAN_THEME.name: OCEAN_THEME,
}


def available_theme_names() -> tuple[str, ...]:
    """Return selectable non-plain theme names."""
    return tuple(sorted(_THEMES.keys()))


def normalize_theme_name(name: str | None) -> str:
    """Return a valid theme name, falling back to default."""
    if not name:
        return DEFAULT_THEME.name
    candidate = str(name).strip().lower()
    if candidate in _THEMES:
        return candidate
    return DEFAULT_THEME.name


def resolve_theme(name: str | None, *, no_color: bool = False) -> UITheme:
    """Return concrete theme for requested name and color mode."""
    if no_color:
        return PLAIN_THEME
    return _THEMES[normalize_theme_name(name)]


__all__ = [
    "UITheme",
    "DEFAULT_THEME",
    "OCEAN_THEME",
    "PLAIN_THEME",
    "available_theme_names",
    "normalize_theme_name",
    "resolve_theme",
]
