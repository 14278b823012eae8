"""UI theme definitions and selection helpers.

Themes are ANSI palettes for the panes and popups. Preview highlighting is
styled separately by pygments.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class UITheme:
    """Semantic ANSI palette used by renderers."""

    name: str
    border: str
    border_active: str
    title: str
    reset: str
    selected: str
    saved_badge: str
    not_saved_badge: str
    dim: str
    status: str
    status_error: str
    popup_border: str
    popup_title: str
    input_text: str
    help_key: str


DEFAULT_THEME = UITheme(
    name="default",
    border="\033[2m",
    border_active="\033[1;38;5;81m",
    title="\033[1m",
    reset="\033[0m",
    selected="\033[48;5;229;38;5;16m",
    saved_badge="\033[38;5;42m",
    not_saved_badge="\033[38;5;214m",
    dim="\033[2;38;5;250m",
    status="\033[7m",
    status_error="\033[1;37;41m",
    popup_border="\033[38;5;45m",
    popup_title="\033[1;38;5;45m",
    input_text="\033[1;38;5;81m",
    help_key="\033[38;5;229m",
)

OCEAN_THEME = UITheme(
    name="ocean",
    border="\033[2;38;5;31m",
    border_active="\033[1;38;5;45m",
    title="\033[1;38;5;153m",
    reset="\033[0m",
    selected="\033[48;5;24;38;5;231m",
    saved_badge="\033[38;5;84m",
    not_saved_badge="\033[38;5;215m",
    dim="\033[2;38;5;110m",
    status="\033[48;5;24;38;5;231m",
    status_error="\033[1;37;41m",
    popup_border="\033[38;5;39m",
    popup_title="\033[1;38;5;39m",
    input_text="\033[1;38;5;45m",
    help_key="\033[38;5;153m",
)

PLAIN_THEME = UITheme(
    name="plain",
    border="",
    border_active="",
    title="",
    reset="",
    selected="\033[7m",
    saved_badge="",
    not_saved_badge="",
    dim="",
    status="\033[7m",
    status_error="\033[7m",
    popup_border="",
    popup_title="",
    input_text="",
    help_key="",
)

_THEMES: dict[str, UITheme] = {
    DEFAULT_THEME.name: DEFAULT_THEME,
    OCEAN_THEME.name: OCEAN_THEME,
    PLAIN_THEME.name: PLAIN_THEME,
}


def available_theme_names() -> tuple[str, ...]:
    return tuple(sorted(_THEMES))


def resolve_theme(name: str | None) -> UITheme:
    """Return the named theme, falling back to the default for unknown names."""
    if not name:
        return DEFAULT_THEME
    return _THEMES.get(str(name).strip().lower(), DEFAULT_THEME)
