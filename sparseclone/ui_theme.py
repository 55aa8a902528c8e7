"""Menu theme definitions and selection helpers.

Themes are ANSI palettes for the folder picker and progress messages.
The ``plain`` theme carries empty codes and is used whenever colour is off.
"""

from __future__ import annotations

import os
from dataclasses import dataclass


@dataclass(frozen=True)
class MenuTheme:
    """Semantic ANSI palette used by menu renderers."""

    name: str
    reset: str
    heading: str
    key: str
    directory: str
    action: str
    notice: str
    error: str
    success: str

    def paint(self, slot: str, text: str) -> str:
        """Wrap ``text`` in the colour of ``slot`` (a field name)."""
        code = getattr(self, slot)
        if not code:
            return text
        return f"{code}{text}{self.reset}"


DEFAULT_THEME = MenuTheme(
    name="default",
    reset="\033[0m",
    heading="\033[1;38;5;81m",
    key="\033[38;5;229m",
    directory="\033[1;34m",
    action="\033[2;38;5;250m",
    notice="\033[38;5;214m",
    error="\033[1;31m",
    success="\033[38;5;42m",
)

OCEAN_THEME = MenuTheme(
    name="ocean",
    reset="\033[0m",
    heading="\033[1;38;5;45m",
    key="\033[38;5;153m",
    directory="\033[1;38;5;45m",
    action="\033[2;38;5;110m",
    notice="\033[38;5;221m",
    error="\033[1;38;5;203m",
    success="\033[38;5;79m",
)

PLAIN_THEME = MenuTheme(
    name="plain",
    reset="",
    heading="",
    key="",
    directory="",
    action="",
    notice="",
    error="",
    success="",
)

_THEMES = {theme.name: theme for theme in (DEFAULT_THEME, OCEAN_THEME, PLAIN_THEME)}


def available_theme_names() -> list[str]:
    return list(_THEMES)


def resolve_theme(name: str | None, *, no_color: bool = False, is_tty: bool = True) -> MenuTheme:
    """Pick a theme by name, falling back to ``default`` for unknown names.

    Colour is dropped entirely when ``no_color`` is set, output is not a tty,
    or the ``NO_COLOR`` environment variable is present.
    """
    if no_color or not is_tty or os.environ.get("NO_COLOR"):
        return PLAIN_THEME
    if name is None:
        return DEFAULT_THEME
    return _THEMES.get(name.strip().lower(), DEFAULT_THEME)
