"""Color management for the column browser."""

from __future__ import annotations

import curses
from enum import IntEnum
from typing import Mapping

from millpane.entry_types import DEFAULT_SCRIPT_EXTENSION, EntryKind, classify


class ColorPair(IntEnum):
    """Color pair constants for curses, one per screen role."""
    DEFAULT = 0
    DIRECTORY = 1
    SCRIPT = 2
    PLAIN = 3
    BORDER = 4
    CURRENT_DIRECTORY = 5
    STATUS = 6


GRAY = 8

COLOR_NAME_TO_CURSES = {
    "black": curses.COLOR_BLACK,
    "red": curses.COLOR_RED,
    "green": curses.COLOR_GREEN,
    "yellow": curses.COLOR_YELLOW,
    "blue": curses.COLOR_BLUE,
    "magenta": curses.COLOR_MAGENTA,
    "cyan": curses.COLOR_CYAN,
    "white": curses.COLOR_WHITE,
    "gray": GRAY,
    "grey": GRAY,
    "default": -1,
}

ROLE_BY_CONFIG_KEY = {
    "directory": ColorPair.DIRECTORY,
    "script": ColorPair.SCRIPT,
    "plain": ColorPair.PLAIN,
    "border": ColorPair.BORDER,
    "current_directory": ColorPair.CURRENT_DIRECTORY,
    "status": ColorPair.STATUS,
}

COLOR_BY_KIND = {
    EntryKind.DIRECTORY: ColorPair.DIRECTORY,
    EntryKind.SCRIPT: ColorPair.SCRIPT,
    EntryKind.PLAIN: ColorPair.PLAIN,
}


def resolve_color_number(name: str) -> int:
    """Translate a configured color name into a curses color number."""
    number = COLOR_NAME_TO_CURSES.get(name.lower(), curses.COLOR_WHITE)
    if number == GRAY and curses.COLORS <= GRAY:
        return curses.COLOR_WHITE
    return number


def init_colors(color_names: Mapping[str, str]) -> None:
    """Initialize curses color pairs.

    Call this after curses initialization and before rendering.
    """
    if not curses.has_colors():
        return

    curses.start_color()
    curses.use_default_colors()

    for key, role in ROLE_BY_CONFIG_KEY.items():
        curses.init_pair(role, resolve_color_number(color_names.get(key, "white")), -1)


def color_attr(role: ColorPair, inverted: bool = False) -> int:
    """Get the curses attribute for a color role."""
    attr = curses.A_NORMAL
    if curses.has_colors() and role is not ColorPair.DEFAULT:
        attr = curses.color_pair(role)
        if role is ColorPair.DIRECTORY:
            attr |= curses.A_BOLD
    if role is ColorPair.BORDER and not curses.has_colors():
        attr |= curses.A_DIM
    if inverted:
        attr |= curses.A_REVERSE
    return attr


def get_entry_color(name: str, script_extension: str = DEFAULT_SCRIPT_EXTENSION) -> ColorPair:
    """Get the color role for a listed entry name."""
    return COLOR_BY_KIND[classify(name, script_extension)]


__all__ = [
    "ColorPair",
    "COLOR_NAME_TO_CURSES",
    "init_colors",
    "color_attr",
    "get_entry_color",
    "resolve_color_number",
]
