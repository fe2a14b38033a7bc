"""Text fitting and box-drawing helpers shared by the renderers."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from millpane.surface import GridSurface

# Box drawing characters
BOX_TOP_LEFT = "┌"
BOX_TOP_RIGHT = "┐"
BOX_BOTTOM_LEFT = "└"
BOX_BOTTOM_RIGHT = "┘"
BOX_HORIZONTAL = "─"
BOX_VERTICAL = "│"
BOX_TEE_DOWN = "┬"
BOX_TEE_UP = "┴"

TRUNCATION_MARKER = "~"
TAB_REPLACEMENT = "  "


def fit(width: int, text: str) -> str:
    """Return ``text`` padded or truncated to exactly ``width`` cells.

    Text longer than ``width`` keeps its first ``width - 1`` characters and
    ends with :data:`TRUNCATION_MARKER`.

    Raises:
        ValueError: If ``width`` is not a positive integer.
    """
    if not isinstance(width, int) or width <= 0:
        raise ValueError(f"width must be a positive integer, not {width!r}")
    space = width - len(text)
    if space < 0:
        return text[: width - 1] + TRUNCATION_MARKER
    return text + " " * space


def expand_tabs(line: str) -> str:
    """Replace each tab with two spaces, as the preview shows them."""
    return line.replace("\t", TAB_REPLACEMENT)


def truncate_end(text: str, max_width: int) -> str:
    """Keep the last ``max_width`` characters of ``text``."""
    if max_width <= 0:
        return ""
    if len(text) <= max_width:
        return text
    return text[-max_width:]


def draw_frame(
    surface: "GridSurface",
    origin_y: int,
    origin_x: int,
    height: int,
    width: int,
) -> None:
    """Draw a rectangular box-drawing frame."""
    if height < 2 or width < 2:
        return

    top = origin_y
    bottom = origin_y + height - 1
    left = origin_x
    right = origin_x + width - 1

    surface.set_text(left, top, BOX_TOP_LEFT + BOX_HORIZONTAL * (width - 2) + BOX_TOP_RIGHT)
    surface.set_text(left, bottom, BOX_BOTTOM_LEFT + BOX_HORIZONTAL * (width - 2) + BOX_BOTTOM_RIGHT)
    surface.fill(left, top + 1, 1, height - 2, BOX_VERTICAL)
    surface.fill(right, top + 1, 1, height - 2, BOX_VERTICAL)


def draw_frame_title(
    surface: "GridSurface",
    origin_y: int,
    origin_x: int,
    width: int,
    title: str,
) -> None:
    """Overlay a title along the top border of a frame."""
    available = max(width - 2, 0)
    if available <= 0:
        return
    surface.set_text(origin_x + 1, origin_y, truncate_end(title, available))


def column_rule(widths: list[int], tee: str) -> str:
    """Build a horizontal border line with a ``tee`` between each column."""
    return tee.join(BOX_HORIZONTAL * width for width in widths)


__all__ = [
    "BOX_TOP_LEFT",
    "BOX_TOP_RIGHT",
    "BOX_BOTTOM_LEFT",
    "BOX_BOTTOM_RIGHT",
    "BOX_HORIZONTAL",
    "BOX_VERTICAL",
    "BOX_TEE_DOWN",
    "BOX_TEE_UP",
    "TRUNCATION_MARKER",
    "column_rule",
    "draw_frame",
    "draw_frame_title",
    "expand_tabs",
    "fit",
    "truncate_end",
]
