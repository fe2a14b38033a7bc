"""Screen geometry for the three columns."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from millpane.state import Column, UIState

# Terminal size limits
MIN_TERMINAL_HEIGHT = 7
MIN_TERMINAL_WIDTH = 24

# Column ratios: the left column gets a sixth of the width, the middle a third
LEFT_RATIO = 6
MID_RATIO = 3

# Rows below the column area: lower border, status line, help line
FOOTER_HEIGHT = 3

LEFT = "left"
MID = "mid"
RIGHT = "right"


class LayoutError(Exception):
    """Raised when the terminal is too small for the column layout."""


@dataclass(frozen=True)
class Layout:
    width: int
    height: int
    outlines: bool
    top: int
    bottom: int
    left_x: int
    left_width: int
    mid_x: int
    mid_width: int
    right_x: int
    right_width: int

    path_row: int = 0

    @property
    def status_row(self) -> int:
        return self.height - 2

    @property
    def help_row(self) -> int:
        return self.height - 1

    @property
    def first_row(self) -> int:
        """Screen row of the first visible entry."""
        return self.top + 1

    @property
    def viewport_height(self) -> int:
        return self.bottom - self.top - 1

    @property
    def separators(self) -> tuple[int, int]:
        return (self.left_x + self.left_width, self.mid_x + self.mid_width)

    def row_y(self, column: Column, index: int) -> int:
        """Screen row of the 1-based ``index`` in ``column``."""
        return self.first_row + index - 1 - column.scroll_offset

    def row_at(self, y: int) -> Optional[int]:
        """Visible row number (1-based) under screen row ``y``."""
        if self.first_row <= y < self.bottom:
            return y - self.top
        return None

    def column_at(self, x: int) -> str:
        left_edge, mid_edge = self.separators
        if x < left_edge:
            return LEFT
        if x < mid_edge:
            return MID
        return RIGHT


def compute_layout(width: int, height: int, outlines: bool = True) -> Layout:
    """Split a ``width`` x ``height`` screen into path row, columns and footer."""
    if width < MIN_TERMINAL_WIDTH or height < MIN_TERMINAL_HEIGHT:
        raise LayoutError(f"Terminal too small ({width}x{height}) for browser.")
    left_width = width // LEFT_RATIO
    mid_width = width // MID_RATIO
    mid_x = left_width + 1
    right_x = mid_x + mid_width + 1
    return Layout(
        width=width,
        height=height,
        outlines=outlines,
        top=1 if outlines else 0,
        bottom=height - FOOTER_HEIGHT,
        left_x=0,
        left_width=left_width,
        mid_x=mid_x,
        mid_width=mid_width,
        right_x=right_x,
        right_width=width - right_x,
    )


def apply_layout(state: UIState, layout: Layout) -> None:
    """Push the geometry into the columns and re-clamp their scroll offsets."""
    viewport = layout.viewport_height
    state.left.set_geometry(layout.left_x, layout.left_width, viewport)
    state.mid.set_geometry(layout.mid_x, layout.mid_width, viewport)
    state.right.set_geometry(layout.right_x, layout.right_width, viewport)
    if state.nav.cursor_index is not None:
        state.mid.ensure_visible(state.nav.cursor_index)
    parent_index = state.left.index_of(state.nav.parent_label)
    if parent_index is not None:
        state.left.ensure_visible(parent_index)


__all__ = [
    "LEFT",
    "MID",
    "RIGHT",
    "Layout",
    "LayoutError",
    "MIN_TERMINAL_HEIGHT",
    "MIN_TERMINAL_WIDTH",
    "apply_layout",
    "compute_layout",
]
