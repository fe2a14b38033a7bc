"""Turn the column state into characters on the screen, redrawing as little as possible.

A full paint happens only at start-up, after a resize and after a full-screen
hand-off.  Every other state change goes through :meth:`Renderer.update`,
which compares a snapshot taken before the change with the state after it and
picks the cheapest correct redraw for each column:

* a cursor move inside the visible rows patches two rows;
* a one-row scroll copies the visible block by one row and patches the rows
  that changed;
* a removed row in a column shorter than the viewport copies the rows below
  it up by one;
* appended or renamed rows are drawn on their own;
* anything else repaints the column.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from millpane.colors import ColorPair, get_entry_color
from millpane.entry_types import DEFAULT_SCRIPT_EXTENSION
from millpane.help_text import HELP_STRING
from millpane.layout import Layout
from millpane.render_utils import (
    BOX_TEE_DOWN,
    BOX_TEE_UP,
    BOX_VERTICAL,
    column_rule,
    fit,
    truncate_end,
)
from millpane.state import Column, PreviewKind, UIState
from millpane.surface import GridSurface

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ColumnSnapshot:
    rows: Tuple[str, ...]
    scroll_offset: int

    @classmethod
    def capture(cls, column: Column) -> "ColumnSnapshot":
        return cls(tuple(column.rows), column.scroll_offset)


@dataclass(frozen=True)
class ViewSnapshot:
    """The parts of :class:`UIState` that determine what is on screen."""

    current_directory: str
    parent_label: str
    cursor_index: Optional[int]
    left: ColumnSnapshot
    mid: ColumnSnapshot
    right: ColumnSnapshot
    preview: Tuple[PreviewKind, Optional[str], Tuple[str, ...]]

    @classmethod
    def capture(cls, state: UIState) -> "ViewSnapshot":
        return cls(
            current_directory=state.nav.current_directory,
            parent_label=state.nav.parent_label,
            cursor_index=state.nav.cursor_index,
            left=ColumnSnapshot.capture(state.left),
            mid=ColumnSnapshot.capture(state.mid),
            right=ColumnSnapshot.capture(state.right),
            preview=(state.preview.kind, state.preview.path, tuple(state.preview.lines)),
        )


def removed_index(before: Tuple[str, ...], after: Tuple[str, ...]) -> Optional[int]:
    """Return the 1-based index whose removal turns ``before`` into ``after``."""
    if len(before) != len(after) + 1:
        return None
    for position, name in enumerate(after):
        if before[position] != name:
            return position + 1 if before[position + 1 :] == after[position:] else None
    return len(before)


def replaced_index(before: Tuple[str, ...], after: Tuple[str, ...]) -> Optional[int]:
    """Return the single 1-based index at which two equal-length listings differ."""
    if len(before) != len(after):
        return None
    changed = [position for position, pair in enumerate(zip(before, after), start=1) if pair[0] != pair[1]]
    return changed[0] if len(changed) == 1 else None


class Renderer:
    """Issue draw calls for a :class:`UIState` onto a :class:`GridSurface`."""

    def __init__(
        self,
        surface: GridSurface,
        layout: Layout,
        script_extension: str = DEFAULT_SCRIPT_EXTENSION,
    ) -> None:
        self.surface = surface
        self.layout = layout
        self.script_extension = script_extension
        self._pen: Optional[Tuple[ColorPair, bool]] = None

    # Pen ---------------------------------------------------------------

    def _use(self, color: ColorPair, inverted: bool = False) -> None:
        """Switch colors only when they differ from the last ones issued."""
        pen = (color, inverted)
        if pen != self._pen:
            self.surface.set_color(color, inverted)
            self._pen = pen

    def forget_pen(self) -> None:
        """Drop the cached color, e.g. after someone else drew on the surface."""
        self._pen = None

    # Full paint ----------------------------------------------------------

    def render_full(self, state: UIState, status: Optional[str] = None) -> None:
        layout = self.layout
        self.forget_pen()
        self._use(ColorPair.DEFAULT)
        self.surface.fill(0, 0, layout.width, layout.height, " ")
        if layout.outlines:
            self.draw_outlines()
        self.draw_path(state.nav.current_directory)
        self.draw_left(state)
        self.draw_mid(state)
        self.draw_preview(state)
        self.draw_help()
        if status:
            self.draw_status(status)

    def draw_outlines(self) -> None:
        layout = self.layout
        widths = [layout.left_width, layout.mid_width, layout.right_width]
        self._use(ColorPair.BORDER)
        self.surface.set_text(0, layout.top, column_rule(widths, BOX_TEE_DOWN))
        self.surface.set_text(0, layout.bottom, column_rule(widths, BOX_TEE_UP))
        for x in layout.separators:
            self.surface.fill(x, layout.first_row, 1, layout.viewport_height, BOX_VERTICAL)

    def draw_path(self, current_directory: str) -> None:
        layout = self.layout
        self._use(ColorPair.CURRENT_DIRECTORY)
        self.surface.set_text(0, layout.path_row, fit(layout.width, truncate_end(current_directory, layout.width)))

    def draw_help(self) -> None:
        layout = self.layout
        self._use(ColorPair.BORDER)
        self.surface.set_text(0, layout.help_row, fit(layout.width, HELP_STRING))

    def draw_status(self, text: str) -> None:
        layout = self.layout
        self._use(ColorPair.STATUS)
        self.surface.set_text(0, layout.status_row, fit(layout.width, text))

    def clear_status(self) -> None:
        layout = self.layout
        self._use(ColorPair.DEFAULT)
        self.surface.fill(0, layout.status_row, layout.width, 1, " ")

    def draw_prompt(self, prompt: str, text: str) -> Tuple[int, int]:
        """Draw an input line on the status row and return the cursor cell."""
        layout = self.layout
        line = prompt + text
        visible = truncate_end(line, layout.width - 1)
        self._use(ColorPair.STATUS)
        self.surface.set_text(0, layout.status_row, fit(layout.width, visible))
        return (len(visible), layout.status_row)

    # Rows and columns ----------------------------------------------------

    def draw_row(self, column: Column, index: int, inverted: bool = False) -> None:
        """Redraw one entry; rows scrolled out of view are skipped."""
        if not column.is_visible(index):
            return
        name = column.row(index)
        self._use(get_entry_color(name, self.script_extension), inverted)
        self.surface.set_text(column.x, self.layout.row_y(column, index), fit(column.inner_width, " " + name))

    def blank_rows(self, column: Column, first_y: int, count: int) -> None:
        if count <= 0:
            return
        self._use(ColorPair.DEFAULT)
        self.surface.fill(column.x, first_y, column.inner_width, count, " ")

    def draw_column(self, column: Column) -> None:
        """Repaint every visible row of ``column``, batching runs of one color."""
        self.blank_rows(column, self.layout.first_row, self.layout.viewport_height)
        for index, _ in column.visible_rows():
            self.draw_row(column, index)

    def draw_left(self, state: UIState) -> None:
        self.draw_column(state.left)
        index = state.left.index_of(state.nav.parent_label)
        if index is not None:
            self.draw_row(state.left, index, inverted=True)

    def draw_mid(self, state: UIState) -> None:
        self.draw_column(state.mid)
        if state.nav.cursor_index is not None:
            self.draw_row(state.mid, state.nav.cursor_index, inverted=True)

    def draw_preview(self, state: UIState) -> None:
        right = state.right
        preview = state.preview
        if preview.kind is PreviewKind.DIRECTORY:
            self.draw_column(right)
            return
        self.blank_rows(right, self.layout.first_row, self.layout.viewport_height)
        if preview.kind is PreviewKind.TEXT and right.inner_width > 1:
            self._use(ColorPair.PLAIN)
            for offset, line in enumerate(preview.lines[: self.layout.viewport_height]):
                self.surface.set_text(
                    right.x, self.layout.first_row + offset, " " + fit(right.inner_width - 1, line)
                )

    # Incremental update --------------------------------------------------

    def update(self, before: ViewSnapshot, state: UIState) -> ViewSnapshot:
        """Redraw what changed between ``before`` and ``state``."""
        after = ViewSnapshot.capture(state)
        if after == before:
            return after
        if after.current_directory != before.current_directory:
            self.draw_path(state.nav.current_directory)
        if after.left != before.left or after.parent_label != before.parent_label:
            self.draw_left(state)
        self._update_mid(before, after, state)
        if after.preview != before.preview or after.right != before.right:
            self.draw_preview(state)
        return after

    def _update_mid(self, before: ViewSnapshot, after: ViewSnapshot, state: UIState) -> None:
        mid = state.mid
        old, new = before.mid, after.mid
        old_cursor, new_cursor = before.cursor_index, after.cursor_index

        if old.rows == new.rows:
            shift = new.scroll_offset - old.scroll_offset
            if shift == 0:
                if old_cursor != new_cursor:
                    self._patch_cursor(mid, old_cursor, new_cursor)
            elif abs(shift) == 1 and len(new.rows) > mid.viewport_height:
                self._scroll_one(mid, shift, old_cursor, new_cursor)
            else:
                self.draw_mid(state)
            return

        if old.scroll_offset == new.scroll_offset:
            removed = removed_index(old.rows, new.rows)
            if removed is not None and len(new.rows) < mid.viewport_height:
                self._close_gap(mid, removed, len(old.rows), new_cursor)
                return
            if len(new.rows) > len(old.rows) and new.rows[: len(old.rows)] == old.rows:
                for index in range(len(old.rows) + 1, len(new.rows) + 1):
                    self.draw_row(mid, index, inverted=index == new_cursor)
                if old_cursor != new_cursor:
                    if old_cursor is not None:
                        self.draw_row(mid, old_cursor)
                    if new_cursor is not None and new_cursor <= len(old.rows):
                        self.draw_row(mid, new_cursor, inverted=True)
                return
            replaced = replaced_index(old.rows, new.rows)
            if replaced is not None:
                self.draw_row(mid, replaced, inverted=replaced == new_cursor)
                if old_cursor != new_cursor:
                    self._patch_cursor(mid, old_cursor, new_cursor)
                return
        self.draw_mid(state)

    def _patch_cursor(self, mid: Column, old_cursor: Optional[int], new_cursor: Optional[int]) -> None:
        if old_cursor == new_cursor:
            return
        if old_cursor is not None and old_cursor <= mid.row_count:
            self.draw_row(mid, old_cursor)
        if new_cursor is not None:
            self.draw_row(mid, new_cursor, inverted=True)

    def _scroll_one(
        self, mid: Column, shift: int, old_cursor: Optional[int], new_cursor: Optional[int]
    ) -> None:
        """Move the visible block by one row and patch the exposed row and the cursor."""
        layout = self.layout
        height = layout.viewport_height - 1
        if shift > 0:
            self.surface.copy(mid.x, layout.first_row + 1, mid.inner_width, height, 0, -1)
            exposed = mid.scroll_offset + layout.viewport_height
        else:
            self.surface.copy(mid.x, layout.first_row, mid.inner_width, height, 0, 1)
            exposed = mid.scroll_offset + 1
        self.draw_row(mid, exposed, inverted=exposed == new_cursor)
        if old_cursor is not None and old_cursor != new_cursor and old_cursor != exposed:
            self.draw_row(mid, old_cursor)
        if new_cursor is not None and new_cursor != exposed:
            self.draw_row(mid, new_cursor, inverted=True)

    def _close_gap(self, mid: Column, removed: int, old_count: int, new_cursor: Optional[int]) -> None:
        """Shift the rows below a removed entry up by one and blank the freed line."""
        layout = self.layout
        removed_y = layout.row_y(mid, removed)
        last_y = layout.row_y(mid, old_count)
        below = last_y - removed_y
        if below > 0:
            self.surface.copy(mid.x, removed_y + 1, mid.inner_width, below, 0, -1)
        self.blank_rows(mid, last_y, 1)
        if new_cursor is not None:
            self.draw_row(mid, new_cursor, inverted=True)


def render_too_small(surface: GridSurface) -> None:
    """Replace the screen with a notice when the terminal cannot fit the columns."""
    surface.set_color(ColorPair.DEFAULT)
    surface.fill(0, 0, surface.width, surface.height, " ")
    surface.set_text(0, 0, "Terminal too small for browser.")


__all__ = [
    "ColumnSnapshot",
    "Renderer",
    "ViewSnapshot",
    "removed_index",
    "render_too_small",
    "replaced_index",
]
