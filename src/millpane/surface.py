"""Character-cell drawing surfaces.

:class:`GridSurface` keeps a shadow copy of every cell on screen.  That copy
is what makes rectangle copies (the one-row scroll optimisation) and the
stash/restore pair for full-screen hand-offs possible on a terminal, and it
lets the tests inspect exactly what was drawn.  :class:`CursesSurface` mirrors
every change to a curses window.
"""

from __future__ import annotations

import curses
import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from millpane.colors import ColorPair, color_attr

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Cell:
    char: str = " "
    color: ColorPair = ColorPair.DEFAULT
    inverted: bool = False


BLANK = Cell()

Grid = List[List[Cell]]


class GridSurface:
    """Fixed-size grid of cells with the drawing primitives the renderer needs."""

    def __init__(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        self.cells: Grid = self._blank_grid(width, height)
        self.color = ColorPair.DEFAULT
        self.inverted = False
        self.draw_calls = 0
        self.color_changes = 0
        self._stashed: Optional[Grid] = None

    @staticmethod
    def _blank_grid(width: int, height: int) -> Grid:
        return [[BLANK] * width for _ in range(height)]

    # Primitives -------------------------------------------------------

    def set_color(self, color: ColorPair, inverted: bool = False) -> None:
        self.color = color
        self.inverted = inverted
        self.color_changes += 1

    def fill(self, x: int, y: int, width: int, height: int, char: str = " ") -> None:
        """Fill a rectangle with ``char`` in the current color."""
        self.draw_calls += 1
        cell = Cell(char, self.color, self.inverted)
        for row in range(max(y, 0), min(y + height, self.height)):
            start, end = max(x, 0), min(x + width, self.width)
            if start >= end:
                continue
            for column in range(start, end):
                self.cells[row][column] = cell
            self._emit(start, row, end - start)

    def set_text(self, x: int, y: int, text: str) -> None:
        """Write ``text`` starting at ``(x, y)``, clipped at the right edge."""
        self.draw_calls += 1
        if not 0 <= y < self.height:
            return
        start = max(x, 0)
        text = text[start - x :]
        end = min(start + len(text), self.width)
        if start >= end:
            return
        for offset, column in enumerate(range(start, end)):
            self.cells[y][column] = Cell(text[offset], self.color, self.inverted)
        self._emit(start, y, end - start)

    def copy(self, x: int, y: int, width: int, height: int, dx: int, dy: int) -> None:
        """Copy the rectangle at ``(x, y)`` to ``(x + dx, y + dy)``."""
        self.draw_calls += 1
        source = [
            [self.cells[row][column] for column in range(max(x, 0), min(x + width, self.width))]
            for row in range(max(y, 0), min(y + height, self.height))
        ]
        for row_offset, cells in enumerate(source):
            target_y = max(y, 0) + row_offset + dy
            if not 0 <= target_y < self.height:
                continue
            touched: List[int] = []
            for column_offset, cell in enumerate(cells):
                target_x = max(x, 0) + column_offset + dx
                if 0 <= target_x < self.width:
                    self.cells[target_y][target_x] = cell
                    touched.append(target_x)
            if touched:
                self._emit(touched[0], target_y, len(touched))

    def stash(self) -> None:
        """Remember the whole screen so :meth:`restore` can bring it back."""
        self._stashed = [list(row) for row in self.cells]

    def restore(self) -> None:
        """Put back the screen saved by :meth:`stash`."""
        if self._stashed is None:
            return
        self.cells = self._stashed
        self._stashed = None
        self.repaint()

    def repaint(self) -> None:
        for row in range(self.height):
            self._emit(0, row, self.width)

    def resize(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        self.cells = self._blank_grid(width, height)
        self._stashed = None

    # Terminal hooks ----------------------------------------------------

    def _emit(self, x: int, y: int, length: int) -> None:
        """Push cells ``x .. x + length`` of row ``y`` to a real screen."""

    def flush(self) -> None:
        """Make everything drawn so far visible."""

    def suspend(self) -> None:
        """Hand the terminal to another program."""

    def resume(self) -> None:
        """Take the terminal back after :meth:`suspend`."""

    def place_cursor(self, x: int, y: int) -> None:
        """Show the text cursor at ``(x, y)``."""

    def hide_cursor(self) -> None:
        """Hide the text cursor."""

    def sync_size(self) -> None:
        """Adopt the terminal's current size."""

    # Inspection --------------------------------------------------------

    def row_text(self, y: int, x: int = 0, width: Optional[int] = None) -> str:
        end = self.width if width is None else min(x + width, self.width)
        return "".join(cell.char for cell in self.cells[y][x:end])

    def cell(self, x: int, y: int) -> Cell:
        return self.cells[y][x]

    def reset_counters(self) -> Tuple[int, int]:
        counts = (self.draw_calls, self.color_changes)
        self.draw_calls = 0
        self.color_changes = 0
        return counts


class CursesSurface(GridSurface):
    """Grid surface mirrored onto a curses window."""

    def __init__(self, window: "curses._CursesWindow") -> None:  # type: ignore[name-defined]
        self.window = window
        height, width = window.getmaxyx()
        super().__init__(width, height)

    def _emit(self, x: int, y: int, length: int) -> None:
        row = self.cells[y]
        run_start = x
        end = x + length
        while run_start < end:
            first = row[run_start]
            run_end = run_start + 1
            while (
                run_end < end
                and row[run_end].color == first.color
                and row[run_end].inverted == first.inverted
            ):
                run_end += 1
            text = "".join(cell.char for cell in row[run_start:run_end])
            try:
                self.window.addstr(y, run_start, text, color_attr(first.color, first.inverted))
            except curses.error:
                # Writing the bottom-right cell moves the cursor off screen
                pass
            run_start = run_end

    def flush(self) -> None:
        self.window.refresh()

    def suspend(self) -> None:
        curses.def_prog_mode()
        curses.endwin()

    def resume(self) -> None:
        curses.reset_prog_mode()
        self.window.clear()

    def place_cursor(self, x: int, y: int) -> None:
        try:
            curses.curs_set(1)
            self.window.move(y, min(x, self.width - 1))
        except curses.error:
            pass

    def hide_cursor(self) -> None:
        try:
            curses.curs_set(0)
        except curses.error:
            pass

    def sync_size(self) -> None:
        """Adopt the window's current size after a terminal resize."""
        height, width = self.window.getmaxyx()
        self.resize(width, height)
        self.window.clear()
        logger.debug("Surface resized to %dx%d", width, height)


__all__ = ["Cell", "CursesSurface", "GridSurface"]
