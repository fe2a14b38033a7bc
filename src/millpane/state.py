"""Column, navigation and UI state models."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Optional, Tuple


class StateInvariantError(Exception):
    """Raised when an operation finds the column/cursor invariants broken."""


@dataclass
class Column:
    """One pane: its geometry, its listed rows and its scroll offset.

    Row indices handed to and returned from this class are 1-based, matching
    the cursor index of the navigation state.
    """

    x: int = 0
    inner_width: int = 1
    viewport_height: int = 1
    rows: List[str] = field(default_factory=list)
    scroll_offset: int = 0
    _positions: Dict[str, int] = field(default_factory=dict, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        self._reindex()

    def _reindex(self) -> None:
        self._positions = {}
        for position, name in enumerate(self.rows, start=1):
            self._positions.setdefault(name, position)

    def set_rows(self, rows: Iterable[str]) -> None:
        """Replace the rows wholesale.  The scroll offset is left alone."""
        self.rows = list(rows)
        self._reindex()

    def set_geometry(self, x: int, inner_width: int, viewport_height: int) -> None:
        self.x = x
        self.inner_width = inner_width
        self.viewport_height = viewport_height
        self.clamp_scroll()

    @property
    def row_count(self) -> int:
        return len(self.rows)

    def row(self, index: int) -> str:
        if not 1 <= index <= len(self.rows):
            raise IndexError(f"row {index} outside 1..{len(self.rows)}")
        return self.rows[index - 1]

    def index_of(self, name: str) -> Optional[int]:
        """Return the 1-based position of ``name``, or None when it is not listed."""
        return self._positions.get(name)

    def append_row(self, name: str) -> int:
        self.rows.append(name)
        self._positions.setdefault(name, len(self.rows))
        return len(self.rows)

    def remove_row(self, index: int) -> str:
        name = self.row(index)
        del self.rows[index - 1]
        self._reindex()
        return name

    def replace_row(self, index: int, name: str) -> None:
        self.row(index)
        self.rows[index - 1] = name
        self._reindex()

    @property
    def max_scroll_offset(self) -> int:
        return max(0, len(self.rows) - self.viewport_height)

    def clamp_scroll(self) -> None:
        self.scroll_offset = max(0, min(self.scroll_offset, self.max_scroll_offset))

    def visible_count(self) -> int:
        return max(0, min(len(self.rows) - self.scroll_offset, self.viewport_height))

    def visible_rows(self) -> List[Tuple[int, str]]:
        """Return ``(index, name)`` pairs for the rows currently on screen."""
        first = self.scroll_offset
        return [
            (first + offset + 1, name)
            for offset, name in enumerate(self.rows[first : first + self.visible_count()])
        ]

    def is_visible(self, index: int) -> bool:
        return self.scroll_offset < index <= self.scroll_offset + self.visible_count()

    def ensure_visible(self, cursor_index: int) -> int:
        """Scroll by exactly as many rows as needed to show ``cursor_index``.

        Returns:
            The signed change applied to the scroll offset.
        """
        before = self.scroll_offset
        if cursor_index <= self.scroll_offset:
            self.scroll_offset = max(0, cursor_index - 1)
        elif cursor_index - self.scroll_offset > self.viewport_height:
            self.scroll_offset = cursor_index - self.viewport_height
        self.clamp_scroll()
        return self.scroll_offset - before

    def scroll_by(self, rows: int) -> bool:
        """Shift the scroll offset by ``rows`` within bounds; report whether it moved."""
        if len(self.rows) <= self.viewport_height:
            return False
        before = self.scroll_offset
        self.scroll_offset = max(0, min(self.scroll_offset + rows, self.max_scroll_offset))
        return self.scroll_offset != before


class PreviewKind(Enum):
    NONE = "none"
    DIRECTORY = "directory"
    TEXT = "text"


@dataclass
class Preview:
    """What the right-hand column currently shows."""

    kind: PreviewKind = PreviewKind.NONE
    path: Optional[str] = None
    lines: List[str] = field(default_factory=list)


@dataclass
class NavigationState:
    current_directory: str
    cursor_index: Optional[int] = None
    parent_label: str = "/"


@dataclass
class UIState:
    """Everything the event loop mutates: three columns, navigation and clipboard."""

    nav: NavigationState
    left: Column = field(default_factory=Column)
    mid: Column = field(default_factory=Column)
    right: Column = field(default_factory=Column)
    preview: Preview = field(default_factory=Preview)
    clipboard: Optional[str] = None

    @property
    def columns(self) -> Tuple[Column, Column, Column]:
        return (self.left, self.mid, self.right)

    @property
    def selection(self) -> Optional[str]:
        """Return the highlighted mid-column entry, or None for an empty directory."""
        index = self.nav.cursor_index
        if index is None or not self.mid.rows:
            return None
        return self.mid.row(index)

    def require_selection(self) -> str:
        selection = self.selection
        if selection is None:
            raise StateInvariantError("operation requires a selected entry")
        return selection

    def clamp_cursor(self) -> None:
        """Pull the cursor back into ``1..rowCount`` (or clear it for an empty column)."""
        count = self.mid.row_count
        if count == 0:
            self.nav.cursor_index = None
        elif self.nav.cursor_index is None:
            self.nav.cursor_index = 1
        else:
            self.nav.cursor_index = max(1, min(self.nav.cursor_index, count))

    def check_invariants(self) -> None:
        """Raise :class:`StateInvariantError` when cursor or scroll state is out of range."""
        for name, column in (("left", self.left), ("mid", self.mid), ("right", self.right)):
            if not 0 <= column.scroll_offset <= column.max_scroll_offset:
                raise StateInvariantError(
                    f"{name} scroll offset {column.scroll_offset} outside 0..{column.max_scroll_offset}"
                )
        index = self.nav.cursor_index
        if self.mid.rows:
            if index is None or not 1 <= index <= self.mid.row_count:
                raise StateInvariantError(f"cursor {index} outside 1..{self.mid.row_count}")
        elif index is not None:
            raise StateInvariantError(f"cursor {index} set on an empty column")


__all__ = [
    "Column",
    "NavigationState",
    "Preview",
    "PreviewKind",
    "StateInvariantError",
    "UIState",
]
