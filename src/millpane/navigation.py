"""Directory navigation: column shifts, refresh and cursor movement.

The three columns always describe the same neighbourhood of the tree: the
left column lists the parent of the current directory, the middle column the
current directory, and the right column whatever the selection previews.
Moving into or out of a directory shifts the listings sideways and only reads
the one listing that is new.

Every public method returns True when it changed the state and False when it
was a no-op, so callers know whether anything needs redrawing.
"""

from __future__ import annotations

import logging
from typing import Callable, List, Optional

from millpane.entry_types import DEFAULT_SCRIPT_EXTENSION, EntryKind, PATH_SEPARATOR, classify
from millpane.filesystem import (
    Filesystem,
    FilesystemError,
    is_root,
    join,
    parent,
    segments,
)
from millpane.state import Preview, PreviewKind, UIState

logger = logging.getLogger(__name__)

ROOT_ROW = PATH_SEPARATOR


def _ignore(message: str) -> None:
    return None


def parent_label(directory: str) -> str:
    """Name under which ``directory`` appears in its parent's listing."""
    parts = segments(directory)
    if not parts:
        return ROOT_ROW
    return parts[-1] + PATH_SEPARATOR


class Navigator:
    """Apply navigation transitions to a :class:`UIState`."""

    def __init__(
        self,
        state: UIState,
        filesystem: Filesystem,
        *,
        notify: Callable[[str], None] = _ignore,
        script_extension: str = DEFAULT_SCRIPT_EXTENSION,
    ) -> None:
        self.state = state
        self.filesystem = filesystem
        self.notify = notify
        self.script_extension = script_extension

    # Listings ------------------------------------------------------------

    def _list_parent_of(self, directory: str) -> List[str]:
        if is_root(directory):
            return [ROOT_ROW]
        return self.filesystem.list(parent(directory))

    def _follow_parent_label(self) -> None:
        index = self.state.left.index_of(self.state.nav.parent_label)
        if index is None:
            self.state.left.clamp_scroll()
        else:
            self.state.left.ensure_visible(index)

    def _follow_cursor(self) -> None:
        self.state.clamp_cursor()
        self.state.mid.clamp_scroll()
        if self.state.nav.cursor_index is not None:
            self.state.mid.ensure_visible(self.state.nav.cursor_index)

    # Transitions ---------------------------------------------------------

    def refresh(self) -> bool:
        """Re-list the parent and current directory and rebuild both columns."""
        state = self.state
        current = state.nav.current_directory
        try:
            mid_rows = self.filesystem.list(current)
            left_rows = self._list_parent_of(current)
        except FilesystemError as err:
            logger.warning("Refresh of %s failed: %s", current, err)
            self.notify(str(err))
            return False
        state.left.set_rows(left_rows)
        state.mid.set_rows(mid_rows)
        state.nav.parent_label = parent_label(current)
        self._follow_cursor()
        self._follow_parent_label()
        logger.debug("Refreshed %s (%d rows)", current, len(mid_rows))
        return True

    def change_directory(self, directory: str) -> bool:
        """Jump straight to ``directory`` with the cursor on its first row."""
        try:
            target = self.filesystem.resolve(directory)
        except FilesystemError as err:
            self.notify(str(err))
            return False
        nav = self.state.nav
        if target == nav.current_directory:
            return False
        if not self.filesystem.is_directory(target):
            self.notify(f"Not a directory: {target}")
            return False
        previous = (
            nav.current_directory,
            nav.cursor_index,
            self.state.mid.scroll_offset,
            self.state.left.scroll_offset,
        )
        nav.current_directory = target
        nav.cursor_index = 1
        self.state.mid.scroll_offset = 0
        self.state.left.scroll_offset = 0
        if not self.refresh():
            (
                nav.current_directory,
                nav.cursor_index,
                self.state.mid.scroll_offset,
                self.state.left.scroll_offset,
            ) = previous
            return False
        return True

    def enter_child(self) -> bool:
        """Descend into the selected directory, shifting the columns left.

        The old middle column becomes the left column, the preview listing
        (when it is already the selected directory's) becomes the middle
        column, and the cursor keeps its index clamped to the new listing.
        """
        state = self.state
        selection = state.selection
        if selection is None:
            return False
        if classify(selection, self.script_extension) is not EntryKind.DIRECTORY:
            return False
        target = join(state.nav.current_directory, selection)
        if not self.filesystem.is_directory(target):
            self.notify(f'"{selection}" is no longer a directory')
            return False

        preview = state.preview
        if preview.kind is PreviewKind.DIRECTORY and preview.path == target:
            children = list(state.right.rows)
        else:
            try:
                children = self.filesystem.list(target)
            except FilesystemError as err:
                self.notify(str(err))
                return False

        state.left.set_rows(state.mid.rows)
        state.left.scroll_offset = state.mid.scroll_offset
        state.mid.set_rows(children)
        state.mid.scroll_offset = 0
        state.right.set_rows([])
        state.right.scroll_offset = 0
        state.preview = Preview()

        state.nav.current_directory = target
        state.nav.parent_label = selection
        self._follow_cursor()
        self._follow_parent_label()
        logger.debug("Entered %s (%d rows)", target, len(children))
        return True

    def exit_to_parent(self) -> bool:
        """Ascend one level, shifting the columns right.

        The cursor lands on the directory that was just left.  When that name
        is missing from the parent listing (it changed behind our back) the
        listings are re-read once; if it is still missing the cursor falls
        back to the first row.
        """
        state = self.state
        current = state.nav.current_directory
        if is_root(current):
            self.notify("already at root")
            return False

        exited = parent_label(current)
        parent_directory = parent(current)
        try:
            left_rows = self._list_parent_of(parent_directory)
        except FilesystemError as err:
            logger.warning("Listing above %s failed: %s", parent_directory, err)
            self.notify(str(err))
            return False

        state.right.set_rows(state.mid.rows)
        state.right.scroll_offset = 0
        state.preview = Preview()
        state.mid.set_rows(state.left.rows)
        state.mid.scroll_offset = state.left.scroll_offset
        state.left.set_rows(left_rows)
        state.left.scroll_offset = 0

        state.nav.current_directory = parent_directory
        state.nav.parent_label = parent_label(parent_directory)

        index = state.mid.index_of(exited)
        if index is None:
            logger.warning("%s missing from %s listing, re-reading", exited, parent_directory)
            self.refresh()
            index = state.mid.index_of(exited)
        if index is None:
            self.notify(f'could not find "{exited}" in {parent_directory}')
            state.nav.cursor_index = 1
        else:
            state.nav.cursor_index = index
            state.preview = Preview(PreviewKind.DIRECTORY, current)
        self._follow_cursor()
        self._follow_parent_label()
        logger.debug("Left %s for %s (cursor %s)", current, parent_directory, state.nav.cursor_index)
        return True

    def select(self, index: int) -> bool:
        """Put the cursor on ``index`` (clamped) with minimal scrolling."""
        state = self.state
        if state.nav.cursor_index is None:
            return False
        target = max(1, min(index, state.mid.row_count))
        if target == state.nav.cursor_index:
            return False
        state.nav.cursor_index = target
        state.mid.ensure_visible(target)
        return True

    def move_cursor(self, delta: int) -> bool:
        if self.state.nav.cursor_index is None:
            return False
        return self.select(self.state.nav.cursor_index + delta)

    def select_name(self, entry: str) -> bool:
        index = self.state.mid.index_of(entry)
        if index is None:
            return False
        return self.select(index)

    def goto(self, search: str) -> bool:
        """Select the first row containing ``search``, ignoring case."""
        needle = search.upper()
        for index, entry in enumerate(self.state.mid.rows, start=1):
            if needle in entry.upper():
                self.select(index)
                return True
        self.notify(f'could not find file containing "{needle}"')
        return False

    def scroll(self, rows: int) -> bool:
        """Scroll the middle column without moving the cursor."""
        return self.state.mid.scroll_by(rows)

    # In-place edits --------------------------------------------------------

    def insert_entry(self, entry: str) -> bool:
        """Add a freshly created entry to the middle column and select it."""
        state = self.state
        index = state.mid.index_of(entry)
        if index is None:
            index = state.mid.append_row(entry)
        if state.nav.cursor_index is None:
            state.nav.cursor_index = index
            state.mid.ensure_visible(index)
            return True
        self.select(index)
        return True

    def rename_selected(self, entry: str) -> bool:
        state = self.state
        index = state.nav.cursor_index
        if index is None:
            return False
        state.mid.replace_row(index, entry)
        return True

    def remove_selected(self) -> bool:
        """Drop the selected row; ascend when that empties the directory."""
        state = self.state
        index = state.nav.cursor_index
        if index is None:
            return False
        removed = state.mid.remove_row(index)
        logger.debug("Removed %s from %s", removed, state.nav.current_directory)
        if not state.mid.rows:
            state.nav.cursor_index = None
            state.mid.scroll_offset = 0
            self.exit_to_parent()
            return True
        self._follow_cursor()
        return True

    def selected_path(self) -> Optional[str]:
        selection = self.state.selection
        if selection is None:
            return None
        return join(self.state.nav.current_directory, selection)


__all__ = ["Navigator", "ROOT_ROW", "parent_label"]
