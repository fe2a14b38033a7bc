"""Fill the right-hand column for the current selection."""

from __future__ import annotations

import logging
from itertools import islice
from typing import Optional

from millpane.entry_types import DEFAULT_SCRIPT_EXTENSION, EntryKind, classify
from millpane.filesystem import Filesystem, FilesystemError, join
from millpane.render_utils import expand_tabs
from millpane.state import Preview, PreviewKind, UIState

logger = logging.getLogger(__name__)


class PreviewGenerator:
    """Build the preview: a child listing for directories, the first lines of files."""

    def __init__(self, filesystem: Filesystem, script_extension: str = DEFAULT_SCRIPT_EXTENSION) -> None:
        self.filesystem = filesystem
        self.script_extension = script_extension

    def refresh(self, state: UIState) -> Optional[str]:
        """Regenerate the preview for ``state.selection``.

        Returns:
            None on success (including "nothing selected"), otherwise the
            error message to show on the status line.  On error the right
            column is left blank.
        """
        right = state.right
        right.scroll_offset = 0
        selection = state.selection
        if selection is None:
            right.set_rows([])
            state.preview = Preview()
            return None

        path = join(state.nav.current_directory, selection)
        if classify(selection, self.script_extension) is EntryKind.DIRECTORY:
            try:
                children = self.filesystem.list(path)
            except FilesystemError as err:
                return self._fail(state, str(err))
            right.set_rows(children)
            state.preview = Preview(PreviewKind.DIRECTORY, path)
            return None

        try:
            with self.filesystem.open_text(path) as handle:
                lines = [
                    expand_tabs(line.rstrip("\r\n"))
                    for line in islice(handle, right.viewport_height)
                ]
        except FilesystemError as err:
            return self._fail(state, str(err))
        except OSError as err:
            return self._fail(state, f"{path}: {err.strerror or err}")
        right.set_rows([])
        state.preview = Preview(PreviewKind.TEXT, path, lines)
        return None

    @staticmethod
    def _fail(state: UIState, message: str) -> str:
        logger.warning("Preview failed: %s", message)
        state.right.set_rows([])
        state.preview = Preview()
        return message


__all__ = ["PreviewGenerator"]
