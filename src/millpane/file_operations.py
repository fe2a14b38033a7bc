"""File operation methods for the column browser."""

from __future__ import annotations

import logging
import posixpath
from typing import Optional

from .entry_types import PATH_SEPARATOR, EntryKind, classify
from .executor import quote
from .filesystem import join, name, normalize

logger = logging.getLogger(__name__)


class FileOperationsMixin:
    """Mixin providing make, rename, yank/paste, edit, run, goto, shell and delete."""

    def _selection_or_notice(self) -> Optional[str]:
        selection = self.state.selection
        if selection is None:
            self._set_status("Nothing selected.")
        return selection

    def _run_command(self, command: str) -> bool:
        """Run ``command`` in the current directory, reporting a failure on the status line."""
        result = self.executor.execute(command, self.state.nav.current_directory)
        if not result.success:
            self._set_status(result.error or "Command failed.")
            return False
        return True

    # Creating and renaming ---------------------------------------------

    def _make_entry(self) -> None:
        answer = self._read_line("make file> ")
        if answer is None:
            self._set_status("cancelled make")
            return

        cwd = self.state.nav.current_directory
        target = join(cwd, answer)
        if answer.endswith(PATH_SEPARATOR):
            command = f"mkdir -p {quote(target)}"
        elif PATH_SEPARATOR in answer.strip(PATH_SEPARATOR):
            command = f"mkdir -p {quote(posixpath.dirname(target))} && touch {quote(target)}"
        else:
            command = f"touch {quote(target)}"
        if not self._run_command(command):
            return

        relative = posixpath.relpath(normalize(target), cwd)
        if relative in (".", "..") or relative.startswith(".." + PATH_SEPARATOR):
            # Created outside the current directory
            self._apply(self.navigator.refresh)
            return
        parts = relative.split(PATH_SEPARATOR)
        entry = parts[0]
        # touch on an existing directory succeeds and leaves it a directory
        if (
            len(parts) > 1
            or answer.endswith(PATH_SEPARATOR)
            or self.filesystem.is_directory(join(cwd, entry))
        ):
            entry += PATH_SEPARATOR
        self._apply(lambda: self.navigator.insert_entry(entry))

    def _rename_selected(self) -> None:
        selection = self._selection_or_notice()
        if selection is None:
            return
        answer = self._read_line(f'rename "{selection}" to> ')
        if answer is None or not answer.rstrip(PATH_SEPARATOR):
            self._set_status("cancelled rename")
            return
        new_name = answer.rstrip(PATH_SEPARATOR)
        if PATH_SEPARATOR in new_name:
            self._set_status(f'"{new_name}" is not a plain name')
            return

        is_directory = classify(selection, self.script_extension) is EntryKind.DIRECTORY
        entry = new_name + PATH_SEPARATOR if is_directory else new_name
        if entry == selection:
            return
        cwd = self.state.nav.current_directory
        # mv onto an existing directory would move the selection into it
        if (
            self.state.mid.index_of(new_name) is not None
            or self.state.mid.index_of(new_name + PATH_SEPARATOR) is not None
            or self.filesystem.exists(join(cwd, new_name))
        ):
            self._set_status(f'"{new_name}" already exists')
            return
        if not self._confirm(f'rename "{selection}" to "{new_name}" ?'):
            self._set_status("cancelled rename")
            return

        if not self._run_command(f"mv {quote(join(cwd, selection))} {quote(join(cwd, new_name))}"):
            return
        self._apply(lambda: self.navigator.rename_selected(entry))
        self._set_status("done renaming")

    # Clipboard ---------------------------------------------------------

    def _yank_selected(self) -> None:
        selection = self._selection_or_notice()
        if selection is None:
            return
        self.state.clipboard = self.navigator.selected_path()
        self._set_status(f'copied path of "{selection.rstrip(PATH_SEPARATOR)}"')

    def _paste(self) -> None:
        source = self.state.clipboard
        if source is None:
            self._set_status("nothing yanked")
            return
        source_name = name(source)
        answer = self._read_line(f'paste "{source_name}" to> ', source_name)
        if answer is None:
            self._set_status("cancelled paste")
            return

        target_name = answer.rstrip(PATH_SEPARATOR)
        listed = self.state.mid.index_of(target_name) is not None or (
            self.state.mid.index_of(target_name + PATH_SEPARATOR) is not None
        )
        if listed and not self._confirm(f'overwrite "{target_name}" ?'):
            self._set_status("cancelled paste")
            return

        target = join(self.state.nav.current_directory, answer)
        if not self._run_command(f"cp -r {quote(source)} {quote(target)}"):
            return

        def refresh_and_select() -> bool:
            changed = self.navigator.refresh()
            return self.navigator.select_name(target_name) or self.navigator.select_name(
                target_name + PATH_SEPARATOR
            ) or changed

        self._apply(refresh_and_select, force_preview=True)

    # External programs -------------------------------------------------

    def _edit_selected(self) -> None:
        selection = self._selection_or_notice()
        if selection is None:
            return
        path = self.navigator.selected_path()
        self._hand_off(f"{self.editor_command} {quote(path)}", pause=False)
        self._apply(lambda: False, force_preview=True)

    def _script_command(self, path: str) -> str:
        if self.interpreter:
            return f"{self.interpreter} {quote(path)}"
        return quote(path)

    def _run_script(self, arguments: str = "") -> None:
        path = self.navigator.selected_path()
        if path is None:
            self._set_status("Nothing selected.")
            return
        command = self._script_command(path)
        if arguments:
            command = f"{command} {arguments}"
        self._hand_off(command, pause=True)
        # The script may have changed the directory contents
        self._apply(self.navigator.refresh, force_preview=True)

    def _run_with_args(self) -> None:
        selection = self._selection_or_notice()
        if selection is None:
            return
        if classify(selection, self.script_extension) is not EntryKind.SCRIPT:
            self._set_status(f'"{selection}" is not a .{self.script_extension} script')
            return
        arguments = self._read_line(f'run "{selection}" with arguments> ', allow_empty=True)
        if arguments is None:
            self._set_status("cancelled run")
            return
        self._run_script(arguments)

    def _shell_command(self) -> None:
        cwd = self.state.nav.current_directory
        command = self._read_line(f"{cwd} # ")
        if command is None:
            self._set_status("cancelled shell command")
            return
        self._hand_off(command, pause=True)
        self._apply(self.navigator.refresh, force_preview=True)

    # Navigation commands -----------------------------------------------

    def _jump_home(self) -> None:
        self._apply(lambda: self.navigator.change_directory(self.home_directory))

    def _goto(self) -> None:
        search = self._read_line("goto> ")
        if search is None:
            self._set_status("cancelled goto")
            return
        self._apply(lambda: self.navigator.goto(search))

    # Deleting ----------------------------------------------------------

    def _delete_selected(self) -> None:
        selection = self._selection_or_notice()
        if selection is None:
            return
        if classify(selection, self.script_extension) is EntryKind.DIRECTORY:
            query = f'recursively delete directory!? "{selection}" ?'
        else:
            query = f'delete "{selection}" ?'
        if not self._confirm(query):
            self._set_status("cancelled delete")
            return
        if not self._run_command(f"rm -r {quote(self.navigator.selected_path())}"):
            return
        logger.debug("Deleted %s", selection)
        self._apply(self.navigator.remove_selected)


__all__ = ["FileOperationsMixin"]
