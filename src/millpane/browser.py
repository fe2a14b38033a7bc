"""Core column browser logic."""

from __future__ import annotations

import curses
import logging
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Union

from .colors import init_colors
from .config import (
    get_color_names,
    get_display_settings,
    get_editor_command,
    get_home_directory,
    get_script_settings,
    load_config,
)
from .events import (
    CursesEventSource,
    Event,
    EventSource,
    InterruptEvent,
    KeyEvent,
    ResizeEvent,
    ScrollEvent,
    TouchEvent,
)
from .executor import CommandExecutor, CommandResult, ShellExecutor
from .file_operations import FileOperationsMixin
from .filesystem import Filesystem, FilesystemError, LocalFilesystem
from .input_handlers import InputHandlersMixin
from .layout import Layout, LayoutError, apply_layout, compute_layout
from .navigation import Navigator
from .preview import PreviewGenerator
from .render import Renderer, ViewSnapshot, render_too_small
from .state import NavigationState, PreviewKind, UIState
from .surface import CursesSurface, GridSurface

logger = logging.getLogger(__name__)


class MillpaneError(Exception):
    """Raised when the column browser cannot start."""


class ColumnBrowser(InputHandlersMixin, FileOperationsMixin):
    """Browse a directory tree as parent, current and preview columns.

    This class owns the :class:`UIState` and the event loop, and delegates:
    - Navigator: column shifts, refresh and cursor movement
    - PreviewGenerator: the right-hand column
    - Renderer: incremental drawing
    - InputHandlersMixin: keys, clicks, wheel and prompts
    - FileOperationsMixin: commands that go through the executor
    """

    def __init__(
        self,
        start_directory: Union[Path, str],
        *,
        config: Optional[Dict[str, Any]] = None,
        filesystem: Optional[Filesystem] = None,
        executor: Optional[CommandExecutor] = None,
    ) -> None:
        self.config = config if config is not None else load_config()
        display = get_display_settings(self.config)
        scripts = get_script_settings(self.config)
        self.outlines: bool = display["outlines"]
        self.scroll_speed: int = display["scroll_speed"]
        self.script_extension: str = scripts["extension"]
        self.interpreter: str = scripts["interpreter"]
        self.editor_command: str = get_editor_command(self.config)
        self.home_directory: str = str(get_home_directory(self.config))

        self.filesystem: Filesystem = filesystem or LocalFilesystem()
        self.executor: CommandExecutor = executor or ShellExecutor()
        try:
            start = self.filesystem.resolve(str(start_directory))
        except FilesystemError as err:
            raise MillpaneError(str(err)) from err

        self.state = UIState(nav=NavigationState(current_directory=start, cursor_index=1))
        self.navigator = Navigator(
            self.state,
            self.filesystem,
            notify=self._set_status,
            script_extension=self.script_extension,
        )
        self.previewer = PreviewGenerator(self.filesystem, self.script_extension)

        self.surface: Optional[GridSurface] = None
        self.events: Optional[EventSource] = None
        self.renderer: Optional[Renderer] = None
        self.layout: Optional[Layout] = None
        self.status_message: Optional[str] = None
        self.running: bool = False

    # Lifecycle -----------------------------------------------------------

    def browse(self) -> Path:
        """Launch the curses UI and return the directory the user ended in."""
        try:
            return curses.wrapper(self._curses_main)
        except curses.error as err:
            raise MillpaneError("Failed to initialise curses UI.") from err

    def _curses_main(self, stdscr: "curses._CursesWindow") -> Path:  # type: ignore[name-defined]
        curses.curs_set(0)
        stdscr.nodelay(False)
        stdscr.keypad(True)
        init_colors(get_color_names(self.config))
        self.attach(CursesSurface(stdscr), CursesEventSource(stdscr))
        self.run()
        return Path(self.state.nav.current_directory)

    def attach(self, surface: GridSurface, events: EventSource) -> None:
        """Bind the browser to a screen and an input source and paint the first frame."""
        self.surface = surface
        self.events = events
        self._relayout()
        self.navigator.refresh()
        self._refresh_preview()
        self.redraw()

    def run(self) -> None:
        """Process events until the user quits."""
        if self.surface is None or self.events is None:
            raise MillpaneError("Browser is not attached to a screen.")
        self.running = True
        while self.running:
            self.surface.flush()
            event = self.events.next_event()
            self._clear_status()
            self.handle_event(event)
        logger.debug("Event loop finished in %s", self.state.nav.current_directory)

    def handle_event(self, event: Event) -> None:
        if isinstance(event, InterruptEvent):
            self.running = False
        elif isinstance(event, ResizeEvent):
            self._handle_resize()
        elif self.renderer is None:
            # Terminal too small: only quitting and resizing do anything
            if isinstance(event, KeyEvent) and event.char == "q":
                self.running = False
        elif isinstance(event, ScrollEvent):
            self._handle_scroll(event.delta)
        elif isinstance(event, TouchEvent):
            self._handle_touch(event.x, event.y)
        elif isinstance(event, KeyEvent):
            if not self._handle_key(event):
                self._set_status("Unhandled keypress.")

    # Drawing -------------------------------------------------------------

    def _relayout(self) -> None:
        if self.surface is None:
            return
        try:
            self.layout = compute_layout(self.surface.width, self.surface.height, self.outlines)
        except LayoutError as err:
            logger.warning("%s", err)
            self.layout = None
            self.renderer = None
            return
        apply_layout(self.state, self.layout)
        self.renderer = Renderer(self.surface, self.layout, self.script_extension)

    def redraw(self) -> None:
        """Paint the whole screen from scratch."""
        if self.surface is None:
            return
        if self.renderer is None:
            render_too_small(self.surface)
            return
        self.renderer.render_full(self.state, self.status_message)

    def _handle_resize(self) -> None:
        if self.surface is None:
            return
        self.surface.sync_size()
        self._relayout()
        if self.renderer is not None:
            self._refresh_preview()
        self.redraw()

    def _set_status(self, message: str) -> None:
        self.status_message = message
        if self.renderer is not None:
            self.renderer.draw_status(message)

    def _clear_status(self) -> None:
        if self.status_message and self.renderer is not None:
            self.renderer.clear_status()
        self.status_message = None

    def _refresh_preview(self) -> None:
        error = self.previewer.refresh(self.state)
        if error:
            self._set_status(error)

    def _preview_is_current(self) -> bool:
        """True when the right column already lists the selected directory."""
        preview = self.state.preview
        return preview.kind is PreviewKind.DIRECTORY and preview.path == self.navigator.selected_path()

    def _apply(self, action: Callable[[], bool], *, force_preview: bool = False) -> bool:
        """Run a state transition and redraw only what it changed."""
        before = ViewSnapshot.capture(self.state)
        focus = (self.state.nav.current_directory, self.state.selection)
        changed = action()
        if changed or force_preview:
            moved = focus != (self.state.nav.current_directory, self.state.selection)
            if force_preview or (moved and not self._preview_is_current()):
                self._refresh_preview()
            if self.renderer is not None:
                self.renderer.update(before, self.state)
        return changed

    def _hand_off(self, command: str, *, pause: bool) -> CommandResult:
        """Give the whole terminal to ``command`` and restore the screen afterwards."""
        if self.surface is None:
            raise MillpaneError("Browser is not attached to a screen.")
        self.surface.stash()
        self.surface.suspend()
        try:
            result = self.executor.run_interactive(
                command, self.state.nav.current_directory, pause=pause
            )
        finally:
            self.surface.resume()
            self.surface.restore()
            if self.renderer is not None:
                self.renderer.forget_pen()
        if not result.success and result.error:
            self._set_status(result.error)
        return result


__all__ = ["ColumnBrowser", "MillpaneError"]
