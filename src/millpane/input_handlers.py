"""Input handling methods for the column browser."""

from __future__ import annotations

import curses
import logging
from typing import Optional

from millpane.colors import ColorPair
from millpane.entry_types import EntryKind, classify
from millpane.events import (
    BACKSPACE_KEYS,
    ENTER_KEYS,
    KEY_CTRL_C,
    KEY_ESCAPE,
    InterruptEvent,
    KeyEvent,
    ResizeEvent,
)
from millpane.help_text import build_help_lines
from millpane.layout import LEFT, MID
from millpane.render_utils import draw_frame, draw_frame_title, fit
from millpane.state import PreviewKind

logger = logging.getLogger(__name__)

CANCEL_KEYS = (KEY_ESCAPE, KEY_CTRL_C)
CONFIRM_CHARS = ("y", "Y")
DECLINE_CHARS = ("n", "N")


class InputHandlersMixin:
    """Mixin providing keyboard, pointer and wheel handling plus modal prompts."""

    def _handle_key(self, event: KeyEvent) -> bool:
        """Dispatch one key press while no prompt is open."""
        code = event.code
        char = event.char
        if char == "q":
            self.running = False
            return True
        if code == curses.KEY_UP or char == "k":
            self._apply(lambda: self.navigator.move_cursor(-1))
            return True
        if code == curses.KEY_DOWN or char == "j":
            self._apply(lambda: self.navigator.move_cursor(1))
            return True
        if code == curses.KEY_PPAGE:
            self._apply(lambda: self.navigator.move_cursor(-self.state.mid.viewport_height))
            return True
        if code == curses.KEY_NPAGE:
            self._apply(lambda: self.navigator.move_cursor(self.state.mid.viewport_height))
            return True
        if code == curses.KEY_HOME:
            self._apply(lambda: self.navigator.select(1))
            return True
        if code == curses.KEY_END:
            self._apply(lambda: self.navigator.select(self.state.mid.row_count))
            return True
        if code == curses.KEY_LEFT or char == "h":
            self._apply(self.navigator.exit_to_parent)
            return True
        if code == curses.KEY_RIGHT or char == "l":
            self._apply(self.navigator.enter_child)
            return True
        if code in ENTER_KEYS:
            self._activate()
            return True
        if code == curses.KEY_DC:
            self._delete_selected()
            return True
        commands = {
            "m": self._make_entry,
            "r": self._rename_selected,
            "y": self._yank_selected,
            "p": self._paste,
            "e": self._edit_selected,
            "a": self._run_with_args,
            "/": self._jump_home,
            "g": self._goto,
            "s": self._shell_command,
            "?": self._show_help,
        }
        command = commands.get(char)
        if command is not None:
            command()
            return True
        return False

    def _handle_scroll(self, delta: int) -> None:
        """Scroll the middle column by ``delta`` wheel steps."""
        self._apply(lambda: self.navigator.scroll(-delta * self.scroll_speed))

    def _handle_touch(self, x: int, y: int) -> None:
        """Handle a click: left column ascends, middle selects or opens, right descends."""
        row = self.layout.row_at(y)
        if row is None:
            return
        column_name = self.layout.column_at(x)
        if column_name == LEFT:
            self._touch_left(self.state.left.scroll_offset + row)
        elif column_name == MID:
            self._touch_mid(self.state.mid.scroll_offset + row)
        else:
            self._touch_right(self.state.right.scroll_offset + row)

    def _touch_left(self, index: int) -> None:
        if index > self.state.left.row_count:
            return
        clicked = self.state.left.row(index)

        def ascend_and_select() -> bool:
            if not self.navigator.exit_to_parent():
                return False
            self.navigator.select_name(clicked)
            return True

        self._apply(ascend_and_select)

    def _touch_mid(self, index: int) -> None:
        if index > self.state.mid.row_count:
            return
        if index == self.state.nav.cursor_index:
            self._activate()
            return
        self._apply(lambda: self.navigator.select(index))

    def _touch_right(self, index: int) -> None:
        if self.state.preview.kind is not PreviewKind.DIRECTORY or index > self.state.right.row_count:
            return
        clicked = self.state.right.row(index)

        def descend_and_select() -> bool:
            if not self.navigator.enter_child():
                return False
            self.navigator.select_name(clicked)
            return True

        self._apply(descend_and_select)

    def _activate(self) -> None:
        """Open the selection: descend into directories, run scripts, edit files."""
        selection = self.state.selection
        if selection is None:
            return
        kind = classify(selection, self.script_extension)
        if kind is EntryKind.DIRECTORY:
            self._apply(self.navigator.enter_child)
        elif kind is EntryKind.SCRIPT:
            self._run_script()
        else:
            self._edit_selected()

    # Modal prompts -------------------------------------------------------

    def _read_line(self, prompt: str, initial: str = "", *, allow_empty: bool = False) -> Optional[str]:
        """Read a line of text on the status row.

        Returns:
            The entered text, or None when the prompt was cancelled (Esc,
            Ctrl-C, or an empty answer unless ``allow_empty`` is set).
        """
        buffer = initial
        result: Optional[str] = None
        try:
            while True:
                cursor = self.renderer.draw_prompt(prompt, buffer)
                self.surface.place_cursor(*cursor)
                self.surface.flush()
                event = self.events.next_event()
                if isinstance(event, InterruptEvent):
                    break
                if isinstance(event, ResizeEvent):
                    self._handle_resize()
                    if self.renderer is None:
                        break
                    continue
                if not isinstance(event, KeyEvent):
                    continue
                if event.code in CANCEL_KEYS:
                    break
                if event.code in ENTER_KEYS:
                    if buffer or allow_empty:
                        result = buffer
                    break
                if event.code in BACKSPACE_KEYS:
                    buffer = buffer[:-1]
                elif event.char:
                    buffer += event.char
        finally:
            self.surface.hide_cursor()
            if self.renderer is not None:
                self.renderer.clear_status()
        return result

    def _confirm(self, query: str) -> bool:
        """Ask a yes/no question; nothing else is processed until it is answered."""
        while True:
            self._set_status(f"{query} [Y/n]")
            self.surface.flush()
            event = self.events.next_event()
            if isinstance(event, InterruptEvent):
                answer = False
                break
            if isinstance(event, ResizeEvent):
                self._handle_resize()
                if self.renderer is None:
                    answer = False
                    break
                continue
            if not isinstance(event, KeyEvent):
                continue
            if event.code in ENTER_KEYS or event.char in CONFIRM_CHARS:
                answer = True
                break
            if event.char in DECLINE_CHARS or event.code in BACKSPACE_KEYS or event.code == KEY_ESCAPE:
                answer = False
                break
        self._clear_status()
        return answer

    def _show_help(self) -> None:
        """Overlay the key bindings until any key is pressed."""
        lines = build_help_lines(self.script_extension)
        layout = self.layout
        box_width = min(max(len(line) for line in lines) + 4, layout.width)
        box_height = min(len(lines) + 2, layout.height)
        origin_x = max((layout.width - box_width) // 2, 0)
        origin_y = max((layout.height - box_height) // 2, 0)

        self.surface.stash()
        self.surface.set_color(ColorPair.BORDER)
        draw_frame(self.surface, origin_y, origin_x, box_height, box_width)
        draw_frame_title(self.surface, origin_y, origin_x, box_width, " Help ")
        self.surface.set_color(ColorPair.PLAIN)
        inner_width = box_width - 2
        for offset, line in enumerate(lines[: box_height - 2]):
            self.surface.set_text(origin_x + 1, origin_y + 1 + offset, fit(inner_width, " " + line))
        self.surface.flush()

        event = self.events.next_event()
        self.surface.restore()
        self.renderer.forget_pen()
        if isinstance(event, InterruptEvent):
            self.running = False
        elif isinstance(event, ResizeEvent):
            self._handle_resize()


__all__ = ["InputHandlersMixin"]
