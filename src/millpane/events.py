"""Input events and the sources that produce them."""

from __future__ import annotations

import curses
from collections import deque
from dataclasses import dataclass
from typing import Deque, Iterable, List, Protocol, Union

KEY_ESCAPE = 27
KEY_CTRL_C = 3
ENTER_KEYS = (curses.KEY_ENTER, ord("\n"), ord("\r"))
BACKSPACE_KEYS = (curses.KEY_BACKSPACE, 127, 8)


@dataclass(frozen=True)
class KeyEvent:
    code: int

    @property
    def char(self) -> str:
        """The typed character, or an empty string for special keys."""
        if 32 <= self.code <= 255 and self.code != 127:
            char = chr(self.code)
            if char.isprintable():
                return char
        return ""


@dataclass(frozen=True)
class TouchEvent:
    x: int
    y: int


@dataclass(frozen=True)
class ScrollEvent:
    """Wheel movement; positive values scroll towards the top of the listing."""

    delta: int


@dataclass(frozen=True)
class ResizeEvent:
    pass


@dataclass(frozen=True)
class InterruptEvent:
    pass


Event = Union[KeyEvent, TouchEvent, ScrollEvent, ResizeEvent, InterruptEvent]


class EventSource(Protocol):
    def next_event(self) -> Event: ...


class CursesEventSource:
    """Block on ``getch`` and translate keys and mouse reports into events."""

    def __init__(self, window: "curses._CursesWindow") -> None:  # type: ignore[name-defined]
        self.window = window
        curses.mousemask(curses.ALL_MOUSE_EVENTS)
        curses.mouseinterval(0)

    def next_event(self) -> Event:
        while True:
            try:
                key = self.window.getch()
            except KeyboardInterrupt:
                return InterruptEvent()
            if key == -1:
                continue
            if key == KEY_CTRL_C:
                return InterruptEvent()
            if key == curses.KEY_RESIZE:
                return ResizeEvent()
            if key == curses.KEY_MOUSE:
                event = self._mouse_event()
                if event is not None:
                    return event
                continue
            return KeyEvent(key)

    @staticmethod
    def _mouse_event() -> Union[TouchEvent, ScrollEvent, None]:
        try:
            _, x, y, _, state = curses.getmouse()
        except curses.error:
            return None
        if state & curses.BUTTON4_PRESSED:
            return ScrollEvent(1)
        if state & getattr(curses, "BUTTON5_PRESSED", 0):
            return ScrollEvent(-1)
        if state & (curses.BUTTON1_PRESSED | curses.BUTTON1_CLICKED):
            return TouchEvent(x, y)
        return None


class ScriptedEventSource:
    """Replay a fixed list of events; an interrupt follows the last one."""

    def __init__(self, events: Iterable[Event] = ()) -> None:
        self.events: Deque[Event] = deque(events)

    def push(self, *events: Event) -> None:
        self.events.extend(events)

    def type_text(self, text: str) -> None:
        self.events.extend(keys(text))

    def next_event(self) -> Event:
        if not self.events:
            return InterruptEvent()
        return self.events.popleft()


def keys(text: str) -> List[KeyEvent]:
    """Build one key event per character of ``text``."""
    return [KeyEvent(ord(char)) for char in text]


__all__ = [
    "BACKSPACE_KEYS",
    "CursesEventSource",
    "ENTER_KEYS",
    "Event",
    "EventSource",
    "InterruptEvent",
    "KEY_CTRL_C",
    "KEY_ESCAPE",
    "KeyEvent",
    "ResizeEvent",
    "ScriptedEventSource",
    "ScrollEvent",
    "TouchEvent",
    "keys",
]
