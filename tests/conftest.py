"""Shared test doubles: an in-memory filesystem and a recording command executor."""

import copy
import io
from typing import Dict, List, Optional

import pytest

from millpane import ColumnBrowser
from millpane.config import DEFAULT_CONFIG
from millpane.events import ScriptedEventSource
from millpane.executor import CommandResult
from millpane.filesystem import FilesystemError, normalize
from millpane.surface import GridSurface


class FakeFilesystem:
    """Directory listings and file contents held in dictionaries."""

    def __init__(self, directories: Dict[str, List[str]], files: Optional[Dict[str, str]] = None):
        self.directories = {normalize(path): list(rows) for path, rows in directories.items()}
        self.files = dict(files or {})
        self.list_calls: List[str] = []

    def list(self, path):
        path = normalize(path)
        self.list_calls.append(path)
        if path not in self.directories:
            raise FilesystemError(f"Directory not found: {path}")
        return list(self.directories[path])

    def is_directory(self, path):
        return normalize(path) in self.directories

    def exists(self, path):
        path = normalize(path)
        return path in self.directories or path in self.files

    def resolve(self, path):
        path = normalize(path)
        if not self.exists(path):
            raise FilesystemError(f"No such file or directory: {path}")
        return path

    def open_text(self, path):
        path = normalize(path)
        if path not in self.files:
            raise FilesystemError(f"{path}: No such file or directory")
        return io.StringIO(self.files[path])


class RecordingExecutor:
    """Remember every command instead of running it."""

    def __init__(self, result: Optional[CommandResult] = None):
        self.result = result or CommandResult.ok()
        self.commands: List[tuple] = []
        self.interactive: List[tuple] = []

    def execute(self, command, cwd=None):
        self.commands.append((command, cwd))
        return self.result

    def run_interactive(self, command, cwd=None, *, pause=True):
        self.interactive.append((command, cwd, pause))
        return self.result


def home_tree() -> FakeFilesystem:
    """``/home`` holds a text file, a directory and a lua script."""
    return FakeFilesystem(
        {
            "/": ["home/", "tmp/"],
            "/home": ["a.txt", "sub/", "b.lua"],
            "/home/sub": ["inner.txt", "deeper/"],
            "/home/sub/deeper": [],
            "/tmp": [],
        },
        files={
            "/home/a.txt": "first line\n\tindented\nthird\n",
            "/home/b.lua": "print('hi')\n",
            "/home/sub/inner.txt": "inner\n",
        },
    )


def browser_config(**overrides) -> dict:
    config = copy.deepcopy(DEFAULT_CONFIG)
    config["scripts"]["extension"] = "lua"
    config["scripts"]["interpreter"] = "lua"
    config["editor"]["command"] = "vi"
    config["navigation"]["home_directory"] = "/tmp"
    for section, values in overrides.items():
        config[section].update(values)
    return config


def make_browser(filesystem, start="/home", width=60, height=20, events=(), executor=None, **overrides):
    browser = ColumnBrowser(
        start,
        config=browser_config(**overrides),
        filesystem=filesystem,
        executor=executor or RecordingExecutor(),
    )
    browser.attach(GridSurface(width, height), ScriptedEventSource(events))
    return browser


@pytest.fixture
def fs():
    return home_tree()


@pytest.fixture
def browser(fs):
    return make_browser(fs)
