"""Classify directory entries by their listed name."""

from __future__ import annotations

from enum import Enum

PATH_SEPARATOR = "/"
DEFAULT_SCRIPT_EXTENSION = "py"


class EntryKind(Enum):
    DIRECTORY = "directory"
    SCRIPT = "script"
    PLAIN = "plain"


def extension(name: str) -> str:
    """Return the text after the last ``.``, or the whole name when there is none."""
    return name.rsplit(".", 1)[-1]


def is_directory_name(name: str) -> bool:
    """A trailing separator marks a directory."""
    return name.endswith(PATH_SEPARATOR)


def classify(name: str, script_extension: str = DEFAULT_SCRIPT_EXTENSION) -> EntryKind:
    """Map a listed entry name to its kind.

    >>> classify("sub/")
    <EntryKind.DIRECTORY: 'directory'>
    >>> classify("tool.py")
    <EntryKind.SCRIPT: 'script'>
    """
    if is_directory_name(name):
        return EntryKind.DIRECTORY
    if "." in name and extension(name) == script_extension:
        return EntryKind.SCRIPT
    return EntryKind.PLAIN


__all__ = [
    "EntryKind",
    "PATH_SEPARATOR",
    "DEFAULT_SCRIPT_EXTENSION",
    "classify",
    "extension",
    "is_directory_name",
]
