"""Filesystem access used by the navigator and the preview.

Every listing returned here already carries the directory marker: names of
directories end with ``/``.  Nothing in this module mutates the filesystem;
creation, deletion and renaming go through :mod:`millpane.executor`.
"""

from __future__ import annotations

import logging
import os
import posixpath
from pathlib import Path
from typing import List, Protocol, TextIO

from millpane.entry_types import PATH_SEPARATOR

logger = logging.getLogger(__name__)


class FilesystemError(Exception):
    """Raised when a directory cannot be listed or a file cannot be read."""


class Filesystem(Protocol):
    def list(self, path: str) -> List[str]: ...

    def is_directory(self, path: str) -> bool: ...

    def exists(self, path: str) -> bool: ...

    def resolve(self, path: str) -> str: ...

    def open_text(self, path: str) -> TextIO: ...


def segments(path: str) -> List[str]:
    """Split ``path`` into its non-empty components."""
    return [part for part in path.split(PATH_SEPARATOR) if part]


def name(path: str) -> str:
    """Return the last component of ``path``, or an empty string for the root."""
    parts = segments(path)
    return parts[-1] if parts else ""


def parent(path: str) -> str:
    """Return the parent of a normalized absolute path (the root is its own parent)."""
    parts = segments(path)
    if len(parts) <= 1:
        return PATH_SEPARATOR
    return PATH_SEPARATOR + PATH_SEPARATOR.join(parts[:-1])


def join(directory: str, entry: str) -> str:
    """Join a directory and a listed entry name, dropping the entry's trailing separator."""
    joined = posixpath.join(directory, entry.rstrip(PATH_SEPARATOR))
    return normalize(joined)


def normalize(path: str) -> str:
    """Collapse separators and ``..`` components without touching the disk."""
    normalized = posixpath.normpath(path)
    if normalized.startswith("//"):
        normalized = PATH_SEPARATOR + normalized.lstrip(PATH_SEPARATOR)
    return normalized


def is_root(path: str) -> bool:
    return not segments(path)


class LocalFilesystem:
    """Read-only view of the local disk."""

    def list(self, path: str) -> List[str]:
        try:
            with os.scandir(path) as it:
                names = [
                    entry.name + PATH_SEPARATOR if self._entry_is_dir(entry) else entry.name
                    for entry in it
                ]
        except PermissionError as err:
            raise FilesystemError(f"Permission denied reading directory: {path}") from err
        except FileNotFoundError as err:
            raise FilesystemError(f"Directory not found: {path}") from err
        except NotADirectoryError as err:
            raise FilesystemError(f"Not a directory: {path}") from err
        except OSError as err:
            raise FilesystemError(f"Cannot list {path}: {err.strerror or err}") from err
        names.sort(key=str.lower)
        logger.debug("Listed %d entries in %s", len(names), path)
        return names

    @staticmethod
    def _entry_is_dir(entry: os.DirEntry) -> bool:
        try:
            return entry.is_dir()
        except OSError:
            return False

    def is_directory(self, path: str) -> bool:
        try:
            return Path(path).is_dir()
        except OSError:
            return False

    def exists(self, path: str) -> bool:
        try:
            return Path(path).exists()
        except OSError:
            return False

    def resolve(self, path: str) -> str:
        try:
            resolved = Path(path).expanduser().resolve()
        except (OSError, RuntimeError) as err:
            raise FilesystemError(f"Cannot resolve {path}: {err}") from err
        return normalize(str(resolved))

    def open_text(self, path: str) -> TextIO:
        try:
            return open(path, "r", encoding="utf-8", errors="replace")
        except IsADirectoryError as err:
            raise FilesystemError(f"{path} is a directory") from err
        except OSError as err:
            raise FilesystemError(f"{path}: {err.strerror or err}") from err


__all__ = [
    "Filesystem",
    "FilesystemError",
    "LocalFilesystem",
    "is_root",
    "join",
    "name",
    "normalize",
    "parent",
    "segments",
]
