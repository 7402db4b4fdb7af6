from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass
from typing import Protocol


@dataclass(slots=True, frozen=True)
class DirEntry:
    """A single listing result. ``is_dir`` never follows symlinks."""

    path: str
    name: str
    is_dir: bool = False
    is_symlink: bool = False
    type_error: str | None = None


class FileSystem(Protocol):
    def expanduser(self, path: str) -> str: ...

    def absolute(self, path: str) -> str: ...

    def exists(self, path: str) -> bool: ...

    def is_dir(self, path: str) -> bool: ...

    def scandir(self, path: str) -> list[DirEntry]:
        """List the direct children of *path*. Raises ``OSError`` when the listing fails."""
        ...

    def file_size(self, path: str) -> int:
        """Return the length of *path* without following symlinks. Raises ``OSError``."""
        ...

    def read_text(self, path: str) -> str: ...

    def temp_dir(self) -> str: ...


class OsFileSystem:
    def expanduser(self, path: str) -> str:
        return os.path.expanduser(path)

    def absolute(self, path: str) -> str:
        return os.path.abspath(path)

    def exists(self, path: str) -> bool:
        return os.path.lexists(path)

    def is_dir(self, path: str) -> bool:
        return os.path.isdir(path)

    def scandir(self, path: str) -> list[DirEntry]:
        entries: list[DirEntry] = []
        with os.scandir(path) as it:
            for entry in it:
                # d_type is usually free; a failure here means the type needs an
                # lstat that the platform refused.
                try:
                    is_symlink = entry.is_symlink()
                    is_dir = entry.is_dir(follow_symlinks=False)
                except OSError as exc:
                    entries.append(DirEntry(path=entry.path, name=entry.name, type_error=str(exc)))
                    continue
                entries.append(DirEntry(path=entry.path, name=entry.name, is_dir=is_dir, is_symlink=is_symlink))
        return entries

    def file_size(self, path: str) -> int:
        return os.stat(path, follow_symlinks=False).st_size

    def read_text(self, path: str) -> str:
        with open(path, encoding="utf-8") as f:
            return f.read()

    def temp_dir(self) -> str:
        return tempfile.gettempdir()


DEFAULT_FS: FileSystem = OsFileSystem()


def parent_dir(path: str) -> str:
    stripped = path.rstrip("/") or "/"
    head = stripped.rsplit("/", 1)[0]
    return head or "/"


def fallback_path(fs: FileSystem = DEFAULT_FS) -> str | None:
    """Parent of the temp directory, standing in for the app's private directory.

    Returns ``None`` when that parent is a filesystem root.
    """
    parent = parent_dir(fs.temp_dir())
    if parent_dir(parent) == parent:
        return None
    return parent


def resolve_dir(path: str, fs: FileSystem = DEFAULT_FS) -> str:
    """Expand ``~`` and make *path* absolute. Does not touch the filesystem."""
    return fs.absolute(fs.expanduser(path))
