"""File systems used for serving static files."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from tonic.pathclean import clean_path


class _LocalFile:
    """An open file or directory inside a :class:`DirFS`."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self._stream = None if path.is_dir() else path.open("rb")
        self._dir_offset = 0

    @property
    def is_dir(self) -> bool:
        return self._stream is None

    def read(self, size: int = -1) -> bytes:
        if self._stream is None:
            raise IsADirectoryError(f"is a directory: {self.path}")
        return self._stream.read(size)

    def readdir(self, count: int) -> list[os.DirEntry]:
        """Return up to ``count`` further entries, or all remaining if ``count <= 0``."""
        if self._stream is not None:
            raise NotADirectoryError(f"not a directory: {self.path}")
        with os.scandir(self.path) as scan:
            entries = sorted(scan, key=lambda entry: entry.name)
        remaining = entries[self._dir_offset:]
        if count > 0:
            remaining = remaining[:count]
        self._dir_offset += len(remaining)
        return remaining

    def stat(self) -> os.stat_result:
        return os.stat(self.path)

    def close(self) -> None:
        if self._stream is not None:
            self._stream.close()

    def __enter__(self) -> _LocalFile:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()


@dataclass(frozen=True)
class DirFS:
    """A file system rooted at a local directory."""

    root: str

    def open(self, name: str) -> _LocalFile:
        """Open ``name`` relative to the root; ``..`` never escapes it."""
        if os.sep != "/" and os.sep in name:
            raise ValueError("invalid character in file path")
        root = self.root or "."
        parts = [part for part in clean_path(name).split("/") if part]
        return _LocalFile(Path(root, *parts))


@dataclass
class NeutralizedReaddirFile:
    """A file whose directory listing is always empty."""

    file: Any

    def readdir(self, count: int) -> list:
        """Directory listing is disabled; always returns an empty list."""
        return []

    def __getattr__(self, name: str) -> Any:
        if name == "file":
            raise AttributeError(name)
        return getattr(self.file, name)

    def __enter__(self) -> NeutralizedReaddirFile:
        return self

    def __exit__(self, *exc: object) -> None:
        self.file.close()


@dataclass(frozen=True)
class OnlyFilesFS:
    """A file system that hides directory listings of the wrapped one."""

    filesystem: Any

    def open(self, name: str) -> NeutralizedReaddirFile:
        return NeutralizedReaddirFile(self.filesystem.open(name))


@dataclass(frozen=True)
class FSAdapter:
    """Exposes any object with ``open(name)`` as a plain file system."""

    filesystem: Any

    def open(self, name: str) -> Any:
        return self.filesystem.open(name)


def directory(root: str, list_directory: bool) -> DirFS | OnlyFilesFS:
    """Return a file system for ``root``, listing directories only if asked."""
    filesystem = DirFS(root)
    if list_directory:
        return filesystem
    return OnlyFilesFS(filesystem)