"""Core rendering types: headers, a recording writer and the Render base."""

from __future__ import annotations

import string
from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator, Mapping, MutableMapping
from dataclasses import dataclass, field
from typing import Any

_TOKEN_CHARS = frozenset("!#$%&'*+-.^_`|~" + string.digits + string.ascii_letters)


def _canonical_key(key: str) -> str:
    if not key or any(char not in _TOKEN_CHARS for char in key):
        return key
    return "-".join(part[:1].upper() + part[1:].lower() for part in key.split("-"))


class Header(MutableMapping):
    """Case-insensitive multi-valued HTTP header map with canonical keys."""

    def __init__(self, initial: Mapping[str, str | Iterable[str]] | None = None) -> None:
        self._values: dict[str, list[str]] = {}
        for key, value in (initial or {}).items():
            self[key] = [value] if isinstance(value, str) else list(value)

    def __getitem__(self, key: str) -> list[str]:
        return self._values[_canonical_key(key)]

    def __setitem__(self, key: str, value: list[str]) -> None:
        self._values[_canonical_key(key)] = list(value)

    def __delitem__(self, key: str) -> None:
        del self._values[_canonical_key(key)]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"Header({self._values!r})"

    def get(self, key: str) -> str:  # type: ignore[override]
        """Return the first value for ``key``, or an empty string."""
        values = self._values.get(_canonical_key(key))
        return values[0] if values else ""

    def set(self, key: str, value: str) -> None:
        """Replace all values of ``key`` with ``value``."""
        self._values[_canonical_key(key)] = [value]

    def add(self, key: str, value: str) -> None:
        self._values.setdefault(_canonical_key(key), []).append(value)

    def values(self, key: str) -> list[str]:  # type: ignore[override]
        """Return all values of ``key``."""
        return list(self._values.get(_canonical_key(key), []))


@dataclass
class Recorder:
    """An in-memory response writer that records status, headers and body."""

    code: int = 200
    header: Header = field(default_factory=Header)
    body: bytearray = field(default_factory=bytearray)
    wrote_header: bool = False
    flushed: bool = False

    def write_header(self, code: int) -> None:
        if self.wrote_header:
            return
        self.code = code
        self.wrote_header = True

    def write(self, data: bytes) -> int:
        if not self.wrote_header:
            self.write_header(200)
        self.body += data
        return len(data)

    def flush(self) -> None:
        if not self.wrote_header:
            self.write_header(200)
        self.flushed = True

    @property
    def text(self) -> str:
        return self.body.decode("utf-8")


class Render(ABC):
    """Something that can write itself to a response."""

    @abstractmethod
    def render(self, writer: Any) -> None:
        """Write the content type and the body to ``writer``."""

    @abstractmethod
    def write_content_type(self, writer: Any) -> None:
        """Set the content type on ``writer`` unless one is already set."""


def write_content_type(writer: Any, value: str | Iterable[str]) -> None:
    """Set Content-Type on ``writer`` only if it has none yet."""
    header = writer.header
    if not header.values("Content-Type"):
        header["Content-Type"] = [value] if isinstance(value, str) else list(value)


def string_to_bytes(s: str) -> bytes:
    """Encode ``s`` as UTF-8, round-tripping any escaped raw bytes."""
    return s.encode("utf-8", "surrogateescape")


def bytes_to_string(b: bytes) -> str:
    """Decode ``b`` as UTF-8, keeping invalid bytes recoverable."""
    return bytes(b).decode("utf-8", "surrogateescape")