"""Renderers for raw data, formatted text, streams and redirects."""

from __future__ import annotations

import json
import math
import posixpath
import re
from dataclasses import dataclass, field
from http import HTTPStatus
from typing import Any, Mapping, Sequence
from urllib.parse import urlsplit

from tonic.render.core import Render, string_to_bytes, write_content_type

PLAIN_CONTENT_TYPE = "text/plain; charset=utf-8"
_HTML_CONTENT_TYPE = "text/html; charset=utf-8"
_COPY_CHUNK = 32 * 1024

_VERB = re.compile(r"%([-+# 0]*)(\d+)?(?:\.(\d*))?(.)?", re.S)
_HTML_ESCAPES = str.maketrans(
    {"&": "&amp;", "<": "&lt;", ">": "&gt;", '"': "&#34;", "'": "&#39;"}
)


def _type_name(value: Any) -> str:
    if isinstance(value, bool):
        return "bool"
    if isinstance(value, int):
        return "int"
    if isinstance(value, float):
        return "float64"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (bytes, bytearray)):
        return "[]uint8"
    if isinstance(value, (list, tuple)):
        return "[]interface {}"
    if isinstance(value, dict):
        return "map[string]interface {}"
    return type(value).__name__


def _value_text(value: Any) -> str:
    if value is None:
        return "<nil>"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "+Inf" if value > 0 else "-Inf"
        if value.is_integer() and abs(value) < 1e21:
            return str(int(value))
        return repr(value)
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8", "replace")
    if isinstance(value, (list, tuple)):
        return "[" + " ".join(_value_text(item) for item in value) + "]"
    if isinstance(value, dict):
        items = sorted(value.items(), key=lambda item: str(item[0]))
        return "map[" + " ".join(f"{_value_text(k)}:{_value_text(v)}" for k, v in items) + "]"
    return str(value)


def _pad(text: str, flags: str, width: str | None) -> str:
    if not width:
        return text
    size = int(width)
    return text.ljust(size) if "-" in flags else text.rjust(size)


def _number_spec(flags: str, width: str | None, precision: str | None, kind: str) -> str:
    spec = "<" if "-" in flags else ""
    if "+" in flags:
        spec += "+"
    elif " " in flags:
        spec += " "
    if "#" in flags:
        spec += "#"
    if "0" in flags and "-" not in flags:
        spec += "0"
    spec += width or ""
    if precision is not None:
        spec += "." + (precision or "0")
    return spec + kind


def _format_arg(value: Any, flags: str, width: str | None, precision: str | None, verb: str) -> str:
    is_int = isinstance(value, int) and not isinstance(value, bool)
    if verb in "dboxX":
        if not is_int:
            raise TypeError(verb)
        return format(value, _number_spec(flags, width, None, verb))
    if verb in "eEfFgG":
        if not isinstance(value, float):
            raise TypeError(verb)
        if verb in "gG" and precision is None:
            return _pad(_value_text(value), flags, width)
        return format(value, _number_spec(flags, width, precision, verb))
    if verb in "sv":
        text = _value_text(value)
        if verb == "s" and precision is not None:
            text = text[: int(precision or "0")]
        return _pad(text, flags, width)
    if verb == "q":
        if not isinstance(value, str):
            raise TypeError(verb)
        return _pad(json.dumps(value, ensure_ascii=False), flags, width)
    if verb == "t":
        if not isinstance(value, bool):
            raise TypeError(verb)
        return _pad(_value_text(value), flags, width)
    if verb == "c":
        if not is_int:
            raise TypeError(verb)
        return _pad(chr(value), flags, width)
    if verb == "T":
        return _pad(_type_name(value), flags, width)
    raise TypeError(verb)


def _sprintf(template: str, args: Sequence[Any]) -> str:
    """Format ``args`` into ``template`` using printf-style verbs such as %s, %d and %v."""
    used = 0

    def replace(match: re.Match) -> str:
        nonlocal used
        flags, width, precision, verb = match.groups()
        if verb is None:
            return "%!(NOVERB)"
        if verb == "%":
            return "%"
        if used >= len(args):
            return f"%!{verb}(MISSING)"
        value = args[used]
        used += 1
        if value is None and verb not in "svT":
            return f"%!{verb}(<nil>)"
        try:
            return _format_arg(value, flags, width, precision, verb)
        except (TypeError, ValueError, OverflowError):
            return f"%!{verb}({_type_name(value)}={_value_text(value)})"

    result = _VERB.sub(replace, template)
    if used < len(args):
        extra = ", ".join(f"{_type_name(v)}={_value_text(v)}" for v in args[used:])
        result += f"%!(EXTRA {extra})"
    return result


def write_string(writer: Any, format: str, data: Sequence[Any]) -> None:
    """Set the plain-text content type and write ``format`` filled with ``data``."""
    write_content_type(writer, PLAIN_CONTENT_TYPE)
    if data:
        writer.write(string_to_bytes(_sprintf(format, list(data))))
    else:
        writer.write(string_to_bytes(format))


@dataclass
class Data(Render):
    """Raw bytes with a caller-chosen content type."""

    content_type: str
    data: bytes

    def render(self, writer: Any) -> None:
        self.write_content_type(writer)
        writer.write(bytes(self.data))

    def write_content_type(self, writer: Any) -> None:
        write_content_type(writer, [self.content_type])


@dataclass
class String(Render):
    """Plain text produced from a format string and its arguments."""

    format: str
    data: list = field(default_factory=list)

    def render(self, writer: Any) -> None:
        write_string(writer, self.format, self.data)

    def write_content_type(self, writer: Any) -> None:
        write_content_type(writer, PLAIN_CONTENT_TYPE)


@dataclass(kw_only=True)
class Reader(Render):
    """A stream copied to the response, with optional length and extra headers.

    A negative ``content_length`` leaves Content-Length unset.
    """

    reader: Any
    content_type: str = ""
    content_length: int = -1
    headers: Mapping[str, str] | None = None

    def render(self, writer: Any) -> None:
        self.write_content_type(writer)
        headers = dict(self.headers or {})
        if self.content_length >= 0:
            headers["Content-Length"] = str(self.content_length)
        header = writer.header
        for key, value in headers.items():
            if header.get(key) == "":
                header.set(key, value)
        while chunk := self.reader.read(_COPY_CHUNK):
            writer.write(chunk.encode("utf-8") if isinstance(chunk, str) else chunk)

    def write_content_type(self, writer: Any) -> None:
        write_content_type(writer, [self.content_type])


def _clean(path: str) -> str:
    cleaned = posixpath.normpath(path)
    if cleaned.startswith("//"):
        cleaned = "/" + cleaned.lstrip("/")
    return cleaned


def _hex_escape_non_ascii(text: str) -> str:
    return "".join(
        chr(byte) if byte < 0x80 else f"%{byte:x}" for byte in text.encode("utf-8")
    )


@dataclass
class Redirect(Render):
    """A redirect to ``location``; ``request`` needs ``method`` and ``path``."""

    code: int
    request: Any
    location: str

    def render(self, writer: Any) -> None:
        code = self.code
        if (code < 300 or code > 308) and code != 201:
            raise ValueError(f"Cannot redirect with status code {code}")

        method = self.request.method
        url = self.location
        try:
            parts = urlsplit(url)
        except ValueError:
            parts = None
        if parts is not None and not parts.scheme and not parts.netloc:
            old_path = urlsplit(self.request.path).path or "/"
            if not url.startswith("/"):
                url = posixpath.split(old_path)[0].rstrip("/") + "/" + url
            url, mark, query = url.partition("?")
            trailing = url.endswith("/")
            url = _clean(url)
            if trailing and not url.endswith("/"):
                url += "/"
            url += mark + query

        header = writer.header
        had_content_type = "Content-Type" in header
        header.set("Location", _hex_escape_non_ascii(url))
        if not had_content_type and method in ("GET", "HEAD"):
            header.set("Content-Type", _HTML_CONTENT_TYPE)
        writer.write_header(code)
        if not had_content_type and method == "GET":
            try:
                status_text = HTTPStatus(code).phrase
            except ValueError:
                status_text = ""
            body = f'<a href="{url.translate(_HTML_ESCAPES)}">{status_text}</a>.\n'
            writer.write((body + "\n").encode("utf-8"))

    def write_content_type(self, writer: Any) -> None:
        """Redirects set no content type of their own."""