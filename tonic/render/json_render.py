"""JSON renderers: plain, indented, secure, JSONP, ASCII-only and unescaped."""

from __future__ import annotations

import base64
import dataclasses
import json
from dataclasses import dataclass
from typing import Any

from tonic.render.core import Render, bytes_to_string, string_to_bytes, write_content_type

JSON_CONTENT_TYPE = "application/json; charset=utf-8"
JSONP_CONTENT_TYPE = "application/javascript; charset=utf-8"
JSON_ASCII_CONTENT_TYPE = "application/json"

_HTML_ESCAPES = str.maketrans(
    {
        "<": "\\u003c",
        ">": "\\u003e",
        "&": "\\u0026",
        "\u2028": "\\u2028",
        "\u2029": "\\u2029",
    }
)
_LINE_ESCAPES = str.maketrans({"\u2028": "\\u2028", "\u2029": "\\u2029"})

_JS_ESCAPES = {
    "\\": "\\\\",
    "'": "\\'",
    '"': '\\"',
    "<": "\\u003C",
    ">": "\\u003E",
    "&": "\\u0026",
    "=": "\\u003D",
}


def _default(obj: Any) -> Any:
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return dataclasses.asdict(obj)
    if isinstance(obj, (bytes, bytearray)):
        return base64.b64encode(bytes(obj)).decode("ascii")
    raise TypeError(f"json: unsupported type: {type(obj).__name__}")


def _dumps(obj: Any, indent: str | None = None) -> str:
    separators = (",", ": ") if indent is not None else (",", ":")
    try:
        return json.dumps(
            obj,
            ensure_ascii=False,
            sort_keys=True,
            allow_nan=False,
            default=_default,
            indent=indent,
            separators=separators,
        )
    except ValueError as exc:
        raise ValueError(f"json: unsupported value: {exc}") from exc


def marshal(obj: Any) -> bytes:
    """Encode ``obj`` as compact JSON with sorted keys and HTML-safe strings."""
    return _dumps(obj).translate(_HTML_ESCAPES).encode("utf-8")


def marshal_indent(obj: Any, prefix: str, indent: str) -> bytes:
    """Encode ``obj`` as indented JSON; every line after the first starts with ``prefix``."""
    text = _dumps(obj, indent=indent)
    if prefix:
        text = text.replace("\n", "\n" + prefix)
    return text.translate(_HTML_ESCAPES).encode("utf-8")


def js_escape_string(text: str) -> str:
    """Escape ``text`` so it can be embedded safely in JavaScript source."""
    pieces = []
    for char in text:
        code = ord(char)
        if char in _JS_ESCAPES:
            pieces.append(_JS_ESCAPES[char])
        elif code < 0x20:
            pieces.append(f"\\u00{code:02X}")
        elif code < 0x80 or char.isprintable():
            pieces.append(char)
        else:
            pieces.append(f"\\u{code:04X}")
    return "".join(pieces)


def write_json(writer: Any, obj: Any) -> None:
    """Set the JSON content type and write ``obj`` encoded as JSON."""
    write_content_type(writer, JSON_CONTENT_TYPE)
    writer.write(marshal(obj))


@dataclass
class JSON(Render):
    """Compact JSON."""

    data: Any

    def render(self, writer: Any) -> None:
        write_json(writer, self.data)

    def write_content_type(self, writer: Any) -> None:
        write_content_type(writer, JSON_CONTENT_TYPE)


@dataclass
class IndentedJSON(Render):
    """JSON indented with four spaces."""

    data: Any

    def render(self, writer: Any) -> None:
        self.write_content_type(writer)
        writer.write(marshal_indent(self.data, "", "    "))

    def write_content_type(self, writer: Any) -> None:
        write_content_type(writer, JSON_CONTENT_TYPE)


@dataclass
class SecureJSON(Render):
    """JSON whose top-level arrays are preceded by ``prefix``."""

    prefix: str
    data: Any

    def render(self, writer: Any) -> None:
        self.write_content_type(writer)
        body = marshal(self.data)
        if body.startswith(b"[") and body.endswith(b"]"):
            writer.write(string_to_bytes(self.prefix))
        writer.write(body)

    def write_content_type(self, writer: Any) -> None:
        write_content_type(writer, JSON_CONTENT_TYPE)


@dataclass
class JsonpJSON(Render):
    """JSON wrapped in a call to ``callback``; plain JSON if there is no callback."""

    callback: str
    data: Any

    def render(self, writer: Any) -> None:
        self.write_content_type(writer)
        body = marshal(self.data)
        if not self.callback:
            writer.write(body)
            return
        writer.write(string_to_bytes(js_escape_string(self.callback)))
        writer.write(b"(")
        writer.write(body)
        writer.write(b");")

    def write_content_type(self, writer: Any) -> None:
        write_content_type(writer, JSONP_CONTENT_TYPE)


@dataclass
class AsciiJSON(Render):
    """JSON with every non-ASCII character written as a ``\\u`` escape."""

    data: Any

    def render(self, writer: Any) -> None:
        self.write_content_type(writer)
        text = bytes_to_string(marshal(self.data))
        escaped = "".join(
            char if ord(char) <= 0x7F else f"\\u{ord(char):04x}" for char in text
        )
        writer.write(escaped.encode("ascii", "surrogateescape"))

    def write_content_type(self, writer: Any) -> None:
        write_content_type(writer, JSON_ASCII_CONTENT_TYPE)


@dataclass
class PureJSON(Render):
    """JSON without HTML escaping, followed by a newline."""

    data: Any

    def render(self, writer: Any) -> None:
        self.write_content_type(writer)
        text = _dumps(self.data).translate(_LINE_ESCAPES) + "\n"
        writer.write(text.encode("utf-8"))

    def write_content_type(self, writer: Any) -> None:
        write_content_type(writer, JSON_CONTENT_TYPE)