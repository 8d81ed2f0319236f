"""Request log formatting and console colour control."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Any


class ColorMode(Enum):
    """Whether log output is coloured."""

    AUTO = "auto"
    DISABLE = "disable"
    FORCE = "force"


GREEN = "\033[97;42m"
WHITE = "\033[90;47m"
YELLOW = "\033[90;43m"
RED = "\033[97;41m"
BLUE = "\033[97;44m"
MAGENTA = "\033[97;45m"
CYAN = "\033[97;46m"
RESET = "\033[0m"

_METHOD_COLORS = {
    "GET": BLUE,
    "POST": CYAN,
    "PUT": YELLOW,
    "DELETE": RED,
    "PATCH": GREEN,
    "HEAD": MAGENTA,
    "OPTIONS": WHITE,
}

_color_mode = ColorMode.AUTO


def console_color_mode() -> ColorMode:
    """Return the current console colour mode."""
    return _color_mode


def set_console_color_mode(value: ColorMode | str) -> None:
    """Set the console colour mode."""
    global _color_mode
    _color_mode = ColorMode(value)


def disable_console_color() -> None:
    """Turn colour output off."""
    set_console_color_mode(ColorMode.DISABLE)


def force_console_color() -> None:
    """Turn colour output on even when not writing to a terminal."""
    set_console_color_mode(ColorMode.FORCE)


@dataclass
class LogFormatterParams:
    """Everything a log formatter gets to describe one request."""

    request: Any = None
    timestamp: datetime = field(default_factory=datetime.now)
    status_code: int = 0
    latency: timedelta = field(default_factory=timedelta)
    client_ip: str = ""
    method: str = ""
    path: str = ""
    error_message: str = ""
    is_term: bool = False
    body_size: int = 0
    keys: dict[str, Any] = field(default_factory=dict)

    def status_code_color(self) -> str:
        """ANSI colour for the status code."""
        code = self.status_code
        if 100 <= code < 200:
            return WHITE
        if 200 <= code < 300:
            return GREEN
        if 300 <= code < 400:
            return WHITE
        if 400 <= code < 500:
            return YELLOW
        return RED

    def method_color(self) -> str:
        """ANSI colour for the request method."""
        return _METHOD_COLORS.get(self.method, RESET)

    def reset_color(self) -> str:
        """ANSI sequence that resets all attributes."""
        return RESET

    def is_output_color(self) -> bool:
        """Whether colours should be written."""
        return _color_mode is ColorMode.FORCE or (
            _color_mode is ColorMode.AUTO and self.is_term
        )


def _nanoseconds(value: timedelta | float | int) -> int:
    if isinstance(value, timedelta):
        whole = value.days * 86_400 + value.seconds
        return whole * 1_000_000_000 + value.microseconds * 1_000
    return round(value * 1_000_000_000)


def _fraction(value: int, unit: int) -> str:
    whole, rest = divmod(value, unit)
    if not rest:
        return str(whole)
    digits = len(str(unit)) - 1
    return f"{whole}." + f"{rest:0{digits}d}".rstrip("0")


def format_duration(seconds: timedelta | float | int) -> str:
    """Format a duration compactly, e.g. ``1.5ms``, ``5s`` or ``2h3m4.5s``."""
    ns = _nanoseconds(seconds)
    if ns == 0:
        return "0s"
    sign = "-" if ns < 0 else ""
    ns = abs(ns)
    if ns < 1_000:
        return f"{sign}{ns}ns"
    if ns < 1_000_000:
        return f"{sign}{_fraction(ns, 1_000)}µs"
    if ns < 1_000_000_000:
        return f"{sign}{_fraction(ns, 1_000_000)}ms"
    total_seconds, rest = divmod(ns, 1_000_000_000)
    hours, remainder = divmod(total_seconds, 3_600)
    minutes, secs = divmod(remainder, 60)
    text = _fraction(secs * 1_000_000_000 + rest, 1_000_000_000) + "s"
    if hours:
        text = f"{hours}h{minutes}m{text}"
    elif minutes:
        text = f"{minutes}m{text}"
    return sign + text


_QUOTE_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\a": "\\a",
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\v": "\\v",
}


def _quote(text: str) -> str:
    pieces = []
    for char in text:
        code = ord(char)
        if char in _QUOTE_ESCAPES:
            pieces.append(_QUOTE_ESCAPES[char])
        elif code < 0x20 or code == 0x7F:
            pieces.append(f"\\x{code:02x}")
        elif code < 0x80 or char.isprintable():
            pieces.append(char)
        elif code <= 0xFFFF:
            pieces.append(f"\\u{code:04x}")
        else:
            pieces.append(f"\\U{code:08x}")
    return '"' + "".join(pieces) + '"'


def default_log_formatter(params: LogFormatterParams) -> str:
    """Format one request log line in the default layout."""
    status_color = method_color = reset_color = ""
    if params.is_output_color():
        status_color = params.status_code_color()
        method_color = params.method_color()
        reset_color = params.reset_color()

    latency = params.latency
    ns = _nanoseconds(latency)
    if ns > 60 * 1_000_000_000:
        ns -= ns % 1_000_000_000
    latency_text = format_duration(timedelta(microseconds=ns // 1_000)) if ns % 1_000 == 0 else format_duration(ns / 1_000_000_000)

    return (
        f"[TONIC] {params.timestamp.strftime('%Y/%m/%d - %H:%M:%S')} |"
        f"{status_color} {params.status_code:3d} {reset_color}|"
        f" {latency_text:>13} |"
        f" {params.client_ip:>15} |"
        f"{method_color} {params.method:<7} {reset_color} {_quote(params.path)}\n"
        f"{params.error_message}"
    )