"""Response writer that tracks status and body size."""

from __future__ import annotations

import logging
from typing import Any

from tonic.mode import is_debugging

NOT_WRITTEN = -1
DEFAULT_STATUS = 200

_log = logging.getLogger(__name__)


class ResponseWriter:
    """Wraps an underlying writer, deferring the status line until first write."""

    def __init__(self, writer: Any = None) -> None:
        self.reset(writer)

    def reset(self, writer: Any) -> None:
        """Attach a new underlying writer and forget previous state."""
        self._writer = writer
        self.size = NOT_WRITTEN
        self.status = DEFAULT_STATUS

    def unwrap(self) -> Any:
        """Return the underlying writer."""
        return self._writer

    @property
    def header(self) -> Any:
        return self._writer.header

    @property
    def written(self) -> bool:
        """True once the status line has been sent."""
        return self.size != NOT_WRITTEN

    def write_header(self, code: int) -> None:
        """Record the status code; ignored once headers are written."""
        if code > 0 and self.status != code:
            if self.written:
                if is_debugging():
                    _log.warning(
                        "Headers were already written. Wanted to override status code %d with %d",
                        self.status,
                        code,
                    )
                return
            self.status = code

    def write_header_now(self) -> None:
        """Send the status line if it has not been sent yet."""
        if not self.written:
            self.size = 0
            self._writer.write_header(self.status)

    def write(self, data: bytes) -> int:
        self.write_header_now()
        count = self._writer.write(data)
        self.size += count
        return count

    def write_string(self, s: str) -> int:
        return self.write(s.encode("utf-8"))

    def flush(self) -> None:
        self.write_header_now()
        flush = getattr(self._writer, "flush", None)
        if not callable(flush):
            raise TypeError("underlying writer does not support flushing")
        flush()

    def hijack(self) -> Any:
        """Take over the connection from the underlying writer."""
        if self.size < 0:
            self.size = 0
        hijack = getattr(self._writer, "hijack", None)
        if not callable(hijack):
            raise TypeError("underlying writer does not support hijacking")
        return hijack()

    def close_notify(self) -> Any:
        close_notify = getattr(self._writer, "close_notify", None)
        if not callable(close_notify):
            raise TypeError("underlying writer does not support close notification")
        return close_notify()

    def pusher(self) -> Any:
        """Return the underlying writer if it supports server push, else None."""
        if callable(getattr(self._writer, "push", None)):
            return self._writer
        return None