"""Targets and status codes for the router's automatic redirects."""

from __future__ import annotations

import posixpath
import re
from http import HTTPStatus

_UNSAFE_PREFIX_CHARS = re.compile(r"[^a-zA-Z0-9/-]+")
_REPEATED_SLASHES = re.compile(r"/{2,}")


def _clean(path: str) -> str:
    """Lexically clean ``path``; an empty path becomes ``.``."""
    cleaned = posixpath.normpath(path) if path else "."
    if cleaned.startswith("//"):
        cleaned = "/" + cleaned.lstrip("/")
    return cleaned


def _sanitize_prefix(prefix: str) -> str:
    prefix = _UNSAFE_PREFIX_CHARS.sub("", prefix)
    return _REPEATED_SLASHES.sub("/", prefix)


def trailing_slash_target(path: str, forwarded_prefix: str) -> str:
    """Return the path to redirect to when only the other slash form matches.

    A path ending in ``/`` loses it; any other path gains one. A non-empty
    ``forwarded_prefix`` (the X-Forwarded-Prefix header) is cleaned, stripped
    of characters other than letters, digits, ``/`` and ``-``, and put in
    front of the path.
    """
    target = path
    prefix = _clean(forwarded_prefix)
    if prefix != ".":
        target = _sanitize_prefix(prefix) + "/" + path
    if len(target) > 1 and target.endswith("/"):
        return target[:-1]
    return target + "/"


def redirect_status(method: str) -> int:
    """Return 301 for GET requests and 307 for every other method."""
    if method == "GET":
        return int(HTTPStatus.MOVED_PERMANENTLY)
    return int(HTTPStatus.TEMPORARY_REDIRECT)