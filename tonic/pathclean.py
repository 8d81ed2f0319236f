"""Canonical URL path cleaning."""

from __future__ import annotations


def clean_path(p: str) -> str:
    """Return the canonical form of URL path ``p``.

    Repeated slashes collapse to one, ``.`` elements are dropped, ``..``
    elements remove the element before them, and ``..`` at the root is
    discarded. The result always starts with ``/``. A trailing slash is kept
    when the input had one or ended in a ``.`` element. An empty result
    becomes ``/``.
    """
    if not p:
        return "/"

    trailing = len(p) > 1 and p.endswith("/")
    segments = p.split("/")
    last = len(segments) - 1
    stack: list[str] = []

    for position, segment in enumerate(segments):
        if not segment:
            continue
        if segment == ".":
            if position == last:
                trailing = True
        elif segment == "..":
            if stack:
                stack.pop()
        else:
            stack.append(segment)

    if not stack:
        return "/"
    cleaned = "/" + "/".join(stack)
    return cleaned + "/" if trailing else cleaned