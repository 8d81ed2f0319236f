"""Global run mode: debug, release or test."""

from __future__ import annotations

import os
from enum import Enum

ENV_MODE = "TONIC_MODE"


class Mode(str, Enum):
    """The modes the framework can run in."""

    DEBUG = "debug"
    RELEASE = "release"
    TEST = "test"


_current: Mode = Mode.DEBUG


def _running_under_tests() -> bool:
    return "PYTEST_CURRENT_TEST" in os.environ


def set_mode(value: str | Mode) -> None:
    """Set the global mode; an empty value picks test or debug mode.

    Raises ValueError for an unknown mode name.
    """
    global _current
    if not value:
        value = Mode.TEST if _running_under_tests() else Mode.DEBUG
    try:
        _current = Mode(value)
    except ValueError:
        raise ValueError(
            f"tonic mode unknown: {value} (available mode: debug release test)"
        ) from None


def mode() -> str:
    """Return the name of the current mode."""
    return _current.value


def is_debugging() -> bool:
    """Return True when running in debug mode."""
    return _current is Mode.DEBUG


set_mode(os.environ.get(ENV_MODE, ""))