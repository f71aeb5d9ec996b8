"""Coloured console messages gated on the project's log setting."""

from __future__ import annotations

from .config import get_config

_RED = "\033[1;31m"
_YELLOW = "\033[1;33m"
_GREEN = "\033[1;32m"
_RESET = "\033[0m"


class FatalError(RuntimeError):
    """An error after which the program cannot go on."""


def _emit(colour: str, label: str, message: str) -> None:
    if get_config().log:
        print(f"{colour}{label}: {_RESET}{message}", flush=True)


def fatal_error(message: str) -> None:
    """Report a fatal error and raise FatalError; the report is printed only when logging."""
    _emit(_RED, "FatalError", message)
    raise FatalError(message)


def error(message: str) -> None:
    """Print an error in red when logging is enabled."""
    _emit(_RED, "Error", message)


def warning(message: str) -> None:
    """Print a warning in yellow when logging is enabled."""
    _emit(_YELLOW, "Warning", message)


def log(message: str) -> None:
    """Print a message in green when logging is enabled."""
    _emit(_GREEN, "Log", message)