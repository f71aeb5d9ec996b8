"""Project configuration read from a whitespace separated key/value file."""

from __future__ import annotations

import re
from collections import deque
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Callable

_INT_RE = re.compile(r"[+-]?\d+")
_FLOAT_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")

_INT_MIN = -(2**31)
_INT_MAX = 2**31 - 1
_UINT_MAX = 2**32 - 1

MAX_VOLUME = 1.5
MIN_VOLUME = 0.0


@dataclass
class ProjectConfig:
    """Settings of a project; defaults apply to every key the file omits."""

    fullscreen: bool = False
    width: int = 1280
    height: int = 800
    use_frame_limit: bool = False
    frame_limit: int = 60
    override_seed: bool = False
    seed: int = 0
    volume: float = 1.0
    mute: bool = False
    log: bool = False


class _StreamFailed(Exception):
    """The token stream ran out or held a value of the wrong kind."""


class _Tokens:
    """Reads words and numbers from text the way a formatted input stream does."""

    def __init__(self, text: str) -> None:
        self._tokens = deque(text.split())

    def word(self) -> str:
        if not self._tokens:
            raise _StreamFailed
        return self._tokens.popleft()

    def _number(self, pattern: re.Pattern[str]) -> str:
        if not self._tokens:
            raise _StreamFailed
        token = self._tokens[0]
        match = pattern.match(token)
        if match is None:
            raise _StreamFailed
        self._tokens.popleft()
        rest = token[match.end():]
        if rest:
            self._tokens.appendleft(rest)
        return match.group()

    def integer(self) -> int:
        value = int(self._number(_INT_RE))
        if not _INT_MIN <= value <= _INT_MAX:
            raise _StreamFailed
        return value

    def unsigned(self) -> int:
        value = int(self._number(_INT_RE))
        if abs(value) > _UINT_MAX:
            raise _StreamFailed
        return value % (_UINT_MAX + 1)

    def real(self) -> float:
        value = float(self._number(_FLOAT_RE))
        if value in (float("inf"), float("-inf")):
            raise _StreamFailed
        return value


def _read_bool(tokens: _Tokens) -> bool:
    return tokens.word() == "true"


_KEYS: dict[str, tuple[str, Callable[[_Tokens], object]]] = {
    "fullscreen": ("fullscreen", _read_bool),
    "width": ("width", _Tokens.integer),
    "heigth": ("height", _Tokens.integer),
    "volume": ("volume", _Tokens.real),
    "use_frame_limit": ("use_frame_limit", _read_bool),
    "frame_limit": ("frame_limit", _Tokens.integer),
    "override_seed": ("override_seed", _read_bool),
    "seed": ("seed", _Tokens.unsigned),
    "log": ("log", _read_bool),
}


def parse_config(text: str) -> ProjectConfig:
    """Parse configuration text; unknown words are skipped, a bad value ends parsing."""
    config = ProjectConfig()
    tokens = _Tokens(text)
    try:
        while True:
            entry = _KEYS.get(tokens.word())
            if entry is None:
                continue
            attribute, read = entry
            setattr(config, attribute, read(tokens))
    except _StreamFailed:
        pass
    config.volume = min(max(config.volume, MIN_VOLUME), MAX_VOLUME)
    return config


_CONFIG = ProjectConfig()


def get_config() -> ProjectConfig:
    """Return the shared configuration of the running project."""
    return _CONFIG


def load_config(path: str | Path) -> ProjectConfig:
    """Read a configuration file into the shared configuration and return it."""
    parsed = parse_config(Path(path).read_text())
    for field in fields(ProjectConfig):
        setattr(_CONFIG, field.name, getattr(parsed, field.name))
    return _CONFIG