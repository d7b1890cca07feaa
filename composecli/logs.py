"""Colored, prefixed presentation of container logs."""

from __future__ import annotations

import sys
import threading
from dataclasses import dataclass
from functools import partial
from itertools import cycle
from typing import Callable, TextIO

NEVER = "never"
ALWAYS = "always"
AUTO = "auto"

_NAMES = ("grey", "red", "green", "yellow", "blue", "magenta", "cyan", "white")

ColorFunc = Callable[[str], str]

# Text passes through unchanged when colors are off.
_MONOCHROME: ColorFunc = str


def ansi_color(code: str, text: str) -> str:
    """Wrap ``text`` in the ANSI escape for ``code`` and a reset."""
    return f"\033[{code}m{text}\033[0m"


def _color_table() -> dict[str, ColorFunc]:
    colors: dict[str, ColorFunc] = {}
    for offset, name in enumerate(_NAMES):
        code = str(30 + offset)
        colors[name] = partial(ansi_color, code)
        colors["intense_" + name] = partial(ansi_color, code + ";1")
    return colors


_COLORS = _color_table()
_RAINBOW = tuple(
    _COLORS[name]
    for name in (
        "cyan",
        "yellow",
        "green",
        "magenta",
        "blue",
        "intense_cyan",
        "intense_yellow",
        "intense_green",
        "intense_magenta",
        "intense_blue",
    )
)


class _Palette:
    """Hands out rainbow colors in turn, or plain text when colors are off."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._colors = cycle(_RAINBOW)
        self.enabled = True

    def next(self) -> ColorFunc:
        with self._lock:
            if not self.enabled:
                return _MONOCHROME
            return next(self._colors)


_palette = _Palette()


def use_ansi(mode: str, stream: TextIO | None = None) -> bool:
    """Whether ANSI codes are used in ``mode``; ``auto`` asks if the stream is a terminal."""
    if mode == ALWAYS:
        return True
    if mode == AUTO:
        target = stream if stream is not None else sys.stdout
        isatty = getattr(target, "isatty", None)
        return bool(isatty()) if isatty is not None else False
    return False


def set_ansi_mode(mode: str) -> None:
    """Turn colored output on or off according to ``mode``."""
    _palette.enabled = use_ansi(mode)


def next_color() -> ColorFunc:
    """The next color of the rainbow, or an identity function when colors are off."""
    return _palette.next()


@dataclass
class _Presenter:
    colors: ColorFunc
    name: str
    prefix: str = ""

    def set_prefix(self, width: int) -> None:
        self.prefix = self.colors(f"{self.name:<{width}} | ")


class LogConsumer:
    """Writes log lines of containers, each prefixed with its container name."""

    def __init__(
        self,
        out: TextIO,
        color: bool = True,
        prefix: bool = True,
        cancelled: threading.Event | None = None,
    ) -> None:
        self._out = out
        self._color = color
        self._prefix = prefix
        self._cancelled = cancelled
        self._presenters: dict[str, _Presenter] = {}
        self._lock = threading.RLock()
        self._width = 0

    def register(self, name: str) -> None:
        """Give a container its color and realign every prefix."""
        self._register(name)

    def _register(self, name: str) -> _Presenter:
        colors = next_color() if self._color else _MONOCHROME
        presenter = _Presenter(colors=colors, name=name)
        with self._lock:
            self._presenters[name] = presenter
            if self._prefix:
                self._width = max(len(p.name) for p in self._presenters.values()) + 1
                for existing in self._presenters.values():
                    existing.set_prefix(self._width)
        return presenter

    def _presenter(self, container: str) -> _Presenter:
        with self._lock:
            presenter = self._presenters.get(container)
        return presenter if presenter is not None else self._register(container)

    def log(self, container: str, service: str, message: str) -> None:
        """Write each line of ``message`` behind the container's prefix."""
        if self._cancelled is not None and self._cancelled.is_set():
            return
        presenter = self._presenter(container)
        for line in message.split("\n"):
            self._out.write(f"{presenter.prefix}{line}\n")

    def status(self, container: str, msg: str) -> None:
        """Write a status message about a container in its color."""
        presenter = self._presenter(container)
        self._out.write(presenter.colors(f"{container} {msg}\n"))