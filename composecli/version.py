"""The ``version`` command."""

from __future__ import annotations

import json
import sys
from typing import TextIO

from composecli.labels import VERSION

_JSON_FORMAT = "json"


def format_version(version: str = VERSION, short: bool = False, fmt: str = "") -> str:
    """Text the version command prints, without the final newline."""
    if short:
        return version.removeprefix("v")
    if fmt == _JSON_FORMAT:
        return '{"version":' + json.dumps(version, ensure_ascii=False) + "}"
    return f"Docker Compose version {version}"


def run_version(short: bool = False, fmt: str = "", out: TextIO | None = None) -> None:
    """Print the tool's version information."""
    stream = out if out is not None else sys.stdout
    stream.write(format_version(VERSION, short, fmt) + "\n")