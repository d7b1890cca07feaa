"""Output formats for list commands: aligned tables and JSON."""

from __future__ import annotations

import io
import json
from dataclasses import asdict, is_dataclass
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Any, Callable, Iterable, TextIO

from composecli.errors import ParsingFailedError

JSON = "json"
TEMPLATE_LEGACY_JSON = "{{json.}}"
PRETTY = "pretty"

_STANDARD_INDENTATION = "    "

Printer = Callable[[TextIO], None]


def _json_default(obj: Any) -> Any:
    if is_dataclass(obj) and not isinstance(obj, type):
        return asdict(obj)
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, (datetime, date)):
        return obj.isoformat()
    if isinstance(obj, timedelta):
        return int(obj.total_seconds() * 1_000_000_000)
    if isinstance(obj, (set, frozenset, tuple)):
        return list(obj)
    if isinstance(obj, bytes):
        return obj.decode("utf-8", errors="replace")
    raise TypeError(f"object of type {type(obj).__name__} is not JSON serializable")


def to_json(obj: Any, prefix: str = "", indentation: str = "") -> str:
    """JSON text of ``obj`` followed by a newline, without HTML escaping.

    With neither prefix nor indentation the text is compact; otherwise every
    element goes on its own line, indented, and each line after the first
    starts with ``prefix``.
    """
    if prefix or indentation:
        text = json.dumps(obj, indent=indentation, ensure_ascii=False, default=_json_default)
        if prefix:
            text = text.replace("\n", "\n" + prefix)
    else:
        text = json.dumps(
            obj, separators=(",", ":"), ensure_ascii=False, default=_json_default
        )
    text = text.replace("\u2028", "\\u2028").replace("\u2029", "\\u2029")
    return text + "\n"


def to_standard_json(obj: Any) -> str:
    """JSON text of ``obj`` indented with four spaces."""
    return to_json(obj, "", _STANDARD_INDENTATION)


def _format_block(
    lines: list[list[str]],
    widths: list[int],
    line0: int,
    line1: int,
    minwidth: int,
    padding: int,
    output: list[str],
) -> None:
    column = len(widths)
    this = line0
    while this < line1:
        if column >= len(lines[this]) - 1:
            this += 1
            continue
        _write_lines(lines, widths, line0, this, output)
        line0 = this
        width = minwidth
        while this < line1 and column < len(lines[this]) - 1:
            width = max(width, len(lines[this][column]) + padding)
            this += 1
        widths.append(width)
        _format_block(lines, widths, line0, this, minwidth, padding, output)
        widths.pop()
        line0 = this
    _write_lines(lines, widths, line0, line1, output)


def _write_lines(
    lines: list[list[str]], widths: list[int], start: int, stop: int, output: list[str]
) -> None:
    for cells in lines[start:stop]:
        rendered = []
        for column, cell in enumerate(cells):
            if column < len(widths):
                rendered.append(cell.ljust(widths[column]))
            else:
                rendered.append(cell)
        output.append("".join(rendered))


def tabwrite(text: str, minwidth: int = 0, padding: int = 1) -> str:
    """Align tab-terminated cells into columns padded with spaces.

    A cell belongs to a column only when a tab ends it; the last cell of a
    line is written as is. Consecutive lines sharing a column are aligned.
    """
    lines = [line.split("\t") for line in text.split("\n")]
    output: list[str] = []
    _format_block(lines, [], 0, len(lines), minwidth, padding, output)
    return "\n".join(output)


def print_pretty_section(out: TextIO, printer: Printer, *args: str) -> None:
    """Write a header row and the printer's rows as an aligned table."""
    buffer = io.StringIO()
    buffer.write("\t".join(args) + "\n")
    printer(buffer)
    out.write(tabwrite(buffer.getvalue(), 20, 3))


def print_list(
    items: Any, fmt: str, out: TextIO, printer: Printer, *args: str
) -> None:
    """Write ``items`` as a table (``pretty``), as JSON, or as JSON lines.

    Raises ParsingFailedError for an unknown format.
    """
    is_sequence = isinstance(items, (list, tuple))
    mode = fmt.lower()
    if mode in (PRETTY, ""):
        print_pretty_section(out, printer, *args)
    elif mode == TEMPLATE_LEGACY_JSON:
        if is_sequence:
            for item in items:
                out.write(to_json(item, "", ""))
        else:
            out.write(to_standard_json(items) + "\n")
    elif mode == JSON:
        if is_sequence:
            out.write(to_json(list(items), "", ""))
        else:
            out.write(to_standard_json(items) + "\n")
    else:
        raise ParsingFailedError(f'format value "{fmt}" could not be parsed')


def format_errors(errors: Iterable[BaseException]) -> str:
    """One ``Error: <message>`` line per error."""
    return "\n".join(f"Error: {error}" for error in errors)