"""The ``ls`` command."""

from __future__ import annotations

import re
import sys
from dataclasses import dataclass
from typing import Iterable, Sequence, TextIO

from composecli.formatter import PRETTY, print_list
from composecli.model import ListOptions, Service, Stack

_ACCEPTED_FILTERS = frozenset({"name"})


@dataclass
class StackView:
    """One row of the project list."""

    name: str
    status: str
    config_files: str


def view_from_stack_list(stacks: Iterable[Stack]) -> list[StackView]:
    """Rows for the stacks, status and reason joined."""
    return [
        StackView(
            name=stack.name,
            status=f"{stack.status} {stack.reason}".strip(),
            config_files=stack.config_files,
        )
        for stack in stacks
    ]


def parse_filters(filters: Iterable[str]) -> dict[str, list[str]]:
    """Parse ``key=value`` filter expressions and check their keys are accepted."""
    parsed: dict[str, list[str]] = {}
    for expr in filters:
        key, sep, value = expr.partition("=")
        if not sep:
            raise ValueError("bad format of filter (expected name=value)")
        key = key.strip().lower()
        parsed.setdefault(key, []).append(value.strip())
    for key in parsed:
        if key not in _ACCEPTED_FILTERS:
            raise ValueError(f"invalid filter '{key}'")
    return parsed


def _matches(values: Sequence[str], source: str) -> bool:
    if not values or source in values:
        return True
    for pattern in values:
        try:
            if re.search(pattern, source):
                return True
        except re.error:
            continue
    return False


def run_list(
    backend: Service,
    all: bool = False,
    quiet: bool = False,
    fmt: str = PRETTY,
    filters: Iterable[str] = (),
    out: TextIO | None = None,
) -> None:
    """List compose projects."""
    stream = out if out is not None else sys.stdout
    parsed = parse_filters(filters)

    stacks = backend.list(ListOptions(all=all))
    if quiet:
        for stack in stacks:
            stream.write(stack.name + "\n")
        return

    if parsed:
        names = parsed.get("name")
        stacks = [s for s in stacks if names is None or _matches(names, s.name)]

    view = view_from_stack_list(stacks)

    def printer(w: TextIO) -> None:
        for row in view:
            w.write(f"{row.name}\t{row.status}\t{row.config_files}\n")

    print_list(view, fmt, stream, printer, "NAME", "STATUS", "CONFIG FILES")