"""The ``top`` command."""

from __future__ import annotations

import io
import sys
from typing import Callable, Sequence, TextIO

from composecli.formatter import tabwrite
from composecli.model import Service


def ps_printer(out: TextIO, printer: Callable[[TextIO], None], *args: str) -> None:
    """Write a header row and the printer's rows as a compact aligned table."""
    buffer = io.StringIO()
    buffer.write("\t".join(args) + "\n")
    printer(buffer)
    out.write(tabwrite(buffer.getvalue(), 5, 3))


def run_top(
    backend: Service,
    project_name: str,
    services: Sequence[str] = (),
    out: TextIO | None = None,
) -> None:
    """Print the processes running in each container of the project."""
    stream = out if out is not None else sys.stdout
    containers = sorted(backend.top(project_name, list(services)), key=lambda c: c.name)
    for container in containers:
        stream.write(f"{container.name}\n")

        def printer(w: TextIO, processes=container.processes) -> None:
            for process in processes:
                w.write("".join(f"{field}\t" for field in process) + "\n")
            w.write("\n")

        ps_printer(stream, printer, *container.titles)