"""The ``images`` command."""

from __future__ import annotations

import sys
from typing import Sequence, TextIO

from composecli.formatter import PRETTY, print_list
from composecli.model import ImagesOptions, Service

_SIZE_UNITS = ("B", "kB", "MB", "GB", "TB", "PB", "EB", "ZB", "YB")


def truncate_id(image_id: str) -> str:
    """Short form of an ID: any algorithm prefix dropped, 12 characters kept."""
    _, sep, rest = image_id.partition(":")
    return (rest if sep else image_id)[:12]


def human_size(size: float) -> str:
    """Size in decimal units with three significant digits, such as ``1.5MB``."""
    value = float(size)
    unit = 0
    while value >= 1000.0 and unit < len(_SIZE_UNITS) - 1:
        value /= 1000.0
        unit += 1
    return f"{value:.3g}{_SIZE_UNITS[unit]}"


def run_images(
    backend: Service,
    project_name: str,
    services: Sequence[str] = (),
    quiet: bool = False,
    out: TextIO | None = None,
) -> None:
    """List the images used by the project's containers."""
    stream = out if out is not None else sys.stdout
    images = backend.images(project_name, ImagesOptions(services=list(services)))

    if quiet:
        ids = dict.fromkeys(image.id.partition(":")[2] or image.id for image in images)
        for image_id in ids:
            stream.write(image_id + "\n")
        return

    images = sorted(images, key=lambda image: image.container_name)

    def printer(w: TextIO) -> None:
        for image in images:
            repo = image.repository or "<none>"
            tag = image.tag or "<none>"
            w.write(
                f"{image.container_name}\t{repo}\t{tag}\t"
                f"{truncate_id(image.id)}\t{human_size(image.size)}\n"
            )

    print_list(
        images, PRETTY, stream, printer, "Container", "Repository", "Tag", "Image Id", "Size"
    )