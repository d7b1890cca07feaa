"""The ``events`` command."""

from __future__ import annotations

import json
import sys
from datetime import datetime, timedelta, timezone
from typing import Sequence, TextIO

from composecli.model import Event, EventsOptions, Service


def _format_timestamp(moment: datetime) -> str:
    """RFC 3339 with fractional seconds trimmed of trailing zeros."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    text = moment.strftime("%Y-%m-%dT%H:%M:%S")
    fraction = f"{moment.microsecond:06d}".rstrip("0")
    if fraction:
        text += "." + fraction
    offset = moment.utcoffset() or timedelta(0)
    if offset == timedelta(0):
        return text + "Z"
    sign = "+" if offset > timedelta(0) else "-"
    minutes = abs(int(offset.total_seconds())) // 60
    return f"{text}{sign}{minutes // 60:02d}:{minutes % 60:02d}"


def format_event_json(event: Event) -> str:
    """One event as a compact JSON object with sorted keys."""
    document = {
        "time": _format_timestamp(event.timestamp),
        "type": "container",
        "service": event.service,
        "id": event.container,
        "action": event.status,
        "attributes": dict(event.attributes),
    }
    text = json.dumps(document, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    return text.replace("<", "\\u003c").replace(">", "\\u003e").replace("&", "\\u0026")


def run_events(
    backend: Service,
    project_name: str,
    services: Sequence[str] = (),
    as_json: bool = False,
    out: TextIO | None = None,
) -> None:
    """Stream the project's container events to ``out``."""
    stream = out if out is not None else sys.stdout

    def consume(event: Event) -> None:
        text = format_event_json(event) if as_json else str(event)
        stream.write(text + "\n")

    backend.events(project_name, EventsOptions(services=list(services), consumer=consume))