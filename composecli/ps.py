"""The ``ps`` command."""

from __future__ import annotations

import json
import sys
import unicodedata
from typing import Iterable, Sequence, TextIO

from composecli.errors import NotImplementedByBackendError
from composecli.formatter import PRETTY, print_list
from composecli.model import ContainerSummary, Project, PsOptions, Service

_HEADERS = ("NAME", "COMMAND", "SERVICE", "STATUS", "PORTS")


def parse_filter(filter_expr: str) -> list[str]:
    """Statuses selected by a ``--filter KEY=VAL`` expression.

    Only the ``status`` key is supported; ``source`` is not implemented.
    """
    if not filter_expr:
        return []
    key, sep, value = filter_expr.partition("=")
    if not sep:
        raise ValueError("arguments to --filter should be in form KEY=VAL")
    if key == "status":
        return [value]
    if key == "source":
        raise NotImplementedByBackendError("source filter")
    raise ValueError(f"unknown filter {key}")


def filter_by_status(
    containers: Iterable[ContainerSummary], statuses: Sequence[str]
) -> list[ContainerSummary]:
    """Containers whose state is one of ``statuses``."""
    return [container for container in containers if container.state in statuses]


def _char_width(char: str) -> int:
    return 2 if unicodedata.east_asian_width(char) in ("W", "F") else 1


def ellipsis(text: str, max_length: int) -> str:
    """Cut ``text`` to ``max_length`` display columns, ending it with an ellipsis."""
    if max_length <= 0:
        return ""
    if max_length == 1:
        return text[:1]
    if sum(_char_width(char) for char in text) <= max_length:
        return text
    kept = []
    width = 0
    for char in text:
        width += _char_width(char)
        if width > max_length - 1:
            break
        kept.append(char)
    return "".join(kept) + "…"


def _join_host_port(host: str, port: int) -> str:
    return f"[{host}]:{port}" if ":" in host else f"{host}:{port}"


def _form_group(key: str, first: int, last: int) -> str:
    ip, sep, group_type = key.partition("/")
    if not sep:
        ip, group_type = "", key
    group = str(first) if first == last else f"{first}-{last}"
    if ip:
        group = f"{ip}:{group}->{group}"
    return f"{group}/{group_type}"


def displayable_ports(container: ContainerSummary) -> str:
    """Published ports of a container, consecutive ports grouped into ranges."""
    if not container.publishers:
        return ""
    publishers = sorted(
        container.publishers,
        key=lambda p: (p.target_port, p.url, p.published_port, p.protocol),
    )
    groups: dict[str, list[int]] = {}
    result: list[str] = []
    host_mappings: list[str] = []
    for publisher in publishers:
        current = publisher.target_port
        key = publisher.protocol
        if publisher.url:
            if publisher.published_port != current:
                address = _join_host_port(publisher.url, publisher.published_port)
                host_mappings.append(f"{address}->{current}/{publisher.protocol}")
                continue
            key = f"{publisher.url}/{publisher.protocol}"
        group = groups.get(key)
        if group is None:
            groups[key] = [current, current]
            continue
        if current == group[1] + 1:
            group[1] = current
            continue
        result.append(_form_group(key, group[0], group[1]))
        group[0] = group[1] = current
    result.extend(_form_group(key, first, last) for key, (first, last) in groups.items())
    result.extend(host_mappings)
    return ", ".join(result)


def _quote(text: str) -> str:
    return json.dumps(text, ensure_ascii=False)


def _status(container: ContainerSummary) -> str:
    if container.state == "running" and container.health:
        return f"{container.state} ({container.health})"
    if container.state in ("exited", "dead"):
        return f"{container.state} ({container.exit_code})"
    return container.state


def container_rows(containers: Iterable[ContainerSummary]) -> list[tuple[str, ...]]:
    """Table rows: name, quoted command, service, status and ports."""
    return [
        (
            container.name,
            _quote(ellipsis(container.command, 20)),
            container.service,
            _status(container),
            displayable_ports(container),
        )
        for container in containers
    ]


def run_ps(
    backend: Service,
    project_name: str,
    project: Project | None = None,
    services: Sequence[str] = (),
    all: bool = False,
    quiet: bool = False,
    show_services: bool = False,
    fmt: str = PRETTY,
    statuses: Sequence[str] = (),
    out: TextIO | None = None,
) -> None:
    """List the project's containers."""
    stream = out if out is not None else sys.stdout
    services = list(services or [])
    containers = backend.ps(
        project_name, PsOptions(project=project, all=all, services=services)
    )

    for service in services:
        if not any(container.service == service for container in containers):
            raise ValueError(f"no such service: {service}")

    if statuses:
        containers = filter_by_status(containers, statuses)

    containers = sorted(containers, key=lambda container: container.name)

    if quiet:
        for container in containers:
            stream.write(container.id + "\n")
        return

    if show_services:
        names = dict.fromkeys(container.service for container in containers)
        stream.write("\n".join(names) + "\n")
        return

    rows = container_rows(containers)

    def printer(w: TextIO) -> None:
        for row in rows:
            w.write("\t".join(row) + "\n")

    print_list(containers, fmt, stream, printer, *_HEADERS)