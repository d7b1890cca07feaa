"""Commands acting on a project's existing containers.

Covers kill, pause, unpause, port, cp, rm, start, stop and restart.
"""

from __future__ import annotations

import sys
from datetime import timedelta
from typing import Sequence, TextIO

from composecli.model import (
    CopyOptions,
    KillOptions,
    PauseOptions,
    PortOptions,
    Project,
    RemoveOptions,
    RestartOptions,
    Service,
    StartOptions,
    StopOptions,
)

DEFAULT_KILL_SIGNAL = "SIGKILL"
DEFAULT_PROTOCOL = "tcp"
DEFAULT_RESTART_TIMEOUT = 10


def run_kill(
    backend: Service,
    project_name: str,
    project: Project | None = None,
    services: Sequence[str] = (),
    remove_orphans: bool = False,
    signal: str = DEFAULT_KILL_SIGNAL,
) -> None:
    """Force stop the service containers by sending them a signal."""
    backend.kill(
        project_name,
        KillOptions(
            remove_orphans=remove_orphans,
            project=project,
            services=list(services or []),
            signal=signal,
        ),
    )


def run_pause(
    backend: Service,
    project_name: str,
    project: Project | None = None,
    services: Sequence[str] = (),
) -> None:
    """Pause the services."""
    backend.pause(project_name, PauseOptions(services=list(services or []), project=project))


def run_unpause(
    backend: Service,
    project_name: str,
    project: Project | None = None,
    services: Sequence[str] = (),
) -> None:
    """Unpause the services."""
    backend.unpause(
        project_name, PauseOptions(services=list(services or []), project=project)
    )


def run_port(
    backend: Service,
    project_name: str,
    service: str,
    port: int | str,
    protocol: str = DEFAULT_PROTOCOL,
    index: int = 1,
    out: TextIO | None = None,
) -> tuple[str, int]:
    """Print the public address bound to a private port of a service.

    ``port`` may be given as text; text that is not an integer raises ValueError.
    """
    stream = out if out is not None else sys.stdout
    private_port = int(port)
    ip, public_port = backend.port(
        project_name, service, private_port, PortOptions(protocol=protocol, index=index)
    )
    stream.write(f"{ip}:{public_port}\n")
    return ip, public_port


def run_copy(
    backend: Service,
    project_name: str,
    source: str,
    destination: str,
    index: int = 0,
    follow_link: bool = False,
    copy_uid_gid: bool = False,
    all: bool = False,
) -> None:
    """Copy files between a service container and the local filesystem."""
    if not source:
        raise ValueError("source can not be empty")
    if not destination:
        raise ValueError("destination can not be empty")
    backend.copy(
        project_name,
        CopyOptions(
            source=source,
            destination=destination,
            all=all,
            index=index,
            follow_link=follow_link,
            copy_uid_gid=copy_uid_gid,
        ),
    )


def run_remove(
    backend: Service,
    project_name: str,
    project: Project | None = None,
    services: Sequence[str] = (),
    force: bool = False,
    stop: bool = False,
    volumes: bool = False,
) -> None:
    """Remove stopped service containers, stopping them first if asked."""
    selected = list(services or [])
    if stop:
        backend.stop(project_name, StopOptions(services=selected, project=project))
    backend.remove(
        project_name,
        RemoveOptions(services=selected, force=force, volumes=volumes, project=project),
    )


def run_start(
    backend: Service,
    project_name: str,
    project: Project | None = None,
    services: Sequence[str] = (),
) -> None:
    """Start the services."""
    selected = list(services or [])
    backend.start(
        project_name,
        StartOptions(attach_to=list(selected), project=project, services=selected),
    )


def run_stop(
    backend: Service,
    project_name: str,
    project: Project | None = None,
    services: Sequence[str] = (),
    timeout: int | None = None,
) -> None:
    """Stop the services; ``timeout`` in seconds, or None for the backend's default."""
    backend.stop(
        project_name,
        StopOptions(
            timeout=timedelta(seconds=timeout) if timeout is not None else None,
            services=list(services or []),
            project=project,
        ),
    )


def run_restart(
    backend: Service,
    project_name: str,
    project: Project | None = None,
    services: Sequence[str] = (),
    timeout: int = DEFAULT_RESTART_TIMEOUT,
) -> None:
    """Restart the service containers with a shutdown timeout in seconds."""
    backend.restart(
        project_name,
        RestartOptions(
            timeout=timedelta(seconds=timeout),
            services=list(services or []),
            project=project,
        ),
    )