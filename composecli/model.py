"""Data model shared by the command layer and the backend services."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum, IntEnum
from typing import Any, Callable, Iterable, Protocol, runtime_checkable

DEFAULT_SEPARATOR = "-"


@dataclass
class DeployConfig:
    """Deployment settings of a service."""

    replicas: int | None = None


@dataclass
class ServiceConfig:
    """Configuration of one service of a project."""

    name: str
    image: str = ""
    build: dict[str, Any] | None = None
    pull_policy: str = ""
    deploy: DeployConfig | None = None
    profiles: list[str] = field(default_factory=list)
    links: list[str] = field(default_factory=list)
    network_mode: str = ""
    ports: list[Any] = field(default_factory=list)
    volumes: list[Any] = field(default_factory=list)
    tty: bool = False
    stdin_open: bool = False
    custom_labels: dict[str, str] = field(default_factory=dict)


@dataclass
class Project:
    """A compose project: a named set of services and resources."""

    name: str = ""
    services: list[ServiceConfig] = field(default_factory=list)
    disabled_services: list[ServiceConfig] = field(default_factory=list)
    volumes: dict[str, Any] = field(default_factory=dict)
    working_dir: str = ""
    compose_files: list[str] = field(default_factory=list)
    environment: dict[str, str] = field(default_factory=dict)

    def service_names(self) -> list[str]:
        """Names of the enabled services, in declaration order."""
        return [service.name for service in self.services]

    def get_service(self, name: str) -> ServiceConfig:
        """Return the enabled service called ``name``; raise KeyError if absent."""
        for service in self.services:
            if service.name == name:
                return service
        raise KeyError(f"no such service: {name}")

    def get_services(self, names: Iterable[str]) -> list[ServiceConfig]:
        """Return the named services, or every service when no name is given."""
        wanted = list(names or [])
        if not wanted:
            return list(self.services)
        return [self.get_service(name) for name in wanted]


class StackStatus(str, Enum):
    """State of a compose stack."""

    STARTING = "Starting"
    RUNNING = "Running"
    UPDATING = "Updating"
    REMOVING = "Removing"
    UNKNOWN = "Unknown"
    FAILED = "Failed"


class RecreateStrategy(str, Enum):
    """Policy applied to existing containers when a project is created."""

    DIVERGED = "diverged"
    FORCE = "force"
    NEVER = "never"


class ContainerEventType(IntEnum):
    """Kind of a container event collected while attached to a project."""

    LOG = 0
    ATTACH = 1
    STOPPED = 2
    EXIT = 3
    USER_CANCEL = 4


@runtime_checkable
class LogConsumer(Protocol):
    """Receives log lines and status messages from service containers."""

    def log(self, container: str, service: str, message: str) -> None: ...

    def status(self, container: str, msg: str) -> None: ...

    def register(self, container: str) -> None: ...


@dataclass
class BuildOptions:
    pull: bool = False
    progress: str = ""
    args: dict[str, str | None] = field(default_factory=dict)
    no_cache: bool = False
    quiet: bool = False
    services: list[str] = field(default_factory=list)
    ssh: list[tuple[str, str]] = field(default_factory=list)


@dataclass
class CreateOptions:
    services: list[str] = field(default_factory=list)
    remove_orphans: bool = False
    ignore_orphans: bool = False
    recreate: str = ""
    recreate_dependencies: str = ""
    inherit: bool = False
    timeout: timedelta | None = None
    quiet_pull: bool = False


@dataclass
class StartOptions:
    project: Project | None = None
    attach: LogConsumer | None = None
    attach_to: list[str] = field(default_factory=list)
    cascade_stop: bool = False
    exit_code_from: str = ""
    wait: bool = False
    services: list[str] = field(default_factory=list)


@dataclass
class RestartOptions:
    project: Project | None = None
    timeout: timedelta | None = None
    services: list[str] = field(default_factory=list)


@dataclass
class StopOptions:
    project: Project | None = None
    timeout: timedelta | None = None
    services: list[str] = field(default_factory=list)


@dataclass
class UpOptions:
    create: CreateOptions = field(default_factory=CreateOptions)
    start: StartOptions = field(default_factory=StartOptions)


@dataclass
class DownOptions:
    remove_orphans: bool = False
    project: Project | None = None
    timeout: timedelta | None = None
    images: str = ""
    volumes: bool = False


@dataclass
class ConvertOptions:
    format: str = ""
    output: str = ""


@dataclass
class PushOptions:
    quiet: bool = False
    ignore_failures: bool = False


@dataclass
class PullOptions:
    quiet: bool = False
    ignore_failures: bool = False


@dataclass
class ImagesOptions:
    services: list[str] = field(default_factory=list)


@dataclass
class KillOptions:
    remove_orphans: bool = False
    project: Project | None = None
    services: list[str] = field(default_factory=list)
    signal: str = ""


@dataclass
class RemoveOptions:
    project: Project | None = None
    dry_run: bool = False
    volumes: bool = False
    force: bool = False
    services: list[str] = field(default_factory=list)


@dataclass
class RunOptions:
    project: Project | None = None
    name: str = ""
    service: str = ""
    command: list[str] = field(default_factory=list)
    entrypoint: list[str] = field(default_factory=list)
    detach: bool = False
    auto_remove: bool = False
    tty: bool = False
    interactive: bool = False
    working_dir: str = ""
    user: str = ""
    environment: list[str] = field(default_factory=list)
    labels: dict[str, str] = field(default_factory=dict)
    privileged: bool = False
    use_network_aliases: bool = False
    no_deps: bool = False
    quiet_pull: bool = False
    index: int = 0


@dataclass
class Event:
    """A container runtime event."""

    timestamp: datetime
    service: str = ""
    container: str = ""
    status: str = ""
    attributes: dict[str, str] = field(default_factory=dict)

    def __str__(self) -> str:
        stamp = self.timestamp.strftime("%Y-%m-%d %H:%M:%S.%f")
        attrs = ", ".join(f"{key}={value}" for key, value in self.attributes.items())
        return f"{stamp} container {self.status} {self.container} ({attrs})\n"


@dataclass
class EventsOptions:
    services: list[str] = field(default_factory=list)
    consumer: Callable[[Event], None] | None = None


@dataclass
class PortOptions:
    protocol: str = ""
    index: int = 0


@dataclass
class ListOptions:
    all: bool = False


@dataclass
class PsOptions:
    project: Project | None = None
    all: bool = False
    services: list[str] = field(default_factory=list)


@dataclass
class CopyOptions:
    source: str = ""
    destination: str = ""
    all: bool = False
    index: int = 0
    follow_link: bool = False
    copy_uid_gid: bool = False


@dataclass(order=True, frozen=True)
class PortPublisher:
    """A published port; ordered by URL, target port, published port, protocol."""

    url: str = ""
    target_port: int = 0
    published_port: int = 0
    protocol: str = ""


@dataclass
class ContainerSummary:
    id: str = ""
    name: str = ""
    command: str = ""
    project: str = ""
    service: str = ""
    state: str = ""
    health: str = ""
    exit_code: int = 0
    publishers: list[PortPublisher] | None = None


@dataclass
class ContainerProcSummary:
    id: str = ""
    name: str = ""
    processes: list[list[str]] = field(default_factory=list)
    titles: list[str] = field(default_factory=list)


@dataclass
class ImageSummary:
    id: str = ""
    container_name: str = ""
    repository: str = ""
    tag: str = ""
    size: int = 0


@dataclass
class ServiceStatus:
    id: str = ""
    name: str = ""
    replicas: int = 0
    desired: int = 0
    ports: list[str] = field(default_factory=list)
    publishers: list[PortPublisher] = field(default_factory=list)


@dataclass
class LogOptions:
    project: Project | None = None
    services: list[str] = field(default_factory=list)
    tail: str = ""
    since: str = ""
    until: str = ""
    follow: bool = False
    timestamps: bool = False


@dataclass
class PauseOptions:
    services: list[str] = field(default_factory=list)
    project: Project | None = None


@dataclass
class Stack:
    """Name and state of a compose application."""

    id: str = ""
    name: str = ""
    status: str = ""
    config_files: str = ""
    reason: str = ""


@dataclass
class ContainerEvent:
    """An event collected on a container while attached to a project."""

    type: ContainerEventType
    container: str = ""
    service: str = ""
    line: str = ""
    exit_code: int = 0
    restarting: bool = False


@runtime_checkable
class Service(Protocol):
    """Operations a backend offers to manage a compose project."""

    def build(self, project: Project, options: BuildOptions) -> None: ...

    def push(self, project: Project, options: PushOptions) -> None: ...

    def pull(self, project: Project, options: PullOptions) -> None: ...

    def create(self, project: Project, options: CreateOptions) -> None: ...

    def start(self, project_name: str, options: StartOptions) -> None: ...

    def restart(self, project_name: str, options: RestartOptions) -> None: ...

    def stop(self, project_name: str, options: StopOptions) -> None: ...

    def up(self, project: Project, options: UpOptions) -> None: ...

    def down(self, project_name: str, options: DownOptions) -> None: ...

    def logs(self, project_name: str, consumer: LogConsumer, options: LogOptions) -> None: ...

    def ps(self, project_name: str, options: PsOptions) -> list[ContainerSummary]: ...

    def list(self, options: ListOptions) -> list[Stack]: ...

    def convert(self, project: Project, options: ConvertOptions) -> bytes: ...

    def kill(self, project_name: str, options: KillOptions) -> None: ...

    def run_one_off_container(self, project: Project, options: RunOptions) -> int: ...

    def remove(self, project_name: str, options: RemoveOptions) -> None: ...

    def exec(self, project_name: str, options: RunOptions) -> int: ...

    def copy(self, project_name: str, options: CopyOptions) -> None: ...

    def pause(self, project_name: str, options: PauseOptions) -> None: ...

    def unpause(self, project_name: str, options: PauseOptions) -> None: ...

    def top(self, project_name: str, services: list[str]) -> list[ContainerProcSummary]: ...

    def events(self, project_name: str, options: EventsOptions) -> None: ...

    def port(
        self, project_name: str, service: str, port: int, options: PortOptions
    ) -> tuple[str, int]: ...

    def images(self, project_name: str, options: ImagesOptions) -> list[ImageSummary]: ...


def mapping_with_equals(entries: Iterable[str]) -> dict[str, str | None]:
    """Turn ``KEY=VALUE`` entries into a mapping; a bare ``KEY`` maps to None."""
    mapping: dict[str, str | None] = {}
    for entry in entries:
        key, sep, value = entry.partition("=")
        mapping[key] = value if sep else None
    return mapping


def get_image_name_or_default(
    service: ServiceConfig, project_name: str, separator: str = DEFAULT_SEPARATOR
) -> str:
    """Image name of a service, or the name used to tag its built image."""
    return service.image or f"{project_name}{separator}{service.name}"