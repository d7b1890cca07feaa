"""A Service that delegates each operation to a replaceable function."""

from __future__ import annotations

from typing import Any, Callable

from composecli.errors import NotImplementedByBackendError
from composecli.model import (
    BuildOptions,
    ContainerProcSummary,
    ContainerSummary,
    ConvertOptions,
    CopyOptions,
    CreateOptions,
    DownOptions,
    EventsOptions,
    ImagesOptions,
    ImageSummary,
    KillOptions,
    ListOptions,
    LogConsumer,
    LogOptions,
    PauseOptions,
    PortOptions,
    Project,
    PsOptions,
    PullOptions,
    PushOptions,
    RemoveOptions,
    RestartOptions,
    RunOptions,
    Service,
    Stack,
    StartOptions,
    StopOptions,
    UpOptions,
)

Interceptor = Callable[[Project], None]

_OPERATIONS = (
    "build",
    "push",
    "pull",
    "create",
    "start",
    "restart",
    "stop",
    "up",
    "down",
    "logs",
    "ps",
    "list",
    "convert",
    "kill",
    "run_one_off_container",
    "remove",
    "exec",
    "copy",
    "pause",
    "unpause",
    "top",
    "events",
    "port",
    "images",
)


class ServiceProxy:
    """Implements Service by calling ``<operation>_fn`` attributes.

    An operation whose function is unset raises NotImplementedByBackendError.
    Interceptors see the project before project-based operations run.
    """

    def __init__(self, **functions: Callable[..., Any]) -> None:
        for name in _OPERATIONS:
            setattr(self, f"{name}_fn", None)
        for key, fn in functions.items():
            if not key.endswith("_fn") or key[:-3] not in _OPERATIONS:
                raise TypeError(f"unknown operation function: {key}")
            setattr(self, key, fn)
        self._interceptors: list[Interceptor] = []

    def with_service(self, service: Service) -> ServiceProxy:
        """Delegate every operation to ``service``."""
        for name in _OPERATIONS:
            setattr(self, f"{name}_fn", getattr(service, name))
        return self

    def with_interceptor(self, *args: Interceptor) -> ServiceProxy:
        """Add interceptors applied to the project before delegating."""
        self._interceptors.extend(args)
        return self

    def _function(self, name: str) -> Callable[..., Any]:
        fn = getattr(self, f"{name}_fn")
        if fn is None:
            raise NotImplementedByBackendError(name)
        return fn

    def _intercept(self, project: Project) -> None:
        for interceptor in self._interceptors:
            interceptor(project)

    def build(self, project: Project, options: BuildOptions) -> None:
        fn = self._function("build")
        self._intercept(project)
        return fn(project, options)

    def push(self, project: Project, options: PushOptions) -> None:
        fn = self._function("push")
        self._intercept(project)
        return fn(project, options)

    def pull(self, project: Project, options: PullOptions) -> None:
        fn = self._function("pull")
        self._intercept(project)
        return fn(project, options)

    def create(self, project: Project, options: CreateOptions) -> None:
        fn = self._function("create")
        self._intercept(project)
        return fn(project, options)

    def start(self, project_name: str, options: StartOptions) -> None:
        return self._function("start")(project_name, options)

    def restart(self, project_name: str, options: RestartOptions) -> None:
        return self._function("restart")(project_name, options)

    def stop(self, project_name: str, options: StopOptions) -> None:
        return self._function("stop")(project_name, options)

    def up(self, project: Project, options: UpOptions) -> None:
        fn = self._function("up")
        self._intercept(project)
        return fn(project, options)

    def down(self, project_name: str, options: DownOptions) -> None:
        return self._function("down")(project_name, options)

    def logs(self, project_name: str, consumer: LogConsumer, options: LogOptions) -> None:
        return self._function("logs")(project_name, consumer, options)

    def ps(self, project_name: str, options: PsOptions) -> list[ContainerSummary]:
        return self._function("ps")(project_name, options)

    def list(self, options: ListOptions) -> list[Stack]:
        return self._function("list")(options)

    def convert(self, project: Project, options: ConvertOptions) -> bytes:
        fn = self._function("convert")
        self._intercept(project)
        return fn(project, options)

    def kill(self, project_name: str, options: KillOptions) -> None:
        return self._function("kill")(project_name, options)

    def run_one_off_container(self, project: Project, options: RunOptions) -> int:
        fn = self._function("run_one_off_container")
        self._intercept(project)
        return fn(project, options)

    def remove(self, project_name: str, options: RemoveOptions) -> None:
        return self._function("remove")(project_name, options)

    def exec(self, project_name: str, options: RunOptions) -> int:
        return self._function("exec")(project_name, options)

    def copy(self, project_name: str, options: CopyOptions) -> None:
        return self._function("copy")(project_name, options)

    def pause(self, project_name: str, options: PauseOptions) -> None:
        return self._function("pause")(project_name, options)

    def unpause(self, project_name: str, options: PauseOptions) -> None:
        return self._function("unpause")(project_name, options)

    def top(self, project_name: str, services: list[str]) -> list[ContainerProcSummary]:
        return self._function("top")(project_name, services)

    def events(self, project_name: str, options: EventsOptions) -> None:
        return self._function("events")(project_name, options)

    def port(
        self, project_name: str, service: str, port: int, options: PortOptions
    ) -> tuple[str, int]:
        return self._function("port")(project_name, service, port, options)

    def images(self, project_name: str, options: ImagesOptions) -> list[ImageSummary]:
        return self._function("images")(project_name, options)