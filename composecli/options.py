"""Options of the ``create`` and ``up`` commands and running ``up``."""

from __future__ import annotations

import sys
from dataclasses import dataclass, field, replace
from datetime import timedelta
from typing import Sequence, TextIO

from composecli.logs import LogConsumer
from composecli.model import (
    CreateOptions,
    DeployConfig,
    Project,
    RecreateStrategy,
    Service,
    StartOptions,
    UpOptions,
    get_image_name_or_default,
)

PULL_POLICY_BUILD = "build"


def _string_to_bool(value: str | None) -> bool:
    return (value or "").lower() in ("1", "t", "true")


@dataclass
class CreateFlags:
    """Command-line options controlling how containers are created."""

    build: bool = False
    no_build: bool = False
    pull: str = "missing"
    pull_changed: bool = False
    remove_orphans: bool = False
    ignore_orphans: bool = False
    force_recreate: bool = False
    no_recreate: bool = False
    recreate_deps: bool = False
    no_inherit: bool = False
    time_changed: bool = False
    timeout: int = 10
    quiet_pull: bool = False

    def recreate_strategy(self) -> RecreateStrategy:
        """Strategy applied to existing containers of the selected services."""
        if self.no_recreate:
            return RecreateStrategy.NEVER
        if self.force_recreate:
            return RecreateStrategy.FORCE
        return RecreateStrategy.DIVERGED

    def dependencies_recreate_strategy(self) -> RecreateStrategy:
        """Strategy applied to existing containers of dependencies."""
        if self.no_recreate:
            return RecreateStrategy.NEVER
        if self.recreate_deps:
            return RecreateStrategy.FORCE
        return RecreateStrategy.DIVERGED

    def get_timeout(self) -> timedelta | None:
        """Shutdown timeout, when it was given explicitly."""
        if self.time_changed:
            return timedelta(seconds=self.timeout)
        return None

    def apply(self, project: Project) -> None:
        """Apply pull and build choices to the project's services."""
        if self.pull_changed:
            for service in project.services:
                service.pull_policy = self.pull
        if self.build:
            for service in project.services:
                if service.build is not None:
                    service.pull_policy = PULL_POLICY_BUILD
        if self.no_build:
            for service in project.services:
                service.build = None
                if not service.image:
                    service.image = get_image_name_or_default(service, project.name)


@dataclass
class UpFlags:
    """Command-line options of ``up``."""

    detach: bool = False
    no_start: bool = False
    no_deps: bool = False
    cascade_stop: bool = False
    exit_code_from: str = ""
    scale: list[str] = field(default_factory=list)
    no_color: bool = False
    no_prefix: bool = False
    attach_dependencies: bool = False
    attach: list[str] = field(default_factory=list)
    wait: bool = False

    def apply(self, project: Project, services: Sequence[str]) -> None:
        """Restrict the project to the services and apply scale overrides."""
        selected = list(services or [])
        if self.no_deps:
            enabled = project.get_services(selected)
            project.disabled_services.extend(
                s for s in project.services if s.name not in selected
            )
            project.services = enabled

        if self.exit_code_from:
            project.get_service(self.exit_code_from)

        for scale in self.scale:
            parts = scale.split("=")
            if len(parts) != 2:
                raise ValueError(f'invalid --scale option "{scale}". Should be SERVICE=NUM')
            name, count = parts
            set_service_scale(project, name, int(count))


def validate_flags(up: UpFlags, create: CreateFlags) -> None:
    """Check options are compatible; ``--exit-code-from`` and ``--wait`` imply others."""
    if up.exit_code_from:
        up.cascade_stop = True
    if up.wait:
        if up.attach_dependencies or up.cascade_stop or up.attach:
            raise ValueError(
                "--wait cannot be combined with --abort-on-container-exit, "
                "--attach or --attach-dependencies"
            )
        up.detach = True
    if create.build and create.no_build:
        raise ValueError("--build and --no-build are incompatible")
    if up.detach and (up.attach_dependencies or up.cascade_stop or up.attach):
        raise ValueError(
            "--detach cannot be combined with --abort-on-container-exit, "
            "--attach or --attach-dependencies"
        )
    if create.force_recreate and create.no_recreate:
        raise ValueError("--force-recreate and --no-recreate are incompatible")
    if create.recreate_deps and create.no_recreate:
        raise ValueError("--always-recreate-deps and --no-recreate are incompatible")


def set_service_scale(project: Project, name: str, replicas: int) -> None:
    """Set the number of replicas of an enabled service."""
    for service in project.services:
        if service.name == name:
            if service.deploy is None:
                service.deploy = DeployConfig()
            service.deploy.replicas = replicas
            return
    raise ValueError(f'unknown service "{name}"')


def run_up(
    backend: Service,
    create: CreateFlags,
    up: UpFlags,
    project: Project,
    services: Sequence[str] = (),
    out: TextIO | None = None,
) -> None:
    """Create and, unless told otherwise, start the project's containers."""
    stream = out if out is not None else sys.stdout
    services = list(services or [])
    create = replace(
        create,
        ignore_orphans=_string_to_bool(project.environment.get("COMPOSE_IGNORE_ORPHANS")),
    )
    if create.ignore_orphans and create.remove_orphans:
        raise ValueError("COMPOSE_IGNORE_ORPHANS and --remove-orphans cannot be combined")

    if not project.services:
        raise ValueError("no service selected")

    create.apply(project)
    up.apply(project, services)

    consumer = None
    if not up.detach:
        consumer = LogConsumer(stream, color=not up.no_color, prefix=not up.no_prefix)

    attach_to = services
    if up.attach:
        attach_to = list(up.attach)
    if up.attach_dependencies:
        attach_to = project.service_names()
    if not attach_to:
        attach_to = project.service_names()

    create_options = CreateOptions(
        services=services,
        remove_orphans=create.remove_orphans,
        ignore_orphans=create.ignore_orphans,
        recreate=create.recreate_strategy(),
        recreate_dependencies=create.dependencies_recreate_strategy(),
        inherit=not create.no_inherit,
        timeout=create.get_timeout(),
        quiet_pull=create.quiet_pull,
    )

    if up.no_start:
        backend.create(project, create_options)
        return

    backend.up(
        project,
        UpOptions(
            create=create_options,
            start=StartOptions(
                project=project,
                attach=consumer,
                attach_to=attach_to,
                exit_code_from=up.exit_code_from,
                cascade_stop=up.cascade_stop,
                wait=up.wait,
            ),
        ),
    )