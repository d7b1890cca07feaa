"""Command-line entry point: argument parsing and dispatch to the backend."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any, Callable, Mapping, Sequence, TextIO

from composecli.actions import (
    run_copy,
    run_kill,
    run_pause,
    run_port,
    run_remove,
    run_restart,
    run_start,
    run_stop,
    run_unpause,
)
from composecli.compatibility import PLUGIN_NAME, MissingFlagArgumentError, convert
from composecli.errors import CanceledError, StatusError
from composecli.events import run_events
from composecli.images import run_images
from composecli.listing import run_list
from composecli.logs import AUTO, NEVER, LogConsumer, set_ansi_mode
from composecli.model import DownOptions, LogOptions, Project, Service
from composecli.proxy import ServiceProxy
from composecli.ps import parse_filter, run_ps
from composecli.top import run_top
from composecli.version import run_version

logger = logging.getLogger(__name__)

CANCELED_EXIT_CODE = 130
COMMAND_SYNTAX_FAILURE_EXIT_CODE = 1
GENERIC_FAILURE_EXIT_CODE = 1

_DOCKER_VALUE_FLAGS = frozenset(
    {"--tlscacert", "--tlscert", "--tlskey", "--host", "-H", "--context", "--log-level"}
)
_DOCKER_DEBUG_FLAGS = frozenset({"--debug", "-D"})


def _string_to_bool(value: str | None) -> bool:
    return (value or "").lower() in ("1", "t", "true")


@dataclass
class ProjectOptions:
    """Options selecting the compose project a command works on."""

    project_name: str = ""
    profiles: list[str] = field(default_factory=list)
    config_paths: list[str] = field(default_factory=list)
    work_dir: str = ""
    project_dir: str = ""
    env_file: str = ""
    compatibility: bool = False

    def to_project_name(self, environ: Mapping[str, str] | None = None) -> str:
        """The explicit project name, else ``COMPOSE_PROJECT_NAME``.

        Raises ValueError when neither is set.
        """
        if self.project_name:
            return self.project_name
        env = os.environ if environ is None else environ
        name = env.get("COMPOSE_PROJECT_NAME", "")
        if name:
            return name
        raise ValueError(
            "project name not specified: use --project-name or COMPOSE_PROJECT_NAME"
        )


def exit_code_for(error: BaseException) -> int:
    """Exit code a command ends with after ``error``."""
    if isinstance(error, StatusError):
        return error.status_code
    if isinstance(error, (CanceledError, KeyboardInterrupt)):
        return CANCELED_EXIT_CODE
    return GENERIC_FAILURE_EXIT_CODE


def run_down(
    backend: Service,
    project_name: str,
    project: Project | None = None,
    remove_orphans: bool = False,
    timeout: int | None = None,
    images: str = "",
    volumes: bool = False,
) -> None:
    """Stop and remove the project's containers and networks."""
    if images and images not in ("all", "local"):
        raise ValueError(f'invalid value for --rmi: "{images}"')
    backend.down(
        project_name,
        DownOptions(
            remove_orphans=remove_orphans,
            project=project,
            timeout=timedelta(seconds=timeout) if timeout is not None else None,
            images=images,
            volumes=volumes,
        ),
    )


def run_logs(
    backend: Service,
    project_name: str,
    project: Project | None = None,
    services: Sequence[str] = (),
    follow: bool = False,
    tail: str = "all",
    since: str = "",
    until: str = "",
    timestamps: bool = False,
    color: bool = True,
    prefix: bool = True,
    out: TextIO | None = None,
) -> None:
    """Show the output of the project's containers."""
    stream = out if out is not None else sys.stdout
    consumer = LogConsumer(stream, color=color, prefix=prefix)
    backend.logs(
        project_name,
        consumer,
        LogOptions(
            project=project,
            services=list(services or []),
            tail=tail,
            since=since,
            until=until,
            follow=follow,
            timestamps=timestamps,
        ),
    )


class _UsageError(Exception):
    """The command line could not be parsed."""


class _Parser(argparse.ArgumentParser):
    def error(self, message: str) -> None:  # type: ignore[override]
        raise _UsageError(message)


def _timeout_flag(parser: argparse.ArgumentParser, default: int | None) -> None:
    parser.add_argument(
        "-t", "--timeout", type=int, default=default,
        help="Specify a shutdown timeout in seconds",
    )


def build_parser() -> argparse.ArgumentParser:
    """Parser of the compose command line and its subcommands."""
    parser = _Parser(prog=PLUGIN_NAME, description="Docker Compose")
    parser.add_argument("--profile", dest="profiles", action="append", default=[],
                        help="Specify a profile to enable")
    parser.add_argument("-p", "--project-name", default="", help="Project name")
    parser.add_argument("-f", "--file", dest="config_paths", action="append", default=[],
                        help="Compose configuration files")
    parser.add_argument("--env-file", default="", help="Specify an alternate environment file.")
    parser.add_argument("--project-directory", default="",
                        help="Specify an alternate working directory")
    parser.add_argument("--workdir", default="", help=argparse.SUPPRESS)
    parser.add_argument("--compatibility", action="store_true",
                        help="Run compose in backward compatibility mode")
    parser.add_argument("--ansi", default=AUTO,
                        help='Control when to print ANSI control characters ("never"|"always"|"auto")')
    parser.add_argument("-v", "--version", action="store_true", help=argparse.SUPPRESS)
    parser.add_argument("--no-ansi", action="store_true", help=argparse.SUPPRESS)
    parser.add_argument("--verbose", action="store_true", help=argparse.SUPPRESS)

    sub = parser.add_subparsers(dest="command", metavar="COMMAND")

    down = sub.add_parser("down", help="Stop and remove containers, networks")
    down.add_argument("--remove-orphans", action="store_true", default=None,
                      help="Remove containers for services not defined in the Compose file.")
    _timeout_flag(down, None)
    down.add_argument("-v", "--volumes", action="store_true",
                      help="Remove named volumes and anonymous volumes attached to containers.")
    down.add_argument("--volume", dest="volume_deprecated", action="store_true",
                      help=argparse.SUPPRESS)
    down.add_argument("--rmi", default="", help='Remove images used by services ("local"|"all")')

    for name, text in (("start", "Start services"), ("pause", "Pause services"),
                       ("unpause", "Unpause services"), ("top", "Display the running processes")):
        cmd = sub.add_parser(name, help=text)
        cmd.add_argument("services", nargs="*", metavar="SERVICE")

    restart = sub.add_parser("restart", help="Restart service containers")
    restart.add_argument("services", nargs="*", metavar="SERVICE")
    _timeout_flag(restart, 10)

    stop = sub.add_parser("stop", help="Stop services")
    stop.add_argument("services", nargs="*", metavar="SERVICE")
    _timeout_flag(stop, None)

    ps = sub.add_parser("ps", help="List containers")
    ps.add_argument("services", nargs="*", metavar="SERVICE")
    ps.add_argument("--format", default="pretty", help="Format the output. Values: [pretty | json]")
    ps.add_argument("--filter", default="", help="Filter services by a property (supported filters: status).")
    ps.add_argument("--status", action="append", default=[], help="Filter services by status.")
    ps.add_argument("-q", "--quiet", action="store_true", help="Only display IDs")
    ps.add_argument("--services", dest="show_services", action="store_true", help="Display services")
    ps.add_argument("-a", "--all", action="store_true", help="Show all stopped containers")

    ls = sub.add_parser("ls", help="List running compose projects")
    ls.add_argument("--format", default="pretty", help="Format the output. Values: [pretty | json].")
    ls.add_argument("-q", "--quiet", action="store_true", help="Only display IDs.")
    ls.add_argument("--filter", action="append", default=[], help="Filter output based on conditions provided.")
    ls.add_argument("-a", "--all", action="store_true", help="Show all stopped Compose projects")

    logs = sub.add_parser("logs", help="View output from containers")
    logs.add_argument("services", nargs="*", metavar="SERVICE")
    logs.add_argument("-f", "--follow", action="store_true", help="Follow log output.")
    logs.add_argument("--since", default="", help="Show logs since timestamp or relative")
    logs.add_argument("--until", default="", help="Show logs before a timestamp or relative")
    logs.add_argument("--no-color", action="store_true", help="Produce monochrome output.")
    logs.add_argument("--no-log-prefix", action="store_true", help="Don't print prefix in logs.")
    logs.add_argument("-t", "--timestamps", action="store_true", help="Show timestamps.")
    logs.add_argument("--tail", default="all", help="Number of lines to show from the end of the logs.")

    kill = sub.add_parser("kill", help="Force stop service containers.")
    kill.add_argument("services", nargs="*", metavar="SERVICE")
    kill.add_argument("--remove-orphans", action="store_true", default=None,
                      help="Remove containers for services not defined in the Compose file.")
    kill.add_argument("-s", "--signal", default="SIGKILL", help="SIGNAL to send to the container.")

    rm = sub.add_parser("rm", help="Removes stopped service containers")
    rm.add_argument("services", nargs="*", metavar="SERVICE")
    rm.add_argument("-f", "--force", action="store_true", help="Don't ask to confirm removal")
    rm.add_argument("-s", "--stop", action="store_true", help="Stop the containers before removing")
    rm.add_argument("-v", "--volumes", action="store_true", help="Remove anonymous volumes")
    rm.add_argument("-a", "--all", action="store_true", help=argparse.SUPPRESS)

    events = sub.add_parser("events", help="Receive real time events from containers.")
    events.add_argument("services", nargs="*", metavar="SERVICE")
    events.add_argument("--json", action="store_true", help="Output events as a stream of json objects")

    port = sub.add_parser("port", help="Print the public port for a port binding.")
    port.add_argument("service", metavar="SERVICE")
    port.add_argument("private_port", metavar="PRIVATE_PORT")
    port.add_argument("--protocol", default="tcp", help="tcp or udp")
    port.add_argument("--index", type=int, default=1, help="index of the container")

    images = sub.add_parser("images", help="List images used by the created containers")
    images.add_argument("services", nargs="*", metavar="SERVICE")
    images.add_argument("-q", "--quiet", action="store_true", help="Only display IDs")

    version = sub.add_parser("version", help="Show the Docker Compose version information")
    version.add_argument("-f", "--format", default="", help="Format the output. Values: [pretty | json].")
    version.add_argument("--short", action="store_true", help="Shows only Compose's version number.")

    cp = sub.add_parser("cp", help="Copy files/folders between a service container and the local filesystem")
    cp.add_argument("source", metavar="SRC")
    cp.add_argument("destination", metavar="DEST")
    cp.add_argument("--index", type=int, default=0, help="Index of the container")
    cp.add_argument("--all", action="store_true", help=argparse.SUPPRESS)
    cp.add_argument("-L", "--follow-link", action="store_true", help="Always follow symbol link in SRC_PATH")
    cp.add_argument("-a", "--archive", action="store_true", help="Archive mode (copy all uid/gid information)")

    return parser


@dataclass
class _Context:
    ns: argparse.Namespace
    backend: Service
    options: ProjectOptions
    out: TextIO
    environ: Mapping[str, str]

    def name(self) -> str:
        return self.options.to_project_name(self.environ)


def _remove_orphans(ctx: _Context) -> bool:
    if ctx.ns.remove_orphans is not None:
        return ctx.ns.remove_orphans
    return _string_to_bool(ctx.environ.get("COMPOSE_REMOVE_ORPHANS"))


def _down(ctx: _Context) -> None:
    volumes = ctx.ns.volumes
    if ctx.ns.volume_deprecated:
        logger.warning("--volume is deprecated, please use --volumes")
        volumes = True
    run_down(ctx.backend, ctx.name(), None, _remove_orphans(ctx), ctx.ns.timeout,
             ctx.ns.rmi, volumes)


def _ps(ctx: _Context) -> None:
    statuses = list(ctx.ns.status) + parse_filter(ctx.ns.filter)
    run_ps(ctx.backend, ctx.name(), None, ctx.ns.services, ctx.ns.all, ctx.ns.quiet,
           ctx.ns.show_services, ctx.ns.format, statuses, ctx.out)


def _logs(ctx: _Context) -> None:
    ns = ctx.ns
    run_logs(ctx.backend, ctx.name(), None, ns.services, ns.follow, ns.tail, ns.since,
             ns.until, ns.timestamps, not ns.no_color, not ns.no_log_prefix, ctx.out)


def _copy(ctx: _Context) -> None:
    ns = ctx.ns
    if not ns.source:
        raise ValueError("source can not be empty")
    if not ns.destination:
        raise ValueError("destination can not be empty")
    run_copy(ctx.backend, ctx.name(), ns.source, ns.destination, ns.index,
             ns.follow_link, ns.archive, ns.all)


_HANDLERS: dict[str, Callable[[_Context], Any]] = {
    "down": _down,
    "start": lambda c: run_start(c.backend, c.name(), None, c.ns.services),
    "restart": lambda c: run_restart(c.backend, c.name(), None, c.ns.services, c.ns.timeout),
    "stop": lambda c: run_stop(c.backend, c.name(), None, c.ns.services, c.ns.timeout),
    "ps": _ps,
    "ls": lambda c: run_list(c.backend, c.ns.all, c.ns.quiet, c.ns.format, c.ns.filter, c.out),
    "logs": _logs,
    "kill": lambda c: run_kill(c.backend, c.name(), None, c.ns.services,
                               _remove_orphans(c), c.ns.signal),
    "rm": lambda c: run_remove(c.backend, c.name(), None, c.ns.services, c.ns.force,
                               c.ns.stop, c.ns.volumes),
    "pause": lambda c: run_pause(c.backend, c.name(), None, c.ns.services),
    "unpause": lambda c: run_unpause(c.backend, c.name(), None, c.ns.services),
    "top": lambda c: run_top(c.backend, c.name(), c.ns.services, c.out),
    "events": lambda c: run_events(c.backend, c.name(), c.ns.services, c.ns.json, c.out),
    "port": lambda c: run_port(c.backend, c.name(), c.ns.service, c.ns.private_port,
                               c.ns.protocol, c.ns.index, c.out),
    "images": lambda c: run_images(c.backend, c.name(), c.ns.services, c.ns.quiet, c.out),
    "version": lambda c: run_version(c.ns.short, c.ns.format, c.out),
    "cp": _copy,
}


def _plugin_args(argv: Sequence[str]) -> tuple[list[str], bool]:
    """Arguments following the plugin name, and whether debugging was asked for."""
    args = list(argv)
    if args and args[0] == PLUGIN_NAME:
        return args[1:], False
    converted = convert(args)
    debug = False
    position = 0
    while position < len(converted):
        token = converted[position]
        if token in _DOCKER_VALUE_FLAGS:
            position += 2
            continue
        if token == PLUGIN_NAME:
            break
        debug = debug or token in _DOCKER_DEBUG_FLAGS
        position += 1
    return converted[position + 1:], debug


def _prepare(ns: argparse.Namespace, debug: bool, err: TextIO) -> ProjectOptions:
    """Apply root options; raise ValueError on conflicting ones."""
    ansi = ns.ansi
    if ns.no_ansi:
        if ansi != AUTO:
            raise ValueError(
                'cannot specify DEPRECATED "--no-ansi" and "--ansi". Please use only "--ansi"'
            )
        ansi = NEVER
        err.write("option '--no-ansi' is DEPRECATED ! Please use '--ansi' instead.\n")
    if ns.verbose or debug:
        logging.basicConfig()
        logging.getLogger().setLevel(logging.DEBUG)
    set_ansi_mode(ansi)
    options = ProjectOptions(
        project_name=ns.project_name,
        profiles=list(ns.profiles),
        config_paths=list(ns.config_paths),
        work_dir=ns.workdir,
        project_dir=ns.project_directory,
        env_file=ns.env_file,
        compatibility=ns.compatibility,
    )
    if options.work_dir:
        if options.project_dir:
            raise ValueError(
                'cannot specify DEPRECATED "--workdir" and "--project-directory". '
                'Please use only "--project-directory" instead'
            )
        options.project_dir = options.work_dir
        err.write(
            "option '--workdir' is DEPRECATED at root level! "
            "Please use '--project-directory' instead.\n"
        )
    return options


def _report(error: BaseException, err: TextIO) -> int:
    message = str(error)
    if message:
        err.write(message + "\n")
    return exit_code_for(error)


def _dispatch(
    argv: Sequence[str],
    backend: Service,
    out: TextIO,
    err: TextIO,
    environ: Mapping[str, str],
) -> int:
    try:
        args, debug = _plugin_args(argv)
    except MissingFlagArgumentError as exc:
        err.write(f"{exc}\n")
        return GENERIC_FAILURE_EXIT_CODE

    parser = build_parser()
    try:
        ns = parser.parse_args(args)
    except _UsageError as exc:
        err.write(f"{exc}\n")
        return COMMAND_SYNTAX_FAILURE_EXIT_CODE
    except SystemExit as exc:
        return exc.code if isinstance(exc.code, int) else 0

    try:
        options = _prepare(ns, debug, err)
        if ns.command is None:
            if ns.version:
                run_version(out=out)
            else:
                parser.print_help(out)
            return 0
        _HANDLERS[ns.command](_Context(ns, backend, options, out, environ))
    except KeyboardInterrupt as exc:
        return _report(exc, err)
    except Exception as exc:  # noqa: BLE001 - every failure becomes an exit code
        return _report(exc, err)
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Run the compose command line and return its exit code."""
    arguments = sys.argv[1:] if argv is None else list(argv)
    return _dispatch(arguments, ServiceProxy(), sys.stdout, sys.stderr, os.environ)


if __name__ == "__main__":
    sys.exit(main())