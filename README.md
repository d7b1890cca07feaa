# composecli

`composecli` is a command-line front end for multi-container application
projects. It parses compose-style commands, turns them into typed option
objects (`composecli.model`) and hands them to a backend object that does
the actual work. It has no dependencies outside the standard library.

## Installation

```
pip install .
```

Tests need the `test` extra:

```
pip install ".[test]"
pytest
```

## Command line

```
composecli version
composecli version --short
composecli version --format json
composecli --help
```

The parser (`composecli.cli.build_parser`) knows these commands: `down`,
`start`, `restart`, `stop`, `ps`, `ls`, `logs`, `kill`, `rm`, `pause`,
`unpause`, `top`, `events`, `port`, `images`, `version` and `cp`.

Root options include `-p/--project-name`, `-f/--file`, `--profile`,
`--env-file`, `--project-directory`, `--compatibility` and
`--ansi never|always|auto`. The deprecated `--no-ansi` and `--workdir`
are still accepted, with a warning on standard error; combining them with
`--ansi` or `--project-directory` is an error.

Commands that act on a project take its name from `--project-name`, or
else from the `COMPOSE_PROJECT_NAME` environment variable; without either
they fail. `down` and `kill` read `COMPOSE_REMOVE_ORPHANS` when
`--remove-orphans` is not given.

Arguments written in the standalone style are normalised before parsing:
`--verbose` becomes `--debug`, `-h` becomes `--help`, `-v`/`--version`
become the `version` command, and global connection flags such as
`--context` or `--host` are moved in front of the command. The same
conversion can be used on its own:

```python
from composecli.compatibility import convert

convert(["--context", "foo", "-f", "compose.yaml", "up"])
# ['--context', 'foo', 'compose', '-f', 'compose.yaml', 'up']
```

`main(argv=None)` returns the exit code: a `StatusError` gives its own
`status_code`, a cancellation (`CanceledError` or Ctrl-C) gives 130, and
any other failure or a usage error gives 1.

## Using it as a library

A backend is any object with the methods of the `composecli.model.Service`
protocol (`up`, `down`, `ps`, `list`, `logs`, `images`, ...).
`composecli.proxy.ServiceProxy` wraps one: it delegates each call through
a replaceable `<operation>_fn` attribute, runs interceptors on the project
before project-based operations, and raises `NotImplementedByBackendError`
for any operation that has no function.

```python
import sys

from composecli.proxy import ServiceProxy
from composecli.ps import run_ps

proxy = ServiceProxy().with_service(my_backend)
run_ps(proxy, "myproject", fmt="pretty", out=sys.stdout)
```

Each command has a function that can be called directly:

- `composecli.ps.run_ps`, `composecli.listing.run_list`,
  `composecli.images.run_images`, `composecli.top.run_top`,
  `composecli.events.run_events`, `composecli.version.run_version`
- `composecli.actions`: `run_kill`, `run_pause`, `run_unpause`, `run_port`,
  `run_copy`, `run_remove`, `run_start`, `run_stop`, `run_restart`
- `composecli.cli`: `run_down`, `run_logs`
- `composecli.options`: `CreateFlags`, `UpFlags`, `validate_flags`,
  `set_service_scale` and `run_up`, which creates and starts a `Project`
  (scale overrides, recreate strategies, pull and build choices)

Output helpers live in `composecli.formatter` (`print_list` for
`pretty`, `json` and `{{json.}}` output, `print_pretty_section`,
`tabwrite`, `to_json`, `format_errors`) and `composecli.logs` (a
`LogConsumer` writing coloured, name-prefixed log lines; `set_ansi_mode`
turns colours on or off). Errors derive from `ComposeError` in
`composecli.errors`, with `is_*_error` helpers that follow the `__cause__`
chain. Label keys and `compose_version` are in `composecli.labels`.

## What it does not do

- It ships no backend. The `composecli` command is wired to an empty
  `ServiceProxy`, so every command except `version` and `--help` reports
  "not implemented"; to do real work, call the library functions with a
  backend of your own.
- It does not read compose files: projects are built in code as
  `composecli.model.Project` objects, and on the command line only a
  project name is used.
- The command line has no `up`, `create`, `build`, `run`, `exec`,
  `convert`, `push` or `pull` commands; `up` and `create` behaviour is
  available only through `composecli.options`.