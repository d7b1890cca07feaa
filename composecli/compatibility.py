"""Turn standalone command-line arguments into plugin-style ones."""

from __future__ import annotations

from typing import Sequence

PLUGIN_NAME = "compose"

_COMPLETION_COMMANDS = frozenset({"__complete", "__completeNoDesc"})
_BOOL_FLAGS = frozenset({"--debug", "-D", "--verbose", "--tls", "--tlsverify"})
_STRING_FLAGS = frozenset(
    {"--tlscacert", "--tlscert", "--tlskey", "--host", "-H", "--context", "--log-level"}
)
_RENAMED_FLAGS = {
    "--verbose": "--debug",
    "-h": "--help",
    "--version": "version",
    "-v": "version",
}


class MissingFlagArgumentError(ValueError):
    """A top-level flag that takes a value came last."""

    def __init__(self, flag: str) -> None:
        self.flag = flag
        super().__init__(f"flag needs an argument: '{flag}'")


def convert(args: Sequence[str]) -> list[str]:
    """Move top-level flags in front of the plugin name and keep the command as given."""
    root_flags: list[str] = []
    command = [PLUGIN_NAME]
    remaining = iter(args)
    for arg in remaining:
        if arg in _COMPLETION_COMMANDS:
            command.insert(0, arg)
            continue
        if arg and not arg.startswith("-"):
            if arg != PLUGIN_NAME:
                command.append(arg)
            command.extend(remaining)
            break
        arg = _RENAMED_FLAGS.get(arg, arg)
        if arg in _BOOL_FLAGS:
            root_flags.append(arg)
        elif arg in _STRING_FLAGS:
            value = next(remaining, None)
            if value is None:
                raise MissingFlagArgumentError(arg)
            root_flags.extend((arg, value))
        else:
            command.append(arg)
    return root_flags + command