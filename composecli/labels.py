"""Label keys attached to compose resources and the tool version."""

from __future__ import annotations

import re

VERSION = "dev"

PROJECT_LABEL = "com.docker.compose.project"
SERVICE_LABEL = "com.docker.compose.service"
CONFIG_HASH_LABEL = "com.docker.compose.config-hash"
CONTAINER_NUMBER_LABEL = "com.docker.compose.container-number"
VOLUME_LABEL = "com.docker.compose.volume"
NETWORK_LABEL = "com.docker.compose.network"
WORKING_DIR_LABEL = "com.docker.compose.project.working_dir"
CONFIG_FILES_LABEL = "com.docker.compose.project.config_files"
ENVIRONMENT_FILE_LABEL = "com.docker.compose.project.environment_file"
ONEOFF_LABEL = "com.docker.compose.oneoff"
SLUG_LABEL = "com.docker.compose.slug"
IMAGE_DIGEST_LABEL = "com.docker.compose.image"
DEPENDENCIES_LABEL = "com.docker.compose.depends_on"
VERSION_LABEL = "com.docker.compose.version"
IMAGE_BUILDER_LABEL = "com.docker.compose.image.builder"

_IDENT = r"[0-9A-Za-z\-~]"
_VERSION_RE = re.compile(
    r"^v?(?P<segments>[0-9]+(?:\.[0-9]+)*?)"
    rf"(?:-(?:[0-9]+{_IDENT}*(?:\.{_IDENT}+)*)"
    rf"|-?(?:[A-Za-z\-~]+{_IDENT}*(?:\.{_IDENT}+)*))?"
    rf"(?:\+{_IDENT}+(?:\.{_IDENT}+)*)?$"
)


def compose_version(version: str) -> str:
    """Return ``MAJOR.MINOR.PATCH`` of a version string, or "" if it does not parse."""
    match = _VERSION_RE.match(version)
    if match is None:
        return ""
    segments = [int(part) for part in match.group("segments").split(".")]
    segments += [0] * (3 - len(segments))
    major, minor, patch = segments[:3]
    return f"{major}.{minor}.{patch}"


COMPOSE_VERSION = compose_version(VERSION)