"""Build metadata, version reporting and command-level policies."""

from __future__ import annotations

import json
import platform
from dataclasses import dataclass, fields
from datetime import datetime, timezone

VERSION = "dev"
GIT_COMMIT = "unknown"
BUILD_DATE = "unknown"
NAME = "vers-cli"
DESCRIPTION = "A CLI tool for version management"
AUTHOR = "the VERS team"
REPOSITORY = ""
LICENSE = "MIT"

_NO_UPDATE_CHECK = frozenset({"login", "help", "upgrade"})
_NO_AUTH = frozenset({"login", "help"})

_ARCH_NAMES = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "aarch64": "arm64",
    "arm64": "arm64",
    "i386": "386",
    "i686": "386",
}


@dataclass(frozen=True)
class MetadataInfo:
    """Complete version and build information."""

    name: str
    version: str
    description: str
    git_commit: str
    build_date: str
    author: str
    repository: str
    license: str
    runtime_version: str
    platform: str
    arch: str
    timestamp: str

    def to_dict(self) -> dict[str, str]:
        """Return the fields under their camel-case JSON names."""
        return {_camel(spec.name): getattr(self, spec.name) for spec in fields(self)}


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def version_info(now: datetime | None = None) -> MetadataInfo:
    """Collect the version information, stamped with ``now`` (default: current time)."""
    moment = (now or datetime.now(timezone.utc)).astimezone(timezone.utc)
    machine = platform.machine().lower()
    return MetadataInfo(
        name=NAME,
        version=VERSION,
        description=DESCRIPTION,
        git_commit=GIT_COMMIT,
        build_date=BUILD_DATE,
        author=AUTHOR,
        repository=REPOSITORY,
        license=LICENSE,
        runtime_version=platform.python_version(),
        platform=platform.system().lower(),
        arch=_ARCH_NAMES.get(machine, machine),
        timestamp=moment.strftime("%Y-%m-%dT%H:%M:%SZ"),
    )


def version_json(info: MetadataInfo) -> str:
    """Serialise version information as indented JSON."""
    return json.dumps(info.to_dict(), indent=2, ensure_ascii=False)


def is_auth_error(message: str) -> bool:
    """Tell whether an error message reports failed authentication."""
    return "401" in message or "unauthorized" in message.lower()


def skips_update_check(command_name: str) -> bool:
    """Tell whether a command runs without checking for updates."""
    return command_name in _NO_UPDATE_CHECK


def requires_auth(command_name: str) -> bool:
    """Tell whether a command needs a stored API key."""
    return command_name not in _NO_AUTH