"""Project configuration kept in ``vers.toml``."""

from __future__ import annotations

import os
import tomllib
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any

import tomli_w

CONFIG_FILE = "vers.toml"


class ConfigError(Exception):
    """Raised when the project configuration cannot be read."""


@dataclass
class MachineConfig:
    mem_size_mib: int = 512
    vcpu_count: int = 1
    fs_size_cluster_mib: int = 0
    fs_size_vm_mib: int = 0


@dataclass
class RootfsConfig:
    name: str = "default"


@dataclass
class BuilderConfig:
    name: str = "docker"
    dockerfile: str = "Dockerfile"


@dataclass
class KernelConfig:
    name: str = "default.bin"


_SECTIONS: dict[str, type] = {
    "machine": MachineConfig,
    "rootfs": RootfsConfig,
    "builder": BuilderConfig,
    "kernel": KernelConfig,
}


def _build_section(key: str, section_cls: type, raw: dict[str, Any]) -> Any:
    values: dict[str, Any] = {}
    for spec in fields(section_cls):
        if spec.name not in raw:
            continue
        value = raw[spec.name]
        expected = type(spec.default)
        if not isinstance(value, expected) or (expected is int and isinstance(value, bool)):
            raise ConfigError(
                f"{key}.{spec.name}: expected {expected.__name__}, got {type(value).__name__}"
            )
        values[spec.name] = value
    return section_cls(**values)


@dataclass
class Config:
    """The whole of a project's ``vers.toml``."""

    machine: MachineConfig = field(default_factory=MachineConfig)
    rootfs: RootfsConfig = field(default_factory=RootfsConfig)
    builder: BuilderConfig = field(default_factory=BuilderConfig)
    kernel: KernelConfig = field(default_factory=KernelConfig)

    def to_dict(self) -> dict[str, dict[str, Any]]:
        """Return the configuration as nested TOML tables."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Config:
        """Build a configuration, keeping defaults for anything not given."""
        sections: dict[str, Any] = {}
        for key, section_cls in _SECTIONS.items():
            raw = data.get(key, {})
            if not isinstance(raw, dict):
                raise ConfigError(f"section '{key}' must be a table")
            sections[key] = _build_section(key, section_cls, raw)
        return cls(**sections)


def default_config() -> Config:
    """Return the configuration used when no ``vers.toml`` exists."""
    return Config()


def load_config(path: str | os.PathLike[str] = CONFIG_FILE) -> Config:
    """Read the configuration file, falling back to defaults if it is missing."""
    path = Path(path)
    if not path.exists():
        print(f"Warning: {path.name} not found, using default configuration")
        return default_config()
    try:
        with path.open("rb") as handle:
            data = tomllib.load(handle)
        return Config.from_dict(data)
    except (OSError, tomllib.TOMLDecodeError, ConfigError) as exc:
        raise ConfigError(f"error parsing {path.name}: {exc}") from exc


def apply_overrides(
    config: Config,
    mem_size: int | None = None,
    vcpu_count: int | None = None,
    rootfs: str | None = None,
    kernel: str | None = None,
    dockerfile: str | None = None,
) -> Config:
    """Apply command-line overrides; unset, zero or empty values are ignored."""
    if mem_size and mem_size > 0:
        config.machine.mem_size_mib = mem_size
    if vcpu_count and vcpu_count > 0:
        config.machine.vcpu_count = vcpu_count
    if rootfs:
        config.rootfs.name = rootfs
    if kernel:
        config.kernel.name = kernel
    if dockerfile:
        config.builder.dockerfile = dockerfile
    return config


def dump_config(config: Config) -> str:
    """Serialise a configuration to TOML text."""
    return tomli_w.dumps(config.to_dict())