"""Project scaffolding, the HEAD pointer and cluster creation requests."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from versctl.config import (
    CONFIG_FILE,
    BuilderConfig,
    Config,
    KernelConfig,
    MachineConfig,
    RootfsConfig,
    dump_config,
)

VERS_DIR = ".vers"
HEAD_FILE = "HEAD"
REPO_CONFIG = "[vers]\n\tversion = 1\n"
CLUSTER_TYPE_NEW = "new"
CLUSTER_TYPE_FROM_COMMIT = "from_commit"


class ProjectError(Exception):
    """Raised when project files cannot be created or a request is incomplete."""


def _write(path: Path, content: str, what: str) -> None:
    try:
        path.write_text(content, encoding="utf-8")
    except OSError as exc:
        raise ProjectError(f"error creating {what}: {exc}") from exc


def _mkdir(path: Path, what: str) -> None:
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise ProjectError(f"error creating {what}: {exc}") from exc


def init_project(
    directory: str | os.PathLike[str] | None = None,
    gitignore_content: str = "",
    name: str | None = None,
    mem_size: int = 512,
    vcpu_count: int = 1,
    rootfs: str | None = None,
    kernel: str = "default.bin",
    fs_size_cluster: int = 1024,
    fs_size_vm: int = 512,
) -> Config | None:
    """Create the ``.vers`` layout and, if absent, ``vers.toml`` in ``directory``.

    Returns the configuration written to ``vers.toml``, or None when the file
    already existed. The project name is not stored in the configuration.
    """
    root = Path(directory) if directory is not None else Path.cwd()
    vers_dir = root / VERS_DIR
    _mkdir(vers_dir, ".vers directory")

    gitignore = root / ".gitignore"
    if not gitignore.exists():
        _write(gitignore, gitignore_content, ".gitignore file")

    logs = vers_dir / "logs"
    _mkdir(logs, "logs directory")
    _mkdir(logs / "commits", "logs/commits directory")

    _write(vers_dir / HEAD_FILE, "", ".vers/HEAD file")
    _write(vers_dir / "config", REPO_CONFIG, "config file")

    toml_path = root / CONFIG_FILE
    written: Config | None = None
    if not toml_path.exists():
        _ = name or root.resolve().name or "unnamed-project"
        written = Config(
            machine=MachineConfig(
                mem_size_mib=mem_size,
                vcpu_count=vcpu_count,
                fs_size_cluster_mib=fs_size_cluster,
                fs_size_vm_mib=fs_size_vm,
            ),
            rootfs=RootfsConfig(name=rootfs or "default"),
            builder=BuilderConfig(name="none", dockerfile="Dockerfile"),
            kernel=KernelConfig(name=kernel),
        )
        _write(toml_path, dump_config(written), "vers.toml file")
        print("Created vers.toml with default configuration")
    else:
        print("vers.toml already exists, skipping")

    print(f"Initialized vers repository in {VERS_DIR} directory")
    return written


def write_head(directory: str | os.PathLike[str] | None, vm_target: str) -> bool:
    """Point HEAD at ``vm_target``; return False if the project is not initialised."""
    root = Path(directory) if directory is not None else Path.cwd()
    vers_dir = root / VERS_DIR
    if not vers_dir.exists():
        print("Warning: .vers directory not found. Run 'vers init' first.")
        return False
    try:
        (vers_dir / HEAD_FILE).write_text(vm_target + "\n", encoding="utf-8")
    except OSError as exc:
        raise ProjectError(f"failed to update HEAD: {exc}") from exc
    return True


def new_cluster_params(
    config: Config,
    cluster_alias: str | None = None,
    vm_alias: str | None = None,
) -> dict[str, Any]:
    """Build the request that creates a fresh cluster from ``config``."""
    params: dict[str, Any] = {
        "mem_size_mib": config.machine.mem_size_mib,
        "vcpu_count": config.machine.vcpu_count,
        "rootfs_name": config.rootfs.name,
        "kernel_name": config.kernel.name,
        "fs_size_cluster_mib": config.machine.fs_size_cluster_mib,
        "fs_size_vm_mib": config.machine.fs_size_vm_mib,
    }
    if cluster_alias:
        params["cluster_alias"] = cluster_alias
    if vm_alias:
        params["vm_alias"] = vm_alias
    return {"cluster_type": CLUSTER_TYPE_NEW, "params": params}


def from_commit_params(
    commit_id: str,
    config: Config | None = None,
    cluster_alias: str | None = None,
    vm_alias: str | None = None,
) -> dict[str, Any]:
    """Build the request that starts a cluster from an existing commit."""
    if not commit_id:
        raise ProjectError("commit key is required")
    params: dict[str, Any] = {"commit_id": commit_id}
    if cluster_alias:
        params["cluster_alias"] = cluster_alias
    if vm_alias:
        params["vm_alias"] = vm_alias
    if config is not None and config.machine.fs_size_cluster_mib > 0:
        params["fs_size_cluster_mib"] = config.machine.fs_size_cluster_mib
    return {"cluster_type": CLUSTER_TYPE_FROM_COMMIT, "params": params}