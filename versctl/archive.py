"""Packing the working directory into a rootfs build archive."""

from __future__ import annotations

import io
import os
import tarfile
from collections.abc import Iterator
from pathlib import Path
from typing import BinaryIO

from versctl.config import Config


class BuildError(Exception):
    """Raised when a rootfs image cannot be built."""


def check_buildable(config: Config, base_dir: str | os.PathLike[str] | None = None) -> bool:
    """Return False if building is switched off, True if it can go ahead.

    Raises BuildError when the configuration does not allow a build.
    """
    if config.builder.name == "none":
        print("Builder is set to 'none'; skipping")
        return False
    if config.builder.name != "docker":
        raise BuildError(
            f"unsupported builder: {config.builder.name} (only 'docker' is currently supported)"
        )
    if config.rootfs.name == "default":
        raise BuildError(
            "If you're trying to upload a custom rootfs, please specify a new name for "
            "rootfs.name in vers.toml. Otherwise, set builder.name to 'none'."
        )
    base = Path(base_dir) if base_dir is not None else Path.cwd()
    if not (base / config.builder.dockerfile).exists():
        raise BuildError(f"Dockerfile '{config.builder.dockerfile}' not found in current directory")
    return True


def is_excluded(rel_path: str | os.PathLike[str]) -> bool:
    """Tell whether a path relative to the project root stays out of the archive."""
    rel = os.fspath(rel_path)
    return (
        rel == ".vers"
        or rel.startswith(".vers" + os.sep)
        or rel.startswith(".vers/")
        or rel == "vers.toml"
    )


def _walk(root: str, directory: str, skip: set[str]) -> Iterator[tuple[str, str]]:
    with os.scandir(directory) as entries:
        ordered = sorted(entries, key=lambda entry: entry.name)
    for entry in ordered:
        rel = os.path.relpath(entry.path, root)
        if is_excluded(rel) or os.path.abspath(entry.path) in skip:
            continue
        yield entry.path, rel
        if entry.is_dir(follow_symlinks=False):
            yield from _walk(root, entry.path, skip)


def _write_entries(tar: tarfile.TarFile, root: str, skip: set[str]) -> list[str]:
    names = []
    for path, rel in _walk(root, root, skip):
        name = Path(rel).as_posix()
        try:
            info = tar.gettarinfo(path, arcname=name)
        except OSError as exc:
            raise BuildError(f"failed to create tar header: {exc}") from exc
        if info is None:
            raise BuildError(f"failed to create tar header: unsupported file type: {path}")
        try:
            if info.isreg():
                with open(path, "rb") as handle:
                    tar.addfile(info, handle)
            else:
                tar.addfile(info)
        except OSError as exc:
            raise BuildError(f"failed to add {path}: {exc}") from exc
        names.append(name)
    return names


def create_tar_archive(
    target: BinaryIO | str | os.PathLike[str],
    work_dir: str | os.PathLike[str] | None = None,
) -> list[str]:
    """Write a tar archive of ``work_dir`` to ``target`` and return the entry names.

    ``.vers``, ``vers.toml`` and the archive file itself are left out.
    """
    root = os.path.abspath(work_dir if work_dir is not None else os.getcwd())
    if isinstance(target, (str, os.PathLike)):
        skip = {os.path.abspath(target)}
        with open(target, "wb") as handle, tarfile.open(fileobj=handle, mode="w") as tar:
            return _write_entries(tar, root, skip)
    skip = set()
    name = getattr(target, "name", None)
    if isinstance(name, (str, os.PathLike)):
        skip.add(os.path.abspath(name))
    with tarfile.open(fileobj=target, mode="w") as tar:
        return _write_entries(tar, root, skip)


def build_archive(config: Config, work_dir: str | os.PathLike[str] | None = None) -> bytes | None:
    """Check the configuration and return the archive to upload, or None if skipped."""
    root = Path(work_dir) if work_dir is not None else Path.cwd()
    if not check_buildable(config, root):
        return None
    print("Creating tar archive of working directory...")
    buffer = io.BytesIO()
    create_tar_archive(buffer, root)
    return buffer.getvalue()