"""SSH and SCP invocations for reaching a running VM."""

from __future__ import annotations

import enum
import os
import subprocess
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path

LOCAL_SSH_PORT = "22"

_SSH_OPTIONS = (
    "-o", "StrictHostKeyChecking=no",
    "-o", "UserKnownHostsFile=/dev/null",
    "-o", "IdentitiesOnly=yes",
    "-o", "PreferredAuthentications=publickey",
)


class TransferError(Exception):
    """Raised when a connection or copy to a VM cannot be made."""


class Direction(enum.Enum):
    """Which way files travel between this machine and the VM."""

    UPLOAD = "upload"
    DOWNLOAD = "download"


@dataclass(frozen=True)
class CopyArgs:
    """The parsed positional arguments of a copy."""

    vm_identifier: str
    source: str
    destination: str
    uses_head: bool


@dataclass(frozen=True)
class Endpoint:
    """Host and port that SSH connects to."""

    host: str
    port: str


def parse_copy_args(
    args: Sequence[str],
    head_vm: str | Callable[[], str] | None = None,
) -> CopyArgs:
    """Split copy arguments into VM, source and destination.

    With two arguments the VM is taken from ``head_vm``, which may be the
    identifier itself or a function returning it.
    """
    count = len(args)
    if count < 2 or count > 3:
        raise TransferError(f"accepts between 2 and 3 arg(s), received {count}")
    if count == 3:
        vm, source, destination = args
        return CopyArgs(vm, source, destination, uses_head=False)

    if head_vm is None:
        raise TransferError("no VM ID provided and no HEAD VM is available")
    if callable(head_vm):
        try:
            head = head_vm()
        except Exception as exc:
            raise TransferError(f"no VM ID provided and {exc}") from exc
    else:
        head = head_vm
    source, destination = args
    return CopyArgs(head, source, destination, uses_head=True)


def detect_direction(source: str, destination: str) -> Direction:
    """Decide whether a copy uploads or downloads.

    An absolute path on one side only marks that side as remote; otherwise
    the copy is an upload when ``source`` exists locally.
    """
    source_remote = source.startswith("/")
    destination_remote = destination.startswith("/")
    if source_remote and not destination_remote:
        return Direction.DOWNLOAD
    if destination_remote and not source_remote:
        return Direction.UPLOAD
    return Direction.UPLOAD if Path(source).exists() else Direction.DOWNLOAD


def scp_paths(
    ssh_host: str, source: str, destination: str, direction: Direction
) -> tuple[str, str]:
    """Return the source and destination as scp expects them."""
    target = f"root@{ssh_host}"
    if direction is Direction.UPLOAD:
        return source, f"{target}:{destination}"
    return f"{target}:{source}", destination


def build_scp_command(
    ssh_host: str,
    ssh_port: str | int,
    key_path: str | os.PathLike[str],
    source: str,
    destination: str,
    direction: Direction,
    recursive: bool = False,
) -> list[str]:
    """Build the full scp command line."""
    scp_source, scp_dest = scp_paths(ssh_host, source, destination, direction)
    command = [
        "scp",
        "-P", str(ssh_port),
        *_SSH_OPTIONS,
        "-o", "LogLevel=ERROR",
        "-i", os.fspath(key_path),
    ]
    if recursive:
        command.append("-r")
    command.extend([scp_source, scp_dest])
    return command


def build_ssh_command(
    ssh_host: str,
    ssh_port: str | int,
    key_path: str | os.PathLike[str],
    command: str | None = None,
) -> list[str]:
    """Build an ssh command line; without ``command`` it opens a shell."""
    line = [
        "ssh",
        f"root@{ssh_host}",
        "-p", str(ssh_port),
        *_SSH_OPTIONS,
    ]
    if command is not None:
        line.extend(["-o", "LogLevel=ERROR"])
    line.extend(["-i", os.fspath(key_path)])
    if command is not None:
        line.append(command)
    return line


def resolve_endpoint(
    vers_host: str, ssh_port: int, vm_ip: str, host_is_local: bool
) -> Endpoint:
    """Pick the address to connect to.

    A local host is reached on the VM's own address and port 22; otherwise
    the forwarded port on the public host is used.
    """
    if host_is_local:
        return Endpoint(vm_ip, LOCAL_SSH_PORT)
    return Endpoint(vers_host, str(ssh_port))


def check_vm_ready(state: str, ssh_port: int) -> None:
    """Raise TransferError unless the VM is running and has an SSH port."""
    if state != "Running":
        raise TransferError(f"VM is not running (current state: {state})")
    if not ssh_port:
        raise TransferError("VM does not have SSH port information available")


def run_scp(command: Sequence[str]) -> None:
    """Run scp with the terminal's output streams."""
    try:
        result = subprocess.run(list(command), check=False)
    except OSError as exc:
        raise TransferError(f"failed to run SCP command: {exc}") from exc
    if result.returncode != 0:
        raise TransferError(f"scp command exited with code {result.returncode}")


def run_ssh(command: Sequence[str], interactive: bool = False) -> int:
    """Run ssh and return its exit code.

    An interactive session accepts any exit code; a remote command that
    exits non-zero raises TransferError.
    """
    try:
        result = subprocess.run(list(command), check=False)
    except OSError as exc:
        raise TransferError(f"failed to run SSH command: {exc}") from exc
    if result.returncode != 0 and not interactive:
        raise TransferError(f"command exited with code {result.returncode}")
    return result.returncode