"""Argument rules for deleting and renaming VMs and clusters."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

DELETE_ALL_CLUSTERS = "all_clusters"
DELETE_HEAD_VM = "head_vm"
DELETE_CLUSTERS = "clusters"
DELETE_VMS = "vms"


class UsageError(Exception):
    """Raised when a command's arguments or flags do not fit together."""


@dataclass(frozen=True)
class KillPlan:
    """What a delete request will remove.

    ``action`` is one of the ``DELETE_*`` constants; ``targets`` is empty
    when every cluster or the HEAD VM is meant.
    """

    action: str
    targets: tuple[str, ...] = ()
    recursive: bool = False

    @property
    def uses_head(self) -> bool:
        """True when the HEAD VM is the target."""
        return self.action == DELETE_HEAD_VM


@dataclass(frozen=True)
class RenamePlan:
    """What a rename request will change.

    ``target`` is None when the HEAD VM is renamed.
    """

    new_alias: str
    target: str | None = None
    is_cluster: bool = False

    @property
    def uses_head(self) -> bool:
        """True when the HEAD VM is renamed."""
        return self.target is None


def validate_kill_args(
    kill_all: bool, is_cluster: bool, recursive: bool, args: Sequence[str]
) -> None:
    """Raise UsageError when the delete flags and targets conflict."""
    if kill_all and is_cluster:
        raise UsageError("cannot use --all and --cluster together")
    if kill_all and args:
        raise UsageError("cannot specify targets when using --all")
    if is_cluster and not kill_all and not args:
        raise UsageError("--cluster requires at least one cluster identifier")
    if recursive and is_cluster:
        raise UsageError("--recursive only applies to VMs, not clusters")


def plan_kill(
    kill_all: bool, is_cluster: bool, recursive: bool, args: Sequence[str]
) -> KillPlan:
    """Check the delete arguments and decide what is to be removed."""
    validate_kill_args(kill_all, is_cluster, recursive, args)
    if kill_all:
        return KillPlan(DELETE_ALL_CLUSTERS, recursive=recursive)
    if not args:
        return KillPlan(DELETE_HEAD_VM, recursive=recursive)
    action = DELETE_CLUSTERS if is_cluster else DELETE_VMS
    return KillPlan(action, tuple(args), recursive=recursive)


def plan_rename(args: Sequence[str], is_cluster: bool = False) -> RenamePlan:
    """Check the rename arguments and decide what gets the new alias.

    One argument renames the HEAD VM; two name the target and the new alias.
    Clusters always need an explicit target.
    """
    count = len(args)
    if count < 1 or count > 2:
        raise UsageError(f"accepts 1 or 2 arg(s), received {count}")
    if count == 1:
        if is_cluster:
            raise UsageError("cluster ID or alias must be provided when renaming clusters")
        return RenamePlan(new_alias=args[0])
    target, new_alias = args
    return RenamePlan(new_alias=new_alias, target=target, is_cluster=is_cluster)