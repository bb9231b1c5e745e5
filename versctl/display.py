"""Text shown for cluster, VM and rootfs status and for new branches."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

STATUS_TIP = "Tip: To view all clusters, run: vers status"
LIST_TIP = (
    "Tip: To view VMs in a specific cluster, use: vers status -c <cluster-id>\n"
    "To view a specific VM, use: vers status <vm-id>"
)


def display_name(alias: str | None, ident: str) -> str:
    """Prefer the alias, falling back to the identifier."""
    return alias or ident


@dataclass
class VmSummary:
    """The fields of a VM that the status views show."""

    id: str
    alias: str = ""
    state: str = ""
    cluster_id: str = ""

    @property
    def display_name(self) -> str:
        """The alias if set, otherwise the ID."""
        return display_name(self.alias, self.id)


@dataclass
class ClusterSummary:
    """The fields of a cluster that the status views show."""

    id: str
    alias: str = ""
    root_vm_id: str = ""
    vms: list[VmSummary] = field(default_factory=list)
    vm_count: int = 0

    @property
    def display_name(self) -> str:
        """The alias if set, otherwise the ID."""
        return display_name(self.alias, self.id)


def root_vm_display_name(cluster: ClusterSummary) -> str:
    """Name the root VM by its alias if the cluster's VM list gives one."""
    for vm in cluster.vms:
        if vm.id == cluster.root_vm_id and vm.alias:
            return vm.alias
    return cluster.root_vm_id


def render_cluster_detail(cluster: ClusterSummary) -> str:
    """Render the detailed status of one cluster and its VMs."""
    name = cluster.display_name
    lines = [
        f"Getting status for cluster: {name}",
        "Cluster details:",
        f"Cluster: {name}",
        f"Root VM: {root_vm_display_name(cluster)}",
        f"# VMs: {len(cluster.vms)}",
        "VMs in this cluster:",
    ]
    if not cluster.vms:
        lines.append("No VMs found in this cluster.")
    else:
        for vm in cluster.vms:
            lines.append(f"VM: {vm.display_name}")
            lines.append(f"State: {vm.state}")
    lines.append("")
    lines.append(STATUS_TIP)
    return "\n".join(lines) + "\n"


def render_cluster_list(clusters: Iterable[ClusterSummary]) -> str:
    """Render the list of all clusters."""
    clusters = list(clusters)
    if not clusters:
        return "No clusters found.\n"
    lines = ["Available clusters:"]
    for cluster in clusters:
        lines.append(f"Cluster: {cluster.display_name}")
        lines.append(f"Root VM: {root_vm_display_name(cluster)}")
        lines.append(f"# children: {cluster.vm_count}")
    lines.append("")
    lines.append(LIST_TIP)
    return "\n".join(lines) + "\n"


def render_vm_status(vm: VmSummary) -> str:
    """Render the status of a single VM."""
    name = vm.display_name
    lines = [
        f"Getting status for VM: {name}",
        "VM details:",
        f"VM: {name}",
        f"State: {vm.state}",
        f"Cluster: {vm.cluster_id}",
        "",
        f"Tip: To view the cluster containing this VM, run: vers status -c {vm.cluster_id}",
    ]
    return "\n".join(lines) + "\n"


def head_status_message(error_text: str) -> str:
    """Explain why the HEAD VM could not be read."""
    if "HEAD not found" in error_text:
        return "HEAD status: Not a vers repository (run 'vers init' first)"
    if "HEAD is empty" in error_text:
        return "HEAD status: Empty (create a VM with 'vers run')"
    return f"HEAD status: Error reading HEAD file ({error_text})"


def render_branch_result(vm: VmSummary, checked_out: bool | BaseException = False) -> str:
    """Render the report on a newly branched VM.

    ``checked_out`` is True when HEAD now points at the VM, False when no
    switch was asked for, or the exception raised while updating HEAD.
    """
    lines = [
        "✓ New VM created successfully!",
        "New VM details:",
        f"VM ID: {vm.id}",
    ]
    if vm.alias:
        lines.append(f"Alias: {vm.alias}")
    lines.append(f"State: {vm.state}")
    lines.append("")
    if isinstance(checked_out, BaseException):
        lines.append(f"WARNING: Failed to update HEAD: {checked_out}")
    elif checked_out:
        lines.append(f"✓ HEAD now points to: {vm.display_name}")
    else:
        lines.append("Use --checkout or -c to switch to the new VM")
        lines.append(f"Run 'vers checkout {vm.display_name}' to switch to this VM")
    return "\n".join(lines) + "\n"


def render_rootfs_list(names: Iterable[str]) -> str:
    """Render the available rootfs images."""
    names = list(names)
    if not names:
        return "No rootfs images found.\n"
    return "Available rootfs images:\n" + "".join(f"- {name}\n" for name in names)


def confirm_answer(text: str | None) -> bool:
    """Tell whether a typed answer confirms: ``y`` or ``yes`` in any case."""
    if text is None:
        return False
    return text.strip().casefold() in {"y", "yes"}