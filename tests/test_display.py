import pytest

from versctl.display import (
    ClusterSummary,
    VmSummary,
    confirm_answer,
    display_name,
    head_status_message,
    render_branch_result,
    render_cluster_detail,
    render_cluster_list,
    render_rootfs_list,
    render_vm_status,
    root_vm_display_name,
)


def test_display_name_prefers_alias():
    assert display_name("dev", "vm-1") == "dev"
    assert display_name("", "vm-1") == "vm-1"
    assert display_name(None, "vm-1") == "vm-1"


def test_vm_summary_display_name():
    assert VmSummary(id="vm-1", alias="web").display_name == "web"
    assert VmSummary(id="vm-1").display_name == "vm-1"


def test_root_vm_display_name_uses_alias():
    cluster = ClusterSummary(
        id="c-1",
        root_vm_id="vm-1",
        vms=[VmSummary(id="vm-2", alias="other"), VmSummary(id="vm-1", alias="root")],
    )
    assert root_vm_display_name(cluster) == "root"


def test_root_vm_display_name_falls_back_to_id():
    cluster = ClusterSummary(id="c-1", root_vm_id="vm-1", vms=[VmSummary(id="vm-1")])
    assert root_vm_display_name(cluster) == "vm-1"
    assert root_vm_display_name(ClusterSummary(id="c-2", root_vm_id="vm-9")) == "vm-9"


def test_render_cluster_detail_lists_vms():
    cluster = ClusterSummary(
        id="c-1",
        alias="mycluster",
        root_vm_id="vm-1",
        vms=[VmSummary(id="vm-1", state="Running"), VmSummary(id="vm-2", alias="b", state="Paused")],
    )
    text = render_cluster_detail(cluster)
    lines = text.splitlines()
    assert lines[0] == "Getting status for cluster: mycluster"
    assert "# VMs: 2" in lines
    assert "VM: vm-1" in lines
    assert "VM: b" in lines
    assert "State: Paused" in lines
    assert lines[-1] == "Tip: To view all clusters, run: vers status"


def test_render_cluster_detail_without_vms():
    text = render_cluster_detail(ClusterSummary(id="c-1", root_vm_id="vm-1"))
    assert "No VMs found in this cluster." in text.splitlines()
    assert "Root VM: vm-1" in text.splitlines()


def test_render_cluster_list_empty():
    assert render_cluster_list([]) == "No clusters found.\n"


def test_render_cluster_list_entries():
    clusters = [
        ClusterSummary(id="c-1", root_vm_id="vm-1", vm_count=3),
        ClusterSummary(id="c-2", alias="two", root_vm_id="vm-5",
                       vms=[VmSummary(id="vm-5", alias="five")]),
    ]
    lines = render_cluster_list(clusters).splitlines()
    assert lines[0] == "Available clusters:"
    assert "Cluster: c-1" in lines
    assert "Cluster: two" in lines
    assert "Root VM: five" in lines
    assert "# children: 3" in lines
    assert lines[-1] == "To view a specific VM, use: vers status <vm-id>"


def test_render_vm_status():
    vm = VmSummary(id="vm-1", alias="web", state="Running", cluster_id="c-7")
    lines = render_vm_status(vm).splitlines()
    assert lines[0] == "Getting status for VM: web"
    assert "State: Running" in lines
    assert "Cluster: c-7" in lines
    assert lines[-1] == "Tip: To view the cluster containing this VM, run: vers status -c c-7"


@pytest.mark.parametrize(
    "error_text, expected",
    [
        ("HEAD not found", "HEAD status: Not a vers repository (run 'vers init' first)"),
        ("HEAD is empty", "HEAD status: Empty (create a VM with 'vers run')"),
    ],
)
def test_head_status_message_known(error_text, expected):
    assert head_status_message(error_text) == expected


def test_head_status_message_other_error():
    assert head_status_message("permission denied") == (
        "HEAD status: Error reading HEAD file (permission denied)"
    )


def test_render_branch_result_with_tips():
    vm = VmSummary(id="vm-3", state="Running")
    lines = render_branch_result(vm, False).splitlines()
    assert lines[0] == "✓ New VM created successfully!"
    assert "VM ID: vm-3" in lines
    assert not any(line.startswith("Alias:") for line in lines)
    assert lines[-1] == "Run 'vers checkout vm-3' to switch to this VM"


def test_render_branch_result_checked_out_uses_alias():
    vm = VmSummary(id="vm-3", alias="feature", state="Running")
    lines = render_branch_result(vm, True).splitlines()
    assert "Alias: feature" in lines
    assert lines[-1] == "✓ HEAD now points to: feature"


def test_render_branch_result_head_failure():
    vm = VmSummary(id="vm-3", state="Running")
    text = render_branch_result(vm, OSError("disk full"))
    assert text.splitlines()[-1] == "WARNING: Failed to update HEAD: disk full"


def test_render_rootfs_list():
    assert render_rootfs_list([]) == "No rootfs images found.\n"
    assert render_rootfs_list(["default", "custom"]) == (
        "Available rootfs images:\n- default\n- custom\n"
    )


@pytest.mark.parametrize("answer", ["y", "Y", "yes", " YES\n", "Yes"])
def test_confirm_answer_accepts(answer):
    assert confirm_answer(answer) is True


@pytest.mark.parametrize("answer", ["", "n", "no", "yep", None])
def test_confirm_answer_rejects(answer):
    assert confirm_answer(answer) is False