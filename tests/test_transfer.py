import sys

import pytest

from versctl.transfer import (
    CopyArgs,
    Direction,
    Endpoint,
    TransferError,
    build_scp_command,
    build_ssh_command,
    check_vm_ready,
    detect_direction,
    parse_copy_args,
    resolve_endpoint,
    run_scp,
    run_ssh,
    scp_paths,
)

SSH_OPTS = [
    "-o", "StrictHostKeyChecking=no",
    "-o", "UserKnownHostsFile=/dev/null",
    "-o", "IdentitiesOnly=yes",
    "-o", "PreferredAuthentications=publickey",
]


def test_parse_three_args_with_vm_id():
    parsed = parse_copy_args(["vm-123", "./local-file", "/remote/path"], head_vm="HEAD")
    assert parsed == CopyArgs("vm-123", "./local-file", "/remote/path", uses_head=False)


def test_parse_two_args_uses_head():
    parsed = parse_copy_args(["./local-file", "/remote/path"], head_vm="HEAD")
    assert parsed.vm_identifier == "HEAD"
    assert parsed.uses_head is True
    assert parsed.source == "./local-file"
    assert parsed.destination == "/remote/path"


@pytest.mark.parametrize(
    "args, count",
    [
        (["./local-file"], 1),
        (["vm-123", "./local-file", "/remote/path", "extra"], 4),
        ([], 0),
    ],
)
def test_parse_wrong_count(args, count):
    with pytest.raises(TransferError, match=f"accepts between 2 and 3 arg\\(s\\), received {count}"):
        parse_copy_args(args, head_vm="HEAD")


def test_parse_head_from_callable():
    test_vm_id = "test-vm-12345678-1234-1234-1234-123456789abc"
    parsed = parse_copy_args(["./local-file", "/remote/path"], head_vm=lambda: test_vm_id)
    assert parsed.vm_identifier == test_vm_id


def test_parse_head_callable_not_called_with_three_args():
    def fail():
        raise AssertionError("should not be called")

    parsed = parse_copy_args(["vm-1", "a", "/b"], head_vm=fail)
    assert parsed.vm_identifier == "vm-1"


def test_parse_head_failure_wrapped():
    def missing():
        raise FileNotFoundError("HEAD not found")

    with pytest.raises(TransferError, match="no VM ID provided and HEAD not found"):
        parse_copy_args(["a", "/b"], head_vm=missing)


def test_parse_without_head():
    with pytest.raises(TransferError, match="no VM ID provided"):
        parse_copy_args(["a", "/b"])


def test_detect_upload_existing_local_file(tmp_path):
    test_file = tmp_path / "test-file.txt"
    test_file.write_text("test content")
    assert detect_direction(str(test_file), "/remote/path/file.txt") is Direction.UPLOAD


@pytest.mark.parametrize(
    "source, destination, expected",
    [
        ("/remote/path/file.txt", "./local-file.txt", Direction.DOWNLOAD),
        ("./local-file.txt", "/remote/path/", Direction.UPLOAD),
        ("/remote/file.txt", "./", Direction.DOWNLOAD),
    ],
)
def test_detect_by_prefix(source, destination, expected):
    assert detect_direction(source, destination) is expected


def test_detect_missing_source_downloads(tmp_path):
    missing = tmp_path / "nope.txt"
    assert detect_direction(str(missing), "/remote/x") is Direction.DOWNLOAD


def test_detect_relative_both_sides(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "here.txt").write_text("x")
    assert detect_direction("here.txt", "there.txt") is Direction.UPLOAD
    assert detect_direction("absent.txt", "there.txt") is Direction.DOWNLOAD


def test_scp_paths():
    assert scp_paths("192.168.1.100", "./a", "/b", Direction.UPLOAD) == (
        "./a",
        "root@192.168.1.100:/b",
    )
    assert scp_paths("192.168.1.100", "/b", "./a", Direction.DOWNLOAD) == (
        "root@192.168.1.100:/b",
        "./a",
    )


def test_scp_upload_command():
    command = build_scp_command(
        "192.168.1.100", "2222", "/path/to/key",
        "./local-file.txt", "/remote/path/file.txt", Direction.UPLOAD, False,
    )
    assert command == [
        "scp", "-P", "2222", *SSH_OPTS, "-o", "LogLevel=ERROR", "-i", "/path/to/key",
        "./local-file.txt", "root@192.168.1.100:/remote/path/file.txt",
    ]


def test_scp_download_command():
    command = build_scp_command(
        "192.168.1.100", "2222", "/path/to/key",
        "/remote/path/file.txt", "./local-file.txt", Direction.DOWNLOAD, False,
    )
    assert command == [
        "scp", "-P", "2222", *SSH_OPTS, "-o", "LogLevel=ERROR", "-i", "/path/to/key",
        "root@192.168.1.100:/remote/path/file.txt", "./local-file.txt",
    ]


def test_scp_recursive_upload_command():
    command = build_scp_command(
        "192.168.1.100", 2222, "/path/to/key",
        "./local-dir/", "/remote/path/", Direction.UPLOAD, True,
    )
    assert command == [
        "scp", "-P", "2222", *SSH_OPTS, "-o", "LogLevel=ERROR", "-i", "/path/to/key",
        "-r", "./local-dir/", "root@192.168.1.100:/remote/path/",
    ]


def test_ssh_interactive_command():
    command = build_ssh_command("10.0.0.5", 22, "/path/to/key")
    assert command == ["ssh", "root@10.0.0.5", "-p", "22", *SSH_OPTS, "-i", "/path/to/key"]


def test_ssh_remote_command():
    command = build_ssh_command("10.0.0.5", "2022", "/path/to/key", "ls -la /tmp")
    assert command == [
        "ssh", "root@10.0.0.5", "-p", "2022", *SSH_OPTS, "-o", "LogLevel=ERROR",
        "-i", "/path/to/key", "ls -la /tmp",
    ]


def test_resolve_endpoint_remote():
    assert resolve_endpoint("api.example.com", 30022, "172.16.0.2", False) == Endpoint(
        "api.example.com", "30022"
    )


def test_resolve_endpoint_local():
    assert resolve_endpoint("localhost", 30022, "172.16.0.2", True) == Endpoint(
        "172.16.0.2", "22"
    )


def test_check_vm_ready_not_running():
    with pytest.raises(TransferError, match=r"VM is not running \(current state: Paused\)"):
        check_vm_ready("Paused", 2222)


def test_check_vm_ready_no_port():
    with pytest.raises(TransferError, match="does not have SSH port"):
        check_vm_ready("Running", 0)


def test_check_vm_ready_ok():
    assert check_vm_ready("Running", 2222) is None


def test_run_scp_nonzero_exit():
    with pytest.raises(TransferError, match="scp command exited with code 3"):
        run_scp([sys.executable, "-c", "import sys; sys.exit(3)"])


def test_run_scp_missing_program(tmp_path):
    with pytest.raises(TransferError, match="failed to run SCP command"):
        run_scp([str(tmp_path / "no-such-program")])


def test_run_ssh_command_exit_code():
    with pytest.raises(TransferError, match="command exited with code 5"):
        run_ssh([sys.executable, "-c", "import sys; sys.exit(5)"])


def test_run_ssh_interactive_returns_code():
    code = run_ssh([sys.executable, "-c", "import sys; sys.exit(4)"], interactive=True)
    assert code == 4


def test_run_ssh_success():
    assert run_ssh([sys.executable, "-c", "pass"]) == 0


def test_run_ssh_missing_program(tmp_path):
    with pytest.raises(TransferError, match="failed to run SSH command"):
        run_ssh([str(tmp_path / "no-such-program")], interactive=True)