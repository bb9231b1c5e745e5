# versctl

Building blocks for working with Vers virtual development environments from
Python. The package covers the local side of the workflow: reading and
writing `vers.toml`, preparing a project directory, packing a rootfs build
context, working out how to reach a VM over SSH/SCP, and producing the text
for commit history and status listings.

## Project configuration (`versctl.config`)

A project is described by a `vers.toml` file with `machine`, `rootfs`,
`builder` and `kernel` tables, held in a `Config` dataclass made of
`MachineConfig`, `RootfsConfig`, `BuilderConfig` and `KernelConfig`.

- `default_config()` returns the defaults: 512 MiB of memory, 1 vCPU, both
  filesystem sizes 0, rootfs `default`, builder `docker` with `Dockerfile`,
  kernel `default.bin`.
- `load_config(path)` reads the file (default `vers.toml`). If the file is
  missing it prints a warning and returns the defaults. Malformed TOML or
  values of the wrong type raise `ConfigError`.
- `apply_overrides(config, ...)` sets memory, vCPU count, rootfs, kernel and
  Dockerfile from command-line values; `None`, zero, negative and empty
  values are ignored.
- `Config.to_dict()`, `Config.from_dict(data)` and `dump_config(config)`
  convert to and from nested tables and TOML text.

```python
from versctl.config import load_config, apply_overrides, dump_config

config = load_config("vers.toml")
apply_overrides(config, mem_size=1024, vcpu_count=2, rootfs="", kernel="", dockerfile="")
print(dump_config(config))
```

## Project directories (`versctl.project`)

- `init_project(directory, gitignore_content, ...)` creates `.vers/` with an
  empty `HEAD`, a `config` file and a `logs/commits` tree, writes
  `.gitignore` from `gitignore_content` if there is none, and writes
  `vers.toml` if there is none (with builder `none`). It returns the written
  `Config`, or `None` when `vers.toml` already existed.
- `write_head(directory, vm_target)` records the current VM in `.vers/HEAD`;
  it returns `False` (with a warning) if `.vers` does not exist.
- `new_cluster_params(config, cluster_alias, vm_alias)` and
  `from_commit_params(commit_id, config, cluster_alias, vm_alias)` build the
  request bodies for starting a cluster. An empty commit ID raises
  `ProjectError`.

## Rootfs build context (`versctl.archive`)

- `check_buildable(config, base_dir)` returns `False` when the builder is
  `none`, and raises `BuildError` when the builder is not `docker`, the
  rootfs is named `default`, or the Dockerfile is missing.
- `create_tar_archive(target, work_dir)` writes a tar archive of the
  directory to a path or binary file and returns the entry names. `.vers`,
  `vers.toml` (see `is_excluded`) and the archive file itself are left out.
- `build_archive(config, work_dir)` does both and returns the archive bytes,
  or `None` if the build is skipped.

## SSH and SCP (`versctl.transfer`)

```python
from versctl.transfer import detect_direction, build_scp_command

direction = detect_direction("./notes.txt", "/root/notes.txt")
command = build_scp_command(
    "192.168.1.100", "2222", "/path/to/key",
    "./notes.txt", "/root/notes.txt", direction, False,
)
```

- `parse_copy_args(args, head_vm)` accepts two or three arguments; with two,
  the VM comes from `head_vm` (a string or a callable). Other counts raise
  `TransferError`.
- `detect_direction` returns a `Direction`: a source starting with `/` and a
  destination that does not is a download, the reverse an upload; otherwise
  an existing local source means upload.
- `scp_paths`, `build_scp_command` and `build_ssh_command` build the command
  lines; `build_ssh_command` without a command opens a shell.
- `resolve_endpoint` returns an `Endpoint`, switching to the VM's own
  address and port 22 when the host is local.
- `check_vm_ready` rejects VMs that are not `Running` or have no SSH port.
- `run_scp` and `run_ssh` run the commands on the terminal, raising
  `TransferError` on failure (an interactive `run_ssh` accepts any exit code).

## History (`versctl.history`)

`combine_tags` merges repeated tags with a comma-separated list.
`parse_commit_response` reads the API's commit list into `CommitEntry`
objects, and `render_commit`, `render_history` and `format_timestamp`
format them.

## Status and other output (`versctl.display`)

`VmSummary` and `ClusterSummary` hold what the views show.
`render_cluster_detail`, `render_cluster_list`, `render_vm_status`,
`render_branch_result` and `render_rootfs_list` produce the listings;
`head_status_message` explains an unreadable HEAD, and `confirm_answer`
accepts `y` or `yes` in any case.

## Command rules (`versctl.rules`, `versctl.metadata`)

- `validate_kill_args`, `plan_kill` and `plan_rename` check delete and rename
  arguments, raising `UsageError`, and return a `KillPlan` or `RenamePlan`.
- `version_info` and `version_json` give build information as JSON;
  `is_auth_error`, `skips_update_check` and `requires_auth` say how errors
  and commands are treated.

## Signing in (`versctl.login`)

`validate_api_key(api_key, base_url, opener)` posts the key to
`validation_endpoint(base_url)` (`.../api/validate`) and raises `LoginError`
unless the answer is 200. `read_api_key(reader)` prompts without echo and
rejects an empty key.

## What this package does not do

There is no command-line program, and no client for the service itself:
the package does not create, list, pause, branch, commit or delete VMs and
clusters, upload rootfs archives, store API keys, manage SSH keys or check
for updates. It builds the requests, commands and text that such a tool
needs, and leaves sending them to the caller.

## Tests

The test suite uses pytest and is installed with the `test` extra.