"""Commit tags and the commit history listing."""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone, tzinfo
from typing import Any

DIVIDER = "─" * 48
NO_MESSAGE = "(no commit message)"


@dataclass
class CommitEntry:
    """One commit as reported by the API."""

    id: str = ""
    message: str = ""
    timestamp: int = 0
    tags: list[str] = field(default_factory=list)
    author: str = ""
    vm_id: str = ""
    alias: str = ""
    cluster_id: str = ""
    host_architecture: str = ""

    @classmethod
    def from_api(cls, raw: Mapping[str, Any]) -> CommitEntry:
        """Build an entry from the API's JSON object."""
        return cls(
            id=raw.get("ID") or "",
            message=raw.get("Message") or "",
            timestamp=int(raw.get("Timestamp") or 0),
            tags=list(raw.get("Tags") or []),
            author=raw.get("Author") or "",
            vm_id=raw.get("VMID") or "",
            alias=raw.get("Alias") or "",
            cluster_id=raw.get("ClusterID") or "",
            host_architecture=raw.get("HostArchitecture") or "",
        )


def combine_tags(
    individual: Iterable[str] | None = None, comma_separated: str | None = None
) -> list[str]:
    """Merge repeated tags with a comma-separated list, dropping blank entries from the list."""
    tags = list(individual or [])
    if comma_separated:
        tags.extend(part.strip() for part in comma_separated.split(",") if part.strip())
    return tags


def parse_commit_response(data: Mapping[str, Any] | str | bytes) -> list[CommitEntry]:
    """Read the commit list from the API's response body."""
    if isinstance(data, (str, bytes, bytearray)):
        try:
            data = json.loads(data)
        except json.JSONDecodeError as exc:
            raise ValueError(f"invalid commit response: {exc}") from exc
    if not isinstance(data, Mapping):
        raise ValueError("invalid commit response: expected an object")
    commits = data.get("commits") or []
    if not isinstance(commits, list):
        raise ValueError("invalid commit response: 'commits' must be a list")
    return [CommitEntry.from_api(raw) for raw in commits]


def format_timestamp(timestamp: int, tz: tzinfo | None = None) -> str:
    """Format seconds since the epoch like ``Mon Jan 2 15:04:05 2006 -0700``.

    Without ``tz`` the local time zone is used.
    """
    moment = datetime.fromtimestamp(timestamp, timezone.utc).astimezone(tz)
    return f"{moment:%a %b} {moment.day} {moment:%H:%M:%S %Y %z}"


def render_commit(commit: CommitEntry, tz: tzinfo | None = None) -> str:
    """Render one commit as the lines shown in the history."""
    lines = [f"Commit: {commit.id}"]
    tags = [tag.strip() for tag in commit.tags if tag.strip()]
    if tags:
        lines.append(", ".join(tags))
    if commit.alias and commit.alias != commit.vm_id:
        lines.append(f"Alias: {commit.alias}")
    lines.append(f"Author: {commit.author}")
    lines.append(f"Date: {format_timestamp(commit.timestamp, tz)}")
    lines.append(f"VM: {commit.vm_id}")
    if commit.cluster_id:
        lines.append(f"Cluster: {commit.cluster_id}")
    if commit.host_architecture:
        lines.append(f"Architecture: {commit.host_architecture}")
    lines.append("")
    lines.append(f"    {commit.message or NO_MESSAGE}")
    return "\n".join(lines) + "\n"


def render_history(
    display_name: str, commits: Iterable[CommitEntry], tz: tzinfo | None = None
) -> str:
    """Render the full history listing for a VM."""
    header = f"\nCommit History for VM: {display_name}\n\n"
    commits = list(commits)
    if not commits:
        return (
            header
            + "No commits found for this VM.\n"
            + "Run 'vers commit' to create your first commit.\n"
        )
    separator = f"\n{DIVIDER}\n\n"
    return header + separator.join(render_commit(commit, tz) for commit in commits)