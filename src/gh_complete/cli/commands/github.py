"""Repository discovery helpers for the CLI."""

from __future__ import annotations

import re
import subprocess
from pathlib import Path

from gh_complete.core.models import RepoCoordinates

_SCP_REMOTE_RE = re.compile(r"^(?:[\w.-]+@)?(?P<host>[\w.-]+):(?P<path>[^/].*)$")
_URL_REMOTE_RE = re.compile(r"^[a-z+]+://(?:[^@/]+@)?(?P<host>[^/:]+)(?::\d+)?/(?P<path>.+)$")


def parse_remote_url(url: str) -> RepoCoordinates:
    """Parse a git remote URL into repository coordinates.

    Accepts https/ssh URLs and scp-like ``git@host:owner/repo`` remotes.
    Owner and repo are ``None`` when the path does not name both.
    Examples: "https://github.com/acme/repo.git", "git@github.com:acme/repo".
    """
    value = url.strip()
    match = _URL_REMOTE_RE.match(value) or _SCP_REMOTE_RE.match(value)
    if match is None:
        raise ValueError(f"Unrecognized git remote URL: {url!r}")

    parts = [part for part in match.group("path").strip("/").split("/") if part]
    owner = parts[-2] if len(parts) >= 2 else None
    repo = parts[-1] if parts else None
    if repo is not None and repo.endswith(".git"):
        repo = repo[: -len(".git")] or None
    return RepoCoordinates(host=match.group("host").lower(), owner=owner, repo=repo)


def parse_repo_option(value: str, host: str) -> RepoCoordinates:
    """Parse an ``owner/name`` option value."""
    owner, sep, repo = value.strip().partition("/")
    if not sep or not owner or not repo or "/" in repo:
        raise ValueError(f"Invalid repository {value!r}, expected owner/name")
    return RepoCoordinates(host=host, owner=owner, repo=repo)


def detect_repository(cwd: Path | None = None, remote: str = "origin") -> RepoCoordinates:
    """Resolve coordinates from the working directory's git remote."""
    result = subprocess.run(
        ["git", "remote", "get-url", remote],
        check=False,
        capture_output=True,
        text=True,
        cwd=cwd,
    )
    if result.returncode != 0:
        raise ValueError(f"Could not read git remote {remote!r}: {result.stderr.strip()}")
    return parse_remote_url(result.stdout)
