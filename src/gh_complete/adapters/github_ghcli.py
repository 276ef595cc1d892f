"""GitHub CLI strategy for completion data."""

from __future__ import annotations

import json
import subprocess
from typing import Callable

from gh_complete.adapters.github_adapter import GitHubAdapterError, ItemNormalizer, JsonListStrategy
from gh_complete.core.models import FetchRequest, ResourceKind

GH_TIMEOUT_SECONDS = 30.0
LIST_FIELDS = "title,number,body,updatedAt"

_LIST_COMMANDS = {
    ResourceKind.ISSUES: "issue",
    ResourceKind.PULL_REQUESTS: "pr",
}


def build_gh_args(request: FetchRequest) -> list[str]:
    """Build the gh argument vector listing ``request.kind`` as JSON."""
    repo = request.repo
    if request.kind is ResourceKind.MENTIONS:
        return [
            "gh",
            "api",
            f"repos/{repo.owner}/{repo.repo}/contributors?per_page={request.limit}&page=1",
        ]
    return [
        "gh",
        _LIST_COMMANDS[request.kind],
        "list",
        "--repo",
        repo.full_name,
        "--limit",
        str(request.limit),
        "--state",
        request.state,
        "--json",
        LIST_FIELDS,
    ]


class GitHubGhCliStrategy(JsonListStrategy):
    """Fetch completion records through gh CLI commands."""

    name = "gh"

    def __init__(
        self,
        args: list[str],
        normalizer: ItemNormalizer,
        runner: Callable[[list[str]], str] | None = None,
    ) -> None:
        super().__init__(normalizer)
        self.args = args
        self._runner = runner or _run_gh

    @classmethod
    def for_request(
        cls,
        request: FetchRequest,
        runner: Callable[[list[str]], str] | None = None,
    ) -> GitHubGhCliStrategy:
        return cls(build_gh_args(request), request.normalizer, runner=runner)

    def load(self) -> object:
        return json.loads(self._runner(self.args))


def _run_gh(args: list[str]) -> str:
    try:
        result = subprocess.run(
            args,
            check=False,
            capture_output=True,
            text=True,
            timeout=GH_TIMEOUT_SECONDS,
        )
    except subprocess.TimeoutExpired as exc:
        raise GitHubAdapterError(f"gh command timed out ({' '.join(args)})") from exc
    if result.returncode != 0:
        raise GitHubAdapterError(
            f"gh command failed ({' '.join(args)}): {result.stderr.strip() or result.stdout.strip()}",
        )
    return result.stdout
