"""Unit tests for the gh CLI and REST fetch strategies."""

from __future__ import annotations

import asyncio
import json
from collections.abc import Mapping

import pytest

from gh_complete.adapters import github_rest
from gh_complete.adapters.github_adapter import GitHubAdapterError, parse_items
from gh_complete.adapters.github_ghcli import GitHubGhCliStrategy, build_gh_args
from gh_complete.adapters.github_rest import (
    GitHubRestStrategy,
    build_headers,
    build_rest_url,
    resolve_github_token,
)
from gh_complete.core.models import FetchFailure, FetchRequest, FetchSuccess, RepoCoordinates, ResourceKind
from gh_complete.core.normalize import Normalizer


def _request(kind: ResourceKind, *, limit: int = 50, state: str = "open") -> FetchRequest:
    return FetchRequest(
        kind=kind,
        repo=RepoCoordinates(host="github.com", owner="acme", repo="widgets"),
        limit=limit,
        state=state,
        filter="all",
        normalizer=Normalizer(kind, trigger="#"),
    )


class TestBuildGhArgs:
    def test_issue_listing(self) -> None:
        assert build_gh_args(_request(ResourceKind.ISSUES, limit=20, state="all")) == [
            "gh",
            "issue",
            "list",
            "--repo",
            "acme/widgets",
            "--limit",
            "20",
            "--state",
            "all",
            "--json",
            "title,number,body,updatedAt",
        ]

    def test_pull_request_listing(self) -> None:
        args = build_gh_args(_request(ResourceKind.PULL_REQUESTS))
        assert args[:3] == ["gh", "pr", "list"]

    def test_contributors_use_gh_api(self) -> None:
        assert build_gh_args(_request(ResourceKind.MENTIONS, limit=30)) == [
            "gh",
            "api",
            "repos/acme/widgets/contributors?per_page=30&page=1",
        ]


class TestBuildRestUrl:
    def test_issues_url(self) -> None:
        assert build_rest_url(_request(ResourceKind.ISSUES, limit=100)) == (
            "https://api.github.com/repos/acme/widgets/issues?filter=all&state=open&per_page=100&page=1"
        )

    def test_pulls_url(self) -> None:
        assert build_rest_url(_request(ResourceKind.PULL_REQUESTS, state="closed")) == (
            "https://api.github.com/repos/acme/widgets/pulls?state=closed&per_page=50&page=1"
        )

    def test_contributors_url(self) -> None:
        assert build_rest_url(_request(ResourceKind.MENTIONS)) == (
            "https://api.github.com/repos/acme/widgets/contributors?per_page=50&page=1"
        )


def test_headers_include_token_only_when_present() -> None:
    assert "Authorization" not in build_headers(None)
    headers = build_headers("secret")
    assert headers["Authorization"] == "token secret"
    assert headers["Accept"] == "application/vnd.github.v3+json"


def test_resolve_token_prefers_api_token(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GITHUB_API_TOKEN", "api")
    monkeypatch.setenv("GITHUB_TOKEN", "plain")
    assert resolve_github_token() == "api"


def test_resolve_token_missing_returns_none(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in github_rest.TOKEN_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    assert resolve_github_token() is None


def test_parse_items_rejects_non_array_payload() -> None:
    with pytest.raises(GitHubAdapterError, match="Expected a JSON array"):
        parse_items({"message": "Not Found"}, Normalizer(ResourceKind.ISSUES))


def test_gh_cli_strategy_normalizes_listing(cli_issue_records) -> None:
    calls: list[list[str]] = []

    def runner(args: list[str]) -> str:
        calls.append(args)
        return json.dumps(cli_issue_records)

    strategy = GitHubGhCliStrategy.for_request(_request(ResourceKind.ISSUES), runner=runner)
    outcome = asyncio.run(strategy.fetch())

    assert isinstance(outcome, FetchSuccess)
    assert outcome.source == "gh"
    assert [item.label for item in outcome.items] == ["#12: Crash on save", "#7: Docs typo"]
    assert outcome.items[0].documentation is not None
    assert outcome.items[0].documentation.value == "# Crash on save\n\nSteps:\n1. save"
    assert len(calls) == 1


@pytest.mark.parametrize(
    "runner_output, error",
    [
        (None, GitHubAdapterError("gh command failed (gh issue list): not logged in")),
        (None, FileNotFoundError("gh")),
        ("not json", None),
        ('{"message": "oops"}', None),
    ],
)
def test_gh_cli_strategy_reports_failures(runner_output: str | None, error: Exception | None) -> None:
    def runner(_: list[str]) -> str:
        if error is not None:
            raise error
        return runner_output or ""

    strategy = GitHubGhCliStrategy.for_request(_request(ResourceKind.ISSUES), runner=runner)
    outcome = asyncio.run(strategy.fetch())

    assert isinstance(outcome, FetchFailure)
    assert outcome.source == "gh"
    assert outcome.reason


def test_rest_strategy_fetches_and_skips_pull_requests_for_issues() -> None:
    seen_headers: list[Mapping[str, str]] = []
    payload = [
        {"number": 1, "title": "Issue", "body": None, "updated_at": "2024-01-01T00:00:00Z"},
        {"number": 2, "title": "A PR", "body": "", "pull_request": {"url": "..."}},
    ]

    def request_fn(url: str, headers: Mapping[str, str]) -> tuple[int, dict[str, str], str]:
        seen_headers.append(headers)
        assert url.startswith("https://api.github.com/repos/acme/widgets/issues?")
        return 200, {}, json.dumps(payload)

    strategy = GitHubRestStrategy.for_request(
        _request(ResourceKind.ISSUES),
        token_provider=lambda: "test-token",
        request_fn=request_fn,
    )
    outcome = asyncio.run(strategy.fetch())

    assert isinstance(outcome, FetchSuccess)
    assert [item.insert_text for item in outcome.items] == ["#1"]
    assert outcome.items[0].updated_at == "2024-01-01T00:00:00Z"
    assert seen_headers[0]["Authorization"] == "token test-token"


def test_rest_strategy_keeps_pull_listing_intact(rest_pull_records) -> None:
    strategy = GitHubRestStrategy.for_request(
        _request(ResourceKind.PULL_REQUESTS),
        token_provider=lambda: None,
        request_fn=lambda url, headers: (200, {}, json.dumps(rest_pull_records)),
    )
    outcome = asyncio.run(strategy.fetch())

    assert isinstance(outcome, FetchSuccess)
    assert [item.label for item in outcome.items] == ["#15: Add retry"]
    assert "Authorization" not in strategy.headers


def test_rest_strategy_reports_http_errors() -> None:
    strategy = GitHubRestStrategy.for_request(
        _request(ResourceKind.MENTIONS),
        token_provider=lambda: None,
        request_fn=lambda url, headers: (404, {}, '{"message": "Not Found"}'),
    )
    outcome = asyncio.run(strategy.fetch())

    assert isinstance(outcome, FetchFailure)
    assert outcome.source == "rest"
    assert "status 404" in outcome.reason
