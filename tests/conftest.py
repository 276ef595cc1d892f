"""Shared fixtures for gh_complete test suite."""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Sequence

import pytest

from gh_complete.core.fallback import schedule
from gh_complete.core.models import (
    CompletionItem,
    FetchFailure,
    FetchOutcome,
    FetchRequest,
    FetchSuccess,
    RawRecord,
    RepoCoordinates,
    ResourceKind,
)
from gh_complete.core.normalize import normalize


class ScriptedStrategy:
    """Fetch strategy double with a predetermined outcome.

    ``events`` records ``("start", name)`` / ``("end", name)`` pairs so tests
    can assert ordering. ``wait_for`` holds the fetch until the event is set;
    ``done`` is set once the fetch resolves.
    """

    def __init__(
        self,
        name: str,
        records: Sequence[RawRecord] | None = None,
        *,
        normalizer: Callable[[RawRecord], CompletionItem] | None = None,
        failure: str | None = None,
        events: list[tuple[str, str]] | None = None,
        wait_for: asyncio.Event | None = None,
        done: asyncio.Event | None = None,
    ) -> None:
        self.name = name
        self.records = list(records or [])
        self.normalizer = normalizer or (lambda record: normalize(record, ResourceKind.ISSUES))
        self.failure = failure
        self.events = events if events is not None else []
        self.wait_for = wait_for
        self.done = done
        self.calls = 0

    async def fetch(self) -> FetchOutcome:
        self.calls += 1
        self.events.append(("start", self.name))
        try:
            if self.wait_for is not None:
                await self.wait_for.wait()
            if self.failure is not None:
                return FetchFailure(reason=self.failure, source=self.name)
            return FetchSuccess(
                items=tuple(self.normalizer(record) for record in self.records),
                source=self.name,
            )
        finally:
            self.events.append(("end", self.name))
            if self.done is not None:
                self.done.set()

    def start(self, on_done: Callable[[FetchOutcome], None]) -> asyncio.Task:
        return schedule(self.fetch(), on_done)


class RecordingFactory:
    """Strategy factory that records requests and serves scripted strategies per kind."""

    def __init__(self, plans: dict[ResourceKind, Callable[[FetchRequest], list[ScriptedStrategy]]]) -> None:
        self.plans = plans
        self.requests: list[FetchRequest] = []

    def __call__(self, request: FetchRequest) -> list[ScriptedStrategy]:
        self.requests.append(request)
        return self.plans[request.kind](request)


@pytest.fixture
def repo() -> RepoCoordinates:
    """Resolved github.com coordinates."""
    return RepoCoordinates(host="github.com", owner="acme", repo="widgets")


@pytest.fixture
def cli_issue_records() -> list[dict[str, object]]:
    """Issue records shaped like `gh issue list --json` output."""
    return [
        {"number": 12, "title": "Crash on save", "body": "Steps:\r\n1. save", "updatedAt": "2024-05-02T10:00:00Z"},
        {"number": 7, "title": "Docs typo", "body": None, "updatedAt": "2024-04-01T08:30:00Z"},
    ]


@pytest.fixture
def rest_pull_records() -> list[dict[str, object]]:
    """Pull request records shaped like REST `/pulls` output."""
    return [
        {"number": 15, "title": "Add retry", "body": "Adds retries", "updated_at": "2024-05-03T09:00:00Z"},
    ]


@pytest.fixture
def contributor_records() -> list[dict[str, object]]:
    """Contributor records shaped like REST `/contributors` output."""
    return [
        {"login": "octocat", "contributions": 40},
        {"login": "Hubot", "contributions": 12},
    ]


@pytest.fixture
def scripted() -> type[ScriptedStrategy]:
    return ScriptedStrategy


@pytest.fixture
def recording_factory() -> type[RecordingFactory]:
    return RecordingFactory
