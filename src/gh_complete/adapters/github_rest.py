"""GitHub REST API strategy for completion data."""

from __future__ import annotations

import json
import os
from typing import Callable, Mapping
from urllib.error import HTTPError
from urllib.parse import urlencode
from urllib.request import Request, urlopen

from gh_complete.adapters.github_adapter import GitHubAdapterError, ItemNormalizer, JsonListStrategy
from gh_complete.core.models import FetchRequest, RawRecord, ResourceKind

BASE_URL = "https://api.github.com"
TOKEN_ENV_VARS = ("GITHUB_API_TOKEN", "GITHUB_TOKEN")

RequestFn = Callable[[str, Mapping[str, str]], tuple[int, dict[str, str], str]]

_ENDPOINTS = {
    ResourceKind.ISSUES: "issues",
    ResourceKind.PULL_REQUESTS: "pulls",
    ResourceKind.MENTIONS: "contributors",
}


def build_rest_url(request: FetchRequest) -> str:
    """Build the first-page listing URL for ``request.kind``."""
    params: dict[str, object] = {}
    if request.kind is ResourceKind.ISSUES:
        params["filter"] = request.filter
    if request.kind is not ResourceKind.MENTIONS:
        params["state"] = request.state
    params["per_page"] = request.limit
    params["page"] = 1
    repo = request.repo
    return f"{BASE_URL}/repos/{repo.owner}/{repo.repo}/{_ENDPOINTS[request.kind]}?{urlencode(params)}"


def build_headers(token: str | None) -> dict[str, str]:
    headers = {
        "Accept": "application/vnd.github.v3+json",
        "User-Agent": "gh-complete",
    }
    if token:
        headers["Authorization"] = f"token {token}"
    return headers


class GitHubRestStrategy(JsonListStrategy):
    """Fetch completion records through the REST API."""

    name = "rest"

    def __init__(
        self,
        url: str,
        normalizer: ItemNormalizer,
        *,
        token: str | None = None,
        skip_pull_requests: bool = False,
        timeout_seconds: float = 15.0,
        request_fn: RequestFn | None = None,
    ) -> None:
        super().__init__(normalizer)
        self.url = url
        self.headers = build_headers(token)
        self._skip_pull_requests = skip_pull_requests
        self._timeout_seconds = timeout_seconds
        self._request_fn = request_fn or self._default_request

    @classmethod
    def for_request(
        cls,
        request: FetchRequest,
        *,
        token_provider: Callable[[], str | None] | None = None,
        request_fn: RequestFn | None = None,
    ) -> GitHubRestStrategy:
        return cls(
            build_rest_url(request),
            request.normalizer,
            token=(token_provider or resolve_github_token)(),
            # The issues endpoint lists pull requests as well.
            skip_pull_requests=request.kind is ResourceKind.ISSUES,
            request_fn=request_fn,
        )

    def load(self) -> object:
        status, _, body = self._request_fn(self.url, self.headers)
        if not 200 <= status < 300:
            raise GitHubAdapterError(
                f"GitHub API request failed with status {status} for {self.url}: {body[:200]}",
            )
        return json.loads(body)

    def keep(self, record: RawRecord) -> bool:
        return not (self._skip_pull_requests and "pull_request" in record)

    def _default_request(self, url: str, headers: Mapping[str, str]) -> tuple[int, dict[str, str], str]:
        request = Request(url=url, headers=dict(headers), method="GET")
        try:
            with urlopen(request, timeout=self._timeout_seconds) as response:
                return response.status, dict(response.headers.items()), response.read().decode("utf-8")
        except HTTPError as exc:
            body = exc.read().decode("utf-8", errors="replace")
            return exc.code, dict(exc.headers.items()) if exc.headers else {}, body


def resolve_github_token() -> str | None:
    """Return the first access token found in the environment, if any."""
    for name in TOKEN_ENV_VARS:
        token = os.getenv(name)
        if token:
            return token
    return None
