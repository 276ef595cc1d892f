"""GitHub completion source: cache lookup, fallback fetch and joint merge."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Coroutine, Hashable, Mapping, Sequence
from typing import Any

from gh_complete.adapters.github_ghcli import GitHubGhCliStrategy
from gh_complete.adapters.github_rest import GitHubRestStrategy, RequestFn
from gh_complete.core.cache import ScopeCache
from gh_complete.core.fallback import FetchStrategy, ensure_chain, run_fallback
from gh_complete.core.models import (
    CacheEntry,
    CompletionItem,
    CompletionResult,
    FetchRequest,
    FetchSuccess,
    ProviderConfig,
    RepoCoordinates,
    ResourceKind,
)
from gh_complete.core.normalize import Normalizer

logger = logging.getLogger("gh_complete")

SUPPORTED_HOST = "github.com"

Callback = Callable[[CompletionResult], None]
StrategyFactory = Callable[[FetchRequest], Sequence[FetchStrategy]]
Overrides = Mapping[str, Any]


class GitHubSource:
    """Completion source for GitHub issues, pull requests and mentions.

    Every public ``get_*`` operation returns ``False`` without fetching when
    the repository is not on github.com or its owner/name are unknown.
    Otherwise it returns ``True`` and delivers items to ``callback`` either
    immediately (cache hit) or once a fetch succeeds. A fetch whose gh and
    REST attempts both fail never calls ``callback``.
    """

    def __init__(
        self,
        config: ProviderConfig | None = None,
        *,
        cache: ScopeCache | None = None,
        strategy_factory: StrategyFactory | None = None,
        runner: Callable[[list[str]], str] | None = None,
        request_fn: RequestFn | None = None,
        token_provider: Callable[[], str | None] | None = None,
    ) -> None:
        self.config = config or ProviderConfig()
        self.cache = cache or ScopeCache()
        self._runner = runner
        self._request_fn = request_fn
        self._token_provider = token_provider
        self._strategy_factory = strategy_factory or self._default_strategies
        self._tasks: set[asyncio.Task] = set()

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------

    def get_issues(
        self,
        callback: Callback,
        repo: RepoCoordinates,
        trigger: str,
        config: Overrides | None = None,
        *,
        scope: Hashable,
    ) -> bool:
        return self._get_kind(ResourceKind.ISSUES, callback, repo, trigger, config, scope)

    def get_pull_requests(
        self,
        callback: Callback,
        repo: RepoCoordinates,
        trigger: str,
        config: Overrides | None = None,
        *,
        scope: Hashable,
    ) -> bool:
        return self._get_kind(ResourceKind.PULL_REQUESTS, callback, repo, trigger, config, scope)

    def get_mentions(
        self,
        callback: Callback,
        repo: RepoCoordinates,
        trigger: str,
        config: Overrides | None = None,
        *,
        scope: Hashable,
    ) -> bool:
        return self._get_kind(ResourceKind.MENTIONS, callback, repo, trigger, config, scope)

    def get_issues_and_pull_requests(
        self,
        callback: Callback,
        repo: RepoCoordinates,
        trigger: str,
        config: Mapping[str, Overrides] | None = None,
        *,
        scope: Hashable,
    ) -> bool:
        """Deliver issues followed by pull requests in a single callback.

        ``config`` may hold ``issues`` and ``pull_requests`` override mappings.
        Cached kinds are reused; the others are fetched concurrently and the
        callback fires once both are available.
        """
        if not self._is_supported(repo, "issues or pull requests"):
            return False

        config = config or {}
        kinds = (ResourceKind.ISSUES, ResourceKind.PULL_REQUESTS)
        resolved: dict[ResourceKind, tuple[CompletionItem, ...]] = {}
        pending: dict[ResourceKind, Sequence[FetchStrategy]] = {}
        for kind in kinds:
            cached = self.cache.get(kind, scope)
            if cached is not None:
                resolved[kind] = cached.items
            else:
                pending[kind] = self._build_strategies(kind, repo, trigger, config.get(kind.value), scope)

        if not pending:
            items = [item for kind in kinds for item in resolved[kind]]
            logger.debug("Got %d issues and pull requests from cache", len(items))
            callback(CompletionResult(items=items, is_incomplete=False))
            return True

        self._spawn(self._join, callback, kinds, resolved, pending, scope)
        return True

    async def drain(self) -> None:
        """Wait until every fetch started by this source has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _get_kind(
        self,
        kind: ResourceKind,
        callback: Callback,
        repo: RepoCoordinates,
        trigger: str,
        config: Overrides | None,
        scope: Hashable,
    ) -> bool:
        if not self._is_supported(repo, kind.value.replace("_", " ")):
            return False

        cached = self.cache.get(kind, scope)
        if cached is not None:
            logger.debug("Got %d %s from cache", len(cached.items), kind.value)
            callback(CompletionResult(items=list(cached.items), is_incomplete=cached.is_incomplete))
            return True

        strategies = self._build_strategies(kind, repo, trigger, config, scope)
        self._spawn(self._deliver, callback, kind, strategies, scope)
        return True

    def _is_supported(self, repo: RepoCoordinates, what: str) -> bool:
        if repo.host != SUPPORTED_HOST:
            logger.warning("Can't fetch GitHub %s, not a github repository (host %s)", what, repo.host)
            return False
        if not repo.owner or not repo.repo:
            logger.warning("Can't fetch GitHub %s, repository owner or name unknown", what)
            return False
        return True

    def _build_strategies(
        self,
        kind: ResourceKind,
        repo: RepoCoordinates,
        trigger: str,
        overrides: Overrides | None,
        scope: Hashable,
    ) -> Sequence[FetchStrategy]:
        config = self.config.for_kind(kind).merged(overrides)
        request = FetchRequest(
            kind=kind,
            repo=repo,
            limit=config.limit,
            state=config.state,
            filter=config.filter,
            normalizer=Normalizer(
                kind,
                trigger=trigger,
                sort_by=config.sort_by,
                filter_fn=config.filter_fn,
            ),
            scope=scope,
        )
        strategies = self._strategy_factory(request)
        ensure_chain(strategies)
        return strategies

    def _default_strategies(self, request: FetchRequest) -> list[FetchStrategy]:
        return [
            GitHubGhCliStrategy.for_request(request, runner=self._runner),
            GitHubRestStrategy.for_request(
                request,
                token_provider=self._token_provider,
                request_fn=self._request_fn,
            ),
        ]

    async def _fetch(
        self,
        kind: ResourceKind,
        strategies: Sequence[FetchStrategy],
        scope: Hashable,
    ) -> tuple[CompletionItem, ...] | None:
        outcome = await run_fallback(strategies)
        if not isinstance(outcome, FetchSuccess):
            logger.warning("Failed to fetch GitHub %s: %s", kind.value, outcome.reason)
            return None
        self.cache.put(kind, scope, CacheEntry(items=outcome.items, is_incomplete=False))
        return outcome.items

    async def _deliver(
        self,
        callback: Callback,
        kind: ResourceKind,
        strategies: Sequence[FetchStrategy],
        scope: Hashable,
    ) -> None:
        items = await self._fetch(kind, strategies, scope)
        if items is None:
            return
        logger.debug("Got %d %s from GitHub", len(items), kind.value)
        callback(CompletionResult(items=list(items), is_incomplete=False))

    async def _join(
        self,
        callback: Callback,
        kinds: Sequence[ResourceKind],
        resolved: dict[ResourceKind, tuple[CompletionItem, ...]],
        pending: Mapping[ResourceKind, Sequence[FetchStrategy]],
        scope: Hashable,
    ) -> None:
        fetched = await asyncio.gather(
            *(self._fetch(kind, strategies, scope) for kind, strategies in pending.items()),
        )
        for kind, items in zip(pending, fetched):
            if items is None:
                return
            resolved[kind] = items

        merged = [item for kind in kinds for item in resolved[kind]]
        logger.debug("Got %d issues and pull requests from GitHub", len(merged))
        callback(CompletionResult(items=merged, is_incomplete=False))

    def _spawn(self, fn: Callable[..., Coroutine[Any, Any, None]], *args: Any) -> asyncio.Task:
        loop = asyncio.get_running_loop()
        task = loop.create_task(fn(*args))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        task.add_done_callback(_log_task_error)
        return task


def _log_task_error(task: asyncio.Task) -> None:
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.error("Completion request failed: %s", exc, exc_info=exc)
