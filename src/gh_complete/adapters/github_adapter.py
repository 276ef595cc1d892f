"""Shared types and base class for GitHub fetch strategies."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

from gh_complete.core.fallback import OnDone, schedule
from gh_complete.core.models import (
    CompletionItem,
    FetchFailure,
    FetchOutcome,
    FetchSuccess,
    RawRecord,
)

logger = logging.getLogger("gh_complete")

ItemNormalizer = Callable[[RawRecord], CompletionItem]


class GitHubAdapterError(RuntimeError):
    """Raised when a gh command or REST request fails."""


def parse_items(
    payload: object,
    normalizer: ItemNormalizer,
    *,
    keep: Callable[[RawRecord], bool] | None = None,
) -> tuple[CompletionItem, ...]:
    """Normalize a decoded JSON array into completion items."""
    if not isinstance(payload, list):
        raise GitHubAdapterError(f"Expected a JSON array, got {type(payload).__name__}")
    return tuple(
        normalizer(record)
        for record in payload
        if isinstance(record, dict) and (keep is None or keep(record))
    )


class JsonListStrategy:
    """Base strategy: load a JSON array off the event loop, then normalize it.

    Subclasses implement :meth:`load`, a blocking call returning the decoded
    payload. Any exception it raises is reported as a failure outcome.
    """

    name = "strategy"

    def __init__(self, normalizer: ItemNormalizer) -> None:
        self._normalizer = normalizer

    def load(self) -> object:
        raise NotImplementedError

    def keep(self, record: RawRecord) -> bool:
        return True

    async def fetch(self) -> FetchOutcome:
        try:
            payload = await asyncio.to_thread(self.load)
            items = parse_items(payload, self._normalizer, keep=self.keep)
        except Exception as exc:
            logger.debug("%s strategy failed", self.name, exc_info=True)
            return FetchFailure(reason=str(exc) or type(exc).__name__, source=self.name)
        return FetchSuccess(items=items, source=self.name)

    def start(self, on_done: OnDone) -> asyncio.Task:
        return schedule(self.fetch(), on_done)
