"""Sequential fallback over fetch strategies."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Coroutine, Sequence
from typing import Protocol

from gh_complete.core.models import FetchFailure, FetchOutcome, FetchSuccess

logger = logging.getLogger("gh_complete")

OnDone = Callable[[FetchOutcome], None]


class FetchStrategy(Protocol):
    """One asynchronous attempt to obtain completion items."""

    name: str

    async def fetch(self) -> FetchOutcome:
        """Resolve to a success or failure outcome; never raises."""

    def start(self, on_done: OnDone) -> asyncio.Task:
        """Schedule :meth:`fetch` and hand its outcome to ``on_done`` once."""


def schedule(outcome: Coroutine[object, object, FetchOutcome], on_done: OnDone) -> asyncio.Task:
    """Run ``outcome`` as a task and pass its result to ``on_done`` exactly once."""
    task = asyncio.get_running_loop().create_task(outcome)

    def _deliver(done: asyncio.Task) -> None:
        if done.cancelled():
            on_done(FetchFailure(reason="cancelled", source="task"))
            return
        exc = done.exception()
        if exc is not None:
            on_done(FetchFailure(reason=f"{type(exc).__name__}: {exc}", source="task"))
            return
        on_done(done.result())

    task.add_done_callback(_deliver)
    return task


def ensure_chain(strategies: Sequence[FetchStrategy]) -> None:
    """Reject an empty fallback chain."""
    if not strategies:
        raise ValueError("Fallback chain needs at least one strategy")


async def run_fallback(strategies: Sequence[FetchStrategy]) -> FetchOutcome:
    """Try ``strategies`` in order and return the first success.

    A strategy is only started after the previous one has reported failure;
    a strategy that raises counts as a failure.
    When every strategy fails, the returned failure names each attempt with
    the last one first.
    """
    ensure_chain(strategies)
    failures: list[FetchFailure] = []
    for strategy in strategies:
        try:
            outcome = await strategy.fetch()
        except Exception as exc:
            logger.debug("%s strategy raised", strategy.name, exc_info=True)
            outcome = FetchFailure(reason=f"{type(exc).__name__}: {exc}", source=strategy.name)
        if isinstance(outcome, FetchSuccess):
            logger.debug("%s returned %d items", outcome.source, len(outcome.items))
            return outcome
        logger.debug("%s failed: %s", outcome.source, outcome.reason)
        failures.append(outcome)

    last = failures[-1]
    earlier = "; ".join(f"{failure.source}: {failure.reason}" for failure in failures[:-1])
    reason = last.reason if not earlier else f"{last.reason} (after {earlier})"
    return FetchFailure(reason=reason, source=last.source)


def start_fallback(strategies: Sequence[FetchStrategy], on_done: OnDone) -> asyncio.Task:
    """Schedule :func:`run_fallback` and report its outcome to ``on_done`` once."""
    ensure_chain(strategies)
    return schedule(run_fallback(strategies), on_done)
