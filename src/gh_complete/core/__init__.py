"""Normalization, fallback, caching and the models they share."""

from gh_complete.core.cache import ScopeCache
from gh_complete.core.fallback import FetchStrategy, run_fallback, schedule, start_fallback
from gh_complete.core.models import (
    CacheEntry,
    CompletionItem,
    CompletionResult,
    Documentation,
    FetchFailure,
    FetchOutcome,
    FetchRequest,
    FetchSuccess,
    KindConfig,
    ProviderConfig,
    RepoCoordinates,
    ResourceKind,
)
from gh_complete.core.normalize import Normalizer, normalize, reconcile_record
from gh_complete.core.sort import get_sort_text

__all__ = [
    "CacheEntry",
    "CompletionItem",
    "CompletionResult",
    "Documentation",
    "FetchFailure",
    "FetchOutcome",
    "FetchRequest",
    "FetchStrategy",
    "FetchSuccess",
    "KindConfig",
    "Normalizer",
    "ProviderConfig",
    "RepoCoordinates",
    "ResourceKind",
    "ScopeCache",
    "get_sort_text",
    "normalize",
    "reconcile_record",
    "run_fallback",
    "schedule",
    "start_fallback",
]
