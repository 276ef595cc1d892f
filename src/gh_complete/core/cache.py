"""Per-scope cache of normalized completion items."""

from __future__ import annotations

from collections.abc import Hashable

from gh_complete.core.models import CacheEntry, ResourceKind


class ScopeCache:
    """Mapping of (kind, scope) to the last successful fetch result.

    Entries are only ever overwritten by the provider. Dropping entries is
    left to the host, e.g. when an editing buffer closes.
    """

    def __init__(self) -> None:
        self._entries: dict[tuple[ResourceKind, Hashable], CacheEntry] = {}

    def get(self, kind: ResourceKind, scope: Hashable) -> CacheEntry | None:
        return self._entries.get((kind, scope))

    def put(self, kind: ResourceKind, scope: Hashable, entry: CacheEntry) -> None:
        self._entries[(kind, scope)] = entry

    def invalidate(self, scope: Hashable, kind: ResourceKind | None = None) -> None:
        """Forget cached items for ``scope``, for one kind or all of them."""
        kinds = [kind] if kind is not None else list(ResourceKind)
        for candidate in kinds:
            self._entries.pop((candidate, scope), None)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)
