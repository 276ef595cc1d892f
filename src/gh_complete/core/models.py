"""Pydantic configuration models and completion result dataclasses."""

from __future__ import annotations

import enum
from collections.abc import Callable, Hashable, Mapping
from dataclasses import dataclass, field
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

RawRecord = Mapping[str, Any]
SortFn = Callable[[RawRecord], str]
FilterFn = Callable[[str, RawRecord], str]

SORT_ORDERINGS = ("updated", "number", "login", "contributions")


# ---------------------------------------------------------------------------
# Pydantic config models (input validation)
# ---------------------------------------------------------------------------


class KindConfig(BaseModel):
    """Fetch and presentation options for one resource kind."""

    model_config = ConfigDict(extra="forbid")

    limit: Annotated[int, Field(ge=1)] = 100
    state: Literal["open", "closed", "all"] = "open"
    filter: str = "all"
    sort_by: Union[str, SortFn] = "updated"
    filter_fn: FilterFn | None = None

    @field_validator("sort_by")
    @classmethod
    def _known_ordering(cls, value: str | SortFn) -> str | SortFn:
        if isinstance(value, str) and value not in SORT_ORDERINGS:
            raise ValueError(f"unknown ordering {value!r}, expected one of {', '.join(SORT_ORDERINGS)}")
        return value

    def merged(self, overrides: Mapping[str, Any] | None) -> KindConfig:
        """Return a validated copy with caller overrides applied."""
        if not overrides:
            return self
        current = {name: getattr(self, name) for name in type(self).model_fields}
        return KindConfig.model_validate({**current, **dict(overrides)})


class ProviderConfig(BaseModel):
    """Kind-level defaults for the GitHub completion source."""

    model_config = ConfigDict(extra="forbid")

    issues: KindConfig = Field(default_factory=KindConfig)
    pull_requests: KindConfig = Field(default_factory=KindConfig)
    mentions: KindConfig = Field(default_factory=lambda: KindConfig(sort_by="login"))

    def for_kind(self, kind: ResourceKind) -> KindConfig:
        return getattr(self, kind.value)


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class ResourceKind(enum.Enum):
    """Kind of resource a completion item refers to."""

    ISSUES = "issues"
    PULL_REQUESTS = "pull_requests"
    MENTIONS = "mentions"


# ---------------------------------------------------------------------------
# Result dataclasses (frozen, output-only)
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RepoCoordinates:
    """Repository location resolved from the editing context."""

    host: str
    owner: str | None
    repo: str | None

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"


@dataclass(frozen=True)
class Documentation:
    """Hover documentation attached to a completion item."""

    value: str
    kind: str = "markdown"


@dataclass(frozen=True)
class CompletionItem:
    """Canonical completion entry delivered to the editor."""

    label: str
    insert_text: str
    filter_text: str
    sort_key: str
    documentation: Documentation | None = None
    updated_at: str | None = None
    raw: RawRecord = field(default_factory=dict, compare=False, repr=False)


@dataclass(frozen=True)
class CompletionResult:
    """Payload handed to provider callbacks."""

    items: list[CompletionItem]
    is_incomplete: bool = False


@dataclass(frozen=True)
class CacheEntry:
    """Normalized items stored for one (kind, scope) pair."""

    items: tuple[CompletionItem, ...]
    is_incomplete: bool = False


@dataclass(frozen=True)
class FetchRequest:
    """Immutable parameters shared by every strategy of one fetch."""

    kind: ResourceKind
    repo: RepoCoordinates
    limit: int
    state: str
    filter: str
    normalizer: Callable[[RawRecord], CompletionItem]
    scope: Hashable = None


@dataclass(frozen=True)
class FetchSuccess:
    """Strategy outcome carrying normalized items."""

    items: tuple[CompletionItem, ...]
    source: str


@dataclass(frozen=True)
class FetchFailure:
    """Strategy outcome describing why no items were produced."""

    reason: str
    source: str


FetchOutcome = Union[FetchSuccess, FetchFailure]
