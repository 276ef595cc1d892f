"""Conversion of gh / REST records into completion items.

Both data sources describe the same objects with slightly different shapes:
``gh`` reports ``updatedAt`` while the REST API reports ``updated_at``, and
either may carry an explicit ``null`` body. :func:`reconcile_record` folds
those differences into one schema before any item fields are derived.
"""

from __future__ import annotations

from gh_complete.core.models import (
    CompletionItem,
    Documentation,
    FilterFn,
    RawRecord,
    ResourceKind,
    SortFn,
)
from gh_complete.core.sort import get_sort_text

TIMESTAMP_FIELDS = ("updatedAt", "updated_at")


def normalize_body(value: object) -> str:
    """Return the body text with carriage returns removed; null becomes ``""``."""
    if value is None:
        return ""
    return str(value).replace("\r", "")


def reconcile_record(record: RawRecord) -> dict[str, object]:
    """Return a copy of ``record`` with body and timestamp in canonical form."""
    reconciled = dict(record)
    reconciled["body"] = normalize_body(record.get("body"))
    for name in TIMESTAMP_FIELDS:
        value = record.get(name)
        if value is not None:
            reconciled["updatedAt"] = value
            break
    return reconciled


def issue_filter_text(trigger: str, record: RawRecord) -> str:
    """Default fuzzy-match text for issues and pull requests."""
    return f"{trigger} {_text(record.get('number'))} {_text(record.get('title'))}"


def mention_filter_text(trigger: str, record: RawRecord) -> str:
    """Default fuzzy-match text for contributor mentions."""
    return f"{trigger} {_text(record.get('login'))}"


def default_filter_fn(kind: ResourceKind) -> FilterFn:
    return mention_filter_text if kind is ResourceKind.MENTIONS else issue_filter_text


def normalize(
    record: RawRecord,
    kind: ResourceKind,
    *,
    trigger: str = "",
    sort_by: str | SortFn = "updated",
    filter_fn: FilterFn | None = None,
) -> CompletionItem:
    """Build a :class:`CompletionItem` from one raw record.

    Never raises for missing or null fields; they degrade to empty strings.
    """
    data = reconcile_record(record)
    filter_text = (filter_fn or default_filter_fn(kind))(trigger, data)
    sort_key = get_sort_text(sort_by, data)

    if kind is ResourceKind.MENTIONS:
        handle = f"@{_text(data.get('login'))}"
        return CompletionItem(
            label=handle,
            insert_text=handle,
            filter_text=filter_text,
            sort_key=sort_key,
            raw=data,
        )

    number = _text(data.get("number"))
    title = _text(data.get("title"))
    return CompletionItem(
        label=f"#{number}: {title}",
        insert_text=f"#{number}",
        filter_text=filter_text,
        sort_key=sort_key,
        documentation=Documentation(value=f"# {title}\n\n{data['body']}"),
        updated_at=data.get("updatedAt"),  # type: ignore[arg-type]
        raw=data,
    )


class Normalizer:
    """Per-request normalizer bound to a kind, trigger and presentation options."""

    def __init__(
        self,
        kind: ResourceKind,
        *,
        trigger: str = "",
        sort_by: str | SortFn = "updated",
        filter_fn: FilterFn | None = None,
    ) -> None:
        self.kind = kind
        self._trigger = trigger
        self._sort_by = sort_by
        self._filter_fn = filter_fn

    def __call__(self, record: RawRecord) -> CompletionItem:
        return normalize(
            record,
            self.kind,
            trigger=self._trigger,
            sort_by=self._sort_by,
            filter_fn=self._filter_fn,
        )


def _text(value: object) -> str:
    return "" if value is None else str(value)
