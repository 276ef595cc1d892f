"""Sort-text helpers for completion items."""

from __future__ import annotations

from datetime import datetime

from gh_complete.core.models import RawRecord, SortFn

# Inverted keys are zero-padded so lexical order matches the intended numeric order.
_MAX_EPOCH = 10**11
_MAX_COUNT = 10**9
_LAST = "~"


def get_sort_text(sort_by: str | SortFn, record: RawRecord) -> str:
    """Compute the sort key for one raw record.

    ``sort_by`` is either a callable receiving the record or the name of one
    of the built-in orderings.
    """
    if callable(sort_by):
        return sort_by(record)
    try:
        ordering = _ORDERINGS[sort_by]
    except KeyError:
        raise ValueError(f"Unknown sort ordering: {sort_by!r}") from None
    return ordering(record)


def parse_github_timestamp(value: object) -> float | None:
    """Parse an ISO-8601 timestamp as returned by gh or the REST API."""
    if not isinstance(value, str) or not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    return parsed.timestamp()


def _by_updated(record: RawRecord) -> str:
    epoch = parse_github_timestamp(record.get("updatedAt"))
    if epoch is None:
        return _LAST
    clamped = min(max(int(epoch), 0), _MAX_EPOCH)
    return f"{_MAX_EPOCH - clamped:012d}"


def _by_number(record: RawRecord) -> str:
    number = _as_int(record.get("number"))
    if number is None:
        return _LAST
    return _inverted_count(number)


def _by_login(record: RawRecord) -> str:
    login = record.get("login")
    return str(login).lower() if login else _LAST


def _by_contributions(record: RawRecord) -> str:
    count = _as_int(record.get("contributions"))
    if count is None:
        return _LAST
    return _inverted_count(count)


def _inverted_count(value: int) -> str:
    clamped = min(max(value, 0), _MAX_COUNT)
    return f"{_MAX_COUNT - clamped:010d}"


def _as_int(value: object) -> int | None:
    if isinstance(value, bool):
        return None
    try:
        return int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None


_ORDERINGS: dict[str, SortFn] = {
    "updated": _by_updated,
    "number": _by_number,
    "login": _by_login,
    "contributions": _by_contributions,
}
