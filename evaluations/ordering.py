"""Recency ordering of the business, assessment and run lists.

Each list is ordered most recent first by a date taken from a prioritized
list of fields: the first field holding a non-empty value wins, and records
with none of them fall back to ``settings.DEFAULT_TIMESTAMP``.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Iterable, List, Optional, Sequence, TypeVar

from config.settings import settings
from evaluations.types import AssessmentItem, BusinessReviews, BusinessWithReviews, RunSummary

T = TypeVar("T")

BUSINESS_DATE_FIELDS = ("latest_evaluation_at", "most_recent_pending")
ASSESSMENT_DATE_FIELDS = ("evaluated_at", "submitted_at", "created_at")
RUN_DATE_FIELDS = ("created_at",)

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def _field(record: Any, name: str) -> Any:
    if isinstance(record, dict):
        return record.get(name)
    return getattr(record, name, None)


def resolve_first(record: Any, fields: Sequence[str], default: Any) -> Any:
    """Return the first non-empty value among ``fields`` in order, else ``default``.

    ``None`` and empty strings count as empty; ``0`` and ``False`` do not.
    """

    for name in fields:
        value = _field(record, name)
        if value is None or value == "":
            continue
        return value
    return default


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def recency_key(record: Any, fields: Sequence[str]) -> datetime:
    raw = resolve_first(record, fields, settings.DEFAULT_TIMESTAMP)
    return parse_timestamp(raw) or parse_timestamp(settings.DEFAULT_TIMESTAMP) or _EPOCH


def sort_by_recency(records: Iterable[T], fields: Sequence[str]) -> List[T]:
    """Most recent first; ties keep input order."""

    return sorted(records, key=lambda record: recency_key(record, fields), reverse=True)


def sort_businesses(businesses: Iterable[BusinessWithReviews]) -> List[BusinessWithReviews]:
    return sort_by_recency(businesses, BUSINESS_DATE_FIELDS)


def sort_assessments(reviews: BusinessReviews) -> List[AssessmentItem]:
    """Merge pending and completed reviews (both are evaluatable) and order them."""

    return sort_by_recency([*reviews.pending, *reviews.completed], ASSESSMENT_DATE_FIELDS)


def sort_runs(runs: Iterable[RunSummary]) -> List[RunSummary]:
    return sort_by_recency(runs, RUN_DATE_FIELDS)


__all__ = [
    "BUSINESS_DATE_FIELDS",
    "ASSESSMENT_DATE_FIELDS",
    "RUN_DATE_FIELDS",
    "resolve_first",
    "parse_timestamp",
    "recency_key",
    "sort_by_recency",
    "sort_businesses",
    "sort_assessments",
    "sort_runs",
]
