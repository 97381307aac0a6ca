"""Filtering, sorting and aggregate counts over the working set.

Everything here is pure and synchronous; results are recomputed on demand.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from inbox_triage.models import (
    ALL_PRIORITIES,
    UNKNOWN_DATE,
    EmailRecord,
    FilterCriteria,
    Priority,
    Visibility,
)


@dataclass(frozen=True)
class InboxStats:
    """Summary counts over the full working set."""

    total: int
    unread: int
    important: int
    spam: int


def _matches_visibility(record: EmailRecord, visibility: Visibility) -> bool:
    if visibility is Visibility.UNREAD:
        return not record.is_read
    if visibility is Visibility.READ:
        return record.is_read
    if visibility is Visibility.STARRED:
        return record.is_starred
    return True


def sort_records(records: Iterable[EmailRecord]) -> list[EmailRecord]:
    """Order by priority tier (high first), then by date (newest first).

    The sort is stable, so records with equal keys keep their input order.
    """

    by_date = sorted(records, key=lambda r: r.date, reverse=True)
    return sorted(by_date, key=lambda r: r.priority.rank, reverse=True)


def filter_records(
    records: Iterable[EmailRecord],
    criteria: FilterCriteria,
    now: datetime | None = None,
) -> list[EmailRecord]:
    """Apply ``criteria`` to the working set and sort the result.

    Args:
        records: The working set.
        criteria: Age window, priority and visibility constraints.
        now: Reference time for the age window. Defaults to the current time.

    Returns:
        A new, sorted list of matching records.
    """

    reference = now or datetime.now(timezone.utc)
    if reference.tzinfo is None:
        reference = reference.replace(tzinfo=timezone.utc)
    try:
        cutoff = reference - timedelta(days=criteria.max_age_days)
    except OverflowError:
        cutoff = UNKNOWN_DATE

    kept = [
        r
        for r in records
        if r.date >= cutoff
        and (criteria.priority == ALL_PRIORITIES or r.priority == criteria.priority)
        and _matches_visibility(r, criteria.visibility)
    ]
    return sort_records(kept)


def aggregate(records: Iterable[EmailRecord]) -> InboxStats:
    """Count total, unread, high-priority and spam records."""

    total = unread = important = spam = 0
    for r in records:
        total += 1
        if not r.is_read:
            unread += 1
        if r.priority is Priority.HIGH:
            important += 1
        elif r.priority is Priority.SPAM:
            spam += 1
    return InboxStats(total=total, unread=unread, important=important, spam=spam)


def find_record(records: Sequence[EmailRecord], record_id: str) -> EmailRecord | None:
    return next((r for r in records if r.id == record_id), None)
