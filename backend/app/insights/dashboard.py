"""Dashboard aggregates over a user's activity records.

Everything here is a pure function of its input: callers load the records
(``StorageService.list_activities``) and pass them in. Records only need
``type``, ``name``, ``duration`` and ``date`` attributes, so ORM rows and
plain namespaces both work.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import UTC, date, datetime, time, timedelta
from itertools import pairwise
from typing import Any

STREAK_GAP_TOLERANCE_DAYS = 1.5
UNKNOWN_TYPE = "Unknown"
NO_ACTIVITY = "None"


@dataclass(frozen=True)
class TypeBreakdown:
    minutes: float
    sessions: int
    progress: float


@dataclass(frozen=True)
class DashboardSummary:
    total_minutes: float = 0
    total_sessions: int = 0
    streak: int = 0
    last_activity: str = NO_ACTIVITY
    last_activity_date: datetime | date | None = None
    by_type: dict[str, TypeBreakdown] = field(default_factory=dict)


def _minutes(record: Any) -> float:
    return getattr(record, "duration", None) or 0


def _day(value: datetime | date) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def distinct_days(dates: Iterable[datetime | date | None]) -> list[date]:
    """Calendar days present in ``dates``, deduplicated, most recent first."""

    return sorted({_day(value) for value in dates if value is not None}, reverse=True)


def compute_streak(dates: Iterable[datetime | date | None]) -> int:
    """Length of the most recent run of active days.

    Consecutive distinct days count as contiguous while their gap is at most
    ``STREAK_GAP_TOLERANCE_DAYS``; the scan stops at the first larger gap.
    """

    days = distinct_days(dates)
    if not days:
        return 0
    streak = 1
    for newer, older in pairwise(days):
        gap = (newer - older) / timedelta(days=1)
        if gap > STREAK_GAP_TOLERANCE_DAYS:
            break
        streak += 1
    return streak


def breakdown_by_type(records: Iterable[Any], total_minutes: float) -> dict[str, TypeBreakdown]:
    minutes: dict[str, float] = {}
    sessions: dict[str, int] = {}
    for record in records:
        key = getattr(record, "type", None) or UNKNOWN_TYPE
        minutes[key] = minutes.get(key, 0) + _minutes(record)
        sessions[key] = sessions.get(key, 0) + 1

    breakdown: dict[str, TypeBreakdown] = {}
    for key, bucket_minutes in minutes.items():
        progress = round(bucket_minutes / total_minutes * 100, 1) if total_minutes else 0.0
        breakdown[key] = TypeBreakdown(
            minutes=bucket_minutes,
            sessions=sessions[key],
            progress=progress,
        )
    return breakdown


def _instant(value: datetime | date) -> datetime:
    """Comparable naive UTC instant for a record date; bare days map to midnight."""

    if not isinstance(value, datetime):
        return datetime.combine(value, time.min)
    if value.tzinfo is not None:
        return value.astimezone(UTC).replace(tzinfo=None)
    return value


def _most_recent(records: Sequence[Any]) -> Any | None:
    dated = [record for record in records if getattr(record, "date", None) is not None]
    if not dated:
        return records[0] if records else None
    # max() keeps the first of equal dates, i.e. the store's tie order
    return max(dated, key=lambda record: _instant(record.date))


def compute_dashboard(records: Iterable[Any]) -> DashboardSummary:
    """Summarize one user's complete activity history."""

    items = list(records)
    if not items:
        return DashboardSummary()

    total_minutes = sum(_minutes(record) for record in items)
    latest = _most_recent(items)
    return DashboardSummary(
        total_minutes=total_minutes,
        total_sessions=len(items),
        streak=compute_streak(getattr(record, "date", None) for record in items),
        last_activity=getattr(latest, "name", None) or NO_ACTIVITY,
        last_activity_date=getattr(latest, "date", None),
        by_type=breakdown_by_type(items, total_minutes),
    )


__all__ = [
    "DashboardSummary",
    "NO_ACTIVITY",
    "STREAK_GAP_TOLERANCE_DAYS",
    "TypeBreakdown",
    "UNKNOWN_TYPE",
    "breakdown_by_type",
    "compute_dashboard",
    "compute_streak",
    "distinct_days",
]
