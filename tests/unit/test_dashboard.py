from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from types import SimpleNamespace

import pytest

from backend.app.insights.dashboard import (
    NO_ACTIVITY,
    UNKNOWN_TYPE,
    compute_dashboard,
    compute_streak,
    distinct_days,
)

NOW = datetime(2024, 11, 20, 18, 30)


def _record(
    name: str = "Run",
    duration: float | None = 30,
    type: str | None = "Exercise",
    days_ago: int = 0,
    hour: int = 9,
) -> SimpleNamespace:
    when = (NOW - timedelta(days=days_ago)).replace(hour=hour, minute=0)
    return SimpleNamespace(name=name, duration=duration, type=type, date=when)


def test_empty_history_returns_zeroed_summary() -> None:
    summary = compute_dashboard([])

    assert summary.total_minutes == 0
    assert summary.total_sessions == 0
    assert summary.streak == 0
    assert summary.last_activity == NO_ACTIVITY
    assert summary.last_activity_date is None
    assert summary.by_type == {}


def test_totals_and_breakdown_by_type() -> None:
    records = [
        _record("Run", 30, "Exercise", days_ago=0),
        _record("Walk", 20, "Exercise", days_ago=1),
        _record("Meditation Session", 50, "Meditation", days_ago=2),
    ]

    summary = compute_dashboard(records)

    assert summary.total_minutes == 100
    assert summary.total_sessions == 3
    assert summary.by_type["Exercise"].minutes == 50
    assert summary.by_type["Exercise"].sessions == 2
    assert summary.by_type["Exercise"].progress == 50.0
    assert summary.by_type["Meditation"].progress == 50.0


def test_progress_is_rounded_to_one_decimal() -> None:
    records = [
        _record("A", 1, "Exercise"),
        _record("B", 2, "Meditation"),
    ]

    summary = compute_dashboard(records)

    assert summary.by_type["Exercise"].progress == 33.3
    assert summary.by_type["Meditation"].progress == 66.7


def test_zero_total_minutes_gives_zero_progress() -> None:
    summary = compute_dashboard([_record("Stretch", 0, "Exercise")])

    assert summary.total_minutes == 0
    assert summary.total_sessions == 1
    assert summary.by_type["Exercise"].progress == 0.0


def test_missing_duration_and_type_are_tolerated() -> None:
    records = [
        _record("Mystery", None, None),
        _record("Run", 10, "Exercise", days_ago=1),
    ]

    summary = compute_dashboard(records)

    assert summary.total_minutes == 10
    assert summary.by_type[UNKNOWN_TYPE].minutes == 0
    assert summary.by_type[UNKNOWN_TYPE].sessions == 1


def test_last_activity_is_most_recent_record() -> None:
    records = [
        _record("Older", days_ago=3),
        _record("Newest", days_ago=0, hour=17),
        _record("Morning", days_ago=0, hour=7),
    ]

    summary = compute_dashboard(records)

    assert summary.last_activity == "Newest"
    assert summary.last_activity_date == records[1].date


def test_record_without_name_reports_placeholder() -> None:
    summary = compute_dashboard([_record(name="")])

    assert summary.last_activity == NO_ACTIVITY


def test_distinct_days_deduplicates_and_sorts_descending() -> None:
    dates = [
        datetime(2024, 1, 2, 8),
        datetime(2024, 1, 3, 9),
        datetime(2024, 1, 2, 21),
        None,
        date(2024, 1, 1),
    ]

    assert distinct_days(dates) == [date(2024, 1, 3), date(2024, 1, 2), date(2024, 1, 1)]


@pytest.mark.parametrize(
    ("offsets", "expected"),
    [
        ([], 0),
        ([0], 1),
        ([0, 0, 0], 1),
        ([0, 1, 2], 3),
        ([0, 1, 3, 4], 2),
        ([5, 6, 7], 3),
    ],
)
def test_compute_streak(offsets: list[int], expected: int) -> None:
    dates = [NOW - timedelta(days=offset) for offset in offsets]

    assert compute_streak(dates) == expected


def test_streak_counts_calendar_days_not_hours() -> None:
    dates = [datetime(2024, 1, 2, 0, 5), datetime(2024, 1, 1, 23, 55)]

    assert compute_streak(dates) == 2


def test_streak_ignores_input_order_and_duplicates() -> None:
    dates = [
        datetime(2024, 1, 1, 10),
        datetime(2024, 1, 3, 10),
        datetime(2024, 1, 2, 10),
        datetime(2024, 1, 3, 22),
    ]

    assert compute_streak(dates) == 3
    assert compute_streak(reversed(dates)) == 3


def test_streak_is_not_anchored_to_today() -> None:
    records = [_record(days_ago=10), _record(days_ago=11)]

    assert compute_dashboard(records).streak == 2


def test_negative_duration_is_aggregated_as_is() -> None:
    records = [_record("Run", 30), _record("Fix", -10, days_ago=1)]

    assert compute_dashboard(records).total_minutes == 20


def test_streak_breaks_on_two_day_gap() -> None:
    assert compute_streak([datetime(2024, 1, 10), datetime(2024, 1, 8)]) == 1


def test_type_minutes_add_up_to_total() -> None:
    records = [
        _record("Run", 12.5, "Exercise"),
        _record("Sit", 7, "Meditation", days_ago=1),
        _record("Notes", 0.1, "Journal", days_ago=1),
    ]

    summary = compute_dashboard(records)

    assert sum(bucket.minutes for bucket in summary.by_type.values()) == pytest.approx(
        summary.total_minutes
    )
    assert all(0 <= bucket.progress <= 100 for bucket in summary.by_type.values())


def test_mixed_date_kinds_pick_latest_instant() -> None:
    records = [
        SimpleNamespace(name="Evening", duration=10, type="Exercise", date=datetime(2024, 1, 10, 9)),
        SimpleNamespace(name="Day only", duration=5, type="Exercise", date=date(2024, 1, 9)),
        SimpleNamespace(
            name="Aware",
            duration=5,
            type="Yoga",
            date=datetime(2024, 1, 10, 12, tzinfo=timezone(timedelta(hours=5))),
        ),
    ]

    summary = compute_dashboard(records)

    assert summary.last_activity == "Evening"
    assert summary.total_minutes == 20
    assert summary.streak == 2


def test_bare_day_sorts_at_midnight() -> None:
    records = [
        SimpleNamespace(name="Late", duration=1, type="Exercise", date=datetime(2024, 1, 9, 23)),
        SimpleNamespace(name="Next day", duration=1, type="Exercise", date=date(2024, 1, 10)),
    ]

    assert compute_dashboard(records).last_activity == "Next day"
