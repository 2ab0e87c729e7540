from __future__ import annotations

from datetime import datetime, timedelta
from types import SimpleNamespace

import pytest

from backend.app.insights.moods import (
    compute_mood_summary,
    detect_risks,
    mood_score,
    range_start,
    weekday_averages,
)

# 2024-01-01 is a Monday
MONDAY = datetime(2024, 1, 1, 20, 0)


def _log(mood: str, days: int = 0) -> SimpleNamespace:
    return SimpleNamespace(mood=mood, date=MONDAY + timedelta(days=days))


def test_mood_scores() -> None:
    assert mood_score("Happy") == 5
    assert mood_score("Tired") == 2
    assert mood_score("Angry") == 1
    assert mood_score("Confused") == 3
    assert mood_score(None) == 3


def test_empty_logs_give_zero_summary() -> None:
    summary = compute_mood_summary([])

    assert summary.mind_balance_score == 0
    assert summary.progress_milestone == 0.0
    assert summary.weekly_moods == [0, 0, 0, 0, 0, 0, 0]
    assert summary.risk_detected is False
    assert summary.entries == 0


def test_summary_scores_and_weekday_slots() -> None:
    logs = [
        _log("Happy", 0),
        _log("Sad", 0),
        _log("Neutral", 2),
        _log("Happy", 6),
    ]

    summary = compute_mood_summary(logs)

    # average (5 + 2 + 3 + 5) / 4 = 3.75 -> 75
    assert summary.mind_balance_score == 75
    assert summary.progress_milestone == 0.5
    # Monday averages 3.5 and rounds half up
    assert summary.weekly_moods == [4, 0, 3, 0, 0, 0, 5]
    assert summary.risk_detected is False
    assert summary.entries == 4


def test_weekday_averages_keep_fractions() -> None:
    averages = weekday_averages([_log("Happy", 0), _log("Sad", 0)])

    assert averages[0] == pytest.approx(3.5)
    assert averages[1:] == [0.0] * 6


def test_three_low_weekdays_in_a_row_flag_risk() -> None:
    logs = [_log("Sad", 1), _log("Tired", 2), _log("Angry", 3), _log("Happy", 4)]

    assert compute_mood_summary(logs).risk_detected is True


def test_low_days_separated_by_a_gap_do_not_flag_risk() -> None:
    logs = [_log("Sad", 0), _log("Tired", 1), _log("Angry", 3)]

    assert compute_mood_summary(logs).risk_detected is False


@pytest.mark.parametrize(
    ("spec", "expected_days"),
    [
        ("7d", 7),
        ("30d", 30),
        ("d", 7),
        ("2m", 60),
        ("1y", 365),
        ("bogus", 7),
        (None, 7),
    ],
)
def test_range_start(spec: str | None, expected_days: int) -> None:
    now = datetime(2024, 6, 1, 12, 0)

    assert now - range_start(spec, now) == timedelta(days=expected_days)


def test_detect_risks_recent_decline() -> None:
    logs = [_log("Happy", 0)] + [_log("Sad", day) for day in range(1, 6)]

    risks = detect_risks(logs)

    assert [risk.category for risk in risks] == ["Mood Decline"]
    assert risks[0].score == 75


def test_detect_risks_frequent_anger() -> None:
    logs = [_log("Angry", 0), _log("Angry", 1), _log("Angry", 2), _log("Happy", 3)]

    risks = detect_risks(logs)

    assert [risk.category for risk in risks] == ["High Stress"]


def test_detect_risks_uses_chronological_order() -> None:
    logs = [_log("Happy", 9)] + [_log("Sad", day) for day in range(5)]

    assert detect_risks(reversed(logs)) == []
    assert detect_risks([]) == []
