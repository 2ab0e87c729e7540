"""Mood trends over a user's mood logs.

Logs only need ``mood`` and ``date`` attributes. Functions sort their input
chronologically themselves.
"""

from __future__ import annotations

import math
import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any

MOOD_SCORES = {
    "Happy": 5,
    "Neutral": 3,
    "Sad": 2,
    "Tired": 2,
    "Angry": 1,
}
NEUTRAL_SCORE = 3
LOW_MOOD_THRESHOLD = 3
RISK_RUN_LENGTH = 3
DEFAULT_RANGE = "7d"
RISK_WINDOW_DAYS = 14

_RANGE_RE = re.compile(r"^\s*(\d*)\s*([dmy])\s*$", flags=re.IGNORECASE)
_RANGE_UNIT_DAYS = {"d": 1, "m": 30, "y": 365}
_RANGE_DEFAULT_COUNT = {"d": 7, "m": 1, "y": 1}


@dataclass(frozen=True)
class MoodSummary:
    mind_balance_score: int = 0
    progress_milestone: float = 0.0
    weekly_moods: list[int] = field(default_factory=lambda: [0] * 7)
    risk_detected: bool = False
    entries: int = 0


@dataclass(frozen=True)
class MoodRisk:
    category: str
    message: str
    score: int


def mood_score(mood: str | None) -> int:
    """1 to 5, higher is more positive; unknown moods count as neutral."""

    return MOOD_SCORES.get(mood or "", NEUTRAL_SCORE)


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def range_start(range_spec: str | None, now: datetime) -> datetime:
    """Start of a ``7d`` / ``1m`` / ``1y`` style window ending at ``now``.

    Months count as 30 days and years as 365. Unparseable input falls back
    to the default seven days.
    """

    match = _RANGE_RE.match(range_spec or DEFAULT_RANGE)
    if match is None:
        return now - timedelta(days=7)
    count, unit = match.groups()
    unit = unit.lower()
    amount = int(count) if count and int(count) > 0 else _RANGE_DEFAULT_COUNT[unit]
    return now - timedelta(days=amount * _RANGE_UNIT_DAYS[unit])


def _chronological(logs: Iterable[Any]) -> list[Any]:
    return sorted(
        (log for log in logs if getattr(log, "date", None) is not None),
        key=lambda log: log.date,
    )


def weekday_averages(logs: Iterable[Any]) -> list[float]:
    """Average score per weekday, Monday first; 0 where nothing was logged."""

    buckets: list[list[int]] = [[] for _ in range(7)]
    for log in logs:
        when = getattr(log, "date", None)
        if when is None:
            continue
        buckets[when.weekday()].append(mood_score(log.mood))
    return [sum(bucket) / len(bucket) if bucket else 0.0 for bucket in buckets]


def _has_low_run(averages: list[float]) -> bool:
    run = 0
    for value in averages:
        if 0 < value < LOW_MOOD_THRESHOLD:
            run += 1
            if run >= RISK_RUN_LENGTH:
                return True
        else:
            run = 0
    return False


def compute_mood_summary(logs: Iterable[Any]) -> MoodSummary:
    """Mind balance (0 to 100), share of happy logs, weekday pattern and risk flag."""

    items = _chronological(logs)
    if not items:
        return MoodSummary()

    scores = [mood_score(log.mood) for log in items]
    average = sum(scores) / len(scores)
    happy = sum(1 for log in items if log.mood == "Happy")
    averages = weekday_averages(items)
    return MoodSummary(
        mind_balance_score=_round_half_up(average * 20),
        progress_milestone=round(happy / len(items), 2),
        weekly_moods=[_round_half_up(value) for value in averages],
        risk_detected=_has_low_run(averages),
        entries=len(items),
    )


def detect_risks(logs: Iterable[Any]) -> list[MoodRisk]:
    """Flag a run of low recent moods and frequent anger."""

    scores = [mood_score(log.mood) for log in _chronological(logs)]
    if not scores:
        return []

    risks: list[MoodRisk] = []
    if all(score <= 2 for score in scores[-5:]):
        risks.append(
            MoodRisk(
                category="Mood Decline",
                message=(
                    "Your recent logs show consistent low moods. "
                    "Consider reaching out for support."
                ),
                score=75,
            )
        )
    if sum(1 for score in scores if score == 1) >= 3:
        risks.append(
            MoodRisk(
                category="High Stress",
                message=(
                    "Frequent 'Angry' moods logged. "
                    "Try relaxation or mindfulness activities."
                ),
                score=68,
            )
        )
    return risks


__all__ = [
    "MOOD_SCORES",
    "MoodRisk",
    "MoodSummary",
    "RISK_WINDOW_DAYS",
    "compute_mood_summary",
    "detect_risks",
    "mood_score",
    "range_start",
    "weekday_averages",
]
