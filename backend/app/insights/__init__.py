"""Aggregates computed from stored activity and mood records."""

from .dashboard import DashboardSummary, TypeBreakdown, compute_dashboard, compute_streak
from .moods import (
    RISK_WINDOW_DAYS,
    MoodRisk,
    MoodSummary,
    compute_mood_summary,
    detect_risks,
    range_start,
)
from .rewards import Reward, compute_reward

__all__ = [
    "RISK_WINDOW_DAYS",
    "DashboardSummary",
    "MoodRisk",
    "MoodSummary",
    "Reward",
    "TypeBreakdown",
    "compute_dashboard",
    "compute_mood_summary",
    "compute_reward",
    "compute_streak",
    "detect_risks",
    "range_start",
]
