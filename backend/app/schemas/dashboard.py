from __future__ import annotations

from datetime import date, datetime

from .activity import ActivityModel
from .base import ApiModel


class TypeBreakdownModel(ApiModel):
    minutes: float
    sessions: int
    progress: float


class DashboardResponse(ApiModel):
    total_minutes: float
    total_sessions: int
    streak: int
    last_activity: str
    last_activity_date: datetime | date | None = None
    by_type: dict[str, TypeBreakdownModel]
    recent: list[ActivityModel] = []


class RewardResponse(ApiModel):
    total_minutes: float
    total_sessions: int
    streak_days: int
    xp: float
    badge: str
