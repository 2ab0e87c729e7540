from __future__ import annotations

from datetime import datetime

from pydantic import Field

from .base import ApiModel


class MoodLogCreate(ApiModel):
    user_id: str | None = None
    mood: str | None = Field(default=None, max_length=16)
    factors: list[str] = Field(default_factory=list)
    journal: str | None = Field(default=None, max_length=4000)
    date: datetime | None = None


class MoodLogModel(ApiModel):
    id: int
    user_id: str
    mood: str
    factors: list[str]
    journal: str
    sentiment: str
    confidence: float | None = None
    date: datetime
    created_at: datetime | None = None


class MoodLogCreateResponse(ApiModel):
    ok: bool = True
    data: MoodLogModel


class MoodLogListResponse(ApiModel):
    count: int
    items: list[MoodLogModel]


class MoodSummaryResponse(ApiModel):
    range: str
    entries: int
    mind_balance_score: int
    progress_milestone: float
    weekly_moods: list[int]
    ai_risk_detected: bool


class MoodRiskModel(ApiModel):
    category: str
    message: str
    score: int


class MoodRiskResponse(ApiModel):
    risks: list[MoodRiskModel]
