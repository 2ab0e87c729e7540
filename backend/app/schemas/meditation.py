from __future__ import annotations

from datetime import datetime

from pydantic import Field

from .base import ApiModel


class MeditationCreate(ApiModel):
    user_id: str | None = None
    duration: float | None = None
    mood_before: str | None = Field(default=None, max_length=32)
    mood_after: str | None = Field(default=None, max_length=32)
    date: datetime | None = None


class MeditationModel(ApiModel):
    id: int
    user_id: str
    duration: float
    mood_before: str
    mood_after: str
    date: datetime
    created_at: datetime | None = None


class MeditationCreateResponse(ApiModel):
    ok: bool = True
    meditation: MeditationModel


class MeditationListResponse(ApiModel):
    count: int
    items: list[MeditationModel]
