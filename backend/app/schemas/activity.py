from __future__ import annotations

from datetime import datetime

from pydantic import Field

from .base import ApiModel


class ActivityCreate(ApiModel):
    # Required fields are checked by the store so a missing one maps to 400.
    user_id: str | None = None
    name: str | None = Field(default=None, max_length=200)
    duration: float | None = None
    type: str | None = Field(default=None, max_length=32)
    date: datetime | None = None
    time: str | None = Field(default=None, max_length=32)
    mood_before: str | None = Field(default=None, max_length=32)
    mood_after: str | None = Field(default=None, max_length=32)


class ActivityModel(ApiModel):
    id: int
    user_id: str
    type: str
    name: str
    duration: float
    date: datetime
    time: str | None = None
    mood_before: str | None = None
    mood_after: str | None = None
    created_at: datetime | None = None


class ActivityCreateResponse(ApiModel):
    ok: bool = True
    data: ActivityModel


class ActivityListResponse(ApiModel):
    count: int
    items: list[ActivityModel]
