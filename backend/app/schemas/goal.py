from __future__ import annotations

from datetime import datetime

from pydantic import Field

from .base import ApiModel


class GoalUpsert(ApiModel):
    user_id: str | None = None
    sessions_per_week: int | None = Field(default=None, ge=0, le=100)
    minutes_per_day: int | None = Field(default=None, ge=0, le=1440)


class GoalModel(ApiModel):
    id: int
    user_id: str
    sessions_per_week: int
    minutes_per_day: int
    updated_at: datetime | None = None
