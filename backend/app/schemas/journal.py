from __future__ import annotations

from datetime import datetime

from pydantic import Field

from .base import ApiModel


class JournalCreate(ApiModel):
    user_id: str | None = None
    text: str | None = Field(default=None, max_length=4000)
    date: datetime | None = None


class JournalEntryModel(ApiModel):
    id: int
    user_id: str
    text: str
    mood: str
    date: datetime
    created_at: datetime | None = None


class JournalCreateResponse(ApiModel):
    ok: bool = True
    journal: JournalEntryModel
    detected_mood: str


class JournalListResponse(ApiModel):
    count: int
    items: list[JournalEntryModel]
