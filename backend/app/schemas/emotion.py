from __future__ import annotations

from pydantic import Field

from .base import ApiModel


class EmotionAnalyzeRequest(ApiModel):
    text: str | None = None


class EmotionScoreModel(ApiModel):
    label: str
    score: float


class EmotionAnalyzeResponse(ApiModel):
    emotion: str
    confidence: float
    mapped_mood: str
    scores: list[EmotionScoreModel] = Field(default_factory=list)


class MessageRequest(ApiModel):
    text: str = Field(..., min_length=1, max_length=2000)
    mood: str | None = Field(default=None, max_length=32)


class MessageResponse(ApiModel):
    message: str
    mood: str
    source: str
