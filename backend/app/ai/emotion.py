from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any

import httpx

from ..core.config import Settings
from ..metrics import AI_CALLS
from ..utils.timeouts import retry_async

logger = logging.getLogger(__name__)

MAX_INPUT_CHARS = 2000
DEFAULT_MOOD = "Neutral"

HAPPY_LABELS = frozenset(
    {
        "joy",
        "amusement",
        "excitement",
        "gratitude",
        "love",
        "optimism",
        "pride",
        "relief",
        "approval",
        "admiration",
        "caring",
        "desire",
    }
)
ANGRY_LABELS = frozenset({"anger", "annoyance", "disgust", "disapproval"})
SAD_LABELS = frozenset({"sadness", "grief", "disappointment", "remorse", "embarrassment"})

_TIRED_RE = re.compile(
    r"\b(tired|exhaust(ed|ion)?|sleepy|fatigue(d)?|drained|burn(\s)?out|weary)\b",
    flags=re.IGNORECASE,
)


class EmotionServiceError(RuntimeError):
    """Base error for the hosted emotion classifier."""


class ClassifierUnavailable(EmotionServiceError):
    """The classifier is not configured or could not be reached."""


class ClassifierNotReady(EmotionServiceError):
    """The classifier answered but has no scores yet (model warming up)."""


@dataclass(frozen=True)
class ClassifierConfig:
    endpoint: str
    model: str
    token: str | None = None
    timeout: float = 15.0
    retries: int = 2
    retry_delay: float = 0.5

    @classmethod
    def from_settings(cls, settings: Settings) -> ClassifierConfig:
        return cls(
            endpoint=settings.hf_api_url,
            model=settings.hf_model,
            token=settings.hf_token,
            timeout=settings.request_timeout_seconds,
            retries=settings.retry_attempts,
        )

    @property
    def url(self) -> str:
        return f"{self.endpoint.rstrip('/')}/{self.model}"


@dataclass(frozen=True)
class EmotionScore:
    label: str
    score: float


@dataclass(frozen=True)
class EmotionResult:
    label: str
    confidence: float
    mood: str
    scores: list[EmotionScore] = field(default_factory=list)


def map_to_mood(label: str | None, text: str = "") -> str:
    """Collapse a fine-grained emotion label into the app's mood set."""

    if _TIRED_RE.search(text or ""):
        return "Tired"
    normalized = (label or "").lower()
    if normalized in HAPPY_LABELS:
        return "Happy"
    if normalized in ANGRY_LABELS:
        return "Angry"
    if normalized in SAD_LABELS:
        return "Sad"
    return DEFAULT_MOOD


def parse_scores(payload: Any) -> list[EmotionScore]:
    """Accept ``[[{label, score}]]`` and ``[{label, score}]`` response shapes."""

    if isinstance(payload, dict):
        if payload.get("error"):
            raise ClassifierNotReady(str(payload["error"]))
        raise ClassifierUnavailable("unexpected classifier response")
    if not isinstance(payload, list):
        raise ClassifierUnavailable("unexpected classifier response")
    rows = payload[0] if payload and isinstance(payload[0], list) else payload
    scores = [
        EmotionScore(label=str(row["label"]), score=float(row["score"]))
        for row in rows
        if isinstance(row, dict) and "label" in row and "score" in row
    ]
    if not scores:
        raise ClassifierNotReady("classifier returned no scores")
    return scores


class EmotionClassifier:
    """Classify free text through a hosted text-classification model."""

    def __init__(
        self,
        config: ClassifierConfig,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._config = config
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=config.timeout)

    @property
    def available(self) -> bool:
        return bool(self._config.token)

    async def classify(self, text: str) -> EmotionResult:
        snippet = (text or "")[:MAX_INPUT_CHARS]
        if not snippet.strip():
            raise ValueError("text is required")
        if not self.available:
            AI_CALLS.labels(service="emotion", result="disabled").inc()
            raise ClassifierUnavailable("emotion classifier token missing")

        try:
            payload = await retry_async(
                lambda: self._post(snippet),
                attempts=self._config.retries,
                delay=self._config.retry_delay,
                retry_on=(httpx.TransportError,),
            )
            scores = parse_scores(payload)
        except ClassifierNotReady:
            AI_CALLS.labels(service="emotion", result="not_ready").inc()
            raise
        except (httpx.HTTPError, ValueError, EmotionServiceError) as exc:
            AI_CALLS.labels(service="emotion", result="error").inc()
            logger.warning("Emotion classifier request failed: %s", exc)
            raise ClassifierUnavailable("emotion classifier request failed") from exc

        top = max(scores, key=lambda item: item.score)
        mood = map_to_mood(top.label, snippet)
        AI_CALLS.labels(service="emotion", result="ok").inc()
        logger.info(
            "Top emotion %s (%.1f%%) mapped to %s",
            top.label,
            top.score * 100,
            mood,
        )
        return EmotionResult(label=top.label, confidence=top.score, mood=mood, scores=scores)

    async def detect_mood(self, text: str) -> str:
        """Best-effort mood label; falls back to ``Neutral`` when the service fails."""

        try:
            result = await self.classify(text)
        except (EmotionServiceError, ValueError) as exc:
            logger.warning("Mood detection fell back to %s: %s", DEFAULT_MOOD, exc)
            return DEFAULT_MOOD
        return result.mood

    async def _post(self, text: str) -> Any:
        response = await self._client.post(
            self._config.url,
            json={"inputs": text},
            headers={"Authorization": f"Bearer {self._config.token}"},
        )
        if response.status_code == httpx.codes.SERVICE_UNAVAILABLE:
            detail = _error_detail(response)
            raise ClassifierNotReady(detail or "model loading")
        response.raise_for_status()
        return response.json()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()


def _error_detail(response: httpx.Response) -> str | None:
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return None


__all__ = [
    "ClassifierConfig",
    "ClassifierNotReady",
    "ClassifierUnavailable",
    "EmotionClassifier",
    "EmotionResult",
    "EmotionScore",
    "EmotionServiceError",
    "map_to_mood",
    "parse_scores",
]
