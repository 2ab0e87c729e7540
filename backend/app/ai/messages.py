from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from openai import AsyncOpenAI, OpenAIError

from ..core.config import Settings
from ..metrics import AI_CALLS

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = "You are Healio, a friendly AI wellness companion."
FALLBACK_MESSAGE = "💡 Stay positive, every day is a new chance!"

_LOCAL_MESSAGES: dict[str, str] = {
    "Happy": "🌞 Love this energy! Hold on to what made today feel good.",
    "Sad": "💙 It's okay to feel low. Be gentle with yourself and take one small step.",
    "Angry": "🌬️ Take a slow breath out. Your feelings are valid, let them pass like a wave.",
    "Tired": "🌙 Your body is asking for rest. A short pause can recharge you.",
    "Neutral": "🌱 Steady days count too. Try a short walk or a few mindful breaths.",
}


@dataclass(frozen=True)
class GeneratorConfig:
    api_key: str | None
    model: str
    base_url: str | None = None
    timeout: float = 15.0
    max_tokens: int = 80

    @classmethod
    def from_settings(cls, settings: Settings) -> GeneratorConfig:
        return cls(
            api_key=settings.openai_api_key,
            model=settings.openai_model,
            base_url=settings.openai_base_url,
            timeout=settings.request_timeout_seconds,
        )


@dataclass(frozen=True)
class GeneratedMessage:
    text: str
    source: str


def local_message(mood: str | None) -> str:
    """Deterministic supportive message used when the model is unavailable."""

    return _LOCAL_MESSAGES.get(mood or "", FALLBACK_MESSAGE)


def build_prompt(mood: str, text: str) -> str:
    return (
        "Generate one short, supportive, and creative message that fits the "
        "user's emotion and context.\n"
        "Use emojis that match the mood, and never repeat the same wording twice.\n"
        f"User emotion: {mood}\n"
        f'User said: "{text}"'
    )


class MessageGenerator:
    """Thin wrapper above the OpenAI async SDK with graceful degradation."""

    def __init__(self, config: GeneratorConfig, client: Any | None = None) -> None:
        self._config = config
        if client is None and config.api_key:
            client = AsyncOpenAI(
                api_key=config.api_key,
                base_url=config.base_url,
                timeout=config.timeout,
            )
        self._client = client

    @property
    def available(self) -> bool:
        return self._client is not None

    async def generate(self, mood: str, text: str) -> GeneratedMessage:
        if self._client is None:
            AI_CALLS.labels(service="message", result="disabled").inc()
            return GeneratedMessage(text=local_message(mood), source="local")

        try:
            completion = await self._client.chat.completions.create(
                model=self._config.model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": build_prompt(mood, text)},
                ],
                max_tokens=self._config.max_tokens,
            )
        except OpenAIError as exc:
            AI_CALLS.labels(service="message", result="error").inc()
            logger.warning("Message generation failed: %s", exc)
            return GeneratedMessage(text=local_message(mood), source="local")

        message = (completion.choices[0].message.content or "").strip()
        if not message:
            AI_CALLS.labels(service="message", result="empty").inc()
            return GeneratedMessage(text=local_message(mood), source="local")
        AI_CALLS.labels(service="message", result="ok").inc()
        return GeneratedMessage(text=message, source=self._config.model)

    async def aclose(self) -> None:
        close = getattr(self._client, "close", None)
        if close is not None:
            await close()


__all__ = [
    "GeneratedMessage",
    "GeneratorConfig",
    "MessageGenerator",
    "build_prompt",
    "local_message",
]
