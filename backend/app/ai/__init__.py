"""Clients for the hosted emotion classifier and supportive message model."""

from __future__ import annotations

from .emotion import (
    ClassifierConfig,
    ClassifierNotReady,
    ClassifierUnavailable,
    EmotionClassifier,
    EmotionResult,
    EmotionServiceError,
)
from .messages import GeneratedMessage, GeneratorConfig, MessageGenerator

__all__ = [
    "ClassifierConfig",
    "ClassifierNotReady",
    "ClassifierUnavailable",
    "EmotionClassifier",
    "EmotionResult",
    "EmotionServiceError",
    "GeneratedMessage",
    "GeneratorConfig",
    "MessageGenerator",
]
