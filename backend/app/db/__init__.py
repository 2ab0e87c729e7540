"""Database utilities for Healio."""

from .models import (
    Activity,
    Base,
    Goal,
    JournalEntry,
    MeditationSession,
    MoodLog,
    SettingEntry,
)

__all__ = [
    "Activity",
    "Base",
    "Goal",
    "JournalEntry",
    "MeditationSession",
    "MoodLog",
    "SettingEntry",
]
