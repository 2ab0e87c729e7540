from __future__ import annotations

from datetime import datetime

from sqlalchemy import JSON, DateTime, Float, Index, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base declarative model."""


class Activity(Base):
    """One logged unit of exercise, meditation or journaling."""

    __tablename__ = "activities"
    __table_args__ = (
        Index("ix_activities_user_id_date", "user_id", "date"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    type: Mapped[str] = mapped_column(String(32), nullable=False, default="Exercise")
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    duration: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    date: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    time: Mapped[str | None] = mapped_column(String(32), nullable=True)
    mood_before: Mapped[str | None] = mapped_column(String(32), nullable=True)
    mood_after: Mapped[str | None] = mapped_column(String(32), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
    )


class JournalEntry(Base):
    """Free-text journal entries with the mood detected at save time."""

    __tablename__ = "journal"
    __table_args__ = (
        Index("ix_journal_user_id_created_at", "user_id", "created_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    text: Mapped[str] = mapped_column(Text, nullable=False)
    mood: Mapped[str] = mapped_column(String(32), nullable=False, default="Neutral")
    date: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, index=True)


class MeditationSession(Base):
    """Completed meditation sessions."""

    __tablename__ = "meditations"
    __table_args__ = (
        Index("ix_meditations_user_id_date", "user_id", "date"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    duration: Mapped[float] = mapped_column(Float, nullable=False)
    mood_before: Mapped[str] = mapped_column(String(32), nullable=False, default="Neutral")
    mood_after: Mapped[str] = mapped_column(String(32), nullable=False, default="Relaxed")
    date: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)


class MoodLog(Base):
    """Self-reported mood with optional factors, note and classifier sentiment."""

    __tablename__ = "mood_logs"
    __table_args__ = (
        Index("ix_mood_logs_user_id_date", "user_id", "date"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    mood: Mapped[str] = mapped_column(String(16), nullable=False)
    factors: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    journal: Mapped[str] = mapped_column(Text, nullable=False, default="")
    sentiment: Mapped[str] = mapped_column(String(64), nullable=False, default="Neutral")
    confidence: Mapped[float | None] = mapped_column(Float, nullable=True)
    date: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)


class Goal(Base):
    """Weekly session and daily minute targets, one row per user."""

    __tablename__ = "goals"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(64), unique=True, nullable=False, index=True)
    sessions_per_week: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    minutes_per_day: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
    )


class SettingEntry(Base):
    """Key-value configuration stored in DB."""

    __tablename__ = "settings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    key: Mapped[str] = mapped_column(String(100), unique=True, nullable=False, index=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
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
