from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from sqlalchemy import select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ..db.models import (
    Activity,
    Goal,
    JournalEntry,
    MeditationSession,
    MoodLog,
    SettingEntry,
)

logger = logging.getLogger(__name__)

DEFAULT_ACTIVITY_TYPE = "Exercise"
JOURNAL_ACTIVITY_TYPE = "Journal"
JOURNAL_ACTIVITY_NAME = "Journal Entry"
JOURNAL_ACTIVITY_MINUTES = 0.1
MEDITATION_ACTIVITY_TYPE = "Meditation"
MEDITATION_ACTIVITY_NAME = "Meditation Session"
MOODS = ("Happy", "Neutral", "Sad", "Angry", "Tired")
MAX_MOOD_FACTORS = 20


class RecordValidationError(ValueError):
    """A required field is missing or malformed on write."""

    def __init__(self, field: str, message: str | None = None) -> None:
        self.field = field
        self.message = message or f"{field} is required"
        super().__init__(self.message)


class StoreUnavailable(RuntimeError):
    """The underlying database failed to serve a read or write."""


def _require_text(field: str, value: str | None) -> str:
    if value is None or not str(value).strip():
        raise RecordValidationError(field)
    return str(value).strip()


def _require_minutes(field: str, value: float | None) -> float:
    if value is None:
        raise RecordValidationError(field)
    try:
        minutes = float(value)
    except (TypeError, ValueError) as exc:
        raise RecordValidationError(field, f"{field} must be a number") from exc
    if minutes < 0:
        raise RecordValidationError(field, f"{field} must not be negative")
    return minutes


def _utcnow() -> datetime:
    return datetime.now(UTC).replace(tzinfo=None)


def _as_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(UTC).replace(tzinfo=None)


class StorageService:
    """Persist activities, journal entries, meditation sessions and goals."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        *,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._clock = clock or _utcnow

    @asynccontextmanager
    async def _session(self, operation: str) -> AsyncIterator[AsyncSession]:
        try:
            async with self._session_factory() as session:
                yield session
        except SQLAlchemyError as exc:
            logger.exception("Storage operation %s failed", operation)
            raise StoreUnavailable(f"{operation} failed") from exc

    async def healthcheck(self) -> None:
        async with self._session("healthcheck") as session:
            await session.execute(text("SELECT 1"))

    # -- settings helpers ------------------------------------------------
    async def get_setting(self, key: str) -> str | None:
        async with self._session("get_setting") as session:
            result = await session.execute(
                select(SettingEntry).where(SettingEntry.key == key)
            )
            entry = result.scalar_one_or_none()
            return entry.value if entry else None

    async def set_setting(self, key: str, value: str) -> None:
        async with self._session("set_setting") as session:
            result = await session.execute(
                select(SettingEntry).where(SettingEntry.key == key)
            )
            entry = result.scalar_one_or_none()
            if entry is None:
                session.add(SettingEntry(key=key, value=value))
            else:
                entry.value = value
            await session.commit()

    # -- activities ------------------------------------------------------
    def build_activity(
        self,
        *,
        user_id: str | None,
        name: str | None,
        duration: float | None,
        activity_type: str | None = None,
        date: datetime | None = None,
        time: str | None = None,
        mood_before: str | None = None,
        mood_after: str | None = None,
    ) -> Activity:
        """Validate and construct an activity row with defaults applied.

        Every producer of activity records (direct logs, meditation sessions,
        journal entries) goes through here so the ``date`` default is the
        storage clock in exactly one place.
        """

        return Activity(
            user_id=_require_text("userId", user_id),
            name=_require_text("name", name),
            duration=_require_minutes("duration", duration),
            type=(activity_type or "").strip() or DEFAULT_ACTIVITY_TYPE,
            date=_as_naive_utc(date) if date else self._clock(),
            time=time,
            mood_before=mood_before,
            mood_after=mood_after,
        )

    async def add_activity(
        self,
        *,
        user_id: str | None,
        name: str | None,
        duration: float | None,
        activity_type: str | None = None,
        date: datetime | None = None,
        time: str | None = None,
        mood_before: str | None = None,
        mood_after: str | None = None,
    ) -> Activity:
        activity = self.build_activity(
            user_id=user_id,
            name=name,
            duration=duration,
            activity_type=activity_type,
            date=date,
            time=time,
            mood_before=mood_before,
            mood_after=mood_after,
        )
        async with self._session("add_activity") as session:
            session.add(activity)
            await session.commit()
            await session.refresh(activity)
        logger.info(
            "Activity saved",
            extra={"user_id": activity.user_id, "extra_fields": {"type": activity.type}},
        )
        return activity

    async def list_activities(self, user_id: str) -> list[Activity]:
        """Return every activity of ``user_id``, most recent first."""

        async with self._session("list_activities") as session:
            result = await session.execute(
                select(Activity)
                .where(Activity.user_id == user_id)
                .order_by(Activity.date.desc(), Activity.id.desc())
            )
            return list(result.scalars().all())

    async def list_all_activities(self, limit: int | None = None) -> list[Activity]:
        query = select(Activity).order_by(Activity.date.desc(), Activity.id.desc())
        if limit is not None:
            query = query.limit(limit)
        async with self._session("list_all_activities") as session:
            result = await session.execute(query)
            return list(result.scalars().all())

    # -- journal ---------------------------------------------------------
    async def add_journal_entry(
        self,
        *,
        user_id: str | None,
        text: str | None,
        mood: str = "Neutral",
        date: datetime | None = None,
    ) -> JournalEntry:
        """Store a journal entry and log it as a ``Journal`` activity."""

        activity = self.build_activity(
            user_id=user_id,
            name=JOURNAL_ACTIVITY_NAME,
            duration=JOURNAL_ACTIVITY_MINUTES,
            activity_type=JOURNAL_ACTIVITY_TYPE,
            date=date,
        )
        _require_text("text", text)
        entry = JournalEntry(
            user_id=activity.user_id,
            text=text,
            mood=mood or "Neutral",
            date=activity.date,
        )
        async with self._session("add_journal_entry") as session:
            session.add_all([entry, activity])
            await session.commit()
            await session.refresh(entry)
        return entry

    async def list_journal_entries(self, user_id: str) -> list[JournalEntry]:
        async with self._session("list_journal_entries") as session:
            result = await session.execute(
                select(JournalEntry)
                .where(JournalEntry.user_id == user_id)
                .order_by(JournalEntry.created_at.desc(), JournalEntry.id.desc())
            )
            return list(result.scalars().all())

    # -- meditation ------------------------------------------------------
    async def add_meditation(
        self,
        *,
        user_id: str | None,
        duration: float | None,
        mood_before: str | None = None,
        mood_after: str | None = None,
        date: datetime | None = None,
    ) -> MeditationSession:
        """Store a meditation session and log it as a ``Meditation`` activity."""

        activity = self.build_activity(
            user_id=user_id,
            name=MEDITATION_ACTIVITY_NAME,
            duration=duration,
            activity_type=MEDITATION_ACTIVITY_TYPE,
            date=date,
        )
        meditation = MeditationSession(
            user_id=activity.user_id,
            duration=activity.duration,
            mood_before=mood_before or "Neutral",
            mood_after=mood_after or "Relaxed",
            date=activity.date,
        )
        async with self._session("add_meditation") as session:
            session.add_all([meditation, activity])
            await session.commit()
            await session.refresh(meditation)
        return meditation

    async def list_meditations(self, user_id: str) -> list[MeditationSession]:
        async with self._session("list_meditations") as session:
            result = await session.execute(
                select(MeditationSession)
                .where(MeditationSession.user_id == user_id)
                .order_by(MeditationSession.date.desc(), MeditationSession.id.desc())
            )
            return list(result.scalars().all())

    # -- mood logs -------------------------------------------------------
    async def add_mood_log(
        self,
        *,
        user_id: str | None,
        mood: str | None,
        journal: str | None,
        factors: list[str] | None = None,
        sentiment: str | None = None,
        confidence: float | None = None,
        date: datetime | None = None,
    ) -> MoodLog:
        """Store a self-reported mood together with the classifier's reading."""

        owner = _require_text("userId", user_id)
        label = _require_text("mood", mood)
        if label not in MOODS:
            raise RecordValidationError("mood", f"mood must be one of {', '.join(MOODS)}")
        note = _require_text("journal", journal)
        cleaned = [str(item).strip() for item in factors or [] if str(item).strip()]
        if len(cleaned) > MAX_MOOD_FACTORS:
            raise RecordValidationError("factors", f"at most {MAX_MOOD_FACTORS} factors allowed")

        log = MoodLog(
            user_id=owner,
            mood=label,
            factors=cleaned,
            journal=note,
            sentiment=sentiment or "Neutral",
            confidence=confidence,
            date=_as_naive_utc(date) if date else self._clock(),
        )
        async with self._session("add_mood_log") as session:
            session.add(log)
            await session.commit()
            await session.refresh(log)
        logger.info(
            "Mood log saved",
            extra={"user_id": owner, "extra_fields": {"mood": label, "sentiment": log.sentiment}},
        )
        return log

    async def list_mood_logs(
        self,
        user_id: str,
        since: datetime | None = None,
    ) -> list[MoodLog]:
        """Mood logs of ``user_id``, newest first, optionally from ``since`` on."""

        query = select(MoodLog).where(MoodLog.user_id == user_id)
        if since is not None:
            query = query.where(MoodLog.date >= _as_naive_utc(since))
        query = query.order_by(MoodLog.date.desc(), MoodLog.id.desc())
        async with self._session("list_mood_logs") as session:
            result = await session.execute(query)
            return list(result.scalars().all())

    # -- goals -----------------------------------------------------------
    async def upsert_goal(
        self,
        *,
        user_id: str | None,
        sessions_per_week: int | None = None,
        minutes_per_day: int | None = None,
    ) -> Goal:
        owner = _require_text("userId", user_id)
        async with self._session("upsert_goal") as session:
            goal = await session.scalar(select(Goal).where(Goal.user_id == owner))
            if goal is None:
                goal = Goal(
                    user_id=owner,
                    sessions_per_week=sessions_per_week or 0,
                    minutes_per_day=minutes_per_day or 0,
                )
                session.add(goal)
            else:
                if sessions_per_week is not None:
                    goal.sessions_per_week = sessions_per_week
                if minutes_per_day is not None:
                    goal.minutes_per_day = minutes_per_day
            await session.commit()
            await session.refresh(goal)
            return goal

    async def get_goal(self, user_id: str) -> Goal | None:
        async with self._session("get_goal") as session:
            return await session.scalar(select(Goal).where(Goal.user_id == user_id))


__all__ = [
    "RecordValidationError",
    "StorageService",
    "StoreUnavailable",
]
