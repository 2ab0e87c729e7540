"""Engine, sessions and schema bootstrap for the Healio store."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from alembic import command
from alembic.config import Config
from sqlalchemy import event, select
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from backend.app.core.config import normalize_database_url
from backend.app.db.models import Base, SettingEntry

logger = logging.getLogger(__name__)

BACKEND_DIR = Path(__file__).resolve().parent
ALEMBIC_INI = BACKEND_DIR.parent / "alembic.ini"
SCHEMA_VERSION_KEY = "schema_version"


def _sqlite_foreign_keys_on(dbapi_connection, _connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_engine(database_url: str | None) -> AsyncEngine:
    engine = create_async_engine(normalize_database_url(database_url), echo=False)
    if engine.dialect.name == "sqlite":
        event.listen(engine.sync_engine, "connect", _sqlite_foreign_keys_on)
    return engine


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, expire_on_commit=False)


def alembic_config(database_url: str) -> Config:
    """Alembic config pointed at the bundled migrations.

    ``alembic.ini`` only exists in a source checkout, so its absence is fine.
    """

    cfg = Config(str(ALEMBIC_INI)) if ALEMBIC_INI.exists() else Config()
    cfg.set_main_option("script_location", str(BACKEND_DIR / "alembic"))
    # configparser interpolation treats % as special
    cfg.set_main_option("sqlalchemy.url", database_url.replace("%", "%%"))
    return cfg


def _upgrade_to_head(database_url: str) -> None:
    command.upgrade(alembic_config(database_url), "head")


async def stamp_schema_version(
    session_factory: async_sessionmaker[AsyncSession],
    version: str,
) -> None:
    async with session_factory() as session:
        entry = (
            await session.execute(
                select(SettingEntry).where(SettingEntry.key == SCHEMA_VERSION_KEY)
            )
        ).scalar_one_or_none()
        if entry is None:
            session.add(SettingEntry(key=SCHEMA_VERSION_KEY, value=version))
        else:
            entry.value = version
        await session.commit()


async def init_db(
    engine: AsyncEngine,
    session_factory: async_sessionmaker[AsyncSession],
    version: str,
    database_url: str | None = None,
) -> None:
    """Migrate a file-backed store, create missing tables and stamp the version.

    In-memory SQLite skips Alembic since every connection would see a fresh
    database.
    """

    if database_url:
        url = normalize_database_url(database_url)
        if not url.endswith(":memory:"):
            loop = asyncio.get_running_loop()
            await loop.run_in_executor(None, _upgrade_to_head, url)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    await stamp_schema_version(session_factory, version)
    logger.info("Healio store ready", extra={"extra_fields": {"schema_version": version}})


__all__ = [
    "SCHEMA_VERSION_KEY",
    "alembic_config",
    "create_engine",
    "create_session_factory",
    "init_db",
    "stamp_schema_version",
]
