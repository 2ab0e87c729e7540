from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_HF_API_URL = "https://api-inference.huggingface.co/models"
DEFAULT_HF_MODEL = "SamLowe/roberta-base-go_emotions"
DEFAULT_DATABASE_URL = "sqlite+aiosqlite:///./data/healio.db"


def normalize_database_url(value: str | None) -> str:
    """Pick the async driver for the URL scheme and create the SQLite directory."""

    url = str(value) if value else DEFAULT_DATABASE_URL
    if url.startswith("postgres://"):
        url = url.replace("postgres://", "postgresql://", 1)
    if url.startswith("postgresql://"):
        url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
    if url.startswith("sqlite://"):
        url = url.replace("sqlite://", "sqlite+aiosqlite://", 1)

    if url.startswith("sqlite+aiosqlite:///"):
        db_path = url.split(":///", maxsplit=1)[-1]
        if db_path and db_path != ":memory:":
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    return url


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        populate_by_name=True,
    )

    database_url: str = Field(
        default=DEFAULT_DATABASE_URL,
        alias="DATABASE_URL",
    )
    log_file: Path = Field(default=Path("logs/healio.log"))
    request_timeout_seconds: float = Field(default=15.0)
    retry_attempts: int = Field(default=2)
    dashboard_recent_limit: int = Field(default=10, alias="DASHBOARD_RECENT_LIMIT")

    # Emotion classification (hosted inference API)
    hf_token: str | None = Field(default=None, alias="HF_TOKEN")
    hf_model: str = Field(default=DEFAULT_HF_MODEL, alias="HF_MODEL")
    hf_api_url: str = Field(default=DEFAULT_HF_API_URL, alias="HF_API_URL")

    # Supportive message generation
    openai_api_key: str | None = Field(default=None, alias="OPENAI_API_KEY")
    openai_base_url: str | None = Field(default=None, alias="OPENAI_BASE_URL")
    openai_model: str = Field(default="gpt-4o-mini", alias="OPENAI_MODEL")

    version: str = Field(default_factory=lambda: Settings._load_version())

    @staticmethod
    def _load_version() -> str:
        version_env = os.getenv("VERSION")
        if version_env:
            return version_env
        version_file = Path("VERSION")
        if version_file.exists():
            return version_file.read_text(encoding="utf-8").strip()
        return "0.0.0"

    @field_validator("log_file", mode="before")
    @classmethod
    def _validate_log_file(cls, value: Path | str) -> Path:
        path = Path(value)
        if not path.parent.exists():
            path.parent.mkdir(parents=True, exist_ok=True)
        return path

    @field_validator("request_timeout_seconds", mode="before")
    @classmethod
    def _validate_timeout(cls, value: float | str | None) -> float:
        if value is None:
            return 15.0
        return max(float(value), 1.0)

    @field_validator("retry_attempts", mode="before")
    @classmethod
    def _validate_retries(cls, value: int | str | None) -> int:
        if value is None:
            return 2
        return min(max(int(value), 1), 5)

    @field_validator("dashboard_recent_limit", mode="before")
    @classmethod
    def _validate_recent_limit(cls, value: int | str | None) -> int:
        if value is None:
            return 10
        return min(max(int(value), 0), 100)

    @field_validator("hf_api_url", mode="before")
    @classmethod
    def _validate_hf_url(cls, value: str | None) -> str:
        if not value:
            return DEFAULT_HF_API_URL
        return str(value).rstrip("/")

    @field_validator("database_url", mode="before")
    @classmethod
    def _validate_database_url(cls, value: str | None) -> str:
        return normalize_database_url(value)


@lru_cache
def get_settings() -> Settings:
    """Cached settings accessor."""

    return Settings()
