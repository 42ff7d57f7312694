from __future__ import annotations

from typing import Any

from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field

PROJECT_ROOT = Path(__file__).parent.parent.parent


class Settings(BaseSettings):
    """
    Central configuration.

    - Values loaded from `.env`
    - Comma-separated lists for multi-value settings like CORS_ORIGINS
    """

    # ----------------------------
    # Service
    # ----------------------------
    SERVICE_NAME: str = "school-admin-service"
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # ----------------------------
    # Mongo
    # ----------------------------
    mongo_uri: str = "mongodb://localhost:27017"
    mongo_db: str = "school_admin"

    # ----------------------------
    # CORS
    # ----------------------------
    # store as raw string list from env; we will normalize in code
    CORS_ORIGINS: Any = Field(default_factory=list)

    # ----------------------------
    # JWT
    # ----------------------------
    jwt_alg: str = "HS256"
    jwt_secret: str = "change-me"
    jwt_audience: str | None = None
    jwt_issuer: str | None = None

    # ----------------------------
    # Bulk operations
    # ----------------------------
    bulk_max_items: int = Field(default=100, ge=1)

    # ----------------------------
    # Dashboard
    # ----------------------------
    dashboard_recent_days: int = Field(default=30, ge=1)
    dashboard_recent_limit: int = Field(default=5, ge=1)

    # Pydantic settings config (v2 style)
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


_settings: Settings | None = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
