from __future__ import annotations

"""
# Movie Create Service — Centralized Configuration (Pydantic v2)

Single `settings` object with strongly-typed, environment-driven config.

## Goals
- Safe defaults for local/dev; explicit where prod needs secrets.
- One place for the Postgres DSN and the schema that hosts the stored routines.
- Bounded create deadline so a stuck database call never hangs a request.

## Usage
    from app.core.config import settings
"""

import logging
from typing import Literal

from dotenv import load_dotenv
from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

log = logging.getLogger(__name__)
load_dotenv()  # harmless in prod; convenient in dev


# ─────────────────────────────────────────────────────────────
# Settings
# ─────────────────────────────────────────────────────────────
class Settings(BaseSettings):
    """
    Global application settings sourced from environment.

    Database:
        - `MOVIE_DB_SCHEMA` names the schema holding `create_movie` and
          `lookup_client_by_server_token`.

    Notes:
        - Prefer the string convenience properties when composing URLs.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # don't crash on unknown keys
    )

    # ── App meta ──────────────────────────────────────────────
    PROJECT_NAME: str = "Movie Create API"
    VERSION: str = "1.0.0"
    API_V1_STR: str = "/api/v1"
    ENV: Literal["development", "staging", "production"] = "development"
    ENABLE_DOCS: bool = True

    # ── Database (PostgreSQL) ─────────────────────────────────
    POSTGRES_SERVER: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: SecretStr = Field(...)
    POSTGRES_DB: str = "movies"

    # ── Movie persistence ─────────────────────────────────────
    MOVIE_DB_SCHEMA: str = "demo"
    MOVIE_CREATE_TIMEOUT_SECONDS: float = Field(10.0, gt=0, le=300)

    # ── Identity ──────────────────────────────────────────────
    SERVER_TOKEN_HEADER: str = "X-Server-Token"

    # ── Validators / normalizers ──────────────────────────────
    @field_validator("MOVIE_DB_SCHEMA", mode="before")
    @classmethod
    def _normalize_schema(cls, v: str | None) -> str:
        """Schema is interpolated into SQL; accept plain identifiers only."""
        s = (v or "").strip()
        if not s.isidentifier():
            raise ValueError(f"MOVIE_DB_SCHEMA must be a plain identifier, got {v!r}")
        return s

    # ── Derived / convenience properties ─────────────────────
    @property
    def is_production(self) -> bool:
        return self.ENV.lower() == "production"

    @property
    def is_development(self) -> bool:
        return self.ENV.lower() == "development"

    # Database DSNs (stringified for simplicity)
    @property
    def DATABASE_URL(self) -> str:
        """Sync DSN."""
        return (
            f"postgresql://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD.get_secret_value()}"
            f"@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
        )

    @property
    def ASYNC_DATABASE_URL(self) -> str:
        """Async SQLAlchemy DSN."""
        return self.DATABASE_URL.replace("postgresql://", "postgresql+asyncpg://")


# Singleton instance
settings = Settings()
