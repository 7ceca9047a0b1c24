"""
BoardCtrl — Application Configuration
All settings loaded from environment variables via pydantic-settings.
"""

from __future__ import annotations

from functools import lru_cache
from typing import List

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class JWTSettings(BaseModel):
    """The ``JWT:*`` section: signing key, issuer and audience."""

    model_config = ConfigDict(frozen=True)

    SECRET: str = ""
    VALID_ISSUER: str = "boardctrl"
    VALID_AUDIENCE: str = "boardctrl-clients"
    ALGORITHM: str = "HS256"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        # Nested JWT__* keys must keep their case to reach JWTSettings fields
        case_sensitive=True,
        extra="ignore",
        frozen=True,
    )

    # ── Database ──────────────────────────────────────────────────────────────
    DATABASE_URL: str = "sqlite:///./boardctrl.db"
    QUERY_TIMEOUT_SECONDS: int = 100

    # ── Auth ──────────────────────────────────────────────────────────────────
    # Set as JWT__SECRET, JWT__VALID_ISSUER, JWT__VALID_AUDIENCE
    JWT: JWTSettings = JWTSettings()
    PASSWORD_HASH_ROUNDS: int = 29000

    # ── Application Settings ──────────────────────────────────────────────────
    ENVIRONMENT: str = "development"  # development | staging | production
    APP_TITLE: str = "BoardCtrl"
    APP_VERSION: str = "1.0.0"
    LOG_LEVEL: str = "INFO"

    # ── CORS ──────────────────────────────────────────────────────────────────
    ALLOWED_ORIGINS: List[str] = ["http://localhost:3000"]

    @field_validator("ENVIRONMENT")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        allowed = {"development", "staging", "production"}
        if v not in allowed:
            raise ValueError(f"ENVIRONMENT must be one of {allowed}")
        return v

    @field_validator("QUERY_TIMEOUT_SECONDS")
    @classmethod
    def validate_query_timeout(cls, v: int) -> int:
        if v < 1:
            raise ValueError("QUERY_TIMEOUT_SECONDS must be a positive number of seconds")
        return v

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"


@lru_cache()
def get_settings() -> Settings:
    """Cached settings singleton — safe for FastAPI Depends()."""
    return Settings()
