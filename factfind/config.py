"""
Application configuration via environment variables.

Uses Pydantic BaseSettings to load and validate all config from env vars
or a .env.local file. Every setting has a default so the extraction engine
and API can start with no configuration at all.
"""

from __future__ import annotations

from enum import Enum
from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    """Deployment environment selector."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class Settings(BaseSettings):
    """
    Central configuration for the Fact-Find Extraction Service.

    Values are loaded from environment variables first, falling back
    to a `.env.local` file in the project root.
    """

    model_config = SettingsConfigDict(
        env_file=".env.local",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ── Environment ──────────────────────────────────────────────
    environment: Environment = Environment.DEVELOPMENT
    service_name: str = Field(default="factfind-extraction", description="Name reported by /health")

    # ── Caller acceptance policy ─────────────────────────────────
    accept_threshold: float = Field(
        default=0.85, ge=0.0, le=1.0,
        description="Extractions above this confidence are applied directly",
    )
    confirm_threshold: float = Field(
        default=0.75, ge=0.0, le=1.0,
        description="Extractions above this but not above accept_threshold are confirmed with the user",
    )

    # ── Clarification behaviour ──────────────────────────────────
    filter_clarifications_by_visibility: bool = Field(
        default=True,
        description="Skip clarification questions for fields hidden by questionnaire visibility rules",
    )

    # ── Logging ──────────────────────────────────────────────────
    log_level: str = Field(default="INFO", description="Root log level")

    @model_validator(mode="after")
    def _check_threshold_order(self) -> "Settings":
        if self.confirm_threshold > self.accept_threshold:
            raise ValueError("confirm_threshold must not exceed accept_threshold")
        return self

    # ── Derived helpers ──────────────────────────────────────────

    @property
    def is_production(self) -> bool:
        return self.environment == Environment.PRODUCTION


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Process-wide settings, read from the environment on first call."""
    return Settings()
