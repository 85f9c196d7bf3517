"""
Configuration settings for wordcastle.

Uses Pydantic Settings for environment variable management with .env file support.
All variables are prefixed with WORDCASTLE_ (e.g. WORDCASTLE_DAILY_GOAL=20).
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .catalog import DEFAULT_CATALOG_PATH
from .ladder import Ladder, parse_ladder


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="WORDCASTLE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Storage
    # ========================================
    data_dir: Path = Field(
        default=Path.home() / ".wordcastle",
        description="Directory for the progress database and backups",
    )
    state_db: Path | None = Field(
        default=None,
        description="Progress database path (defaults to <data_dir>/state.db)",
    )
    storage_key: str = Field(
        default="wordcastle_progress_v3",
        description="Key the progress snapshot is stored under",
    )

    # ========================================
    # Catalog
    # ========================================
    catalog_path: Path = Field(
        default=DEFAULT_CATALOG_PATH,
        description="Word catalog JSON file",
    )
    default_category: str = Field(
        default="Unit 1 School",
        description="Category selected for a new learner",
    )

    # ========================================
    # Scheduling & Rewards
    # ========================================
    review_intervals: str = Field(
        default="1h,1d,3d,7d,14d,30d",
        description="Interval ladder, comma-separated (units s/m/h/d/w)",
    )
    daily_goal: int = Field(
        default=15,
        gt=0,
        description="Words to learn per day",
    )
    initial_stars: int = Field(
        default=5,
        ge=0,
        description="Stars a new learner starts with",
    )
    review_reward_per_item: int = Field(
        default=2,
        ge=0,
        description="Stars per card for finishing a review session",
    )
    break_reminder_minutes: int = Field(
        default=15,
        gt=0,
        description="Minutes of study before a rest reminder",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="WARNING",
        description="Console log level",
    )
    log_file: Path | None = Field(
        default=None,
        description="Optional log file (rotated at 1 MB)",
    )

    @field_validator("review_intervals")
    @classmethod
    def _valid_ladder(cls, value: str) -> str:
        parse_ladder(value)
        return value

    @property
    def ladder(self) -> Ladder:
        return parse_ladder(self.review_intervals)

    @property
    def state_db_path(self) -> Path:
        return self.state_db or self.data_dir / "state.db"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
