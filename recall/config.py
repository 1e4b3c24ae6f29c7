"""
Configuration settings for the recall scheduling engine.

Uses Pydantic Settings for environment variable management with .env file support.
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DATA_DIR = Path.home() / ".recall"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Night Window
    # ========================================
    night_start_hour: int = Field(
        default=22,
        description="Local hour at which the night window opens",
    )
    morning_wake_hour: int = Field(
        default=7,
        description="Local hour at which the night window closes",
    )
    timezone: str | None = Field(
        default=None,
        description="IANA timezone for wall-clock decisions (None = naive local time)",
    )

    # ========================================
    # Conflict Detection
    # ========================================
    conflict_skip_leading: int = Field(
        default=3,
        description="Leading reminders exempt from night postponement (5s, 25s, 2min)",
    )
    postponement_rule: Literal["next_morning", "same_day_morning"] = Field(
        default="next_morning",
        description="How a conflicting reminder is moved out of the night window",
    )

    # ========================================
    # Review Feedback Policy
    # ========================================
    easy_factor: float = Field(
        default=1.3,
        description="Multiplier growth on an Easy review",
    )
    hard_factor: float = Field(
        default=0.7,
        description="Multiplier shrink on a Hard review",
    )
    good_pull: float = Field(
        default=0.1,
        description="Fraction of the distance to 1.0 closed by a Good review",
    )
    multiplier_floor: float = Field(
        default=0.1,
        description="Smallest interval multiplier a Hard review can reach",
    )
    multiplier_ceiling: float = Field(
        default=5.0,
        description="Largest interval multiplier an Easy review can reach",
    )

    # ========================================
    # Category Classifier
    # ========================================
    short_max_words: int = Field(
        default=12,
        description="Single-sentence texts up to this many words are Short",
    )
    long_min_words: int = Field(
        default=40,
        description="Texts with at least this many words are Long",
    )
    long_min_sentences: int = Field(
        default=4,
        description="Texts with at least this many sentences are Long",
    )
    default_category: Literal["short", "medium", "long"] = Field(
        default="medium",
        description="Fallback category when text cannot be analyzed",
    )

    # ========================================
    # Storage
    # ========================================
    database_url: str = Field(
        default=f"sqlite:///{DATA_DIR / 'items.db'}",
        description="SQLAlchemy URL of the item store",
    )
    notifications_db_path: Path = Field(
        default=DATA_DIR / "notifications.db",
        description="SQLite file holding pending reminder alerts",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="WARNING",
        description="Logging verbosity level",
    )
    log_file: str | None = Field(
        default=None,
        description="Log file path (None for stderr only)",
    )

    @field_validator("night_start_hour", "morning_wake_hour")
    @classmethod
    def _check_hour(cls, value: int) -> int:
        if not 0 <= value <= 23:
            raise ValueError(f"hour must be within 0..23, got {value}")
        return value

    @field_validator("timezone")
    @classmethod
    def _check_timezone(cls, value: str | None) -> str | None:
        if value is None:
            return value
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"unknown timezone: {value}") from exc
        return value

    @model_validator(mode="after")
    def _check_window(self) -> Settings:
        # The window wraps midnight: [start, 24) + [0, wake)
        if self.night_start_hour <= self.morning_wake_hour:
            raise ValueError("night_start_hour must be later than morning_wake_hour")
        if self.multiplier_floor <= 0:
            raise ValueError("multiplier_floor must be positive")
        return self

    @property
    def tzinfo(self) -> ZoneInfo | None:
        return ZoneInfo(self.timezone) if self.timezone else None


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
