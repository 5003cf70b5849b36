"""
Configuration settings for the TypeQuest engine.

Uses Pydantic Settings for environment variable management with .env file support.
All variables use the TYPEQUEST_ prefix (e.g. TYPEQUEST_TICK_INTERVAL_MS=50).
"""
from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Engine settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="TYPEQUEST_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Session Clock & Metrics
    # ========================================
    tick_interval_ms: int = Field(
        default=100,
        gt=0,
        description="Resolution of the externally driven elapsed-time tick",
    )
    standard_word_length: int = Field(
        default=5,
        gt=0,
        description="Characters per word used for WPM",
    )

    # ========================================
    # Progression
    # ========================================
    xp_per_level: int = Field(
        default=1000,
        gt=0,
        description="XP per level: level = floor(total_xp / xp_per_level) + 1",
    )
    lesson_base_xp: int = Field(
        default=150,
        ge=0,
        description="Base XP awarded for a passed lesson before bonuses",
    )
    weak_key_limit: int = Field(
        default=5,
        gt=0,
        description="Number of weakest keys reported by the ledger",
    )
    weak_key_min_errors: int = Field(
        default=3,
        ge=0,
        description="Minimum cumulative errors before a key counts as weak",
    )

    # ========================================
    # Remediation
    # ========================================
    remediation_difficulty_factor: float = Field(
        default=0.8,
        gt=0,
        description="Difficulty scale for remedial anchor drills (slightly easier)",
    )
    accuracy_drill_repetitions: int = Field(
        default=2,
        gt=0,
        description="Repetitions of the accuracy drill when a lesson has no required keys",
    )
    sprint_time_limit_seconds: int = Field(
        default=30,
        gt=0,
        description="Time box for remedial speed sprints",
    )
    sprint_repetitions: int = Field(
        default=3,
        gt=0,
        description="Repetitions of the remedial speed sprint",
    )
    min_remedial_queue: int = Field(
        default=3,
        ge=0,
        description="Remedial queues shorter than this get the original lesson appended",
    )
    anchor_drill_seconds: int = Field(
        default=60,
        gt=0,
        description="Time limit for warmup and remedial anchor drills",
    )

    # ========================================
    # Content
    # ========================================
    default_language: str = Field(
        default="en",
        description="Practice corpus language when none is supplied",
    )
    random_seed: int | None = Field(
        default=None,
        description="Seed for drill generation (None = nondeterministic)",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Loguru level used by the CLI",
    )

    @property
    def tick_seconds(self) -> float:
        """Tick interval in seconds."""
        return self.tick_interval_ms / 1000.0


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
