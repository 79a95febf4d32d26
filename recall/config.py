"""
Configuration settings for the recall review CLI.

Uses Pydantic Settings for environment variable management with .env file support.
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .scheduler import SM2Config


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Storage
    # ========================================
    recall_data_dir: Path = Field(
        default=Path.home() / ".recall",
        description="Directory holding the JSON item and session collections",
    )

    # ========================================
    # Review Sessions
    # ========================================
    review_session_size: int = Field(
        default=5,
        ge=0,
        description="Default maximum number of items per review session",
    )

    # ========================================
    # SM-2 Algorithm
    # ========================================
    sm2_initial_ease: float = Field(
        default=2.5,
        ge=1.3,
        description="Ease factor assigned to new items",
    )
    sm2_minimum_ease: float = Field(
        default=1.3,
        ge=1.3,
        description="Lower bound for the ease factor",
    )
    sm2_first_interval: int = Field(
        default=1,
        ge=1,
        description="Days until review after the first successful recall",
    )
    sm2_second_interval: int = Field(
        default=6,
        ge=1,
        description="Days until review after the second successful recall",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="WARNING",
        description="Logging level",
    )
    log_file: str | None = Field(
        default=None,
        description="Optional log file path (rotated at 1 MB)",
    )

    @model_validator(mode="after")
    def _check_ease_bounds(self) -> Settings:
        if self.sm2_minimum_ease > self.sm2_initial_ease:
            raise ValueError(
                f"sm2_minimum_ease ({self.sm2_minimum_ease}) must not exceed "
                f"sm2_initial_ease ({self.sm2_initial_ease})"
            )
        return self

    def get_sm2_config(self) -> SM2Config:
        """Get SM-2 algorithm constants."""
        return SM2Config(
            initial_easiness=self.sm2_initial_ease,
            minimum_easiness=self.sm2_minimum_ease,
            first_interval=self.sm2_first_interval,
            second_interval=self.sm2_second_interval,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
