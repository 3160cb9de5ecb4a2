"""
Configuration settings for the study-data store.

Uses Pydantic Settings for environment variable management with .env file support.
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


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
    study_data_dir: Path = Field(
        default=Path.home() / ".study-data",
        description="Directory holding the persisted study document",
    )
    study_data_storage_key: str = Field(
        default="n8_study_data",
        description="Storage key (file stem) of the persisted document",
    )

    # ========================================
    # Logging
    # ========================================
    study_data_log_level: str = Field(
        default="WARNING",
        description="Minimum level for the CLI log sink",
    )

    # ========================================
    # Daily Review
    # ========================================
    daily_review_size: int = Field(
        default=10,
        description="Maximum items in the generated daily review set",
    )
    daily_review_max_retests: int = Field(
        default=2,
        description="Wrong-answer retests placed at the head of the daily set",
    )

    # ========================================
    # Helper Methods
    # ========================================
    def get_storage_path(self) -> Path:
        """Full path of the JSON file backing the store."""
        return self.study_data_dir / f"{self.study_data_storage_key}.json"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
