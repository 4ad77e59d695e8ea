"""Configuration settings for the activity frame library."""

import logging
from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Library settings loaded from ACTIVITY_FRAME_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="ACTIVITY_FRAME_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Logging
    log_level: str = "INFO"

    # Seeds for the default best-average duration ladder (seconds)
    best_avg_start: int = Field(default=10, gt=0)
    best_avg_limit: int = Field(default=18000, gt=0)
    best_avg_growth: float = Field(default=1.2, gt=1.0)

    # Histogram outlier trimming threshold (fraction of total rank)
    outlier_trim_percent: float = Field(default=0.001, ge=0.0, lt=1.0)

    # Plot ticks for best-average curves
    min_important_ticks: int = 5
    tick_count: int = 8


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def configure_logging(level: Optional[str] = None) -> None:
    """Install a root logging handler at the configured level."""
    level_name = (level or get_settings().log_level).upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )
