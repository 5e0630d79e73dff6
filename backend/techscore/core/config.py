"""
Application Configuration

All settings loaded from environment variables.
"""

from functools import lru_cache
from typing import Optional
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings from environment variables."""

    # Application
    app_name: str = "TechScore Backend"
    app_version: str = "0.1.0"
    debug: bool = False
    environment: str = "development"
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # SQLite (local persistence)
    sqlite_path: Optional[str] = None  # Defaults to ./data/techscore.db

    # CORS (Frontend URL)
    allowed_origins: list[str] = ["http://localhost:3000"]

    # Analysis engine
    history_limit: int = 250  # Most recent daily bars fed to the engine
    min_bars: int = 14  # Hard floor before any indicator is attempted

    # Batch automation
    batch_size: int = 20
    batch_delay_seconds: float = 1.0
    symbol_timeout_seconds: float = 10.0
    tracked_symbols_file: Optional[str] = None

    # Scheduler (IST)
    enable_scheduler: bool = False
    schedule_interval_minutes: int = 30
    analysis_window_start: str = "09:00"
    analysis_window_end: str = "16:00"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
