"""Application configuration."""

import os
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str | None = None
    supabase_key: str | None = None
    owner_column: str = "clerk_user_id"
    cache_dir: Path = Path(".macro_sync")
    sync_window_days: int = 30
    macro_cache_key: str = "caltrax-macros"
    workout_plans_cache_key: str = "caltrax-workout-plans"
    meal_plans_cache_key: str = "caltrax-meal-plans"
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @property
    def remote_configured(self) -> bool:
        """Return True when both Supabase credentials are present."""
        return bool(self.supabase_url and self.supabase_key)
