"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    admin_token: str
    off_base_url: str = "https://world.openfoodfacts.org"
    off_user_agent: str = "calorie-tracker/0.1"
    off_page_size: int = 20
    off_timeout_seconds: float = 10.0
    off_retry_attempts: int = 1
    log_conflict_retries: int = 1
    history_default_days: int = 7
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )
