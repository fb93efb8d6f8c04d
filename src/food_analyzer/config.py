"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")

PRODUCTION = "production"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    openai_api_key: str | None = None
    openai_model: str = "gpt-4o"
    openai_max_output_tokens: int = 500
    openai_timeout_seconds: float = 30.0
    supabase_url: str | None = None
    supabase_service_key: str | None = None
    rate_limit_max_requests: int = 60
    rate_limit_window_seconds: int = 60
    daily_analysis_limit: int = 2
    usage_cookie_name: str = "daily_usage"
    usage_cookie_max_age_seconds: int = 24 * 60 * 60
    mock_delay_seconds: float = 2.0
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @property
    def is_production(self) -> bool:
        """Return True when running in the production environment."""
        return self.environment == PRODUCTION

    @property
    def model_configured(self) -> bool:
        """Return True when a usable model credential is present."""
        return bool(self.openai_api_key and self.openai_api_key.strip())

    @property
    def database_configured(self) -> bool:
        """Return True when the hosted database credentials are present."""
        return bool(self.supabase_url and self.supabase_service_key)
