"""Application settings loaded from environment variables."""

from __future__ import annotations

from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application configuration.

    Values are read from environment variables (or a `.env` file).
    """

    # Supabase
    supabase_url: str
    supabase_anon_key: str
    supabase_service_key: str
    supabase_http_max_connections: int = 100
    supabase_http_max_keepalive_connections: int = 50
    supabase_postgrest_timeout_seconds: int = 30

    # App
    app_name: str = "Blogbase API"
    app_version: str = "1.0.0"
    environment: Literal["development", "test", "production"] = "development"
    log_level: str = "INFO"
    allowed_origins: str = "http://localhost:3000"

    # Auth
    auth_cookie_name: str = "access_token"
    auth_token_cache_ttl_seconds: int = 15
    auth_token_cache_max_entries: int = 1024
    oauth_redirect_url: str = "http://localhost:3000/auth/callback"
    password_reset_redirect_url: str | None = None

    # Inngest
    inngest_app_id: str = "blogbase"
    inngest_event_key: str | None = None
    inngest_signing_key: str | None = None
    enable_event_publishing: bool = True
    welcome_tips_delay_seconds: int = 3600

    # Performance tuning
    slow_request_log_threshold_ms: int = 0
    slow_query_log_threshold_ms: int = 0

    @field_validator("supabase_url")
    @classmethod
    def _check_supabase_url(cls, value: str) -> str:
        if not value.startswith(("http://", "https://")):
            raise ValueError("SUPABASE_URL must be an http(s) URL")
        return value.rstrip("/")

    @field_validator("supabase_anon_key", "supabase_service_key")
    @classmethod
    def _check_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Supabase keys must not be empty")
        return value

    @property
    def is_production(self) -> bool:
        """Return True when running in production."""
        return self.environment == "production"

    @property
    def origins_list(self) -> list[str]:
        """Parse comma-separated ALLOWED_ORIGINS into a list."""
        return [o.strip() for o in self.allowed_origins.split(",") if o.strip()]

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


settings = Settings()  # type: ignore[call-arg]
