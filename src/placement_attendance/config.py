"""Application configuration."""

import os

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    qr_token_secret: str
    session_secret: str
    qr_token_ttl_seconds: int = 300
    qr_refresh_seconds: int = 240
    clock_skew_seconds: int = 30
    allow_legacy_qr: bool = True
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @model_validator(mode="after")
    def _check_refresh_interval(self) -> "Settings":
        if self.qr_token_ttl_seconds <= 0:
            raise ValueError("qr_token_ttl_seconds must be positive")
        if not 0 < self.qr_refresh_seconds < self.qr_token_ttl_seconds:
            raise ValueError(
                "qr_refresh_seconds must be positive and shorter than the token TTL"
            )
        return self
