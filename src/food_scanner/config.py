"""Application configuration."""

import os

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    fatsecret_client_id: str
    fatsecret_client_secret: str
    fatsecret_token_url: str = "https://oauth.fatsecret.com/connect/token"
    fatsecret_base_url: str = "https://platform.fatsecret.com/rest/server.api"
    fatsecret_scope: str = "basic premier"
    fatsecret_timeout_seconds: float = Field(default=15, gt=0)
    token_expiry_margin_seconds: float = Field(default=60, ge=0)
    retry_attempts: int = Field(default=0, ge=0)
    retry_delay_seconds: float = Field(default=0.3, ge=0)
    min_barcode_confidence: float = Field(default=0.8, ge=0.0, le=1.0)
    log_http_debug: bool = False
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )
