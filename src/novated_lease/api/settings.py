"""Service settings, read from ``NOVATED_*`` environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="NOVATED_", env_file=".env", env_file_encoding="utf-8", extra="ignore",
    )

    # Rule set; None = built-in 2024-25 tables
    config_path: str | None = None

    # Service
    service_name: str = "novated-lease-quote"
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8000

    # Scene image API; disabled when no key is set
    image_api_url: str = "https://api.openai.com/v1/images/generations"
    image_api_key: str | None = None
    image_model: str = "dall-e-3"
    http_timeout_seconds: float = 30.0
