"""
Application configuration. All settings from environment with sensible defaults.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # .env is optional; values in it override the defaults below.
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_ignore_empty=True,
    )

    # App
    app_name: str = Field(default="Banana Studio")
    debug: bool = Field(default=False)
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(default="INFO")

    # Server
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=7000, ge=1, le=65535)

    # Request limits
    prompt_max_length: int = Field(default=1000, ge=1, le=10000)
    upload_max_size_mb: int = Field(default=20, ge=1, le=100)

    # Provider (Replicate)
    replicate_api_token: str = Field(default="", description="Required when a generation is requested")
    replicate_model: str = Field(
        default="google/nano-banana",
        description="owner/name, or owner/name:version to pin a version",
    )
    replicate_api_base: str = Field(default="https://api.replicate.com/v1")
    replicate_poll_interval_seconds: float = Field(default=1.0, ge=0.0, le=30.0)

    # CORS
    cors_origins: str = Field(default="*")
    cors_allow_credentials: bool = Field(default=True)

    @property
    def upload_max_bytes(self) -> int:
        return self.upload_max_size_mb * 1024 * 1024

    @property
    def provider_configured(self) -> bool:
        return bool(self.replicate_api_token.strip())


@lru_cache
def get_settings() -> Settings:
    return Settings()
