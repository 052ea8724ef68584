"""Configuration management for Seriesarr."""

import logging
from functools import lru_cache

from pydantic import PositiveFloat, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    database_url: str = "sqlite:///./seriesarr.db"

    # Served under a reverse proxy sub-path, e.g. "/sonarr"
    url_base: str = ""

    # Local media cover cache, laid out as <dir>/<series_id>/<cover_type>.jpg
    media_cover_dir: str = "./MediaCover"

    # Library
    root_folders: list[str] = []
    quality_profiles: list[str] = [
        "Any",
        "SD",
        "HD-720p",
        "HD-1080p",
        "Ultra-HD",
        "HD - 720p/1080p",
    ]
    language_profiles: list[str] = ["English"]

    # Seconds allowed for a single websocket client to accept a notification
    broadcast_timeout: PositiveFloat = 5.0

    # API key accepted as X-Api-Key header or apikey query parameter
    api_key: SecretStr | None = None

    # Basic auth, enabled only when both are set
    auth_username: str | None = None
    auth_password: SecretStr | None = None

    # App settings
    debug: bool = False
    log_level: str = "INFO"

    @field_validator("url_base")
    @classmethod
    def validate_url_base(cls, v: str) -> str:
        v = v.strip().rstrip("/")
        if v and not v.startswith("/"):
            v = f"/{v}"
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        v = v.upper()
        if not isinstance(logging.getLevelName(v), int):
            raise ValueError(f"Unknown log level: {v}")
        return v

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
