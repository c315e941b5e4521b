"""
Centralized configuration for the recipe catalog backend.

All settings are loaded from environment variables (or a local .env file)
with sensible defaults. Database settings are namespaced MONGO_*, token
settings TOKEN_* / *_TOKEN_DURATION.
"""

from datetime import timedelta
from functools import lru_cache
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Recipe Catalog API"
    app_version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"
    base_path: str = "/api/v1"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    reload: bool = False

    # CORS settings
    cors_origins: list[str] = ["http://localhost:5173", "http://localhost:3000"]
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = ["*"]
    cors_allow_headers: list[str] = ["*"]

    # MongoDB
    mongo_uri: str = ""
    mongo_db_name: str = ""
    mongo_user: str = ""
    mongo_password: str = ""
    mongo_auth_source: str = ""
    db_operation_timeout: float = 10.0  # seconds per store operation

    # Tokens
    token_symmetric_key: str = ""
    access_token_duration: timedelta = timedelta(minutes=15)
    refresh_token_duration: timedelta = timedelta(hours=24)

    # Images
    images_depot_path: str = "./images"

    @field_validator("access_token_duration", "refresh_token_duration", mode="before")
    @classmethod
    def parse_duration_seconds(cls, value):
        """Accept plain seconds (e.g. "900") as well as ISO 8601 durations."""
        if isinstance(value, str):
            try:
                return timedelta(seconds=float(value))
            except (ValueError, OverflowError):
                return value
        return value


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
