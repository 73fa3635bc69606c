"""
Icon Sync Configuration

Supports two store modes:
- LOCAL: Containers are directories under LOCAL_STORE_ROOT
- S3: Containers are S3 buckets (optionally prefixed)
"""
import logging
from enum import Enum
from functools import lru_cache
from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger("iconsync.config")


class StoreMode(str, Enum):
    LOCAL = "LOCAL"
    S3 = "S3"


class LogFormat(str, Enum):
    JSON = "json"
    TEXT = "text"


class Settings(BaseSettings):
    """Icon sync settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="ICONSYNC_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Service identification
    APP_NAME: str = "iconsync"
    APP_VERSION: str = "1.0.0"

    # Object store
    STORE_MODE: StoreMode = StoreMode.LOCAL
    LOCAL_STORE_ROOT: str = "./store"
    S3_ENDPOINT_URL: Optional[str] = None
    S3_REGION: str = "us-east-1"
    S3_BUCKET_PREFIX: str = ""

    # Containers and documents
    SCHEMA_CONTAINER: str = "schemas"
    ICON_CONTAINER: str = "cosmeticitemicons"
    SCHEMA_FILE_NAME: str = "items_game.vdf"

    # Steam
    STEAM_WEB_API_KEY: str = ""
    STEAM_API_BASE_URL: str = "https://api.steampowered.com"
    STEAM_CDN_BASE_URL: str = "https://steamcdn-a.akamaihd.net/apps/570"
    ICON_TYPE: str = ""
    HTTP_TIMEOUT_SECONDS: float = 30.0

    # Pacing between items (upstream rate limits)
    EXISTING_ITEM_DELAY_SECONDS: float = 0.5
    NEW_ITEM_DELAY_SECONDS: float = 5.0

    # Image handling
    JPEG_QUALITY: int = 75
    MAX_IMAGE_DIMENSION: int = 4096

    # Scheduling (5-field cron)
    ICON_SYNC_CRON: str = "0 0 * * sun"
    SCHEMA_REFRESH_CRON: str = "0 0 * * sat"
    SCHEDULE_TIMEZONE: str = "UTC"
    RUN_ON_STARTUP: bool = True

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: LogFormat = LogFormat.JSON

    @field_validator("EXISTING_ITEM_DELAY_SECONDS", "NEW_ITEM_DELAY_SECONDS")
    @classmethod
    def validate_delay(cls, v: float) -> float:
        """Pacing delays cannot be negative."""
        if v < 0:
            raise ValueError("Delay must be >= 0 seconds")
        return v

    @field_validator("JPEG_QUALITY")
    @classmethod
    def validate_jpeg_quality(cls, v: int) -> int:
        if not 1 <= v <= 95:
            raise ValueError("JPEG_QUALITY must be between 1 and 95")
        return v

    @field_validator("STEAM_CDN_BASE_URL", "STEAM_API_BASE_URL")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Accept any casing, stripping whitespace to handle Windows .env files."""
        if isinstance(v, str):
            return v.strip().upper()
        return v

    def bucket_for(self, container: str) -> str:
        """
        Map a logical container to its S3 bucket name.

        Example:
            S3_BUCKET_PREFIX="prod-" and "schemas" -> "prod-schemas"
        """
        return f"{self.S3_BUCKET_PREFIX}{container}"


@lru_cache
def get_settings() -> Settings:
    """Get current settings instance."""
    return Settings()
