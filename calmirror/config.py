"""Application configuration management."""

import logging
import re
from functools import lru_cache
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic_settings import BaseSettings

from calmirror.sync.models import ExclusionConfig

logger = logging.getLogger(__name__)

DEFAULT_EXCLUDE_KEYWORDS = (
    "home, office, working from home, working from office, "
    "work from home, work from office, flexible, hybrid, out of office"
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Calendars
    source_calendar_id: str = "primary"
    destination_calendar_id: str = ""

    # Mirroring
    sync_marker: str = "[Synced]"
    past_days: int = 0
    future_days: int = 90
    exclude_keywords: str = DEFAULT_EXCLUDE_KEYWORDS
    timezone: str = "UTC"
    dry_run: bool = False

    # Google OAuth
    google_client_secrets_file: str = "credentials.json"
    google_token_file: str = "token.json"

    # Runtime
    log_level: str = "info"
    schedule_interval_minutes: int = 60

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def _parse_keyword_list(raw: str | None) -> list[str]:
    """Parse comma/newline/semicolon separated keyword values."""
    if not raw:
        return []

    keywords: list[str] = []
    for token in re.split(r"[,\n;]+", raw):
        keyword = token.strip().lower()
        if keyword and keyword not in keywords:
            keywords.append(keyword)
    return keywords


def get_exclusion_config(settings: Settings | None = None) -> ExclusionConfig:
    """Build the keyword exclusion config from settings."""
    settings = settings or get_settings()
    return ExclusionConfig.from_keywords(_parse_keyword_list(settings.exclude_keywords))


def get_timezone(settings: Settings | None = None) -> ZoneInfo:
    """Resolve the configured IANA timezone, falling back to UTC."""
    settings = settings or get_settings()
    try:
        return ZoneInfo(settings.timezone)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning(f"Invalid TIMEZONE {settings.timezone!r}, falling back to UTC")
        return ZoneInfo("UTC")
