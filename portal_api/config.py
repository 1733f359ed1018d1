from functools import lru_cache
from typing import Optional
from datetime import tzinfo, timezone
from zoneinfo import ZoneInfo

from dotenv import load_dotenv
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()


def load_zone(name: str) -> tzinfo:
    """ZoneInfo for an IANA name; ValueError when the zone does not exist."""
    try:
        return ZoneInfo(name)
    except (KeyError, ValueError):
        # ZoneInfoNotFoundError is a KeyError
        raise ValueError(f"Unknown timezone: {name}") from None


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    upstream_base_url: str = "http://localhost:5188/api"
    upstream_timeout_seconds: float = 15.0
    display_timezone: Optional[str] = None  # IANA name; UTC when unset
    refresh_interval_seconds: int = 60
    urgent_threshold_minutes: int = 10
    warning_threshold_minutes: int = 30
    log_level: str = "INFO"
    log_dir: str = "logs"

    @field_validator("display_timezone")
    @classmethod
    def check_display_timezone(cls, value: Optional[str]) -> Optional[str]:
        if value is None or not value.strip():
            return None
        load_zone(value.strip())
        return value.strip()

    def viewer_tz(self, override: Optional[str] = None) -> tzinfo:
        """Request override first, then DISPLAY_TIMEZONE, then UTC."""
        if override:
            return load_zone(override)
        if self.display_timezone:
            return ZoneInfo(self.display_timezone)
        return timezone.utc


@lru_cache
def get_settings() -> Settings:
    return Settings()
