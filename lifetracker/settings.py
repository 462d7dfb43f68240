from __future__ import annotations

import os
from datetime import date, datetime
from typing import List
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    database_url: str = Field(..., alias="DATABASE_URL")
    backend_session_secret: str = Field(..., alias="BACKEND_SESSION_SECRET")

    allowed_emails_raw: str = Field("", alias="ALLOWED_EMAILS")
    tracker_timezone: str = Field("Europe/Amsterdam", alias="TRACKER_TIMEZONE")
    default_target_kcal: int = Field(2000, alias="DEFAULT_TARGET_KCAL")
    streak_lookback_days: int = Field(365, alias="STREAK_LOOKBACK_DAYS")

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @property
    def allowed_emails(self) -> List[str]:
        return [email.strip().lower() for email in self.allowed_emails_raw.split(",") if email.strip()]

    def today(self) -> date:
        try:
            tzinfo = ZoneInfo(self.tracker_timezone)
        except (ZoneInfoNotFoundError, ValueError):
            return date.today()
        return datetime.now(tzinfo).date()


_settings: Settings | None = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    global _settings
    _settings = None


# For local dev convenience only.
if os.getenv("TRACKER_DEBUG_SETTINGS"):
    print(get_settings())
