"""Configuration management for garmin-coach.

Settings are loaded from .env in the current directory (repo root),
with environment variables taking highest priority.

Run `garmin-coach config --show` to inspect the current values.
"""

from datetime import timedelta
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

_LOCAL_ENV = Path(".env")


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(_LOCAL_ENV),
        env_file_encoding="utf-8",
        env_prefix="GARMIN_COACH_",
        extra="ignore",
    )

    # Pace in sec/km used to turn distance steps into time estimates.
    # Unset by default: distance steps are then reported as distance only.
    easy_pace_sec_km: int | None = Field(default=None, gt=0)

    # Athlete max heart rate, used for %HR targets in Intervals.icu exports.
    max_hr: int | None = Field(default=None, gt=0)

    # How long a fetched readiness result may be shown before a refetch.
    readiness_stale_after_s: int = Field(default=300, gt=0)

    http_timeout_s: float = 30.0
    log_level: str = "WARNING"

    @property
    def readiness_stale_after(self) -> timedelta:
        return timedelta(seconds=self.readiness_stale_after_s)


def get_settings() -> Settings:
    return Settings()
