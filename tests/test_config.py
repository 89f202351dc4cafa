"""Tests for settings loading."""

from datetime import timedelta
from pathlib import Path

import pytest
from pydantic import ValidationError

from garmin_coach.config import Settings


class TestSettings:
    def test_defaults(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        monkeypatch.chdir(tmp_path)
        settings = Settings()
        assert settings.easy_pace_sec_km is None
        assert settings.max_hr is None
        assert settings.readiness_stale_after == timedelta(minutes=5)

    def test_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GARMIN_COACH_MAX_HR", "190")
        monkeypatch.setenv("GARMIN_COACH_READINESS_STALE_AFTER_S", "60")
        settings = Settings()
        assert settings.max_hr == 190
        assert settings.readiness_stale_after == timedelta(minutes=1)

    def test_rejects_non_positive_pace(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GARMIN_COACH_EASY_PACE_SEC_KM", "0")
        with pytest.raises(ValidationError):
            Settings()
