"""Tests for the garmin-coach command line."""

import json
from pathlib import Path
from typing import Any

import pytest
from typer.testing import CliRunner

from garmin_coach.cli import app

runner = CliRunner()


@pytest.fixture()
def workout_file(tmp_path: Path, payload: dict[str, Any]) -> Path:
    path = tmp_path / "workout.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


@pytest.fixture()
def activities_file(tmp_path: Path) -> Path:
    path = tmp_path / "activities.json"
    path.write_text(
        json.dumps(
            [
                {
                    "activityId": 1,
                    "distance": 8000,
                    "duration": 2700,
                    "startTimeLocal": "2026-03-13T07:00:00",
                    "averageHR": 138,
                }
            ]
        ),
        encoding="utf-8",
    )
    return path


class TestValidate:
    def test_valid(self, workout_file: Path) -> None:
        result = runner.invoke(app, ["validate", str(workout_file)])
        assert result.exit_code == 0
        assert "is valid" in result.output

    def test_nested_repeat(self, tmp_path: Path, payload: dict[str, Any]) -> None:
        payload["steps"][1]["childSteps"].append(
            {
                "stepType": "repeat",
                "repeatCount": 2,
                "childSteps": [
                    {"stepType": "interval", "durationType": "time", "durationValue": 60}
                ],
            }
        )
        path = tmp_path / "nested.json"
        path.write_text(json.dumps(payload), encoding="utf-8")
        result = runner.invoke(app, ["validate", str(path)])
        assert result.exit_code == 1
        assert "Nested repeat" in result.output

    def test_missing_file(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["validate", str(tmp_path / "missing.json")])
        assert result.exit_code == 1
        assert "Failed to load workout" in result.output


class TestShow:
    def test_breakdown(self, workout_file: Path) -> None:
        result = runner.invoke(app, ["show", str(workout_file)])
        assert result.exit_code == 0
        assert "Разминка" in result.output
        assert "Estimated time" in result.output


class TestExport:
    def test_garmin_to_file(self, workout_file: Path, tmp_path: Path) -> None:
        out = tmp_path / "garmin.json"
        result = runner.invoke(app, ["export", str(workout_file), "--output", str(out)])
        assert result.exit_code == 0
        data = json.loads(out.read_text(encoding="utf-8"))
        assert data["workoutName"] == "4x1km"

    def test_intervals_to_file(self, workout_file: Path, tmp_path: Path) -> None:
        out = tmp_path / "event.json"
        result = runner.invoke(
            app, ["export", str(workout_file), "--format", "intervals", "-o", str(out)]
        )
        assert result.exit_code == 0
        data = json.loads(out.read_text(encoding="utf-8"))
        assert data["type"] == "Run"
        assert data["description"].startswith("Warmup")

    def test_stdout(self, workout_file: Path) -> None:
        result = runner.invoke(app, ["export", str(workout_file)])
        assert result.exit_code == 0
        assert "workoutName" in result.output


class TestReadiness:
    def test_scores(self, activities_file: Path) -> None:
        result = runner.invoke(
            app, ["readiness", str(activities_file), "--today", "2026-03-16"]
        )
        assert result.exit_code == 0
        assert "100/100" in result.output

    def test_with_stats(self, activities_file: Path, tmp_path: Path) -> None:
        stats = tmp_path / "stats.json"
        stats.write_text(json.dumps({"bodyBattery": 80, "stressLevel": 20}), encoding="utf-8")
        result = runner.invoke(
            app,
            ["readiness", str(activities_file), "--stats", str(stats), "--today", "2026-03-16"],
        )
        assert result.exit_code == 0
        assert "Battery" in result.output

    def test_bad_date(self, activities_file: Path) -> None:
        result = runner.invoke(app, ["readiness", str(activities_file), "--today", "soon"])
        assert result.exit_code == 1
        assert "Invalid date" in result.output


class TestConfig:
    def test_show(self) -> None:
        result = runner.invoke(app, ["config", "--show"])
        assert result.exit_code == 0
        assert "max_hr" in result.output
