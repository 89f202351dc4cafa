"""Tests for Garmin Connect workout JSON."""

import json
from typing import Any

import pytest

from garmin_coach.export.garmin import to_garmin_json, to_garmin_json_string
from garmin_coach.models.workout import Workout


class TestWorkoutFields:
    def test_header(self, workout: Workout) -> None:
        result = to_garmin_json(workout)
        assert result["workoutName"] == "4x1km"
        assert result["description"] == "Created by GarminCoach AI"
        assert result["sportType"] == {"sportTypeId": 1, "sportTypeKey": "running"}
        assert result["subSportType"] is None
        assert "poolLength" not in result

    def test_name_truncated(self, payload: dict[str, Any]) -> None:
        payload["name"] = "x" * 40
        result = to_garmin_json(Workout.model_validate(payload))
        assert len(result["workoutName"]) == 32

    def test_description_kept(self, payload: dict[str, Any]) -> None:
        payload["description"] = "Track session"
        assert to_garmin_json(Workout.model_validate(payload))["description"] == "Track session"

    def test_string_output(self, workout: Workout) -> None:
        assert json.loads(to_garmin_json_string(workout)) == to_garmin_json(workout)


class TestSteps:
    def test_segment_layout(self, workout: Workout) -> None:
        segment = to_garmin_json(workout)["workoutSegments"][0]
        assert segment["segmentOrder"] == 1
        assert [s["stepOrder"] for s in segment["workoutSteps"]] == [1, 2, 3]

    def test_time_step(self, workout: Workout) -> None:
        warmup = to_garmin_json(workout)["workoutSegments"][0]["workoutSteps"][0]
        assert warmup["type"] == "ExecutableStepDTO"
        assert warmup["stepType"]["stepTypeKey"] == "warmup"
        assert warmup["endCondition"]["conditionTypeKey"] == "time"
        assert warmup["endConditionValue"] == 600
        assert warmup["targetType"]["workoutTargetTypeKey"] == "no.target"

    def test_repeat_group(self, workout: Workout) -> None:
        group = to_garmin_json(workout)["workoutSegments"][0]["workoutSteps"][1]
        assert group["type"] == "RepeatGroupDTO"
        assert group["stepType"]["stepTypeId"] == 6
        assert group["numberOfIterations"] == 4
        assert [s["stepOrder"] for s in group["workoutSteps"]] == [1, 2]

    def test_pace_target_in_metres_per_second(self, workout: Workout) -> None:
        group = to_garmin_json(workout)["workoutSegments"][0]["workoutSteps"][1]
        interval = group["workoutSteps"][0]
        assert interval["endCondition"]["conditionTypeKey"] == "distance"
        assert interval["endConditionValue"] == 1000
        assert interval["targetType"]["workoutTargetTypeId"] == 6
        assert interval["targetValueOne"] == pytest.approx(1000 / 290)
        assert interval["targetValueTwo"] == pytest.approx(1000 / 270)

    def test_heart_rate_target_unchanged(self, payload: dict[str, Any]) -> None:
        payload["steps"][0].update(
            targetType="heart.rate.zone", targetValueLow=130, targetValueHigh=145
        )
        warmup = to_garmin_json(Workout.model_validate(payload))["workoutSegments"][0][
            "workoutSteps"
        ][0]
        assert warmup["targetType"]["workoutTargetTypeKey"] == "heart.rate.zone"
        assert (warmup["targetValueOne"], warmup["targetValueTwo"]) == (130, 145)

    def test_lap_button(self, workout: Workout) -> None:
        cooldown = to_garmin_json(workout)["workoutSegments"][0]["workoutSteps"][2]
        assert cooldown["endCondition"]["conditionTypeId"] == 1
        assert cooldown["endConditionValue"] is None


class TestSwimming:
    def test_pool_fields(self, payload: dict[str, Any]) -> None:
        payload["sportType"] = "swimming"
        result = to_garmin_json(Workout.model_validate(payload))
        assert result["sportType"]["sportTypeId"] == 4
        assert result["subSportType"] == "LAP_SWIMMING"
        assert result["poolLength"] == 25

        warmup = result["workoutSegments"][0]["workoutSteps"][0]
        assert warmup["targetType"]["workoutTargetTypeKey"] == "swim.instruction"
        assert warmup["strokeType"]["strokeTypeKey"] == "free"
