"""Shared workout payloads."""

import copy
from typing import Any

import pytest

from garmin_coach.models.workout import Workout

INTERVALS_PAYLOAD: dict[str, Any] = {
    "id": "w1",
    "name": "4x1km",
    "description": "",
    "sportType": "running",
    "steps": [
        {
            "stepOrder": 1,
            "stepType": "warmup",
            "durationType": "time",
            "durationValue": 600,
            "targetType": "no.target",
        },
        {
            "stepOrder": 2,
            "stepType": "repeat",
            "repeatCount": 4,
            "childSteps": [
                {
                    "stepOrder": 1,
                    "stepType": "interval",
                    "durationType": "distance",
                    "durationValue": 1000,
                    "targetType": "pace.zone",
                    "targetValueLow": 270,
                    "targetValueHigh": 290,
                },
                {
                    "stepOrder": 2,
                    "stepType": "recovery",
                    "durationType": "time",
                    "durationValue": 90,
                    "targetType": "no.target",
                },
            ],
        },
        {
            "stepOrder": 3,
            "stepType": "cooldown",
            "durationType": "lap.button",
            "targetType": "no.target",
        },
    ],
}


@pytest.fixture()
def payload() -> dict[str, Any]:
    """A fresh, mutable copy of the sample workout JSON."""
    return copy.deepcopy(INTERVALS_PAYLOAD)


@pytest.fixture()
def workout(payload: dict[str, Any]) -> Workout:
    return Workout.model_validate(payload)
