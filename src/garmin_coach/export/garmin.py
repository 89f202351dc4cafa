"""Garmin Connect JSON serialization for workouts.

Converts a ``Workout`` into the workout JSON accepted by the Garmin Connect
workout service, which syncs it to the watch.

All functions are pure (no I/O, no network calls).
"""

import json

from garmin_coach.models.workout import (
    DurationType,
    LeafStep,
    RepeatStep,
    SportType,
    StepType,
    TargetType,
    Workout,
)

# Garmin enforces limits on certain text fields.
_GARMIN_NAME_MAX = 32
_GARMIN_DESCRIPTION_MAX = 1024
_DEFAULT_DESCRIPTION = "Created by GarminCoach AI"

_STEP_TYPE_IDS = {
    StepType.WARMUP: 1,
    StepType.COOLDOWN: 2,
    StepType.INTERVAL: 3,
    StepType.RECOVERY: 4,
    StepType.REST: 5,
    StepType.REPEAT: 6,
}

_END_CONDITION_IDS = {
    DurationType.LAP_BUTTON: 1,
    DurationType.TIME: 2,
    DurationType.DISTANCE: 3,
}

_TARGET_TYPE_IDS = {
    TargetType.NO_TARGET: 1,
    TargetType.POWER_ZONE: 2,
    TargetType.CADENCE: 3,
    TargetType.HEART_RATE_ZONE: 4,
    TargetType.PACE_ZONE: 6,
}

_SPORT_TYPE_IDS = {
    SportType.RUNNING: 1,
    SportType.CYCLING: 2,
    SportType.SWIMMING: 4,
}

_SWIM_INSTRUCTION = {
    "workoutTargetTypeId": 18,
    "workoutTargetTypeKey": "swim.instruction",
    "displayOrder": 18,
}
_FREE_STROKE = {"strokeTypeId": 6, "strokeTypeKey": "free", "displayOrder": 6}
_NO_STROKE = {"strokeTypeId": 0, "strokeTypeKey": None, "displayOrder": 0}
_METER_UNIT = {"unitId": 1, "unitKey": "meter", "factor": 100}
_POOL_LENGTH_M = 25


def to_garmin_json(workout: Workout) -> dict:  # type: ignore[type-arg]
    """Convert a Workout to a Garmin Connect-compatible dict."""
    sport = _sport_type(workout.sport_type)
    result: dict = {  # type: ignore[type-arg]
        "workoutName": workout.name[:_GARMIN_NAME_MAX],
        "description": (workout.description or _DEFAULT_DESCRIPTION)[:_GARMIN_DESCRIPTION_MAX],
        "sportType": sport,
        "subSportType": "LAP_SWIMMING" if workout.sport_type == SportType.SWIMMING else None,
        "workoutSegments": [
            {
                "segmentOrder": 1,
                "sportType": dict(sport),
                "workoutSteps": _convert_steps(workout),
            }
        ],
    }
    if workout.sport_type == SportType.SWIMMING:
        result["poolLength"] = _POOL_LENGTH_M
        result["poolLengthUnit"] = dict(_METER_UNIT)
    return result


def to_garmin_json_string(workout: Workout, indent: int = 2) -> str:
    """Convert a Workout to a Garmin-compatible JSON string."""
    return json.dumps(to_garmin_json(workout), indent=indent, ensure_ascii=False)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _sport_type(sport: SportType) -> dict:  # type: ignore[type-arg]
    return {"sportTypeId": _SPORT_TYPE_IDS[sport], "sportTypeKey": sport.value}


def _convert_steps(workout: Workout) -> list[dict]:  # type: ignore[type-arg]
    steps = []
    for order, step in enumerate(workout.steps, start=1):
        if isinstance(step, RepeatStep):
            steps.append(_convert_repeat_step(step, order, workout.sport_type))
        else:
            steps.append(_convert_step(step, order, workout.sport_type))
    return steps


def _convert_step(step: LeafStep, step_order: int, sport: SportType) -> dict:  # type: ignore[type-arg]
    """Build an ExecutableStepDTO for a non-repeat step."""
    step_type_id = _STEP_TYPE_IDS[step.step_type]
    swimming = sport == SportType.SWIMMING

    result: dict = {  # type: ignore[type-arg]
        "type": "ExecutableStepDTO",
        "stepId": None,
        "stepOrder": step_order,
        "stepType": {
            "stepTypeId": step_type_id,
            "stepTypeKey": step.step_type.value,
            "displayOrder": step_type_id,
        },
        "childStepId": None,
        "description": None,
    }

    # Duration / end condition: seconds for time, metres for distance
    condition_id = _END_CONDITION_IDS[step.duration_type]
    result["endCondition"] = {
        "conditionTypeId": condition_id,
        "conditionTypeKey": step.duration_type.value,
        "displayOrder": condition_id,
        "displayable": True,
    }
    result["endConditionValue"] = step.duration_value
    result["preferredEndConditionUnit"] = (
        dict(_METER_UNIT)
        if swimming and step.duration_type == DurationType.DISTANCE
        else None
    )

    result.update(_build_target(step, swimming))
    result["strokeType"] = dict(_FREE_STROKE if swimming else _NO_STROKE)
    return result


def _convert_repeat_step(step: RepeatStep, step_order: int, sport: SportType) -> dict:  # type: ignore[type-arg]
    """Build a RepeatGroupDTO for a repeat step with its children."""
    return {
        "type": "RepeatGroupDTO",
        "stepId": None,
        "stepOrder": step_order,
        "stepType": {
            "stepTypeId": _STEP_TYPE_IDS[StepType.REPEAT],
            "stepTypeKey": StepType.REPEAT.value,
            "displayOrder": _STEP_TYPE_IDS[StepType.REPEAT],
        },
        "numberOfIterations": step.repeat_count,
        "smartRepeat": False,
        "childStepId": None,
        "workoutSteps": [
            _convert_step(child, child_order, sport)
            for child_order, child in enumerate(step.child_steps, start=1)
        ],
    }


def _build_target(step: LeafStep, swimming: bool = False) -> dict:  # type: ignore[type-arg]
    """Build the target fields for a step.

    Pace: faster pace (lower s/km) -> higher m/s, so bounds are re-ordered
    after conversion.
    """
    low, high = step.target_value_low, step.target_value_high
    if not step.has_target or low is None or high is None:
        target_type = (
            dict(_SWIM_INSTRUCTION)
            if swimming
            else {
                "workoutTargetTypeId": _TARGET_TYPE_IDS[TargetType.NO_TARGET],
                "workoutTargetTypeKey": TargetType.NO_TARGET.value,
                "displayOrder": _TARGET_TYPE_IDS[TargetType.NO_TARGET],
            }
        )
        return {"targetType": target_type, "targetValueOne": None, "targetValueTwo": None}

    if step.target_type == TargetType.PACE_ZONE:
        speeds = (_pace_s_per_km_to_m_per_s(low), _pace_s_per_km_to_m_per_s(high))
        low, high = min(speeds), max(speeds)

    type_id = _TARGET_TYPE_IDS[step.target_type]
    return {
        "targetType": {
            "workoutTargetTypeId": type_id,
            "workoutTargetTypeKey": step.target_type.value,
            "displayOrder": type_id,
        },
        "targetValueOne": low,
        "targetValueTwo": high,
    }


def _pace_s_per_km_to_m_per_s(s_per_km: float) -> float:
    """Convert pace in seconds/km to speed in meters/second.

    Example: 300 s/km (5:00/km) -> 1000/300 = 3.333 m/s
    """
    return 1000.0 / s_per_km
