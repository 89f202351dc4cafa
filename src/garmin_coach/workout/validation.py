"""Workout validation.

``validate`` checks a decoded workout payload step by step and returns a
``ValidationResult``. Malformed workouts are reported, never raised, so a caller
rendering a list of workouts can skip a bad one without crashing.
"""

import logging
import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any, TypeVar

from pydantic import ValidationError

from garmin_coach.models.workout import DurationType, StepType, TargetType, Workout

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Enum)


class WorkoutValidationError(Exception):
    """Base class for workout validation failures.

    Args:
        message: User-facing explanation.
        path: 1-based step path, e.g. ``"3"`` or ``"3.2"`` for the second child
              of the third step. ``None`` for workout-level problems.
    """

    kind = "invalid"

    def __init__(self, message: str, path: str | None = None) -> None:
        self.message = message
        self.path = path
        prefix = f"step {path}: " if path else ""
        super().__init__(f"{prefix}{message}")


class StructuralError(WorkoutValidationError):
    """Malformed repeat block or workout shape."""

    kind = "structure"


class DurationError(WorkoutValidationError):
    """Missing or non-positive duration."""

    kind = "duration"


class TargetRangeError(WorkoutValidationError):
    """Target bounds inconsistent with the target type, or low > high."""

    kind = "target"


class NestingError(WorkoutValidationError):
    """A repeat block nested inside another repeat block."""

    kind = "nesting"


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of ``validate``: exactly one of ``workout`` / ``error`` is set."""

    workout: Workout | None = None
    error: WorkoutValidationError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def __post_init__(self) -> None:
        if (self.workout is None) == (self.error is None):
            raise ValueError("ValidationResult needs exactly one of workout or error")

    def unwrap(self) -> Workout:
        """Return the workout, raising the validation error if there is one."""
        if self.workout is None:
            raise self.error or ValueError("empty validation result")
        return self.workout


# ---------------------------------------------------------------------------
# Raw payload checks
# ---------------------------------------------------------------------------


def _get(step: Mapping[str, Any], key: str, snake: str) -> Any:
    return step.get(key, step.get(snake))


def _is_number(value: Any) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


def _coerce(enum_cls: type[E], raw: Any) -> E | None:
    try:
        return enum_cls(raw)
    except (ValueError, TypeError):
        return None


def _step_type(step: Mapping[str, Any], path: str) -> StepType:
    raw = _get(step, "stepType", "step_type")
    step_type = _coerce(StepType, raw)
    if step_type is None:
        raise StructuralError(f"unknown step type {raw!r}", path)
    return step_type


def _check_order(step: Mapping[str, Any], position: int, path: str) -> None:
    order = _get(step, "stepOrder", "step_order")
    if order is not None and order != position:
        raise StructuralError(
            f"stepOrder {order} does not match position {position}", path
        )


def _check_target(step: Mapping[str, Any], path: str) -> None:
    raw = _get(step, "targetType", "target_type") or TargetType.NO_TARGET.value
    target_type = _coerce(TargetType, raw)
    if target_type is None:
        raise StructuralError(f"unknown target type {raw!r}", path)

    low = _get(step, "targetValueLow", "target_value_low")
    high = _get(step, "targetValueHigh", "target_value_high")
    if target_type == TargetType.NO_TARGET:
        if low is not None or high is not None:
            raise TargetRangeError("target bounds given without a target type", path)
        return
    if low is None or high is None:
        raise TargetRangeError(
            f"{target_type.value} target needs both a low and a high bound", path
        )
    if not (_is_number(low) and _is_number(high)):
        raise TargetRangeError("target bounds must be finite numbers", path)
    if low > high:
        raise TargetRangeError(f"target low {low} is above target high {high}", path)
    if target_type == TargetType.PACE_ZONE and low <= 0:
        raise TargetRangeError("pace bounds must be positive seconds per km", path)


def _check_leaf(step: Mapping[str, Any], path: str) -> None:
    if _get(step, "childSteps", "child_steps") or _get(
        step, "repeatCount", "repeat_count"
    ) is not None:
        raise StructuralError("only repeat steps may have child steps", path)

    raw = _get(step, "durationType", "duration_type")
    duration_type = _coerce(DurationType, raw)
    if duration_type is None:
        raise StructuralError(f"unknown duration type {raw!r}", path)

    value = _get(step, "durationValue", "duration_value")
    if duration_type == DurationType.LAP_BUTTON:
        if value is not None:
            raise DurationError("a lap-button step takes no duration value", path)
    elif value is None:
        raise DurationError(f"{duration_type.value} step has no duration", path)
    elif not _is_number(value):
        raise DurationError(f"duration must be a finite number, got {value!r}", path)
    elif value <= 0:
        raise DurationError(f"duration must be positive, got {value}", path)

    _check_target(step, path)


def _check_repeat(step: Mapping[str, Any], path: str) -> None:
    children = _get(step, "childSteps", "child_steps") or []
    for child in children:
        if (
            isinstance(child, Mapping)
            and _coerce(StepType, _get(child, "stepType", "step_type")) == StepType.REPEAT
        ):
            raise NestingError("repeat blocks cannot contain another repeat", path)

    count = _get(step, "repeatCount", "repeat_count")
    if not isinstance(count, int) or isinstance(count, bool) or count < 1:
        raise StructuralError("repeat step needs repeatCount of at least 1", path)
    if not children:
        raise StructuralError("repeat step has no child steps", path)
    if _get(step, "durationValue", "duration_value") is not None:
        raise StructuralError("repeat step cannot carry its own duration", path)
    target = _get(step, "targetType", "target_type")
    if target is not None and _coerce(TargetType, target) != TargetType.NO_TARGET:
        raise StructuralError("repeat step cannot carry its own target", path)

    for position, child in enumerate(children, start=1):
        child_path = f"{path}.{position}"
        if not isinstance(child, Mapping):
            raise StructuralError("step is not an object", child_path)
        _step_type(child, child_path)
        _check_order(child, position, child_path)
        _check_leaf(child, child_path)


def _check_steps(steps: Any) -> None:
    if not isinstance(steps, Sequence) or isinstance(steps, str) or not steps:
        raise StructuralError("workout has no steps")
    for position, step in enumerate(steps, start=1):
        path = str(position)
        if not isinstance(step, Mapping):
            raise StructuralError("step is not an object", path)
        step_type = _step_type(step, path)
        _check_order(step, position, path)
        if step_type == StepType.REPEAT:
            _check_repeat(step, path)
        else:
            _check_leaf(step, path)


def _first_error_message(exc: ValidationError) -> str:
    error = exc.errors()[0]
    location = ".".join(str(part) for part in error["loc"])
    return f"{location}: {error['msg']}" if location else error["msg"]


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def validate(data: Mapping[str, Any] | Workout) -> ValidationResult:
    """Validate a workout payload.

    Args:
        data: Decoded workout JSON (camelCase or snake_case keys), or an
              already-built ``Workout`` to re-check.

    Returns:
        A result holding the parsed ``Workout`` or the first error found.
    """
    if isinstance(data, Workout):
        data = data.to_json_dict()
    if not isinstance(data, Mapping):
        return ValidationResult(error=StructuralError("workout is not an object"))

    try:
        _check_steps(data.get("steps"))
    except WorkoutValidationError as exc:
        logger.debug("Rejected workout %r: %s", data.get("name"), exc)
        return ValidationResult(error=exc)

    try:
        workout = Workout.model_validate(data)
    except ValidationError as exc:
        error = StructuralError(_first_error_message(exc))
        logger.debug("Rejected workout %r: %s", data.get("name"), error)
        return ValidationResult(error=error)

    return ValidationResult(workout=workout)
