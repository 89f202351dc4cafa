"""Convert workouts into Intervals.icu planned events.

Intervals.icu parses the event description text into workout steps, so the
description is the primary payload; ``workout_doc`` is sent alongside it.
All functions are pure.
"""

from datetime import date, timedelta

from garmin_coach.models.intervals import (
    IntervalsEvent,
    WorkoutDoc,
    WorkoutStep,
    WorkoutStepTarget,
)
from garmin_coach.models.workout import (
    DurationType,
    LeafStep,
    RepeatStep,
    SportType,
    StepType,
    TargetType,
    Workout,
)
from garmin_coach.workout.structure import estimate_duration

_SPORT_TYPES = {
    SportType.RUNNING: "Run",
    SportType.CYCLING: "Ride",
    SportType.SWIMMING: "Swim",
}

# Intervals.icu has no lap-button end condition; a 1-second step stands in.
_LAP_BUTTON_DURATION = "1s"

_REST_TYPES = (StepType.RECOVERY, StepType.REST)


# ---------------------------------------------------------------------------
# Description text
# ---------------------------------------------------------------------------


def _fmt_number(value: float) -> str:
    return str(int(value)) if value == int(value) else f"{value:g}"


def _fmt_duration(step: LeafStep) -> str:
    """Format a step duration in Intervals.icu syntax: 5m30s, 2km, 400mtr."""
    if step.duration_type == DurationType.LAP_BUTTON:
        return _LAP_BUTTON_DURATION
    if not step.duration_value:
        return ""
    if step.duration_type == DurationType.TIME:
        mins, secs = divmod(int(step.duration_value), 60)
        if mins and secs:
            return f"{mins}m{secs}s"
        if mins:
            return f"{mins}m"
        return f"{secs}s"
    if step.duration_value >= 1000:
        km = step.duration_value / 1000
        if km == int(km):
            return f"{int(km)}km"
        return f"{km:.2f}".rstrip("0") + "km"
    return f"{_fmt_number(step.duration_value)}mtr"


def _fmt_pace(sec_per_km: float) -> str:
    mins, secs = divmod(int(round(sec_per_km)), 60)
    return f"{mins}:{secs:02d}"


def _fmt_target(step: LeafStep, max_hr: int | None = None) -> str:
    """Target suffix for a step line; heart rate without max HR is a prefix."""
    low, high = step.target_value_low, step.target_value_high
    if not step.has_target or low is None or high is None:
        return ""

    if step.target_type == TargetType.HEART_RATE_ZONE:
        if max_hr:
            pct_low = round(low / max_hr * 100)
            pct_high = round(high / max_hr * 100)
            if pct_low == pct_high:
                return f" {pct_high}% HR"
            return f" {pct_low}-{pct_high}% HR"
        if low == high:
            return f"HR {_fmt_number(high)}"
        return f"HR {_fmt_number(low)}-{_fmt_number(high)}"
    if step.target_type == TargetType.PACE_ZONE:
        return f" {_fmt_pace(low)}-{_fmt_pace(high)}/km Pace"
    if step.target_type == TargetType.POWER_ZONE:
        return f" {_fmt_number(low)}-{_fmt_number(high)}w"
    return f" {_fmt_number(low)}-{_fmt_number(high)}rpm"


def _step_line(step: LeafStep, max_hr: int | None = None) -> str:
    duration = _fmt_duration(step)
    target = _fmt_target(step, max_hr)
    if step.step_type in _REST_TYPES and not target:
        return f"- {duration} rest"
    if step.target_type == TargetType.HEART_RATE_ZONE and not max_hr and target:
        return f"- {target} {duration}".strip()
    return f"- {duration}{target}".strip()


def build_description(workout: Workout, max_hr: int | None = None) -> str:
    """Render a workout as Intervals.icu description text.

    Args:
        workout: The workout to render.
        max_hr: Athlete max heart rate. When given, heart-rate targets are
                written as % of max HR, which Intervals.icu scales per athlete.
    """
    parts: list[str] = []
    if workout.description:
        parts.append(workout.description)

    for step in workout.steps:
        if isinstance(step, RepeatStep):
            lines = [f"Main set {step.repeat_count}x"]
            lines.extend(_step_line(child, max_hr) for child in step.child_steps)
            parts.append("\n".join(lines))
        elif step.step_type == StepType.WARMUP:
            parts.append(f"Warmup\n{_step_line(step, max_hr)}")
        elif step.step_type == StepType.COOLDOWN:
            parts.append(f"Cooldown\n{_step_line(step, max_hr)}")
        else:
            parts.append(_step_line(step, max_hr))

    return "\n\n".join(parts)


# ---------------------------------------------------------------------------
# workout_doc
# ---------------------------------------------------------------------------


def _step_target(step: LeafStep, max_hr: int | None) -> dict[str, WorkoutStepTarget]:
    low, high = step.target_value_low, step.target_value_high
    if not step.has_target or low is None or high is None:
        return {}

    if step.target_type == TargetType.PACE_ZONE:
        return {"pace": WorkoutStepTarget(start=low, end=high, units="sec/km")}
    if step.target_type == TargetType.HEART_RATE_ZONE:
        if max_hr:
            return {
                "hr": WorkoutStepTarget(
                    start=round(low / max_hr * 100),
                    end=round(high / max_hr * 100),
                    units="%hr",
                )
            }
        return {"hr": WorkoutStepTarget(start=low, end=high, units="bpm")}
    if step.target_type == TargetType.POWER_ZONE:
        return {"power": WorkoutStepTarget(start=low, end=high, units="w")}
    return {"cadence": WorkoutStepTarget(start=low, end=high, units="rpm")}


def _to_workout_step(step: LeafStep, max_hr: int | None) -> WorkoutStep:
    duration = distance = None
    if step.duration_type == DurationType.TIME and step.duration_value:
        duration = int(step.duration_value)
    elif step.duration_type == DurationType.DISTANCE and step.duration_value:
        distance = int(step.duration_value)
    else:
        duration = 1
    return WorkoutStep(
        warmup=True if step.step_type == StepType.WARMUP else None,
        cooldown=True if step.step_type == StepType.COOLDOWN else None,
        text="Lap" if step.duration_type == DurationType.LAP_BUTTON else None,
        duration=duration,
        distance=distance,
        **_step_target(step, max_hr),
    )


def to_workout_doc(workout: Workout, max_hr: int | None = None) -> WorkoutDoc:
    steps: list[WorkoutStep] = []
    for step in workout.steps:
        if isinstance(step, RepeatStep):
            substeps = [_to_workout_step(child, max_hr) for child in step.child_steps]
            steps.append(WorkoutStep(reps=step.repeat_count, steps=substeps))
        else:
            steps.append(_to_workout_step(step, max_hr))
    return WorkoutDoc(steps=steps)


# ---------------------------------------------------------------------------
# Event
# ---------------------------------------------------------------------------


def to_intervals_event(
    workout: Workout,
    max_hr: int | None = None,
    today: date | None = None,
    pace_sec_per_km: float | None = None,
) -> IntervalsEvent:
    """Build an Intervals.icu planned event for a workout.

    Args:
        workout: The workout to export.
        max_hr: Athlete max heart rate for %HR targets.
        today: Reference date; unscheduled workouts are planned for the day after.
        pace_sec_per_km: Pace used to estimate the time of distance steps.
    """
    scheduled = workout.scheduled_date or (today or date.today()) + timedelta(days=1)
    moving_time = estimate_duration(workout, pace_sec_per_km)
    return IntervalsEvent(
        start_date_local=f"{scheduled.isoformat()}T00:00:00",
        type=_SPORT_TYPES[workout.sport_type],
        name=workout.name,
        description=build_description(workout, max_hr),
        moving_time=moving_time or None,
        indoor=workout.sport_type == SportType.CYCLING,
        external_id=f"garmin-coach-{workout.id}" if workout.id else None,
        workout_doc=to_workout_doc(workout, max_hr),
    )
