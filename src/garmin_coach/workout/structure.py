"""Linear views over a structured workout: flattening and duration estimates."""

from collections.abc import Iterable

from garmin_coach.models.workout import (
    DurationType,
    LeafStep,
    RepeatStep,
    Step,
    Workout,
)


def _steps(source: Workout | Iterable[Step]) -> Iterable[Step]:
    return source.steps if isinstance(source, Workout) else source


def flatten(source: Workout | Iterable[Step]) -> list[LeafStep]:
    """Expand repeat blocks into the sequence of steps the athlete executes.

    Each child of a repeat block appears ``repeat_count`` times, children kept
    in their original order on every pass. The source is not modified.
    """
    result: list[LeafStep] = []
    for step in _steps(source):
        if isinstance(step, RepeatStep):
            for _ in range(step.repeat_count):
                result.extend(step.child_steps)
        else:
            result.append(step)
    return result


def _leaf_seconds(step: LeafStep, pace_sec_per_km: float | None) -> float:
    if step.duration_value is None:
        return 0.0
    if step.duration_type == DurationType.TIME:
        return step.duration_value
    if step.duration_type == DurationType.DISTANCE and pace_sec_per_km:
        return step.duration_value / 1000 * pace_sec_per_km
    return 0.0


def estimate_step_duration(step: Step, pace_sec_per_km: float | None = None) -> int:
    """Estimated duration of one step or repeat block, in seconds.

    Distance steps only count when ``pace_sec_per_km`` is given; lap-button
    steps never count.
    """
    if isinstance(step, RepeatStep):
        block = sum(_leaf_seconds(child, pace_sec_per_km) for child in step.child_steps)
        return round(block * step.repeat_count)
    return round(_leaf_seconds(step, pace_sec_per_km))


def estimate_duration(
    source: Workout | Iterable[Step], pace_sec_per_km: float | None = None
) -> int:
    """Estimated total workout duration in seconds.

    Time steps are exact. Distance steps are converted with
    ``pace_sec_per_km`` when one is supplied and are otherwise left out; use
    ``total_distance`` to show the raw distance alongside. The result is
    therefore approximate whenever ``is_approximate`` is true.
    """
    seconds = sum(_leaf_seconds(step, pace_sec_per_km) for step in flatten(source))
    return round(seconds)


def total_distance(source: Workout | Iterable[Step]) -> float:
    """Total distance in metres over all distance-based steps."""
    return sum(
        step.duration_value or 0.0
        for step in flatten(source)
        if step.duration_type == DurationType.DISTANCE
    )


def is_approximate(source: Workout | Iterable[Step]) -> bool:
    """True when ``estimate_duration`` had to convert or skip a step."""
    return any(step.duration_type != DurationType.TIME for step in flatten(source))
