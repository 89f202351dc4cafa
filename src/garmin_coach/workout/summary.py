"""Display lines for workout steps.

Pure formatting: nothing here looks at anything but the step it is given.
Labels are in Russian, the language of the coaching front end.
"""

from dataclasses import dataclass

from garmin_coach.models.workout import (
    DurationType,
    LeafStep,
    RepeatStep,
    Step,
    StepType,
    TargetType,
    Workout,
)

STEP_TYPE_LABELS = {
    StepType.WARMUP: "Разминка",
    StepType.INTERVAL: "Интервал",
    StepType.RECOVERY: "Восстановление",
    StepType.REST: "Отдых",
    StepType.COOLDOWN: "Заминка",
    StepType.REPEAT: "Повтор",
}

TARGET_TYPE_LABELS = {
    TargetType.NO_TARGET: "Без цели",
    TargetType.PACE_ZONE: "Темп",
    TargetType.HEART_RATE_ZONE: "Пульс",
    TargetType.POWER_ZONE: "Мощность",
    TargetType.CADENCE: "Каденс",
}

LAP_BUTTON_LABEL = "по кнопке"


@dataclass(frozen=True)
class DisplayLine:
    """One rendered step: label, duration text, repeat badge and target text."""

    label: str
    duration: str = ""
    badge: str = ""
    target: str = ""

    def __str__(self) -> str:
        return " ".join(part for part in (self.label, self.duration, self.badge, self.target) if part)


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------


def _fmt_number(value: float) -> str:
    return str(int(value)) if value == int(value) else f"{value:g}"


def fmt_time(seconds: float) -> str:
    """Whole minutes render as ``N мин``; anything else as ``M:SS``."""
    total = int(round(seconds))
    mins, secs = divmod(total, 60)
    if secs == 0 and mins > 0:
        return f"{mins} мин"
    return f"{mins}:{secs:02d}"


def fmt_distance(metres: float) -> str:
    """1000 m and above render in km with one decimal; shorter in metres."""
    if metres >= 1000:
        return f"{metres / 1000:.1f} км"
    return f"{_fmt_number(metres)} м"


def fmt_pace(sec_per_km: float) -> str:
    mins, secs = divmod(int(round(sec_per_km)), 60)
    return f"{mins}:{secs:02d}"


def _fmt_duration(step: LeafStep) -> str:
    if step.duration_type == DurationType.LAP_BUTTON:
        return LAP_BUTTON_LABEL
    if step.duration_value is None:
        return ""
    if step.duration_type == DurationType.TIME:
        return fmt_time(step.duration_value)
    return fmt_distance(step.duration_value)


def _fmt_target(step: LeafStep) -> str:
    low, high = step.target_value_low, step.target_value_high
    if not step.has_target or low is None or high is None:
        return ""
    label = TARGET_TYPE_LABELS[step.target_type]
    if step.target_type == TargetType.PACE_ZONE:
        return f"{label} {fmt_pace(low)}-{fmt_pace(high)}/км"
    if low == high:
        bounds = _fmt_number(low)
    else:
        bounds = f"{_fmt_number(low)}-{_fmt_number(high)}"
    if step.target_type == TargetType.POWER_ZONE:
        return f"{label} {bounds} Вт"
    return f"{label} {bounds}"


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def summarize(step: Step) -> DisplayLine:
    """Render one step for display."""
    label = STEP_TYPE_LABELS[step.step_type]
    if isinstance(step, RepeatStep):
        return DisplayLine(label=label, badge=f"×{step.repeat_count}")
    return DisplayLine(label=label, duration=_fmt_duration(step), target=_fmt_target(step))


def summarize_workout(workout: Workout) -> list[DisplayLine]:
    """Render the top-level steps of a workout, in order."""
    return [summarize(step) for step in workout.steps]
