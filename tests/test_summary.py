"""Tests for step display lines."""

from garmin_coach.models.workout import (
    DurationType,
    LeafStep,
    RepeatStep,
    StepType,
    TargetType,
    Workout,
)
from garmin_coach.workout.summary import (
    DisplayLine,
    fmt_distance,
    fmt_pace,
    fmt_time,
    summarize,
    summarize_workout,
)


def _interval(**kwargs: object) -> LeafStep:
    fields: dict[str, object] = {
        "step_type": StepType.INTERVAL,
        "duration_type": DurationType.TIME,
        "duration_value": 300,
    }
    fields.update(kwargs)
    return LeafStep(**fields)  # type: ignore[arg-type]


class TestFormatting:
    def test_time_with_seconds(self) -> None:
        assert fmt_time(125) == "2:05"

    def test_time_whole_minutes(self) -> None:
        assert fmt_time(120) == "2 мин"

    def test_time_under_a_minute(self) -> None:
        assert fmt_time(45) == "0:45"

    def test_distance_metres(self) -> None:
        assert fmt_distance(950) == "950 м"

    def test_distance_km(self) -> None:
        assert fmt_distance(1500) == "1.5 км"

    def test_distance_exact_km(self) -> None:
        assert fmt_distance(1000) == "1.0 км"

    def test_pace(self) -> None:
        assert fmt_pace(270) == "4:30"


class TestSummarize:
    def test_warmup(self) -> None:
        line = summarize(_interval(step_type=StepType.WARMUP, duration_value=600))
        assert line == DisplayLine(label="Разминка", duration="10 мин")
        assert str(line) == "Разминка 10 мин"

    def test_lap_button(self) -> None:
        step = LeafStep(step_type=StepType.COOLDOWN, duration_type=DurationType.LAP_BUTTON)
        assert summarize(step).duration == "по кнопке"

    def test_distance(self) -> None:
        step = _interval(duration_type=DurationType.DISTANCE, duration_value=400)
        assert summarize(step).duration == "400 м"

    def test_repeat_badge(self) -> None:
        block = RepeatStep(repeat_count=4, child_steps=[_interval()])
        line = summarize(block)
        assert line.label == "Повтор"
        assert line.badge == "×4"
        assert line.duration == ""

    def test_pace_target(self) -> None:
        step = _interval(
            target_type=TargetType.PACE_ZONE, target_value_low=270, target_value_high=290
        )
        assert summarize(step).target == "Темп 4:30-4:50/км"

    def test_heart_rate_target(self) -> None:
        step = _interval(
            target_type=TargetType.HEART_RATE_ZONE, target_value_low=140, target_value_high=150
        )
        assert summarize(step).target == "Пульс 140-150"

    def test_power_target(self) -> None:
        step = _interval(
            target_type=TargetType.POWER_ZONE, target_value_low=200, target_value_high=250
        )
        assert summarize(step).target == "Мощность 200-250 Вт"

    def test_no_target(self) -> None:
        assert summarize(_interval()).target == ""

    def test_recovery_line(self) -> None:
        step = _interval(step_type=StepType.RECOVERY, duration_value=90)
        assert str(summarize(step)) == "Восстановление 1:30"


class TestSummarizeWorkout:
    def test_top_level_lines(self, workout: Workout) -> None:
        lines = summarize_workout(workout)
        assert [line.label for line in lines] == ["Разминка", "Повтор", "Заминка"]
        assert lines[1].badge == "×4"
        assert lines[2].duration == "по кнопке"
