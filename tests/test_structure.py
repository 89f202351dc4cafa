"""Tests for flattening and duration estimates."""

from garmin_coach.models.workout import (
    DurationType,
    LeafStep,
    RepeatStep,
    StepType,
    Workout,
)
from garmin_coach.workout.structure import (
    estimate_duration,
    estimate_step_duration,
    flatten,
    is_approximate,
    total_distance,
)


def _timed(step_type: StepType, seconds: float) -> LeafStep:
    return LeafStep(step_type=step_type, duration_type=DurationType.TIME, duration_value=seconds)


class TestFlatten:
    def test_expands_repeat(self, workout: Workout) -> None:
        steps = flatten(workout)
        assert len(steps) == 1 + 4 * 2 + 1
        assert [s.step_type for s in steps[1:5]] == [
            StepType.INTERVAL,
            StepType.RECOVERY,
            StepType.INTERVAL,
            StepType.RECOVERY,
        ]
        assert steps[0].step_type == StepType.WARMUP
        assert steps[-1].step_type == StepType.COOLDOWN

    def test_source_unchanged(self, workout: Workout) -> None:
        flatten(workout)
        assert len(workout.steps) == 3
        assert isinstance(workout.steps[1], RepeatStep)

    def test_accepts_step_list(self) -> None:
        block = RepeatStep(repeat_count=3, child_steps=[_timed(StepType.INTERVAL, 60)])
        assert len(flatten([block])) == 3


class TestEstimates:
    def test_repeat_block_duration(self) -> None:
        block = RepeatStep(
            repeat_count=4,
            child_steps=[_timed(StepType.INTERVAL, 120), _timed(StepType.RECOVERY, 180)],
        )
        assert estimate_step_duration(block) == 1200

    def test_leaf_duration(self) -> None:
        assert estimate_step_duration(_timed(StepType.WARMUP, 600)) == 600

    def test_distance_steps_skipped_without_pace(self, workout: Workout) -> None:
        # 600 warmup + 4 x 90 recovery; distance and lap-button steps add nothing
        assert estimate_duration(workout) == 960

    def test_distance_steps_converted_with_pace(self, workout: Workout) -> None:
        # 1000 m at 300 s/km = 300 s per interval
        assert estimate_duration(workout, pace_sec_per_km=300) == 600 + 4 * (300 + 90)

    def test_total_distance(self, workout: Workout) -> None:
        assert total_distance(workout) == 4000

    def test_approximate_when_not_all_timed(self, workout: Workout) -> None:
        assert is_approximate(workout)

    def test_exact_when_all_timed(self) -> None:
        workout = Workout(
            name="Tempo",
            steps=[_timed(StepType.WARMUP, 600), _timed(StepType.INTERVAL, 1200)],
        )
        assert not is_approximate(workout)
        assert estimate_duration(workout) == 1800
        assert total_distance(workout) == 0
