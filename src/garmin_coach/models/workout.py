"""Structured workout models.

A workout is an ordered list of steps. Leaf steps carry a duration and an
optional target; repeat steps group leaf steps executed ``repeatCount`` times.
Only one level of nesting exists: ``RepeatStep.child_steps`` holds ``LeafStep``
values, so a repeat inside a repeat cannot be built.

Field names serialise to camelCase to match the JSON produced by the
plan-generation service and the favorites store.
"""

from datetime import date, datetime
from enum import Enum
from typing import Annotated

from pydantic import Discriminator, Field, Tag, field_validator

from garmin_coach.models.base import CamelModel


class _WireEnum(str, Enum):
    """String enum that also accepts hyphenated spellings (``lap-button``)."""

    @classmethod
    def _missing_(cls, value: object) -> "_WireEnum | None":
        if isinstance(value, str):
            dotted = value.strip().lower().replace("-", ".").replace("_", ".")
            for member in cls:
                if member.value == dotted:
                    return member
        return None


class StepType(_WireEnum):
    WARMUP = "warmup"
    INTERVAL = "interval"
    RECOVERY = "recovery"
    REST = "rest"
    COOLDOWN = "cooldown"
    REPEAT = "repeat"


class DurationType(_WireEnum):
    TIME = "time"  # seconds
    DISTANCE = "distance"  # metres
    LAP_BUTTON = "lap.button"


class TargetType(_WireEnum):
    NO_TARGET = "no.target"
    HEART_RATE_ZONE = "heart.rate.zone"  # bpm
    PACE_ZONE = "pace.zone"  # sec/km
    POWER_ZONE = "power.zone"  # watts
    CADENCE = "cadence"  # rpm


class Intensity(_WireEnum):
    ACTIVE = "active"
    RESTING = "resting"


class SportType(_WireEnum):
    RUNNING = "running"
    CYCLING = "cycling"
    SWIMMING = "swimming"


class LeafStep(CamelModel):
    """A single executable step (anything except a repeat block)."""

    step_id: int | None = None
    step_order: int | None = None
    step_type: StepType
    duration_type: DurationType
    duration_value: float | None = Field(
        default=None, description="Seconds for time, metres for distance, None for lap button"
    )
    target_type: TargetType = TargetType.NO_TARGET
    target_value_low: float | None = None
    target_value_high: float | None = None
    intensity: Intensity = Intensity.ACTIVE

    @field_validator("step_type")
    @classmethod
    def _not_repeat(cls, value: StepType) -> StepType:
        if value == StepType.REPEAT:
            raise ValueError("a leaf step cannot be a repeat block")
        return value

    @property
    def has_target(self) -> bool:
        return (
            self.target_type != TargetType.NO_TARGET
            and self.target_value_low is not None
            and self.target_value_high is not None
        )


class RepeatStep(CamelModel):
    """A block of leaf steps executed ``repeat_count`` times in order.

    A repeat step has no duration or target of its own; the fixed fields below
    only exist so the JSON shape matches a leaf step.
    """

    step_id: int | None = None
    step_order: int | None = None
    step_type: StepType = StepType.REPEAT
    repeat_count: int = Field(ge=1)
    child_steps: tuple[LeafStep, ...] = Field(min_length=1)
    duration_type: DurationType = DurationType.LAP_BUTTON
    duration_value: None = None
    target_type: TargetType = TargetType.NO_TARGET
    target_value_low: None = None
    target_value_high: None = None
    intensity: Intensity = Intensity.ACTIVE

    @field_validator("step_type")
    @classmethod
    def _is_repeat(cls, value: StepType) -> StepType:
        if value != StepType.REPEAT:
            raise ValueError("a repeat block must have stepType 'repeat'")
        return value


def _step_kind(value: object) -> str:
    if isinstance(value, dict):
        raw = value.get("stepType", value.get("step_type"))
    else:
        raw = getattr(value, "step_type", None)
    try:
        step_type = StepType(raw)
    except (ValueError, TypeError):
        return "leaf"
    return "repeat" if step_type == StepType.REPEAT else "leaf"


Step = Annotated[
    Annotated[LeafStep, Tag("leaf")] | Annotated[RepeatStep, Tag("repeat")],
    Discriminator(_step_kind),
]


class _WorkoutFields(CamelModel):
    id: str | None = None
    name: str = Field(min_length=1)
    description: str = ""
    sport_type: SportType = SportType.RUNNING
    scheduled_date: date | None = None
    steps: tuple[Step, ...] = Field(min_length=1)


class Workout(_WorkoutFields):
    """A structured training session, as created by the plan generator."""

    sent_to_garmin: bool = False
    sent_to_intervals: bool = False
    garmin_workout_id: int | None = None
    intervals_event_id: str | None = None

    def mark_sent_to_garmin(self, workout_id: int | None = None) -> "Workout":
        """Return a copy flagged as pushed to Garmin Connect."""
        update: dict[str, object] = {"sent_to_garmin": True}
        if workout_id is not None:
            update["garmin_workout_id"] = workout_id
        return self.model_copy(update=update)

    def mark_sent_to_intervals(self, event_id: str | None = None) -> "Workout":
        """Return a copy flagged as pushed to Intervals.icu."""
        update: dict[str, object] = {"sent_to_intervals": True}
        if event_id is not None:
            update["intervals_event_id"] = event_id
        return self.model_copy(update=update)


class FavoriteWorkout(_WorkoutFields):
    """A saved copy of a workout. It does not reference the source workout."""

    saved_at: datetime

    @classmethod
    def from_workout(cls, workout: Workout, saved_at: datetime) -> "FavoriteWorkout":
        fields = workout.model_dump(
            include=set(_WorkoutFields.model_fields) - {"id", "scheduled_date"}
        )
        return cls(**fields, saved_at=saved_at)

    def to_workout(self, scheduled_date: date | None = None) -> Workout:
        """Promote the favorite to a new, unsent workout."""
        fields = self.model_dump(
            include=set(_WorkoutFields.model_fields) - {"id", "scheduled_date"}
        )
        return Workout(**fields, scheduled_date=scheduled_date)
