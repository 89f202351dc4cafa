"""Intervals.icu API event models.

Reference: https://intervals.icu/api/v1/docs/swagger-ui/index.html
Forum guide: https://forum.intervals.icu/t/api-access-to-intervals-icu/609
"""

from pydantic import BaseModel, Field


class WorkoutStepTarget(BaseModel):
    """A target band for a workout step (pace, heart rate, power or cadence)."""

    start: float = Field(description="Lower bound")
    end: float = Field(description="Upper bound")
    units: str = Field(description="e.g. 'secs/km', 'bpm', '%hr', 'w', 'rpm'")


class WorkoutStep(BaseModel):
    """A single step in the Intervals.icu workout_doc structure."""

    text: str | None = None
    warmup: bool | None = None
    cooldown: bool | None = None
    distance: int | None = Field(default=None, description="Distance in metres")
    duration: int | None = Field(default=None, description="Duration in seconds")
    pace: WorkoutStepTarget | None = None
    hr: WorkoutStepTarget | None = None
    power: WorkoutStepTarget | None = None
    cadence: WorkoutStepTarget | None = None
    reps: int | None = Field(
        default=None, description="Number of repetitions (for interval blocks)"
    )
    steps: list["WorkoutStep"] | None = Field(
        default=None, description="Sub-steps for interval blocks"
    )


class WorkoutDoc(BaseModel):
    """The structured workout definition used by Intervals.icu."""

    steps: list[WorkoutStep]


class IntervalsEvent(BaseModel):
    """A planned workout event for the Intervals.icu calendar.

    Upload via: POST /api/v1/athlete/{id}/events
    """

    category: str = Field(default="WORKOUT")
    start_date_local: str = Field(description="ISO datetime: YYYY-MM-DDT00:00:00")
    type: str = Field(default="Run")
    name: str
    description: str = Field(
        description="Workout steps in Intervals.icu markdown format. "
        "Server parses this to generate visual step blocks."
    )
    moving_time: int | None = Field(
        default=None, description="Estimated duration in seconds"
    )
    indoor: bool = False
    external_id: str | None = Field(
        default=None,
        description="Optional stable ID for upsert deduplication "
        "(e.g. 'garmin-coach-<workout id>')",
    )
    workout_doc: WorkoutDoc | None = Field(
        default=None,
        description="Pre-computed step structure. Provided alongside description for caching.",
    )
