"""Readiness models: training-history input, health telemetry and the scored result.

The JSON shape matches the readiness service response consumed by the front end.
"""

from datetime import datetime, timedelta
from enum import Enum

from pydantic import Field, field_validator, model_validator

from garmin_coach.models.base import CamelModel


class FactorName(str, Enum):
    """Readiness factors in declaration order (also display and tie-break order)."""

    WEEKLY_LOAD = "weeklyLoad"
    CONSECUTIVE_INTENSE = "consecutiveIntense"
    REST_DAYS = "restDays"
    RECOVERY = "recovery"
    STRESS = "stress"
    BODY_BATTERY = "bodyBattery"
    STEPS = "steps"

    @property
    def order(self) -> int:
        return list(FactorName).index(self)

    @property
    def is_health(self) -> bool:
        return self in HEALTH_FACTORS


TRAINING_FACTORS = frozenset(
    {
        FactorName.WEEKLY_LOAD,
        FactorName.CONSECUTIVE_INTENSE,
        FactorName.REST_DAYS,
        FactorName.RECOVERY,
    }
)
HEALTH_FACTORS = frozenset({FactorName.STRESS, FactorName.BODY_BATTERY, FactorName.STEPS})

FACTOR_DISPLAY_NAMES = {
    FactorName.WEEKLY_LOAD: "Нагрузка 7д",
    FactorName.CONSECUTIVE_INTENSE: "Интенсивность",
    FactorName.REST_DAYS: "Дни отдыха",
    FactorName.RECOVERY: "Восстановление",
    FactorName.STRESS: "Стресс",
    FactorName.BODY_BATTERY: "Body Battery",
    FactorName.STEPS: "Шаги",
}


class ReadinessLevel(str, Enum):
    GREEN = "green"
    YELLOW = "yellow"
    RED = "red"


class Activity(CamelModel):
    """A completed activity from the athlete's training history."""

    activity_id: int
    activity_name: str = ""
    activity_type: str = "running"
    distance: float = Field(default=0.0, ge=0, description="Metres")
    duration: float = Field(default=0.0, ge=0, description="Seconds")
    start_time_local: datetime
    average_hr: float | None = Field(default=None, alias="averageHR")
    max_hr: float | None = Field(default=None, alias="maxHR")
    average_pace: float | None = Field(default=None, description="Seconds per km")

    @field_validator("start_time_local")
    @classmethod
    def _wall_clock(cls, value: datetime) -> datetime:
        """Keep local wall-clock time; drop any UTC offset so activities compare."""
        return value.replace(tzinfo=None)


class DailyStats(CamelModel):
    """Wearable telemetry snapshot. ``None`` means the reading is unavailable."""

    stress_level: int | None = None
    body_battery: int | None = None
    steps: int | None = None
    steps_yesterday: int | None = None


class ReadinessFactor(CamelModel):
    name: FactorName
    score: int = Field(ge=0)
    max_score: int = Field(gt=0)
    label: str
    description: str = ""

    @model_validator(mode="after")
    def _score_within_max(self) -> "ReadinessFactor":
        if self.score > self.max_score:
            raise ValueError(f"score {self.score} exceeds maxScore {self.max_score}")
        return self

    @property
    def ratio(self) -> float:
        return self.score / self.max_score

    @property
    def display_name(self) -> str:
        return FACTOR_DISPLAY_NAMES[self.name]


class ReadinessResult(CamelModel):
    """Composite readiness score. Treated as an immutable snapshot."""

    score: int = Field(ge=0, le=100)
    level: ReadinessLevel
    label: str
    factors: tuple[ReadinessFactor, ...]
    summary: str
    daily_stats: DailyStats | None = None

    def is_stale(
        self,
        fetched_at: datetime,
        now: datetime,
        stale_after: timedelta = timedelta(minutes=5),
    ) -> bool:
        """True once the result is older than the staleness window."""
        return now - fetched_at >= stale_after
