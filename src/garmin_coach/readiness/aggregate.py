"""Composite readiness score.

The composite is the sum of factor scores. When the active factors' maximum
scores do not add up to 100 (health telemetry present or missing), the sum is
rescaled to the 0-100 band so the level thresholds keep their meaning.
"""

import logging
from collections.abc import Iterable, Sequence
from datetime import date

from garmin_coach.models.readiness import (
    Activity,
    DailyStats,
    ReadinessFactor,
    ReadinessLevel,
    ReadinessResult,
)
from garmin_coach.readiness.factors import compute_factors

logger = logging.getLogger(__name__)

SCORE_MAX = 100
GREEN_THRESHOLD = 70
YELLOW_THRESHOLD = 40
MAX_LIMITING_FACTORS = 2

LEVEL_LABELS = {
    ReadinessLevel.GREEN: "Готов к тренировке",
    ReadinessLevel.YELLOW: "Лёгкая нагрузка",
    ReadinessLevel.RED: "Нужен отдых",
}

LEVEL_SUMMARIES = {
    ReadinessLevel.GREEN: "Организм восстановлен, можно тренироваться с полной нагрузкой.",
    ReadinessLevel.YELLOW: "Рекомендуется восстановительная или лёгкая тренировка.",
    ReadinessLevel.RED: (
        "Высокая накопленная нагрузка. "
        "Рекомендуется день отдыха или очень лёгкая активность."
    ),
}


def classify(score: int) -> ReadinessLevel:
    if score >= GREEN_THRESHOLD:
        return ReadinessLevel.GREEN
    if score >= YELLOW_THRESHOLD:
        return ReadinessLevel.YELLOW
    return ReadinessLevel.RED


def composite_score(factors: Iterable[ReadinessFactor]) -> int:
    """Sum of factor scores in the 0-100 band (rounded half up when rescaled)."""
    factors = list(factors)
    total = sum(f.score for f in factors)
    total_max = sum(f.max_score for f in factors)
    if total_max == 0:
        return 0
    if total_max != SCORE_MAX:
        logger.debug("Rescaling readiness %d/%d to 0-100", total, total_max)
        total = (total * SCORE_MAX * 2 + total_max) // (total_max * 2)
    return max(0, min(SCORE_MAX, total))


def limiting_factors(
    factors: Iterable[ReadinessFactor], limit: int = MAX_LIMITING_FACTORS
) -> list[ReadinessFactor]:
    """Factors below their maximum, weakest (by score/maxScore) first.

    Equal ratios keep the factor declaration order.
    """
    below_max = [f for f in factors if f.score < f.max_score]
    below_max.sort(key=lambda f: (f.ratio, f.name.order))
    return below_max[:limit]


def build_summary(level: ReadinessLevel, factors: Iterable[ReadinessFactor]) -> str:
    parts = [LEVEL_SUMMARIES[level]]
    weakest = limiting_factors(factors)
    if weakest:
        details = "; ".join(f"{f.display_name}: {f.description}" for f in weakest)
        parts.append(f"Ограничивает: {details}.")
    return " ".join(parts)


def group_factors(
    factors: Iterable[ReadinessFactor],
) -> tuple[list[ReadinessFactor], list[ReadinessFactor]]:
    """Split factors into (training, health) groups for display, order kept."""
    training: list[ReadinessFactor] = []
    health: list[ReadinessFactor] = []
    for factor in factors:
        (health if factor.name.is_health else training).append(factor)
    return training, health


def aggregate(
    factors: Sequence[ReadinessFactor], daily_stats: DailyStats | None = None
) -> ReadinessResult:
    """Combine factor scores into a ``ReadinessResult``.

    The score and level do not depend on factor order; factors are returned
    sorted by declaration order.
    """
    ordered = sorted(factors, key=lambda f: f.name.order)
    score = composite_score(ordered)
    level = classify(score)
    return ReadinessResult(
        score=score,
        level=level,
        label=LEVEL_LABELS[level],
        factors=ordered,
        summary=build_summary(level, ordered),
        daily_stats=daily_stats,
    )


def calculate_readiness(
    activities: Sequence[Activity],
    daily_stats: DailyStats | None = None,
    today: date | None = None,
) -> ReadinessResult:
    """Score readiness from training history and optional telemetry."""
    today = today or date.today()
    factors = compute_factors(activities, today, daily_stats)
    result = aggregate(factors, daily_stats)
    logger.info(
        "Readiness %d/100 (%s) from %d factor(s)",
        result.score,
        result.level.value,
        len(factors),
    )
    return result
