"""Readiness factors.

Each factor scores one signal independently. Training factors read the
activity history relative to ``today``; health factors read one wearable
telemetry value and return ``None`` when that value is unavailable, so the
factor is left out instead of scored as zero.

Body Battery tiers follow the Firstbeat/Garmin model (<25, 25-49, 50-74, 75+).
Stress tiers follow Garmin's published bands (rest 0-25, low 26-50,
medium 51-75, high 76-100).
"""

import logging
from collections.abc import Iterable, Sequence
from datetime import date
from enum import Enum

from garmin_coach.models.readiness import Activity, DailyStats, FactorName, ReadinessFactor

logger = logging.getLogger(__name__)

TRAINING_MAX_SCORE = 25
HEALTH_MAX_SCORE = 10

# Intensity classification of a single activity
HIGH_HR_BPM = 160
MODERATE_HR_BPM = 140
HIGH_PACE_SEC_KM = 330  # faster than 5:30/km
HIGH_DURATION_S = 5400
MODERATE_DURATION_S = 3600

# Weekly load ratio (last 7 days vs previous 7)
LOAD_SPIKE_RATIO = 1.3
LOAD_ELEVATED_RATIO = 1.1
LOAD_DROP_RATIO = 0.5

BODY_BATTERY_HIGH = 75
BODY_BATTERY_MEDIUM = 50
BODY_BATTERY_LOW = 25

STRESS_REST = 25
STRESS_LOW = 50
STRESS_MEDIUM = 75

STEPS_NORMAL = 15000
STEPS_HIGH = 20000
STEPS_VERY_HIGH = 30000


class ActivityIntensity(str, Enum):
    HIGH = "high"
    MODERATE = "moderate"
    LOW = "low"


def classify_intensity(activity: Activity) -> ActivityIntensity:
    if activity.average_hr and activity.average_hr > HIGH_HR_BPM:
        return ActivityIntensity.HIGH
    if activity.average_pace and activity.average_pace < HIGH_PACE_SEC_KM:
        return ActivityIntensity.HIGH
    if activity.duration > HIGH_DURATION_S:
        return ActivityIntensity.HIGH
    if activity.average_hr and activity.average_hr > MODERATE_HR_BPM:
        return ActivityIntensity.MODERATE
    if activity.duration > MODERATE_DURATION_S:
        return ActivityIntensity.MODERATE
    return ActivityIntensity.LOW


def _days_ago(activity: Activity, today: date) -> int:
    return (today - activity.start_time_local.date()).days


def _window(activities: Iterable[Activity], today: date, oldest: int, newest: int = 0) -> list[Activity]:
    """Activities between ``newest`` and ``oldest`` days ago, inclusive."""
    return [a for a in activities if newest <= _days_ago(a, today) <= oldest]


def _newest_first(activities: Iterable[Activity]) -> list[Activity]:
    return sorted(activities, key=lambda a: a.start_time_local, reverse=True)


# ---------------------------------------------------------------------------
# Training factors
# ---------------------------------------------------------------------------


def weekly_load(activities: Sequence[Activity], today: date) -> ReadinessFactor:
    """Distance over the last 7 days compared with the 7 days before."""
    load_km = sum(a.distance for a in _window(activities, today, 7)) / 1000
    prev_km = sum(a.distance for a in _window(activities, today, 14, newest=8)) / 1000

    score = TRAINING_MAX_SCORE
    label = "Нормальная"
    description = f"{load_km:.1f} км за 7 дней"

    if prev_km > 0:
        ratio = load_km / prev_km
        if ratio > LOAD_SPIKE_RATIO:
            score, label = 10, "Резкий рост"
            description += f" (↑{round((ratio - 1) * 100)}% vs прошлая неделя)"
        elif ratio > LOAD_ELEVATED_RATIO:
            score, label = 18, "Повышенная"
            description += f" (↑{round((ratio - 1) * 100)}%)"
        elif ratio < LOAD_DROP_RATIO:
            score, label = 20, "Сниженная"
            description += f" (↓{round((1 - ratio) * 100)}%)"
    elif load_km > 0:
        description += " (нет данных за прошлую неделю)"
    else:
        label = "Нет нагрузки"
        description = "Нет тренировок за 7 дней"

    return ReadinessFactor(
        name=FactorName.WEEKLY_LOAD,
        score=score,
        max_score=TRAINING_MAX_SCORE,
        label=label,
        description=description,
    )


def count_consecutive_intense(activities: Sequence[Activity], today: date) -> int:
    """Length of the most recent run of high-intensity sessions on adjacent days.

    A non-intense session on the day after (or the same day as) the run ends it.
    """
    count = 0
    prev_day: date | None = None
    for activity in _newest_first(_window(activities, today, 7)):
        day = activity.start_time_local.date()
        if classify_intensity(activity) == ActivityIntensity.HIGH:
            if prev_day is None or (prev_day - day).days <= 1:
                count += 1
                prev_day = day
            else:
                break
        elif prev_day is not None and (prev_day - day).days <= 1:
            break
    return count


def consecutive_intense(activities: Sequence[Activity], today: date) -> ReadinessFactor:
    count = count_consecutive_intense(activities, today)
    if count >= 3:
        score, label = 5, f"{count} подряд"
        description = f"{count} интенсивных тренировки подряд — высокий риск"
    elif count == 2:
        score, label = 12, "2 подряд"
        description = "2 интенсивных тренировки подряд"
    elif count == 1:
        score, label = 20, "1 тяжёлая"
        description = "Последняя тренировка была интенсивной"
    else:
        score, label = TRAINING_MAX_SCORE, "Нет подряд"
        description = "Нет интенсивных тренировок подряд"

    return ReadinessFactor(
        name=FactorName.CONSECUTIVE_INTENSE,
        score=score,
        max_score=TRAINING_MAX_SCORE,
        label=label,
        description=description,
    )


def count_training_streak(activities: Sequence[Activity], today: date) -> int:
    """Number of consecutive days with activity, ending today."""
    days = {_days_ago(a, today) for a in _window(activities, today, 14)}
    streak = 0
    while streak in days:
        streak += 1
    return streak


def rest_days(activities: Sequence[Activity], today: date) -> ReadinessFactor:
    streak = count_training_streak(activities, today)
    if streak >= 6:
        score, label = 5, f"{streak}д без отдыха"
        description = f"{streak} дней подряд с тренировками — нужен отдых"
    elif streak >= 4:
        score, label = 12, f"{streak}д подряд"
        description = f"{streak} дня подряд с тренировками"
    elif streak >= 2:
        score, label = 20, f"{streak}д подряд"
        description = f"{streak} дня подряд с тренировками"
    elif streak == 1:
        score, label = 23, "Вчера отдых"
        description = "Тренировка сегодня, вчера был отдых"
    else:
        score, label = TRAINING_MAX_SCORE, "Достаточно"
        description = "Есть дни отдыха"

    return ReadinessFactor(
        name=FactorName.REST_DAYS,
        score=score,
        max_score=TRAINING_MAX_SCORE,
        label=label,
        description=description,
    )


def recovery(activities: Sequence[Activity], today: date) -> ReadinessFactor:
    """Days since the most recent high-intensity session in the last week."""
    last_hard = next(
        (
            a
            for a in _newest_first(_window(activities, today, 7))
            if classify_intensity(a) == ActivityIntensity.HIGH
        ),
        None,
    )

    if last_hard is None:
        score, label = TRAINING_MAX_SCORE, "Хорошее"
        description = "Нет интенсивных тренировок за неделю"
    else:
        days = _days_ago(last_hard, today)
        if days == 0:
            score, label = 10, "Тяжёлая сегодня"
            description = "Интенсивная тренировка сегодня"
        elif days == 1:
            score, label = 15, "Тяжёлая вчера"
            description = "Интенсивная тренировка была вчера"
        elif days == 2:
            score, label = 22, "2 дня назад"
            description = "Последняя интенсивная — 2 дня назад"
        else:
            score, label = TRAINING_MAX_SCORE, f"{days}д назад"
            description = f"Последняя интенсивная — {days} дней назад"

    return ReadinessFactor(
        name=FactorName.RECOVERY,
        score=score,
        max_score=TRAINING_MAX_SCORE,
        label=label,
        description=description,
    )


# ---------------------------------------------------------------------------
# Health factors
# ---------------------------------------------------------------------------


def stress(stress_level: int | None) -> ReadinessFactor | None:
    """Average daily stress (0-100). Garmin reports -1 or -2 when there is no data."""
    if stress_level is None or stress_level < 0:
        return None
    if stress_level <= STRESS_REST:
        score, label = 10, "Низкий"
    elif stress_level <= STRESS_LOW:
        score, label = 7, "Умеренный"
    elif stress_level <= STRESS_MEDIUM:
        score, label = 4, "Повышенный"
    else:
        score, label = 1, "Высокий"
    return ReadinessFactor(
        name=FactorName.STRESS,
        score=score,
        max_score=HEALTH_MAX_SCORE,
        label=label,
        description=f"Средний стресс за день: {stress_level}",
    )


def body_battery(level: int | None) -> ReadinessFactor | None:
    if level is None:
        return None
    if level >= BODY_BATTERY_HIGH:
        score, label = 10, "Заряжен"
    elif level >= BODY_BATTERY_MEDIUM:
        score, label = 7, "Средний"
    elif level >= BODY_BATTERY_LOW:
        score, label = 4, "Низкий"
    else:
        score, label = 1, "Истощён"
    return ReadinessFactor(
        name=FactorName.BODY_BATTERY,
        score=score,
        max_score=HEALTH_MAX_SCORE,
        label=label,
        description=f"Body Battery: {level}/100",
    )


def steps(steps_yesterday: int | None, steps_today: int | None = None) -> ReadinessFactor | None:
    """Yesterday's step count (today's as a fallback) as a fatigue signal."""
    count = steps_yesterday if steps_yesterday is not None else steps_today
    if count is None:
        return None
    when = "вчера" if steps_yesterday is not None else "сегодня"
    if count < STEPS_NORMAL:
        score, label = 10, "Норма"
    elif count < STEPS_HIGH:
        score, label = 7, "Много"
    elif count < STEPS_VERY_HIGH:
        score, label = 4, "Очень много"
    else:
        score, label = 2, "Перегрузка"
    return ReadinessFactor(
        name=FactorName.STEPS,
        score=score,
        max_score=HEALTH_MAX_SCORE,
        label=label,
        description=f"Шаги {when}: {count}",
    )


# ---------------------------------------------------------------------------
# All factors
# ---------------------------------------------------------------------------


def compute_factors(
    activities: Sequence[Activity],
    today: date,
    daily_stats: DailyStats | None = None,
) -> list[ReadinessFactor]:
    """Score every factor that has data, in declaration order."""
    factors = [
        weekly_load(activities, today),
        consecutive_intense(activities, today),
        rest_days(activities, today),
        recovery(activities, today),
    ]
    if daily_stats is None:
        logger.debug("No daily stats; health factors omitted")
        return factors

    health = {
        FactorName.STRESS: stress(daily_stats.stress_level),
        FactorName.BODY_BATTERY: body_battery(daily_stats.body_battery),
        FactorName.STEPS: steps(daily_stats.steps_yesterday, daily_stats.steps),
    }
    for name, factor in health.items():
        if factor is None:
            logger.debug("No %s reading; factor omitted", name.value)
        else:
            factors.append(factor)
    return factors
