"""
Deterioration pattern detection over a health observation history.

Three independent detectors run over the date-ordered history:
- Vital signs: least-squares slope per vital, graded against per-vital thresholds
- Symptoms: share of the most recent observations reporting each symptom
- Overall condition: slope of the 1-5 self-rating series

For vitals a rising value is a worsening one, so a positive slope reads as
declining health. For the overall rating higher is better, so the sign flips.
"""

from collections import Counter
from collections.abc import Sequence

import structlog
from pydantic import BaseModel, ConfigDict

from healthrisk.domain.models import (
    AlertLevel,
    HealthDeteriorationPattern,
    HealthObservation,
    PatternSeverity,
    TrendDirection,
    VitalSign,
)

logger = structlog.get_logger(__name__)

MIN_OBSERVATIONS = 7
MIN_VITAL_SAMPLES = 5
SYMPTOM_WINDOW = 3
STABLE_SLOPE = 0.1


class SlopeThresholds(BaseModel):
    model_config = ConfigDict(frozen=True)

    moderate: float
    severe: float


VITAL_THRESHOLDS: dict[VitalSign, SlopeThresholds] = {
    VitalSign.SYSTOLIC_BP: SlopeThresholds(moderate=2.0, severe=5.0),
    VitalSign.DIASTOLIC_BP: SlopeThresholds(moderate=1.5, severe=3.0),
    VitalSign.HEART_RATE: SlopeThresholds(moderate=3.0, severe=8.0),
    VitalSign.WEIGHT: SlopeThresholds(moderate=0.5, severe=1.5),
    VitalSign.BLOOD_SUGAR: SlopeThresholds(moderate=5.0, severe=15.0),
}
DEFAULT_THRESHOLDS = SlopeThresholds(moderate=1.0, severe=3.0)


def calculate_trend(values: Sequence[float]) -> float:
    """Ordinary least-squares slope of ``values`` against their 0-based index."""
    n = len(values)
    if n < 2:
        return 0.0

    sum_x = n * (n - 1) / 2
    sum_y = sum(values)
    sum_xy = sum(index * value for index, value in enumerate(values))
    sum_x2 = n * (n - 1) * (2 * n - 1) / 6

    return (n * sum_xy - sum_x * sum_y) / (n * sum_x2 - sum_x * sum_x)


def thresholds_for(vital_sign: str) -> SlopeThresholds:
    try:
        return VITAL_THRESHOLDS[VitalSign(vital_sign)]
    except ValueError:
        return DEFAULT_THRESHOLDS


def assess_trend_severity(vital_sign: str, slope: float) -> PatternSeverity:
    """
    Grade a slope; reaching a threshold counts as crossing it.

    A slope exactly equal to a threshold is graded upward, so a systolic
    slope of 2 is moderate rather than mild.
    """
    thresholds = thresholds_for(vital_sign)
    magnitude = abs(slope)
    if magnitude >= thresholds.severe:
        return PatternSeverity.SEVERE
    if magnitude >= thresholds.moderate:
        return PatternSeverity.MODERATE
    return PatternSeverity.MILD


def _alert_for(severity: PatternSeverity) -> AlertLevel:
    match severity:
        case PatternSeverity.SEVERE:
            return AlertLevel.CRITICAL
        case PatternSeverity.MODERATE:
            return AlertLevel.WARNING
        case _:
            return AlertLevel.INFO


def analyze_vital_sign_trends(
    observations: Sequence[HealthObservation],
) -> list[HealthDeteriorationPattern]:
    patterns: list[HealthDeteriorationPattern] = []

    for vital_sign in VitalSign:
        values = [
            value
            for observation in observations
            if (value := observation.vital_signs.get(vital_sign.value)) is not None
        ]
        if len(values) < MIN_VITAL_SAMPLES:
            continue

        slope = calculate_trend(values)
        severity = assess_trend_severity(vital_sign.value, slope)
        if severity == PatternSeverity.MILD:
            continue

        if slope > STABLE_SLOPE:
            direction = TrendDirection.DECLINING
        elif slope < -STABLE_SLOPE:
            direction = TrendDirection.IMPROVING
        else:
            direction = TrendDirection.STABLE

        patterns.append(
            HealthDeteriorationPattern(
                pattern_type=f"{vital_sign.value}_trend",
                severity=severity,
                trend_direction=direction,
                affected_metrics=[vital_sign.value],
                timeframe=f"{len(observations)} days",
                confidence=min(0.9, len(values) / 10),
                alert_level=_alert_for(severity),
            )
        )

    return patterns


def analyze_symptom_patterns(
    observations: Sequence[HealthObservation],
) -> list[HealthDeteriorationPattern]:
    """Flag symptoms reported in more than half of the most recent observations."""
    lifetime_counts: Counter[str] = Counter()
    recent_counts: Counter[str] = Counter()
    window_start = len(observations) - SYMPTOM_WINDOW

    for index, observation in enumerate(observations):
        lifetime_counts.update(observation.symptoms)
        if index >= window_start:
            recent_counts.update(observation.symptoms)

    window = min(SYMPTOM_WINDOW, len(observations))
    patterns: list[HealthDeteriorationPattern] = []
    for symptom, recent in recent_counts.items():
        frequency = recent / window
        if frequency <= 0.5:
            continue
        patterns.append(
            HealthDeteriorationPattern(
                pattern_type="increasing_symptoms",
                severity=PatternSeverity.SEVERE if frequency > 0.8 else PatternSeverity.MODERATE,
                trend_direction=TrendDirection.DECLINING,
                affected_metrics=[symptom],
                timeframe=f"{SYMPTOM_WINDOW} days",
                confidence=0.7,
                alert_level=AlertLevel.WARNING if frequency > 0.8 else AlertLevel.INFO,
            )
        )

    logger.debug(
        "symptom_patterns_analyzed",
        distinct_symptoms=len(lifetime_counts),
        recent_symptoms=len(recent_counts),
        flagged=len(patterns),
    )
    return patterns


def analyze_overall_condition_trend(
    observations: Sequence[HealthObservation],
) -> HealthDeteriorationPattern | None:
    ratings = [observation.overall_condition for observation in observations]
    if not ratings:
        return None

    slope = calculate_trend(ratings)
    if abs(slope) < STABLE_SLOPE:
        return None

    average = sum(ratings) / len(ratings)
    if average < 2.5:
        severity = PatternSeverity.SEVERE
    elif average < 3.5:
        severity = PatternSeverity.MODERATE
    else:
        severity = PatternSeverity.MILD

    if slope < -STABLE_SLOPE:
        direction = TrendDirection.DECLINING
    elif slope > STABLE_SLOPE:
        direction = TrendDirection.IMPROVING
    else:
        direction = TrendDirection.STABLE

    return HealthDeteriorationPattern(
        pattern_type="overall_health_trend",
        severity=severity,
        trend_direction=direction,
        affected_metrics=["overall_condition"],
        timeframe=f"{len(observations)} days",
        confidence=min(0.9, len(ratings) / 14),
        alert_level=AlertLevel.WARNING if slope < -0.2 else AlertLevel.INFO,
    )


def analyze_health_trends(
    observations: Sequence[HealthObservation],
) -> list[HealthDeteriorationPattern]:
    """
    Detect deterioration patterns in a health history.

    Needs at least a week of observations; shorter histories yield no patterns.
    The input is not modified; a date-sorted copy is analyzed.
    """
    if len(observations) < MIN_OBSERVATIONS:
        return []

    ordered = sorted(observations, key=lambda observation: observation.date)

    patterns = analyze_vital_sign_trends(ordered)
    patterns.extend(analyze_symptom_patterns(ordered))
    overall = analyze_overall_condition_trend(ordered)
    if overall is not None:
        patterns.append(overall)

    return patterns


def highest_alert_level(patterns: Sequence[HealthDeteriorationPattern]) -> AlertLevel:
    levels = {pattern.alert_level for pattern in patterns}
    if AlertLevel.CRITICAL in levels:
        return AlertLevel.CRITICAL
    if AlertLevel.WARNING in levels:
        return AlertLevel.WARNING
    return AlertLevel.INFO


def patterns_confidence(patterns: Sequence[HealthDeteriorationPattern]) -> float:
    """Mean confidence across patterns, 0 when nothing was detected."""
    if not patterns:
        return 0.0
    return sum(pattern.confidence for pattern in patterns) / len(patterns)
