"""
Tests for deterioration trend detection.

Covers:
- Least-squares slope calculation
- Per-vital severity thresholds and the fallback for unknown vitals
- Vital, symptom and overall-condition detectors
- Minimum history length and date ordering
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Any

import pytest
from hypothesis import given
from hypothesis import strategies as st

from healthrisk.domain.models import (
    AlertLevel,
    HealthDeteriorationPattern,
    HealthObservation,
    PatternSeverity,
    TrendDirection,
)
from healthrisk.services.trend_detection import (
    DEFAULT_THRESHOLDS,
    analyze_health_trends,
    analyze_overall_condition_trend,
    analyze_symptom_patterns,
    assess_trend_severity,
    calculate_trend,
    highest_alert_level,
    patterns_confidence,
    thresholds_for,
)

START = datetime(2025, 1, 1, 8, tzinfo=UTC)


def history(count: int, **series: list[Any]) -> list[HealthObservation]:
    """Daily observations; each keyword is a per-day list for that field or vital."""
    symptoms = series.pop("symptoms", [[]] * count)
    ratings = series.pop("overall_condition", [3.0] * count)
    return [
        HealthObservation(
            date=START + timedelta(days=day),
            vital_signs={name: values[day] for name, values in series.items()},
            symptoms=symptoms[day],
            overall_condition=ratings[day],
        )
        for day in range(count)
    ]


def pattern(**fields: Any) -> HealthDeteriorationPattern:
    defaults: dict[str, Any] = {
        "pattern_type": "x",
        "severity": PatternSeverity.MILD,
        "trend_direction": TrendDirection.STABLE,
        "affected_metrics": ["x"],
        "timeframe": "7 days",
        "confidence": 0.5,
        "alert_level": AlertLevel.INFO,
    }
    return HealthDeteriorationPattern(**{**defaults, **fields})


class TestCalculateTrend:
    def test_linear_series(self) -> None:
        assert calculate_trend([120, 122, 124, 126, 128, 130, 132]) == pytest.approx(2.0)

    def test_flat_series(self) -> None:
        assert calculate_trend([5, 5, 5, 5]) == 0.0

    @pytest.mark.parametrize("values", [[], [42.0]])
    def test_too_short_series_is_flat(self, values: list[float]) -> None:
        assert calculate_trend(values) == 0.0

    @given(
        intercept=st.floats(min_value=-100, max_value=100),
        slope=st.floats(min_value=-10, max_value=10),
        n=st.integers(min_value=2, max_value=30),
    )
    def test_recovers_exact_line(self, intercept: float, slope: float, n: int) -> None:
        values = [intercept + slope * x for x in range(n)]

        assert calculate_trend(values) == pytest.approx(slope, abs=1e-6)


class TestSeverityThresholds:
    @pytest.mark.parametrize(
        ("vital", "slope", "severity"),
        [
            ("systolic_bp", 1.9, PatternSeverity.MILD),
            ("systolic_bp", 2.0, PatternSeverity.MODERATE),
            ("systolic_bp", 4.9, PatternSeverity.MODERATE),
            ("systolic_bp", 5.0, PatternSeverity.SEVERE),
            ("systolic_bp", -5.0, PatternSeverity.SEVERE),
            ("diastolic_bp", 1.5, PatternSeverity.MODERATE),
            ("heart_rate", 8.5, PatternSeverity.SEVERE),
            ("weight", 0.6, PatternSeverity.MODERATE),
            ("blood_sugar", 4.9, PatternSeverity.MILD),
            ("temperature", 1.0, PatternSeverity.MODERATE),
            ("temperature", 3.0, PatternSeverity.SEVERE),
        ],
    )
    def test_grading(self, vital: str, slope: float, severity: PatternSeverity) -> None:
        assert assess_trend_severity(vital, slope) == severity

    def test_unknown_vital_uses_default_thresholds(self) -> None:
        assert thresholds_for("oxygen_saturation") == DEFAULT_THRESHOLDS
        assert (DEFAULT_THRESHOLDS.moderate, DEFAULT_THRESHOLDS.severe) == (1.0, 3.0)


class TestVitalSignTrends:
    def test_rising_systolic_reads_as_declining(self) -> None:
        observations = history(7, systolic_bp=[120, 122, 124, 126, 128, 130, 132])

        [found] = analyze_health_trends(observations)

        assert found.pattern_type == "systolic_bp_trend"
        assert found.severity == PatternSeverity.MODERATE
        assert found.alert_level == AlertLevel.WARNING
        assert found.trend_direction == TrendDirection.DECLINING
        assert found.affected_metrics == ["systolic_bp"]
        assert found.timeframe == "7 days"
        assert found.confidence == pytest.approx(0.7)

    def test_falling_weight_reads_as_improving(self) -> None:
        observations = history(8, weight=[100 - 2 * day for day in range(8)])

        [found] = analyze_health_trends(observations)

        assert found.trend_direction == TrendDirection.IMPROVING
        assert found.severity == PatternSeverity.SEVERE
        assert found.alert_level == AlertLevel.CRITICAL

    def test_vitals_with_few_samples_are_skipped(self) -> None:
        readings = [None, None, None, 130, 140, 150, 160]

        assert analyze_health_trends(history(7, systolic_bp=readings)) == []

    def test_mild_trends_not_reported(self) -> None:
        assert analyze_health_trends(history(7, heart_rate=[70, 71, 72, 73, 74, 75, 76])) == []

    def test_confidence_capped(self) -> None:
        observations = history(12, blood_sugar=[90 + 20 * day for day in range(12)])

        [found] = analyze_health_trends(observations)

        assert found.confidence == 0.9
        assert found.timeframe == "12 days"


class TestSymptomPatterns:
    def test_symptom_in_every_recent_observation_is_severe(self) -> None:
        symptoms = [[]] * 4 + [["headache"], ["headache", "nausea"], ["headache"]]

        patterns = analyze_symptom_patterns(history(7, symptoms=symptoms))

        [headache] = [p for p in patterns if p.affected_metrics == ["headache"]]
        assert headache.pattern_type == "increasing_symptoms"
        assert headache.severity == PatternSeverity.SEVERE
        assert headache.alert_level == AlertLevel.WARNING
        assert headache.trend_direction == TrendDirection.DECLINING
        assert headache.timeframe == "3 days"
        assert headache.confidence == 0.7

    def test_two_of_three_is_moderate(self) -> None:
        symptoms = [[]] * 4 + [["cough"], [], ["cough"]]

        [cough] = analyze_symptom_patterns(history(7, symptoms=symptoms))

        assert cough.severity == PatternSeverity.MODERATE
        assert cough.alert_level == AlertLevel.INFO

    def test_older_symptoms_are_ignored(self) -> None:
        symptoms = [["fatigue"]] * 5 + [[], []]

        assert analyze_symptom_patterns(history(7, symptoms=symptoms)) == []


class TestOverallConditionTrend:
    def test_falling_rating_is_declining(self) -> None:
        ratings = [4.0 - 0.25 * day for day in range(7)]

        found = analyze_overall_condition_trend(history(7, overall_condition=ratings))

        assert found is not None
        assert found.pattern_type == "overall_health_trend"
        assert found.trend_direction == TrendDirection.DECLINING
        assert found.severity == PatternSeverity.MODERATE
        assert found.alert_level == AlertLevel.WARNING
        assert found.confidence == pytest.approx(0.5)

    def test_rising_low_rating_is_improving_but_severe(self) -> None:
        ratings = [1.0 + 0.15 * day for day in range(7)]

        found = analyze_overall_condition_trend(history(7, overall_condition=ratings))

        assert found is not None
        assert found.trend_direction == TrendDirection.IMPROVING
        assert found.severity == PatternSeverity.SEVERE
        assert found.alert_level == AlertLevel.INFO

    def test_steady_rating_yields_nothing(self) -> None:
        assert analyze_overall_condition_trend(history(7)) is None


class TestAnalyzeHealthTrends:
    def test_short_history_yields_nothing(self) -> None:
        observations = history(6, systolic_bp=[120, 130, 140, 150, 160, 170])

        assert analyze_health_trends(observations) == []

    def test_input_order_does_not_matter(self) -> None:
        observations = history(7, systolic_bp=[120, 122, 124, 126, 128, 130, 132])

        shuffled = observations[3:] + observations[:3]

        assert analyze_health_trends(shuffled) == analyze_health_trends(observations)
        assert shuffled[0] is observations[3]

    def test_combines_all_detectors(self) -> None:
        observations = history(
            7,
            systolic_bp=[120, 122, 124, 126, 128, 130, 132],
            symptoms=[[]] * 4 + [["dizziness"]] * 3,
            overall_condition=[4.0 - 0.25 * day for day in range(7)],
        )

        patterns = analyze_health_trends(observations)

        assert [p.pattern_type for p in patterns] == [
            "systolic_bp_trend",
            "increasing_symptoms",
            "overall_health_trend",
        ]


class TestAggregates:
    def test_highest_alert_level(self) -> None:
        patterns = [pattern(alert_level=AlertLevel.WARNING), pattern()]

        assert highest_alert_level(patterns) == AlertLevel.WARNING
        assert highest_alert_level([*patterns, pattern(alert_level=AlertLevel.CRITICAL)]) == (
            AlertLevel.CRITICAL
        )
        assert highest_alert_level([]) == AlertLevel.INFO

    def test_patterns_confidence(self) -> None:
        patterns = [pattern(confidence=0.4), pattern(confidence=0.8)]

        assert patterns_confidence(patterns) == pytest.approx(0.6)
        assert patterns_confidence([]) == 0.0
