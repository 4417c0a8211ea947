"""Tests for rich console rendering, using a recording console."""

import pytest
from rich.console import Console

from healthrisk.domain.family import FamilyMember, FamilyRiskAssessment, MedicalCondition
from healthrisk.domain.models import (
    AlertLevel,
    Gender,
    HealthDataInput,
    HealthDeteriorationPattern,
    PatternSeverity,
    RiskLevel,
    SmokingStatus,
    TrendDirection,
)
from healthrisk.reporting import (
    render_assessments,
    render_family_summary,
    render_patterns,
    render_prediction,
    render_risk_factor_analysis,
)
from healthrisk.services.disease_prediction import predict_cardiovascular_risk
from healthrisk.services.family_tree import family_history_stats
from healthrisk.services.hereditary_risk import family_health_summary
from healthrisk.services.risk_factors import analyze_risk_factors


@pytest.fixture
def console() -> Console:
    return Console(record=True, width=200, color_system=None)


class TestRendering:
    def test_empty_assessments(self, console: Console) -> None:
        render_assessments([], console)

        assert "No hereditary risks identified" in console.export_text()

    def test_assessment_table(self, console: Console) -> None:
        assessment = FamilyRiskAssessment(
            user_id="u1",
            condition_name="Type 2 Diabetes",
            family_risk_score=0.72,
            affected_relatives=3,
            risk_level=RiskLevel.VERY_HIGH,
            recommendations=["Consider genetic counseling and testing"],
        )

        render_assessments([assessment], console)

        output = console.export_text()
        assert "Hereditary Risk Assessments" in output
        assert "Type 2 Diabetes" in output
        assert "0.72" in output
        assert "VERY HIGH" in output

    def test_prediction_panel(self, console: Console) -> None:
        prediction = predict_cardiovascular_risk(
            HealthDataInput(age=30, gender=Gender.MALE, bmi=22, exercise_frequency=3)
        )

        render_prediction(prediction, console)

        output = console.export_text()
        assert "Cardiovascular Disease" in output
        assert "Timeframe: 10 years" in output
        assert "Triggered by: Male gender" in output

    def test_no_patterns(self, console: Console) -> None:
        render_patterns([], console)

        assert "No deterioration patterns detected" in console.export_text()

    def test_pattern_table(self, console: Console) -> None:
        pattern = HealthDeteriorationPattern(
            pattern_type="systolic_bp_trend",
            severity=PatternSeverity.SEVERE,
            trend_direction=TrendDirection.DECLINING,
            affected_metrics=["systolic_bp"],
            timeframe="7 days",
            confidence=0.7,
            alert_level=AlertLevel.CRITICAL,
        )

        render_patterns([pattern], console)

        output = console.export_text()
        assert "systolic_bp_trend" in output
        assert "CRITICAL" in output
        assert "70%" in output

    def test_risk_factor_analysis(self, console: Console) -> None:
        analysis = analyze_risk_factors(
            HealthDataInput(
                age=45, gender=Gender.FEMALE, bmi=22, smoking_status=SmokingStatus.CURRENT
            )
        )

        render_risk_factor_analysis(analysis, console)

        output = console.export_text()
        assert "Current Smoking" in output
        assert "Healthy Weight" in output
        assert "Priority Actions" in output
        assert "1. Quit smoking immediately" in output

    def test_family_summary(self, console: Console) -> None:
        members = [
            FamilyMember(
                id="m",
                user_id="u1",
                relationship="mother",
                conditions=[MedicalCondition(name="Asthma")],
            ),
            FamilyMember(
                id="gf",
                user_id="u1",
                relationship="paternal_grandfather",
                is_alive=False,
                death_year=1999,
            ),
        ]

        render_family_summary(family_health_summary(family_history_stats(members), []), console)

        output = console.export_text()
        assert "Family Health Summary" in output
        assert "1 / 1" in output
        assert "Asthma (1)" in output
