"""
Tests for disease risk prediction.

Covers:
- Cardiovascular and diabetes point systems, reasons and recommendations
- General deterioration as a count of compounding risk conditions
- Contributing-factor breakdowns
- Dispatch by prediction type, including unsupported types
"""

from __future__ import annotations

from typing import Any

import pytest
from hypothesis import given
from hypothesis import strategies as st

from healthrisk.domain.models import (
    AlcoholConsumption,
    DiseaseType,
    Gender,
    HealthDataInput,
    PredictionType,
    RiskLevel,
    SmokingStatus,
)
from healthrisk.services.disease_prediction import (
    deterioration_risk_factor_count,
    lifestyle_risk,
    medical_history_risk,
    predict_cardiovascular_risk,
    predict_diabetes_risk,
    predict_health_deterioration,
    predict_risk,
)


def snapshot(**overrides: Any) -> HealthDataInput:
    fields: dict[str, Any] = {
        "age": 30,
        "gender": Gender.FEMALE,
        "bmi": 22.0,
        "exercise_frequency": 4,
    }
    fields.update(overrides)
    return HealthDataInput(**fields)


@pytest.fixture
def high_risk_snapshot() -> HealthDataInput:
    return snapshot(
        smoking_status=SmokingStatus.CURRENT,
        bmi=32,
        exercise_frequency=0,
        alcohol_consumption=AlcoholConsumption.HEAVY,
        sleep_hours=5,
        stress_level=8,
        has_hypertension=True,
        has_diabetes=True,
        has_heart_disease=False,
    )


class TestCardiovascular:
    def test_healthy_young_adult_is_low_risk(self) -> None:
        prediction = predict_cardiovascular_risk(snapshot())

        assert prediction.disease_type == DiseaseType.CARDIOVASCULAR
        assert prediction.risk_score == 0.0
        assert prediction.risk_level == RiskLevel.LOW
        assert prediction.timeframe == "10_years"
        assert prediction.confidence == 0.85
        assert prediction.triggered_factors == []
        assert prediction.recommendations == [
            "Aim for 150 minutes of moderate exercise per week",
            "Maintain a healthy weight (BMI 18.5-24.9)",
        ]

    def test_points_accumulate_with_reasons(self) -> None:
        prediction = predict_cardiovascular_risk(
            snapshot(age=50, gender=Gender.MALE, bmi=27, systolic_bp=135)
        )

        assert prediction.risk_score == pytest.approx(0.45)
        assert prediction.risk_level == RiskLevel.HIGH
        assert prediction.triggered_factors == [
            "Middle age (45-65)",
            "Male gender",
            "Overweight (BMI 25-30)",
            "Elevated blood pressure",
        ]

    def test_elevated_tier_and_keywords_drive_recommendations(self) -> None:
        prediction = predict_cardiovascular_risk(
            snapshot(
                age=70,
                systolic_bp=150,
                smoking_status=SmokingStatus.CURRENT,
                cholesterol_ldl=170,
            )
        )

        assert prediction.risk_level == RiskLevel.VERY_HIGH
        assert prediction.recommendations[:2] == [
            "Consult with a cardiologist immediately",
            "Consider cardiac stress testing",
        ]
        assert "Monitor blood pressure daily" in prediction.recommendations
        assert (
            "Quit smoking immediately - consider nicotine replacement therapy"
            in prediction.recommendations
        )
        assert "Consider statin therapy consultation" in prediction.recommendations

    def test_former_smoking_matches_smoking_keyword(self) -> None:
        prediction = predict_cardiovascular_risk(snapshot(smoking_status=SmokingStatus.FORMER))

        assert "Former smoking" in prediction.triggered_factors
        assert (
            "Quit smoking immediately - consider nicotine replacement therapy"
            in prediction.recommendations
        )

    def test_lab_values_only_count_when_present(self) -> None:
        with_labs = predict_cardiovascular_risk(snapshot(cholesterol_ldl=161, cholesterol_hdl=39))
        without_labs = predict_cardiovascular_risk(snapshot())

        assert with_labs.risk_score == pytest.approx(0.25)
        assert without_labs.risk_score == 0.0

    def test_zero_lab_values_count_as_missing(self) -> None:
        prediction = predict_cardiovascular_risk(snapshot(cholesterol_ldl=0, cholesterol_hdl=0))

        assert prediction.risk_score == 0.0
        assert "Low HDL cholesterol" not in prediction.triggered_factors

    def test_score_clamped(self, high_risk_snapshot: HealthDataInput) -> None:
        prediction = predict_cardiovascular_risk(
            high_risk_snapshot.model_copy(update={"age": 70, "gender": Gender.MALE})
        )

        assert prediction.risk_score == 1.0

    def test_family_history_feeds_genetic_factor(self) -> None:
        prediction = predict_cardiovascular_risk(snapshot(family_history_cardiovascular=True))

        assert prediction.contributing_factors.genetic == 0.2
        assert prediction.contributing_factors.family_history == 0.2
        assert "Family history of cardiovascular disease" in prediction.triggered_factors


class TestDiabetes:
    def test_glucose_and_weight_reasons(self) -> None:
        prediction = predict_diabetes_risk(snapshot(bmi=31, blood_sugar=110))

        assert prediction.disease_type == DiseaseType.TYPE2_DIABETES
        assert prediction.risk_score == pytest.approx(0.5)
        assert prediction.triggered_factors == [
            "Obesity (BMI > 30)",
            "Prediabetic glucose levels",
        ]
        assert "Monitor blood glucose regularly" in prediction.recommendations
        assert "Aim for 5-10% weight loss" in prediction.recommendations

    def test_hba1c_thresholds(self) -> None:
        assert "Elevated HbA1c" in predict_diabetes_risk(snapshot(hba1c=6.6)).triggered_factors
        assert "Prediabetic HbA1c" in predict_diabetes_risk(snapshot(hba1c=6.0)).triggered_factors
        assert predict_diabetes_risk(snapshot(hba1c=5.5)).triggered_factors == []

    def test_elevated_tier_recommends_endocrinologist(self) -> None:
        prediction = predict_diabetes_risk(
            snapshot(age=50, blood_sugar=130, family_history_diabetes=True)
        )

        assert prediction.risk_level == RiskLevel.VERY_HIGH
        assert prediction.recommendations[0] == "Consult with an endocrinologist"
        assert prediction.contributing_factors.genetic == 0.25

    def test_closing_advice_always_present(self) -> None:
        recommendations = predict_diabetes_risk(snapshot()).recommendations

        assert recommendations[-3:] == [
            "Increase physical activity to 150+ minutes per week",
            "Limit refined carbohydrates and added sugars",
            "Include fiber-rich foods in your diet",
        ]


class TestHealthDeterioration:
    def test_compounding_conditions_are_counted(self, high_risk_snapshot: HealthDataInput) -> None:
        assert deterioration_risk_factor_count(high_risk_snapshot) == 8

        prediction = predict_health_deterioration(high_risk_snapshot)

        assert prediction.risk_score == pytest.approx(0.8)
        assert prediction.risk_level == RiskLevel.VERY_HIGH
        assert prediction.triggered_factors == ["Multiple concurrent risk factors"]
        assert "Consider comprehensive health screening" in prediction.recommendations

    def test_few_conditions_have_no_reason(self) -> None:
        prediction = predict_health_deterioration(snapshot(stress_level=9, sleep_hours=10))

        assert prediction.risk_score == pytest.approx(0.2)
        assert prediction.risk_level == RiskLevel.MODERATE
        assert prediction.triggered_factors == []
        assert len(prediction.recommendations) == 6

    def test_fixed_genetic_contribution(self) -> None:
        factors = predict_health_deterioration(snapshot()).contributing_factors

        assert factors.genetic == 0.1
        assert factors.family_history == 0.1


class TestContributingFactors:
    def test_lifestyle_risk_clamped(self, high_risk_snapshot: HealthDataInput) -> None:
        assert lifestyle_risk(high_risk_snapshot) == pytest.approx(1.0)

    def test_medical_history_risk(self) -> None:
        data = snapshot(has_hypertension=True, has_high_cholesterol=True)

        assert medical_history_risk(data) == pytest.approx(0.45)

    def test_healthy_snapshot_has_no_lifestyle_risk(self) -> None:
        assert lifestyle_risk(snapshot()) == 0.0


class TestPredictRisk:
    @pytest.mark.parametrize(
        ("prediction_type", "disease_type"),
        [
            (PredictionType.CARDIOVASCULAR, DiseaseType.CARDIOVASCULAR),
            ("diabetes", DiseaseType.TYPE2_DIABETES),
            ("general_health", DiseaseType.GENERAL_DETERIORATION),
        ],
    )
    def test_dispatch(self, prediction_type: str, disease_type: DiseaseType) -> None:
        assert predict_risk(prediction_type, snapshot()).disease_type == disease_type

    def test_unsupported_type_raises(self) -> None:
        with pytest.raises(ValueError, match="Unsupported prediction type: cancer"):
            predict_risk("cancer", snapshot())

    @given(
        age=st.integers(min_value=0, max_value=130),
        bmi=st.floats(min_value=10, max_value=60),
        systolic=st.floats(min_value=80, max_value=220),
        sugar=st.floats(min_value=50, max_value=300),
        smoking=st.sampled_from(list(SmokingStatus)),
        flags=st.lists(st.booleans(), min_size=4, max_size=4),
    )
    def test_scores_bounded_and_repeatable(
        self,
        age: int,
        bmi: float,
        systolic: float,
        sugar: float,
        smoking: SmokingStatus,
        flags: list[bool],
    ) -> None:
        data = snapshot(
            age=age,
            bmi=bmi,
            systolic_bp=systolic,
            blood_sugar=sugar,
            smoking_status=smoking,
            has_hypertension=flags[0],
            has_diabetes=flags[1],
            has_heart_disease=flags[2],
            has_high_cholesterol=flags[3],
        )

        for prediction_type in PredictionType:
            first = predict_risk(prediction_type, data)
            assert 0.0 <= first.risk_score <= 1.0
            assert first == predict_risk(prediction_type, data)
