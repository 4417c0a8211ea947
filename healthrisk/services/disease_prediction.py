"""
Disease-specific risk prediction from a health snapshot.

Each predictor is an additive point system: every check that fires adds a
fixed weight and records a human-readable reason. The running sum is clamped
to [0, 1]. Recommendations are chosen from the risk tier and from keywords in
the reasons that fired, so the reason strings are part of the contract.
"""

from collections.abc import Callable

import structlog

from healthrisk.domain.models import (
    AlcoholConsumption,
    ContributingFactors,
    DiseaseType,
    Gender,
    HealthDataInput,
    HealthRiskPrediction,
    PredictionType,
    RiskLevel,
    SmokingStatus,
)
from healthrisk.services.hereditary_risk import risk_level_for_score

logger = structlog.get_logger(__name__)

ELEVATED_TIERS = (RiskLevel.HIGH, RiskLevel.VERY_HIGH)


def _clamp(value: float) -> float:
    return max(0.0, min(value, 1.0))


def _poor_sleep(data: HealthDataInput) -> bool:
    return data.sleep_hours < 6 or data.sleep_hours > 9


def lifestyle_risk(data: HealthDataInput) -> float:
    """Lifestyle contribution: smoking, alcohol, inactivity, obesity, sleep."""
    risk = 0.0
    if data.smoking_status == SmokingStatus.CURRENT:
        risk += 0.3
    if data.alcohol_consumption == AlcoholConsumption.HEAVY:
        risk += 0.2
    if data.exercise_frequency < 2:
        risk += 0.2
    if data.bmi > 30:
        risk += 0.2
    if _poor_sleep(data):
        risk += 0.1
    return _clamp(risk)


def medical_history_risk(data: HealthDataInput) -> float:
    """Medical-history contribution from the diagnosis flags."""
    risk = 0.0
    if data.has_hypertension:
        risk += 0.25
    if data.has_diabetes:
        risk += 0.3
    if data.has_heart_disease:
        risk += 0.35
    if data.has_high_cholesterol:
        risk += 0.2
    return _clamp(risk)


def _mentions(reasons: list[str], *keywords: str) -> bool:
    return any(keyword in reason for reason in reasons for keyword in keywords)


def cardiovascular_recommendations(reasons: list[str], risk_level: RiskLevel) -> list[str]:
    recommendations: list[str] = []
    if risk_level in ELEVATED_TIERS:
        recommendations += [
            "Consult with a cardiologist immediately",
            "Consider cardiac stress testing",
        ]
    if _mentions(reasons, "blood pressure"):
        recommendations += [
            "Monitor blood pressure daily",
            "Reduce sodium intake to <2300mg/day",
        ]
    if _mentions(reasons, "smoking"):
        recommendations.append("Quit smoking immediately - consider nicotine replacement therapy")
    if _mentions(reasons, "cholesterol"):
        recommendations += [
            "Follow a heart-healthy diet (Mediterranean or DASH)",
            "Consider statin therapy consultation",
        ]
    recommendations += [
        "Aim for 150 minutes of moderate exercise per week",
        "Maintain a healthy weight (BMI 18.5-24.9)",
    ]
    return recommendations


def diabetes_recommendations(reasons: list[str], risk_level: RiskLevel) -> list[str]:
    recommendations: list[str] = []
    if risk_level in ELEVATED_TIERS:
        recommendations += [
            "Consult with an endocrinologist",
            "Get HbA1c and glucose tolerance testing",
        ]
    if _mentions(reasons, "glucose", "HbA1c"):
        recommendations += [
            "Monitor blood glucose regularly",
            "Follow a low-glycemic index diet",
        ]
    if _mentions(reasons, "BMI", "weight"):
        recommendations += [
            "Aim for 5-10% weight loss",
            "Consider working with a nutritionist",
        ]
    recommendations += [
        "Increase physical activity to 150+ minutes per week",
        "Limit refined carbohydrates and added sugars",
        "Include fiber-rich foods in your diet",
    ]
    return recommendations


def general_health_recommendations(risk_level: RiskLevel) -> list[str]:
    recommendations = [
        "Schedule regular health check-ups",
        "Maintain a balanced, nutrient-rich diet",
        "Get 7-9 hours of quality sleep nightly",
        "Practice stress management techniques",
        "Stay hydrated (8+ glasses of water daily)",
        "Avoid tobacco and limit alcohol consumption",
    ]
    if risk_level in ELEVATED_TIERS:
        recommendations += [
            "Consider comprehensive health screening",
            "Work with healthcare providers to address risk factors",
        ]
    return recommendations


def predict_cardiovascular_risk(data: HealthDataInput) -> HealthRiskPrediction:
    """Ten-year cardiovascular disease risk."""
    score = 0.0
    reasons: list[str] = []

    if data.age > 65:
        score += 0.3
        reasons.append("Advanced age (>65)")
    elif data.age > 45:
        score += 0.15
        reasons.append("Middle age (45-65)")

    if data.gender == Gender.MALE:
        score += 0.1
        reasons.append("Male gender")

    if data.bmi > 30:
        score += 0.2
        reasons.append("Obesity (BMI > 30)")
    elif data.bmi > 25:
        score += 0.1
        reasons.append("Overweight (BMI 25-30)")

    if data.systolic_bp > 140 or data.diastolic_bp > 90:
        score += 0.25
        reasons.append("High blood pressure")
    elif data.systolic_bp > 130 or data.diastolic_bp > 80:
        score += 0.1
        reasons.append("Elevated blood pressure")

    if data.smoking_status == SmokingStatus.CURRENT:
        score += 0.3
        reasons.append("Current smoking")
    elif data.smoking_status == SmokingStatus.FORMER:
        score += 0.1
        reasons.append("Former smoking")

    if data.alcohol_consumption == AlcoholConsumption.HEAVY:
        score += 0.15
        reasons.append("Heavy alcohol consumption")

    if data.exercise_frequency < 2:
        score += 0.15
        reasons.append("Sedentary lifestyle")

    if data.has_hypertension:
        score += 0.2
        reasons.append("History of hypertension")
    if data.has_diabetes:
        score += 0.25
        reasons.append("Diabetes mellitus")
    if data.has_high_cholesterol:
        score += 0.15
        reasons.append("High cholesterol")

    if data.family_history_cardiovascular:
        score += 0.2
        reasons.append("Family history of cardiovascular disease")

    if data.cholesterol_ldl and data.cholesterol_ldl > 160:
        score += 0.15
        reasons.append("High LDL cholesterol")
    if data.cholesterol_hdl and data.cholesterol_hdl < 40:
        score += 0.1
        reasons.append("Low HDL cholesterol")

    score = _clamp(score)
    risk_level = risk_level_for_score(score)
    family_weight = 0.2 if data.family_history_cardiovascular else 0.0

    return HealthRiskPrediction(
        disease_type=DiseaseType.CARDIOVASCULAR,
        risk_score=score,
        risk_level=risk_level,
        timeframe="10_years",
        contributing_factors=ContributingFactors(
            genetic=family_weight,
            lifestyle=lifestyle_risk(data),
            medical_history=medical_history_risk(data),
            family_history=family_weight,
        ),
        recommendations=cardiovascular_recommendations(reasons, risk_level),
        confidence=0.85,
        triggered_factors=reasons,
    )


def predict_diabetes_risk(data: HealthDataInput) -> HealthRiskPrediction:
    """Five-year type 2 diabetes risk."""
    score = 0.0
    reasons: list[str] = []

    if data.age > 45:
        score += 0.2
        reasons.append("Age over 45")

    if data.bmi > 30:
        score += 0.3
        reasons.append("Obesity (BMI > 30)")
    elif data.bmi > 25:
        score += 0.15
        reasons.append("Overweight (BMI 25-30)")

    if data.blood_sugar > 126:
        score += 0.4
        reasons.append("Elevated fasting glucose")
    elif data.blood_sugar > 100:
        score += 0.2
        reasons.append("Prediabetic glucose levels")

    if data.hba1c is not None and data.hba1c > 6.5:
        score += 0.4
        reasons.append("Elevated HbA1c")
    elif data.hba1c is not None and data.hba1c > 5.7:
        score += 0.2
        reasons.append("Prediabetic HbA1c")

    if data.exercise_frequency < 2:
        score += 0.15
        reasons.append("Sedentary lifestyle")

    if data.has_hypertension:
        score += 0.1
        reasons.append("History of hypertension")

    if data.family_history_diabetes:
        score += 0.25
        reasons.append("Family history of diabetes")

    score = _clamp(score)
    risk_level = risk_level_for_score(score)
    family_weight = 0.25 if data.family_history_diabetes else 0.0

    return HealthRiskPrediction(
        disease_type=DiseaseType.TYPE2_DIABETES,
        risk_score=score,
        risk_level=risk_level,
        timeframe="5_years",
        contributing_factors=ContributingFactors(
            genetic=family_weight,
            lifestyle=lifestyle_risk(data),
            medical_history=medical_history_risk(data),
            family_history=family_weight,
        ),
        recommendations=diabetes_recommendations(reasons, risk_level),
        confidence=0.82,
        triggered_factors=reasons,
    )


def deterioration_risk_factor_count(data: HealthDataInput) -> int:
    """How many of the nine compounding risk conditions hold."""
    checks = (
        data.smoking_status == SmokingStatus.CURRENT,
        data.bmi > 30,
        data.exercise_frequency < 2,
        data.alcohol_consumption == AlcoholConsumption.HEAVY,
        _poor_sleep(data),
        data.stress_level > 7,
        data.has_hypertension,
        data.has_diabetes,
        data.has_heart_disease,
    )
    return sum(checks)


def predict_health_deterioration(data: HealthDataInput) -> HealthRiskPrediction:
    """One-year general deterioration risk, linear in the number of risk conditions."""
    count = deterioration_risk_factor_count(data)
    score = _clamp(count * 0.1)
    reasons = ["Multiple concurrent risk factors"] if count >= 3 else []
    risk_level = risk_level_for_score(score)

    return HealthRiskPrediction(
        disease_type=DiseaseType.GENERAL_DETERIORATION,
        risk_score=score,
        risk_level=risk_level,
        timeframe="1_year",
        contributing_factors=ContributingFactors(
            genetic=0.1,
            lifestyle=lifestyle_risk(data),
            medical_history=medical_history_risk(data),
            family_history=0.1,
        ),
        recommendations=general_health_recommendations(risk_level),
        confidence=0.75,
        triggered_factors=reasons,
    )


PREDICTORS: dict[PredictionType, Callable[[HealthDataInput], HealthRiskPrediction]] = {
    PredictionType.CARDIOVASCULAR: predict_cardiovascular_risk,
    PredictionType.DIABETES: predict_diabetes_risk,
    PredictionType.GENERAL_HEALTH: predict_health_deterioration,
}


def predict_risk(
    prediction_type: PredictionType | str, data: HealthDataInput
) -> HealthRiskPrediction:
    """Dispatch to the predictor for ``prediction_type``."""
    try:
        kind = PredictionType(prediction_type)
    except ValueError:
        raise ValueError(f"Unsupported prediction type: {prediction_type}") from None

    prediction = PREDICTORS[kind](data)
    logger.debug(
        "risk_predicted",
        prediction_type=kind.value,
        risk_score=round(prediction.risk_score, 4),
        risk_level=prediction.risk_level.value,
    )
    return prediction
