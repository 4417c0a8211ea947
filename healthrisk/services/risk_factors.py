"""
Risk factor identification.

Factors come from three groups:
- Lifestyle: smoking, activity, weight, alcohol, sleep and stress, each
  with an optional protective counterpart
- Medical: diagnosis flags, with vital and lab readings as alternate triggers
- Genetic: family history flags, only considered when the caller supplies
  family history or genomic context

Factor definitions are fixed catalog entries; the analysis only decides
which of them apply to a snapshot.
"""

from collections.abc import Sequence
from typing import Any

import structlog

from healthrisk.domain.models import (
    AlcoholConsumption,
    HealthDataInput,
    RiskFactor,
    RiskFactorAnalysis,
    RiskFactorCategory,
    RiskFactorSeverity,
    RiskTrend,
    SmokingStatus,
    TimeToImpact,
)

logger = structlog.get_logger(__name__)

PROTECTIVE_DISCOUNT = 0.5
CRITICAL_PRIORITY_BOOST = 1.5
PRIORITY_FACTOR_LIMIT = 5
ACTIONS_PER_FACTOR = 2
PRIORITY_ACTION_LIMIT = 8

_LIFESTYLE = RiskFactorCategory.LIFESTYLE
_MEDICAL = RiskFactorCategory.MEDICAL
_GENETIC = RiskFactorCategory.GENETIC

SMOKING_CURRENT = RiskFactor(
    id="smoking_current",
    name="Current Smoking",
    category=_LIFESTYLE,
    severity=RiskFactorSeverity.CRITICAL,
    impact=0.9,
    modifiable=True,
    description=(
        "Active tobacco smoking significantly increases risk of cardiovascular disease, "
        "cancer, and respiratory conditions"
    ),
    recommendations=[
        "Quit smoking immediately",
        "Consider nicotine replacement therapy",
        "Join a smoking cessation program",
        "Avoid secondhand smoke exposure",
    ],
    time_to_impact=TimeToImpact.IMMEDIATE,
)

NEVER_SMOKED = RiskFactor(
    id="never_smoked",
    name="Never Smoked",
    category=_LIFESTYLE,
    severity=RiskFactorSeverity.LOW,
    impact=0.3,
    modifiable=True,
    description="Never smoking tobacco provides significant protection against multiple diseases",
    recommendations=["Continue to avoid tobacco products"],
    time_to_impact=TimeToImpact.LONG_TERM,
)

SEDENTARY_LIFESTYLE = RiskFactor(
    id="sedentary_lifestyle",
    name="Sedentary Lifestyle",
    category=_LIFESTYLE,
    severity=RiskFactorSeverity.HIGH,
    impact=0.7,
    modifiable=True,
    description=(
        "Insufficient physical activity increases risk of cardiovascular disease, diabetes, "
        "and mental health issues"
    ),
    recommendations=[
        "Aim for 150 minutes of moderate exercise per week",
        "Start with 10-minute walks and gradually increase",
        "Include both cardio and strength training",
        "Find enjoyable physical activities",
    ],
    time_to_impact=TimeToImpact.SHORT_TERM,
)

REGULAR_EXERCISE = RiskFactor(
    id="regular_exercise",
    name="Regular Exercise",
    category=_LIFESTYLE,
    severity=RiskFactorSeverity.LOW,
    impact=0.4,
    modifiable=True,
    description="Regular physical activity provides protection against multiple chronic diseases",
    recommendations=["Maintain current exercise routine", "Consider varying workout types"],
    time_to_impact=TimeToImpact.MEDIUM_TERM,
)

OBESITY = RiskFactor(
    id="obesity",
    name="Obesity",
    category=_LIFESTYLE,
    severity=RiskFactorSeverity.HIGH,
    impact=0.8,
    modifiable=True,
    description=(
        "Obesity significantly increases risk of diabetes, cardiovascular disease, "
        "and certain cancers"
    ),
    recommendations=[
        "Aim for 5-10% weight loss initially",
        "Focus on sustainable dietary changes",
        "Increase physical activity gradually",
        "Consider working with a nutritionist",
    ],
    time_to_impact=TimeToImpact.MEDIUM_TERM,
)

HEALTHY_WEIGHT = RiskFactor(
    id="healthy_weight",
    name="Healthy Weight",
    category=_LIFESTYLE,
    severity=RiskFactorSeverity.LOW,
    impact=0.3,
    modifiable=True,
    description="Maintaining a healthy weight reduces risk of multiple chronic diseases",
    recommendations=["Maintain current weight through balanced diet and exercise"],
    time_to_impact=TimeToImpact.LONG_TERM,
)

HEAVY_DRINKING = RiskFactor(
    id="heavy_drinking",
    name="Heavy Alcohol Consumption",
    category=_LIFESTYLE,
    severity=RiskFactorSeverity.HIGH,
    impact=0.6,
    modifiable=True,
    description=(
        "Heavy alcohol consumption increases risk of liver disease, cardiovascular problems, "
        "and certain cancers"
    ),
    recommendations=[
        "Reduce alcohol intake to moderate levels",
        "Consider alcohol counseling if needed",
        "Have alcohol-free days each week",
        "Monitor liver function regularly",
    ],
    time_to_impact=TimeToImpact.SHORT_TERM,
)

POOR_SLEEP = RiskFactor(
    id="poor_sleep",
    name="Poor Sleep Duration",
    category=_LIFESTYLE,
    severity=RiskFactorSeverity.MODERATE,
    impact=0.4,
    modifiable=True,
    description=(
        "Inadequate or excessive sleep increases risk of cardiovascular disease, diabetes, "
        "and mental health issues"
    ),
    recommendations=[
        "Aim for 7-9 hours of sleep nightly",
        "Maintain consistent sleep schedule",
        "Create a relaxing bedtime routine",
        "Limit screen time before bed",
    ],
    time_to_impact=TimeToImpact.SHORT_TERM,
)

HIGH_STRESS = RiskFactor(
    id="high_stress",
    name="High Stress Levels",
    category=_LIFESTYLE,
    severity=RiskFactorSeverity.MODERATE,
    impact=0.5,
    modifiable=True,
    description=(
        "Chronic high stress increases risk of cardiovascular disease, mental health issues, "
        "and immune dysfunction"
    ),
    recommendations=[
        "Practice stress management techniques",
        "Consider meditation or mindfulness",
        "Engage in regular physical activity",
        "Seek professional help if needed",
    ],
    time_to_impact=TimeToImpact.IMMEDIATE,
)

HYPERTENSION = RiskFactor(
    id="hypertension",
    name="Hypertension",
    category=_MEDICAL,
    severity=RiskFactorSeverity.HIGH,
    impact=0.7,
    modifiable=True,
    description="High blood pressure increases risk of heart attack, stroke, and kidney disease",
    recommendations=[
        "Monitor blood pressure regularly",
        "Take prescribed medications as directed",
        "Reduce sodium intake",
        "Maintain healthy weight",
    ],
    time_to_impact=TimeToImpact.IMMEDIATE,
)

DIABETES = RiskFactor(
    id="diabetes",
    name="Diabetes Mellitus",
    category=_MEDICAL,
    severity=RiskFactorSeverity.CRITICAL,
    impact=0.8,
    modifiable=True,
    description=(
        "Diabetes significantly increases risk of cardiovascular disease, kidney disease, "
        "and neuropathy"
    ),
    recommendations=[
        "Monitor blood glucose regularly",
        "Follow prescribed medication regimen",
        "Maintain healthy diet and exercise",
        "Regular eye and foot examinations",
    ],
    time_to_impact=TimeToImpact.IMMEDIATE,
)

HEART_DISEASE = RiskFactor(
    id="heart_disease",
    name="Existing Heart Disease",
    category=_MEDICAL,
    severity=RiskFactorSeverity.CRITICAL,
    impact=0.9,
    modifiable=True,
    description=(
        "Existing cardiovascular disease requires ongoing management to prevent complications"
    ),
    recommendations=[
        "Follow cardiology treatment plan",
        "Take prescribed medications consistently",
        "Monitor symptoms closely",
        "Regular cardiac follow-ups",
    ],
    time_to_impact=TimeToImpact.IMMEDIATE,
)

HIGH_CHOLESTEROL = RiskFactor(
    id="high_cholesterol",
    name="High Cholesterol",
    category=_MEDICAL,
    severity=RiskFactorSeverity.MODERATE,
    impact=0.6,
    modifiable=True,
    description=(
        "Elevated cholesterol increases risk of atherosclerosis and cardiovascular events"
    ),
    recommendations=[
        "Follow heart-healthy diet",
        "Consider statin therapy if recommended",
        "Regular lipid monitoring",
        "Increase physical activity",
    ],
    time_to_impact=TimeToImpact.MEDIUM_TERM,
)

FAMILY_HISTORY_CVD = RiskFactor(
    id="family_history_cvd",
    name="Family History of Cardiovascular Disease",
    category=_GENETIC,
    severity=RiskFactorSeverity.MODERATE,
    impact=0.5,
    modifiable=False,
    description="Family history of cardiovascular disease increases personal risk",
    recommendations=[
        "Enhanced cardiovascular screening",
        "Aggressive lifestyle modifications",
        "Regular cardiac risk assessment",
        "Early intervention strategies",
    ],
    time_to_impact=TimeToImpact.LONG_TERM,
)

FAMILY_HISTORY_DIABETES = RiskFactor(
    id="family_history_diabetes",
    name="Family History of Diabetes",
    category=_GENETIC,
    severity=RiskFactorSeverity.MODERATE,
    impact=0.4,
    modifiable=False,
    description="Family history of diabetes increases risk of developing type 2 diabetes",
    recommendations=[
        "Regular glucose screening",
        "Maintain healthy weight",
        "Follow low-glycemic diet",
        "Regular physical activity",
    ],
    time_to_impact=TimeToImpact.LONG_TERM,
)

FAMILY_HISTORY_CANCER = RiskFactor(
    id="family_history_cancer",
    name="Family History of Cancer",
    category=_GENETIC,
    severity=RiskFactorSeverity.MODERATE,
    impact=0.4,
    modifiable=False,
    description="Family history of cancer may indicate genetic predisposition",
    recommendations=[
        "Enhanced cancer screening protocols",
        "Genetic counseling consideration",
        "Lifestyle modifications for cancer prevention",
        "Regular oncology consultations",
    ],
    time_to_impact=TimeToImpact.LONG_TERM,
)


def lifestyle_factors(data: HealthDataInput) -> tuple[list[RiskFactor], list[RiskFactor]]:
    """Return ``(risks, protective)`` for lifestyle inputs."""
    risks: list[RiskFactor] = []
    protective: list[RiskFactor] = []

    if data.smoking_status == SmokingStatus.CURRENT:
        risks.append(SMOKING_CURRENT)
    elif data.smoking_status == SmokingStatus.NEVER:
        protective.append(NEVER_SMOKED)

    if data.exercise_frequency < 2:
        risks.append(SEDENTARY_LIFESTYLE)
    elif data.exercise_frequency >= 5:
        protective.append(REGULAR_EXERCISE)

    if data.bmi > 30:
        risks.append(OBESITY)
    elif 18.5 <= data.bmi <= 24.9:
        protective.append(HEALTHY_WEIGHT)

    if data.alcohol_consumption == AlcoholConsumption.HEAVY:
        risks.append(HEAVY_DRINKING)

    if data.sleep_hours < 6 or data.sleep_hours > 9:
        risks.append(POOR_SLEEP)

    if data.stress_level > 7:
        risks.append(HIGH_STRESS)

    return risks, protective


def medical_factors(data: HealthDataInput) -> list[RiskFactor]:
    risks: list[RiskFactor] = []

    if data.has_hypertension or data.systolic_bp > 140 or data.diastolic_bp > 90:
        risks.append(HYPERTENSION)

    if (
        data.has_diabetes
        or data.blood_sugar > 126
        or (data.hba1c is not None and data.hba1c > 6.5)
    ):
        risks.append(DIABETES)

    if data.has_heart_disease:
        risks.append(HEART_DISEASE)

    if data.has_high_cholesterol or (
        data.cholesterol_ldl is not None and data.cholesterol_ldl > 160
    ):
        risks.append(HIGH_CHOLESTEROL)

    return risks


def genetic_factors(data: HealthDataInput) -> list[RiskFactor]:
    risks: list[RiskFactor] = []
    if data.family_history_cardiovascular:
        risks.append(FAMILY_HISTORY_CVD)
    if data.family_history_diabetes:
        risks.append(FAMILY_HISTORY_DIABETES)
    if data.family_history_cancer:
        risks.append(FAMILY_HISTORY_CANCER)
    return risks


def total_risk_score(
    risk_factors: Sequence[RiskFactor], protective_factors: Sequence[RiskFactor]
) -> float:
    """Risk impact minus half the protective impact, clamped to [0, 1]."""
    risk = sum(factor.impact for factor in risk_factors)
    protection = sum(factor.impact for factor in protective_factors)
    return max(0.0, min(1.0, risk - protection * PROTECTIVE_DISCOUNT))


def _priority(factor: RiskFactor) -> float:
    boost = CRITICAL_PRIORITY_BOOST if factor.severity == RiskFactorSeverity.CRITICAL else 1.0
    return factor.impact * boost


def priority_actions(risk_factors: Sequence[RiskFactor]) -> list[str]:
    """Leading recommendations of the most pressing modifiable factors."""
    ranked = sorted(
        (factor for factor in risk_factors if factor.modifiable), key=_priority, reverse=True
    )
    actions = [
        recommendation
        for factor in ranked[:PRIORITY_FACTOR_LIMIT]
        for recommendation in factor.recommendations[:ACTIONS_PER_FACTOR]
    ]
    return actions[:PRIORITY_ACTION_LIMIT]


def risk_trend(risk_factors: Sequence[RiskFactor]) -> RiskTrend:
    """Judge direction from the share of factors with immediate impact."""
    if not risk_factors:
        return RiskTrend.STABLE

    immediate = sum(
        1 for factor in risk_factors if factor.time_to_impact == TimeToImpact.IMMEDIATE
    )
    share = immediate / len(risk_factors)
    if share > 0.5:
        return RiskTrend.INCREASING
    if share < 0.2:
        return RiskTrend.DECREASING
    return RiskTrend.STABLE


def analyze_risk_factors(
    data: HealthDataInput,
    medical_history: Sequence[Any] | None = None,
    family_history: Sequence[Any] | None = None,
    genomic_data: Any | None = None,
) -> RiskFactorAnalysis:
    """
    Identify risk and protective factors for a snapshot.

    ``medical_history`` is accepted for callers that hold it but does not
    change the result; the diagnosis flags on ``data`` are authoritative.
    Family history flags only count when ``family_history`` or
    ``genomic_data`` is supplied, even if empty.
    """
    risks, protective = lifestyle_factors(data)
    risks.extend(medical_factors(data))
    if family_history is not None or genomic_data is not None:
        risks.extend(genetic_factors(data))

    analysis = RiskFactorAnalysis(
        total_risk_score=total_risk_score(risks, protective),
        risk_factors=sorted(risks, key=lambda factor: factor.impact, reverse=True),
        protective_factors=protective,
        priority_actions=priority_actions(risks),
        risk_trend=risk_trend(risks),
    )
    logger.debug(
        "risk_factors_analyzed",
        risk_factors=len(risks),
        protective_factors=len(protective),
        total_risk_score=round(analysis.total_risk_score, 4),
        risk_trend=analysis.risk_trend.value,
    )
    return analysis
