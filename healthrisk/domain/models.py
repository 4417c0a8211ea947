"""
Domain models for health risk scoring.

These models represent the snapshot a caller assembles for a scoring call and
the result records the scorers return. Result records are frozen: a scorer
never hands back something the caller could mutate into an inconsistent state.
"""

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class RiskLevel(str, Enum):
    """Coarse bucketing of a continuous [0, 1] risk score."""

    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"
    VERY_HIGH = "very_high"


class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"


class SmokingStatus(str, Enum):
    NEVER = "never"
    FORMER = "former"
    CURRENT = "current"


class AlcoholConsumption(str, Enum):
    NONE = "none"
    LIGHT = "light"
    MODERATE = "moderate"
    HEAVY = "heavy"


class DiseaseType(str, Enum):
    CARDIOVASCULAR = "cardiovascular_disease"
    TYPE2_DIABETES = "type2_diabetes"
    GENERAL_DETERIORATION = "general_health_deterioration"


class PredictionType(str, Enum):
    """Prediction kinds a caller can request by name."""

    CARDIOVASCULAR = "cardiovascular"
    DIABETES = "diabetes"
    GENERAL_HEALTH = "general_health"


class VitalSign(str, Enum):
    """Vital signs tracked by trend detection."""

    SYSTOLIC_BP = "systolic_bp"
    DIASTOLIC_BP = "diastolic_bp"
    HEART_RATE = "heart_rate"
    WEIGHT = "weight"
    BLOOD_SUGAR = "blood_sugar"


class PatternSeverity(str, Enum):
    MILD = "mild"
    MODERATE = "moderate"
    SEVERE = "severe"


class TrendDirection(str, Enum):
    IMPROVING = "improving"
    STABLE = "stable"
    DECLINING = "declining"


class AlertLevel(str, Enum):
    INFO = "info"
    WARNING = "warning"
    CRITICAL = "critical"


class RiskFactorCategory(str, Enum):
    LIFESTYLE = "lifestyle"
    MEDICAL = "medical"
    GENETIC = "genetic"
    ENVIRONMENTAL = "environmental"


class RiskFactorSeverity(str, Enum):
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"
    CRITICAL = "critical"


class TimeToImpact(str, Enum):
    IMMEDIATE = "immediate"
    SHORT_TERM = "short_term"
    MEDIUM_TERM = "medium_term"
    LONG_TERM = "long_term"


class RiskTrend(str, Enum):
    INCREASING = "increasing"
    STABLE = "stable"
    DECREASING = "decreasing"


class HealthDataInput(BaseModel):
    """
    Point-in-time health snapshot for a single scoring call.

    Assembled by the caller from profile, vitals, medications and family
    history. Defaults mirror the values used when a source has no reading.
    """

    model_config = ConfigDict(frozen=True)

    # Demographics
    age: int = Field(ge=0, le=130)
    gender: Gender
    bmi: float = Field(gt=0.0)

    # Vital signs (recent averages)
    systolic_bp: float = Field(default=120.0, gt=0.0)
    diastolic_bp: float = Field(default=80.0, gt=0.0)
    heart_rate: float = Field(default=70.0, gt=0.0)
    blood_sugar: float = Field(default=90.0, gt=0.0)

    # Lifestyle
    smoking_status: SmokingStatus = SmokingStatus.NEVER
    alcohol_consumption: AlcoholConsumption = AlcoholConsumption.NONE
    exercise_frequency: float = Field(default=0.0, ge=0.0, description="Sessions per week")
    sleep_hours: float = Field(default=8.0, ge=0.0, le=24.0)
    stress_level: int = Field(default=5, ge=1, le=10)

    # Medical history
    has_hypertension: bool = False
    has_diabetes: bool = False
    has_heart_disease: bool = False
    has_high_cholesterol: bool = False

    # Family history
    family_history_cardiovascular: bool = False
    family_history_diabetes: bool = False
    family_history_cancer: bool = False

    # Lab values, when available
    cholesterol_total: float | None = None
    cholesterol_ldl: float | None = None
    cholesterol_hdl: float | None = None
    triglycerides: float | None = None
    hba1c: float | None = None


class ContributingFactors(BaseModel):
    """Per-source breakdown of a prediction, each component in [0, 1]."""

    model_config = ConfigDict(frozen=True)

    genetic: float = Field(ge=0.0, le=1.0)
    lifestyle: float = Field(ge=0.0, le=1.0)
    medical_history: float = Field(ge=0.0, le=1.0)
    family_history: float = Field(ge=0.0, le=1.0)


class HealthRiskPrediction(BaseModel):
    """Disease-specific risk prediction."""

    model_config = ConfigDict(frozen=True)

    disease_type: DiseaseType
    risk_score: float = Field(ge=0.0, le=1.0)
    risk_level: RiskLevel
    timeframe: str = Field(description="e.g. 10_years, 5_years, 1_year")
    contributing_factors: ContributingFactors
    recommendations: list[str]
    confidence: float = Field(gt=0.0, le=1.0)
    triggered_factors: list[str] = Field(
        default_factory=list, description="Human-readable reasons that added to the score"
    )


class HealthObservation(BaseModel):
    """One dated entry of a user's health history."""

    model_config = ConfigDict(frozen=True)

    date: datetime
    vital_signs: dict[str, float | None] = Field(default_factory=dict)
    symptoms: list[str] = Field(default_factory=list)
    overall_condition: float = Field(default=3.0, ge=1.0, le=5.0)


class HealthDeteriorationPattern(BaseModel):
    """A detected trend in a single metric or in overall condition."""

    model_config = ConfigDict(frozen=True)

    pattern_type: str
    severity: PatternSeverity
    trend_direction: TrendDirection
    affected_metrics: list[str]
    timeframe: str
    confidence: float = Field(ge=0.0, le=1.0)
    alert_level: AlertLevel


class RiskFactor(BaseModel):
    """A risk (or protective) factor identified from a health snapshot."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    category: RiskFactorCategory
    severity: RiskFactorSeverity
    impact: float = Field(ge=0.0, le=1.0)
    modifiable: bool
    description: str
    recommendations: tuple[str, ...]
    time_to_impact: TimeToImpact


class RiskFactorAnalysis(BaseModel):
    """Aggregate view over every identified risk and protective factor."""

    model_config = ConfigDict(frozen=True)

    total_risk_score: float = Field(ge=0.0, le=1.0)
    risk_factors: list[RiskFactor]
    protective_factors: list[RiskFactor]
    priority_actions: list[str] = Field(max_length=8)
    risk_trend: RiskTrend


class PredictionModel(BaseModel):
    """Named, versioned parameter record attached to stored predictions."""

    model_config = ConfigDict(frozen=True, protected_namespaces=())

    name: str
    version: str
    model_type: str
    confidence: float = Field(ge=0.0, le=1.0)


DEFAULT_PREDICTION_MODELS: dict[str, PredictionModel] = {
    model.name: model
    for model in (
        PredictionModel(
            name="cardiovascular_risk_model",
            version="1.0.0",
            model_type="risk_prediction",
            confidence=0.85,
        ),
        PredictionModel(
            name="diabetes_risk_model",
            version="1.0.0",
            model_type="risk_prediction",
            confidence=0.82,
        ),
        PredictionModel(
            name="general_health_risk_model",
            version="1.0.0",
            model_type="risk_prediction",
            confidence=0.75,
        ),
        PredictionModel(
            name="health_deterioration_model",
            version="1.0.0",
            model_type="pattern_detection",
            confidence=0.7,
        ),
        PredictionModel(
            name="risk_factor_analysis_model",
            version="1.0.0",
            model_type="risk_factor_analysis",
            confidence=0.85,
        ),
    )
}


class VitalReading(BaseModel):
    """
    A single vital-sign measurement as recorded by a device or by hand.

    Blood pressure readings carry both ``systolic`` and ``diastolic``;
    every other type carries ``value``.
    """

    model_config = ConfigDict(frozen=True)

    type: str = Field(description="blood_pressure, heart_rate, blood_sugar, weight, ...")
    value: float | None = None
    systolic: float | None = None
    diastolic: float | None = None
    measured_at: datetime | None = None


class LifestyleHabits(BaseModel):
    """Self-reported habits from the user profile; absent values fall back to defaults."""

    model_config = ConfigDict(frozen=True)

    smoking: SmokingStatus | None = None
    alcohol: AlcoholConsumption | None = None
    exercise_frequency: float | None = Field(default=None, ge=0.0)
    sleep_hours: float | None = Field(default=None, ge=0.0, le=24.0)
    stress_level: int | None = Field(default=None, ge=1, le=10)


class UserProfile(BaseModel):
    model_config = ConfigDict(frozen=True)

    user_id: str
    birth_date: date
    gender: Gender
    height_cm: float | None = Field(default=None, gt=0.0)
    weight_kg: float | None = Field(default=None, gt=0.0)
    lifestyle: LifestyleHabits = Field(default_factory=LifestyleHabits)
