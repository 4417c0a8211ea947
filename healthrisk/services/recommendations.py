"""Personalized recommendations drawn from recent predictions and the current snapshot."""

from collections.abc import Iterable

from pydantic import BaseModel, ConfigDict, Field

from healthrisk.domain.models import HealthDataInput, HealthRiskPrediction, SmokingStatus

BUCKET_LIMIT = 5
PER_PREDICTION = 2

WEIGHT_MANAGEMENT = "Focus on weight management through diet and exercise"
INCREASE_ACTIVITY = "Increase physical activity to at least 150 minutes per week"
QUIT_SMOKING = "Quit smoking - this is the most important step for your health"


class PersonalizedRecommendations(BaseModel):
    model_config = ConfigDict(frozen=True)

    immediate: list[str] = Field(default_factory=list, max_length=BUCKET_LIMIT)
    short_term: list[str] = Field(default_factory=list, max_length=BUCKET_LIMIT)
    long_term: list[str] = Field(default_factory=list, max_length=BUCKET_LIMIT)
    lifestyle: list[str] = Field(default_factory=list, max_length=BUCKET_LIMIT)
    medical: list[str] = Field(default_factory=list, max_length=BUCKET_LIMIT)


def _dedupe(items: Iterable[str]) -> list[str]:
    """Drop repeats keeping first occurrences, then cap at the bucket limit."""
    return list(dict.fromkeys(items))[:BUCKET_LIMIT]


def personalized_recommendations(
    data: HealthDataInput, predictions: Iterable[HealthRiskPrediction]
) -> PersonalizedRecommendations:
    immediate: list[str] = []
    lifestyle: list[str] = []

    for prediction in predictions:
        immediate.extend(prediction.recommendations[:PER_PREDICTION])

    if data.bmi > 25:
        lifestyle.append(WEIGHT_MANAGEMENT)
    if data.exercise_frequency < 3:
        lifestyle.append(INCREASE_ACTIVITY)
    if data.smoking_status == SmokingStatus.CURRENT:
        immediate.append(QUIT_SMOKING)

    return PersonalizedRecommendations(
        immediate=_dedupe(immediate),
        lifestyle=_dedupe(lifestyle),
    )
