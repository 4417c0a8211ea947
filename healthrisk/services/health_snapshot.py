"""
Assembly of a scoring snapshot from raw user records.

Readings, medications and family history arrive in their stored shape; this
module reduces them to the single ``HealthDataInput`` the predictors take.
Any value a source cannot supply falls back to a population-typical default.
"""

from collections import defaultdict
from collections.abc import Iterable, Sequence
from datetime import date

import structlog

from healthrisk.domain.family import FamilyMember
from healthrisk.domain.models import (
    AlcoholConsumption,
    HealthDataInput,
    SmokingStatus,
    UserProfile,
    VitalReading,
    VitalSign,
)

logger = structlog.get_logger(__name__)

DEFAULT_BMI = 25.0
DEFAULT_SYSTOLIC_BP = 120.0
DEFAULT_DIASTOLIC_BP = 80.0
DEFAULT_HEART_RATE = 70.0
DEFAULT_BLOOD_SUGAR = 90.0
DEFAULT_SLEEP_HOURS = 8.0
DEFAULT_STRESS_LEVEL = 5

BLOOD_PRESSURE = "blood_pressure"

CARDIOVASCULAR_KEYWORDS = ("heart", "cardiovascular", "stroke", "hypertension")
DIABETES_KEYWORDS = ("diabetes",)
CANCER_KEYWORDS = ("cancer",)


def average_vital_signs(readings: Iterable[VitalReading]) -> dict[str, float]:
    """
    Average readings by type.

    Blood pressure readings are split into ``systolic_bp`` and
    ``diastolic_bp``. Readings without a usable value are skipped, and types
    with no usable readings are absent from the result.
    """
    collected: defaultdict[str, list[float]] = defaultdict(list)
    for reading in readings:
        if reading.type == BLOOD_PRESSURE:
            if reading.systolic is not None:
                collected[VitalSign.SYSTOLIC_BP.value].append(reading.systolic)
            if reading.diastolic is not None:
                collected[VitalSign.DIASTOLIC_BP.value].append(reading.diastolic)
        elif reading.value is not None:
            collected[reading.type].append(reading.value)

    return {kind: sum(values) / len(values) for kind, values in collected.items() if values}


def calculate_bmi(height_cm: float | None, weight_kg: float | None) -> float:
    if not height_cm or not weight_kg:
        return DEFAULT_BMI
    return weight_kg / (height_cm / 100) ** 2


def calculate_age(birth_date: date, today: date) -> int:
    """Whole years between ``birth_date`` and ``today``."""
    age = today.year - birth_date.year
    if (today.month, today.day) < (birth_date.month, birth_date.day):
        age -= 1
    return age


def _any_condition_mentions(members: Sequence[FamilyMember], keywords: tuple[str, ...]) -> bool:
    return any(
        keyword in condition.name.lower()
        for member in members
        for condition in member.conditions
        for keyword in keywords
    )


def family_history_flags(members: Sequence[FamilyMember]) -> dict[str, bool]:
    """Keyword match over family conditions, keyed by the snapshot field name."""
    return {
        "family_history_cardiovascular": _any_condition_mentions(members, CARDIOVASCULAR_KEYWORDS),
        "family_history_diabetes": _any_condition_mentions(members, DIABETES_KEYWORDS),
        "family_history_cancer": _any_condition_mentions(members, CANCER_KEYWORDS),
    }


def _purposes_mention(purposes: Sequence[str], keyword: str) -> bool:
    return any(keyword in purpose.lower() for purpose in purposes)


def build_health_snapshot(
    profile: UserProfile,
    readings: Iterable[VitalReading],
    medication_purposes: Iterable[str | None],
    members: Sequence[FamilyMember],
    today: date,
) -> HealthDataInput:
    """
    Reduce a user's records to a scoring snapshot.

    Medical history flags come from the stated purposes of active
    medications. A zero reading or habit counts as missing and takes the
    default, matching how the stored records encode "not provided".
    """
    vitals = average_vital_signs(readings)
    purposes = [purpose for purpose in medication_purposes if purpose]
    habits = profile.lifestyle

    snapshot = HealthDataInput(
        age=calculate_age(profile.birth_date, today),
        gender=profile.gender,
        bmi=calculate_bmi(profile.height_cm, profile.weight_kg),
        systolic_bp=vitals.get(VitalSign.SYSTOLIC_BP.value) or DEFAULT_SYSTOLIC_BP,
        diastolic_bp=vitals.get(VitalSign.DIASTOLIC_BP.value) or DEFAULT_DIASTOLIC_BP,
        heart_rate=vitals.get(VitalSign.HEART_RATE.value) or DEFAULT_HEART_RATE,
        blood_sugar=vitals.get(VitalSign.BLOOD_SUGAR.value) or DEFAULT_BLOOD_SUGAR,
        smoking_status=habits.smoking or SmokingStatus.NEVER,
        alcohol_consumption=habits.alcohol or AlcoholConsumption.NONE,
        exercise_frequency=habits.exercise_frequency or 0.0,
        sleep_hours=habits.sleep_hours or DEFAULT_SLEEP_HOURS,
        stress_level=habits.stress_level or DEFAULT_STRESS_LEVEL,
        has_hypertension=_purposes_mention(purposes, "hypertension"),
        has_diabetes=_purposes_mention(purposes, "diabetes"),
        has_heart_disease=_purposes_mention(purposes, "heart"),
        has_high_cholesterol=_purposes_mention(purposes, "cholesterol"),
        **family_history_flags(members),
    )
    logger.debug(
        "health_snapshot_built",
        user_id=profile.user_id,
        vitals=sorted(vitals),
        medications=len(purposes),
        family_members=len(members),
    )
    return snapshot
