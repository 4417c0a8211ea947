"""
Tests for assembling a scoring snapshot from stored records.

Covers:
- Vital averaging, including blood pressure splitting
- BMI and age calculation with defaults
- Medication-purpose and family-history keyword flags
- Fallback values for missing readings and habits
"""

from datetime import date

import pytest

from healthrisk.domain.family import FamilyMember, MedicalCondition
from healthrisk.domain.models import (
    AlcoholConsumption,
    Gender,
    LifestyleHabits,
    SmokingStatus,
    UserProfile,
    VitalReading,
)
from healthrisk.services.health_snapshot import (
    average_vital_signs,
    build_health_snapshot,
    calculate_age,
    calculate_bmi,
    family_history_flags,
)

TODAY = date(2025, 6, 1)


def profile(**fields) -> UserProfile:
    fields.setdefault("birth_date", date(1980, 3, 15))
    fields.setdefault("gender", Gender.FEMALE)
    return UserProfile(user_id="u1", **fields)


def relative_with(*condition_names: str) -> FamilyMember:
    return FamilyMember(
        id="r1",
        user_id="u1",
        relationship="mother",
        conditions=[MedicalCondition(name=name) for name in condition_names],
    )


class TestAverageVitalSigns:
    def test_blood_pressure_split_into_two_vitals(self) -> None:
        readings = [
            VitalReading(type="blood_pressure", systolic=130, diastolic=85),
            VitalReading(type="blood_pressure", systolic=140, diastolic=95),
            VitalReading(type="heart_rate", value=72),
        ]

        assert average_vital_signs(readings) == {
            "systolic_bp": 135.0,
            "diastolic_bp": 90.0,
            "heart_rate": 72.0,
        }

    def test_readings_without_values_skipped(self) -> None:
        readings = [
            VitalReading(type="blood_sugar"),
            VitalReading(type="blood_pressure", systolic=120),
        ]

        assert average_vital_signs(readings) == {"systolic_bp": 120.0}

    def test_no_readings(self) -> None:
        assert average_vital_signs([]) == {}


class TestDerivedValues:
    def test_bmi_from_height_and_weight(self) -> None:
        assert calculate_bmi(180, 81) == pytest.approx(25.0)

    @pytest.mark.parametrize(("height", "weight"), [(None, 80), (170, None), (0, 80)])
    def test_bmi_defaults_when_missing(self, height: float | None, weight: float | None) -> None:
        assert calculate_bmi(height, weight) == 25.0

    @pytest.mark.parametrize(
        ("birth_date", "age"),
        [(date(1980, 6, 1), 45), (date(1980, 6, 2), 44), (date(1980, 1, 1), 45)],
    )
    def test_age_counts_whole_years(self, birth_date: date, age: int) -> None:
        assert calculate_age(birth_date, TODAY) == age


class TestFamilyHistoryFlags:
    def test_keywords_match_case_insensitively(self) -> None:
        flags = family_history_flags(
            [relative_with("Coronary Heart Disease", "Type 2 DIABETES", "Breast Cancer")]
        )

        assert flags == {
            "family_history_cardiovascular": True,
            "family_history_diabetes": True,
            "family_history_cancer": True,
        }

    @pytest.mark.parametrize("name", ["Stroke", "Hypertension", "cardiovascular disease"])
    def test_cardiovascular_keywords(self, name: str) -> None:
        assert family_history_flags([relative_with(name)])["family_history_cardiovascular"]

    def test_no_family(self) -> None:
        assert not any(family_history_flags([]).values())


class TestBuildHealthSnapshot:
    def test_full_record(self) -> None:
        snapshot = build_health_snapshot(
            profile(
                height_cm=160,
                weight_kg=64,
                lifestyle=LifestyleHabits(
                    smoking=SmokingStatus.CURRENT,
                    alcohol=AlcoholConsumption.LIGHT,
                    exercise_frequency=2,
                    sleep_hours=6,
                    stress_level=7,
                ),
            ),
            [
                VitalReading(type="blood_pressure", systolic=150, diastolic=95),
                VitalReading(type="blood_sugar", value=110),
            ],
            ["Hypertension management", None, "Cholesterol control"],
            [relative_with("Type 2 Diabetes")],
            TODAY,
        )

        assert snapshot.age == 45
        assert snapshot.gender == Gender.FEMALE
        assert snapshot.bmi == pytest.approx(25.0)
        assert snapshot.systolic_bp == 150
        assert snapshot.diastolic_bp == 95
        assert snapshot.heart_rate == 70.0
        assert snapshot.blood_sugar == 110
        assert snapshot.smoking_status == SmokingStatus.CURRENT
        assert snapshot.alcohol_consumption == AlcoholConsumption.LIGHT
        assert snapshot.exercise_frequency == 2
        assert snapshot.sleep_hours == 6
        assert snapshot.stress_level == 7
        assert snapshot.has_hypertension
        assert snapshot.has_high_cholesterol
        assert not snapshot.has_diabetes
        assert not snapshot.has_heart_disease
        assert snapshot.family_history_diabetes
        assert not snapshot.family_history_cardiovascular

    def test_empty_record_uses_defaults(self) -> None:
        snapshot = build_health_snapshot(profile(), [], [], [], TODAY)

        assert snapshot.bmi == 25.0
        assert (snapshot.systolic_bp, snapshot.diastolic_bp) == (120.0, 80.0)
        assert snapshot.blood_sugar == 90.0
        assert snapshot.smoking_status == SmokingStatus.NEVER
        assert snapshot.alcohol_consumption == AlcoholConsumption.NONE
        assert snapshot.exercise_frequency == 0.0
        assert snapshot.sleep_hours == 8.0
        assert snapshot.stress_level == 5

    def test_zero_sleep_treated_as_missing(self) -> None:
        snapshot = build_health_snapshot(
            profile(lifestyle=LifestyleHabits(sleep_hours=0)), [], [], [], TODAY
        )

        assert snapshot.sleep_hours == 8.0

    def test_heart_medication_flags_heart_disease(self) -> None:
        snapshot = build_health_snapshot(profile(), [], ["Heart failure"], [], TODAY)

        assert snapshot.has_heart_disease
