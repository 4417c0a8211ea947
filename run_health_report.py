"""
End-to-end health risk report against the in-memory collaborators.

This script walks the whole pipeline:
1. Configuration loading and logging setup
2. Family history entry with automatic generation and position assignment
3. Hereditary risk assessment and family summary
4. Disease risk predictions and risk factor analysis
5. Deterioration trend detection over two weeks of observations

Run with: uv run python run_health_report.py
"""

import asyncio
from datetime import UTC, date, datetime, timedelta

from rich.console import Console
from rich.panel import Panel

from adapters.catalog import InMemoryGeneticCatalog
from adapters.memory import (
    InMemoryAssessmentStore,
    InMemoryFamilyHistoryStore,
    InMemoryHealthDataSource,
)
from healthrisk.config import get_config, print_config_summary
from healthrisk.domain.family import MedicalCondition
from healthrisk.domain.models import (
    AlcoholConsumption,
    Gender,
    HealthObservation,
    LifestyleHabits,
    SmokingStatus,
    UserProfile,
    VitalReading,
)
from healthrisk.observability import configure_logging
from healthrisk.reporting import (
    render_assessments,
    render_family_summary,
    render_patterns,
    render_prediction,
    render_risk_factor_analysis,
)
from healthrisk.services.risk_service import HealthRiskService

console = Console()

USER_ID = "demo-user"
TODAY = date(2025, 6, 1)


def populate_family(store: InMemoryFamilyHistoryStore) -> None:
    grandfather = store.add_member(
        USER_ID,
        "paternal_grandfather",
        name="Walter",
        gender="male",
        birth_year=1930,
        death_year=1992,
        is_alive=False,
        cause_of_death="Heart attack",
        conditions=[MedicalCondition(name="Familial Hypercholesterolemia", diagnosed_year=1975)],
    )
    father = store.add_member(
        USER_ID,
        "father",
        name="Robert",
        gender="male",
        birth_year=1958,
        parent_id=grandfather.id,
        conditions=[
            MedicalCondition(name="Familial Hypercholesterolemia", diagnosed_year=1996),
            MedicalCondition(name="Hypertension", severity="moderate", status="managed"),
        ],
    )
    store.add_member(
        USER_ID,
        "mother",
        name="Linda",
        gender="female",
        birth_year=1961,
        conditions=[MedicalCondition(name="Type 2 Diabetes", diagnosed_year=2012)],
    )
    store.add_member(
        USER_ID, "brother", name="Chris", gender="male", birth_year=1988, parent_id=father.id
    )
    store.add_member(
        USER_ID, "sister", name="Anna", gender="female", birth_year=1992, parent_id=father.id
    )


def populate_health_data(source: InMemoryHealthDataSource) -> None:
    source.set_profile(
        UserProfile(
            user_id=USER_ID,
            birth_date=date(1975, 9, 14),
            gender=Gender.MALE,
            height_cm=178,
            weight_kg=96,
            lifestyle=LifestyleHabits(
                smoking=SmokingStatus.FORMER,
                alcohol=AlcoholConsumption.MODERATE,
                exercise_frequency=1,
                sleep_hours=6.5,
                stress_level=8,
            ),
        )
    )
    source.add_readings(
        USER_ID,
        [
            VitalReading(type="blood_pressure", systolic=142, diastolic=91),
            VitalReading(type="blood_pressure", systolic=138, diastolic=88),
            VitalReading(type="heart_rate", value=78),
            VitalReading(type="blood_sugar", value=108),
        ],
    )
    source.add_medication(USER_ID, "Hypertension management")

    start = datetime(2025, 5, 18, 8, tzinfo=UTC)
    source.add_observations(
        USER_ID,
        [
            HealthObservation(
                date=start + timedelta(days=day),
                vital_signs={
                    "systolic_bp": 128 + day * 2.5,
                    "heart_rate": 72 + (day % 3),
                    "weight": 95.5,
                },
                symptoms=["fatigue"] if day >= 11 else [],
                overall_condition=max(1.0, 4.0 - day * 0.2),
            )
            for day in range(14)
        ],
    )


async def run_report() -> None:
    config = get_config()
    configure_logging(config.logging)
    print_config_summary()

    family_store = InMemoryFamilyHistoryStore()
    health_source = InMemoryHealthDataSource(family_store, today=TODAY)
    service = HealthRiskService(
        family_store,
        InMemoryGeneticCatalog.seeded(),
        health_source,
        InMemoryAssessmentStore(),
        config=config.analytics,
    )

    populate_family(family_store)
    populate_health_data(health_source)

    console.print(Panel("🧬 Hereditary Risk", style="bold blue"))
    assessments = await service.comprehensive_assessment(USER_ID)
    if assessments.is_err():
        console.print(f"❌ Assessment failed: {assessments.unwrap_err()}", style="red")
        return
    render_assessments(assessments.unwrap(), console)

    summary = await service.family_summary(USER_ID)
    if summary.is_ok():
        render_family_summary(summary.unwrap(), console)

    console.print(Panel("🩺 Disease Risk Predictions", style="bold blue"))
    insights = await service.health_insights(USER_ID)
    if insights.is_err():
        console.print(f"❌ Predictions failed: {insights.unwrap_err()}", style="red")
        return
    for record in insights.unwrap().predictions:
        render_prediction(record.result, console)

    console.print(Panel("⚠️  Risk Factors", style="bold blue"))
    analysis = await service.analyze_risk_factors(USER_ID)
    if analysis.is_ok():
        render_risk_factor_analysis(analysis.unwrap(), console)

    console.print(Panel("📈 Health Trends", style="bold blue"))
    report = await service.analyze_deterioration(USER_ID)
    if report.is_ok():
        render_patterns(report.unwrap().patterns, console)
        console.print(
            f"Highest alert: {report.unwrap().alert_level.value.upper()} "
            f"over {report.unwrap().data_points} observations"
        )

    recommendations = await service.personalized_recommendations(USER_ID)
    if recommendations.is_ok():
        immediate = "\n".join(f"• {item}" for item in recommendations.unwrap().immediate)
        console.print(Panel(immediate, title="Do First", style="green"))


if __name__ == "__main__":
    try:
        asyncio.run(run_report())
    except KeyboardInterrupt:
        console.print("\n👋 Report stopped by user", style="yellow")
