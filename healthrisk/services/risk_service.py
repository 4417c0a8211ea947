"""
Orchestration of the pure scoring core over storage collaborators.

Key patterns:
- Protocol-based collaborators (stores, catalog, health data source)
- Every collaborator call bounded by a timeout and returned as a Result
- Structured concurrency with asyncio.TaskGroup for independent work
- Scoring itself stays synchronous and side-effect free; only this layer
  reads the clock or touches storage
"""

import asyncio
from collections.abc import Awaitable, Callable, Iterable
from datetime import UTC, datetime
from typing import Protocol, TypeVar

import structlog
from pydantic import BaseModel, ConfigDict, Field

from healthrisk.config import AnalyticsConfig
from healthrisk.domain.family import (
    FamilyHealthSummary,
    FamilyMember,
    FamilyRiskAssessment,
    FamilyTreeNode,
    GeneticCondition,
)
from healthrisk.domain.models import (
    DEFAULT_PREDICTION_MODELS,
    AlertLevel,
    HealthDataInput,
    HealthDeteriorationPattern,
    HealthObservation,
    HealthRiskPrediction,
    PredictionModel,
    PredictionType,
    RiskFactorAnalysis,
)
from healthrisk.services import hereditary_risk
from healthrisk.services.disease_prediction import predict_risk
from healthrisk.services.family_tree import (
    build_family_tree,
    common_family_conditions,
    family_history_stats,
)
from healthrisk.services.recommendations import (
    PersonalizedRecommendations,
    personalized_recommendations,
)
from healthrisk.services.result import Result
from healthrisk.services.risk_factors import analyze_risk_factors
from healthrisk.services.trend_detection import (
    analyze_health_trends,
    highest_alert_level,
    patterns_confidence,
)

logger = structlog.get_logger(__name__)

T = TypeVar("T")

PREDICTION_MODEL_NAMES: dict[PredictionType, str] = {
    PredictionType.CARDIOVASCULAR: "cardiovascular_risk_model",
    PredictionType.DIABETES: "diabetes_risk_model",
    PredictionType.GENERAL_HEALTH: "general_health_risk_model",
}
DETERIORATION_MODEL_NAME = "health_deterioration_model"


class FamilyHistoryStore(Protocol):
    async def list_family_members(self, user_id: str) -> list[FamilyMember]: ...

    async def list_members_with_condition(
        self, user_id: str, condition_name: str
    ) -> list[FamilyMember]: ...


class GeneticCatalog(Protocol):
    async def get_condition_by_name(self, name: str) -> GeneticCondition | None: ...

    async def list_hereditary_conditions(self) -> list[GeneticCondition]: ...


class HealthDataSource(Protocol):
    async def get_health_snapshot(self, user_id: str) -> HealthDataInput | None:
        """Current snapshot for the user, or None when the user is unknown."""
        ...

    async def list_observations(self, user_id: str, limit: int) -> list[HealthObservation]: ...


class AssessmentStore(Protocol):
    """Cache of the latest assessment per (user_id, condition_name)."""

    async def save_assessment(self, assessment: FamilyRiskAssessment) -> None: ...

    async def list_assessments(self, user_id: str) -> list[FamilyRiskAssessment]: ...


class MissingHealthDataError(LookupError):
    """Raised into a Result when a user has no health snapshot."""


class PredictionRecord(BaseModel):
    """A prediction tagged with the model that produced it."""

    model_config = ConfigDict(frozen=True, protected_namespaces=())

    user_id: str
    model_name: str
    model_version: str
    prediction_type: PredictionType
    result: HealthRiskPrediction
    confidence: float = Field(ge=0.0, le=1.0)
    created_at: datetime


class HealthInsights(BaseModel):
    model_config = ConfigDict(frozen=True)

    user_id: str
    predictions: list[PredictionRecord]
    generated_at: datetime


class DeteriorationReport(BaseModel):
    model_config = ConfigDict(frozen=True, protected_namespaces=())

    user_id: str
    model_name: str
    model_version: str
    patterns: list[HealthDeteriorationPattern]
    alert_level: AlertLevel
    confidence: float = Field(ge=0.0, le=1.0)
    data_points: int = Field(ge=0)
    created_at: datetime


def _utcnow() -> datetime:
    return datetime.now(UTC)


class HealthRiskService:
    """
    Health risk analytics for a user, backed by injected collaborators.

    Failures of collaborators come back as ``Result.err`` and are logged;
    nothing from storage escapes as an exception. Asking for a prediction
    type that does not exist is a caller error and raises ``ValueError``.
    """

    def __init__(
        self,
        family_store: FamilyHistoryStore,
        catalog: GeneticCatalog,
        health_source: HealthDataSource,
        assessment_store: AssessmentStore,
        config: AnalyticsConfig | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.family_store = family_store
        self.catalog = catalog
        self.health_source = health_source
        self.assessment_store = assessment_store
        self.config = config or AnalyticsConfig()
        self.clock = clock
        self.logger = logger.bind(component="health_risk_service")

    async def _call(self, operation: str, awaitable: Awaitable[T]) -> Result[T]:
        """Run one collaborator call under the storage timeout."""
        try:
            value = await asyncio.wait_for(
                awaitable, timeout=self.config.storage_timeout_seconds
            )
            return Result.ok(value)
        except TimeoutError as e:
            self.logger.warning(
                "collaborator_call_timeout",
                operation=operation,
                timeout_seconds=self.config.storage_timeout_seconds,
            )
            return Result.err(e)
        except Exception as e:
            self.logger.exception("collaborator_call_failed", operation=operation, error=str(e))
            return Result.err(e)

    async def _snapshot(self, user_id: str) -> Result[HealthDataInput]:
        result = await self._call(
            "get_health_snapshot", self.health_source.get_health_snapshot(user_id)
        )
        if result.is_err():
            return Result.err(result.unwrap_err())
        snapshot = result.unwrap()
        if snapshot is None:
            self.logger.warning("health_snapshot_missing", user_id=user_id)
            return Result.err(MissingHealthDataError(f"No health data for user {user_id}"))
        return Result.ok(snapshot)

    # Hereditary risk

    async def assess_condition(
        self, user_id: str, condition_name: str
    ) -> Result[FamilyRiskAssessment]:
        """Recompute one condition's hereditary risk and overwrite the cached assessment."""
        async with asyncio.TaskGroup() as task_group:
            members_task = task_group.create_task(
                self._call("list_family_members", self.family_store.list_family_members(user_id))
            )
            affected_task = task_group.create_task(
                self._call(
                    "list_members_with_condition",
                    self.family_store.list_members_with_condition(user_id, condition_name),
                )
            )
            genetic_task = task_group.create_task(
                self._call(
                    "get_condition_by_name", self.catalog.get_condition_by_name(condition_name)
                )
            )

        for task in (members_task, affected_task, genetic_task):
            if task.result().is_err():
                return Result.err(task.result().unwrap_err())

        assessment = hereditary_risk.assess_condition(
            user_id,
            condition_name,
            affected_task.result().unwrap(),
            members_task.result().unwrap(),
            genetic_task.result().unwrap(),
            calculated_at=self.clock(),
        )

        saved = await self._call(
            "save_assessment", self.assessment_store.save_assessment(assessment)
        )
        if saved.is_err():
            return Result.err(saved.unwrap_err())

        self.logger.info(
            "condition_assessed",
            user_id=user_id,
            condition=condition_name,
            risk_level=assessment.risk_level.value,
            score=round(assessment.family_risk_score, 4),
        )
        return Result.ok(assessment)

    async def comprehensive_assessment(self, user_id: str) -> Result[list[FamilyRiskAssessment]]:
        """Assess every family condition plus catalog hereditary conditions, highest risk first."""
        members_result = await self._call(
            "list_family_members", self.family_store.list_family_members(user_id)
        )
        if members_result.is_err():
            return Result.err(members_result.unwrap_err())
        members = members_result.unwrap()

        hereditary_result = await self._call(
            "list_hereditary_conditions", self.catalog.list_hereditary_conditions()
        )
        if hereditary_result.is_err():
            return Result.err(hereditary_result.unwrap_err())
        hereditary = hereditary_result.unwrap()

        known = {condition.name for condition in hereditary}
        unresolved = [
            frequency.condition
            for frequency in common_family_conditions(members)
            if frequency.condition not in known
        ]
        async with asyncio.TaskGroup() as task_group:
            lookups = [
                task_group.create_task(
                    self._call("get_condition_by_name", self.catalog.get_condition_by_name(name))
                )
                for name in unresolved
            ]

        catalog_entries = list(hereditary)
        for lookup in lookups:
            result = lookup.result()
            if result.is_err():
                return Result.err(result.unwrap_err())
            if result.unwrap() is not None:
                catalog_entries.append(result.unwrap())

        assessments = hereditary_risk.comprehensive_assessment(
            user_id, members, catalog_entries, hereditary, calculated_at=self.clock()
        )
        for assessment in assessments:
            saved = await self._call(
                "save_assessment", self.assessment_store.save_assessment(assessment)
            )
            if saved.is_err():
                return Result.err(saved.unwrap_err())

        self.logger.info(
            "comprehensive_assessment_completed",
            user_id=user_id,
            family_members=len(members),
            assessments=len(assessments),
        )
        return Result.ok(assessments)

    async def recalculate_after_member_change(
        self, user_id: str, condition_names: Iterable[str]
    ) -> Result[list[FamilyRiskAssessment]]:
        """Refresh cached assessments for the conditions of an added or edited member."""
        assessments: list[FamilyRiskAssessment] = []
        for condition_name in dict.fromkeys(condition_names):
            result = await self.assess_condition(user_id, condition_name)
            if result.is_err():
                return Result.err(result.unwrap_err())
            assessments.append(result.unwrap())
        return Result.ok(assessments)

    async def recalculate_after_member_removal(
        self, user_id: str
    ) -> Result[list[FamilyRiskAssessment]]:
        """
        Refresh every cached assessment after a member was removed.

        Conditions still present in the family are recomputed, and so are
        previously cached conditions, which may now have no affected relatives.
        """
        members_result = await self._call(
            "list_family_members", self.family_store.list_family_members(user_id)
        )
        if members_result.is_err():
            return Result.err(members_result.unwrap_err())
        cached_result = await self._call(
            "list_assessments", self.assessment_store.list_assessments(user_id)
        )
        if cached_result.is_err():
            return Result.err(cached_result.unwrap_err())

        members = members_result.unwrap()
        names = [frequency.condition for frequency in common_family_conditions(members)]
        names.extend(assessment.condition_name for assessment in cached_result.unwrap())
        return await self.recalculate_after_member_change(user_id, names)

    async def family_tree(self, user_id: str) -> Result[list[FamilyTreeNode]]:
        members_result = await self._call(
            "list_family_members", self.family_store.list_family_members(user_id)
        )
        if members_result.is_err():
            return Result.err(members_result.unwrap_err())
        return Result.ok(build_family_tree(members_result.unwrap()))

    async def family_summary(self, user_id: str) -> Result[FamilyHealthSummary]:
        async with asyncio.TaskGroup() as task_group:
            members_task = task_group.create_task(
                self._call("list_family_members", self.family_store.list_family_members(user_id))
            )
            assessments_task = task_group.create_task(
                self._call("list_assessments", self.assessment_store.list_assessments(user_id))
            )

        for task in (members_task, assessments_task):
            if task.result().is_err():
                return Result.err(task.result().unwrap_err())

        stats = family_history_stats(members_task.result().unwrap())
        return Result.ok(
            hereditary_risk.family_health_summary(stats, assessments_task.result().unwrap())
        )

    # Disease prediction

    def _record(
        self, user_id: str, kind: PredictionType, prediction: HealthRiskPrediction
    ) -> PredictionRecord:
        model: PredictionModel = DEFAULT_PREDICTION_MODELS[PREDICTION_MODEL_NAMES[kind]]
        return PredictionRecord(
            user_id=user_id,
            model_name=model.name,
            model_version=model.version,
            prediction_type=kind,
            result=prediction,
            confidence=prediction.confidence,
            created_at=self.clock(),
        )

    async def predict(
        self, user_id: str, prediction_type: PredictionType | str
    ) -> Result[PredictionRecord]:
        """
        Run one prediction against the user's current snapshot.

        Raises:
            ValueError: ``prediction_type`` is not a supported prediction.
        """
        try:
            kind = PredictionType(prediction_type)
        except ValueError:
            raise ValueError(f"Unsupported prediction type: {prediction_type}") from None

        snapshot = await self._snapshot(user_id)
        if snapshot.is_err():
            return Result.err(snapshot.unwrap_err())

        record = self._record(user_id, kind, predict_risk(kind, snapshot.unwrap()))
        self.logger.info(
            "prediction_created",
            user_id=user_id,
            prediction_type=kind.value,
            risk_level=record.result.risk_level.value,
        )
        return Result.ok(record)

    def _predict_all(self, user_id: str, snapshot: HealthDataInput) -> list[PredictionRecord]:
        return [
            self._record(user_id, kind, predict_risk(kind, snapshot)) for kind in PredictionType
        ]

    async def health_insights(self, user_id: str) -> Result[HealthInsights]:
        """All prediction types for one snapshot."""
        snapshot_result = await self._snapshot(user_id)
        if snapshot_result.is_err():
            return Result.err(snapshot_result.unwrap_err())
        snapshot = snapshot_result.unwrap()

        insights = HealthInsights(
            user_id=user_id,
            predictions=self._predict_all(user_id, snapshot),
            generated_at=self.clock(),
        )
        self.logger.info(
            "health_insights_generated",
            user_id=user_id,
            risk_levels={
                record.prediction_type.value: record.result.risk_level.value
                for record in insights.predictions
            },
        )
        return Result.ok(insights)

    # Trends and risk factors

    async def analyze_deterioration(self, user_id: str) -> Result[DeteriorationReport]:
        observations_result = await self._call(
            "list_observations",
            self.health_source.list_observations(user_id, self.config.observation_history_limit),
        )
        if observations_result.is_err():
            return Result.err(observations_result.unwrap_err())
        observations = observations_result.unwrap()

        patterns = analyze_health_trends(observations)
        model = DEFAULT_PREDICTION_MODELS[DETERIORATION_MODEL_NAME]
        report = DeteriorationReport(
            user_id=user_id,
            model_name=model.name,
            model_version=model.version,
            patterns=patterns,
            alert_level=highest_alert_level(patterns),
            confidence=patterns_confidence(patterns),
            data_points=len(observations),
            created_at=self.clock(),
        )
        self.logger.info(
            "deterioration_analyzed",
            user_id=user_id,
            data_points=report.data_points,
            patterns=len(patterns),
            alert_level=report.alert_level.value,
        )
        return Result.ok(report)

    async def analyze_risk_factors(self, user_id: str) -> Result[RiskFactorAnalysis]:
        snapshot = await self._snapshot(user_id)
        if snapshot.is_err():
            return Result.err(snapshot.unwrap_err())

        members_result = await self._call(
            "list_family_members", self.family_store.list_family_members(user_id)
        )
        if members_result.is_err():
            return Result.err(members_result.unwrap_err())

        analysis = analyze_risk_factors(snapshot.unwrap(), family_history=members_result.unwrap())
        self.logger.info(
            "risk_factors_identified",
            user_id=user_id,
            risk_factors=len(analysis.risk_factors),
            risk_trend=analysis.risk_trend.value,
        )
        return Result.ok(analysis)

    async def personalized_recommendations(
        self, user_id: str
    ) -> Result[PersonalizedRecommendations]:
        snapshot_result = await self._snapshot(user_id)
        if snapshot_result.is_err():
            return Result.err(snapshot_result.unwrap_err())
        snapshot = snapshot_result.unwrap()

        records = self._predict_all(user_id, snapshot)
        return Result.ok(
            personalized_recommendations(snapshot, (record.result for record in records))
        )
