"""
In-memory collaborators for the risk analytics service.

These back the demo report and the service tests. Each class satisfies one
of the collaborator protocols in ``healthrisk.services.risk_service`` and
adds the write operations a caller needs to populate it.
"""

import uuid
from collections import defaultdict
from collections.abc import Iterable
from datetime import date
from typing import Any

import structlog

from healthrisk.domain.family import FamilyMember, FamilyRiskAssessment
from healthrisk.domain.models import HealthDataInput, HealthObservation, UserProfile, VitalReading
from healthrisk.services.family_tree import members_with_condition, next_position_in_generation
from healthrisk.services.generations import generation_for_relationship
from healthrisk.services.health_snapshot import build_health_snapshot

logger = structlog.get_logger(__name__)

RECENT_READINGS_LIMIT = 10


class InMemoryFamilyHistoryStore:
    """Family members grouped by user, listed by generation then position."""

    def __init__(self) -> None:
        self._members: dict[str, dict[str, FamilyMember]] = defaultdict(dict)
        self.logger = logger.bind(component="family_history_store")

    def add_member(self, user_id: str, relationship: str, **fields: Any) -> FamilyMember:
        """
        Create a member, deriving generation and position when not given.

        The position appends the member after the last one already in its
        generation.
        """
        existing = self._members[user_id].values()
        generation = fields.pop("generation", None)
        if generation is None:
            generation = generation_for_relationship(relationship)
        position = fields.pop("position", None)
        if position is None:
            position = next_position_in_generation(existing, generation)

        member = FamilyMember(
            id=fields.pop("id", None) or str(uuid.uuid4()),
            user_id=user_id,
            relationship=relationship,
            generation=generation,
            position=position,
            **fields,
        )
        self._members[user_id][member.id] = member
        self.logger.info(
            "family_member_added", user_id=user_id, member_id=member.id, generation=generation
        )
        return member

    def update_member(self, user_id: str, member_id: str, **changes: Any) -> FamilyMember:
        """Apply changes and revalidate; a new relationship re-derives the generation."""
        current = self._members[user_id].get(member_id)
        if current is None:
            raise KeyError(f"Family member {member_id} not found for user {user_id}")
        if "relationship" in changes and "generation" not in changes:
            changes["generation"] = generation_for_relationship(changes["relationship"])
        updated = FamilyMember.model_validate({**current.model_dump(), **changes})
        self._members[user_id][member_id] = updated
        return updated

    def remove_member(self, user_id: str, member_id: str) -> bool:
        removed = self._members[user_id].pop(member_id, None) is not None
        if removed:
            self.logger.info("family_member_removed", user_id=user_id, member_id=member_id)
        return removed

    async def list_family_members(self, user_id: str) -> list[FamilyMember]:
        return sorted(
            self._members[user_id].values(), key=lambda m: (m.generation, m.position)
        )

    async def list_members_with_condition(
        self, user_id: str, condition_name: str
    ) -> list[FamilyMember]:
        return members_with_condition(await self.list_family_members(user_id), condition_name)


class InMemoryHealthDataSource:
    """
    Health records per user, reduced to a scoring snapshot on request.

    Snapshots are either stored directly with ``set_snapshot`` or assembled
    from a profile, recent readings, medication purposes and the family
    history held by ``family_store``.
    """

    def __init__(
        self,
        family_store: InMemoryFamilyHistoryStore | None = None,
        today: date | None = None,
    ) -> None:
        self._family_store = family_store
        self._today = today
        self._snapshots: dict[str, HealthDataInput] = {}
        self._profiles: dict[str, UserProfile] = {}
        self._readings: dict[str, list[VitalReading]] = defaultdict(list)
        self._medication_purposes: dict[str, list[str]] = defaultdict(list)
        self._observations: dict[str, list[HealthObservation]] = defaultdict(list)

    def set_snapshot(self, user_id: str, snapshot: HealthDataInput) -> None:
        self._snapshots[user_id] = snapshot

    def set_profile(self, profile: UserProfile) -> None:
        self._profiles[profile.user_id] = profile

    def add_readings(self, user_id: str, readings: Iterable[VitalReading]) -> None:
        self._readings[user_id].extend(readings)

    def add_medication(self, user_id: str, purpose: str) -> None:
        self._medication_purposes[user_id].append(purpose)

    def add_observations(self, user_id: str, observations: Iterable[HealthObservation]) -> None:
        self._observations[user_id].extend(observations)

    async def get_health_snapshot(self, user_id: str) -> HealthDataInput | None:
        if user_id in self._snapshots:
            return self._snapshots[user_id]

        profile = self._profiles.get(user_id)
        if profile is None:
            return None

        members: list[FamilyMember] = []
        if self._family_store is not None:
            members = await self._family_store.list_family_members(user_id)

        readings = self._readings[user_id]
        if all(reading.measured_at is not None for reading in readings):
            readings = sorted(readings, key=lambda r: r.measured_at, reverse=True)

        return build_health_snapshot(
            profile,
            readings[:RECENT_READINGS_LIMIT],
            self._medication_purposes[user_id],
            members,
            self._today or date.today(),
        )

    async def list_observations(self, user_id: str, limit: int) -> list[HealthObservation]:
        """Most recent ``limit`` observations, newest first."""
        newest_first = sorted(self._observations[user_id], key=lambda o: o.date, reverse=True)
        return newest_first[:limit]


class InMemoryAssessmentStore:
    """Assessment cache with one entry per (user, condition); saving overwrites."""

    def __init__(self) -> None:
        self._assessments: dict[tuple[str, str], FamilyRiskAssessment] = {}

    async def save_assessment(self, assessment: FamilyRiskAssessment) -> None:
        self._assessments[(assessment.user_id, assessment.condition_name)] = assessment

    async def list_assessments(self, user_id: str) -> list[FamilyRiskAssessment]:
        return sorted(
            (a for (owner, _), a in self._assessments.items() if owner == user_id),
            key=lambda a: a.family_risk_score,
            reverse=True,
        )
