"""
Family history domain models.

A user's family is stored as a flat list of members linked by an optional
parent reference. Hereditary scoring reads the same list the tree builder
does, so every derived record here is a pure function of member state.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from healthrisk.domain.models import RiskLevel


class Relationship(str, Enum):
    """Relationship labels relative to the user, grouped by generation."""

    # Generation -2
    PATERNAL_GRANDFATHER = "paternal_grandfather"
    PATERNAL_GRANDMOTHER = "paternal_grandmother"
    MATERNAL_GRANDFATHER = "maternal_grandfather"
    MATERNAL_GRANDMOTHER = "maternal_grandmother"

    # Generation -1
    FATHER = "father"
    MOTHER = "mother"
    STEPFATHER = "stepfather"
    STEPMOTHER = "stepmother"
    UNCLE = "uncle"
    AUNT = "aunt"

    # Generation 0
    BROTHER = "brother"
    SISTER = "sister"
    HALF_BROTHER = "half_brother"
    HALF_SISTER = "half_sister"
    STEPBROTHER = "stepbrother"
    STEPSISTER = "stepsister"
    COUSIN = "cousin"

    # Generation +1
    SON = "son"
    DAUGHTER = "daughter"
    STEPSON = "stepson"
    STEPDAUGHTER = "stepdaughter"
    NEPHEW = "nephew"
    NIECE = "niece"

    # Generation +2
    GRANDSON = "grandson"
    GRANDDAUGHTER = "granddaughter"


class ConditionCategory(str, Enum):
    CARDIOVASCULAR = "cardiovascular"
    CANCER = "cancer"
    NEUROLOGICAL = "neurological"
    METABOLIC = "metabolic"
    AUTOIMMUNE = "autoimmune"
    MENTAL_HEALTH = "mental_health"
    RESPIRATORY = "respiratory"
    ENDOCRINE = "endocrine"
    MUSCULOSKELETAL = "musculoskeletal"
    DERMATOLOGICAL = "dermatological"
    OPHTHALMOLOGICAL = "ophthalmological"
    OTHER = "other"


class InheritancePattern(str, Enum):
    AUTOSOMAL_DOMINANT = "autosomal_dominant"
    AUTOSOMAL_RECESSIVE = "autosomal_recessive"
    X_LINKED = "x_linked"
    MITOCHONDRIAL = "mitochondrial"
    MULTIFACTORIAL = "multifactorial"


MemberGender = Literal["male", "female", "unknown"]


class MedicalCondition(BaseModel):
    """A diagnosed condition recorded against a family member."""

    name: str = Field(min_length=1)
    diagnosed_year: int | None = None
    severity: Literal["mild", "moderate", "severe"] | None = None
    status: Literal["active", "resolved", "managed"] | None = None
    notes: str | None = None


class FamilyMember(BaseModel):
    """A relative of the user, as supplied by the family history store."""

    id: str
    user_id: str
    relationship: str = Field(description="Relationship label, usually a Relationship value")
    name: str | None = None
    gender: MemberGender | None = None
    birth_year: int | None = None
    death_year: int | None = None
    is_alive: bool = True
    generation: int = Field(default=0, ge=-3, le=3)
    position: int = Field(default=0, ge=0, description="Orders siblings within a generation")
    parent_id: str | None = None
    conditions: list[MedicalCondition] = Field(default_factory=list)
    cause_of_death: str | None = None
    notes: str | None = None

    @model_validator(mode="before")
    @classmethod
    def derive_generation(cls, data: Any) -> Any:
        """Fill in the generation from the relationship when none was given."""
        if isinstance(data, dict) and data.get("generation") is None and "relationship" in data:
            from healthrisk.services.generations import generation_for_relationship

            data = {**data, "generation": generation_for_relationship(data["relationship"])}
        return data

    @model_validator(mode="after")
    def check_life_span(self) -> "FamilyMember":
        if not self.is_alive and self.death_year is None:
            raise ValueError("death_year is required for a deceased family member")
        if (
            self.birth_year is not None
            and self.death_year is not None
            and self.birth_year >= self.death_year
        ):
            raise ValueError("birth_year must be earlier than death_year")
        return self

    @property
    def display_label(self) -> str:
        return self.name or self.relationship

    def has_condition(self, condition_name: str) -> bool:
        return any(condition.name == condition_name for condition in self.conditions)


class GeneticCondition(BaseModel):
    """Catalog entry describing a condition with a known genetic component."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    icd10_code: str | None = None
    category: ConditionCategory
    inheritance_pattern: InheritancePattern | None = None
    prevalence: float | None = Field(default=None, ge=0.0, le=1.0)
    penetrance: float | None = Field(default=None, ge=0.0, le=1.0)
    description: str | None = None
    risk_factors: list[str] = Field(default_factory=list)
    symptoms: list[str] = Field(default_factory=list)
    is_hereditary: bool = True


class FamilyRiskAssessment(BaseModel):
    """Hereditary risk for one condition, cached by (user_id, condition_name)."""

    model_config = ConfigDict(frozen=True)

    user_id: str
    condition_name: str
    family_risk_score: float = Field(ge=0.0, le=1.0)
    affected_relatives: int = Field(ge=0)
    risk_level: RiskLevel
    recommendations: list[str] = Field(default_factory=list)
    calculated_at: datetime | None = Field(
        default=None, description="Stamped by the caller when the assessment is stored"
    )


class FamilyTreeNode(BaseModel):
    """A member projected for tree display, with resolved children."""

    id: str
    name: str | None = None
    gender: MemberGender | None = None
    relationship: str
    generation: int
    position: int
    is_alive: bool
    birth_year: int | None = None
    death_year: int | None = None
    conditions: list[MedicalCondition] = Field(default_factory=list)
    children: list["FamilyTreeNode"] = Field(default_factory=list)


class ConditionFrequency(BaseModel):
    """How often a condition appears across the family."""

    model_config = ConfigDict(frozen=True)

    condition: str
    count: int = Field(ge=0)
    members: list[str] = Field(default_factory=list)
    percentage: float = Field(default=0.0, ge=0.0)


class FamilyHistoryStats(BaseModel):
    model_config = ConfigDict(frozen=True)

    total_members: int = Field(ge=0)
    living_members: int = Field(ge=0)
    deceased_members: int = Field(ge=0)
    generations_tracked: int = Field(ge=0)
    common_conditions: list[ConditionFrequency]


class FamilyHealthSummary(BaseModel):
    """Dashboard view combining family statistics with cached assessments."""

    model_config = ConfigDict(frozen=True)

    total_members: int
    living_members: int
    deceased_members: int
    generations_tracked: int
    high_risk_conditions: int
    total_assessments: int
    top_risks: list[FamilyRiskAssessment] = Field(max_length=5)
    common_conditions: list[ConditionFrequency] = Field(max_length=10)
    hereditary_risk: int = Field(description="Number of very_high assessments")
