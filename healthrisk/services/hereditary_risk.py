"""
Hereditary risk scoring from family history.

Score composition for one condition:
- Family prevalence: share of relatives affected, weighted 0.4
- Closeness: summed generation weights of affected relatives (capped at 1), weighted 0.4
- Catalog adjustment: penetrance, then inheritance-pattern multiplier
- Early onset: x1.3 when an affected relative was diagnosed before 50

The result is clamped to [0, 1] and bucketed into a risk tier.
"""

from collections.abc import Sequence
from datetime import datetime

import structlog

from healthrisk.domain.family import (
    ConditionCategory,
    FamilyHealthSummary,
    FamilyHistoryStats,
    FamilyMember,
    FamilyRiskAssessment,
    GeneticCondition,
    InheritancePattern,
)
from healthrisk.domain.models import RiskLevel
from healthrisk.services.family_tree import common_family_conditions, members_with_condition
from healthrisk.services.generations import closeness_weight

logger = structlog.get_logger(__name__)

PREVALENCE_WEIGHT = 0.4
CLOSENESS_WEIGHT = 0.4
EARLY_ONSET_AGE = 50
EARLY_ONSET_MULTIPLIER = 1.3
CATALOG_ONLY_MIN_SCORE = 0.1

INHERITANCE_MULTIPLIERS: dict[InheritancePattern, float] = {
    InheritancePattern.AUTOSOMAL_DOMINANT: 1.2,
    InheritancePattern.AUTOSOMAL_RECESSIVE: 0.8,
}

TIER_RECOMMENDATIONS: dict[RiskLevel, tuple[str, ...]] = {
    RiskLevel.VERY_HIGH: (
        "Consider genetic counseling and testing",
        "Discuss with healthcare provider about enhanced screening",
        "Consider preventive measures if available",
    ),
    RiskLevel.HIGH: (
        "Discuss family history with healthcare provider",
        "Consider earlier or more frequent screening",
    ),
    RiskLevel.MODERATE: (
        "Inform healthcare provider about family history",
        "Follow standard screening guidelines",
    ),
    RiskLevel.LOW: ("Continue routine health maintenance",),
}

CATEGORY_RECOMMENDATIONS: dict[ConditionCategory, tuple[str, ...]] = {
    ConditionCategory.CARDIOVASCULAR: (
        "Maintain healthy diet and exercise regularly",
        "Monitor blood pressure and cholesterol",
    ),
    ConditionCategory.CANCER: (
        "Follow cancer screening guidelines",
        "Consider genetic testing if appropriate",
    ),
    ConditionCategory.NEUROLOGICAL: (
        "Maintain cognitive health through mental exercises",
        "Consider neurological evaluation if symptoms develop",
    ),
    ConditionCategory.METABOLIC: (
        "Maintain healthy weight and diet",
        "Monitor relevant metabolic markers",
    ),
}


def risk_level_for_score(score: float) -> RiskLevel:
    """Bucket a score; a value on a boundary belongs to the higher tier."""
    if score < 0.2:
        return RiskLevel.LOW
    if score < 0.4:
        return RiskLevel.MODERATE
    if score < 0.7:
        return RiskLevel.HIGH
    return RiskLevel.VERY_HIGH


def _has_early_onset(member: FamilyMember) -> bool:
    if member.birth_year is None:
        return False
    return any(
        condition.diagnosed_year is not None
        and condition.diagnosed_year - member.birth_year < EARLY_ONSET_AGE
        for condition in member.conditions
    )


def calculate_risk_score(
    condition_name: str,
    affected_members: Sequence[FamilyMember],
    all_members: Sequence[FamilyMember],
    genetic_condition: GeneticCondition | None = None,
) -> float:
    """Hereditary risk in [0, 1] for ``condition_name``; 0 when nobody is affected."""
    if not affected_members:
        return 0.0

    affected_ratio = len(affected_members) / max(len(all_members), 1)
    score = affected_ratio * PREVALENCE_WEIGHT

    closeness = sum(closeness_weight(member.generation) for member in affected_members)
    score += min(closeness, 1.0) * CLOSENESS_WEIGHT

    if genetic_condition is not None:
        # A zero penetrance is treated as unknown, not as "never expressed".
        if genetic_condition.penetrance:
            score *= genetic_condition.penetrance
        if genetic_condition.inheritance_pattern is not None:
            score *= INHERITANCE_MULTIPLIERS.get(genetic_condition.inheritance_pattern, 1.0)

    if any(_has_early_onset(member) for member in affected_members):
        score *= EARLY_ONSET_MULTIPLIER

    score = max(0.0, min(score, 1.0))
    logger.debug(
        "hereditary_risk_scored",
        condition=condition_name,
        affected=len(affected_members),
        total=len(all_members),
        score=round(score, 4),
    )
    return score


def hereditary_recommendations(
    risk_level: RiskLevel, genetic_condition: GeneticCondition | None = None
) -> list[str]:
    recommendations = list(TIER_RECOMMENDATIONS[risk_level])
    if genetic_condition is not None:
        recommendations.extend(CATEGORY_RECOMMENDATIONS.get(genetic_condition.category, ()))
    return recommendations


def assess_condition(
    user_id: str,
    condition_name: str,
    affected_members: Sequence[FamilyMember],
    all_members: Sequence[FamilyMember],
    genetic_condition: GeneticCondition | None = None,
    calculated_at: datetime | None = None,
) -> FamilyRiskAssessment:
    """Score one condition and package it as a cacheable assessment."""
    score = calculate_risk_score(condition_name, affected_members, all_members, genetic_condition)
    risk_level = risk_level_for_score(score)
    return FamilyRiskAssessment(
        user_id=user_id,
        condition_name=condition_name,
        family_risk_score=score,
        affected_relatives=len(affected_members),
        risk_level=risk_level,
        recommendations=hereditary_recommendations(risk_level, genetic_condition),
        calculated_at=calculated_at,
    )


def comprehensive_assessment(
    user_id: str,
    members: Sequence[FamilyMember],
    catalog: Sequence[GeneticCondition],
    hereditary_conditions: Sequence[GeneticCondition] | None = None,
    calculated_at: datetime | None = None,
) -> list[FamilyRiskAssessment]:
    """
    Assess every condition present in the family plus hereditary catalog entries.

    Conditions observed in the family are always reported. Hereditary catalog
    conditions nobody in the family has are only kept above a 0.1 score.
    ``catalog`` resolves condition names to catalog entries; the hereditary
    list defaults to the catalog entries flagged hereditary.
    """
    by_name = {condition.name: condition for condition in catalog}
    if hereditary_conditions is None:
        hereditary_conditions = [condition for condition in catalog if condition.is_hereditary]

    assessments: list[FamilyRiskAssessment] = []
    for frequency in common_family_conditions(members):
        assessments.append(
            assess_condition(
                user_id,
                frequency.condition,
                members_with_condition(members, frequency.condition),
                members,
                by_name.get(frequency.condition),
                calculated_at,
            )
        )

    assessed = {assessment.condition_name for assessment in assessments}
    for condition in hereditary_conditions:
        if condition.name in assessed:
            continue
        assessment = assess_condition(
            user_id,
            condition.name,
            members_with_condition(members, condition.name),
            members,
            condition,
            calculated_at,
        )
        if assessment.family_risk_score > CATALOG_ONLY_MIN_SCORE:
            assessments.append(assessment)

    return sorted(assessments, key=lambda assessment: assessment.family_risk_score, reverse=True)


def high_risk_assessments(
    assessments: Sequence[FamilyRiskAssessment],
) -> list[FamilyRiskAssessment]:
    return sorted(
        (
            assessment
            for assessment in assessments
            if assessment.risk_level in (RiskLevel.HIGH, RiskLevel.VERY_HIGH)
        ),
        key=lambda assessment: assessment.family_risk_score,
        reverse=True,
    )


def family_health_summary(
    stats: FamilyHistoryStats, assessments: Sequence[FamilyRiskAssessment]
) -> FamilyHealthSummary:
    high_risk = high_risk_assessments(assessments)
    return FamilyHealthSummary(
        total_members=stats.total_members,
        living_members=stats.living_members,
        deceased_members=stats.deceased_members,
        generations_tracked=stats.generations_tracked,
        high_risk_conditions=len(high_risk),
        total_assessments=len(assessments),
        top_risks=high_risk[:5],
        common_conditions=stats.common_conditions[:10],
        hereditary_risk=sum(1 for a in high_risk if a.risk_level == RiskLevel.VERY_HIGH),
    )
