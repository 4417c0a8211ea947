"""
Scoring services and the orchestration layer.

The scorers are plain functions over domain models; ``HealthRiskService``
wires them to storage collaborators.
"""

from .disease_prediction import predict_risk
from .family_tree import build_family_tree
from .generations import generation_for_relationship
from .hereditary_risk import assess_condition, calculate_risk_score, comprehensive_assessment
from .result import Result
from .risk_factors import analyze_risk_factors
from .risk_service import (
    AssessmentStore,
    FamilyHistoryStore,
    GeneticCatalog,
    HealthDataSource,
    HealthRiskService,
)
from .trend_detection import analyze_health_trends

__all__ = [
    "AssessmentStore",
    "FamilyHistoryStore",
    "GeneticCatalog",
    "HealthDataSource",
    "HealthRiskService",
    "Result",
    "analyze_health_trends",
    "analyze_risk_factors",
    "assess_condition",
    "build_family_tree",
    "calculate_risk_score",
    "comprehensive_assessment",
    "generation_for_relationship",
    "predict_risk",
]
