"""
In-memory genetic condition catalog seeded with common hereditary conditions.

Implements the ``GeneticCatalog`` protocol plus the browsing queries a
catalog screen needs:
- Lookup by exact name and listing of hereditary entries
- Filtering by category and by inheritance pattern
- Case-insensitive search over name, description and ICD-10 code
- High-risk selection by prevalence or penetrance thresholds
"""

import re

import structlog

from healthrisk.domain.family import ConditionCategory, GeneticCondition, InheritancePattern

logger = structlog.get_logger(__name__)

COMMON_GENETIC_CONDITIONS: tuple[dict, ...] = (
    # Cardiovascular
    {
        "name": "Hypertrophic Cardiomyopathy",
        "category": ConditionCategory.CARDIOVASCULAR,
        "inheritance_pattern": InheritancePattern.AUTOSOMAL_DOMINANT,
        "prevalence": 0.002,
        "penetrance": 0.8,
        "description": "A genetic condition causing thickening of the heart muscle",
        "risk_factors": ["Family history", "Male gender", "Age"],
        "symptoms": ["Chest pain", "Shortness of breath", "Fainting", "Heart palpitations"],
    },
    {
        "name": "Familial Hypercholesterolemia",
        "category": ConditionCategory.CARDIOVASCULAR,
        "inheritance_pattern": InheritancePattern.AUTOSOMAL_DOMINANT,
        "prevalence": 0.003,
        "penetrance": 0.9,
        "description": "Genetic disorder causing high cholesterol levels",
        "risk_factors": ["Family history", "Diet", "Lifestyle"],
        "symptoms": ["High cholesterol", "Early heart disease", "Xanthomas"],
    },
    # Cancer
    {
        "name": "BRCA1/BRCA2 Breast Cancer",
        "category": ConditionCategory.CANCER,
        "inheritance_pattern": InheritancePattern.AUTOSOMAL_DOMINANT,
        "prevalence": 0.0025,
        "penetrance": 0.7,
        "description": "Hereditary breast and ovarian cancer syndrome",
        "risk_factors": ["Family history", "Female gender", "Age"],
        "symptoms": ["Breast lumps", "Breast pain", "Changes in breast appearance"],
    },
    {
        "name": "Lynch Syndrome",
        "category": ConditionCategory.CANCER,
        "inheritance_pattern": InheritancePattern.AUTOSOMAL_DOMINANT,
        "prevalence": 0.003,
        "penetrance": 0.8,
        "description": "Hereditary colorectal cancer syndrome",
        "risk_factors": ["Family history", "Age", "Diet"],
        "symptoms": ["Colorectal polyps", "Early colorectal cancer", "Endometrial cancer"],
    },
    # Neurological
    {
        "name": "Huntington Disease",
        "category": ConditionCategory.NEUROLOGICAL,
        "inheritance_pattern": InheritancePattern.AUTOSOMAL_DOMINANT,
        "prevalence": 0.00005,
        "penetrance": 1.0,
        "description": "Progressive neurodegenerative disorder",
        "risk_factors": ["Family history", "CAG repeat expansion"],
        "symptoms": ["Movement disorders", "Cognitive decline", "Psychiatric symptoms"],
    },
    {
        "name": "Alzheimer Disease (Early-Onset)",
        "category": ConditionCategory.NEUROLOGICAL,
        "inheritance_pattern": InheritancePattern.AUTOSOMAL_DOMINANT,
        "prevalence": 0.0001,
        "penetrance": 0.9,
        "description": "Early-onset familial Alzheimer disease",
        "risk_factors": ["Family history", "Age", "APOE genotype"],
        "symptoms": ["Memory loss", "Cognitive decline", "Behavioral changes"],
    },
    # Metabolic
    {
        "name": "Type 1 Diabetes",
        "category": ConditionCategory.METABOLIC,
        "inheritance_pattern": InheritancePattern.MULTIFACTORIAL,
        "prevalence": 0.005,
        "penetrance": 0.3,
        "description": "Autoimmune destruction of pancreatic beta cells",
        "risk_factors": ["Family history", "HLA genotype", "Environmental factors"],
        "symptoms": ["High blood sugar", "Frequent urination", "Excessive thirst", "Weight loss"],
    },
    {
        "name": "Hemochromatosis",
        "category": ConditionCategory.METABOLIC,
        "inheritance_pattern": InheritancePattern.AUTOSOMAL_RECESSIVE,
        "prevalence": 0.005,
        "penetrance": 0.4,
        "description": "Iron overload disorder",
        "risk_factors": ["Family history", "Male gender", "Age"],
        "symptoms": ["Fatigue", "Joint pain", "Skin darkening", "Liver problems"],
    },
)


def condition_id(name: str) -> str:
    """Stable id derived from the condition name."""
    return re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")


def _by_category_and_name(condition: GeneticCondition) -> tuple[str, str]:
    return condition.category.value, condition.name


class InMemoryGeneticCatalog:
    """Genetic catalog keyed by condition name, which is unique."""

    def __init__(self, conditions: list[GeneticCondition] | None = None) -> None:
        self._conditions: dict[str, GeneticCondition] = {}
        self.logger = logger.bind(component="genetic_catalog")
        for condition in conditions or []:
            self.add_condition(condition)

    @classmethod
    def seeded(cls) -> "InMemoryGeneticCatalog":
        catalog = cls()
        catalog.seed_common_conditions()
        return catalog

    def add_condition(self, condition: GeneticCondition) -> None:
        if condition.name in self._conditions:
            raise ValueError(f"Genetic condition already exists: {condition.name}")
        self._conditions[condition.name] = condition

    def seed_common_conditions(self) -> int:
        """Add any missing seed conditions; returns how many were added."""
        added = 0
        for entry in COMMON_GENETIC_CONDITIONS:
            if entry["name"] in self._conditions:
                continue
            self.add_condition(GeneticCondition(id=condition_id(entry["name"]), **entry))
            added += 1
        self.logger.info("genetic_catalog_seeded", added=added, total=len(self._conditions))
        return added

    async def get_condition_by_name(self, name: str) -> GeneticCondition | None:
        return self._conditions.get(name)

    async def list_conditions(self) -> list[GeneticCondition]:
        return sorted(self._conditions.values(), key=_by_category_and_name)

    async def list_hereditary_conditions(self) -> list[GeneticCondition]:
        return sorted(
            (condition for condition in self._conditions.values() if condition.is_hereditary),
            key=_by_category_and_name,
        )

    async def list_by_category(self, category: ConditionCategory | str) -> list[GeneticCondition]:
        category = ConditionCategory(category)
        return sorted(
            (c for c in self._conditions.values() if c.category == category),
            key=lambda c: c.name,
        )

    async def list_by_inheritance_pattern(
        self, pattern: InheritancePattern | str
    ) -> list[GeneticCondition]:
        pattern = InheritancePattern(pattern)
        return sorted(
            (c for c in self._conditions.values() if c.inheritance_pattern == pattern),
            key=lambda c: c.name,
        )

    async def search(self, term: str) -> list[GeneticCondition]:
        needle = term.lower()

        def matches(c: GeneticCondition) -> bool:
            fields = (c.name, c.description, c.icd10_code)
            return any(needle in field.lower() for field in fields if field)

        return sorted(filter(matches, self._conditions.values()), key=lambda c: c.name)

    async def high_risk_conditions(
        self, min_prevalence: float = 0.01, min_penetrance: float = 0.5
    ) -> list[GeneticCondition]:
        """Hereditary conditions meeting either threshold, most prevalent first."""
        matches = [
            c
            for c in self._conditions.values()
            if c.is_hereditary
            and (
                (c.prevalence is not None and c.prevalence >= min_prevalence)
                or (c.penetrance is not None and c.penetrance >= min_penetrance)
            )
        ]
        return sorted(
            matches, key=lambda c: (c.prevalence or 0.0, c.penetrance or 0.0), reverse=True
        )
