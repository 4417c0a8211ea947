"""Relationship to generation-offset classification."""

from healthrisk.domain.family import Relationship

RELATIONSHIP_GENERATIONS: dict[Relationship, int] = {
    Relationship.PATERNAL_GRANDFATHER: -2,
    Relationship.PATERNAL_GRANDMOTHER: -2,
    Relationship.MATERNAL_GRANDFATHER: -2,
    Relationship.MATERNAL_GRANDMOTHER: -2,
    Relationship.FATHER: -1,
    Relationship.MOTHER: -1,
    Relationship.STEPFATHER: -1,
    Relationship.STEPMOTHER: -1,
    Relationship.UNCLE: -1,
    Relationship.AUNT: -1,
    Relationship.BROTHER: 0,
    Relationship.SISTER: 0,
    Relationship.HALF_BROTHER: 0,
    Relationship.HALF_SISTER: 0,
    Relationship.STEPBROTHER: 0,
    Relationship.STEPSISTER: 0,
    Relationship.COUSIN: 0,
    Relationship.SON: 1,
    Relationship.DAUGHTER: 1,
    Relationship.STEPSON: 1,
    Relationship.STEPDAUGHTER: 1,
    Relationship.NEPHEW: 1,
    Relationship.NIECE: 1,
    Relationship.GRANDSON: 2,
    Relationship.GRANDDAUGHTER: 2,
}


def generation_for_relationship(relationship: str) -> int:
    """
    Map a relationship label to its generation offset from the user.

    Negative offsets are ancestors, positive are descendants. Labels outside
    the known set are treated as the user's own generation.
    """
    try:
        return RELATIONSHIP_GENERATIONS[Relationship(relationship)]
    except ValueError:
        return 0


def closeness_weight(generation: int) -> float:
    """Weight of an affected relative's generation in hereditary scoring."""
    match generation:
        case -1:
            return 0.5
        case 0:
            return 0.3
        case 1 | -2:
            return 0.2
        case _:
            return 0.1
