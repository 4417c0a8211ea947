"""
Family tree construction and family-history statistics.

The tree is built from the flat member list in a single pass over an
id-to-node map. A member whose parent is missing from the list is placed at
the root instead of being dropped, so partially entered families still render.
"""

from collections.abc import Iterable, Sequence

import structlog

from healthrisk.domain.family import (
    ConditionFrequency,
    FamilyHistoryStats,
    FamilyMember,
    FamilyTreeNode,
)

logger = structlog.get_logger(__name__)


def _to_node(member: FamilyMember) -> FamilyTreeNode:
    return FamilyTreeNode(
        id=member.id,
        name=member.name,
        gender=member.gender,
        relationship=member.relationship,
        generation=member.generation,
        position=member.position,
        is_alive=member.is_alive,
        birth_year=member.birth_year,
        death_year=member.death_year,
        conditions=list(member.conditions),
    )


def build_family_tree(members: Sequence[FamilyMember]) -> list[FamilyTreeNode]:
    """
    Build a forest of tree nodes from a user's family members.

    Children keep the order of the input list; roots are ordered by
    generation, then position.
    """
    nodes: dict[str, FamilyTreeNode] = {member.id: _to_node(member) for member in members}

    roots: list[FamilyTreeNode] = []
    dangling = 0
    for member in members:
        node = nodes[member.id]
        parent = nodes.get(member.parent_id) if member.parent_id else None
        if parent is not None:
            parent.children.append(node)
        else:
            if member.parent_id:
                dangling += 1
            roots.append(node)

    if dangling:
        logger.debug("family_tree_dangling_parents_promoted", count=dangling)

    return sorted(roots, key=lambda node: (node.generation, node.position))


def members_with_condition(
    members: Iterable[FamilyMember], condition_name: str
) -> list[FamilyMember]:
    return [member for member in members if member.has_condition(condition_name)]


def members_by_generation(members: Iterable[FamilyMember], generation: int) -> list[FamilyMember]:
    return sorted(
        (member for member in members if member.generation == generation),
        key=lambda member: member.position,
    )


def next_position_in_generation(members: Iterable[FamilyMember], generation: int) -> int:
    """Position to assign to a new member appended to ``generation``."""
    positions = [member.position for member in members if member.generation == generation]
    return max(positions, default=0) + 1


def common_family_conditions(members: Sequence[FamilyMember]) -> list[ConditionFrequency]:
    """Conditions seen across the family, most frequent first."""
    counts: dict[str, list[str]] = {}
    for member in members:
        for condition in member.conditions:
            counts.setdefault(condition.name, []).append(member.display_label)

    total = len(members)
    frequencies = [
        ConditionFrequency(
            condition=name,
            count=len(labels),
            members=labels,
            percentage=(len(labels) / total) * 100 if total else 0.0,
        )
        for name, labels in counts.items()
    ]
    return sorted(frequencies, key=lambda frequency: frequency.count, reverse=True)


def family_history_stats(members: Sequence[FamilyMember]) -> FamilyHistoryStats:
    living = sum(1 for member in members if member.is_alive)
    return FamilyHistoryStats(
        total_members=len(members),
        living_members=living,
        deceased_members=len(members) - living,
        generations_tracked=len({member.generation for member in members}),
        common_conditions=common_family_conditions(members),
    )
