"""Scoring functions for affinity partitions.

All functions are pure and total: a missing affinity entry counts as 0 and
never raises.
"""

from __future__ import annotations

import math
from collections.abc import Sequence

from .types import AffinityMatrix, Partition


def affinity(matrix: AffinityMatrix, source: str, target: str) -> float:
    row = matrix.get(source)
    if row is None:
        return 0.0
    return float(row.get(target, 0.0))


def pair_score(a: str, b: str, matrix: AffinityMatrix) -> float:
    """Bidirectional affinity of an unordered pair: a→b plus b→a."""
    return affinity(matrix, a, b) + affinity(matrix, b, a)


def group_score(group: Sequence[str], matrix: AffinityMatrix) -> float:
    score = 0.0
    for i in range(len(group)):
        for j in range(i + 1, len(group)):
            score += pair_score(group[i], group[j], matrix)
    return score


def partition_score(partition: Sequence[Sequence[str]], matrix: AffinityMatrix) -> float:
    """Total intra-group affinity, correctly rounded.

    Sums every directed affinity with ``math.fsum`` so the result does not
    depend on group or member order.
    """
    return math.fsum(
        affinity(matrix, source, target)
        for group in partition
        for i, source in enumerate(group)
        for j, target in enumerate(group)
        if i != j
    )


def incremental_score(entity: str, group: Sequence[str], matrix: AffinityMatrix) -> float:
    """Score gained by inserting ``entity`` into ``group``."""
    return sum((pair_score(entity, member, matrix) for member in group), 0.0)


def remaining_potential(
    remaining: Sequence[str],
    matrix: AffinityMatrix,
    partition: Partition | None = None,
) -> float:
    """Optimistic upper bound on the score still obtainable from ``remaining``.

    Adds every positive pair score among the remaining entities as if they
    could all be co-grouped, plus, per remaining entity, its best positive
    gain from joining one of the existing groups. Grouping choices are not
    treated as mutually exclusive, so the bound never underestimates what
    any completion of ``partition`` can add.
    """
    potential = 0.0

    for i in range(len(remaining)):
        for j in range(i + 1, len(remaining)):
            s = pair_score(remaining[i], remaining[j], matrix)
            if s > 0:
                potential += s

    for entity in remaining:
        best_bonus = 0.0
        for group in partition or ():
            best_bonus = max(best_bonus, incremental_score(entity, group, matrix))
        potential += best_bonus

    return potential


def normalize_score(score: float, total_entities: int) -> float:
    """Score per unordered entity pair, 0 when fewer than two entities."""
    max_pairs = total_entities * (total_entities - 1) // 2
    return score / max_pairs if max_pairs > 0 else 0.0
