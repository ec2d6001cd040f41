"""Exhaustive partition enumeration.

Used as ground truth for the branch-and-bound search. Output size grows with
the Bell numbers, so only small inputs are practical.
"""

from __future__ import annotations

from collections.abc import Sequence

from .types import Partition


def enumerate_partitions(entities: Sequence[str], max_groups: int) -> list[Partition]:
    """Every split of ``entities`` into at most ``max_groups`` non-empty groups.

    Each partition is produced exactly once. Groups keep entity input order
    and are ordered by the position of their first member.
    """
    if not entities:
        return []

    items = list(entities)
    partitions: list[Partition] = []
    working: Partition = []

    def backtrack(idx: int) -> None:
        if idx == len(items):
            if working:
                partitions.append([list(g) for g in working])
            return

        entity = items[idx]
        for group in working:
            group.append(entity)
            backtrack(idx + 1)
            group.pop()

        if len(working) < max_groups:
            working.append([entity])
            backtrack(idx + 1)
            working.pop()

    backtrack(0)
    return partitions


def count_partitions(n: int, max_groups: int) -> int:
    """Number of partitions of ``n`` items into at most ``max_groups`` blocks.

    Sum of Stirling numbers of the second kind S(n, k) for k <= max_groups;
    matches ``len(enumerate_partitions(...))`` for n items.
    """
    if n <= 0 or max_groups <= 0:
        return 0
    k_max = min(n, max_groups)
    # row[k] holds S(i, k) for the current i
    row = [1] + [0] * k_max
    for _i in range(1, n + 1):
        new_row = [0] * (k_max + 1)
        for k in range(1, k_max + 1):
            new_row[k] = k * row[k] + row[k - 1]
        row = new_row
    return sum(row[1:])
