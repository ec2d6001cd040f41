from __future__ import annotations

from .scoring import group_score
from .types import GROUP_COLORS, RANK_ORDER, AffinityMatrix, GroupRanking, Partition


def color_for_rank(position: int) -> str | None:
    """Hex color for a 0-based rank position; None past bronze."""
    if 0 <= position < len(RANK_ORDER):
        return GROUP_COLORS[RANK_ORDER[position]]
    return None


def color_rank(partition: Partition, matrix: AffinityMatrix) -> list[GroupRanking]:
    """Rank groups by score, highest first, and attach medal colors.

    The sort is stable so equal scores keep their original group order. Only
    the first three entries get a rank; the rest stay unranked.
    """
    scored = [(idx, tuple(group), group_score(group, matrix)) for idx, group in enumerate(partition)]
    scored.sort(key=lambda item: item[2], reverse=True)

    rankings: list[GroupRanking] = []
    for position, (idx, members, score) in enumerate(scored):
        rank = RANK_ORDER[position] if position < len(RANK_ORDER) else None
        rankings.append(
            GroupRanking(
                group_index=idx,
                members=members,
                group_score=score,
                color_rank=rank,
                hex_color=color_for_rank(position),
            )
        )
    return rankings
