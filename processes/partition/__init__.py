"""Affinity partition optimizer process package.

Finds the grouping of entities into at most K groups with the highest total
intra-group affinity, then proves it against exhaustive enumeration. The
adapter and CLI (`python -m processes.partition`) load the matrix from CSV;
the search itself is pure and does no I/O.
"""

from .enumerator import count_partitions, enumerate_partitions
from .ranking import color_for_rank, color_rank
from .scoring import group_score, normalize_score, pair_score, partition_score
from .search import SearchContext, optimize, search
from .service import perform_optimization, run_validation
from .types import (
    DEFAULT_MAX_GROUPS,
    DebugOptions,
    ErrorCodes,
    GroupColor,
    GroupRanking,
    OptimizationResult,
    PartitionError,
)

__all__ = [
    "DEFAULT_MAX_GROUPS",
    "DebugOptions",
    "ErrorCodes",
    "GroupColor",
    "GroupRanking",
    "OptimizationResult",
    "PartitionError",
    "SearchContext",
    "color_for_rank",
    "color_rank",
    "count_partitions",
    "enumerate_partitions",
    "group_score",
    "normalize_score",
    "optimize",
    "pair_score",
    "partition_score",
    "perform_optimization",
    "run_validation",
    "search",
]
