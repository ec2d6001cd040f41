"""Validation orchestrator: search, then prove the result by enumeration."""

from __future__ import annotations

import json
import logging
import math
from collections.abc import Sequence

from .enumerator import count_partitions, enumerate_partitions
from .ranking import color_rank
from .scoring import normalize_score, partition_score
from .search import canonicalize, search
from .types import (
    DEFAULT_MAX_GROUPS,
    AffinityMatrix,
    DebugOptions,
    OptimizationResult,
    ValidationDetails,
)

logger = logging.getLogger("processes.partition")


def run_validation(
    entities: Sequence[str],
    matrix: AffinityMatrix,
    max_groups: int = DEFAULT_MAX_GROUPS,
    debug_options: DebugOptions | None = None,
) -> OptimizationResult:
    logger.info(
        json.dumps(
            {
                "event": "optimize_start",
                "entities": list(entities),
                "max_groups": max_groups,
                "expected_partitions": count_partitions(len(entities), max_groups),
            }
        )
    )

    ctx = search(entities, matrix, max_groups, debug_options)
    best_partition = ctx.best_partition
    algorithm_score = partition_score(best_partition, matrix)

    all_partitions = enumerate_partitions(entities, max_groups)
    manual_best_score = -math.inf
    for partition in all_partitions:
        score = partition_score(canonicalize(partition), matrix)
        if score > manual_best_score:
            manual_best_score = score
    if not all_partitions:
        # Only the empty partition exists for empty input
        manual_best_score = 0.0

    is_optimal = algorithm_score == manual_best_score
    if is_optimal:
        logger.info(json.dumps({"event": "optimal_found", "score": algorithm_score}))
    else:
        logger.warning(
            json.dumps(
                {
                    "event": "optimality_mismatch",
                    "expected": manual_best_score,
                    "actual": algorithm_score,
                }
            )
        )

    logger.info(
        json.dumps(
            {
                "event": "partition_breakdown",
                "groups": [
                    {"group_number": i + 1, "members": group}
                    for i, group in enumerate(best_partition)
                ],
            }
        )
    )

    return OptimizationResult(
        best_partition=best_partition,
        total_score=algorithm_score,
        normalized_score=normalize_score(algorithm_score, len(entities)),
        color_rankings=color_rank(best_partition, matrix),
        is_optimal=is_optimal,
        validation=ValidationDetails(
            algorithm_score=algorithm_score,
            manual_best_score=manual_best_score,
            total_partitions=len(all_partitions),
        ),
        stats=ctx.stats,
    )


def perform_optimization(
    matrix: AffinityMatrix,
    max_groups: int = DEFAULT_MAX_GROUPS,
    debug_options: DebugOptions | None = None,
) -> OptimizationResult:
    """Optimize over every row entity of ``matrix``, in row order."""
    return run_validation(list(matrix.keys()), matrix, max_groups, debug_options)
