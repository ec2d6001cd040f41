"""Memoized branch-and-bound search for the best affinity partition.

Each call to :func:`search` owns a fresh :class:`SearchContext` holding the
incumbent best, the memo cache and the diagnostic counters; nothing is shared
between calls. Ties are not enumerated: the first optimal partition found in
the fixed exploration order is the one returned.
"""

from __future__ import annotations

import json
import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass, field

from validators import InvalidReason, validate_partition_inputs

from .scoring import incremental_score, remaining_potential
from .types import (
    DEFAULT_MAX_GROUPS,
    AffinityMatrix,
    DebugOptions,
    ErrorCodes,
    MemoKey,
    MemoResult,
    Partition,
    PartitionError,
    SearchStats,
)

logger = logging.getLogger("processes.partition")


def make_memo_key(remaining: Sequence[str], partition: Partition) -> MemoKey:
    """Canonical state key, independent of group order and member order."""
    groups = tuple(sorted(tuple(sorted(g)) for g in partition))
    return tuple(sorted(remaining)), groups


def canonicalize(partition: Partition) -> Partition:
    """Sort members within each group, then groups by their first member."""
    groups = [sorted(g) for g in partition if g]
    return sorted(groups, key=lambda g: g[0])


def require_valid_inputs(
    entities: Sequence[str], matrix: AffinityMatrix, max_groups: int
) -> None:
    """Raise :class:`PartitionError` for the first failed precondition."""
    result = validate_partition_inputs(entities, matrix, max_groups)
    if result.valid:
        return
    reason = result.reasons[0]
    details = {
        "reasons": [r.value for r in result.reasons],
        "max_groups": max_groups,
        "duplicates": result.duplicates,
        "missing": result.missing,
    }
    if reason is InvalidReason.MAX_GROUPS_TOO_SMALL:
        raise PartitionError(
            ErrorCodes.CONFIG_ERROR,
            f"max_groups must be at least 1, got {max_groups}",
            details=details,
        )
    if reason is InvalidReason.DUPLICATE_ENTITY:
        raise PartitionError(
            ErrorCodes.DUPLICATE_ENTITY,
            f"Duplicate entity names detected: {', '.join(result.duplicates)}",
            details=details,
        )
    raise PartitionError(
        ErrorCodes.MISSING_AFFINITY,
        f"Entities not found in affinity matrix: {', '.join(result.missing)}",
        user_message=f'Entity "{result.missing[0]}" not found in affinity matrix',
        details=details,
    )


@dataclass
class SearchContext:
    matrix: AffinityMatrix
    max_groups: int = DEFAULT_MAX_GROUPS
    debug: DebugOptions = field(default_factory=DebugOptions)
    best_score: float = -math.inf
    best_partition: Partition = field(default_factory=list)
    cache: dict[MemoKey, MemoResult] = field(default_factory=dict)
    stats: SearchStats = field(default_factory=SearchStats)

    def remember(self, key: MemoKey, result: MemoResult) -> MemoResult:
        self.cache[key] = result
        self.stats.states_cached = len(self.cache)
        return result


def _log(event: str, **fields: object) -> None:
    logger.info(json.dumps({"event": event, **fields}, default=str))


def _explore(
    ctx: SearchContext, remaining: list[str], partition: Partition, score: float
) -> MemoResult:
    key = make_memo_key(remaining, partition)
    cached = ctx.cache.get(key)
    if cached is not None:
        ctx.stats.memo_hits += 1
        if ctx.debug.log_memo_hits:
            _log("memo_hit", key=key, score=cached.score)
        return cached

    if not remaining:
        return _settle(ctx, key, partition, score)

    bound = score + remaining_potential(remaining, ctx.matrix, partition)
    if bound <= ctx.best_score:
        ctx.stats.pruned_branches += 1
        if ctx.debug.log_pruning:
            _log("pruned", key=key, bound=bound, best=ctx.best_score)
        return ctx.remember(key, MemoResult.dead_end())

    return ctx.remember(key, _expand(ctx, remaining, partition, score))


def _settle(
    ctx: SearchContext, key: MemoKey, partition: Partition, score: float
) -> MemoResult:
    if not partition:
        return ctx.remember(key, MemoResult.dead_end())

    snapshot = [list(g) for g in partition]
    # Strict comparison keeps the first optimum found
    if score > ctx.best_score:
        ctx.best_score = score
        ctx.best_partition = [list(g) for g in snapshot]
        ctx.stats.best_updates += 1
        if ctx.debug.log_best_updates:
            _log("new_best", score=score, partition=snapshot)
    return ctx.remember(key, MemoResult(score=score, partition=snapshot))


def _expand(
    ctx: SearchContext, remaining: list[str], partition: Partition, score: float
) -> MemoResult:
    entity, rest = remaining[0], remaining[1:]
    best = MemoResult.dead_end()

    for group in partition:
        gain = incremental_score(entity, group, ctx.matrix)
        group.append(entity)
        result = _explore(ctx, rest, partition, score + gain)
        if result.score > best.score:
            best = MemoResult(score=result.score, partition=[list(g) for g in result.partition])
        group.pop()

    if len(partition) < ctx.max_groups:
        partition.append([entity])
        result = _explore(ctx, rest, partition, score)
        if result.score > best.score:
            best = MemoResult(score=result.score, partition=[list(g) for g in result.partition])
        partition.pop()

    return best


def _log_summary(ctx: SearchContext) -> None:
    stats = ctx.stats
    _log(
        "search_summary",
        memo_hits=stats.memo_hits,
        pruned_branches=stats.pruned_branches,
        best_updates=stats.best_updates,
        states_cached=stats.states_cached,
        best_score=ctx.best_score,
    )


def search(
    entities: Sequence[str],
    matrix: AffinityMatrix,
    max_groups: int = DEFAULT_MAX_GROUPS,
    debug_options: DebugOptions | None = None,
) -> SearchContext:
    """Run the branch-and-bound search and return its finished context.

    ``ctx.best_partition`` is canonicalized. Empty input skips validation and
    yields an untouched context with no best partition.
    """
    ctx = SearchContext(
        matrix=matrix, max_groups=max_groups, debug=debug_options or DebugOptions()
    )
    if not entities:
        return ctx

    require_valid_inputs(entities, matrix, max_groups)

    _explore(ctx, list(entities), [], 0.0)
    ctx.best_partition = canonicalize(ctx.best_partition)

    if ctx.debug.any_enabled:
        _log_summary(ctx)
    return ctx


def optimize(
    entities: Sequence[str],
    matrix: AffinityMatrix,
    max_groups: int = DEFAULT_MAX_GROUPS,
    debug_options: DebugOptions | None = None,
) -> Partition:
    """Best partition of ``entities`` into at most ``max_groups`` groups.

    Raises:
        PartitionError: if ``max_groups < 1``, an entity name repeats, or an
            entity has no row in ``matrix``.
    """
    return search(entities, matrix, max_groups, debug_options).best_partition
