"""Core partition input validation rules."""

from __future__ import annotations

from collections import Counter
from collections.abc import Mapping, Sequence
from typing import Any

from .types import MIN_GROUPS, InvalidReason, ValidationResult


def validate_partition_inputs(
    entities: Sequence[str],
    matrix: Mapping[str, Mapping[str, Any]],
    max_groups: int,
) -> ValidationResult:
    """Validate optimizer inputs before any search work begins.

    Pure function with no I/O dependencies.

    Args:
        entities: Ordered entity names to be grouped
        matrix: Affinity matrix keyed by source entity, then target entity
        max_groups: Upper bound on the number of groups

    Returns:
        ValidationResult with validation status, the reasons in check order
        (group budget, duplicates, missing rows) and the offending values
    """
    reasons: list[InvalidReason] = []

    if max_groups < MIN_GROUPS:
        reasons.append(InvalidReason.MAX_GROUPS_TOO_SMALL)

    counts = Counter(entities)
    duplicates = sorted(name for name, n in counts.items() if n > 1)
    if duplicates:
        reasons.append(InvalidReason.DUPLICATE_ENTITY)

    # Preserve input order so messages point at the first offender
    missing: list[str] = []
    for name in entities:
        if name not in matrix and name not in missing:
            missing.append(name)
    if missing:
        reasons.append(InvalidReason.MISSING_AFFINITY)

    return ValidationResult(
        valid=not reasons,
        reasons=reasons,
        max_groups=max_groups,
        duplicates=duplicates,
        missing=missing,
    )
