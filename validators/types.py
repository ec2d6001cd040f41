"""Types and models for partition input validation."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class InvalidReason(Enum):
    """Enumerated error codes for partition input validation failures."""

    MAX_GROUPS_TOO_SMALL = "max_groups_too_small"
    DUPLICATE_ENTITY = "duplicate_entity"
    MISSING_AFFINITY = "missing_affinity"


@dataclass
class ValidationResult:
    """Result of input validation with the offending values."""

    valid: bool
    reasons: list[InvalidReason] = None  # type: ignore[assignment]
    max_groups: int | None = None
    duplicates: list[str] = None  # type: ignore[assignment]
    missing: list[str] = None  # type: ignore[assignment]

    def __post_init__(self) -> None:
        if self.reasons is None:
            self.reasons = []
        if self.duplicates is None:
            self.duplicates = []
        if self.missing is None:
            self.missing = []


# Smallest group budget that still admits a partition
MIN_GROUPS = 1
