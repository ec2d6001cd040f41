"""Partition input validation module."""

from .partition_inputs import validate_partition_inputs
from .types import MIN_GROUPS, InvalidReason, ValidationResult

__all__ = [
    "validate_partition_inputs",
    "InvalidReason",
    "ValidationResult",
    "MIN_GROUPS",
]
