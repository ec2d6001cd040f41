from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any

Entity = str
Group = list[str]
Partition = list[list[str]]
AffinityMatrix = Mapping[str, Mapping[str, float]]
MemoKey = tuple[tuple[str, ...], tuple[tuple[str, ...], ...]]

DEFAULT_MAX_GROUPS = 3


class ErrorCodes(str, Enum):
    CONFIG_ERROR = "CONFIG_ERROR"
    DUPLICATE_ENTITY = "DUPLICATE_ENTITY"
    MISSING_AFFINITY = "MISSING_AFFINITY"
    LOAD_ERROR = "LOAD_ERROR"


class PartitionError(ValueError):
    def __init__(
        self,
        code: ErrorCodes,
        message: str,
        user_message: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.user_message = user_message or message
        self.details = details or {}


class GroupColor(str, Enum):
    GOLD = "gold"
    SILVER = "silver"
    BRONZE = "bronze"


# Fixed display colors, in rank order
GROUP_COLORS: dict[GroupColor, str] = {
    GroupColor.GOLD: "#2196f3",  # blue
    GroupColor.SILVER: "#43a047",  # green
    GroupColor.BRONZE: "#ff9800",  # orange
}
RANK_ORDER: tuple[GroupColor, ...] = (
    GroupColor.GOLD,
    GroupColor.SILVER,
    GroupColor.BRONZE,
)


@dataclass
class DebugOptions:
    log_pruning: bool = False
    log_memo_hits: bool = False
    log_best_updates: bool = False

    @property
    def any_enabled(self) -> bool:
        return self.log_pruning or self.log_memo_hits or self.log_best_updates

    @classmethod
    def from_dict(cls, d: Mapping[str, Any] | None) -> DebugOptions:
        if not d:
            return cls()
        return cls(**{k: bool(v) for k, v in d.items() if k in cls.__annotations__})


@dataclass
class SearchStats:
    memo_hits: int = 0
    pruned_branches: int = 0
    best_updates: int = 0
    states_cached: int = 0

    def to_dict(self) -> dict[str, int]:
        return asdict(self)


@dataclass
class MemoResult:
    score: float
    partition: Partition

    @classmethod
    def dead_end(cls) -> MemoResult:
        return cls(score=-math.inf, partition=[])


@dataclass(frozen=True)
class GroupRanking:
    group_index: int
    members: tuple[str, ...]
    group_score: float
    color_rank: GroupColor | None = None
    hex_color: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "group_index": self.group_index,
            "members": list(self.members),
            "group_score": self.group_score,
            "color_rank": self.color_rank.value if self.color_rank else None,
            "hex_color": self.hex_color,
        }


@dataclass
class ValidationDetails:
    algorithm_score: float
    manual_best_score: float
    total_partitions: int


@dataclass
class OptimizationResult:
    best_partition: Partition
    total_score: float
    normalized_score: float
    color_rankings: list[GroupRanking]
    is_optimal: bool
    validation: ValidationDetails
    stats: SearchStats = field(default_factory=SearchStats)

    def to_dict(self) -> dict[str, Any]:
        return {
            "best_partition": [list(g) for g in self.best_partition],
            "total_score": self.total_score,
            "normalized_score": self.normalized_score,
            "color_rankings": [r.to_dict() for r in self.color_rankings],
            "is_optimal": self.is_optimal,
            "validation": asdict(self.validation),
            "stats": self.stats.to_dict(),
        }
