from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel

from processes.partition.types import DEFAULT_MAX_GROUPS


class ErrorResponse(BaseModel):
    error: str
    detail: str | None = None


class DebugConfig(BaseModel):
    log_pruning: bool = False
    log_memo_hits: bool = False
    log_best_updates: bool = False


class OptimizeRequest(BaseModel):
    matrix: dict[str, dict[str, float]]
    entities: list[str] | None = None
    max_groups: int = DEFAULT_MAX_GROUPS
    debug: DebugConfig | None = None


class GroupRankingOut(BaseModel):
    group_index: int
    members: list[str]
    group_score: float
    color_rank: Literal["gold", "silver", "bronze"] | None = None
    hex_color: str | None = None


class ValidationOut(BaseModel):
    algorithm_score: float
    manual_best_score: float
    total_partitions: int


class OptimizeResponse(BaseModel):
    schema_version: str
    entities: list[str]
    max_groups: int
    best_partition: list[list[str]]
    total_score: float
    normalized_score: float
    color_rankings: list[GroupRankingOut]
    is_optimal: bool
    validation: ValidationOut
    stats: dict[str, Any]
