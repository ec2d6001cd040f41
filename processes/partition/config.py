from __future__ import annotations

import json
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from pydantic import BaseModel

from .types import DEFAULT_MAX_GROUPS, DebugOptions

KNOWN_KEYS = {
    "max_groups",
    "entities",
    "log_pruning",
    "log_memo_hits",
    "log_best_updates",
}


class PartitionConfig(BaseModel):
    # Range checks on max_groups belong to the input validators
    max_groups: int = DEFAULT_MAX_GROUPS
    entities: list[str] | None = None
    log_pruning: bool = False
    log_memo_hits: bool = False
    log_best_updates: bool = False

    def debug_options(self) -> DebugOptions:
        return DebugOptions(
            log_pruning=self.log_pruning,
            log_memo_hits=self.log_memo_hits,
            log_best_updates=self.log_best_updates,
        )


def _coerce_scalar(val: str) -> int | float | bool | str:
    lower = val.lower()
    if lower in ("true", "false"):
        return lower == "true"
    try:
        if "." in val:
            return float(val)
        return int(val)
    except ValueError:
        return val


def load_config(
    config_path: Path | None, inline_kv: Sequence[str] | None = None
) -> dict[str, Any]:
    cfg: dict[str, Any] = {}
    if config_path:
        text = config_path.read_text(encoding="utf-8")
        if config_path.suffix.lower() in (".yaml", ".yml"):
            import yaml  # lazy

            cfg = dict(yaml.safe_load(text) or {})
        else:
            cfg = dict(json.loads(text))
    if inline_kv:
        for item in inline_kv:
            if "=" not in item:
                continue
            k, v = item.split("=", 1)
            key = k.strip()
            if key == "entities":
                cfg[key] = [e.strip() for e in v.split(",") if e.strip()]
            else:
                cfg[key] = _coerce_scalar(v.strip())
    return cfg


def unknown_keys(cfg: dict[str, Any]) -> list[str]:
    return sorted(set(cfg) - KNOWN_KEYS)


def to_partition_config(cfg: dict[str, Any]) -> PartitionConfig:
    """Build a config model, ignoring keys it does not know."""
    return PartitionConfig(**{k: v for k, v in cfg.items() if k in KNOWN_KEYS})
