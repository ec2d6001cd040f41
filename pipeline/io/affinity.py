"""Affinity matrix loader.

Reads a square-ish CSV table: column ``x`` names the source entity of each
row, every other non-blank header names a target entity. Cells holding
``-`` or nothing carry no data and are left out of the matrix.
"""

from __future__ import annotations

import math
import re
from pathlib import Path
from typing import Any

import pandas as pd
from pandas.errors import EmptyDataError

ROW_IDENTIFIER = "x"
EMPTY_VALUES = ("-", "")
# Plain decimal or exponent notation; no nan, inf or digit separators
NUMBER_RE = re.compile(r"[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")


class AffinityLoadError(ValueError):
    pass


def _cell_text(raw: Any) -> str:
    # Short rows come back as NaN even with keep_default_na off
    if raw is None or (isinstance(raw, float) and pd.isna(raw)):
        return ""
    return str(raw).strip()


def _parse_value(raw: Any) -> float | None:
    value = _cell_text(raw)
    if value in EMPTY_VALUES:
        return None
    if not NUMBER_RE.fullmatch(value):
        raise AffinityLoadError(f"Invalid number: {raw}")
    number = float(value)
    if not math.isfinite(number):
        raise AffinityLoadError(f"Invalid number: {raw}")
    return number


def _target_columns(df: pd.DataFrame) -> list[str]:
    # Blank headers come through as "Unnamed: N"
    return [
        str(c)
        for c in df.columns
        if str(c) != ROW_IDENTIFIER
        and str(c).strip() != ""
        and not str(c).startswith("Unnamed:")
    ]


def matrix_from_frame(df: pd.DataFrame) -> dict[str, dict[str, float]]:
    if df.empty:
        raise AffinityLoadError("CSV is empty or invalid")
    if ROW_IDENTIFIER not in df.columns:
        raise AffinityLoadError(f"Missing row identifier column '{ROW_IDENTIFIER}'")

    targets = _target_columns(df)
    matrix: dict[str, dict[str, float]] = {}
    for row_idx, rec in enumerate(df.to_dict(orient="records")):
        source = _cell_text(rec.get(ROW_IDENTIFIER))
        if not source:
            raise AffinityLoadError(f"Missing row identifier at row {row_idx}")
        row: dict[str, float] = {}
        for target in targets:
            value = _parse_value(rec.get(target))
            if value is not None:
                row[target.strip()] = value
        matrix[source] = row
    return matrix


def load_affinity_matrix(path: Path) -> dict[str, dict[str, float]]:
    """Load an affinity matrix from ``path``.

    Raises:
        AffinityLoadError: when the file cannot be read, is empty, lacks the
            row identifier, or holds a non-numeric cell outside the no-data
            sentinels.
    """
    try:
        df = pd.read_csv(
            path,
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
        )
        return matrix_from_frame(df)
    except (OSError, EmptyDataError, AffinityLoadError) as e:
        raise AffinityLoadError(f"Failed to load affinity matrix: {e}") from e


def entities_of(matrix: dict[str, dict[str, float]]) -> list[str]:
    """Entity order as given by the matrix rows."""
    return list(matrix.keys())
