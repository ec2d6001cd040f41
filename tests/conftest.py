from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Ensure project root is on sys.path for package imports like `pipeline.*`
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

FIXTURE_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def anyio_backend() -> str:
    # The project only targets asyncio; trio is not a declared dependency
    return "asyncio"


@pytest.fixture
def five_matrix() -> dict[str, dict[str, float]]:
    """A..E where [[A, B, E], [C], [D]] is the unique best 3-group split (80)."""
    return {
        "A": {"B": 10, "C": -5, "D": -5, "E": 15},
        "B": {"A": 20, "C": -5, "D": -5, "E": 5},
        "C": {"A": -5, "B": -5, "D": -10, "E": -5},
        "D": {"A": -5, "B": -5, "C": -10, "E": -5},
        "E": {"A": 10, "B": 20, "C": -5, "D": -5},
    }


@pytest.fixture
def five_csv() -> Path:
    return FIXTURE_DIR / "affinity_five.csv"
