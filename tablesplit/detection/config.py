"""
Centralised configuration for table detection and column alignment.

All thresholds and keyword lists live here so that the detector, the
cleaner and the matcher stay free of hard-coded values.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import FrozenSet


# ---------------------------------------------------------------------------
# Environment helpers
# ---------------------------------------------------------------------------

def _env_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)).strip())
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, str(default)).strip())
    except ValueError:
        return default


# ---------------------------------------------------------------------------
# Keyword constants
# ---------------------------------------------------------------------------

SUMMARY_KEYWORDS: FrozenSet[str] = frozenset({
    "total", "sum", "subtotal", "average", "avg", "count",
})

# Reserved trailing columns of a merged grid
TAB_NAME_COLUMN = "tab_name"
GROUP_COLUMN = "project"

# Excel refuses worksheet titles longer than this
MAX_SHEET_TITLE_LEN = 31


# ---------------------------------------------------------------------------
# DetectionConfig: tunable thresholds
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DetectionConfig:
    """Immutable bag of tunable thresholds used by detection and merging."""

    # Region acceptance
    min_rows: int = _env_int("TABLESPLIT_MIN_ROWS", 3)
    min_columns: int = _env_int("TABLESPLIT_MIN_COLUMNS", 2)
    min_data_cells: int = _env_int("TABLESPLIT_MIN_DATA_CELLS", 6)
    min_consistency: float = _env_float("TABLESPLIT_MIN_CONSISTENCY", 0.7)
    # A row is "consistent" when its density is within this distance of the mode
    density_tolerance: int = 1

    summary_keywords: FrozenSet[str] = SUMMARY_KEYWORDS

    # Fuzzy column alignment (0..100)
    similarity_threshold: int = _env_int("TABLESPLIT_SIMILARITY_THRESHOLD", 85)


# Singleton default config
DEFAULT_CONFIG = DetectionConfig()
