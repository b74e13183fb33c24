"""
CellClassifier: cell- and row-level predicates for the detection pipeline.

Responsibilities:
- Cell-level string conversion (``cell_to_str``)
- Empty-cell and blank-row detection
- Summary-row detection (``total``, ``sum``, ``avg`` …)
- Row density (non-empty cell count)
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Iterable, Optional, Sequence

import pandas as pd

from tablesplit.detection.config import SUMMARY_KEYWORDS


class CellClassifier:
    """Stateless helper that classifies raw cell values and rows."""

    # ----- cell → string ---------------------------------------------------

    @staticmethod
    def is_empty(value: Any) -> bool:
        if value is None or pd.isna(value):
            return True
        return str(value).strip() == ""

    @staticmethod
    def cell_to_str(value: Any) -> str:
        """Convert an arbitrary cell value to a clean string."""
        if value is None or pd.isna(value):
            return ""
        if isinstance(value, str):
            return value.strip()
        if isinstance(value, bool):
            return "TRUE" if value else "FALSE"
        if isinstance(value, (datetime, date, pd.Timestamp)):
            if isinstance(value, datetime):
                return value.isoformat(sep=" ", timespec="seconds")
            return value.isoformat()
        if isinstance(value, float) and value.is_integer():
            return str(int(value))
        # Rich-text objects from openpyxl may expose .plain or .text
        plain_attr = getattr(value, "plain", None)
        if isinstance(plain_attr, str):
            return plain_attr.strip()
        text_attr = getattr(value, "text", None)
        if isinstance(text_attr, str):
            return text_attr.strip()
        return str(value).strip()

    # ----- row predicates --------------------------------------------------

    @classmethod
    def is_blank_row(cls, row: Optional[Sequence[Any]]) -> bool:
        """A row is blank when every cell is empty; a missing row is blank."""
        if not row:
            return True
        return all(cls.is_empty(c) for c in row)

    @classmethod
    def is_summary_row(
        cls,
        row: Optional[Sequence[Any]],
        keywords: Iterable[str] = SUMMARY_KEYWORDS,
    ) -> bool:
        """
        Return ``True`` if any cell's trimmed, lower-cased text is exactly
        one of the aggregate *keywords*.
        """
        if not row:
            return False
        reserved = keywords if isinstance(keywords, (set, frozenset)) else frozenset(keywords)
        for cell in row:
            if cls.is_empty(cell):
                continue
            if cls.cell_to_str(cell).lower() in reserved:
                return True
        return False

    @classmethod
    def row_density(cls, row: Optional[Sequence[Any]]) -> int:
        """Number of non-empty cells in *row*."""
        if not row:
            return 0
        return sum(1 for c in row if not cls.is_empty(c))
