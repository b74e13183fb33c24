"""
WorkbookWriter: encode split tables or a merged grid as ``.xlsx`` bytes.

Tab naming rules:
- a sheet with a single accepted table keeps its name
- a sheet split into several tables yields ``<sheet>_Table<N>`` (1-based)
- every tab name is cleaned of characters Excel rejects, truncated to 31
  characters and made unique within the workbook
"""

from __future__ import annotations

import io
import re
from typing import Any, Iterable, List, Mapping, Sequence, Set, Tuple

from openpyxl import Workbook as XlsxWorkbook
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE

from tablesplit.detection.config import MAX_SHEET_TITLE_LEN
from tablesplit.errors import EncodeError
from tablesplit.ir import Grid, TableRegion, split_table_name
from tablesplit.logger import get_logger

logger = get_logger(__name__)

_INVALID_TITLE_CHARS_RE = re.compile(r"[\[\]:*?/\\]")


class WorkbookWriter:
    """Build an in-memory workbook and return its bytes."""

    # ------------------------------------------------------------------
    # Tab names
    # ------------------------------------------------------------------

    @staticmethod
    def safe_title(name: Any, taken: Set[str]) -> str:
        """Excel-safe, unique, at most 31-character tab title."""
        title = _INVALID_TITLE_CHARS_RE.sub("_", str(name or "").strip()) or "Sheet"
        title = title[:MAX_SHEET_TITLE_LEN]
        candidate = title
        n = 2
        while candidate.lower() in taken:
            suffix = f"~{n}"
            candidate = title[:MAX_SHEET_TITLE_LEN - len(suffix)] + suffix
            n += 1
        taken.add(candidate.lower())
        return candidate

    @staticmethod
    def _clean_value(value: Any) -> Any:
        if isinstance(value, str):
            return ILLEGAL_CHARACTERS_RE.sub("", value)
        if value is None or isinstance(value, (int, float, bool)):
            return value
        if hasattr(value, "isoformat"):
            return value
        return str(value)

    # ------------------------------------------------------------------
    # Encoding
    # ------------------------------------------------------------------

    def encode_sheets(self, sheets: Iterable[Tuple[str, Grid]]) -> bytes:
        """
        Write ``(title, rows)`` pairs as tabs, in order.

        Raises:
            EncodeError: no tab was supplied, or openpyxl failed to save
        """
        wb = XlsxWorkbook()
        wb.remove(wb.active)
        taken: Set[str] = set()
        for title, rows in sheets:
            ws = wb.create_sheet(self.safe_title(title, taken))
            for row in rows:
                ws.append([self._clean_value(v) for v in row])
        if not wb.worksheets:
            raise EncodeError("Nothing to export: no tables or sheets were supplied")
        buffer = io.BytesIO()
        try:
            wb.save(buffer)
        except Exception as exc:
            raise EncodeError(f"Failed to generate workbook: {exc}") from exc
        logger.info("Encoded workbook with tabs %s", wb.sheetnames)
        return buffer.getvalue()

    def encode_tables(self, tables_by_sheet: Mapping[str, Sequence[TableRegion]]) -> bytes:
        """One tab per accepted table; see module docstring for naming."""
        tabs: List[Tuple[str, Grid]] = []
        for sheet_name, tables in tables_by_sheet.items():
            for index, table in enumerate(tables):
                tabs.append((split_table_name(sheet_name, index, len(tables)), table.rows))
        return self.encode_sheets(tabs)

    def encode_grid(self, grid: Grid, sheet_name: str = "Merged") -> bytes:
        """Single-tab workbook holding a merged grid."""
        return self.encode_sheets([(sheet_name, grid)])


def encode_tables(tables_by_sheet: Mapping[str, Sequence[TableRegion]]) -> bytes:
    return WorkbookWriter().encode_tables(tables_by_sheet)


def encode_grid(grid: Grid, sheet_name: str = "Merged") -> bytes:
    return WorkbookWriter().encode_grid(grid, sheet_name)
