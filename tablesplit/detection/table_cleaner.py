"""
TableCleaner: pure transforms applied to detected tables.

Every transform returns a new :class:`TableRegion`; the input is never
modified, so a sequence of accept/clean steps can be replayed from the
original detection result.

Empty-column detection is a separate, on-demand pass because it is meant to
run after summary rows have been resolved.
"""

from __future__ import annotations

from typing import Any, Iterable, List, Sequence

from openpyxl.utils import get_column_letter

from tablesplit.detection.cell_classifier import CellClassifier
from tablesplit.ir import TableRegion
from tablesplit.logger import get_logger

logger = get_logger(__name__)


class TableCleaner:
    """Stateless collection of table transforms."""

    # ----- empty columns ---------------------------------------------------

    @staticmethod
    def detect_empty_columns(rows: Sequence[Sequence[Any]]) -> List[int]:
        """
        Return the column offsets that hold no content in any row.

        Only rows long enough to reach a column are consulted for it;
        offsets past every row's end are never reported.
        """
        width = max((len(r) for r in rows or []), default=0)
        empty: List[int] = []
        for col in range(width):
            if all(CellClassifier.is_empty(r[col]) for r in rows if len(r) > col):
                empty.append(col)
        return empty

    @classmethod
    def with_empty_columns(cls, table: TableRegion) -> TableRegion:
        """Attach freshly computed ``empty_column_offsets`` to *table*."""
        return table.model_copy(update={
            "empty_column_offsets": cls.detect_empty_columns(table.rows),
        })

    @classmethod
    def remove_empty_columns(cls, table: TableRegion) -> TableRegion:
        """
        Drop empty columns from every row. Uses the offsets already attached
        to *table* when present, otherwise detects them first.
        """
        offsets = table.empty_column_offsets
        if offsets is None:
            offsets = cls.detect_empty_columns(table.rows)
        if not offsets:
            return table.model_copy(update={"empty_column_offsets": []})
        drop = set(offsets)
        rows = [[v for i, v in enumerate(r) if i not in drop] for r in table.rows]
        logger.debug("Removed %d empty column(s) from table at row %d", len(drop), table.start_row)
        return table.model_copy(update={"rows": rows, "empty_column_offsets": []})

    # ----- summary rows ----------------------------------------------------

    @staticmethod
    def remove_summary_rows(table: TableRegion) -> TableRegion:
        """Drop the flagged summary rows and clear the flags."""
        if not table.summary_row_offsets:
            return table
        drop = set(table.summary_row_offsets)
        rows = [list(r) for i, r in enumerate(table.rows) if i not in drop]
        return table.model_copy(update={
            "rows": rows,
            "summary_row_offsets": [],
            "empty_column_offsets": None,
        })

    # ----- arbitrary edits -------------------------------------------------

    @staticmethod
    def remove_rows(table: TableRegion, offsets: Iterable[int]) -> TableRegion:
        """Drop rows at *offsets* and re-base the remaining summary flags."""
        drop = {o for o in offsets if 0 <= o < len(table.rows)}
        if not drop:
            return table
        rows = [list(r) for i, r in enumerate(table.rows) if i not in drop]
        summary = [
            s - sum(1 for d in drop if d < s)
            for s in table.summary_row_offsets
            if s not in drop
        ]
        return table.model_copy(update={
            "rows": rows,
            "summary_row_offsets": summary,
            "empty_column_offsets": None,
        })

    @staticmethod
    def remove_columns(table: TableRegion, offsets: Iterable[int]) -> TableRegion:
        """Drop the given column offsets from every row."""
        drop = {o for o in offsets if o >= 0}
        if not drop:
            return table
        rows = [[v for i, v in enumerate(r) if i not in drop] for r in table.rows]
        return table.model_copy(update={"rows": rows, "empty_column_offsets": None})

    # ----- reporting -------------------------------------------------------

    @staticmethod
    def column_letters(offsets: Iterable[int]) -> List[str]:
        """Spreadsheet letters (``A``, ``B`` … ``AA``) for 0-based offsets."""
        return [get_column_letter(o + 1) for o in offsets]


detect_empty_columns = TableCleaner.detect_empty_columns
remove_summary_rows = TableCleaner.remove_summary_rows
remove_empty_columns = TableCleaner.remove_empty_columns
