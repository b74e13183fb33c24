"""
SheetMerger: consolidate several sheets into one grid on a shared schema.

Sheets rarely share exact header spelling, so their header rows are aligned
with :class:`ColumnMatcher` and each data row is re-projected onto the
unified column order. Two reserved trailing columns keep provenance:
``tab_name`` always, ``project`` only when more than one group is selected.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from tablesplit.detection.cell_classifier import CellClassifier
from tablesplit.detection.config import (
    GROUP_COLUMN,
    TAB_NAME_COLUMN,
    DetectionConfig,
    DEFAULT_CONFIG,
)
from tablesplit.ir import Grid, ReferenceData, Sheet, TableRegion, split_table_name
from tablesplit.merge.column_matcher import ColumnMatcher
from tablesplit.merge.normalizer import normalize_column_name
from tablesplit.logger import get_logger

logger = get_logger(__name__)

GroupMetadata = Union[ReferenceData, Mapping[str, str], None]

_RESERVED_COLUMNS = frozenset({TAB_NAME_COLUMN, GROUP_COLUMN})


class SheetMerger:
    """
    Merge sheets (or accepted tables) into a single grid.

    Typical call::

        merger = SheetMerger()
        grid = merger.merge(sheets, {"Sheet1": "p-17"}, ["p-17", "p-42"], reference)
    """

    def __init__(
        self,
        cfg: DetectionConfig = DEFAULT_CONFIG,
        matcher: Optional[ColumnMatcher] = None,
    ):
        self._cfg = cfg
        self._matcher = matcher or ColumnMatcher(cfg=cfg)

    # ------------------------------------------------------------------
    # Schema
    # ------------------------------------------------------------------

    def build_schema(
        self,
        sheets: Sequence[Sheet],
        mapping: Mapping[str, str],
        with_group_column: bool,
    ) -> List[str]:
        """Canonical keys in first-seen order, then the reserved columns."""
        columns: Dict[str, None] = {}
        for sheet in sheets:
            for header in sheet.header:
                norm = normalize_column_name(header)
                columns.setdefault(mapping.get(norm, norm), None)
        columns.setdefault(TAB_NAME_COLUMN, None)
        if with_group_column:
            columns.setdefault(GROUP_COLUMN, None)
        return list(columns)

    @staticmethod
    def header_positions(sheet: Sheet, mapping: Mapping[str, str]) -> Dict[str, int]:
        """
        Canonical key → column index in *sheet*. When two headers collapse
        onto the same key the right-most one wins.
        """
        positions: Dict[str, int] = {}
        for index, header in enumerate(sheet.header):
            norm = normalize_column_name(header)
            positions[mapping.get(norm, norm)] = index
        return positions

    # ------------------------------------------------------------------
    # Group labels
    # ------------------------------------------------------------------

    @staticmethod
    def resolve_group_label(
        sheet_name: str,
        assignments: Mapping[str, str],
        group_metadata: GroupMetadata = None,
    ) -> str:
        """
        Label written in the group column for *sheet_name*; the assigned id
        is translated through *group_metadata* when it names a known group.
        """
        assigned = assignments.get(sheet_name) or ""
        if not assigned or group_metadata is None:
            return assigned
        if isinstance(group_metadata, ReferenceData):
            return group_metadata.project_name(assigned) or assigned
        return group_metadata.get(assigned) or assigned

    # ------------------------------------------------------------------
    # Merge
    # ------------------------------------------------------------------

    def merge(
        self,
        sheets: Sequence[Sheet],
        assignments: Optional[Mapping[str, str]] = None,
        selected_groups: Optional[Sequence[str]] = None,
        group_metadata: GroupMetadata = None,
    ) -> Grid:
        """
        Return the merged grid: one header row followed by the data rows of
        every sheet in order. Rows that carry nothing besides the reserved
        columns are dropped.
        """
        if not sheets:
            return []
        assignments = assignments or {}
        with_group = len(selected_groups or []) > 1

        mapping = self._matcher.build_mapping([s.header for s in sheets])
        columns = self.build_schema(sheets, mapping, with_group)
        grid: Grid = [list(columns)]

        for sheet in sheets:
            if len(sheet.rows) < 2:
                continue
            positions = self.header_positions(sheet, mapping)
            label = self.resolve_group_label(sheet.name, assignments, group_metadata) if with_group else ""
            kept = 0
            for row in sheet.rows[1:]:
                if CellClassifier.is_blank_row(row):
                    continue
                out: List[Any] = []
                for column in columns:
                    if column == TAB_NAME_COLUMN:
                        out.append(sheet.name)
                    elif column == GROUP_COLUMN and with_group:
                        out.append(label)
                    else:
                        pos = positions.get(column)
                        out.append(row[pos] if pos is not None and pos < len(row) else "")
                has_data = any(
                    not CellClassifier.is_empty(value)
                    for column, value in zip(columns, out)
                    if column not in _RESERVED_COLUMNS
                )
                if has_data:
                    grid.append(out)
                    kept += 1
            logger.debug("Sheet %r contributed %d row(s)", sheet.name, kept)

        logger.info(
            "Merged %d sheet(s) into %d row(s) x %d column(s)",
            len(sheets), len(grid) - 1, len(columns),
        )
        return grid


def tables_as_sheets(tables_by_sheet: Mapping[str, Sequence[TableRegion]]) -> List[Sheet]:
    """
    Turn accepted tables into mergeable sheets. A sheet that split into
    several tables yields one ``<sheet>_Table<N>`` sheet per table.
    """
    sheets: List[Sheet] = []
    for sheet_name, tables in tables_by_sheet.items():
        for index, table in enumerate(tables):
            name = split_table_name(sheet_name, index, len(tables))
            sheets.append(Sheet(name=name, rows=[list(r) for r in table.rows]))
    return sheets


def merge_sheets(
    sheets: Sequence[Sheet],
    assignments: Optional[Mapping[str, str]] = None,
    selected_groups: Optional[Sequence[str]] = None,
    group_metadata: GroupMetadata = None,
    cfg: DetectionConfig = DEFAULT_CONFIG,
) -> Grid:
    """Convenience wrapper around :meth:`SheetMerger.merge`."""
    return SheetMerger(cfg).merge(sheets, assignments, selected_groups, group_metadata)
