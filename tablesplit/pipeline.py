"""
Pipeline: thin orchestrator composing decode → detect → clean → export and
decode → merge → export.

run_detect   – Workbook → {sheet: [TableRegion]}
clean_tables – {sheet: [TableRegion]} → cleaned copy
run_split    – bytes → (tables, xlsx bytes)
run_merge    – Workbook + selection → merged grid

Each step is a pure function of its inputs; session state between steps is
the caller's concern.
"""

from __future__ import annotations

from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from tablesplit.codec import WorkbookReader, WorkbookWriter
from tablesplit.detection import DetectionConfig, DEFAULT_CONFIG, RegionDetector, TableCleaner
from tablesplit.ir import Grid, Sheet, TableRegion, Workbook
from tablesplit.merge import SheetMerger
from tablesplit.merge.sheet_merger import GroupMetadata
from tablesplit.logger import get_logger

logger = get_logger(__name__)

TablesBySheet = Dict[str, List[TableRegion]]


def run_detect(workbook: Workbook, cfg: DetectionConfig = DEFAULT_CONFIG) -> TablesBySheet:
    """Detect tables in every sheet; sheets without tables are omitted."""
    found = RegionDetector(cfg).detect_workbook(workbook)
    logger.info(
        "run_detect: %s → %d table(s) across %d sheet(s)",
        workbook.file_name, sum(len(t) for t in found.values()), len(found),
    )
    return found


def clean_tables(
    tables_by_sheet: Mapping[str, Sequence[TableRegion]],
    drop_summary_rows: bool = False,
    drop_empty_columns: bool = False,
) -> TablesBySheet:
    """
    Apply the standard cleaning transforms to every table.

    Summary rows are resolved first so that empty-column detection sees the
    cleaned data. Empty columns are always computed and attached.
    """
    cleaned: TablesBySheet = {}
    for sheet_name, tables in tables_by_sheet.items():
        out: List[TableRegion] = []
        for table in tables:
            if drop_summary_rows:
                table = TableCleaner.remove_summary_rows(table)
            table = TableCleaner.with_empty_columns(table)
            if drop_empty_columns:
                table = TableCleaner.remove_empty_columns(table)
            out.append(table)
        cleaned[sheet_name] = out
    return cleaned


def run_split(
    data: bytes,
    file_name: str,
    drop_summary_rows: bool = False,
    drop_empty_columns: bool = False,
    cfg: DetectionConfig = DEFAULT_CONFIG,
) -> Tuple[TablesBySheet, bytes]:
    """
    Decode *data*, detect and clean its tables, and encode them as a new
    workbook (one tab per table).
    """
    workbook = WorkbookReader().decode(data, file_name)
    tables = clean_tables(run_detect(workbook, cfg), drop_summary_rows, drop_empty_columns)
    return tables, WorkbookWriter().encode_tables(tables)


def select_sheets(workbook: Workbook, sheet_names: Optional[Sequence[str]] = None) -> List[Sheet]:
    """
    Sheets to merge, in the order given by *sheet_names* (all sheets in file
    order when omitted). Unknown names are skipped with a warning.
    """
    if not sheet_names:
        return list(workbook.sheets)
    selected: List[Sheet] = []
    for name in sheet_names:
        sheet = workbook.sheet_by_name(name)
        if sheet is None:
            logger.warning("Sheet %r not found in %s; skipped", name, workbook.file_name)
            continue
        selected.append(sheet)
    return selected


def run_merge(
    workbook: Workbook,
    sheet_names: Optional[Sequence[str]] = None,
    assignments: Optional[Mapping[str, str]] = None,
    selected_groups: Optional[Sequence[str]] = None,
    group_metadata: GroupMetadata = None,
    cfg: DetectionConfig = DEFAULT_CONFIG,
) -> Grid:
    """Merge the selected sheets of *workbook* into one grid."""
    sheets = select_sheets(workbook, sheet_names)
    return SheetMerger(cfg).merge(sheets, assignments, selected_groups, group_metadata)
