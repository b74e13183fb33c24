"""
Backend Process Module
======================

Wraps the tablesplit pipeline for the API and the CLI: detect → summarise,
split → write workbook, merge → write workbook, plus JSON result output.
"""

import json
import os
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence

from tablesplit.codec import WorkbookReader, WorkbookWriter
from tablesplit.config import get_settings
from tablesplit.detection import CellClassifier, TableCleaner
from tablesplit.ir import ReferenceData, TableRegion, split_table_name
from tablesplit.logger import get_logger
from tablesplit.pipeline import clean_tables, run_detect, run_merge, run_split, select_sheets
from tablesplit.reference import fetch_reference_data

logger = get_logger(__name__)


def ensure_output_dir(output_dir: Optional[str] = None) -> Path:
    """Create the output directory (``Settings.OUTPUT_DIR`` by default)."""
    output_path = Path(output_dir or get_settings().OUTPUT_DIR).resolve()
    output_path.mkdir(parents=True, exist_ok=True)
    return output_path


def summarize_table(table: TableRegion, tab_name: str = "") -> Dict[str, Any]:
    """JSON-friendly description of a detected table."""
    empty = table.empty_column_offsets or []
    return {
        "tab_name": tab_name or table.sheet_name,
        "start_row": table.start_row,
        "end_row": table.end_row,
        "row_count": table.row_count,
        "column_count": table.column_count,
        "headers": [CellClassifier.cell_to_str(h) for h in table.headers],
        "summary_row_offsets": list(table.summary_row_offsets),
        "empty_column_offsets": list(empty),
        "empty_column_letters": TableCleaner.column_letters(empty),
    }


def _summarize_tables(tables_by_sheet: Mapping[str, Sequence[TableRegion]]) -> Dict[str, List[Dict[str, Any]]]:
    return {
        sheet_name: [
            summarize_table(t, split_table_name(sheet_name, i, len(tables)))
            for i, t in enumerate(tables)
        ]
        for sheet_name, tables in tables_by_sheet.items()
    }


def detect_file(data: bytes, file_name: str) -> Dict[str, Any]:
    """Decode *data* and report the tables found in each sheet."""
    workbook = WorkbookReader().decode(data, file_name)
    tables = clean_tables(run_detect(workbook))
    return {
        "file_name": workbook.file_name,
        "sheet_names": workbook.sheet_names,
        "tables": _summarize_tables(tables),
        "table_count": sum(len(t) for t in tables.values()),
    }


def split_file(
    data: bytes,
    file_name: str,
    output_dir: Optional[str] = None,
    drop_summary_rows: bool = False,
    drop_empty_columns: bool = False,
) -> Dict[str, Any]:
    """
    Detect and clean the tables of *data* and write them to
    ``<stem>_split.xlsx`` in *output_dir*, one tab per table.
    """
    output_path = ensure_output_dir(output_dir)
    tables, content = run_split(data, file_name, drop_summary_rows, drop_empty_columns)
    target = output_path / f"{Path(file_name).stem}_split.xlsx"
    target.write_bytes(content)
    logger.info("split_file: wrote %s", target)
    return {
        "file_name": file_name,
        "output_path": str(target),
        "tables": _summarize_tables(tables),
        "table_count": sum(len(t) for t in tables.values()),
    }


def merge_file(
    data: bytes,
    file_name: str,
    output_dir: Optional[str] = None,
    sheet_names: Optional[Sequence[str]] = None,
    assignments: Optional[Mapping[str, str]] = None,
    selected_groups: Optional[Sequence[str]] = None,
    reference: Optional[ReferenceData] = None,
    resolve_labels: bool = False,
) -> Dict[str, Any]:
    """
    Merge the selected sheets of *data* into ``<stem>_merged.xlsx``.

    With *resolve_labels* and no *reference*, the developer/project list is
    fetched so group ids can be written as project names.
    """
    output_path = ensure_output_dir(output_dir)
    workbook = WorkbookReader().decode(data, file_name)
    if resolve_labels and reference is None and len(selected_groups or []) > 1:
        reference = fetch_reference_data()
    grid = run_merge(workbook, sheet_names, assignments, selected_groups, reference)
    content = WorkbookWriter().encode_grid(grid)
    target = output_path / f"{Path(file_name).stem}_merged.xlsx"
    target.write_bytes(content)
    logger.info("merge_file: wrote %s (%d data rows)", target, max(0, len(grid) - 1))
    return {
        "file_name": workbook.file_name,
        "output_path": str(target),
        "columns": grid[0] if grid else [],
        "row_count": max(0, len(grid) - 1),
        "merged_sheets": [s.name for s in select_sheets(workbook, sheet_names)],
    }


def _resolve_output_json_name(output_filename: Optional[str] = None) -> str:
    if output_filename and output_filename.strip():
        return output_filename.strip()
    env_output_name = os.getenv("OUTPUT_JSON_NAME", "").strip()
    if env_output_name:
        return env_output_name
    if os.getenv("OUTPUT_JSON_TIMESTAMP", "").strip().lower() in {"1", "true", "yes", "on"}:
        return f"result_{datetime.now().strftime('%Y%m%d_%H%M%S')}.json"
    return "result.json"


def write_json_output(
    result: Dict[str, Any],
    output_dir: Optional[str] = None,
    output_filename: Optional[str] = None,
) -> str:
    """
    Write *result* as JSON into *output_dir*. The file name comes from
    *output_filename* or the OUTPUT_JSON_NAME environment variable.
    """
    output_path = ensure_output_dir(output_dir)
    json_path = output_path / _resolve_output_json_name(output_filename)
    with open(json_path, "w", encoding="utf-8") as f:
        json.dump(result, f, ensure_ascii=False, indent=2, default=str)
    return str(json_path)
