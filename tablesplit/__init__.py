"""
tablesplit: detect, clean, split and merge tables in loosely structured
spreadsheet workbooks.
"""

from tablesplit.detection import (
    DetectionConfig,
    DEFAULT_CONFIG,
    detect_empty_columns,
    detect_tables,
    remove_empty_columns,
    remove_summary_rows,
)
from tablesplit.ir import Sheet, TableRegion, Workbook
from tablesplit.merge import merge_sheets

__all__ = [
    "DetectionConfig",
    "DEFAULT_CONFIG",
    "Sheet",
    "TableRegion",
    "Workbook",
    "detect_tables",
    "detect_empty_columns",
    "remove_summary_rows",
    "remove_empty_columns",
    "merge_sheets",
]
