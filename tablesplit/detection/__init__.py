"""
Table detection subpackage.

Public API:
  - RegionDetector         (blank-row grouping + table heuristics)
  - CellClassifier         (empty / blank / summary predicates)
  - TableCleaner           (pure transforms on detected tables)
  - DetectionConfig        (tunable thresholds)
"""

from tablesplit.detection.config import DetectionConfig, DEFAULT_CONFIG
from tablesplit.detection.cell_classifier import CellClassifier
from tablesplit.detection.region_detector import GroupVerdict, RegionDetector, detect_tables
from tablesplit.detection.table_cleaner import (
    TableCleaner,
    detect_empty_columns,
    remove_empty_columns,
    remove_summary_rows,
)

__all__ = [
    "DetectionConfig",
    "DEFAULT_CONFIG",
    "CellClassifier",
    "GroupVerdict",
    "RegionDetector",
    "TableCleaner",
    "detect_tables",
    "detect_empty_columns",
    "remove_empty_columns",
    "remove_summary_rows",
]
