"""
Sheet merging subpackage.

Public API:
  - SheetMerger            (re-projects sheets onto one schema)
  - ColumnMatcher          (first-match fuzzy header grouping)
  - normalize_column_name  (header → comparable key)
  - similarity             (0..100 edit-distance score)
"""

from tablesplit.merge.normalizer import normalize_column_name
from tablesplit.merge.column_matcher import (
    ColumnMatcher,
    build_column_mapping,
    levenshtein,
    similarity,
)
from tablesplit.merge.sheet_merger import SheetMerger, merge_sheets, tables_as_sheets

__all__ = [
    "normalize_column_name",
    "ColumnMatcher",
    "build_column_mapping",
    "levenshtein",
    "similarity",
    "SheetMerger",
    "merge_sheets",
    "tables_as_sheets",
]
