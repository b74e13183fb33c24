"""
Workbook codec subpackage.

Public API:
  - WorkbookReader / decode_workbook / read_workbook
  - WorkbookWriter / encode_tables / encode_grid
"""

from tablesplit.codec.reader import WorkbookReader, decode_workbook, read_workbook
from tablesplit.codec.writer import WorkbookWriter, encode_grid, encode_tables

__all__ = [
    "WorkbookReader",
    "decode_workbook",
    "read_workbook",
    "WorkbookWriter",
    "encode_grid",
    "encode_tables",
]
