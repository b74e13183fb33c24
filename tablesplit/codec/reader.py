"""
WorkbookReader: decode uploaded workbook bytes into a :class:`Workbook`.

Encapsulates engine selection:
- openpyxl for ``.xlsx`` / ``.xlsm`` (cached formula values)
- xlrd for legacy ``.xls``

Every row is kept, blank ones included, because blank rows are what the
region detector splits on. Trailing empty cells are trimmed from each row,
so a blank row decodes to ``[]``.
"""

from __future__ import annotations

import io
from pathlib import Path
from typing import Any, Iterable, List, Optional, Union

from openpyxl import load_workbook

from tablesplit.detection.cell_classifier import CellClassifier
from tablesplit.errors import DecodeError
from tablesplit.ir import Sheet, Workbook
from tablesplit.logger import get_logger

logger = get_logger(__name__)

# Compound File Binary signature used by legacy .xls files
_OLE_MAGIC = b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1"


class WorkbookReader:
    """Read workbook bytes into sheets of raw cell values."""

    @staticmethod
    def is_legacy_xls(data: bytes, file_name: str = "") -> bool:
        if Path(file_name or "").suffix.lower() == ".xls":
            return True
        return data[:8] == _OLE_MAGIC

    def decode(self, data: bytes, file_name: str = "workbook.xlsx") -> Workbook:
        """
        Parse *data* and return the workbook with its sheets in file order.

        Raises:
            DecodeError: the bytes are empty or not a readable workbook
        """
        if not data:
            raise DecodeError("Uploaded file is empty", file_name)
        try:
            if self.is_legacy_xls(data, file_name):
                sheets = self._read_xls(data)
                backend = "xlrd"
            else:
                sheets = self._read_xlsx(data)
                backend = "openpyxl"
        except DecodeError:
            raise
        except Exception as exc:
            logger.error("Failed to decode %s: %s", file_name, exc)
            raise DecodeError(f"Could not read {file_name!r} as a workbook: {exc}", file_name) from exc

        logger.info(
            "Decoded %s with %s: %d sheet(s) %s",
            file_name, backend, len(sheets), [s.name for s in sheets],
        )
        return Workbook(file_name=file_name, sheets=sheets)

    def read(self, file_path: Union[str, Path]) -> Workbook:
        """Read a workbook from disk."""
        path = Path(file_path)
        try:
            data = path.read_bytes()
        except OSError as exc:
            raise DecodeError(f"Could not open {path}: {exc}", path.name) from exc
        return self.decode(data, path.name)

    # ------------------------------------------------------------------
    # Engines
    # ------------------------------------------------------------------

    @staticmethod
    def _read_xlsx(data: bytes) -> List[Sheet]:
        wb = load_workbook(io.BytesIO(data), read_only=False, data_only=True)
        try:
            sheets: List[Sheet] = []
            for ws in wb.worksheets:
                rows = [_trim_row(r) for r in ws.iter_rows(values_only=True)]
                sheets.append(Sheet(name=ws.title, rows=rows))
            return sheets
        finally:
            wb.close()

    @staticmethod
    def _read_xls(data: bytes) -> List[Sheet]:
        import xlrd

        wb = xlrd.open_workbook(file_contents=data)
        sheets: List[Sheet] = []
        for ws in wb.sheets():
            rows: List[List[Any]] = []
            for ri in range(ws.nrows):
                rows.append(_trim_row(
                    _xls_cell_value(ws.cell(ri, ci), wb.datemode)
                    for ci in range(ws.ncols)
                ))
            sheets.append(Sheet(name=ws.name, rows=rows))
        return sheets


def _trim_row(cells: Iterable[Any]) -> List[Any]:
    row = list(cells)
    while row and CellClassifier.is_empty(row[-1]):
        row.pop()
    return row


def _xls_cell_value(cell: Any, datemode: int) -> Optional[Any]:
    import xlrd

    if cell.ctype in (xlrd.XL_CELL_EMPTY, xlrd.XL_CELL_BLANK):
        return None
    if cell.ctype == xlrd.XL_CELL_BOOLEAN:
        return bool(cell.value)
    if cell.ctype == xlrd.XL_CELL_ERROR:
        return None
    if cell.ctype == xlrd.XL_CELL_DATE:
        try:
            return xlrd.xldate.xldate_as_datetime(cell.value, datemode)
        except (ValueError, OverflowError, xlrd.xldate.XLDateError):
            return cell.value
    if cell.ctype == xlrd.XL_CELL_NUMBER and float(cell.value).is_integer():
        return int(cell.value)
    return cell.value


def decode_workbook(data: bytes, file_name: str = "workbook.xlsx") -> Workbook:
    """Convenience wrapper around :meth:`WorkbookReader.decode`."""
    return WorkbookReader().decode(data, file_name)


def read_workbook(file_path: Union[str, Path]) -> Workbook:
    """Convenience wrapper around :meth:`WorkbookReader.read`."""
    return WorkbookReader().read(file_path)
