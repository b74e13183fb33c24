"""
Intermediate Representation Module
==================================

Core data structures passed between the codec, the detector, the cleaning
transforms and the merge engine: Sheet, Workbook, TableRegion, plus the
developer/project reference records used as merge group labels.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, model_validator

# A cell is text, number, boolean, date or empty; rows may be ragged.
Row = List[Any]
Grid = List[Row]


class Sheet(BaseModel):
    """
    One worksheet: a name unique within its workbook and its rows in order.
    """
    name: str
    rows: Grid = []

    @property
    def header(self) -> Row:
        return list(self.rows[0]) if self.rows else []


class Workbook(BaseModel):
    """
    A decoded workbook. Sheet order follows the source file.
    """
    file_name: str
    sheets: List[Sheet] = []

    @property
    def sheet_names(self) -> List[str]:
        return [s.name for s in self.sheets]

    def sheet_by_name(self, name: str) -> Optional[Sheet]:
        for sheet in self.sheets:
            if sheet.name == name:
                return sheet
        return None


class TableRegion(BaseModel):
    """
    Read-only view over a contiguous block of rows judged to be a real table.

    Attributes:
        sheet_name: owning sheet
        start_row / end_row: inclusive 0-based bounds in the owning sheet
        rows: the region data, summary rows included
        summary_row_offsets: offsets (relative to the region) of aggregate rows
        empty_column_offsets: column offsets with no content; ``None`` until
            computed on demand by the table cleaner
    """
    sheet_name: str = ""
    start_row: int
    end_row: int
    rows: Grid
    summary_row_offsets: List[int] = []
    empty_column_offsets: Optional[List[int]] = None

    class Config:
        frozen = True

    @model_validator(mode="after")
    def _check_bounds(self) -> "TableRegion":
        if self.start_row > self.end_row:
            raise ValueError(f"start_row {self.start_row} is after end_row {self.end_row}")
        return self

    @property
    def headers(self) -> Row:
        return list(self.rows[0]) if self.rows else []

    @property
    def row_count(self) -> int:
        return len(self.rows)

    @property
    def column_count(self) -> int:
        return max((len(r) for r in self.rows), default=0)


def split_table_name(sheet_name: str, index: int, total: int) -> str:
    """
    Name of the output tab for table *index* (0-based) of a sheet that
    produced *total* tables: the sheet name itself for a single table,
    ``<sheet>_Table<N>`` otherwise.
    """
    if total <= 1:
        return sheet_name
    return f"{sheet_name}_Table{index + 1}"


class Developer(BaseModel):
    """A group owner (parent record) in the reference list."""
    id: str
    name: str


class Project(BaseModel):
    """
    A group label candidate for merged rows.

    ``developer_*`` are the parent fields; the three booleans are the flags
    carried by the reference CSV.
    """
    id: str
    name: str
    developer_id: str = ""
    developer_name: str = ""
    is_super: bool = False
    fake: bool = False
    not_launched: bool = False


class ReferenceData(BaseModel):
    """Developers and projects available for sheet assignment."""
    developers: List[Developer] = []
    projects: List[Project] = []

    def project_name(self, project_id: str) -> Optional[str]:
        for project in self.projects:
            if project.id == project_id:
                return project.name
        return None

    def project_names(self) -> Dict[str, str]:
        return {p.id: p.name for p in self.projects}
