"""
RegionDetector: split a loosely structured sheet into candidate tables.

Loosely formatted spreadsheets mix metadata blocks, section headings and
real tables, separated by blank rows. The detector cuts the sheet at blank
rows and keeps only the groups whose cell-density profile looks tabular,
so no explicit table markers are needed.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Union

from tablesplit.detection.cell_classifier import CellClassifier
from tablesplit.detection.config import DetectionConfig, DEFAULT_CONFIG
from tablesplit.ir import Sheet, TableRegion, Workbook
from tablesplit.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class GroupVerdict:
    """Outcome of evaluating one blank-row-delimited group of rows."""

    accepted: bool
    reason: str
    row_count: int
    mode_density: int = 0
    data_cells: int = 0
    consistency: float = 0.0


class RegionDetector:
    """
    Stateless detector that groups rows and decides which groups are tables.

    A :class:`DetectionConfig` can be passed in to override default
    thresholds; no per-call state is kept on the instance.
    """

    def __init__(self, cfg: DetectionConfig = DEFAULT_CONFIG):
        self._cfg = cfg

    # -----------------------------------------------------------------
    # Statistics
    # -----------------------------------------------------------------

    @staticmethod
    def mode(values: Sequence[int]) -> int:
        """
        Most common value. On ties the value that first reaches the highest
        count wins. Returns 0 for an empty sequence.
        """
        counts: Dict[int, int] = {}
        best_count = 0
        best_value = values[0] if values else 0
        for v in values:
            counts[v] = counts.get(v, 0) + 1
            if counts[v] > best_count:
                best_count = counts[v]
                best_value = v
        return best_value

    # -----------------------------------------------------------------
    # Group evaluation
    # -----------------------------------------------------------------

    def evaluate_group(self, rows: Sequence[Sequence[Any]]) -> GroupVerdict:
        """Decide whether *rows* (a blank-free group) is a real table."""
        c = self._cfg
        total = len(rows)
        if total < c.min_rows:
            return GroupVerdict(False, "too_few_rows", total)

        densities = [CellClassifier.row_density(r) for r in rows]
        mode_density = self.mode(densities)
        data_cells = sum(densities)
        consistent = sum(1 for d in densities if abs(d - mode_density) <= c.density_tolerance)
        consistency = consistent / total

        if mode_density < c.min_columns:
            return GroupVerdict(False, "too_few_columns", total, mode_density, data_cells, consistency)
        if data_cells < c.min_data_cells:
            return GroupVerdict(False, "too_few_data_cells", total, mode_density, data_cells, consistency)
        if consistency < c.min_consistency:
            return GroupVerdict(False, "inconsistent_columns", total, mode_density, data_cells, consistency)
        return GroupVerdict(True, "accepted", total, mode_density, data_cells, consistency)

    # -----------------------------------------------------------------
    # Detection
    # -----------------------------------------------------------------

    def detect(
        self,
        sheet: Union[Sheet, Sequence[Sequence[Any]]],
        sheet_name: Optional[str] = None,
    ) -> List[TableRegion]:
        """
        Walk the rows of *sheet* and return the accepted regions in order.

        Summary rows stay in the region data; their offsets are reported in
        ``summary_row_offsets``.
        """
        if isinstance(sheet, Sheet):
            rows: Sequence[Sequence[Any]] = sheet.rows
            name = sheet_name if sheet_name is not None else sheet.name
        else:
            rows = sheet or []
            name = sheet_name or ""

        regions: List[TableRegion] = []
        group: List[List[Any]] = []
        group_start: Optional[int] = None
        summary_offsets: List[int] = []

        def close_group(end_row: int) -> None:
            verdict = self.evaluate_group(group)
            if verdict.accepted:
                regions.append(TableRegion(
                    sheet_name=name,
                    start_row=group_start,
                    end_row=end_row,
                    rows=[list(r) for r in group],
                    summary_row_offsets=list(summary_offsets),
                ))
            else:
                logger.debug(
                    "Sheet %r rows %d-%d rejected: %s (mode=%d, cells=%d, consistency=%.2f)",
                    name, group_start, end_row, verdict.reason,
                    verdict.mode_density, verdict.data_cells, verdict.consistency,
                )

        for idx, row in enumerate(rows):
            if CellClassifier.is_blank_row(row):
                if group:
                    close_group(idx - 1)
                    group, group_start, summary_offsets = [], None, []
                continue
            if group_start is None:
                group_start = idx
            if CellClassifier.is_summary_row(row, self._cfg.summary_keywords):
                summary_offsets.append(idx - group_start)
            group.append(list(row))

        # trailing group without a blank row after it
        if group:
            close_group(len(rows) - 1)

        logger.info("Sheet %r: %d table(s) detected in %d rows", name, len(regions), len(rows))
        return regions

    def detect_workbook(self, workbook: Workbook) -> Dict[str, List[TableRegion]]:
        """
        Run :meth:`detect` on every sheet; sheets without any table are
        omitted. Sheet order is preserved.
        """
        found: Dict[str, List[TableRegion]] = {}
        for sheet in workbook.sheets:
            regions = self.detect(sheet)
            if regions:
                found[sheet.name] = regions
        return found


def detect_tables(
    sheet: Union[Sheet, Sequence[Sequence[Any]]],
    cfg: DetectionConfig = DEFAULT_CONFIG,
) -> List[TableRegion]:
    """Convenience wrapper around :meth:`RegionDetector.detect`."""
    return RegionDetector(cfg).detect(sheet)
