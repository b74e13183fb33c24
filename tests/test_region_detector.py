"""
Table region detection: blank-row grouping and the density heuristics.
"""
import pytest

from tablesplit.detection import DetectionConfig, RegionDetector, detect_tables
from tablesplit.ir import Sheet


def _block(rows, width=3, start=0):
    return [[f"r{start + i}c{j}" for j in range(width)] for i in range(rows)]


class TestRegionDetection:

    def test_report_sheet_yields_two_tables(self, report_rows):
        regions = detect_tables(Sheet(name="Report", rows=report_rows))

        assert [(r.start_row, r.end_row) for r in regions] == [(3, 6), (10, 13)]
        assert regions[0].headers == ["Region", "Q1", "Q2"]
        assert regions[0].summary_row_offsets == [3]
        assert regions[1].headers == ["Item", "Cost", "Owner"]
        assert regions[1].summary_row_offsets == []
        assert all(r.sheet_name == "Report" for r in regions)

    def test_two_blocks_separated_by_one_blank_row(self):
        rows = _block(4) + [[None, "", "  "]] + _block(3, start=5)
        regions = detect_tables(rows)

        assert len(regions) == 2
        assert (regions[0].start_row, regions[0].end_row) == (0, 3)
        assert (regions[1].start_row, regions[1].end_row) == (5, 7)
        assert [r.row_count for r in regions] == [4, 3]

    def test_sheet_without_separators_is_one_group(self):
        regions = detect_tables(_block(6))
        assert len(regions) == 1
        assert (regions[0].start_row, regions[0].end_row) == (0, 5)

    def test_trailing_group_without_blank_row_is_emitted(self):
        rows = [[None]] + _block(3, start=1)
        regions = detect_tables(rows)
        assert [(r.start_row, r.end_row) for r in regions] == [(1, 3)]

    def test_summary_row_flagged_anywhere_in_block(self):
        rows = [["Total", "", ""], ["Q1", 100, 200], ["Q2", 150, 250], ["Q3", 120, 90], [None]]
        regions = detect_tables(rows)

        assert len(regions) == 1
        assert regions[0].summary_row_offsets == [0]
        assert regions[0].rows[0][0] == "Total"

    def test_summary_offsets_are_relative_to_region(self):
        rows = [["meta"], [None], ["a", "b"], ["1", "2"], ["sum", "3"]]
        regions = detect_tables(rows)
        assert regions[0].start_row == 2
        assert regions[0].summary_row_offsets == [2]

    def test_empty_and_blank_sheets(self):
        assert detect_tables([]) == []
        assert detect_tables([[None, None], [], [""]]) == []

    def test_ragged_rows_are_accepted(self):
        rows = [["a", "b", "c"], ["1", "2"], ["3", "4", "5", "6"], ["7", "8", "9"]]
        regions = detect_tables(rows)
        assert len(regions) == 1
        assert regions[0].column_count == 4

    def test_idempotent(self, report_rows):
        sheet = Sheet(name="Report", rows=report_rows)
        assert detect_tables(sheet) == detect_tables(sheet)

    def test_input_rows_not_mutated(self, report_rows):
        snapshot = [list(r) for r in report_rows]
        detect_tables(report_rows)
        assert report_rows == snapshot


class TestGroupEvaluation:

    def setup_method(self):
        self.detector = RegionDetector()

    def test_too_few_rows(self):
        verdict = self.detector.evaluate_group(_block(2))
        assert not verdict.accepted
        assert verdict.reason == "too_few_rows"

    def test_single_column_block_rejected(self):
        verdict = self.detector.evaluate_group([["a"], ["b"], ["c"], ["d"], ["e"], ["f"]])
        assert not verdict.accepted
        assert verdict.reason == "too_few_columns"

    def test_too_few_data_cells(self):
        cfg = DetectionConfig(min_rows=2)
        verdict = RegionDetector(cfg).evaluate_group([["a", "b"], ["c", "d"]])
        assert not verdict.accepted
        assert verdict.reason == "too_few_data_cells"

    def test_inconsistent_columns(self):
        rows = [
            ["a", "b"], ["c", "d"], ["e", "f"],
            ["1", "2", "3", "4", "5"], ["1", "2", "3", "4", "5"],
        ]
        verdict = self.detector.evaluate_group(rows)
        assert verdict.mode_density == 2
        assert verdict.consistency == pytest.approx(0.6)
        assert verdict.reason == "inconsistent_columns"

    def test_consistency_at_threshold_is_accepted(self):
        rows = [["a", "b"]] * 7 + [["1", "2", "3", "4", "5"]] * 3
        verdict = self.detector.evaluate_group(rows)
        assert verdict.consistency == pytest.approx(0.7)
        assert verdict.accepted

    def test_density_within_one_of_mode_is_consistent(self):
        rows = [["a", "b", "c"], ["a", "b"], ["a", "b", "c", "d"], ["a", "b", "c"]]
        verdict = self.detector.evaluate_group(rows)
        assert verdict.consistency == 1.0
        assert verdict.accepted

    def test_custom_thresholds(self):
        cfg = DetectionConfig(min_rows=5)
        assert RegionDetector(cfg).detect(_block(4)) == []
        assert len(RegionDetector(cfg).detect(_block(5))) == 1


class TestMode:

    @pytest.mark.parametrize(
        "values, expected",
        [
            ([3, 3, 2], 3),
            ([2, 3, 3, 2], 3),
            ([2, 3], 2),
            ([1, 2, 2, 1, 1], 1),
            ([], 0),
        ],
    )
    def test_first_value_to_reach_top_count_wins(self, values, expected):
        assert RegionDetector.mode(values) == expected


def test_detect_workbook_skips_sheets_without_tables(report_rows):
    from tablesplit.ir import Workbook

    wb = Workbook(file_name="r.xlsx", sheets=[
        Sheet(name="Cover", rows=[["title"]]),
        Sheet(name="Report", rows=report_rows),
    ])
    found = RegionDetector().detect_workbook(wb)
    assert list(found) == ["Report"]
    assert len(found["Report"]) == 2
