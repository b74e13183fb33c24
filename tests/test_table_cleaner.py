import pytest

from tablesplit.detection import TableCleaner, detect_empty_columns, remove_empty_columns, remove_summary_rows
from tablesplit.ir import TableRegion


@pytest.fixture
def table():
    return TableRegion(
        sheet_name="Sales",
        start_row=4,
        end_row=8,
        rows=[
            ["Region", None, "Q1", "Note"],
            ["North", None, 100, ""],
            ["Total", "", 100],
            ["South", "  ", 150, None],
            ["Avg", None, 125, "est."],
        ],
        summary_row_offsets=[2, 4],
    )


class TestEmptyColumns:

    def test_detects_columns_without_content(self, table):
        assert detect_empty_columns(table.rows) == [1]

    def test_short_rows_are_ignored_for_missing_positions(self):
        rows = [["a", None, None], ["b"], ["c", None]]
        assert detect_empty_columns(rows) == [1, 2]

    def test_positions_past_every_row_never_reported(self):
        assert detect_empty_columns([["a", "b"], ["c"]]) == []
        assert detect_empty_columns([]) == []

    def test_empty_columns_reflect_cleaned_data(self, table):
        # "Note" only has content in the summary row "Avg" after the header
        cleaned = TableCleaner.with_empty_columns(remove_summary_rows(table))
        assert cleaned.empty_column_offsets == [1]
        trimmed = TableCleaner.remove_rows(cleaned, [0])
        assert detect_empty_columns(trimmed.rows) == [1, 3]

    def test_remove_empty_columns(self, table):
        result = remove_empty_columns(table)
        assert result.rows[0] == ["Region", "Q1", "Note"]
        assert result.rows[2] == ["Total", 100]
        assert result.headers == ["Region", "Q1", "Note"]
        assert result.empty_column_offsets == []

    def test_remove_empty_columns_uses_attached_offsets(self, table):
        attached = table.model_copy(update={"empty_column_offsets": [3]})
        result = remove_empty_columns(attached)
        assert result.rows[0] == ["Region", None, "Q1"]

    def test_column_letters(self):
        assert TableCleaner.column_letters([0, 1, 25, 26]) == ["A", "B", "Z", "AA"]


class TestSummaryRows:

    def test_remove_summary_rows_returns_new_table(self, table):
        result = remove_summary_rows(table)

        assert [r[0] for r in result.rows] == ["Region", "North", "South"]
        assert result.summary_row_offsets == []
        assert result.empty_column_offsets is None
        # original untouched
        assert table.row_count == 5
        assert table.summary_row_offsets == [2, 4]

    def test_no_summary_rows_is_a_no_op(self, table):
        plain = table.model_copy(update={"summary_row_offsets": []})
        assert remove_summary_rows(plain).rows == plain.rows

    def test_bounds_are_kept(self, table):
        result = remove_summary_rows(table)
        assert (result.start_row, result.end_row) == (4, 8)


class TestEdits:

    def test_remove_rows_rebases_summary_offsets(self, table):
        result = TableCleaner.remove_rows(table, [1, 3])
        assert [r[0] for r in result.rows] == ["Region", "Total", "Avg"]
        assert result.summary_row_offsets == [1, 2]

    def test_remove_rows_drops_removed_summary_offsets(self, table):
        result = TableCleaner.remove_rows(table, [2, 99])
        assert result.summary_row_offsets == [3]

    def test_remove_columns(self, table):
        result = TableCleaner.remove_columns(table, [0, 3])
        assert result.rows[0] == [None, "Q1"]
        assert result.rows[2] == ["", 100]
        assert table.rows[0][0] == "Region"

    def test_table_is_frozen(self, table):
        with pytest.raises(Exception):
            table.start_row = 0

    def test_bounds_validated(self):
        with pytest.raises(ValueError):
            TableRegion(start_row=5, end_row=2, rows=[])
