"""
Pytest configuration and shared fixtures.
"""
import io
import os
import sys

import pytest
from openpyxl import Workbook

# Add project root to path for imports
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if project_root not in sys.path:
    sys.path.insert(0, project_root)


def build_xlsx(sheets):
    """``{title: rows}`` → xlsx bytes, sheets in dict order."""
    wb = Workbook()
    wb.remove(wb.active)
    for title, rows in sheets.items():
        ws = wb.create_sheet(title)
        for row in rows:
            ws.append(list(row))
    buffer = io.BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


@pytest.fixture
def report_rows():
    """A loosely structured sheet: title block, sales table, notes, costs table."""
    return [
        ["Quarterly report", None, None],
        ["Prepared by", "Finance", None],
        [None, None, None],
        ["Region", "Q1", "Q2"],
        ["North", 100, 200],
        ["South", 150, 250],
        ["Total", 250, 450],
        [None, None, None],
        ["Notes: figures unaudited", None, None],
        ["", "   ", None],
        ["Item", "Cost", "Owner"],
        ["Rent", 1200, "Ops"],
        ["Power", 300, "Ops"],
        ["Travel", 450, "Sales"],
    ]


@pytest.fixture
def report_xlsx(report_rows):
    return build_xlsx({
        "Report": report_rows,
        "Cover": [["Generated", "2024-01-01"]],
    })


@pytest.fixture
def merge_xlsx():
    return build_xlsx({
        "Cairo": [
            ["Name", "Unit Price", "Area"],
            ["Villa A", 1000, 250],
            [None, None, None],
            ["Villa B", 1200, 300],
        ],
        "Giza": [
            ["name ", " Unit  Price", "Floor"],
            ["Flat 1", 500, 3],
            ["Flat 2", 650, 7],
        ],
    })


@pytest.fixture
def reference_csv():
    return (
        'project_id,"Project Name",developer_id,"Developer Name",is_super,fake,not_launched\n'
        'p-1,"Palm Hills",d-1,"Palm Developments",TRUE,FALSE,false\n'
        'p-2,"Nile Towers",d-2,"Nile Group",false,true,FALSE\n'
        'p-3,"Palm Views",d-1,"Palm Developments",,,TRUE\n'
    )
