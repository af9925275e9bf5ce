from __future__ import annotations

from datetime import date, datetime
from io import BytesIO

import pandas as pd

from src.class_attendance.class_attendance.reports.model import MonthlyReport, StudentSummary
from src.class_attendance.class_attendance.reports.renderer import COLUMNS, render_pdf, render_xlsx, table_rows


def _report():
    rows = [
        StudentSummary("REG001", "Anu", "CSE", "CS-A", 3, 2, 1, 67),
        StudentSummary("REG002", "Bala", "N/A", "CS-A", 3, 1, 2, 33),
    ]
    return MonthlyReport(
        month=3,
        year=2025,
        start=date(2025, 3, 1),
        end=date(2025, 3, 31),
        total_working_days=3,
        generated_at=datetime(2025, 3, 31, 17, 0),
        rows=rows,
    )


def test_table_rows_format_percentage():
    assert table_rows(_report())[0] == ["REG001", "Anu", "CSE", "CS-A", 3, 2, 1, "67%"]


def test_render_pdf_produces_pdf_bytes():
    payload = render_pdf(_report())

    assert payload.startswith(b"%PDF")


def test_render_xlsx_round_trips_through_pandas():
    payload = render_xlsx(_report())

    df = pd.read_excel(BytesIO(payload), engine="openpyxl")
    assert list(df.columns) == COLUMNS
    assert df["Name"].tolist() == ["Anu", "Bala"]
