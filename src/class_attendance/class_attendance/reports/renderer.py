from __future__ import annotations

from io import BytesIO

import pandas as pd
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from .model import MonthlyReport

COLUMNS = [
    "Reg. Number",
    "Name",
    "Department",
    "Class",
    "Working Days",
    "Present",
    "Absent",
    "Attendance %",
]

HEADER_BLUE = colors.Color(66 / 255, 139 / 255, 202 / 255)


def table_rows(report: MonthlyReport) -> list[list]:
    return [
        [
            r.register_number,
            r.name,
            r.department,
            r.class_name,
            r.total_working_days,
            r.present_count,
            r.absent_count,
            f"{r.attendance_percentage}%",
        ]
        for r in report.rows
    ]


def render_pdf(report: MonthlyReport) -> bytes:
    buffer = BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        leftMargin=24,
        rightMargin=24,
        topMargin=24,
        bottomMargin=24,
        title=report.title,
    )
    styles = getSampleStyleSheet()

    elements = [
        Paragraph(report.title, styles["Title"]),
        Paragraph(f"Total Working Days: {report.total_working_days}", styles["Normal"]),
        Paragraph(f"Report Generated: {report.generated_at.strftime('%Y-%m-%d')}", styles["Normal"]),
        Spacer(1, 12),
    ]

    table_data = [COLUMNS] + [[str(cell) for cell in row] for row in table_rows(report)]
    table = Table(table_data, repeatRows=1)
    table.setStyle(TableStyle([
        ("BACKGROUND", (0, 0), (-1, 0), HEADER_BLUE),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
        ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, -1), 8),
        ("ALIGN", (4, 1), (-1, -1), "CENTER"),
    ]))
    elements.append(table)

    doc.build(elements)
    return buffer.getvalue()


def render_xlsx(report: MonthlyReport) -> bytes:
    df = pd.DataFrame(table_rows(report), columns=COLUMNS)
    out = BytesIO()
    with pd.ExcelWriter(out, engine="openpyxl") as writer:
        df.to_excel(writer, index=False, sheet_name=f"{report.month_name} {report.year}")
    return out.getvalue()
