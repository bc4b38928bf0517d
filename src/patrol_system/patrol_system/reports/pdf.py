"""PDF rendering of the monthly reports (reportlab, landscape A4)."""
from __future__ import annotations

import io

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from .matrix import CoverageMatrix, rows_by_slot
from .service import MonthlyReport

_HEADER_BG = colors.HexColor("#1f3b5c")


def _document(buffer: io.BytesIO, title: str) -> SimpleDocTemplate:
    return SimpleDocTemplate(
        buffer,
        pagesize=landscape(A4),
        leftMargin=10 * mm,
        rightMargin=10 * mm,
        topMargin=10 * mm,
        bottomMargin=10 * mm,
        title=title,
    )


def _base_style(font_size: float) -> list:
    return [
        ("BACKGROUND", (0, 0), (-1, 0), _HEADER_BG),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, -1), font_size),
        ("GRID", (0, 0), (-1, -1), 0.25, colors.grey),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
    ]


def render_monthly_pdf(report: MonthlyReport) -> bytes:
    buffer = io.BytesIO()
    title = f"Patrol report {report.month:02d}/{report.year}"
    doc = _document(buffer, title)
    styles = getSampleStyleSheet()

    data = [["Date", "Time", "Checkpoint", "Guard", "Result", "Distance (m)", "Note"]]
    for row in report.rows:
        distance = row.get("distance")
        data.append(
            [
                row["date"],
                row["time"],
                row["checkpoint"],
                row["guard"],
                row["result"],
                "-" if distance is None else f"{distance:.0f}",
                row["note"],
            ]
        )

    table = Table(data, repeatRows=1)
    style = _base_style(8)
    for i, row in enumerate(report.rows, start=1):
        if row["result"] != "ACCEPTED":
            style.append(("TEXTCOLOR", (4, i), (4, i), colors.red))
    table.setStyle(TableStyle(style))

    story = [Paragraph(title, styles["Title"]), Spacer(1, 4 * mm)]
    if report.rows:
        story.append(table)
    else:
        story.append(Paragraph("No records for this month.", styles["Normal"]))
    doc.build(story)
    return buffer.getvalue()


def render_matrix_pdf(matrix: CoverageMatrix) -> bytes:
    buffer = io.BytesIO()
    title = f"Coverage matrix {matrix.month:02d}/{matrix.year}"
    doc = _document(buffer, title)
    styles = getSampleStyleSheet()

    header = ["Slot", "Checkpoint"] + [str(d.day) for d in matrix.days]
    data = [header]
    for slot, checkpoint, values in rows_by_slot(matrix):
        data.append([slot, checkpoint] + values)

    day_width = (doc.width - 38 * mm) / max(len(matrix.days), 1)
    table = Table(data, colWidths=[12 * mm, 26 * mm] + [day_width] * len(matrix.days), repeatRows=1)
    style = _base_style(6)
    style.append(("ALIGN", (2, 0), (-1, -1), "CENTER"))
    table.setStyle(TableStyle(style))

    story = [Paragraph(title, styles["Title"]), Spacer(1, 4 * mm)]
    if len(data) > 1:
        story.append(table)
    else:
        story.append(Paragraph("No checkpoints configured.", styles["Normal"]))
    doc.build(story)
    return buffer.getvalue()
