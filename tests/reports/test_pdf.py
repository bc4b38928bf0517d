from datetime import datetime

from src.patrol_system.patrol_system.checkpoints.model import Checkpoint
from src.patrol_system.patrol_system.reports.matrix import build_matrix
from src.patrol_system.patrol_system.reports.pdf import render_matrix_pdf, render_monthly_pdf
from src.patrol_system.patrol_system.reports.service import MonthlyReport
from src.patrol_system.patrol_system.schedules.model import CoverageSchedule


def test_matrix_pdf_is_a_pdf_document():
    gate = Checkpoint(checkpoint_id=1, name="Gate A", barcode_value="A", latitude=None, longitude=None)
    matrix = build_matrix(1, 2024, CoverageSchedule(start_hour=7, interval_hours=2), [gate], [])

    content = render_matrix_pdf(matrix)

    assert content.startswith(b"%PDF")


def test_monthly_pdf_handles_empty_and_filled_reports():
    empty = MonthlyReport(month=2, year=2024, rows=[], summary=[])
    filled = MonthlyReport(
        month=2,
        year=2024,
        rows=[
            {
                "date": "01/02/2024",
                "time": datetime(2024, 2, 1, 7, 5).strftime("%H:%M:%S"),
                "checkpoint": "Gate A",
                "guard": "Budi",
                "username": "budi",
                "result": "REJECTED",
                "distance": 120.4,
                "note": "",
            }
        ],
        summary=[],
    )

    assert render_monthly_pdf(empty).startswith(b"%PDF")
    assert render_monthly_pdf(filled).startswith(b"%PDF")
