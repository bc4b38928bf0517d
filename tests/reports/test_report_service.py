from datetime import datetime

import pytest

from src.patrol_system.patrol_system.core.enums import ScanResult, SlotMatchPolicy
from src.patrol_system.patrol_system.core.exceptions import ValidationError
from src.patrol_system.patrol_system.reports.service import ReportService
from src.patrol_system.patrol_system.schedules.service import ScheduleService


class CountingLogs:
    """Wraps a log repository and records every range query."""

    def __init__(self, inner):
        self._inner = inner
        self.calls = []

    def list_between(self, *, start, end):
        self.calls.append((start, end))
        return self._inner.list_between(start=start, end=end)


@pytest.fixture
def report_service(logs_repo, checkpoints_repo, schedules_repo):
    return ReportService(logs_repo, checkpoints_repo, ScheduleService(schedules_repo), utc_offset_hours=7)


@pytest.mark.parametrize(
    "month,year",
    [("0", "2024"), ("13", "2024"), ("abc", "2024"), ("1", "24"), (None, "2024"), ("1", None), ("12", "9999")],
)
def test_invalid_month_or_year_is_rejected_before_any_query(month, year, logs_repo, checkpoints_repo, schedules_repo):
    logs = CountingLogs(logs_repo)
    svc = ReportService(logs, checkpoints_repo, ScheduleService(schedules_repo))

    with pytest.raises(ValidationError):
        svc.coverage_matrix(month, year)
    with pytest.raises(ValidationError):
        svc.monthly_list(month, year)

    assert logs.calls == []


def test_fetch_window_is_local_month_in_utc(logs_repo, checkpoints_repo, schedules_repo):
    logs = CountingLogs(logs_repo)
    svc = ReportService(logs, checkpoints_repo, ScheduleService(schedules_repo), utc_offset_hours=7)

    svc.coverage_matrix("1", "2024")

    assert logs.calls == [(datetime(2023, 12, 31, 17, 0), datetime(2024, 1, 31, 17, 0))]


def test_matrix_uses_all_checkpoints_and_current_schedule(report_service, schedules_repo, add_log):
    add_log(at=datetime(2024, 1, 5, 8, 10), username="budi", checkpoint_id=1)

    matrix = report_service.coverage_matrix(1, 2024)

    assert matrix.checkpoints == ("Gate A", "Lobby", "Warehouse")
    assert matrix.value_at(day=5, slot_hour=15, checkpoint_name="Gate A") == "BUD"
    assert len(matrix.filled_cells()) == 1

    schedules_repo.save(start_hour=0, interval_hours=6)
    matrix = report_service.coverage_matrix(1, 2024)
    assert matrix.slots == (0, 6, 12, 18)
    assert matrix.filled_cells() == []


def test_matrix_excludes_scans_outside_the_local_month(report_service, add_log):
    # 31 Jan 17:30 UTC is already 1 Feb local.
    add_log(at=datetime(2024, 1, 31, 18, 0), username="budi", checkpoint_id=1)

    assert report_service.coverage_matrix(1, 2024).filled_cells() == []
    assert report_service.coverage_matrix(2, 2024).value_at(day=1, slot_hour=1, checkpoint_name="Gate A") == "BUD"


def test_monthly_list_rows_are_local_and_summarised(report_service, add_log):
    add_log(at=datetime(2024, 1, 5, 8, 10), username="budi", checkpoint_id=1)
    add_log(at=datetime(2024, 1, 5, 9, 0), username="budi", checkpoint_id=2, result=ScanResult.REJECTED)
    add_log(at=datetime(2024, 1, 6, 1, 0), username="sari", checkpoint_id=1)

    report = report_service.monthly_list("1", "2024")

    assert [r["date"] for r in report.rows] == ["05/01/2024", "05/01/2024", "06/01/2024"]
    assert report.rows[0]["time"] == "15:10:00"
    assert report.rows[0]["checkpoint"] == "Gate A"
    assert report.rows[1]["result"] == "REJECTED"
    assert report.summary[0] == {"username": "budi", "guard": "Budi", "accepted": 1, "rejected": 1}
    assert report.to_dict()["month"] == 1


def test_last_supported_month_builds(report_service):
    matrix = report_service.coverage_matrix("11", "9999")

    assert len(matrix.days) == 30


def test_window_policy_reads_after_midnight_scans_past_month_end(logs_repo, checkpoints_repo, schedules_repo, add_log):
    # Slots 7, 9, ..., 23; 1 Feb 00:30 local still belongs to the 31 Jan 23:00 slot.
    add_log(at=datetime(2024, 1, 31, 17, 30), username="budi", checkpoint_id=1)
    logs = CountingLogs(logs_repo)
    svc = ReportService(
        logs, checkpoints_repo, ScheduleService(schedules_repo), utc_offset_hours=7, policy=SlotMatchPolicy.WINDOW
    )

    matrix = svc.coverage_matrix(1, 2024)

    assert logs.calls == [(datetime(2023, 12, 31, 17, 0), datetime(2024, 1, 31, 19, 0))]
    assert matrix.value_at(day=31, slot_hour=23, checkpoint_name="Gate A") == "BUD"
    assert len(matrix.filled_cells()) == 1


def test_window_policy_ignores_next_month_scans_in_their_own_slots(checkpoints_repo, schedules_repo, logs_repo, add_log):
    # 1 Feb 01:30 local is read with the spill but covers the 1 Feb 01:00 slot.
    add_log(at=datetime(2024, 1, 31, 18, 30), username="budi", checkpoint_id=1)
    svc = ReportService(logs_repo, checkpoints_repo, ScheduleService(schedules_repo), policy="window")

    assert svc.coverage_matrix(1, 2024).filled_cells() == []


def test_exact_hour_policy_keeps_the_plain_month_range(report_service, add_log):
    add_log(at=datetime(2024, 1, 31, 17, 30), username="budi", checkpoint_id=1)

    assert report_service.coverage_matrix(1, 2024).filled_cells() == []
    assert report_service.monthly_list(1, 2024).rows == []
