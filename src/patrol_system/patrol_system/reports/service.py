from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import Any

from ..checkpoints.repository import CheckpointRepository
from ..common.datetime_utils import format_local_date, format_local_time, local_month_utc_range, to_local
from ..common.validators import parse_month_year
from ..core.constants import DEFAULT_UTC_OFFSET_HOURS
from ..core.enums import SlotMatchPolicy
from ..patrols.repository import PatrolLogRepository
from ..schedules.service import ScheduleService
from .matrix import CoverageMatrix, build_matrix

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class MonthlyReport:
    month: int
    year: int
    rows: list[dict]
    summary: list[dict]

    def to_dict(self) -> dict:
        return {"month": self.month, "year": self.year, "rows": self.rows, "summary": self.summary}


class ReportService:
    """Read-only reports over one local calendar month of attendance records."""

    def __init__(
        self,
        logs: PatrolLogRepository,
        checkpoints: CheckpointRepository,
        schedules: ScheduleService,
        *,
        utc_offset_hours: int = DEFAULT_UTC_OFFSET_HOURS,
        policy: SlotMatchPolicy | str = SlotMatchPolicy.EXACT_HOUR,
    ):
        self._logs = logs
        self._checkpoints = checkpoints
        self._schedules = schedules
        self._utc_offset_hours = int(utc_offset_hours)
        self._policy = SlotMatchPolicy(policy)

    def _month_records(self, month: int, year: int, *, spill_hours: int = 0):
        """Records of the local month; spill_hours reads past its end for slots crossing midnight."""
        start, end = local_month_utc_range(year, month, self._utc_offset_hours)
        return self._logs.list_between(start=start, end=end + timedelta(hours=spill_hours))

    def monthly_list(self, month: Any, year: Any) -> MonthlyReport:
        m, y = parse_month_year(month, year)
        records = self._month_records(m, y)

        rows: list[dict] = []
        summary_map: dict[str, dict] = {}
        for r in records:
            local = to_local(r.scanned_at, self._utc_offset_hours)
            rows.append(
                {
                    "date": format_local_date(local),
                    "time": format_local_time(local),
                    "checkpoint": r.checkpoint_name or r.barcode_value,
                    "guard": r.guard_name,
                    "username": r.username,
                    "result": r.result.value,
                    "distance": r.distance_meters,
                    "note": r.notes or "",
                }
            )

            s = summary_map.get(r.username)
            if not s:
                s = {"username": r.username, "guard": r.guard_name, "accepted": 0, "rejected": 0}
                summary_map[r.username] = s
            s["accepted" if r.accepted else "rejected"] += 1

        summary = sorted(summary_map.values(), key=lambda x: (-x["accepted"], x["username"]))
        return MonthlyReport(month=m, year=y, rows=rows, summary=summary)

    def coverage_matrix(self, month: Any, year: Any) -> CoverageMatrix:
        m, y = parse_month_year(month, year)
        # Schedule is read on every request so settings changes apply immediately.
        schedule = self._schedules.get_schedule()
        checkpoints = self._checkpoints.list_all()
        spill = max(1, int(schedule.interval_hours)) if self._policy == SlotMatchPolicy.WINDOW else 0
        records = self._month_records(m, y, spill_hours=spill)

        matrix = build_matrix(
            m,
            y,
            schedule,
            checkpoints,
            records,
            utc_offset_hours=self._utc_offset_hours,
            policy=self._policy,
        )
        log.debug(
            "Coverage matrix %02d/%d: %d slots, %d checkpoints, %d filled cells",
            m, y, len(matrix.slots), len(matrix.checkpoints), len(matrix.filled_cells()),
        )
        return matrix
