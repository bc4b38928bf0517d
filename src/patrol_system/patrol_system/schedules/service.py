from __future__ import annotations

import logging
from typing import Any

from ..common.validators import parse_int
from ..core.constants import DEFAULT_SCHEDULE_INTERVAL_HOURS, DEFAULT_SCHEDULE_START_HOUR
from ..core.exceptions import ValidationError
from .model import CoverageSchedule
from .repository import ScheduleRepository

log = logging.getLogger(__name__)


class ScheduleService:
    def __init__(self, schedules: ScheduleRepository):
        self._schedules = schedules

    def get_schedule(self) -> CoverageSchedule:
        """Read fresh on every call; falls back to defaults if the row was never seeded."""
        schedule = self._schedules.get()
        if schedule is None:
            return CoverageSchedule(
                start_hour=DEFAULT_SCHEDULE_START_HOUR,
                interval_hours=DEFAULT_SCHEDULE_INTERVAL_HOURS,
            )
        return schedule

    def update(self, *, start_hour: Any, interval_hours: Any) -> CoverageSchedule:
        start = parse_int(start_hour, "startHour")
        interval = parse_int(interval_hours, "intervalHours")
        if not 0 <= start <= 23:
            raise ValidationError("startHour must be between 0 and 23")
        if not 1 <= interval <= 24:
            raise ValidationError("intervalHours must be between 1 and 24")

        self._schedules.save(start_hour=start, interval_hours=interval)
        log.info("Coverage schedule set to start=%02d:00 interval=%dh", start, interval)
        return self.get_schedule()
