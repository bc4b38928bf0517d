from __future__ import annotations

from typing import Optional, Protocol

from .model import CoverageSchedule


class ScheduleRepository(Protocol):
    def get(self) -> Optional[CoverageSchedule]:
        """The single global schedule row, if seeded."""

        raise NotImplementedError

    def save(self, *, start_hour: int, interval_hours: int) -> None:
        """Create or replace the global schedule."""

        raise NotImplementedError
