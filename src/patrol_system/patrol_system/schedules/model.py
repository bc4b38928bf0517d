from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class CoverageSchedule:
    """How a day is split into patrol slots: first slot hour + hours between slots."""

    start_hour: int
    interval_hours: int
    updated_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {"startHour": self.start_hour, "intervalHours": self.interval_hours}
