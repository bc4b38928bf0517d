from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import CoverageSchedule
from .repository import ScheduleRepository

_SCHEDULE_ID = 1


class MySQLScheduleRepository(ScheduleRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self) -> Optional[CoverageSchedule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT start_hour, interval_hours, updated_at FROM coverage_schedule WHERE schedule_id=%s",
                (_SCHEDULE_ID,),
            )
            r = fetchone(cur)
            if not r:
                return None
            return CoverageSchedule(
                start_hour=int(r["start_hour"]),
                interval_hours=int(r["interval_hours"]),
                updated_at=r.get("updated_at"),
            )

    def save(self, *, start_hour: int, interval_hours: int) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO coverage_schedule(schedule_id, start_hour, interval_hours)
                VALUES(%s,%s,%s)
                ON DUPLICATE KEY UPDATE start_hour=VALUES(start_hour), interval_hours=VALUES(interval_hours)
                """,
                (_SCHEDULE_ID, int(start_hour), int(interval_hours)),
            )
