from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import ScanResult
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, to_float
from .model import PatrolLog
from .repository import PatrolLogRepository

_SELECT = """
    SELECT
        l.log_id, l.scanned_at, l.user_id, l.username, l.guard_name,
        l.checkpoint_id, c.name AS checkpoint_name, l.barcode_value,
        l.scan_lat, l.scan_lng, l.distance_meters, l.result, l.notes
    FROM patrol_logs l
    LEFT JOIN checkpoints c ON c.checkpoint_id = l.checkpoint_id
"""


def _to_log(r: dict) -> PatrolLog:
    return PatrolLog(
        log_id=int(r["log_id"]),
        scanned_at=r["scanned_at"],
        user_id=int(r["user_id"]) if r.get("user_id") is not None else None,
        username=r["username"],
        guard_name=r["guard_name"],
        checkpoint_id=int(r["checkpoint_id"]) if r.get("checkpoint_id") is not None else None,
        barcode_value=r["barcode_value"],
        scan_lat=to_float(r["scan_lat"]),
        scan_lng=to_float(r["scan_lng"]),
        distance_meters=to_float(r.get("distance_meters")),
        result=ScanResult(r["result"]),
        notes=r.get("notes"),
        checkpoint_name=r.get("checkpoint_name"),
    )


class MySQLPatrolLogRepository(PatrolLogRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        scanned_at: datetime,
        user_id: Optional[int],
        username: str,
        guard_name: str,
        checkpoint_id: Optional[int],
        barcode_value: str,
        scan_lat: float,
        scan_lng: float,
        distance_meters: Optional[float],
        result: ScanResult,
        notes: Optional[str] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO patrol_logs(
                    scanned_at, user_id, username, guard_name, checkpoint_id, barcode_value,
                    scan_lat, scan_lng, distance_meters, result, notes
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    scanned_at,
                    user_id,
                    username,
                    guard_name,
                    checkpoint_id,
                    barcode_value,
                    scan_lat,
                    scan_lng,
                    distance_meters,
                    result.value,
                    notes,
                ),
            )
            return int(cur.lastrowid)

    def get_by_id(self, log_id: int) -> Optional[PatrolLog]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE l.log_id=%s", (int(log_id),))
            r = fetchone(cur)
            return _to_log(r) if r else None

    def list_between(self, *, start: datetime, end: datetime) -> Sequence[PatrolLog]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + " WHERE l.scanned_at >= %s AND l.scanned_at < %s ORDER BY l.scanned_at ASC, l.log_id ASC",
                (start, end),
            )
            return [_to_log(r) for r in fetchall(cur)]

    def delete_by_id(self, log_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM patrol_logs WHERE log_id=%s", (int(log_id),))
            return cur.rowcount > 0

    def delete_older_than(self, cutoff: datetime) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM patrol_logs WHERE scanned_at < %s", (cutoff,))
            return int(cur.rowcount or 0)
