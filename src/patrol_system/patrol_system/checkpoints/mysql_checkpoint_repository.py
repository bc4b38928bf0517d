from __future__ import annotations

from typing import Optional, Sequence

from mysql.connector import errors as mysql_errors

from ..core.exceptions import ConflictError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, to_float
from .model import Checkpoint
from .repository import CheckpointRepository

_COLUMNS = "checkpoint_id, name, barcode_value, latitude, longitude, radius_meters, active, created_at, updated_at"


def _to_checkpoint(r: dict) -> Checkpoint:
    return Checkpoint(
        checkpoint_id=int(r["checkpoint_id"]),
        name=r["name"],
        barcode_value=r["barcode_value"],
        latitude=to_float(r.get("latitude")),
        longitude=to_float(r.get("longitude")),
        radius_meters=to_float(r.get("radius_meters")),
        active=bool(r.get("active", True)),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLCheckpointRepository(CheckpointRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[Checkpoint]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM checkpoints ORDER BY name ASC")
            return [_to_checkpoint(r) for r in fetchall(cur)]

    def get_by_id(self, checkpoint_id: int) -> Optional[Checkpoint]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM checkpoints WHERE checkpoint_id=%s", (int(checkpoint_id),))
            r = fetchone(cur)
            return _to_checkpoint(r) if r else None

    def get_by_barcode(self, barcode_value: str) -> Optional[Checkpoint]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM checkpoints WHERE barcode_value=%s", (barcode_value,))
            r = fetchone(cur)
            return _to_checkpoint(r) if r else None

    def create(
        self,
        *,
        name: str,
        barcode_value: str,
        latitude: Optional[float],
        longitude: Optional[float],
        radius_meters: float,
        active: bool = True,
    ) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO checkpoints(name, barcode_value, latitude, longitude, radius_meters, active)
                    VALUES(%s,%s,%s,%s,%s,%s)
                    """,
                    (name, barcode_value, latitude, longitude, radius_meters, int(bool(active))),
                )
                return int(cur.lastrowid)
        except mysql_errors.IntegrityError:
            raise ConflictError("Scan token already used by another checkpoint")

    def update(
        self,
        *,
        checkpoint_id: int,
        name: str,
        barcode_value: str,
        latitude: Optional[float],
        longitude: Optional[float],
        radius_meters: float,
        active: bool,
    ) -> bool:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    UPDATE checkpoints
                    SET name=%s, barcode_value=%s, latitude=%s, longitude=%s, radius_meters=%s, active=%s
                    WHERE checkpoint_id=%s
                    """,
                    (name, barcode_value, latitude, longitude, radius_meters, int(bool(active)), int(checkpoint_id)),
                )
                return cur.rowcount > 0
        except mysql_errors.IntegrityError:
            raise ConflictError("Scan token already used by another checkpoint")

    def delete_by_id(self, checkpoint_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM checkpoints WHERE checkpoint_id=%s", (int(checkpoint_id),))
            return cur.rowcount > 0
