from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional, Sequence

from ..checkpoints.service import CheckpointService
from ..common.datetime_utils import as_naive_utc, local_month_utc_range, subtract_months, utc_now
from ..common.validators import parse_float, parse_month_year, require_between
from ..core.constants import DEFAULT_LOG_RETENTION_MONTHS, DEFAULT_RADIUS_METERS, DEFAULT_UTC_OFFSET_HOURS
from ..core.enums import ScanResult
from ..core.exceptions import NotFoundError
from ..geofence.evaluator import GeofenceDecision, evaluate
from ..users.service import UserService
from .model import PatrolLog
from .repository import PatrolLogRepository

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScanOutcome:
    record: PatrolLog
    decision: GeofenceDecision

    @property
    def accepted(self) -> bool:
        return self.decision.accepted

    @property
    def message(self) -> str:
        if self.decision.accepted:
            return f"Scan accepted at {self.record.checkpoint_name}"
        return self.decision.reason or "Scan rejected"


class PatrolService:
    """Use cases around attendance records: scan, browse, delete, purge."""

    def __init__(
        self,
        logs: PatrolLogRepository,
        checkpoints: CheckpointService,
        users: UserService,
        *,
        default_radius: float = DEFAULT_RADIUS_METERS,
        retention_months: int = DEFAULT_LOG_RETENTION_MONTHS,
        utc_offset_hours: int = DEFAULT_UTC_OFFSET_HOURS,
    ):
        self._logs = logs
        self._checkpoints = checkpoints
        self._users = users
        self._default_radius = float(default_radius)
        self._retention_months = int(retention_months)
        self._utc_offset_hours = int(utc_offset_hours)

    @property
    def utc_offset_hours(self) -> int:
        return self._utc_offset_hours

    def scan(
        self,
        *,
        user_id: int,
        barcode_value: str,
        lat: Any,
        lng: Any,
        note: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> ScanOutcome:
        """Validate one scan against its checkpoint's geofence and persist the outcome.

        Unknown/inactive tokens raise NotFoundError and persist nothing. Both
        accepted and geofence-rejected attempts are stored.
        """
        scan_lat = require_between(parse_float(lat, "Latitude"), "Latitude", -90, 90)
        scan_lng = require_between(parse_float(lng, "Longitude"), "Longitude", -180, 180)

        guard = self._users.get_active_guard(user_id)
        checkpoint = self._checkpoints.resolve_for_scan(barcode_value)

        decision = evaluate(scan_lat, scan_lng, checkpoint, default_radius=self._default_radius)
        result = ScanResult.ACCEPTED if decision.accepted else ScanResult.REJECTED
        scanned_at = as_naive_utc(now) if now else utc_now()
        notes = str(note or "").strip() or None

        log_id = self._logs.create(
            scanned_at=scanned_at,
            user_id=guard.user_id,
            username=guard.username,
            guard_name=guard.name,
            checkpoint_id=checkpoint.checkpoint_id,
            barcode_value=checkpoint.barcode_value,
            scan_lat=scan_lat,
            scan_lng=scan_lng,
            distance_meters=decision.distance_meters,
            result=result,
            notes=notes,
        )

        record = PatrolLog(
            log_id=log_id,
            scanned_at=scanned_at,
            user_id=guard.user_id,
            username=guard.username,
            guard_name=guard.name,
            checkpoint_id=checkpoint.checkpoint_id,
            barcode_value=checkpoint.barcode_value,
            scan_lat=scan_lat,
            scan_lng=scan_lng,
            distance_meters=decision.distance_meters,
            result=result,
            notes=notes,
            checkpoint_name=checkpoint.name,
        )

        log.info(
            "Scan %s: guard=%s checkpoint=%s distance=%s radius=%s",
            result.value,
            guard.username,
            checkpoint.name,
            decision.distance_meters,
            decision.radius_meters,
        )
        return ScanOutcome(record=record, decision=decision)

    def list_for_month(self, month: Any, year: Any) -> Sequence[PatrolLog]:
        m, y = parse_month_year(month, year)
        start, end = local_month_utc_range(y, m, self._utc_offset_hours)
        return self._logs.list_between(start=start, end=end)

    def delete(self, log_id: int) -> None:
        if not self._logs.delete_by_id(int(log_id)):
            raise NotFoundError("Attendance record not found")
        log.info("Deleted attendance record id=%s", log_id)

    def retention_cutoff(self, now: Optional[datetime] = None) -> datetime:
        return subtract_months(as_naive_utc(now) if now else utc_now(), self._retention_months)

    def purge_expired(self, *, now: Optional[datetime] = None) -> int:
        """Delete records older than the retention window."""
        cutoff = self.retention_cutoff(now)
        removed = self._logs.delete_older_than(cutoff)
        log.info("Purged %d attendance records older than %s", removed, cutoff.isoformat())
        return removed
