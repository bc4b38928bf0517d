from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import format_local_date, format_local_time, to_local
from ..core.enums import ScanResult


@dataclass(frozen=True)
class PatrolLog:
    """Domain entity: the persisted outcome of one scan attempt (immutable)."""

    log_id: int
    scanned_at: datetime  # UTC
    user_id: Optional[int]
    username: str
    guard_name: str
    checkpoint_id: Optional[int]
    barcode_value: str
    scan_lat: float
    scan_lng: float
    distance_meters: Optional[float]
    result: ScanResult
    notes: Optional[str] = None
    checkpoint_name: Optional[str] = None

    @property
    def accepted(self) -> bool:
        return self.result == ScanResult.ACCEPTED

    def to_dict(self, *, utc_offset_hours: Optional[int] = None) -> dict:
        out = {
            "LogId": self.log_id,
            "Timestamp": self.scanned_at.isoformat(),
            "UserId": self.user_id,
            "Username": self.username,
            "GuardName": self.guard_name,
            "CheckpointId": self.checkpoint_id,
            "CheckpointName": self.checkpoint_name,
            "BarcodeValue": self.barcode_value,
            "ScanLat": self.scan_lat,
            "ScanLng": self.scan_lng,
            "DistanceMeters": self.distance_meters,
            "Result": self.result.value,
            "Notes": self.notes,
        }
        if utc_offset_hours is not None:
            local = to_local(self.scanned_at, utc_offset_hours)
            out["LocalDate"] = format_local_date(local)
            out["LocalTime"] = format_local_time(local)
        return out
