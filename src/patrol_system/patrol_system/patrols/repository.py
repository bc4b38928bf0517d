from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import ScanResult
from .model import PatrolLog


class PatrolLogRepository(Protocol):
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
        """Insert one record atomically. Returns log_id."""

        raise NotImplementedError

    def get_by_id(self, log_id: int) -> Optional[PatrolLog]:
        raise NotImplementedError

    def list_between(self, *, start: datetime, end: datetime) -> Sequence[PatrolLog]:
        """Records with start <= scanned_at < end (UTC), oldest first."""

        raise NotImplementedError

    def delete_by_id(self, log_id: int) -> bool:
        raise NotImplementedError

    def delete_older_than(self, cutoff: datetime) -> int:
        """Delete records with scanned_at < cutoff. Returns the number removed."""

        raise NotImplementedError
