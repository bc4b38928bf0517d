from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Checkpoint:
    """Domain entity: a physical location guards scan at."""

    checkpoint_id: int
    name: str
    barcode_value: str
    latitude: Optional[float]
    longitude: Optional[float]
    radius_meters: Optional[float] = None
    active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def has_location(self) -> bool:
        return self.latitude is not None and self.longitude is not None

    def to_dict(self) -> dict:
        return {
            "CheckpointId": self.checkpoint_id,
            "Name": self.name,
            "BarcodeValue": self.barcode_value,
            "Latitude": self.latitude,
            "Longitude": self.longitude,
            "RadiusMeters": self.radius_meters,
            "Active": self.active,
        }
