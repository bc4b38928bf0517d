from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from typing import Optional, Sequence

import qrcode

from ..common.validators import parse_optional_float, require_between, require_non_empty
from ..core.constants import DEFAULT_RADIUS_METERS
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from .model import Checkpoint
from .repository import CheckpointRepository

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class CheckpointInput:
    """Validated checkpoint fields ready for persistence."""

    name: str
    barcode_value: str
    latitude: Optional[float]
    longitude: Optional[float]
    radius_meters: float
    active: bool


class CheckpointService:
    def __init__(self, checkpoints: CheckpointRepository, *, default_radius: float = DEFAULT_RADIUS_METERS):
        self._checkpoints = checkpoints
        self._default_radius = float(default_radius)

    def list_checkpoints(self) -> Sequence[Checkpoint]:
        return self._checkpoints.list_all()

    def get(self, checkpoint_id: int) -> Checkpoint:
        cp = self._checkpoints.get_by_id(int(checkpoint_id))
        if not cp:
            raise NotFoundError("Checkpoint not found")
        return cp

    def resolve_for_scan(self, barcode_value: str) -> Checkpoint:
        """Map a scanned token to an active checkpoint; unknown and inactive are both not-found."""
        token = str(barcode_value or "").strip()
        if not token:
            raise ValidationError("Scan token is required")
        cp = self._checkpoints.get_by_barcode(token)
        if not cp or not cp.active:
            raise NotFoundError("Checkpoint not found or inactive")
        return cp

    def validate(
        self,
        *,
        name: Optional[str],
        barcode_value: Optional[str],
        latitude: object = None,
        longitude: object = None,
        radius_meters: object = None,
        active: bool = True,
    ) -> CheckpointInput:
        name = require_non_empty(name, "Name")
        barcode_value = require_non_empty(barcode_value, "Scan token")

        lat = parse_optional_float(latitude, "Latitude")
        lng = parse_optional_float(longitude, "Longitude")
        if (lat is None) != (lng is None):
            raise ValidationError("Latitude and longitude must be given together")
        if lat is not None:
            require_between(lat, "Latitude", -90, 90)
            require_between(lng, "Longitude", -180, 180)

        radius = parse_optional_float(radius_meters, "Radius")
        if radius is None:
            radius = self._default_radius
        if radius <= 0:
            raise ValidationError("Radius must be greater than 0")

        return CheckpointInput(
            name=name,
            barcode_value=barcode_value,
            latitude=lat,
            longitude=lng,
            radius_meters=radius,
            active=bool(active),
        )

    def create(self, **fields) -> Checkpoint:
        data = self.validate(**fields)
        if self._checkpoints.get_by_barcode(data.barcode_value):
            raise ConflictError("Scan token already used by another checkpoint")

        checkpoint_id = self._checkpoints.create(
            name=data.name,
            barcode_value=data.barcode_value,
            latitude=data.latitude,
            longitude=data.longitude,
            radius_meters=data.radius_meters,
            active=data.active,
        )
        log.info("Created checkpoint '%s' (id=%s)", data.name, checkpoint_id)
        return self.get(checkpoint_id)

    def update(self, checkpoint_id: int, **fields) -> Checkpoint:
        current = self.get(checkpoint_id)
        merged = {
            "name": current.name,
            "barcode_value": current.barcode_value,
            "latitude": current.latitude,
            "longitude": current.longitude,
            "radius_meters": current.radius_meters,
            "active": current.active,
        }
        merged.update({k: v for k, v in fields.items() if k in merged})
        data = self.validate(**merged)

        other = self._checkpoints.get_by_barcode(data.barcode_value)
        if other and other.checkpoint_id != current.checkpoint_id:
            raise ConflictError("Scan token already used by another checkpoint")

        self._checkpoints.update(
            checkpoint_id=current.checkpoint_id,
            name=data.name,
            barcode_value=data.barcode_value,
            latitude=data.latitude,
            longitude=data.longitude,
            radius_meters=data.radius_meters,
            active=data.active,
        )
        log.info("Updated checkpoint id=%s", current.checkpoint_id)
        return self.get(current.checkpoint_id)

    def delete(self, checkpoint_id: int) -> None:
        cp = self.get(checkpoint_id)
        if not self._checkpoints.delete_by_id(cp.checkpoint_id):
            raise NotFoundError("Checkpoint not found")
        log.info("Deleted checkpoint '%s' (id=%s)", cp.name, cp.checkpoint_id)

    def qr_png(self, checkpoint_id: int) -> bytes:
        """PNG QR code of the checkpoint's scan token, for printing."""
        cp = self.get(checkpoint_id)

        qr = qrcode.QRCode(
            version=1,
            error_correction=qrcode.constants.ERROR_CORRECT_M,
            box_size=10,
            border=2,
        )
        qr.add_data(cp.barcode_value)
        qr.make(fit=True)
        img = qr.make_image(fill_color="black", back_color="white")

        buf = io.BytesIO()
        img.save(buf, format="PNG")
        return buf.getvalue()
