"""Geofence evaluation for checkpoint scans.

Pure functions, no I/O: the caller resolves the scan token to an active
checkpoint beforehand and persists the outcome afterwards.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

from ..checkpoints.model import Checkpoint
from ..core.constants import DEFAULT_RADIUS_METERS, EARTH_RADIUS_METERS


@dataclass(frozen=True)
class GeofenceDecision:
    accepted: bool
    distance_meters: Optional[float]
    radius_meters: float
    reason: Optional[str] = None

    @property
    def location_checked(self) -> bool:
        return self.distance_meters is not None


def haversine_meters(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Great-circle distance in meters between two WGS84 points given in degrees."""
    phi1 = math.radians(float(lat1))
    phi2 = math.radians(float(lat2))
    d_phi = math.radians(float(lat2) - float(lat1))
    d_lambda = math.radians(float(lng2) - float(lng1))

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    # Rounding can push a a hair above 1 for antipodal points.
    a = min(max(a, 0.0), 1.0)
    return 2 * EARTH_RADIUS_METERS * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def effective_radius(radius_meters: Optional[float], default: float = DEFAULT_RADIUS_METERS) -> float:
    if radius_meters is None or radius_meters <= 0:
        return float(default)
    return float(radius_meters)


def evaluate(
    scan_lat: float,
    scan_lng: float,
    checkpoint: Checkpoint,
    *,
    default_radius: float = DEFAULT_RADIUS_METERS,
) -> GeofenceDecision:
    """Accept the scan iff it lies within the checkpoint's radius.

    A checkpoint without registered coordinates skips the location check
    and is accepted.
    """
    radius = effective_radius(checkpoint.radius_meters, default_radius)

    if not checkpoint.has_location:
        return GeofenceDecision(accepted=True, distance_meters=None, radius_meters=radius)

    exact = haversine_meters(scan_lat, scan_lng, checkpoint.latitude, checkpoint.longitude)
    distance = round(exact, 2)
    if exact <= radius:
        return GeofenceDecision(accepted=True, distance_meters=distance, radius_meters=radius)

    return GeofenceDecision(
        accepted=False,
        distance_meters=distance,
        radius_meters=radius,
        reason=f"Out of range: {distance:.0f} m from {checkpoint.name} (limit {radius:.0f} m)",
    )
