from __future__ import annotations

from enum import Enum


class ScanResult(str, Enum):
    """Outcome of one scan attempt stored on the attendance record."""

    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"


class SlotMatchPolicy(str, Enum):
    """How an attendance record is matched to a coverage slot.

    EXACT_HOUR: the record's local hour equals the slot start hour.
    WINDOW: the record's local time falls in [slot start, slot start + interval).
    """

    EXACT_HOUR = "exact_hour"
    WINDOW = "window"


class Permission(str, Enum):
    SCAN_CREATE = "scan.create"
    LOGS_READ = "logs.read"
    LOGS_DELETE = "logs.delete"
    CHECKPOINTS_READ = "checkpoints.read"
    CHECKPOINTS_WRITE = "checkpoints.write"
    USERS_READ = "users.read"
    USERS_WRITE = "users.write"
    ROLES_READ = "roles.read"
    REPORTS_READ = "reports.read"
    SETTINGS_READ = "settings.read"
    SETTINGS_WRITE = "settings.write"
