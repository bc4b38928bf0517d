"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

EARTH_RADIUS_METERS = 6371000.0
DEFAULT_RADIUS_METERS = 50.0

DEFAULT_UTC_OFFSET_HOURS = 7
DEFAULT_LOG_RETENTION_MONTHS = 3
DEFAULT_TOKEN_HOURS = 12

DEFAULT_SCHEDULE_START_HOUR = 7
DEFAULT_SCHEDULE_INTERVAL_HOURS = 2

INITIALS_LENGTH = 3
MIN_PASSWORD_LENGTH = 6

# The seeded super admin; it can never be deleted or deactivated.
BUILTIN_ADMIN_USERNAME = "admin"
