"""Delete attendance records older than LOG_RETENTION_MONTHS.

Meant for a daily cron job; the same purge is available as POST /api/logs/purge.
"""

from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.patrol_system.patrol_system.common.datetime_utils import utc_now
from src.patrol_system.patrol_system.common.logging_setup import configure_logging
from src.patrol_system.patrol_system.container import build_container


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"), getattr(settings, "LOG_FILE", None))

    container = build_container(
        db_config=dict(settings.DB_CONFIG),
        jwt_secret=settings.JWT_SECRET,
        retention_months=int(settings.LOG_RETENTION_MONTHS),
    )
    now = utc_now()
    cutoff = container.patrol_service.retention_cutoff(now)
    removed = container.patrol_service.purge_expired(now=now)
    print(f"OK: Removed {removed} records older than {cutoff:%Y-%m-%d %H:%M:%S} UTC")


if __name__ == "__main__":
    main()
