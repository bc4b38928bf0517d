from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.patrol_system.patrol_system.database.bootstrap import apply_seed_sql, ensure_admin_user
from src.patrol_system.patrol_system.database.connection import DBConfig, DatabaseConnection


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    apply_seed_sql(conn, seed_path=REPO_ROOT / "database" / "seed.sql")
    created = ensure_admin_user(conn, password=settings.ADMIN_PASSWORD)

    print(
        "OK: Seeded database -> "
        f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}"
        + (" (admin account created)" if created else "")
    )


if __name__ == "__main__":
    main()
