from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, request, send_from_directory
from flask_cors import CORS

from config import get_settings_module

from .checkpoints.controller import register as register_checkpoints
from .common.datetime_utils import utc_now
from .common.http import fail, ok
from .common.logging_setup import configure_logging
from .container import Container, build_container
from .database.bootstrap import apply_schema, apply_seed_sql, ensure_admin_user, list_tables
from .database.connection import DBConfig, DatabaseConnection
from .patrols.controller import register as register_patrols
from .reports.controller import register as register_reports
from .schedules.controller import register as register_schedules
from .users.controller import register as register_users

log = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parents[3]
PUBLIC_DIR = PROJECT_ROOT / "public"


def _bootstrap_database(settings, db_config: dict) -> None:
    conn_factory = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    if bool(getattr(settings, "AUTO_INIT_DB", False)):
        apply_schema(conn_factory, schema_path=PROJECT_ROOT / "database" / "schema.sql")
        log.info("Schema ready (tables=%d)", len(list_tables(conn_factory)))
    if bool(getattr(settings, "AUTO_SEED_DB", False)):
        apply_seed_sql(conn_factory, seed_path=PROJECT_ROOT / "database" / "seed.sql")
        ensure_admin_user(conn_factory, password=getattr(settings, "ADMIN_PASSWORD"))
        log.info("Seed data ready")


def _register_public(app: Flask) -> None:
    @app.route("/api/health", methods=["GET"], endpoint="api_health")
    def health():
        return ok({"status": "healthy", "timestamp": utc_now().isoformat() + "Z"})

    @app.route("/", defaults={"path": ""}, endpoint="public_index")
    @app.route("/<path:path>", endpoint="public_files")
    def public_files(path: str):
        if path.startswith("api/"):
            return fail("Not found", 404)
        if path and (PUBLIC_DIR / path).is_file():
            return send_from_directory(PUBLIC_DIR, path)
        return send_from_directory(PUBLIC_DIR, "index.html")

    @app.errorhandler(404)
    def not_found(e):
        if request.path.startswith("/api/"):
            return fail("Not found", 404)
        return e

    @app.errorhandler(405)
    def method_not_allowed(e):
        if request.path.startswith("/api/"):
            return fail("Method not allowed", 405)
        return e


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__, static_folder=None)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.json.sort_keys = False

    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"), getattr(settings, "LOG_FILE", None))

    cors_origins = str(getattr(settings, "CORS_ORIGINS", "*"))
    CORS(
        app,
        resources={r"/api/*": {"origins": [o.strip() for o in cors_origins.split(",") if o.strip()]}},
        allow_headers=["Content-Type", "Authorization"],
    )

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        log.info(
            "Starting with settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )
        _bootstrap_database(settings, db_config)
        container = build_container(
            db_config=db_config,
            jwt_secret=getattr(settings, "JWT_SECRET"),
            jwt_expires_hours=int(getattr(settings, "JWT_EXPIRES_HOURS", 12)),
            utc_offset_hours=int(getattr(settings, "REPORT_UTC_OFFSET_HOURS", 7)),
            slot_match_policy=getattr(settings, "SLOT_MATCH_POLICY", "exact_hour"),
            retention_months=int(getattr(settings, "LOG_RETENTION_MONTHS", 3)),
            default_radius=float(getattr(settings, "DEFAULT_RADIUS_METERS", 50)),
        )

    app.extensions["patrol_container"] = container

    register_users(app, container)
    register_checkpoints(app, container)
    register_patrols(app, container)
    register_schedules(app, container)
    register_reports(app, container)
    _register_public(app)

    return app
