import os


def _flag(name: str, default: str) -> bool:
    return bool(int(os.environ.get(name, default)))


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY") or "patrol-dev-secret"
    JWT_SECRET = os.environ.get("JWT_SECRET") or SECRET_KEY
    JWT_EXPIRES_HOURS = int(os.environ.get("JWT_EXPIRES_HOURS", "12"))

    # DB
    DB_USER = os.environ.get("DB_USER", "root")
    DB_PASSWORD = os.environ.get("DB_PASSWORD", "")
    DB_HOST = os.environ.get("DB_HOST", "localhost")
    DB_PORT = int(os.environ.get("DB_PORT", "3306"))
    DB_NAME = os.environ.get("DB_NAME", "patrol_db")

    # Reports / patrol rules
    REPORT_UTC_OFFSET_HOURS = int(os.environ.get("REPORT_UTC_OFFSET_HOURS", "7"))
    SLOT_MATCH_POLICY = os.environ.get("SLOT_MATCH_POLICY", "exact_hour")
    LOG_RETENTION_MONTHS = int(os.environ.get("LOG_RETENTION_MONTHS", "3"))
    DEFAULT_RADIUS_METERS = float(os.environ.get("DEFAULT_RADIUS_METERS", "50"))

    # Dev helpers
    AUTO_INIT_DB = _flag("AUTO_INIT_DB", "0")
    AUTO_SEED_DB = _flag("AUTO_SEED_DB", "0")
    ADMIN_PASSWORD = os.environ.get("ADMIN_PASSWORD", "admin123")

    CORS_ORIGINS = os.environ.get("CORS_ORIGINS", "*")
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
    LOG_FILE = os.environ.get("LOG_FILE") or None


# Module-level names read by create_app()
SECRET_KEY = Config.SECRET_KEY
JWT_SECRET = Config.JWT_SECRET
JWT_EXPIRES_HOURS = Config.JWT_EXPIRES_HOURS
DB_CONFIG = {
    "host": Config.DB_HOST,
    "port": Config.DB_PORT,
    "user": Config.DB_USER,
    "password": Config.DB_PASSWORD,
    "database": Config.DB_NAME,
}

DEBUG = _flag("DEBUG", "1")

REPORT_UTC_OFFSET_HOURS = Config.REPORT_UTC_OFFSET_HOURS
SLOT_MATCH_POLICY = Config.SLOT_MATCH_POLICY
LOG_RETENTION_MONTHS = Config.LOG_RETENTION_MONTHS
DEFAULT_RADIUS_METERS = Config.DEFAULT_RADIUS_METERS

AUTO_INIT_DB = Config.AUTO_INIT_DB
AUTO_SEED_DB = Config.AUTO_SEED_DB
ADMIN_PASSWORD = Config.ADMIN_PASSWORD

CORS_ORIGINS = Config.CORS_ORIGINS
LOG_LEVEL = Config.LOG_LEVEL
LOG_FILE = Config.LOG_FILE
