import os

from .config import *  # noqa: F401,F403

SECRET_KEY = "test-secret"
JWT_SECRET = "test-jwt-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "patrol_db_test"),
}

DEBUG = False
TESTING = True

AUTO_INIT_DB = False
AUTO_SEED_DB = False
LOG_FILE = None
