import os

_ENV_MODULES = {
    "prod": "config.production",
    "production": "config.production",
    "test": "config.testing",
    "testing": "config.testing",
    "dev": "config.development",
    "development": "config.development",
}


def get_settings_module() -> str:
    """Settings module to import.

    SETTINGS_MODULE names one directly (e.g. a site-local module); otherwise
    APP_ENV picks from the bundled ones, falling back to development.
    """
    explicit = os.getenv("SETTINGS_MODULE", "").strip()
    if explicit:
        return explicit

    env = os.getenv("APP_ENV", "development").strip().lower()
    return _ENV_MODULES.get(env, "config.development")
