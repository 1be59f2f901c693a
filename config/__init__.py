import os


def get_settings_module() -> str:
    env = os.getenv("APP_ENV", "development").lower()

    if env in {"prod", "production"}:
        return "config.production"

    if env in {"test", "testing"}:
        return "config.testing"

    return "config.development"


def db_config_from_env() -> "dict | None":
    """MySQL settings for the remote store, or None when DB_HOST is not set (local cache only)."""
    host = os.getenv("DB_HOST", "").strip()
    if not host:
        return None
    return {
        "host": host,
        "port": int(os.getenv("DB_PORT", "3306")),
        "user": os.getenv("DB_USER", "root"),
        "password": os.getenv("DB_PASSWORD", ""),
        "database": os.getenv("DB_NAME", "personnel_admin"),
    }
