import os

from config import db_config_from_env

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

# None -> every collection runs on the local JSON cache
DB_CONFIG = db_config_from_env()

LOCAL_STORAGE_DIR = os.getenv("LOCAL_STORAGE_DIR", "instance/local_storage")

# Collections that refuse to fall back to the local cache when the remote store is not configured
REQUIRE_REMOTE_COLLECTIONS = tuple(
    c.strip() for c in os.getenv("REQUIRE_REMOTE_COLLECTIONS", "employees").split(",") if c.strip()
)

REPORT_PAGE_SIZE = int(os.getenv("REPORT_PAGE_SIZE", "10"))

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, the app creates the collection tables on startup (CREATE TABLE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
