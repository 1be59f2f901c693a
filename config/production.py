import os

from config import db_config_from_env

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = db_config_from_env()

LOCAL_STORAGE_DIR = os.getenv("LOCAL_STORAGE_DIR", "instance/local_storage")

REQUIRE_REMOTE_COLLECTIONS = tuple(
    c.strip() for c in os.getenv("REQUIRE_REMOTE_COLLECTIONS", "employees").split(",") if c.strip()
)

REPORT_PAGE_SIZE = int(os.getenv("REPORT_PAGE_SIZE", "10"))

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
