import os

SECRET_KEY = "test-secret"

# Tests run against the local cache or injected fakes, never a live server.
DB_CONFIG = None

LOCAL_STORAGE_DIR = os.getenv("LOCAL_STORAGE_DIR", "instance/test_storage")

REQUIRE_REMOTE_COLLECTIONS = ()

REPORT_PAGE_SIZE = 10

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = False
