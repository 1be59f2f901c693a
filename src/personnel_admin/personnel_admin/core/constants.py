"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

EMPLOYEES_COLLECTION = "employees"
PROJECTS_COLLECTION = "projects"
CLIENTS_COLLECTION = "clients"
USERS_COLLECTION = "user_profiles"

COLLECTIONS = (EMPLOYEES_COLLECTION, PROJECTS_COLLECTION, CLIENTS_COLLECTION, USERS_COLLECTION)

EMPLOYEES_STORAGE_KEY = "employees-data"
PROJECTS_STORAGE_KEY = "projects-data"
CLIENTS_STORAGE_KEY = "clients-data"
USERS_STORAGE_KEY = "users-data"

EMPLOYEE_CODE_PREFIX = "EMP"
DNI_LENGTH = 8

DEFAULT_PAGE_SIZE = 10
REPORT_JOIN_DELIMITER = "; "
MIN_COLUMN_WIDTH = 10
COLUMN_PADDING = 2
NOT_AVAILABLE = "N/A"
NONE_LABEL = "None"

MAX_PHOTO_BYTES = 5 * 1024 * 1024
FINISH_REDIRECT_DELAY_MS = 2000
