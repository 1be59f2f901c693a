from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.personnel_admin.personnel_admin.storage.bootstrap import create_collections, ensure_database_exists, list_tables
from src.personnel_admin.personnel_admin.storage.connection import DBConfig, DatabaseConnection


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    if not settings.DB_CONFIG:
        print("Nothing to do: DB_HOST is not set, the app runs on the local cache only.")
        return

    config = DBConfig.from_dict(settings.DB_CONFIG)
    ensure_database_exists(config)
    conn = DatabaseConnection.get_instance(config)
    create_collections(conn)
    tables = list_tables(conn)
    print(f"OK: collections ready -> {config.user}@{config.host}:{config.port}/{config.database} (tables={len(tables)})")


if __name__ == "__main__":
    main()
