"""Delete every document from all collections, remote and local.

Usage: python scripts/clear_collections.py --yes
"""
from __future__ import annotations

import argparse
import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.personnel_admin.personnel_admin.core.constants import USERS_COLLECTION
from src.personnel_admin.personnel_admin.container import build_container
from src.personnel_admin.personnel_admin.storage.mysql_document_store import MySQLDocumentStore


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--yes", action="store_true", help="do not ask for confirmation")
    parser.add_argument("--keep-users", action="store_true", help="keep login profiles")
    args = parser.parse_args(argv)

    if not args.yes:
        answer = input("This deletes ALL employees, projects and clients. Type 'yes' to continue: ")
        if answer.strip().lower() != "yes":
            print("Aborted.")
            return 1

    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG, local_storage_dir=settings.LOCAL_STORAGE_DIR)

    for gateway in container.gateways:
        if args.keep_users and gateway.collection == USERS_COLLECTION:
            continue
        if container.conn is not None:
            deleted = MySQLDocumentStore(container.conn, gateway.collection).delete_all()
            print(f"{gateway.collection}: deleted {deleted} remote document(s)")
        gateway.clear_local_cache()
        print(f"{gateway.collection}: local cache cleared")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
