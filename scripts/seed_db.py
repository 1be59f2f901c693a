from __future__ import annotations

import importlib
import os
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.personnel_admin.personnel_admin.container import build_container
from src.personnel_admin.personnel_admin.core.enums import Role


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    container = build_container(
        db_config=settings.DB_CONFIG,
        local_storage_dir=settings.LOCAL_STORAGE_DIR,
        require_remote=settings.REQUIRE_REMOTE_COLLECTIONS,
    )

    email = os.getenv("ADMIN_EMAIL", "admin@example.com")
    password = os.getenv("ADMIN_PASSWORD", "admin123")
    created = container.user_service.ensure_profile(
        email=email,
        display_name=os.getenv("ADMIN_NAME", "Administrator"),
        password=password,
        role=Role.ADMIN,
    )
    if created:
        print(f"OK: created admin profile {email} (id={created})")
    else:
        print(f"OK: admin profile {email} already exists")


if __name__ == "__main__":
    main()
