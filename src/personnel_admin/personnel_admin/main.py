from __future__ import annotations

import importlib
import logging
from typing import Any, Mapping, Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .container import build_container
from .storage.bootstrap import create_collections, list_tables
from .clients.controller import register as register_clients
from .employees.controller import register as register_employees
from .projects.controller import register as register_projects
from .reports.controller import register as register_reports
from .users.controller import register as register_users
from .web.responses import register_error_handlers

logger = logging.getLogger(__name__)

_SETTING_NAMES = (
    "SECRET_KEY",
    "DEBUG",
    "DB_CONFIG",
    "LOCAL_STORAGE_DIR",
    "REQUIRE_REMOTE_COLLECTIONS",
    "REPORT_PAGE_SIZE",
    "LOG_LEVEL",
    "AUTO_INIT_DB",
)


def load_settings(overrides: Optional[Mapping[str, Any]] = None) -> dict:
    settings_module = get_settings_module()
    module = importlib.import_module(settings_module)
    settings = {name: getattr(module, name, None) for name in _SETTING_NAMES}
    settings["TESTING"] = bool(getattr(module, "TESTING", False))
    settings["SETTINGS_MODULE"] = settings_module
    settings.update(overrides or {})
    return settings


def create_app(config_overrides: Optional[Mapping[str, Any]] = None) -> Flask:
    """Application factory.

    ``config_overrides`` replaces individual settings; tests also pass
    ``REMOTE_STORES`` (collection -> store) and ``CLOCK`` through it.
    """
    load_dotenv(override=False)
    settings = load_settings(config_overrides)

    logging.basicConfig(
        level=str(settings.get("LOG_LEVEL") or "INFO").upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    app = Flask(__name__)
    app.secret_key = settings["SECRET_KEY"]
    app.config["DEBUG"] = bool(settings.get("DEBUG", False))
    app.config["TESTING"] = bool(settings.get("TESTING", False))
    app.config["REPORT_PAGE_SIZE"] = int(settings.get("REPORT_PAGE_SIZE") or 10)

    db_config = settings.get("DB_CONFIG")
    if db_config:
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings["SETTINGS_MODULE"],
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )
    else:
        logger.info("settings=%s db=<none, local cache only>", settings["SETTINGS_MODULE"])

    container_kwargs = {}
    if "CLOCK" in settings:
        container_kwargs["clock"] = settings["CLOCK"]

    container = build_container(
        db_config=db_config,
        local_storage_dir=str(settings.get("LOCAL_STORAGE_DIR") or "instance/local_storage"),
        require_remote=settings.get("REQUIRE_REMOTE_COLLECTIONS") or (),
        remote_stores=settings.get("REMOTE_STORES"),
        **container_kwargs,
    )
    app.extensions["personnel_admin"] = container

    if settings.get("AUTO_INIT_DB") and container.conn is not None:
        create_collections(container.conn)
        logger.info("Schema ready (tables=%s)", len(list_tables(container.conn)))

    register_error_handlers(app)
    register_users(app, container)
    register_employees(app, container)
    register_projects(app, container)
    register_clients(app, container)
    register_reports(app, container)

    return app
