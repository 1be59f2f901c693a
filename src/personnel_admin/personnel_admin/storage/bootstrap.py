from __future__ import annotations

import logging
from typing import Iterable

import mysql.connector

from ..core.constants import COLLECTIONS
from .connection import DBConfig, DatabaseConnection
from .mysql_base import db_cursor, fetchall

logger = logging.getLogger(__name__)

COLLECTION_DDL = """
CREATE TABLE IF NOT EXISTS `{table}` (
    doc_id VARCHAR(64) NOT NULL PRIMARY KEY,
    body JSON NOT NULL,
    created_at DATETIME(6) NOT NULL DEFAULT CURRENT_TIMESTAMP(6)
) ENGINE=InnoDB DEFAULT CHARSET=utf8mb4 COLLATE=utf8mb4_unicode_ci
"""


def ensure_database_exists(config: DBConfig) -> None:
    conn = mysql.connector.connect(
        host=config.host,
        port=config.port,
        user=config.user,
        password=config.password,
        use_pure=True,
    )
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{config.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    finally:
        conn.close()


def create_collections(conn_factory: DatabaseConnection, collections: Iterable[str] = COLLECTIONS) -> None:
    """Create one table per collection (idempotent)."""
    with db_cursor(conn_factory, dictionary=False) as (_, cur):
        for table in collections:
            if table not in COLLECTIONS:
                raise ValueError(f"Unknown collection: {table}")
            cur.execute(COLLECTION_DDL.format(table=table))
    logger.info("Collections ready: %s", ", ".join(collections))


def list_tables(conn_factory: DatabaseConnection) -> list[str]:
    with db_cursor(conn_factory, dictionary=False) as (_, cur):
        cur.execute("SHOW TABLES")
        return [str(r[0]) for r in fetchall(cur)]
