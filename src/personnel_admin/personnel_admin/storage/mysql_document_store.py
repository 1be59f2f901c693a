from __future__ import annotations

import json
import uuid
from typing import Optional, Sequence

from ..core.constants import COLLECTIONS
from .base import DocumentNotFoundError, DocumentStore
from .connection import DatabaseConnection
from .mysql_base import db_cursor, fetchall, fetchone, load_json_body


class MySQLDocumentStore(DocumentStore):
    """Remote document store: one table per collection, one JSON body per row."""

    def __init__(self, conn_factory: DatabaseConnection, collection: str):
        if collection not in COLLECTIONS:
            raise ValueError(f"Unknown collection: {collection}")
        self._conn_factory = conn_factory
        self._table = collection

    @property
    def collection(self) -> str:
        return self._table

    def list_all(self) -> Sequence[tuple[str, dict]]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT doc_id, body FROM `{self._table}` ORDER BY created_at, doc_id")
            return [(str(r["doc_id"]), load_json_body(r["body"])) for r in fetchall(cur)]

    def get(self, doc_id: str) -> Optional[dict]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT body FROM `{self._table}` WHERE doc_id=%s", (doc_id,))
            row = fetchone(cur)
            if not row:
                return None
            return load_json_body(row["body"])

    def insert(self, body: dict) -> str:
        doc_id = uuid.uuid4().hex[:20]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"INSERT INTO `{self._table}`(doc_id, body) VALUES(%s, %s)",
                (doc_id, json.dumps(body, ensure_ascii=False)),
            )
        return doc_id

    def update(self, doc_id: str, fields: dict) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT body FROM `{self._table}` WHERE doc_id=%s FOR UPDATE", (doc_id,))
            row = fetchone(cur)
            if not row:
                raise DocumentNotFoundError(f"{self._table}/{doc_id}")
            merged = {**load_json_body(row["body"]), **fields}
            cur.execute(
                f"UPDATE `{self._table}` SET body=%s WHERE doc_id=%s",
                (json.dumps(merged, ensure_ascii=False), doc_id),
            )

    def delete(self, doc_id: str) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"DELETE FROM `{self._table}` WHERE doc_id=%s", (doc_id,))

    def delete_all(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"DELETE FROM `{self._table}`")
            return int(cur.rowcount or 0)
