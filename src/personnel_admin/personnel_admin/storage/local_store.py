from __future__ import annotations

import json
import logging
import time
from pathlib import Path
from typing import Callable, Optional, Sequence

from .base import DocumentNotFoundError, DocumentStore

logger = logging.getLogger(__name__)


def time_token() -> str:
    """Millisecond timestamp used for ids of records created without the remote store."""
    return str(int(time.time() * 1000))


class LocalDocumentStore(DocumentStore):
    """Local key-value cache: one JSON file per storage key holding the full array.

    The file is always read and written wholesale. Records carry their ``id``
    inline, the way they are handed out by the gateways.
    """

    def __init__(self, directory: str | Path, storage_key: str, *, id_factory: Callable[[], str] = time_token):
        self._directory = Path(directory)
        self._key = storage_key
        self._id_factory = id_factory

    @property
    def storage_key(self) -> str:
        return self._key

    @property
    def path(self) -> Path:
        return self._directory / f"{self._key}.json"

    def load(self) -> list[dict]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return []
        except OSError:
            logger.exception("Could not read local cache %s", self.path)
            return []

        try:
            data = json.loads(raw) if raw.strip() else []
        except json.JSONDecodeError:
            logger.warning("Local cache %s is not valid JSON; treating it as empty", self.path)
            return []
        return [r for r in data if isinstance(r, dict)] if isinstance(data, list) else []

    def save(self, records: list[dict]) -> None:
        self._directory.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(records, ensure_ascii=False, indent=2), encoding="utf-8")

    def list_all(self) -> Sequence[tuple[str, dict]]:
        return [(str(r.get("id")), _body(r)) for r in self.load() if r.get("id") is not None]

    def get(self, doc_id: str) -> Optional[dict]:
        for r in self.load():
            if str(r.get("id")) == doc_id:
                return _body(r)
        return None

    def new_id(self, taken: Optional[set[str]] = None) -> str:
        taken = taken if taken is not None else {str(r.get("id")) for r in self.load()}
        candidate = self._id_factory()
        while candidate in taken:
            candidate = str(int(candidate) + 1) if candidate.isdigit() else f"{candidate}-1"
        return candidate

    def insert(self, body: dict) -> str:
        records = self.load()
        doc_id = self.new_id({str(r.get("id")) for r in records})
        records.append({**body, "id": doc_id})
        self.save(records)
        return doc_id

    def put(self, doc_id: str, body: dict) -> None:
        """Insert or replace the full record for ``doc_id``."""
        records = self.load()
        record = {**body, "id": doc_id}
        for i, r in enumerate(records):
            if str(r.get("id")) == doc_id:
                records[i] = record
                break
        else:
            records.append(record)
        self.save(records)

    def update(self, doc_id: str, fields: dict) -> None:
        records = self.load()
        for i, r in enumerate(records):
            if str(r.get("id")) == doc_id:
                records[i] = {**r, **fields, "id": r.get("id")}
                self.save(records)
                return
        raise DocumentNotFoundError(f"{self._key}/{doc_id}")

    def delete(self, doc_id: str) -> None:
        records = self.load()
        kept = [r for r in records if str(r.get("id")) != doc_id]
        if len(kept) != len(records):
            self.save(kept)

    def replace_all(self, pairs: Sequence[tuple[str, dict]]) -> None:
        self.save([{**body, "id": doc_id} for doc_id, body in pairs])

    def clear(self) -> None:
        try:
            self.path.unlink()
        except FileNotFoundError:
            pass


def _body(record: dict) -> dict:
    return {k: v for k, v in record.items() if k != "id"}
