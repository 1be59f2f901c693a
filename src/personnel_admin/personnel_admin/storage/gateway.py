"""Dual-backend persistence shared by the entity gateways.

Each gateway composes an optional remote ``DocumentStore`` with the local
JSON cache. Reads try the remote store first and mirror what they get into
the cache; any remote failure degrades to the cache. Writes go to the remote
store when possible and are always mirrored locally, so the user is never
blocked by an unreachable backend. Writes report where they landed through
``WriteResult``.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Generic, Iterable, Mapping, Optional, TypeVar

from ..common.datetime_utils import coerce_datetime, later_than, now_local
from ..common.documents import to_plain
from ..core.enums import Backend
from ..core.exceptions import NotFoundError, RemoteUnavailableError
from .base import DocumentNotFoundError, DocumentStore
from .local_store import LocalDocumentStore

logger = logging.getLogger(__name__)

T = TypeVar("T")

_READ_ONLY_FIELDS = ("id", "created_at")


@dataclass(frozen=True)
class WriteResult:
    backend: Backend
    reason: Optional[str] = None

    @property
    def degraded(self) -> bool:
        return self.backend == Backend.LOCAL


class DocumentGateway(ABC, Generic[T]):
    collection: str = ""
    entity_label: str = "Record"

    def __init__(
        self,
        local: LocalDocumentStore,
        remote: Optional[DocumentStore] = None,
        *,
        require_remote: bool = False,
        clock: Callable[[], datetime] = now_local,
    ):
        self._local = local
        self._remote = remote
        self._require_remote = bool(require_remote)
        self._clock = clock

    @abstractmethod
    def _from_document(self, doc_id: str, data: Mapping[str, Any]) -> T:
        raise NotImplementedError

    @abstractmethod
    def _to_document(self, entity: T) -> dict:
        raise NotImplementedError

    @abstractmethod
    def _search_values(self, entity: T) -> Iterable[Optional[str]]:
        raise NotImplementedError

    @property
    def require_remote(self) -> bool:
        return self._require_remote

    def _active_remote(self) -> Optional[DocumentStore]:
        if self._remote is None and self._require_remote:
            raise RemoteUnavailableError(
                f"The remote store is not configured for {self.collection}. Please check the configuration."
            )
        return self._remote

    # -- reads ---------------------------------------------------------

    def get_all(self) -> list[T]:
        remote = self._active_remote()
        if remote is not None:
            try:
                pairs = list(remote.list_all())
            except Exception:
                logger.exception("Loading %s from the remote store failed; using the local cache", self.collection)
            else:
                self._mirror(lambda: self._local.replace_all(pairs))
                return [self._from_document(doc_id, body) for doc_id, body in pairs]

        return [self._from_document(doc_id, body) for doc_id, body in self._local.list_all()]

    def get_by_id(self, doc_id: str) -> Optional[T]:
        remote = self._active_remote()
        if remote is not None:
            try:
                body = remote.get(doc_id)
            except Exception:
                logger.exception("Loading %s/%s from the remote store failed; using the local cache", self.collection, doc_id)
            else:
                return self._from_document(doc_id, body) if body is not None else None

        body = self._local.get(doc_id)
        return self._from_document(doc_id, body) if body is not None else None

    def search(self, term: str) -> list[T]:
        items = self.get_all()
        needle = (term or "").strip().lower()
        if not needle:
            return items
        return [e for e in items if any(needle in (v or "").lower() for v in self._search_values(e))]

    # -- writes --------------------------------------------------------

    def create(self, entity: T) -> str:
        remote = self._active_remote()
        stamp = self._clock().isoformat()
        document = self._to_document(self._prepare_create(entity))
        document.pop("id", None)
        document["created_at"] = stamp
        document["updated_at"] = stamp

        if remote is not None:
            try:
                doc_id = remote.insert(document)
            except Exception:
                logger.exception("Creating %s in the remote store failed; saving locally", self.collection)
            else:
                self._mirror(lambda: self._local.put(doc_id, document))
                return doc_id

        doc_id = self._local.insert(document)
        logger.info("Saved %s/%s to the local cache only", self.collection, doc_id)
        return doc_id

    def _prepare_create(self, entity: T) -> T:
        return entity

    def update(self, doc_id: str, patch: Mapping[str, Any]) -> WriteResult:
        remote = self._active_remote()
        fields = {k: to_plain(v) for k, v in patch.items() if k not in _READ_ONLY_FIELDS}
        fields["updated_at"] = later_than(self._previous_update(doc_id), self._clock()).isoformat()

        result = WriteResult(Backend.LOCAL, "remote store not configured")
        remote_missing = True
        if remote is not None:
            try:
                remote.update(doc_id, fields)
            except DocumentNotFoundError:
                logger.warning("%s/%s does not exist in the remote store", self.collection, doc_id)
                result = WriteResult(Backend.LOCAL, "not found in remote store")
            except Exception as e:
                logger.exception("Updating %s/%s in the remote store failed; updating locally", self.collection, doc_id)
                result = WriteResult(Backend.LOCAL, f"remote store error: {e}")
                remote_missing = False
            else:
                result = WriteResult(Backend.REMOTE)
                remote_missing = False

        try:
            self._local.update(doc_id, fields)
        except DocumentNotFoundError:
            if result.backend == Backend.REMOTE:
                self._mirror_remote_copy(remote, doc_id)
            elif remote_missing:
                raise NotFoundError(f"{self.entity_label} {doc_id} not found")
            else:
                raise NotFoundError(
                    f"{self.entity_label} {doc_id} is not in the local cache and the remote store is unreachable"
                )
        except OSError:
            logger.exception("Mirroring %s/%s update to the local cache failed", self.collection, doc_id)
        return result

    def delete(self, doc_id: str) -> WriteResult:
        remote = self._active_remote()
        result = WriteResult(Backend.LOCAL, "remote store not configured")
        if remote is not None:
            try:
                remote.delete(doc_id)
            except Exception as e:
                logger.exception("Deleting %s/%s from the remote store failed", self.collection, doc_id)
                result = WriteResult(Backend.LOCAL, f"remote store error: {e}")
            else:
                result = WriteResult(Backend.REMOTE)

        self._local.delete(doc_id)
        return result

    def clear_local_cache(self) -> None:
        self._local.clear()

    def _previous_update(self, doc_id: str) -> Optional[datetime]:
        body = self._local.get(doc_id)
        if not body:
            return None
        try:
            return coerce_datetime(body.get("updated_at"))
        except ValueError:
            return None

    def _mirror_remote_copy(self, remote: DocumentStore, doc_id: str) -> None:
        try:
            body = remote.get(doc_id)
        except Exception:
            logger.exception("Reloading %s/%s for the local cache failed", self.collection, doc_id)
            return
        if body is None:
            logger.warning("%s/%s vanished from the remote store after the update", self.collection, doc_id)
            return
        logger.info("Adding %s/%s to the local cache after a remote update", self.collection, doc_id)
        self._mirror(lambda: self._local.put(doc_id, body))

    def _mirror(self, write: Callable[[], None]) -> None:
        try:
            write()
        except OSError:
            logger.exception("Mirroring %s into the local cache failed", self.collection)
