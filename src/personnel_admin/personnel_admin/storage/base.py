from __future__ import annotations

from typing import Optional, Protocol, Sequence


class DocumentNotFoundError(LookupError):
    """Raised by a store when updating a document that does not exist."""


class DocumentStore(Protocol):
    """Storage strategy shared by the remote store and the local cache.

    Documents are plain JSON-ready dicts without their id; the id travels next
    to the body.
    """

    def list_all(self) -> Sequence[tuple[str, dict]]:
        raise NotImplementedError

    def get(self, doc_id: str) -> Optional[dict]:
        raise NotImplementedError

    def insert(self, body: dict) -> str:
        raise NotImplementedError

    def update(self, doc_id: str, fields: dict) -> None:
        """Merge ``fields`` into the top level of the stored document."""

        raise NotImplementedError

    def delete(self, doc_id: str) -> None:
        raise NotImplementedError
