from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional

from ..core.constants import CLIENTS_COLLECTION
from ..storage.gateway import DocumentGateway
from .model import Client


class ClientGateway(DocumentGateway[Client]):
    collection = CLIENTS_COLLECTION
    entity_label = "Client"

    def _from_document(self, doc_id: str, data: Mapping[str, Any]) -> Client:
        return Client.from_document(doc_id, data)

    def _to_document(self, entity: Client) -> dict:
        return entity.to_document()

    def _search_values(self, entity: Client) -> Iterable[Optional[str]]:
        return (entity.name, entity.contact_info.email, entity.contact_info.phone, entity.ruc)
