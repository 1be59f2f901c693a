from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional

from ..core.constants import PROJECTS_COLLECTION
from ..storage.gateway import DocumentGateway
from .model import Project


class ProjectGateway(DocumentGateway[Project]):
    collection = PROJECTS_COLLECTION
    entity_label = "Project"

    def _from_document(self, doc_id: str, data: Mapping[str, Any]) -> Project:
        return Project.from_document(doc_id, data)

    def _to_document(self, entity: Project) -> dict:
        return entity.to_document()

    def _search_values(self, entity: Project) -> Iterable[Optional[str]]:
        return (entity.name, entity.description, entity.contract)

    def list_by_client(self, client_id: str) -> list[Project]:
        return [p for p in self.get_all() if p.client_id == client_id]
