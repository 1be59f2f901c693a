from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional

from ..core.constants import USERS_COLLECTION
from ..storage.gateway import DocumentGateway
from .model import UserProfile


class UserGateway(DocumentGateway[UserProfile]):
    collection = USERS_COLLECTION
    entity_label = "User"

    def _from_document(self, doc_id: str, data: Mapping[str, Any]) -> UserProfile:
        return UserProfile.from_document(doc_id, data)

    def _to_document(self, entity: UserProfile) -> dict:
        return entity.to_document()

    def _search_values(self, entity: UserProfile) -> Iterable[Optional[str]]:
        return (entity.email, entity.display_name)

    def get_by_email(self, email: str) -> Optional[UserProfile]:
        needle = (email or "").strip().lower()
        for user in self.get_all():
            if user.email.strip().lower() == needle:
                return user
        return None
