from __future__ import annotations

from dataclasses import replace
from typing import Any, Mapping

from ..common.documents import sub, text
from ..common.validators import is_email, raise_if_errors
from ..core.exceptions import NotFoundError, ValidationError
from ..projects.gateway import ProjectGateway
from ..storage.gateway import WriteResult
from .gateway import ClientGateway
from .model import Client, ContactInfo


class ClientService:
    """Use case: validate and persist clients."""

    def __init__(self, clients: ClientGateway, projects: ProjectGateway):
        self._clients = clients
        self._projects = projects

    def create_client(self, payload: Mapping[str, Any]) -> str:
        return self._clients.create(self._validated(Client(), payload, creating=True))

    def update_client(self, client_id: str, payload: Mapping[str, Any]) -> WriteResult:
        current = self._clients.get_by_id(client_id)
        if current is None:
            raise NotFoundError(f"Client {client_id} not found")
        merged = self._validated(current, payload, creating=False)
        patch = {k: getattr(merged, k) for k in ("name", "ruc", "contact_info") if k in payload}
        return self._clients.update(client_id, patch)

    def delete_client(self, client_id: str) -> WriteResult:
        if self._clients.get_by_id(client_id) is None:
            raise NotFoundError(f"Client {client_id} not found")
        owned = self._projects.list_by_client(client_id)
        if owned:
            raise ValidationError(
                f"Client still owns {len(owned)} project(s); reassign or delete them first",
                {"projects": ", ".join(p.name for p in owned)},
            )
        return self._clients.delete(client_id)

    @staticmethod
    def _validated(base: Client, payload: Mapping[str, Any], *, creating: bool) -> Client:
        errors: dict[str, str] = {}
        name = text(payload, "name", base.name).strip()
        if (creating or "name" in payload) and not name:
            errors["name"] = "Name is required"

        contact = base.contact_info
        if "contact_info" in payload:
            raw = sub(payload, "contact_info")
            contact = ContactInfo(
                email=text(raw, "email", contact.email).strip(),
                phone=text(raw, "phone", contact.phone).strip(),
                address=text(raw, "address", contact.address).strip(),
            )
            if contact.email and not is_email(contact.email):
                errors["contact_info.email"] = "Invalid email"

        raise_if_errors(errors)
        return replace(base, name=name, ruc=text(payload, "ruc", base.ruc).strip(), contact_info=contact)
