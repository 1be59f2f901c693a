from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping, Optional

from ..common.datetime_utils import coerce_datetime
from ..common.documents import id_list, sub, text, to_plain


@dataclass(frozen=True)
class ContactInfo:
    email: str = ""
    phone: str = ""
    address: str = ""


@dataclass(frozen=True)
class Client:
    """Domain entity: client company.

    ``projects`` is informational; project ownership is ``Project.client_id``.
    """

    id: Optional[str] = None
    name: str = ""
    ruc: str = ""
    contact_info: ContactInfo = field(default_factory=ContactInfo)
    projects: list[str] = field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_document(self) -> dict:
        doc = to_plain(self)
        doc.pop("id", None)
        return doc

    @classmethod
    def from_document(cls, doc_id: Optional[str], data: Mapping[str, Any]) -> "Client":
        contact = sub(data, "contact_info")
        return cls(
            id=doc_id,
            name=text(data, "name"),
            ruc=text(data, "ruc"),
            contact_info=ContactInfo(
                email=text(contact, "email"),
                phone=text(contact, "phone"),
                address=text(contact, "address"),
            ),
            projects=id_list(data.get("projects")),
            created_at=coerce_datetime(data.get("created_at")),
            updated_at=coerce_datetime(data.get("updated_at")),
        )
