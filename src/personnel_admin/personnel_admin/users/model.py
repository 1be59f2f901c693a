from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping, Optional

from ..common.datetime_utils import coerce_datetime
from ..common.documents import text, to_plain
from ..core.enums import Role


@dataclass(frozen=True)
class UserProfile:
    """Domain entity: a login profile.

    Note: Plain data object; ``password_hash`` is a werkzeug hash, never the password.
    """

    id: Optional[str] = None
    email: str = ""
    display_name: str = ""
    role: Role = Role.VIEWER
    password_hash: str = ""
    is_active: bool = True
    last_login: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_document(self) -> dict:
        doc = to_plain(self)
        doc.pop("id", None)
        return doc

    @classmethod
    def from_document(cls, doc_id: Optional[str], data: Mapping[str, Any]) -> "UserProfile":
        try:
            role = Role(text(data, "role", Role.VIEWER.value))
        except ValueError:
            role = Role.VIEWER
        return cls(
            id=doc_id,
            email=text(data, "email"),
            display_name=text(data, "display_name"),
            role=role,
            password_hash=text(data, "password_hash"),
            is_active=bool(data.get("is_active", True)),
            last_login=coerce_datetime(data.get("last_login")),
            created_at=coerce_datetime(data.get("created_at")),
            updated_at=coerce_datetime(data.get("updated_at")),
        )
