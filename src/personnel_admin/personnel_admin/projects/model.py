from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Mapping, Optional

from ..common.datetime_utils import coerce_date, coerce_datetime
from ..common.documents import id_list, text, to_plain
from ..core.enums import ProjectStatus


@dataclass(frozen=True)
class Project:
    """Domain entity: construction project."""

    id: Optional[str] = None
    name: str = ""
    description: str = ""
    contract: str = ""
    client_id: str = ""
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    status: ProjectStatus = ProjectStatus.ACTIVE
    assigned_employees: list[str] = field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_document(self) -> dict:
        doc = to_plain(self)
        doc.pop("id", None)
        return doc

    @classmethod
    def from_document(cls, doc_id: Optional[str], data: Mapping[str, Any]) -> "Project":
        try:
            status = ProjectStatus(text(data, "status", ProjectStatus.ACTIVE.value))
        except ValueError:
            status = ProjectStatus.ACTIVE
        return cls(
            id=doc_id,
            name=text(data, "name"),
            description=text(data, "description"),
            contract=text(data, "contract"),
            client_id=text(data, "client_id"),
            start_date=coerce_date(data.get("start_date")),
            end_date=coerce_date(data.get("end_date")),
            status=status,
            assigned_employees=id_list(data.get("assigned_employees")),
            created_at=coerce_datetime(data.get("created_at")),
            updated_at=coerce_datetime(data.get("updated_at")),
        )
