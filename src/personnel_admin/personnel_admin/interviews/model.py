from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Mapping, Optional

from ..common.datetime_utils import coerce_datetime
from ..common.documents import int_or, text, to_plain


class InterviewStatus(str, Enum):
    SCHEDULED = "scheduled"
    CONFIRMED = "confirmed"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    RESCHEDULED = "rescheduled"


@dataclass(frozen=True)
class Interview:
    """Applicant interview record.

    Only the shape is kept here; it is used as sample data by the test suite.
    """

    id: Optional[str] = None
    applicant_id: str = ""
    applicant_dni: str = ""
    applicant_name: str = ""
    position_of_interest: str = ""
    scheduled_at: Optional[datetime] = None
    interview_type: str = "in_person"
    lead_interviewer: str = ""
    additional_interviewers: list[str] = field(default_factory=list)
    status: InterviewStatus = InterviewStatus.SCHEDULED
    estimated_minutes: int = 30
    notes: str = ""

    def to_document(self) -> dict:
        doc = to_plain(self)
        doc.pop("id", None)
        return doc

    @classmethod
    def from_document(cls, doc_id: Optional[str], data: Mapping[str, Any]) -> "Interview":
        try:
            status = InterviewStatus(text(data, "status", InterviewStatus.SCHEDULED.value))
        except ValueError:
            status = InterviewStatus.SCHEDULED
        return cls(
            id=doc_id,
            applicant_id=text(data, "applicant_id"),
            applicant_dni=text(data, "applicant_dni"),
            applicant_name=text(data, "applicant_name"),
            position_of_interest=text(data, "position_of_interest"),
            scheduled_at=coerce_datetime(data.get("scheduled_at")),
            interview_type=text(data, "interview_type", "in_person"),
            lead_interviewer=text(data, "lead_interviewer"),
            additional_interviewers=[str(v) for v in data.get("additional_interviewers") or []],
            status=status,
            estimated_minutes=int_or(data.get("estimated_minutes"), 30),
            notes=text(data, "notes"),
        )
