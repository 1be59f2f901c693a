from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date
from typing import Any, Iterable, Mapping, Optional

from ..common import datetime_utils
from ..core.constants import EMPLOYEE_CODE_PREFIX, EMPLOYEES_COLLECTION
from ..core.exceptions import ValidationError
from ..storage.gateway import DocumentGateway, WriteResult
from .model import Employee

logger = logging.getLogger(__name__)


class EmployeeGateway(DocumentGateway[Employee]):
    collection = EMPLOYEES_COLLECTION
    entity_label = "Employee"

    def _from_document(self, doc_id: str, data: Mapping[str, Any]) -> Employee:
        return Employee.from_document(doc_id, data)

    def _to_document(self, entity: Employee) -> dict:
        return entity.to_document()

    def _search_values(self, entity: Employee) -> Iterable[Optional[str]]:
        return (
            entity.given_names,
            entity.paternal_surname,
            entity.maternal_surname,
            entity.dni,
            entity.employee_code,
            entity.position,
        )

    def _prepare_create(self, entity: Employee) -> Employee:
        if (entity.employee_code or "").strip():
            code = self.check_code(entity.employee_code)
            return entity if code == entity.employee_code else replace(entity, employee_code=code)
        taken = {e.employee_code for e in self.get_all() if e.employee_code}
        return replace(entity, employee_code=self.generate_code(taken))

    def check_code(self, code: Optional[str], *, employee_id: Optional[str] = None) -> str:
        """Return the stripped code, rejecting a blank one or one held by another employee."""
        code = (code or "").strip()
        if not code:
            raise ValidationError("Employee code is required", {"employee_code": "Employee code is required"})
        if any(e.employee_code == code for e in self.get_all() if e.id != employee_id):
            raise ValidationError(
                f"Employee code {code} is already in use",
                {"employee_code": "This code is already in use"},
            )
        return code

    def generate_code(self, taken: Optional[set[str]] = None) -> str:
        """``EMP`` plus the last four digits of the current millisecond timestamp."""
        taken = taken or set()
        millis = int(self._clock().timestamp() * 1000)
        code = _format_code(millis)
        while code in taken:
            millis += 1
            code = _format_code(millis)
        return code

    def set_active(
        self,
        doc_id: str,
        is_active: bool,
        *,
        reason: str = "",
        project_id: str = "",
        on: Optional[date] = None,
    ) -> WriteResult:
        """Activate or deactivate an employee, recording when and why."""
        on = on or self._clock().date()
        if is_active:
            patch = {
                "is_active": True,
                "activation_date": on,
                "deactivation_date": None,
                "deactivation_reason": "",
            }
            if project_id:
                patch["last_assigned_project"] = project_id
        else:
            if not (reason or "").strip():
                raise ValidationError(
                    "A reason is required to deactivate an employee",
                    {"deactivation_reason": "Required"},
                )
            patch = {
                "is_active": False,
                "deactivation_date": on,
                "deactivation_reason": reason.strip(),
            }

        logger.info("Setting employee %s active=%s", doc_id, is_active)
        return self.update(doc_id, patch)

    def calculate_age(self, employee: Employee, today: Optional[date] = None) -> Optional[int]:
        return datetime_utils.calculate_age(employee.birth_date, today or self._clock().date())


def _format_code(millis: int) -> str:
    return f"{EMPLOYEE_CODE_PREFIX}{millis % 10000:04d}"
