from __future__ import annotations

import dataclasses
import logging
from typing import Any, Mapping

from ..common.documents import text, to_plain
from ..common.payloads import as_bool
from ..common.uploads import photo_to_data_url
from ..common.validators import is_digits, is_email, raise_if_errors
from ..core.constants import DNI_LENGTH
from ..core.exceptions import NotFoundError, ValidationError
from ..projects.service import ProjectAssignmentService
from ..storage.gateway import WriteResult
from .gateway import EmployeeGateway
from .model import Employee

logger = logging.getLogger(__name__)

_PATCHABLE = frozenset(f.name for f in dataclasses.fields(Employee)) - {
    "id",
    "assigned_projects",
    "created_at",
    "updated_at",
}


class EmployeeService:
    """Use case: edits to existing employees outside the wizard."""

    def __init__(self, employees: EmployeeGateway, assignments: ProjectAssignmentService):
        self._employees = employees
        self._assignments = assignments

    def _require(self, employee_id: str) -> Employee:
        employee = self._employees.get_by_id(employee_id)
        if employee is None:
            raise NotFoundError(f"Employee {employee_id} not found")
        return employee

    def update_employee(self, employee_id: str, payload: Mapping[str, Any]) -> WriteResult:
        current = self._require(employee_id)

        unknown = sorted(set(payload) - _PATCHABLE)
        if unknown:
            raise ValidationError(
                "These fields cannot be changed here: " + ", ".join(unknown),
                {k: "Not editable" for k in unknown},
            )

        errors: dict[str, str] = {}
        if "dni" in payload and not is_digits(text(payload, "dni").strip(), DNI_LENGTH):
            errors["dni"] = f"DNI must be exactly {DNI_LENGTH} digits"
        if text(payload, "email").strip() and not is_email(text(payload, "email").strip()):
            errors["email"] = "Invalid email"
        if "employee_code" in payload:
            try:
                self._employees.check_code(text(payload, "employee_code"), employee_id=employee_id)
            except ValidationError as e:
                errors.update(e.errors)
        raise_if_errors(errors)

        try:
            merged = Employee.from_document(employee_id, {**current.to_document(), **to_plain(dict(payload))})
        except ValueError as e:
            raise ValidationError(f"Invalid value: {e}")

        return self._employees.update(employee_id, {k: getattr(merged, k) for k in payload})

    def set_status(self, employee_id: str, payload: Mapping[str, Any]) -> WriteResult:
        self._require(employee_id)
        if "is_active" not in payload:
            raise ValidationError("is_active is required", {"is_active": "Required"})
        return self._employees.set_active(
            employee_id,
            as_bool(payload.get("is_active")),
            reason=text(payload, "reason"),
            project_id=text(payload, "project_id"),
        )

    def upload_photo(self, employee_id: str, *, content: bytes, content_type: str) -> WriteResult:
        self._require(employee_id)
        photo_url = photo_to_data_url(content, content_type)
        return self._employees.update(employee_id, {"photo_url": photo_url})

    def delete_employee(self, employee_id: str) -> WriteResult:
        self._require(employee_id)
        self._assignments.release_employee(employee_id)
        logger.info("Deleting employee %s", employee_id)
        return self._employees.delete(employee_id)
