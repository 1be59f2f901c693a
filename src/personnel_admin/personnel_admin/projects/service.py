from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Mapping, Optional

from ..clients.gateway import ClientGateway
from ..common.documents import id_list, text
from ..common.payloads import optional_date
from ..common.validators import check_date_order, raise_if_errors
from ..core.enums import ProjectStatus
from ..core.exceptions import NotFoundError, ValidationError
from ..employees.gateway import EmployeeGateway
from ..storage.gateway import WriteResult
from .gateway import ProjectGateway
from .model import Project

logger = logging.getLogger(__name__)

_EDITABLE_FIELDS = ("name", "description", "contract", "client_id", "start_date", "end_date", "status")


class ProjectService:
    """Use case: validate and persist projects."""

    def __init__(self, projects: ProjectGateway, clients: ClientGateway, assignments: "ProjectAssignmentService"):
        self._projects = projects
        self._clients = clients
        self._assignments = assignments

    def create_project(self, payload: Mapping[str, Any]) -> str:
        project = self._validated(Project(), payload, creating=True)
        return self._projects.create(replace(project, assigned_employees=[]))

    def update_project(self, project_id: str, payload: Mapping[str, Any]) -> WriteResult:
        current = self._projects.get_by_id(project_id)
        if current is None:
            raise NotFoundError(f"Project {project_id} not found")
        merged = self._validated(current, payload, creating=False)
        patch = {k: getattr(merged, k) for k in _EDITABLE_FIELDS if k in payload}
        return self._projects.update(project_id, patch)

    def delete_project(self, project_id: str) -> WriteResult:
        project = self._projects.get_by_id(project_id)
        if project is None:
            raise NotFoundError(f"Project {project_id} not found")
        for employee_id in project.assigned_employees:
            self._assignments.detach_project(employee_id, project_id)
        return self._projects.delete(project_id)

    def _validated(self, base: Project, payload: Mapping[str, Any], *, creating: bool) -> Project:
        errors: dict[str, str] = {}

        name = text(payload, "name", base.name).strip()
        if creating or "name" in payload:
            if not name:
                errors["name"] = "Name is required"

        status = base.status
        if "status" in payload:
            try:
                status = ProjectStatus(text(payload, "status"))
            except ValueError:
                errors["status"] = "Status must be one of: " + ", ".join(s.value for s in ProjectStatus)

        start = optional_date(payload, "start_date") if "start_date" in payload else base.start_date
        end = optional_date(payload, "end_date") if "end_date" in payload else base.end_date
        if not check_date_order(start, end):
            errors["end_date"] = "End date cannot be before the start date"

        client_id = text(payload, "client_id", base.client_id).strip()
        if "client_id" in payload and client_id and self._clients.get_by_id(client_id) is None:
            errors["client_id"] = "Client does not exist"

        raise_if_errors(errors)
        return replace(
            base,
            name=name,
            description=text(payload, "description", base.description),
            contract=text(payload, "contract", base.contract),
            client_id=client_id,
            start_date=start,
            end_date=end,
            status=status,
        )


class ProjectAssignmentService:
    """Single writer for the project <-> employee relationship.

    Both ``Project.assigned_employees`` and ``Employee.assigned_projects`` are
    only ever changed here, project side first.
    """

    def __init__(self, projects: ProjectGateway, employees: EmployeeGateway):
        self._projects = projects
        self._employees = employees

    def assign_employee(self, project_id: str, employee_id: str) -> None:
        project = self._require_project(project_id)
        employee = self._employees.get_by_id(employee_id)
        if employee is None:
            raise NotFoundError(f"Employee {employee_id} not found")

        if employee_id not in project.assigned_employees:
            self._projects.update(project_id, {"assigned_employees": [*project.assigned_employees, employee_id]})

        if project_id not in employee.assigned_projects:
            self._employees.update(
                employee_id,
                {
                    "assigned_projects": [*employee.assigned_projects, project_id],
                    "last_assigned_project": project_id,
                },
            )
        logger.info("Assigned employee %s to project %s", employee_id, project_id)

    def remove_employee(self, project_id: str, employee_id: str) -> None:
        project = self._require_project(project_id)
        if employee_id in project.assigned_employees:
            remaining = [e for e in project.assigned_employees if e != employee_id]
            self._projects.update(project_id, {"assigned_employees": remaining})

        self.detach_project(employee_id, project_id)
        logger.info("Removed employee %s from project %s", employee_id, project_id)

    def detach_project(self, employee_id: str, project_id: str) -> Optional[WriteResult]:
        employee = self._employees.get_by_id(employee_id)
        if employee is None:
            logger.warning("Employee %s no longer exists; nothing to detach from project %s", employee_id, project_id)
            return None
        if project_id not in employee.assigned_projects:
            return None
        return self._employees.update(
            employee_id,
            {"assigned_projects": [p for p in employee.assigned_projects if p != project_id]},
        )

    def release_employee(self, employee_id: str) -> None:
        """Drop an employee from every project that lists them."""
        for project in self._projects.get_all():
            if employee_id in project.assigned_employees:
                remaining = [e for e in project.assigned_employees if e != employee_id]
                self._projects.update(project.id, {"assigned_employees": remaining})

    def _require_project(self, project_id: str) -> Project:
        project = self._projects.get_by_id(project_id)
        if project is None:
            raise NotFoundError(f"Project {project_id} not found")
        return project


def selected_ids(payload: Mapping[str, Any], key: str = "employee_ids") -> list[str]:
    value = payload.get(key)
    if value is not None and not isinstance(value, (list, tuple)):
        raise ValidationError(f"{key} must be a list", {key: "Must be a list"})
    return id_list(value)
