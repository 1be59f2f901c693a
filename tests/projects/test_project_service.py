from __future__ import annotations

from datetime import date

import pytest

from src.personnel_admin.personnel_admin.clients.model import Client
from src.personnel_admin.personnel_admin.core.enums import ProjectStatus
from src.personnel_admin.personnel_admin.core.exceptions import NotFoundError, ValidationError
from src.personnel_admin.personnel_admin.employees.model import Employee
from src.personnel_admin.personnel_admin.projects.service import ProjectAssignmentService, ProjectService


@pytest.fixture
def assignments(project_gateway, employee_gateway):
    return ProjectAssignmentService(project_gateway, employee_gateway)


@pytest.fixture
def service(project_gateway, client_gateway, assignments):
    return ProjectService(project_gateway, client_gateway, assignments)


def test_create_project_parses_dates_and_status(service, project_gateway, client_gateway):
    client_id = client_gateway.create(Client(name="Minera Sur"))

    project_id = service.create_project(
        {
            "name": "Tailings dam",
            "client_id": client_id,
            "start_date": "2026-01-01",
            "end_date": "2026-12-31",
            "status": "on-hold",
        }
    )

    project = project_gateway.get_by_id(project_id)
    assert project.start_date == date(2026, 1, 1)
    assert project.status == ProjectStatus.ON_HOLD
    assert project.client_id == client_id


def test_end_date_before_start_is_rejected(service):
    with pytest.raises(ValidationError) as exc:
        service.create_project({"name": "X", "start_date": "2026-05-01", "end_date": "2026-04-30"})
    assert "end_date" in exc.value.errors


def test_name_status_and_client_are_validated(service):
    with pytest.raises(ValidationError) as exc:
        service.create_project({"name": " ", "status": "paused", "client_id": "ghost"})
    assert set(exc.value.errors) == {"name", "status", "client_id"}


def test_update_checks_dates_against_stored_values(service):
    project_id = service.create_project({"name": "X", "start_date": "2026-05-01"})

    with pytest.raises(ValidationError):
        service.update_project(project_id, {"end_date": "2026-01-01"})

    service.update_project(project_id, {"end_date": "2026-06-01", "status": "completed"})


def test_update_unknown_project_raises(service):
    with pytest.raises(NotFoundError):
        service.update_project("ghost", {"name": "Y"})


def test_deleting_a_project_detaches_its_employees(service, assignments, employee_gateway, project_gateway):
    employee_id = employee_gateway.create(Employee(given_names="Ana"))
    project_id = service.create_project({"name": "Short job"})
    assignments.assign_employee(project_id, employee_id)

    service.delete_project(project_id)

    assert project_gateway.get_by_id(project_id) is None
    assert employee_gateway.get_by_id(employee_id).assigned_projects == []


def test_release_employee_removes_them_from_every_project(service, assignments, employee_gateway, project_gateway):
    employee_id = employee_gateway.create(Employee(given_names="Ana"))
    p1 = service.create_project({"name": "One"})
    p2 = service.create_project({"name": "Two"})
    assignments.assign_employee(p1, employee_id)
    assignments.assign_employee(p2, employee_id)

    assignments.release_employee(employee_id)

    assert project_gateway.get_by_id(p1).assigned_employees == []
    assert project_gateway.get_by_id(p2).assigned_employees == []
