from __future__ import annotations

from datetime import date, datetime

import pytest

from src.personnel_admin.personnel_admin.clients.model import Client
from src.personnel_admin.personnel_admin.core.enums import ProjectStatus, ReportType
from src.personnel_admin.personnel_admin.core.exceptions import ValidationError
from src.personnel_admin.personnel_admin.employees.model import Employee
from src.personnel_admin.personnel_admin.projects.model import Project
from src.personnel_admin.personnel_admin.reports.service import (
    EMPLOYEE_COLUMNS,
    ReportBuilder,
    ReportFilters,
    ReportService,
    parse_report_type,
)


@pytest.fixture
def builder(clock):
    return ReportBuilder(clock=clock)


@pytest.fixture
def data():
    employees = [
        Employee(
            id="e1",
            employee_code="EMP0001",
            paternal_surname="Quispe",
            maternal_surname="Mamani",
            given_names="Rosa",
            birth_date=date(2001, 10, 17),
            hire_date=date(2026, 1, 10),
            assigned_projects=["p1"],
        ),
        Employee(
            id="e2",
            employee_code="EMP0002",
            paternal_surname="Huaman",
            maternal_surname="Torres",
            given_names="Luis",
            birth_date=date(2001, 10, 18),
            hire_date=date(2026, 3, 1),
            assigned_projects=["p1", "p2"],
            is_active=False,
        ),
        Employee(id="e3", employee_code="EMP0003", paternal_surname="Rojas", given_names="Ana"),
    ]
    projects = [
        Project(
            id="p1",
            name="P1",
            client_id="c1",
            status=ProjectStatus.ACTIVE,
            start_date=date(2026, 2, 1),
            assigned_employees=["e1", "e2"],
        ),
        Project(id="p2", name="P2", client_id="c1", status=ProjectStatus.ON_HOLD, assigned_employees=["e2"]),
        Project(id="p3", name="P3", client_id="missing", status=ProjectStatus.COMPLETED),
    ]
    clients = [
        Client(id="c1", name="Minera Sur", ruc="20123456789", created_at=datetime(2026, 1, 5, 8, 0)),
        Client(id="c2", name="Sin Obras"),
    ]
    return employees, projects, clients


def test_project_row_lists_assigned_employees(builder, data):
    employees, projects, clients = data

    rows = builder.project_rows(projects, employees, clients)

    p1 = rows[0]
    assert p1["Project Name"] == "P1"
    assert p1["Assigned Employees"] == "Quispe Mamani, Rosa; Huaman Torres, Luis"
    assert p1["Employee Count"] == 2
    assert p1["Client"] == "Minera Sur"
    assert p1["Client RUC"] == "20123456789"
    assert p1["Status"] == "Active"
    assert p1["Start Date"] == "01/02/2026"


def test_unknown_client_and_empty_staff_show_placeholders(builder, data):
    employees, projects, clients = data

    p3 = builder.project_rows(projects, employees, clients)[2]

    assert p3["Client"] == "N/A"
    assert p3["Client RUC"] == "N/A"
    assert p3["Assigned Employees"] == "None"
    assert p3["Employee Count"] == 0


def test_employee_rows_resolve_project_names_and_age(builder, data):
    employees, projects, _ = data

    rows = builder.employee_rows(employees, projects)

    assert list(rows[0]) == list(EMPLOYEE_COLUMNS)
    assert rows[0]["Assigned Projects"] == "P1"
    assert rows[0]["Age"] == 25
    assert rows[1]["Assigned Projects"] == "P1; P2"
    assert rows[1]["Age"] == 24
    assert rows[1]["Status"] == "Inactive"
    assert rows[2]["Assigned Projects"] == "None"
    assert rows[2]["Age"] == ""


def test_employee_filters_by_project_and_hire_date(builder, data):
    employees, projects, clients = data

    by_project = builder.employee_rows(employees, projects, ReportFilters(project_id="p2"))
    by_range = builder.employee_rows(
        employees, projects, ReportFilters(start_date=date(2026, 2, 1), end_date=date(2026, 12, 31))
    )

    assert [r["Employee Code"] for r in by_project] == ["EMP0002"]
    assert [r["Employee Code"] for r in by_range] == ["EMP0002"]


def test_filtering_is_idempotent(builder, data):
    employees, projects, clients = data
    filters = ReportFilters(client_id="c1", status="active")

    first = builder.build(ReportType.PROJECTS, employees, projects, clients, filters)
    second = builder.build(ReportType.PROJECTS, employees, projects, clients, filters)

    assert first == second
    assert [r["Project Name"] for r in first] == ["P1"]


def test_client_rows_count_projects_by_status(builder, data):
    employees, projects, clients = data

    rows = builder.client_rows(clients, projects)

    c1, c2 = rows
    assert (c1["Active Projects"], c1["Completed Projects"], c1["On-Hold Projects"], c1["Total Projects"]) == (1, 0, 1, 2)
    assert c1["Project List"] == "P1; P2"
    assert c1["Created"] == "05/01/2026"
    assert c2["Total Projects"] == 0
    assert c2["Project List"] == "None"
    assert c2["Created"] == "N/A"


def test_summary_rows(builder, data):
    employees, projects, clients = data

    summary = builder.summary_rows(employees, projects, clients)

    assert summary[0] == {"Metric": "Total Employees", "Value": 3, "Active": 2}
    assert summary[1] == {"Metric": "Total Projects", "Value": 3, "Active": 1}
    assert summary[2] == {"Metric": "Total Clients", "Value": 2, "With Projects": 1}
    assert summary[3]["Value"] == "17/10/2026"
    assert summary[3]["Time"] == "09:30:00"


def test_complete_report_has_four_sheets(builder, data):
    sheets = builder.complete(*data)

    assert list(sheets) == ["Employees", "Projects", "Clients", "Summary"]


def test_filters_parse_request_args():
    filters = ReportFilters.from_mapping({"client_id": "c1", "start_date": "2026-01-01", "status": "completed"})

    assert filters.start_date == date(2026, 1, 1)
    assert filters.status == "completed"
    with pytest.raises(ValidationError):
        ReportFilters.from_mapping({"start_date": "01/01/2026"})
    with pytest.raises(ValidationError):
        ReportFilters.from_mapping({"status": "paused"})


def test_parse_report_type():
    assert parse_report_type(None) == ReportType.EMPLOYEES
    assert parse_report_type("clients") == ReportType.CLIENTS
    with pytest.raises(ValidationError):
        parse_report_type("payroll")


def test_overview_reads_each_collection_once(
    employee_gateway, project_gateway, client_gateway, remote_employees, remote_projects, remote_clients, clock
):
    employee_gateway.create(Employee(paternal_surname="Quispe", given_names="Rosa"))
    for store in (remote_employees, remote_projects, remote_clients):
        store.list_calls = 0

    service = ReportService(employee_gateway, project_gateway, client_gateway, clock=clock)
    rows, summary = service.overview(ReportType.EMPLOYEES)

    assert len(rows) == 1
    assert summary[0] == {"Metric": "Total Employees", "Value": 1, "Active": 1}
    assert [s.list_calls for s in (remote_employees, remote_projects, remote_clients)] == [1, 1, 1]
