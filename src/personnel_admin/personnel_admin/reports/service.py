"""Cross-entity reports: employees, projects and clients joined into flat,
labelled rows ready for preview or export."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Callable, Mapping, Optional, Sequence

from ..clients.gateway import ClientGateway
from ..clients.model import Client
from ..common.datetime_utils import calculate_age, format_display_date, now_local
from ..common.documents import text
from ..common.payloads import optional_date
from ..core.constants import NONE_LABEL, NOT_AVAILABLE, REPORT_JOIN_DELIMITER
from ..core.enums import ProjectStatus, ReportType
from ..core.exceptions import ValidationError
from ..employees.gateway import EmployeeGateway
from ..employees.model import Employee
from ..projects.gateway import ProjectGateway
from ..projects.model import Project
from .excel import export_filename, write_workbook

logger = logging.getLogger(__name__)

EMPLOYEE_COLUMNS = (
    "Employee Code",
    "DNI",
    "Paternal Surname",
    "Maternal Surname",
    "Given Names",
    "Birth Date",
    "Age",
    "Hire Date",
    "Position",
    "Labor Regime",
    "Civil Status",
    "Mobile Phone",
    "Landline Phone",
    "Email",
    "Address",
    "Address Reference",
    "Sex",
    "Status",
    "Assigned Projects",
    "Project Count",
)

PROJECT_COLUMNS = (
    "Project Name",
    "Contract",
    "Client",
    "Client RUC",
    "Status",
    "Start Date",
    "End Date",
    "Assigned Employees",
    "Employee Count",
    "Description",
)

CLIENT_COLUMNS = (
    "Client Name",
    "RUC",
    "Email",
    "Phone",
    "Address",
    "Active Projects",
    "Completed Projects",
    "On-Hold Projects",
    "Total Projects",
    "Project List",
    "Created",
)

SUMMARY_COLUMNS = ("Metric", "Value", "Active", "With Projects", "Time")

COLUMNS = {
    ReportType.EMPLOYEES: EMPLOYEE_COLUMNS,
    ReportType.PROJECTS: PROJECT_COLUMNS,
    ReportType.CLIENTS: CLIENT_COLUMNS,
}

SHEET_NAMES = {
    ReportType.EMPLOYEES: "Employees",
    ReportType.PROJECTS: "Projects",
    ReportType.CLIENTS: "Clients",
}
SUMMARY_SHEET = "Summary"

STATUS_LABELS = {
    ProjectStatus.ACTIVE: "Active",
    ProjectStatus.COMPLETED: "Completed",
    ProjectStatus.ON_HOLD: "On Hold",
}


@dataclass(frozen=True)
class ReportFilters:
    project_id: str = ""
    client_id: str = ""
    status: str = ""
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    @classmethod
    def from_mapping(cls, args: Mapping[str, Any]) -> "ReportFilters":
        status = text(args, "status").strip()
        if status and status not in {s.value for s in ProjectStatus}:
            raise ValidationError("Unknown project status", {"status": "Unknown status"})
        return cls(
            project_id=text(args, "project_id").strip(),
            client_id=text(args, "client_id").strip(),
            status=status,
            start_date=optional_date(args, "start_date"),
            end_date=optional_date(args, "end_date"),
        )

    def as_dict(self) -> dict:
        return {
            "project_id": self.project_id,
            "client_id": self.client_id,
            "status": self.status,
            "start_date": self.start_date.isoformat() if self.start_date else "",
            "end_date": self.end_date.isoformat() if self.end_date else "",
        }


def parse_report_type(value: Optional[str]) -> ReportType:
    try:
        return ReportType((value or ReportType.EMPLOYEES.value).strip())
    except ValueError:
        raise ValidationError(
            "Unknown report type",
            {"type": "Must be one of: " + ", ".join(t.value for t in ReportType)},
        )


def _in_range(value: Optional[date], start: Optional[date], end: Optional[date]) -> bool:
    if start is None and end is None:
        return True
    if value is None:
        return False
    if start is not None and value < start:
        return False
    if end is not None and value > end:
        return False
    return True


def _joined(values: Sequence[str]) -> str:
    return REPORT_JOIN_DELIMITER.join(values) or NONE_LABEL


class ReportBuilder:
    """Pure join/filter logic over collections already loaded by the gateways."""

    def __init__(self, *, clock: Callable[[], datetime] = now_local):
        self._clock = clock

    def build(
        self,
        report_type: ReportType,
        employees: Sequence[Employee],
        projects: Sequence[Project],
        clients: Sequence[Client],
        filters: Optional[ReportFilters] = None,
    ) -> list[dict]:
        filters = filters or ReportFilters()
        if report_type == ReportType.EMPLOYEES:
            return self.employee_rows(employees, projects, filters)
        if report_type == ReportType.PROJECTS:
            return self.project_rows(projects, employees, clients, filters)
        return self.client_rows(clients, projects, filters)

    def employee_rows(
        self,
        employees: Sequence[Employee],
        projects: Sequence[Project],
        filters: Optional[ReportFilters] = None,
    ) -> list[dict]:
        filters = filters or ReportFilters()
        today = self._clock().date()
        names = {p.id: p.name for p in projects}

        rows = []
        for e in employees:
            if filters.project_id and filters.project_id not in e.assigned_projects:
                continue
            if not _in_range(e.hire_date, filters.start_date, filters.end_date):
                continue

            project_names = [names[pid] for pid in e.assigned_projects if names.get(pid)]
            age = calculate_age(e.birth_date, today)
            rows.append(
                {
                    "Employee Code": e.employee_code,
                    "DNI": e.dni,
                    "Paternal Surname": e.paternal_surname,
                    "Maternal Surname": e.maternal_surname,
                    "Given Names": e.given_names,
                    "Birth Date": format_display_date(e.birth_date),
                    "Age": age if age is not None else "",
                    "Hire Date": format_display_date(e.hire_date),
                    "Position": e.position,
                    "Labor Regime": e.labor_regime,
                    "Civil Status": e.civil_status,
                    "Mobile Phone": e.mobile_phone,
                    "Landline Phone": e.landline_phone,
                    "Email": e.email,
                    "Address": e.address,
                    "Address Reference": e.address_reference,
                    "Sex": e.sex,
                    "Status": "Active" if e.is_active else "Inactive",
                    "Assigned Projects": _joined(project_names),
                    "Project Count": len(e.assigned_projects),
                }
            )
        return rows

    def project_rows(
        self,
        projects: Sequence[Project],
        employees: Sequence[Employee],
        clients: Sequence[Client],
        filters: Optional[ReportFilters] = None,
    ) -> list[dict]:
        filters = filters or ReportFilters()
        by_employee = {e.id: e for e in employees}
        by_client = {c.id: c for c in clients}

        rows = []
        for p in projects:
            if filters.client_id and p.client_id != filters.client_id:
                continue
            if filters.status and p.status.value != filters.status:
                continue
            if not _in_range(p.start_date, filters.start_date, filters.end_date):
                continue

            client = by_client.get(p.client_id)
            staff = [by_employee[eid].display_name for eid in p.assigned_employees if eid in by_employee]
            rows.append(
                {
                    "Project Name": p.name,
                    "Contract": p.contract,
                    "Client": (client.name if client else "") or NOT_AVAILABLE,
                    "Client RUC": (client.ruc if client else "") or NOT_AVAILABLE,
                    "Status": STATUS_LABELS.get(p.status, p.status.value),
                    "Start Date": format_display_date(p.start_date),
                    "End Date": format_display_date(p.end_date),
                    "Assigned Employees": _joined(staff),
                    "Employee Count": len(p.assigned_employees),
                    "Description": p.description,
                }
            )
        return rows

    def client_rows(
        self,
        clients: Sequence[Client],
        projects: Sequence[Project],
        filters: Optional[ReportFilters] = None,
    ) -> list[dict]:
        filters = filters or ReportFilters()

        rows = []
        for c in clients:
            if filters.client_id and c.id != filters.client_id:
                continue

            owned = [p for p in projects if p.client_id == c.id]
            counts = {s: sum(1 for p in owned if p.status == s) for s in ProjectStatus}
            rows.append(
                {
                    "Client Name": c.name,
                    "RUC": c.ruc,
                    "Email": c.contact_info.email,
                    "Phone": c.contact_info.phone,
                    "Address": c.contact_info.address,
                    "Active Projects": counts[ProjectStatus.ACTIVE],
                    "Completed Projects": counts[ProjectStatus.COMPLETED],
                    "On-Hold Projects": counts[ProjectStatus.ON_HOLD],
                    "Total Projects": len(owned),
                    "Project List": _joined([p.name for p in owned]),
                    "Created": format_display_date(c.created_at.date()) if c.created_at else NOT_AVAILABLE,
                }
            )
        return rows

    def summary_rows(
        self,
        employees: Sequence[Employee],
        projects: Sequence[Project],
        clients: Sequence[Client],
    ) -> list[dict]:
        now = self._clock()
        owners = {p.client_id for p in projects if p.client_id}
        return [
            {
                "Metric": "Total Employees",
                "Value": len(employees),
                "Active": sum(1 for e in employees if e.is_active),
            },
            {
                "Metric": "Total Projects",
                "Value": len(projects),
                "Active": sum(1 for p in projects if p.status == ProjectStatus.ACTIVE),
            },
            {
                "Metric": "Total Clients",
                "Value": len(clients),
                "With Projects": sum(1 for c in clients if c.id in owners),
            },
            {
                "Metric": "Report Date",
                "Value": format_display_date(now.date()),
                "Time": now.strftime("%H:%M:%S"),
            },
        ]

    def complete(
        self,
        employees: Sequence[Employee],
        projects: Sequence[Project],
        clients: Sequence[Client],
    ) -> dict[str, list[dict]]:
        """All four sheets in one pass, unfiltered."""
        return {
            SHEET_NAMES[ReportType.EMPLOYEES]: self.employee_rows(employees, projects),
            SHEET_NAMES[ReportType.PROJECTS]: self.project_rows(projects, employees, clients),
            SHEET_NAMES[ReportType.CLIENTS]: self.client_rows(clients, projects),
            SUMMARY_SHEET: self.summary_rows(employees, projects, clients),
        }


@dataclass(frozen=True)
class ExportFile:
    filename: str
    content: bytes


class ReportService:
    """Loads the three collections through the gateways and hands them to the builder."""

    def __init__(
        self,
        employees: EmployeeGateway,
        projects: ProjectGateway,
        clients: ClientGateway,
        *,
        builder: Optional[ReportBuilder] = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._employees = employees
        self._projects = projects
        self._clients = clients
        self._builder = builder or ReportBuilder(clock=clock)
        self._clock = clock

    def _load(self) -> tuple[list[Employee], list[Project], list[Client]]:
        employees = self._employees.get_all()
        projects = self._projects.get_all()
        clients = self._clients.get_all()
        logger.debug(
            "Report data loaded: %s employees, %s projects, %s clients",
            len(employees),
            len(projects),
            len(clients),
        )
        return employees, projects, clients

    def rows(self, report_type: ReportType, filters: Optional[ReportFilters] = None) -> list[dict]:
        employees, projects, clients = self._load()
        return self._builder.build(report_type, employees, projects, clients, filters)

    def summary(self) -> list[dict]:
        return self._builder.summary_rows(*self._load())

    def overview(
        self, report_type: ReportType, filters: Optional[ReportFilters] = None
    ) -> tuple[list[dict], list[dict]]:
        """Report rows and the summary from a single load of the collections."""
        employees, projects, clients = self._load()
        rows = self._builder.build(report_type, employees, projects, clients, filters)
        return rows, self._builder.summary_rows(employees, projects, clients)

    def export(self, report_type: ReportType, filters: Optional[ReportFilters] = None) -> ExportFile:
        rows = self.rows(report_type, filters)
        content = write_workbook({SHEET_NAMES[report_type]: (COLUMNS[report_type], rows)})
        return ExportFile(export_filename(report_type.value, self._clock().date()), content)

    def export_complete(self) -> ExportFile:
        sheets = self._builder.complete(*self._load())
        columns = {
            SHEET_NAMES[ReportType.EMPLOYEES]: EMPLOYEE_COLUMNS,
            SHEET_NAMES[ReportType.PROJECTS]: PROJECT_COLUMNS,
            SHEET_NAMES[ReportType.CLIENTS]: CLIENT_COLUMNS,
            SUMMARY_SHEET: SUMMARY_COLUMNS,
        }
        content = write_workbook({name: (columns[name], rows) for name, rows in sheets.items()})
        return ExportFile(export_filename("complete", self._clock().date()), content)
