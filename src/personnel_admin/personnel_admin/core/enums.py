from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Roles used by the route guards."""

    ADMIN = "administrador"
    DATA_ENTRY = "digitador"
    VIEWER = "consulta"


class ProjectStatus(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    ON_HOLD = "on-hold"


class ReportType(str, Enum):
    EMPLOYEES = "employees"
    PROJECTS = "projects"
    CLIENTS = "clients"


class Backend(str, Enum):
    """Where a write actually landed."""

    REMOTE = "remote"
    LOCAL = "local"
