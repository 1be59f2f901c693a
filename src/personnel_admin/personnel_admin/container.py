from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Iterable, Mapping, Optional

from .clients.gateway import ClientGateway
from .clients.service import ClientService
from .common.datetime_utils import now_local
from .core.constants import (
    CLIENTS_COLLECTION,
    CLIENTS_STORAGE_KEY,
    EMPLOYEES_COLLECTION,
    EMPLOYEES_STORAGE_KEY,
    PROJECTS_COLLECTION,
    PROJECTS_STORAGE_KEY,
    USERS_COLLECTION,
    USERS_STORAGE_KEY,
)
from .employees.gateway import EmployeeGateway
from .employees.service import EmployeeService
from .projects.gateway import ProjectGateway
from .projects.reconciler import AssignmentReconciler
from .projects.service import ProjectAssignmentService, ProjectService
from .reports.service import ReportService
from .storage.base import DocumentStore
from .storage.connection import DBConfig, DatabaseConnection
from .storage.local_store import LocalDocumentStore
from .storage.mysql_document_store import MySQLDocumentStore
from .users.gateway import UserGateway
from .users.service import AuthService, UserService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    employees: EmployeeGateway
    projects: ProjectGateway
    clients: ClientGateway
    users: UserGateway

    auth_service: AuthService
    user_service: UserService
    employee_service: EmployeeService
    project_service: ProjectService
    client_service: ClientService
    assignment_service: ProjectAssignmentService
    reconciler: AssignmentReconciler
    report_service: ReportService

    @property
    def gateways(self) -> tuple:
        return (self.employees, self.projects, self.clients, self.users)


def build_container(
    *,
    db_config: Optional[dict],
    local_storage_dir: str,
    require_remote: Iterable[str] = (),
    remote_stores: Optional[Mapping[str, DocumentStore]] = None,
    clock: Callable[[], datetime] = now_local,
) -> Container:
    """Wire stores, gateways and services.

    The remote store is chosen once here: MySQL when ``db_config`` is set,
    ``remote_stores`` when given (tests), otherwise local cache only.
    """
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config)) if db_config else None
    required = set(require_remote)

    def remote_for(collection: str) -> Optional[DocumentStore]:
        if remote_stores is not None:
            return remote_stores.get(collection)
        if conn is not None:
            return MySQLDocumentStore(conn, collection)
        return None

    def local_for(key: str) -> LocalDocumentStore:
        return LocalDocumentStore(local_storage_dir, key)

    if conn is None and remote_stores is None:
        logger.warning("No remote store configured; data is kept in the local cache at %s", local_storage_dir)

    employees = EmployeeGateway(
        local_for(EMPLOYEES_STORAGE_KEY),
        remote_for(EMPLOYEES_COLLECTION),
        require_remote=EMPLOYEES_COLLECTION in required,
        clock=clock,
    )
    projects = ProjectGateway(
        local_for(PROJECTS_STORAGE_KEY),
        remote_for(PROJECTS_COLLECTION),
        require_remote=PROJECTS_COLLECTION in required,
        clock=clock,
    )
    clients = ClientGateway(
        local_for(CLIENTS_STORAGE_KEY),
        remote_for(CLIENTS_COLLECTION),
        require_remote=CLIENTS_COLLECTION in required,
        clock=clock,
    )
    users = UserGateway(
        local_for(USERS_STORAGE_KEY),
        remote_for(USERS_COLLECTION),
        require_remote=USERS_COLLECTION in required,
        clock=clock,
    )

    assignment_service = ProjectAssignmentService(projects, employees)

    return Container(
        conn=conn,
        employees=employees,
        projects=projects,
        clients=clients,
        users=users,
        auth_service=AuthService(users, clock=clock),
        user_service=UserService(users),
        employee_service=EmployeeService(employees, assignment_service),
        project_service=ProjectService(projects, clients, assignment_service),
        client_service=ClientService(clients, projects),
        assignment_service=assignment_service,
        reconciler=AssignmentReconciler(assignment_service, projects),
        report_service=ReportService(employees, projects, clients, clock=clock),
    )
