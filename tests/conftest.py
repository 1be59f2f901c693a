from __future__ import annotations

from datetime import datetime

import pytest

from src.personnel_admin.personnel_admin.clients.gateway import ClientGateway
from src.personnel_admin.personnel_admin.employees.gateway import EmployeeGateway
from src.personnel_admin.personnel_admin.projects.gateway import ProjectGateway
from src.personnel_admin.personnel_admin.storage.local_store import LocalDocumentStore

from tests.fakes import FixedClock, InMemoryDocumentStore


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 10, 17, 9, 30, 0)


@pytest.fixture
def clock(fixed_now) -> FixedClock:
    return FixedClock(fixed_now)


@pytest.fixture
def cache_dir(tmp_path):
    return tmp_path / "local_storage"


@pytest.fixture
def remote_employees() -> InMemoryDocumentStore:
    return InMemoryDocumentStore()


@pytest.fixture
def remote_projects() -> InMemoryDocumentStore:
    return InMemoryDocumentStore()


@pytest.fixture
def remote_clients() -> InMemoryDocumentStore:
    return InMemoryDocumentStore()


@pytest.fixture
def employee_gateway(cache_dir, remote_employees, clock) -> EmployeeGateway:
    return EmployeeGateway(LocalDocumentStore(cache_dir, "employees-data"), remote_employees, clock=clock)


@pytest.fixture
def project_gateway(cache_dir, remote_projects, clock) -> ProjectGateway:
    return ProjectGateway(LocalDocumentStore(cache_dir, "projects-data"), remote_projects, clock=clock)


@pytest.fixture
def client_gateway(cache_dir, remote_clients, clock) -> ClientGateway:
    return ClientGateway(LocalDocumentStore(cache_dir, "clients-data"), remote_clients, clock=clock)


@pytest.fixture
def step1_data() -> dict:
    return {
        "dni": "12345678",
        "paternal_surname": "Quispe",
        "maternal_surname": "Mamani",
        "given_names": "Rosa Elena",
        "position": "Operator",
        "hire_date": "2026-01-15",
    }
