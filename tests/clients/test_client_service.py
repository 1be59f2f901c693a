from __future__ import annotations

import pytest

from src.personnel_admin.personnel_admin.clients.service import ClientService
from src.personnel_admin.personnel_admin.core.exceptions import NotFoundError, ValidationError
from src.personnel_admin.personnel_admin.projects.model import Project


@pytest.fixture
def service(client_gateway, project_gateway):
    return ClientService(client_gateway, project_gateway)


def test_create_client_with_contact_info(service, client_gateway):
    client_id = service.create_client(
        {"name": "Minera Sur", "ruc": "20123456789", "contact_info": {"email": "ops@minerasur.pe", "phone": "01-555"}}
    )

    client = client_gateway.get_by_id(client_id)
    assert client.ruc == "20123456789"
    assert client.contact_info.email == "ops@minerasur.pe"


def test_invalid_email_and_missing_name_are_rejected(service):
    with pytest.raises(ValidationError) as exc:
        service.create_client({"name": "", "contact_info": {"email": "nope"}})
    assert set(exc.value.errors) == {"name", "contact_info.email"}


def test_client_search_covers_name_email_phone_and_ruc(service, client_gateway):
    service.create_client({"name": "Minera Sur", "ruc": "20123456789", "contact_info": {"phone": "01-555"}})
    service.create_client({"name": "Constructora Norte", "contact_info": {"email": "info@norte.pe"}})

    assert [c.name for c in client_gateway.search("NORTE.PE")] == ["Constructora Norte"]
    assert [c.name for c in client_gateway.search("201234")] == ["Minera Sur"]
    assert [c.name for c in client_gateway.search("01-5")] == ["Minera Sur"]


def test_client_with_projects_cannot_be_deleted(service, project_gateway):
    client_id = service.create_client({"name": "Minera Sur"})
    project_gateway.create(Project(name="Dam", client_id=client_id))

    with pytest.raises(ValidationError):
        service.delete_client(client_id)


def test_update_and_delete(service, client_gateway):
    client_id = service.create_client({"name": "Old name"})

    service.update_client(client_id, {"name": "New name"})
    assert client_gateway.get_by_id(client_id).name == "New name"

    service.delete_client(client_id)
    with pytest.raises(NotFoundError):
        service.delete_client(client_id)
