from __future__ import annotations

import io

import pytest
from werkzeug.security import generate_password_hash

from src.personnel_admin.personnel_admin.core.enums import Role
from src.personnel_admin.personnel_admin.employees.model import Employee
from src.personnel_admin.personnel_admin.main import create_app
from src.personnel_admin.personnel_admin.users.model import UserProfile

from tests.fakes import FailingStore, InMemoryDocumentStore


@pytest.fixture
def remote_stores():
    return {
        "employees": InMemoryDocumentStore(),
        "projects": InMemoryDocumentStore(),
        "clients": InMemoryDocumentStore(),
        "user_profiles": InMemoryDocumentStore(),
    }


@pytest.fixture
def app(monkeypatch, tmp_path, remote_stores, clock):
    monkeypatch.setenv("APP_ENV", "testing")
    return create_app(
        {
            "LOCAL_STORAGE_DIR": str(tmp_path / "cache"),
            "REMOTE_STORES": remote_stores,
            "REQUIRE_REMOTE_COLLECTIONS": ("employees",),
            "CLOCK": clock,
        }
    )


@pytest.fixture
def container(app):
    return app.extensions["personnel_admin"]


def _login(client, role: Role):
    with client.session_transaction() as sess:
        sess["user_id"] = "u1"
        sess["email"] = "user@example.com"
        sess["name"] = "Test User"
        sess["role"] = role.value


def test_unauthenticated_requests_redirect_to_auth(app):
    client = app.test_client()

    resp = client.get("/employees")

    assert resp.status_code == 302
    assert resp.headers["Location"].endswith("/auth")


def test_wrong_role_gets_403_naming_roles(app):
    client = app.test_client()
    _login(client, Role.VIEWER)

    resp = client.post("/projects", json={"name": "X"})

    assert resp.status_code == 403
    body = resp.get_json()
    assert body["required_roles"] == ["digitador", "administrador"]
    assert body["user_role"] == "consulta"


def test_viewer_can_read_lists(app):
    client = app.test_client()
    _login(client, Role.VIEWER)

    assert client.get("/employees").status_code == 200
    assert client.get("/projects").status_code == 200
    assert client.get("/clients").status_code == 200
    assert client.get("/reports").status_code == 403


def test_login_with_profile(app, container):
    container.users.create(
        UserProfile(email="ana@example.com", display_name="Ana", role=Role.ADMIN, password_hash=generate_password_hash("secret1"))
    )
    client = app.test_client()

    bad = client.post("/auth", json={"email": "ana@example.com", "password": "wrong"})
    good = client.post("/auth", json={"email": "ANA@example.com", "password": "secret1"})

    assert bad.status_code == 401
    assert good.status_code == 200
    assert good.get_json()["user"]["role"] == "administrador"
    assert client.get("/auth").get_json()["authenticated"] is True
    assert client.post("/logout").status_code == 200
    assert client.get("/employees").status_code == 302


def test_wizard_flow_creates_employee(app, remote_stores):
    client = app.test_client()
    _login(client, Role.DATA_ENTRY)
    step1 = {
        "dni": "12345678",
        "paternal_surname": "Quispe",
        "maternal_surname": "Mamani",
        "given_names": "Rosa",
        "position": "Operator",
        "hire_date": "2026-01-15",
    }

    bad = client.post("/employees/wizard", json={"action": "next", "data": {**step1, "dni": "12"}})
    assert bad.status_code == 400
    assert "dni" in bad.get_json()["errors"]

    first = client.post("/employees/wizard", json={"action": "next", "data": step1})
    assert first.status_code == 200
    employee_id = first.get_json()["employee_id"]
    assert first.get_json()["step"] == 2

    done = client.post(
        "/employees/wizard",
        json={"action": "finish", "employee_id": employee_id, "step": 2, "data": {"email": "rosa@example.com"}},
    )
    assert done.status_code == 200
    assert done.get_json()["redirect_to"] == "/employees"
    stored = remote_stores["employees"].docs[employee_id]
    assert stored["creation_step"] == 6
    assert stored["email"] == "rosa@example.com"


def test_assignments_endpoint_reconciles(app, container):
    a = container.employees.create(Employee(given_names="Ana"))
    b = container.employees.create(Employee(given_names="Beto"))
    client = app.test_client()
    _login(client, Role.ADMIN)
    project_id = client.post("/projects", json={"name": "P1"}).get_json()["id"]

    resp = client.put(f"/projects/{project_id}/assignments", json={"employee_ids": [a, b]})
    body = resp.get_json()

    assert resp.status_code == 200
    assert body["added"] == [a, b]
    assert body["project"]["assigned_employees"] == [a, b]
    assert body["partial"] is False

    resp = client.put(f"/projects/{project_id}/assignments", json={"employee_ids": [b, "ghost"]})
    body = resp.get_json()
    assert body["removed"] == [a]
    assert body["partial"] is True
    assert body["failures"][0]["employee_id"] == "ghost"


def test_only_admin_deletes_employees(app, container):
    employee_id = container.employees.create(Employee(given_names="Ana"))
    client = app.test_client()

    _login(client, Role.DATA_ENTRY)
    assert client.delete(f"/employees/{employee_id}").status_code == 403

    _login(client, Role.ADMIN)
    assert client.delete(f"/employees/{employee_id}").status_code == 200
    assert client.get(f"/employees/{employee_id}").status_code == 404


def test_photo_upload_validates_type(app, container):
    employee_id = container.employees.create(Employee(given_names="Ana"))
    client = app.test_client()
    _login(client, Role.DATA_ENTRY)

    bad = client.post(
        f"/employees/{employee_id}/photo",
        data={"photo": (io.BytesIO(b"%PDF"), "cv.pdf", "application/pdf")},
        content_type="multipart/form-data",
    )
    good = client.post(
        f"/employees/{employee_id}/photo",
        data={"photo": (io.BytesIO(b"\x89PNG"), "me.png", "image/png")},
        content_type="multipart/form-data",
    )

    assert bad.status_code == 400
    assert good.status_code == 200
    assert container.employees.get_by_id(employee_id).photo_url.startswith("data:image/png;base64,")


def test_report_preview_and_exports(app, container):
    client = app.test_client()
    _login(client, Role.DATA_ENTRY)
    for i in range(12):
        client.post("/clients", json={"name": f"Client {i:02d}"})

    first = client.get("/reports?type=clients&page=2").get_json()
    assert first["total_items"] == 12
    assert first["page"] == 1

    second = client.get("/reports?type=clients&page=2").get_json()
    assert second["page"] == 2
    assert len(second["rows"]) == 2

    export = client.get("/reports/export?type=clients")
    assert export.status_code == 200
    assert "clients-report-2026-10-17.xlsx" in export.headers["Content-Disposition"]

    complete = client.get("/reports/export/complete")
    assert complete.status_code == 200
    assert "complete-report-2026-10-17.xlsx" in complete.headers["Content-Disposition"]


def test_missing_remote_for_strict_collection_returns_503(monkeypatch, tmp_path, clock):
    monkeypatch.setenv("APP_ENV", "testing")
    app = create_app(
        {
            "LOCAL_STORAGE_DIR": str(tmp_path / "cache"),
            "REMOTE_STORES": {},
            "REQUIRE_REMOTE_COLLECTIONS": ("employees",),
            "CLOCK": clock,
        }
    )
    client = app.test_client()
    _login(client, Role.VIEWER)

    resp = client.get("/employees")

    assert resp.status_code == 503
    assert "configuration" in resp.get_json()["message"]
    assert client.get("/projects").status_code == 200


def test_degraded_write_carries_a_warning(monkeypatch, tmp_path, clock):
    monkeypatch.setenv("APP_ENV", "testing")
    app = create_app(
        {
            "LOCAL_STORAGE_DIR": str(tmp_path / "cache"),
            "REMOTE_STORES": {"clients": FailingStore(), "projects": FailingStore()},
            "CLOCK": clock,
        }
    )
    client = app.test_client()
    _login(client, Role.ADMIN)

    client_id = client.post("/clients", json={"name": "Offline SA"}).get_json()["id"]
    resp = client.patch(f"/clients/{client_id}", json={"ruc": "20999999999"})

    assert resp.status_code == 200
    assert resp.get_json()["backend"] == "local"
    assert "local cache" in resp.get_json()["warning"]


def test_new_wizard_cannot_skip_the_basic_step(app, remote_stores):
    client = app.test_client()
    _login(client, Role.DATA_ENTRY)

    resp = client.post("/employees/wizard", json={"action": "next", "step": 6, "data": {}})

    assert resp.status_code == 400
    assert "step" in resp.get_json()["errors"]
    assert remote_stores["employees"].docs == {}


def test_editing_wizard_cannot_jump_ahead_of_saved_progress(app, container, remote_stores, step1_data):
    employee_id = container.employees.create(Employee.from_document(None, step1_data))
    client = app.test_client()
    _login(client, Role.DATA_ENTRY)

    jump = client.post("/employees/wizard", json={"action": "next", "employee_id": employee_id, "step": 5, "data": {}})
    assert jump.status_code == 400
    assert remote_stores["employees"].docs[employee_id]["creation_step"] == 1

    resp = client.post(
        "/employees/wizard",
        json={"action": "next", "employee_id": employee_id, "step": 2, "data": {"email": "rosa@example.com"}},
    )
    assert resp.status_code == 200
    assert resp.get_json()["step"] == 3
    assert remote_stores["employees"].docs[employee_id]["creation_step"] == 2


def test_wizard_rejects_another_employees_code(app, container, remote_stores, step1_data):
    container.employees.create(Employee(given_names="Ana", employee_code="EMP0001"))
    employee_id = container.employees.create(Employee.from_document(None, {**step1_data, "employee_code": "EMP0002"}))
    client = app.test_client()
    _login(client, Role.DATA_ENTRY)

    resp = client.post(
        "/employees/wizard",
        json={"action": "next", "employee_id": employee_id, "data": {"employee_code": "EMP0001"}},
    )

    assert resp.status_code == 400
    assert "employee_code" in resp.get_json()["errors"]
    codes = sorted(doc["employee_code"] for doc in remote_stores["employees"].docs.values())
    assert codes == ["EMP0001", "EMP0002"]


def test_admin_manages_user_profiles(app, container, remote_stores):
    clerk_id = container.user_service.create_profile(
        email="clerk@example.com", display_name="Clerk", password="secret1", role=Role.VIEWER
    )
    client = app.test_client()
    _login(client, Role.ADMIN)

    resp = client.patch(f"/users/{clerk_id}", json={"role": "digitador", "is_active": False})
    assert resp.status_code == 200
    stored = remote_stores["user_profiles"].docs[clerk_id]
    assert stored["role"] == "digitador"
    assert stored["is_active"] is False

    assert client.patch(f"/users/{clerk_id}", json={"role": "root"}).status_code == 400
    assert client.delete(f"/users/{clerk_id}").status_code == 200
    assert clerk_id not in remote_stores["user_profiles"].docs


def test_admin_cannot_delete_own_profile(app, container, remote_stores):
    admin_id = container.user_service.create_profile(
        email="admin@example.com", display_name="Admin", password="secret1", role=Role.ADMIN
    )
    client = app.test_client()
    _login(client, Role.ADMIN)
    with client.session_transaction() as sess:
        sess["user_id"] = admin_id

    resp = client.delete(f"/users/{admin_id}")

    assert resp.status_code == 403
    assert resp.get_json()["error"] == "forbidden"
    assert admin_id in remote_stores["user_profiles"].docs


def test_user_management_is_admin_only(app):
    client = app.test_client()
    _login(client, Role.DATA_ENTRY)

    assert client.patch("/users/x", json={"role": "administrador"}).status_code == 403
    assert client.delete("/users/x").status_code == 403
