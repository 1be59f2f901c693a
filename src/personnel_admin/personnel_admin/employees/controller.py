from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.documents import int_or, text
from ..common.payloads import as_bool
from ..core.enums import Role
from ..core.exceptions import NotFoundError, UploadError, ValidationError
from ..container import Container
from ..web.guards import EDITORS, login_required, roles_required
from ..web.responses import entity_payload, json_body, write_payload
from .wizard import EmployeeWizard


def register(app: Flask, container: Container) -> None:
    employees = container.employees

    def _employee_json(employee) -> dict:
        body = entity_payload(employee)
        body["age"] = employees.calculate_age(employee)
        return body

    @app.route("/employees", methods=["GET"], endpoint="list_employees")
    @login_required
    def list_employees():
        items = employees.search(request.args.get("q", ""))
        if "active" in request.args:
            wanted = as_bool(request.args.get("active"))
            items = [e for e in items if e.is_active == wanted]
        return jsonify([_employee_json(e) for e in items])

    @app.route("/employees/<employee_id>", methods=["GET"], endpoint="get_employee")
    @login_required
    def get_employee(employee_id: str):
        employee = employees.get_by_id(employee_id)
        if employee is None:
            raise NotFoundError(f"Employee {employee_id} not found")
        return jsonify(_employee_json(employee))

    @app.route("/employees/wizard/<employee_id>", methods=["GET"], endpoint="resume_wizard")
    @roles_required(*EDITORS)
    def resume_wizard(employee_id: str):
        wizard = EmployeeWizard.resume(employees, employee_id)
        return jsonify(_wizard_state(wizard))

    @app.route("/employees/wizard", methods=["POST"], endpoint="employee_wizard")
    @roles_required(*EDITORS)
    def employee_wizard():
        payload = json_body()
        action = text(payload, "action", "next")
        employee_id = text(payload, "employee_id").strip() or None
        wizard = EmployeeWizard.restore(employees, employee_id, payload.get("step"))

        data = payload.get("data") or {}
        if not isinstance(data, dict):
            raise ValidationError("data must be an object", {"data": "Must be an object"})
        wizard.update(data)

        if action == "next":
            progress = wizard.next()
            return jsonify(write_payload(progress.write, **_wizard_state(wizard)))
        if action == "previous":
            wizard.previous()
            return jsonify(_wizard_state(wizard))
        if action == "go_to":
            wizard.go_to(int_or(payload.get("target_step"), 0))
            return jsonify(_wizard_state(wizard))
        if action == "finish":
            result = wizard.finish()
            return jsonify(
                write_payload(
                    result.write,
                    employee_id=result.employee_id,
                    message=result.message,
                    redirect_to=result.redirect_to,
                    redirect_delay_ms=result.redirect_delay_ms,
                )
            )
        raise ValidationError("Unknown wizard action", {"action": "Use next, previous, go_to or finish"})

    @app.route("/employees/<employee_id>", methods=["PATCH"], endpoint="update_employee")
    @roles_required(*EDITORS)
    def update_employee(employee_id: str):
        result = container.employee_service.update_employee(employee_id, json_body())
        return jsonify(write_payload(result, id=employee_id))

    @app.route("/employees/<employee_id>/status", methods=["POST"], endpoint="employee_status")
    @roles_required(*EDITORS)
    def employee_status(employee_id: str):
        result = container.employee_service.set_status(employee_id, json_body())
        return jsonify(write_payload(result, id=employee_id))

    @app.route("/employees/<employee_id>/photo", methods=["POST"], endpoint="employee_photo")
    @roles_required(*EDITORS)
    def employee_photo(employee_id: str):
        upload = request.files.get("photo")
        if upload is None or not upload.filename:
            raise UploadError("Please select an image to upload")
        result = container.employee_service.upload_photo(
            employee_id,
            content=upload.read(),
            content_type=upload.mimetype or "",
        )
        return jsonify(write_payload(result, id=employee_id))

    @app.route("/employees/<employee_id>", methods=["DELETE"], endpoint="delete_employee")
    @roles_required(Role.ADMIN)
    def delete_employee(employee_id: str):
        result = container.employee_service.delete_employee(employee_id)
        return jsonify(write_payload(result, id=employee_id))


def _wizard_state(wizard: EmployeeWizard) -> dict:
    return {
        "employee_id": wizard.employee_id,
        "step": wizard.step,
        "step_key": wizard.current.key,
        "title": wizard.current.title,
        "data": wizard.data,
    }
