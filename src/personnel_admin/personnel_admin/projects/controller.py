from __future__ import annotations

from flask import Flask, jsonify, request

from ..core.exceptions import NotFoundError
from ..container import Container
from ..web.guards import EDITORS, login_required, roles_required
from ..web.responses import entity_payload, json_body, write_payload
from .service import selected_ids


def register(app: Flask, container: Container) -> None:
    projects = container.projects

    @app.route("/projects", methods=["GET"], endpoint="list_projects")
    @login_required
    def list_projects():
        items = projects.search(request.args.get("q", ""))
        client_id = request.args.get("client_id", "").strip()
        if client_id:
            items = [p for p in items if p.client_id == client_id]
        return jsonify([entity_payload(p) for p in items])

    @app.route("/projects/<project_id>", methods=["GET"], endpoint="get_project")
    @login_required
    def get_project(project_id: str):
        project = projects.get_by_id(project_id)
        if project is None:
            raise NotFoundError(f"Project {project_id} not found")
        return jsonify(entity_payload(project))

    @app.route("/projects", methods=["POST"], endpoint="add_project")
    @roles_required(*EDITORS)
    def add_project():
        project_id = container.project_service.create_project(json_body())
        return jsonify({"id": project_id}), 201

    @app.route("/projects/<project_id>", methods=["PATCH"], endpoint="update_project")
    @roles_required(*EDITORS)
    def update_project(project_id: str):
        result = container.project_service.update_project(project_id, json_body())
        return jsonify(write_payload(result, id=project_id))

    @app.route("/projects/<project_id>", methods=["DELETE"], endpoint="delete_project")
    @roles_required(*EDITORS)
    def delete_project(project_id: str):
        result = container.project_service.delete_project(project_id)
        return jsonify(write_payload(result, id=project_id))

    @app.route("/projects/<project_id>/assignments", methods=["PUT"], endpoint="project_assignments")
    @roles_required(*EDITORS)
    def project_assignments(project_id: str):
        result = container.reconciler.apply(project_id, selected_ids(json_body()))
        return jsonify(
            {
                "project": entity_payload(result.project) if result.project else None,
                "added": list(result.delta.to_add),
                "removed": list(result.delta.to_remove),
                "failures": [entity_payload(f) for f in result.failures],
                "partial": not result.ok,
            }
        )
