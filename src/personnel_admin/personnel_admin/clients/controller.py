from __future__ import annotations

from flask import Flask, jsonify, request

from ..container import Container
from ..web.guards import EDITORS, login_required, roles_required
from ..web.responses import entity_payload, json_body, write_payload


def register(app: Flask, container: Container) -> None:
    @app.route("/clients", methods=["GET"], endpoint="list_clients")
    @login_required
    def list_clients():
        items = container.clients.search(request.args.get("q", ""))
        return jsonify([entity_payload(c) for c in items])

    @app.route("/clients", methods=["POST"], endpoint="add_client")
    @roles_required(*EDITORS)
    def add_client():
        client_id = container.client_service.create_client(json_body())
        return jsonify({"id": client_id}), 201

    @app.route("/clients/<client_id>", methods=["PATCH"], endpoint="update_client")
    @roles_required(*EDITORS)
    def update_client(client_id: str):
        result = container.client_service.update_client(client_id, json_body())
        return jsonify(write_payload(result, id=client_id))

    @app.route("/clients/<client_id>", methods=["DELETE"], endpoint="delete_client")
    @roles_required(*EDITORS)
    def delete_client(client_id: str):
        result = container.client_service.delete_client(client_id)
        return jsonify(write_payload(result, id=client_id))
