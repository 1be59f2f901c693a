from __future__ import annotations

from datetime import timedelta

from flask import Flask, jsonify, request, session

from ..common.documents import text
from ..common.payloads import as_bool
from ..core.enums import Role
from ..core.exceptions import ValidationError
from ..container import Container
from ..web.guards import roles_required
from ..web.responses import json_body, write_payload


def register(app: Flask, container: Container) -> None:
    @app.route("/auth", methods=["GET", "POST"], endpoint="auth")
    def auth():
        if request.method == "GET":
            if "user_id" in session:
                return jsonify({"authenticated": True, "user": _session_user()})
            return jsonify({"authenticated": False, "message": "Please sign in to continue"}), 401

        payload = json_body() or request.form.to_dict()
        s_user = container.auth_service.authenticate(text(payload, "email"), text(payload, "password"))

        session.clear()
        session.permanent = bool(payload.get("remember_me"))
        app.permanent_session_lifetime = timedelta(days=7)

        session["user_id"] = s_user.user_id
        session["email"] = s_user.email
        session["name"] = s_user.display_name
        session["role"] = s_user.role.value

        return jsonify({"authenticated": True, "user": _session_user()})

    @app.route("/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return jsonify({"message": "Signed out"})

    @app.route("/users", methods=["GET"], endpoint="list_users")
    @roles_required(Role.ADMIN)
    def list_users():
        users = container.user_service.list_profiles()
        return jsonify(
            [
                {
                    "id": u.id,
                    "email": u.email,
                    "display_name": u.display_name,
                    "role": u.role.value,
                    "is_active": u.is_active,
                    "last_login": u.last_login.isoformat() if u.last_login else None,
                }
                for u in users
            ]
        )

    @app.route("/users", methods=["POST"], endpoint="add_user")
    @roles_required(Role.ADMIN)
    def add_user():
        payload = json_body()
        role = _parse_role(text(payload, "role", Role.VIEWER.value))
        user_id = container.user_service.create_profile(
            email=text(payload, "email"),
            display_name=text(payload, "display_name"),
            password=text(payload, "password"),
            role=role,
        )
        return jsonify({"id": user_id}), 201

    @app.route("/users/<user_id>", methods=["PATCH"], endpoint="update_user")
    @roles_required(Role.ADMIN)
    def update_user(user_id: str):
        payload = json_body()
        result = container.user_service.update_profile(
            user_id,
            role=_parse_role(payload["role"]) if "role" in payload else None,
            is_active=as_bool(payload["is_active"]) if "is_active" in payload else None,
            display_name=text(payload, "display_name") if "display_name" in payload else None,
            acting_user_id=session.get("user_id"),
        )
        return jsonify(write_payload(result, id=user_id))

    @app.route("/users/<user_id>", methods=["DELETE"], endpoint="delete_user")
    @roles_required(Role.ADMIN)
    def delete_user(user_id: str):
        result = container.user_service.delete_profile(user_id, acting_user_id=session.get("user_id"))
        return jsonify(write_payload(result, id=user_id))


def _parse_role(value) -> Role:
    try:
        return Role(value)
    except (TypeError, ValueError):
        raise ValidationError("Unknown role", {"role": "Must be one of: " + ", ".join(r.value for r in Role)})


def _session_user() -> dict:
    return {
        "id": session.get("user_id"),
        "email": session.get("email"),
        "display_name": session.get("name"),
        "role": session.get("role"),
    }
