from __future__ import annotations

import logging
from typing import Any, Optional

from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from ..common.documents import to_plain
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    NotFoundError,
    RemoteUnavailableError,
    UploadError,
    ValidationError,
)
from ..storage.gateway import WriteResult

logger = logging.getLogger(__name__)


def json_body() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def write_payload(result: Optional[WriteResult], **extra: Any) -> dict:
    """Response body for a write; carries a warning when it only reached the local cache."""
    body = dict(extra)
    if result is not None:
        body["backend"] = result.backend.value
        if result.degraded:
            body["warning"] = f"Saved to the local cache only ({result.reason})"
    return body


def entity_payload(entity: Any) -> dict:
    return to_plain(entity)


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(ValidationError)
    def _validation(e: ValidationError):
        return jsonify({"error": "validation", "message": str(e), "errors": e.errors}), 400

    @app.errorhandler(UploadError)
    def _upload(e: UploadError):
        return jsonify({"error": "upload", "message": str(e)}), 400

    @app.errorhandler(AuthenticationError)
    def _authentication(e: AuthenticationError):
        return jsonify({"error": "authentication", "message": str(e)}), 401

    @app.errorhandler(AuthorizationError)
    def _authorization(e: AuthorizationError):
        return jsonify({"error": "forbidden", "message": str(e)}), 403

    @app.errorhandler(NotFoundError)
    def _not_found(e: NotFoundError):
        return jsonify({"error": "not_found", "message": str(e)}), 404

    @app.errorhandler(RemoteUnavailableError)
    def _remote_unavailable(e: RemoteUnavailableError):
        return jsonify({"error": "remote_unavailable", "message": str(e)}), 503

    @app.errorhandler(Exception)
    def _unexpected(e: Exception):
        if isinstance(e, HTTPException):
            return jsonify({"error": "http", "message": e.description}), e.code

        logger.exception("Unhandled error on %s %s", request.method, request.path)
        if bool(app.config.get("DEBUG", False)):
            message = f"Internal error: {e}"
        else:
            message = "Internal error"
        return jsonify({"error": "internal", "message": message}), 500
