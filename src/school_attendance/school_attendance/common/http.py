from __future__ import annotations

import logging

from flask import Flask, jsonify, session
from werkzeug.exceptions import HTTPException

from ..core.enums import Role
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    DomainError,
    NotFoundError,
    ValidationError,
)
from ..users.model import Actor

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = (
    (ValidationError, 400),
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (ConflictError, 409),
)


def status_for(error: DomainError) -> int:
    for error_type, status in _STATUS_BY_ERROR:
        if isinstance(error, error_type):
            return status
    return 400


def error_payload(error: DomainError) -> dict:
    payload = {"error": str(error)}
    field = getattr(error, "field", None)
    if field:
        payload["field"] = field
    return payload


def current_actor() -> Actor:
    """Build the request actor from the session; raises when nobody is logged in."""
    if "user_id" not in session:
        raise AuthenticationError("Authentication required")

    try:
        role = Role(session.get("role"))
    except ValueError:
        session.clear()
        raise AuthenticationError("Authentication required")

    school_id = session.get("school_id")
    return Actor(
        user_id=int(session["user_id"]),
        role=role,
        school_id=int(school_id) if school_id is not None else None,
        name=session.get("name") or "",
    )


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(error: DomainError):
        return jsonify(error_payload(error)), status_for(error)

    @app.errorhandler(HTTPException)
    def handle_http_error(error: HTTPException):
        return jsonify({"error": error.description}), error.code

    @app.errorhandler(Exception)
    def handle_unexpected(error: Exception):
        logger.exception("Unhandled error: %s", error)
        return jsonify({"error": "Internal server error"}), 500
