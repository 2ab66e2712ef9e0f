from __future__ import annotations

import logging
from functools import wraps

from flask import Flask, g, jsonify, request
from werkzeug.exceptions import HTTPException

from ..core.exceptions import (
    AuthenticationError,
    ConflictError,
    DomainError,
    NotFoundError,
    StorageError,
    ValidationError,
)

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = (
    (ValidationError, 400),
    (AuthenticationError, 401),
    (NotFoundError, 404),
    (ConflictError, 409),
    (StorageError, 500),
)


def status_for(error: DomainError) -> int:
    for cls, status in _STATUS_BY_ERROR:
        if isinstance(error, cls):
            return status
    return 400


def ok(http_status: int = 200, **payload):
    body = {"success": True}
    body.update(payload)
    return jsonify(body), http_status


def fail(message: str, status: int):
    return jsonify({"success": False, "message": message}), status


def json_body() -> dict:
    """Request JSON as a dict; anything else counts as an empty body."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return {}
    return data


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        status = status_for(e)
        if status >= 500:
            logger.error("%s %s failed: %s", request.method, request.path, e)
        return fail(str(e), status)

    @app.errorhandler(HTTPException)
    def handle_http_error(e: HTTPException):
        if e.code == 404:
            return fail(f"Not Found - {request.path}", 404)
        return fail(e.description or e.name, e.code or 500)

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        if app.config.get("DEBUG"):
            return fail(f"Server error: {e}", 500)
        return fail("Server error", 500)


def auth_required(container):
    """Decorator factory: require `Authorization: Bearer <token>`.

    The authenticated user lands in `g.current_user`.
    """

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            header = request.headers.get("Authorization", "")
            scheme, _, token = header.partition(" ")
            if scheme.lower() != "bearer" or not token.strip():
                raise AuthenticationError("Not authorized, no token")
            g.current_user = container.auth_service.verify_token(token.strip())
            return view(*args, **kwargs)

        return wrapper

    return decorator


def current_user_id():
    user = getattr(g, "current_user", None)
    return user.user_id if user else None
