from __future__ import annotations

import logging
from functools import wraps
from typing import Any

from flask import Flask, jsonify, request, session
from werkzeug.exceptions import HTTPException

from .common.serializers import camelize, snake_keys, to_jsonable
from .core.enums import Role
from .core.exceptions import AuthorizationError, DomainError
from .core.scope import Scope

logger = logging.getLogger(__name__)


def hr_required(view):
    """Resolve the session into a Scope and pass it as ``scope``."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            raise AuthorizationError("You are not logged in! Please log in to get access.")
        try:
            role = Role(session.get("role"))
        except ValueError:
            raise AuthorizationError("You do not have permission to perform this action")
        scope = Scope(hr_id=int(session["user_id"]), role=role)
        return view(scope, *args, **kwargs)

    return wrapper


def ok(data: Any, status: int = 200):
    return jsonify({"status": "success", "data": camelize(to_jsonable(data))}), status


def json_body() -> dict:
    return request.get_json(silent=True) or {}


def json_patch() -> dict:
    """PATCH body with camelCase keys mapped to field names."""
    return snake_keys(json_body())


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        status = "error" if e.http_status >= 500 else "fail"
        return jsonify({"status": status, "message": e.message}), e.http_status

    @app.errorhandler(404)
    def handle_not_found(_e):
        return jsonify({"status": "fail", "message": f"Can't find {request.path} on this server!"}), 404

    @app.errorhandler(405)
    def handle_method_not_allowed(_e):
        return jsonify({"status": "fail", "message": "Method not allowed"}), 405

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        if isinstance(e, HTTPException):
            return jsonify({"status": "fail", "message": e.description}), e.code
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        return jsonify({"status": "error", "message": "Something went very wrong!"}), 500
