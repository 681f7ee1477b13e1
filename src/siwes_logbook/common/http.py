"""Helpers shared by the Flask controllers.

The identity provider authenticates the caller and stores ``user_id`` and
``role`` in the session; controllers only read them back.
"""
from __future__ import annotations

from functools import wraps
from typing import Any, Optional

from flask import jsonify, request, session

from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, ValidationError
from ..core.principal import Principal


def current_principal() -> Principal:
    user_id = session.get("user_id")
    role = session.get("role")
    if user_id is None or role is None:
        raise AuthenticationError("Authentication required")
    try:
        return Principal(user_id=int(user_id), role=Role(role))
    except ValueError:
        raise AuthenticationError("Authentication required")


def roles_required(*roles: Role):
    allowed = {r.value for r in roles}

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            principal = current_principal()
            if principal.role.value not in allowed:
                raise AuthorizationError("Access denied: insufficient permissions")
            return view(principal, *args, **kwargs)

        return wrapper

    return decorator


def json_body() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def ok(data: Any = None, *, status: int = 200, message: Optional[str] = None):
    payload: dict[str, Any] = {"success": True, "data": data}
    if message:
        payload["message"] = message
    return jsonify(payload), status


def error_response(code: str, message: str, status: int):
    return jsonify({"success": False, "error": {"code": code, "message": message}}), status
