"""Helpers shared by the JSON controllers."""

from __future__ import annotations

import logging
from functools import wraps
from typing import Any, Dict, Optional

from flask import jsonify, request, session

from ..core.enums import Role
from ..core.exceptions import (
    ApiError,
    AuthenticationError,
    AuthorizationError,
    NotFoundError,
    ValidationError,
)
from ..users.model import SessionUser

logger = logging.getLogger(__name__)


def error(message: str, status: int):
    return jsonify({"error": message}), status


def ok(data: Any = None, status: int = 200):
    return jsonify({"data": data}), status


def json_body() -> Dict[str, Any]:
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        raise ValidationError("JSON object is required")
    return body


def remember(user: SessionUser) -> None:
    session.clear()
    session["user_id"] = user.id
    session["name"] = user.name
    session["role"] = user.role.value


def current_user() -> Optional[SessionUser]:
    if "user_id" not in session:
        return None
    try:
        role = Role(session.get("role"))
    except ValueError:
        return None
    return SessionUser(id=str(session["user_id"]), name=session.get("name") or "", role=role)


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if current_user() is None:
            return error("Please sign in to continue", 401)
        return view(*args, **kwargs)

    return wrapper


def handle_errors(view):
    """Map domain and API errors raised by a view to JSON error responses."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        try:
            return view(*args, **kwargs)
        except ValidationError as e:
            return error(str(e), 400)
        except AuthenticationError as e:
            return error(str(e), 401)
        except AuthorizationError as e:
            return error(str(e), 403)
        except NotFoundError as e:
            return error(str(e), 404)
        except ApiError as e:
            if e.status >= 500:
                logger.error("%s %s: %s", request.method, request.path, e)
                return error("Storage is unavailable, please try again", e.status)
            return error(e.message, e.status)

    return wrapper
