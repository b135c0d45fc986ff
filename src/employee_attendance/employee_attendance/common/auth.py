from __future__ import annotations

from functools import wraps

from flask import jsonify, session

from ..core.enums import Role


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "employee_id" not in session:
            return jsonify({"message": "Authentication required"}), 401
        return view(*args, **kwargs)

    return wrapper


def roles_required(*roles: Role):
    """Allow only sessions whose role is one of ``roles``."""

    allowed = {r.value for r in roles}

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "employee_id" not in session:
                return jsonify({"message": "Authentication required"}), 401
            if session.get("role") not in allowed:
                return jsonify({"message": "You do not have permission to perform this action"}), 403
            return view(*args, **kwargs)

        return wrapper

    return decorator


def current_employee_id() -> int:
    return int(session["employee_id"])
