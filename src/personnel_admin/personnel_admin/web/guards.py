from __future__ import annotations

from functools import wraps
from typing import Union

from flask import jsonify, redirect, session, url_for

from ..core.enums import Role

RoleSpec = Union[Role, str]


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return redirect(url_for("auth"))
        return view(*args, **kwargs)

    return wrapper


def roles_required(*roles: RoleSpec):
    """Allow the view for any of ``roles``; no roles means any signed-in user."""
    allowed = [Role(r).value for r in roles]

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session:
                return redirect(url_for("auth"))

            user_role = session.get("role")
            if allowed and user_role not in allowed:
                return (
                    jsonify(
                        {
                            "error": "forbidden",
                            "message": "You do not have permission to access this page",
                            "required_roles": allowed,
                            "user_role": user_role,
                        }
                    ),
                    403,
                )
            return view(*args, **kwargs)

        return wrapper

    return decorator


EDITORS = (Role.DATA_ENTRY, Role.ADMIN)
