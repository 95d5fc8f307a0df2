"""JWT identity helpers and role-based access control."""

from __future__ import annotations

from functools import wraps

from flask_jwt_extended import create_access_token, get_jwt_identity, verify_jwt_in_request
from werkzeug.exceptions import Forbidden, NotFound

from models.user import User


def issue_token(user: User) -> str:
    """Create an access token carrying the user's email and role."""
    return create_access_token(identity=user.email, additional_claims={"role": user.role})


def auth_response(user: User) -> dict:
    return {
        "access_token": issue_token(user),
        "role": user.role,
        "name": user.name,
        "email_verified": bool(user.email_verified),
    }


def current_user() -> User:
    """Return the user behind the verified JWT, or raise 404 if it is gone."""

    email = get_jwt_identity()
    user = User.query.filter_by(email=email).first() if email else None
    if user is None:
        raise NotFound("User not found.")
    return user


def roles_required(*roles: str):
    """Require a valid JWT whose user holds one of ``roles``."""

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            verify_jwt_in_request()
            user = current_user()
            if user.role not in roles:
                raise Forbidden(
                    "This action requires one of the roles: {}.".format(", ".join(roles))
                )
            return view(*args, **kwargs)

        return wrapper

    return decorator


admin_required = roles_required("admin")
