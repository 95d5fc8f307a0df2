"""Idempotent startup tasks."""

from __future__ import annotations

from models import db
from models.user import User
from utils.security import normalize_email


def ensure_admin(email: str, password: str, name: str = "Administrator") -> tuple[User, str]:
    """Create the admin account or reset it to a known good state.

    Returns the user and whether it was ``"created"`` or ``"updated"``.
    """

    email = normalize_email(email)
    if not email or not password:
        raise ValueError("Admin email and password are required.")

    admin = User.query.filter_by(email=email).first()
    if admin is None:
        admin = User(email=email, name=name)
        db.session.add(admin)
        action = "created"
    else:
        action = "updated"

    admin.role = "admin"
    admin.email_verified = True
    admin.verification_status = "approved"
    admin.otp_code = None
    admin.otp_expires_at = None
    admin.set_password(password)
    db.session.commit()
    return admin, action
