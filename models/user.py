"""User model definition."""

from datetime import datetime, timedelta, timezone
from typing import Optional

from sqlalchemy import func
from sqlalchemy.ext.hybrid import hybrid_property
from werkzeug.security import check_password_hash, generate_password_hash

from utils.security import generate_otp

from . import db


ROLES = ("client", "provider", "admin")
VERIFICATION_STATUSES = (
    "pending",
    "pending_admin_approval",
    "approved",
    "rejected",
    "reupload_requested",
)


def utcnow() -> datetime:
    """Naive UTC timestamp, matching what SQLite hands back."""

    return datetime.now(timezone.utc).replace(tzinfo=None)


class User(db.Model):
    """Represents a client, provider, or administrator account."""

    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    role = db.Column(db.String(32), nullable=False, default="client")
    specialization = db.Column(db.String(255), nullable=True)
    city = db.Column(db.String(120), nullable=True)
    country = db.Column(db.String(120), nullable=True)
    degree_file = db.Column(db.String(512), nullable=True)
    verification_status = db.Column(
        db.String(32),
        nullable=False,
        default="pending",
        server_default=db.text("'pending'"),
    )
    email_verified = db.Column(
        db.Boolean,
        nullable=False,
        default=False,
        server_default=db.false(),
    )
    verification_token = db.Column(db.String(255), nullable=True, unique=True)
    otp_code = db.Column(db.String(6), nullable=True)
    otp_expires_at = db.Column(db.DateTime, nullable=True)
    admin_comment = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    def set_password(self, password: str) -> None:
        """Hash and store the password."""

        self.password_hash = generate_password_hash(password)

    def check_password(self, password: str) -> bool:
        """Verify a password against the stored hash."""

        return check_password_hash(self.password_hash, password)

    @hybrid_property
    def is_verified(self) -> bool:
        """Legacy verified flag, derived from the approval status."""

        return (self.verification_status or "").lower() == "approved"

    @is_verified.expression
    def is_verified(cls):
        return func.lower(cls.verification_status) == "approved"

    def issue_otp(self, ttl_minutes: int) -> str:
        """Generate a fresh one-time code and return it."""

        self.otp_code = generate_otp()
        self.otp_expires_at = utcnow() + timedelta(minutes=ttl_minutes)
        return self.otp_code

    def otp_expired(self, now: Optional[datetime] = None) -> bool:
        if self.otp_expires_at is None:
            return True
        return self.otp_expires_at < (now or utcnow())

    def mark_email_verified(self) -> None:
        """Confirm email ownership and move the account into its review state.

        Clients are approved immediately; providers wait for an administrator.
        """

        self.email_verified = True
        self.otp_code = None
        self.otp_expires_at = None
        if self.role == "client":
            self.verification_status = "approved"
        elif self.role == "provider":
            self.verification_status = "pending_admin_approval"

    def approve(self) -> None:
        self.verification_status = "approved"
        self.admin_comment = None

    def reject(self, comment: Optional[str] = None) -> None:
        self.verification_status = "rejected"
        self._store_comment(comment)

    def request_reupload(self, comment: Optional[str] = None) -> None:
        self.verification_status = "reupload_requested"
        self._store_comment(comment)

    def _store_comment(self, comment: Optional[str]) -> None:
        if isinstance(comment, str) and comment.strip():
            self.admin_comment = comment

    def to_dict(self) -> dict:
        """Serialize the user without credentials or one-time codes."""

        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "role": self.role,
            "specialization": self.specialization,
            "city": self.city,
            "country": self.country,
            "degree_file": self.degree_file,
            "verification_status": self.verification_status,
            "verified": self.is_verified,
            "email_verified": self.email_verified,
            "admin_comment": self.admin_comment,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self) -> str:  # pragma: no cover - debugging helper
        return f"<User {self.email}>"
