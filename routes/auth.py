"""Authentication blueprint: registration, OTP verification, login, and password reset."""

from __future__ import annotations
from http import HTTPStatus

from flask import Blueprint, current_app, jsonify, request
from werkzeug.exceptions import BadRequest, Conflict, NotFound, Unauthorized

from models import db
from models.user import User
from services.notifier import notifier
from utils.auth import auth_response
from utils.request_validation import parse_json_request
from utils.security import generate_temporary_password, normalize_email

SELF_SERVICE_ROLES = {"client", "provider"}
PROFILE_FIELDS = ("specialization", "city", "country")
auth_bp = Blueprint("auth", __name__)


def _extract_role(raw_role: object) -> str:
    """Return a self-service role, defaulting to client."""
    if raw_role is not None and not isinstance(raw_role, str):
        raise BadRequest("role must be a string")
    role = (raw_role or "").strip().lower() or "client"
    if role not in SELF_SERVICE_ROLES:
        raise BadRequest("Role must be one of: client, provider.")
    return role


def _find_user(email: str) -> User | None:
    return User.query.filter_by(email=email).first()


def _require_user(email: str) -> User:
    user = _find_user(email)
    if user is None:
        raise NotFound("User not found.")
    return user


def _send_otp(user: User, otp: str) -> None:
    notifier.send_otp_email(
        user.email,
        otp,
        name=user.name,
        ttl_minutes=current_app.config["OTP_TTL_MINUTES"],
    )


@auth_bp.route("/register", methods=["POST"])
def register() -> tuple:
    """Register a user, or refresh a pending registration, and send an OTP."""
    payload = parse_json_request(request, required_keys=("name", "email", "password"))
    email = normalize_email(payload.get("email"))
    password = payload["password"]
    role = _extract_role(payload.get("role"))

    for field in PROFILE_FIELDS:
        if payload.get(field) is not None and not isinstance(payload[field], str):
            raise BadRequest(f"{field} must be a string")

    user = _find_user(email)
    if user is not None and user.email_verified:
        raise Conflict("Email already exists.")

    if user is None:
        user = User(email=email, verification_status="pending", email_verified=False)
        current_app.logger.info("Registering new %s account %s", role, email)
    else:
        current_app.logger.info("Refreshing unverified registration for %s", email)

    user.name = str(payload["name"]).strip()
    user.role = role
    user.set_password(str(password))
    for field in PROFILE_FIELDS:
        setattr(user, field, payload.get(field))

    otp = user.issue_otp(current_app.config["OTP_TTL_MINUTES"])
    db.session.add(user)
    db.session.commit()

    _send_otp(user, otp)
    return jsonify(auth_response(user)), HTTPStatus.OK


@auth_bp.route("/verify-otp", methods=["POST"])
def verify_otp() -> tuple:
    """Confirm an email address with the code sent at registration."""
    payload = parse_json_request(request, required_keys=("email", "otp"))
    user = _require_user(normalize_email(payload.get("email")))

    if user.email_verified:
        return jsonify(auth_response(user)), HTTPStatus.OK

    code = str(payload["otp"]).strip()
    if user.otp_code is None or user.otp_code != code:
        raise BadRequest("Invalid OTP")
    if user.otp_expired():
        raise BadRequest("OTP expired")

    old_status = user.verification_status
    user.mark_email_verified()
    db.session.commit()
    current_app.logger.info(
        "Email verified for %s; status %s -> %s",
        user.email,
        old_status,
        user.verification_status,
    )

    return jsonify(auth_response(user)), HTTPStatus.OK


@auth_bp.route("/resend-otp", methods=["POST"])
def resend_otp() -> tuple:
    payload = parse_json_request(request, required_keys=("email",))
    user = _require_user(normalize_email(payload.get("email")))

    otp = user.issue_otp(current_app.config["OTP_TTL_MINUTES"])
    db.session.commit()

    _send_otp(user, otp)
    return jsonify({"message": "OTP resent successfully."}), HTTPStatus.OK


@auth_bp.route("/login", methods=["POST"])
def login() -> tuple:
    """Authenticate a user and return a JWT access token."""
    payload = parse_json_request(request, required_keys=("email", "password"))
    user = _find_user(normalize_email(payload.get("email")))

    if user is None or not user.check_password(str(payload["password"])):
        raise Unauthorized("Invalid email or password.")

    return jsonify(auth_response(user)), HTTPStatus.OK


@auth_bp.route("/forgot-password", methods=["POST"])
def forgot_password() -> tuple:
    """Replace the password with a temporary one and email it to the user."""
    payload = parse_json_request(request, required_keys=("email",))
    user = _require_user(normalize_email(payload.get("email")))

    if user.role == "admin":
        raise BadRequest("Action not allowed for admin accounts.")

    # TODO: switch to an expiring reset link once the frontend supports it;
    # the temporary password is currently mailed in plaintext.
    temporary_password = generate_temporary_password()
    user.set_password(temporary_password)
    db.session.commit()
    current_app.logger.info("Temporary password issued for %s", user.email)

    notifier.send_temporary_password_email(user.email, temporary_password)
    return jsonify({"message": "Temporary password sent to your email."}), HTTPStatus.OK


@auth_bp.route("/verify", methods=["GET"])
def verify_email_token() -> tuple:
    """Legacy link-based email verification."""
    token = (request.args.get("token") or "").strip()
    if not token:
        raise BadRequest("Verification token is required.")

    user = User.query.filter_by(verification_token=token).first()
    if user is None:
        raise BadRequest("Invalid verification token.")

    user.email_verified = True
    user.verification_token = None
    db.session.commit()

    return jsonify({"message": "Email verified successfully."}), HTTPStatus.OK
