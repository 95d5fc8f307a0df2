"""Admin blueprint for reviewing provider accounts."""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request

from models import db
from models.user import User
from services.notifier import notifier
from utils.auth import admin_required
from utils.request_validation import optional_json_body

admin_bp = Blueprint("admin", __name__)


def _get_user_or_404(user_id: int) -> User:
    return db.get_or_404(User, user_id, description="User not found.")


def _review_comment() -> str | None:
    comment = optional_json_body(request).get("comment")
    return comment if isinstance(comment, str) else None


def _log_transition(user: User, old_status: str) -> None:
    current_app.logger.info(
        "User %s status: %s -> %s", user.email, old_status, user.verification_status
    )


@admin_bp.route("/users", methods=["GET"])
@admin_required
def list_practitioners():
    """Return every provider account regardless of review status."""

    providers = User.query.filter_by(role="provider").order_by(User.id.asc()).all()
    return jsonify([user.to_dict() for user in providers])


@admin_bp.route("/all-users", methods=["GET"])
@admin_required
def list_all_users():
    users = User.query.filter(User.role != "admin").order_by(User.id.asc()).all()
    return jsonify([user.to_dict() for user in users])


@admin_bp.route("/approve/<int:user_id>", methods=["PUT"])
@admin_required
def approve_user(user_id: int):
    """Approve an account. Safe to repeat whatever the current status is."""

    user = _get_user_or_404(user_id)
    old_status = user.verification_status

    user.approve()
    db.session.commit()
    _log_transition(user, old_status)

    notifier.send_approval_email(user.email, name=user.name)
    return jsonify({"message": "User approved successfully.", "user": user.to_dict()})


@admin_bp.route("/reject/<int:user_id>", methods=["PUT"])
@admin_required
def reject_user(user_id: int):
    """Reject an account, keeping a non-blank reviewer comment if one is sent."""

    user = _get_user_or_404(user_id)
    old_status = user.verification_status

    user.reject(_review_comment())
    db.session.commit()
    _log_transition(user, old_status)

    notifier.send_rejection_email(user.email, name=user.name, comment=user.admin_comment)
    return jsonify({"message": "User rejected successfully.", "user": user.to_dict()})


@admin_bp.route("/request-reupload/<int:user_id>", methods=["PUT"])
@admin_required
def request_reupload(user_id: int):
    user = _get_user_or_404(user_id)
    old_status = user.verification_status

    user.request_reupload(_review_comment())
    db.session.commit()
    _log_transition(user, old_status)

    return jsonify({"message": "Reupload requested successfully.", "user": user.to_dict()})
