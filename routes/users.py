"""User blueprint: own profile and public practitioner listings."""

from __future__ import annotations

from flask import Blueprint, jsonify, request
from flask_jwt_extended import jwt_required
from werkzeug.exceptions import BadRequest

from models import db
from models.user import User
from utils.auth import current_user
from utils.request_validation import parse_json_request

users_bp = Blueprint("users", __name__)

OPTIONAL_PROFILE_FIELDS = ("city", "country", "specialization")


@users_bp.route("/profile", methods=["GET"])
@jwt_required()
def get_profile():
    return jsonify(current_user().to_dict())


@users_bp.route("/profile", methods=["PUT"])
@jwt_required()
def update_profile():
    """Update profile fields and, when supplied, the password."""

    user = current_user()
    data = parse_json_request(request, allow_empty=True)

    name = data.get("name")
    if isinstance(name, str) and name.strip():
        user.name = name.strip()

    for field in OPTIONAL_PROFILE_FIELDS:
        if field in data and data[field] is not None:
            if not isinstance(data[field], str):
                raise BadRequest(f"{field} must be a string")
            setattr(user, field, data[field])

    password = data.get("password")
    if password:
        if not isinstance(password, str):
            raise BadRequest("password must be a string")
        user.set_password(password)

    db.session.commit()
    return jsonify(user.to_dict())


@users_bp.route("/practitioners", methods=["GET"])
def approved_practitioners():
    """Providers visible in the marketplace."""

    query = User.query.filter(User.role == "provider", User.is_verified)
    return jsonify([user.to_dict() for user in query.order_by(User.id.asc()).all()])


@users_bp.route("/all-practitioners", methods=["GET"])
def all_practitioners():
    providers = User.query.filter_by(role="provider").order_by(User.id.asc()).all()
    return jsonify([user.to_dict() for user in providers])
