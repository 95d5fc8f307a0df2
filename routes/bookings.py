"""Bookings blueprint: clients request appointments with providers."""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import jwt_required
from werkzeug.exceptions import BadRequest, NotFound

from models import db
from models.booking import Booking
from models.user import User
from utils.auth import current_user, roles_required
from utils.request_validation import parse_json_request

bookings_bp = Blueprint("bookings", __name__)


def _parse_practitioner_id(value) -> int:
    if isinstance(value, bool):
        raise BadRequest("practitioner_id must be an integer")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise BadRequest("practitioner_id must be an integer") from None


@bookings_bp.route("", methods=["POST"])
@roles_required("client")
def create_booking():
    """Create a pending booking for the calling client."""

    client = current_user()
    data = parse_json_request(request, required_keys=("practitioner_id",))
    practitioner_id = _parse_practitioner_id(data.get("practitioner_id"))

    practitioner = db.session.get(User, practitioner_id)
    if practitioner is None or practitioner.role != "provider":
        raise NotFound("Practitioner not found.")

    notes = data.get("notes")
    if notes is not None and not isinstance(notes, str):
        raise BadRequest("notes must be a string")

    booking = Booking(
        user_id=client.id,
        practitioner_id=practitioner.id,
        status="pending",
        notes=notes,
    )
    db.session.add(booking)
    db.session.commit()
    current_app.logger.info(
        "Booking %s created: client %s -> practitioner %s",
        booking.id,
        client.id,
        practitioner.id,
    )

    return jsonify(booking.to_dict()), 201


@bookings_bp.route("/user/<int:user_id>", methods=["GET"])
@jwt_required()
def bookings_for_user(user_id: int):
    bookings = Booking.query.filter_by(user_id=user_id).order_by(Booking.id.asc()).all()
    return jsonify([booking.to_dict() for booking in bookings])


@bookings_bp.route("/practitioner/<int:practitioner_id>", methods=["GET"])
@jwt_required()
def bookings_for_practitioner(practitioner_id: int):
    bookings = (
        Booking.query.filter_by(practitioner_id=practitioner_id)
        .order_by(Booking.id.asc())
        .all()
    )
    return jsonify([booking.to_dict() for booking in bookings])
