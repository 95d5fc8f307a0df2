"""Degree blueprint for uploading and retrieving provider degree documents."""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request, send_file
from werkzeug.datastructures import FileStorage
from werkzeug.exceptions import BadRequest, InternalServerError, NotFound

from models import db
from models.user import User
from storage import get_storage

degree_bp = Blueprint("degree", __name__)

ALLOWED_EXTENSION = "pdf"


def degree_filename(user_id: int) -> str:
    return f"{user_id}_degrees.pdf"


def _get_user_or_404(user_id: int) -> User:
    return db.get_or_404(User, user_id, description="User not found.")


def _parse_user_id(raw: str | None) -> int:
    try:
        return int((raw or "").strip())
    except ValueError:
        raise BadRequest("user_id must be an integer.") from None


def _validate_document(file: FileStorage) -> None:
    if file.filename is None or file.filename.strip() == "":
        raise BadRequest("A degree file is required.")

    extension = file.filename.rsplit(".", 1)[-1].lower() if "." in file.filename else ""
    if extension != ALLOWED_EXTENSION:
        raise BadRequest("Degree documents must be PDF files.")


@degree_bp.route("/upload", methods=["POST"])
def upload_degree():
    """Store a user's degree PDF, replacing any earlier upload."""

    file = request.files.get("file")
    if not isinstance(file, FileStorage):
        raise BadRequest("A degree file is required.")
    _validate_document(file)

    user = _get_user_or_404(_parse_user_id(request.form.get("user_id")))

    try:
        stored_path = get_storage().save(file, degree_filename(user.id))
    except OSError as exc:
        current_app.logger.exception("Degree upload failed for user %s", user.id)
        raise InternalServerError(str(exc)) from exc

    user.degree_file = stored_path
    user.verification_status = "pending"
    db.session.commit()
    current_app.logger.info("Degree uploaded for user %s at %s", user.id, stored_path)

    return jsonify({"message": "Degree uploaded successfully.", "degree_file": stored_path})


@degree_bp.route("/<int:user_id>", methods=["GET"])
def download_degree(user_id: int):
    """Stream the stored degree inline as a PDF."""

    user = _get_user_or_404(user_id)
    if not user.degree_file:
        raise NotFound("No degree uploaded for this user.")

    storage = get_storage()
    if not storage.exists(user.degree_file):
        raise NotFound("Stored degree could not be found.")

    path = storage.resolve(user.degree_file)
    return send_file(
        path,
        mimetype="application/pdf",
        as_attachment=False,
        download_name=path.name,
    )
