"""Application factory."""

import logging
import os
import uuid
from http import HTTPStatus

import click
from flask import Flask, g, jsonify, request
from flask_cors import CORS
from flask_jwt_extended import JWTManager
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_migrate import Migrate
from sqlalchemy.exc import IntegrityError
from werkzeug.exceptions import HTTPException

from config import Config
from models import db
from routes.admin import admin_bp
from routes.auth import auth_bp
from routes.bookings import bookings_bp
from routes.degree import degree_bp
from routes.users import users_bp
from services.notifier import notifier
from storage import init_storage
from utils.bootstrap import ensure_admin

migrate = Migrate()
jwt = JWTManager()
limiter = Limiter(key_func=get_remote_address)


def create_app(config_class: type[Config] = Config) -> Flask:
    """Create and configure the Flask application."""
    app = Flask(__name__)
    app.config.from_object(config_class)
    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))

    # Core subsystems
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)
    notifier.init_app(app)
    init_storage(app)

    # CORS
    CORS(
        app,
        resources={r"/*": {"origins": app.config.get("CORS_ORIGINS", "*")}},
        supports_credentials=True,
    )

    # Rate limiting
    storage_uri = app.config.get("RATELIMIT_STORAGE_URI", "memory://")
    headers_enabled = app.config.get("RATELIMIT_HEADERS_ENABLED", True)
    key_prefix = app.config.get("RATELIMIT_KEY_PREFIX") or str(uuid.uuid4())

    global limiter
    limiter = Limiter(
        key_func=get_remote_address,
        default_limits=[lambda: app.config.get("RATE_LIMIT", "60 per minute")],
        storage_uri=storage_uri,
        headers_enabled=headers_enabled,
        key_prefix=key_prefix,
    )
    limiter.init_app(app)
    app.config["RATELIMIT_KEY_PREFIX"] = key_prefix

    # Blueprints
    app.register_blueprint(auth_bp, url_prefix="/auth")
    app.register_blueprint(admin_bp, url_prefix="/admin")
    app.register_blueprint(users_bp, url_prefix="/user")
    app.register_blueprint(bookings_bp, url_prefix="/bookings")
    app.register_blueprint(degree_bp, url_prefix="/degree")

    # Health
    @app.route("/health", methods=["GET"])
    def health_check():
        return jsonify({"status": "ok"})

    # Errors
    _register_error_handlers(app)
    _register_jwt_handlers()
    _register_commands(app)

    return app


def _error_response(status: int, message: str, name: str | None = None):
    request_id = g.get("request_id") or str(uuid.uuid4())
    payload = {
        "error": message,
        "status": name or HTTPStatus(status).phrase,
        "request_id": request_id,
    }
    response = jsonify(payload)
    response.status_code = status
    response.headers.setdefault("X-Request-ID", request_id)
    return response


def _register_error_handlers(app: Flask) -> None:
    """Register JSON error handlers with request IDs."""

    @app.before_request
    def _assign_request_id():  # pragma: no cover
        g.request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())

    @app.after_request
    def _add_request_id_header(response):  # pragma: no cover
        request_id = g.get("request_id")
        if request_id:
            response.headers.setdefault("X-Request-ID", request_id)
        return response

    @app.errorhandler(HTTPException)
    def _handle_http_exception(error: HTTPException):
        db.session.rollback()
        response = _error_response(
            error.code or 500,
            error.description or error.name,
            getattr(error, "name", "Error"),
        )
        for header, value in error.get_headers():
            if header.lower() != "content-type":
                response.headers.setdefault(header, value)
        return response

    @app.errorhandler(IntegrityError)
    def _handle_integrity_error(error: IntegrityError):
        db.session.rollback()
        app.logger.warning("Integrity error: %s", error.orig)
        return _error_response(HTTPStatus.CONFLICT, f"Database error: {error.orig}")

    @app.errorhandler(Exception)
    def _handle_unexpected(error: Exception):
        db.session.rollback()
        app.logger.exception("Unhandled application error", exc_info=error)
        return _error_response(
            HTTPStatus.INTERNAL_SERVER_ERROR,
            str(error) or "An unexpected error occurred.",
        )


def _register_jwt_handlers() -> None:
    """Render token failures in the same JSON shape as other errors."""

    @jwt.unauthorized_loader
    def _missing_token(reason: str):
        return _error_response(HTTPStatus.UNAUTHORIZED, reason)

    @jwt.invalid_token_loader
    def _invalid_token(reason: str):
        return _error_response(HTTPStatus.UNAUTHORIZED, reason)

    @jwt.expired_token_loader
    def _expired_token(jwt_header, jwt_payload):
        return _error_response(HTTPStatus.UNAUTHORIZED, "Token has expired.")


def _register_commands(app: Flask) -> None:
    @app.cli.command("seed-admin")
    @click.option("--email", default=None, help="Defaults to ADMIN_EMAIL.")
    @click.option("--password", default=None, help="Defaults to ADMIN_PASSWORD.")
    def seed_admin(email, password):
        """Create or reset the administrator account."""
        admin, action = ensure_admin(
            email or app.config.get("ADMIN_EMAIL") or "",
            password or app.config.get("ADMIN_PASSWORD") or "",
        )
        click.echo(f"Admin user {action}: {admin.email}")


def bootstrap(app: Flask) -> None:
    """Run once at process start: make sure the configured admin exists."""
    email = app.config.get("ADMIN_EMAIL")
    password = app.config.get("ADMIN_PASSWORD")
    if not email or not password:
        return
    with app.app_context():
        admin, action = ensure_admin(email, password)
        app.logger.info("Admin user %s: %s", action, admin.email)


if __name__ == "__main__":
    logging.basicConfig(level=os.environ.get("LOG_LEVEL", "INFO"))
    application = create_app()
    bootstrap(application)
    application.run(host="0.0.0.0", port=int(os.environ.get("PORT", 5000)))
