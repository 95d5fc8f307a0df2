"""Tests covering security and hardening features."""

from __future__ import annotations

from pathlib import Path

from flask import Flask

from app import create_app
from config import Config


class _SecurityBaseConfig(Config):
    TESTING = True
    SECRET_KEY = "test-secret-key-with-enough-length-for-hs256"
    JWT_SECRET_KEY = SECRET_KEY
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    MAIL_SUPPRESS_SEND = True
    MAIL_ASYNC = False


def _build_app(tmp_path: Path, **overrides) -> Flask:
    upload_dir = tmp_path / "uploads"

    class TestConfig(_SecurityBaseConfig):
        UPLOAD_DIR = str(upload_dir)

    for key, value in overrides.items():
        setattr(TestConfig, key, value)

    return create_app(TestConfig)


def test_cors_allows_configured_origin(tmp_path):
    app = _build_app(tmp_path, CORS_ORIGINS=["https://client.example"])
    client = app.test_client()

    response = client.get(
        "/health", headers={"Origin": "https://client.example"}
    )

    assert response.status_code == 200
    assert response.headers.get("Access-Control-Allow-Origin") == "https://client.example"
    assert response.headers.get("X-Request-ID")


def test_request_id_is_echoed(tmp_path):
    client = _build_app(tmp_path).test_client()

    response = client.get("/health", headers={"X-Request-ID": "req-123"})

    assert response.headers["X-Request-ID"] == "req-123"


def test_rate_limit_exceeded_returns_json(tmp_path):
    app = _build_app(tmp_path, RATE_LIMIT="2 per minute")
    client = app.test_client()

    client.get("/health")
    client.get("/health")
    response = client.get("/health")

    assert response.status_code == 429
    payload = response.get_json()
    assert payload["status"] == "Too Many Requests"
    assert payload["error"]
    assert "request_id" in payload


def test_json_error_shape_for_invalid_request(tmp_path):
    app = _build_app(tmp_path)
    client = app.test_client()

    response = client.post(
        "/auth/register",
        data="not-json",
        content_type="text/plain",
    )

    assert response.status_code == 400
    payload = response.get_json()
    assert payload["status"] == "Bad Request"
    assert payload["error"] == "Request content type must be application/json."
    assert payload["request_id"]


def test_missing_token_renders_json_error(tmp_path):
    client = _build_app(tmp_path).test_client()

    response = client.get("/user/profile")

    assert response.status_code == 401
    payload = response.get_json()
    assert payload["status"] == "Unauthorized"
    assert payload["error"]


def test_admin_routes_reject_anonymous_callers(tmp_path):
    client = _build_app(tmp_path).test_client()

    response = client.put("/admin/approve/1")

    assert response.status_code == 401
