"""Tests for profile management and practitioner listings."""

from __future__ import annotations

from flask_jwt_extended import create_access_token

from models import db
from models.user import User


def _create_user(email: str, role: str = "provider", **fields) -> None:
    user = User(name="Original", email=email, role=role, **fields)
    user.set_password("secret123")
    db.session.add(user)
    db.session.commit()


def _headers(app, email: str) -> dict[str, str]:
    with app.app_context():
        token = create_access_token(identity=email)
    return {"Authorization": f"Bearer {token}"}


def test_get_profile(app, client):
    with app.app_context():
        _create_user("me@example.com", city="Kochi")

    response = client.get("/user/profile", headers=_headers(app, "me@example.com"))

    assert response.status_code == 200
    profile = response.get_json()
    assert profile["email"] == "me@example.com"
    assert profile["city"] == "Kochi"
    assert "password_hash" not in profile


def test_profile_for_deleted_user_is_not_found(app, client):
    response = client.get("/user/profile", headers=_headers(app, "ghost@example.com"))

    assert response.status_code == 404


def test_update_profile(app, client):
    with app.app_context():
        _create_user("me@example.com", city="Kochi", specialization="Yoga")
    headers = _headers(app, "me@example.com")

    response = client.put(
        "/user/profile",
        json={"name": "  ", "city": "Mysore", "country": "India", "password": "changed123"},
        headers=headers,
    )

    assert response.status_code == 200
    profile = response.get_json()
    assert profile["name"] == "Original"
    assert profile["city"] == "Mysore"
    assert profile["country"] == "India"
    assert profile["specialization"] == "Yoga"

    login = client.post("/auth/login", json={"email": "me@example.com", "password": "changed123"})
    assert login.status_code == 200

    renamed = client.put("/user/profile", json={"name": "New Name"}, headers=headers)
    assert renamed.get_json()["name"] == "New Name"


def test_practitioner_listings(app, client):
    with app.app_context():
        _create_user("approved@example.com", verification_status="approved")
        _create_user("shouty@example.com", verification_status="APPROVED")
        _create_user("waiting@example.com", verification_status="pending_admin_approval")
        _create_user("client@example.com", role="client", verification_status="approved")

    approved = client.get("/user/practitioners").get_json()
    everyone = client.get("/user/all-practitioners").get_json()

    assert [p["email"] for p in approved] == ["approved@example.com", "shouty@example.com"]
    assert [p["email"] for p in everyone] == [
        "approved@example.com",
        "shouty@example.com",
        "waiting@example.com",
    ]


def test_empty_profile_update_is_a_no_op(app, client):
    with app.app_context():
        _create_user("me@example.com", city="Kochi")

    response = client.put("/user/profile", json={}, headers=_headers(app, "me@example.com"))

    assert response.status_code == 200
    profile = response.get_json()
    assert profile["name"] == "Original"
    assert profile["city"] == "Kochi"
