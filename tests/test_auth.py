"""Tests for auth endpoints and token handling."""

from datetime import datetime, timedelta, timezone

import jwt

from conftest import TEST_PASSWORD
from src.auth.jwt import create_access_token, verify_token


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "ok"
    assert "timestamp" in body


def test_register(client):
    resp = client.post(
        "/api/auth/register",
        json={"email": "a@x.com", "password": "secret1", "name": "A"},
    )
    assert resp.status_code == 201
    data = resp.json()["data"]
    assert data["token"]
    assert data["user"]["email"] == "a@x.com"
    assert data["user"]["name"] == "A"
    assert data["user"]["project_ids"] == []
    assert "password_hash" not in data["user"]


def test_register_stores_hash_not_password(client, fake_db):
    client.post("/api/auth/register", json={"email": "h@x.com", "password": "secret1", "name": "H"})
    row = fake_db.tables["users"][0]
    assert row["password_hash"] != "secret1"
    assert row["password_hash"].startswith("$2")


def test_register_normalizes_email(client):
    resp = client.post(
        "/api/auth/register",
        json={"email": "Mixed.Case@Example.COM", "password": "secret1", "name": "M"},
    )
    assert resp.status_code == 201
    assert resp.json()["data"]["user"]["email"] == "mixed.case@example.com"


def test_register_duplicate(client, register):
    register(email="dup@example.com")
    resp = client.post(
        "/api/auth/register",
        json={"email": "DUP@example.com", "password": TEST_PASSWORD, "name": "Again"},
    )
    assert resp.status_code == 400
    assert resp.json()["error"]["type"] == "conflict"
    assert resp.json()["error"]["message"] == "Email already in use"


def test_register_validation(client):
    resp = client.post("/api/auth/register", json={"email": "not-an-email", "password": "secret1", "name": "X"})
    assert resp.status_code == 400
    assert resp.json()["error"]["type"] == "validation_error"

    resp = client.post("/api/auth/register", json={"email": "short@x.com", "password": "123", "name": "X"})
    assert resp.status_code == 400

    resp = client.post("/api/auth/register", json={"email": "blank@x.com", "password": "secret1", "name": "   "})
    assert resp.status_code == 400


def test_login_success(client, register):
    register(email="login@example.com")
    resp = client.post("/api/auth/login", json={"email": "login@example.com", "password": TEST_PASSWORD})
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["token"]
    assert data["user"]["email"] == "login@example.com"


def test_login_wrong_password_matches_unknown_email(client, register):
    register(email="known@example.com")
    wrong = client.post("/api/auth/login", json={"email": "known@example.com", "password": "WrongPass"})
    unknown = client.post("/api/auth/login", json={"email": "nobody@example.com", "password": "WrongPass"})

    assert wrong.status_code == 401
    assert unknown.status_code == 401
    assert wrong.json()["error"]["message"] == unknown.json()["error"]["message"]
    assert wrong.json()["error"]["type"] == "authentication_error"


def test_missing_auth(client):
    resp = client.get("/api/users/profile")
    assert resp.status_code == 401
    assert resp.json()["error"]["type"] == "authentication_error"


def test_invalid_token(client):
    resp = client.get("/api/users/profile", headers={"Authorization": "Bearer not.a.token"})
    assert resp.status_code == 401


def test_token_signed_with_other_secret(client, settings):
    forged = jwt.encode(
        {"sub": "someone", "type": "access", "exp": datetime.now(timezone.utc) + timedelta(days=1)},
        "a-completely-different-secret-value-123",
        algorithm="HS256",
    )
    resp = client.get("/api/users/profile", headers={"Authorization": f"Bearer {forged}"})
    assert resp.status_code == 401


def test_expired_token(client, settings):
    expired = jwt.encode(
        {"sub": "someone", "type": "access", "exp": datetime.now(timezone.utc) - timedelta(seconds=5)},
        settings.JWT_SECRET,
        algorithm="HS256",
    )
    resp = client.get("/api/users/profile", headers={"Authorization": f"Bearer {expired}"})
    assert resp.status_code == 401
    assert resp.json()["error"]["message"] == "Token has expired"


def test_token_round_trip_and_lifetime(settings):
    token = create_access_token("user-1", settings)
    payload = verify_token(token, settings)
    assert payload["sub"] == "user-1"
    assert payload["type"] == "access"
    assert payload["exp"] - payload["iat"] == settings.JWT_EXPIRE_DAYS * 24 * 3600


def test_register_race_reports_conflict(client, register, monkeypatch):
    register(email="race@example.com")
    # The lookup misses, as when a parallel registration commits in between
    monkeypatch.setattr("src.users.repository.get_by_email", lambda db, email: None)

    resp = client.post(
        "/api/auth/register",
        json={"email": "race@example.com", "password": TEST_PASSWORD, "name": "Second"},
    )
    assert resp.status_code == 400
    assert resp.json()["error"]["type"] == "conflict"
    assert resp.json()["error"]["message"] == "Email already in use"
