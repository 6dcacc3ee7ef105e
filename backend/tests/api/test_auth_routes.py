"""
Auth Routes Tests

Registration, login (including legacy bcrypt hashes) and bearer-token errors.
"""

import bcrypt
import pytest
from jose import jwt
from sqlalchemy import select

from kosh.auth.hashing import verify_password
from kosh.auth.jwt import create_access_token, decode_access_token
from kosh.core.settings import settings
from kosh.models.settings import UserSettings
from kosh.models.treasury import Treasury
from kosh.models.user import User

from conftest import TEST_EMAIL, TEST_PASSWORD


async def test_register_creates_settings_and_treasury(client, test_db):
    # Act
    response = await client.post(
        "/api/auth/register",
        json={"email": "New@Example.com", "password": "pw123456", "fullName": "New Merchant"}
    )

    # Assert
    assert response.status_code == 201
    body = response.json()
    assert body["email"] == "new@example.com"
    assert body["name"] == "New Merchant"

    user_settings = (
        await test_db.execute(select(UserSettings).where(UserSettings.user_id == body["id"]))
    ).scalar_one()
    assert float(user_settings.auto_save_rate) == 3.5
    treasury = (
        await test_db.execute(select(Treasury).where(Treasury.user_id == body["id"]))
    ).scalar_one()
    assert treasury.balance == 0


async def test_register_duplicate_email(client, registered_user):
    response = await client.post(
        "/api/register",
        json={"email": TEST_EMAIL.upper(), "password": "another"}
    )

    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "Email already in use"
    assert body["errorCode"] == "EMAIL_IN_USE"


@pytest.mark.parametrize("payload", [{}, {"email": "a@b.c"}, {"password": "x"}])
async def test_register_requires_email_and_password(client, payload):
    response = await client.post("/api/auth/register", json=payload)

    assert response.status_code == 400
    assert response.json()["message"] == "email and password are required"


async def test_login_returns_token(client, registered_user):
    response = await client.post(
        "/api/login",
        json={"identifier": TEST_EMAIL, "password": TEST_PASSWORD}
    )

    assert response.status_code == 200
    body = response.json()
    assert body["user"] == {"id": registered_user.id, "email": TEST_EMAIL, "name": "Test Merchant"}
    payload = decode_access_token(body["token"])
    assert payload["sub"] == str(registered_user.id)
    assert payload["type"] == "access"


@pytest.mark.parametrize(
    "email,password",
    [(TEST_EMAIL, "wrong-password"), ("nobody@example.com", TEST_PASSWORD)],
)
async def test_login_invalid_credentials(client, registered_user, email, password):
    response = await client.post("/api/auth/login", json={"email": email, "password": password})

    assert response.status_code == 401
    assert response.json()["error"] == "Invalid credentials"


async def test_demo_user_cannot_log_in(client, demo_user):
    response = await client.post(
        "/api/auth/login",
        json={"email": settings.demo.EMAIL, "password": "mock"}
    )

    assert response.status_code == 401


async def test_login_upgrades_legacy_bcrypt_hash(client, test_db):
    """A bcrypt hash still verifies and is replaced by an Argon2 hash."""
    # Arrange
    legacy_hash = bcrypt.hashpw(b"legacy-pass", bcrypt.gensalt(rounds=4)).decode()
    test_db.add(User(email="legacy@example.com", password_hash=legacy_hash, name="Legacy"))
    await test_db.commit()

    # Act
    response = await client.post(
        "/api/auth/login",
        json={"email": "legacy@example.com", "password": "legacy-pass"}
    )

    # Assert
    assert response.status_code == 200
    stored = (
        await test_db.execute(
            select(User.password_hash).where(User.email == "legacy@example.com")
        )
    ).scalar_one()
    assert stored.startswith("$argon2")
    assert verify_password("legacy-pass", stored) == (True, False)


async def test_me_requires_token(client):
    response = await client.get("/api/users/me")

    assert response.status_code == 401
    assert response.json()["message"] == "Missing Authorization header"
    assert response.headers["www-authenticate"] == "Bearer"


async def test_me_rejects_bad_token(client):
    response = await client.get("/api/users/me", headers={"Authorization": "Bearer not-a-jwt"})

    assert response.status_code == 401
    assert response.json()["message"] == "Invalid or expired token"


async def test_me_rejects_token_for_missing_user(client):
    token = create_access_token(9999)

    response = await client.get("/api/users/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401


@pytest.mark.parametrize("subject", ["\u00b2", "12\u00b3"])
async def test_me_rejects_token_with_unusable_subject(client, subject):
    token = jwt.encode(
        {"sub": subject, "type": "access"},
        settings.auth.JWT_SECRET_KEY.get_secret_value(),
        algorithm=settings.auth.JWT_ALGORITHM
    )

    response = await client.get("/api/users/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401
    assert response.json()["message"] == "Invalid or expired token"


async def test_me_returns_profile(client, auth_headers, registered_user):
    response = await client.get("/api/users/me", headers=auth_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["id"] == registered_user.id
    assert body["email"] == TEST_EMAIL
    assert "createdAt" in body


async def test_profile_update_for_token_user(client, auth_headers):
    response = await client.put(
        "/api/users/profile",
        headers=auth_headers,
        json={"name": "Renamed", "phoneNumber": "+919999999999"}
    )

    assert response.status_code == 200
    body = response.json()
    assert body["name"] == "Renamed"
    assert body["phoneNumber"] == "+919999999999"


async def test_seed_dev_creates_and_logs_in(client):
    first = await client.post("/api/auth/seed-dev")
    second = await client.post("/api/auth/seed-dev")

    assert first.status_code == 200
    assert second.status_code == 200
    body = second.json()
    assert body["credentials"] == {"email": "test@example.com", "password": "Test@1234"}
    assert body["user"]["id"] == first.json()["user"]["id"]
    assert body["token"]


async def test_seed_dev_forbidden_in_production(client, monkeypatch):
    monkeypatch.setattr(settings.app, "ENVIRONMENT", "production")

    response = await client.post("/api/auth/seed-dev")

    assert response.status_code == 403
