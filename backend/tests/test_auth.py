from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

import jwt
import pytest
from fastapi.testclient import TestClient

from jobboard.core.config import settings
from jobboard.core.security import decode_access_token
from jobboard.models import Applicant, Recruiter, User

pytestmark = pytest.mark.integration

API = "/api/v1"


def _signup_body(**overrides) -> dict:
    body = {
        "name": "Jane Doe",
        "email": "jane@example.com",
        "role": "APPLICANT",
        "password": "password123",
        "confirm_password": "password123",
    }
    body.update(overrides)
    return body


def test_signup_creates_user_profile_and_session(client: TestClient, session_factory) -> None:
    response = client.post(f"{API}/auth/signup", json=_signup_body(email="Jane@Example.com"))

    assert response.status_code == 201
    user = response.json()["user"]
    assert user["email"] == "jane@example.com"
    assert user["role"] == "APPLICANT"
    assert user["applicant_id"] is not None
    assert user["recruiter_id"] is None
    assert "token" in response.cookies

    with session_factory() as db:
        stored = db.query(User).filter(User.email == "jane@example.com").one()
        assert stored.hashed_password != "password123"
        assert db.query(Applicant).filter(Applicant.user_id == stored.id).count() == 1


def test_signup_as_recruiter_creates_recruiter_profile(client: TestClient, session_factory) -> None:
    response = client.post(f"{API}/auth/signup", json=_signup_body(role="RECRUITER"))

    assert response.status_code == 201
    assert response.json()["user"]["recruiter_id"] is not None
    with session_factory() as db:
        assert db.query(Recruiter).count() == 1
        assert db.query(Applicant).count() == 0


def test_signup_with_mismatched_confirmation_creates_nothing(
    client: TestClient, session_factory
) -> None:
    response = client.post(
        f"{API}/auth/signup", json=_signup_body(confirm_password="password124")
    )

    assert response.status_code == 400
    assert response.json()["message"] == "Incorrect inputs"
    with session_factory() as db:
        assert db.query(User).count() == 0


@pytest.mark.parametrize(
    "overrides",
    [
        {"password": "short", "confirm_password": "short"},
        {"email": "not-an-email"},
        {"role": "ADMIN"},
        {"name": ""},
    ],
)
def test_signup_rejects_bad_input(client: TestClient, overrides: dict) -> None:
    response = client.post(f"{API}/auth/signup", json=_signup_body(**overrides))
    assert response.status_code == 400


def test_signup_with_taken_email_is_a_conflict(client: TestClient, make_client) -> None:
    assert client.post(f"{API}/auth/signup", json=_signup_body()).status_code == 201

    response = make_client().post(f"{API}/auth/signup", json=_signup_body(role="RECRUITER"))

    assert response.status_code == 409
    assert response.json()["message"] == "Email already exists"


def test_signin_token_role_matches_stored_role(client: TestClient, make_client) -> None:
    client.post(f"{API}/auth/signup", json=_signup_body(role="RECRUITER"))

    fresh = make_client()
    response = fresh.post(
        f"{API}/auth/signin", json={"email": "jane@example.com", "password": "password123"}
    )

    assert response.status_code == 200
    assert response.json()["user"]["last_login"] is not None
    payload = decode_access_token(response.cookies["token"])
    assert payload["role"] == "RECRUITER"
    assert int(payload["sub"]) == response.json()["user"]["id"]


def test_signin_with_wrong_password_is_unauthenticated(client: TestClient, make_client) -> None:
    client.post(f"{API}/auth/signup", json=_signup_body())

    response = make_client().post(
        f"{API}/auth/signin", json={"email": "jane@example.com", "password": "wrong-password"}
    )

    assert response.status_code == 401
    assert response.json() == {"message": "Incorrect email or password"}


def test_signin_with_short_wrong_password_is_unauthenticated(client: TestClient, make_client) -> None:
    client.post(f"{API}/auth/signup", json=_signup_body())

    response = make_client().post(
        f"{API}/auth/signin", json={"email": "jane@example.com", "password": "short"}
    )

    assert response.status_code == 401
    assert response.json() == {"message": "Incorrect email or password"}


def test_signin_with_unknown_email_is_unauthenticated(client: TestClient) -> None:
    response = client.post(
        f"{API}/auth/signin", json={"email": "nobody@example.com", "password": "password123"}
    )
    assert response.status_code == 401


def test_me_returns_current_user(signup) -> None:
    client, user = signup("APPLICANT")

    response = client.get(f"{API}/auth/me")

    assert response.status_code == 200
    assert response.json()["id"] == user["id"]
    assert response.json()["applicant_id"] == user["applicant_id"]


def test_me_without_cookie_is_unauthenticated(client: TestClient) -> None:
    response = client.get(f"{API}/auth/me")

    assert response.status_code == 401
    assert response.json()["message"] == "Unauthorized: No token provided"


def test_me_with_garbage_token_is_unauthenticated(client: TestClient) -> None:
    client.cookies.set("token", "garbage")

    response = client.get(f"{API}/auth/me")

    assert response.status_code == 401
    assert response.json()["message"] == "Unauthorized: Invalid token"


def _signed_token(**claims) -> str:
    claims.setdefault("exp", datetime.now(timezone.utc) + timedelta(minutes=5))
    return jwt.encode(claims, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


@pytest.mark.parametrize(
    "claims, reason",
    [
        ({"role": "APPLICANT"}, "missing subject"),
        ({"sub": "abc", "role": "APPLICANT"}, "invalid literal"),
        ({"sub": "1", "role": "ADMIN"}, "ADMIN"),
    ],
)
def test_signed_token_without_usable_claims_is_unauthenticated(
    client: TestClient, caplog: pytest.LogCaptureFixture, claims: dict, reason: str
) -> None:
    client.cookies.set("token", _signed_token(**claims))

    with caplog.at_level(logging.WARNING, logger="auth"):
        response = client.get(f"{API}/auth/me")

    assert response.status_code == 401
    assert response.json()["message"] == "Unauthorized: Invalid token"
    audit = [r.getMessage() for r in caplog.records if r.name == "auth"]
    assert any("InvalidPayload" in line and reason in line for line in audit)


def test_logout_clears_session(signup) -> None:
    client, _ = signup("APPLICANT")

    response = client.post(f"{API}/auth/logout")

    assert response.status_code == 200
    assert "token" not in client.cookies
    assert client.get(f"{API}/auth/me").status_code == 401


def test_logout_requires_session(client: TestClient) -> None:
    assert client.post(f"{API}/auth/logout").status_code == 401
