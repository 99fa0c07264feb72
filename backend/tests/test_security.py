from __future__ import annotations

from datetime import timedelta

import jwt
import pytest

from jobboard.core.config import settings
from jobboard.core.errors import ConfigurationError, InvalidToken
from jobboard.core.security import (
    create_access_token,
    decode_access_token,
    ensure_signing_secret,
    get_password_hash,
    verify_password,
)
from jobboard.models.enums import Role


def test_password_hash_is_salted_and_verifies() -> None:
    first = get_password_hash("password123")
    second = get_password_hash("password123")

    assert first != second
    assert verify_password("password123", first)
    assert verify_password("password123", second)
    assert not verify_password("password124", first)


def test_token_carries_subject_and_role() -> None:
    token = create_access_token(42, Role.RECRUITER)
    payload = decode_access_token(token)

    assert payload["sub"] == "42"
    assert payload["role"] == "RECRUITER"
    assert payload["exp"] - payload["iat"] == settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60


def test_expired_token_is_rejected() -> None:
    token = create_access_token(1, Role.APPLICANT, expires_delta=timedelta(seconds=-10))
    with pytest.raises(InvalidToken):
        decode_access_token(token)


def test_token_signed_with_another_secret_is_rejected() -> None:
    forged = jwt.encode({"sub": "1", "role": "RECRUITER"}, "not-the-secret", algorithm="HS256")
    with pytest.raises(InvalidToken):
        decode_access_token(forged)


def test_malformed_token_is_rejected() -> None:
    with pytest.raises(InvalidToken):
        decode_access_token("definitely.not.a-jwt")


def test_missing_secret_fails_loudly(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(settings, "SECRET_KEY", "")

    with pytest.raises(ConfigurationError):
        ensure_signing_secret()
    with pytest.raises(ConfigurationError):
        create_access_token(1, Role.APPLICANT)
