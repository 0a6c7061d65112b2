from datetime import UTC, datetime, timedelta

import pytest
from jose import jwt

from halolight.auth.auth_core import (
    get_password_hash,
    issue_access_token,
    issue_refresh_token,
    issue_token_pair,
    verify_access_token,
    verify_password,
    verify_refresh_token,
)
from halolight.config import get_settings
from halolight.exceptions import UnauthorizedError


def test_password_hash_roundtrip():
    hashed = get_password_hash("password123")
    assert hashed != "password123"
    assert verify_password("password123", hashed)
    assert not verify_password("password124", hashed)


def test_verify_password_rejects_malformed_hash():
    assert verify_password("password123", "not-a-bcrypt-hash") is False


def test_access_token_claims():
    token = issue_access_token("user-1", "alice@example.com")
    payload = verify_access_token(token)

    assert payload["userId"] == "user-1"
    assert payload["email"] == "alice@example.com"
    assert payload["type"] == "access"
    assert payload["exp"] - payload["iat"] == 15 * 60


def test_refresh_token_expiry_matches_exp_claim():
    token, expires_at = issue_refresh_token("user-1")
    payload = verify_refresh_token(token)

    assert payload["type"] == "refresh"
    assert "email" not in payload
    assert int(expires_at.timestamp()) == payload["exp"]


def test_token_pair_values_are_distinct():
    first = issue_token_pair("user-1", "alice@example.com")
    second = issue_token_pair("user-1", "alice@example.com")

    assert first.token != first.refresh_token
    assert first.refresh_token != second.refresh_token
    assert first.expires_in == 900


def test_access_token_is_not_accepted_as_refresh_token():
    token = issue_access_token("user-1", "alice@example.com")
    with pytest.raises(UnauthorizedError) as exc_info:
        verify_refresh_token(token)
    assert exc_info.value.code == "INVALID_TOKEN"


def test_refresh_token_is_not_accepted_as_access_token():
    token, _ = issue_refresh_token("user-1")
    with pytest.raises(UnauthorizedError):
        verify_access_token(token)


def test_access_token_signed_with_refresh_secret_but_right_type_is_rejected():
    settings = get_settings()
    now = datetime.now(UTC)
    forged = jwt.encode(
        {"userId": "user-1", "email": "a@b.c", "type": "access", "iat": int(now.timestamp()),
         "exp": int((now + timedelta(minutes=5)).timestamp())},
        settings.JWT_REFRESH_SECRET,
        algorithm=settings.JWT_ALGORITHM,
    )
    with pytest.raises(UnauthorizedError):
        verify_access_token(forged)


def test_expired_access_token_is_rejected():
    settings = get_settings()
    past = datetime.now(UTC) - timedelta(hours=1)
    expired = jwt.encode(
        {"userId": "user-1", "email": "a@b.c", "type": "access", "iat": int(past.timestamp()),
         "exp": int((past + timedelta(minutes=15)).timestamp())},
        settings.JWT_SECRET,
        algorithm=settings.JWT_ALGORITHM,
    )
    with pytest.raises(UnauthorizedError):
        verify_access_token(expired)


def test_token_without_user_id_is_rejected():
    settings = get_settings()
    now = datetime.now(UTC)
    token = jwt.encode(
        {"type": "access", "exp": int((now + timedelta(minutes=5)).timestamp())},
        settings.JWT_SECRET,
        algorithm=settings.JWT_ALGORITHM,
    )
    with pytest.raises(UnauthorizedError):
        verify_access_token(token)
