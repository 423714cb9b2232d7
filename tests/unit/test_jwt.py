"""Unit tests for JWT access-token verification."""

from datetime import UTC, datetime, timedelta

import pytest
from jose import jwt

from config.settings import settings
from src.bk_common.errors import InvalidCredentialsError
from src.bk_gateway.auth.jwt_handler import create_access_token, decode_access_token


def test_access_token_contains_correct_claims() -> None:
    payload = jwt.get_unverified_claims(create_access_token("user-123"))
    assert payload["sub"] == "user-123"
    assert payload["type"] == "access"


def test_decode_valid_token() -> None:
    assert decode_access_token(create_access_token("user-abc"))["sub"] == "user-abc"


def test_wrong_secret_rejected() -> None:
    token = jwt.encode({"sub": "u", "type": "access"}, "other-secret", algorithm="HS256")
    with pytest.raises(InvalidCredentialsError):
        decode_access_token(token)


def test_expired_token_rejected() -> None:
    past = datetime.now(UTC) - timedelta(minutes=5)
    token = jwt.encode(
        {"sub": "u", "type": "access", "exp": past}, settings.JWT_SECRET, algorithm="HS256"
    )
    with pytest.raises(InvalidCredentialsError):
        decode_access_token(token)


def test_non_access_token_rejected() -> None:
    token = jwt.encode({"sub": "u", "type": "refresh"}, settings.JWT_SECRET, algorithm="HS256")
    with pytest.raises(InvalidCredentialsError):
        decode_access_token(token)


def test_garbage_rejected() -> None:
    with pytest.raises(InvalidCredentialsError):
        decode_access_token("not-a-jwt")
