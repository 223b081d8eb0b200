"""Unit tests for session tokens and password hashing."""

import uuid
from datetime import UTC, datetime, timedelta

import jwt
import pytest

from app.core import settings
from app.services.auth import (
    InvalidTokenError,
    SessionClaims,
    TokenExpiredError,
    decode_token,
    hash_password,
    issue_token,
    verify_password,
    verify_token,
)


def _tamper(token: str) -> str:
    """Flip one character of the payload segment."""
    header, payload, signature = token.split(".")
    index = len(payload) // 2
    replacement = "A" if payload[index] != "A" else "B"
    payload = payload[:index] + replacement + payload[index + 1 :]
    return ".".join([header, payload, signature])


class TestIssueAndVerify:
    """Tests for issue_token() / verify_token()."""

    def test_round_trip_returns_claims(self):
        user_id = uuid.uuid4()
        token = issue_token(user_id, "ada@example.com")

        assert verify_token(token) == SessionClaims(user_id=user_id, email="ada@example.com")

    def test_token_expires_after_seven_days(self):
        issued_at = datetime(2026, 1, 1, tzinfo=UTC)
        token = issue_token(uuid.uuid4(), "ada@example.com", now=issued_at)

        payload = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
            options={"verify_exp": False},
        )
        assert payload["exp"] - payload["iat"] == 7 * 24 * 60 * 60

    def test_expired_token_rejected(self):
        issued_at = datetime.now(UTC) - timedelta(days=8)
        token = issue_token(uuid.uuid4(), "ada@example.com", now=issued_at)

        assert verify_token(token) is None
        with pytest.raises(TokenExpiredError):
            decode_token(token)

    def test_token_rejected_at_expiry_instant(self):
        """Test that a token is already invalid when exactly seven days have passed."""
        issued_at = datetime.now(UTC) - timedelta(days=7)
        token = issue_token(uuid.uuid4(), "ada@example.com", now=issued_at)

        assert verify_token(token) is None
        with pytest.raises(TokenExpiredError):
            decode_token(token)

    def test_token_still_valid_before_expiry(self):
        issued_at = datetime.now(UTC) - timedelta(days=6, hours=23)
        token = issue_token(uuid.uuid4(), "ada@example.com", now=issued_at)

        assert verify_token(token) is not None

    def test_tampered_token_rejected(self):
        token = issue_token(uuid.uuid4(), "ada@example.com")

        assert verify_token(_tamper(token)) is None
        with pytest.raises(InvalidTokenError):
            decode_token(_tamper(token))

    def test_token_signed_with_other_key_rejected(self):
        now = datetime.now(UTC)
        forged = jwt.encode(
            {
                "sub": str(uuid.uuid4()),
                "email": "eve@example.com",
                "iat": now,
                "exp": now + timedelta(days=7),
            },
            "some-other-secret-that-is-long-enough-000",
            algorithm="HS256",
        )
        assert verify_token(forged) is None

    def test_unsigned_token_rejected(self):
        now = datetime.now(UTC)
        unsigned = jwt.encode(
            {"sub": str(uuid.uuid4()), "email": "eve@example.com", "iat": now, "exp": now + timedelta(days=1)},
            None,
            algorithm="none",
        )
        assert verify_token(unsigned) is None

    def test_missing_claims_rejected(self):
        now = datetime.now(UTC)
        token = jwt.encode(
            {"sub": str(uuid.uuid4()), "exp": now + timedelta(days=1)},
            settings.jwt_secret_key,
            algorithm=settings.jwt_algorithm,
        )
        assert verify_token(token) is None

    def test_non_uuid_subject_rejected(self):
        now = datetime.now(UTC)
        token = jwt.encode(
            {"sub": "42", "email": "a@b.co", "iat": now, "exp": now + timedelta(days=1)},
            settings.jwt_secret_key,
            algorithm=settings.jwt_algorithm,
        )
        assert verify_token(token) is None

    @pytest.mark.parametrize("garbage", ["", "not-a-token", "a.b.c", "...."])
    def test_malformed_tokens_rejected(self, garbage):
        assert verify_token(garbage) is None


class TestPasswordHashing:
    """Tests for hash_password() / verify_password()."""

    def test_hash_is_not_plaintext(self):
        hashed = hash_password("correct-horse")
        assert hashed != "correct-horse"
        assert hashed.startswith("$argon2id$")

    def test_verify_correct_password(self):
        assert verify_password("correct-horse", hash_password("correct-horse")) is True

    def test_verify_wrong_password(self):
        assert verify_password("wrong", hash_password("correct-horse")) is False

    def test_verify_against_invalid_hash(self):
        assert verify_password("anything", "not-a-hash") is False
