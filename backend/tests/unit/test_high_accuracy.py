"""Unit tests for the high-accuracy unlock token."""

import os
from datetime import UTC, datetime, timedelta
from unittest.mock import patch

import jwt
import pytest

from bunlint.services.high_accuracy import (
    create_high_accuracy_token,
    get_high_accuracy_secret,
    verify_high_accuracy_token,
)

SECRET = "open-sesame-unlock-code-for-tests"


def _expires_in(**delta) -> datetime:
    return (datetime.now(UTC) + timedelta(**delta)).replace(microsecond=0)


class TestHighAccuracyToken:
    """Tests for token creation and verification."""

    def test_valid_token(self):
        """Test a fresh token verifies to its expiry."""
        expires_at = _expires_in(minutes=10)
        token = create_high_accuracy_token(expires_at, SECRET)

        assert verify_high_accuracy_token(token, SECRET) == expires_at

    def test_token_claims(self):
        """Test the token is an HS256 JWT carrying only the expiry."""
        expires_at = _expires_in(minutes=10)
        token = create_high_accuracy_token(expires_at, SECRET)

        assert jwt.get_unverified_header(token)["alg"] == "HS256"
        claims = jwt.decode(token, SECRET, algorithms=["HS256"])
        assert claims == {"exp": int(expires_at.timestamp())}

    def test_wrong_secret(self):
        """Test a token signed with another secret is rejected."""
        token = create_high_accuracy_token(_expires_in(minutes=10), "another-secret-of-decent-length")
        assert verify_high_accuracy_token(token, SECRET) is None

    def test_expired(self):
        """Test a token past its expiry is rejected."""
        token = create_high_accuracy_token(_expires_in(seconds=-1), SECRET)
        assert verify_high_accuracy_token(token, SECRET) is None

    def test_tampered_expiry(self):
        """Test extending the expiry invalidates the signature."""
        token = create_high_accuracy_token(_expires_in(minutes=10), SECRET)
        forged = jwt.encode({"exp": _expires_in(days=365)}, "forger-secret-of-decent-length", algorithm="HS256")
        header, _, signature = token.split(".")
        _, payload, _ = forged.split(".")

        assert verify_high_accuracy_token(f"{header}.{payload}.{signature}", SECRET) is None

    def test_missing_expiry(self):
        """Test a correctly signed token without exp is rejected."""
        token = jwt.encode({"sub": "x"}, SECRET, algorithm="HS256")
        assert verify_high_accuracy_token(token, SECRET) is None

    def test_unsigned_token(self):
        """Test the none algorithm is never accepted."""
        token = jwt.encode({"exp": _expires_in(minutes=10)}, None, algorithm="none")
        assert verify_high_accuracy_token(token, SECRET) is None

    @pytest.mark.parametrize("token", [None, "", "not a token", "ｔｏｋｅｎ", "a.b.c"])
    def test_malformed_tokens(self, token):
        """Test malformed tokens are rejected without raising."""
        assert verify_high_accuracy_token(token, SECRET) is None


class TestHighAccuracySecret:
    """Tests for reading the unlock code."""

    def test_unset(self):
        """Test the feature is off without a code."""
        with patch.dict(os.environ, {}, clear=True):
            assert get_high_accuracy_secret() is None

    def test_empty_is_unset(self):
        """Test an empty code counts as unset."""
        with patch.dict(os.environ, {"GEMINI_HIGH_ACCURACY_CODE": ""}, clear=True):
            assert get_high_accuracy_secret() is None

    def test_set(self):
        """Test the configured code is returned."""
        with patch.dict(os.environ, {"GEMINI_HIGH_ACCURACY_CODE": SECRET}, clear=True):
            assert get_high_accuracy_secret() == SECRET
