"""Signed, short-lived token that unlocks the high-accuracy model.

The token is an HS256 JWT keyed by the unlock code; its only claim is ``exp``.
"""

import os
from datetime import UTC, datetime, timedelta

import jwt

HIGH_ACCURACY_COOKIE_NAME = "bunlint_high_accuracy"
HIGH_ACCURACY_DURATION = timedelta(minutes=10)
TOKEN_ALGORITHM = "HS256"


def get_high_accuracy_secret() -> str | None:
    """The unlock code from GEMINI_HIGH_ACCURACY_CODE, or None when unset."""
    return os.getenv("GEMINI_HIGH_ACCURACY_CODE") or None


def create_high_accuracy_token(expires_at: datetime, secret: str) -> str:
    return jwt.encode({"exp": expires_at}, secret, algorithm=TOKEN_ALGORITHM)


def verify_high_accuracy_token(token: str | None, secret: str) -> datetime | None:
    """Return the token's expiry when it is authentic and unexpired, else None."""
    if not isinstance(token, str) or not token:
        return None

    try:
        payload = jwt.decode(
            token,
            secret,
            algorithms=[TOKEN_ALGORITHM],
            options={"require": ["exp"]},
        )
    except jwt.PyJWTError:
        return None

    return datetime.fromtimestamp(payload["exp"], UTC)
