"""Cookie settings shared by the routes."""

import os


def secure_cookies() -> bool:
    """Cookies are marked Secure in production only."""
    return os.getenv("ENVIRONMENT", "development").lower() == "production"
