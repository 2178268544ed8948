"""Integration tests for the high-accuracy unlock endpoints."""

import os
from datetime import UTC, datetime, timedelta
from unittest.mock import patch

from fastapi.testclient import TestClient

from bunlint.api.main import app
from bunlint.services.high_accuracy import HIGH_ACCURACY_COOKIE_NAME, create_high_accuracy_token

SECRET = "secret-code"


class TestUnlock:
    """Tests for POST /api/high-accuracy."""

    def test_correct_code_sets_cookie(self):
        """Test a correct code issues a 10-minute cookie."""
        with patch.dict(os.environ, {"GEMINI_HIGH_ACCURACY_CODE": SECRET}):
            with TestClient(app) as client:
                response = client.post("/api/high-accuracy", json={"code": f"  {SECRET} "})

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["ok"] is True
        assert data["expiresAt"].endswith("Z")

        cookie = response.headers["set-cookie"]
        assert cookie.startswith(f"{HIGH_ACCURACY_COOKIE_NAME}=")
        assert "Max-Age=600" in cookie
        assert "HttpOnly" in cookie
        assert "SameSite=strict" in cookie

    def test_wrong_code(self):
        """Test a wrong code is rejected with 401."""
        with patch.dict(os.environ, {"GEMINI_HIGH_ACCURACY_CODE": SECRET}):
            with TestClient(app) as client:
                response = client.post("/api/high-accuracy", json={"code": "guess"})

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "INVALID_ACCESS_CODE"
        assert "set-cookie" not in response.headers

    def test_empty_code(self):
        """Test a missing or blank code is a validation error."""
        with patch.dict(os.environ, {"GEMINI_HIGH_ACCURACY_CODE": SECRET}):
            with TestClient(app) as client:
                blank = client.post("/api/high-accuracy", json={"code": "  "})
                missing = client.post("/api/high-accuracy", json={})

        assert blank.status_code == 400
        assert missing.status_code == 400
        assert blank.json()["error"]["message"] == "特別な暗号を入力してください。"

    def test_malformed_body(self):
        """Test a non-object body."""
        with patch.dict(os.environ, {"GEMINI_HIGH_ACCURACY_CODE": SECRET}):
            with TestClient(app) as client:
                response = client.post("/api/high-accuracy", json=["code"])

        assert response.status_code == 400
        assert response.json()["error"]["message"] == "リクエスト形式が正しくありません。"

    def test_feature_disabled(self):
        """Test 503 when no code is configured."""
        with patch.dict(os.environ, {"GEMINI_HIGH_ACCURACY_CODE": ""}):
            with TestClient(app) as client:
                response = client.post("/api/high-accuracy", json={"code": "anything"})

        assert response.status_code == 503
        assert response.json()["error"]["code"] == "FEATURE_UNAVAILABLE"


class TestStatus:
    """Tests for GET /api/high-accuracy."""

    def test_inactive_without_cookie(self):
        """Test the default state."""
        with patch.dict(os.environ, {"GEMINI_HIGH_ACCURACY_CODE": SECRET}):
            with TestClient(app) as client:
                response = client.get("/api/high-accuracy")

        assert response.json() == {"data": {"active": False}, "error": None}

    def test_active_after_unlock(self):
        """Test the cookie from a successful unlock activates the mode."""
        with patch.dict(os.environ, {"GEMINI_HIGH_ACCURACY_CODE": SECRET}):
            with TestClient(app) as client:
                unlocked = client.post("/api/high-accuracy", json={"code": SECRET})
                response = client.get("/api/high-accuracy")

        data = response.json()["data"]
        assert data["active"] is True
        assert data["expiresAt"] == unlocked.json()["data"]["expiresAt"]

    def test_invalid_cookie_is_cleared(self):
        """Test a forged cookie reports inactive and is deleted."""
        token = create_high_accuracy_token(datetime.now(UTC) + timedelta(minutes=5), "forged")

        with patch.dict(os.environ, {"GEMINI_HIGH_ACCURACY_CODE": SECRET}):
            with TestClient(app, cookies={HIGH_ACCURACY_COOKIE_NAME: token}) as client:
                response = client.get("/api/high-accuracy")

        assert response.json()["data"] == {"active": False}
        cookie = response.headers["set-cookie"]
        assert cookie.startswith(f"{HIGH_ACCURACY_COOKIE_NAME}=")
        assert "Max-Age=0" in cookie

    def test_expired_cookie(self):
        """Test an expired token reports inactive."""
        token = create_high_accuracy_token(datetime.now(UTC) - timedelta(seconds=1), SECRET)

        with patch.dict(os.environ, {"GEMINI_HIGH_ACCURACY_CODE": SECRET}):
            with TestClient(app, cookies={HIGH_ACCURACY_COOKIE_NAME: token}) as client:
                response = client.get("/api/high-accuracy")

        assert response.json()["data"] == {"active": False}
