"""High-accuracy mode unlock endpoints.

Provides:
- GET /high-accuracy: Whether the unlock cookie is present and valid
- POST /high-accuracy: Exchange the access code for a short-lived cookie
"""

import hmac
from datetime import UTC, datetime

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from bunlint.api.cookies import secure_cookies
from bunlint.api.exceptions import FeatureUnavailableError, InvalidAccessCodeError, ValidationError
from bunlint.api.request_body import read_json_body
from bunlint.api.response import success_response
from bunlint.services.high_accuracy import (
    HIGH_ACCURACY_COOKIE_NAME,
    HIGH_ACCURACY_DURATION,
    create_high_accuracy_token,
    get_high_accuracy_secret,
    verify_high_accuracy_token,
)
from bunlint.services.usage_limit import to_iso

router = APIRouter(prefix="/high-accuracy", tags=["High Accuracy"])


@router.get("")
async def get_status(request: Request) -> JSONResponse:
    """Report whether high-accuracy mode is active for this client."""
    secret = get_high_accuracy_secret()
    token = request.cookies.get(HIGH_ACCURACY_COOKIE_NAME)

    if not secret or not token:
        return JSONResponse(content=success_response({"active": False}))

    expires_at = verify_high_accuracy_token(token, secret)
    if expires_at is None:
        response = JSONResponse(content=success_response({"active": False}))
        response.delete_cookie(
            HIGH_ACCURACY_COOKIE_NAME,
            path="/",
            httponly=True,
            samesite="strict",
            secure=secure_cookies(),
        )
        return response

    return JSONResponse(
        content=success_response({"active": True, "expiresAt": to_iso(expires_at)})
    )


@router.post("")
async def unlock(request: Request) -> JSONResponse:
    """Verify the access code and issue the signed unlock cookie."""
    secret = get_high_accuracy_secret()
    if not secret:
        raise FeatureUnavailableError("現在この機能は利用できません。")

    body = await read_json_body(request, invalid_message="リクエスト形式が正しくありません。")

    code = body.get("code")
    code = code.strip() if isinstance(code, str) else ""
    if not code:
        raise ValidationError("特別な暗号を入力してください。")

    if not hmac.compare_digest(code.encode("utf-8"), secret.encode("utf-8")):
        raise InvalidAccessCodeError("暗号が正しくありません。")

    expires_at = (datetime.now(UTC) + HIGH_ACCURACY_DURATION).replace(microsecond=0)
    response = JSONResponse(content=success_response({"ok": True, "expiresAt": to_iso(expires_at)}))
    response.set_cookie(
        key=HIGH_ACCURACY_COOKIE_NAME,
        value=create_high_accuracy_token(expires_at, secret),
        max_age=int(HIGH_ACCURACY_DURATION.total_seconds()),
        path="/",
        httponly=True,
        samesite="strict",
        secure=secure_cookies(),
    )
    return response
