"""AI-likelihood check endpoint.

Provides:
- POST /ai-check: Estimate how likely a text is machine generated

Limited to one successful check per JST calendar day via a cookie.
"""

from datetime import UTC, datetime

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from bunlint.api.cookies import secure_cookies
from bunlint.api.exceptions import DailyLimitExceededError, ValidationError
from bunlint.api.request_body import read_json_body
from bunlint.api.response import success_response
from bunlint.models import MAX_INPUT_LENGTH
from bunlint.services import ai_checker_service
from bunlint.services.usage_limit import (
    AI_CHECK_COOKIE_NAME,
    AI_CHECK_LIMIT_MESSAGE,
    is_same_jst_date,
    next_jst_midnight,
    parse_timestamp,
    to_iso,
)

router = APIRouter(prefix="/ai-check", tags=["AI Check"])


@router.post("")
async def ai_check(request: Request) -> JSONResponse:
    """Run the AI-likelihood audit on the input text."""
    body = await read_json_body(
        request,
        invalid_message="解析するテキストが正しく送信されていません。",
    )

    input_text = body.get("inputText")
    if not isinstance(input_text, str):
        raise ValidationError("解析するテキストが正しく送信されていません。")

    trimmed_text = input_text.strip()
    if not trimmed_text:
        raise ValidationError("AIチェッカーを実行するテキストを入力してください。")

    if len(trimmed_text) > MAX_INPUT_LENGTH:
        raise ValidationError(f"テキストが長すぎます。{MAX_INPUT_LENGTH}文字以内に収めてください。")

    now = datetime.now(UTC)
    last_checked = parse_timestamp(request.cookies.get(AI_CHECK_COOKIE_NAME))
    if last_checked is not None and is_same_jst_date(last_checked, now):
        raise DailyLimitExceededError(AI_CHECK_LIMIT_MESSAGE, last_checked_at=to_iso(last_checked))

    result = await ai_checker_service.analyze_ai_likelihood(trimmed_text)

    checked_at = to_iso(now)
    response = JSONResponse(
        content=success_response({
            "score": result.score,
            "confidence": result.confidence.value,
            "reasoning": result.reasoning,
            "label": ai_checker_service.describe_ai_likelihood(result.score),
            "checkedAt": checked_at,
        })
    )
    response.set_cookie(
        key=AI_CHECK_COOKIE_NAME,
        value=checked_at,
        expires=next_jst_midnight(now),
        path="/",
        httponly=True,
        samesite="lax",
        secure=secure_cookies(),
    )
    return response
