"""Style transform endpoint.

Provides:
- POST /transform: Rewrite text into a writing style and punctuation mode
"""

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from bunlint.api.request_body import read_json_body, validate_request
from bunlint.api.response import success_response
from bunlint.models import MAX_INPUT_LENGTH, TransformRequest
from bunlint.services import transform_service
from bunlint.services.high_accuracy import (
    HIGH_ACCURACY_COOKIE_NAME,
    get_high_accuracy_secret,
    verify_high_accuracy_token,
)
from bunlint.services.style_catalog import get_style_preset

router = APIRouter(prefix="/transform", tags=["Transform"])

_FIELD_MESSAGES = {
    "inputText": "入力テキストが正しく送信されていません。",
    "inputText.string_too_short": "語尾変換を行うテキストを入力してください。",
    "inputText.string_too_long": f"テキストが長すぎます。{MAX_INPUT_LENGTH}文字以内に収めてください。",
    "writingStyle": "指定された語尾スタイルが無効です。",
    "punctuationMode": "指定された句読点スタイルが無効です。",
}


def _high_accuracy_unlocked(request: Request) -> bool:
    secret = get_high_accuracy_secret()
    if not secret:
        return False
    token = request.cookies.get(HIGH_ACCURACY_COOKIE_NAME)
    return verify_high_accuracy_token(token, secret) is not None


@router.post("")
async def transform(request: Request) -> JSONResponse:
    """Rewrite the input text into the requested writing style.

    Strict styles (だ・である) are validated and retried with escalating
    corrective instructions. A valid high-accuracy cookie puts the
    privileged model first.
    """
    body = await read_json_body(request, require_json_content_type=True)

    transform_request = validate_request(
        TransformRequest,
        {
            "inputText": body.get("inputText"),
            "writingStyle": body.get("writingStyle"),
            "punctuationMode": body.get("punctuationMode"),
            "useHighAccuracyModel": _high_accuracy_unlocked(request),
        },
        _FIELD_MESSAGES,
    )
    writing_style = transform_request.writing_style
    punctuation_mode = transform_request.punctuation_mode

    result = await transform_service.transform_text(transform_request)

    preset = get_style_preset(writing_style)
    return JSONResponse(
        content=success_response({
            "outputText": result.output_text,
            "writingStyle": writing_style.value,
            "punctuationMode": punctuation_mode.value,
            "message": f"{preset.label}のトーンに整形しました。",
        })
    )
