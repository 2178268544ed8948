"""Transform history endpoints."""

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from bunlint.api.request_body import read_json_body, validate_request
from bunlint.api.response import success_response
from bunlint.models import HISTORY_RETENTION_MINUTES, CreateHistoryRequest
from bunlint.services import history_service

router = APIRouter(prefix="/history", tags=["History"])

DEFAULT_HISTORY_LIMIT = 10
MAX_HISTORY_LIMIT = 50

_FIELD_MESSAGES = {
    "inputText": "入力テキストが指定されていません。",
    "writingStyle": "語尾スタイルの指定が無効です。",
    "punctuationMode": "句読点スタイルの指定が無効です。",
}


def _resolve_limit(raw: str | None) -> int:
    """Invalid or non-positive values fall back to the default."""
    try:
        parsed = int(raw) if raw else DEFAULT_HISTORY_LIMIT
    except ValueError:
        return DEFAULT_HISTORY_LIMIT
    if parsed <= 0:
        return DEFAULT_HISTORY_LIMIT
    return min(parsed, MAX_HISTORY_LIMIT)


@router.get("")
async def list_history(limit: str | None = None) -> JSONResponse:
    """List recent transforms, newest first."""
    records = await history_service.list_recent_history(_resolve_limit(limit))
    return JSONResponse(
        content=success_response({
            "history": [r.model_dump(mode="json") for r in records],
            "retentionMinutes": HISTORY_RETENTION_MINUTES,
        })
    )


@router.post("", status_code=201)
async def create_history(request: Request) -> JSONResponse:
    """Store a transform."""
    body = await read_json_body(request)
    create_request = validate_request(CreateHistoryRequest, body, _FIELD_MESSAGES)

    record = await history_service.create_history_record(create_request)
    return JSONResponse(
        status_code=201,
        content=success_response({
            "history": record.model_dump(mode="json"),
            "retentionMinutes": HISTORY_RETENTION_MINUTES,
        }),
    )
