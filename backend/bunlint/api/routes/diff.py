"""Diff endpoint.

Provides:
- POST /diff: Word-level changes between an input text and its transform
"""

from dataclasses import asdict

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from bunlint.api.exceptions import ValidationError
from bunlint.api.request_body import read_json_body
from bunlint.api.response import success_response
from bunlint.services.text_diff import diff_words

router = APIRouter(prefix="/diff", tags=["Diff"])


@router.post("")
async def diff(request: Request) -> JSONResponse:
    """Return added, removed and unchanged segments in order."""
    body = await read_json_body(request)

    original = body.get("original")
    updated = body.get("updated")
    if not isinstance(original, str) or not isinstance(updated, str):
        raise ValidationError("比較するテキストが正しく送信されていません。")

    return JSONResponse(
        content=success_response({
            "segments": [asdict(segment) for segment in diff_words(original, updated)],
        })
    )
