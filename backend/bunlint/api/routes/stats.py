"""Text statistics endpoint."""

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from bunlint.api.exceptions import ValidationError
from bunlint.api.request_body import read_json_body
from bunlint.api.response import success_response
from bunlint.services.text_stats import get_text_stats

router = APIRouter(prefix="/stats", tags=["Stats"])


@router.post("")
async def text_stats(request: Request) -> JSONResponse:
    """Count characters, content words and sentences."""
    body = await read_json_body(request)

    text = body.get("text")
    if not isinstance(text, str):
        raise ValidationError("テキストが正しく送信されていません。")

    stats = get_text_stats(text, exclude_whitespace=bool(body.get("excludeWhitespace")))
    return JSONResponse(
        content=success_response({
            "characters": stats.characters,
            "words": stats.words,
            "sentences": stats.sentences,
            "punctuationMode": stats.punctuation_mode.value,
        })
    )
