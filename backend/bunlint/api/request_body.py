"""JSON request body parsing shared by the routes."""

import json
import re
from collections.abc import Mapping
from typing import Any, TypeVar

from fastapi import Request
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from bunlint.api.exceptions import UnsupportedMediaTypeError, ValidationError

_JSON_CONTENT_TYPE = re.compile(r"application/json", re.IGNORECASE)

INVALID_BODY_MESSAGE = "リクエストボディの解析に失敗しました。JSON 形式で送信してください。"

ModelT = TypeVar("ModelT", bound=BaseModel)


async def read_json_body(
    request: Request,
    require_json_content_type: bool = False,
    invalid_message: str = INVALID_BODY_MESSAGE,
) -> dict[str, Any]:
    """Return the request body as a JSON object.

    Raises:
        UnsupportedMediaTypeError: Content type is not JSON and JSON is required.
        ValidationError: Body is not a JSON object.
    """
    content_type = request.headers.get("content-type")
    if require_json_content_type and not (content_type and _JSON_CONTENT_TYPE.search(content_type)):
        raise UnsupportedMediaTypeError(content_type)

    try:
        body = json.loads(await request.body())
    except (ValueError, UnicodeDecodeError) as e:
        raise ValidationError(invalid_message) from e

    if not isinstance(body, dict):
        raise ValidationError(invalid_message)

    return body


def validate_request(
    model: type[ModelT],
    data: Mapping[str, Any],
    messages: Mapping[str, str],
) -> ModelT:
    """Build ``model`` from ``data``, reporting the first invalid field.

    ``messages`` is keyed by ``"<field>.<error type>"`` or ``"<field>"``, using
    the body's field names (e.g. ``"inputText.string_too_long"``).

    Raises:
        ValidationError: With the message of the first failing field.
    """
    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        first = e.errors()[0]
        field = str(first["loc"][0]) if first["loc"] else ""
        message = messages.get(f"{field}.{first['type']}") or messages.get(field)
        raise ValidationError(message or first["msg"]) from e
