"""Response envelope helpers for consistent API responses."""

import re
from typing import Any

from bunlint.llm import LLMError

QUOTA_MESSAGE = "AI変換の提供元で利用上限に達しています。時間をおいて、もう一度お試しください。"
NOT_CONFIGURED_MESSAGE = "AI変換の設定が完了していません。管理者にお問い合わせください。"

_QUOTA_PATTERN = re.compile(r"quota|rate limit|billing|free[_\s-]?tier|limit:\s*0")


def success_response(data: Any) -> dict[str, Any]:
    """Create a success response envelope."""
    return {"data": data, "error": None}


def error_response(code: str, message: str, details: dict[str, Any] | None = None) -> dict[str, Any]:
    """Create an error response envelope."""
    error: dict[str, Any] = {"code": code, "message": message}
    if details:
        error["details"] = details
    return {"data": None, "error": error}


def user_facing_message(error: LLMError) -> str:
    """Translate a provider error into a message safe to show end users.

    Quota problems and missing credentials get fixed wording; any other
    message has the vendor name replaced. A developer code is appended
    as `` (DEV:<code>)``.
    """
    developer_code = f" (DEV:{error.developer_code})" if error.developer_code else ""

    if _QUOTA_PATTERN.search(error.message.lower()):
        return f"{QUOTA_MESSAGE}{developer_code}"

    if "GEMINI_API_KEY" in error.message:
        return f"{NOT_CONFIGURED_MESSAGE}{developer_code}"

    message = re.sub(r"Gemini API\s*", "AI変換", error.message, flags=re.IGNORECASE)
    message = re.sub(r"Gemini", "AI", message, flags=re.IGNORECASE)
    return f"{message}{developer_code}"
