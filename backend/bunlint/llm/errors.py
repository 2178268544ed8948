"""LLM error hierarchy.

Custom exceptions for Gemini operations with provider context.
Every error carries an HTTP-style ``status`` so the API layer can answer
without re-parsing messages; retry decisions go through ``classify``.
"""

import re
from enum import Enum


class LLMError(Exception):
    """Base exception for LLM operations."""

    default_status = 500

    def __init__(
        self,
        message: str,
        status: int | None = None,
        provider: str | None = "gemini",
        model: str | None = None,
        api_version: str | None = None,
        developer_code: str | None = None,
        correlation_id: str | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.status = status if status is not None else self.default_status
        self.provider = provider
        self.model = model
        self.api_version = api_version
        self.developer_code = developer_code
        self.correlation_id = correlation_id

    def __str__(self) -> str:
        parts = [super().__str__()]
        if self.model:
            parts.append(f"model={self.model}")
        if self.api_version:
            parts.append(f"version={self.api_version}")
        return " ".join(parts)


class ConfigurationError(LLMError):
    """Required configuration is missing (e.g. GEMINI_API_KEY).

    Fatal. Raised before any network call.
    """

    default_status = 500


class TransportError(LLMError):
    """Non-2xx response or network failure talking to the provider."""

    default_status = 502


class ModelNotFoundError(TransportError):
    """404, or model not available for this API version.

    Retry with the next API version of the same model.
    """

    default_status = 404


class RateLimitError(TransportError):
    """429 - Rate limit or quota exceeded.

    Retry with the next model.
    """

    default_status = 429


class ProviderError(TransportError):
    """500/503/507 or connection failure - provider-side problem.

    Retry with the next model.
    """

    default_status = 503


class AuthenticationError(TransportError):
    """401/403 - Key rejected by the provider."""

    default_status = 401


class InvalidRequestError(TransportError):
    """Other 4xx - the provider refused the request."""

    default_status = 400


class EmptyOutputError(LLMError):
    """2xx response without extractable text.

    Retryable like a transport error; never a valid result.
    """

    default_status = 502


class ResponseParseError(LLMError):
    """2xx response whose body is not JSON."""

    default_status = 502


class StyleComplianceError(LLMError):
    """Output still violates the style contract after every planned attempt."""

    default_status = 502

    def __init__(self, message: str, offending_sentences: list[str] | None = None, **kwargs):
        super().__init__(message, **kwargs)
        self.offending_sentences = list(offending_sentences or [])


class AiCheckParseError(LLMError):
    """AI-likelihood response is not the expected JSON object. Not retried."""

    default_status = 502


class RetryDecision(str, Enum):
    """What the request executor does after a failed candidate."""
    NEXT_VERSION = "next_version"
    NEXT_MODEL = "next_model"
    FATAL = "fatal"


_VERSION_NOT_FOUND_PATTERN = re.compile(r"not found for api version", re.IGNORECASE)
_CAPACITY_PATTERN = re.compile(
    r"quota|exhausted|overloaded|rate[\s_-]?limit|try again later",
    re.IGNORECASE,
)
_CAPACITY_STATUSES = {429, 500, 503, 507}


def transport_error_from_status(
    status: int,
    message: str,
    model: str | None = None,
    api_version: str | None = None,
) -> TransportError:
    """Map a non-2xx provider response to a structured error variant."""
    context = {
        "status": status,
        "model": model,
        "api_version": api_version,
        "developer_code": "GEMINI_API",
    }

    if status == 404 or (status == 400 and _VERSION_NOT_FOUND_PATTERN.search(message)):
        return ModelNotFoundError(message, **context)

    if status == 429:
        return RateLimitError(message, **context)

    if status in (401, 403):
        return AuthenticationError(message, **context)

    if status >= 500:
        return ProviderError(message, **context)

    return InvalidRequestError(message, **context)


def classify(error: Exception) -> RetryDecision:
    """Decide how the candidate matrix continues after ``error``."""
    if isinstance(error, ConfigurationError) or not isinstance(error, LLMError):
        return RetryDecision.FATAL

    if isinstance(error, ModelNotFoundError):
        return RetryDecision.NEXT_VERSION

    if isinstance(error, (RateLimitError, ProviderError)) or error.status in _CAPACITY_STATUSES:
        return RetryDecision.NEXT_MODEL

    # Free-text hints from the provider when the status alone is ambiguous
    if _CAPACITY_PATTERN.search(error.message):
        return RetryDecision.NEXT_MODEL

    return RetryDecision.NEXT_VERSION
