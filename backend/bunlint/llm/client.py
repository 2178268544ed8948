"""Gemini client with candidate-matrix fallback.

Tries every (model, API version) pair in order until one returns usable text.
Failures are classified by ``errors.classify``:
- NEXT_VERSION: same model, next API version
- NEXT_MODEL: skip the remaining versions of this model
- FATAL: raise immediately
When every candidate fails, the last error is raised.
"""

import json
import logging
import time
import uuid
from typing import Any

import httpx

from bunlint.models import PunctuationMode
from bunlint.services.punctuation import convert_punctuation

from .config import ProviderConfig
from .errors import (
    EmptyOutputError,
    LLMError,
    ProviderError,
    ResponseParseError,
    RetryDecision,
    classify,
    transport_error_from_status,
)
from .models import GenerationPayload, GenerationResult

logger = logging.getLogger(__name__)


def extract_text_from_response(data: Any) -> str | None:
    """Join the text parts of the first candidate.

    Returns None when there is no candidate or the joined text is blank.
    """
    if not isinstance(data, dict):
        return None

    candidates = data.get("candidates")
    if not isinstance(candidates, list) or not candidates:
        return None

    content = candidates[0].get("content") if isinstance(candidates[0], dict) else None
    parts = content.get("parts") if isinstance(content, dict) else None
    if not isinstance(parts, list):
        return None

    text = "".join(
        part["text"] for part in parts if isinstance(part, dict) and isinstance(part.get("text"), str)
    ).strip()
    return text or None


def _error_message_from_body(body: str, status: int) -> str:
    message = f"Gemini API の呼び出しに失敗しました (status: {status})"
    if not body:
        return message
    try:
        parsed = json.loads(body)
    except ValueError:
        return message
    if isinstance(parsed, dict):
        error = parsed.get("error")
        if isinstance(error, dict) and isinstance(error.get("message"), str):
            return error["message"]
    return message


class GeminiClient:
    """Executes ``generateContent`` calls across a candidate matrix.

    Args:
        config: Resolved provider configuration.
        transport: Optional httpx transport (tests inject ``httpx.MockTransport``).
    """

    def __init__(
        self,
        config: ProviderConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._config = config
        self._transport = transport

    @property
    def config(self) -> ProviderConfig:
        return self._config

    def _endpoint(self, model: str, version: str) -> str:
        return f"{self._config.base_url}/{version}/models/{model}:generateContent"

    async def request(
        self,
        http: httpx.AsyncClient,
        model: str,
        version: str,
        payload: GenerationPayload,
        punctuation_mode: PunctuationMode | None = None,
    ) -> GenerationResult:
        """Issue one call to a single (model, version) candidate.

        Raises:
            TransportError: Non-2xx response or network failure.
            ResponseParseError: 2xx body is not JSON.
            EmptyOutputError: 2xx body without usable text.
        """
        start_time = time.perf_counter()

        try:
            response = await http.post(
                self._endpoint(model, version),
                params={"key": self._config.api_key},
                json=payload.to_request_body(),
            )
        except httpx.TimeoutException as e:
            raise ProviderError(
                f"Gemini API request timed out after {self._config.timeout}s",
                status=504,
                model=model,
                api_version=version,
                developer_code="GEMINI_API",
            ) from e
        except httpx.RequestError as e:
            raise ProviderError(
                f"Failed to connect to Gemini API: {e.__class__.__name__}",
                model=model,
                api_version=version,
                developer_code="GEMINI_API",
            ) from e

        body = response.text

        if not response.is_success:
            message = _error_message_from_body(body, response.status_code)
            raise transport_error_from_status(
                response.status_code,
                f"{message} (model: {model}, version: {version})",
                model=model,
                api_version=version,
            )

        data: Any = None
        if body:
            try:
                data = json.loads(body)
            except ValueError as e:
                raise ResponseParseError(
                    "Gemini API のレスポンス解析に失敗しました。",
                    model=model,
                    api_version=version,
                    developer_code="GEMINI_API",
                ) from e

        output_text = extract_text_from_response(data)
        if not output_text:
            raise EmptyOutputError(
                "Gemini API から有効な文章を取得できませんでした。",
                model=model,
                api_version=version,
                developer_code="GEMINI_API",
            )

        if punctuation_mode is not None:
            output_text = convert_punctuation(output_text, punctuation_mode)

        return GenerationResult(
            output_text=output_text,
            model=model,
            api_version=version,
            latency_ms=int((time.perf_counter() - start_time) * 1000),
            raw_response=data if isinstance(data, dict) else None,
        )

    async def execute(
        self,
        payload: GenerationPayload,
        punctuation_mode: PunctuationMode | None = None,
        correlation_id: str | None = None,
    ) -> GenerationResult:
        """Walk the candidate matrix until one call succeeds.

        Raises:
            LLMError: The last classified error if every candidate failed.
        """
        correlation_id = correlation_id or str(uuid.uuid4())
        last_error: LLMError | None = None

        async with httpx.AsyncClient(
            transport=self._transport,
            timeout=self._config.timeout,
        ) as http:
            for model in self._config.models:
                for version in self._config.api_versions:
                    logger.debug(
                        "Requesting %s (%s)",
                        model,
                        version,
                        extra={
                            "correlation_id": correlation_id,
                            "model": model,
                            "api_version": version,
                        },
                    )

                    try:
                        result = await self.request(
                            http,
                            model=model,
                            version=version,
                            payload=payload,
                            punctuation_mode=punctuation_mode,
                        )
                    except LLMError as e:
                        e.correlation_id = correlation_id
                        decision = classify(e)

                        if decision is RetryDecision.FATAL:
                            logger.error(
                                "Gemini request failed with non-retryable error: %s",
                                str(e),
                                extra={
                                    "correlation_id": correlation_id,
                                    "error_type": type(e).__name__,
                                },
                            )
                            raise

                        last_error = e
                        logger.warning(
                            "Gemini candidate %s (%s) failed: %s",
                            model,
                            version,
                            str(e),
                            extra={
                                "correlation_id": correlation_id,
                                "model": model,
                                "api_version": version,
                                "status": e.status,
                                "error_type": type(e).__name__,
                                "decision": decision.value,
                            },
                        )

                        if decision is RetryDecision.NEXT_MODEL:
                            break
                        continue

                    logger.info(
                        "Gemini request succeeded",
                        extra={
                            "correlation_id": correlation_id,
                            "model": result.model,
                            "api_version": result.api_version,
                            "latency_ms": result.latency_ms,
                        },
                    )
                    return result

        if last_error:
            raise last_error

        raise LLMError(
            "Gemini API の呼び出しに失敗しました。",
            status=500,
            developer_code="GEMINI_API",
            correlation_id=correlation_id,
        )
