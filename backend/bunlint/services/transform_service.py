"""Style transform orchestration.

Runs a bounded sequence of attempts. Each attempt builds a prompt, executes
it across the full (model, API version) candidate matrix, normalizes the
output and validates it against the style contract. A non-compliant attempt
feeds its corrective directive into the next, stricter attempt.
"""

import logging
import uuid

from bunlint.llm import GeminiClient, LLMError, ProviderConfig, StyleComplianceError, resolve_provider_config
from bunlint.models import (
    AttemptConfig,
    EnforcementLevel,
    TransformRequest,
    TransformResult,
    WritingStyle,
)

from .normalization import normalize_model_output
from .prompts import build_transform_payload, build_transform_prompt
from .style_catalog import requires_strict_enforcement
from .validation import validate_writing_style_compliance

logger = logging.getLogger(__name__)

# Maximum number of attempts for strict-enforcement styles
MAX_STRICT_ATTEMPTS = 4


def plan_attempt(
    writing_style: WritingStyle,
    base_temperature: float,
    index: int,
) -> AttemptConfig | None:
    """Return the configuration of attempt ``index``, or None when exhausted.

    Strict styles escalate: temperature never increases and the enforcement
    level never decreases from one attempt to the next.
    """
    if index == 0:
        return AttemptConfig(
            strict_mode=False,
            temperature=base_temperature,
            enforcement_level=EnforcementLevel.standard,
        )

    if not requires_strict_enforcement(writing_style) or index >= MAX_STRICT_ATTEMPTS:
        return None

    if index == 1:
        return AttemptConfig(
            strict_mode=True,
            temperature=min(base_temperature, 0.25),
            enforcement_level=EnforcementLevel.standard,
        )

    if index == 2:
        return AttemptConfig(
            strict_mode=True,
            temperature=min(base_temperature, 0.15),
            enforcement_level=EnforcementLevel.reinforced,
        )

    return AttemptConfig(
        strict_mode=True,
        temperature=0.0,
        enforcement_level=EnforcementLevel.maximum,
    )


async def transform_text(
    request: TransformRequest,
    config: ProviderConfig | None = None,
    client: GeminiClient | None = None,
) -> TransformResult:
    """Rewrite ``request.input_text`` into the requested style.

    Args:
        request: Validated transform request.
        config: Provider configuration. Resolved from the environment if omitted.
        client: Gemini client. Built from ``config`` if omitted.

    Returns:
        TransformResult with compliant output text.

    Raises:
        ConfigurationError: GEMINI_API_KEY is missing.
        TransportError: Every candidate failed on some attempt.
        StyleComplianceError: Output stayed non-compliant on every attempt.
    """
    if client is None:
        if config is None:
            config = resolve_provider_config(
                use_high_accuracy_model=request.use_high_accuracy_model
            )
        client = GeminiClient(config)

    correlation_id = str(uuid.uuid4())
    validation_directive: str | None = None
    validation_reason: str | None = None
    offending_sentences: tuple[str, ...] = ()

    index = 0
    attempt = plan_attempt(request.writing_style, request.temperature, index)

    while attempt is not None:
        prompt = build_transform_prompt(
            input_text=request.input_text,
            writing_style=request.writing_style,
            punctuation_mode=request.punctuation_mode,
            strict_mode=attempt.strict_mode,
            validation_directive=validation_directive,
            enforcement_level=attempt.enforcement_level,
        )
        payload = build_transform_payload(prompt, attempt.temperature)

        result = await client.execute(
            payload,
            punctuation_mode=request.punctuation_mode,
            correlation_id=correlation_id,
        )

        output_text = normalize_model_output(result.output_text, request.writing_style)
        validation = validate_writing_style_compliance(output_text, request.writing_style)

        if validation.ok:
            logger.info(
                "Transform succeeded",
                extra={
                    "correlation_id": correlation_id,
                    "attempt": index + 1,
                    "writing_style": request.writing_style.value,
                    "model": result.model,
                },
            )
            return TransformResult(output_text=output_text, raw_response=result.raw_response)

        validation_directive = validation.directive
        validation_reason = validation.reason
        offending_sentences = validation.offending_sentences

        logger.warning(
            "Transform attempt %d was not style compliant (%d sentences)",
            index + 1,
            len(offending_sentences),
            extra={
                "correlation_id": correlation_id,
                "attempt": index + 1,
                "writing_style": request.writing_style.value,
                "enforcement_level": attempt.enforcement_level.value,
            },
        )

        index += 1
        attempt = plan_attempt(request.writing_style, request.temperature, index)

    logger.error(
        "Transform exhausted %d attempts without compliant output",
        index,
        extra={
            "correlation_id": correlation_id,
            "writing_style": request.writing_style.value,
        },
    )

    if validation_reason:
        raise StyleComplianceError(
            validation_reason,
            offending_sentences=list(offending_sentences),
            status=502,
            correlation_id=correlation_id,
        )

    raise LLMError(
        "Gemini API の出力が文体の条件を満たしませんでした。",
        status=502,
        correlation_id=correlation_id,
    )
