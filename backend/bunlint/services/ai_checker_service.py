"""AI-likelihood analysis.

Asks the model to audit a text and report, as JSON, how likely it is to be
machine generated. The reply is parsed leniently: several key aliases are
accepted and the score is coerced and clamped.
"""

import json
import logging
import math
import re
import uuid
from typing import Any

from bunlint.llm import AiCheckParseError, GeminiClient, ProviderConfig, resolve_provider_config
from bunlint.models import AiCheckResult, ConfidenceLevel

from .prompts import build_ai_check_payload

logger = logging.getLogger(__name__)

DEFAULT_AI_CHECK_TEMPERATURE = 0.2

SCORE_KEYS = (
    "score",
    "aiScore",
    "likelihood",
    "probability",
    "ai_likelihood_percent",
    "aiLikelihoodPercent",
)
CONFIDENCE_KEYS = ("confidence", "level", "rating", "verdict")
REASONING_KEYS = ("reasoning", "analysis", "summary", "explanation", "reason", "detail")

DEFAULT_REASONING_BY_CONFIDENCE = {
    ConfidenceLevel.low: "AI生成らしさは低いと判断されました。",
    ConfidenceLevel.medium: "AI生成らしさは中程度と判断されました。",
    ConfidenceLevel.high: "AI生成らしさが高いと判断されました。",
}

# English synonyms match on word boundaries, CJK ones by containment
_CONFIDENCE_SYNONYMS = (
    (ConfidenceLevel.low, re.compile(r"\b(low|minor|small|weak)\b"), ("低", "弱", "小")),
    (
        ConfidenceLevel.medium,
        re.compile(r"\b(medium|moderate|mid|middle|normal)\b"),
        ("平均", "中", "ふつう", "普通"),
    ),
    (ConfidenceLevel.high, re.compile(r"\b(high|strong|major)\b"), ("大", "高", "強")),
)

_FENCE_START = re.compile(r"^```(?:json)?\s*", re.IGNORECASE)
_FENCE_END = re.compile(r"```$")
_NON_NUMERIC = re.compile(r"[^0-9.+-]")
_LEADING_NUMBER = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)")


def extract_json_snippet(text: str) -> str | None:
    """Return the outermost ``{...}`` span after stripping a code fence."""
    trimmed = text.strip()
    without_fence = _FENCE_END.sub("", _FENCE_START.sub("", trimmed, count=1)).strip()

    start = without_fence.find("{")
    end = without_fence.rfind("}")
    if start == -1 or end == -1 or end <= start:
        return None

    return without_fence[start:end + 1]


def _first_present(parsed: dict[str, Any], keys: tuple[str, ...]) -> Any:
    for key in keys:
        value = parsed.get(key)
        if value is not None:
            return value
    return None


def sanitize_score(value: Any) -> float:
    """Coerce a raw score to a finite float.

    Strings are stripped of everything except digits, sign and dot and the
    leading number is taken ("87%" -> 87).

    Raises:
        AiCheckParseError: No finite number could be obtained.
    """
    if isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value):
        return float(value)

    if isinstance(value, str):
        match = _LEADING_NUMBER.match(_NON_NUMERIC.sub("", value))
        if match:
            numeric = float(match.group(0))
            if math.isfinite(numeric):
                return numeric

    raise AiCheckParseError("AIチェッカーのスコアを取得できませんでした。", status=502)


def clamp_score(value: float) -> int:
    """Clamp to [0, 100] and round half up."""
    if not math.isfinite(value):
        return 0
    return int(math.floor(max(0.0, min(100.0, value)) + 0.5))


def normalize_confidence_level(value: Any, score: int) -> ConfidenceLevel:
    """Map a free-form confidence label to a level, else derive it from ``score``."""
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized:
            for level, english, cjk in _CONFIDENCE_SYNONYMS:
                if english.search(normalized) or any(ch in normalized for ch in cjk):
                    return level

    if score >= 66:
        return ConfidenceLevel.high
    if score >= 34:
        return ConfidenceLevel.medium
    return ConfidenceLevel.low


def parse_ai_check_response(raw: str) -> AiCheckResult:
    """Parse the model's JSON verdict.

    Raises:
        AiCheckParseError: No JSON object, invalid JSON, or no usable score.
    """
    snippet = extract_json_snippet(raw or "")
    if not snippet:
        raise AiCheckParseError("AIチェッカーの解析結果を読み取れませんでした。", status=502)

    try:
        parsed = json.loads(snippet)
    except ValueError as e:
        raise AiCheckParseError(
            "AIチェッカーの解析結果がJSON形式ではありませんでした。",
            status=502,
        ) from e

    if not isinstance(parsed, dict):
        raise AiCheckParseError(
            "AIチェッカーの解析結果がJSON形式ではありませんでした。",
            status=502,
        )

    score = clamp_score(sanitize_score(_first_present(parsed, SCORE_KEYS)))
    confidence = normalize_confidence_level(_first_present(parsed, CONFIDENCE_KEYS), score)

    reasoning = ""
    for key in REASONING_KEYS:
        if isinstance(parsed.get(key), str):
            reasoning = parsed[key].strip()
            break

    return AiCheckResult(
        score=score,
        confidence=confidence,
        reasoning=reasoning or DEFAULT_REASONING_BY_CONFIDENCE[confidence],
    )


def describe_ai_likelihood(score: float) -> str:
    """Coarse label for a likelihood score."""
    normalized = clamp_score(score)

    if normalized >= 75:
        return "AI生成の可能性が高い"

    if normalized >= 40:
        return "AI生成の可能性は中程度"

    return "人間が執筆した可能性が高い"


async def analyze_ai_likelihood(
    text: str,
    temperature: float = DEFAULT_AI_CHECK_TEMPERATURE,
    config: ProviderConfig | None = None,
    client: GeminiClient | None = None,
) -> AiCheckResult:
    """Run a single AI-likelihood audit of ``text``.

    Raises:
        ConfigurationError: GEMINI_API_KEY is missing.
        TransportError: Every candidate failed.
        AiCheckParseError: The model reply could not be parsed.
    """
    if client is None:
        client = GeminiClient(config or resolve_provider_config())

    correlation_id = str(uuid.uuid4())
    payload = build_ai_check_payload(text, temperature)

    result = await client.execute(payload, correlation_id=correlation_id)

    try:
        verdict = parse_ai_check_response(result.output_text)
    except AiCheckParseError as e:
        e.correlation_id = correlation_id
        e.model = result.model
        logger.error(
            "AI check response could not be parsed: %s",
            e.message,
            extra={"correlation_id": correlation_id, "model": result.model},
        )
        raise

    logger.info(
        "AI check completed",
        extra={
            "correlation_id": correlation_id,
            "model": result.model,
            "score": verdict.score,
            "confidence": verdict.confidence.value,
        },
    )
    return verdict
