"""Unit tests for AI-likelihood parsing and analysis."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from bunlint.llm import AiCheckParseError, GenerationResult, ProviderError
from bunlint.models import ConfidenceLevel
from bunlint.services.ai_checker_service import (
    DEFAULT_REASONING_BY_CONFIDENCE,
    analyze_ai_likelihood,
    clamp_score,
    describe_ai_likelihood,
    extract_json_snippet,
    normalize_confidence_level,
    parse_ai_check_response,
    sanitize_score,
)


class TestExtractJsonSnippet:
    """Tests for JSON span extraction."""

    def test_fenced_json(self):
        """Test a json fence is removed."""
        assert extract_json_snippet('```json\n{"score": 1}\n```') == '{"score": 1}'

    def test_surrounding_prose(self):
        """Test prose around the object is ignored."""
        assert extract_json_snippet('結果: {"score": 1} 以上') == '{"score": 1}'

    def test_no_object(self):
        """Test None when braces are missing or reversed."""
        assert extract_json_snippet("score 50") is None
        assert extract_json_snippet("} {") is None


class TestScoreHelpers:
    """Tests for score coercion and clamping."""

    @pytest.mark.parametrize(
        "value,expected",
        [(42, 42.0), (12.5, 12.5), ("87%", 87.0), (" 55点 ", 55.0), ("-3", -3.0), ("0.5", 0.5)],
    )
    def test_sanitize_score(self, value, expected):
        """Test numbers and numeric strings are accepted."""
        assert sanitize_score(value) == expected

    @pytest.mark.parametrize("value", [None, True, "高い", float("nan"), float("inf"), [50]])
    def test_sanitize_score_rejects(self, value):
        """Test unusable scores raise a parse error."""
        with pytest.raises(AiCheckParseError) as exc_info:
            sanitize_score(value)
        assert exc_info.value.message == "AIチェッカーのスコアを取得できませんでした。"

    @pytest.mark.parametrize(
        "value,expected",
        [(132.4, 100), (-5, 0), (49.5, 50), (49.4, 49), (2.5, 3), (float("nan"), 0)],
    )
    def test_clamp_score(self, value, expected):
        """Test clamping to [0, 100] with half-up rounding."""
        assert clamp_score(value) == expected


class TestNormalizeConfidenceLevel:
    """Tests for confidence label mapping."""

    @pytest.mark.parametrize(
        "label,expected",
        [
            ("HIGH", ConfidenceLevel.high),
            ("moderate", ConfidenceLevel.medium),
            ("weak signal", ConfidenceLevel.low),
            ("高い", ConfidenceLevel.high),
            ("中程度", ConfidenceLevel.medium),
            ("低", ConfidenceLevel.low),
            ("ふつう", ConfidenceLevel.medium),
        ],
    )
    def test_synonyms(self, label, expected):
        """Test English and Japanese synonyms."""
        assert normalize_confidence_level(label, 0) is expected

    def test_english_needs_word_boundary(self):
        """Test partial English words fall back to the score."""
        assert normalize_confidence_level("lowest", 80) is ConfidenceLevel.high

    @pytest.mark.parametrize(
        "score,expected",
        [(66, ConfidenceLevel.high), (65, ConfidenceLevel.medium), (34, ConfidenceLevel.medium), (33, ConfidenceLevel.low)],
    )
    def test_derived_from_score(self, score, expected):
        """Test thresholds when no label is usable."""
        assert normalize_confidence_level(None, score) is expected
        assert normalize_confidence_level("  ", score) is expected


class TestParseAiCheckResponse:
    """Tests for parse_ai_check_response."""

    def test_score_is_clamped(self):
        """Test an out-of-range score is clamped to 100."""
        result = parse_ai_check_response('{"score": 132.4, "reasoning": "..."}')

        assert result.score == 100
        assert result.confidence is ConfidenceLevel.high
        assert result.reasoning == "..."

    def test_aliases_and_default_reasoning(self):
        """Test alias keys and the default reasoning."""
        result = parse_ai_check_response('```json\n{"aiScore": "87%", "level": "中程度"}\n```')

        assert result.score == 87
        assert result.confidence is ConfidenceLevel.medium
        assert result.reasoning == DEFAULT_REASONING_BY_CONFIDENCE[ConfidenceLevel.medium]

    def test_first_present_alias_wins(self):
        """Test key precedence for score and reasoning."""
        result = parse_ai_check_response(
            '{"probability": 10, "score": null, "analysis": " 根拠 ", "summary": "要約"}'
        )

        assert result.score == 10
        assert result.confidence is ConfidenceLevel.low
        assert result.reasoning == "根拠"

    def test_non_string_reasoning_skipped(self):
        """Test reasoning keys with non-string values are ignored."""
        result = parse_ai_check_response('{"score": 50, "reasoning": 3, "reason": "理由"}')
        assert result.reasoning == "理由"

    def test_no_json(self):
        """Test text without an object."""
        with pytest.raises(AiCheckParseError) as exc_info:
            parse_ai_check_response("判定できません")
        assert exc_info.value.message == "AIチェッカーの解析結果を読み取れませんでした。"
        assert exc_info.value.status == 502

    def test_invalid_json(self):
        """Test a malformed object."""
        with pytest.raises(AiCheckParseError) as exc_info:
            parse_ai_check_response("{score: 50}")
        assert exc_info.value.message == "AIチェッカーの解析結果がJSON形式ではありませんでした。"

    def test_missing_score(self):
        """Test an object without any score key."""
        with pytest.raises(AiCheckParseError):
            parse_ai_check_response('{"reasoning": "理由"}')


class TestDescribeAiLikelihood:
    """Tests for coarse labels."""

    @pytest.mark.parametrize(
        "score,label",
        [
            (100, "AI生成の可能性が高い"),
            (74.5, "AI生成の可能性が高い"),
            (74.4, "AI生成の可能性は中程度"),
            (40, "AI生成の可能性は中程度"),
            (39, "人間が執筆した可能性が高い"),
            (-10, "人間が執筆した可能性が高い"),
        ],
    )
    def test_labels(self, score, label):
        """Test label thresholds."""
        assert describe_ai_likelihood(score) == label


class TestAnalyzeAiLikelihood:
    """Tests for analyze_ai_likelihood."""

    @staticmethod
    def _client(output=None, error=None) -> MagicMock:
        client = MagicMock()
        if error is not None:
            client.execute = AsyncMock(side_effect=error)
        else:
            client.execute = AsyncMock(
                return_value=GenerationResult(
                    output_text=output, model="gemini-2.0-flash", api_version="v1", latency_ms=5
                )
            )
        return client

    @pytest.mark.asyncio
    async def test_returns_parsed_result(self):
        """Test a single call is made and its reply parsed."""
        client = self._client('{"score": 12, "confidence": "high", "reasoning": "具体的な体験談"}')

        result = await analyze_ai_likelihood("本文です。", client=client)

        assert (result.score, result.confidence, result.reasoning) == (12, ConfidenceLevel.high, "具体的な体験談")
        client.execute.assert_awaited_once()

        payload = client.execute.await_args.args[0]
        assert payload.generation_config.temperature == 0.2
        assert payload.generation_config.top_k == 32
        assert "本文です。" in payload.prompt
        assert "punctuation_mode" not in client.execute.await_args.kwargs
        assert client.execute.await_args.kwargs["correlation_id"]

    @pytest.mark.asyncio
    async def test_parse_error_carries_context(self):
        """Test a parse failure is tagged with the model and correlation id."""
        client = self._client("AIらしさは高いです")

        with pytest.raises(AiCheckParseError) as exc_info:
            await analyze_ai_likelihood("本文", client=client)

        assert exc_info.value.model == "gemini-2.0-flash"
        assert exc_info.value.correlation_id == client.execute.await_args.kwargs["correlation_id"]

    @pytest.mark.asyncio
    async def test_transport_error_propagates(self):
        """Test executor failures are not wrapped."""
        client = self._client(error=ProviderError("down", status=503))

        with pytest.raises(ProviderError):
            await analyze_ai_likelihood("本文", client=client)
