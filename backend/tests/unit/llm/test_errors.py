"""Unit tests for the LLM error hierarchy and retry classification."""

import pytest

from bunlint.llm.errors import (
    AiCheckParseError,
    AuthenticationError,
    ConfigurationError,
    EmptyOutputError,
    InvalidRequestError,
    LLMError,
    ModelNotFoundError,
    ProviderError,
    RateLimitError,
    ResponseParseError,
    RetryDecision,
    StyleComplianceError,
    TransportError,
    classify,
    transport_error_from_status,
)


class TestErrorDefaults:
    """Tests for default statuses and context."""

    def test_default_statuses(self):
        """Test each variant carries its HTTP-style status."""
        assert ConfigurationError("x").status == 500
        assert ModelNotFoundError("x").status == 404
        assert RateLimitError("x").status == 429
        assert ProviderError("x").status == 503
        assert EmptyOutputError("x").status == 502
        assert StyleComplianceError("x").status == 502
        assert AiCheckParseError("x").status == 502

    def test_explicit_status_overrides_default(self):
        """Test that an explicit status wins."""
        assert ProviderError("timeout", status=504).status == 504

    def test_str_includes_model_and_version(self):
        """Test string form carries candidate context."""
        error = LLMError("failed", model="gemini-2.0-flash", api_version="v1")
        assert str(error) == "failed model=gemini-2.0-flash version=v1"
        assert error.message == "failed"
        assert error.provider == "gemini"

    def test_style_compliance_error_keeps_sentences(self):
        """Test offending sentences are kept in order."""
        error = StyleComplianceError("reason", offending_sentences=["a", "b"])
        assert error.offending_sentences == ["a", "b"]


class TestTransportErrorFromStatus:
    """Tests for mapping non-2xx responses to variants."""

    @pytest.mark.parametrize(
        "status,message,expected",
        [
            (404, "Not found", ModelNotFoundError),
            (400, "models/x is not found for API version v1", ModelNotFoundError),
            (400, "Invalid argument", InvalidRequestError),
            (429, "Resource exhausted", RateLimitError),
            (401, "API key not valid", AuthenticationError),
            (403, "Permission denied", AuthenticationError),
            (500, "Internal", ProviderError),
            (503, "Unavailable", ProviderError),
            (418, "Teapot", InvalidRequestError),
        ],
    )
    def test_variant_by_status(self, status, message, expected):
        """Test the variant chosen for each status."""
        error = transport_error_from_status(status, message, model="m", api_version="v1")
        assert type(error) is expected
        assert isinstance(error, TransportError)
        assert error.status == status
        assert error.model == "m"
        assert error.developer_code == "GEMINI_API"


class TestClassify:
    """Tests for retry decisions."""

    def test_configuration_error_is_fatal(self):
        """Test missing configuration aborts immediately."""
        assert classify(ConfigurationError("GEMINI_API_KEY missing")) is RetryDecision.FATAL

    def test_non_llm_error_is_fatal(self):
        """Test foreign exceptions are never retried."""
        assert classify(ValueError("boom")) is RetryDecision.FATAL

    def test_model_not_found_tries_next_version(self):
        """Test 404 moves on to the next API version."""
        assert classify(ModelNotFoundError("missing", status=404)) is RetryDecision.NEXT_VERSION

    @pytest.mark.parametrize("status", [429, 500, 503, 507])
    def test_capacity_statuses_skip_model(self, status):
        """Test capacity statuses move on to the next model."""
        error = transport_error_from_status(status, "problem")
        assert classify(error) is RetryDecision.NEXT_MODEL

    @pytest.mark.parametrize(
        "message",
        [
            "Quota exceeded for project",
            "Resource has been exhausted",
            "The model is overloaded",
            "Rate limit reached",
            "Please try again later",
        ],
    )
    def test_capacity_messages_skip_model(self, message):
        """Test capacity hints in the message move on to the next model."""
        assert classify(InvalidRequestError(message, status=400)) is RetryDecision.NEXT_MODEL

    def test_other_failures_try_next_version(self):
        """Test remaining failures keep walking the matrix."""
        assert classify(InvalidRequestError("Bad request", status=400)) is RetryDecision.NEXT_VERSION
        assert classify(EmptyOutputError("empty")) is RetryDecision.NEXT_VERSION
        assert classify(ResponseParseError("not json")) is RetryDecision.NEXT_VERSION
        assert classify(AuthenticationError("denied", status=401)) is RetryDecision.NEXT_VERSION
