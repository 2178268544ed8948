"""Unit tests for request model validation."""

import pytest

from bunlint.api.exceptions import ValidationError
from bunlint.api.request_body import validate_request
from bunlint.models import PunctuationMode, TransformRequest, WritingStyle

MESSAGES = {
    "inputText": "bad text",
    "inputText.string_too_short": "empty text",
    "writingStyle": "bad style",
}


class TestValidateRequest:
    """Tests for validate_request."""

    def test_valid_body(self):
        """Test camelCase keys populate the model and text is trimmed."""
        request = validate_request(
            TransformRequest,
            {"inputText": "  本文  ", "writingStyle": "humanize", "punctuationMode": "western"},
            MESSAGES,
        )

        assert request.input_text == "本文"
        assert request.writing_style is WritingStyle.humanize_desumasu
        assert request.punctuation_mode is PunctuationMode.western

    def test_error_type_message_wins(self):
        """Test a field and error type specific message is preferred."""
        with pytest.raises(ValidationError) as exc_info:
            validate_request(
                TransformRequest,
                {"inputText": "   ", "writingStyle": "dearu", "punctuationMode": "japanese"},
                MESSAGES,
            )

        assert exc_info.value.message == "empty text"

    def test_field_message(self):
        """Test the field message covers other error types."""
        with pytest.raises(ValidationError) as exc_info:
            validate_request(
                TransformRequest,
                {"inputText": "本文", "writingStyle": "casual", "punctuationMode": "japanese"},
                MESSAGES,
            )

        assert exc_info.value.message == "bad style"

    def test_first_invalid_field_reported(self):
        """Test fields are reported in declaration order."""
        with pytest.raises(ValidationError) as exc_info:
            validate_request(TransformRequest, {"inputText": 3, "writingStyle": "casual"}, MESSAGES)

        assert exc_info.value.message == "bad text"

    def test_fallback_to_pydantic_message(self):
        """Test fields without a configured message keep pydantic's text."""
        with pytest.raises(ValidationError) as exc_info:
            validate_request(
                TransformRequest,
                {"inputText": "本文", "writingStyle": "dearu", "punctuationMode": "french"},
                MESSAGES,
            )

        assert exc_info.value.message
        assert exc_info.value.message != "bad style"
