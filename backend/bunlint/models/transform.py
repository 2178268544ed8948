"""Transform and AI-check value objects."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .style import PunctuationMode, WritingStyle

# Maximum input length accepted for a transform or AI check
MAX_INPUT_LENGTH = 4000

DEFAULT_TRANSFORM_TEMPERATURE = 0.4


class EnforcementLevel(str, Enum):
    """Escalating intensity of corrective instructions across retries."""
    standard = "standard"
    reinforced = "reinforced"
    maximum = "maximum"


class ConfidenceLevel(str, Enum):
    low = "low"
    medium = "medium"
    high = "high"


class TransformRequest(BaseModel):
    """A single style transform request.

    Accepts the camelCase names of the HTTP body as well as field names.
    Input text is trimmed before its length is checked.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, str_strip_whitespace=True)

    input_text: str = Field(min_length=1, max_length=MAX_INPUT_LENGTH, alias="inputText")
    writing_style: WritingStyle = Field(alias="writingStyle")
    punctuation_mode: PunctuationMode = Field(alias="punctuationMode")
    temperature: float = Field(default=DEFAULT_TRANSFORM_TEMPERATURE, ge=0.0, le=2.0)
    use_high_accuracy_model: bool = Field(default=False, alias="useHighAccuracyModel")

    @field_validator("writing_style", mode="before")
    @classmethod
    def accept_legacy_style(cls, value: object) -> object:
        # Deferred: style_catalog imports this package
        from bunlint.services.style_catalog import normalize_writing_style

        return normalize_writing_style(value) or value


class AttemptConfig(BaseModel):
    """One planned try of a transform."""

    model_config = ConfigDict(frozen=True)

    strict_mode: bool
    temperature: float = Field(ge=0.0, le=2.0)
    enforcement_level: EnforcementLevel = EnforcementLevel.standard


class TransformResult(BaseModel):
    """Final compliant output of a transform."""

    model_config = ConfigDict(frozen=True)

    output_text: str
    raw_response: dict[str, Any] | None = None  # diagnostics only


class AiCheckResult(BaseModel):
    """Parsed AI-likelihood self-assessment."""

    model_config = ConfigDict(frozen=True)

    score: int = Field(ge=0, le=100)
    confidence: ConfidenceLevel
    reasoning: str
