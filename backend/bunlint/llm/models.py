"""LLM data models.

Request and response shapes for the Gemini ``generateContent`` endpoint.
Field names are snake_case in Python and serialized with the camelCase
aliases the REST API expects.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class Part(BaseModel):
    """A single text part of a message."""

    text: str


class Content(BaseModel):
    """One conversational turn."""

    role: Literal["user", "model"] = "user"
    parts: list[Part]


class GenerationConfig(BaseModel):
    """Sampling parameters."""

    model_config = ConfigDict(populate_by_name=True)

    temperature: float = Field(default=1.0, ge=0.0, le=2.0)
    top_p: float | None = Field(default=None, alias="topP")
    top_k: int | None = Field(default=None, alias="topK")
    max_output_tokens: int | None = Field(default=None, alias="maxOutputTokens")


class GenerationPayload(BaseModel):
    """Body of a ``generateContent`` request."""

    model_config = ConfigDict(populate_by_name=True)

    contents: list[Content]
    generation_config: GenerationConfig = Field(
        default_factory=GenerationConfig, alias="generationConfig"
    )

    @classmethod
    def from_prompt(cls, prompt: str, **generation_config: Any) -> "GenerationPayload":
        """Build a single-turn user payload."""
        return cls(
            contents=[Content(role="user", parts=[Part(text=prompt)])],
            generation_config=GenerationConfig(**generation_config),
        )

    @property
    def prompt(self) -> str:
        """Concatenated text of every part (useful in logs and tests)."""
        return "".join(part.text for content in self.contents for part in content.parts)

    def to_request_body(self) -> dict[str, Any]:
        """Serialize for the REST API."""
        return self.model_dump(by_alias=True, exclude_none=True)


class GenerationResult(BaseModel):
    """Text extracted from a successful response."""

    output_text: str
    model: str
    api_version: str
    latency_ms: int
    raw_response: dict[str, Any] | None = None
