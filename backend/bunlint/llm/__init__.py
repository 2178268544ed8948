"""Gemini provider layer.

Vendor request/response models, provider configuration and a client that
walks an ordered (model, API version) candidate matrix with classified
fallback.
"""

from .client import GeminiClient, extract_text_from_response
from .config import ProviderConfig, build_model_attempt_order, resolve_provider_config
from .errors import (
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
)
from .models import Content, GenerationConfig, GenerationPayload, GenerationResult, Part

__all__ = [
    "GeminiClient",
    "extract_text_from_response",
    "ProviderConfig",
    "build_model_attempt_order",
    "resolve_provider_config",
    "LLMError",
    "ConfigurationError",
    "TransportError",
    "ModelNotFoundError",
    "RateLimitError",
    "ProviderError",
    "AuthenticationError",
    "InvalidRequestError",
    "EmptyOutputError",
    "ResponseParseError",
    "StyleComplianceError",
    "AiCheckParseError",
    "RetryDecision",
    "classify",
    "Content",
    "GenerationConfig",
    "GenerationPayload",
    "GenerationResult",
    "Part",
]
