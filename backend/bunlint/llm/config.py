"""Provider configuration.

Environment variables are read once per call into an immutable
``ProviderConfig`` that is passed explicitly to the request executor.

Configuration (env vars):
- GEMINI_API_KEY: API key (required)
- GEMINI_MODEL: Base model (default: gemini-2.0-flash-lite)
- GEMINI_API_VERSION: Comma-separated API versions (default: v1beta,v1)
- GEMINI_API_BASE_URL: Endpoint host (default: https://generativelanguage.googleapis.com)
- GEMINI_TIMEOUT_SECONDS: Per-request timeout (default: 60)
"""

import os
import re

from pydantic import BaseModel, ConfigDict, Field

from .errors import ConfigurationError

DEFAULT_GEMINI_MODEL = "gemini-2.0-flash-lite"
GEMINI_FLASH_MODEL = "gemini-2.0-flash"
HIGH_ACCURACY_MODEL = "gemini-2.5-flash"
DEFAULT_API_VERSIONS = ("v1beta", "v1")
DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com"
DEFAULT_TIMEOUT = 60.0

# Each default model falls back to its sibling
_SIBLING_MODELS = {
    DEFAULT_GEMINI_MODEL: GEMINI_FLASH_MODEL,
    GEMINI_FLASH_MODEL: DEFAULT_GEMINI_MODEL,
}


class ProviderConfig(BaseModel):
    """Immutable provider settings resolved for one call."""

    model_config = ConfigDict(frozen=True)

    api_key: str = Field(min_length=1, repr=False)
    models: tuple[str, ...] = Field(min_length=1)
    api_versions: tuple[str, ...] = Field(min_length=1)
    base_url: str = DEFAULT_BASE_URL
    timeout: float | None = DEFAULT_TIMEOUT

    @property
    def candidates(self) -> list[tuple[str, str]]:
        """The (model, version) matrix in attempt order."""
        return [(model, version) for model in self.models for version in self.api_versions]


def normalize_model_name(model: str) -> str:
    """Strip a ``models/`` prefix and replace whitespace with dashes."""
    return re.sub(r"\s+", "-", re.sub(r"^models/", "", model.strip()))


def resolve_gemini_model() -> str:
    """Base model from GEMINI_MODEL, or the default."""
    env_model = os.environ.get("GEMINI_MODEL", "")
    if env_model.strip():
        return normalize_model_name(env_model)
    return DEFAULT_GEMINI_MODEL


def resolve_api_versions() -> list[str]:
    """API versions from GEMINI_API_VERSION, or the defaults."""
    env_versions = os.environ.get("GEMINI_API_VERSION", "")
    versions = [v.strip() for v in env_versions.split(",") if v.strip()]
    return versions or list(DEFAULT_API_VERSIONS)


def build_model_attempt_order(base_model: str, use_high_accuracy_model: bool = False) -> list[str]:
    """Ordered, de-duplicated model list for the candidate matrix."""
    order: list[str] = []
    normalized_base = normalize_model_name(base_model)

    if use_high_accuracy_model:
        order.append(HIGH_ACCURACY_MODEL)

    order.append(normalized_base)

    sibling = _SIBLING_MODELS.get(normalized_base)
    if sibling:
        order.append(sibling)

    return list(dict.fromkeys(normalize_model_name(m) for m in order))


def _resolve_timeout() -> float | None:
    raw = os.environ.get("GEMINI_TIMEOUT_SECONDS", "").strip()
    if not raw:
        return DEFAULT_TIMEOUT
    try:
        value = float(raw)
    except ValueError:
        raise ConfigurationError(f"GEMINI_TIMEOUT_SECONDS is not a number: {raw!r}") from None
    # 0 disables the timeout
    return value if value > 0 else None


def resolve_provider_config(use_high_accuracy_model: bool = False) -> ProviderConfig:
    """Read the environment into a ``ProviderConfig``.

    Raises:
        ConfigurationError: If GEMINI_API_KEY is not set.
    """
    api_key = os.environ.get("GEMINI_API_KEY", "").strip()
    if not api_key:
        raise ConfigurationError("GEMINI_API_KEY が設定されていません。", status=500)

    return ProviderConfig(
        api_key=api_key,
        models=tuple(
            build_model_attempt_order(
                resolve_gemini_model(),
                use_high_accuracy_model=use_high_accuracy_model,
            )
        ),
        api_versions=tuple(resolve_api_versions()),
        base_url=os.environ.get("GEMINI_API_BASE_URL", DEFAULT_BASE_URL).rstrip("/"),
        timeout=_resolve_timeout(),
    )
