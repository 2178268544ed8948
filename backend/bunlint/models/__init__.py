"""Backend models package."""

from .history import HISTORY_RETENTION_MINUTES, CreateHistoryRequest, HistoryRecord
from .style import PunctuationMode, StylePreset, StyleSample, WritingStyle
from .transform import (
    DEFAULT_TRANSFORM_TEMPERATURE,
    MAX_INPUT_LENGTH,
    AiCheckResult,
    AttemptConfig,
    ConfidenceLevel,
    EnforcementLevel,
    TransformRequest,
    TransformResult,
)

__all__ = [
    "HISTORY_RETENTION_MINUTES",
    "CreateHistoryRequest",
    "HistoryRecord",
    "PunctuationMode",
    "StylePreset",
    "StyleSample",
    "WritingStyle",
    "DEFAULT_TRANSFORM_TEMPERATURE",
    "MAX_INPUT_LENGTH",
    "AiCheckResult",
    "AttemptConfig",
    "ConfidenceLevel",
    "EnforcementLevel",
    "TransformRequest",
    "TransformResult",
]
