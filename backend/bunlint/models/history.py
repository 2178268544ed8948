"""Pydantic models for transform history records."""

from datetime import datetime

from pydantic import BaseModel, field_validator

from .style import PunctuationMode, WritingStyle

HISTORY_RETENTION_MINUTES = 60


class HistoryRecord(BaseModel):
    """A stored transform, as returned to clients."""

    id: str
    inputText: str
    outputText: str = ""
    writingStyle: WritingStyle
    punctuationMode: PunctuationMode
    createdAt: datetime


class CreateHistoryRequest(BaseModel):
    """Request body for storing a transform."""

    inputText: str
    outputText: str = ""
    writingStyle: WritingStyle
    punctuationMode: PunctuationMode

    @field_validator("writingStyle", mode="before")
    @classmethod
    def accept_legacy_style(cls, value: object) -> object:
        # Deferred: style_catalog imports this package
        from bunlint.services.style_catalog import normalize_writing_style

        return normalize_writing_style(value) or value

    @field_validator("outputText", mode="before")
    @classmethod
    def default_output_text(cls, value: object) -> object:
        return value if isinstance(value, str) else ""
