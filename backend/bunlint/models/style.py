"""Writing style and punctuation models.

Presets are defined in ``bunlint.services.style_catalog``; the models here are
frozen so a preset can be shared across concurrent requests.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class WritingStyle(str, Enum):
    """Target sentence-ending register."""
    dearu = "dearu"                            # だ・である調
    desumasu = "desumasu"                      # です・ます調
    humanize_dearu = "humanize_dearu"          # humanized, plain register
    humanize_desumasu = "humanize_desumasu"    # humanized, polite register


class PunctuationMode(str, Enum):
    """Punctuation dialect."""
    japanese = "japanese"  # 、。
    academic = "academic"  # ，．
    western = "western"    # ,.


class StyleSample(BaseModel):
    """Illustrative before/after pair for a style."""

    model_config = ConfigDict(frozen=True)

    before: str
    after: str
    note: str | None = None


class StylePreset(BaseModel):
    """Instruction set for one writing style."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    label: str
    description: str
    tone_instruction: str
    strict_tone_instruction: str | None = None
    additional_directives: tuple[str, ...] = Field(default_factory=tuple)
    sample: StyleSample | None = None
