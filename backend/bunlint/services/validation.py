"""Style compliance validation.

Checks that every sentence of a だ・である-family output ends in the plain
register. Other styles have no lexical contract and always pass.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from bunlint.models import WritingStyle

from .style_catalog import requires_strict_enforcement

POLITE_ENDINGS = (
    "です",
    "でした",
    "でしょう",
    "でしょうか",
    "ですよ",
    "ですね",
    "でしょ",
    "でして",
    "でございます",
    "でございました",
    "ます",
    "ました",
    "ません",
    "ませんでした",
    "ませんか",
    "ますか",
    "ましょう",
    "ましょうか",
    "ください",
    "下さい",
    "ございます",
    "ございますか",
)

# Closing brackets, quotes and whitespace that may trail a sentence
TRAILING_SYMBOLS_PATTERN = re.compile(r"[\s　「」『』（）【】［］〈〉《》｛｝]+$")
# Terminal and pause punctuation stripped before the suffix check
TRAILING_PUNCTUATION_PATTERN = re.compile(r"[。．.！？?!…〜～・、，\s　]+$")
SENTENCE_PATTERN = re.compile(r"[^。．.！？?!]+[。．.！？?!]?")
PARAGRAPH_BREAK_PATTERN = re.compile(r"\n+")

REASON_SAMPLE_LENGTH = 30


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of a compliance check.

    ``ok`` is True when there is nothing to correct. Otherwise ``reason`` is
    a user-facing message and ``directive`` is the corrective instruction for
    the next prompt.
    """

    reason: str | None = None
    directive: str | None = None
    offending_sentences: tuple[str, ...] = field(default_factory=tuple)

    @property
    def ok(self) -> bool:
        return self.reason is None


COMPLIANT = ValidationResult()


def strip_trailing_symbols(sentence: str) -> str:
    return TRAILING_SYMBOLS_PATTERN.sub("", sentence)


def split_into_sentences(text: str) -> list[str]:
    """Split ``text`` into sentences.

    Newline runs separate paragraphs; inside a paragraph, terminal punctuation
    ends a sentence. A trailing fragment without punctuation still counts.
    """
    normalized = text.replace("\r", "")
    sentences: list[str] = []

    for block in PARAGRAPH_BREAK_PATTERN.split(normalized):
        trimmed_block = block.strip()
        if not trimmed_block:
            continue

        matches = SENTENCE_PATTERN.findall(trimmed_block)
        if not matches:
            sentences.append(trimmed_block)
            continue

        sentences.extend(m.strip() for m in matches if m.strip())

    if not sentences and normalized.strip():
        sentences.append(normalized.strip())

    return sentences


def has_polite_ending(sentence: str) -> bool:
    """True when ``sentence`` ends in the polite register (です・ます etc.)."""
    stem = TRAILING_PUNCTUATION_PATTERN.sub("", strip_trailing_symbols(sentence)).strip()
    if not stem:
        return False
    return stem.endswith(POLITE_ENDINGS)


def build_dearu_directive(sentences: list[str]) -> str:
    """Corrective directive quoting every offending sentence."""
    cleaned = [s for s in (strip_trailing_symbols(s).strip() for s in sentences) if s]

    if not cleaned:
        return "丁寧語の語尾を常体に書き換え、最終的な出力では丁寧語を使用しないでください。"

    bullets = "\n".join(f"  - {sentence}" for sentence in cleaned)
    return (
        "以下の文で丁寧語の語尾が残っています。必ず常体に書き換えてください。\n"
        f"{bullets}\n"
        "  修正後は全文を読み返し、丁寧語が残っていないことを確認してから出力してください。"
    )


def validate_writing_style_compliance(text: str, writing_style: WritingStyle) -> ValidationResult:
    """Check ``text`` against the sentence-ending contract of ``writing_style``."""
    if not requires_strict_enforcement(writing_style):
        return COMPLIANT

    violations = [s for s in split_into_sentences(text) if has_polite_ending(s)]
    if not violations:
        return COMPLIANT

    offending = tuple(strip_trailing_symbols(s).strip() for s in violations)

    sample = offending[0] or violations[0]
    if len(sample) > REASON_SAMPLE_LENGTH:
        sample = f"{sample[:REASON_SAMPLE_LENGTH]}…"

    return ValidationResult(
        reason=(
            "だ・である調に統一できませんでした。"
            f"丁寧語の語尾（です・ます）が残っています（例: 「{sample}」）。"
        ),
        directive=build_dearu_directive(violations),
        offending_sentences=offending,
    )
