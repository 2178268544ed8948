"""Normalization of raw model output.

Models occasionally wrap the answer in a code fence or open with an
acknowledgement ("了解しました。以下が整えた文章です。"). Both are removed
before validation.
"""

import re

from bunlint.models import WritingStyle

from .style_catalog import requires_strict_enforcement
from .validation import has_polite_ending, split_into_sentences

# Closing run must be at least as long as the opening run
ENCLOSING_CODE_FENCE = re.compile(r"^(`{3,})[^`\n]*\n(.*)\n\1`*[ \t]*$", re.DOTALL)

# Characters tolerated between a removed sentence and the rest of the text
_REMOVAL_TAIL = r"[\s　「」『』（）()【】［］〈〉《》｛｝]*"

ACKNOWLEDGEMENT_KEYWORDS = (
    "了解しました",
    "了承しました",
    "承知しました",
    "承知いたしました",
    "かしこまりました",
    "もちろんです",
    "了解です",
    "了解いたしました",
    "わかりました",
    "分かりました",
    "理解しました",
    "ご確認ください",
    "以下が整えた文章です",
    "以下が整えた文です",
    "以下が変換後の文章です",
    "以下が修正後の文章です",
    "以下に整形後の文章を示します",
    "変換後の文章です",
    "変換後のテキストです",
    "整えた文章です",
    "整形後の文章です",
    "編集結果です",
)


def strip_code_fences(text: str) -> str:
    """Remove fences that enclose the whole text; otherwise return it unchanged.

    Nested enclosing fences are all removed, so the result never starts with
    a fence that this function would strip again.
    """
    match = ENCLOSING_CODE_FENCE.match(text.rstrip())
    while match:
        text = match.group(2).strip()
        match = ENCLOSING_CODE_FENCE.match(text)
    return text


def _is_acknowledgement(sentence: str) -> bool:
    return any(keyword in sentence for keyword in ACKNOWLEDGEMENT_KEYWORDS)


def remove_leading_acknowledgements(text: str, writing_style: WritingStyle) -> str:
    """Drop polite acknowledgement sentences from the start of ``text``.

    Only applies to strict-enforcement styles, where such a preamble would
    otherwise fail validation. Scanning stops at the first sentence that is
    not a polite acknowledgement. If nothing would remain, ``text`` is kept.
    """
    if not requires_strict_enforcement(writing_style):
        return text.strip()

    removable: list[str] = []
    for sentence in split_into_sentences(text):
        if not _is_acknowledgement(sentence) or not has_polite_ending(sentence):
            break
        removable.append(sentence)

    if not removable:
        return text.strip()

    remainder = text.lstrip()
    for sentence in removable:
        remainder = remainder.lstrip()
        match = re.match(re.escape(sentence) + _REMOVAL_TAIL, remainder)
        if not match:
            break
        remainder = remainder[match.end():]

    remainder = remainder.lstrip()
    return remainder if remainder else text.strip()


def normalize_model_output(text: str, writing_style: WritingStyle) -> str:
    """Clean raw model text before validation."""
    if not text:
        return ""

    normalized = text.replace("\r", "").strip()
    if not normalized:
        return normalized

    normalized = strip_code_fences(normalized)
    normalized = remove_leading_acknowledgements(normalized, writing_style)

    return normalized.strip()
