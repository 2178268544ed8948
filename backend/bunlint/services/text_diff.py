"""Word-level diff between an input text and its transform.

Runs of ASCII letters and digits form one token, so latin words change as a
whole; every other character (kana, kanji, punctuation, whitespace) is its
own token.
"""

import re
from dataclasses import dataclass
from difflib import SequenceMatcher
from typing import Literal

DiffSegmentType = Literal["added", "removed", "unchanged"]

_ASCII_WORD_CHAR = re.compile(r"[A-Za-z0-9]")


@dataclass
class DiffSegment:
    type: DiffSegmentType
    value: str


def tokenize(text: str) -> list[str]:
    tokens: list[str] = []
    ascii_buffer = ""

    for char in text:
        if _ASCII_WORD_CHAR.match(char):
            ascii_buffer += char
            continue

        if ascii_buffer:
            tokens.append(ascii_buffer)
            ascii_buffer = ""
        tokens.append(char)

    if ascii_buffer:
        tokens.append(ascii_buffer)

    return tokens


def _push(segments: list[DiffSegment], segment_type: DiffSegmentType, tokens: list[str]) -> None:
    value = "".join(tokens)
    if not value:
        return
    if segments and segments[-1].type == segment_type:
        segments[-1].value += value
        return
    segments.append(DiffSegment(type=segment_type, value=value))


def diff_words(original: str, updated: str) -> list[DiffSegment]:
    """Diff ``original`` against ``updated`` as merged segments.

    Adjacent segments of the same type are merged. Within a replacement the
    removed part precedes the added part.
    """
    original_tokens = tokenize(original)
    updated_tokens = tokenize(updated)

    matcher = SequenceMatcher(None, original_tokens, updated_tokens, autojunk=False)
    segments: list[DiffSegment] = []

    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        if tag == "equal":
            _push(segments, "unchanged", original_tokens[i1:i2])
            continue
        if tag in ("delete", "replace"):
            _push(segments, "removed", original_tokens[i1:i2])
        if tag in ("insert", "replace"):
            _push(segments, "added", updated_tokens[j1:j2])

    return segments
