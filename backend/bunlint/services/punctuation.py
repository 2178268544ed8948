"""Punctuation dialect conversion.

Three dialects are supported:
- japanese: 、。
- academic: ，．
- western:  ,.
"""

from bunlint.models import PunctuationMode

_COMMAS = "、，,"
_PERIODS = "。．."

_TARGETS = {
    PunctuationMode.japanese: ("、", "。"),
    PunctuationMode.academic: ("，", "．"),
    PunctuationMode.western: (",", "."),
}


def _build_table(mode: PunctuationMode) -> dict[int, str]:
    comma, period = _TARGETS[mode]
    table = {ord(char): comma for char in _COMMAS}
    table.update({ord(char): period for char in _PERIODS})
    return table


_TABLES = {mode: _build_table(mode) for mode in PunctuationMode}


def convert_punctuation(text: str, mode: PunctuationMode | str) -> str:
    """Rewrite every comma and period in ``text`` into the ``mode`` dialect."""
    return text.translate(_TABLES[PunctuationMode(mode)])


def to_japanese_punctuation(text: str) -> str:
    return convert_punctuation(text, PunctuationMode.japanese)


def to_academic_punctuation(text: str) -> str:
    return convert_punctuation(text, PunctuationMode.academic)


def to_western_punctuation(text: str) -> str:
    return convert_punctuation(text, PunctuationMode.western)


def detect_punctuation_mode(text: str) -> PunctuationMode:
    """Return the dialect used most often in ``text``.

    Defaults to japanese when no punctuation is present. Ties prefer
    japanese, then academic.
    """
    counts = {mode: 0 for mode in PunctuationMode}
    for char in text:
        for mode, (comma, period) in _TARGETS.items():
            if char == comma or char == period:
                counts[mode] += 1

    # max() keeps the first maximum, and PunctuationMode iterates japanese first
    best = max(PunctuationMode, key=lambda mode: counts[mode])
    return best if counts[best] > 0 else PunctuationMode.japanese
