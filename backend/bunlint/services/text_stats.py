"""Character, word and sentence counts for Japanese text.

Words are content words: the text is cut into script runs (kanji with
trailing okurigana, katakana, hiragana, latin/numeric), particles are split
off hiragana runs, and function words (particles, auxiliaries, conjunctions,
interjections, punctuation) are dropped from the count.
"""

import re
import unicodedata
from dataclasses import dataclass

from bunlint.models import PunctuationMode

from .punctuation import detect_punctuation_mode

SENTENCE_DELIMITERS = "。．.!?！？"

_DELIMITER_CLASS = re.escape(SENTENCE_DELIMITERS)
_DELIMITER_PATTERN = re.compile(f"[{_DELIMITER_CLASS}]")
_SENTENCE_PATTERN = re.compile(f"[^{_DELIMITER_CLASS}]+(?:[{_DELIMITER_CLASS}]+|$)")

_HAN = "㐀-䶿一-鿿豈-﫿々〇"
_HIRAGANA = "ぁ-ゟ"
_KATAKANA = "ァ-ヺヽ-ヿㇰ-ㇿｦ-ﾝ"
_PROLONGED_SOUND = "ー"

_WORD_PATTERN = re.compile(
    "|".join([
        f"[{_HAN}]+(?:[{_HIRAGANA}]+)*",
        f"[{_KATAKANA}][{_KATAKANA}{_PROLONGED_SOUND}]*",
        f"[{_HIRAGANA}]+",
        r"[\w'’-]+",
    ])
)
_HAN_CHAR = re.compile(f"[{_HAN}]")
_HIRAGANA_ONLY = re.compile(f"^[{_HIRAGANA}]+$")
_KATAKANA_ONLY = re.compile(f"^[{_KATAKANA}{_PROLONGED_SOUND}]+$")
_KATAKANA_CHAR = re.compile(f"[{_KATAKANA}]")
_JAPANESE_CHAR = re.compile(f"[{_HAN}{_HIRAGANA}{_KATAKANA}{_PROLONGED_SOUND}]")
_WHITESPACE = re.compile(r"\s")

KANJI = "kanji"
HIRAGANA = "hiragana"
KATAKANA = "katakana"
LATIN = "latin"
NUMBER = "number"
OTHER = "other"

ALWAYS_DETACH_PARTICLES = frozenset({"は", "が", "を", "に", "へ", "で", "と"})

PARTICLES = frozenset({
    "なんて", "なんか", "ながら", "だらけ", "ばかり", "かしら", "かも", "でも",
    "ても", "にも", "とも", "から", "まで", "より", "だけ", "ほど", "くらい",
    "ぐらい", "など", "なり", "やら", "って", "たり", "とか", "さえ", "すら",
    "しか", "ずつ", "か", "も", "の", "や", "ね", "よ", "ぞ", "さ", "わ",
    "は", "が", "を", "に", "へ", "で", "と",
})
# Longest first so that multi-character particles win
_SORTED_PARTICLES = sorted(PARTICLES, key=lambda p: (-len(p), p))

_SHORT_PARTICLES = frozenset({"か", "も", "の", "や", "ね", "よ", "ぞ", "さ", "わ"})

HIRAGANA_PREFIX_ALLOW_LIST = frozenset({
    "これ", "それ", "あれ", "どれ", "どの", "この", "その", "あの", "ここ", "そこ",
    "あそこ", "どこ", "こちら", "そちら", "あちら", "どちら", "こっち", "そっち",
    "あっち", "どっち", "これら", "それら", "あれら", "どれら", "こいつ", "そいつ",
    "あいつ", "どいつ", "なに", "なん", "なぜ", "いつ", "どれほど", "どれくらい",
    "どれぐらい", "わたし", "わたしたち", "あなた", "あなたたち", "ぼく", "ぼくら",
    "きみ", "きみたち", "おれ", "おれたち", "われ", "われわれ", "みんな", "みな",
    "みなさん", "それぞれ", "うち", "なにか", "なにも", "いつか", "いつも", "なぜか",
    "どこか", "どこでも",
})

PARTICLE_EXCEPTION_WORDS = frozenset({
    "いつも", "いつか", "いつまでも", "なんでも", "なんとなく", "なぜか", "なかなか",
    "なにか", "なにも", "どこか", "どこでも", "そこそこ", "そのまま", "どれくらい",
    "どれぐらい",
})

FUNCTION_WORD_ALLOW_LIST = HIRAGANA_PREFIX_ALLOW_LIST | PARTICLE_EXCEPTION_WORDS

AUXILIARY_WORDS = frozenset({
    "だ", "だっ", "だろ", "だろう", "です", "でし", "でした", "でしょう", "でしょ",
    "でござい", "でございます", "でござった", "ます", "まし", "ました", "ません",
    "ましょう", "ましょ", "ませ", "たい", "たく", "たかった", "たがる", "たがっ",
    "たがり", "ない", "なかっ", "なかった", "なく", "なけれ", "なさ", "なさい", "ぬ",
    "ん", "んだ", "んです", "んですが", "んですか", "んで", "れる", "られる", "られ",
    "られた", "られます", "れた", "れます", "せる", "させる", "させられる", "そう",
    "そうだ", "そうです", "そうな", "そうに", "そうで", "らしい", "らしく", "らしさ",
    "よう", "ようだ", "ように", "ような", "ようです", "みたい", "みたいだ", "みたいに",
    "みたいな", "っぽい", "っぽく", "っぽさ", "げ", "げな", "げに", "がる", "がって",
    "がった", "がり", "ず", "まい", "べき", "べく", "べし", "しまう", "しまった",
    "しまい", "ちゃう", "ちゃった", "じゃう", "じゃった", "た", "たら", "たり", "たろう",
    "った", "って", "て", "てる", "てた", "てきた", "てしまう", "ください", "下さい",
    "な", "たち", "ざる", "ざれ", "ざら",
})

AUXILIARY_SUFFIXES = (
    "くない", "くなかった", "くなく", "すぎる", "すぎた", "すぎ", "づらい", "づらく",
    "づらかった", "にくい", "にくく", "にくかった", "がたい", "がたく", "がたかった",
    "させる", "させられる", "させられ", "される", "され", "させて", "されて", "たち",
    "ちゃう", "ちゃった", "じゃう", "じゃった", "っぽい", "っぽく", "っぽさ",
)

CONJUNCTION_WORDS = frozenset({
    "そして", "しかし", "しかしながら", "だけど", "だけれども", "だが", "ですが",
    "だから", "なので", "ゆえに", "よって", "それで", "それでも", "それなのに",
    "それなら", "それでは", "すると", "ところが", "しかも", "さらに", "および", "及び",
    "ならびに", "並びに", "かつ", "もしくは", "または", "あるいは", "一方", "一方で",
})

INTERJECTION_WORDS = frozenset({
    "はい", "いいえ", "うん", "ええ", "ああ", "おお", "わあ", "へえ", "おや", "まあ",
    "やあ", "おっ", "おっと", "あっ", "おい", "ねえ", "ほら", "よし", "ふう", "はあ",
})


@dataclass(frozen=True)
class TextStats:
    characters: int
    words: int
    sentences: int
    punctuation_mode: PunctuationMode


# ------------------------------------------------------------------------------
# Characters
# ------------------------------------------------------------------------------


def _extends_cluster(char: str, previous: str) -> bool:
    code = ord(char)
    if previous == "\u200d":
        return True
    if unicodedata.category(char) in ("Mn", "Mc", "Me"):
        return True
    return (
        code == 0x200D
        or 0xFE00 <= code <= 0xFE0F
        or 0xE0100 <= code <= 0xE01EF
        or 0x1F3FB <= code <= 0x1F3FF
    )


def split_graphemes(text: str) -> list[str]:
    """Approximate extended grapheme clusters.

    Combining marks, variation selectors, emoji modifiers and ZWJ sequences
    join the preceding character; regional indicators pair up into flags.
    """
    clusters: list[str] = []
    for char in text:
        if clusters:
            last = clusters[-1]
            if _extends_cluster(char, last[-1]):
                clusters[-1] = last + char
                continue
            if _is_regional_indicator(char) and len(last) == 1 and _is_regional_indicator(last):
                clusters[-1] = last + char
                continue
        clusters.append(char)
    return clusters


def _is_regional_indicator(char: str) -> bool:
    return 0x1F1E6 <= ord(char) <= 0x1F1FF


def count_characters(text: str, exclude_whitespace: bool = False) -> int:
    characters = split_graphemes(text)
    if not exclude_whitespace:
        return len(characters)
    return sum(1 for cluster in characters if not _WHITESPACE.search(cluster))


# ------------------------------------------------------------------------------
# Words
# ------------------------------------------------------------------------------


def _is_japanese_word(value: str) -> bool:
    return bool(_JAPANESE_CHAR.search(value))


def _segment_kind(value: str) -> str:
    if _HAN_CHAR.search(value):
        return KANJI
    if _HIRAGANA_ONLY.match(value):
        return HIRAGANA
    if _KATAKANA_ONLY.match(value):
        return KATAKANA
    if value.isalpha():
        return LATIN
    if value.isnumeric():
        return NUMBER
    return OTHER


def _begins_with_particle(value: str) -> bool:
    return any(value.startswith(particle) for particle in _SORTED_PARTICLES)


def _trailing_particle(value: str) -> str | None:
    for particle in _SORTED_PARTICLES:
        if value.endswith(particle):
            return particle
    return None


def _split_by_script(value: str) -> list[str]:
    segments: list[str] = []
    buffer = ""
    buffer_kind: str | None = None

    for index, char in enumerate(value):
        kind = _segment_kind(char)

        if not buffer:
            buffer, buffer_kind = char, kind
            continue

        particle_follows = (
            buffer_kind in (KANJI, KATAKANA)
            and kind == HIRAGANA
            and _begins_with_particle(value[index:])
        )
        script_changes = buffer_kind != kind and not (buffer_kind == KANJI and kind == HIRAGANA)

        if particle_follows or script_changes:
            segments.append(buffer)
            buffer, buffer_kind = char, kind
            continue

        buffer += char
        buffer_kind = kind

    if buffer:
        segments.append(buffer)

    return segments


def _can_extract_trailing_particle(prefix: str, particle: str, has_content: bool) -> bool:
    if prefix + particle in PARTICLE_EXCEPTION_WORDS:
        return False

    if not prefix:
        return has_content

    prefix_has_kanji = bool(_HAN_CHAR.search(prefix))
    prefix_has_katakana = bool(_KATAKANA_CHAR.search(prefix))
    prefix_has_letter = any(c.isalpha() for c in prefix)
    prefix_in_allow_list = prefix in HIRAGANA_PREFIX_ALLOW_LIST
    prefix_is_particle = len(prefix) == 1 and prefix in PARTICLES
    prefix_will_become_word = prefix not in PARTICLES or len(prefix) > 1

    strong_prefix = prefix_has_kanji or prefix_has_katakana or prefix_in_allow_list
    effective_content = (
        has_content or strong_prefix or prefix_has_letter or prefix_will_become_word
    )

    if particle in ALWAYS_DETACH_PARTICLES:
        return effective_content or prefix_is_particle

    if particle in _SHORT_PARTICLES:
        if strong_prefix:
            return True
        return prefix_is_particle and effective_content

    return effective_content


def _split_hiragana_segment(segment: str, has_content: bool) -> tuple[list[str], bool]:
    remaining = segment
    extracted: list[str] = []
    saw_content = has_content

    while remaining:
        particle = _trailing_particle(remaining)
        if not particle:
            break

        prefix = remaining[:-len(particle)]
        if not _can_extract_trailing_particle(prefix, particle, saw_content):
            break

        extracted.insert(0, particle)
        remaining = prefix

    tokens: list[str] = []
    if remaining:
        tokens.append(remaining)
        if remaining not in PARTICLES:
            saw_content = True

    tokens.extend(extracted)
    return tokens, saw_content


def _split_token_considering_particles(token: str, has_content: bool) -> tuple[list[str], bool]:
    if not _is_japanese_word(token):
        return [token], True

    tokens: list[str] = []
    saw_content = has_content

    for segment in _split_by_script(token):
        if _HIRAGANA_ONLY.match(segment):
            split, saw_content = _split_hiragana_segment(segment, saw_content)
            tokens.extend(split)
            continue

        tokens.append(segment)
        if segment not in PARTICLES:
            saw_content = True

    return tokens, saw_content


def _merge_segments(entries: list[tuple[str, bool]]) -> list[str]:
    merged: list[str] = []
    buffer = ""
    buffer_kind: str | None = None

    def flush() -> None:
        nonlocal buffer, buffer_kind
        if buffer:
            merged.append(buffer)
        buffer = ""
        buffer_kind = None

    for value, break_before in entries:
        if not value:
            continue

        if break_before:
            flush()

        kind = _segment_kind(value)

        if kind == HIRAGANA:
            if value in PARTICLES:
                flush()
                merged.append(value)
            elif buffer_kind == HIRAGANA:
                buffer += value
            elif (
                buffer_kind == KANJI
                and not break_before
                and re.search(f"[{_HIRAGANA}]", buffer)
                and value in ("て", "で")
            ):
                buffer += value
                buffer_kind = HIRAGANA
            else:
                flush()
                buffer, buffer_kind = value, HIRAGANA
            continue

        if kind in (KANJI, KATAKANA):
            if buffer_kind == kind:
                buffer += value
            else:
                flush()
                buffer, buffer_kind = value, kind
            continue

        flush()
        merged.append(value)

    flush()
    return merged


def _separate_particles(values: list[str]) -> list[str]:
    result: list[str] = []
    saw_content = False

    for value in values:
        trimmed = value.strip()
        if not trimmed:
            continue

        if not _is_japanese_word(trimmed):
            result.append(trimmed)
            saw_content = True
            continue

        tokens, saw_content = _split_token_considering_particles(trimmed, saw_content)
        result.extend(tokens)

    return result


def _collect_word_segments(text: str) -> list[tuple[str, bool]]:
    """Script-run matches, flagged when separated from the previous one."""
    entries: list[tuple[str, bool]] = []
    previous_end: int | None = None

    for match in _WORD_PATTERN.finditer(text):
        break_before = previous_end is not None and match.start() > previous_end
        entries.append((match.group(0), break_before))
        previous_end = match.end()

    return entries


def _split_words(text: str) -> list[str]:
    entries = _collect_word_segments(text)
    if not entries:
        return []
    return [t for t in _separate_particles(_merge_segments(entries)) if t]


def _is_auxiliary(token: str, previous: str | None) -> bool:
    if token in FUNCTION_WORD_ALLOW_LIST:
        return False

    if token in AUXILIARY_WORDS:
        return True

    if not _HIRAGANA_ONLY.match(token):
        return False

    if any(token.endswith(s) and len(token) > len(s) for s in AUXILIARY_SUFFIXES):
        return True

    return token == "した" and previous == "で"


def _is_punctuation_like(value: str) -> bool:
    return all(unicodedata.category(c)[0] in ("P", "S") for c in value)


def _is_function_word(token: str, previous: str | None, following: str | None) -> bool:
    trimmed = token.strip()
    if not trimmed or _is_punctuation_like(trimmed):
        return True

    if not _is_japanese_word(trimmed):
        return False

    if trimmed in PARTICLES:
        # "よ" before "か…" is the start of a word, not a particle
        return not (trimmed == "よ" and following is not None and following.startswith("か"))

    if trimmed in CONJUNCTION_WORDS or trimmed in INTERJECTION_WORDS:
        return True

    return _is_auxiliary(trimmed, previous)


def _filter_content_words(tokens: list[str]) -> list[str]:
    words: list[str] = []
    for index, token in enumerate(tokens):
        if not token:
            continue
        previous = tokens[index - 1] if index > 0 else None
        following = tokens[index + 1] if index + 1 < len(tokens) else None
        if not _is_function_word(token, previous, following):
            words.append(token)
    return words


def extract_words(text: str) -> list[str]:
    """Content words of ``text`` in order."""
    normalized = re.sub(r"\s+", " ", text).strip()
    if not normalized:
        return []

    words = _split_words(normalized)
    if words:
        return _filter_content_words(words)

    return _filter_content_words(normalized.split())


def count_words(text: str) -> int:
    return len(extract_words(text))


# ------------------------------------------------------------------------------
# Sentences
# ------------------------------------------------------------------------------


def count_sentences(text: str) -> int:
    """Count sentences ended by 。．.!?！？; a trailing fragment counts too."""
    normalized = re.sub(r"[\r\n]+", " ", text).strip()
    if not normalized:
        return 0

    return sum(
        1
        for segment in _SENTENCE_PATTERN.findall(normalized)
        if _DELIMITER_PATTERN.sub("", segment).strip()
    )


def get_text_stats(text: str, exclude_whitespace: bool = False) -> TextStats:
    return TextStats(
        characters=count_characters(text, exclude_whitespace=exclude_whitespace),
        words=count_words(text),
        sentences=count_sentences(text),
        punctuation_mode=detect_punctuation_mode(text),
    )
