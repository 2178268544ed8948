"""Writing style catalog.

Fixed registry of style presets. Presets are frozen and never mutated.
"""

from types import MappingProxyType

from bunlint.models import StylePreset, StyleSample, WritingStyle

_DEARU_TONE = "文体は常に『だ・である調』に統一し、丁寧語やですます調を使用しないでください。"
_DEARU_STRICT_TONE = (
    "丁寧語の語尾（です・ます・でした など）が一切残らないようにし、"
    "各文末を「だ」「である」「ではない」「であった」などの常体で統一してください。"
)
_DESUMASU_TONE = "文体は常に『です・ます調』に統一し、終止形は「です」「ます」で終わるようにしてください。"
_DESUMASU_STRICT_TONE = (
    "常体（だ・である 等）の語尾が残らないように確認し、"
    "すべての文末を「です」「ます」などの丁寧語で終わらせてください。"
)

_HUMANIZE_DIRECTIVES = (
    "段落の切れ目や話題のまとまりを整理し、必要に応じて段落を分割または結合してください。",
    "要点が伝わりやすくなるよう、接続詞や指示語を補ったり語順を整えたりして文章の流れを滑らかにしてください。",
    "意味や事実関係を変えずに、語尾・助詞・表現のぎこちなさを自然な言い回しへ調整してください。",
)

_HUMANIZE_SAMPLE_BEFORE = (
    "昨日は雨で外に出るのをやめようと思った。友人との約束があったので行った。"
    "帰るころには疲れていて、そのまま寝た。"
)

STYLE_PRESETS: MappingProxyType[WritingStyle, StylePreset] = MappingProxyType({
    WritingStyle.dearu: StylePreset(
        label="だ・である調",
        description="論文やレポートに適した、格調高い文体に整えます。",
        tone_instruction=_DEARU_TONE,
        strict_tone_instruction=_DEARU_STRICT_TONE,
    ),
    WritingStyle.desumasu: StylePreset(
        label="です・ます調",
        description="ビジネス文書や丁寧な説明文を想定した、読みやすい文体です。",
        tone_instruction=_DESUMASU_TONE,
        strict_tone_instruction=_DESUMASU_STRICT_TONE,
    ),
    WritingStyle.humanize_desumasu: StylePreset(
        label="人間らしい変換（です・ます）",
        description="段落構成や接続詞を整えつつ、丁寧で自然な語り口に整えるモードです。",
        tone_instruction=_DESUMASU_TONE,
        strict_tone_instruction=_DESUMASU_STRICT_TONE,
        additional_directives=_HUMANIZE_DIRECTIVES,
        sample=StyleSample(
            before=_HUMANIZE_SAMPLE_BEFORE,
            after=(
                "昨日は雨だったので外出を迷いましたが、友人との約束があったため出かけました。"
                "用事を終えるころにはすっかり疲れており、帰宅後はすぐに休みました。"
            ),
            note="段落や接続詞を整え、内容は変えずに読みやすさを高めた例です。",
        ),
    ),
    WritingStyle.humanize_dearu: StylePreset(
        label="人間らしい変換（だ・である）",
        description="論理的な構成と常体の語尾を両立させ、硬さを抑えた自然な文章に調整します。",
        tone_instruction=_DEARU_TONE,
        strict_tone_instruction=_DEARU_STRICT_TONE,
        additional_directives=_HUMANIZE_DIRECTIVES,
        sample=StyleSample(
            before=_HUMANIZE_SAMPLE_BEFORE,
            after=(
                "昨日は雨だったため外出を迷ったが、友人との約束があったので出かけた。"
                "用事を終えるころにはすっかり疲れており、帰宅後はすぐに休んだ。"
            ),
            note="常体を維持しながら段落構成と接続を滑らかに整えた例です。",
        ),
    ),
})

# Styles whose output must not contain polite-register sentence endings
STRICT_ENFORCEMENT_STYLES = frozenset({WritingStyle.dearu, WritingStyle.humanize_dearu})

LEGACY_WRITING_STYLE_ALIASES = MappingProxyType({
    "humanize": WritingStyle.humanize_desumasu,
})

LEGACY_WRITING_STYLE_LABELS = MappingProxyType({
    "人間らしい構成": WritingStyle.humanize_desumasu,
})


def get_style_preset(style: WritingStyle) -> StylePreset:
    return STYLE_PRESETS[WritingStyle(style)]


def requires_strict_enforcement(style: WritingStyle) -> bool:
    """True for the だ・である family, whose output is lexically validated."""
    return style in STRICT_ENFORCEMENT_STYLES


def normalize_writing_style(value: object) -> WritingStyle | None:
    """Accept a current style key or a legacy alias; anything else is None."""
    if isinstance(value, WritingStyle):
        return value
    if not isinstance(value, str):
        return None
    try:
        return WritingStyle(value)
    except ValueError:
        return LEGACY_WRITING_STYLE_ALIASES.get(value)


def resolve_writing_style_from_label(label: object) -> WritingStyle | None:
    """Map a human-readable preset label (current or legacy) to its style."""
    if not isinstance(label, str) or not label:
        return None

    for style, preset in STYLE_PRESETS.items():
        if preset.label == label:
            return style

    return LEGACY_WRITING_STYLE_LABELS.get(label)
