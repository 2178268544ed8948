"""Prompt templates for Gemini calls.

Contains prompts for:
1. Style transform - rewriting sentence endings into a target register
2. AI checker - self-reported AI-likelihood audit
"""

from __future__ import annotations

from bunlint.llm.models import GenerationPayload
from bunlint.models import EnforcementLevel, PunctuationMode, WritingStyle

from .style_catalog import get_style_preset, requires_strict_enforcement


# ==============================================================================
# Style Transform Prompts
# ==============================================================================

TRANSFORM_PREAMBLE = "あなたは日本語文章の編集アシスタントです。以下の指示に従ってテキストを整形してください。"

PRESERVE_MEANING_DIRECTIVE = (
    "入力文を大幅に書き換えず、意味や事実関係を保ったまま語尾や表現を整えてください。"
)

PUNCTUATION_DIRECTIVES = {
    PunctuationMode.japanese: "句読点は必ず「、」「。」を使用してください。",
    PunctuationMode.academic: "句読点は必ず「，」「．」を使用してください。",
    PunctuationMode.western: "句読点は必ず半角の「,」「.」を使用してください。",
}

OUTPUT_HYGIENE_DIRECTIVES = (
    "変換後のテキストのみを出力し、説明文や補足は書かないでください。",
    "あいさつや了承の返答など、変換結果と無関係な文章を冒頭や末尾に付け加えないでください。",
    "ヘッダー、箇条書き、引用、コードブロックなどの装飾を使わず、本文のみをそのまま出力してください。",
)

SELF_CHECK_DIRECTIVE = (
    "出力前に文体の揺れが残っていないか自己チェックし、丁寧語と常体が混在しないようにしてください。"
)

REINFORCED_EXAMPLE_DIRECTIVE = (
    "例: 「この結果です。」→「この結果である。」、「確認します。」→「確認する。」"
    "のように丁寧語を常体に言い換えてください。"
)

MAXIMUM_AUDIT_DIRECTIVES = (
    "各文を声に出すつもりで確認し、丁寧語（です・ます・でした など）が残っていれば必ず常体に修正してから出力してください。",
    "最終出力の直前に丁寧語が1つでも残っていないか再点検し、問題があれば修正が完了するまで出力しないでください。",
)


def get_strict_reinforcement_directives(
    writing_style: WritingStyle,
    enforcement_level: EnforcementLevel,
) -> list[str]:
    """Extra strict-mode lines for the current enforcement level.

    Only the だ・である family gets reinforcement; other styles have no
    lexical contract to reinforce.
    """
    if not requires_strict_enforcement(writing_style):
        return []

    directives: list[str] = []

    if enforcement_level in (EnforcementLevel.reinforced, EnforcementLevel.maximum):
        directives.append(REINFORCED_EXAMPLE_DIRECTIVE)

    if enforcement_level == EnforcementLevel.maximum:
        directives.extend(MAXIMUM_AUDIT_DIRECTIVES)

    return directives


def build_transform_prompt(
    input_text: str,
    writing_style: WritingStyle,
    punctuation_mode: PunctuationMode,
    strict_mode: bool = False,
    validation_directive: str | None = None,
    enforcement_level: EnforcementLevel = EnforcementLevel.standard,
) -> str:
    """Build the instruction block for one transform attempt.

    Args:
        input_text: Text to rewrite.
        writing_style: Target style.
        punctuation_mode: Target punctuation dialect.
        strict_mode: Whether this is a corrective (retry) attempt.
        validation_directive: Corrective directive from the previous attempt.
            Only used in strict mode.
        enforcement_level: Reinforcement intensity for strict mode.

    Returns:
        Formatted prompt string.
    """
    preset = get_style_preset(writing_style)

    instructions = [PRESERVE_MEANING_DIRECTIVE]

    if strict_mode and validation_directive and validation_directive.strip():
        instructions.append(validation_directive.strip())

    instructions.append(preset.tone_instruction)

    if strict_mode and preset.strict_tone_instruction:
        instructions.append(preset.strict_tone_instruction)

    instructions.extend(d.strip() for d in preset.additional_directives if d.strip())

    instructions.append(PUNCTUATION_DIRECTIVES[PunctuationMode(punctuation_mode)])
    instructions.extend(OUTPUT_HYGIENE_DIRECTIVES)

    if strict_mode:
        instructions.append(SELF_CHECK_DIRECTIVE)
        instructions.extend(
            get_strict_reinforcement_directives(writing_style, enforcement_level)
        )

    lines = [
        TRANSFORM_PREAMBLE,
        "",
        "# 指示",
        *(f"- {instruction}" for instruction in instructions),
        "",
        "# 入力文",
        input_text.strip(),
    ]

    return "\n".join(lines)


def build_transform_payload(prompt: str, temperature: float) -> GenerationPayload:
    """Wrap a transform prompt in a generateContent payload."""
    return GenerationPayload.from_prompt(prompt, temperature=temperature)


# ==============================================================================
# AI Checker Prompts
# ==============================================================================

AI_CHECKER_PROMPT = "\n".join([
    "あなたは高度なAIテキスト検出・監査システムです。",
    "以下の日本語テキストを詳細に分析し、そのテキストが「AIによって生成された可能性」を0〜100の整数（スコア）で厳密に評価してください。",
    "0は「確実に人間が書いた」、100は「確実にAIが書いた」ことを意味します。",
    "",
    "## 評価基準",
    "以下の要素を重点的にチェックしてください：",
    "1. **文構造の多様性（Burstiness）**: 人間は文の長さや構造を不規則に変化させますが、AIは均一になりがちです。ただし、論文やレポートなどの形式的な文書では、人間が書いても一定の均一性を持つ場合があることに注意してください。",
    "2. **具体性と独自性**: AIは一般的で無難な表現を好みます。個人的な体験、強い意見、独自の言い回しは人間らしさの証拠です。",
    "3. **不完全性**: 誤字、俗語、倒置、文法的な揺らぎは人間らしさを示唆します。",
    "4. **AI特有の癖**: 意味の薄い冗長な表現や、文脈にそぐわない過剰な繰り返しはAIの兆候です。なお、「〜について解説します」「結論として」などの定型表現は、レポートや論文では人間も自然に使用するため、それだけでAIと判定しないでください。",
    "",
    "## スコアリングの指針",
    "- **安易な中間スコア（40〜60点）は避けてください**。特徴を捉えて、可能な限り白黒はっきりとした判定（20以下または80以上）を目指してください。",
    "- 判断に迷う場合のみ中間スコアを使用してください。",
    "",
    "## 出力形式",
    "結果は必ず以下のJSON形式のみで返してください。Markdownのコードブロックや余計な説明は一切不要です。",
    "",
    '{"score": <0-100の整数>, "confidence": "<low|medium|high>", "reasoning": "<判定理由。AIらしい点、人間らしい点を具体的に指摘してください>"}',
    "",
    "confidence（確信度）の目安:",
    "- low: 判定の根拠が乏しい",
    "- medium: どちらとも取れる要素がある",
    "- high: 明確な特徴があり、判定に自信がある",
])

AI_CHECKER_TEXT_START = "--- テキストここから ---"
AI_CHECKER_TEXT_END = "--- テキストここまで ---"


def build_ai_check_prompt(text: str) -> str:
    """Embed ``text`` verbatim between the audit delimiters."""
    sanitized = text.replace("\r", "").strip()
    return f"{AI_CHECKER_PROMPT}\n\n{AI_CHECKER_TEXT_START}\n{sanitized}\n{AI_CHECKER_TEXT_END}"


def build_ai_check_payload(text: str, temperature: float) -> GenerationPayload:
    return GenerationPayload.from_prompt(
        build_ai_check_prompt(text),
        temperature=temperature,
        top_p=0.8,
        top_k=32,
    )
