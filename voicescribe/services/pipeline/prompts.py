"""
Instruction builders for the translate and summarize stages.

Each builder returns the ordered ``system`` / ``user`` messages handed to
``BaseLLM.chat()``. Language codes are rendered as full names inside the
instruction text; unknown codes are used verbatim.
"""

from voicescribe.core.models import SummaryType

DEFAULT_LANGUAGE = "en"

LANGUAGE_NAMES: dict[str, str] = {
    "ja": "Japanese",
    "en": "English",
    "es": "Spanish",
    "fr": "French",
    "zh": "Chinese",
    "ko": "Korean",
    "it": "Italian",
    "ar": "Arabic",
    "hi": "Hindi",
    "ru": "Russian",
    "id": "Indonesian",
    "de": "German",
    "pt": "Portuguese",
}

TRANSLATOR_SYSTEM_PROMPT = (
    "You are a professional translator. Provide accurate and natural translations."
)

SUMMARY_SYSTEM_PROMPT = (
    "You are a professional business analyst and executive assistant "
    "specializing in creating clear, actionable summaries."
)

_SHORT_TEMPLATE = """You are a professional executive assistant. Analyze the following transcript and provide a SHORT summary in exactly 4-5 lines. Focus on the most critical points, key decisions, and actionable outcomes. Write in a professional, executive-level tone.

Requirements:
- Exactly 4-5 lines of text
- No bullet points, lists, or markdown formatting
- Focus on main conclusions, decisions, and next steps
- Professional business language
{language_directive}
Transcript: {text}"""

_MEDIUM_TEMPLATE = """You are a professional business analyst. Analyze the following transcript and provide a MEDIUM-length summary that balances comprehensive coverage with readability.

Requirements:
- 3-4 well-structured paragraphs (150-250 words total)
- Cover main topics, key points, and strategic context
- Include important details, decisions, and action items
- Professional business writing style
{language_directive}
Transcript: {text}"""

_DETAILED_TEMPLATE = """You are a professional business analyst. Provide a comprehensive analysis of the following transcript.

Requirements:
- 5 or more paragraphs (400+ words total)
- Cover the main topics, the key arguments made, and the conclusions reached
- Include an executive overview followed by the detailed analysis
- Begin directly with the analysis: do not acknowledge these instructions or add any preamble
{language_directive}
Transcript: {text}"""

SUMMARY_TEMPLATES: dict[SummaryType, str] = {
    SummaryType.short: _SHORT_TEMPLATE,
    SummaryType.medium: _MEDIUM_TEMPLATE,
    SummaryType.detailed: _DETAILED_TEMPLATE,
}


def language_name(code: str) -> str:
    """Return the display name for ``code``, or ``code`` itself if unmapped."""
    return LANGUAGE_NAMES.get(code, code)


def build_translate_prompt(text: str, target_language: str, context: str | None = None) -> str:
    """Build the user instruction for the translate stage."""
    target = language_name(target_language)
    context_part = f", using context: {context}" if context else ""
    return (
        f"Translate the following text to {target}{context_part}: {text}. "
        "Return only the translation."
    )


def build_translate_messages(
    text: str, target_language: str, context: str | None = None
) -> list[dict[str, str]]:
    return [
        {"role": "system", "content": TRANSLATOR_SYSTEM_PROMPT},
        {"role": "user", "content": build_translate_prompt(text, target_language, context)},
    ]


def language_directive(language: str) -> str:
    """Instruction asking for output in ``language``; empty for the default."""
    if language == DEFAULT_LANGUAGE:
        return ""
    return f"Please provide your response in {language_name(language)}."


def build_summary_prompt(text: str, summary_type: SummaryType, language: str) -> str:
    """Build the depth-specific user instruction for the summarize stage."""
    directive = language_directive(language)
    return SUMMARY_TEMPLATES[SummaryType(summary_type)].format(
        language_directive=f"\n{directive}\n" if directive else "",
        text=text,
    )


def build_summary_messages(
    text: str, summary_type: SummaryType, language: str
) -> list[dict[str, str]]:
    return [
        {"role": "system", "content": SUMMARY_SYSTEM_PROMPT},
        {"role": "user", "content": build_summary_prompt(text, summary_type, language)},
    ]
