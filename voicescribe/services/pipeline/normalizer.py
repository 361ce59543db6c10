"""
Response normalization for inference payloads.

``normalize_content`` is total over the ``PlainText | FragmentSequence``
union. ``PreambleStripper`` removes a conversational acknowledgment that
models sometimes put in front of a summary. The default pattern only
recognises a short acknowledgment (up to three lines) closed by a ``---``
line, so a summary that itself uses ``---`` as a section rule keeps its
opening paragraphs. A one-line summary opening followed by a rule is still
removed. Phrasings vary by provider and language, so the list is
configurable and not exhaustive.
"""

import re
from collections.abc import Iterable

from voicescribe.core.config import DEFAULT_PREAMBLE_PATTERNS
from voicescribe.core.exceptions import EmptyResultError
from voicescribe.core.models import FragmentSequence, PlainText


def normalize_content(content: PlainText | FragmentSequence) -> str:
    """Flatten an inference payload into one string.

    Fragments are concatenated in order; fragments that are not text, or
    carry no text, are dropped.

    Raises:
        EmptyResultError: If no non-blank text remains.
    """
    match content:
        case PlainText(text=text):
            result = text
        case FragmentSequence(fragments=fragments):
            result = "".join(
                fragment.text
                for fragment in fragments
                if fragment.type == "text" and fragment.text
            )
        case _:
            raise TypeError(f"Unsupported inference payload: {type(content).__name__}")

    if not result or not result.strip():
        raise EmptyResultError()
    return result


class PreambleStripper:
    """Removes a leading acknowledgment segment from model output.

    Patterns are tried in order with ``re.MULTILINE | re.DOTALL``; the first
    one that matches at the start of the text is removed once, and the
    remainder is trimmed. Text with no match is returned trimmed.

    Args:
        patterns: Regular expressions anchored at the start of the text.
    """

    def __init__(self, patterns: Iterable[str] | None = None) -> None:
        sources = list(patterns) if patterns is not None else list(DEFAULT_PREAMBLE_PATTERNS)
        self._patterns = [re.compile(p, re.MULTILINE | re.DOTALL) for p in sources]

    @property
    def patterns(self) -> list[str]:
        return [p.pattern for p in self._patterns]

    def strip(self, text: str) -> str:
        for pattern in self._patterns:
            match = pattern.match(text)
            if match:
                return text[match.end() :].strip()
        return text.strip()


def strip_preamble(text: str, patterns: Iterable[str] | None = None) -> str:
    """Convenience wrapper around :class:`PreambleStripper`."""
    return PreambleStripper(patterns).strip(text)
