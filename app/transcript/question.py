"""
Heuristic interview-question detection over a transcribed utterance.

An utterance counts as a question when, after normalization, it has at least
MIN_QUESTION_WORDS words and any of these hold:
- the raw text contains "?"
- it starts with an interrogative word, a modal opener or an imperative opener
- it contains a behavioral (STAR), comparative, hypothetical or
  experience/capability phrase anywhere

Prefix checks require the phrase to be followed by a space (or to be the whole
text), so "whatever you think" does not match "what".
"""
from __future__ import annotations

import re

MIN_QUESTION_WORDS = 3

_FILLER_PREFIX = re.compile(r"^(so|well|um|uh|okay|alright)\b,?\s*", re.IGNORECASE)

INTERROGATIVE_WORDS = (
    "what", "why", "how", "when", "where", "who", "which", "whose", "whom",
)

MODAL_OPENERS = (
    "can you", "could you", "would you", "will you", "should you",
    "do you", "did you", "have you", "has", "had you",
    "are you", "is there", "are there", "was there", "were there",
    "may i", "might you", "shall we", "must you",
)

IMPERATIVE_OPENERS = (
    "tell me", "tell us", "describe", "explain", "walk me through",
    "walk us through", "talk about", "share", "discuss",
    "elaborate on", "expand on", "clarify", "outline",
)

STAR_PHRASES = (
    "give me an example", "give an example", "give us an example",
    "share a time", "share an instance", "share an example",
    "describe a situation", "describe a time", "describe an instance",
    "tell me about a time", "tell us about a time",
    "can you recall", "think of a time", "think of an example",
    "have you ever", "can you think of", "provide an example",
)

COMPARATIVE_PHRASES = (
    "compare", "what's the difference", "what is the difference",
    "how would you choose", "which would you prefer",
    "what are the differences", "how do they differ",
    "contrast", "versus", "vs",
)

HYPOTHETICAL_PHRASES = (
    "what would you", "how would you", "what if", "suppose",
    "imagine", "if you were", "if you had", "how might you",
    "what could you", "how should you",
)

EXPERIENCE_PHRASES = (
    "do you have experience", "have you worked with",
    "are you familiar", "have you used", "can you work with",
    "do you know", "are you comfortable", "have you done",
)

_PREFIX_GROUPS = (INTERROGATIVE_WORDS, MODAL_OPENERS, IMPERATIVE_OPENERS)
_CONTAINS_GROUPS = (STAR_PHRASES, COMPARATIVE_PHRASES, HYPOTHETICAL_PHRASES, EXPERIENCE_PHRASES)


def normalize_question_text(text: str) -> str:
    """Lowercase, trim and drop one leading filler word ("so", "um", "okay," ...)."""
    lowered = (text or "").lower().strip()
    return _FILLER_PREFIX.sub("", lowered, count=1)


def word_count(text: str) -> int:
    return len(text.split())


def _starts_with_phrase(normalized: str, phrases: tuple[str, ...]) -> bool:
    return any(normalized == p or normalized.startswith(p + " ") for p in phrases)


def _contains_phrase(normalized: str, phrases: tuple[str, ...]) -> bool:
    return any(p in normalized for p in phrases)


def is_question(text: str) -> bool:
    """True if text is likely an interview question. Pure; never raises for str input."""
    normalized = normalize_question_text(text)
    if word_count(normalized) < MIN_QUESTION_WORDS:
        return False
    if "?" in text:
        return True
    if any(_starts_with_phrase(normalized, group) for group in _PREFIX_GROUPS):
        return True
    return any(_contains_phrase(normalized, group) for group in _CONTAINS_GROUPS)
