"""
Pattern matching for inbound message content.

Classifies a single payload as a verification challenge, a catchlist
notice, or nothing. Every function here is pure and total: malformed
input classifies as nothing instead of raising, so the matcher can run
on every event from the stream.
"""

import re
import unicodedata
from collections.abc import Iterable, Mapping
from typing import Any, Optional

from ..config.defaults import DEFAULT_CATCHLIST_PHRASE
from .models import DetectionKind, DetectionResult, StructuredExtra

WARNING_GLYPH = "⚠"

PHRASE_REAL_HUMAN = "are you a real human"
PHRASE_USE_LINK = "please use the link below"
PHRASE_COMPLETE_WITHIN = "complete this within"
PHRASE_BAN = "may result in a ban"
PHRASE_MINUTES = "minutes"
PHRASE_COMPLETE_CAPTCHA = "please complete your captcha"
PHRASE_VERIFY_HUMAN = "verify that you are human"

_WHITESPACE = re.compile(r"\s+")
_PROGRESS_COUNTER = re.compile(r"\(\d+/\d+\)")
_MENTION = re.compile(r"<@[!&]?(\d+)>")
_LONG_NUMERIC_ID = re.compile(r"(?<!\d)(\d{17,20})(?!\d)")


def normalize_content(content: str) -> str:
    """
    Normalize content for phrase matching.

    Strips zero-width and other invisible format characters (Unicode
    category Cf), collapses whitespace runs to one space and lower-cases.
    """
    visible = "".join(ch for ch in content if unicodedata.category(ch) != "Cf")
    return _WHITESPACE.sub(" ", visible).strip().lower()


def is_verification_challenge(content: str) -> bool:
    """Apply the verification challenge rules to raw content."""
    normalized = normalize_content(content)
    has_glyph = WARNING_GLYPH in content
    asks_human = PHRASE_REAL_HUMAN in normalized
    complete_within = PHRASE_COMPLETE_WITHIN in normalized

    # Full challenge wording
    if (has_glyph and asks_human and PHRASE_USE_LINK in normalized
            and (complete_within or PHRASE_BAN in normalized)):
        return True

    # Captcha progress prompt
    if (PHRASE_COMPLETE_CAPTCHA in normalized and PHRASE_VERIFY_HUMAN in normalized
            and _PROGRESS_COUNTER.search(normalized)):
        return True

    # Fallback, intentionally broad
    return has_glyph and (asks_human or (complete_within and PHRASE_MINUTES in normalized))


def extract_identifier(content: str) -> Optional[str]:
    """
    Extract the identifier a challenge is addressed to.

    Prefers a mention reference in the raw content, then any standalone
    17-20 digit token.
    """
    mention = _MENTION.search(content)
    if mention:
        return mention.group(1)

    numeric = _LONG_NUMERIC_ID.search(content)
    if numeric:
        return numeric.group(1)

    return None


def _as_text(value: Any) -> str:
    return value if isinstance(value, str) else ""


def extra_text_fields(extra: Any) -> list[str]:
    """
    Collect the searchable text of one structured extra.

    Accepts a StructuredExtra or a mapping shaped like
    ``{title, description, fields: [{name, value}], footer: {text} | str}``.
    Anything else contributes no text.
    """
    if isinstance(extra, StructuredExtra):
        return extra.text_fields()
    if not isinstance(extra, Mapping):
        return []

    texts = [_as_text(extra.get("title")), _as_text(extra.get("description"))]

    footer = extra.get("footer")
    if isinstance(footer, Mapping):
        texts.append(_as_text(footer.get("text")))
    else:
        texts.append(_as_text(footer))

    fields = extra.get("fields")
    if isinstance(fields, Iterable) and not isinstance(fields, (str, bytes, Mapping)):
        for extra_field in fields:
            if isinstance(extra_field, Mapping):
                texts.append(_as_text(extra_field.get("name")))
                texts.append(_as_text(extra_field.get("value")))
            else:
                texts.append(_as_text(getattr(extra_field, "name", None)))
                texts.append(_as_text(getattr(extra_field, "value", None)))

    return [text for text in texts if text]


def contains_catchlist_phrase(content: str, extras: Any, phrase: str) -> bool:
    """Case-sensitive literal search over content and every extra text field."""
    if not phrase:
        return False
    if phrase in content:
        return True

    if not isinstance(extras, Iterable) or isinstance(extras, (str, bytes, Mapping)):
        return False

    return any(phrase in text for extra in extras for text in extra_text_fields(extra))


class PatternMatcher:
    """Stateless classifier for inbound message payloads."""

    def __init__(self, catchlist_phrase: str = DEFAULT_CATCHLIST_PHRASE):
        self.catchlist_phrase = catchlist_phrase

    def classify(self, content: Any, extras: Any = None) -> DetectionResult:
        """
        Classify one inbound payload.

        Args:
            content: Raw message text; non-string values count as empty
            extras: Optional sequence of structured extras

        Returns:
            DetectionResult with kind NONE when nothing matched
        """
        text = content if isinstance(content, str) else ""

        if text and is_verification_challenge(text):
            return DetectionResult(
                kind=DetectionKind.VERIFICATION_CHALLENGE,
                identifier=extract_identifier(text),
            )

        if contains_catchlist_phrase(text, extras, self.catchlist_phrase):
            return DetectionResult(kind=DetectionKind.CATCHLIST_NOTICE)

        return DetectionResult.none()
