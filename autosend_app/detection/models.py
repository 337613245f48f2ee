"""
Detection data models.

Immutable structures for inbound observed events, their structured extras
and the result of classifying one event.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class DetectionKind(str, Enum):
    """What a classified event turned out to be."""
    NONE = "none"
    VERIFICATION_CHALLENGE = "verification_challenge"
    CATCHLIST_NOTICE = "catchlist_notice"


@dataclass(frozen=True)
class DetectionResult:
    """Classification of one inbound payload."""

    kind: DetectionKind = DetectionKind.NONE
    identifier: Optional[str] = None                 # Extracted user id, if any

    @property
    def matched(self) -> bool:
        return self.kind is not DetectionKind.NONE

    @classmethod
    def none(cls) -> "DetectionResult":
        return cls()


@dataclass(frozen=True)
class ExtraField:
    """A name/value pair inside a structured extra."""
    name: str = ""
    value: str = ""


@dataclass(frozen=True)
class StructuredExtra:
    """Rich content attached to a message (title, description, fields, footer)."""

    title: str = ""
    description: str = ""
    fields: tuple[ExtraField, ...] = ()
    footer: str = ""

    def text_fields(self) -> list[str]:
        """All searchable text of this extra. Non-string values are skipped."""
        texts = [self.title, self.description, self.footer]
        fields = self.fields if isinstance(self.fields, (list, tuple)) else ()
        for extra_field in fields:
            if isinstance(extra_field, Mapping):
                texts.extend([extra_field.get("name"), extra_field.get("value")])
            else:
                texts.extend([
                    getattr(extra_field, "name", None),
                    getattr(extra_field, "value", None),
                ])
        return [text for text in texts if isinstance(text, str) and text]


@dataclass(frozen=True)
class ObservedEvent:
    """A message observed on the inbound stream."""

    destination: str
    content: str = ""
    extras: tuple[StructuredExtra, ...] = field(default_factory=tuple)
    sender_id: Optional[str] = None
    sender_name: Optional[str] = None
