"""
Inbound event parsing and pumping.

Converts raw message-create payloads into ObservedEvent objects and feeds
an asynchronous event stream into a handler without blocking the loop.
"""

from collections.abc import AsyncIterable, Mapping
from typing import Any, Callable, Optional

import structlog

from .models import ExtraField, ObservedEvent, StructuredExtra

logger = structlog.get_logger(__name__)


class EventParseError(ValueError):
    """Raised when an inbound payload cannot be turned into an event."""
    pass


def _text(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _mappings(value: Any) -> list:
    """Mapping items of a list or tuple; anything else yields nothing."""
    if not isinstance(value, (list, tuple)):
        return []
    return [item for item in value if isinstance(item, Mapping)]


def parse_extra(payload: Mapping) -> StructuredExtra:
    """Parse one embed-style mapping into a StructuredExtra."""
    footer = payload.get("footer")
    footer_text = _text(footer.get("text")) if isinstance(footer, Mapping) else _text(footer)

    fields = []
    for raw_field in _mappings(payload.get("fields")):
        fields.append(ExtraField(
            name=_text(raw_field.get("name")),
            value=_text(raw_field.get("value")),
        ))

    return StructuredExtra(
        title=_text(payload.get("title")),
        description=_text(payload.get("description")),
        fields=tuple(fields),
        footer=footer_text,
    )


def parse_observed_event(payload: Any) -> ObservedEvent:
    """
    Parse a raw message-create payload.

    Expected shape::

        {"channel_id": "...", "content": "...",
         "embeds": [{"title", "description", "fields", "footer"}],
         "author": {"id": "...", "username": "..."}}

    Args:
        payload: Raw payload mapping, or an ObservedEvent passed through

    Returns:
        Parsed ObservedEvent

    Raises:
        EventParseError: If the payload is not a mapping or has no channel id
    """
    if isinstance(payload, ObservedEvent):
        return payload
    if not isinstance(payload, Mapping):
        raise EventParseError(f"Expected mapping payload, got {type(payload).__name__}")

    destination = payload.get("channel_id")
    if destination is None or str(destination).strip() == "":
        raise EventParseError("Payload has no channel_id")

    extras = tuple(parse_extra(embed) for embed in _mappings(payload.get("embeds")))

    author = payload.get("author")
    sender_id: Optional[str] = None
    sender_name: Optional[str] = None
    if isinstance(author, Mapping):
        sender_id = str(author["id"]) if author.get("id") is not None else None
        sender_name = _text(author.get("username")) or None

    return ObservedEvent(
        destination=str(destination).strip(),
        content=_text(payload.get("content")),
        extras=extras,
        sender_id=sender_id,
        sender_name=sender_name,
    )


async def pump_events(
    events: AsyncIterable[Any],
    handler: Callable[[ObservedEvent], Any],
) -> int:
    """
    Consume an inbound event stream, handing each parsed event to handler.

    Malformed payloads are logged and skipped. Returns the number of
    events delivered to the handler once the stream ends.
    """
    delivered = 0

    async for payload in events:
        try:
            event = parse_observed_event(payload)
        except EventParseError as e:
            logger.warning("Skipping malformed inbound event", error=str(e))
            continue

        handler(event)
        delivered += 1

    logger.info("Inbound event stream ended", delivered=delivered)
    return delivered
