"""
Detection module.

Classifies inbound message content and parses the inbound event stream.
"""

from .events import EventParseError, parse_observed_event, pump_events
from .matcher import PatternMatcher
from .models import (
    DetectionKind,
    DetectionResult,
    ExtraField,
    ObservedEvent,
    StructuredExtra,
)

__all__ = [
    "EventParseError",
    "parse_observed_event",
    "pump_events",
    "PatternMatcher",
    "DetectionKind",
    "DetectionResult",
    "ExtraField",
    "ObservedEvent",
    "StructuredExtra",
]
