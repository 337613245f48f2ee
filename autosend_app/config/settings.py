"""
Mutable settings store read by the scheduler on every cycle.

Destination and message slots are indexed by slot number (1..N) so
callers never build setting names out of strings. The scheduler and the
rotator re-read the store each time they need it, so changes made while
a schedule is running take effect on the next cycle or rotation.
"""

from dataclasses import dataclass, replace
from typing import Any, Iterable, Optional

from ..errors import ConfigurationError
from .defaults import (
    DetectionParams,
    DispatchParams,
    IntervalParams,
    RotationParams,
    get_default_config,
)
from .validation import ConfigValidator


@dataclass(frozen=True)
class DestinationSlot:
    """A destination identifier and whether it takes part in rotation."""
    identifier: str = ""
    enabled: bool = True

    @property
    def is_empty(self) -> bool:
        return not self.identifier.strip()

    @property
    def is_active(self) -> bool:
        return self.enabled and not self.is_empty


class SchedulerSettings:
    """Slot-indexed destination and message settings plus timing bounds."""

    def __init__(
        self,
        interval: Optional[IntervalParams] = None,
        rotation: Optional[RotationParams] = None,
        detection: Optional[DetectionParams] = None,
        dispatch: Optional[DispatchParams] = None,
        destinations: Optional[Iterable[Any]] = None,
        messages: Optional[Iterable[Optional[str]]] = None,
    ):
        defaults = get_default_config()
        self.interval = interval or defaults.interval
        self.rotation = rotation or defaults.rotation
        self.detection = detection or defaults.detection
        self.dispatch = dispatch or defaults.dispatch

        self._destinations: dict[int, DestinationSlot] = {}
        self._messages: dict[int, str] = {}

        for slot, entry in enumerate(destinations or [], start=1):
            self._destinations[self._check_destination_slot(slot)] = _coerce_slot(entry)

        initial_messages = defaults.messages if messages is None else messages
        self.set_messages(initial_messages)

    # Slot bookkeeping

    @property
    def max_destination_slots(self) -> int:
        return self.dispatch.max_destination_slots

    @property
    def max_message_slots(self) -> int:
        return self.dispatch.max_message_slots

    def _check_destination_slot(self, slot: int) -> int:
        if not 1 <= slot <= self.max_destination_slots:
            raise ConfigurationError(
                f"Destination slot {slot} outside 1..{self.max_destination_slots}",
                field="destinations",
            )
        return slot

    def _check_message_slot(self, slot: int) -> int:
        if not 1 <= slot <= self.max_message_slots:
            raise ConfigurationError(
                f"Message slot {slot} outside 1..{self.max_message_slots}",
                field="messages",
            )
        return slot

    # Read accessors

    def destination_slots(self) -> dict[int, DestinationSlot]:
        """Return every slot, empty ones included, keyed by slot number."""
        return {
            slot: self._destinations.get(slot, DestinationSlot())
            for slot in range(1, self.max_destination_slots + 1)
        }

    def destination(self, slot: int) -> DestinationSlot:
        return self._destinations.get(self._check_destination_slot(slot), DestinationSlot())

    def configured_destinations(self) -> dict[int, DestinationSlot]:
        """Return only the slots holding an identifier."""
        return {slot: entry for slot, entry in self.destination_slots().items() if not entry.is_empty}

    def enabled_destinations(self) -> list[str]:
        """Return enabled, non-empty identifiers in slot order."""
        return [
            entry.identifier.strip()
            for entry in self.destination_slots().values()
            if entry.is_active
        ]

    def messages(self) -> dict[int, str]:
        """Return every message slot keyed by slot number, blanks included."""
        return {
            slot: self._messages.get(slot, "")
            for slot in range(1, self.max_message_slots + 1)
        }

    def active_messages(self) -> list[str]:
        """Return non-blank messages in slot order."""
        return [text for text in self.messages().values() if text and text.strip()]

    @property
    def detection_enabled(self) -> bool:
        return self.detection.enabled

    # Mutators

    def set_destination(self, slot: int, identifier: str) -> DestinationSlot:
        """Assign an identifier to a slot, keeping the slot's enabled flag."""
        current = self.destination(slot)
        updated = replace(current, identifier=str(identifier).strip())
        self._destinations[slot] = updated
        return updated

    def clear_destination(self, slot: int) -> None:
        self._destinations.pop(self._check_destination_slot(slot), None)

    def set_destination_enabled(self, slot: int, enabled: bool) -> DestinationSlot:
        current = self.destination(slot)
        updated = replace(current, enabled=enabled)
        self._destinations[slot] = updated
        return updated

    def toggle_destination(self, slot: int) -> DestinationSlot:
        """Flip a slot's enabled flag. Empty slots cannot be toggled."""
        current = self.destination(slot)
        if current.is_empty:
            raise ConfigurationError(f"Destination slot {slot} is not configured", field="destinations")
        return self.set_destination_enabled(slot, not current.enabled)

    def set_message(self, slot: int, text: Optional[str]) -> None:
        self._messages[self._check_message_slot(slot)] = text or ""

    def set_messages(self, texts: Iterable[Optional[str]]) -> None:
        """Replace every message slot; missing trailing slots become blank."""
        texts = list(texts)
        if len(texts) > self.max_message_slots:
            raise ConfigurationError(
                f"At most {self.max_message_slots} messages allowed",
                field="messages",
                context={"count": len(texts)},
            )
        self._messages = {slot: text or "" for slot, text in enumerate(texts, start=1)}

    def set_interval_bounds(self, min_seconds: float, max_seconds: float) -> None:
        _raise_on_errors(ConfigValidator.validate_interval_params(
            {"min_seconds": min_seconds, "max_seconds": max_seconds}
        ))
        self.interval = IntervalParams(min_seconds=min_seconds, max_seconds=max_seconds)

    def set_rotation_bounds(self, min_minutes: float, max_minutes: float) -> None:
        _raise_on_errors(ConfigValidator.validate_rotation_params(
            {"min_minutes": min_minutes, "max_minutes": max_minutes}
        ))
        self.rotation = RotationParams(min_minutes=min_minutes, max_minutes=max_minutes)

    def set_detection_enabled(self, enabled: bool) -> None:
        self.detection = replace(self.detection, enabled=enabled)

    # Serialization

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the same shape the loader reads."""
        return {
            "interval": {
                "min_seconds": self.interval.min_seconds,
                "max_seconds": self.interval.max_seconds,
            },
            "rotation": {
                "min_minutes": self.rotation.min_minutes,
                "max_minutes": self.rotation.max_minutes,
            },
            "detection": {
                "enabled": self.detection.enabled,
                "catchlist_phrase": self.detection.catchlist_phrase,
            },
            "dispatch": {
                "message_spacing_ms": self.dispatch.message_spacing_ms,
                "nonce_multiplier": self.dispatch.nonce_multiplier,
                "max_destination_slots": self.dispatch.max_destination_slots,
                "max_message_slots": self.dispatch.max_message_slots,
            },
            "destinations": [
                {"id": entry.identifier, "enabled": entry.enabled}
                for entry in self.destination_slots().values()
            ],
            "messages": list(self.messages().values()),
        }

    @classmethod
    def from_dict(cls, config: dict[str, Any]) -> "SchedulerSettings":
        """Build settings from a merged configuration dictionary."""
        errors = ConfigValidator.validate_config(config)
        _raise_on_errors(errors)

        return cls(
            interval=_build_params(IntervalParams, config, "interval"),
            rotation=_build_params(RotationParams, config, "rotation"),
            detection=_build_params(DetectionParams, config, "detection"),
            dispatch=_build_params(DispatchParams, config, "dispatch"),
            destinations=config.get("destinations", []),
            messages=config.get("messages"),
        )


def _coerce_slot(entry: Any) -> DestinationSlot:
    if isinstance(entry, DestinationSlot):
        return entry
    if isinstance(entry, dict):
        return DestinationSlot(
            identifier=str(entry.get("id") or "").strip(),
            enabled=entry.get("enabled", True),
        )
    return DestinationSlot(identifier=str(entry or "").strip())


def _raise_on_errors(errors: list) -> None:
    if errors:
        details = [f"{err.field}: {err.message} (got: {err.value})" for err in errors]
        raise ConfigurationError(
            "Invalid configuration: " + "; ".join(details),
            field=errors[0].field,
            context={"errors": details},
        )


def _build_params(params_cls: type, config: dict[str, Any], section: str) -> Any:
    values = config.get(section) or {}
    unknown = set(values) - set(params_cls.__dataclass_fields__)
    if unknown:
        raise ConfigurationError(
            f"Unknown {section} settings: {', '.join(sorted(unknown))}",
            field=section,
        )
    return params_cls(**values)
