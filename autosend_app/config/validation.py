"""Configuration validation utilities."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class ValidationError:
    """Represents a configuration validation error."""
    field: str
    message: str
    value: Any


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class ConfigValidator:
    """Validates configuration parameters."""

    @staticmethod
    def _validate_bounds(params: dict[str, Any], min_key: str, max_key: str) -> list[ValidationError]:
        errors = []

        for key in (min_key, max_key):
            if key in params:
                value = params[key]
                if not _is_number(value) or value <= 0:
                    errors.append(ValidationError(
                        field=key,
                        message="Must be a positive number",
                        value=value
                    ))

        if not errors and min_key in params and max_key in params:
            if params[min_key] > params[max_key]:
                errors.append(ValidationError(
                    field=min_key,
                    message=f"Must not exceed {max_key}",
                    value=params[min_key]
                ))

        return errors

    @staticmethod
    def validate_interval_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate message interval bounds."""
        return ConfigValidator._validate_bounds(params, "min_seconds", "max_seconds")

    @staticmethod
    def validate_rotation_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate rotation bounds."""
        return ConfigValidator._validate_bounds(params, "min_minutes", "max_minutes")

    @staticmethod
    def validate_detection_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate detection parameters."""
        errors = []

        if "enabled" in params and not isinstance(params["enabled"], bool):
            errors.append(ValidationError(
                field="enabled",
                message="Must be a boolean",
                value=params["enabled"]
            ))

        if "catchlist_phrase" in params:
            value = params["catchlist_phrase"]
            if not isinstance(value, str) or not value:
                errors.append(ValidationError(
                    field="catchlist_phrase",
                    message="Must be a non-empty string",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_dispatch_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate send-cycle parameters."""
        errors = []

        if "message_spacing_ms" in params:
            value = params["message_spacing_ms"]
            if not isinstance(value, int) or isinstance(value, bool) or value < 0:
                errors.append(ValidationError(
                    field="message_spacing_ms",
                    message="Must be a non-negative integer",
                    value=value
                ))

        for key in ("nonce_multiplier", "max_destination_slots", "max_message_slots"):
            if key in params:
                value = params[key]
                if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
                    errors.append(ValidationError(
                        field=key,
                        message="Must be a positive integer",
                        value=value
                    ))

        return errors

    @staticmethod
    def validate_destinations(destinations: Any, max_slots: int) -> list[ValidationError]:
        """
        Validate destination slot entries.

        Entries are either plain identifier strings or mappings with
        ``id`` and optional ``enabled`` keys.
        """
        if not isinstance(destinations, list):
            return [ValidationError(field="destinations", message="Must be a list", value=destinations)]

        errors = []
        if len(destinations) > max_slots:
            errors.append(ValidationError(
                field="destinations",
                message=f"At most {max_slots} slots allowed",
                value=len(destinations)
            ))

        for index, entry in enumerate(destinations, start=1):
            if isinstance(entry, str):
                continue
            if not isinstance(entry, dict):
                errors.append(ValidationError(
                    field=f"destinations[{index}]",
                    message="Must be a string or a mapping with 'id'",
                    value=entry
                ))
                continue
            identifier = entry.get("id", "")
            if not isinstance(identifier, (str, int)) or isinstance(identifier, bool):
                errors.append(ValidationError(
                    field=f"destinations[{index}].id",
                    message="Must be a string",
                    value=identifier
                ))
            if "enabled" in entry and not isinstance(entry["enabled"], bool):
                errors.append(ValidationError(
                    field=f"destinations[{index}].enabled",
                    message="Must be a boolean",
                    value=entry["enabled"]
                ))

        return errors

    @staticmethod
    def validate_messages(messages: Any, max_slots: int) -> list[ValidationError]:
        """Validate message slot entries."""
        if not isinstance(messages, list):
            return [ValidationError(field="messages", message="Must be a list", value=messages)]

        errors = []
        if len(messages) > max_slots:
            errors.append(ValidationError(
                field="messages",
                message=f"At most {max_slots} slots allowed",
                value=len(messages)
            ))

        for index, text in enumerate(messages, start=1):
            if text is not None and not isinstance(text, str):
                errors.append(ValidationError(
                    field=f"messages[{index}]",
                    message="Must be a string",
                    value=text
                ))

        return errors

    @staticmethod
    def validate_config(config: dict[str, Any]) -> list[ValidationError]:
        """Validate complete configuration."""
        errors = []

        if "interval" in config:
            errors.extend(ConfigValidator.validate_interval_params(config["interval"]))

        if "rotation" in config:
            errors.extend(ConfigValidator.validate_rotation_params(config["rotation"]))

        if "detection" in config:
            errors.extend(ConfigValidator.validate_detection_params(config["detection"]))

        dispatch = config.get("dispatch", {})
        errors.extend(ConfigValidator.validate_dispatch_params(dispatch))

        if "destinations" in config:
            errors.extend(ConfigValidator.validate_destinations(
                config["destinations"], dispatch.get("max_destination_slots", 10)
            ))

        if "messages" in config:
            errors.extend(ConfigValidator.validate_messages(
                config["messages"], dispatch.get("max_message_slots", 10)
            ))

        return errors
