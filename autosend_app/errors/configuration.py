"""
Configuration error classifications.

Raised when the schedule cannot run with the current settings, either
when starting or when settings change underneath a running schedule.
"""

from typing import Optional, Dict, Any


class ConfigurationError(Exception):
    """Settings do not allow the schedule to run."""

    def __init__(self, message: str, field: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.field = field
        self.context = context or {}
        self.recoverable = True


class NoDestinationError(ConfigurationError):
    """No enabled destination is configured."""

    def __init__(self, message: str = "No enabled destinations configured", **kwargs):
        kwargs.setdefault("field", "destinations")
        super().__init__(message, **kwargs)


class NoMessageError(ConfigurationError):
    """Every message slot is blank."""

    def __init__(self, message: str = "No messages configured", **kwargs):
        kwargs.setdefault("field", "messages")
        super().__init__(message, **kwargs)
