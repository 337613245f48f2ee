"""
Error classification for the dispatch scheduler.

Configuration problems are recoverable by fixing settings and starting
again; system failures stop the schedule and need intervention.
"""

from .configuration import (
    ConfigurationError,
    NoDestinationError,
    NoMessageError,
)
from .system_failures import (
    SystemFailureError,
    DeliveryError,
    StateTransitionError,
)

__all__ = [
    # Configuration Errors
    "ConfigurationError",
    "NoDestinationError",
    "NoMessageError",
    # System Failures
    "SystemFailureError",
    "DeliveryError",
    "StateTransitionError",
]
