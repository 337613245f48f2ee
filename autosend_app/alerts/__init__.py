"""
Alerts module.

Detection-triggered pauses and their two-stage acknowledgment.
"""

from .coordinator import AlertCoordinator
from .models import AlertRecord, DismissOutcome
from .notifier import AlertNotifier, LoggingAlertNotifier

__all__ = [
    "AlertCoordinator",
    "AlertRecord",
    "DismissOutcome",
    "AlertNotifier",
    "LoggingAlertNotifier",
]
