"""
Alert signalling.

A raised alert keeps signalling (a looping sound, a flashing banner) until
the first acknowledgment silences it. Clearing removes the alert entirely.
"""

import structlog

from .models import AlertRecord


class AlertNotifier:
    """Receives alert lifecycle events. The base class ignores them."""

    def raise_alert(self, record: AlertRecord) -> None:
        pass

    def silence(self, record: AlertRecord) -> None:
        pass

    def clear(self, record: AlertRecord) -> None:
        pass


class LoggingAlertNotifier(AlertNotifier):
    """Signals alerts through structured log records."""

    def __init__(self, name: str = "alerts"):
        self.logger = structlog.get_logger(name)
        self.signalling = False
        self.raised_count = 0

    def raise_alert(self, record: AlertRecord) -> None:
        self.signalling = True
        self.raised_count += 1
        self.logger.warning(
            record.headline,
            reason=record.reason.value,
            destination=record.destination,
            detected_id=record.detected_id,
            source=record.source,
            hint="Acknowledge once to silence, again to dismiss"
        )

    def silence(self, record: AlertRecord) -> None:
        if not self.signalling:
            return
        self.signalling = False
        self.logger.info("Alert silenced", reason=record.reason.value)

    def clear(self, record: AlertRecord) -> None:
        self.signalling = False
        self.logger.info(
            "Alert dismissed",
            reason=record.reason.value,
            destination=record.destination
        )
