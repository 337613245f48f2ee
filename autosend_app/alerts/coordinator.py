"""
Alert coordination.

Connects detections on the inbound stream to the dispatch scheduler:
a verification challenge or catchlist notice in the current destination
pauses dispatch and raises an alert, and dismissing the alert resumes it.

Acknowledgment is two-stage. The first interaction silences the alert
signal without resuming; the second clears the alert and resumes. A direct
dismiss does both at once.
"""

from typing import Optional

from ..detection.matcher import PatternMatcher
from ..detection.models import DetectionKind, ObservedEvent
from ..logging.config import get_detection_logger, log_detection
from ..scheduling.models import PauseReason, ScheduleState
from ..scheduling.scheduler import DispatchScheduler
from .models import AlertRecord, DismissOutcome
from .notifier import AlertNotifier, LoggingAlertNotifier

logger = get_detection_logger(__name__)

_PAUSE_REASONS = {
    DetectionKind.VERIFICATION_CHALLENGE: PauseReason.ALERT_VERIFICATION,
    DetectionKind.CATCHLIST_NOTICE: PauseReason.ALERT_CATCHLIST,
}


class AlertCoordinator:
    """Owns the active AlertRecord and drives alert pauses."""

    def __init__(
        self,
        scheduler: DispatchScheduler,
        matcher: Optional[PatternMatcher] = None,
        notifier: Optional[AlertNotifier] = None,
    ):
        self.scheduler = scheduler
        self.settings = scheduler.settings
        self.matcher = matcher or PatternMatcher(self.settings.detection.catchlist_phrase)
        self.notifier = notifier or LoggingAlertNotifier()
        self._record: Optional[AlertRecord] = None

        scheduler.add_stop_listener(self._on_scheduler_stopped)

    @property
    def active_alert(self) -> Optional[AlertRecord]:
        return self._record

    @property
    def has_active_alert(self) -> bool:
        return self._record is not None and self._record.active

    def on_observed_event(self, event: ObservedEvent) -> Optional[AlertRecord]:
        """
        Inspect one inbound event.

        Returns:
            The newly raised alert, or None when the event was ignored or
            did not match
        """
        if not self.settings.detection_enabled:
            return None

        if self.scheduler.state is ScheduleState.STOPPED and not self.has_active_alert:
            return None

        current = self.scheduler.rotator.current()
        if event.destination != current:
            return None

        result = self.matcher.classify(event.content, event.extras)
        if not result.matched:
            return None

        if self.has_active_alert:
            logger.info(
                "Detection ignored while an alert is active",
                detection_kind=result.kind.value,
                destination=event.destination
            )
            return None

        log_detection(
            logger,
            kind=result.kind.value,
            destination=event.destination,
            identifier=result.identifier,
            context={"sender_id": event.sender_id}
        )
        return self._raise(
            _PAUSE_REASONS[result.kind],
            identifier=result.identifier,
            destination=event.destination,
            source="detection",
        )

    def test_alert(self, identifier: Optional[str] = None) -> Optional[AlertRecord]:
        """
        Synthesize a verification detection in the current destination.

        Skips the matcher and the source filter but not the one-alert rule.
        """
        if self.has_active_alert:
            logger.info("Test alert ignored while an alert is active")
            return None

        return self._raise(
            PauseReason.ALERT_VERIFICATION,
            identifier=identifier,
            destination=self.scheduler.rotator.current(),
            source="test",
        )

    def silence(self) -> bool:
        """
        First acknowledgment stage. Idempotent.

        Returns:
            True if this call silenced the alert
        """
        record = self._record
        if record is None or record.acknowledged_silence:
            return False

        record.acknowledged_silence = True
        self.notifier.silence(record)
        return True

    def dismiss_alert(self) -> DismissOutcome:
        """Advance the two-stage acknowledgment by one step."""
        if self._record is None:
            return DismissOutcome.NO_ALERT

        if not self._record.acknowledged_silence:
            self.silence()
            return DismissOutcome.SILENCED

        return self.dismiss()

    def dismiss(self, resume: bool = True) -> DismissOutcome:
        """
        Clear the active alert in one step, silencing it if needed.

        Args:
            resume: Resume an alert-paused schedule after clearing
        """
        record = self._record
        if record is None:
            return DismissOutcome.NO_ALERT

        self.silence()
        record.active = False
        self._record = None
        self.notifier.clear(record)

        if resume:
            self.scheduler.alert_resume()

        return DismissOutcome.DISMISSED

    def _raise(self, reason: PauseReason, identifier: Optional[str],
               destination: str, source: str) -> AlertRecord:
        paused = self.scheduler.alert_pause(reason)
        record = AlertRecord(
            reason=reason,
            detected_id=identifier,
            destination=destination,
            detected_at=self.scheduler.clock.now(),
            source=source,
            paused_schedule=paused,
        )
        self._record = record
        self.notifier.raise_alert(record)
        return record

    def _on_scheduler_stopped(self) -> None:
        if self._record is not None:
            self.dismiss(resume=False)
