"""Tests for detection-driven alerts and their two-stage dismissal."""

import pytest

from autosend_app.alerts.coordinator import AlertCoordinator
from autosend_app.alerts.models import DismissOutcome
from autosend_app.alerts.notifier import LoggingAlertNotifier
from autosend_app.config.defaults import DEFAULT_CATCHLIST_PHRASE
from autosend_app.detection.models import ExtraField, ObservedEvent, StructuredExtra
from autosend_app.scheduling.models import PauseReason, ScheduleState
from autosend_app.scheduling.scheduler import DispatchScheduler

CURRENT = "111111111111111111"
OTHER = "222222222222222222"


@pytest.fixture
def scheduler(make_settings, transport, clock, rng):
    return DispatchScheduler(make_settings(interval=(10, 10)), transport, clock, rng=rng)


@pytest.fixture
def notifier():
    return LoggingAlertNotifier()


@pytest.fixture
def coordinator(scheduler, notifier):
    return AlertCoordinator(scheduler, notifier=notifier)


@pytest.fixture
def challenge(sample_verification_content):
    return ObservedEvent(destination=CURRENT, content=sample_verification_content)


class TestDetection:
    """on_observed_event()."""

    def test_verification_pauses_and_raises_alert(self, scheduler, coordinator, notifier, challenge):
        scheduler.start()
        record = coordinator.on_observed_event(challenge)

        assert record is not None
        assert record.reason is PauseReason.ALERT_VERIFICATION
        assert record.detected_id == "123456789012345678"
        assert record.destination == CURRENT
        assert record.paused_schedule is True
        assert scheduler.pause_reason is PauseReason.ALERT_VERIFICATION
        assert notifier.signalling is True

    def test_catchlist_notice_uses_distinct_reason(self, scheduler, coordinator):
        scheduler.start()
        event = ObservedEvent(
            destination=CURRENT,
            extras=(StructuredExtra(fields=(ExtraField("Result", DEFAULT_CATCHLIST_PHRASE),)),),
        )
        record = coordinator.on_observed_event(event)

        assert record.reason is PauseReason.ALERT_CATCHLIST
        assert record.headline != "VERIFICATION DETECTED"
        assert scheduler.status_snapshot().label == "paused(alert_catchlist)"

    def test_other_destination_is_ignored(self, scheduler, coordinator, sample_verification_content):
        scheduler.start()
        event = ObservedEvent(destination=OTHER, content=sample_verification_content)

        assert coordinator.on_observed_event(event) is None
        assert scheduler.state is ScheduleState.RUNNING

    def test_ignored_while_stopped(self, scheduler, coordinator, challenge):
        assert coordinator.on_observed_event(challenge) is None
        assert coordinator.active_alert is None

    def test_ignored_when_detection_disabled(self, scheduler, coordinator, challenge):
        scheduler.settings.set_detection_enabled(False)
        scheduler.start()

        assert coordinator.on_observed_event(challenge) is None
        assert scheduler.state is ScheduleState.RUNNING

    def test_monitoring_continues_while_manually_paused(self, scheduler, coordinator, challenge):
        scheduler.start()
        scheduler.manual_pause()

        record = coordinator.on_observed_event(challenge)
        assert record is not None
        assert record.paused_schedule is False
        assert scheduler.pause_reason is PauseReason.MANUAL

    def test_one_alert_at_a_time(self, scheduler, coordinator, notifier, challenge):
        scheduler.start()
        first = coordinator.on_observed_event(challenge)
        second = coordinator.on_observed_event(
            ObservedEvent(destination=CURRENT, content=DEFAULT_CATCHLIST_PHRASE)
        )

        assert second is None
        assert coordinator.active_alert is first
        assert notifier.raised_count == 1

    def test_non_matching_event(self, scheduler, coordinator):
        scheduler.start()
        assert coordinator.on_observed_event(ObservedEvent(destination=CURRENT, content="hi")) is None


class TestTwoStageDismissal:
    """dismiss_alert() / dismiss()."""

    def test_first_call_silences_second_resumes(self, scheduler, coordinator, notifier, challenge, clock):
        scheduler.start()
        coordinator.on_observed_event(challenge)

        assert coordinator.dismiss_alert() is DismissOutcome.SILENCED
        assert coordinator.active_alert.acknowledged_silence is True
        assert notifier.signalling is False
        assert scheduler.state is ScheduleState.PAUSED

        assert coordinator.dismiss_alert() is DismissOutcome.DISMISSED
        assert coordinator.active_alert is None
        assert scheduler.state is ScheduleState.RUNNING
        assert scheduler.remaining_send_seconds() == 10

    def test_silence_is_idempotent(self, scheduler, coordinator, challenge):
        scheduler.start()
        coordinator.on_observed_event(challenge)

        assert coordinator.silence() is True
        assert coordinator.silence() is False
        assert coordinator.active_alert is not None
        assert scheduler.state is ScheduleState.PAUSED

    def test_dismiss_without_alert(self, coordinator):
        assert coordinator.dismiss_alert() is DismissOutcome.NO_ALERT
        assert coordinator.dismiss() is DismissOutcome.NO_ALERT

    def test_new_alert_allowed_after_dismissal(self, scheduler, coordinator, challenge):
        scheduler.start()
        coordinator.on_observed_event(challenge)
        coordinator.dismiss()

        assert coordinator.on_observed_event(challenge) is not None

    def test_dismiss_keeps_manual_pause(self, scheduler, coordinator, challenge):
        scheduler.start()
        scheduler.manual_pause()
        coordinator.on_observed_event(challenge)
        coordinator.dismiss()

        assert scheduler.pause_reason is PauseReason.MANUAL


class TestTestAlert:
    """test_alert()."""

    def test_test_alert_then_direct_dismiss_returns_to_running(self, scheduler, coordinator, notifier):
        scheduler.start()
        record = coordinator.test_alert()

        assert record.source == "test"
        assert record.destination == CURRENT
        assert scheduler.pause_reason is PauseReason.ALERT_VERIFICATION

        assert coordinator.dismiss() is DismissOutcome.DISMISSED
        assert coordinator.active_alert is None
        assert notifier.signalling is False
        assert scheduler.state is ScheduleState.RUNNING

    def test_test_alert_while_stopped_only_signals(self, scheduler, coordinator):
        record = coordinator.test_alert("42")

        assert record.detected_id == "42"
        assert record.paused_schedule is False
        assert scheduler.state is ScheduleState.STOPPED

        coordinator.dismiss()
        assert scheduler.state is ScheduleState.STOPPED

    def test_test_alert_respects_one_alert_rule(self, scheduler, coordinator):
        scheduler.start()
        coordinator.test_alert()
        assert coordinator.test_alert() is None


class TestStopDismissal:
    """Stopping the scheduler clears the alert without resuming."""

    def test_stop_dismisses_active_alert(self, scheduler, coordinator, notifier, challenge, clock):
        scheduler.start()
        coordinator.on_observed_event(challenge)
        scheduler.stop()

        assert coordinator.active_alert is None
        assert notifier.signalling is False
        assert scheduler.state is ScheduleState.STOPPED
        assert clock.pending() == []
