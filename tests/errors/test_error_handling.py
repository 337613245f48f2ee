"""
Error handling tests for the dispatch scheduler.

Covers the error hierarchy and the auto-stop behaviour on configuration
and delivery failures.
"""

import pytest

from autosend_app.errors import (
    ConfigurationError,
    DeliveryError,
    NoDestinationError,
    NoMessageError,
    StateTransitionError,
    SystemFailureError,
)
from autosend_app.presentation.presenter import CountdownPresenter
from autosend_app.scheduling.models import ScheduleState
from autosend_app.scheduling.scheduler import DispatchScheduler


class RecordingPresenter(CountdownPresenter):
    def __init__(self):
        self.errors = []

    def on_error(self, error):
        self.errors.append(error)


class TestErrorClassification:
    """Test error classification system."""

    def test_configuration_error_hierarchy(self):
        """Configuration errors are recoverable and carry the offending field."""
        base_error = ConfigurationError("bad settings")
        assert base_error.recoverable is True
        assert base_error.context == {}
        assert base_error.field is None

        no_destination = NoDestinationError()
        assert isinstance(no_destination, ConfigurationError)
        assert no_destination.field == "destinations"

        no_message = NoMessageError("nothing to say", context={"slots": 10})
        assert isinstance(no_message, ConfigurationError)
        assert no_message.field == "messages"
        assert no_message.context == {"slots": 10}

    def test_system_failure_error_hierarchy(self):
        """System failures are not recoverable."""
        cause = TimeoutError("read timed out")
        delivery_error = DeliveryError("send failed", destination="111", nonce="42", cause=cause)
        assert isinstance(delivery_error, SystemFailureError)
        assert delivery_error.recoverable is False
        assert delivery_error.cause is cause
        assert delivery_error.destination == "111"

        state_error = StateTransitionError(
            "invalid transition", current_state="stopped", attempted_transition="pause"
        )
        assert state_error.recoverable is False
        assert state_error.current_state == "stopped"
        assert state_error.attempted_transition == "pause"


class TestAutoStop:
    """Failures stop the schedule and release every timer."""

    def test_failure_mid_cycle_aborts_remaining_messages(self, make_settings, make_transport, clock, rng):
        """A failed send abandons the rest of the cycle without retrying."""
        transport = make_transport(fail_on=lambda destination, text: text == "b")
        presenter = RecordingPresenter()
        scheduler = DispatchScheduler(
            make_settings(messages=["a", "b", "c"]), transport, clock,
            presenter=presenter, rng=rng,
        )

        scheduler.start()
        assert transport.texts == ["a"]

        clock.advance(0.5)

        assert scheduler.state is ScheduleState.STOPPED
        assert transport.texts == ["a"]
        assert clock.pending() == []
        assert isinstance(scheduler.last_error, DeliveryError)
        assert presenter.errors == [scheduler.last_error]

        clock.advance(60)
        assert transport.texts == ["a"]

    def test_raised_transport_exception_keeps_cause(self, make_settings, make_transport, clock, rng):
        transport = make_transport(raise_on=lambda destination, text: True)
        scheduler = DispatchScheduler(make_settings(), transport, clock, rng=rng)

        with pytest.raises(DeliveryError) as exc_info:
            scheduler.start()

        assert isinstance(exc_info.value.cause, ConnectionError)
        assert exc_info.value.nonce is not None
        assert scheduler.state is ScheduleState.STOPPED
        assert clock.pending() == []

    def test_messages_removed_while_running(self, make_settings, transport, clock, rng):
        """Settings emptied after start surface NoMessageError on the next cycle."""
        settings = make_settings(destinations=["111"])
        scheduler = DispatchScheduler(settings, transport, clock, rng=rng)
        scheduler.start()

        settings.set_messages([])
        clock.advance(1)

        assert scheduler.state is ScheduleState.STOPPED
        assert isinstance(scheduler.last_error, NoMessageError)
        assert clock.pending() == []

    def test_destinations_disabled_while_running(self, make_settings, transport, clock, rng):
        settings = make_settings(destinations=["111"])
        scheduler = DispatchScheduler(settings, transport, clock, rng=rng)
        scheduler.start()

        settings.set_destination_enabled(1, False)
        clock.advance(1)

        assert scheduler.state is ScheduleState.STOPPED
        assert isinstance(scheduler.last_error, NoDestinationError)
        assert clock.pending() == []

    def test_start_without_destinations(self, make_settings, transport, clock):
        scheduler = DispatchScheduler(make_settings(destinations=[]), transport, clock)

        with pytest.raises(NoDestinationError):
            scheduler.start()

        assert scheduler.state is ScheduleState.STOPPED
        assert transport.sent == []
        assert clock.pending() == []

    def test_start_without_messages(self, make_settings, transport, clock):
        scheduler = DispatchScheduler(make_settings(messages=["", "  "]), transport, clock)

        with pytest.raises(ConfigurationError):
            scheduler.start()

        assert scheduler.state is ScheduleState.STOPPED
        assert clock.pending() == []
