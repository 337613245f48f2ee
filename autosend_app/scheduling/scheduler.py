"""
Dispatch scheduler: the run/pause/stop state machine.

Drives message-send cycles on a jittered timer, owns every send-side timer
and exposes pause/resume/stop to manual control and to the alert
coordinator.

State transitions:
    STOPPED --start--> RUNNING
    RUNNING --manual_pause / alert_pause--> PAUSED(reason)
    PAUSED(MANUAL) --manual_resume--> RUNNING
    PAUSED(ALERT_*) --alert_resume--> RUNNING
    any --stop--> STOPPED

A send cycle sends every non-blank message, in slot order, to the current
destination with a fixed spacing between messages. Any failure stops the
schedule; there are no retries.
"""

import random
from typing import Callable, Optional

from ..config.settings import SchedulerSettings
from ..errors import (
    DeliveryError,
    NoDestinationError,
    NoMessageError,
    StateTransitionError,
)
from ..logging.config import get_scheduler_logger, log_state_transition
from ..presentation.presenter import CountdownPresenter
from ..transport.base import BaseTransport
from ..transport.directory import Directory, resolve_display_name
from ..utils.time import NonceGenerator, jittered_delay
from .models import PauseReason, ScheduleState, SchedulerStatus
from .rotator import DestinationRotator
from .timers import Clock, TimerSlot

logger = get_scheduler_logger(__name__)


class DispatchScheduler:
    """Single-owner scheduler instance; all state lives on the instance."""

    def __init__(
        self,
        settings: SchedulerSettings,
        transport: BaseTransport,
        clock: Clock,
        rotator: Optional[DestinationRotator] = None,
        presenter: Optional[CountdownPresenter] = None,
        directory: Optional[Directory] = None,
        rng: Optional[random.Random] = None,
        nonce_generator: Optional[NonceGenerator] = None,
    ):
        self.settings = settings
        self.transport = transport
        self.clock = clock
        self.rng = rng or random.Random()
        self.rotator = rotator or DestinationRotator(settings, clock, rng=self.rng)
        self.rotator.on_rotated = self._on_rotated
        self.presenter = presenter or CountdownPresenter()
        self.directory = directory
        self.nonces = nonce_generator or NonceGenerator(settings.dispatch.nonce_multiplier)

        self._state = ScheduleState.STOPPED
        self._pause_reason: Optional[PauseReason] = None

        self._send_timer = TimerSlot(clock, "send")
        self._countdown_timer = TimerSlot(clock, "send_countdown")
        self._spacing_timer = TimerSlot(clock, "message_spacing")
        self._cycle_generation = 0

        self._stop_listeners: list[Callable[[], None]] = []

        self.cycles_started = 0
        self.cycles_completed = 0
        self.messages_sent = 0
        self.last_error: Optional[Exception] = None

    # State

    @property
    def state(self) -> ScheduleState:
        return self._state

    @property
    def pause_reason(self) -> Optional[PauseReason]:
        return self._pause_reason

    @property
    def is_running(self) -> bool:
        return self._state is ScheduleState.RUNNING

    @property
    def is_paused(self) -> bool:
        return self._state is ScheduleState.PAUSED

    def add_stop_listener(self, listener: Callable[[], None]) -> None:
        """Register a callback invoked after every transition into STOPPED."""
        self._stop_listeners.append(listener)

    def _label(self) -> str:
        if self._state is ScheduleState.PAUSED and self._pause_reason is not None:
            return f"{self._state.value}({self._pause_reason.value})"
        return self._state.value

    def _transition(self, new_state: ScheduleState, reason: Optional[PauseReason],
                    trigger: str) -> None:
        from_label = self._label()
        self._state = new_state
        self._pause_reason = reason
        log_state_transition(
            logger,
            from_state=from_label,
            to_state=self._label(),
            trigger=trigger,
            context={"destination": self.rotator.current()}
        )
        self.presenter.on_state_changed(self.status_snapshot())

    def _reject(self, operation: str) -> None:
        raise StateTransitionError(
            f"Cannot {operation} while {self._label()}",
            current_state=self._label(),
            attempted_transition=operation,
        )

    # Operations

    def start(self) -> SchedulerStatus:
        """
        Start dispatching: one cycle now, then jittered cycles.

        Raises:
            StateTransitionError: If the scheduler is not stopped
            NoDestinationError: If no destination is enabled
            NoMessageError: If every message slot is blank
            DeliveryError: If the first message of the immediate cycle fails
        """
        if self._state is not ScheduleState.STOPPED:
            self._reject("start")

        enabled = self.rotator.enabled_list()
        if not enabled:
            raise NoDestinationError("Enable at least one destination before starting")
        if not self.settings.active_messages():
            raise NoMessageError("Configure at least one message before starting")

        self.rotator.reset_cursor()
        self.last_error = None
        self._transition(ScheduleState.RUNNING, None, "start")

        logger.info(
            "Dispatch started",
            enabled_count=len(enabled),
            destinations=[self.display_name(d) for d in enabled]
        )

        self._run_cycle()

        if self._state is not ScheduleState.RUNNING:
            # The immediate cycle failed and already auto-stopped.
            if self.last_error is not None:
                raise self.last_error
            return self.status_snapshot()

        self._schedule_next_cycle()
        self.rotator.schedule_rotation()
        return self.status_snapshot()

    def manual_pause(self) -> None:
        """Pause a running schedule on user request."""
        if self._state is not ScheduleState.RUNNING:
            self._reject("pause")
        self._suspend(PauseReason.MANUAL, "manual_pause")

    def manual_resume(self) -> None:
        """Resume a schedule paused by the user."""
        if self._state is not ScheduleState.PAUSED or self._pause_reason is not PauseReason.MANUAL:
            self._reject("resume")
        self._resume("manual_resume")

    def alert_pause(self, reason: PauseReason) -> bool:
        """
        Pause for an alert. No-op unless running.

        Returns:
            True if the schedule was paused by this call
        """
        if not reason.is_alert:
            raise ValueError(f"{reason.value} is not an alert pause reason")

        if self._state is not ScheduleState.RUNNING:
            logger.debug("Ignoring alert pause", state=self._label(), reason=reason.value)
            return False

        self._suspend(reason, "alert_pause")
        return True

    def alert_resume(self) -> bool:
        """
        Resume after an alert is dismissed. No-op unless alert-paused.

        Returns:
            True if the schedule resumed
        """
        if (self._state is not ScheduleState.PAUSED
                or self._pause_reason is None or not self._pause_reason.is_alert):
            logger.debug("Ignoring alert resume", state=self._label())
            return False

        self._resume("alert_resume")
        return True

    def stop(self) -> None:
        """Cancel every timer and stop. Valid from any state."""
        self._release_timers()
        self._cycle_generation += 1

        if self._state is ScheduleState.STOPPED:
            return

        self._transition(ScheduleState.STOPPED, None, "stop")
        for listener in list(self._stop_listeners):
            listener()

    def rotate_now(self) -> str:
        """
        Force an immediate rotation.

        No-op with fewer than two enabled destinations. The rotation timer
        is re-armed only while running.
        """
        if len(self.rotator.enabled_list()) < 2:
            logger.info("Rotation skipped, fewer than two enabled destinations")
            return self.rotator.current()

        return self.rotator.rotate(reschedule=self._state is ScheduleState.RUNNING)

    # Snapshot

    def display_name(self, destination: str) -> str:
        return resolve_display_name(self.directory, destination)

    def remaining_send_seconds(self) -> Optional[float]:
        return self._send_timer.remaining()

    def status_snapshot(self) -> SchedulerStatus:
        current = self.rotator.current()
        return SchedulerStatus(
            state=self._state,
            pause_reason=self._pause_reason,
            current_destination=current,
            current_display_name=self.display_name(current),
            enabled_destinations=tuple(self.rotator.enabled_list()),
            cursor_position=self.rotator.position(),
            remaining_send_seconds=self._send_timer.remaining(),
            remaining_rotation_seconds=self.rotator.remaining_seconds(),
            cycles_completed=self.cycles_completed,
            messages_sent=self.messages_sent,
            last_error=str(self.last_error) if self.last_error is not None else None,
        )

    def has_pending_timers(self) -> bool:
        return any(slot.active for slot in (
            self._send_timer, self._countdown_timer, self._spacing_timer
        )) or self.rotator.is_scheduled

    # Internals

    def _suspend(self, reason: PauseReason, trigger: str) -> None:
        # The spacing timer stays armed so an in-flight cycle can finish.
        self._send_timer.cancel()
        self._countdown_timer.cancel()
        self.rotator.cancel_rotation()
        self._transition(ScheduleState.PAUSED, reason, trigger)

    def _resume(self, trigger: str) -> None:
        self._transition(ScheduleState.RUNNING, None, trigger)
        self.rotator.schedule_rotation()
        self._schedule_next_cycle()

    def _release_timers(self) -> None:
        self._send_timer.cancel()
        self._countdown_timer.cancel()
        self._spacing_timer.cancel()
        self.rotator.cancel_rotation()

    def _schedule_next_cycle(self) -> float:
        delay = jittered_delay(
            self.settings.interval.min_seconds,
            self.settings.interval.max_seconds,
            self.rng,
        )
        self._send_timer.arm(delay, self._on_send_due)
        self._countdown_timer.arm_repeating(1.0, self._on_countdown_tick)
        logger.info("Next send cycle scheduled", delay_seconds=delay)
        return delay

    def _on_send_due(self) -> None:
        if self._state is not ScheduleState.RUNNING:
            return
        self._run_cycle()
        if self._state is ScheduleState.RUNNING:
            self._schedule_next_cycle()

    def _on_countdown_tick(self) -> None:
        self.presenter.on_tick(self.status_snapshot())

    def _on_rotated(self, destination: str) -> None:
        self.presenter.on_rotated(self.status_snapshot())

    def _run_cycle(self) -> None:
        destination = self.rotator.current()
        if not destination:
            self._fail(NoDestinationError("No enabled destination for send cycle"))
            return

        messages = self.settings.active_messages()
        if not messages:
            self._fail(NoMessageError("No messages configured for send cycle"))
            return

        self._cycle_generation += 1
        self.cycles_started += 1
        logger.info(
            "Sending message sequence",
            destination=destination,
            display_name=self.display_name(destination),
            message_count=len(messages)
        )
        self._send_message(self._cycle_generation, destination, messages, 0)

    def _send_message(self, generation: int, destination: str,
                      messages: list[str], index: int) -> None:
        if generation != self._cycle_generation or self._state is ScheduleState.STOPPED:
            logger.debug("Dropping superseded cycle continuation", destination=destination)
            return

        text = messages[index]
        nonce = self.nonces.next()

        try:
            result = self.transport.send(destination, text, nonce)
        except Exception as e:
            self._fail(DeliveryError(
                f"Failed to send message to {destination}: {e}",
                destination=destination,
                nonce=nonce,
                cause=e,
            ))
            return

        if not result.ok:
            self._fail(DeliveryError(
                f"Failed to send message to {destination}: {result.message}",
                destination=destination,
                nonce=nonce,
                cause=result.error,
            ))
            return

        self.messages_sent += 1
        logger.debug("Message sent", destination=destination, index=index, nonce=nonce)

        if index + 1 < len(messages):
            spacing = self.settings.dispatch.message_spacing_ms / 1000.0
            self._spacing_timer.arm(
                spacing,
                lambda: self._send_message(generation, destination, messages, index + 1),
            )
            return

        self.cycles_completed += 1
        logger.info(
            "Sequence complete",
            destination=destination,
            next_min_seconds=self.settings.interval.min_seconds,
            next_max_seconds=self.settings.interval.max_seconds
        )

    def _fail(self, error: Exception) -> None:
        """Auto-stop: release every timer, then surface the error."""
        self.last_error = error
        self.stop()
        logger.error(
            "Dispatch stopped after failure",
            error=str(error),
            error_type=type(error).__name__
        )
        self.presenter.on_error(error)
