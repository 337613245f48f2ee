"""
Destination rotation.

Keeps a cursor into the currently enabled destinations and advances it on
its own randomized timer, independent of the message-send timer.
"""

import random
from typing import Callable, Optional

from ..config.settings import SchedulerSettings
from ..logging.config import get_scheduler_logger
from ..utils.time import jittered_delay, minutes_to_seconds
from .timers import Clock, TimerSlot

logger = get_scheduler_logger(__name__)


class DestinationRotator:
    """Cursor over enabled destinations plus the rotation timers."""

    def __init__(
        self,
        settings: SchedulerSettings,
        clock: Clock,
        rng: Optional[random.Random] = None,
        on_rotated: Optional[Callable[[str], None]] = None,
    ):
        self.settings = settings
        self.clock = clock
        self.rng = rng or random.Random()
        self.on_rotated = on_rotated

        self._cursor = 0
        self._rotation_timer = TimerSlot(clock, "rotation")
        self._rotation_countdown = TimerSlot(clock, "rotation_countdown")
        self.countdown_seconds = 0

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def is_scheduled(self) -> bool:
        return self._rotation_timer.active

    def enabled_list(self) -> list[str]:
        """Enabled, non-empty destinations, rebuilt from settings on each call."""
        return self.settings.enabled_destinations()

    def current(self) -> str:
        """Destination under the cursor, empty when nothing is enabled."""
        destinations = self.enabled_list()
        if not destinations:
            return ""
        return destinations[self._cursor % len(destinations)]

    def position(self) -> int:
        """1-based position of the current destination, 0 when none enabled."""
        destinations = self.enabled_list()
        if not destinations:
            return 0
        return self._cursor % len(destinations) + 1

    def advance(self) -> str:
        """Move the cursor to the next enabled destination and return it."""
        destinations = self.enabled_list()
        if not destinations:
            return ""
        self._cursor = (self._cursor + 1) % len(destinations)
        return destinations[self._cursor]

    def reset_cursor(self) -> None:
        self._cursor = 0

    def remaining_seconds(self) -> Optional[float]:
        return self._rotation_timer.remaining()

    def schedule_rotation(self) -> Optional[float]:
        """
        (Re)arm the rotation timer with a fresh random delay.

        Returns:
            The drawn delay in seconds, or None when fewer than two
            destinations are enabled and no rotation runs
        """
        self.cancel_rotation()

        if len(self.enabled_list()) < 2:
            return None

        delay = jittered_delay(
            minutes_to_seconds(self.settings.rotation.min_minutes),
            minutes_to_seconds(self.settings.rotation.max_minutes),
            self.rng,
        )
        self.countdown_seconds = int(delay)
        self._rotation_timer.arm(delay, self._on_rotation_due)
        self._rotation_countdown.arm_repeating(1.0, self._on_countdown_tick)

        logger.info(
            "Next destination rotation scheduled",
            delay_seconds=delay,
            enabled_count=len(self.enabled_list())
        )
        return delay

    def cancel_rotation(self) -> None:
        self._rotation_timer.cancel()
        self._rotation_countdown.cancel()
        self.countdown_seconds = 0

    def rotate(self, reschedule: bool = True) -> str:
        """
        Advance to the next destination.

        No-op with fewer than two enabled destinations. When reschedule is
        set, the rotation timer is re-armed with a new random delay.
        """
        destinations = self.enabled_list()
        if len(destinations) <= 1:
            return self.current()

        new_destination = self.advance()
        logger.info(
            "Rotated destination",
            destination=new_destination,
            position=self.position(),
            enabled_count=len(destinations)
        )

        if reschedule:
            self.schedule_rotation()

        if self.on_rotated is not None:
            self.on_rotated(new_destination)

        return new_destination

    def _on_rotation_due(self) -> None:
        self._rotation_countdown.cancel()
        self.rotate(reschedule=True)

    def _on_countdown_tick(self) -> None:
        if self.countdown_seconds > 0:
            self.countdown_seconds -= 1
