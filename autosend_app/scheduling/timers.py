"""
Clock and timer abstractions for the single-threaded scheduler.

All scheduler callbacks run on one logical loop. ``AsyncioClock`` schedules
them on an asyncio event loop; ``ManualClock`` fires them deterministically
when advanced, which is how tests and simulations drive the scheduler.

Each class of timer lives in its own ``TimerSlot``. Arming a slot cancels
whatever it held before, and a generation counter makes any callback that
was scheduled before a cancellation no-op itself.
"""

import asyncio
import heapq
import itertools
from abc import ABC, abstractmethod
from typing import Callable, Optional

import structlog

logger = structlog.get_logger(__name__)

# Float deadlines built from repeated additions can land a hair past target.
_DEADLINE_TOLERANCE = 1e-9


class TimerHandle:
    """Handle to one scheduled callback."""

    def __init__(self, deadline: float, on_cancel: Optional[Callable[[], None]] = None):
        self.deadline = deadline
        self._on_cancel = on_cancel
        self._cancelled = False
        self._fired = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def fired(self) -> bool:
        return self._fired

    @property
    def pending(self) -> bool:
        return not (self._cancelled or self._fired)

    def cancel(self) -> None:
        if self._cancelled or self._fired:
            return
        self._cancelled = True
        if self._on_cancel is not None:
            self._on_cancel()

    def mark_fired(self) -> None:
        self._fired = True


class Clock(ABC):
    """Time source and callback scheduler."""

    @abstractmethod
    def now(self) -> float:
        """Current time in seconds on this clock."""
        pass

    @abstractmethod
    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        """Schedule callback to run after delay seconds."""
        pass


class AsyncioClock(Clock):
    """Clock backed by an asyncio event loop."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def now(self) -> float:
        return self.loop.time()

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        handle: Optional[TimerHandle] = None

        def run() -> None:
            handle.mark_fired()
            callback()

        loop_handle = self.loop.call_later(max(0.0, delay), run)
        handle = TimerHandle(deadline=loop_handle.when(), on_cancel=loop_handle.cancel)
        return handle


class ManualClock(Clock):
    """
    Deterministic clock advanced explicitly by the caller.

    Callbacks fire in deadline order; callbacks sharing a deadline fire in
    the order they were scheduled. A callback scheduled while advancing
    fires within the same advance if its deadline falls inside the window.
    """

    def __init__(self, start: float = 0.0):
        self._now = start
        self._queue: list[tuple[float, int, TimerHandle, Callable[[], None]]] = []
        self._sequence = itertools.count()

    def now(self) -> float:
        return self._now

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        handle = TimerHandle(deadline=self._now + max(0.0, delay))
        heapq.heappush(self._queue, (handle.deadline, next(self._sequence), handle, callback))
        return handle

    def advance(self, seconds: float) -> int:
        """
        Move time forward, firing every callback that falls due.

        Returns:
            Number of callbacks fired
        """
        if seconds < 0:
            raise ValueError("Cannot advance a clock backwards")

        target = self._now + seconds
        fired = 0

        while self._queue and self._queue[0][0] <= target + _DEADLINE_TOLERANCE:
            deadline, _, handle, callback = heapq.heappop(self._queue)
            if not handle.pending:
                continue
            self._now = max(self._now, deadline)
            handle.mark_fired()
            callback()
            fired += 1

        self._now = target
        return fired

    def pending(self) -> list[TimerHandle]:
        """Handles that are neither cancelled nor fired."""
        return [entry[2] for entry in self._queue if entry[2].pending]


class TimerSlot:
    """
    Holds at most one live timer for a single timer class.

    Every arm or cancel bumps the generation; a callback only runs if the
    generation it was armed with is still current.
    """

    def __init__(self, clock: Clock, name: str):
        self.clock = clock
        self.name = name
        self.generation = 0
        self._handle: Optional[TimerHandle] = None

    @property
    def active(self) -> bool:
        return self._handle is not None and self._handle.pending

    @property
    def handle(self) -> Optional[TimerHandle]:
        return self._handle

    def remaining(self) -> Optional[float]:
        """Seconds until the armed timer fires, None when idle."""
        if not self.active:
            return None
        return max(0.0, self._handle.deadline - self.clock.now())

    def arm(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        """Cancel any armed timer and schedule callback after delay."""
        self.cancel()
        generation = self.generation

        def fire() -> None:
            if generation != self.generation:
                logger.debug("Dropping stale timer callback", timer=self.name)
                return
            self._handle = None
            callback()

        self._handle = self.clock.call_later(delay, fire)
        return self._handle

    def arm_repeating(self, interval: float, callback: Callable[[], None]) -> TimerHandle:
        """Arm a timer that re-arms itself every interval until cancelled."""

        def tick() -> None:
            self.arm(interval, tick)
            callback()

        return self.arm(interval, tick)

    def cancel(self) -> None:
        self.generation += 1
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
