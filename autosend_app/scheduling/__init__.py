"""
Scheduling module.

Timer abstractions, destination rotation and schedule state models. The
dispatch state machine itself lives in ``autosend_app.scheduling.scheduler``
because it depends on the presentation hooks, which in turn depend on the
models exported here.
"""

from .models import PauseReason, ScheduleState, SchedulerStatus
from .rotator import DestinationRotator
from .timers import AsyncioClock, Clock, ManualClock, TimerHandle, TimerSlot

__all__ = [
    "PauseReason",
    "ScheduleState",
    "SchedulerStatus",
    "DestinationRotator",
    "AsyncioClock",
    "Clock",
    "ManualClock",
    "TimerHandle",
    "TimerSlot",
]
