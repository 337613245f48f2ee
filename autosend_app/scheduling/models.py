"""
Scheduler state models.

Defines the schedule lifecycle states, pause reasons and the immutable
status snapshot handed to presentation and control layers.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class ScheduleState(str, Enum):
    """Schedule lifecycle states."""
    STOPPED = "stopped"
    RUNNING = "running"
    PAUSED = "paused"


class PauseReason(str, Enum):
    """Why a paused schedule is paused."""
    MANUAL = "manual"
    ALERT_VERIFICATION = "alert_verification"
    ALERT_CATCHLIST = "alert_catchlist"

    @property
    def is_alert(self) -> bool:
        return self is not PauseReason.MANUAL


@dataclass(frozen=True)
class SchedulerStatus:
    """Point-in-time view of the scheduler."""

    state: ScheduleState
    pause_reason: Optional[PauseReason] = None
    current_destination: str = ""
    current_display_name: str = ""
    enabled_destinations: tuple[str, ...] = field(default_factory=tuple)
    cursor_position: int = 0                         # 1-based, 0 when nothing enabled
    remaining_send_seconds: Optional[float] = None
    remaining_rotation_seconds: Optional[float] = None
    cycles_completed: int = 0
    messages_sent: int = 0
    last_error: Optional[str] = None

    @property
    def label(self) -> str:
        """State with the pause reason, e.g. ``paused(manual)``."""
        if self.state is ScheduleState.PAUSED and self.pause_reason is not None:
            return f"{self.state.value}({self.pause_reason.value})"
        return self.state.value
