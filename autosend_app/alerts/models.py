"""
Alert data models.

An AlertRecord exists from the moment a detection pauses the schedule until
it is dismissed. It is mutated in place by the two-stage acknowledgment.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..scheduling.models import PauseReason


class DismissOutcome(str, Enum):
    """Result of one acknowledgment interaction."""
    NO_ALERT = "no_alert"
    SILENCED = "silenced"
    DISMISSED = "dismissed"


_HEADLINES = {
    PauseReason.ALERT_VERIFICATION: "VERIFICATION DETECTED",
    PauseReason.ALERT_CATCHLIST: "CATCHLIST NOTICE DETECTED",
}


@dataclass
class AlertRecord:
    """The single active alert."""

    reason: PauseReason
    detected_id: Optional[str] = None
    destination: str = ""
    detected_at: float = 0.0                         # Scheduler clock time
    source: str = "detection"                        # detection, test
    paused_schedule: bool = False                    # Whether raising it paused dispatch
    active: bool = True
    acknowledged_silence: bool = False

    @property
    def headline(self) -> str:
        return _HEADLINES.get(self.reason, "ALERT")

    def describe(self) -> str:
        """One-line description for notifiers."""
        parts = [self.headline]
        if self.destination:
            parts.append(f"in {self.destination}")
        if self.detected_id:
            parts.append(f"(user {self.detected_id})")
        return " ".join(parts)
