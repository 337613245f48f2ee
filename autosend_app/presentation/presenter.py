"""
Countdown presentation interface.

The scheduler reports state changes, countdown ticks, rotations and
failures here. Rendering is up to the presentation layer; the base class
ignores everything.
"""

import sys
from typing import Optional, TextIO

from ..scheduling.models import ScheduleState, SchedulerStatus
from ..utils.time import format_countdown


class CountdownPresenter:
    """Receives scheduler updates. Override the hooks you need."""

    def on_state_changed(self, status: SchedulerStatus) -> None:
        pass

    def on_tick(self, status: SchedulerStatus) -> None:
        pass

    def on_rotated(self, status: SchedulerStatus) -> None:
        pass

    def on_error(self, error: Exception) -> None:
        pass


def render_status(status: SchedulerStatus) -> str:
    """Render the countdown line shown while a schedule is active."""
    if status.state is ScheduleState.STOPPED:
        return "Stopped"

    if status.state is ScheduleState.PAUSED:
        head = f"Paused ({status.pause_reason.value})" if status.pause_reason else "Paused"
    else:
        remaining = status.remaining_send_seconds
        head = f"Next message in: {format_countdown(remaining)}"

    rotation = (
        format_countdown(status.remaining_rotation_seconds)
        if len(status.enabled_destinations) > 1 else "N/A"
    )
    return (
        f"{head} | {status.current_display_name or status.current_destination} | "
        f"Destination {status.cursor_position}/{len(status.enabled_destinations)} | "
        f"Switch in: {rotation}"
    )


class ConsolePresenter(CountdownPresenter):
    """Writes countdown lines to a text stream."""

    def __init__(self, stream: Optional[TextIO] = None, show_ticks: bool = True):
        self.stream = stream
        self.show_ticks = show_ticks

    def _write(self, line: str) -> None:
        print(line, file=self.stream or sys.stdout, flush=True)

    def on_state_changed(self, status: SchedulerStatus) -> None:
        self._write(f"[{status.label}] {render_status(status)}")

    def on_tick(self, status: SchedulerStatus) -> None:
        if self.show_ticks:
            self._write(render_status(status))

    def on_rotated(self, status: SchedulerStatus) -> None:
        self._write(f"Switched to: {status.current_display_name or status.current_destination}")

    def on_error(self, error: Exception) -> None:
        self._write(f"Stopped after error: {error}")
