"""
AutoSend service coordinator.

Wires settings, transport, scheduler, alert coordinator and presentation
into one object that the control layer talks to:

Inbound events → PatternMatcher → AlertCoordinator → DispatchScheduler
Manual commands → DispatchScheduler
Scheduler timers → DestinationRotator → transport
"""

import random
from collections.abc import AsyncIterable
from pathlib import Path
from typing import Any, Optional

import structlog

from .alerts.coordinator import AlertCoordinator
from .alerts.models import AlertRecord, DismissOutcome
from .alerts.notifier import AlertNotifier
from .config.loader import ConfigLoader
from .config.settings import DestinationSlot, SchedulerSettings
from .detection.events import parse_observed_event, pump_events
from .detection.models import ObservedEvent
from .errors import ConfigurationError
from .presentation.presenter import CountdownPresenter
from .scheduling.models import SchedulerStatus
from .scheduling.scheduler import DispatchScheduler
from .scheduling.timers import AsyncioClock, Clock
from .transport import build_transport
from .transport.base import BaseTransport
from .transport.directory import Directory, StaticDirectory

logger = structlog.get_logger(__name__)


def _format_number(value: float) -> str:
    return f"{value:g}"


class AutoSendService:
    """
    Facade over the dispatch scheduler and alert coordinator.

    Exposes the manual control surface (start, stop, pause, resume, rotate,
    alert dismissal), slot management and inbound event handling.
    """

    def __init__(
        self,
        settings: SchedulerSettings,
        transport: BaseTransport,
        clock: Optional[Clock] = None,
        presenter: Optional[CountdownPresenter] = None,
        notifier: Optional[AlertNotifier] = None,
        directory: Optional[Directory] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.settings = settings
        self.transport = transport
        self.clock = clock or AsyncioClock()
        self.directory = directory

        self.scheduler = DispatchScheduler(
            settings,
            transport,
            self.clock,
            presenter=presenter,
            directory=directory,
            rng=rng,
        )
        self.alerts = AlertCoordinator(self.scheduler, notifier=notifier)

        logger.info(
            "AutoSend service initialized",
            transport=transport.name,
            enabled_destinations=len(settings.enabled_destinations()),
            detection_enabled=settings.detection_enabled
        )

    @classmethod
    def from_config(
        cls,
        config_dir: Optional[Path] = None,
        overrides: Optional[dict[str, Any]] = None,
        **kwargs: Any,
    ) -> "AutoSendService":
        """Build a service from the settings file in config_dir."""
        loader = ConfigLoader.create(config_dir)
        settings = loader.load_settings(overrides)
        transport = build_transport(loader.load_transport_config(overrides))
        kwargs.setdefault("directory", StaticDirectory(loader.load_display_names()))
        return cls(settings, transport, **kwargs)

    # Manual control

    def start(self) -> SchedulerStatus:
        return self.scheduler.start()

    def stop(self) -> None:
        self.scheduler.stop()

    def manual_pause(self) -> None:
        self.scheduler.manual_pause()

    def manual_resume(self) -> None:
        self.scheduler.manual_resume()

    def rotate_now(self) -> str:
        return self.scheduler.rotate_now()

    def status_snapshot(self) -> SchedulerStatus:
        return self.scheduler.status_snapshot()

    # Alerts

    def dismiss_alert(self) -> DismissOutcome:
        return self.alerts.dismiss_alert()

    def test_alert(self, identifier: Optional[str] = None) -> Optional[AlertRecord]:
        return self.alerts.test_alert(identifier)

    def on_observed_event(self, event: Any) -> Optional[AlertRecord]:
        """Handle one inbound event, raw payload or ObservedEvent."""
        if not isinstance(event, ObservedEvent):
            event = parse_observed_event(event)
        return self.alerts.on_observed_event(event)

    async def run(self, events: AsyncIterable[Any]) -> int:
        """
        Consume the inbound event stream until it ends.

        Returns:
            Number of events handled
        """
        return await pump_events(events, self.alerts.on_observed_event)

    # Slot management

    def assign_destination(self, slot: int, identifier: str) -> DestinationSlot:
        """Put a destination into a slot, enabled."""
        if not identifier or not identifier.strip():
            raise ConfigurationError("No destination selected", field="destinations")

        entry = self.settings.set_destination(slot, identifier)
        logger.info(
            "Destination assigned",
            slot=slot,
            destination=entry.identifier,
            display_name=self.scheduler.display_name(entry.identifier)
        )
        return entry

    def toggle_destination(self, slot: int) -> DestinationSlot:
        """Flip a configured slot's enabled flag."""
        entry = self.settings.toggle_destination(slot)
        logger.info(
            "Destination toggled",
            slot=slot,
            destination=entry.identifier,
            enabled=entry.enabled
        )
        return entry

    # Reporting

    def status_report(self) -> str:
        """Multi-line status summary of every configured slot and the timing bounds."""
        status = "Running" if self.scheduler.is_running else (
            "Paused" if self.scheduler.is_paused else "Stopped"
        )

        slot_lines = [
            f"{'✅' if entry.enabled else '❌'} Slot {slot}: "
            f"{self.scheduler.display_name(entry.identifier)}"
            for slot, entry in self.settings.configured_destinations().items()
        ]

        interval = self.settings.interval
        rotation = self.settings.rotation
        lines = [
            f"Status: {status}",
            "",
            "\n".join(slot_lines) if slot_lines else "No destinations configured",
            "",
            f"Message Delay: {_format_number(interval.min_seconds)}s - "
            f"{_format_number(interval.max_seconds)}s",
            f"Rotation: {_format_number(rotation.min_minutes)}-"
            f"{_format_number(rotation.max_minutes)} min",
            f"Verification Detection: {'ON' if self.settings.detection_enabled else 'OFF'}",
        ]
        return "\n".join(lines)
