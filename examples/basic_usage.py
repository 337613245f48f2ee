#!/usr/bin/env python3
"""
Basic Usage Example - AutoSend Scheduler

This script demonstrates the basic usage of the AutoSend scheduler on a
real asyncio event loop. It shows how to:
- Configure destination and message slots
- Start dispatching with a stdout transport
- Feed an inbound event stream that triggers a verification alert
- Walk the two-stage alert dismissal and stop

Intervals are shortened to a few seconds so the demo finishes quickly.

Run: python examples/basic_usage.py
"""

import asyncio
from typing import Any, AsyncIterator

from autosend_app.config.defaults import IntervalParams, RotationParams
from autosend_app.config.settings import SchedulerSettings
from autosend_app.config.transport import StdoutTransportConfig
from autosend_app.logging.config import configure_logging
from autosend_app.presentation.presenter import ConsolePresenter
from autosend_app.scheduling.timers import AsyncioClock
from autosend_app.service import AutoSendService
from autosend_app.transport.directory import StaticDirectory
from autosend_app.transport.stdout_transport import StdoutTransport

GENERAL = "111111111111111111"
OFFTOPIC = "222222222222222222"


def create_settings() -> SchedulerSettings:
    """Two destinations, two messages, short demo intervals."""
    settings = SchedulerSettings(
        interval=IntervalParams(min_seconds=1, max_seconds=2),
        rotation=RotationParams(min_minutes=0.05, max_minutes=0.1),
        messages=["Hi", "Hello"],
    )
    settings.set_destination(1, GENERAL)
    settings.set_destination(2, OFFTOPIC)
    return settings


async def inbound_events() -> AsyncIterator[dict[str, Any]]:
    """Simulated inbound stream: chatter, then a verification challenge."""
    await asyncio.sleep(2)
    yield {"channel_id": GENERAL, "content": "anyone around?", "author": {"id": "1", "username": "alice"}}

    await asyncio.sleep(2)
    yield {
        "channel_id": GENERAL,
        "content": (
            "⚠️ <@123456789012345678> Are you a real human? Please use the link below. "
            "Please complete this within 5 minutes."
        ),
        "author": {"id": "2", "username": "modbot"},
    }


async def run_demo() -> None:
    service = AutoSendService(
        create_settings(),
        StdoutTransport("demo", StdoutTransportConfig(format="pretty", include_timestamp=False)),
        clock=AsyncioClock(),
        presenter=ConsolePresenter(show_ticks=False),
        directory=StaticDirectory({GENERAL: "general", OFFTOPIC: "off-topic"}),
    )

    print(service.status_report())
    print()

    service.start()
    handled = await service.run(inbound_events())
    print(f"\nHandled {handled} inbound events")

    status = service.status_snapshot()
    print(f"State after stream: {status.label}")

    # First acknowledgment silences, second resumes
    print(f"Dismiss #1: {service.dismiss_alert().value}")
    await asyncio.sleep(1)
    print(f"Dismiss #2: {service.dismiss_alert().value}")

    await asyncio.sleep(3)

    service.stop()
    print(f"\nSent {service.scheduler.messages_sent} messages in {service.scheduler.cycles_completed} cycles")


def main() -> None:
    """Main function to run the basic usage example."""
    configure_logging(level="WARNING")
    print("🚀 AutoSend - Basic Usage Example")
    print("=" * 60)
    asyncio.run(run_demo())
    print("\n✅ Example completed successfully!")


if __name__ == "__main__":
    main()
