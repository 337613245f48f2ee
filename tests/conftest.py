"""Pytest configuration and shared fixtures."""

import random
from typing import Any, Callable, Optional

import pytest

from autosend_app.config.defaults import IntervalParams, RotationParams
from autosend_app.config.settings import SchedulerSettings
from autosend_app.scheduling.timers import ManualClock
from autosend_app.transport.base import BaseTransport, DeliveryResult, DeliveryStatus


class RecordingTransport(BaseTransport):
    """Transport that records every send instead of delivering it."""

    def __init__(self, fail_on: Optional[Callable[[str, str], bool]] = None,
                 raise_on: Optional[Callable[[str, str], bool]] = None):
        super().__init__("recording", None)
        self.sent: list[tuple[str, str, str]] = []
        self.fail_on = fail_on
        self.raise_on = raise_on

    def send(self, destination: str, text: str, nonce: str) -> DeliveryResult:
        if self.raise_on is not None and self.raise_on(destination, text):
            raise ConnectionError(f"connection reset sending to {destination}")

        if self.fail_on is not None and self.fail_on(destination, text):
            return self._record(DeliveryResult(
                status=DeliveryStatus.FAILED,
                message="HTTP 403: Missing Access",
            ))

        self.sent.append((destination, text, nonce))
        return self._record(DeliveryResult(status=DeliveryStatus.SUCCESS, delivery_time_ms=0))

    def health_check(self) -> bool:
        return True

    @property
    def texts(self) -> list[str]:
        return [text for _, text, _ in self.sent]

    @property
    def destinations(self) -> list[str]:
        return [destination for destination, _, _ in self.sent]


@pytest.fixture
def clock() -> ManualClock:
    """Deterministic clock starting at zero."""
    return ManualClock()


@pytest.fixture
def rng() -> random.Random:
    """Seeded random source."""
    return random.Random(1234)


@pytest.fixture
def transport() -> RecordingTransport:
    """Transport recording all sends."""
    return RecordingTransport()


@pytest.fixture
def make_transport() -> Callable[..., RecordingTransport]:
    """Factory for recording transports with failure hooks."""
    return RecordingTransport


@pytest.fixture
def make_settings() -> Callable[..., SchedulerSettings]:
    """Factory for settings with short, test-friendly bounds."""

    def factory(
        destinations: Any = ("111111111111111111", "222222222222222222"),
        messages: Any = ("a", "b"),
        interval: tuple[float, float] = (1, 1),
        rotation: tuple[float, float] = (1, 2),
        **kwargs: Any,
    ) -> SchedulerSettings:
        return SchedulerSettings(
            interval=IntervalParams(min_seconds=interval[0], max_seconds=interval[1]),
            rotation=RotationParams(min_minutes=rotation[0], max_minutes=rotation[1]),
            destinations=list(destinations),
            messages=list(messages),
            **kwargs,
        )

    return factory


@pytest.fixture
def sample_verification_content() -> str:
    """Verification challenge as posted by a moderation bot."""
    return (
        "⚠️ <@123456789012345678> Are you a real human? "
        "Please use the link below so I can check. "
        "Please complete this within 5 minutes or it may result in a ban."
    )


@pytest.fixture
def sample_message_payload() -> dict[str, Any]:
    """Raw message-create payload."""
    return {
        "channel_id": "111111111111111111",
        "content": "hello there",
        "embeds": [
            {
                "title": "Notice",
                "description": "Something happened",
                "fields": [{"name": "Status", "value": "ok"}],
                "footer": {"text": "bot footer"},
            }
        ],
        "author": {"id": "999999999999999999", "username": "modbot"},
    }
