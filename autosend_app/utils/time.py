"""
Timing utilities for jittered delays, send nonces and countdown display.

Delays are measured on the scheduler's clock; nonces use wall-clock
milliseconds because they travel to the transport alongside each message.
"""

import math
import random
import time
from typing import Callable, Optional

# Milliseconds shifted left by 22 bits, the layout of snowflake-style ids.
DEFAULT_NONCE_MULTIPLIER = 4194304

_DEFAULT_RNG = random.Random()


def jittered_delay(min_seconds: float, max_seconds: float,
                   rng: Optional[random.Random] = None) -> float:
    """
    Draw a delay uniformly from [min_seconds, max_seconds] inclusive.

    Args:
        min_seconds: Lower bound in seconds
        max_seconds: Upper bound in seconds
        rng: Random source, defaults to the module-level generator

    Returns:
        Delay in seconds, within the bounds
    """
    rng = rng or _DEFAULT_RNG
    if max_seconds < min_seconds:
        raise ValueError(f"min_seconds {min_seconds} exceeds max_seconds {max_seconds}")

    if float(min_seconds).is_integer() and float(max_seconds).is_integer():
        return float(rng.randint(int(min_seconds), int(max_seconds)))

    return min(max(rng.uniform(min_seconds, max_seconds), min_seconds), max_seconds)


def minutes_to_seconds(minutes: float) -> float:
    """Convert a minutes setting to seconds."""
    return minutes * 60


def format_countdown(seconds: Optional[float]) -> str:
    """
    Format remaining seconds as m:ss for countdown display.

    Args:
        seconds: Remaining seconds, or None when nothing is scheduled

    Returns:
        Formatted countdown, "N/A" when nothing is scheduled
    """
    if seconds is None:
        return "N/A"

    whole = max(0, int(math.ceil(seconds)))
    return f"{whole // 60}:{whole % 60:02d}"


class NonceGenerator:
    """
    Generates strictly increasing send nonces from wall-clock milliseconds.

    Two calls within the same millisecond would produce the same scaled
    value, so the generator bumps the result past the previous nonce.
    """

    def __init__(self, multiplier: int = DEFAULT_NONCE_MULTIPLIER,
                 time_source: Optional[Callable[[], float]] = None):
        self.multiplier = multiplier
        self._time_source = time_source or time.time
        self._last = 0

    def next(self) -> str:
        """Return the next nonce as a decimal string."""
        candidate = int(self._time_source() * 1000) * self.multiplier
        if candidate <= self._last:
            candidate = self._last + 1
        self._last = candidate
        return str(candidate)
