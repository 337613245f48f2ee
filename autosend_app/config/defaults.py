"""Default configuration parameters for the dispatch scheduler."""

from dataclasses import dataclass, field

# Literal phrase posted when an account lands on the catchlist.
DEFAULT_CATCHLIST_PHRASE = "You have been added to the catchlist"


@dataclass(frozen=True)
class IntervalParams:
    """Delay between message cycles."""
    min_seconds: float = 20                          # Shortest wait between cycles
    max_seconds: float = 40                          # Longest wait between cycles


@dataclass(frozen=True)
class RotationParams:
    """Delay between destination rotations."""
    min_minutes: float = 10
    max_minutes: float = 20


@dataclass(frozen=True)
class DetectionParams:
    """Inbound event detection parameters."""
    enabled: bool = True                             # Verification detection on/off
    catchlist_phrase: str = DEFAULT_CATCHLIST_PHRASE # Case-sensitive trigger literal


@dataclass(frozen=True)
class DispatchParams:
    """Send-cycle mechanics."""
    message_spacing_ms: int = 500                    # Pause between messages in a cycle
    nonce_multiplier: int = 4194304                  # Scales epoch ms into nonce space
    max_destination_slots: int = 10
    max_message_slots: int = 10


@dataclass(frozen=True)
class DefaultConfig:
    """Complete default configuration."""
    interval: IntervalParams
    rotation: RotationParams
    detection: DetectionParams
    dispatch: DispatchParams
    destinations: list = field(default_factory=list)
    messages: list = field(default_factory=lambda: ["Hi", "Hello", "Yo"])


def get_default_config() -> DefaultConfig:
    """Get the default configuration instance."""
    return DefaultConfig(
        interval=IntervalParams(),
        rotation=RotationParams(),
        detection=DetectionParams(),
        dispatch=DispatchParams(),
    )
