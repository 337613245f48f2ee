"""
Configuration module.

Defaults, the slot-indexed settings store, YAML loading and validation.
"""

from .defaults import (
    DEFAULT_CATCHLIST_PHRASE,
    DefaultConfig,
    DetectionParams,
    DispatchParams,
    IntervalParams,
    RotationParams,
    get_default_config,
)
from .loader import ConfigLoader
from .settings import DestinationSlot, SchedulerSettings
from .validation import ConfigValidator, ValidationError

__all__ = [
    "DEFAULT_CATCHLIST_PHRASE",
    "DefaultConfig",
    "DetectionParams",
    "DispatchParams",
    "IntervalParams",
    "RotationParams",
    "get_default_config",
    "ConfigLoader",
    "DestinationSlot",
    "SchedulerSettings",
    "ConfigValidator",
    "ValidationError",
]
