"""Display-name lookup for destinations."""

from abc import ABC, abstractmethod
from typing import Optional

import structlog

logger = structlog.get_logger(__name__)


class Directory(ABC):
    """Resolves destination identifiers to human-readable names."""

    @abstractmethod
    def lookup_display_name(self, destination: str) -> str:
        pass


class StaticDirectory(Directory):
    """Directory backed by a fixed mapping, e.g. from the settings file."""

    def __init__(self, names: Optional[dict[str, str]] = None):
        self.names = dict(names or {})

    def lookup_display_name(self, destination: str) -> str:
        return self.names[destination]


def resolve_display_name(directory: Optional[Directory], destination: str) -> str:
    """
    Look up a display name, degrading to the raw identifier.

    Any lookup failure or blank result yields the identifier itself.
    """
    if directory is None or not destination:
        return destination

    try:
        name = directory.lookup_display_name(destination)
    except Exception as e:
        logger.debug("Display name lookup failed", destination=destination, error=str(e))
        return destination

    return name or destination
