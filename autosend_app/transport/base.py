"""Base classes for outbound message transports."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

import structlog


class DeliveryStatus(Enum):
    """Message delivery status."""
    SUCCESS = "success"
    FAILED = "failed"


@dataclass
class DeliveryResult:
    """Result of one send attempt."""
    status: DeliveryStatus
    message: Optional[str] = None
    delivery_time_ms: Optional[int] = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.status == DeliveryStatus.SUCCESS


class TransportError(Exception):
    """Base exception for transport failures."""
    pass


class BaseTransport(ABC):
    """
    Base class for message transports.

    A transport either returns a DeliveryResult or raises; the scheduler
    treats a raised exception and a non-success result the same way.
    """

    def __init__(self, name: str, config: Any):
        self.name = name
        self.config = config
        self.logger = structlog.get_logger(f"transport.{name}")
        self._delivery_count = 0
        self._error_count = 0

    @abstractmethod
    def send(self, destination: str, text: str, nonce: str) -> DeliveryResult:
        """
        Send one message to a destination.

        Args:
            destination: Destination identifier
            text: Message text
            nonce: Client-generated unique token for this send

        Returns:
            Delivery result for the message
        """
        pass

    @abstractmethod
    def health_check(self) -> bool:
        """Check if the transport is usable."""
        pass

    def _record(self, result: DeliveryResult) -> DeliveryResult:
        if result.ok:
            self._delivery_count += 1
        else:
            self._error_count += 1
        return result

    def get_stats(self) -> dict[str, Any]:
        """Get delivery statistics."""
        return {
            "name": self.name,
            "delivery_count": self._delivery_count,
            "error_count": self._error_count,
            "success_rate": (
                self._delivery_count / (self._delivery_count + self._error_count)
                if (self._delivery_count + self._error_count) > 0 else 0.0
            )
        }

    def reset_stats(self):
        """Reset delivery statistics."""
        self._delivery_count = 0
        self._error_count = 0
