"""
Transport module.

Outbound message transports and destination display-name lookup.
"""

from ..config.transport import TransportConfig, TransportMethod
from .base import BaseTransport, DeliveryResult, DeliveryStatus, TransportError
from .directory import Directory, StaticDirectory, resolve_display_name
from .http_transport import HttpTransport
from .stdout_transport import StdoutTransport


def build_transport(transport_config: TransportConfig, name: str = "default") -> BaseTransport:
    """Create the transport selected by configuration."""
    if transport_config.method is TransportMethod.HTTP_POST:
        return HttpTransport(name, transport_config.config)
    return StdoutTransport(name, transport_config.config)


__all__ = [
    "BaseTransport",
    "DeliveryResult",
    "DeliveryStatus",
    "TransportError",
    "Directory",
    "StaticDirectory",
    "resolve_display_name",
    "HttpTransport",
    "StdoutTransport",
    "build_transport",
]
