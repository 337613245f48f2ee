"""Configuration for outbound message transports."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from ..errors import ConfigurationError


class TransportMethod(Enum):
    """Supported transports."""
    HTTP_POST = "http_post"
    STDOUT = "stdout"


@dataclass(frozen=True)
class HttpTransportConfig:
    """Configuration for HTTP POST transport."""
    url_template: str                                # Must contain {destination}
    method: str = "POST"
    headers: Optional[dict[str, str]] = None
    timeout_seconds: int = 30


@dataclass(frozen=True)
class StdoutTransportConfig:
    """Configuration for stdout transport."""
    format: str = "json"  # json, pretty
    include_timestamp: bool = True


@dataclass(frozen=True)
class TransportConfig:
    """Selected transport and its settings."""
    method: TransportMethod
    config: Any  # HttpTransportConfig | StdoutTransportConfig


def get_default_transport_config() -> TransportConfig:
    """Get default transport configuration."""
    return TransportConfig(
        method=TransportMethod.STDOUT,
        config=StdoutTransportConfig(format="pretty", include_timestamp=True),
    )


def parse_transport_config(raw: Optional[dict[str, Any]]) -> TransportConfig:
    """
    Build a TransportConfig from the ``transport`` section of the settings file.

    Example::

        transport:
          method: http_post
          url_template: https://chat.example/api/channels/{destination}/messages
          headers: {Authorization: "Bot ..."}
    """
    if not raw:
        return get_default_transport_config()

    values = dict(raw)
    method_name = values.pop("method", TransportMethod.STDOUT.value)
    try:
        method = TransportMethod(method_name)
    except ValueError as e:
        raise ConfigurationError(
            f"Unknown transport method: {method_name}",
            field="transport.method",
        ) from e

    config_cls = HttpTransportConfig if method is TransportMethod.HTTP_POST else StdoutTransportConfig
    unknown = set(values) - set(config_cls.__dataclass_fields__)
    if unknown:
        raise ConfigurationError(
            f"Unknown transport settings: {', '.join(sorted(unknown))}",
            field="transport",
        )

    try:
        config = config_cls(**values)
    except TypeError as e:
        raise ConfigurationError(f"Incomplete transport settings: {e}", field="transport") from e

    if method is TransportMethod.HTTP_POST and "{destination}" not in config.url_template:
        raise ConfigurationError(
            "url_template must contain {destination}",
            field="transport.url_template",
        )

    return TransportConfig(method=method, config=config)
