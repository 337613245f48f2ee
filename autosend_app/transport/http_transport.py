"""HTTP POST message transport."""

import json
import socket
import time
from typing import Any
from urllib.error import HTTPError, URLError
from urllib.parse import quote, urlparse
from urllib.request import Request, urlopen

from ..config.transport import HttpTransportConfig
from .base import BaseTransport, DeliveryResult, DeliveryStatus, TransportError


class HttpTransport(BaseTransport):
    """Posts each message as JSON to a per-destination URL."""

    def __init__(self, name: str, config: HttpTransportConfig):
        super().__init__(name, config)
        self.config: HttpTransportConfig = config

        parsed = urlparse(config.url_template.replace("{destination}", "x"))
        if not parsed.scheme or not parsed.netloc:
            raise TransportError(f"Invalid URL template: {config.url_template}")

    def url_for(self, destination: str) -> str:
        return self.config.url_template.replace("{destination}", quote(destination, safe=""))

    def send(self, destination: str, text: str, nonce: str) -> DeliveryResult:
        """Deliver one message via HTTP POST."""
        body: dict[str, Any] = {"content": text, "nonce": nonce, "tts": False}
        data = json.dumps(body).encode('utf-8')
        headers = {
            'Content-Type': 'application/json',
            'Content-Length': str(len(data)),
            'User-Agent': 'autosend-app/0.1'
        }
        if self.config.headers:
            headers.update(self.config.headers)

        req = Request(
            self.url_for(destination),
            data=data,
            headers=headers,
            method=self.config.method
        )

        start_time = time.time()
        try:
            with urlopen(req, timeout=self.config.timeout_seconds) as response:
                response_code = response.getcode()
                response_data = response.read().decode('utf-8', errors='replace')
        except HTTPError as e:
            self.logger.warning(
                "Message delivery HTTP error",
                transport=self.name,
                destination=destination,
                error_code=e.code,
                error_reason=e.reason
            )
            return self._record(DeliveryResult(
                status=DeliveryStatus.FAILED,
                message=f"HTTP {e.code}: {e.reason}",
                error=e
            ))
        except (OSError, URLError, socket.timeout) as e:
            self.logger.warning(
                "Message delivery network error",
                transport=self.name,
                destination=destination,
                error=str(e)
            )
            return self._record(DeliveryResult(
                status=DeliveryStatus.FAILED,
                message=f"Network error: {str(e)}",
                error=e
            ))

        delivery_time = int((time.time() - start_time) * 1000)
        if 200 <= response_code < 300:
            self.logger.debug(
                "Message delivered",
                transport=self.name,
                destination=destination,
                response_code=response_code
            )
            return self._record(DeliveryResult(
                status=DeliveryStatus.SUCCESS,
                message=f"HTTP {response_code}",
                delivery_time_ms=delivery_time
            ))

        error_msg = f"HTTP {response_code}: {response_data[:200]}"
        return self._record(DeliveryResult(
            status=DeliveryStatus.FAILED,
            message=error_msg,
            delivery_time_ms=delivery_time,
            error=TransportError(error_msg)
        ))

    def health_check(self) -> bool:
        """Check if the endpoint host is reachable."""
        try:
            parsed = urlparse(self.url_for("health"))
            req = Request(f"{parsed.scheme}://{parsed.netloc}", method='HEAD')
            with urlopen(req, timeout=5) as response:
                return 200 <= response.getcode() < 400
        except (OSError, URLError, socket.timeout) as e:
            self.logger.warning(
                "Health check failed",
                transport=self.name,
                error=str(e)
            )
            return False
