"""Standard output message transport."""

import json
import sys
from datetime import datetime, timezone
from typing import Any, Optional, TextIO

from ..config.transport import StdoutTransportConfig
from .base import BaseTransport, DeliveryResult, DeliveryStatus


class StdoutTransport(BaseTransport):
    """Writes each message to a text stream instead of delivering it."""

    def __init__(self, name: str, config: StdoutTransportConfig, stream: Optional[TextIO] = None):
        super().__init__(name, config)
        self.config: StdoutTransportConfig = config
        self.stream = stream

    def send(self, destination: str, text: str, nonce: str) -> DeliveryResult:
        """Print the message to the stream."""
        stream = self.stream or sys.stdout
        try:
            print(self._format_message(destination, text, nonce), file=stream, flush=True)
        except (OSError, ValueError) as e:
            self.logger.error(
                "Failed to print message",
                transport=self.name,
                destination=destination,
                error=str(e)
            )
            return self._record(DeliveryResult(
                status=DeliveryStatus.FAILED,
                message=f"Stdout error: {str(e)}",
                error=e
            ))

        return self._record(DeliveryResult(
            status=DeliveryStatus.SUCCESS,
            message="Printed to stdout"
        ))

    def _format_message(self, destination: str, text: str, nonce: str) -> str:
        """Format one message for output."""
        if self.config.format == "pretty":
            output = f"-> {destination}: {text}"
            if self.config.include_timestamp:
                output = f"[{datetime.now(timezone.utc).isoformat()}] " + output
            return output

        payload: dict[str, Any] = {"destination": destination, "content": text, "nonce": nonce}
        if self.config.include_timestamp:
            payload["stdout_timestamp"] = datetime.now(timezone.utc).isoformat()
        return json.dumps(payload, ensure_ascii=False)

    def health_check(self) -> bool:
        """Check if the stream is writable."""
        try:
            return (self.stream or sys.stdout).writable()
        except (OSError, ValueError):
            return False
