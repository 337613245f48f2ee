"""
System failure error classifications.

These exceptions stop the schedule; the scheduler never retries them.
"""

from typing import Optional, Dict, Any


class SystemFailureError(Exception):
    """Base class for failures that stop the schedule."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = False


class DeliveryError(SystemFailureError):
    """A single message send failed; the rest of the cycle is abandoned."""

    def __init__(self, message: str, destination: Optional[str] = None,
                 nonce: Optional[str] = None, cause: Optional[BaseException] = None,
                 **kwargs):
        super().__init__(message, **kwargs)
        self.destination = destination
        self.nonce = nonce
        self.cause = cause


class StateTransitionError(SystemFailureError):
    """Operation requested from a state that does not allow it."""

    def __init__(self, message: str, current_state: Optional[str] = None,
                 attempted_transition: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.current_state = current_state
        self.attempted_transition = attempted_transition
