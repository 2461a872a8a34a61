"""
Error types raised by the relay.

Handlers convert every one of these into a JSON response at the request
boundary; nothing is retried.
"""

from typing import Any, Optional


class RelayError(Exception):
    """Base class for relay errors."""


class ConfigurationError(RelayError):
    """Raised when a required setting, such as the API key, is missing."""


class ProviderError(RelayError):
    """Raised when the provider answers an outbound request with a non-2xx status."""

    def __init__(self, operation: str, status_code: int, body: Any = None):
        self.operation = operation
        self.status_code = status_code
        self.body = body
        super().__init__(f"{operation} failed: {status_code} - {body}")

    def to_details(self) -> dict:
        return {"status": self.status_code, "body": self.body}


class InvalidCallIdError(RelayError):
    """Raised when a call id is missing or is a sentinel test value."""

    def __init__(self, call_id: Optional[str]):
        self.call_id = call_id
        super().__init__(f"Invalid call id: {call_id!r}")
