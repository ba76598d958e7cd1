"""Project-native typed exceptions for external scheduler adapter failures."""

from __future__ import annotations


class SchedulerAdapterError(Exception):
    """Base exception for adapter-level scheduler failures.

    Attributes:
        status_code: Optional upstream HTTP status code.
    """

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class SchedulerConnectionError(SchedulerAdapterError, ConnectionError):
    """Transport-level connectivity failure or non-success HTTP status."""


class SchedulerTimeoutError(SchedulerAdapterError, TimeoutError):
    """Remote scheduler call exceeded the configured timeout."""


class SchedulerRequestError(SchedulerAdapterError, ValueError):
    """Upstream rejected the request or returned a payload outside the contract."""
