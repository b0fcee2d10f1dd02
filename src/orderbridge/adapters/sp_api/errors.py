"""Errors raised by the Selling Partner API adapter."""

from __future__ import annotations


class RemoteOrderError(RuntimeError):
    """Base class for failures talking to the remote order API."""


class AuthorizationError(RemoteOrderError):
    """Raised when the API keeps rejecting credentials after a forced refresh."""


class RateLimitError(RemoteOrderError):
    """Raised when rate-limit backoff is exhausted."""


class RemoteOrderAPIError(RemoteOrderError):
    """Raised for unexpected status codes or payloads."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class FetchCancelledError(RemoteOrderError):
    """Raised when the caller cancels a fetch between paced steps."""
