"""
Exception hierarchy for the Timesheet MCP server.

All errors raised by this package derive from TimesheetError. Upstream
HTTP failures are TimesheetAPIError (or a status-specific subclass) and
carry the HTTP status code when one was received.
"""

from __future__ import annotations

from typing import Any


class TimesheetError(Exception):
    """Base exception for all Timesheet MCP errors."""

    def __init__(self, message: str = "", details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        return self.message


class TimesheetAPIError(TimesheetError):
    """Raised when the Timesheet API returns a non-2xx response or cannot be reached."""

    def __init__(
        self,
        message: str = "Unknown error",
        status_code: int | None = None,
        response_body: Any = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.status_code = status_code
        self.response_body = response_body


class TimesheetAuthenticationError(TimesheetAPIError):
    """Raised when no credentials are available or the API rejects them."""


class TimesheetNotFoundError(TimesheetAPIError):
    """Raised when the requested resource does not exist."""


class TimesheetRateLimitError(TimesheetAPIError):
    """Raised when the API rate limit is exceeded."""

    def __init__(
        self,
        message: str = "Rate limit exceeded",
        status_code: int | None = 429,
        response_body: Any = None,
        retry_after: float | None = None,
    ) -> None:
        super().__init__(message, status_code, response_body)
        self.retry_after = retry_after


class TimesheetServerError(TimesheetAPIError):
    """Raised on 5xx responses from the API."""
