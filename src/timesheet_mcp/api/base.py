"""
Low-level HTTP transport for the Timesheet API.

TimesheetTransport owns one httpx.AsyncClient, attaches the Authorization
header, decodes JSON/bytes/text bodies, and turns non-2xx responses and
network failures into TimesheetAPIError subclasses. It performs no retries.
"""

from __future__ import annotations

import logging
from types import TracebackType
from typing import Any, Optional

import httpx

from timesheet_mcp import __version__
from timesheet_mcp.exceptions import (
    TimesheetAPIError,
    TimesheetAuthenticationError,
    TimesheetNotFoundError,
    TimesheetRateLimitError,
    TimesheetServerError,
)

logger = logging.getLogger(__name__)

USER_AGENT = f"timesheet-mcp/{__version__}"


def compact(data: Optional[dict[str, Any]]) -> dict[str, Any]:
    """Drop None values so optional arguments are not sent upstream."""
    if not data:
        return {}
    return {k: v for k, v in data.items() if v is not None}


def _error_message(response: httpx.Response) -> tuple[str, Any]:
    """Extract the upstream error message and decoded body."""
    try:
        body: Any = response.json()
    except ValueError:
        body = response.text or None

    message = None
    if isinstance(body, dict):
        message = body.get("message") or body.get("error") or body.get("error_description")
    elif isinstance(body, str) and body.strip():
        message = body.strip()[:500]

    return str(message or response.reason_phrase or "Unknown error"), body


def raise_for_status(response: httpx.Response) -> None:
    """Raise the matching TimesheetAPIError for a non-2xx response."""
    if response.is_success:
        return

    status = response.status_code
    message, body = _error_message(response)

    if status in (401, 403):
        raise TimesheetAuthenticationError(message, status_code=status, response_body=body)
    if status == 404:
        raise TimesheetNotFoundError(message, status_code=status, response_body=body)
    if status == 429:
        retry_after = response.headers.get("Retry-After")
        raise TimesheetRateLimitError(
            message,
            status_code=status,
            response_body=body,
            retry_after=float(retry_after) if retry_after and retry_after.isdigit() else None,
        )
    if status >= 500:
        raise TimesheetServerError(message, status_code=status, response_body=body)
    raise TimesheetAPIError(message, status_code=status, response_body=body)


class TimesheetTransport:
    """
    Authenticated HTTP transport for the Timesheet API.

    Usage:
        async with TimesheetTransport("https://api.timesheet.io", "ApiKey ts_abc.def") as http:
            timer = await http.request("GET", "/v1/timer")
    """

    def __init__(
        self,
        base_url: str,
        authorization: str,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._authorization = authorization
        self._timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self._timeout,
                transport=self._transport,
                headers={
                    "Authorization": self._authorization,
                    "Accept": "application/json",
                    "User-Agent": USER_AGENT,
                },
            )
        return self._client

    async def close(self) -> None:
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
        self._client = None

    async def __aenter__(self) -> "TimesheetTransport":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.close()

    # -------------------------------------------------------------------------
    # Requests
    # -------------------------------------------------------------------------

    async def _send(
        self,
        method: str,
        path: str,
        *,
        params: Optional[dict[str, Any]] = None,
        json: Any = None,
    ) -> httpx.Response:
        client = self._get_client()
        logger.debug("%s %s", method, path)
        try:
            response = await client.request(
                method,
                path,
                params=compact(params) or None,
                json=json,
            )
        except httpx.TimeoutException as e:
            raise TimesheetAPIError(f"Request to {path} timed out") from e
        except httpx.RequestError as e:
            raise TimesheetAPIError(f"Network error: {e}") from e

        raise_for_status(response)
        return response

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[dict[str, Any]] = None,
        json: Any = None,
    ) -> Any:
        """Send a request and return the decoded JSON body (None when empty)."""
        response = await self._send(method, path, params=params, json=json)
        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise TimesheetAPIError(
                f"Invalid JSON in response from {path}",
                status_code=response.status_code,
                response_body=response.text,
            ) from e

    async def request_bytes(
        self,
        method: str,
        path: str,
        *,
        params: Optional[dict[str, Any]] = None,
        json: Any = None,
    ) -> bytes:
        """Send a request and return the raw body (PDF and spreadsheet downloads)."""
        response = await self._send(method, path, params=params, json=json)
        return response.content

    async def request_text(
        self,
        method: str,
        path: str,
        *,
        params: Optional[dict[str, Any]] = None,
    ) -> str:
        response = await self._send(method, path, params=params)
        return response.text
