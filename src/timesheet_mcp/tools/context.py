"""
Per-server tool context.

A ToolContext belongs to exactly one TimesheetMCPServer. It builds the
upstream client on first use, so a server created for a request that never
calls a tool never resolves credentials.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional

from timesheet_mcp.client import Credentials, TimesheetClient
from timesheet_mcp.settings import Settings

logger = logging.getLogger(__name__)


class ToolContext:
    """Holds the settings, the caller's bearer token and the lazily built client."""

    def __init__(
        self,
        settings: Settings,
        oauth_token: Optional[str] = None,
        client: Optional[TimesheetClient] = None,
    ) -> None:
        self.settings = settings
        self.oauth_token = oauth_token
        self._client = client

    def get_client(self) -> TimesheetClient:
        """
        Return the client, creating it on first use.

        Raises:
            TimesheetAuthenticationError: No bearer token and no API key configured.
        """
        if self._client is None:
            self._client = TimesheetClient.from_settings(self.settings, self.oauth_token)
        return self._client

    async def configure(self, api_key: str, base_url: Optional[str] = None) -> TimesheetClient:
        """Replace the client with one bound to ``api_key``."""
        await self.close()
        self._client = TimesheetClient(
            Credentials(api_key=api_key),
            base_url=base_url or self.settings.timesheet_api_url,
            timeout=self.settings.request_timeout,
        )
        logger.info("Client reconfigured with API key for %s", self._client.base_url)
        return self._client

    async def get_profile_and_settings(
        self,
    ) -> tuple[Optional[dict[str, Any]], Optional[dict[str, Any]]]:
        """Fetch the user's profile and settings concurrently; failures become None."""
        client = self.get_client()
        profile, user_settings = await asyncio.gather(
            client.get_profile(),
            client.get_settings(),
            return_exceptions=True,
        )
        return _or_none(profile, "profile"), _or_none(user_settings, "settings")

    async def close(self) -> None:
        if self._client is not None:
            await self._client.close()
            self._client = None


def _or_none(result: Any, what: str) -> Optional[dict[str, Any]]:
    if isinstance(result, Exception):
        logger.warning("Failed to fetch %s: %s", what, result)
        return None
    if isinstance(result, BaseException):
        raise result
    return result
