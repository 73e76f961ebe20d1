"""
Credential resolution.

A bearer token forwarded with the request wins; otherwise the statically
configured API key is used; otherwise authentication is required. No token
validation, refresh, or storage happens here.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from timesheet_mcp.exceptions import TimesheetAuthenticationError
from timesheet_mcp.settings import Settings

AUTH_REQUIRED_MESSAGE = (
    "Authentication required. Provide an OAuth bearer token or set the "
    "TIMESHEET_API_TOKEN environment variable."
)


@dataclass(frozen=True)
class Credentials:
    """Resolved credentials for one server instance."""

    oauth_token: Optional[str] = None
    api_key: Optional[str] = None

    @property
    def authorization(self) -> str:
        """Value for the upstream Authorization header."""
        if self.oauth_token:
            return f"Bearer {self.oauth_token}"
        if self.api_key:
            return f"ApiKey {self.api_key}"
        raise TimesheetAuthenticationError(AUTH_REQUIRED_MESSAGE)

    @property
    def source(self) -> str:
        return "oauth" if self.oauth_token else "api_key"


def resolve_credentials(oauth_token: Optional[str], settings: Settings) -> Credentials:
    """
    Pick credentials for the upstream client.

    Raises:
        TimesheetAuthenticationError: Neither a bearer token nor an API key is available.
    """
    if oauth_token and oauth_token.strip():
        return Credentials(oauth_token=oauth_token.strip())
    if settings.timesheet_api_token:
        return Credentials(api_key=settings.timesheet_api_token)
    raise TimesheetAuthenticationError(AUTH_REQUIRED_MESSAGE)
