"""
OAuth discovery metadata and bearer token helpers.

The Timesheet API is the authorization server; this MCP server is only a
protected resource that forwards the caller's bearer token upstream. The
documents below let MCP hosts discover where to run the OAuth flow.
"""

from __future__ import annotations

import re
from typing import Any, Optional

from timesheet_mcp.settings import Settings

RESOURCE_DOCUMENTATION = "https://docs.timesheet.io/mcp"
SERVICE_DOCUMENTATION = "https://docs.timesheet.io/api/oauth"

AUTH_ERROR_KEYWORDS = ("auth", "unauthorized", "401", "token")

_BEARER_PATTERN = re.compile(r"^Bearer\s+(.+)$", re.IGNORECASE)


def protected_resource_metadata(settings: Settings) -> dict[str, Any]:
    """RFC 9728 protected resource metadata for this server."""
    return {
        "resource": settings.public_url,
        "authorization_servers": [settings.timesheet_api_url],
        "scopes_supported": ["openid", "profile"],
        "bearer_methods_supported": ["header"],
        "resource_documentation": RESOURCE_DOCUMENTATION,
    }


def authorization_server_metadata(settings: Settings) -> dict[str, Any]:
    """RFC 8414 authorization server metadata pointing at the Timesheet API."""
    api = settings.timesheet_api_url
    return {
        "issuer": api,
        "authorization_endpoint": f"{api}/oauth2/auth",
        "token_endpoint": f"{api}/oauth2/token",
        "registration_endpoint": f"{api}/oauth2/register",
        "code_challenge_methods_supported": ["S256"],
        "grant_types_supported": ["authorization_code", "refresh_token"],
        "response_types_supported": ["code"],
        "token_endpoint_auth_methods_supported": ["client_secret_basic", "client_secret_post"],
        "scopes_supported": ["openid", "profile", "offline_access"],
        "service_documentation": SERVICE_DOCUMENTATION,
    }


def oauth_summary(settings: Settings) -> dict[str, Any]:
    """Short OAuth summary for the health endpoint."""
    api = settings.timesheet_api_url
    return {
        "enabled": True,
        "authorizationServer": api,
        "protectedResource": settings.public_url,
        "authorizationEndpoint": f"{api}/oauth2/auth",
        "tokenEndpoint": f"{api}/oauth2/token",
        "protectedResourceMetadata": f"{settings.public_url}/.well-known/oauth-protected-resource",
    }


def www_authenticate_header(
    settings: Settings,
    error: Optional[str] = None,
    error_description: Optional[str] = None,
) -> str:
    """Build an RFC 6750 ``WWW-Authenticate`` value for 401 responses."""
    header = f'Bearer realm="{settings.public_url}"'
    header += f', authorization_uri="{settings.timesheet_api_url}/oauth2/auth"'
    if error:
        header += f', error="{error}"'
    if error_description:
        header += f', error_description="{error_description}"'
    return header


def extract_bearer_token(authorization_header: Optional[str]) -> Optional[str]:
    """Return the token from ``Bearer <token>`` (scheme is case-insensitive)."""
    if not authorization_header:
        return None
    match = _BEARER_PATTERN.match(authorization_header.strip())
    if not match:
        return None
    return match.group(1).strip() or None


def is_auth_error(error: BaseException | str) -> bool:
    """Heuristic used by the HTTP layer to turn failures into 401 responses."""
    text = str(error).lower()
    return any(keyword in text for keyword in AUTH_ERROR_KEYWORDS)
