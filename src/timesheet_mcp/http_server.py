#!/usr/bin/env python3
"""
Stateless HTTP transport for the Timesheet MCP server.

Every POST to the MCP endpoint gets its own TimesheetMCPServer, bound to the
bearer token on that request, and its own stateless session manager. No
session state survives between requests, so any replica can serve any call.

Besides the MCP endpoint the app serves OAuth discovery documents, a health
check, the widget bundle and a landing page for browsers.
"""

from __future__ import annotations

import asyncio
import json
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, AsyncIterator, Optional

import uvicorn
from mcp.server.streamable_http_manager import StreamableHTTPSessionManager
from starlette.applications import Starlette
from starlette.exceptions import HTTPException
from starlette.middleware import Middleware
from starlette.middleware.cors import CORSMiddleware
from starlette.requests import Request
from starlette.responses import HTMLResponse, JSONResponse, Response
from starlette.routing import Mount, Route
from starlette.staticfiles import StaticFiles
from starlette.types import Message, Receive, Scope, Send

from timesheet_mcp import __version__
from timesheet_mcp.client import resolve_credentials
from timesheet_mcp.exceptions import TimesheetAuthenticationError
from timesheet_mcp.oauth import (
    authorization_server_metadata,
    extract_bearer_token,
    is_auth_error,
    oauth_summary,
    protected_resource_metadata,
    www_authenticate_header,
)
from timesheet_mcp.server import TimesheetMCPServer, configure_logging, install_fatal_handlers
from timesheet_mcp.settings import Settings, get_settings
from timesheet_mcp.tools import registry
from timesheet_mcp.widgets import COMPONENTS, load_landing_page, resource_uri, widgets_dir

logger = logging.getLogger(__name__)

HTTP_SERVER_NAME = "timesheet-mcp-http"
DISCOVERY_CACHE_CONTROL = "public, max-age=3600"

ALLOWED_ORIGINS = [
    "https://claude.ai",
    "https://chatgpt.com",
    "https://chat.openai.com",
    "http://localhost:3000",
    "http://localhost:5173",
    "http://localhost:6274",
]
ALLOWED_ORIGIN_REGEX = r"https://([a-z0-9-]+\.)*(run\.app|ngrok\.io|ngrok-free\.app|ngrok\.app)"
CREDENTIAL_FREE_TOOLS = frozenset({"auth_configure"})


# =============================================================================
# JSON-RPC Error Responses
# =============================================================================


def jsonrpc_error(code: int, message: str, data: Optional[dict[str, Any]] = None) -> dict[str, Any]:
    error: dict[str, Any] = {"code": code, "message": message}
    if data is not None:
        error["data"] = data
    return {"jsonrpc": "2.0", "error": error, "id": None}


def auth_required_response(settings: Settings, description: str) -> JSONResponse:
    """401 with a ``WWW-Authenticate`` challenge pointing at the Timesheet OAuth server."""
    return JSONResponse(
        jsonrpc_error(
            -32001,
            "Authentication required",
            {
                "error": "invalid_token",
                "error_description": description,
                "authorization_server": settings.timesheet_api_url,
                "protected_resource_metadata": (
                    f"{settings.public_url}/.well-known/oauth-protected-resource"
                ),
            },
        ),
        status_code=401,
        headers={
            "WWW-Authenticate": www_authenticate_header(settings, "invalid_token", description),
        },
    )


def internal_error_response() -> JSONResponse:
    return JSONResponse(jsonrpc_error(-32603, "Internal server error"), status_code=500)


def requires_credentials(body: bytes) -> bool:
    """
    True if the JSON-RPC payload (single or batch) calls a tool that talks upstream.

    ``auth_configure`` and unknown tool names are left to dispatch, which
    configures the client or answers with METHOD_NOT_FOUND.
    """
    try:
        payload = json.loads(body or b"null")
    except ValueError:
        return False
    messages = payload if isinstance(payload, list) else [payload]
    for message in messages:
        if not isinstance(message, dict) or message.get("method") != "tools/call":
            continue
        params = message.get("params")
        name = params.get("name") if isinstance(params, dict) else None
        if name in registry and name not in CREDENTIAL_FREE_TOOLS:
            return True
    return False


# =============================================================================
# MCP Endpoint
# =============================================================================


class StatelessMCPEndpoint:
    """ASGI endpoint handling one MCP POST with a fresh server and session manager."""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        request = Request(scope, receive)
        body = await request.body()
        token = extract_bearer_token(request.headers.get("authorization"))

        if requires_credentials(body):
            try:
                resolve_credentials(token, self.settings)
            except TimesheetAuthenticationError as e:
                logger.info("Rejecting tool call without credentials")
                await auth_required_response(self.settings, str(e))(scope, receive, send)
                return

        body_replayed = False

        async def replay_receive() -> Message:
            nonlocal body_replayed
            if not body_replayed:
                body_replayed = True
                return {"type": "http.request", "body": body, "more_body": False}
            return await receive()

        response_started = False

        async def tracking_send(message: Message) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        server = TimesheetMCPServer(self.settings, oauth_token=token)
        session_manager = StreamableHTTPSessionManager(
            app=server.server,
            json_response=True,
            stateless=True,
        )
        try:
            async with session_manager.run():
                await session_manager.handle_request(scope, replay_receive, tracking_send)
        except Exception as e:
            logger.exception("Error handling MCP request: %s", e)
            if response_started:
                return
            if is_auth_error(e):
                response: Response = auth_required_response(self.settings, str(e))
            else:
                response = internal_error_response()
            await response(scope, receive, send)
        finally:
            await server.aclose()


# =============================================================================
# Routes
# =============================================================================


def wants_html(request: Request) -> bool:
    accept = request.headers.get("accept", "")
    user_agent = request.headers.get("user-agent", "")
    if "text/html" in accept:
        return True
    return "Mozilla" in user_agent and "application/json" not in accept


async def mcp_get(request: Request) -> Response:
    """Landing page for browsers; everyone else is told to POST."""
    if wants_html(request):
        return HTMLResponse(load_landing_page())
    return JSONResponse(
        jsonrpc_error(-32601, "This server operates in stateless mode. Use POST requests only."),
        status_code=405,
        headers={"Allow": "POST"},
    )


async def mcp_delete(request: Request) -> Response:
    return JSONResponse(
        {
            "jsonrpc": "2.0",
            "result": {"message": "Stateless mode - no session to terminate"},
            "id": None,
        }
    )


async def health(request: Request) -> Response:
    settings: Settings = request.app.state.settings
    summary = oauth_summary(settings)
    return JSONResponse(
        {
            "status": "ok",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "server": HTTP_SERVER_NAME,
            "version": __version__,
            "mode": "stateless",
            "oauth": {
                "enabled": summary["enabled"],
                "authorizationServer": summary["authorizationServer"],
                "protectedResource": summary["protectedResource"],
            },
        }
    )


async def protected_resource(request: Request) -> Response:
    return JSONResponse(
        protected_resource_metadata(request.app.state.settings),
        headers={"Cache-Control": DISCOVERY_CACHE_CONTROL},
    )


async def authorization_server(request: Request) -> Response:
    return JSONResponse(
        authorization_server_metadata(request.app.state.settings),
        headers={"Cache-Control": DISCOVERY_CACHE_CONTROL},
    )


async def list_components(request: Request) -> Response:
    origin = request.app.state.settings.component_origin
    return JSONResponse(
        {
            "components": [
                {
                    "name": name,
                    "uri": resource_uri(name),
                    "url": f"{origin}/components/{name}.html",
                }
                for name in COMPONENTS
            ]
        }
    )


async def not_found(request: Request, exc: HTTPException) -> Response:
    settings: Settings = request.app.state.settings
    return JSONResponse(
        {
            "error": "Not found",
            "message": f"Cannot {request.method} {request.url.path}",
            "availableEndpoints": {
                "mcp": f"POST {settings.mcp_endpoint_path}",
                "health": "GET /health",
                "oauthMetadata": "GET /.well-known/oauth-protected-resource",
                "components": "GET /components",
            },
        },
        status_code=404,
    )


class WidgetStaticFiles(StaticFiles):
    """Widget bundle, readable cross-origin by assistant hosts."""

    async def get_response(self, path: str, scope: Scope) -> Response:
        response = await super().get_response(path, scope)
        response.headers["Access-Control-Allow-Origin"] = "*"
        response.headers["Cache-Control"] = "public, max-age=300"
        return response


# =============================================================================
# Application
# =============================================================================


@asynccontextmanager
async def _fatal_lifespan(app: Starlette) -> AsyncIterator[None]:
    install_fatal_handlers(asyncio.get_running_loop())
    yield


def create_app(settings: Optional[Settings] = None, *, fatal_handlers: bool = False) -> Starlette:
    """
    Build the Starlette application.

    Args:
        settings: Server settings; defaults to the process-wide settings.
        fatal_handlers: Exit the process on uncaught errors (production only).
    """
    settings = settings or get_settings()
    path = settings.mcp_endpoint_path

    routes = [
        Route(path, mcp_get, methods=["GET"]),
        Route(path, mcp_delete, methods=["DELETE"]),
        Route(path, StatelessMCPEndpoint(settings), methods=["POST"]),
        Route("/health", health, methods=["GET"]),
        Route("/.well-known/oauth-protected-resource", protected_resource, methods=["GET"]),
        Route("/.well-known/oauth-authorization-server", authorization_server, methods=["GET"]),
        Route("/.well-known/openid-configuration", authorization_server, methods=["GET"]),
        Route("/components", list_components, methods=["GET"]),
        Mount("/components", WidgetStaticFiles(directory=widgets_dir(settings.widgets_dir))),
    ]

    middleware = [
        Middleware(
            CORSMiddleware,
            allow_origins=ALLOWED_ORIGINS,
            allow_origin_regex=ALLOWED_ORIGIN_REGEX,
            allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
            allow_headers=["*"],
            allow_credentials=True,
            expose_headers=["mcp-session-id", "WWW-Authenticate"],
        )
    ]

    app = Starlette(
        routes=routes,
        middleware=middleware,
        exception_handlers={404: not_found},
        lifespan=_fatal_lifespan if fatal_handlers else None,
    )
    app.state.settings = settings
    return app


def main() -> None:
    """Run the stateless HTTP server with uvicorn."""
    settings = get_settings()
    configure_logging(settings.log_level)

    logger.info("Timesheet MCP HTTP server %s starting", __version__)
    logger.info("  Endpoint:  http://%s:%d%s", settings.host, settings.port, settings.mcp_endpoint_path)
    logger.info("  Public:    %s", settings.public_url)
    logger.info("  API:       %s", settings.timesheet_api_url)
    if settings.timesheet_api_token:
        logger.info("  Auth:      OAuth bearer token, falling back to TIMESHEET_API_TOKEN")
    else:
        logger.info("  Auth:      OAuth bearer token")

    app = create_app(settings, fatal_handlers=True)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
