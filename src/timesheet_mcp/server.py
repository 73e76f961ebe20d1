#!/usr/bin/env python3
"""
Timesheet MCP Server.

This server exposes the Timesheet time tracking API as MCP tools, and
bundles HTML widgets as ``ui://`` resources for hosts that can render them.

Features:
    - Timer control (start, stop, pause, resume, status, update)
    - Notes, expenses and breaks on the running entry
    - Projects, teams and time entries (CRUD)
    - Reports and PDF / XML generation
    - Exports and export templates
    - Statistics with project breakdowns and daily / weekly series

Environment Variables:
    TIMESHEET_API_TOKEN   API key used for stdio sessions
    TIMESHEET_API_URL     API base URL (default https://api.timesheet.io)
    LOG_LEVEL             Logging level (default INFO)
"""

from __future__ import annotations

import asyncio
import logging
import os
import sys
from typing import Any, Optional

import anyio
from mcp import types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server
from mcp.shared.exceptions import McpError
from pydantic import ValidationError

from timesheet_mcp import __version__
from timesheet_mcp.client import TimesheetClient
from timesheet_mcp.settings import Settings, get_settings
from timesheet_mcp.tools import ToolContext, registry
from timesheet_mcp.widgets import (
    COMPONENTS,
    RESOURCE_MIME_TYPE,
    WidgetMetadata,
    WidgetNotFoundError,
    load_widget_html,
    parse_resource_uri,
    resource_uri,
    widget_description,
)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

SERVER_NAME = "timesheet-mcp"
INSTRUCTIONS = (
    "Timesheet time tracking. Use timer_* tools to track time live, task_* tools "
    "to manage recorded entries, project_* and team_list to browse projects, "
    "statistics_get for summaries and export_* tools for reports."
)

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    """Log to stderr so stdio transport output is never corrupted."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        stream=sys.stderr,
    )


def _mcp_error(code: int, message: str) -> McpError:
    return McpError(types.ErrorData(code=code, message=message))


# =============================================================================
# Fatal Error Handling
# =============================================================================


def _fatal_excepthook(exc_type, exc_value, exc_tb) -> None:
    logger.critical("Uncaught exception", exc_info=(exc_type, exc_value, exc_tb))
    logging.shutdown()
    os._exit(1)


def _fatal_loop_handler(loop: asyncio.AbstractEventLoop, context: dict[str, Any]) -> None:
    exc = context.get("exception")
    logger.critical(
        "Unhandled error in event loop: %s",
        context.get("message", "unknown error"),
        exc_info=exc,
    )
    logging.shutdown()
    os._exit(1)


def install_fatal_handlers(loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
    """Exit the process on any uncaught exception; the supervisor restarts it."""
    sys.excepthook = _fatal_excepthook
    if loop is not None:
        loop.set_exception_handler(_fatal_loop_handler)


# =============================================================================
# Server
# =============================================================================


class TimesheetMCPServer:
    """
    One MCP server instance bound to one set of credentials.

    The stdio entry point creates a single instance for the life of the
    process; the HTTP transport creates one per request, passing the
    caller's bearer token.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        oauth_token: Optional[str] = None,
        client: Optional[TimesheetClient] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.context = ToolContext(self.settings, oauth_token=oauth_token, client=client)
        self.server: Server = Server(SERVER_NAME, version=__version__, instructions=INSTRUCTIONS)
        self._register_handlers()

    def _register_handlers(self) -> None:
        @self.server.list_tools()
        async def list_tools() -> list[types.Tool]:
            return registry.list_tools()

        @self.server.list_resources()
        async def list_resources() -> list[types.Resource]:
            return self.list_resources()

        async def call_tool(req: types.CallToolRequest) -> types.ServerResult:
            result = await self.dispatch(req.params.name, req.params.arguments)
            return types.ServerResult(result)

        async def read_resource(req: types.ReadResourceRequest) -> types.ServerResult:
            return types.ServerResult(self.read_resource(str(req.params.uri)))

        self.server.request_handlers[types.CallToolRequest] = call_tool
        self.server.request_handlers[types.ReadResourceRequest] = read_resource

    async def dispatch(
        self, name: str, arguments: Optional[dict[str, Any]] = None
    ) -> types.CallToolResult:
        """
        Validate ``arguments`` and run the named tool.

        Raises:
            McpError: METHOD_NOT_FOUND for an unknown tool, INVALID_PARAMS for
                bad arguments, INTERNAL_ERROR for anything the handler did not
                turn into an error result itself (such as missing credentials).
        """
        definition = registry.get(name)
        if definition is None:
            raise _mcp_error(types.METHOD_NOT_FOUND, f"Unknown tool: {name}")

        try:
            params = definition.input_model.model_validate(arguments or {})
        except ValidationError as e:
            raise _mcp_error(types.INVALID_PARAMS, f"Invalid arguments for {name}: {e}")

        logger.info("Calling tool %s", name)
        try:
            return await definition.handler(params, self.context)
        except McpError:
            raise
        except Exception as e:
            logger.error("Tool %s failed: %s", name, e)
            raise _mcp_error(types.INTERNAL_ERROR, f"Error executing tool: {e}")

    def list_resources(self) -> list[types.Resource]:
        return [
            types.Resource(
                uri=resource_uri(component),
                name=component,
                description=widget_description(component),
                mimeType=RESOURCE_MIME_TYPE,
                _meta=WidgetMetadata(component, widget_description(component)).to_meta(),
            )
            for component in COMPONENTS
        ]

    def read_resource(self, uri: str) -> types.ReadResourceResult:
        """
        Return the widget HTML addressed by ``uri``.

        Raises:
            McpError: INVALID_REQUEST for a malformed URI or unknown component,
                INTERNAL_ERROR when the widget file cannot be read.
        """
        try:
            component = parse_resource_uri(uri)
        except WidgetNotFoundError as e:
            raise _mcp_error(types.INVALID_REQUEST, str(e))

        try:
            html = load_widget_html(component, self.settings.widgets_dir)
        except OSError as e:
            logger.error("Failed to load widget %s: %s", component, e)
            raise _mcp_error(types.INTERNAL_ERROR, f"Failed to load widget {component}: {e}")

        return types.ReadResourceResult(
            contents=[
                types.TextResourceContents(
                    uri=uri,
                    mimeType=RESOURCE_MIME_TYPE,
                    text=html,
                    _meta=WidgetMetadata(component, widget_description(component)).to_meta(),
                )
            ]
        )

    async def aclose(self) -> None:
        await self.context.close()

    async def run_stdio(self) -> None:
        install_fatal_handlers(asyncio.get_running_loop())
        logger.info("Starting Timesheet MCP server %s over stdio", __version__)
        try:
            async with stdio_server() as (read_stream, write_stream):
                await self.server.run(
                    read_stream,
                    write_stream,
                    self.server.create_initialization_options(),
                )
        finally:
            await self.aclose()


# =============================================================================
# Entry Point
# =============================================================================


def main() -> None:
    """Run the MCP server over stdio."""
    settings = get_settings()
    configure_logging(settings.log_level)
    if not settings.timesheet_api_token:
        logger.warning(
            "TIMESHEET_API_TOKEN is not set; tools will fail until auth_configure is called"
        )
    anyio.run(TimesheetMCPServer(settings).run_stdio)


if __name__ == "__main__":
    main()
