"""Authentication tool for stdio sessions that were started without an API key."""

from __future__ import annotations

import logging

from mcp import types

from timesheet_mcp.tools.context import ToolContext
from timesheet_mcp.tools.formatting import handle_api_error, success_result
from timesheet_mcp.tools.inputs import AuthConfigureInput
from timesheet_mcp.tools.outputs import SuccessOutput
from timesheet_mcp.tools.registry import tool

logger = logging.getLogger(__name__)


@tool(
    name="auth_configure",
    annotations={
        "title": "Configure Authentication",
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": False,
    },
    output=SuccessOutput,
)
async def auth_configure(params: AuthConfigureInput, ctx: ToolContext) -> types.CallToolResult:
    """
    Configure API key authentication for this session.

    Replaces the current credentials; later tool calls use the given key.

    Args:
        params:
            - apiKey (str): Timesheet API key (required)
            - baseUrl (str): Override for the API base URL
    """
    try:
        await ctx.configure(params.api_key, params.base_url)
        return success_result("Authentication configured successfully")
    except Exception as e:
        return handle_api_error(e, "auth_configure")
