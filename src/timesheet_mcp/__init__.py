"""
Timesheet MCP Server - time tracking tools for AI assistants.

This package provides a Model Context Protocol (MCP) server for the
Timesheet API. It runs over stdio for local use, or as a stateless HTTP
service that forwards each caller's OAuth bearer token upstream.

Architecture:
    MCP Transport (stdio | stateless HTTP)
         │
         ▼
    TimesheetMCPServer (tool registry, widget resources)
         │
         ▼
    Tool Handlers ──► Formatters / Statistics
         │
         ▼
    TimesheetClient ──► httpx transport ──► Timesheet REST API
"""

__version__ = "1.0.3"
__author__ = "Timesheet MCP Contributors"

from timesheet_mcp.exceptions import (
    TimesheetError,
    TimesheetAuthenticationError,
    TimesheetAPIError,
    TimesheetRateLimitError,
    TimesheetNotFoundError,
)

__all__ = [
    "__version__",
    "TimesheetError",
    "TimesheetAuthenticationError",
    "TimesheetAPIError",
    "TimesheetRateLimitError",
    "TimesheetNotFoundError",
]
