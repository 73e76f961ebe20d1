"""
Timesheet API Client.

TimesheetClient is the only way the MCP tools talk to the Timesheet API.
Credentials are resolved per server instance by resolve_credentials().
"""

from timesheet_mcp.client.auth import AUTH_REQUIRED_MESSAGE, Credentials, resolve_credentials
from timesheet_mcp.client.client import REPORT_KINDS, TimesheetClient

__all__ = [
    "AUTH_REQUIRED_MESSAGE",
    "Credentials",
    "REPORT_KINDS",
    "TimesheetClient",
    "resolve_credentials",
]
