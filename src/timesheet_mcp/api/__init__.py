"""HTTP transport layer for the Timesheet API."""

from timesheet_mcp.api.base import TimesheetTransport, compact, raise_for_status

__all__ = ["TimesheetTransport", "compact", "raise_for_status"]
