"""
Timesheet MCP Tools Package.

This package provides all MCP tool definitions for the Timesheet MCP server.
Importing it registers every tool with the shared registry.
Tools are organized into logical groups:
    - Timer tools (start, stop, pause, resume, status, update)
    - Task enhancement tools (notes, expenses, breaks on the running entry)
    - Project and team tools
    - Task (time entry) tools
    - Report tools (documents, tasks, expenses, notes)
    - Export tools (generate, email, templates)
    - Statistics
    - Authentication
"""

from timesheet_mcp.tools import (  # noqa: F401
    auth,
    exports,
    projects,
    reports,
    statistics,
    tasks,
    timer,
)
from timesheet_mcp.tools.context import ToolContext
from timesheet_mcp.tools.registry import ToolDefinition, ToolRegistry, registry, tool

__all__ = [
    "ToolContext",
    "ToolDefinition",
    "ToolRegistry",
    "registry",
    "tool",
]
