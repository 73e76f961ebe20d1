"""Time entry (task) tools."""

from __future__ import annotations

import asyncio
import logging

from mcp import types

from timesheet_mcp.tools.context import ToolContext
from timesheet_mcp.tools.formatting import (
    format_task_card_response,
    format_task_list_response,
    handle_api_error,
    json_resource,
    success_result,
    tool_result,
)
from timesheet_mcp.tools.inputs import (
    TaskCreateInput,
    TaskIdInput,
    TaskListInput,
    TaskUpdateInput,
)
from timesheet_mcp.tools.outputs import (
    DeletedOutput,
    TaskListOutput,
    TaskOutput,
    TaskUpdatedOutput,
)
from timesheet_mcp.tools.registry import tool

logger = logging.getLogger(__name__)


@tool(
    name="task_list",
    annotations={
        "title": "List Time Entries",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
    output=TaskListOutput,
    widget="TaskList",
)
async def task_list(params: TaskListInput, ctx: ToolContext) -> types.CallToolResult:
    """
    List time entries with optional filters.

    Args:
        params:
            - startDate / endDate (str): Date range (YYYY-MM-DD)
            - projectId / projectIds / teamId / teamIds: Scope filters
            - filter (str): 'all', 'billable', 'notBillable', 'paid', 'unpaid',
              'billed', 'outstanding'
            - type (str): 'all', 'task', 'mileage', 'call'
            - running (bool): Only the running entry
            - sort (str): 'dateTime', 'time' or 'created'
            - order (str): 'asc' or 'desc'
            - limit / page (int): Pagination
            - populateTags (bool): Include tags (default true)

    Examples:
        - This week's billable time: startDate="2025-01-13", endDate="2025-01-19", filter="billable"
        - One project: projectId="abc123"
    """
    client = ctx.get_client()
    try:
        query = params.to_api()
        page, (profile, settings) = await asyncio.gather(
            client.search_tasks(query),
            ctx.get_profile_and_settings(),
        )
        return format_task_list_response(
            page.items, query, profile, settings, total_count=page.total_count
        )
    except Exception as e:
        return handle_api_error(e, "task_list")


@tool(
    name="task_get",
    annotations={
        "title": "Get Time Entry",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
    output=TaskOutput,
    widget="TaskCard",
)
async def task_get(params: TaskIdInput, ctx: ToolContext) -> types.CallToolResult:
    """Get a single time entry by ID."""
    client = ctx.get_client()
    try:
        task = await client.get_task(params.id)
        return format_task_card_response(task)
    except Exception as e:
        return handle_api_error(e, "task_get")


@tool(
    name="task_create",
    annotations={
        "title": "Create Time Entry",
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": False,
        "openWorldHint": True,
    },
    output=TaskOutput,
)
async def task_create(params: TaskCreateInput, ctx: ToolContext) -> types.CallToolResult:
    """
    Create a time entry after the fact.

    Args:
        params:
            - projectId (str): Project (required)
            - startDateTime (str): ISO 8601 start (required)
            - endDateTime (str): ISO 8601 end
            - description (str): What was done
            - billable (bool): Billable flag
    """
    client = ctx.get_client()
    try:
        task = await client.create_task(params.to_api())
        return tool_result(
            f"Task created (ID: {task.id})",
            {"id": task.id, "duration": task.duration},
            extra_content=[
                json_resource(f"timesheet://task/{task.id}", task.to_dict(), priority=0.9)
            ],
        )
    except Exception as e:
        return handle_api_error(e, "task_create")


@tool(
    name="task_update",
    annotations={
        "title": "Update Time Entry",
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
    output=TaskUpdatedOutput,
)
async def task_update(params: TaskUpdateInput, ctx: ToolContext) -> types.CallToolResult:
    """
    Update a time entry.

    Only the fields provided are changed.
    """
    client = ctx.get_client()
    try:
        task = await client.update_task(params.id, params.to_api(exclude={"id"}))
        return success_result("Task updated successfully", id=task.id or params.id)
    except Exception as e:
        return handle_api_error(e, "task_update")


@tool(
    name="task_delete",
    annotations={
        "title": "Delete Time Entry",
        "readOnlyHint": False,
        "destructiveHint": True,
        "idempotentHint": True,
        "openWorldHint": True,
    },
    output=DeletedOutput,
)
async def task_delete(params: TaskIdInput, ctx: ToolContext) -> types.CallToolResult:
    """
    Permanently delete a time entry.

    WARNING: This cannot be undone.
    """
    client = ctx.get_client()
    try:
        await client.delete_task(params.id)
        return success_result(f"Task {params.id} deleted successfully", deletedId=params.id)
    except Exception as e:
        return handle_api_error(e, "task_delete")
