"""
Statistics tool.

Fetches every time entry in the requested range, page by page, and
aggregates them locally. Paging stops at ``statistics_max_pages``; a result
built from a capped fetch is flagged as truncated.
"""

from __future__ import annotations

import asyncio
import logging

from mcp import types

from timesheet_mcp.client import TimesheetClient
from timesheet_mcp.models import Task
from timesheet_mcp.settings import Settings
from timesheet_mcp.statistics import compute_statistics
from timesheet_mcp.tools.context import ToolContext
from timesheet_mcp.tools.formatting import format_statistics_response, handle_api_error
from timesheet_mcp.tools.inputs import StatisticsGetInput
from timesheet_mcp.tools.outputs import StatisticsOutput
from timesheet_mcp.tools.registry import tool

logger = logging.getLogger(__name__)


async def fetch_all_tasks(
    client: TimesheetClient,
    params: StatisticsGetInput,
    settings: Settings,
) -> tuple[list[Task], bool]:
    """
    Page through tasks matching ``params``.

    Returns:
        The tasks and whether the page cap cut the fetch short.
    """
    page_size = settings.statistics_page_size
    query = {
        **params.to_api(),
        "limit": page_size,
        "populateTags": False,
    }

    tasks: list[Task] = []
    for page_number in range(1, settings.statistics_max_pages + 1):
        page = await client.search_tasks({**query, "page": page_number})
        tasks.extend(page.items)
        if len(page.items) < page_size:
            return tasks, False

    logger.warning(
        "Statistics for %s..%s stopped after %d pages (%d tasks); results are partial",
        params.start_date,
        params.end_date,
        settings.statistics_max_pages,
        len(tasks),
    )
    return tasks, True


@tool(
    name="statistics_get",
    annotations={
        "title": "Get Statistics",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
    output=StatisticsOutput,
    widget="Statistics",
)
async def statistics_get(params: StatisticsGetInput, ctx: ToolContext) -> types.CallToolResult:
    """
    Get time tracking statistics for a date range.

    Returns total, billable and break hours, a per-project breakdown and a
    daily series (plus a weekly series for ranges longer than two weeks).

    Args:
        params:
            - startDate / endDate (str): Date range, YYYY-MM-DD (required)
            - projectId / projectIds / teamId / teamIds: Scope filters
            - tagIds / userIds: Further filters
            - filter (str): Billing filter

    Examples:
        - This month: startDate="2025-01-01", endDate="2025-01-31"
        - One project this week: startDate="2025-01-13", endDate="2025-01-19", projectId="abc123"
    """
    client = ctx.get_client()
    try:
        (tasks, truncated), (profile, settings) = await asyncio.gather(
            fetch_all_tasks(client, params, ctx.settings),
            ctx.get_profile_and_settings(),
        )
        stats = compute_statistics(tasks, params.start_date, params.end_date, params.filters())
        stats.truncated = truncated
        return format_statistics_response(stats, profile, settings)
    except Exception as e:
        return handle_api_error(e, "statistics_get")
