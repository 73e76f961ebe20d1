"""
Timer tools and the task enhancement tools that act on the running entry.

Every timer tool fetches the user's profile and settings alongside the
primary call so the timer widget can render locale-aware output.
"""

from __future__ import annotations

import asyncio
import logging

from mcp import types

from timesheet_mcp.tools.context import ToolContext
from timesheet_mcp.tools.formatting import (
    error_result,
    format_timer_response,
    handle_api_error,
    success_result,
)
from timesheet_mcp.tools.inputs import (
    EmptyInput,
    TaskAddExpenseInput,
    TaskAddNoteInput,
    TaskAddPauseInput,
    TimerPauseInput,
    TimerResumeInput,
    TimerStartInput,
    TimerStopInput,
    TimerUpdateInput,
    parse_iso_datetime,
)
from timesheet_mcp.tools.outputs import (
    ExpenseAddedOutput,
    NoteAddedOutput,
    PauseAddedOutput,
    TimerOutput,
)
from timesheet_mcp.tools.registry import tool

logger = logging.getLogger(__name__)

NO_RUNNING_TIMER = "No running timer found. Please start a timer first."


# =============================================================================
# Timer Tools
# =============================================================================


@tool(
    name="timer_start",
    annotations={
        "title": "Start Timer",
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": False,
        "openWorldHint": True,
    },
    output=TimerOutput,
    widget="TimerWidget",
)
async def timer_start(params: TimerStartInput, ctx: ToolContext) -> types.CallToolResult:
    """
    Start the timer for a project.

    Begins tracking time on the given project. Only one timer runs at a time.

    Args:
        params:
            - projectId (str): Project to track time against (required)
            - startDateTime (str): ISO 8601 start time, defaults to now
    """
    client = ctx.get_client()
    try:
        timer, (profile, settings) = await asyncio.gather(
            client.start_timer(params.project_id, params.start_date_time),
            ctx.get_profile_and_settings(),
        )
        return format_timer_response(timer, profile, settings)
    except Exception as e:
        return handle_api_error(e, "timer_start")


@tool(
    name="timer_stop",
    annotations={
        "title": "Stop Timer",
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": False,
        "openWorldHint": True,
    },
    output=TimerOutput,
    widget="TimerWidget",
)
async def timer_stop(params: TimerStopInput, ctx: ToolContext) -> types.CallToolResult:
    """
    Stop the running timer and save the time entry.

    Args:
        params:
            - endDateTime (str): ISO 8601 end time, defaults to now
    """
    client = ctx.get_client()
    try:
        timer, (profile, settings) = await asyncio.gather(
            client.stop_timer(params.end_date_time),
            ctx.get_profile_and_settings(),
        )
        return format_timer_response(timer, profile, settings)
    except Exception as e:
        return handle_api_error(e, "timer_stop")


@tool(
    name="timer_pause",
    annotations={
        "title": "Pause Timer",
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": False,
        "openWorldHint": True,
    },
    output=TimerOutput,
    widget="TimerWidget",
)
async def timer_pause(params: TimerPauseInput, ctx: ToolContext) -> types.CallToolResult:
    """
    Pause the running timer, starting a break.

    Args:
        params:
            - startDateTime (str): ISO 8601 break start, defaults to now
    """
    client = ctx.get_client()
    try:
        timer, (profile, settings) = await asyncio.gather(
            client.pause_timer(params.start_date_time),
            ctx.get_profile_and_settings(),
        )
        return format_timer_response(timer, profile, settings)
    except Exception as e:
        return handle_api_error(e, "timer_pause")


@tool(
    name="timer_resume",
    annotations={
        "title": "Resume Timer",
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": False,
        "openWorldHint": True,
    },
    output=TimerOutput,
    widget="TimerWidget",
)
async def timer_resume(params: TimerResumeInput, ctx: ToolContext) -> types.CallToolResult:
    """
    Resume a paused timer, ending the current break.

    Args:
        params:
            - endDateTime (str): ISO 8601 break end, defaults to now
    """
    client = ctx.get_client()
    try:
        timer, (profile, settings) = await asyncio.gather(
            client.resume_timer(params.end_date_time),
            ctx.get_profile_and_settings(),
        )
        return format_timer_response(timer, profile, settings)
    except Exception as e:
        return handle_api_error(e, "timer_resume")


@tool(
    name="timer_status",
    annotations={
        "title": "Timer Status",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
    output=TimerOutput,
    widget="TimerWidget",
)
async def timer_status(params: EmptyInput, ctx: ToolContext) -> types.CallToolResult:
    """
    Get the current timer status.

    Returns whether the timer is running, paused or stopped, together with
    the tracked task and elapsed duration.
    """
    client = ctx.get_client()
    try:
        timer, (profile, settings) = await asyncio.gather(
            client.get_timer(),
            ctx.get_profile_and_settings(),
        )
        return format_timer_response(timer, profile, settings)
    except Exception as e:
        return handle_api_error(e, "timer_status")


@tool(
    name="timer_update",
    annotations={
        "title": "Update Timer",
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
    output=TimerOutput,
    widget="TimerWidget",
)
async def timer_update(params: TimerUpdateInput, ctx: ToolContext) -> types.CallToolResult:
    """
    Update the time entry the timer is tracking.

    Args:
        params:
            - description (str): What is being worked on
            - location / locationEnd (str): Start and end locations
            - feeling (int): Mood rating 1-5
            - billable (bool): Billable flag
            - tags (list): Tag IDs
    """
    client = ctx.get_client()
    try:
        timer, (profile, settings) = await asyncio.gather(
            client.update_timer(params.to_api()),
            ctx.get_profile_and_settings(),
        )
        return format_timer_response(timer, profile, settings)
    except Exception as e:
        return handle_api_error(e, "timer_update")


# =============================================================================
# Task Enhancement Tools
# =============================================================================


@tool(
    name="task_add_note",
    annotations={
        "title": "Add Note to Running Task",
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": False,
        "openWorldHint": True,
    },
    output=NoteAddedOutput,
)
async def task_add_note(params: TaskAddNoteInput, ctx: ToolContext) -> types.CallToolResult:
    """
    Add a note to the task the timer is currently tracking.

    Requires a running or paused timer.

    Args:
        params:
            - text (str): Note text (required)
            - dateTime (str): ISO 8601 timestamp, defaults to now
    """
    client = ctx.get_client()
    try:
        timer = await client.get_timer()
        if not timer.is_active or not timer.task.id:
            return error_result(NO_RUNNING_TIMER)

        await client.create_note(timer.task.id, params.text, params.date_time)
        return success_result(
            f'Note added to current task: "{params.text}"',
            noteText=params.text,
        )
    except Exception as e:
        return handle_api_error(e, "task_add_note")


@tool(
    name="task_add_expense",
    annotations={
        "title": "Add Expense to Running Task",
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": False,
        "openWorldHint": True,
    },
    output=ExpenseAddedOutput,
)
async def task_add_expense(params: TaskAddExpenseInput, ctx: ToolContext) -> types.CallToolResult:
    """
    Add an expense to the task the timer is currently tracking.

    Requires a running or paused timer.

    Args:
        params:
            - description (str): What the expense was for (required)
            - amount (float): Amount, zero or more (required)
            - dateTime (str): ISO 8601 timestamp, defaults to now
    """
    client = ctx.get_client()
    try:
        timer = await client.get_timer()
        if not timer.is_active or not timer.task.id:
            return error_result(NO_RUNNING_TIMER)

        await client.create_expense(
            timer.task.id, params.description, params.amount, params.date_time
        )
        return success_result(
            f"Expense added: {params.description} - ${params.amount}",
            expenseDescription=params.description,
            amount=params.amount,
        )
    except Exception as e:
        return handle_api_error(e, "task_add_expense")


@tool(
    name="task_add_pause",
    annotations={
        "title": "Add Break to Running Task",
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": False,
        "openWorldHint": True,
    },
    output=PauseAddedOutput,
)
async def task_add_pause(params: TaskAddPauseInput, ctx: ToolContext) -> types.CallToolResult:
    """
    Record a break on the task the timer is currently tracking.

    Requires a running or paused timer.

    Args:
        params:
            - startDateTime (str): ISO 8601 break start (required)
            - endDateTime (str): ISO 8601 break end (required)
            - description (str): Reason for the break
    """
    client = ctx.get_client()
    try:
        timer = await client.get_timer()
        if not timer.is_active or not timer.task.id:
            return error_result(NO_RUNNING_TIMER)

        await client.create_pause(
            timer.task.id,
            params.start_date_time,
            params.end_date_time,
            params.description,
        )
        duration = int(
            (
                parse_iso_datetime(params.end_date_time)
                - parse_iso_datetime(params.start_date_time)
            ).total_seconds()
        )
        return success_result("Pause added to current task", duration=duration)
    except Exception as e:
        return handle_api_error(e, "task_add_pause")
