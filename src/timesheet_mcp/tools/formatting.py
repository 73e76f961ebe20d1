"""
Response formatters for MCP tools.

Each formatter turns a domain object into a CallToolResult carrying both a
plain-text summary (for text-only MCP clients) and structured content (for
widget-capable hosts). Widget-backed responses also carry ``_meta`` that
points the host at the matching ``ui://`` resource.

Formatters substitute neutral defaults for missing optional fields and never
raise for them.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Optional, Sequence

from mcp import types

from timesheet_mcp.exceptions import TimesheetAPIError
from timesheet_mcp.models import (
    ExportTemplate,
    Project,
    StatisticsResult,
    Task,
    Timer,
)
from timesheet_mcp.statistics import round_half_up
from timesheet_mcp.widgets import WidgetMetadata, widget_description

logger = logging.getLogger(__name__)

DAILY_LINES_LIMIT = 14
TEMPLATE_LINES_LIMIT = 10


# =============================================================================
# Generic Helpers
# =============================================================================


def duration_hm(seconds: Optional[int]) -> str:
    """Format seconds as ``"Hh Mm"``."""
    seconds = seconds or 0
    return f"{seconds // 3600}h {(seconds % 3600) // 60}m"


def plural(count: int, singular: str, plural_form: Optional[str] = None) -> str:
    if count == 1:
        return singular
    return plural_form or f"{singular}s"


def text_content(text: str) -> types.TextContent:
    return types.TextContent(type="text", text=text)


def json_resource(uri: str, data: dict[str, Any], priority: float) -> types.EmbeddedResource:
    """Embed an entity as a JSON resource both the user and assistant can see."""
    return types.EmbeddedResource(
        type="resource",
        resource=types.TextResourceContents(
            uri=uri,
            mimeType="application/json",
            text=json.dumps(data, indent=2, default=str),
        ),
        annotations=types.Annotations(audience=["user", "assistant"], priority=priority),
    )


def tool_result(
    text: str,
    structured: Optional[dict[str, Any]] = None,
    *,
    extra_content: Sequence[types.EmbeddedResource] = (),
    widget: Optional[WidgetMetadata] = None,
) -> types.CallToolResult:
    """Build a successful tool result."""
    meta = None
    if widget is not None:
        meta = widget.to_meta()
        logger.debug(
            "Attaching widget %s (%s) to response", widget.component, widget.resource_uri
        )
    return types.CallToolResult(
        content=[text_content(text), *extra_content],
        structuredContent=structured,
        _meta=meta,
    )


def success_result(text: str, **structured: Any) -> types.CallToolResult:
    return tool_result(text, {"success": True, **structured})


def error_result(message: str) -> types.CallToolResult:
    """A non-fatal error the assistant can read and relay."""
    return types.CallToolResult(content=[text_content(message)], isError=True)


def api_error_message(error: BaseException) -> str:
    """``API Error (<status>): <message>``, omitting the status when unknown."""
    status = getattr(error, "status_code", None)
    if isinstance(error, TimesheetAPIError):
        message = error.message or "Unknown error"
    else:
        message = str(error) or "Unknown error"
    prefix = f"API Error ({status})" if status else "API Error"
    return f"{prefix}: {message}"


def handle_api_error(e: Exception, operation: str) -> types.CallToolResult:
    """Log a handler failure and turn it into an ``isError`` result."""
    logger.exception("Error in %s: %s", operation, e)
    return error_result(api_error_message(e))


def with_widget(component: str, description: Optional[str] = None) -> WidgetMetadata:
    return WidgetMetadata(
        component=component,
        widget_description=description or widget_description(component),
    )


# =============================================================================
# Timer
# =============================================================================


def timer_data(timer: Timer) -> dict[str, Any]:
    """Flatten a Timer into the payload the timer widget expects."""
    duration = timer.task.duration if timer.task else 0
    data: dict[str, Any] = {
        "status": timer.status,
        "duration": duration,
        "hours": duration // 3600,
        "minutes": (duration % 3600) // 60,
    }
    if timer.task is not None:
        data["task"] = timer.task.model_dump(
            mode="json",
            by_alias=True,
            exclude_none=True,
            include={
                "id", "start_date_time", "end_date_time", "description", "duration",
                "duration_break", "type_id", "location", "location_end", "distance",
                "phone_number", "billable", "project",
            },
        )
    if timer.pause is not None:
        data["pause"] = timer.pause.model_dump(
            mode="json",
            by_alias=True,
            exclude_none=True,
            include={"id", "start_date_time", "end_date_time", "description"},
        )
    return data


def format_timer_response(
    timer: Timer,
    profile: Optional[dict[str, Any]] = None,
    settings: Optional[dict[str, Any]] = None,
) -> types.CallToolResult:
    data = timer_data(timer)
    lines = [f"Timer status: {timer.status}"]
    if timer.task is not None:
        if timer.task.project_title:
            lines.append(f"Project: {timer.task.project_title}")
        if timer.task.description:
            lines.append(f"Description: {timer.task.description}")
    if data["duration"]:
        lines.append(f"Duration: {data['hours']}h {data['minutes']}m")

    return tool_result(
        "\n".join(lines),
        {**data, "profile": profile, "settings": settings},
        widget=with_widget(
            "TimerWidget",
            "Interactive timer display showing current status, duration, and controls "
            "to pause, resume, or stop the timer",
        ),
    )


# =============================================================================
# Projects
# =============================================================================


def project_summary(project: Project) -> dict[str, Any]:
    return {
        "id": project.id,
        "title": project.title,
        "description": project.description,
        "archived": project.archived,
        "color": project.color,
        "employer": project.employer,
        "duration": project.duration,
    }


def format_project_list_response(
    projects: Sequence[Project],
    total_count: int,
    query_params: Optional[dict[str, Any]] = None,
    profile: Optional[dict[str, Any]] = None,
    settings: Optional[dict[str, Any]] = None,
) -> types.CallToolResult:
    lines = []
    for project in projects:
        line = f"- {project.display_title}"
        if project.description:
            line += f" - {project.description}"
        if project.archived:
            line += " [Archived]"
        lines.append(line)

    text = f"Found {total_count} {plural(total_count, 'project')}:\n\n" + "\n".join(lines)
    structured = {
        "projects": [project_summary(p) for p in projects],
        "totalCount": total_count,
        "queryParams": {k: v for k, v in (query_params or {}).items() if v is not None},
        "profile": profile,
        "settings": settings,
    }
    return tool_result(
        text,
        structured,
        widget=with_widget(
            "ProjectList",
            f"List of {total_count} projects with color-coded indicators and clickable "
            "start buttons for each active project",
        ),
    )


def format_project_card_response(project: Project) -> types.CallToolResult:
    lines = [f"Project: {project.display_title}"]
    if project.description:
        lines.append(f"Description: {project.description}")
    if project.archived:
        lines.append("Status: Archived")

    return tool_result(
        "\n".join(lines),
        project.to_dict(),
        widget=with_widget(
            "ProjectCard",
            f'Project card displaying details for "{project.title or "project"}" '
            "including description and status",
        ),
    )


# =============================================================================
# Tasks
# =============================================================================


def task_summary(task: Task) -> dict[str, Any]:
    data = task.model_dump(
        mode="json",
        by_alias=True,
        exclude_none=True,
        include={
            "id", "description", "duration", "duration_break", "start_date_time",
            "end_date_time", "billable", "paid", "billed", "tags", "project",
        },
    )
    data["hours"] = task.hours
    data["minutes"] = task.minutes
    return data


def format_task_list_response(
    tasks: Sequence[Task],
    query_params: Optional[dict[str, Any]] = None,
    profile: Optional[dict[str, Any]] = None,
    settings: Optional[dict[str, Any]] = None,
    total_count: Optional[int] = None,
) -> types.CallToolResult:
    lines = []
    for task in tasks:
        line = f"- {task.description or 'No description'} ({duration_hm(task.duration)})"
        if task.project_title:
            line += f" - {task.project_title}"
        lines.append(line)

    count = len(tasks)
    text = f"Found {count} time {plural(count, 'entry', 'entries')}:\n\n" + "\n".join(lines)
    structured = {
        "tasks": [task_summary(t) for t in tasks],
        "totalCount": total_count if total_count is not None else count,
        "queryParams": {k: v for k, v in (query_params or {}).items() if v is not None},
        "profile": profile,
        "settings": settings,
    }
    return tool_result(
        text,
        structured,
        widget=with_widget(
            "TaskList",
            f"List of {count} time entries grouped by date, showing project details, "
            "durations, tags, and billable status",
        ),
    )


def format_task_card_response(task: Task) -> types.CallToolResult:
    hm = duration_hm(task.duration)
    text = f"Task: {task.description or 'No description'} ({hm})"
    if task.project_title:
        text += f" - {task.project_title}"

    description = f'Time entry card showing "{task.description or "task"}" with {hm} duration'
    if task.project_title:
        description += f" on {task.project_title}"

    return tool_result(
        text,
        {**task.to_dict(), "hours": task.hours, "minutes": task.minutes},
        widget=with_widget("TaskCard", description),
    )


# =============================================================================
# Statistics
# =============================================================================


def format_statistics_response(
    stats: StatisticsResult,
    profile: Optional[dict[str, Any]] = None,
    settings: Optional[dict[str, Any]] = None,
) -> types.CallToolResult:
    lines = [f"Period: {stats.start_date} to {stats.end_date}"]

    billable_pct = (
        round_half_up(stats.billable_hours / stats.total_hours * 100) if stats.total_hours > 0 else 0
    )
    lines.append(
        f"Total: {stats.total_hours:.1f}h | Billable: {stats.billable_hours:.1f}h "
        f"({billable_pct}%) | Tasks: {stats.total_tasks}"
    )
    if stats.total_break_hours > 0:
        lines.append(f"Breaks: {stats.total_break_hours:.1f}h")

    if stats.project_breakdown:
        lines.append("")
        lines.append("Project Breakdown:")
        for p in stats.project_breakdown:
            lines.append(
                f"  - {p.project_title}: {p.hours:.1f}h ({p.percentage}%, {p.task_count} tasks)"
            )

    if stats.daily_hours:
        lines.append("")
        lines.append("Daily Hours:")
        for d in stats.daily_hours[:DAILY_LINES_LIMIT]:
            lines.append(f"  - {d.date}: {d.hours:.1f}h")
        if len(stats.daily_hours) > DAILY_LINES_LIMIT:
            lines.append(f"  ... and {len(stats.daily_hours) - DAILY_LINES_LIMIT} more days")

    if stats.truncated:
        lines.append("")
        lines.append(
            f"Note: results include only the first {stats.total_tasks} tasks; "
            "narrow the date range for complete figures."
        )

    description = (
        f"Time tracking statistics dashboard showing {stats.total_hours:.1f}h total "
        f"({stats.billable_hours:.1f}h billable) across {stats.total_tasks} tasks with "
        f"project breakdowns and {'weekly' if stats.weekly_hours else 'daily'} charts"
    )
    return tool_result(
        "\n".join(lines),
        {**stats.to_dict(), "profile": profile, "settings": settings},
        widget=with_widget("Statistics", description),
    )


# =============================================================================
# Export Templates
# =============================================================================


def format_export_template_list_response(
    templates: Sequence[ExportTemplate],
    total_count: int,
) -> types.CallToolResult:
    lines = []
    for template in templates[:TEMPLATE_LINES_LIMIT]:
        line = f"- {template.name or 'Untitled'}"
        if template.format:
            line += f" [{template.format.upper()}]"
        if template.summarize:
            line += " (summarized)"
        lines.append(line)

    text = (
        f"Found {total_count} export {plural(total_count, 'template')}:\n\n"
        + ("\n".join(lines) or "No templates found")
    )
    if total_count > TEMPLATE_LINES_LIMIT:
        text += "\n...and more"

    return tool_result(
        text,
        {"templates": [t.to_dict() for t in templates], "totalCount": total_count},
        widget=with_widget(
            "ExportWidget",
            f"Export widget with {total_count} {plural(total_count, 'template')} available "
            "for generating timesheet exports",
        ),
    )
