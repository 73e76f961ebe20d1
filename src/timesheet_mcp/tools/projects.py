"""Project and team tools."""

from __future__ import annotations

import asyncio
import logging

from mcp import types

from timesheet_mcp.tools.context import ToolContext
from timesheet_mcp.tools.formatting import (
    format_project_card_response,
    format_project_list_response,
    handle_api_error,
    json_resource,
    success_result,
    tool_result,
)
from timesheet_mcp.tools.inputs import (
    ProjectCreateInput,
    ProjectIdInput,
    ProjectListInput,
    ProjectUpdateInput,
    TeamListInput,
)
from timesheet_mcp.tools.outputs import (
    DeletedOutput,
    ProjectListOutput,
    ProjectOutput,
    TeamListOutput,
)
from timesheet_mcp.tools.registry import tool

logger = logging.getLogger(__name__)


# =============================================================================
# Team Tools
# =============================================================================


@tool(
    name="team_list",
    annotations={
        "title": "List Teams",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
    output=TeamListOutput,
)
async def team_list(params: TeamListInput, ctx: ToolContext) -> types.CallToolResult:
    """
    List the teams the user belongs to.

    Args:
        params:
            - search (str): Match team names
            - limit / page (int): Pagination
            - organizationId (str): Restrict to one organization
            - sort (str): 'alpha', 'permission' or 'created'
            - order (str): 'asc' or 'desc'
            - statistics (bool): Include per-team statistics
    """
    client = ctx.get_client()
    try:
        page = await client.list_teams(params.to_api())
        teams = page.items

        lines = [f"- {team.name or 'Unnamed'} (ID: {team.id})" for team in teams]
        text = "Teams:\n" + ("\n".join(lines) or "No teams found")
        return tool_result(
            text,
            {
                "teams": [
                    {
                        "id": team.id,
                        "name": team.name,
                        "description": team.description,
                        "organizationId": team.organization_id,
                        "color": team.color,
                    }
                    for team in teams
                ],
                "totalCount": page.total_count,
            },
            extra_content=[
                json_resource(f"timesheet://team/{team.id}", team.to_dict(), priority=0.7)
                for team in teams
            ],
        )
    except Exception as e:
        return handle_api_error(e, "team_list")


# =============================================================================
# Project Tools
# =============================================================================


@tool(
    name="project_list",
    annotations={
        "title": "List Projects",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
    output=ProjectListOutput,
    widget="ProjectList",
)
async def project_list(params: ProjectListInput, ctx: ToolContext) -> types.CallToolResult:
    """
    List projects with optional filters.

    Tracked durations are included for each project. Use taskStartDate and
    taskEndDate to restrict them to a period.

    Args:
        params:
            - search (str): Match project titles
            - status (str): 'all', 'active' or 'inactive'
            - teamId / teamIds / projectIds: Scope filters
            - sort (str): 'alpha', 'alphaNum', 'client', 'duration', 'created', 'status'
            - order (str): 'asc' or 'desc'
            - limit / page (int): Pagination
    """
    client = ctx.get_client()
    try:
        query = params.to_api()
        page, (profile, settings) = await asyncio.gather(
            client.list_projects({**query, "statistics": True}),
            ctx.get_profile_and_settings(),
        )
        return format_project_list_response(
            page.items, page.total_count, query, profile, settings
        )
    except Exception as e:
        return handle_api_error(e, "project_list")


@tool(
    name="project_get",
    annotations={
        "title": "Get Project",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
    output=ProjectOutput,
    widget="ProjectCard",
)
async def project_get(params: ProjectIdInput, ctx: ToolContext) -> types.CallToolResult:
    """Get a single project by ID."""
    client = ctx.get_client()
    try:
        project = await client.get_project(params.id)
        return format_project_card_response(project)
    except Exception as e:
        return handle_api_error(e, "project_get")


@tool(
    name="project_create",
    annotations={
        "title": "Create Project",
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": False,
        "openWorldHint": True,
    },
    output=ProjectOutput,
)
async def project_create(params: ProjectCreateInput, ctx: ToolContext) -> types.CallToolResult:
    """
    Create a new project.

    Args:
        params:
            - title (str): Project title (required)
            - description (str): Description
            - color (int): ARGB color
            - teamId (str): Owning team
            - taskDefaultBillable (bool): Billable default for new entries
    """
    client = ctx.get_client()
    try:
        project = await client.create_project(params.to_api())
        return tool_result(
            f"Project created: {project.display_title} (ID: {project.id})",
            {"id": project.id, "title": project.title},
            extra_content=[
                json_resource(f"timesheet://project/{project.id}", project.to_dict(), priority=0.9)
            ],
        )
    except Exception as e:
        return handle_api_error(e, "project_create")


@tool(
    name="project_update",
    annotations={
        "title": "Update Project",
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
    output=ProjectOutput,
)
async def project_update(params: ProjectUpdateInput, ctx: ToolContext) -> types.CallToolResult:
    """
    Update a project's title, description or archived state.

    Only the fields provided are changed.
    """
    client = ctx.get_client()
    try:
        project = await client.update_project(params.id, params.to_api(exclude={"id"}))
        return tool_result(
            f"Project updated: {project.display_title}",
            {"id": project.id, "title": project.title},
        )
    except Exception as e:
        return handle_api_error(e, "project_update")


@tool(
    name="project_delete",
    annotations={
        "title": "Delete Project",
        "readOnlyHint": False,
        "destructiveHint": True,
        "idempotentHint": True,
        "openWorldHint": True,
    },
    output=DeletedOutput,
)
async def project_delete(params: ProjectIdInput, ctx: ToolContext) -> types.CallToolResult:
    """
    Permanently delete a project.

    WARNING: This also removes the project's time entries and cannot be undone.
    """
    client = ctx.get_client()
    try:
        await client.delete_project(params.id)
        return success_result(f"Project {params.id} deleted successfully", deletedId=params.id)
    except Exception as e:
        return handle_api_error(e, "project_delete")
