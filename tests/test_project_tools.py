"""
Project and Team Tool Tests.

This module tests:
- team_list text, structured content and embedded resources
- project_list filters, statistics flag and widget
- project_get / create / update / delete
"""

from __future__ import annotations

import json

import pytest
from mcp import types
from mcp.shared.exceptions import McpError

from timesheet_mcp.exceptions import TimesheetNotFoundError
from timesheet_mcp.models import Project, Team
from timesheet_mcp.server import TimesheetMCPServer

from tests.conftest import MockTimesheetClient, ProjectFactory, result_text

pytestmark = [pytest.mark.projects, pytest.mark.unit]


# =============================================================================
# Teams
# =============================================================================


class TestTeamList:
    """Tests for team_list."""

    async def test_lists_teams(self, server: TimesheetMCPServer, mock_client: MockTimesheetClient):
        mock_client.teams = [
            Team(id="t1", name="Design", organization_id="org-1"),
            Team(id="t2", name=None),
        ]

        result = await server.dispatch("team_list", {})

        assert result_text(result) == "Teams:\n- Design (ID: t1)\n- Unnamed (ID: t2)"
        assert result.structuredContent["totalCount"] == 2
        assert result.structuredContent["teams"][0]["organizationId"] == "org-1"

    async def test_embeds_team_resources(self, server: TimesheetMCPServer, mock_client: MockTimesheetClient):
        mock_client.teams = [Team(id="t1", name="Design")]

        result = await server.dispatch("team_list", {})

        embedded = result.content[1]
        assert isinstance(embedded, types.EmbeddedResource)
        assert str(embedded.resource.uri) == "timesheet://team/t1"
        assert embedded.annotations.priority == 0.7
        assert json.loads(embedded.resource.text)["name"] == "Design"

    async def test_no_teams(self, server: TimesheetMCPServer):
        result = await server.dispatch("team_list", {})

        assert result_text(result) == "Teams:\nNo teams found"
        assert result.structuredContent["teams"] == []

    async def test_filters_forwarded(self, server: TimesheetMCPServer, mock_client: MockTimesheetClient):
        await server.dispatch("team_list", {"search": "des", "sort": "alpha", "order": "asc"})

        (filters,), _ = mock_client.get_calls("list_teams")[0]
        assert filters == {"search": "des", "sort": "alpha", "order": "asc"}


# =============================================================================
# Project Listing
# =============================================================================


class TestProjectList:
    """Tests for project_list."""

    async def test_lists_projects(self, server: TimesheetMCPServer, mock_client: MockTimesheetClient):
        mock_client.add_projects([
            ProjectFactory.create(id="p1", title="Website", description="Client site"),
            ProjectFactory.create(id="p2", title="Old", archived=True),
        ])

        result = await server.dispatch("project_list", {})

        text = result_text(result)
        assert text.startswith("Found 2 projects:")
        assert "- Website - Client site" in text
        assert "- Old [Archived]" in text
        data = result.structuredContent
        assert data["totalCount"] == 2
        assert [p["id"] for p in data["projects"]] == ["p1", "p2"]
        assert data["profile"] == mock_client.profile

    async def test_singular_wording(self, server: TimesheetMCPServer, mock_client: MockTimesheetClient):
        mock_client.add_projects([ProjectFactory.create(title=None)])

        result = await server.dispatch("project_list", {})

        assert result_text(result).startswith("Found 1 project:")
        assert "- Untitled" in result_text(result)

    async def test_requests_statistics(self, server: TimesheetMCPServer, mock_client: MockTimesheetClient):
        result = await server.dispatch("project_list", {"status": "active", "limit": 10})

        (filters,), _ = mock_client.get_calls("list_projects")[0]
        assert filters == {"status": "active", "limit": 10, "statistics": True}
        assert result.structuredContent["queryParams"] == {"status": "active", "limit": 10}

    async def test_attaches_project_list_widget(self, server: TimesheetMCPServer):
        result = await server.dispatch("project_list", {})

        assert result.meta["ui"]["resourceUri"] == "ui://timesheet/ProjectList.html"

    async def test_invalid_status_rejected(self, server: TimesheetMCPServer):
        with pytest.raises(McpError) as exc_info:
            await server.dispatch("project_list", {"status": "sleeping"})

        assert exc_info.value.error.code == types.INVALID_PARAMS


# =============================================================================
# Single Project
# =============================================================================


class TestProjectCrud:
    """Tests for project_get / create / update / delete."""

    async def test_get_project(
        self, server: TimesheetMCPServer, mock_client: MockTimesheetClient, sample_project: Project
    ):
        mock_client.add_projects([sample_project])

        result = await server.dispatch("project_get", {"id": "proj-1"})

        assert result_text(result) == "Project: Website Redesign\nDescription: Client site"
        assert result.structuredContent["id"] == "proj-1"
        assert result.meta["ui"]["resourceUri"] == "ui://timesheet/ProjectCard.html"

    async def test_get_missing_project(self, server: TimesheetMCPServer):
        result = await server.dispatch("project_get", {"id": "nope"})

        assert result.isError
        assert result_text(result) == "API Error (404): Project not found"

    async def test_create_project(self, server: TimesheetMCPServer, mock_client: MockTimesheetClient):
        result = await server.dispatch(
            "project_create",
            {"title": "New Project", "description": "Fresh", "taskDefaultBillable": True},
        )

        (payload,), _ = mock_client.get_calls("create_project")[0]
        assert payload == {"title": "New Project", "description": "Fresh", "taskDefaultBillable": True}
        project_id = result.structuredContent["id"]
        assert result_text(result) == f"Project created: New Project (ID: {project_id})"
        embedded = result.content[1]
        assert str(embedded.resource.uri) == f"timesheet://project/{project_id}"
        assert embedded.annotations.priority == 0.9

    async def test_create_requires_title(self, server: TimesheetMCPServer, mock_client: MockTimesheetClient):
        with pytest.raises(McpError):
            await server.dispatch("project_create", {"description": "no title"})

        mock_client.assert_not_called("create_project")

    async def test_update_project(
        self, server: TimesheetMCPServer, mock_client: MockTimesheetClient, sample_project: Project
    ):
        mock_client.add_projects([sample_project])

        result = await server.dispatch("project_update", {"id": "proj-1", "title": "Renamed"})

        args, _ = mock_client.get_calls("update_project")[0]
        assert args == ("proj-1", {"title": "Renamed"})
        assert result_text(result) == "Project updated: Renamed"

    async def test_delete_project(
        self, server: TimesheetMCPServer, mock_client: MockTimesheetClient, sample_project: Project
    ):
        mock_client.add_projects([sample_project])

        result = await server.dispatch("project_delete", {"id": "proj-1"})

        assert result.structuredContent == {"success": True, "deletedId": "proj-1"}
        assert "proj-1" not in mock_client.projects

    async def test_delete_failure(self, server: TimesheetMCPServer, mock_client: MockTimesheetClient):
        mock_client.should_fail["delete_project"] = TimesheetNotFoundError("gone", status_code=404)

        result = await server.dispatch("project_delete", {"id": "proj-1"})

        assert result.isError
        assert result_text(result) == "API Error (404): gone"
