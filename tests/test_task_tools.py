"""
Time Entry (Task) Tool Tests.

This module tests:
- task_list query building, widget and enrichment
- task_get / create / update / delete
"""

from __future__ import annotations

import pytest
from mcp import types
from mcp.shared.exceptions import McpError

from timesheet_mcp.models import Task
from timesheet_mcp.server import TimesheetMCPServer

from tests.conftest import MockTimesheetClient, ProjectFactory, TaskFactory, result_text

pytestmark = [pytest.mark.tasks, pytest.mark.unit]


# =============================================================================
# Listing
# =============================================================================


class TestTaskList:
    """Tests for task_list."""

    async def test_lists_tasks(self, server: TimesheetMCPServer, mock_client: MockTimesheetClient):
        project = ProjectFactory.create(title="Website")
        mock_client.add_tasks([
            TaskFactory.create(description="Layout", duration=5400, project=project),
            TaskFactory.create(description=None, duration=600),
        ])

        result = await server.dispatch("task_list", {})

        text = result_text(result)
        assert text.startswith("Found 2 time entries:")
        assert "- Layout (1h 30m) - Website" in text
        assert "- No description (0h 10m)" in text
        data = result.structuredContent
        assert data["totalCount"] == 2
        assert data["tasks"][0]["hours"] == 1
        assert data["tasks"][0]["minutes"] == 30
        assert data["settings"] == mock_client.user_settings

    async def test_singular_wording(self, server: TimesheetMCPServer, mock_client: MockTimesheetClient):
        mock_client.add_tasks([TaskFactory.create()])

        result = await server.dispatch("task_list", {})

        assert result_text(result).startswith("Found 1 time entry:")

    async def test_populate_tags_defaults_to_true(
        self, server: TimesheetMCPServer, mock_client: MockTimesheetClient
    ):
        await server.dispatch("task_list", {"startDate": "2025-01-01", "endDate": "2025-01-31"})

        (filters,), _ = mock_client.get_calls("search_tasks")[0]
        assert filters == {"startDate": "2025-01-01", "endDate": "2025-01-31", "populateTags": True}

    async def test_filters_use_api_names(self, server: TimesheetMCPServer, mock_client: MockTimesheetClient):
        await server.dispatch(
            "task_list",
            {"projectIds": ["p1", "p2"], "filter": "billable", "populateTags": False, "sort": "dateTime"},
        )

        (filters,), _ = mock_client.get_calls("search_tasks")[0]
        assert filters["projectIds"] == ["p1", "p2"]
        assert filters["filter"] == "billable"
        assert filters["populateTags"] is False
        assert filters["sort"] == "dateTime"

    async def test_attaches_task_list_widget(self, server: TimesheetMCPServer):
        result = await server.dispatch("task_list", {})

        assert result.meta["ui"]["resourceUri"] == "ui://timesheet/TaskList.html"

    async def test_unknown_argument_rejected(self, server: TimesheetMCPServer):
        with pytest.raises(McpError) as exc_info:
            await server.dispatch("task_list", {"colour": "red"})

        assert exc_info.value.error.code == types.INVALID_PARAMS


# =============================================================================
# Single Entry
# =============================================================================


class TestTaskCrud:
    """Tests for task_get / create / update / delete."""

    async def test_get_task(self, server: TimesheetMCPServer, mock_client: MockTimesheetClient, sample_task: Task):
        mock_client.add_tasks([sample_task])

        result = await server.dispatch("task_get", {"id": "task-1"})

        assert result_text(result) == "Task: Homepage layout (1h 30m) - Website Redesign"
        data = result.structuredContent
        assert data["id"] == "task-1"
        assert data["billable"] is True
        assert data["tags"] == [{"id": "tag-1", "name": "design"}]
        assert result.meta["ui"]["resourceUri"] == "ui://timesheet/TaskCard.html"

    async def test_get_missing_task(self, server: TimesheetMCPServer):
        result = await server.dispatch("task_get", {"id": "missing"})

        assert result.isError
        assert result_text(result) == "API Error (404): Task not found"

    async def test_create_task(self, server: TimesheetMCPServer, mock_client: MockTimesheetClient):
        result = await server.dispatch(
            "task_create",
            {
                "projectId": "p1",
                "startDateTime": "2025-01-01T09:00:00Z",
                "endDateTime": "2025-01-01T11:00:00Z",
                "description": "Workshop",
            },
        )

        (payload,), _ = mock_client.get_calls("create_task")[0]
        assert payload == {
            "projectId": "p1",
            "startDateTime": "2025-01-01T09:00:00Z",
            "endDateTime": "2025-01-01T11:00:00Z",
            "description": "Workshop",
        }
        task_id = result.structuredContent["id"]
        assert result_text(result) == f"Task created (ID: {task_id})"
        assert result.structuredContent["duration"] == 7200
        assert str(result.content[1].resource.uri) == f"timesheet://task/{task_id}"

    async def test_create_requires_start(self, server: TimesheetMCPServer, mock_client: MockTimesheetClient):
        with pytest.raises(McpError) as exc_info:
            await server.dispatch("task_create", {"projectId": "p1"})

        assert exc_info.value.error.code == types.INVALID_PARAMS
        mock_client.assert_not_called("create_task")

    async def test_update_task(self, server: TimesheetMCPServer, mock_client: MockTimesheetClient, sample_task: Task):
        mock_client.add_tasks([sample_task])

        result = await server.dispatch("task_update", {"id": "task-1", "billed": True, "paid": False})

        args, _ = mock_client.get_calls("update_task")[0]
        assert args == ("task-1", {"billed": True, "paid": False})
        assert result_text(result) == "Task updated successfully"
        assert result.structuredContent == {"success": True, "id": "task-1"}

    async def test_delete_task(self, server: TimesheetMCPServer, mock_client: MockTimesheetClient, sample_task: Task):
        mock_client.add_tasks([sample_task])

        result = await server.dispatch("task_delete", {"id": "task-1"})

        assert result_text(result) == "Task task-1 deleted successfully"
        assert result.structuredContent == {"success": True, "deletedId": "task-1"}
        mock_client.assert_called("delete_task", times=1)
