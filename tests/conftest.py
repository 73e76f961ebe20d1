"""
Pytest Configuration and Fixtures for Timesheet MCP Tests.

This module provides fixtures, mock factories, and shared utilities for
testing the tool handlers, the MCP server and the HTTP transport.

Architecture:
    - MockTimesheetClient: Async, recording stand-in for TimesheetClient
    - Factories: Generate test data (tasks, projects, timers, templates)
    - Fixtures: Provide settings, servers and tool contexts wired to the mock
    - Markers: Custom pytest markers for test categorization
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, AsyncIterator

import pytest

from timesheet_mcp.exceptions import TimesheetNotFoundError
from timesheet_mcp.models import (
    ExportField,
    ExportFields,
    ExportResult,
    ExportTemplate,
    Expense,
    Note,
    Page,
    PageParams,
    Pause,
    Project,
    ReportType,
    ReportTypes,
    Tag,
    Task,
    Team,
    Timer,
    TimerStatus,
)
from timesheet_mcp.server import TimesheetMCPServer
from timesheet_mcp.settings import Settings
from timesheet_mcp.tools import ToolContext


# =============================================================================
# Pytest Configuration
# =============================================================================


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "timer: Timer and enhancement tool tests")
    config.addinivalue_line("markers", "tasks: Time entry tests")
    config.addinivalue_line("markers", "projects: Project and team tests")
    config.addinivalue_line("markers", "reports: Report and export tests")
    config.addinivalue_line("markers", "statistics: Statistics tests")
    config.addinivalue_line("markers", "server: MCP server dispatch tests")
    config.addinivalue_line("markers", "http: HTTP transport tests")
    config.addinivalue_line("markers", "client: Upstream API client tests")
    config.addinivalue_line("markers", "config: Settings tests")
    config.addinivalue_line("markers", "auth: Authentication and OAuth tests")
    config.addinivalue_line("markers", "errors: Error handling tests")


# =============================================================================
# Time Utilities
# =============================================================================


def utc_now() -> datetime:
    """Get current UTC time."""
    return datetime.now(timezone.utc)


def iso(dt: datetime) -> str:
    """Format a datetime the way the Timesheet API does."""
    return dt.strftime("%Y-%m-%dT%H:%M:%S.000Z")


# =============================================================================
# ID Generators
# =============================================================================


class IDGenerator:
    """Sequential ID generator for test objects."""

    _counter: int = 0

    @classmethod
    def reset(cls) -> None:
        """Reset counter (call in fixtures)."""
        cls._counter = 0

    @classmethod
    def next_id(cls, prefix: str = "") -> str:
        """Generate next unique ID."""
        cls._counter += 1
        return f"{prefix}{cls._counter:08d}"

    @classmethod
    def task_id(cls) -> str:
        return cls.next_id("task-")

    @classmethod
    def project_id(cls) -> str:
        return cls.next_id("proj-")

    @classmethod
    def template_id(cls) -> str:
        return cls.next_id("tmpl-")


# =============================================================================
# Test Data Factories
# =============================================================================


class ProjectFactory:
    """Factory for creating Project test objects."""

    @staticmethod
    def create(
        id: str | None = None,
        title: str | None = "Test Project",
        description: str | None = None,
        color: int | None = -16738680,
        archived: bool = False,
        **kwargs,
    ) -> Project:
        """Create a Project with sensible defaults."""
        return Project(
            id=id or IDGenerator.project_id(),
            title=title,
            description=description,
            color=color,
            archived=archived,
            **kwargs,
        )


class TaskFactory:
    """Factory for creating Task (time entry) test objects."""

    @staticmethod
    def create(
        id: str | None = None,
        description: str | None = "Test work",
        duration: int = 3600,
        duration_break: int = 0,
        billable: bool = False,
        start_date_time: str | None = "2025-01-01T09:00:00.000Z",
        project: Project | None = None,
        **kwargs,
    ) -> Task:
        """Create a Task with sensible defaults."""
        return Task(
            id=id or IDGenerator.task_id(),
            description=description,
            duration=duration,
            duration_break=duration_break,
            billable=billable,
            start_date_time=start_date_time,
            project=project,
            **kwargs,
        )

    @staticmethod
    def on_day(day: str, duration: int = 3600, **kwargs) -> Task:
        """Create a task starting at 09:00 UTC on ``day`` (YYYY-MM-DD)."""
        return TaskFactory.create(start_date_time=f"{day}T09:00:00.000Z", duration=duration, **kwargs)

    @staticmethod
    def many(count: int, **kwargs) -> list[Task]:
        return [TaskFactory.create(**kwargs) for _ in range(count)]


class TimerFactory:
    """Factory for creating Timer test objects."""

    @staticmethod
    def stopped() -> Timer:
        return Timer(status=TimerStatus.STOPPED)

    @staticmethod
    def running(task: Task | None = None, **kwargs) -> Timer:
        task = task or TaskFactory.create(
            project=ProjectFactory.create(title="Client Work"),
            duration=5400,
            start_date_time=iso(utc_now() - timedelta(minutes=90)),
        )
        return Timer(status=TimerStatus.RUNNING, task=task, **kwargs)

    @staticmethod
    def paused(task: Task | None = None) -> Timer:
        timer = TimerFactory.running(task)
        timer.status = TimerStatus.PAUSED
        timer.pause = Pause(id="pause-1", start_date_time=iso(utc_now()))
        return timer


class TemplateFactory:
    """Factory for creating ExportTemplate test objects."""

    @staticmethod
    def create(
        id: str | None = None,
        name: str | None = "Monthly Report",
        format: str | None = "xlsx",
        report: int | None = 0,
        summarize: bool | None = False,
        **kwargs,
    ) -> ExportTemplate:
        return ExportTemplate(
            id=id or IDGenerator.template_id(),
            name=name,
            format=format,
            report=report,
            summarize=summarize,
            **kwargs,
        )


def page_of(items: list, count: int | None = None, page: int = 1, limit: int | None = None) -> Page:
    """Wrap items in a Page the way list endpoints return them."""
    return Page(
        items=items,
        params=PageParams(count=len(items) if count is None else count, page=page, limit=limit),
    )


# =============================================================================
# Mock Client
# =============================================================================


class MockTimesheetClient:
    """
    Recording mock for TimesheetClient.

    Every method records its call and raises the exception configured in
    ``should_fail`` for that method name, if any. Data lives in plain
    attributes that tests can set directly.
    """

    def __init__(self):
        """Initialize mock with default data stores."""
        self.timer: Timer = TimerFactory.stopped()
        self.tasks: dict[str, Task] = {}
        self.projects: dict[str, Project] = {}
        self.teams: list[Team] = []
        self.templates: dict[str, ExportTemplate] = {}
        self.reports: dict[tuple[str, str], dict[str, Any]] = {}
        self.pdf_bytes: bytes = b"%PDF-1.4 test"
        self.xml: str = "<Invoice/>"
        self.export_result = ExportResult(
            url="https://files.timesheet.io/export.xlsx",
            filename="export.xlsx",
            content_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        )
        self.export_fields = ExportFields(fields=[])
        self.report_types = ReportTypes(reports=[])
        self.profile: dict[str, Any] = {"firstname": "Ada", "lastname": "Lovelace"}
        self.user_settings: dict[str, Any] = {"currency": "EUR", "timeFormat": "24h"}
        self.closed = False

        # Track method calls for verification
        self.call_history: list[tuple[str, tuple, dict]] = []

        # Configurable behaviors
        self.should_fail: dict[str, Exception | None] = {}

    def _record_call(self, method: str, args: tuple = (), kwargs: dict | None = None) -> None:
        """Record method call for verification."""
        self.call_history.append((method, args, kwargs or {}))

    def _check_failure(self, method: str) -> None:
        """Check if method should raise an exception."""
        if self.should_fail.get(method):
            raise self.should_fail[method]

    def _call(self, method: str, *args, **kwargs) -> None:
        self._record_call(method, args, kwargs)
        self._check_failure(method)

    async def close(self) -> None:
        self._record_call("close")
        self.closed = True

    # -------------------------------------------------------------------------
    # Timer
    # -------------------------------------------------------------------------

    async def get_timer(self) -> Timer:
        self._call("get_timer")
        return self.timer

    async def start_timer(self, project_id: str, start_date_time: str | None = None) -> Timer:
        self._call("start_timer", project_id, start_date_time)
        project = self.projects.get(project_id) or ProjectFactory.create(id=project_id)
        self.timer = Timer(
            status=TimerStatus.RUNNING,
            task=TaskFactory.create(
                project=project,
                duration=0,
                start_date_time=start_date_time or iso(utc_now()),
            ),
        )
        return self.timer

    async def stop_timer(self, end_date_time: str | None = None) -> Timer:
        self._call("stop_timer", end_date_time)
        self.timer = TimerFactory.stopped()
        return self.timer

    async def pause_timer(self, start_date_time: str | None = None) -> Timer:
        self._call("pause_timer", start_date_time)
        self.timer.status = TimerStatus.PAUSED
        self.timer.pause = Pause(start_date_time=start_date_time or iso(utc_now()))
        return self.timer

    async def resume_timer(self, end_date_time: str | None = None) -> Timer:
        self._call("resume_timer", end_date_time)
        self.timer.status = TimerStatus.RUNNING
        self.timer.pause = None
        return self.timer

    async def update_timer(self, fields: dict[str, Any]) -> Timer:
        self._call("update_timer", fields)
        if self.timer.task is not None and "description" in fields:
            self.timer.task.description = fields["description"]
        return self.timer

    # -------------------------------------------------------------------------
    # Task Items
    # -------------------------------------------------------------------------

    async def create_note(self, task_id: str, text: str, date_time: str | None = None) -> Note:
        self._call("create_note", task_id, text, date_time)
        return Note(id="note-1", task_id=task_id, text=text, date_time=date_time)

    async def create_expense(
        self, task_id: str, description: str, amount: float, date_time: str | None = None
    ) -> Expense:
        self._call("create_expense", task_id, description, amount, date_time)
        return Expense(id="expense-1", task_id=task_id, description=description, amount=amount)

    async def create_pause(
        self,
        task_id: str,
        start_date_time: str,
        end_date_time: str,
        description: str | None = None,
    ) -> Pause:
        self._call("create_pause", task_id, start_date_time, end_date_time, description)
        return Pause(
            id="pause-1",
            description=description,
            start_date_time=start_date_time,
            end_date_time=end_date_time,
        )

    # -------------------------------------------------------------------------
    # Teams & Projects
    # -------------------------------------------------------------------------

    async def list_teams(self, filters: dict[str, Any] | None = None) -> Page[Team]:
        self._call("list_teams", filters)
        return page_of(list(self.teams))

    async def list_projects(self, filters: dict[str, Any] | None = None) -> Page[Project]:
        self._call("list_projects", filters)
        return page_of(list(self.projects.values()))

    async def get_project(self, project_id: str) -> Project:
        self._call("get_project", project_id)
        if project_id not in self.projects:
            raise TimesheetNotFoundError("Project not found", status_code=404)
        return self.projects[project_id]

    async def create_project(self, payload: dict[str, Any]) -> Project:
        self._call("create_project", payload)
        project = ProjectFactory.create(
            title=payload.get("title"),
            description=payload.get("description"),
            color=payload.get("color"),
        )
        self.projects[project.id] = project
        return project

    async def update_project(self, project_id: str, payload: dict[str, Any]) -> Project:
        self._call("update_project", project_id, payload)
        if project_id not in self.projects:
            raise TimesheetNotFoundError("Project not found", status_code=404)
        project = self.projects[project_id].model_copy(update={
            "title": payload.get("title", self.projects[project_id].title),
            "archived": payload.get("archived", self.projects[project_id].archived),
        })
        self.projects[project_id] = project
        return project

    async def delete_project(self, project_id: str) -> None:
        self._call("delete_project", project_id)
        self.projects.pop(project_id, None)

    # -------------------------------------------------------------------------
    # Tasks
    # -------------------------------------------------------------------------

    async def search_tasks(self, filters: dict[str, Any] | None = None) -> Page[Task]:
        """Return one page of tasks, honouring ``limit`` and ``page`` when given."""
        self._call("search_tasks", filters)
        tasks = list(self.tasks.values())
        filters = filters or {}
        limit = filters.get("limit")
        if limit:
            page = filters.get("page", 1)
            items = tasks[(page - 1) * limit: page * limit]
            return page_of(items, count=len(tasks), page=page, limit=limit)
        return page_of(tasks)

    async def get_task(self, task_id: str) -> Task:
        self._call("get_task", task_id)
        if task_id not in self.tasks:
            raise TimesheetNotFoundError("Task not found", status_code=404)
        return self.tasks[task_id]

    async def create_task(self, payload: dict[str, Any]) -> Task:
        self._call("create_task", payload)
        task = TaskFactory.create(
            description=payload.get("description"),
            start_date_time=payload.get("startDateTime"),
            duration=7200 if payload.get("endDateTime") else 0,
            project_id=payload.get("projectId"),
        )
        self.tasks[task.id] = task
        return task

    async def update_task(self, task_id: str, payload: dict[str, Any]) -> Task:
        self._call("update_task", task_id, payload)
        if task_id not in self.tasks:
            raise TimesheetNotFoundError("Task not found", status_code=404)
        return self.tasks[task_id]

    async def delete_task(self, task_id: str) -> None:
        self._call("delete_task", task_id)
        self.tasks.pop(task_id, None)

    # -------------------------------------------------------------------------
    # Profile & Settings
    # -------------------------------------------------------------------------

    async def get_profile(self) -> dict[str, Any]:
        self._call("get_profile")
        return self.profile

    async def get_settings(self) -> dict[str, Any]:
        self._call("get_settings")
        return self.user_settings

    # -------------------------------------------------------------------------
    # Reports & Exports
    # -------------------------------------------------------------------------

    async def get_report(self, kind: str, item_id: str) -> dict[str, Any]:
        self._call("get_report", kind, item_id)
        return self.reports.get((kind, item_id), {})

    async def get_report_pdf(self, kind: str, item_id: str) -> bytes:
        self._call("get_report_pdf", kind, item_id)
        return self.pdf_bytes

    async def get_document_xml(self, document_id: str) -> str:
        self._call("get_document_xml", document_id)
        return self.xml

    async def generate_export(self, payload: dict[str, Any]) -> ExportResult:
        self._call("generate_export", payload)
        return self.export_result

    async def send_export(self, payload: dict[str, Any]) -> None:
        self._call("send_export", payload)

    async def export_from_template(
        self, template_id: str, start_date: str | None = None, end_date: str | None = None
    ) -> bytes:
        self._call("export_from_template", template_id, start_date, end_date)
        return self.pdf_bytes

    async def get_export_fields(self, scope: str | None = None) -> ExportFields:
        self._call("get_export_fields", scope)
        return self.export_fields

    async def get_report_types(self) -> ReportTypes:
        self._call("get_report_types")
        return self.report_types

    async def list_export_templates(
        self, filters: dict[str, Any] | None = None
    ) -> Page[ExportTemplate]:
        self._call("list_export_templates", filters)
        return page_of(list(self.templates.values()))

    async def get_export_template(self, template_id: str) -> ExportTemplate:
        self._call("get_export_template", template_id)
        if template_id not in self.templates:
            raise TimesheetNotFoundError("Template not found", status_code=404)
        return self.templates[template_id]

    async def create_export_template(self, payload: dict[str, Any]) -> ExportTemplate:
        self._call("create_export_template", payload)
        template = TemplateFactory.create(name=payload.get("name"), format=payload.get("format"))
        self.templates[template.id] = template
        return template

    async def update_export_template(
        self, template_id: str, payload: dict[str, Any]
    ) -> ExportTemplate:
        self._call("update_export_template", template_id, payload)
        if template_id not in self.templates:
            raise TimesheetNotFoundError("Template not found", status_code=404)
        template = self.templates[template_id].model_copy(
            update={"name": payload.get("name", self.templates[template_id].name)}
        )
        self.templates[template_id] = template
        return template

    async def delete_export_template(self, template_id: str) -> None:
        self._call("delete_export_template", template_id)
        self.templates.pop(template_id, None)

    # -------------------------------------------------------------------------
    # Test Helpers
    # -------------------------------------------------------------------------

    def add_tasks(self, tasks: list[Task]) -> None:
        for task in tasks:
            self.tasks[task.id] = task

    def add_projects(self, projects: list[Project]) -> None:
        for project in projects:
            self.projects[project.id] = project

    def clear_call_history(self) -> None:
        """Clear recorded method calls."""
        self.call_history.clear()

    def get_calls(self, method_name: str) -> list[tuple[tuple, dict]]:
        """Get all calls to a specific method."""
        return [(args, kwargs) for name, args, kwargs in self.call_history if name == method_name]

    def assert_called(self, method_name: str, times: int | None = None) -> None:
        """Assert a method was called (optionally a specific number of times)."""
        calls = self.get_calls(method_name)
        if times is not None:
            assert len(calls) == times, f"Expected {method_name} to be called {times} times, got {len(calls)}"
        else:
            assert len(calls) > 0, f"Expected {method_name} to be called at least once"

    def assert_not_called(self, method_name: str) -> None:
        """Assert a method was not called."""
        calls = self.get_calls(method_name)
        assert len(calls) == 0, f"Expected {method_name} not to be called, but was called {len(calls)} times"


# =============================================================================
# Result Helpers
# =============================================================================


def result_text(result) -> str:
    """Text of the first content block of a CallToolResult."""
    return result.content[0].text


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def id_generator():
    """Reset and provide ID generator."""
    IDGenerator.reset()
    return IDGenerator


@pytest.fixture
def settings() -> Settings:
    """Settings with an API key and no .env lookup."""
    return Settings(
        _env_file=None,
        timesheet_api_token="ts_test.secret",
        timesheet_api_url="https://api.timesheet.test",
        mcp_server_url="https://mcp.timesheet.test",
        component_base_url=None,
        ngrok_url=None,
        widgets_dir=None,
        statistics_page_size=100,
        statistics_max_pages=5,
    )


@pytest.fixture
def no_auth_settings() -> Settings:
    """Settings with no API key configured."""
    return Settings(
        _env_file=None,
        timesheet_api_token=None,
        timesheet_api_url="https://api.timesheet.test",
        mcp_server_url="https://mcp.timesheet.test",
        component_base_url=None,
        ngrok_url=None,
        widgets_dir=None,
    )


@pytest.fixture
def mock_client() -> MockTimesheetClient:
    """Create a fresh mock client instance."""
    return MockTimesheetClient()


@pytest.fixture
def ctx(settings: Settings, mock_client: MockTimesheetClient) -> ToolContext:
    """ToolContext wired to the mock client."""
    return ToolContext(settings, client=mock_client)


@pytest.fixture
async def server(
    settings: Settings, mock_client: MockTimesheetClient
) -> AsyncIterator[TimesheetMCPServer]:
    """TimesheetMCPServer wired to the mock client."""
    server = TimesheetMCPServer(settings, client=mock_client)
    yield server
    await server.aclose()


@pytest.fixture
def task_factory() -> type[TaskFactory]:
    return TaskFactory


@pytest.fixture
def project_factory() -> type[ProjectFactory]:
    return ProjectFactory


@pytest.fixture
def running_timer(mock_client: MockTimesheetClient) -> Timer:
    """Put the mock into a running-timer state."""
    mock_client.timer = TimerFactory.running()
    return mock_client.timer


@pytest.fixture
def sample_project() -> Project:
    return ProjectFactory.create(id="proj-1", title="Website Redesign", description="Client site")


@pytest.fixture
def sample_task(sample_project: Project) -> Task:
    return TaskFactory.create(
        id="task-1",
        description="Homepage layout",
        duration=5400,
        billable=True,
        project=sample_project,
        tags=[Tag(id="tag-1", name="design")],
    )


@pytest.fixture
def sample_templates() -> list[ExportTemplate]:
    return [
        TemplateFactory.create(id="tmpl-1", name="Monthly Report", format="xlsx"),
        TemplateFactory.create(id="tmpl-2", name="Client Summary", format="pdf", summarize=True),
    ]


@pytest.fixture
def sample_fields() -> ExportFields:
    return ExportFields(fields=[
        ExportField(field_id=f"field{i}", name=f"Field {i}") for i in range(12)
    ])


@pytest.fixture
def sample_report_types() -> ReportTypes:
    return ReportTypes(reports=[
        ReportType(id=0, name="Timesheet", description="All entries"),
        ReportType(id=1, name="Summary"),
    ])
