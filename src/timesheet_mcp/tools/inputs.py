"""
Pydantic Input Models for Timesheet MCP Tools.

This module defines all input validation models used by MCP tools.
Field names are snake_case in Python and camelCase on the wire; the JSON
schema each tool advertises is generated from these models.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"

SortOrder = Literal["asc", "desc"]
ExportFormat = Literal["xlsx", "xlsx1904", "csv", "pdf"]
TaskType = Literal["all", "task", "mileage", "call"]
TaskFilter = Literal["all", "billable", "notBillable", "paid", "unpaid", "billed", "outstanding"]


def parse_iso_datetime(value: str) -> datetime:
    """Parse an ISO 8601 timestamp, accepting a trailing ``Z``."""
    if value.endswith(("Z", "z")):
        value = value[:-1] + "+00:00"
    return datetime.fromisoformat(value)


class BaseMCPInput(BaseModel):
    """Base input model with common configuration."""

    model_config = ConfigDict(
        str_strip_whitespace=True,
        validate_assignment=True,
        extra="forbid",
        alias_generator=to_camel,
        populate_by_name=True,
    )

    @field_validator(
        "start_date_time", "end_date_time", "date_time", mode="after", check_fields=False
    )
    @classmethod
    def validate_datetime(cls, v: Optional[str]) -> Optional[str]:
        if v is not None:
            try:
                parse_iso_datetime(v)
            except ValueError:
                raise ValueError(f"Invalid ISO 8601 date-time: {v}")
        return v

    def to_api(self, *, exclude: Optional[set[str]] = None) -> dict:
        """Arguments as the upstream API expects them (camelCase, no None values)."""
        return self.model_dump(by_alias=True, exclude_none=True, exclude=exclude)


class EmptyInput(BaseMCPInput):
    """Input for tools that take no arguments."""


# =============================================================================
# Timer Input Models
# =============================================================================


class TimerStartInput(BaseMCPInput):
    """Input for starting the timer."""

    project_id: str = Field(
        ...,
        description="Project ID to track time against",
        min_length=1,
    )
    start_date_time: Optional[str] = Field(
        default=None,
        description="Start time in ISO 8601 (e.g., '2025-01-15T09:00:00Z'). Defaults to now.",
    )


class TimerStopInput(BaseMCPInput):
    """Input for stopping the timer."""

    end_date_time: Optional[str] = Field(
        default=None,
        description="End time in ISO 8601. Defaults to now.",
    )


class TimerPauseInput(BaseMCPInput):
    """Input for pausing the timer."""

    start_date_time: Optional[str] = Field(
        default=None,
        description="Pause start time in ISO 8601. Defaults to now.",
    )


class TimerResumeInput(BaseMCPInput):
    """Input for resuming the timer."""

    end_date_time: Optional[str] = Field(
        default=None,
        description="Pause end time in ISO 8601. Defaults to now.",
    )


class TimerUpdateInput(BaseMCPInput):
    """Input for updating the running time entry."""

    description: Optional[str] = Field(
        default=None,
        description="Description of the work being done",
        max_length=5000,
    )
    location: Optional[str] = Field(
        default=None,
        description="Start location",
    )
    location_end: Optional[str] = Field(
        default=None,
        description="End location",
    )
    feeling: Optional[int] = Field(
        default=None,
        description="Mood rating from 1 (bad) to 5 (great)",
        ge=1,
        le=5,
    )
    billable: Optional[bool] = Field(
        default=None,
        description="Whether the entry is billable",
    )
    tags: Optional[List[str]] = Field(
        default=None,
        description="Tag IDs to attach to the entry",
    )


# =============================================================================
# Task Enhancement Input Models
# =============================================================================


class TaskAddNoteInput(BaseMCPInput):
    """Input for adding a note to the running task."""

    text: str = Field(
        ...,
        description="Note text",
        min_length=1,
        max_length=10000,
    )
    date_time: Optional[str] = Field(
        default=None,
        description="Note timestamp in ISO 8601. Defaults to now.",
    )


class TaskAddExpenseInput(BaseMCPInput):
    """Input for adding an expense to the running task."""

    description: str = Field(
        ...,
        description="What the expense was for (e.g., 'Train ticket')",
        min_length=1,
    )
    amount: float = Field(
        ...,
        description="Expense amount in the account currency",
        ge=0,
    )
    date_time: Optional[str] = Field(
        default=None,
        description="Expense timestamp in ISO 8601. Defaults to now.",
    )


class TaskAddPauseInput(BaseMCPInput):
    """Input for adding a break to the running task."""

    description: Optional[str] = Field(
        default=None,
        description="Reason for the break (e.g., 'Lunch')",
    )
    start_date_time: str = Field(
        ...,
        description="Break start in ISO 8601",
    )
    end_date_time: str = Field(
        ...,
        description="Break end in ISO 8601",
    )

    @model_validator(mode="after")
    def check_order(self) -> "TaskAddPauseInput":
        try:
            reversed_range = parse_iso_datetime(self.end_date_time) < parse_iso_datetime(
                self.start_date_time
            )
        except TypeError:
            raise ValueError("startDateTime and endDateTime must both include a UTC offset or neither")
        if reversed_range:
            raise ValueError("endDateTime must not be before startDateTime")
        return self


# =============================================================================
# Team Input Models
# =============================================================================


class TeamListInput(BaseMCPInput):
    """Input for listing teams."""

    search: Optional[str] = Field(
        default=None,
        description="Search text matched against team names",
    )
    limit: Optional[int] = Field(
        default=None,
        description="Maximum number of teams to return",
        ge=1,
        le=500,
    )
    page: Optional[int] = Field(
        default=None,
        description="Page number (1-based)",
        ge=1,
    )
    organization_id: Optional[str] = Field(
        default=None,
        description="Only teams of this organization",
    )
    sort: Optional[Literal["alpha", "permission", "created"]] = Field(
        default=None,
        description="Sort field",
    )
    order: Optional[SortOrder] = Field(
        default=None,
        description="Sort order",
    )
    statistics: Optional[bool] = Field(
        default=None,
        description="Include per-team statistics",
    )


# =============================================================================
# Project Input Models
# =============================================================================


class ProjectListInput(BaseMCPInput):
    """Input for listing projects."""

    limit: Optional[int] = Field(
        default=None,
        description="Maximum number of projects to return",
        ge=1,
        le=500,
    )
    page: Optional[int] = Field(
        default=None,
        description="Page number (1-based)",
        ge=1,
    )
    team_id: Optional[str] = Field(default=None, description="Filter by team ID")
    team_ids: Optional[List[str]] = Field(default=None, description="Filter by several team IDs")
    project_ids: Optional[List[str]] = Field(default=None, description="Only these projects")
    search: Optional[str] = Field(default=None, description="Search text matched against titles")
    status: Optional[Literal["all", "active", "inactive"]] = Field(
        default=None,
        description="Project status filter",
    )
    sort: Optional[Literal["alpha", "alphaNum", "client", "duration", "created", "status"]] = Field(
        default=None,
        description="Sort field",
    )
    order: Optional[SortOrder] = Field(default=None, description="Sort order")
    task_start_date: Optional[str] = Field(
        default=None,
        description="Start of the period used for duration statistics (YYYY-MM-DD)",
        pattern=DATE_PATTERN,
    )
    task_end_date: Optional[str] = Field(
        default=None,
        description="End of the period used for duration statistics (YYYY-MM-DD)",
        pattern=DATE_PATTERN,
    )
    task_rate_id: Optional[str] = Field(default=None, description="Only count tasks with this rate")
    task_type: Optional[TaskType] = Field(default=None, description="Only count tasks of this type")
    task_filter: Optional[TaskFilter] = Field(default=None, description="Billing filter for tasks")
    task_user_ids: Optional[List[str]] = Field(
        default=None,
        description="Only count tasks of these users",
    )


class ProjectIdInput(BaseMCPInput):
    """Input for tools that address one project."""

    id: str = Field(
        ...,
        description="Project identifier",
        min_length=1,
    )


class ProjectCreateInput(BaseMCPInput):
    """Input for creating a project."""

    title: str = Field(
        ...,
        description="Project title (e.g., 'Website Redesign')",
        min_length=1,
        max_length=255,
    )
    description: Optional[str] = Field(default=None, description="Project description")
    color: Optional[int] = Field(
        default=None,
        description="Color as a signed ARGB integer (e.g., -16738680)",
    )
    team_id: Optional[str] = Field(default=None, description="Team that owns the project")
    task_default_billable: Optional[bool] = Field(
        default=None,
        description="Whether new entries in this project are billable by default",
    )


class ProjectUpdateInput(BaseMCPInput):
    """Input for updating a project."""

    id: str = Field(..., description="Project identifier", min_length=1)
    title: Optional[str] = Field(default=None, description="New title", min_length=1, max_length=255)
    description: Optional[str] = Field(default=None, description="New description")
    archived: Optional[bool] = Field(default=None, description="Archive or unarchive the project")


# =============================================================================
# Task Input Models
# =============================================================================


class TaskListInput(BaseMCPInput):
    """Input for listing time entries."""

    limit: Optional[int] = Field(
        default=None,
        description="Maximum number of entries to return",
        ge=1,
        le=500,
    )
    page: Optional[int] = Field(default=None, description="Page number (1-based)", ge=1)
    sort: Optional[Literal["dateTime", "time", "created"]] = Field(
        default=None,
        description="Sort field",
    )
    order: Optional[SortOrder] = Field(default=None, description="Sort order")
    start_date: Optional[str] = Field(
        default=None,
        description="Only entries starting on or after this date (YYYY-MM-DD)",
        pattern=DATE_PATTERN,
    )
    end_date: Optional[str] = Field(
        default=None,
        description="Only entries starting on or before this date (YYYY-MM-DD)",
        pattern=DATE_PATTERN,
    )
    running: Optional[bool] = Field(default=None, description="Only running entries")
    organization_id: Optional[str] = Field(default=None, description="Filter by organization")
    team_id: Optional[str] = Field(default=None, description="Filter by team")
    team_ids: Optional[List[str]] = Field(default=None, description="Filter by several teams")
    project_id: Optional[str] = Field(default=None, description="Filter by project")
    project_ids: Optional[List[str]] = Field(default=None, description="Filter by several projects")
    todo_id: Optional[str] = Field(default=None, description="Filter by todo")
    task_ids: Optional[List[str]] = Field(default=None, description="Only these entries")
    rate_id: Optional[str] = Field(default=None, description="Filter by rate")
    document_id: Optional[str] = Field(default=None, description="Entries on this document")
    type: Optional[TaskType] = Field(default=None, description="Entry type")
    filter: Optional[TaskFilter] = Field(default=None, description="Billing filter")
    exclude_task_ids: Optional[List[str]] = Field(default=None, description="Entries to skip")
    tag_ids: Optional[List[str]] = Field(default=None, description="Filter by tags")
    user_ids: Optional[List[str]] = Field(default=None, description="Filter by users")
    feelings: Optional[List[int]] = Field(default=None, description="Filter by mood ratings (1-5)")
    populate_pauses: Optional[bool] = Field(default=None, description="Include breaks")
    populate_expenses: Optional[bool] = Field(default=None, description="Include expenses")
    populate_notes: Optional[bool] = Field(default=None, description="Include notes")
    populate_tags: bool = Field(default=True, description="Include tags")
    performance: Optional[bool] = Field(
        default=None,
        description="Return a lighter payload for large result sets",
    )


class TaskIdInput(BaseMCPInput):
    """Input for tools that address one time entry."""

    id: str = Field(..., description="Task identifier", min_length=1)


class TaskCreateInput(BaseMCPInput):
    """Input for creating a time entry."""

    project_id: str = Field(..., description="Project to book the time on", min_length=1)
    start_date_time: str = Field(..., description="Start time in ISO 8601")
    end_date_time: Optional[str] = Field(
        default=None,
        description="End time in ISO 8601. Omit for an open entry.",
    )
    description: Optional[str] = Field(default=None, description="What was done", max_length=5000)
    billable: Optional[bool] = Field(default=None, description="Whether the entry is billable")


class TaskUpdateInput(BaseMCPInput):
    """Input for updating a time entry."""

    id: str = Field(..., description="Task identifier", min_length=1)
    description: Optional[str] = Field(default=None, description="New description", max_length=5000)
    start_date_time: Optional[str] = Field(default=None, description="New start time in ISO 8601")
    end_date_time: Optional[str] = Field(default=None, description="New end time in ISO 8601")
    billable: Optional[bool] = Field(default=None, description="Billable flag")
    paid: Optional[bool] = Field(default=None, description="Paid flag")
    billed: Optional[bool] = Field(default=None, description="Billed flag")


# =============================================================================
# Auth Input Models
# =============================================================================


class AuthConfigureInput(BaseMCPInput):
    """Input for configuring API key authentication."""

    api_key: str = Field(
        ...,
        description="Timesheet API key (format: ts_<prefix>.<secret>)",
        min_length=1,
    )
    base_url: Optional[str] = Field(
        default=None,
        description="Override for the API base URL",
        pattern=r"^https?://",
    )


# =============================================================================
# Report Input Models
# =============================================================================


class DocumentIdInput(BaseMCPInput):
    """Input for document (invoice) report tools."""

    document_id: str = Field(..., description="Document identifier", min_length=1)


class TaskReportInput(BaseMCPInput):
    """Input for task report tools."""

    task_id: str = Field(..., description="Task identifier", min_length=1)


class ExpenseIdInput(BaseMCPInput):
    """Input for expense report tools."""

    expense_id: str = Field(..., description="Expense identifier", min_length=1)


class NoteIdInput(BaseMCPInput):
    """Input for note report tools."""

    note_id: str = Field(..., description="Note identifier", min_length=1)


# =============================================================================
# Export Input Models
# =============================================================================


class ExportGenerateInput(BaseMCPInput):
    """Input for generating an export file."""

    report: int = Field(
        ...,
        description="Report type ID (see export_report_types)",
        ge=0,
    )
    start_date: str = Field(..., description="First day (YYYY-MM-DD)", pattern=DATE_PATTERN)
    end_date: str = Field(..., description="Last day, inclusive (YYYY-MM-DD)", pattern=DATE_PATTERN)
    format: Optional[ExportFormat] = Field(default=None, description="File format")
    team_ids: Optional[List[str]] = Field(default=None, description="Filter by teams")
    project_ids: Optional[List[str]] = Field(default=None, description="Filter by projects")
    user_ids: Optional[List[str]] = Field(default=None, description="Filter by users")
    tag_ids: Optional[List[str]] = Field(default=None, description="Filter by tags")
    type: Optional[TaskType] = Field(default=None, description="Entry type")
    filter: Optional[TaskFilter] = Field(default=None, description="Billing filter")
    split_task: Optional[bool] = Field(default=None, description="Split entries across days")
    summarize: Optional[bool] = Field(default=None, description="Summarize entries")
    filename: Optional[str] = Field(default=None, description="File name without extension")


class ExportSendInput(BaseMCPInput):
    """Input for emailing an export."""

    email: str = Field(
        ...,
        description="Recipient email address",
        pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$",
    )
    report: Optional[int] = Field(default=None, description="Report type ID", ge=0)
    start_date: str = Field(..., description="First day (YYYY-MM-DD)", pattern=DATE_PATTERN)
    end_date: str = Field(..., description="Last day, inclusive (YYYY-MM-DD)", pattern=DATE_PATTERN)
    format: Optional[ExportFormat] = Field(default=None, description="File format")
    team_ids: Optional[List[str]] = Field(default=None, description="Filter by teams")
    project_ids: Optional[List[str]] = Field(default=None, description="Filter by projects")
    filename: Optional[str] = Field(default=None, description="File name without extension")


class ExportFromTemplateInput(BaseMCPInput):
    """Input for running a saved export template."""

    template_id: str = Field(..., description="Export template identifier", min_length=1)
    start_date: Optional[str] = Field(default=None, description="First day (YYYY-MM-DD)", pattern=DATE_PATTERN)
    end_date: Optional[str] = Field(default=None, description="Last day (YYYY-MM-DD)", pattern=DATE_PATTERN)


class ExportFieldsInput(BaseMCPInput):
    """Input for listing exportable fields."""

    scope: Optional[Literal["all", "project", "team"]] = Field(
        default=None,
        description="Restrict the field list to one scope",
    )


class ExportTemplateListInput(BaseMCPInput):
    """Input for listing export templates."""

    limit: int = Field(default=20, description="Maximum number of templates", ge=1, le=500)
    page: Optional[int] = Field(default=None, description="Page number (1-based)", ge=1)
    search: Optional[str] = Field(default=None, description="Search text matched against names")
    sort: Optional[Literal["alpha", "name", "created", "lastUpdate"]] = Field(
        default=None,
        description="Sort field",
    )
    order: Optional[SortOrder] = Field(default=None, description="Sort order")


class TemplateIdInput(BaseMCPInput):
    """Input for tools that address one export template."""

    template_id: str = Field(..., description="Export template identifier", min_length=1)


class ExportTemplateCreateInput(BaseMCPInput):
    """Input for creating an export template."""

    name: str = Field(..., description="Template name", min_length=1, max_length=255)
    report: Optional[int] = Field(default=None, description="Report type ID", ge=0)
    format: Optional[ExportFormat] = Field(default=None, description="File format")
    team_ids: Optional[List[str]] = Field(default=None, description="Filter by teams")
    project_ids: Optional[List[str]] = Field(default=None, description="Filter by projects")
    user_ids: Optional[List[str]] = Field(default=None, description="Filter by users")
    type: Optional[TaskType] = Field(default=None, description="Entry type")
    filter: Optional[TaskFilter] = Field(default=None, description="Billing filter")
    split_task: Optional[bool] = Field(default=None, description="Split entries across days")
    summarize: Optional[bool] = Field(default=None, description="Summarize entries")
    email: Optional[str] = Field(
        default=None,
        description="Default recipient for emailed exports",
        pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$",
    )
    filename: Optional[str] = Field(default=None, description="File name without extension")


class ExportTemplateUpdateInput(BaseMCPInput):
    """Input for updating an export template."""

    template_id: str = Field(..., description="Export template identifier", min_length=1)
    name: Optional[str] = Field(default=None, description="New name", min_length=1, max_length=255)
    report: Optional[int] = Field(default=None, description="Report type ID", ge=0)
    format: Optional[ExportFormat] = Field(default=None, description="File format")
    team_ids: Optional[List[str]] = Field(default=None, description="Filter by teams")
    project_ids: Optional[List[str]] = Field(default=None, description="Filter by projects")


# =============================================================================
# Statistics Input Models
# =============================================================================


class StatisticsGetInput(BaseMCPInput):
    """Input for computing time tracking statistics."""

    start_date: str = Field(..., description="First day (YYYY-MM-DD)", pattern=DATE_PATTERN)
    end_date: str = Field(..., description="Last day, inclusive (YYYY-MM-DD)", pattern=DATE_PATTERN)
    project_id: Optional[str] = Field(default=None, description="Filter by project")
    project_ids: Optional[List[str]] = Field(default=None, description="Filter by several projects")
    team_id: Optional[str] = Field(default=None, description="Filter by team")
    team_ids: Optional[List[str]] = Field(default=None, description="Filter by several teams")
    tag_ids: Optional[List[str]] = Field(default=None, description="Filter by tags")
    user_ids: Optional[List[str]] = Field(default=None, description="Filter by users")
    filter: Optional[TaskFilter] = Field(default=None, description="Billing filter")

    @field_validator("start_date", "end_date")
    @classmethod
    def validate_calendar_date(cls, v: str) -> str:
        try:
            date.fromisoformat(v)
        except ValueError:
            raise ValueError(f"Invalid date: {v}")
        return v

    @model_validator(mode="after")
    def check_range(self) -> "StatisticsGetInput":
        if self.end_date < self.start_date:
            raise ValueError("endDate must not be before startDate")
        return self

    def filters(self) -> dict:
        """The filter arguments, echoed back in the statistics result."""
        return self.to_api(exclude={"start_date", "end_date"})
