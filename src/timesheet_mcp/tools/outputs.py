"""
Pydantic Output Models for Timesheet MCP Tools.

These models only describe the structured content each tool returns; the
JSON schema generated from them is advertised as the tool's output schema.
They allow extra keys so upstream fields pass through untouched.
"""

from __future__ import annotations

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class BaseMCPOutput(BaseModel):
    """Base output model with common configuration."""

    model_config = ConfigDict(
        extra="allow",
        alias_generator=to_camel,
        populate_by_name=True,
    )


class WithAccountContext(BaseMCPOutput):
    """Profile and settings fetched alongside the primary call."""

    profile: Optional[dict[str, Any]] = None
    settings: Optional[dict[str, Any]] = None


class SuccessOutput(BaseMCPOutput):
    success: bool


class DeletedOutput(SuccessOutput):
    deleted_id: str


# =============================================================================
# Timer
# =============================================================================


class TimerOutput(WithAccountContext):
    status: str
    duration: int
    hours: int
    minutes: int
    task: Optional[dict[str, Any]] = None
    pause: Optional[dict[str, Any]] = None


class NoteAddedOutput(SuccessOutput):
    note_text: str


class ExpenseAddedOutput(SuccessOutput):
    expense_description: str
    amount: float


class PauseAddedOutput(SuccessOutput):
    duration: int


# =============================================================================
# Teams & Projects
# =============================================================================


class TeamListOutput(BaseMCPOutput):
    teams: List[dict[str, Any]]
    total_count: int


class ProjectListOutput(WithAccountContext):
    projects: List[dict[str, Any]]
    total_count: int
    query_params: Optional[dict[str, Any]] = None


class ProjectOutput(BaseMCPOutput):
    id: Optional[str] = None
    title: Optional[str] = None


# =============================================================================
# Tasks
# =============================================================================


class TaskListOutput(WithAccountContext):
    tasks: List[dict[str, Any]]
    total_count: int
    query_params: Optional[dict[str, Any]] = None


class TaskOutput(BaseMCPOutput):
    id: Optional[str] = None
    duration: Optional[int] = None


class TaskUpdatedOutput(SuccessOutput):
    id: str


# =============================================================================
# Reports
# =============================================================================


class ReportOutput(BaseMCPOutput):
    """Raw report data; the shape depends on the report kind."""


class PdfOutput(SuccessOutput):
    size: int


class XmlOutput(SuccessOutput):
    document_id: str
    xml: str


# =============================================================================
# Exports
# =============================================================================


class ExportFileOutput(BaseMCPOutput):
    url: Optional[str] = None
    filename: Optional[str] = None
    content_type: Optional[str] = None


class ExportSentOutput(SuccessOutput):
    email: str


class TemplateExportOutput(SuccessOutput):
    template_id: str
    size: int


class ExportFieldsOutput(BaseMCPOutput):
    fields: List[dict[str, Any]]


class ReportTypesOutput(BaseMCPOutput):
    reports: List[dict[str, Any]]


class TemplateListOutput(BaseMCPOutput):
    templates: List[dict[str, Any]]
    total_count: int


class TemplateOutput(BaseMCPOutput):
    id: Optional[str] = None
    name: Optional[str] = None


# =============================================================================
# Statistics
# =============================================================================


class StatisticsOutput(WithAccountContext):
    total_hours: float
    billable_hours: float
    non_billable_hours: float
    total_break_hours: float
    total_tasks: int
    start_date: str
    end_date: str
    project_breakdown: List[dict[str, Any]]
    daily_hours: List[dict[str, Any]]
    weekly_hours: Optional[List[dict[str, Any]]] = None
    filters: Optional[dict[str, Any]] = None
    truncated: bool = False
