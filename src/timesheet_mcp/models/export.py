"""Report export models."""

from __future__ import annotations

from typing import List, Optional

from pydantic import Field

from timesheet_mcp.models.base import TimesheetModel


class ExportTemplate(TimesheetModel):
    """A saved export configuration."""

    id: Optional[str] = None
    name: Optional[str] = None
    report: Optional[int] = None
    format: Optional[str] = None
    summarize: Optional[bool] = None
    split_task: Optional[bool] = None
    team_ids: Optional[List[str]] = None
    project_ids: Optional[List[str]] = None
    user_ids: Optional[List[str]] = None


class ExportResult(TimesheetModel):
    """Location of a generated export file."""

    url: Optional[str] = None
    filename: Optional[str] = None
    content_type: Optional[str] = None


class ExportField(TimesheetModel):
    field_id: Optional[str] = None
    name: Optional[str] = None


class ExportFields(TimesheetModel):
    fields: List[ExportField] = Field(default_factory=list)


class ReportType(TimesheetModel):
    id: Optional[int] = None
    name: Optional[str] = None
    description: Optional[str] = None


class ReportTypes(TimesheetModel):
    reports: List[ReportType] = Field(default_factory=list)
