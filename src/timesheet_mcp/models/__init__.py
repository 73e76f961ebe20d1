"""
Timesheet Data Models.

Pydantic models for the entities returned by the Timesheet API and for the
derived statistics result. All models accept and emit the API's camelCase
field names and keep unknown upstream fields intact.

Models:
    - Timer, Task, Pause, Note, Expense, Tag: time tracking
    - Project, Team: organisation
    - ExportTemplate, ExportResult, ExportFields, ReportTypes: exports
    - StatisticsResult: aggregated hours for a date range
    - Page: one page of a paginated list
"""

from timesheet_mcp.models.base import TimesheetModel, Page, PageParams
from timesheet_mcp.models.project import Project, Team
from timesheet_mcp.models.task import (
    Task,
    Timer,
    TimerStatus,
    Pause,
    Note,
    Expense,
    Tag,
)
from timesheet_mcp.models.export import (
    ExportTemplate,
    ExportResult,
    ExportField,
    ExportFields,
    ReportType,
    ReportTypes,
)
from timesheet_mcp.models.statistics import (
    StatisticsResult,
    ProjectBreakdown,
    DailyHours,
    WeeklyHours,
)

__all__ = [
    "TimesheetModel",
    "Page",
    "PageParams",
    "Project",
    "Team",
    "Task",
    "Timer",
    "TimerStatus",
    "Pause",
    "Note",
    "Expense",
    "Tag",
    "ExportTemplate",
    "ExportResult",
    "ExportField",
    "ExportFields",
    "ReportType",
    "ReportTypes",
    "StatisticsResult",
    "ProjectBreakdown",
    "DailyHours",
    "WeeklyHours",
]
