"""Statistics result models produced by the aggregator."""

from __future__ import annotations

from typing import Any, List, Optional

from pydantic import Field

from timesheet_mcp.models.base import TimesheetModel


class ProjectBreakdown(TimesheetModel):
    project_id: str
    project_title: str
    project_color: Optional[int] = None
    hours: float = 0.0
    billable_hours: float = 0.0
    non_billable_hours: float = 0.0
    task_count: int = 0
    percentage: int = 0


class DailyHours(TimesheetModel):
    date: str
    hours: float = 0.0
    billable_hours: float = 0.0
    non_billable_hours: float = 0.0
    break_hours: float = 0.0


class WeeklyHours(TimesheetModel):
    week_start: str
    hours: float = 0.0
    billable_hours: float = 0.0
    non_billable_hours: float = 0.0
    break_hours: float = 0.0


class StatisticsResult(TimesheetModel):
    """Aggregated hours for a date range."""

    total_hours: float = 0.0
    billable_hours: float = 0.0
    non_billable_hours: float = 0.0
    total_break_hours: float = 0.0
    total_tasks: int = 0
    start_date: str
    end_date: str
    project_breakdown: List[ProjectBreakdown] = Field(default_factory=list)
    daily_hours: List[DailyHours] = Field(default_factory=list)
    weekly_hours: Optional[List[WeeklyHours]] = None
    filters: Optional[dict[str, Any]] = None
    truncated: bool = False
