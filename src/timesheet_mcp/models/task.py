"""
Task (time entry) and timer models.

A Task is one tracked time entry. Durations are in seconds. The Timer is
the user's single live tracking slot; while running or paused it carries
the task being tracked.
"""

from __future__ import annotations

from typing import Any, List, Optional

from pydantic import Field, field_validator

from timesheet_mcp.models.base import TimesheetModel
from timesheet_mcp.models.project import Project


class TimerStatus:
    """Known timer status values."""

    RUNNING = "running"
    PAUSED = "paused"
    STOPPED = "stopped"


class Tag(TimesheetModel):
    id: Optional[str] = None
    name: Optional[str] = None
    color: Optional[int] = None


class Pause(TimesheetModel):
    id: Optional[str] = None
    description: Optional[str] = None
    start_date_time: Optional[str] = None
    end_date_time: Optional[str] = None
    duration: Optional[int] = None


class Note(TimesheetModel):
    id: Optional[str] = None
    task_id: Optional[str] = None
    text: Optional[str] = None
    date_time: Optional[str] = None


class Expense(TimesheetModel):
    id: Optional[str] = None
    task_id: Optional[str] = None
    description: Optional[str] = None
    amount: Optional[float] = None
    date_time: Optional[str] = None


class Task(TimesheetModel):
    """A tracked time entry."""

    id: Optional[str] = None
    description: Optional[str] = None
    start_date_time: Optional[str] = None
    end_date_time: Optional[str] = None
    duration: int = 0
    duration_break: int = 0
    billable: bool = False
    paid: Optional[bool] = None
    billed: Optional[bool] = None
    running: Optional[bool] = None
    type_id: Optional[int] = None
    location: Optional[str] = None
    location_end: Optional[str] = None
    distance: Optional[float] = None
    phone_number: Optional[str] = None
    feeling: Optional[int] = None
    project_id: Optional[str] = None
    project: Optional[Project] = None
    tags: List[Tag] = Field(default_factory=list)
    notes: List[Note] = Field(default_factory=list)
    expenses: List[Expense] = Field(default_factory=list)
    pauses: List[Pause] = Field(default_factory=list)

    @field_validator("duration", "duration_break", mode="before")
    @classmethod
    def none_to_zero(cls, v: Any) -> Any:
        return v if v is not None else 0

    @field_validator("billable", mode="before")
    @classmethod
    def none_to_false(cls, v: Any) -> Any:
        return bool(v) if v is not None else False

    @field_validator("tags", "notes", "expenses", "pauses", mode="before")
    @classmethod
    def none_to_empty(cls, v: Any) -> Any:
        return v if v is not None else []

    @property
    def hours(self) -> int:
        return self.duration // 3600

    @property
    def minutes(self) -> int:
        return (self.duration % 3600) // 60

    @property
    def project_title(self) -> Optional[str]:
        return self.project.title if self.project else None


class Timer(TimesheetModel):
    """Current timer state."""

    status: str = TimerStatus.STOPPED
    task: Optional[Task] = None
    pause: Optional[Pause] = None

    @field_validator("status", mode="before")
    @classmethod
    def default_status(cls, v: Any) -> Any:
        return v or TimerStatus.STOPPED

    @property
    def is_active(self) -> bool:
        """True while a task is being tracked (running or paused)."""
        return self.task is not None and self.status != TimerStatus.STOPPED
