"""Project and team models."""

from __future__ import annotations

from typing import Optional

from timesheet_mcp.models.base import TimesheetModel


class Project(TimesheetModel):
    """A Timesheet project."""

    id: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    color: Optional[int] = None
    archived: bool = False
    team_id: Optional[str] = None
    employer: Optional[str] = None
    duration: Optional[int] = None
    task_default_billable: Optional[bool] = None

    @property
    def display_title(self) -> str:
        return self.title or "Untitled"


class Team(TimesheetModel):
    """A Timesheet team."""

    id: str
    name: Optional[str] = None
    description: Optional[str] = None
    color: Optional[int] = None
    organization_id: Optional[str] = None
