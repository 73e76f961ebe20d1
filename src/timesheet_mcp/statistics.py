"""
Time tracking statistics.

compute_statistics() folds a list of tasks into totals, a per-project
breakdown, a zero-filled daily series for the requested range and, for
ranges longer than two weeks, a weekly series keyed by Monday.

All accumulation happens in seconds; conversion to hours (two decimals)
happens once at the end so totals and series agree.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterable, Optional

from timesheet_mcp.models import (
    DailyHours,
    ProjectBreakdown,
    StatisticsResult,
    Task,
    WeeklyHours,
)

WEEKLY_THRESHOLD_DAYS = 14
UNKNOWN_PROJECT_ID = "unknown"
UNKNOWN_PROJECT_TITLE = "Unknown Project"
HOURS_QUANTUM = Decimal("0.01")


def to_hours(seconds: float) -> float:
    """Seconds to hours, rounded half up to two decimals."""
    return float(Decimal(seconds / 3600).quantize(HOURS_QUANTUM, rounding=ROUND_HALF_UP))


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


@dataclass
class _Bucket:
    total: int = 0
    billable: int = 0
    non_billable: int = 0
    breaks: int = 0
    count: int = 0

    def add(self, duration: int, billable: bool, duration_break: int = 0) -> None:
        self.total += duration
        self.breaks += duration_break
        self.count += 1
        if billable:
            self.billable += duration
        else:
            self.non_billable += duration

    def merge(self, other: "_Bucket") -> None:
        self.total += other.total
        self.billable += other.billable
        self.non_billable += other.non_billable
        self.breaks += other.breaks
        self.count += other.count


@dataclass
class _ProjectBucket(_Bucket):
    title: str = UNKNOWN_PROJECT_TITLE
    color: Optional[int] = None


def _project_key(task: Task) -> tuple[str, str, Optional[int]]:
    project = task.project
    project_id = (project.id if project else None) or task.project_id or UNKNOWN_PROJECT_ID
    title = (project.title if project else None) or UNKNOWN_PROJECT_TITLE
    color = project.color if project else None
    return project_id, title, color


def _date_range(start: date, end: date) -> Iterable[date]:
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def week_start(day: date) -> date:
    """Monday of the ISO week containing ``day`` (Sunday maps to the prior Monday)."""
    return day - timedelta(days=day.weekday())


def inclusive_days(start_date: str, end_date: str) -> int:
    start = date.fromisoformat(start_date[:10])
    end = date.fromisoformat(end_date[:10])
    return (end - start).days + 1


def compute_statistics(
    tasks: Iterable[Task],
    start_date: str,
    end_date: str,
    filters: Optional[dict[str, Any]] = None,
) -> StatisticsResult:
    """
    Aggregate tasks into a StatisticsResult for [start_date, end_date].

    Args:
        tasks: Time entries, typically every task whose start falls in the range.
        start_date: First day of the range (YYYY-MM-DD).
        end_date: Last day of the range, inclusive (YYYY-MM-DD).
        filters: Filters used to select the tasks, echoed back in the result.

    Returns:
        StatisticsResult with hour values rounded to two decimals. The project
        breakdown is ordered by unrounded seconds, descending; equal totals keep
        first-seen order. Tasks without a start timestamp count towards totals
        and projects but not towards the daily or weekly series.
    """
    totals = _Bucket()
    projects: dict[str, _ProjectBucket] = {}
    daily: dict[str, _Bucket] = {}

    for task in tasks:
        duration = task.duration or 0
        duration_break = task.duration_break or 0
        totals.add(duration, task.billable, duration_break)

        project_id, title, color = _project_key(task)
        bucket = projects.get(project_id)
        if bucket is None:
            bucket = projects[project_id] = _ProjectBucket(title=title, color=color)
        bucket.add(duration, task.billable)

        if task.start_date_time:
            day_key = task.start_date_time[:10]
            daily.setdefault(day_key, _Bucket()).add(duration, task.billable, duration_break)

    start = date.fromisoformat(start_date[:10])
    end = date.fromisoformat(end_date[:10])
    for day in _date_range(start, end):
        daily.setdefault(day.isoformat(), _Bucket())

    sorted_days = sorted(daily.items())
    daily_hours = [
        DailyHours(
            date=day_key,
            hours=to_hours(d.total),
            billable_hours=to_hours(d.billable),
            non_billable_hours=to_hours(d.non_billable),
            break_hours=to_hours(d.breaks),
        )
        for day_key, d in sorted_days
    ]

    weekly_hours: Optional[list[WeeklyHours]] = None
    if inclusive_days(start_date, end_date) > WEEKLY_THRESHOLD_DAYS:
        weeks: dict[str, _Bucket] = {}
        for day_key, d in sorted_days:
            key = week_start(date.fromisoformat(day_key)).isoformat()
            weeks.setdefault(key, _Bucket()).merge(d)
        weekly_hours = [
            WeeklyHours(
                week_start=key,
                hours=to_hours(w.total),
                billable_hours=to_hours(w.billable),
                non_billable_hours=to_hours(w.non_billable),
                break_hours=to_hours(w.breaks),
            )
            for key, w in sorted(weeks.items())
        ]

    total_hours = to_hours(totals.total)
    breakdown = []
    for project_id, p in sorted(projects.items(), key=lambda item: item[1].total, reverse=True):
        hours = to_hours(p.total)
        breakdown.append(
            ProjectBreakdown(
                project_id=project_id,
                project_title=p.title,
                project_color=p.color,
                hours=hours,
                billable_hours=to_hours(p.billable),
                non_billable_hours=to_hours(p.non_billable),
                task_count=p.count,
                percentage=round_half_up(hours / total_hours * 100) if total_hours > 0 else 0,
            )
        )

    return StatisticsResult(
        total_hours=total_hours,
        billable_hours=to_hours(totals.billable),
        non_billable_hours=to_hours(totals.non_billable),
        total_break_hours=to_hours(totals.breaks),
        total_tasks=totals.count,
        start_date=start_date,
        end_date=end_date,
        project_breakdown=breakdown,
        daily_hours=daily_hours,
        weekly_hours=weekly_hours,
        filters=filters or None,
    )
