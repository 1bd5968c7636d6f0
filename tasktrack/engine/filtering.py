"""Task filtering for tasktrack.

A task is visible when it passes every active criterion: free-text search,
category, priority and status bucket.
"""

from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import List, Literal, Optional, Union

from pydantic import BaseModel, Field

from tasktrack.models.constants import FILTER_ALL
from tasktrack.models.task import Task, TaskCategory, TaskPriority, to_utc


class StatusFilter(str, Enum):
    """Status bucket enumeration."""
    ALL = "all"
    ACTIVE = "active"
    COMPLETED = "completed"
    OVERDUE = "overdue"
    TODAY = "today"
    UPCOMING = "upcoming"


class TaskQuery(BaseModel):
    """Filter criteria; "all" (or an empty search) disables a criterion."""

    search: str = Field("", description="Case-insensitive title substring")
    category: Union[Literal["all"], TaskCategory] = Field(FILTER_ALL, description="Category or 'all'")
    priority: Union[Literal["all"], TaskPriority] = Field(FILTER_ALL, description="Priority or 'all'")
    status: StatusFilter = Field(StatusFilter.ALL, description="Status bucket")


def _utc_now(now: Optional[datetime]) -> datetime:
    return to_utc(now) if now is not None else datetime.now(timezone.utc)


def _day_bounds(now: datetime) -> tuple:
    start = now.replace(hour=0, minute=0, second=0, microsecond=0)
    return start, start + timedelta(days=1)


def is_overdue(due_date: Optional[datetime], now: Optional[datetime] = None) -> bool:
    """True when the due date exists and is strictly in the past."""
    if due_date is None:
        return False
    return to_utc(due_date) < _utc_now(now)


def is_today(due_date: Optional[datetime], now: Optional[datetime] = None) -> bool:
    """True when the due date falls on the current (UTC) calendar day."""
    if due_date is None:
        return False
    start, end = _day_bounds(_utc_now(now))
    return start <= to_utc(due_date) < end


def is_upcoming(due_date: Optional[datetime], now: Optional[datetime] = None) -> bool:
    """True when the due date falls on a calendar day after today."""
    if due_date is None:
        return False
    _, end = _day_bounds(_utc_now(now))
    return to_utc(due_date) >= end


def matches_status(task: Task, status: StatusFilter, now: Optional[datetime] = None) -> bool:
    status = StatusFilter(status)
    if status == StatusFilter.ALL:
        return True
    if status == StatusFilter.COMPLETED:
        return task.completed
    if task.completed:
        return False
    if status == StatusFilter.ACTIVE:
        return True
    if status == StatusFilter.OVERDUE:
        return is_overdue(task.due_date, now)
    if status == StatusFilter.TODAY:
        return is_today(task.due_date, now)
    if status == StatusFilter.UPCOMING:
        return is_upcoming(task.due_date, now)
    return False


def matches_query(task: Task, query: TaskQuery, now: Optional[datetime] = None) -> bool:
    """Return True if the task passes every active criterion of the query."""
    if query.search and query.search.lower() not in task.title.lower():
        return False

    if query.category != FILTER_ALL and task.category != query.category:
        return False

    if query.priority != FILTER_ALL and task.priority != query.priority:
        return False

    return matches_status(task, query.status, now)


def filter_tasks(tasks: List[Task], query: TaskQuery, now: Optional[datetime] = None) -> List[Task]:
    """Filter tasks, preserving input order."""
    now = _utc_now(now)
    return [task for task in tasks if matches_query(task, query, now)]
