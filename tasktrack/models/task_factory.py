"""Task creation factory for tasktrack.

This module centralizes id allocation and task creation so every code path
(API, import, tests) produces tasks with the same defaults.
"""

import time
from datetime import datetime
from typing import Iterable, Optional

from tasktrack.models.task import Task, Subtask, TaskCategory, TaskPriority, RecurrenceType, to_utc
from tasktrack.models.constants import DEFAULT_PRIORITY, DEFAULT_RECURRENCE
from tasktrack.recurrence.schedule import calculate_next_due_date


class IdAllocator:
    """Wall-clock derived, strictly increasing integer ids.

    Ids are milliseconds since the epoch; when two ids are requested within
    the same millisecond (or the clock goes backwards) the previous id is
    bumped by one instead.
    """

    def __init__(self, floor: int = 0, clock=time.time):
        self._last = floor
        self._clock = clock

    def observe(self, ids: Iterable[int]) -> None:
        """Make sure future ids are greater than every id in ``ids``."""
        for value in ids:
            if value > self._last:
                self._last = value

    def __call__(self) -> int:
        candidate = int(self._clock() * 1000)
        if candidate <= self._last:
            candidate = self._last + 1
        self._last = candidate
        return candidate


def create_task_base(
    task_id: int,
    title: str,
    category: Optional[TaskCategory] = None,
    priority: Optional[TaskPriority] = None,
    due_date: Optional[datetime] = None,
    recurrence: Optional[RecurrenceType] = None,
) -> Task:
    """Create a new, open task with defaults applied.

    Args:
        task_id: Freshly allocated task id
        title: Task title (callers trim and reject empty titles)
        category: Task category (None = uncategorized)
        priority: Task priority (defaults to constant)
        due_date: Optional due date
        recurrence: Recurrence policy (defaults to none)

    Returns:
        Task with ``next_due_date`` precomputed for recurring tasks
    """
    recurrence = recurrence if recurrence is not None else DEFAULT_RECURRENCE
    due_date = to_utc(due_date)
    return Task(
        id=task_id,
        title=title,
        completed=False,
        category=category,
        priority=priority if priority is not None else DEFAULT_PRIORITY,
        due_date=due_date,
        recurrence=recurrence,
        last_completed=None,
        next_due_date=calculate_next_due_date(due_date, recurrence),
        subtasks=[],
    )


def create_subtask(subtask_id: int, title: str) -> Subtask:
    """Create an open subtask."""
    return Subtask(id=subtask_id, title=title, completed=False)
