"""Recurrence arithmetic and the completion transition for repeating tasks.

All calendar arithmetic happens in UTC. Timestamps are normalized to UTC
when they enter the model, so a "day" here is always a UTC day.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional

from dateutil.relativedelta import relativedelta

from tasktrack.models.task import RecurrenceType, Task, to_utc


_OFFSETS = {
    RecurrenceType.DAILY: timedelta(days=1),
    RecurrenceType.WEEKLY: timedelta(days=7),
    # relativedelta clamps to the last valid day (Jan 31 + 1 month -> Feb 28/29).
    RecurrenceType.MONTHLY: relativedelta(months=1),
}


def calculate_next_due_date(
    due_date: Optional[datetime],
    recurrence_type: RecurrenceType,
) -> Optional[datetime]:
    """Return the occurrence after ``due_date`` for the given recurrence.

    Returns None when there is no base date or the task does not repeat.
    """
    if due_date is None:
        return None
    offset = _OFFSETS.get(RecurrenceType(recurrence_type))
    if offset is None:
        return None
    return to_utc(due_date) + offset


def handle_recurring_task(task: Task, now: Optional[datetime] = None) -> Task:
    """Apply the completion transition to a task that was just completed.

    One-shot tasks are returned unchanged. Recurring tasks reopen: the due
    date moves to the precomputed next occurrence (or is recomputed from the
    old due date) and the occurrence after that is precomputed. Subtasks keep
    their completion state.
    """
    if task.recurrence == RecurrenceType.NONE:
        return task

    now = to_utc(now) if now is not None else datetime.now(timezone.utc)
    new_due = task.next_due_date
    if new_due is None:
        new_due = calculate_next_due_date(task.due_date, task.recurrence)

    return task.model_copy(
        update={
            "completed": False,
            "last_completed": now,
            "due_date": new_due,
            "next_due_date": calculate_next_due_date(new_due, task.recurrence),
        }
    )
