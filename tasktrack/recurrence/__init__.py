"""Recurrence engine for tasktrack."""

from tasktrack.recurrence.schedule import calculate_next_due_date, handle_recurring_task

__all__ = [
    "calculate_next_due_date",
    "handle_recurring_task",
]
