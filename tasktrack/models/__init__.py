"""Data models for tasktrack."""

from tasktrack.models.task import Task, Subtask, TaskCategory, TaskPriority, RecurrenceType

__all__ = [
    "Task",
    "Subtask",
    "TaskCategory",
    "TaskPriority",
    "RecurrenceType",
]
