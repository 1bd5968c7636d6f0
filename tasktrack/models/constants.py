"""Constants for tasktrack.

This module centralizes all magic numbers and default values used throughout the application.
"""

from tasktrack.models.task import TaskPriority, RecurrenceType


# Task defaults
DEFAULT_PRIORITY = TaskPriority.LOW
DEFAULT_RECURRENCE = RecurrenceType.NONE

# Sorting: higher weight sorts first
PRIORITY_WEIGHTS = {
    TaskPriority.HIGH: 3,
    TaskPriority.MEDIUM: 2,
    TaskPriority.LOW: 1,
}

# Grouping bucket for tasks without a category (always last)
UNCATEGORIZED = "uncategorized"

# Filter value meaning "no constraint"
FILTER_ALL = "all"

# Due-soon alerts
DUE_SOON_WINDOW_MINUTES = 30

# Persistence
DEFAULT_STORAGE_KEY = "todos"

# Export
EXPORT_FILENAME_PREFIX = "tasks"
CSV_HEADERS = ["ID", "Title", "Category", "Priority", "Status", "Due Date", "Recurrence", "Subtasks"]
