"""Display ordering for tasktrack.

Sorts tasks by priority weight, then by due date within each priority.
This produces a deterministic ordering for the task view.
"""

from typing import List

from tasktrack.models.constants import PRIORITY_WEIGHTS
from tasktrack.models.task import Task, TaskPriority


def sort_tasks(tasks: List[Task]) -> List[Task]:
    """Sort tasks for display.

    Tasks are sorted:
    1. By priority weight (high before medium before low)
    2. Within a priority, by due date (soonest first)
    3. Tasks without due dates go after those with due dates

    The sort is stable, so undated tasks of equal priority keep their
    relative input order.

    Args:
        tasks: List of tasks to sort

    Returns:
        New list of tasks in display order
    """
    return sorted(tasks, key=lambda t: (_priority_sort_key(t), _due_date_sort_key(t)))


def priority_weight(priority: TaskPriority) -> int:
    """Numeric weight of a priority (higher = more important)."""
    return PRIORITY_WEIGHTS[TaskPriority(priority)]


def _priority_sort_key(task: Task) -> int:
    # Negate so that higher weights sort first in an ascending sort.
    return -priority_weight(task.priority)


def _due_date_sort_key(task: Task) -> tuple:
    """Get sort key for due date.

    Returns:
        Tuple for sorting: (has_due_date: 0 or 1, due timestamp or inf)
    """
    if task.due_date:
        return (0, task.due_date.timestamp())
    return (1, float('inf'))
