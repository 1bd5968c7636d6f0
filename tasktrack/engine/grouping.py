"""Category grouping and the derived task view."""

from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from tasktrack.engine.filtering import TaskQuery, filter_tasks
from tasktrack.engine.ranking import sort_tasks
from tasktrack.models.constants import UNCATEGORIZED
from tasktrack.models.task import Task, TaskCategory


class TaskStats(BaseModel):
    """Completion counters for the whole collection."""

    completed: int = 0
    total: int = 0
    completion_percentage: int = 0


class TaskView(BaseModel):
    """Filtered, sorted tasks grouped by category, plus collection stats."""

    groups: Dict[str, List[Task]] = Field(default_factory=dict)
    stats: TaskStats = Field(default_factory=TaskStats)


def bucket_names() -> List[str]:
    """Bucket order: every category in enumeration order, then uncategorized."""
    return [c.value for c in TaskCategory] + [UNCATEGORIZED]


def group_by_category(tasks: List[Task]) -> Dict[str, List[Task]]:
    """Partition tasks by category, keeping their order within each bucket.

    Every bucket is present even when empty.
    """
    groups: Dict[str, List[Task]] = {name: [] for name in bucket_names()}
    for task in tasks:
        key = TaskCategory(task.category).value if task.category else UNCATEGORIZED
        groups[key].append(task)
    return groups


def compute_stats(tasks: List[Task]) -> TaskStats:
    total = len(tasks)
    completed = sum(1 for t in tasks if t.completed)
    # Round half up.
    percentage = int(completed * 100 / total + 0.5) if total else 0
    return TaskStats(completed=completed, total=total, completion_percentage=percentage)


def build_view(tasks: List[Task], query: Optional[TaskQuery] = None, now: Optional[datetime] = None) -> TaskView:
    """Filter, sort and group tasks in one pass; stats cover the whole collection."""
    query = query or TaskQuery()
    visible = sort_tasks(filter_tasks(tasks, query, now))
    return TaskView(groups=group_by_category(visible), stats=compute_stats(tasks))
