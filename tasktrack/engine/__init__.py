"""Query and placement engine for tasktrack."""

from tasktrack.engine.filtering import StatusFilter, TaskQuery, filter_tasks, is_overdue, is_today, is_upcoming
from tasktrack.engine.ranking import sort_tasks, priority_weight
from tasktrack.engine.grouping import TaskStats, TaskView, build_view, compute_stats, group_by_category
from tasktrack.engine.placement import CategoryTarget, DropTarget, TaskTarget, commit_move, reorder_tasks, set_category
from tasktrack.engine.due_soon import find_due_soon_tasks

__all__ = [
    "StatusFilter",
    "TaskQuery",
    "filter_tasks",
    "is_overdue",
    "is_today",
    "is_upcoming",
    "sort_tasks",
    "priority_weight",
    "TaskStats",
    "TaskView",
    "build_view",
    "compute_stats",
    "group_by_category",
    "CategoryTarget",
    "DropTarget",
    "TaskTarget",
    "commit_move",
    "reorder_tasks",
    "set_category",
    "find_due_soon_tasks",
]
