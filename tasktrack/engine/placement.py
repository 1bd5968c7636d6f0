"""Placement moves produced by dragging a task onto a drop target.

A drop target is either another task (reorder within the master ordering)
or a category bucket (recategorize). While a gesture is in progress the
caller may apply ``set_category`` repeatedly; ``commit_move`` is the
terminal drop. Every function returns a new list and leaves its input alone.
"""

from __future__ import annotations

from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from tasktrack.models.task import Task, TaskCategory


class TaskTarget(BaseModel):
    """Drop onto another task."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["task"] = "task"
    task_id: int


class CategoryTarget(BaseModel):
    """Drop onto a category bucket."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["category"] = "category"
    category: TaskCategory


DropTarget = Annotated[Union[TaskTarget, CategoryTarget], Field(discriminator="kind")]


def _index_of(tasks: List[Task], task_id: int) -> int:
    for i, task in enumerate(tasks):
        if task.id == task_id:
            return i
    return -1


def reorder_tasks(tasks: List[Task], source_id: int, target_id: int) -> List[Task]:
    """Move the source task to the target task's position.

    Tasks in between shift by one. Unknown ids and source == target are no-ops.
    """
    result = list(tasks)
    old_index = _index_of(result, source_id)
    new_index = _index_of(result, target_id)
    if old_index < 0 or new_index < 0 or old_index == new_index:
        return result
    moved = result.pop(old_index)
    result.insert(new_index, moved)
    return result


def set_category(tasks: List[Task], source_id: int, category: TaskCategory) -> List[Task]:
    """Assign the source task to a category without changing its position.

    Idempotent: reapplying the same category leaves the tasks as they are.
    """
    category = TaskCategory(category)
    return [
        task.model_copy(update={"category": category})
        if task.id == source_id and task.category != category
        else task
        for task in tasks
    ]


def commit_move(tasks: List[Task], source_id: int, target: Optional[DropTarget]) -> List[Task]:
    """Apply the terminal drop of a drag gesture."""
    if target is None:
        return list(tasks)
    if target.kind == "task":
        return reorder_tasks(tasks, source_id, target.task_id)
    if target.kind == "category":
        return set_category(tasks, source_id, target.category)
    return list(tasks)
