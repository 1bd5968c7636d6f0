"""Request and response models for the tasktrack API."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from tasktrack.engine.placement import DropTarget
from tasktrack.models.task import RecurrenceType, Subtask, Task, TaskCategory, TaskPriority
from tasktrack.notifications.dispatcher import DueSoonAlert


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TaskCreateRequest(_CamelModel):
    """Body for POST /tasks."""
    title: str
    category: Optional[TaskCategory] = None
    priority: TaskPriority = TaskPriority.LOW
    due_date: Optional[datetime] = None
    recurrence: RecurrenceType = RecurrenceType.NONE


class TaskUpdateRequest(_CamelModel):
    """Body for PATCH /tasks/{id}; only fields that are sent are changed."""
    title: Optional[str] = None
    category: Optional[TaskCategory] = None
    priority: Optional[TaskPriority] = None
    due_date: Optional[datetime] = None
    recurrence: Optional[RecurrenceType] = None


class SubtaskCreateRequest(BaseModel):
    title: str


class CategoryRequest(BaseModel):
    category: TaskCategory


class MoveRequest(BaseModel):
    """Terminal drop of a drag gesture; a null target is a no-op."""
    target: Optional[DropTarget] = None


class TaskResponse(BaseModel):
    task: Task


class SubtaskResponse(BaseModel):
    task_id: int
    subtask: Subtask


class TaskListResponse(BaseModel):
    tasks: List[Task]


class ClearCompletedResponse(BaseModel):
    removed_count: int


class ImportResponse(BaseModel):
    """Response for task import."""
    imported_count: int
    tasks: List[Task]


class DueSoonResponse(BaseModel):
    alerts: List[DueSoonAlert] = Field(default_factory=list)
