"""Task data model for tasktrack."""

from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


class TaskCategory(str, Enum):
    """Task category enumeration (closed set, in display order)."""
    WORK = "work"
    PERSONAL = "personal"
    SHOPPING = "shopping"
    HEALTH = "health"
    OTHER = "other"


class TaskPriority(str, Enum):
    """Task priority enumeration."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class RecurrenceType(str, Enum):
    """How a completed task comes back."""
    NONE = "none"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


def to_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Normalize a timestamp to UTC; naive timestamps are taken to be UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class Subtask(BaseModel):
    """A checklist item owned by a single task."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: int = Field(..., description="Identifier, unique within the parent task")
    title: str = Field(..., description="Subtask title")
    completed: bool = Field(False, description="Whether the subtask is done")


class Task(BaseModel):
    """Canonical Task model.

    Field names are snake_case in Python and camelCase on the wire
    (``dueDate``, ``lastCompleted``, ``nextDueDate``).
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: int = Field(..., description="Unique task identifier")
    title: str = Field(..., description="Task title")
    completed: bool = Field(False, description="Whether the task is done")
    category: Optional[TaskCategory] = Field(None, description="Task category (None = uncategorized)")
    priority: TaskPriority = Field(TaskPriority.LOW, description="Task priority")
    due_date: Optional[datetime] = Field(None, description="When the task is due (UTC)")
    recurrence: RecurrenceType = Field(RecurrenceType.NONE, description="Recurrence policy")
    last_completed: Optional[datetime] = Field(
        None, description="When a recurring occurrence was last completed"
    )
    next_due_date: Optional[datetime] = Field(
        None, description="Precomputed upcoming occurrence for recurring tasks"
    )
    subtasks: List[Subtask] = Field(default_factory=list, description="Ordered checklist")

    @field_validator("due_date", "last_completed", "next_due_date")
    @classmethod
    def _normalize_timestamps(cls, v):
        return to_utc(v)

    @model_validator(mode="after")
    def _drop_next_due_for_one_shot(self):
        # A one-shot task never carries a next occurrence.
        if self.recurrence == RecurrenceType.NONE and self.next_due_date is not None:
            self.next_due_date = None
        return self

    @property
    def subtask_progress(self) -> float:
        """Fraction of completed subtasks (0.0 when there are none)."""
        if not self.subtasks:
            return 0.0
        done = sum(1 for s in self.subtasks if s.completed)
        return done / len(self.subtasks)
