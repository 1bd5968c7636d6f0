"""Import tasks from a JSON export document.

The document is validated strictly: required fields must be present and of
the right JSON type (no string-to-bool or float-to-int coercion). Imported
tasks always get fresh ids so they can be appended to an existing
collection, and their next occurrence is recomputed from the due date and
recurrence rather than trusted from the document.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from tasktrack.errors import ValidationError
from tasktrack.models.task import RecurrenceType, Subtask, Task, TaskCategory, TaskPriority
from tasktrack.recurrence.schedule import calculate_next_due_date

logger = logging.getLogger(__name__)


def _non_empty_title(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("title must not be empty")
    return v


class SubtaskDocument(BaseModel):
    """Subtask entry of an import document."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, strict=True)

    id: Optional[int] = None
    title: str
    completed: bool

    @field_validator("title")
    @classmethod
    def _check_title(cls, v):
        return _non_empty_title(v)


class TaskDocument(BaseModel):
    """Task entry of an import document (same shape as the JSON export)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, strict=True)

    id: Optional[int] = None
    title: str
    completed: bool
    category: Optional[TaskCategory] = None
    priority: TaskPriority
    due_date: Optional[datetime] = None
    recurrence: RecurrenceType = RecurrenceType.NONE
    last_completed: Optional[datetime] = None
    next_due_date: Optional[datetime] = None
    subtasks: List[SubtaskDocument] = Field(default_factory=list)

    @field_validator("title")
    @classmethod
    def _check_title(cls, v):
        return _non_empty_title(v)


_DOCUMENT = TypeAdapter(List[TaskDocument])


def _subtasks_from_document(entries: List[SubtaskDocument], allocate_id: Callable[[], int]) -> List[Subtask]:
    seen = set()
    subtasks: List[Subtask] = []
    for entry in entries:
        subtask_id = entry.id
        if subtask_id is None or subtask_id in seen:
            subtask_id = allocate_id()
        seen.add(subtask_id)
        subtasks.append(Subtask(id=subtask_id, title=entry.title, completed=entry.completed))
    return subtasks


def parse_import_document(content: Union[str, bytes]) -> List[TaskDocument]:
    """Validate an import document, raising ValidationError on any problem."""
    try:
        return _DOCUMENT.validate_json(content)
    except PydanticValidationError as e:
        first = e.errors()[0] if e.errors() else {}
        location = ".".join(str(part) for part in first.get("loc", ()))
        message = first.get("msg", "invalid document")
        raise ValidationError(
            f"Invalid import document ({e.error_count()} error(s)); first: {location}: {message}"
        ) from e


def import_from_json(content: Union[str, bytes], allocate_id: Callable[[], int]) -> List[Task]:
    """Parse an exported JSON document into new tasks with fresh ids.

    Args:
        content: JSON text (an array of task objects)
        allocate_id: Source of new unique ids

    Returns:
        Tasks ready to be appended to the collection

    Raises:
        ValidationError: If the document is malformed or a required field is
            missing or has the wrong type
    """
    documents = parse_import_document(content)
    tasks: List[Task] = []
    for doc in documents:
        tasks.append(
            Task(
                id=allocate_id(),
                title=doc.title,
                completed=doc.completed,
                category=doc.category,
                priority=doc.priority,
                due_date=doc.due_date,
                recurrence=doc.recurrence,
                last_completed=doc.last_completed,
                next_due_date=calculate_next_due_date(doc.due_date, doc.recurrence),
                subtasks=_subtasks_from_document(doc.subtasks, allocate_id),
            )
        )
    logger.debug(f"Parsed {len(tasks)} tasks from import document")
    return tasks
