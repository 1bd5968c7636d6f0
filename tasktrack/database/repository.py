"""Repository layer: the session-scoped view of the task collection.

Mutations are serialized by a process-wide lock. Each one re-reads the
stored collection, builds a new list, persists it as one blob and only then
swaps it in, so a failed write leaves the in-memory collection untouched
and concurrent requests never overwrite each other's changes.
Operations that reference an unknown task or subtask are silent no-ops.
"""

import logging
import threading
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session

from tasktrack.database.blob_store import BlobStore
from tasktrack.database.database import STORAGE_KEY
from tasktrack.engine.due_soon import find_due_soon_tasks
from tasktrack.engine.filtering import TaskQuery
from tasktrack.engine.grouping import TaskStats, TaskView, build_view, compute_stats
from tasktrack.engine.placement import DropTarget, commit_move, reorder_tasks, set_category
from tasktrack.errors import NotFoundError, ValidationError
from tasktrack.models.task import RecurrenceType, Subtask, Task, TaskCategory, TaskPriority
from tasktrack.models.task_factory import IdAllocator, create_subtask, create_task_base
from tasktrack.recurrence.schedule import calculate_next_due_date, handle_recurring_task
from tasktrack.serialization.codec import deserialize_tasks, serialize_tasks
from tasktrack.serialization.export import export_to_csv, export_to_json
from tasktrack.serialization.importer import import_from_json

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("title", "category", "priority", "due_date", "recurrence")

# One writer per process: every read-modify-write of the blob holds this lock.
_WRITE_LOCK = threading.RLock()


def _clean_title(title: Optional[str]) -> str:
    cleaned = (title or "").strip()
    if not cleaned:
        raise ValidationError("Title must not be empty")
    return cleaned


class TaskRepository:
    """Repository for task collection operations."""

    def __init__(self, db: Session, storage_key: Optional[str] = None, allocate_id: Optional[IdAllocator] = None):
        self.blobs = BlobStore(db)
        self.storage_key = storage_key or STORAGE_KEY
        self._allocate_id = allocate_id or IdAllocator()
        self._tasks: List[Task] = []
        self._reload()

    def _reload(self) -> None:
        """Replace the in-memory collection with the latest stored one."""
        self._tasks = deserialize_tasks(self.blobs.read(self.storage_key, fresh=True))
        self._observe_ids(self._tasks)
        logger.debug(f"Loaded {len(self._tasks)} tasks from {self.storage_key}")

    def _observe_ids(self, tasks: List[Task]) -> None:
        self._allocate_id.observe(t.id for t in tasks)
        self._allocate_id.observe(s.id for t in tasks for s in t.subtasks)

    @contextmanager
    def _writing(self):
        """Hold the write lock around one read-modify-write of the collection."""
        with _WRITE_LOCK:
            self._reload()
            yield

    def _commit(self, tasks: List[Task]) -> None:
        """Persist the new collection, then make it current (call inside _writing)."""
        self.blobs.write(self.storage_key, serialize_tasks(tasks))
        self._tasks = tasks

    def _index(self, task_id: int) -> int:
        for i, task in enumerate(self._tasks):
            if task.id == task_id:
                return i
        raise NotFoundError(f"Task {task_id} not found")

    def _update_task(self, task_id: int, change: Callable[[Task], Task]) -> Optional[Task]:
        """Replace one task with change(task) and persist; None if it does not exist."""
        with self._writing():
            try:
                index = self._index(task_id)
            except NotFoundError as e:
                logger.debug(f"{e}; ignoring")
                return None
            updated = change(self._tasks[index])
            tasks = list(self._tasks)
            tasks[index] = updated
            self._commit(tasks)
            return updated

    # Reads

    def list_tasks(self) -> List[Task]:
        """Snapshot of the collection in master order."""
        return list(self._tasks)

    def get(self, task_id: int) -> Optional[Task]:
        """Get task by ID."""
        try:
            return self._tasks[self._index(task_id)]
        except NotFoundError:
            return None

    def view(self, query: Optional[TaskQuery] = None, now: Optional[datetime] = None) -> TaskView:
        """Filtered, sorted, grouped view of the collection."""
        return build_view(self.list_tasks(), query, now)

    def stats(self) -> TaskStats:
        return compute_stats(self._tasks)

    def due_soon(self, now: Optional[datetime] = None) -> List[Task]:
        return find_due_soon_tasks(self.list_tasks(), now)

    # Task CRUD

    def create(
        self,
        title: str,
        category: Optional[TaskCategory] = None,
        priority: Optional[TaskPriority] = None,
        due_date: Optional[datetime] = None,
        recurrence: Optional[RecurrenceType] = None,
    ) -> Task:
        """Create a new task at the end of the collection."""
        title = _clean_title(title)
        with self._writing():
            task = create_task_base(
                task_id=self._allocate_id(),
                title=title,
                category=category,
                priority=priority,
                due_date=due_date,
                recurrence=recurrence,
            )
            self._commit(self._tasks + [task])
        logger.debug(f"Created task {task.id}: {task.title[:50]}")
        return task

    def toggle(self, task_id: int, now: Optional[datetime] = None) -> Optional[Task]:
        """Flip completion; completing a recurring task reopens it for its next occurrence."""
        def change(task: Task) -> Task:
            toggled = task.model_copy(update={"completed": not task.completed})
            if toggled.completed:
                return handle_recurring_task(toggled, now)
            return toggled

        return self._update_task(task_id, change)

    def edit(self, task_id: int, updates: Dict[str, Any]) -> Optional[Task]:
        """Apply field updates (title, category, priority, due_date, recurrence).

        The next occurrence is recomputed from the resulting due date and
        recurrence.

        Raises:
            ValidationError: If a field is unknown, a value is invalid or the
                title is empty
        """
        unknown = set(updates) - set(EDITABLE_FIELDS)
        if unknown:
            raise ValidationError(f"Fields cannot be edited: {', '.join(sorted(unknown))}")
        if "title" in updates:
            updates = {**updates, "title": _clean_title(updates["title"])}

        def change(task: Task) -> Task:
            merged = {**task.model_dump(), **updates}
            try:
                edited = Task.model_validate(merged)
            except PydanticValidationError as e:
                raise ValidationError(f"Invalid update for task {task_id}: {e.error_count()} error(s)") from e
            if edited.recurrence != RecurrenceType.NONE and edited.due_date is not None:
                next_due = calculate_next_due_date(edited.due_date, edited.recurrence)
            else:
                next_due = None
            return edited.model_copy(update={"next_due_date": next_due})

        updated = self._update_task(task_id, change)
        if updated is not None:
            logger.debug(f"Updated task {task_id}: {updated.title[:50]}")
        return updated

    def delete(self, task_id: int) -> bool:
        """Delete a task by ID."""
        with self._writing():
            try:
                index = self._index(task_id)
            except NotFoundError as e:
                logger.debug(f"{e}; ignoring")
                return False
            self._commit(self._tasks[:index] + self._tasks[index + 1:])
        logger.debug(f"Deleted task {task_id}")
        return True

    def clear_completed(self) -> int:
        """Delete every completed task; returns how many were removed."""
        with self._writing():
            remaining = [t for t in self._tasks if not t.completed]
            removed = len(self._tasks) - len(remaining)
            if removed:
                self._commit(remaining)
        if removed:
            logger.debug(f"Cleared {removed} completed tasks")
        return removed

    # Subtasks

    def add_subtask(self, task_id: int, title: str) -> Optional[Subtask]:
        """Append a subtask to a task."""
        title = _clean_title(title)
        with self._writing():
            subtask = create_subtask(self._allocate_id(), title)
            updated = self._update_task(
                task_id, lambda t: t.model_copy(update={"subtasks": t.subtasks + [subtask]})
            )
        return subtask if updated is not None else None

    def toggle_subtask(self, task_id: int, subtask_id: int) -> Optional[Subtask]:
        """Flip a subtask's completion."""
        def change(task: Task) -> Task:
            return task.model_copy(update={"subtasks": [
                s.model_copy(update={"completed": not s.completed}) if s.id == subtask_id else s
                for s in task.subtasks
            ]})

        with self._writing():
            if not self._has_subtask(task_id, subtask_id):
                return None
            updated = self._update_task(task_id, change)
        return next(s for s in updated.subtasks if s.id == subtask_id)

    def delete_subtask(self, task_id: int, subtask_id: int) -> bool:
        """Remove a subtask from a task."""
        with self._writing():
            if not self._has_subtask(task_id, subtask_id):
                return False
            self._update_task(
                task_id,
                lambda t: t.model_copy(update={"subtasks": [s for s in t.subtasks if s.id != subtask_id]}),
            )
        return True

    def _has_subtask(self, task_id: int, subtask_id: int) -> bool:
        task = self.get(task_id)
        if task is None or not any(s.id == subtask_id for s in task.subtasks):
            logger.debug(f"Subtask {subtask_id} of task {task_id} not found; ignoring")
            return False
        return True

    # Placement

    def set_category(self, task_id: int, category: TaskCategory) -> Optional[Task]:
        """Speculative recategorization while a drag is in progress (idempotent)."""
        with self._writing():
            task = self.get(task_id)
            if task is None:
                logger.debug(f"Task {task_id} not found; ignoring")
                return None
            if task.category == category:
                return task
            self._commit(set_category(self._tasks, task_id, category))
            return self.get(task_id)

    def reorder(self, source_id: int, target_id: int) -> List[Task]:
        """Move a task to another task's position in the master order."""
        with self._writing():
            tasks = reorder_tasks(self._tasks, source_id, target_id)
            if tasks != self._tasks:
                self._commit(tasks)
            return self.list_tasks()

    def commit_move(self, task_id: int, target: Optional[DropTarget]) -> List[Task]:
        """Apply the terminal drop of a drag gesture."""
        with self._writing():
            tasks = commit_move(self._tasks, task_id, target)
            if tasks != self._tasks:
                self._commit(tasks)
            return self.list_tasks()

    # Import / export

    def import_json(self, content) -> List[Task]:
        """Append tasks from a JSON export document.

        Raises:
            ValidationError: If the document is malformed; nothing is imported
        """
        with self._writing():
            imported = import_from_json(content, self._allocate_id)
            if imported:
                self._commit(self._tasks + imported)
        logger.debug(f"Imported {len(imported)} tasks")
        return imported

    def export_json(self) -> str:
        return export_to_json(self._tasks)

    def export_csv(self) -> str:
        return export_to_csv(self._tasks)
