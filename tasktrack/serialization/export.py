"""Export the task collection as JSON or CSV."""

import csv
import io
from datetime import date
from typing import List, Optional

from pydantic import TypeAdapter

from tasktrack.models.constants import CSV_HEADERS, EXPORT_FILENAME_PREFIX
from tasktrack.models.task import Task, TaskCategory

_TASK_LIST = TypeAdapter(List[Task])

EXPORT_FORMATS = ("json", "csv")


def export_to_json(tasks: List[Task]) -> str:
    """Human-diffable JSON array; absent optional fields are written as null."""
    return _TASK_LIST.dump_json(tasks, by_alias=True, indent=2).decode("utf-8")


def _csv_row(task: Task) -> list:
    done = sum(1 for s in task.subtasks if s.completed)
    return [
        task.id,
        task.title,
        TaskCategory(task.category).value if task.category else "",
        task.priority.value,
        "Completed" if task.completed else "Active",
        task.due_date.isoformat() if task.due_date else "",
        task.recurrence.value,
        f"{done}/{len(task.subtasks)}",
    ]


def export_to_csv(tasks: List[Task]) -> str:
    """Header row plus one row per task.

    Subtasks are reduced to a completed/total count; CSV is export-only.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(CSV_HEADERS)
    for task in tasks:
        writer.writerow(_csv_row(task))
    return buffer.getvalue()


def export_filename(fmt: str, today: Optional[date] = None) -> str:
    """File name for an export, e.g. ``tasks-2024-01-31.json``."""
    if fmt not in EXPORT_FORMATS:
        raise ValueError(f"Unsupported export format: {fmt}")
    today = today or date.today()
    return f"{EXPORT_FILENAME_PREFIX}-{today.isoformat()}.{fmt}"
