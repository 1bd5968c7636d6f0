"""Due-soon alerts.

The scanner decides which tasks are about to fall due; a notifier decides
how to show them. Alerts carry a ``tag`` so the notifier can suppress
repeats across ticks; the scan itself does not deduplicate.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Callable, List, Optional, Protocol

from pydantic import BaseModel, Field

from tasktrack.engine.due_soon import find_due_soon_tasks
from tasktrack.models.task import Task, TaskCategory, TaskPriority

logger = logging.getLogger(__name__)


class DueSoonAlert(BaseModel):
    """What the notifier is told about a task that is about to fall due."""

    task_id: int
    title: str
    priority: TaskPriority
    category: Optional[TaskCategory] = None
    due_date: datetime
    tag: str = Field(..., description="Stable per-task tag for notifier-side suppression")

    @property
    def heading(self) -> str:
        return f"Task Due Soon: {self.title}"

    @property
    def body(self) -> str:
        category = self.category.value if self.category else "None"
        return f"Priority: {self.priority.value}\nCategory: {category}"


def build_alert(task: Task) -> DueSoonAlert:
    return DueSoonAlert(
        task_id=task.id,
        title=task.title,
        priority=task.priority,
        category=task.category,
        due_date=task.due_date,
        tag=f"task-{task.id}",
    )


class TaskNotifier(Protocol):
    def notify(self, alert: DueSoonAlert) -> None: ...


class LoggingNotifier:
    """Default notifier: writes alerts to the log."""

    def notify(self, alert: DueSoonAlert) -> None:
        logger.info("%s (%s)", alert.heading, alert.body.replace("\n", ", "))


def check_for_due_tasks(tasks: List[Task], notifier: TaskNotifier, now: Optional[datetime] = None) -> List[DueSoonAlert]:
    """Send one alert per due-soon task and return the alerts.

    A notifier failure is logged and does not stop the remaining alerts.
    """
    alerts = [build_alert(task) for task in find_due_soon_tasks(tasks, now)]
    for alert in alerts:
        try:
            notifier.notify(alert)
        except Exception:
            logger.exception("Notifier failed for task %s", alert.task_id)
    return alerts


async def run_due_soon_monitor(
        load_tasks: Callable[[], List[Task]],
        notifier: TaskNotifier,
        *,
        interval_seconds: float = 60.0,
) -> None:
    """Polling loop: every interval, load a fresh snapshot of the collection and scan it.

    ``load_tasks`` is blocking and runs in a worker thread.

    To stop the monitor, cancel the coroutine/task.
    """
    sleep_s = max(1.0, float(interval_seconds))
    while True:
        try:
            tasks = await asyncio.to_thread(load_tasks)
            check_for_due_tasks(tasks, notifier)
        except Exception:
            logger.exception("Due-soon check failed")
        await asyncio.sleep(sleep_s)
