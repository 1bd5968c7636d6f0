"""Due-soon scan: open tasks whose due date is inside the alert window."""

from datetime import datetime, timedelta, timezone
from typing import List, Optional

from tasktrack.models.constants import DUE_SOON_WINDOW_MINUTES
from tasktrack.models.task import Task, to_utc


def find_due_soon_tasks(
    tasks: List[Task],
    now: Optional[datetime] = None,
    window: timedelta = timedelta(minutes=DUE_SOON_WINDOW_MINUTES),
) -> List[Task]:
    """Return open tasks due in ``(now, now + window]``.

    Pure read; the same task is returned on every scan while it stays in the window.
    """
    now = to_utc(now) if now is not None else datetime.now(timezone.utc)
    horizon = now + window
    return [
        task
        for task in tasks
        if not task.completed and task.due_date is not None and now < task.due_date <= horizon
    ]
