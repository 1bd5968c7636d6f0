"""Due-soon notifications for tasktrack."""

from tasktrack.notifications.dispatcher import (
    DueSoonAlert,
    LoggingNotifier,
    TaskNotifier,
    build_alert,
    check_for_due_tasks,
    run_due_soon_monitor,
)

__all__ = [
    "DueSoonAlert",
    "LoggingNotifier",
    "TaskNotifier",
    "build_alert",
    "check_for_due_tasks",
    "run_due_soon_monitor",
]
