"""Tests for the task filter predicate."""

import pytest
from datetime import datetime, timedelta, timezone

from tasktrack.engine.filtering import (
    StatusFilter,
    TaskQuery,
    filter_tasks,
    is_overdue,
    is_today,
    is_upcoming,
)
from tasktrack.models.task import TaskCategory, TaskPriority


def _titles(tasks):
    return [t.title for t in tasks]


@pytest.fixture
def mixed_tasks(make_task, fixed_now):
    """A small collection covering every status bucket."""
    return [
        make_task(title="Write report", category=TaskCategory.WORK, priority=TaskPriority.HIGH,
                  due_date=fixed_now - timedelta(days=1)),
        make_task(title="Buy groceries", category=TaskCategory.SHOPPING, priority=TaskPriority.MEDIUM,
                  due_date=fixed_now + timedelta(hours=3)),
        make_task(title="Gym", category=TaskCategory.HEALTH, priority=TaskPriority.LOW,
                  due_date=fixed_now + timedelta(days=2)),
        make_task(title="Call mom", category=None, priority=TaskPriority.MEDIUM),
        make_task(title="File REPORT archive", category=TaskCategory.WORK, priority=TaskPriority.LOW,
                  completed=True, due_date=fixed_now - timedelta(days=3)),
    ]


class TestDateHelpers:

    def test_is_overdue(self, fixed_now):
        assert is_overdue(fixed_now - timedelta(minutes=1), fixed_now) is True
        assert is_overdue(fixed_now, fixed_now) is False
        assert is_overdue(None, fixed_now) is False

    def test_is_today_uses_utc_calendar_day(self, fixed_now):
        start_of_day = datetime(2024, 3, 15, tzinfo=timezone.utc)
        assert is_today(start_of_day, fixed_now) is True
        assert is_today(start_of_day + timedelta(hours=23, minutes=59), fixed_now) is True
        assert is_today(start_of_day + timedelta(days=1), fixed_now) is False
        assert is_today(start_of_day - timedelta(seconds=1), fixed_now) is False
        assert is_today(None, fixed_now) is False

    def test_is_upcoming_excludes_today(self, fixed_now):
        assert is_upcoming(fixed_now + timedelta(hours=6), fixed_now) is False
        assert is_upcoming(datetime(2024, 3, 16, tzinfo=timezone.utc), fixed_now) is True
        assert is_upcoming(fixed_now - timedelta(days=1), fixed_now) is False
        assert is_upcoming(None, fixed_now) is False


class TestFilterCriteria:

    def test_empty_query_matches_everything(self, mixed_tasks, fixed_now):
        assert filter_tasks(mixed_tasks, TaskQuery(), fixed_now) == mixed_tasks

    def test_search_is_case_insensitive_substring(self, mixed_tasks, fixed_now):
        result = filter_tasks(mixed_tasks, TaskQuery(search="report"), fixed_now)

        assert _titles(result) == ["Write report", "File REPORT archive"]

    def test_category_filter(self, mixed_tasks, fixed_now):
        result = filter_tasks(mixed_tasks, TaskQuery(category="work"), fixed_now)

        assert all(t.category == TaskCategory.WORK for t in result)
        assert len(result) == 2

    def test_priority_filter(self, mixed_tasks, fixed_now):
        result = filter_tasks(mixed_tasks, TaskQuery(priority=TaskPriority.MEDIUM), fixed_now)

        assert _titles(result) == ["Buy groceries", "Call mom"]

    @pytest.mark.parametrize("status,expected", [
        (StatusFilter.ALL, ["Write report", "Buy groceries", "Gym", "Call mom", "File REPORT archive"]),
        (StatusFilter.ACTIVE, ["Write report", "Buy groceries", "Gym", "Call mom"]),
        (StatusFilter.COMPLETED, ["File REPORT archive"]),
        (StatusFilter.OVERDUE, ["Write report"]),
        (StatusFilter.TODAY, ["Buy groceries"]),
        (StatusFilter.UPCOMING, ["Gym"]),
    ])
    def test_status_buckets(self, mixed_tasks, fixed_now, status, expected):
        result = filter_tasks(mixed_tasks, TaskQuery(status=status), fixed_now)

        assert _titles(result) == expected

    def test_criteria_are_conjunctive(self, mixed_tasks, fixed_now):
        query = TaskQuery(search="report", category="work", status=StatusFilter.ACTIVE)

        assert _titles(filter_tasks(mixed_tasks, query, fixed_now)) == ["Write report"]

    def test_relaxing_any_criterion_never_shrinks_result(self, mixed_tasks, fixed_now):
        full = TaskQuery(search="o", category="work", priority="high", status=StatusFilter.OVERDUE)
        baseline = {t.id for t in filter_tasks(mixed_tasks, full, fixed_now)}

        relaxed_queries = [
            full.model_copy(update={"search": ""}),
            full.model_copy(update={"category": "all"}),
            full.model_copy(update={"priority": "all"}),
            full.model_copy(update={"status": StatusFilter.ALL}),
        ]
        for relaxed in relaxed_queries:
            assert baseline <= {t.id for t in filter_tasks(mixed_tasks, relaxed, fixed_now)}

    def test_unknown_category_is_rejected(self):
        with pytest.raises(ValueError):
            TaskQuery(category="groceries")

    def test_filter_preserves_input_order(self, mixed_tasks, fixed_now):
        reversed_tasks = list(reversed(mixed_tasks))

        result = filter_tasks(reversed_tasks, TaskQuery(status=StatusFilter.ACTIVE), fixed_now)

        assert _titles(result) == ["Call mom", "Gym", "Buy groceries", "Write report"]
