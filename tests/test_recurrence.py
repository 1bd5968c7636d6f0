"""Tests for recurrence arithmetic and the completion transition."""

import pytest
from datetime import datetime, timedelta, timezone

from tasktrack.models.task import Subtask, Task, RecurrenceType
from tasktrack.recurrence.schedule import calculate_next_due_date, handle_recurring_task


def _utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


class TestCalculateNextDueDate:

    def test_daily_adds_one_day(self):
        assert calculate_next_due_date(_utc(2024, 1, 10, 9), RecurrenceType.DAILY) == _utc(2024, 1, 11, 9)

    def test_weekly_adds_seven_days(self):
        assert calculate_next_due_date(_utc(2024, 1, 10, 9), RecurrenceType.WEEKLY) == _utc(2024, 1, 17, 9)

    def test_monthly_keeps_day_of_month(self):
        assert calculate_next_due_date(_utc(2024, 1, 15, 9), RecurrenceType.MONTHLY) == _utc(2024, 2, 15, 9)

    def test_monthly_clamps_to_end_of_february_in_non_leap_year(self):
        assert calculate_next_due_date(_utc(2023, 1, 31), RecurrenceType.MONTHLY) == _utc(2023, 2, 28)

    def test_monthly_clamps_to_end_of_february_in_leap_year(self):
        assert calculate_next_due_date(_utc(2024, 1, 31), RecurrenceType.MONTHLY) == _utc(2024, 2, 29)

    def test_monthly_clamps_to_thirty_day_month(self):
        assert calculate_next_due_date(_utc(2024, 3, 31), RecurrenceType.MONTHLY) == _utc(2024, 4, 30)

    def test_monthly_crosses_year_boundary(self):
        assert calculate_next_due_date(_utc(2024, 12, 31), RecurrenceType.MONTHLY) == _utc(2025, 1, 31)

    def test_none_recurrence_yields_nothing(self):
        assert calculate_next_due_date(_utc(2024, 1, 10), RecurrenceType.NONE) is None

    def test_missing_base_date_yields_nothing(self):
        assert calculate_next_due_date(None, RecurrenceType.DAILY) is None

    def test_accepts_string_recurrence_values(self):
        assert calculate_next_due_date(_utc(2024, 1, 10), "weekly") == _utc(2024, 1, 17)

    @pytest.mark.parametrize("recurrence", [RecurrenceType.DAILY, RecurrenceType.WEEKLY, RecurrenceType.MONTHLY])
    @pytest.mark.parametrize("base", [
        _utc(2023, 1, 31),
        _utc(2024, 2, 29, 23, 59),
        _utc(2024, 12, 31, 12),
        _utc(2025, 6, 30, 0, 0),
    ])
    def test_always_advances_strictly_forward(self, recurrence, base):
        assert calculate_next_due_date(base, recurrence) > base


class TestHandleRecurringTask:

    def test_one_shot_task_stays_completed(self, sample_task_base, fixed_now):
        due = _utc(2024, 3, 1)
        task = Task(**{**sample_task_base, "completed": True, "due_date": due})

        result = handle_recurring_task(task, now=fixed_now)

        assert result.completed is True
        assert result.due_date == due
        assert result.next_due_date is None
        assert result.last_completed is None

    def test_recurring_task_reopens_on_its_next_occurrence(self, sample_task_base, fixed_now):
        task = Task(**{
            **sample_task_base,
            "completed": True,
            "recurrence": RecurrenceType.DAILY,
            "due_date": _utc(2024, 3, 14, 9),
            "next_due_date": _utc(2024, 3, 15, 9),
        })

        result = handle_recurring_task(task, now=fixed_now)

        assert result.completed is False
        assert result.last_completed == fixed_now
        assert result.due_date == _utc(2024, 3, 15, 9)
        assert result.next_due_date == _utc(2024, 3, 16, 9)
        assert result.next_due_date > result.due_date

    def test_missing_next_due_date_is_recomputed_from_due_date(self, sample_task_base, fixed_now):
        task = Task(**{
            **sample_task_base,
            "completed": True,
            "recurrence": RecurrenceType.WEEKLY,
            "due_date": _utc(2024, 3, 1),
        })

        result = handle_recurring_task(task, now=fixed_now)

        assert result.due_date == _utc(2024, 3, 8)
        assert result.next_due_date == _utc(2024, 3, 15)

    def test_monthly_chain_clamps_then_continues_from_clamped_date(self, sample_task_base, fixed_now):
        task = Task(**{
            **sample_task_base,
            "completed": True,
            "recurrence": RecurrenceType.MONTHLY,
            "due_date": _utc(2023, 1, 31),
            "next_due_date": _utc(2023, 2, 28),
        })

        result = handle_recurring_task(task, now=fixed_now)

        assert result.due_date == _utc(2023, 2, 28)
        assert result.next_due_date == _utc(2023, 3, 28)

    def test_recurring_task_without_due_date_reopens_undated(self, sample_task_base, fixed_now):
        task = Task(**{**sample_task_base, "completed": True, "recurrence": RecurrenceType.DAILY})

        result = handle_recurring_task(task, now=fixed_now)

        assert result.completed is False
        assert result.due_date is None
        assert result.next_due_date is None
        assert result.last_completed == fixed_now

    def test_subtasks_keep_their_completion_state(self, sample_task_base, fixed_now):
        task = Task(**{
            **sample_task_base,
            "completed": True,
            "recurrence": RecurrenceType.DAILY,
            "due_date": _utc(2024, 3, 14),
            "subtasks": [Subtask(id=1, title="Prep", completed=True)],
        })

        result = handle_recurring_task(task, now=fixed_now)

        assert result.subtasks[0].completed is True

    def test_input_task_is_not_mutated(self, sample_task_base, fixed_now):
        task = Task(**{
            **sample_task_base,
            "completed": True,
            "recurrence": RecurrenceType.DAILY,
            "due_date": _utc(2024, 3, 14),
        })

        handle_recurring_task(task, now=fixed_now)

        assert task.completed is True
        assert task.due_date == _utc(2024, 3, 14)

    def test_default_now_is_current_utc_time(self, sample_task_base):
        task = Task(**{**sample_task_base, "completed": True, "recurrence": RecurrenceType.DAILY})
        before = datetime.now(timezone.utc) - timedelta(seconds=1)

        result = handle_recurring_task(task)

        assert result.last_completed >= before
