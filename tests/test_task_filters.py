"""Tests for board filtering and statistics."""
from datetime import date, datetime, timedelta, timezone

import pytest

from app.schemas.category import Category
from app.schemas.task import Task, TaskFilter
from app.services.board_service import compute_category_counts, compute_stats, filter_tasks

NOW = datetime(2026, 10, 18, 15, 30, tzinfo=timezone.utc)


def make_task(task_id, **values):
    values.setdefault("created_at", NOW)
    values.setdefault("updated_at", NOW)
    return Task(id=task_id, title=f"Task {task_id}", **values)


@pytest.fixture
def tasks():
    return [
        make_task("1", due_date=date(2026, 10, 17)),
        make_task("2", due_date=date(2026, 10, 17), is_completed=True),
        make_task("3", due_date=date(2026, 10, 18), category_id="work"),
        make_task("4", due_date=date(2026, 10, 19), category_id="work"),
        make_task("5", category_id="work", is_completed=True),
        make_task("6"),
    ]


def ids(tasks):
    return [task.id for task in tasks]


def test_all_returns_everything_in_order(tasks):
    assert ids(filter_tasks(tasks, now=NOW)) == ["1", "2", "3", "4", "5", "6"]


def test_completed_and_pending_partition(tasks):
    completed = filter_tasks(tasks, mode=TaskFilter.COMPLETED, now=NOW)
    pending = filter_tasks(tasks, mode=TaskFilter.PENDING, now=NOW)

    assert ids(completed) == ["2", "5"]
    assert ids(pending) == ["1", "3", "4", "6"]


def test_today_ignores_time_of_day(tasks):
    late_evening = datetime(2026, 10, 18, 23, 59, tzinfo=timezone.utc)

    assert ids(filter_tasks(tasks, mode=TaskFilter.TODAY, now=NOW)) == ["3"]
    assert ids(filter_tasks(tasks, mode=TaskFilter.TODAY, now=late_evening)) == ["3"]


def test_overdue_never_includes_completed_tasks(tasks):
    overdue = filter_tasks(tasks, mode=TaskFilter.OVERDUE, now=NOW)

    assert "2" not in ids(overdue)
    assert all(not task.is_completed for task in overdue)


def test_overdue_counts_from_start_of_due_day(tasks):
    overdue = filter_tasks(tasks, mode=TaskFilter.OVERDUE, now=NOW)
    assert ids(overdue) == ["1", "3"]

    midnight = datetime(2026, 10, 18, 0, 0, tzinfo=timezone.utc)
    assert ids(filter_tasks(tasks, mode=TaskFilter.OVERDUE, now=midnight)) == ["1"]


def test_tasks_without_due_date_are_never_dated(tasks):
    for mode in (TaskFilter.TODAY, TaskFilter.OVERDUE):
        assert "6" not in ids(filter_tasks(tasks, mode=mode, now=NOW))


def test_category_applies_before_mode(tasks):
    assert ids(filter_tasks(tasks, category_id="work", now=NOW)) == ["3", "4", "5"]
    assert ids(filter_tasks(tasks, category_id="work", mode=TaskFilter.PENDING, now=NOW)) == ["3", "4"]
    assert ids(filter_tasks(tasks, category_id="work", mode=TaskFilter.OVERDUE, now=NOW)) == ["3"]
    assert filter_tasks(tasks, category_id="missing", now=NOW) == []


def test_category_counts_only_open_tasks(tasks):
    categories = [Category(id="work", name="Work"), Category(id="home", name="Home")]

    assert compute_category_counts(tasks, categories) == {"work": 2, "home": 0}


def test_stats(tasks):
    stats = compute_stats(tasks)

    assert stats.total == 6
    assert stats.completed == 2
    assert stats.pending == 4
    assert stats.completion_rate == 33


def test_stats_for_empty_board():
    stats = compute_stats([])

    assert stats.total == 0
    assert stats.completion_rate == 0


def test_filtering_does_not_mutate_input(tasks):
    snapshot = list(tasks)
    filter_tasks(tasks, category_id="work", mode=TaskFilter.COMPLETED, now=NOW - timedelta(days=3))

    assert tasks == snapshot
