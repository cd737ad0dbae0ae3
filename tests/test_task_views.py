"""
Tests for day-view partition/sort and search/filter in services/task_views.py.
"""
from datetime import date, datetime, timedelta, timezone
from types import SimpleNamespace

import pytest

from barakaflow.services.task_views import (
    filter_tasks, matches_filter, matches_query, partition_tasks, sort_by_start_time, sort_by_time_of_day,
)

UTC = timezone.utc
TODAY = date(2024, 5, 20)


def make_task(title, start=None, completed=False, status=None, description=None):
    if status is None:
        status = "completed" if completed else "not-started"
    return SimpleNamespace(
        title=title, description=description, start_time=start, completed=completed, status=status,
    )


def at(hour, day=TODAY):
    return datetime(day.year, day.month, day.day, hour, tzinfo=UTC)


class TestSortByStartTime:
    """Ascending start time, undated last, stable."""

    def test_sorted_ascending(self):
        tasks = [make_task("late", at(15)), make_task("early", at(8)), make_task("mid", at(11))]
        assert [t.title for t in sort_by_start_time(tasks)] == ["early", "mid", "late"]

    def test_undated_last_in_input_order(self):
        tasks = [make_task("x"), make_task("dated", at(9)), make_task("y")]
        assert [t.title for t in sort_by_start_time(tasks)] == ["dated", "x", "y"]

    def test_equal_start_times_keep_input_order(self):
        tasks = [make_task("first", at(9)), make_task("second", at(9))]
        assert [t.title for t in sort_by_start_time(tasks)] == ["first", "second"]

    def test_compares_instants_across_offsets(self):
        plus3 = timezone(timedelta(hours=3))
        tasks = [
            make_task("utc-9", at(9)),
            make_task("eat-10", datetime(2024, 5, 20, 10, tzinfo=plus3)),  # 07:00 UTC
        ]
        assert [t.title for t in sort_by_start_time(tasks)] == ["eat-10", "utc-9"]


class TestSortByTimeOfDay:
    """Day-view order uses the clock time of each occurrence."""

    def test_ignores_the_date_part(self):
        tasks = [
            make_task("daily since january", datetime(2024, 1, 2, 13, tzinfo=UTC)),
            make_task("today at noon", at(12)),
            make_task("undated"),
            make_task("weekly since march", datetime(2024, 3, 4, 8, 30, tzinfo=UTC)),
        ]
        result = sort_by_time_of_day(tasks, UTC)
        assert [t.title for t in result] == [
            "weekly since march", "today at noon", "daily since january", "undated",
        ]

    def test_clock_time_in_the_given_zone(self):
        plus3 = timezone(timedelta(hours=3))
        tasks = [make_task("late utc", at(22)), make_task("morning utc", at(6))]
        # 22:00 UTC is 01:00 the next morning at +3
        assert [t.title for t in sort_by_time_of_day(tasks, plus3)] == ["late utc", "morning utc"]
        assert [t.title for t in sort_by_time_of_day(tasks, UTC)] == ["morning utc", "late utc"]


class TestPartition:
    """Partitioning splits by the completed flag only."""

    def test_every_task_lands_in_exactly_one_list(self):
        tasks = [
            make_task("a", at(10)),
            make_task("b", at(9), completed=True),
            make_task("c"),
            make_task("d", at(8), completed=True),
        ]
        todo, done = partition_tasks(tasks)
        assert [t.title for t in todo] == ["a", "c"]
        assert [t.title for t in done] == ["d", "b"]
        assert len(todo) + len(done) == len(tasks)

    def test_empty(self):
        assert partition_tasks([]) == ([], [])


class TestMatchesQuery:
    """Case-insensitive substring over title and description."""

    def test_blank_query_matches_everything(self):
        task = make_task("Write report")
        assert matches_query(task, None)
        assert matches_query(task, "")
        assert matches_query(task, "   ")

    def test_title_and_description(self):
        task = make_task("Write report", description="Quarterly NUMBERS")
        assert matches_query(task, "REPORT")
        assert matches_query(task, "numbers")
        assert not matches_query(task, "invoice")

    def test_surrounding_spaces_are_part_of_the_query(self):
        task = make_task("Buy oat milk")
        assert matches_query(task, " milk")
        assert not matches_query(make_task("Buttermilk"), " milk")

    def test_missing_description(self):
        assert not matches_query(make_task("Write report"), "numbers")


class TestMatchesFilter:
    """Status filters and the today filter."""

    def test_completed_uses_flag(self):
        assert matches_filter(make_task("a", completed=True), "completed", TODAY)
        assert not matches_filter(make_task("a"), "completed", TODAY)

    def test_pending_and_not_started_require_open_task(self):
        assert matches_filter(make_task("a", status="pending"), "pending", TODAY)
        assert not matches_filter(make_task("a", status="pending"), "not-started", TODAY)
        assert matches_filter(make_task("a"), "not-started", TODAY)
        stale = make_task("a", completed=True, status="pending")
        assert not matches_filter(stale, "pending", TODAY)

    def test_today_uses_start_date(self):
        assert matches_filter(make_task("a", at(9)), "today", TODAY, UTC)
        assert not matches_filter(make_task("a", at(9, date(2024, 5, 21))), "today", TODAY, UTC)
        assert not matches_filter(make_task("a"), "today", TODAY, UTC)

    def test_unknown_filter(self):
        with pytest.raises(ValueError):
            matches_filter(make_task("a"), "someday", TODAY)


class TestFilterTasks:
    """Query and filter combine with AND."""

    def test_combined(self):
        tasks = [
            make_task("Report draft", at(9), status="pending"),
            make_task("Report final", at(9), completed=True),
            make_task("Groceries", at(9), status="pending"),
        ]
        result = filter_tasks(tasks, query="report", filter_name="pending", today=TODAY, tz=UTC)
        assert [t.title for t in result] == ["Report draft"]

    def test_all_returns_query_matches_in_order(self):
        tasks = [make_task("b"), make_task("a"), make_task("ab")]
        assert [t.title for t in filter_tasks(tasks, query="a")] == ["a", "ab"]
